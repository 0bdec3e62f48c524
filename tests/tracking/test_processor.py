"""
Integration tests for the per-frame tracking processor.
"""

import numpy as np
import pytest

from src.common.types import Quadrilateral
from src.tracking.processor import TrackingProcessor
from src.tracking.types import ProcessorConfig, TrackingConfig, TrackingStatus

DT = 1.0 / 30.0


@pytest.fixture
def processor():
    """Processor with default settings (motion gate enabled)."""
    return TrackingProcessor(config=TrackingConfig())


@pytest.fixture
def ungated_processor():
    """Processor that trusts every frame."""
    config = TrackingConfig(processor=ProcessorConfig(use_motion_gate=False))
    return TrackingProcessor(config=config)


def stabilize(processor, calm_sample):
    for _ in range(processor.config.stability.required_stable_samples):
        processor.update_motion(*calm_sample)
    assert processor.is_stable


class TestTrackingProcessor:
    """Tests for TrackingProcessor class."""

    def test_initialization_default_config(self):
        processor = TrackingProcessor()

        assert processor.config.stability.required_stable_samples == 5
        assert processor.tracker.is_tracking is False
        assert processor.is_stable is False

    def test_unstable_before_any_measurement_reports_none(self, processor, page_quad):
        result = processor.process_frame([page_quad], 0.0)

        assert result.status == TrackingStatus.NONE
        assert result.quadrilateral is None
        assert result.has_quadrilateral() is False
        assert processor.tracker.is_tracking is False

    def test_stable_frame_is_tracked(self, processor, page_quad, calm_sample):
        stabilize(processor, calm_sample)

        result = processor.process_frame([page_quad], 0.0)

        assert result.status == TrackingStatus.TRACKED
        assert result.measurement is page_quad
        assert result.is_stable is True
        np.testing.assert_allclose(
            result.quadrilateral.to_numpy(), page_quad.to_numpy(), atol=1e-6
        )

    def test_shaking_switches_to_prediction(
        self, processor, page_quad, calm_sample, shaky_sample
    ):
        stabilize(processor, calm_sample)
        processor.process_frame([page_quad], 0.0)

        for _ in range(60):
            processor.update_motion(*shaky_sample)
        assert processor.is_stable is False

        moved = Quadrilateral.from_numpy(page_quad.to_numpy() + 50.0)
        result = processor.process_frame([moved], DT)

        assert result.status == TrackingStatus.PREDICTED
        assert result.measurement is None
        assert result.missed_frames == 1
        # Prediction ignores the untrusted measurement
        np.testing.assert_allclose(
            result.quadrilateral.to_numpy(), page_quad.to_numpy(), atol=1e-6
        )

    def test_long_shake_loses_track(
        self, processor, page_quad, calm_sample, shaky_sample
    ):
        stabilize(processor, calm_sample)
        base = page_quad.to_numpy()
        velocity = np.array([300.0, 0.0])
        for i in range(60):
            t = i * DT
            processor.process_frame([Quadrilateral.from_numpy(base + velocity * t)], t)

        for _ in range(60):
            processor.update_motion(*shaky_sample)
        assert processor.is_stable is False

        max_missed = processor.config.processor.max_missed_frames
        last_t = 59 * DT
        for i in range(1, max_missed + 1):
            result = processor.process_frame([page_quad], last_t + i * DT)
            assert result.status == TrackingStatus.PREDICTED
            assert result.missed_frames == i

        result = processor.process_frame([page_quad], last_t + 30.0)

        assert result.status == TrackingStatus.LOST
        assert result.quadrilateral is None
        assert result.is_stable is False
        assert processor.tracker.is_tracking is False

    def test_calm_detection_after_shake_resumes_tracking(
        self, processor, page_quad, calm_sample, shaky_sample
    ):
        stabilize(processor, calm_sample)
        processor.process_frame([page_quad], 0.0)
        for _ in range(60):
            processor.update_motion(*shaky_sample)
        processor.process_frame([page_quad], DT)

        for _ in range(60):
            processor.update_motion(*calm_sample)
        result = processor.process_frame([page_quad], 2 * DT)

        assert result.status == TrackingStatus.TRACKED
        assert result.missed_frames == 0

    def test_best_candidate_is_tracked(self, ungated_processor, page_quad, skewed_trapezoid):
        result = ungated_processor.process_frame([skewed_trapezoid, page_quad], 0.0)

        assert result.status == TrackingStatus.TRACKED
        assert result.measurement is page_quad
        assert result.candidate_count == 2

    def test_invalid_candidates_are_dropped(self, ungated_processor, page_quad):
        tiny = Quadrilateral.from_list([[0, 0], [10, 0], [10, 10], [0, 10]])
        result = ungated_processor.process_frame([tiny, page_quad], 0.0)

        assert result.candidate_count == 1
        assert result.measurement is page_quad

    def test_only_invalid_candidates_count_as_miss(self, ungated_processor):
        tiny = Quadrilateral.from_list([[0, 0], [10, 0], [10, 10], [0, 10]])
        result = ungated_processor.process_frame([tiny], 0.0)

        assert result.status == TrackingStatus.NONE
        assert result.missed_frames == 1

    def test_short_gap_is_bridged_by_prediction(self, ungated_processor, page_quad):
        ungated_processor.process_frame([page_quad], 0.0)

        result = ungated_processor.process_frame([], DT)

        assert result.status == TrackingStatus.PREDICTED
        assert result.has_quadrilateral() is True
        assert result.missed_frames == 1

    def test_long_gap_loses_track(self, ungated_processor, page_quad):
        ungated_processor.process_frame([page_quad], 0.0)
        max_missed = ungated_processor.config.processor.max_missed_frames

        for i in range(1, max_missed + 1):
            result = ungated_processor.process_frame([], i * DT)
            assert result.status == TrackingStatus.PREDICTED

        result = ungated_processor.process_frame([], (max_missed + 1) * DT)

        assert result.status == TrackingStatus.LOST
        assert result.quadrilateral is None
        assert ungated_processor.tracker.is_tracking is False

    def test_detection_resets_missed_counter(self, ungated_processor, page_quad):
        ungated_processor.process_frame([page_quad], 0.0)
        ungated_processor.process_frame([], DT)
        result = ungated_processor.process_frame([page_quad], 2 * DT)

        assert result.missed_frames == 0
        assert ungated_processor.missed_frames == 0

    def test_stationary_page_stays_put(self, ungated_processor, unit_square):
        for t in (0.0, 0.033, 0.066):
            result = ungated_processor.process_frame(
                [Quadrilateral.from_numpy(unit_square.to_numpy() * 10)], t
            )
            np.testing.assert_allclose(
                result.quadrilateral.to_numpy(), unit_square.to_numpy() * 10, atol=1.0
            )

    def test_stop_resets_state(self, processor, page_quad, calm_sample):
        stabilize(processor, calm_sample)
        processor.process_frame([page_quad], 0.0)
        processor.process_frame([], DT)

        processor.stop()

        assert processor.tracker.is_tracking is False
        assert processor.is_stable is False
        assert processor.missed_frames == 0
        assert processor.tracker.predict(1.0) is None
