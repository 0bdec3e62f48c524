"""
Replay a synthetic capture through the tracking pipeline.

Generates a slowly drifting, jittered document quadrilateral together with a
device-motion trace (still -> shake -> still) and feeds both through
TrackingProcessor, logging what the tracker does on every frame.

Usage:
    # Default run (90 frames at 30 fps)
    python scripts/replay_tracking.py

    # Noisier detector, custom config, per-corner debug logs
    python scripts/replay_tracking.py --noise 4.0 --config my_tracking.yaml --verbose
"""

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path

import numpy as np

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.types import Quadrilateral  # noqa: E402
from src.tracking.processor import TrackingProcessor  # noqa: E402
from src.tracking.types import TrackingStatus  # noqa: E402

logger = logging.getLogger(__name__)

# Portrait page, 600 x 800 px
BASE_CORNERS = np.array([[100, 80], [700, 80], [700, 880], [100, 880]], dtype=np.float64)
MOTION_SAMPLES_PER_FRAME = 2  # 60 Hz motion vs 30 fps video


def synth_motion(rng: np.random.Generator, shaking: bool):
    """One (acceleration, rotation_rate) sample."""
    scale = (0.6, 0.8) if shaking else (0.01, 0.01)
    accel = rng.normal(0.0, scale[0], size=3)
    rate = rng.normal(0.0, scale[1], size=3)
    return accel, rate


def synth_candidates(rng: np.random.Generator, frame: int, noise: float):
    """Detector output: the page plus, every few frames, a small distractor."""
    drift = np.array([0.5 * frame, 0.2 * frame])
    page = BASE_CORNERS + drift + rng.normal(0.0, noise, size=(4, 2))
    candidates = [Quadrilateral.from_numpy(page)]
    if frame % 5 == 0:
        distractor = np.array([[300, 300], [360, 290], [370, 340], [310, 350]])
        candidates.append(Quadrilateral.from_numpy(distractor))
    if frame % 17 == 16:
        # Detector miss
        return []
    return candidates


def main():
    """Main entry point for the tracking replay."""
    parser = argparse.ArgumentParser(
        description="Replay a synthetic capture through the tracking pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--frames", type=int, default=90, help="Number of video frames")
    parser.add_argument("--fps", type=float, default=30.0, help="Video frame rate")
    parser.add_argument(
        "--noise", type=float, default=1.5, help="Detector corner noise (px, std)"
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="Tracking config YAML (default: bundled)"
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    rng = np.random.default_rng(args.seed)
    processor = TrackingProcessor(config_path=args.config)

    shake_start = args.frames // 3
    shake_end = shake_start + args.frames // 6
    statuses = Counter()

    for frame in range(args.frames):
        timestamp = frame / args.fps
        shaking = shake_start <= frame < shake_end

        for _ in range(MOTION_SAMPLES_PER_FRAME):
            processor.update_motion(*synth_motion(rng, shaking))

        result = processor.process_frame(
            synth_candidates(rng, frame, args.noise), timestamp
        )
        statuses[result.status] += 1

        if result.has_quadrilateral():
            tl = result.quadrilateral.top_left
            logger.info(
                f"frame {frame:3d} t={timestamp:.3f} {result.status.value:9s} "
                f"stable={result.is_stable!s:5s} TL=({tl.x:.1f}, {tl.y:.1f})"
            )
        else:
            logger.info(
                f"frame {frame:3d} t={timestamp:.3f} {result.status.value:9s} "
                f"stable={result.is_stable!s:5s} (no quadrilateral)"
            )

    processor.stop()

    logger.info("=" * 60)
    for status in TrackingStatus:
        logger.info(f"{status.value:9s}: {statuses[status]}")
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
