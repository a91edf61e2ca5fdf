"""Command-line interface: replay a recorded pose session through the detector.

Example:
    repcount replay session.jsonl --countdown 0 --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict, replace
from pathlib import Path
from typing import List, Optional

from repcount.config import DetectionConfig
from repcount.detector import DetectorStatus, PushupDetector
from repcount.vision.keypoints import Pose
from repcount.vision.recording import ReplayPoseSource


def eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


class ConsoleSink:
    """Prints each new status message with the running count."""

    def __init__(self, quiet: bool = False) -> None:
        self.quiet = quiet
        self._last_message: Optional[str] = None

    def update(self, status: DetectorStatus) -> None:
        if self.quiet or status.message == self._last_message:
            return
        self._last_message = status.message
        print(f"[{status.count:3d}] {status.message}")

    def render_pose(self, pose: Optional[Pose]) -> None:
        pass


def replay_config(countdown: int) -> DetectionConfig:
    """Detection config for recorded input: no wall-clock pacing."""
    base = DetectionConfig()
    return replace(
        base,
        calibration=replace(base.calibration, sample_delay=0.0),
        countdown_seconds=countdown,
        frame_interval=0.0,
    )


async def replay(detector: PushupDetector) -> bool:
    """Calibrate from the first recorded frames, then consume the rest."""
    if not await detector.start():
        return False
    await detector.run()
    return True


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="repcount", description="Push-up repetition counter.")
    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser("replay", help="Replay a JSONL pose recording and count repetitions.")
    r.add_argument("recording", type=Path, help="Path to a JSONL pose recording.")
    r.add_argument(
        "--countdown",
        type=int,
        default=0,
        help="Countdown seconds before calibration (default: 0 for recordings).",
    )
    r.add_argument("--json", action="store_true", help="Print a JSON summary instead of messages.")
    r.add_argument("--verbose", "-v", action="store_true", help="Enable info-level logging.")
    return p.parse_args(argv)


def run_replay(args: argparse.Namespace) -> int:
    if not args.recording.exists():
        eprint(f"Error: recording not found: {args.recording}")
        return 1

    source = ReplayPoseSource.from_file(args.recording)
    sink = ConsoleSink(quiet=args.json)
    detector = PushupDetector(
        source,
        sink,
        replay_config(args.countdown),
        clock=source.clock,
    )

    calibrated = asyncio.run(replay(detector))

    if args.json:
        summary = asdict(detector.status)
        summary["frames"] = len(source)
        summary["calibration_failed"] = not calibrated
        print(json.dumps(summary, indent=2))
    else:
        print(f"Total push-ups: {detector.count}")

    return 0 if calibrated else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command == "replay":
        return run_replay(args)
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
