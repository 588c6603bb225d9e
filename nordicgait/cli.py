"""Command-line interface for nordicgait.

Provides subcommands for Nordic-walking analysis of extracted poses:

    nordicgait analyze frames.json --height 172 --view side_left --csv ./out
    nordicgait analyze frames.json --config config.yaml --summary-json summary.json
    nordicgait info frames.json
"""

import argparse
import logging
import sys
import time
from importlib.metadata import version as pkg_version, PackageNotFoundError

from .constants import VIEW_MODES


def _get_version() -> str:
    """Return package version without importing the full nordicgait package."""
    try:
        return pkg_version("nordicgait")
    except PackageNotFoundError:
        return "0.0.0+local"


def _setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def cmd_analyze(args):
    """Run the metrics pipeline over a pivot JSON file."""
    from .config import AnalysisSettings, load_config
    from .export import export_csv, export_summary_json
    from .pipeline import analyze_pivot
    from .schema import load_json

    data = load_json(args.json_file)
    meta = data.get("meta", {})
    config = load_config(args.config) if args.config else {}

    settings = AnalysisSettings.from_config(
        config,
        user_height_cm=args.height,
        view_mode=args.view,
        frame_width=meta.get("width") or None,
        frame_height=meta.get("height") or None,
    )

    t0 = time.time()
    result = analyze_pivot(data, settings)
    elapsed = time.time() - t0

    s = result.summary
    print(f"Frames: {s.frames} ({elapsed:.2f}s), view={settings.view_mode}, "
          f"height={settings.user_height_cm:.0f} cm")
    print(f"Torso lean: avg {s.avg_torso:.1f}°, max {s.max_torso:.1f}°, min {s.min_torso:.1f}°")
    print(f"Arm angle: avg {s.avg_arm:.1f}°, max fwd {s.max_arm_forward:.1f}°, "
          f"max back {s.max_arm_backward:.1f}°")
    print(f"Step length: avg {s.avg_step:.1f} cm, max {s.max_step:.1f} cm")
    print(f"Steps: {s.steps}")
    print(f"Fist ratio: {s.hand_fist_ratio:.0f}%")

    if args.csv:
        for path in export_csv(result, args.csv):
            print(f"Saved {path}")
    if args.summary_json:
        print(f"Saved {export_summary_json(result, args.summary_json, meta=meta)}")


def cmd_info(args):
    """Print a short description of a pivot JSON file."""
    from .schema import load_json

    data = load_json(args.json_file)
    meta = data.get("meta", {})
    print(f"Source: {meta.get('video_path', '?')}")
    print(f"FPS: {meta.get('fps', '?')}, Resolution: {meta.get('width', '?')}x{meta.get('height', '?')}")

    frames = data.get("frames", [])
    with_pose = sum(1 for f in frames if f.get("landmarks"))
    print(f"Frames with landmarks: {with_pose}/{len(frames)}" if frames else "No frames")


def main():
    parser = argparse.ArgumentParser(
        prog="nordicgait",
        description="Nordic-walking technique analysis from pose landmarks",
    )
    parser.add_argument("--version", action="version", version=f"nordicgait {_get_version()}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    p_analyze = sub.add_parser("analyze", help="Compute gait metrics and session statistics")
    p_analyze.add_argument("json_file", help="Pivot JSON with per-frame landmarks")
    p_analyze.add_argument("-c", "--config", help="Config file (JSON/YAML)")
    p_analyze.add_argument("--height", type=float, help="Subject height in cm (default: 170)")
    p_analyze.add_argument("--view", choices=VIEW_MODES, help="Camera view (default: side_left)")
    p_analyze.add_argument("--csv", metavar="DIR", help="Export per-frame metrics to CSV in DIR")
    p_analyze.add_argument("--summary-json", metavar="PATH", help="Export final summary JSON")
    p_analyze.set_defaults(func=cmd_analyze)

    p_info = sub.add_parser("info", help="Show info about a pivot JSON file")
    p_info.add_argument("json_file", help="Path to pivot JSON file")
    p_info.set_defaults(func=cmd_info)

    args = parser.parse_args()
    _setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ImportError as e:
        print(f"Missing dependency: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
