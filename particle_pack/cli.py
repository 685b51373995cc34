import argparse
import sys
from pathlib import Path
from typing import Iterable

from .pack import DEFAULT_PACK_CONFIG, FACE_CAMERA_MODES, PackConfig, build_pack

BANNER = r"""
    ____             __  _      __        ____             __
   / __ \____ ______/ /_(_)____/ /__     / __ \____ ______/ /__
  / /_/ / __ `/ ___/ __/ / ___/ / _ \   / /_/ / __ `/ ___/ //_/
 / ____/ /_/ / /  / /_/ / /__/ /  __/  / ____/ /_/ / /__/ ,<
/_/    \__,_/_/   \__/_/\___/_/\___/  /_/    \__,_/\___/_/|_|
"""


def parse_bool(value_text: str) -> bool:
    return value_text.strip().lower() == "true"


def parse_arguments(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Convert an animated GIF into a Minecraft Bedrock resource pack and "
            "behavior pack that play it back with particles."
        )
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Path of the animated GIF.",
    )
    parser.add_argument(
        "-n", "--name",
        required=True,
        help="Pack name. Also used as scoreboard objective and particle namespace.",
    )
    parser.add_argument(
        "-d", "--description",
        default=DEFAULT_PACK_CONFIG.description,
        help=f"Pack description (default: {DEFAULT_PACK_CONFIG.description!r}).",
    )
    parser.add_argument(
        "-W", "--width",
        type=float,
        default=DEFAULT_PACK_CONFIG.width,
        help=f"Particle width in blocks (default: {DEFAULT_PACK_CONFIG.width}).",
    )
    parser.add_argument(
        "-H", "--height",
        type=float,
        default=DEFAULT_PACK_CONFIG.height,
        help=f"Particle height in blocks (default: {DEFAULT_PACK_CONFIG.height}).",
    )
    parser.add_argument(
        "-m", "--mode",
        choices=sorted(FACE_CAMERA_MODES),
        default=DEFAULT_PACK_CONFIG.face_camera_mode,
        help=f"Face camera mode (default: {DEFAULT_PACK_CONFIG.face_camera_mode}).",
    )
    parser.add_argument(
        "-l", "--loop",
        type=parse_bool,
        default=DEFAULT_PACK_CONFIG.auto_replay,
        help="Replay the animation automatically, 'true' or 'false' (default: true).",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=Path("."),
        help="Folder that receives the pack folder (default: current directory).",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Hide the banner and progress bar.",
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str]) -> int:
    try:
        args = parse_arguments(argv)
        if not args.quiet:
            print(BANNER)
        config = PackConfig(
            description=args.description,
            width=args.width,
            height=args.height,
            face_camera_mode=args.mode,
            auto_replay=args.loop,
        )
        if not args.quiet:
            print(f"Loading {args.path}")
        result = build_pack(
            args.path,
            args.name,
            output_dir=args.output_dir,
            config=config,
            progress=not args.quiet,
        )
        print(f"Created pack at {result.root} with {result.frame_count} frames")
        return 0
    except FileNotFoundError as not_found_err:
        print(f"Error: {not_found_err}", file=sys.stderr)
    except ValueError as value_err:
        print(f"Error: {value_err}", file=sys.stderr)
    except Exception as unexpected_err:  # noqa: BLE001
        print(f"Unexpected error: {unexpected_err}", file=sys.stderr)
    return 1


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
