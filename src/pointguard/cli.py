"""CLI entry point for pg, the I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import IO

from pointguard import PointGuardError, __version__
from pointguard.settings import Settings


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``pg`` command.
    """
    parser = argparse.ArgumentParser(
        prog="pg",
        description="Browse and reveal secrets in a GPG-encrypted password store",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages to stderr",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        dest="config_path",
        help="Config file (default: $POINTGUARD_CONFIG or ~/.config/pointguard/config.toml)",
    )
    parser.add_argument(
        "--dir",
        type=str,
        default=None,
        dest="store_dir",
        help="Password store directory (overrides config and $POINTGUARD_DIR)",
    )

    commands = parser.add_subparsers(dest="command")

    show_parser = commands.add_parser(
        "show",
        help="Show a secret, or the store tree when no secret is named",
    )
    show_parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Secret or folder, relative to the store root",
    )
    show_parser.add_argument(
        "-c",
        "--clip",
        action="store_true",
        help="Copy the first line of the secret to the clipboard",
    )
    show_parser.add_argument(
        "--charset",
        choices=["unicode", "ascii"],
        default="unicode",
        help="Character set for tree drawing (default: unicode)",
    )

    clip_parser = commands.add_parser(
        "clip",
        help="Copy stdin to the clipboard and clear it after a timeout",
    )
    clip_parser.add_argument(
        "--clip-time",
        type=int,
        default=None,
        dest="clip_time",
        help="Seconds before the clipboard is cleared",
    )
    return parser


def _load_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.load(args.config_path)
    return settings.with_overrides(
        dir=args.store_dir,
        clip_time=getattr(args, "clip_time", None),
    )


def _run_with_args(
    args: argparse.Namespace,
    out: IO[str],
    stdin: IO[bytes] | None = None,
) -> None:
    """Dispatch parsed arguments to a command.

    Raises:
        PointGuardError: On any user-facing error.
    """
    if args.command == "clip":
        from pointguard.clip import run_clip

        # The relay is always launched with --clip-time; it then needs no config file
        if args.clip_time is not None:
            clip_time = Settings.from_mapping({"clip_time": args.clip_time}).clip_time
        else:
            clip_time = _load_settings(args).clip_time
        run_clip(stdin or sys.stdin.buffer, clip_time)
        return

    from pointguard.show import show

    settings = _load_settings(args)

    # `pg` with no command behaves like `pg show`
    show(
        out,
        getattr(args, "name", None),
        settings,
        clip=getattr(args, "clip", False),
        charset=getattr(args, "charset", "unicode"),
    )


def run_pg(
    argv: list[str] | None = None,
    out: IO[str] | None = None,
    stdin: IO[bytes] | None = None,
) -> None:
    """Run pg with provided CLI args, writing output to ``out``.

    This is the primary test target for CLI behavior.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments via ``argparse`` defaults.
        out: Output sink. Defaults to ``sys.stdout``.
        stdin: Byte stream read by the ``clip`` command. Defaults to
            ``sys.stdin.buffer``.

    Raises:
        PointGuardError: On any user-facing error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _run_with_args(args, out or sys.stdout, stdin)


def main() -> None:
    """Run the CLI entry point with process arguments.

    Exits with code 1 on user-facing errors.
    """
    parser = build_parser()
    args = parser.parse_args()  # single parse

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(levelname)s: %(message)s",
            stream=sys.stderr,
        )

    try:
        _run_with_args(args, sys.stdout)
    except PointGuardError as exc:
        sys.stderr.write(f"pg: {exc}\n")
        sys.exit(1)
