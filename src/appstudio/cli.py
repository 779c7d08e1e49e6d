"""
Command line interface.

    appstudio run APP_DIR [--host HOST] [--port PORT] [--no-browser] [--log-level LEVEL]
    appstudio tutorial --list
    appstudio tutorial N DEST [--overwrite]
"""

import argparse
import logging
import sys

from appstudio.exceptions import AppLoadError
from appstudio.util import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appstudio",
        description="Interactive plots and small reactive web apps.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Serve the app in a directory holding ui.py and server.py")
    run.add_argument("app_dir", nargs="?", default=".", help="App directory (default: current directory)")
    run.add_argument("--host", default=None, help="Interface to bind (default: $APPSTUDIO_HOST or 127.0.0.1)")
    run.add_argument("--port", type=int, default=None, help="Port to listen on (default: $APPSTUDIO_PORT or 8050)")
    run.add_argument("--no-browser", action="store_true", help="Do not open a browser window")
    run.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity (default: INFO)",
    )

    tutorial = subparsers.add_parser("tutorial", help="Copy a revision of the tutorial app into a directory")
    tutorial.add_argument("revision", nargs="?", type=int, help="Revision number (1-10)")
    tutorial.add_argument("dest", nargs="?", help="Directory to write ui.py and server.py into")
    tutorial.add_argument("--list", action="store_true", help="List the revisions and exit")
    tutorial.add_argument("--overwrite", action="store_true", help="Replace existing files")
    return parser


def _run(args) -> int:
    from appstudio.app import run_app

    setup_logging(args.log_level)
    try:
        run_app(args.app_dir, host=args.host, port=args.port, launch_browser=not args.no_browser)
    except AppLoadError as e:
        logger.error("%s", e)
        return 1
    return 0


def _tutorial(args, parser) -> int:
    from appstudio import tutorial

    if args.list or args.revision is None:
        for number, summary in tutorial.REVISIONS:
            print(f"{number:>3}  {summary}")
        return 0
    if args.dest is None:
        parser.error("tutorial: DEST is required when a revision is given")
    setup_logging()
    try:
        dest = tutorial.write_revision(args.revision, args.dest, overwrite=args.overwrite)
    except (ValueError, FileExistsError) as e:
        logger.error("%s", e)
        return 1
    print(f"Revision {args.revision} written to {dest}. Start it with: appstudio run {dest}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "run":
        return _run(args)
    return _tutorial(args, parser)


if __name__ == "__main__":
    sys.exit(main())
