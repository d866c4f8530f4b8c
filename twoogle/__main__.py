"""
Twoogle Entry Point

Usage:
    python -m twoogle              # Run console front end
    python -m twoogle gui          # Open the desktop GUI directly
    python -m twoogle config       # Configuration commands
    python -m twoogle --help       # Show help
"""

import argparse
import sys
import logging
from pathlib import Path

from . import __version__


def setup_logging(level: str, log_file: str | None = None, console: bool = True):
    """
    Configure logging for the application.

    Without console output, records go only to the log file so the end
    user never sees database diagnostics.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    handlers: list[logging.Handler] = []

    if console or not log_file:
        handlers.append(logging.StreamHandler())

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=log_format,
        handlers=handlers,
        force=True
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twoogle",
        description="Twoogle - Small Messaging Board"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"Twoogle {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=Path("config.toml"),
        help="Path to configuration file (default: config.toml)"
    )
    parser.add_argument(
        "--db",
        help="Path to the SQLite database (overrides database.path)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from config, INFO)"
    )
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show log output on the console instead of only the log file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("console", help="Menu-driven console (default)")
    subparsers.add_parser("gui", help="Desktop GUI")

    config_parser = subparsers.add_parser("config", help="Configuration commands")
    config_parser.add_argument("--show", action="store_true", help="Show current config")
    config_parser.add_argument("--validate", action="store_true", help="Validate config")
    config_parser.add_argument("--init", action="store_true", help="Write a default config file")
    config_parser.add_argument(
        "--set",
        nargs=2,
        metavar=("KEY", "VALUE"),
        help="Set config value"
    )
    return parser


def main(argv: list[str] | None = None):
    """Main entry point for Twoogle."""
    args = build_parser().parse_args(argv)

    if args.command == "config":
        setup_logging(args.log_level or "WARNING")
        from .cli.config_cmd import run_config
        sys.exit(run_config(args))

    from .config import load_config
    from .core.errors import StorageError
    from .core.service import MessageService

    config = load_config(args.config)
    if args.db:
        config.database.path = args.db
    if args.log_level:
        config.logging.level = args.log_level
    if args.debug is not None:
        config.logging.debug = args.debug

    setup_logging(config.logging.level, config.logging.file or None, console=config.logging.debug)
    logger = logging.getLogger("twoogle")

    errors = config.validate()
    if args.command == "gui" and not config.features.gui_enabled:
        errors.append("features.gui_enabled is false; the gui command is unavailable")
    if errors:
        for err in errors:
            logger.error(f"Config error: {err}")
        sys.exit(1)

    service = MessageService(config)
    try:
        service.setup()
    except StorageError as e:
        logger.error(f"Fatal error: {e}")
        print(f"Cannot start: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info(f"Starting Twoogle v{__version__}")
    try:
        if args.command == "gui":
            from .gui.app import run_gui
            run_gui(service, service.new_session())
            code = 0
        else:
            from .cli.console import run_console
            code = run_console(service)
    except KeyboardInterrupt:
        logger.info("Shutdown requested")
        code = 0
    finally:
        service.shutdown()

    sys.exit(code)


if __name__ == "__main__":
    main()
