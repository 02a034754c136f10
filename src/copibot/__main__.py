"""Main entry point for the CopiBot command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .checker import build_assertions, run_checks
from .config import PatternSet, load_config
from .intents import IntentMatcher, Stage
from .logging_utils import setup_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the CopiBot CLI.

    Returns:
        argparse.Namespace: An object containing the parsed command-line arguments.

    """
    parser = argparse.ArgumentParser(description="CopiBot intent pattern smoke check")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"CopiBot {__version__}",
        help="Show the version number and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug level logging on stderr.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file overriding the built-in patterns.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write detailed debug logs to this file.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'check' is also what runs when no command is given
    subparsers.add_parser("check", help="Run the pattern smoke check (default).")

    classify_parser = subparsers.add_parser("classify", help="Print the intent detected in a message.")
    classify_parser.add_argument("text", help="The message text to classify.")
    classify_parser.add_argument(
        "--stage",
        choices=[stage.value for stage in Stage],
        default=Stage.IDLE.value,
        help="Conversation stage of the session (default: idle).",
    )

    return parser.parse_args(argv)


def _load_pattern_set(config_path: Path | None) -> PatternSet | None:
    """
    Load the pattern set, falling back to the built-in patterns.

    Returns:
        A PatternSet, or None if the configuration file could not be loaded.

    """
    if config_path is None:
        return PatternSet()
    try:
        logger.info("Loading configuration from: %s", config_path)
        return load_config(str(config_path))
    except FileNotFoundError:
        logger.exception("Could not find the configuration file.")
        return None
    except Exception:
        logger.exception("An unexpected error occurred while loading the configuration.")
        return None


def main(argv: list[str] | None = None) -> None:
    """
    Run the main entry point for the CopiBot command-line interface.

    1. Parses command-line arguments and sets up logging.
    2. Loads the pattern set.
    3. Runs the smoke check, or classifies a message.
    """
    args = _parse_args(argv)
    setup_logging(version=__version__, debug=args.debug, log_file=args.log_file)

    pattern_set = _load_pattern_set(args.config)
    if pattern_set is None:
        logger.critical("Failed to load configuration. Aborting.")
        sys.exit(1)

    if args.command == "classify":
        try:
            matcher = IntentMatcher(pattern_set)
            intent = matcher.classify(args.text, Stage(args.stage))
        except Exception:
            logger.exception("An unexpected error occurred")
            sys.exit(1)
        print(intent.value)
        return

    run_checks(build_assertions(pattern_set))


if __name__ == "__main__":
    main()
