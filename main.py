"""Application entry point."""
import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from toggl2slack import __version__
from toggl2slack.config import DEFAULT_CONFIG_PATH, ConfigError, generate_config, load_config
from toggl2slack.dispatcher import Dispatcher
from toggl2slack.monitor import ActivityMonitor
from toggl2slack.notifier import NotificationService
from toggl2slack.payload import PayloadError
from toggl2slack.toggl import TogglClient

logger = logging.getLogger(__name__)


def setup_logging(debug=False, log_file=None):
    """Set up logging configuration."""
    log_level = logging.DEBUG if debug else logging.INFO

    handlers = [logging.StreamHandler()]  # Log to console
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(logging.FileHandler(log_file))  # Log to file

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def build_parser():
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="toggl2slack", description="notify Toggl activities to Slack")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", default=None,
        help=f"config file (default: $TOGGL2SLACK_CONFIG or {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--log-file", default=None, help="also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True
    init = subparsers.add_parser(
        "init", aliases=["i", "g", "generate"], help="generate a config file")
    init.set_defaults(func=init_command)
    start = subparsers.add_parser("start", aliases=["s"], help="start toggl2slack")
    start.set_defaults(func=start_command)
    return parser


def config_path(args):
    return args.config or os.environ.get("TOGGL2SLACK_CONFIG") or DEFAULT_CONFIG_PATH


def init_command(args):
    """Generate a default config file."""
    path = config_path(args)
    try:
        generate_config(path)
    except OSError as e:
        logger.error("Failed to generate config: %s", e)
        return 1
    print(f"{path} was generated")
    return 0


def start_command(args):
    """Load the config and run the monitoring loop."""
    try:
        config = load_config(config_path(args))
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        return 1

    source = TogglClient(config.toggl_token, config.dashboard_id, timeout=config.timeout)
    notifier = NotificationService(config.webhook_url, timeout=config.timeout)
    dispatcher = Dispatcher(config.users, config.templates, notifier)
    monitor = ActivityMonitor(config, source, dispatcher)

    try:
        monitor.run()
    except PayloadError as e:
        logger.critical("Invalid user settings: %s", e)
        return 1
    return 0


def main(argv=None):
    """Main entry point for the application."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    debug = args.debug or os.environ.get("DEBUG", "false").lower() == "true"
    setup_logging(debug, args.log_file or os.environ.get("LOG_FILE"))

    logger.info("Initializing toggl2slack %s", __version__)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
