#!/usr/bin/env python3
"""
Yeelight LAN Control Tool
Send a single command to a Yeelight lamp over its local TCP control port.
"""

import argparse
import sys

from yeelamp.command_handler import CommandHandler
from yeelamp.config import load_config
from yeelamp.constants import LAMP_PORT
from yeelamp.errors import ConfigError
from yeelamp.log import configure, debug, say, warn
from yeelamp.utils import default_config_path
from yeelamp.values import describe_limits


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Yeelight LAN Control Tool",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    target_group = parser.add_argument_group("Lamp Selection")
    target_group.add_argument(
        "--config",
        default=None,
        help=f"Path to a TOML config with a [lamp] table (default: {default_config_path()}).",
    )
    target_group.add_argument(
        "--ip",
        default=None,
        help=f"Lamp address as host[:port], overrides the config (default port: {LAMP_PORT}).",
    )
    target_group.add_argument(
        "--name", default="lamp", help="Name used in log messages when --ip is given."
    )

    control_group = parser.add_argument_group("Lamp Control")
    commands = control_group.add_mutually_exclusive_group()
    commands.add_argument("--toggle", action="store_true", help="Toggle the lamp's power state.")
    commands.add_argument("--ct", type=int, help="Set color temperature in Kelvin (1700-6500).")
    commands.add_argument("--rgb", help="Set color as hex RGB, e.g. FF8800 or #ff8800.")
    commands.add_argument(
        "--hsv",
        type=int,
        nargs="+",
        metavar=("HUE", "SAT"),
        help="Set hue (0-359) and optional saturation (0-100, default 100).",
    )
    commands.add_argument("--bright", type=int, help="Set brightness (0-100).")

    effects = control_group.add_mutually_exclusive_group()
    effects.add_argument(
        "--smooth",
        type=int,
        metavar="MS",
        help="Fade over MS milliseconds (minimum 30; 0 means sudden).",
    )
    effects.add_argument("--sudden", action="store_true", help="Apply the change instantly.")

    conn_group = parser.add_argument_group("Connection")
    conn_group.add_argument("--tries", type=int, help="Connection attempts before giving up.")
    conn_group.add_argument("--wait", type=float, help="Seconds to wait between attempts.")
    conn_group.add_argument("--timeout", type=float, help="Seconds allowed per connection attempt.")
    conn_group.add_argument(
        "--wait-response",
        action="store_true",
        help="Read the lamp's reply and check it answers the command sent.",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the request that would be sent (with id 0) and exit.",
    )
    parser.add_argument("--limits", action="store_true", help="Print accepted value ranges and exit.")
    parser.add_argument("--verbose", action="store_true", help="Show debug logs and raw payloads")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure(verbose=args.verbose)

    if args.limits:
        for line in describe_limits().splitlines():
            say(line)
        return 0

    lamp_config = None
    needs_config = not args.ip and not args.dry_run
    if args.config or needs_config:
        try:
            lamp_config = load_config(args.config)
            debug(f"Loaded config for lamp {lamp_config.name}")
        except ConfigError as e:
            warn(f"Invalid config: {e}")
            if needs_config:
                warn("Provide --ip or a valid --config.")
                return 2

    return CommandHandler(args, lamp_config).handle()


if __name__ == "__main__":
    sys.exit(main())
