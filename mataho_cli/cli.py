"""
mataho-cli - interact with your home-automation gateway box from the terminal
"""

import argparse
import json
import sys

from mataho_cli import config
from mataho_cli.client import MatahoClient
from mataho_cli.commands import (
    cmd_exec,
    cmd_group_create,
    cmd_group_delete,
    cmd_group_exec,
    cmd_group_join,
    cmd_group_leave,
    cmd_group_list,
    cmd_info,
    cmd_list,
)
from mataho_cli.exceptions import CliError
from mataho_cli.models import DeviceTypeFilter, MatchMode
from mataho_cli.setup_wizard import cmd_setup

HELP_TEXT = """\
Usage: mataho <command> [args...]

Global flags:
  --format json           Output as JSON instead of readable text (default: table)
  --config-dir <dir>      Read config.json / groups.json from this directory first
  --quiet, -q             Suppress warnings
  --verbose, -v           Log HTTP requests to stderr
  --version               Show version number

Commands:
  setup                   - Interactive setup wizard (writes config.json)
  list|ls                 - Print the list of known devices
    --filter=<type>         all, garage-door, gate, roller-shutter
    -l                      Long listing (url, enabled, actions)
  info <device>           - Show a device's id, url, type and supported actions
    --match-mode=<mode>     exact or fuzzy (default: fuzzy)
  exec|ex <device> <action> [args...]
                          - Execute an action on a single device
    --match-mode=<mode>     exact or fuzzy (default: fuzzy)
  group|grp list|ls       - List all groups and their devices
  group create <name>     - Create a new, empty group
  group delete <name>     - Delete a group
  group join <group> <device>
                          - Add a device to a group
  group leave <group> <device>
                          - Remove a device from a group
  group exec|ex <group> <action> [args...]
                          - Execute an action on every device of a group
                            (rejected unless every device supports it)

Devices are identified by id (last part of their URL) or label.
"""


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so flags work after subcommand)
# ---------------------------------------------------------------------------


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (format_str, quiet, verbose, config_dir, remaining_argv).
    Handles --version directly.
    """
    fmt = "table"
    quiet = False
    verbose = False
    config_dir = None
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--version":
            print(f"mataho-cli {config.VERSION}")
            sys.exit(0)
        elif arg in ("--quiet", "-q"):
            quiet = True
        elif arg in ("--verbose", "-v"):
            verbose = True
        elif arg == "--format" and i + 1 < len(argv):
            fmt = argv[i + 1]
            if fmt not in ("json", "table"):
                raise CliError(f"[ERROR] Invalid format '{fmt}'. Use: json, table")
            i += 1
        elif arg == "--config-dir" and i + 1 < len(argv):
            config_dir = argv[i + 1]
            i += 1
        else:
            remaining.append(arg)
        i += 1
    if quiet and verbose:
        raise CliError("[ERROR] --quiet and --verbose are mutually exclusive.")
    return fmt, quiet, verbose, config_dir, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises CliError instead of printing full help text."""

    def error(self, message):
        raise CliError(f"[ERROR] {message}")


def _add_match_mode(p):
    p.add_argument(
        "--match-mode",
        dest="match_mode",
        nargs="?",
        const=MatchMode.FUZZY.value,
        default=MatchMode.FUZZY.value,
        choices=[m.value for m in MatchMode],
        metavar="MODE",
    )


def build_parser():
    parser = _SubcommandParser(
        prog="mataho",
        description="Interact with your home-automation gateway box in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    # --- setup / version ---
    sub.add_parser("setup").set_defaults(func=None)
    sub.add_parser("version").set_defaults(func=None)

    # --- list ---
    p = sub.add_parser("list", aliases=["ls"])
    p.add_argument(
        "--filter",
        nargs="?",
        const=DeviceTypeFilter.ALL.value,
        default=DeviceTypeFilter.ALL.value,
        choices=[f.value for f in DeviceTypeFilter],
        metavar="TYPE",
    )
    p.add_argument("-l", action="store_true", dest="long_listing")
    p.set_defaults(func=cmd_list)

    # --- info ---
    p = sub.add_parser("info")
    p.add_argument("device")
    _add_match_mode(p)
    p.set_defaults(func=cmd_info)

    # --- exec ---
    p = sub.add_parser("exec", aliases=["ex"])
    p.add_argument("device")
    p.add_argument("action")
    p.add_argument("args", nargs="*")
    _add_match_mode(p)
    p.set_defaults(func=cmd_exec)

    # --- group ---
    p = sub.add_parser("group", aliases=["grp"])
    group_sub = p.add_subparsers(
        dest="group_command", parser_class=_SubcommandParser, required=True
    )

    group_sub.add_parser("list", aliases=["ls"]).set_defaults(func=cmd_group_list)

    gp = group_sub.add_parser("create")
    gp.add_argument("name")
    gp.set_defaults(func=cmd_group_create)

    gp = group_sub.add_parser("delete")
    gp.add_argument("name")
    gp.set_defaults(func=cmd_group_delete)

    for name, func in (("join", cmd_group_join), ("leave", cmd_group_leave)):
        gp = group_sub.add_parser(name)
        gp.add_argument("group")
        gp.add_argument("device")
        _add_match_mode(gp)
        gp.set_defaults(func=func)

    gp = group_sub.add_parser("exec", aliases=["ex"])
    gp.add_argument("group")
    gp.add_argument("action")
    gp.add_argument("args", nargs="*")
    gp.set_defaults(func=cmd_group_exec)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------


def _providers(config_dir=None):
    providers = config.default_providers()
    if config_dir:
        providers = (config.fixed_dir_provider(config_dir),) + providers
    return providers


def _emit_cli_error(err, fmt):
    msg = str(err)
    if fmt == "json":
        error = {
            "type": getattr(err, "error_type", "error"),
            "message": msg,
            "exit_code": getattr(err, "exit_code", 1),
        }
        labels = getattr(err, "labels", None)
        if labels:
            error["labels"] = labels
        print(json.dumps({"ok": False, "error": error}, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        print(HELP_TEXT)
        sys.exit(0)

    fmt = "table"
    try:
        # Extract global flags from anywhere in argv
        fmt, quiet, verbose, config_dir, remaining_argv = _extract_global_flags(argv)
        config.RUNTIME_QUIET = quiet
        config.RUNTIME_VERBOSE = verbose
        if verbose:
            config.HTTP_LOG_ENABLED = True

        if not remaining_argv:
            print(HELP_TEXT)
            sys.exit(0)

        parser = build_parser()
        ns = parser.parse_args(remaining_argv)
        ns.format = fmt  # inject global format flag

        if ns.show_help or not ns.command:
            print(HELP_TEXT)
            sys.exit(0)

        if ns.command == "version":
            print(f"mataho-cli {config.VERSION}")
            sys.exit(0)

        providers = _providers(config_dir)
        if ns.command == "setup":
            cmd_setup(providers)
            sys.exit(0)

        handler = getattr(ns, "func", None)
        if not handler:
            raise CliError(f"[ERROR] Unknown command: {ns.command}")
        ns.client = MatahoClient(providers=providers)
        handler(ns)

    except CliError as e:
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
