#!/usr/bin/env python3
"""statusboard CLI entrypoint."""

import sys
import argparse
import logging
from pathlib import Path

from statusboard.lib.config import get_selected_file, load_config
from statusboard.lib.constants import KNOWN_STATUSES
from statusboard.lib.locate import find_all_status_files
from statusboard.commands import show as cmd_show_module
from statusboard.commands import set_status as cmd_set_module
from statusboard.commands import locate as cmd_locate_module
from statusboard.commands import watch as cmd_watch_module


def get_workspace(args) -> Path:
    """Workspace root from --workspace or the current directory."""
    return Path(args.workspace).resolve() if args.workspace else Path.cwd()


def resolve_status_file(args, workspace: Path) -> Path:
    """Resolve the status file from --file, the saved selection, or discovery."""
    if args.file:
        path = Path(args.file)
        return path if path.is_absolute() else workspace / path

    selected = get_selected_file(workspace)
    if selected:
        return selected

    config = load_config(workspace)
    found = find_all_status_files(workspace, config.extra_candidates)
    if len(found) == 1:
        return found[0]
    if not found:
        print(f"ERROR: No status file found under {workspace}")
        sys.exit(2)

    print("ERROR: Multiple status files found. Use 'sb use <path>' or --file to pick one:")
    for p in found:
        print(f"  {p}")
    sys.exit(2)


def cmd_show(args):
    workspace = get_workspace(args)
    return cmd_show_module.cmd_show(args, resolve_status_file(args, workspace))


def cmd_phase(args):
    workspace = get_workspace(args)
    return cmd_show_module.cmd_phase(args, resolve_status_file(args, workspace))


def cmd_set(args):
    workspace = get_workspace(args)
    return cmd_set_module.cmd_set(args, resolve_status_file(args, workspace))


def cmd_locate(args):
    return cmd_locate_module.cmd_locate(args, get_workspace(args))


def cmd_use(args):
    return cmd_locate_module.cmd_use(args, get_workspace(args))


def cmd_watch(args):
    workspace = get_workspace(args)
    return cmd_watch_module.cmd_watch(args, workspace, resolve_status_file(args, workspace))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='sb', description='Workflow status board')
    parser.add_argument('--workspace', '-w', help='Workspace root (default: current directory)')
    parser.add_argument('--file', '-f', help='Status file (default: selected or discovered)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # sb show
    p_show = subparsers.add_parser('show', help='Show all workflow items by phase')
    p_show.set_defaults(func=cmd_show)

    # sb phase
    p_phase = subparsers.add_parser('phase', help='Show items for one phase')
    p_phase.add_argument('phase', help="Phase number (0-3) or 'prerequisite'")
    p_phase.set_defaults(func=cmd_phase)

    # sb set
    p_set = subparsers.add_parser('set', help='Set the status of one item')
    p_set.add_argument('item', help='Item ID')
    p_set.add_argument('status', help=f"New status (e.g. {', '.join(KNOWN_STATUSES)})")
    p_set.set_defaults(func=cmd_set)

    # sb locate
    p_locate = subparsers.add_parser('locate', help='Find status files in the workspace')
    p_locate.add_argument('--all', '-a', action='store_true', help='List every candidate found')
    p_locate.set_defaults(func=cmd_locate)

    # sb use
    p_use = subparsers.add_parser('use', help='Set/show the selected status file')
    p_use.add_argument('path', nargs='?', help='Status file to use')
    p_use.add_argument('--clear', action='store_true', help='Clear the selection')
    p_use.set_defaults(func=cmd_use)

    # sb watch
    p_watch = subparsers.add_parser('watch', help='Follow the status file for changes')
    p_watch.set_defaults(func=cmd_watch)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
