"""
Command-line interface for modprofile.

This module provides a CLI for inspecting and editing mod profiles and
folders stored in the mod data file.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .. import __version__
from ..config.settings import AppSettings, get_settings
from ..core import folders, profiles
from ..core.errors import (
    DuplicateName,
    InvalidName,
    LastProfileError,
    NotFound,
    SchemaError,
)
from ..core.models import ModConfig
from ..core.repository import ModDataRepository
from ..core.validation import find_violations
from ..infrastructure.logging_config import setup_logging, get_logger
from ..infrastructure.mod_data_store import ModDataStore


logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="modprofile",
        description="Manage mod profiles, folders and load order"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"modprofile {__version__}"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument("--data-file", type=Path, help="Mod data file to operate on")
    parser.add_argument("-p", "--profile", help="Target profile (default: active profile)")
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Display profiles and folders")
    subparsers.add_parser("migrate", help="Upgrade the mod data file to the current version")
    subparsers.add_parser("validate", help="Check the mod data for inconsistencies")
    subparsers.add_parser("backup", help="Write a timestamped backup of the mod data")
    subparsers.add_parser("restore", help="Replace the mod data with the latest backup")
    subparsers.add_parser("reset", help="Replace the mod data with a fresh default")

    order_parser = subparsers.add_parser("load-order", help="Show enabled mods with effective priority")
    order_parser.add_argument("--display-order", action="store_true",
                              help="List mods in display order instead of load order")

    # Profile commands
    profile_parser = subparsers.add_parser("profile", help="Manage profiles")
    profile_sub = profile_parser.add_subparsers(dest="action", required=True)
    profile_sub.add_parser("list", help="List profiles")
    profile_sub.add_parser("add", help="Add an empty profile").add_argument("name")
    profile_sub.add_parser("remove", help="Remove a profile").add_argument("name")
    profile_sub.add_parser("switch", help="Make a profile active").add_argument("name")
    rename_profile_parser = profile_sub.add_parser("rename", help="Rename a profile")
    rename_profile_parser.add_argument("old")
    rename_profile_parser.add_argument("new")
    duplicate_parser = profile_sub.add_parser("duplicate", help="Copy a profile")
    duplicate_parser.add_argument("source")
    duplicate_parser.add_argument("name")

    # Folder commands
    folder_parser = subparsers.add_parser("folder", help="Manage folders of a profile")
    folder_sub = folder_parser.add_subparsers(dest="action", required=True)
    folder_sub.add_parser("create", help="Create an empty folder").add_argument("name")
    folder_sub.add_parser("delete", help="Delete a folder, keeping its mods").add_argument("name")
    folder_sub.add_parser("enable", help="Enable a folder").add_argument("name")
    folder_sub.add_parser("disable", help="Disable a folder").add_argument("name")
    rename_folder_parser = folder_sub.add_parser("rename", help="Rename a folder")
    rename_folder_parser.add_argument("old")
    rename_folder_parser.add_argument("new")
    priority_parser = folder_sub.add_parser("priority", help="Set or clear a folder's priority override")
    priority_parser.add_argument("name")
    priority_parser.add_argument("value", help="Integer priority, or 'none' to clear")

    # Mod commands
    mod_parser = subparsers.add_parser("mod", help="Manage mods of a profile")
    mod_sub = mod_parser.add_subparsers(dest="action", required=True)
    add_mod_parser = mod_sub.add_parser("add", help="Add a mod")
    add_mod_parser.add_argument("mod_id")
    add_mod_parser.add_argument("--priority", type=int, default=0)
    add_mod_parser.add_argument("--folder", help="Add into this folder instead of the root")
    add_mod_parser.add_argument("--required", action="store_true")
    add_mod_parser.add_argument("--disabled", action="store_true")
    mod_sub.add_parser("remove", help="Remove a mod").add_argument("mod_id")
    mod_sub.add_parser("enable", help="Enable a mod").add_argument("mod_id")
    mod_sub.add_parser("disable", help="Disable a mod").add_argument("mod_id")
    mod_sub.add_parser("root", help="Move a mod out of its folder").add_argument("mod_id")
    move_parser = mod_sub.add_parser("move", help="Move a mod into a folder")
    move_parser.add_argument("mod_id")
    move_parser.add_argument("folder")
    mod_priority_parser = mod_sub.add_parser("priority", help="Set a mod's own priority")
    mod_priority_parser.add_argument("mod_id")
    mod_priority_parser.add_argument("value", type=int)

    return parser


def confirm(prompt: str, assume_yes: bool) -> bool:
    """
    Ask the user to confirm a destructive action.

    Args:
        prompt: Question to display.
        assume_yes: If True, skip the question and confirm.

    Returns:
        True if the action should proceed.
    """
    if assume_yes:
        return True
    answer = input(f"{prompt} [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def parse_override(value: str) -> Optional[int]:
    """
    Parse a priority override argument.

    Raises:
        ValueError: If the value is neither an integer nor 'none'.
    """
    if value.lower() == "none":
        return None
    return int(value)


def cmd_info(repository: ModDataRepository, args: argparse.Namespace) -> int:
    """
    Display profiles, folders and mods.

    Returns:
        Exit code (0 for success).
    """
    data = repository.data
    print(f"Version: {data.version}")
    print(f"Active profile: {data.active_profile}")

    for name in data.get_profile_names():
        profile = data.profiles[name]
        marker = "*" if name == data.active_profile else " "
        print(f"{marker} {name}: {len(profile.mod_ids())} mods, {len(profile.groups)} folders")
        for folder_name, group in profile.groups.items():
            override = group.priority_override
            suffix = f", priority override {override}" if override is not None else ""
            print(f"    [{folder_name}] {len(group.mods)} mods{suffix}")

    return 0


def cmd_migrate(repository: ModDataRepository, args: argparse.Namespace) -> int:
    """
    Report the migration performed while loading.

    Returns:
        Exit code (0 for success).
    """
    result = repository.last_migration
    if result is None or not result.was_upgraded:
        print("Mod data is already up to date")
        return 0

    print(f"Upgraded mod data from {result.source_version} to {result.data.version}")
    for warning in result.warnings:
        print(f"  warning: {warning}")
    if result.dropped_references:
        print(f"{result.dropped_references} folder reference(s) dropped")
    return 0


def cmd_validate(repository: ModDataRepository, args: argparse.Namespace) -> int:
    """
    Check the loaded mod data for inconsistencies.

    Returns:
        Exit code (0 if consistent).
    """
    violations = find_violations(repository.data)
    if not violations:
        print("✓ Mod data is consistent")
        return 0

    for violation in violations:
        print(f"✗ {violation}")
    return 1


def cmd_load_order(repository: ModDataRepository, args: argparse.Namespace) -> int:
    """
    Print enabled mods with their effective priority.

    Returns:
        Exit code (0 for success).
    """
    if args.display_order:
        entries = repository.get_enabled_mods_with_priority(args.profile)
    else:
        entries = [(mod.mod_id, priority) for mod, _, priority in repository.load_order_with_priority(args.profile)]

    for mod_id, priority in entries:
        print(f"{priority:>6}  {mod_id}")
    return 0


def cmd_backup(repository: ModDataRepository, args: argparse.Namespace) -> int:
    """Write a timestamped backup."""
    path = repository.backup()
    print(f"Backup written to {path}")
    return 0


def cmd_profile(repository: ModDataRepository, args: argparse.Namespace, settings: AppSettings) -> int:
    """
    Dispatch profile subcommands.

    Returns:
        Exit code (0 for success).
    """
    if args.action == "list":
        data = repository.data
        for name in data.get_profile_names():
            print(f"{'*' if name == data.active_profile else ' '} {name}")
    elif args.action == "add":
        repository.apply_to_data(profiles.add_profile, args.name)
    elif args.action == "remove":
        if settings.confirm_profile_deletion and not confirm(f"Delete profile '{args.name}'?", args.yes):
            print("Cancelled")
            return 0
        repository.apply_to_data(profiles.remove_profile, args.name)
    elif args.action == "switch":
        repository.apply_to_data(profiles.set_active_profile, args.name)
    elif args.action == "rename":
        repository.apply_to_data(profiles.rename_profile, args.old, args.new)
    elif args.action == "duplicate":
        repository.apply_to_data(profiles.duplicate_profile, args.source, args.name)
    return 0


def cmd_folder(repository: ModDataRepository, args: argparse.Namespace, settings: AppSettings) -> int:
    """
    Dispatch folder subcommands.

    Returns:
        Exit code (0 for success).
    """
    target = args.profile

    if args.action == "create":
        repository.apply(folders.create_folder, args.name, profile=target)
    elif args.action == "rename":
        repository.apply(folders.rename_folder, args.old, args.new, profile=target)
    elif args.action == "delete":
        if settings.confirm_mod_deletion and not confirm(f"Delete folder '{args.name}'?", args.yes):
            print("Cancelled")
            return 0
        released = repository.apply(folders.delete_folder, args.name, profile=target)
        print(f"Moved {len(released)} mod(s) back to the root list")
    elif args.action == "enable":
        repository.apply(folders.set_folder_enabled, args.name, True, profile=target)
    elif args.action == "disable":
        repository.apply(folders.set_folder_enabled, args.name, False, profile=target)
    elif args.action == "priority":
        try:
            value = parse_override(args.value)
        except ValueError:
            print(f"Error: invalid priority '{args.value}'", file=sys.stderr)
            return 1
        repository.apply(folders.set_priority_override, args.name, value, profile=target)
    return 0


def cmd_mod(repository: ModDataRepository, args: argparse.Namespace, settings: AppSettings) -> int:
    """
    Dispatch mod subcommands.

    Returns:
        Exit code (0 for success).
    """
    target = args.profile

    if args.action == "add":
        mod = ModConfig(
            mod_id=args.mod_id,
            enabled=not args.disabled,
            required=args.required,
            priority=args.priority,
        )
        repository.apply(profiles.add_mod, mod, args.folder, profile=target)
    elif args.action == "remove":
        if settings.confirm_mod_deletion and not confirm(f"Remove mod '{args.mod_id}'?", args.yes):
            print("Cancelled")
            return 0
        repository.apply(profiles.remove_mod, args.mod_id, profile=target)
    elif args.action == "enable":
        repository.apply(profiles.set_mod_enabled, args.mod_id, True, profile=target)
    elif args.action == "disable":
        repository.apply(profiles.set_mod_enabled, args.mod_id, False, profile=target)
    elif args.action == "move":
        repository.apply(folders.move_to_folder, args.mod_id, args.folder, profile=target)
    elif args.action == "root":
        repository.apply(folders.move_to_root, args.mod_id, profile=target)
    elif args.action == "priority":
        repository.apply(profiles.set_mod_priority, args.mod_id, args.value, profile=target)
    return 0


def run_command(repository: ModDataRepository, args: argparse.Namespace, settings: AppSettings) -> int:
    """
    Load the mod data and run the selected command.

    Returns:
        Exit code.
    """
    if args.command == "reset":
        if not confirm("Discard all profiles and start fresh?", args.yes):
            print("Cancelled")
            return 0
        repository.reset()
        print("Started with fresh mod data")
        return 0

    if args.command == "restore":
        result = repository.restore_latest_backup()
        print(f"Restored backup (version {result.source_version})")
        return 0

    repository.load()

    handlers = {
        "info": cmd_info,
        "migrate": cmd_migrate,
        "validate": cmd_validate,
        "load-order": cmd_load_order,
        "backup": cmd_backup,
    }
    if args.command in handlers:
        return handlers[args.command](repository, args)

    editors = {
        "profile": cmd_profile,
        "folder": cmd_folder,
        "mod": cmd_mod,
    }
    return editors[args.command](repository, args, settings)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Arguments to parse. Defaults to sys.argv[1:].

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    log_level = logging.DEBUG if args.verbose else settings.log_level
    setup_logging(level=log_level, log_file=settings.log_file_path, log_to_file=settings.log_to_file)

    store = ModDataStore(args.data_file or settings.mod_data_path)
    repository = ModDataRepository(store=store, settings=settings)

    try:
        return run_command(repository, args, settings)
    except SchemaError as e:
        print(f"Incompatible save data: {e}", file=sys.stderr)
        print("Run 'modprofile reset' to start fresh or 'modprofile restore' to load the last backup.",
              file=sys.stderr)
        return 1
    except (DuplicateName, InvalidName, LastProfileError, NotFound) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
