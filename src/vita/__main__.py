"""Entry point: python -m vita <command>

- show [DATE]         Print the Day Record for DATE (default: today)
- migrate            Load, migrate and write the document back now
- habit NAME [DATE]  Toggle a habit and save
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from vita.config import VitaConfig, load_config
from vita.core import Vita, build_remote
from vita.errors import VitaError
from vita.sections.habits import HabitsSection
from vita.sections.issues import IssuesSection
from vita.sections.mood import MoodSection


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _build_vita(config: VitaConfig) -> Vita:
    vita = Vita(config, build_remote(config))
    for section_cls in (HabitsSection, MoodSection, IssuesSection):
        vita.add_section(section_cls(vita.store, vita.saver))
    return vita


async def _show(vita: Vita, args: list[str]) -> None:
    day = args[0] if args else vita.today()
    print(json.dumps(vita.get_day(day), ensure_ascii=False, indent=2))


async def _migrate(vita: Vita, args: list[str]) -> None:
    file_id = await vita.store.persist()
    print(f"Document {file_id} at version {vita.get_data()['version']}")


async def _habit(vita: Vita, args: list[str]) -> None:
    if not args:
        raise SystemExit("Usage: python -m vita habit NAME [DATE]")
    habits = vita.section("habits")
    done = habits.toggle(args[0], args[1] if len(args) > 1 else None)
    print(f"{args[0]}: {'done' if done else 'not done'}")


_COMMANDS = {"show": _show, "migrate": _migrate, "habit": _habit}


async def _run(config: VitaConfig, command, args: list[str]) -> int:
    vita = _build_vita(config)
    try:
        await vita.start()
        await command(vita, args)
    except VitaError as e:
        # Never fall back to an empty document when the remote is unreachable
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await vita.stop()
    if vita.saver.status == "error":
        print(f"Save failed: {vita.saver.last_error}", file=sys.stderr)
        return 1
    return 0


def _usage() -> None:
    print("Usage: python -m vita [show|migrate|habit]")
    print("  show [DATE]          Print the day record (default: today)")
    print("  migrate              Migrate the stored document and write it back")
    print("  habit NAME [DATE]    Toggle a habit and save")


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "show"
    command = _COMMANDS.get(cmd)
    if command is None:
        _usage()
        sys.exit(1)

    config = load_config()
    _setup_logging(config.log_level)
    sys.exit(asyncio.run(_run(config, command, sys.argv[2:])))


if __name__ == "__main__":
    main()
