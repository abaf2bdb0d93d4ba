"""
House Life Notes Command-Line Entry Point.

Bootstraps the entire dependency graph via constructor injection,
initialises the local SQLite schema, signs the user in and runs one
command.  Every subsystem is wired here; there are no module-level globals.

Usage::

    python main.py dashboard --email you@example.com
    python main.py rooms --email you@example.com
"""

from __future__ import annotations

import argparse
import atexit
import getpass
import sys
from pathlib import Path
from typing import Optional, Sequence

from house_notes.auth import SessionManager
from house_notes.config import get_config
from house_notes.database import DatabaseManager
from house_notes.logger import StructuredLogger, get_logger
from house_notes.models.cost_models import DashboardSummary
from house_notes.models.house import House
from house_notes.schema import initialize_schema
from house_notes.services import ServiceContainer, create_services


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="house-notes",
        description="Home maintenance records and cost dashboard.",
    )
    parser.add_argument("--email", required=True, help="Account email address.")
    parser.add_argument(
        "--password",
        help="Account password (prompted for when omitted).",
    )
    parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Evaluate years owned as of this year (default: current year).",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("dashboard", help="Print the cost breakdown of your house.")
    commands.add_parser("rooms", help="List the rooms of your house.")
    return parser


def print_dashboard(summary: DashboardSummary) -> None:
    width = max(len(line.label) for line in summary.lines) + 2
    print(f"Currency: {summary.currency_code}")
    for line in summary.lines:
        print(f"  {line.label:<{width}}{line.display}")
    print(f"  {'Total Cost':<{width}}{summary.total_display}")
    if summary.years_owned is not None:
        print(f"  {'Years Owned':<{width}}{summary.years_owned}")
    if summary.cost_per_year_display is not None:
        print(f"  {'Cost per Year':<{width}}{summary.cost_per_year_display}")
    if summary.price_sold_display is not None:
        print(f"  {'Price Sold':<{width}}{summary.price_sold_display}")
    if summary.profit_label is not None:
        print(f"  {summary.profit_label:<{width}}{summary.profit_display}")


def run_command(
    command: str,
    services: ServiceContainer,
    house: House,
    user_id: str,
    current_year: Optional[int],
) -> int:
    """Execute *command* for *house*; returns the process exit code."""
    if command == "dashboard":
        result = services["dashboard_service"].load_summary(
            house.id or "", user_id, current_year
        )
        if not result.success or result.data is None:
            print(f"Error: {result.error}", file=sys.stderr)
            return 1
        print_dashboard(result.data)
        return 0

    rooms = services["room_service"].list_rooms(house.id or "", user_id)
    if not rooms.success or rooms.data is None:
        print(f"Error: {rooms.error}", file=sys.stderr)
        return 1
    if not rooms.data:
        print("No rooms recorded.")
    for room in rooms.data:
        print(f"  {room.display_count} {room.label}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Application entry point: wire dependencies and run one command."""
    args = build_parser().parse_args(argv)

    logger: StructuredLogger = get_logger("main")
    logger.info("Starting House Life Notes...")

    # ------------------------------------------------------------------
    # 1. Configuration (from .env / environment variables)
    # ------------------------------------------------------------------
    config = get_config()

    # ------------------------------------------------------------------
    # 2. Database Manager (Supabase for records, SQLite for local state)
    # ------------------------------------------------------------------
    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        sqlite_path=Path(config.LOCAL_DB_PATH),
        logger=StructuredLogger(name="database"),
    )
    atexit.register(db.close)

    # ------------------------------------------------------------------
    # 3. SQLite Schema Initialization (idempotent)
    # ------------------------------------------------------------------
    initialize_schema(db.sqlite, StructuredLogger(name="schema"))

    # ------------------------------------------------------------------
    # 4. Session + Service Container (single composition root)
    # ------------------------------------------------------------------
    session = SessionManager()
    services = create_services(db=db, config=config, session=session)

    try:
        # --------------------------------------------------------------
        # 5. Sign in
        # --------------------------------------------------------------
        password = args.password or getpass.getpass("Password: ")
        auth = services["auth_service"].login(args.email, password)
        if not auth.success or auth.user_id is None:
            print(f"Sign-in failed: {auth.error_message}", file=sys.stderr)
            return 1

        # --------------------------------------------------------------
        # 6. Locate the user's house and run the command
        # --------------------------------------------------------------
        house_result = services["house_service"].get_current_house(auth.user_id)
        if not house_result.success:
            print(f"Error: {house_result.error}", file=sys.stderr)
            return 1
        if house_result.data is None:
            print("No house recorded yet.")
            return 0

        return run_command(
            args.command, services, house_result.data, auth.user_id, args.year
        )
    finally:
        services["auth_service"].logout()
        db.close()
        logger.info("House Life Notes shut down.")


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
