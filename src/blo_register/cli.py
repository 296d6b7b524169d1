"""
Command-line interface for the BLO Register.

Usage:
    python -m blo_register stats
    python -m blo_register import-census census.xlsx --mode merge
    python -m blo_register import-voters roll.xlsx --mode replace
    python -m blo_register autolink
    python -m blo_register suggest v_0123456789ab
    python -m blo_register link v_0123456789ab m_ba9876543210 --copy-details
    python -m blo_register status v_0123456789ab Shifted
    python -m blo_register register
    python -m blo_register backup
    python -m blo_register restore blo_backup_2024-01-01.json
    python -m blo_register ask "How many voters are over 80?"
"""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
from typing import Optional, List

from rich.console import Console
from rich.table import Table

from .config import get_config
from .exceptions import BloRegisterError
from .importers import ImportMode
from .jobs import (
    BaseJob,
    JobContext,
    BackupJob,
    CensusExportJob,
    CensusImportJob,
    RegisterExportJob,
    RestoreJob,
    VoterExportJob,
    VoterImportJob,
)
from .logger import get_logger
from .models import RecordStatus
from .services import group_voters
from .utils.dates import parse_date
from .workspace import Workspace

console = Console()
logger = get_logger(__name__)

STATUS_CHOICES = [s.value for s in RecordStatus]


def _today(args: argparse.Namespace) -> Optional[date]:
    if not args.today:
        return None
    parsed = parse_date(args.today)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"Invalid --today date: {args.today}")
    return parsed


def _run_job(job: BaseJob, success: str) -> int:
    if job.run():
        console.print(f"[green]✓[/green] {success.format(result=job.result)}")
        return 0
    console.print(f"[red]✗ {job.error}[/red]")
    return 1


def cmd_stats(ws: Workspace, args: argparse.Namespace) -> int:
    stats = ws.dashboard(_today(args))

    table = Table(title="Dashboard")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key, value in stats.to_dict().items():
        if key == "statusCounts":
            for status, count in value.items():
                table.add_row(f"Voters {status}", str(count))
        else:
            table.add_row(key, str(value))
    console.print(table)

    if stats.prospective:
        prospective = Table(title="Prospective Voters (17yo)")
        for column in ("Name", "House", "HOF", "Age", "Phone"):
            prospective.add_column(column)
        for p in stats.prospective:
            prospective.add_row(p.name, p.house_no, p.hof_name, str(p.age), p.contact_phone)
        console.print(prospective)
    return 0


def cmd_households(ws: Workspace, args: argparse.Namespace) -> int:
    table = Table(title="Households")
    for column in ("House No", "Address", "HOF", "Members", "ID"):
        table.add_column(column)
    for h in ws.households.search(args.search or ""):
        hof = h.head_of_family
        table.add_row(h.house_no, h.address, hof.name if hof else "", str(len(h.members)), h.id)
    console.print(table)
    return 0


def cmd_voters(ws: Workspace, args: argparse.Namespace) -> int:
    status = RecordStatus.parse(args.status, strict=True) if args.status else None
    voters = ws.voters.filter(status=status, term=args.search)

    if args.grouped:
        for section, houses in group_voters(voters).items():
            count = sum(len(v) for v in houses.values())
            console.print(f"[bold]{section}[/bold] ({count})")
            for house, house_voters in houses.items():
                names = ", ".join(v.name for v in house_voters)
                console.print(f"  {house}: {names}")
        return 0

    table = Table(title="Voters")
    for column in ("EPIC No", "Name", "Gender", "Age", "House No", "Status", "Linked", "ID"):
        table.add_column(column)
    for v in voters:
        table.add_row(
            v.epic_no, v.name, v.gender.value, str(v.age), v.house_no,
            v.status.value, "yes" if v.is_linked else "", v.id,
        )
    console.print(table)
    return 0


def cmd_import_census(ws: Workspace, args: argparse.Namespace) -> int:
    job = CensusImportJob(JobContext(ws, _today(args)), Path(args.file), ImportMode(args.mode))
    code = _run_job(job, f"Census data {args.mode}d: {{result}} household(s)")
    if code == 0 and job.dropped_rows:
        console.print(f"[yellow]{job.dropped_rows} row(s) without a House No were skipped[/yellow]")
    return code


def cmd_import_voters(ws: Workspace, args: argparse.Namespace) -> int:
    job = VoterImportJob(JobContext(ws, _today(args)), Path(args.file), ImportMode(args.mode))
    return _run_job(job, f"Voter data {args.mode}d: {{result}} voter(s)")


def cmd_export_census(ws: Workspace, args: argparse.Namespace) -> int:
    return _run_job(CensusExportJob(JobContext(ws, _today(args)), args.output), "Census exported to {result}")


def cmd_export_voters(ws: Workspace, args: argparse.Namespace) -> int:
    return _run_job(VoterExportJob(JobContext(ws, _today(args)), args.output), "Voter list exported to {result}")


def cmd_register(ws: Workspace, args: argparse.Namespace) -> int:
    return _run_job(
        RegisterExportJob(JobContext(ws, _today(args)), args.output),
        "BLO Register exported to {result}",
    )


def cmd_backup(ws: Workspace, args: argparse.Namespace) -> int:
    return _run_job(BackupJob(JobContext(ws, _today(args)), args.output), "Backup written to {result}")


def cmd_restore(ws: Workspace, args: argparse.Namespace) -> int:
    job = RestoreJob(JobContext(ws, _today(args)), Path(args.file))
    if not job.run():
        console.print(f"[red]✗ {job.error}[/red]")
        return 1
    s = job.result
    console.print(
        f"[green]✓[/green] Restore successful: {s.households or 0} households, "
        f"{s.voters or 0} voters, settings {'loaded' if s.settings_restored else 'unchanged'}"
    )
    return 0


def cmd_suggest(ws: Workspace, args: argparse.Namespace) -> int:
    suggestions = ws.reconciliation.suggest_for(args.voter_id, _today(args))
    if not suggestions:
        console.print("No matching census members found")
        return 0
    table = Table(title=f"Link suggestions for {args.voter_id}")
    for column in ("Score", "Name", "House No", "DOB", "Member ID"):
        table.add_column(column)
    for s in suggestions:
        table.add_row(str(s.score), s.member.name, s.member.house_no, s.member.member.dob, s.member.id)
    console.print(table)
    return 0


def cmd_link(ws: Workspace, args: argparse.Namespace) -> int:
    voter = ws.reconciliation.link_voter_to_member(
        args.voter_id, args.member_id, copy_member_details=args.copy_details, today=_today(args)
    )
    console.print(f"[green]✓[/green] Linked {voter.name} ({voter.id}) to member {args.member_id}")
    return 0


def cmd_autolink(ws: Workspace, args: argparse.Namespace) -> int:
    count = ws.reconciliation.auto_link()
    if count:
        console.print(f"[green]✓[/green] Successfully auto-linked {count} voter(s)")
    else:
        console.print("No new matches found to auto-link")
    return 0


def cmd_status(ws: Workspace, args: argparse.Namespace) -> int:
    change = ws.reconciliation.set_voter_status(args.voter_id, RecordStatus.parse(args.status, strict=True))
    message = f"[green]✓[/green] {change.voter.name}: {change.previous_status.value} -> {change.voter.status.value}"
    if change.member_synced:
        message += " (census member updated)"
    console.print(message)
    return 0


def cmd_ask(ws: Workspace, args: argparse.Namespace) -> int:
    assistant = ws.assistant()
    answer = assistant.ask(args.question, ws.households.list_all(), ws.voters.list_all())
    console.print(answer)
    return 0


def cmd_clear(ws: Workspace, args: argparse.Namespace) -> int:
    if not args.yes:
        console.print(
            "[red]This will delete all households, voters, and reset your profile settings. "
            "Re-run with --yes to confirm.[/red]"
        )
        return 1
    ws.clear_all()
    console.print("[green]✓[/green] All local data has been cleared")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blo-register", description="BLO Register")
    parser.add_argument("--data-dir", help="Directory holding households/voters/settings JSON")
    parser.add_argument("--today", help="Reference date (YYYY-MM-DD) for ages and reports")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("stats", help="Show dashboard statistics").set_defaults(func=cmd_stats)

    p = sub.add_parser("households", help="List households")
    p.add_argument("--search", help="House number or member name")
    p.set_defaults(func=cmd_households)

    p = sub.add_parser("voters", help="List voters")
    p.add_argument("--status", choices=STATUS_CHOICES)
    p.add_argument("--search", help="Name, EPIC or house number")
    p.add_argument("--grouped", action="store_true", help="Group by section and house")
    p.set_defaults(func=cmd_voters)

    for name, func, what in (
        ("import-census", cmd_import_census, "census"),
        ("import-voters", cmd_import_voters, "voter list"),
    ):
        p = sub.add_parser(name, help=f"Import a {what} spreadsheet")
        p.add_argument("file")
        p.add_argument("--mode", choices=[m.value for m in ImportMode], default=ImportMode.MERGE.value)
        p.set_defaults(func=func)

    for name, func, what in (
        ("export-census", cmd_export_census, "Export census data to Excel"),
        ("export-voters", cmd_export_voters, "Export the voter list to Excel"),
        ("register", cmd_register, "Export the BLO register PDF"),
        ("backup", cmd_backup, "Write a JSON backup"),
    ):
        p = sub.add_parser(name, help=what)
        p.add_argument("--output", "-o", help="Output file (default: exports directory)")
        p.set_defaults(func=func)

    p = sub.add_parser("restore", help="Restore a JSON backup")
    p.add_argument("file")
    p.set_defaults(func=cmd_restore)

    p = sub.add_parser("suggest", help="Suggest census members for a voter")
    p.add_argument("voter_id")
    p.set_defaults(func=cmd_suggest)

    p = sub.add_parser("link", help="Link a voter to a census member")
    p.add_argument("voter_id")
    p.add_argument("member_id")
    p.add_argument("--copy-details", action="store_true", help="Update voter details from census data")
    p.set_defaults(func=cmd_link)

    sub.add_parser("autolink", help="Auto-link voters by house, name and gender").set_defaults(func=cmd_autolink)

    p = sub.add_parser("status", help="Set a voter's status")
    p.add_argument("voter_id")
    p.add_argument("status", choices=STATUS_CHOICES)
    p.set_defaults(func=cmd_status)

    p = sub.add_parser("ask", help="Ask the AI assistant about the data")
    p.add_argument("question")
    p.set_defaults(func=cmd_ask)

    p = sub.add_parser("clear", help="Delete all data on this device")
    p.add_argument("--yes", action="store_true")
    p.set_defaults(func=cmd_clear)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config()
    if args.data_dir:
        config.data_dir = Path(args.data_dir)

    try:
        ws = Workspace.open(config)
        return args.func(ws, args)
    except BloRegisterError as e:
        logger.debug(f"{args.command} failed: {e}")
        console.print(f"[red]✗ {e.message}[/red]")
        return 1
    except (ValueError, argparse.ArgumentTypeError) as e:
        console.print(f"[red]✗ {e}[/red]")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
