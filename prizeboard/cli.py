#!/usr/bin/env python3
"""
CLI tool for Prizeboard administration: schema, admin accounts and demo data.
"""
import sys
from datetime import timedelta

import click
from rich.console import Console
from rich.table import Table

from prizeboard.core.config import get_settings
from prizeboard.core.errors import PrizeboardError
from prizeboard.database import Database
from prizeboard.models.admin import AdminUser
from prizeboard.schemas.competition import BreakdownItem, CompetitionCreate
from prizeboard.schemas.participant import ParticipantEntry
from prizeboard.services.auth_service import AuthService
from prizeboard.services.competition_service import CompetitionService
from prizeboard.services.participant_service import ParticipantService
from prizeboard.services.winner_service import WinnerService
from prizeboard.utils.time_utils import utc_now

console = Console()

DEMO_BREAKDOWN = {1: 5000, 2: 3000, 3: 2000}


class AdminContext:
    """Settings and database shared by every command"""

    def __init__(self, database_url=None):
        self.settings = get_settings()
        self.database = Database(database_url or self.settings.SQLALCHEMY_DATABASE_URL)

    def auth_service(self, db) -> AuthService:
        return AuthService(db, self.settings)


def _require_admin(auth_service: AuthService, username: str) -> AdminUser:
    admin = auth_service.get_admin_by_username(username)
    if admin is None:
        console.print(f"[red]ERROR:[/red] Admin '{username}' not found")
        sys.exit(1)
    return admin


@click.group()
@click.option(
    "--database-url",
    envvar="DATABASE_URL",
    help="Database URL (defaults to the DATABASE_* settings)",
)
@click.pass_context
def cli(ctx, database_url):
    """Prizeboard admin CLI - manage the database and admin accounts."""
    ctx.obj = AdminContext(database_url)


@cli.command("init-db")
@click.pass_obj
def init_db(obj: AdminContext):
    """Create all tables that do not exist yet."""
    obj.database.create_all()
    console.print("[green]✓[/green] Database tables created")


@cli.command("create-admin")
@click.option("--username", prompt=True, help="Admin username")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Admin password",
)
@click.option("--role", default="admin", show_default=True, help="Role label")
@click.pass_obj
def create_admin(obj: AdminContext, username, password, role):
    """Create a new admin account."""
    if len(password) < 8:
        console.print("[red]ERROR:[/red] Password must be at least 8 characters")
        sys.exit(1)

    with obj.database.session() as db:
        try:
            admin = obj.auth_service(db).create_admin(username, password, role=role)
        except PrizeboardError as e:
            console.print(f"[red]ERROR:[/red] {e.detail}")
            sys.exit(1)

        console.print("\n[green]✓[/green] Admin created successfully!\n")
        console.print(f"  [bold]ID:[/bold]        {admin.id}")
        console.print(f"  [bold]Username:[/bold]  {admin.username}")
        console.print(f"  [bold]Role:[/bold]      {admin.role}\n")


@cli.command("list-admins")
@click.pass_obj
def list_admins(obj: AdminContext):
    """List all admin accounts."""
    with obj.database.session() as db:
        admins = db.query(AdminUser).order_by(AdminUser.created_at).all()
        if not admins:
            console.print("No admins found.")
            return

        now = utc_now()
        table = Table(title="Admins")
        table.add_column("Username", style="white")
        table.add_column("Role", style="magenta")
        table.add_column("Active", style="green")
        table.add_column("Failed", style="yellow")
        table.add_column("Locked Until", style="red")
        table.add_column("Last Login", style="blue")

        for admin in admins:
            locked = (
                admin.locked_until.strftime("%Y-%m-%d %H:%M")
                if admin.locked_until and admin.locked_until > now
                else "-"
            )
            last_login = (
                admin.last_login_at.strftime("%Y-%m-%d %H:%M")
                if admin.last_login_at
                else "Never"
            )
            table.add_row(
                admin.username,
                admin.role or "-",
                "✓" if admin.is_active else "✗",
                str(admin.failed_login_attempts or 0),
                locked,
                last_login,
            )

        console.print(table)


@cli.command()
@click.argument("username")
@click.pass_obj
def deactivate(obj: AdminContext, username):
    """Deactivate an admin; existing tokens stop working."""
    with obj.database.session() as db:
        auth_service = obj.auth_service(db)
        auth_service.deactivate(_require_admin(auth_service, username))
    console.print(f"[green]✓[/green] Admin '{username}' deactivated")


@cli.command()
@click.argument("username")
@click.pass_obj
def unlock(obj: AdminContext, username):
    """Clear the failed-login counter and lockout of an admin."""
    with obj.database.session() as db:
        auth_service = obj.auth_service(db)
        auth_service.unlock(_require_admin(auth_service, username))
    console.print(f"[green]✓[/green] Admin '{username}' unlocked")


@cli.command("reset-password")
@click.argument("username")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="New password",
)
@click.pass_obj
def reset_password(obj: AdminContext, username, password):
    """Set a new password for an admin and clear any lockout."""
    if len(password) < 8:
        console.print("[red]ERROR:[/red] Password must be at least 8 characters")
        sys.exit(1)

    with obj.database.session() as db:
        auth_service = obj.auth_service(db)
        auth_service.set_password(_require_admin(auth_service, username), password)
    console.print(f"[green]✓[/green] Password reset for '{username}'")


@cli.command("seed-demo")
@click.option("--participants", "participant_count", default=10, show_default=True,
              help="Participants per competition")
@click.pass_obj
def seed_demo(obj: AdminContext, participant_count):
    """Populate an ended, an active and an upcoming competition with demo data."""
    obj.database.create_all()
    now = utc_now().replace(microsecond=0)
    breakdown = [BreakdownItem(place=place, amount_usd=amount) for place, amount in DEMO_BREAKDOWN.items()]
    schedule = [
        ("Last Month Cup", now - timedelta(days=45), now - timedelta(days=15)),
        ("Monthly Championship", now - timedelta(days=10), now + timedelta(days=20)),
        ("Next Month Cup", now + timedelta(days=25), now + timedelta(days=55)),
    ]

    with obj.database.session() as db:
        competition_service = CompetitionService(db)
        participant_service = ParticipantService(db)
        winner_service = WinnerService(db)

        for title, start, end in schedule:
            competition = competition_service.create(CompetitionCreate(
                title=title,
                period=start.strftime("%B %Y"),
                competition_type="P&L",
                start_date=start,
                end_date=end,
                prize_pool_usd=sum(DEMO_BREAKDOWN.values()),
                breakdown=breakdown,
            ))

            if start > now:
                console.print(f"  [dim]{title}: upcoming, no participants[/dim]")
                continue

            entries = [
                ParticipantEntry(
                    wallet_address=f"0xdemo{competition.id.hex[:6]}{i:04d}",
                    username=f"trader{i}",
                    score=1000 - i * 37.5,
                    entry_date=start + timedelta(hours=i),
                )
                for i in range(1, participant_count + 1)
            ]
            participant_service.ingest(competition.id, entries, now)

            created = winner_service.finalize(competition.id, now) if end < now else []
            console.print(
                f"  [dim]{title}: {len(entries)} participants, {len(created)} winners[/dim]"
            )

    console.print("[green]✓[/green] Demo data created")


if __name__ == "__main__":
    cli()
