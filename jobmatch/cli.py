"""Operator commands, registered on the app as ``flask billing ...`` and ``flask init-db``."""

import click
from flask.cli import AppGroup, with_appcontext

from jobmatch.billing.reconciliation import ReconciliationEngine
from jobmatch.billing.store import SqlRecordStore
from jobmatch.errors import DomainError
from jobmatch.extensions import db

billing_cli = AppGroup("billing", help="Payment reconciliation commands.")


@billing_cli.command("reapply")
@click.argument("reference")
def reapply(reference):
    """Re-run the user/job update for a completed payment."""
    try:
        ReconciliationEngine(SqlRecordStore()).reapply_side_effects(reference)
    except (DomainError, LookupError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Side effects re-applied for {reference}")


@billing_cli.command("repair")
def repair():
    """Finish every completed payment whose user/job update is missing."""
    repaired = ReconciliationEngine(SqlRecordStore()).repair_completed()
    for reference in repaired:
        click.echo(f"Repaired {reference}")
    click.echo(f"{len(repaired)} payment(s) repaired")


@click.command("init-db")
@with_appcontext
def init_db():
    """Create all database tables."""
    db.create_all()
    click.echo("Database initialized")


def register_commands(app):
    app.cli.add_command(billing_cli)
    app.cli.add_command(init_db)
