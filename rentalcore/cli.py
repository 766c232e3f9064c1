import click
from flask.cli import AppGroup
from sqlalchemy import select

from .errors import Conflict, NotFound
from .extensions import db
from .models import Property
from .services import reconcile_occupancy

occupancy_cli = AppGroup("occupancy", help="Occupancy ledger maintenance.")


@occupancy_cli.command("reconcile")
@click.argument("property_id", type=int, required=False)
def reconcile_command(property_id):
    """Recount occupying tenants and repair drifted counters."""
    if property_id is None:
        property_ids = db.session.execute(select(Property.id).order_by(Property.id)).scalars().all()
    else:
        property_ids = [property_id]

    drifted = 0
    failed = []
    for pid in property_ids:
        try:
            before, after = reconcile_occupancy(db.session, pid)
        except (Conflict, NotFound) as e:
            failed.append(pid)
            click.echo(f"Property {pid}: {e.message}", err=True)
            continue
        if before != after:
            drifted += 1
            click.echo(f"Property {pid}: occupied_units {before} -> {after}")
    click.echo(f"Checked {len(property_ids)} properties, repaired {drifted}.")

    if failed:
        raise click.ClickException(
            "Could not reconcile properties: " + ", ".join(str(pid) for pid in failed)
        )
