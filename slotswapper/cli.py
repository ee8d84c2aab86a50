"""CLI tools for SlotSwapper administration."""

import click

from slotswapper.core.errors import SlotSwapperError
from slotswapper.db.base import Base
from slotswapper.db.repository import RecordStore
from slotswapper.db.session import SessionLocal, engine
from slotswapper.services import auth_service, swap_service


@click.group()
def cli():
    """SlotSwapper CLI tools."""
    pass


@cli.command()
def init_db():
    """
    Create all tables from the ORM models.

    Development helper; deployed databases are managed with Alembic.

    Example:
        python -m slotswapper.cli init-db
    """
    import slotswapper.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    click.echo("✓ Database tables created")


@cli.command()
@click.option("--name", required=True, help="Display name")
@click.option("--email", required=True, help="Login email")
@click.option("--password", required=True, help="Initial password")
def create_user(name: str, email: str, password: str):
    """
    Register a user account.

    Example:
        python -m slotswapper.cli create-user --name "Alice" --email "alice@example.com" --password "secret1"
    """
    db = SessionLocal()
    try:
        user = auth_service.register_user(RecordStore(db), name, email, password)
        click.echo(f"✓ Created user: {user.name}")
        click.echo(f"  ID: {user.id}")
        click.echo(f"  Email: {user.email}")
    except SlotSwapperError as e:
        click.echo(f"❌ Error: {e.message}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User whose swap requests to show")
def list_requests(email: str):
    """
    Show a user's incoming and outgoing swap requests.

    Example:
        python -m slotswapper.cli list-requests --email "alice@example.com"
    """
    db = SessionLocal()
    try:
        store = RecordStore(db)
        user = store.get_user_by_email(auth_service.normalize_email(email))
        if not user:
            click.echo(f"❌ User not found: {email}")
            raise SystemExit(1)

        for label, views, other in (
            ("Incoming", swap_service.list_incoming_requests(store, user.id), "requester"),
            ("Outgoing", swap_service.list_outgoing_requests(store, user.id), "owner"),
        ):
            click.echo(f"{label} ({len(views)}):")
            for view in views:
                counterparty = getattr(view, f"{other}_name")
                click.echo(
                    f"  {view.request.id}  {view.request.status:<8}  "
                    f"{view.requester_slot_title} <-> {view.owner_slot_title}  "
                    f"({other}: {counterparty})"
                )
    finally:
        db.close()


if __name__ == "__main__":
    cli()
