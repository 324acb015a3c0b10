import click
from flask.cli import with_appcontext

from app.extensions import db
from app.services.parsing import utcnow
from app.services.pipeline import auto_ghost, ghosting_window


@click.command("init-db")
@with_appcontext
def init_db():
    """Create all tables (for local setups without migrations)."""
    db.create_all()
    click.echo("✅ Tables created")


@click.command("ghost-sweep")
@with_appcontext
def ghost_sweep():
    """Flip stale applications of every user to ghosting."""
    flipped = auto_ghost(utcnow(), ghosting_window())
    click.echo(f"👻 {flipped} application(s) flipped to ghosting")
