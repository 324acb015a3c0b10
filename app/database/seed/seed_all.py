from flask.cli import with_appcontext
from app.database.seed.seed_users import seed as seed_users
from app.database.seed.seed_applications import seed as seed_applications

import click

@click.command("seed-all")
@with_appcontext
def seed_all():
    """Run all database seeders."""
    click.echo("🌱 Seeding database...")
    user = seed_users()
    seed_applications(user)
    click.echo("✅ All seeders completed!")
