import click

from . import importer
from .models import db
from .store import get_store


def register_commands(app):

    @app.cli.command("init-db")
    def init_db():
        """Create any missing tables."""
        db.create_all()
        click.echo("Database ready.")

    @app.cli.command("reset-db")
    @click.confirmation_option(prompt="This will DELETE ALL DATA. Continue?")
    def reset_db():
        """Drop and recreate every table."""
        click.echo("Dropping all tables...")
        db.drop_all()
        click.echo("Creating tables...")
        db.create_all()
        click.echo("Database reset completed.")

    @app.cli.command("create-user")
    @click.argument("username")
    @click.password_option()
    def create_user(username, password):
        """Create an account without going through the API."""
        store = get_store()
        if store.users.get_by_username(username):
            raise click.ClickException(f"User {username} already exists")
        if len(password) < 6:
            raise click.ClickException("Password must be at least 6 characters")
        user = store.users.create(username, password)
        click.echo(f"Created user {user.username} ({user.id})")

    @app.cli.command("sweep-sessions")
    def sweep_sessions():
        """Delete expired login sessions."""
        removed = get_store().sessions.sweep()
        click.echo(f"Removed {removed} expired sessions.")

    @app.cli.command("import-journal")
    @click.argument("username")
    @click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
    @click.option("--author", default=None, help="Only read chat messages from this sender.")
    def import_journal(username, files, author):
        """Import CSV journals and WhatsApp chat exports for USERNAME."""
        store = get_store()
        user = store.users.get_by_username(username)
        if user is None:
            raise click.ClickException(f"User {username} not found, create the account first")
        parsed = []
        for path in files:
            try:
                found = importer.parse_file(path, author=author)
            except ValueError as exc:
                raise click.ClickException(f"{path}: {exc}")
            click.echo(f"Parsed {len(found)} entries from {path}")
            parsed.extend(found)
        inserted, skipped = importer.import_entries(store, user, parsed)
        click.echo(f"Inserted: {inserted} entries")
        click.echo(f"Skipped (already exist): {skipped} entries")
