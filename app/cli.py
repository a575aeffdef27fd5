import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate
from werkzeug.security import generate_password_hash

from models import db
from models.enums import Role
from models.product import Category
from models.user import User

DEFAULT_CATEGORIES = (
    ("Food & Groceries", "Fresh produce, staples and packaged food"),
    ("Fashion", "Clothing, chitenje and accessories"),
    ("Crafts", "Handmade goods and art"),
    ("Electronics", "Phones, accessories and appliances"),
    ("Home & Garden", "Furniture, kitchenware and tools"),
)


def _is_production() -> bool:
    env = (current_app.config.get("ENV") or "").lower()
    return "production" in (env, (os.getenv("APP_ENV") or "").lower())


def _assert_safe_for_upgrade():
    if _is_production() and (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
        raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("create-admin")
@click.option("--email", required=True)
@click.option("--password", required=True, help="At least 8 characters")
@click.option("--first-name", default="Admin")
@click.option("--last-name", default="User")
@click.option("--district", default=None, help="Makes the account a regional admin for this district")
@with_appcontext
def create_admin(email, password, first_name, last_name, district):
    """Create an admin, or a regional admin when --district is given."""
    if len(password) < 8:
        raise click.BadParameter("password must be at least 8 characters", param_hint="--password")
    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        raise click.ClickException(f"User {email} already exists")

    role = Role.REGIONAL_ADMIN if district else Role.ADMIN
    user = User(
        email=email,
        password_hash=generate_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        district=district,
        role=role,
    )
    db.session.add(user)
    db.session.commit()
    click.echo(f"Created {role.external} {email} ({user.id}).")


@click.command("seed-categories")
@with_appcontext
def seed_categories():
    """Insert the default product categories that do not exist yet."""
    existing = {name.lower() for (name,) in db.session.query(Category.name)}
    added = 0
    for name, description in DEFAULT_CATEGORIES:
        if name.lower() not in existing:
            db.session.add(Category(name=name, description=description))
            added += 1
    db.session.commit()
    click.echo(f"Added {added} categories.")


def register_cli(app):
    for command in (db_migrate_safe, db_upgrade_safe, db_stamp_safe, create_admin, seed_categories):
        app.cli.add_command(command)
