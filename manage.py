#!/usr/bin/env python3
"""
Party Picks Management CLI

Command-line management for the Party Picks application: database setup,
announcing results, inspecting parties and leaderboards.
"""

import logging
import os

import click
from flask.cli import with_appcontext
from flask_migrate import migrate, upgrade
from sqlalchemy.exc import SQLAlchemyError

from party_picks import create_app, db
from party_picks.catalog import CATEGORIES, validate_catalog
from party_picks.errors import PartyPicksError
from party_picks.models import Party, PartyMember, Prediction, Profile, Result
from party_picks.services import leaderboard as leaderboard_service
from party_picks.services import party_registry, results as results_service
from party_picks.services.results import SYSTEM_ADMIN


@click.group()
def cli():
    """Party Picks Management CLI"""
    pass


# Results Commands
@cli.group()
def results():
    """Announced results"""
    pass


@results.command("list")
@with_appcontext
def list_results():
    """List announced results"""
    announced = {result.category: result for result in results_service.list_results()}
    click.echo(f"Results: {len(announced)}/{len(CATEGORIES)} announced")
    for category in CATEGORIES:
        result = announced.get(category.id)
        if result is None:
            click.echo(f"  ⚪ {category.id}: -")
            continue
        option = category.get_option(result.selection)
        label = option.label if option else result.selection
        click.echo(f"  🟢 {category.id}: {label} ({result.selection})")


@results.command()
@click.argument("category")
@click.argument("option")
@with_appcontext
def announce(category, option):
    """Announce the winning OPTION for CATEGORY"""
    try:
        results_service.announce_result(SYSTEM_ADMIN, category, option)
        click.echo(f"✅ Announced {category} = {option}")
    except PartyPicksError as e:
        click.echo(f"❌ {e.message}")
        logging.error(f"Announcing result failed: {e}")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error announcing result: {str(e)}")
        logging.error(f"Announcing result failed - SQL error: {e}")


@results.command()
@click.argument("category")
@with_appcontext
def clear(category):
    """Clear the result for CATEGORY"""
    try:
        if results_service.clear_result(SYSTEM_ADMIN, category):
            click.echo(f"✅ Cleared result for {category}")
        else:
            click.echo(f"⚠️  No result announced for {category}")
    except PartyPicksError as e:
        click.echo(f"❌ {e.message}")
        logging.error(f"Clearing result failed: {e}")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error clearing result: {str(e)}")
        logging.error(f"Clearing result failed - SQL error: {e}")


# Party Commands
@cli.group()
def party():
    """Party commands"""
    pass


@party.command("list")
@with_appcontext
def list_parties():
    """List all parties"""
    parties = Party.query.order_by(Party.created_at).all()

    if not parties:
        click.echo("No parties found.")
        return

    click.echo("Parties:")
    for p in parties:
        click.echo(f"  {p.invite_code} {p.name} - {p.get_member_count()} members")


@party.command()
@with_appcontext
def orphans():
    """List parties that have no members left"""
    orphaned = party_registry.find_orphaned_parties()

    if not orphaned:
        click.echo("✅ No orphaned parties.")
        return

    click.echo(f"⚠️  {len(orphaned)} orphaned parties:")
    for p in orphaned:
        click.echo(f"  {p.invite_code} {p.name} (created by {p.created_by})")


# Leaderboard Commands
@cli.group()
def leaderboard():
    """Leaderboard commands"""
    pass


@leaderboard.command()
@click.option("--party", "party_code", help="Invite code of a party (default: everyone)")
@with_appcontext
def show(party_code):
    """Print a leaderboard"""
    if party_code:
        found = Party.find_by_code(party_code)
        if not found:
            click.echo(f"❌ Party {party_code} not found!")
            return
        click.echo(f"🏆 {found.name}")
        entries = leaderboard_service.build_leaderboard(found.get_member_ids())
    else:
        click.echo("🏆 Everyone")
        entries = leaderboard_service.build_leaderboard(
            leaderboard_service.global_scope()
        )

    if not entries:
        click.echo("No players yet.")
        return

    for rank, entry in enumerate(entries, start=1):
        click.echo(f"  {rank:>3}. {entry.display_name} ({entry.user_id}) {entry.score}/{entry.total}")


# Catalog Commands
@cli.group()
def catalog():
    """Category catalog"""
    pass


@catalog.command()
def validate():
    """Check the category catalog for duplicates and empty categories"""
    problems = validate_catalog()
    if problems:
        for problem in problems:
            click.echo(f"❌ {problem}")
        raise SystemExit(1)
    click.echo(f"✅ {len(CATEGORIES)} categories are valid")


# Database Commands
@cli.group()
def db_cmd():
    """Database commands"""
    pass


@db_cmd.command("init")
@with_appcontext
def init_db():
    """Initialize database tables"""
    try:
        db.create_all()
        click.echo("✅ Database tables created successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error initializing database: {str(e)}")


@db_cmd.command()
@with_appcontext
def reset():
    """⚠️  DANGER: Drop and recreate all tables"""
    if not click.confirm("This will DELETE ALL DATA. Are you sure?"):
        click.echo("Cancelled.")
        return

    try:
        db.drop_all()
        db.create_all()
        click.echo("✅ Database reset successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error resetting database: {str(e)}")


# Database Migration Commands
@cli.group()
def db_migrate():
    """Database migration commands"""
    pass


@db_migrate.command()
@with_appcontext
def init_migrations():
    """Initialize migrations repository"""
    if os.path.exists("migrations"):
        click.echo("❌ Migrations directory already exists!")
        return

    from flask_migrate import init as flask_migrate_init

    flask_migrate_init()
    click.echo("✅ Migrations repository initialized!")


@db_migrate.command()
@click.option("-m", "--message", required=True, help="Migration message")
@with_appcontext
def create_migration(message):
    """Create a new migration"""
    migrate(message=message)
    click.echo(f"✅ Migration created: {message}")


@db_migrate.command()
@click.option("--revision", default="head", help="Revision to upgrade to")
@with_appcontext
def apply_migrations(revision):
    """Apply migrations to database"""
    upgrade(revision=revision)
    click.echo(f"✅ Migrations applied to {revision}")


# Info Commands
@cli.command()
@with_appcontext
def info():
    """Show application status"""
    click.echo("🏈 Party Picks")
    click.echo("=" * 40)
    click.echo(f"🎯 Results: {Result.query.count()}/{len(CATEGORIES)} announced")
    click.echo(f"🏆 Parties: {Party.query.count()}")
    click.echo(f"👥 Memberships: {PartyMember.query.count()}")
    click.echo(f"📝 Predictions: {Prediction.query.count()}")
    click.echo(f"🙋 Profiles: {Profile.query.count()}")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        cli()
