# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/ghost_report/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--no-seed]
#   Create missing tables and seed demo data into an empty database.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables, then reseed (deletes all data).
#
# User inspection/maintenance:
# - python -m flask users list
#   List all users with their ghost buster status.
# - python -m flask users delete 3 --yes
#   Delete a user with their sightings, comments, sign-ups and fights.
#
# Ghost maintenance:
# - python -m flask ghosts list
#   List the ghost catalogue.
# - python -m flask ghosts delete 2 --yes
#   Delete a ghost with its comments, sighting links, tour slots and fights.

import click
from flask import current_app
from flask.cli import with_appcontext

from .bootstrap import bootstrap, ensure_schema, seed_if_empty
from .db_client import get_client
from .extensions import db
from .services import ghost_buster_service, ghost_service, user_service
from .validation import NotFoundError


def _echo_removed(removed: dict) -> None:
    for table, count in removed.items():
        if count:
            click.echo(f"   {table:<28} {count}")


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--no-seed', is_flag=True, help='Create tables only')
@with_appcontext
def init_system(no_seed):
    """Idempotent bootstrap: create missing tables, seed an empty database."""
    seeded = bootstrap(get_client(), seed=not no_seed)
    if seeded:
        click.echo("PASS Schema ensured and seed data written")
    else:
        click.echo("PASS Schema ensured (existing data preserved)")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.option('--no-seed', is_flag=True, help='Leave the recreated tables empty')
@with_appcontext
def reset_db(yes, no_seed):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    client = get_client()
    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    ensure_schema(client)

    if not no_seed:
        seed_if_empty(
            client,
            password=current_app.config["SEED_PASSWORD"],
            rounds=current_app.config["BCRYPT_ROUNDS"],
        )
        click.echo("SEED  Demo data written")

    click.echo("DONE Database reset complete")


@click.group('users')
def users_group():
    """User inspection and maintenance."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their ghost buster status."""
    client = get_client()
    users = user_service.list_users(client)

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Username':<20} {'Email':<30} {'Ghost Buster'}")
    click.echo("="*80)

    for user in users:
        status = ghost_buster_service.get_status(client, user["id"])
        if status["isGhostBuster"]:
            buster_str = f"Yes ({status['ghostsBusted']} busted)"
        else:
            buster_str = "No"
        click.echo(f"{user['id']:<5} {user['username']:<20} {user['email']:<30} {buster_str}")

    click.echo("="*80 + "\n")


@users_group.command('delete')
@click.argument('user_id', type=int)
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def delete_user(user_id, yes):
    """Delete a user and everything they own."""
    if not yes:
        click.confirm(f"WARN Delete user {user_id} and all of their data?", abort=True)
    try:
        removed = user_service.delete_user(get_client(), user_id)
    except NotFoundError:
        raise click.ClickException(f"User {user_id} not found")
    click.echo(f"PASS Deleted user {user_id}")
    _echo_removed(removed)


@click.group('ghosts')
def ghosts_group():
    """Ghost catalogue maintenance."""


@ghosts_group.command('list')
@with_appcontext
def list_ghosts():
    """List the ghost catalogue."""
    ghosts = ghost_service.list_ghosts(get_client())
    if not ghosts:
        click.echo("No ghosts found.")
        return
    for ghost in ghosts:
        click.echo(f"{ghost['id']:<5} {ghost['name']:<28} {ghost['type'] or '-':<16} {ghost['visibilityLevel']}")


@ghosts_group.command('delete')
@click.argument('ghost_id', type=int)
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def delete_ghost(ghost_id, yes):
    """Delete a ghost and every row that references it."""
    if not yes:
        click.confirm(f"WARN Delete ghost {ghost_id} and all references to it?", abort=True)
    try:
        removed = ghost_service.delete_ghost(get_client(), ghost_id)
    except NotFoundError:
        raise click.ClickException(f"Ghost {ghost_id} not found")
    click.echo(f"PASS Deleted ghost {ghost_id}")
    _echo_removed(removed)


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(ghosts_group)
