#!/usr/bin/env python3
"""
FIFA League Tracker Management CLI

This script provides command-line management functionality for the FIFA League Tracker application.
"""

import logging

import click
from flask.cli import with_appcontext
from flask_migrate import downgrade, migrate, upgrade
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import create_app, db
from app.models import Game, League, Player
from app.services import league_service
from app.services.league_service import LeagueServiceError


@click.group()
def cli():
    """FIFA League Tracker Management CLI"""
    pass


# Player Management Commands
@cli.group()
def player():
    """Player management commands"""
    pass


@player.command("create")
@click.argument("name")
@with_appcontext
def create_player(name):
    """Create a new player"""
    try:
        new_player = Player(name=name.strip())
        db.session.add(new_player)
        db.session.commit()
        click.echo(f"✅ Created player '{new_player.name}' (id {new_player.id})")
    except IntegrityError as e:
        db.session.rollback()
        click.echo(f"❌ Player '{name}' already exists!")
        logging.error(f"Player creation failed - integrity error: {e}")


@player.command("list")
@with_appcontext
def list_players():
    """List all players with their prize money"""
    players = Player.query.order_by(Player.prize_money.desc()).all()

    if not players:
        click.echo("No players found.")
        return

    click.echo("Players:")
    for p in players:
        click.echo(f"  {p.id}: {p.name} - £{p.prize_money}")


# League Management Commands
@cli.group()
def league():
    """League management commands"""
    pass


@league.command("create")
@click.argument("player_a")
@click.argument("player_b")
@click.argument("football_league")
@click.option("--total-games", type=click.IntRange(min=1), help="Games in the league")
@with_appcontext
def create_league(player_a, player_b, football_league, total_games):
    """Create a league between two players (by name)"""
    a = Player.get_by_name(player_a)
    b = Player.get_by_name(player_b)
    if not a or not b:
        click.echo(f"❌ Player '{player_a if not a else player_b}' not found!")
        return

    try:
        new_league = league_service.create_league(a.id, b.id, football_league, total_games)
        click.echo(
            f"✅ Created league '{new_league.name}' "
            f"({a.name} vs {b.name}, {new_league.total_games} games)"
        )
    except LeagueServiceError as e:
        click.echo(f"❌ {e}")
    except SQLAlchemyError as e:
        click.echo(f"❌ Database error creating league: {str(e)}")


@league.command("list")
@click.option("--status", type=click.Choice(["active", "finished"]))
@with_appcontext
def list_leagues(status):
    """List leagues"""
    query = League.query
    if status:
        query = query.filter_by(status=status)
    leagues = query.order_by(League.created_at.desc()).all()

    if not leagues:
        click.echo("No leagues found.")
        return

    click.echo("Leagues:")
    for lg in leagues:
        state = "🟢 ACTIVE" if lg.is_active else "🏁 Finished"
        champion = f" - Champion: {lg.champion.name}" if lg.champion else ""
        click.echo(
            f"  {lg.id}: {lg.name} {state} "
            f"({lg.games.count()}/{lg.total_games} games){champion}"
        )


@league.command("standings")
@click.argument("league_id", type=int)
@with_appcontext
def show_standings(league_id):
    """Print the league table"""
    lg = db.session.get(League, league_id)
    if not lg:
        click.echo(f"❌ League {league_id} not found!")
        return

    click.echo(f"{lg.name} ({lg.status})")
    click.echo(f"{'Player':<20} {'P':>3} {'W':>3} {'D':>3} {'L':>3} {'GF':>4} {'GA':>4} {'GD':>4} {'Pts':>4} {'xPts':>5}")
    for row in lg.get_standings():
        click.echo(
            f"{row['user_name'] or row['user_id']:<20} {row['played']:>3} {row['wins']:>3} "
            f"{row['draws']:>3} {row['losses']:>3} {row['goals_for']:>4} "
            f"{row['goals_against']:>4} {row['goal_difference']:>4} "
            f"{row['points']:>4} {row['x_pts']:>5}"
        )


@league.command("refresh")
@click.argument("league_id", type=int)
@with_appcontext
def refresh_league(league_id):
    """Re-evaluate a league's finished state and champion"""
    try:
        state = league_service.refresh_league(league_id)
    except LeagueServiceError as e:
        click.echo(f"❌ {e}")
        return
    click.echo(
        f"✅ League {league_id}: {state['status']}, champion {state['champion_id']}, "
        f"{state['remaining_games']} games remaining"
    )


# Prize Money Commands
@cli.group()
def money():
    """Prize money commands"""
    pass


@money.command("recalculate")
@with_appcontext
def recalculate_money():
    """Replay every game and rebuild all prize money balances"""
    try:
        changed = league_service.recalculate_prize_money()
    except SQLAlchemyError as e:
        click.echo(f"❌ Database error recalculating prize money: {str(e)}")
        return

    if not changed:
        click.echo("✅ All balances already match the game history")
        return

    for p, old_balance, new_balance in changed:
        click.echo(f"   🔧 {p.name}: £{old_balance} -> £{new_balance}")
    click.echo(f"✅ Corrected {len(changed)} balance(s)")


# Database Commands
@cli.group()
def db_cmd():
    """Database commands"""
    pass


@db_cmd.command()
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


@db_migrate.command()
@click.option("--revision", required=True, help="Revision to downgrade to")
@with_appcontext
def rollback_migration(revision):
    """Rollback migrations to specific revision"""
    downgrade(revision=revision)
    click.echo(f"✅ Rolled back to {revision}")


# Info Commands
@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("⚽ FIFA League Tracker Status")
    click.echo("=" * 40)

    try:
        db.session.execute(text("SELECT 1"))
        click.echo("✅ Database: Connected")
    except SQLAlchemyError as e:
        click.echo(f"❌ Database: Error - {str(e)}")
        return

    click.echo(f"👥 Players: {Player.query.count()}")
    active = League.query.filter_by(status="active").count()
    finished = League.query.filter_by(status="finished").count()
    click.echo(f"🏆 Leagues: {active} active, {finished} finished")
    click.echo(f"⚽ Games: {Game.query.count()}")


def main():
    app = create_app()
    with app.app_context():
        cli()


if __name__ == "__main__":
    main()
