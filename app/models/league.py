import logging
from datetime import datetime, timezone

from app import db
from app.utils.standings import (
    STATUS_ACTIVE,
    calculate_league_standings,
    recompute_league_state,
)

logger = logging.getLogger(__name__)


class League(db.Model):
    __tablename__ = "leagues"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)  # e.g., "3 - Premier League"
    football_league = db.Column(db.String(100), nullable=False)
    total_games = db.Column(db.Integer, nullable=False, default=10)

    # The two competing players
    player_a_id = db.Column(db.Integer, db.ForeignKey("players.id"), nullable=False)
    player_b_id = db.Column(db.Integer, db.ForeignKey("players.id"), nullable=False)

    # Status
    status = db.Column(db.String(20), nullable=False, default=STATUS_ACTIVE)
    champion_id = db.Column(
        db.Integer, db.ForeignKey("players.id"), nullable=True
    )  # Null while undecided or on a tie

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    player_a = db.relationship("Player", foreign_keys=[player_a_id])
    player_b = db.relationship("Player", foreign_keys=[player_b_id])
    champion = db.relationship("Player", foreign_keys=[champion_id])
    games = db.relationship(
        "Game", backref="league", lazy="dynamic", cascade="all, delete-orphan"
    )

    __table_args__ = (
        db.Index("idx_league_status", "status"),
        db.CheckConstraint("player_a_id != player_b_id", name="different_players"),
        db.CheckConstraint("total_games > 0", name="positive_total_games"),
    )

    def __repr__(self):
        return f"<League {self.name} ({self.status})>"

    @property
    def is_active(self):
        return self.status == STATUS_ACTIVE

    @property
    def is_complete(self):
        """All configured games have been played"""
        return self.games.count() >= self.total_games

    @property
    def accepts_corrections(self):
        """Games can be edited or deleted unless every game has been played"""
        return self.is_active or not self.is_complete

    @staticmethod
    def create_league(player_a_id, player_b_id, football_league, total_games=10):
        """Create a new league named after the running league count"""
        league_count = League.query.count()
        league = League(
            name=f"{league_count + 1} - {football_league}",
            football_league=football_league,
            total_games=total_games,
            player_a_id=player_a_id,
            player_b_id=player_b_id,
            status=STATUS_ACTIVE,
        )
        db.session.add(league)
        return league

    def has_player(self, player_id):
        """Check if a player is one of the two league players"""
        return player_id in (self.player_a_id, self.player_b_id)

    def get_games(self):
        """Get all games in play order"""
        from .game import Game

        return self.games.order_by(Game.played_at, Game.id).all()

    def get_standings(self):
        """Get the sorted two-row league table"""
        return calculate_league_standings(
            self.get_games(),
            self.player_a_id,
            self.player_b_id,
            self.player_a.name if self.player_a else None,
            self.player_b.name if self.player_b else None,
        )

    def refresh_status(self):
        """
        Re-evaluate finished state and champion from all recorded games.

        Called after every game create, edit or delete. Does not commit.
        """
        state = recompute_league_state(
            self.get_games(), self.player_a_id, self.player_b_id, self.total_games
        )

        if state["status"] != self.status or state["champion_id"] != self.champion_id:
            logger.info(
                f"League {self.id} status {self.status} -> {state['status']}, "
                f"champion {self.champion_id} -> {state['champion_id']}"
            )

        self.status = state["status"]
        self.champion_id = state["champion_id"]
        return state

    def to_dict(self, include_standings=False):
        """Convert league to dictionary for API responses"""
        data = {
            "id": self.id,
            "name": self.name,
            "football_league": self.football_league,
            "total_games": self.total_games,
            "games_played": self.games.count(),
            "player_a": self.player_a.to_dict() if self.player_a else None,
            "player_b": self.player_b.to_dict() if self.player_b else None,
            "status": self.status,
            "champion_id": self.champion_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if include_standings:
            data["standings"] = self.get_standings()

        return data
