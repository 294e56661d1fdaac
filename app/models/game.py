from datetime import datetime, timezone

from app import db


class Game(db.Model):
    __tablename__ = "games"

    id = db.Column(db.Integer, primary_key=True)
    league_id = db.Column(db.Integer, db.ForeignKey("leagues.id"), nullable=False)

    # Players and the teams they used
    home_user_id = db.Column(db.Integer, db.ForeignKey("players.id"), nullable=False)
    away_user_id = db.Column(db.Integer, db.ForeignKey("players.id"), nullable=False)
    home_team = db.Column(db.String(100), nullable=False)
    away_team = db.Column(db.String(100), nullable=False)

    # Scores
    home_score = db.Column(db.Integer, nullable=False, default=0)
    away_score = db.Column(db.Integer, nullable=False, default=0)
    home_xg = db.Column(db.Float, nullable=False, default=0.0)
    away_xg = db.Column(db.Float, nullable=False, default=0.0)

    # Prize money applied to each player's balance for this game
    home_prize_money = db.Column(db.Integer, nullable=False, default=0)
    away_prize_money = db.Column(db.Integer, nullable=False, default=0)

    played_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    home_player = db.relationship("Player", foreign_keys=[home_user_id])
    away_player = db.relationship("Player", foreign_keys=[away_user_id])
    player_stats = db.relationship(
        "GamePlayerStats", backref="game", cascade="all, delete-orphan"
    )

    __table_args__ = (
        db.Index("idx_game_league_played", "league_id", "played_at"),
        db.CheckConstraint("home_user_id != away_user_id", name="different_sides"),
    )

    def __repr__(self):
        return f"<Game {self.home_team} {self.home_score}-{self.away_score} {self.away_team}>"

    @property
    def home_stats(self):
        """Stats row for the home player"""
        return next((s for s in self.player_stats if s.is_home), None)

    @property
    def away_stats(self):
        """Stats row for the away player"""
        return next((s for s in self.player_stats if not s.is_home), None)

    @property
    def winner_id(self):
        """Get the winning player id (None on a draw)"""
        if self.home_score > self.away_score:
            return self.home_user_id
        if self.away_score > self.home_score:
            return self.away_user_id
        return None

    def get_prize_money_for(self, player_id):
        """Get the prize money delta this game applied to a player"""
        if player_id == self.home_user_id:
            return self.home_prize_money
        elif player_id == self.away_user_id:
            return self.away_prize_money
        return None

    def to_dict(self):
        """Convert game to dictionary for API responses"""
        home_stats = self.home_stats
        away_stats = self.away_stats
        return {
            "id": self.id,
            "league_id": self.league_id,
            "home_user_id": self.home_user_id,
            "away_user_id": self.away_user_id,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "home_xg": self.home_xg,
            "away_xg": self.away_xg,
            "home_prize_money": self.home_prize_money,
            "away_prize_money": self.away_prize_money,
            "winner_id": self.winner_id,
            "home_stats": home_stats.to_dict() if home_stats else None,
            "away_stats": away_stats.to_dict() if away_stats else None,
            "played_at": self.played_at.isoformat() if self.played_at else None,
        }
