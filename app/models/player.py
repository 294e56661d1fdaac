from datetime import datetime, timezone

from app import db


class Player(db.Model):
    __tablename__ = "players"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), unique=True, nullable=False, index=True)

    # Running prize money balance, moved only by game deltas
    prize_money = db.Column(db.Integer, nullable=False, default=0)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<Player {self.name}>"

    @staticmethod
    def get_by_name(name):
        """Get a player by unique name"""
        return Player.query.filter_by(name=name).first()

    def get_games(self):
        """Get every game this player took part in, newest first"""
        from .game import Game

        return (
            Game.query.filter(
                db.or_(Game.home_user_id == self.id, Game.away_user_id == self.id)
            )
            .order_by(Game.played_at.desc())
            .all()
        )

    def get_career_stats(self):
        """Career totals across every league"""
        from app.utils.standings import calculate_career_stats

        stats = calculate_career_stats(self.get_games(), self.id)
        stats["prize_money"] = self.prize_money
        return stats

    def apply_prize_money(self, amount):
        """
        Add a signed delta to the running balance.

        The addition runs inside the UPDATE statement rather than on the
        loaded value, and the stale attribute is expired.
        """
        Player.query.filter_by(id=self.id).update(
            {Player.prize_money: Player.prize_money + amount},
            synchronize_session=False,
        )
        db.session.expire(self, ["prize_money"])

    def to_dict(self):
        """Convert player to dictionary for API responses"""
        return {
            "id": self.id,
            "name": self.name,
            "prize_money": self.prize_money,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
