from app import db
from app.utils.prize_money import MatchStats, calculate_individual_bonuses

STAT_FIELDS = MatchStats._fields


class GamePlayerStats(db.Model):
    """Per-player event tallies for one game, replaced wholesale on edit"""

    __tablename__ = "game_player_stats"

    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey("games.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("players.id"), nullable=False)
    is_home = db.Column(db.Boolean, nullable=False)

    goals = db.Column(db.Integer, nullable=False, default=0)
    hat_tricks = db.Column(db.Integer, nullable=False, default=0)
    outside_box_goals = db.Column(db.Integer, nullable=False, default=0)
    header_goals = db.Column(db.Integer, nullable=False, default=0)
    penalties_missed = db.Column(db.Integer, nullable=False, default=0)
    red_cards = db.Column(db.Integer, nullable=False, default=0)
    xg = db.Column(db.Float, nullable=False, default=0.0)

    player = db.relationship("Player")

    __table_args__ = (
        db.Index("idx_stats_game", "game_id"),
        db.Index("idx_stats_user", "user_id"),
    )

    def __repr__(self):
        return f"<GamePlayerStats game_id={self.game_id} user_id={self.user_id}>"

    def update_from(self, stats):
        """Overwrite every tally from a MatchStats value"""
        for name in STAT_FIELDS:
            setattr(self, name, getattr(stats, name))

    @property
    def individual_bonus(self):
        return calculate_individual_bonuses(self)

    def to_dict(self):
        data = {name: getattr(self, name) for name in STAT_FIELDS}
        data["user_id"] = self.user_id
        data["is_home"] = self.is_home
        data["individual_bonus"] = self.individual_bonus
        return data
