from flask_wtf import FlaskForm
from wtforms import DateTimeField, FloatField, FormField, IntegerField, StringField
from wtforms import Form as BaseForm
from wtforms.validators import (
    DataRequired,
    InputRequired,
    Length,
    NumberRange,
    Optional,
    ValidationError,
)

from app.forms.leagues import clean_name

non_negative = NumberRange(min=0, message="Must be zero or more")


class StatsForm(BaseForm):
    """Per-player event tallies for one game"""

    goals = IntegerField("Goals", validators=[Optional(), non_negative], default=0)
    hat_tricks = IntegerField(
        "Hat Tricks", validators=[Optional(), non_negative], default=0
    )
    outside_box_goals = IntegerField(
        "Outside Box Goals", validators=[Optional(), non_negative], default=0
    )
    header_goals = IntegerField(
        "Header Goals", validators=[Optional(), non_negative], default=0
    )
    penalties_missed = IntegerField(
        "Penalties Missed", validators=[Optional(), non_negative], default=0
    )
    red_cards = IntegerField("Red Cards", validators=[Optional(), non_negative], default=0)
    xg = FloatField("xG", validators=[Optional(), non_negative], default=0.0)


class GameForm(FlaskForm):
    class Meta:
        csrf = False

    home_user_id = IntegerField("Home Player", validators=[InputRequired()])
    away_user_id = IntegerField("Away Player", validators=[InputRequired()])
    home_team = StringField(
        "Home Team",
        validators=[DataRequired(), Length(max=100)],
        filters=[clean_name],
    )
    away_team = StringField(
        "Away Team",
        validators=[DataRequired(), Length(max=100)],
        filters=[clean_name],
    )
    home_score = IntegerField("Home Score", validators=[InputRequired(), non_negative])
    away_score = IntegerField("Away Score", validators=[InputRequired(), non_negative])
    home_xg = FloatField("Home xG", validators=[Optional(), non_negative], default=0.0)
    away_xg = FloatField("Away xG", validators=[Optional(), non_negative], default=0.0)
    home_stats = FormField(StatsForm)
    away_stats = FormField(StatsForm)
    played_at = DateTimeField(
        "Played At",
        validators=[Optional()],
        format=["%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M:%S"],
    )

    def validate_away_user_id(self, field):
        if field.data is not None and field.data == self.home_user_id.data:
            raise ValidationError("Home and away player must be different")

    def to_game_data(self):
        """Validated data in the shape the league service expects"""
        data = {
            "home_user_id": self.home_user_id.data,
            "away_user_id": self.away_user_id.data,
            "home_team": self.home_team.data,
            "away_team": self.away_team.data,
            "home_score": self.home_score.data,
            "away_score": self.away_score.data,
            "home_xg": self.home_xg.data or 0.0,
            "away_xg": self.away_xg.data or 0.0,
            "home_stats": self.home_stats.data,
            "away_stats": self.away_stats.data,
        }
        if self.played_at.data:
            data["played_at"] = self.played_at.data
        return data
