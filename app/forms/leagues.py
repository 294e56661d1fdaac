from flask_wtf import FlaskForm
from wtforms import IntegerField, StringField
from wtforms.validators import (
    DataRequired,
    InputRequired,
    Length,
    NumberRange,
    Optional,
    Regexp,
    ValidationError,
)


def clean_name(text):
    """Trim surrounding whitespace from free-text names"""
    if not text:
        return text
    return text.strip()


class PlayerForm(FlaskForm):
    class Meta:
        csrf = False

    name = StringField(
        "Player Name",
        validators=[
            DataRequired(),
            Length(min=2, max=80, message="Name must be between 2 and 80 characters"),
            Regexp(r"^[a-zA-Z0-9 _.-]+$", message="Name contains invalid characters"),
        ],
        filters=[clean_name],
    )


class CreateLeagueForm(FlaskForm):
    class Meta:
        csrf = False

    player_a_id = IntegerField("Player A", validators=[InputRequired()])
    player_b_id = IntegerField("Opponent", validators=[InputRequired()])
    football_league = StringField(
        "Football League",
        validators=[DataRequired(), Length(max=100)],
        filters=[clean_name],
    )
    total_games = IntegerField(
        "Total Games",
        validators=[
            Optional(),
            NumberRange(min=1, max=100, message="Total games must be between 1 and 100"),
        ],
    )

    def validate_player_b_id(self, field):
        if field.data is not None and field.data == self.player_a_id.data:
            raise ValidationError("Choose an opponent other than yourself")
