from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length


def strip_filter(value):
    return value.strip() if isinstance(value, str) else value


def upper_filter(value):
    return value.upper() if isinstance(value, str) else value


class CreatePartyForm(FlaskForm):
    name = StringField(
        "Party Name",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Party name is required"),
            Length(max=50, message="Party name cannot exceed 50 characters"),
        ],
    )


class JoinPartyForm(FlaskForm):
    # Malformed codes are rejected by the registry as unknown codes
    invite_code = StringField(
        "Invite Code",
        filters=[strip_filter, upper_filter],
        validators=[DataRequired(message="Invite code is required")],
    )
