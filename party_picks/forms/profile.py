from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired, Length

from party_picks.forms.parties import strip_filter


class DisplayNameForm(FlaskForm):
    first_name = StringField(
        "Display Name",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Display name is required"),
            Length(min=1, max=50, message="Display name must be 1-50 characters"),
        ],
    )


class AdminLoginForm(FlaskForm):
    password = PasswordField("Admin Password", validators=[DataRequired()])
