from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Email
from ...utils.http import JsonForm


class LoginForm(JsonForm):
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])
