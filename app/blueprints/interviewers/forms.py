from wtforms import StringField, IntegerField
from wtforms.validators import DataRequired, InputRequired, Optional, Email, Length
from ...utils.http import JsonForm


class InterviewerForm(JsonForm):
    year = IntegerField("Year", validators=[InputRequired()])
    name = StringField("Name", validators=[DataRequired(), Length(max=120)])
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=254)])
    institution = StringField("Institution", validators=[Optional(), Length(max=200)])
    specialty = StringField("Specialty", validators=[Optional(), Length(max=200)])


class InterviewerUpdateForm(JsonForm):
    name = StringField("Name", validators=[Optional(), Length(max=120)])
    email = StringField("Email", validators=[Optional(), Email(), Length(max=254)])
    institution = StringField("Institution", validators=[Optional(), Length(max=200)])
    specialty = StringField("Specialty", validators=[Optional(), Length(max=200)])
