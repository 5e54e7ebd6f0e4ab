from wtforms import StringField, IntegerField, FloatField, SelectField
from wtforms.validators import DataRequired, InputRequired, Optional, Length, NumberRange
from ...models.criterion import CATEGORIES
from ...utils.http import JsonForm

CATEGORY_CHOICES = [(c, c) for c in CATEGORIES]


class CriterionForm(JsonForm):
    year = IntegerField("Year", validators=[InputRequired()])
    name = StringField("Name", validators=[DataRequired(), Length(max=120)])
    display_name = StringField("Display name", validators=[Optional(), Length(max=200)])
    max_points = FloatField("Max points", default=10, validators=[Optional(), NumberRange(min=0)])
    weight = FloatField("Weight", default=1, validators=[Optional(), NumberRange(min=0)])
    category = SelectField("Category", choices=CATEGORY_CHOICES, default="objective")


class CriterionUpdateForm(JsonForm):
    # partial update: only keys present in the body are applied
    name = StringField("Name", validators=[Optional(), Length(max=120)])
    display_name = StringField("Display name", validators=[Optional(), Length(max=200)])
    max_points = FloatField("Max points", validators=[Optional(), NumberRange(min=0)])
    weight = FloatField("Weight", validators=[Optional(), NumberRange(min=0)])
    category = SelectField("Category", choices=CATEGORY_CHOICES, validators=[Optional()], validate_choice=False)
    sort_order = IntegerField("Sort order", validators=[Optional()])
