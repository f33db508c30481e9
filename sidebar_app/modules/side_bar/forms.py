# File: sidebar_app/modules/side_bar/forms.py

from flask_wtf import FlaskForm
from wtforms import IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NumberRange, Optional, URL


class BlockConfigForm(FlaskForm):
    """Per-instance settings of a side bar block."""
    title = StringField('Block title', validators=[Optional(), Length(max=255)])


class SectionStartForm(FlaskForm):
    """Site-wide first section number for side bar sections."""
    section_start = IntegerField(
        'First side bar section number',
        validators=[DataRequired(), NumberRange(min=1, message='Must be a positive integer.')],
    )


class ActivityForm(FlaskForm):
    """Add or edit an activity in a side bar section."""
    modname = StringField('Type', validators=[Optional(), Length(max=50)])
    name = StringField('Name', validators=[DataRequired(message='Name is required.'), Length(max=255)])
    url = StringField('URL', validators=[Optional(), URL(require_tld=False), Length(max=512)])
    content = TextAreaField('Content', validators=[Optional()])
