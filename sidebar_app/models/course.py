"""Course, section and activity models."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.sql import func

from ..db_instance import db


class Course(db.Model):
    """A course and its format settings."""

    __tablename__ = 'courses'

    GROUPMODE_NONE = 0
    GROUPMODE_SEPARATE = 1
    GROUPMODE_VISIBLE = 2

    course_id = db.Column(db.Integer, primary_key=True)
    shortname = db.Column(db.String(100), nullable=False)
    fullname = db.Column(db.String(255), nullable=False)
    format = db.Column(db.String(50), default='topics', nullable=False)
    # Number of sections the course format displays; anything above is orphaned.
    num_sections = db.Column(db.Integer, default=1, nullable=False)
    group_mode = db.Column(db.Integer, default=GROUPMODE_NONE, nullable=False)
    group_mode_force = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    sections = db.relationship(
        'CourseSection',
        backref='course',
        lazy=True,
        order_by='CourseSection.section',
        cascade='all, delete-orphan',
    )

    def __repr__(self):
        return f"<Course {self.course_id}: {self.shortname}>"


class CourseSection(db.Model):
    """A numbered content grouping inside a course."""

    __tablename__ = 'course_sections'

    FORMAT_HTML = 1

    section_id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey('courses.course_id'), nullable=False)
    section = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(255), nullable=True)
    summary = db.Column(db.Text, nullable=True)
    summary_format = db.Column(db.Integer, default=FORMAT_HTML, nullable=False)
    visible = db.Column(db.Boolean, default=True, nullable=False)
    # Ordered activity ids, kept in sync by the activity kernel service.
    sequence = db.Column(db.JSON, nullable=True)

    activities = db.relationship('Activity', backref='section', lazy=True)

    __table_args__ = (
        db.UniqueConstraint('course_id', 'section', name='uq_course_section_number'),
    )

    @property
    def ordered_activity_ids(self) -> list[int]:
        """Activity ids in display order, falling back to insertion order."""

        known = {activity.cm_id for activity in self.activities}
        ordered = [cm_id for cm_id in (self.sequence or []) if cm_id in known]
        ordered.extend(sorted(known.difference(ordered)))
        return ordered

    def __repr__(self):
        return f"<CourseSection {self.section_id}: course={self.course_id} section={self.section}>"


class ActivityType(db.Model):
    """An installed activity or resource type (page, url, forum...)."""

    __tablename__ = 'activity_types'

    module_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    full_name = db.Column(db.String(100), nullable=False)
    plural_name = db.Column(db.String(100), nullable=False)
    icon = db.Column(db.String(255), nullable=True)
    is_resource = db.Column(db.Boolean, default=False, nullable=False)
    visible = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<ActivityType {self.name}>"


class Activity(db.Model):
    """An activity or resource placed in a course section."""

    __tablename__ = 'course_modules'

    cm_id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey('courses.course_id'), nullable=False)
    section_id = db.Column(db.Integer, db.ForeignKey('course_sections.section_id'), nullable=False)
    module_id = db.Column(db.Integer, db.ForeignKey('activity_types.module_id'), nullable=False)
    instance = db.Column(db.Integer, nullable=True)
    name = db.Column(db.String(255), nullable=False)
    url = db.Column(db.String(512), nullable=True)
    content = db.Column(db.Text, nullable=True)
    # Extra link attributes, {name: value}
    extra = db.Column(db.JSON, nullable=True)
    visible = db.Column(db.Boolean, default=True, nullable=False)
    indent = db.Column(db.Integer, default=0, nullable=False)
    group_mode = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    module_type = db.relationship('ActivityType', lazy='joined')
    course = db.relationship('Course', lazy=True)

    @property
    def modname(self) -> str:
        return self.module_type.name

    @property
    def icon_url(self) -> Optional[str]:
        if self.module_type.icon:
            return self.module_type.icon
        return f'/static/mod/{self.module_type.name}/icon.svg'

    def __repr__(self):
        return f"<Activity {self.cm_id}: {self.name}>"
