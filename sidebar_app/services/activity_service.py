"""Activity (course module) storage, movement and per-type deletion."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from flask import current_app

from ..models import Activity, ActivityType, CourseSection, db

# modname -> callable(instance_id) removing the type-specific instance data
DELETE_HANDLERS: Dict[str, Callable[[Optional[int]], None]] = {}

DEFAULT_ACTIVITY_TYPES = [
    {'name': 'page', 'full_name': 'Page', 'plural_name': 'Pages', 'is_resource': True},
    {'name': 'url', 'full_name': 'URL', 'plural_name': 'URLs', 'is_resource': True},
    {'name': 'label', 'full_name': 'Label', 'plural_name': 'Labels', 'is_resource': True},
    {'name': 'resource', 'full_name': 'File', 'plural_name': 'Files', 'is_resource': True},
    {'name': 'forum', 'full_name': 'Forum', 'plural_name': 'Forums', 'is_resource': False},
    {'name': 'quiz', 'full_name': 'Quiz', 'plural_name': 'Quizzes', 'is_resource': False},
    {'name': 'assign', 'full_name': 'Assignment', 'plural_name': 'Assignments', 'is_resource': False},
]


def register_delete_handler(modname: str, handler: Callable[[Optional[int]], None]) -> None:
    """Register the instance cleanup callback for an activity type."""

    DELETE_HANDLERS[modname] = handler


def ensure_default_activity_types() -> None:
    """Install the built-in activity types when they are missing."""

    created = False
    for payload in DEFAULT_ACTIVITY_TYPES:
        if ActivityType.query.filter_by(name=payload['name']).first():
            continue
        db.session.add(ActivityType(**payload))
        created = True
    if created:
        db.session.commit()


class ActivityKernelService:
    @staticmethod
    def get_activity(cm_id: int) -> Optional[Activity]:
        return db.session.get(Activity, cm_id)

    @staticmethod
    def get_activity_type(name: str) -> Optional[ActivityType]:
        return ActivityType.query.filter_by(name=name).first()

    @staticmethod
    def list_activity_types(visible_only: bool = True) -> List[ActivityType]:
        query = ActivityType.query
        if visible_only:
            query = query.filter_by(visible=True)
        return query.order_by(ActivityType.name).all()

    @staticmethod
    def list_section_activities(section: CourseSection) -> List[Activity]:
        by_id = {activity.cm_id: activity for activity in section.activities}
        return [by_id[cm_id] for cm_id in section.ordered_activity_ids]

    @staticmethod
    def create_activity(section: CourseSection, modname: str, name: str, url: Optional[str] = None,
                        content: Optional[str] = None, visible: bool = True,
                        instance: Optional[int] = None) -> Activity:
        activity_type = ActivityKernelService.get_activity_type(modname)
        if activity_type is None:
            raise ValueError(f"Unknown activity type '{modname}'")

        activity = Activity(
            course_id=section.course_id,
            section=section,
            module_id=activity_type.module_id,
            instance=instance,
            name=name,
            url=url,
            content=content,
            visible=visible,
        )
        db.session.add(activity)
        db.session.flush()
        section.sequence = list(section.sequence or []) + [activity.cm_id]
        return activity

    @staticmethod
    def delete_activity(activity: Activity) -> None:
        handler = DELETE_HANDLERS.get(activity.modname)
        if handler is not None:
            handler(activity.instance)
        else:
            current_app.logger.debug("No delete handler for %s, removing course module only", activity.modname)

        section = activity.section
        if section is not None and section.sequence:
            section.sequence = [cm_id for cm_id in section.sequence if cm_id != activity.cm_id]
        db.session.delete(activity)
        db.session.flush()

    @staticmethod
    def move_activity(activity: Activity, target: CourseSection, before: Optional[Activity] = None) -> Activity:
        """Move ``activity`` into ``target``, ahead of ``before`` or at the end."""

        source = activity.section
        if source is not None:
            source.sequence = [cm_id for cm_id in source.ordered_activity_ids if cm_id != activity.cm_id]

        sequence = [cm_id for cm_id in target.ordered_activity_ids if cm_id != activity.cm_id]
        if before is not None and before.cm_id in sequence:
            sequence.insert(sequence.index(before.cm_id), activity.cm_id)
        else:
            sequence.append(activity.cm_id)

        activity.section_id = target.section_id
        activity.section = target
        target.sequence = sequence
        db.session.flush()
        return activity
