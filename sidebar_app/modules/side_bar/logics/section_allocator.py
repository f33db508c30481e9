"""Allocation of course section numbers for side bar sections.

Side bar sections live above the numbers a course format displays. New
sections are placed at the configured start number, or directly after the
highest side bar section already present. Legacy sections that were created
at a fixed number are moved down to sit right after the course content,
collapsing the orphaned filler sections that older editing left behind.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ....core.defaults import get_string
from ....core.error_handlers import InvalidArgumentError
from ....core.signals import section_created, section_migrated
from ....models import Course, CourseSection, db
from ....services.section_service import SectionKernelService
from ..schemas import AllocatorConfig


def validate_course(course: Any) -> Course:
    if not isinstance(course, Course):
        raise InvalidArgumentError("course must be a Course object", argument="course")
    return course


def validate_section_number(number: Any) -> int:
    # bool is an int subclass but never a section number
    if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
        raise InvalidArgumentError("section number must be a positive integer", argument="section")
    return number


class SectionAllocator:
    def __init__(self, sections=SectionKernelService) -> None:
        self.sections = sections

    def next_number(self, course: Course, config: AllocatorConfig) -> int:
        """First free number at or above ``config.section_start``."""

        highest = self.sections.max_section_number(course.course_id, minimum=config.section_start)
        if highest is None:
            return config.section_start
        return highest + 1

    def allocate(self, course: Any, config: Optional[AllocatorConfig] = None) -> Optional[CourseSection]:
        """Create a new side bar section for ``course``.

        Returns ``None`` when the row could not be stored; callers render
        nothing in that case.
        """

        course = validate_course(course)
        config = config or AllocatorConfig.from_settings()
        number = self.next_number(course, config)

        try:
            section = self.sections.create_section(
                course.course_id,
                number,
                name=get_string('sidebar'),
                summary=get_string('sectionsummary'),
                visible=True,
            )
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error(
                "Could not create side bar section %s for course %s: %s", number, course.course_id, exc
            )
            return None

        current_app.logger.info("Created side bar section %s for course %s", number, course.course_id)
        section_created.send(
            self, course_id=course.course_id, section_id=section.section_id, section_number=section.section
        )
        return section

    def migrate(self, course: Any, section_number: Any,
                config: Optional[AllocatorConfig] = None) -> Optional[CourseSection]:
        """Move the legacy side bar section ``section_number`` after the course content.

        Returns the moved section, or ``None`` when there is nothing to
        migrate or the update failed.
        """

        course = validate_course(course)
        section_number = validate_section_number(section_number)
        config = config or AllocatorConfig.from_settings()

        legacy = self.sections.get_section(course.course_id, section_number)
        if legacy is None:
            return None

        try:
            removed, renumbered = self._collapse_orphans(course, legacy, config)

            highest = self.sections.max_section_number(course.course_id, exclude_id=legacy.section_id)
            target = 1 if highest is None else highest + 1
            self.sections.renumber_section(legacy, target)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error(
                "Could not migrate side bar section %s for course %s: %s", section_number, course.course_id, exc
            )
            return None

        current_app.logger.info(
            "Migrated side bar section %s -> %s for course %s (%s orphans removed, %s renumbered)",
            section_number, target, course.course_id, removed, renumbered,
        )
        section_migrated.send(
            self,
            course_id=course.course_id,
            section_id=legacy.section_id,
            old_number=section_number,
            new_number=target,
            removed_orphans=removed,
            renumbered_orphans=renumbered,
        )
        return legacy

    def _collapse_orphans(self, course: Course, legacy: CourseSection,
                          config: AllocatorConfig) -> Tuple[int, int]:
        """Drop empty orphaned sections and pack the rest after the course content.

        Orphans are numbered above ``course.num_sections`` and below both the
        legacy section and the side bar range, so sections owned by other side
        bar blocks are left alone.
        """

        ceiling = min(legacy.section, config.section_start)
        populated = self.sections.section_ids_with_activities(course.course_id)

        content_top = None
        orphans = []
        for section in self.sections.list_sections(course.course_id):
            if section.section_id == legacy.section_id:
                continue
            if section.section <= course.num_sections:
                content_top = section.section
            elif section.section < ceiling:
                orphans.append(section)

        removed = 0
        kept = []
        for section in orphans:
            if section.section_id in populated:
                kept.append(section)
            else:
                self.sections.delete_section(section)
                removed += 1

        next_number = (course.num_sections if content_top is None else content_top) + 1
        renumbered = 0
        for section in kept:
            if section.section != next_number:
                self.sections.renumber_section(section, next_number)
                renumbered += 1
            next_number += 1

        return removed, renumbered
