from typing import List, Optional, Set

from sqlalchemy import func

from ..models import Activity, CourseSection, db


class SectionKernelService:
    """CRUD access to course sections. Callers own the transaction."""

    @staticmethod
    def get_section_by_id(section_id: int) -> Optional[CourseSection]:
        return db.session.get(CourseSection, section_id)

    @staticmethod
    def get_section(course_id: int, number: int) -> Optional[CourseSection]:
        return CourseSection.query.filter_by(course_id=course_id, section=number).first()

    @staticmethod
    def list_sections(course_id: int) -> List[CourseSection]:
        return CourseSection.query.filter_by(course_id=course_id).order_by(CourseSection.section).all()

    @staticmethod
    def max_section_number(course_id: int, minimum: Optional[int] = None,
                           exclude_id: Optional[int] = None) -> Optional[int]:
        """Highest section number in the course, optionally only counting numbers >= ``minimum``."""
        query = db.session.query(func.max(CourseSection.section)).filter(CourseSection.course_id == course_id)
        if minimum is not None:
            query = query.filter(CourseSection.section >= minimum)
        if exclude_id is not None:
            query = query.filter(CourseSection.section_id != exclude_id)
        return query.scalar()

    @staticmethod
    def create_section(course_id: int, number: int, name: Optional[str] = None,
                       summary: Optional[str] = None, visible: bool = True) -> CourseSection:
        section = CourseSection(
            course_id=course_id,
            section=number,
            name=name,
            summary=summary,
            summary_format=CourseSection.FORMAT_HTML,
            visible=visible,
            sequence=[],
        )
        db.session.add(section)
        # Flush so the unique (course, section) constraint is checked now
        db.session.flush()
        return section

    @staticmethod
    def renumber_section(section: CourseSection, number: int) -> CourseSection:
        section.section = number
        db.session.flush()
        return section

    @staticmethod
    def section_ids_with_activities(course_id: int) -> Set[int]:
        rows = db.session.query(Activity.section_id).filter(Activity.course_id == course_id).distinct().all()
        return {row[0] for row in rows}

    @staticmethod
    def delete_section(section: CourseSection):
        # Drop any stale collection so deleted activities are not re-parented
        db.session.expire(section, ['activities'])
        db.session.delete(section)
        db.session.flush()
