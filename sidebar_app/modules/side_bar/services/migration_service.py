from typing import Dict, List, Optional

from flask import current_app

from ....core.defaults import LEGACY_SECTION_NUMBER
from ....models import BlockInstance, Course, CourseSection, db
from ..logics.section_allocator import SectionAllocator
from ..schemas import AllocatorConfig
from .block_service import BLOCK_NAME


class LegacyMigrationService:
    """Move side bar blocks off the fixed legacy section number."""

    @staticmethod
    def find_legacy_blocks(legacy_number: int = LEGACY_SECTION_NUMBER,
                           course_id: Optional[int] = None) -> List[BlockInstance]:
        query = BlockInstance.query.filter_by(block_name=BLOCK_NAME)
        if course_id is not None:
            query = query.filter_by(course_id=course_id)
        blocks = query.order_by(BlockInstance.block_id).all()
        return [block for block in blocks if block.get_config('section') == legacy_number]

    @staticmethod
    def migrate_course(course: Course, legacy_number: int = LEGACY_SECTION_NUMBER,
                       allocator: Optional[SectionAllocator] = None,
                       config: Optional[AllocatorConfig] = None) -> Optional[CourseSection]:
        """Migrate the legacy section of one course and rebind its blocks.

        Blocks of the course shared the legacy section, so they all end up
        bound to the one migrated section.
        """

        allocator = allocator or SectionAllocator()
        section = allocator.migrate(course, legacy_number, config)
        if section is None:
            return None

        blocks = LegacyMigrationService.find_legacy_blocks(legacy_number, course_id=course.course_id)
        for block in blocks:
            block.update_config(section=section.section, section_id=section.section_id)
        db.session.commit()

        current_app.logger.info(
            "Rebound %s side bar blocks of course %s to section %s", len(blocks), course.course_id, section.section
        )
        return section

    @staticmethod
    def migrate_legacy_blocks(legacy_number: int = LEGACY_SECTION_NUMBER,
                              allocator: Optional[SectionAllocator] = None,
                              config: Optional[AllocatorConfig] = None) -> List[Dict[str, Optional[int]]]:
        """Migrate every block still pointing at ``legacy_number``."""

        allocator = allocator or SectionAllocator()
        config = config or AllocatorConfig.from_settings()
        migrated: Dict[int, Optional[CourseSection]] = {}
        results = []

        for block in LegacyMigrationService.find_legacy_blocks(legacy_number):
            if block.course_id not in migrated:
                migrated[block.course_id] = LegacyMigrationService.migrate_course(
                    block.course, legacy_number, allocator, config
                )

            section = migrated[block.course_id]
            if section is None:
                current_app.logger.info(
                    "Block %s: no legacy section %s in course %s", block.block_id, legacy_number, block.course_id
                )
            results.append({
                'block_id': block.block_id,
                'course_id': block.course_id,
                'section': section.section if section is not None else None,
            })

        return results
