from typing import Any, Dict, List, Optional

from flask import session
from flask_login import current_user

from ...models import BlockInstance, Course, CourseSection
from .logics.section_allocator import SectionAllocator
from .schemas import AllocatorConfig, BlockContext, Clipboard
from .services.block_service import SideBarBlock
from .services.migration_service import LegacyMigrationService

CLIPBOARD_KEY = 'side_bar_activity_copy'
EDITING_KEY = 'side_bar_editing'


def create_section(course: Any, config: Optional[AllocatorConfig] = None) -> Optional[CourseSection]:
    """Allocate a new side bar section for ``course``."""
    return SectionAllocator().allocate(course, config)


def migrate_old_section(course: Any, section_number: Any,
                        config: Optional[AllocatorConfig] = None) -> Optional[CourseSection]:
    """Move a legacy side bar section to its new position."""
    return SectionAllocator().migrate(course, section_number, config)


def migrate_course_blocks(course: Any, section_number: Any,
                          config: Optional[AllocatorConfig] = None) -> Optional[CourseSection]:
    """Migrate a course's legacy section and point its side bar blocks at the result."""
    return LegacyMigrationService.migrate_course(course, section_number, config=config)


def migrate_legacy_blocks(legacy_number: Optional[int] = None) -> List[Dict[str, Optional[int]]]:
    if legacy_number is None:
        return LegacyMigrationService.migrate_legacy_blocks()
    return LegacyMigrationService.migrate_legacy_blocks(legacy_number)


def get_clipboard() -> Optional[Clipboard]:
    payload = session.get(CLIPBOARD_KEY)
    if not payload:
        return None
    return Clipboard(activity_id=payload['activity_id'], name=payload['name'])


def set_clipboard(clipboard: Optional[Clipboard]) -> None:
    if clipboard is None:
        session.pop(CLIPBOARD_KEY, None)
    else:
        session[CLIPBOARD_KEY] = {'activity_id': clipboard.activity_id, 'name': clipboard.name}


def build_context(course: Course) -> BlockContext:
    """Block context for the current request."""
    user = current_user if current_user.is_authenticated else None
    return BlockContext(
        course=course,
        user=user,
        is_editing=bool(session.get(EDITING_KEY)),
        clipboard=get_clipboard(),
    )


def render_block(block: BlockInstance) -> Dict[str, Any]:
    side_bar = SideBarBlock(block)
    content = side_bar.get_content(build_context(block.course))
    return {'block_id': block.block_id, 'title': side_bar.title, **content.to_dict()}
