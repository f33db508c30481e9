from flask_login import current_user

from ....core.error_handlers import AuthorizationError, NotFoundError
from ....models import Activity, BlockInstance, Course, CourseSection, db
from ....services.activity_service import ActivityKernelService
from ....services.section_service import SectionKernelService
from ..services.block_service import BLOCK_NAME


def require_capability(capability: str) -> None:
    if not current_user.has_capability(capability):
        raise AuthorizationError(f'Missing capability {capability}')


def get_course_or_404(course_id: int) -> Course:
    course = db.session.get(Course, course_id)
    if course is None:
        raise NotFoundError(f'Course {course_id} not found', resource='course')
    return course


def get_block_or_404(block_id: int) -> BlockInstance:
    block = db.session.get(BlockInstance, block_id)
    if block is None or block.block_name != BLOCK_NAME:
        raise NotFoundError(f'Block {block_id} not found', resource='block')
    return block


def get_activity_or_404(cm_id: int) -> Activity:
    activity = ActivityKernelService.get_activity(cm_id)
    if activity is None:
        raise NotFoundError(f'Activity {cm_id} not found', resource='activity')
    return activity


def get_section_or_404(section_id: int) -> CourseSection:
    section = SectionKernelService.get_section_by_id(section_id)
    if section is None:
        raise NotFoundError(f'Section {section_id} not found', resource='section')
    return section
