"""The side bar block: a list of the activities kept in its own course section."""

from __future__ import annotations

from typing import Dict, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ....core.defaults import get_string
from ....core.signals import block_deleted
from ....models import BlockInstance, Course, CourseSection, db
from ....services.activity_service import ActivityKernelService
from ....services.section_service import SectionKernelService
from ..logics.content_renderer import ActivityRenderer
from ..logics.section_allocator import SectionAllocator
from ..schemas import AllocatorConfig, BlockContent, BlockContext

BLOCK_NAME = 'side_bar'


class SideBarBlock:
    """One side bar block instance.

    The block owns a course section, created on first render, and lists the
    activities placed in it. Section allocation and markup are delegated to
    the allocator and renderer it is built with.
    """

    def __init__(self, instance: Optional[BlockInstance],
                 allocator: Optional[SectionAllocator] = None,
                 renderer: Optional[ActivityRenderer] = None,
                 config: Optional[AllocatorConfig] = None) -> None:
        self.instance = instance
        self.allocator = allocator or SectionAllocator()
        self.renderer = renderer or ActivityRenderer()
        self._config = config
        self.content: Optional[BlockContent] = None
        self.title = get_string('pluginname')
        self.specialization()

    @property
    def config(self) -> AllocatorConfig:
        if self._config is None:
            self._config = AllocatorConfig.from_settings()
        return self._config

    # ------------------------------------------------------------------
    # Block capabilities
    # ------------------------------------------------------------------
    def specialization(self) -> None:
        """Use the configured title when one is set."""

        if self.instance is not None and self.instance.get_config('title'):
            self.title = self.instance.get_config('title')

    @staticmethod
    def has_config() -> bool:
        return True

    @staticmethod
    def instance_allow_multiple() -> bool:
        return True

    @staticmethod
    def applicable_formats() -> Dict[str, bool]:
        return {'site-index': True, 'course-view': True}

    # ------------------------------------------------------------------
    # Section bookkeeping
    # ------------------------------------------------------------------
    def _commit_config(self, **values) -> None:
        self.instance.update_config(**values)
        db.session.commit()

    def _allocate_and_bind(self, course: Course) -> Optional[CourseSection]:
        section = self.allocator.allocate(course, self.config)
        if section is None:
            return None
        self._commit_config(section=section.section, section_id=section.section_id)
        return section

    def ensure_section(self, course: Course) -> Optional[CourseSection]:
        """Return the block's section, creating or re-binding it as needed."""

        number = self.instance.get_config('section')
        section_id = self.instance.get_config('section_id')

        if not number:
            return self._allocate_and_bind(course)

        if not section_id:
            section = SectionKernelService.get_section(course.course_id, number)
            if section is None:
                return self._allocate_and_bind(course)
            self._commit_config(section_id=section.section_id)
        else:
            section = SectionKernelService.get_section_by_id(section_id)
            if section is None or section.course_id != course.course_id:
                return self._allocate_and_bind(course)

        if section.section != number:
            section = self._restore_number(section, number)
        return section

    def _restore_number(self, section: CourseSection, number: int) -> CourseSection:
        """Put a section moved by course editing back at the configured number."""

        section_id = section.section_id
        try:
            SectionKernelService.renumber_section(section, number)
            db.session.commit()
            current_app.logger.info("Restored side bar section %s to number %s", section_id, number)
            return section
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.warning(
                "Section number %s is taken, keeping section %s where it is: %s", number, section_id, exc
            )
            section = SectionKernelService.get_section_by_id(section_id)
            self._commit_config(section=section.section)
            return section

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------
    def get_content(self, ctx: BlockContext) -> BlockContent:
        if self.content is not None:
            return self.content

        self.content = BlockContent()
        if self.instance is None:
            return self.content

        course = ctx.course
        section = self.ensure_section(course)
        if section is None:
            return self.content

        if not ctx.can_manage:
            self._render_view(ctx, section)
        else:
            self._render_editing(ctx, section)
        return self.content

    def _user_visible(self, ctx: BlockContext, activity) -> bool:
        return activity.visible or ctx.has_capability('course:viewhiddenactivities')

    def _render_view(self, ctx: BlockContext, section: CourseSection) -> None:
        for activity in ActivityKernelService.list_section_activities(section):
            if not self._user_visible(ctx, activity):
                continue
            item, icon = self.renderer.render(activity)
            self.content.add(item, icon)

    def _render_editing(self, ctx: BlockContext, section: CourseSection) -> None:
        course = ctx.course
        clipboard = ctx.clipboard
        renderer = self.renderer

        if clipboard is not None:
            self.content.add(*renderer.clipboard_item(clipboard))

        for activity in ActivityKernelService.list_section_activities(section):
            if not self._user_visible(ctx, activity):
                continue

            if clipboard is None:
                if course.group_mode:
                    group_mode = activity.group_mode if not course.group_mode_force else course.group_mode
                    buttons = renderer.edit_buttons(activity, group_mode, not course.group_mode_force)
                else:
                    buttons = renderer.edit_buttons(activity, None)
            else:
                if activity.cm_id == clipboard.activity_id:
                    continue
                buttons = ''
                self.content.add(renderer.move_target(clipboard, before=activity))

            item, icon = renderer.render(activity, title=activity.module_type.full_name)
            self.content.add(item + buttons, icon)

        if clipboard is not None:
            self.content.add(renderer.move_target(clipboard, section=section))

        activity_types = ActivityKernelService.list_activity_types()
        if activity_types:
            self.content.footer = renderer.add_menus(course, section, activity_types)

    # ------------------------------------------------------------------
    # Lifecycle hooks
    # ------------------------------------------------------------------
    def instance_delete(self) -> bool:
        """Remove the block's section and every activity placed in it."""

        if self.instance is None or self.instance.get_config('section') is None:
            return True

        course_id = self.instance.course_id
        section = None
        if self.instance.get_config('section_id'):
            section = SectionKernelService.get_section_by_id(self.instance.get_config('section_id'))
        if section is None:
            section = SectionKernelService.get_section(course_id, self.instance.get_config('section'))
        if section is None:
            return True

        section_id = section.section_id
        activities = ActivityKernelService.list_section_activities(section)
        for activity in activities:
            ActivityKernelService.delete_activity(activity)
        SectionKernelService.delete_section(section)
        db.session.commit()

        current_app.logger.info(
            "Deleted side bar section %s and %s activities from course %s", section_id, len(activities), course_id
        )
        block_deleted.send(
            self,
            block_id=self.instance.block_id,
            course_id=course_id,
            section_id=section_id,
            deleted_activities=len(activities),
        )
        return True

    def after_restore(self) -> bool:
        """Point the block at the section carrying its number in the restored course."""

        number = self.instance.get_config('section')
        if not number:
            return True

        section = SectionKernelService.get_section(self.instance.course_id, number)
        if section is not None:
            self._commit_config(section_id=section.section_id)
        return True
