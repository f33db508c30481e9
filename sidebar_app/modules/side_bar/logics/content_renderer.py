"""HTML fragments for the side bar activity list."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from flask import url_for
from flask_wtf.csrf import generate_csrf
from markupsafe import escape

from ....core.defaults import get_string
from ....models import Activity, ActivityType, Course, CourseSection
from ....utils.html_sanitizer import sanitize_activity_content
from ..schemas import Clipboard

MOVE_ICON = '/static/pix/t/move.svg'
MOVEHERE_ICON = '/static/pix/movehere.svg'
ATTRIBUTE_NAME = re.compile(r'[a-zA-Z_:][-a-zA-Z0-9_:.]*')


class ActivityRenderer:
    """Turn activities into list items, icons and editing controls."""

    def content_text(self, activity: Activity) -> str:
        """Markup for an activity without a link target (labels)."""

        body = sanitize_activity_content(activity.content) or escape(activity.name)
        css = 'contentwithoutlink dimmed_text' if not activity.visible else 'contentwithoutlink'
        return f'<div class="{css}">{body}</div>'

    def link(self, activity: Activity, title: str) -> str:
        linkcss = ' class="dimmed"' if not activity.visible else ''
        extra = self.extra_attributes(activity)
        return (
            f'<a title="{escape(title)}"{linkcss}{extra} href="{escape(activity.url)}">'
            f'<span class="instancename">{escape(activity.name)}</span></a>'
        )

    @staticmethod
    def extra_attributes(activity: Activity) -> str:
        """Extra link attributes with escaped values; malformed names are skipped."""

        attributes = []
        for name, value in (activity.extra or {}).items():
            if not ATTRIBUTE_NAME.fullmatch(str(name)):
                continue
            attributes.append(f' {name}="{escape(value)}"')
        return ''.join(attributes)

    def render(self, activity: Activity, title: Optional[str] = None) -> tuple[str, str]:
        """Return ``(item, icon_url)`` for view mode."""

        if not activity.url:
            return self.content_text(activity), ''
        return self.link(activity, title or activity.module_type.plural_name), activity.icon_url

    def edit_buttons(self, activity: Activity, group_mode: Optional[int] = None,
                     group_mode_link: bool = True) -> str:
        """Editing controls for one activity.

        ``group_mode`` is ``None`` when the course has group mode switched off.
        """

        cm_id = activity.cm_id
        buttons = [
            self._button('move', url_for('side_bar.copy_activity', cm_id=cm_id), MOVE_ICON),
            self._button('edit', url_for('side_bar.update_activity', cm_id=cm_id), '/static/pix/t/edit.svg'),
            self._button('delete', url_for('side_bar.delete_activity', cm_id=cm_id), '/static/pix/t/delete.svg'),
        ]
        if activity.visible:
            buttons.append(self._button('hide', url_for('side_bar.toggle_visibility', cm_id=cm_id),
                                        '/static/pix/t/hide.svg'))
        else:
            buttons.append(self._button('show', url_for('side_bar.toggle_visibility', cm_id=cm_id),
                                        '/static/pix/t/show.svg'))

        if group_mode is not None:
            icon = f'/static/pix/t/groupmode{group_mode}.svg'
            if group_mode_link:
                buttons.append(self._button('groupmode', url_for('side_bar.cycle_group_mode', cm_id=cm_id), icon))
            else:
                buttons.append(
                    f'<img src="{icon}" class="iconsmall" alt="{escape(get_string("groupmode"))}" />'
                )

        return '<div class="buttons">' + ''.join(buttons) + '</div>'

    def clipboard_item(self, clipboard: Clipboard) -> tuple[str, str]:
        cancel = url_for('side_bar.cancel_copy')
        item = (
            f'{escape(clipboard.name)}&nbsp;(<a href="{cancel}" data-method="post">'
            f'{escape(get_string("cancel"))}</a>)'
        )
        return item, MOVE_ICON

    def move_target(self, clipboard: Clipboard, before: Optional[Activity] = None,
                    section: Optional[CourseSection] = None) -> str:
        """A "move here" target ahead of ``before`` or at the end of ``section``."""

        if before is not None:
            href = url_for('side_bar.move_activity', moveto=before.cm_id)
        else:
            href = url_for('side_bar.move_activity', movetosection=section.section_id)
        title = get_string('movefull', clipboard.name)
        return (
            f'<a title="{escape(title)}" href="{href}" data-method="post">'
            f'<img style="height:16px; width:80px; border:0px" src="{MOVEHERE_ICON}" '
            f'alt="{escape(get_string("movehere"))}" /></a>'
        )

    def add_menus(self, course: Course, section: CourseSection, activity_types: Iterable[ActivityType]) -> str:
        """Footer menus for adding a resource or an activity to ``section``."""

        resources: List[ActivityType] = []
        activities: List[ActivityType] = []
        for activity_type in activity_types:
            (resources if activity_type.is_resource else activities).append(activity_type)

        action = url_for('side_bar.add_activity', section_id=section.section_id)
        menus = []
        for label, types, css in (
            ('addresource', resources, 'addresourcedropdown'),
            ('addactivity', activities, 'addactivitydropdown'),
        ):
            if not types:
                continue
            options = ''.join(
                f'<option value="{escape(t.name)}">{escape(t.full_name)}</option>' for t in types
            )
            menus.append(
                f'<form class="visibleifjs {css}" action="{action}" method="post">'
                f'<input type="hidden" name="csrf_token" value="{generate_csrf()}" />'
                f'<input type="hidden" name="course_id" value="{course.course_id}" />'
                f'<select name="modname"><option value="">{escape(get_string(label))}</option>{options}</select>'
                f'</form>'
            )
        return f'<div class="section_add_menus">{"".join(menus)}</div>' if menus else ''

    @staticmethod
    def _button(action: str, href: str, icon: str) -> str:
        label = escape(get_string(action))
        return (
            f'<a class="editing_{action}" title="{label}" href="{href}" data-method="post">'
            f'<img src="{icon}" class="iconsmall" alt="{label}" /></a>'
        )
