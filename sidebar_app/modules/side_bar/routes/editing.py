"""Editing endpoints targeted by the controls in the side bar list."""

from flask import current_app, jsonify, request
from flask_login import login_required

from ....core.error_handlers import ValidationError, success_response
from ....core.signals import activity_moved
from ....models import Course, db
from ....services.activity_service import ActivityKernelService
from .. import blueprint
from ..forms import ActivityForm
from ..interface import get_clipboard, set_clipboard
from ..schemas import Clipboard
from ._helpers import get_activity_or_404, get_section_or_404, require_capability


@blueprint.route('/activities/<int:cm_id>/copy', methods=['POST'])
@login_required
def copy_activity(cm_id):
    """Put an activity on the move clipboard."""
    require_capability('course:manageactivities')
    activity = get_activity_or_404(cm_id)
    set_clipboard(Clipboard(activity_id=activity.cm_id, name=activity.name))
    return jsonify(success_response({'activity_id': activity.cm_id}))


@blueprint.route('/activities/cancel-copy', methods=['POST'])
@login_required
def cancel_copy():
    set_clipboard(None)
    return jsonify(success_response(message='Move cancelled'))


@blueprint.route('/activities/move', methods=['POST'])
@login_required
def move_activity():
    """Move the clipboard activity before ``moveto`` or to the end of ``movetosection``."""
    require_capability('course:manageactivities')

    clipboard = get_clipboard()
    if clipboard is None:
        raise ValidationError('No activity is being moved')
    activity = get_activity_or_404(clipboard.activity_id)

    moveto = request.args.get('moveto', type=int)
    movetosection = request.args.get('movetosection', type=int)
    if moveto is not None:
        before = get_activity_or_404(moveto)
        target = before.section
    elif movetosection is not None:
        before = None
        target = get_section_or_404(movetosection)
    else:
        raise ValidationError('A moveto or movetosection target is required')

    if target.course_id != activity.course_id:
        raise ValidationError('Activities can only be moved within their course')

    from_section_id = activity.section_id
    ActivityKernelService.move_activity(activity, target, before=before)
    db.session.commit()
    set_clipboard(None)

    activity_moved.send(
        None,
        activity_id=activity.cm_id,
        from_section_id=from_section_id,
        to_section_id=target.section_id,
        before_id=before.cm_id if before is not None else None,
    )
    return jsonify(success_response({'activity_id': activity.cm_id, 'section_id': target.section_id}))


@blueprint.route('/sections/<int:section_id>/activities', methods=['POST'])
@login_required
def add_activity(section_id):
    require_capability('course:manageactivities')
    section = get_section_or_404(section_id)

    form = ActivityForm()
    if not form.validate():
        raise ValidationError(errors=form.errors)
    if ActivityKernelService.get_activity_type(form.modname.data or '') is None:
        raise ValidationError(errors={'modname': ['Unknown activity type.']})

    activity = ActivityKernelService.create_activity(
        section,
        form.modname.data,
        form.name.data,
        url=form.url.data or None,
        content=form.content.data or None,
    )
    db.session.commit()
    current_app.logger.info("Added %s activity %s to section %s", form.modname.data, activity.cm_id, section_id)
    return jsonify(success_response({'activity_id': activity.cm_id}, 'Activity added')), 201


@blueprint.route('/activities/<int:cm_id>/update', methods=['POST'])
@login_required
def update_activity(cm_id):
    require_capability('course:manageactivities')
    activity = get_activity_or_404(cm_id)

    form = ActivityForm()
    if not form.validate():
        raise ValidationError(errors=form.errors)

    activity.name = form.name.data
    activity.url = form.url.data or None
    activity.content = form.content.data or None
    db.session.commit()
    return jsonify(success_response({'activity_id': activity.cm_id}, 'Activity updated'))


@blueprint.route('/activities/<int:cm_id>/delete', methods=['POST'])
@login_required
def delete_activity(cm_id):
    require_capability('course:manageactivities')
    activity = get_activity_or_404(cm_id)

    clipboard = get_clipboard()
    if clipboard is not None and clipboard.activity_id == cm_id:
        set_clipboard(None)

    ActivityKernelService.delete_activity(activity)
    db.session.commit()
    return jsonify(success_response(message='Activity deleted'))


@blueprint.route('/activities/<int:cm_id>/visibility', methods=['POST'])
@login_required
def toggle_visibility(cm_id):
    require_capability('course:manageactivities')
    activity = get_activity_or_404(cm_id)
    activity.visible = not activity.visible
    db.session.commit()
    return jsonify(success_response({'visible': activity.visible}))


@blueprint.route('/activities/<int:cm_id>/groupmode', methods=['POST'])
@login_required
def cycle_group_mode(cm_id):
    """Step through no groups -> separate groups -> visible groups."""
    require_capability('course:manageactivities')
    activity = get_activity_or_404(cm_id)
    if activity.course.group_mode_force:
        raise ValidationError('Group mode is forced at course level')

    activity.group_mode = (activity.group_mode + 1) % (Course.GROUPMODE_VISIBLE + 1)
    db.session.commit()
    return jsonify(success_response({'group_mode': activity.group_mode}))
