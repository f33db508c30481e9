from flask import jsonify, request, session
from flask_login import current_user, login_required

from ....core.defaults import LEGACY_SECTION_NUMBER
from ....core.error_handlers import ValidationError, success_response
from ....models import BlockInstance, db
from ....services.config_service import get_section_start, set_section_start
from .. import blueprint
from ..forms import BlockConfigForm, SectionStartForm
from ..interface import EDITING_KEY, migrate_course_blocks, render_block
from ..schemas import SectionInfo
from ..services.block_service import BLOCK_NAME, SideBarBlock
from ._helpers import get_block_or_404, get_course_or_404, require_capability


@blueprint.route('/blocks/<int:block_id>/content', methods=['GET'])
def block_content(block_id):
    """Items, icons and footer of a side bar block for the current user."""
    block = get_block_or_404(block_id)
    return jsonify(success_response(render_block(block)))


@blueprint.route('/courses/<int:course_id>/blocks', methods=['POST'])
@login_required
def add_block(course_id):
    require_capability('block:addinstance')
    course = get_course_or_404(course_id)

    form = BlockConfigForm()
    if not form.validate():
        raise ValidationError(errors=form.errors)

    page_type = request.form.get('page_type', 'course-view')
    if not SideBarBlock.applicable_formats().get(page_type):
        raise ValidationError(f'Side bar blocks cannot be added to {page_type} pages')

    block = BlockInstance(block_name=BLOCK_NAME, course_id=course.course_id, page_type=page_type,
                          config={'title': form.title.data or ''})
    db.session.add(block)
    db.session.commit()
    return jsonify(success_response({'block_id': block.block_id}, 'Block added')), 201


@blueprint.route('/blocks/<int:block_id>/config', methods=['POST'])
@login_required
def configure_block(block_id):
    require_capability('course:manageactivities')
    block = get_block_or_404(block_id)

    form = BlockConfigForm()
    if not form.validate():
        raise ValidationError(errors=form.errors)

    block.update_config(title=(form.title.data or '').strip())
    db.session.commit()
    return jsonify(success_response({'title': SideBarBlock(block).title}, 'Block settings saved'))


@blueprint.route('/blocks/<int:block_id>/delete', methods=['POST'])
@login_required
def delete_block(block_id):
    require_capability('course:manageactivities')
    block = get_block_or_404(block_id)

    SideBarBlock(block).instance_delete()
    db.session.delete(block)
    db.session.commit()
    return jsonify(success_response(message='Block deleted'))


@blueprint.route('/blocks/<int:block_id>/restore', methods=['POST'])
@login_required
def restore_block(block_id):
    """Re-bind the block's section after its course has been restored."""
    require_capability('course:manageactivities')
    block = get_block_or_404(block_id)
    SideBarBlock(block).after_restore()
    return jsonify(success_response({'section_id': block.get_config('section_id')}))


@blueprint.route('/editing', methods=['POST'])
@login_required
def toggle_editing():
    require_capability('course:manageactivities')
    session[EDITING_KEY] = request.form.get('editing', '1') in {'1', 'true', 'on'}
    return jsonify(success_response({'editing': session[EDITING_KEY]}))


@blueprint.route('/courses/<int:course_id>/migrate', methods=['POST'])
@login_required
def migrate_course(course_id):
    require_capability('site:config')
    course = get_course_or_404(course_id)

    raw_number = request.form.get('section', LEGACY_SECTION_NUMBER)
    try:
        number = int(raw_number)
    except (TypeError, ValueError):
        raise ValidationError('section must be an integer', errors={'section': [str(raw_number)]})

    section = migrate_course_blocks(course, number)
    if section is None:
        return jsonify(success_response(message='Nothing to migrate'))
    return jsonify(success_response(SectionInfo.from_section(section).__dict__, 'Section migrated'))


@blueprint.route('/admin/settings', methods=['GET', 'POST'])
@login_required
def side_bar_settings():
    require_capability('site:config')
    if request.method == 'GET':
        return jsonify(success_response({'section_start': get_section_start()}))

    form = SectionStartForm()
    if not form.validate():
        raise ValidationError(errors=form.errors)

    value = set_section_start(form.section_start.data, user_id=current_user.user_id)
    return jsonify(success_response({'section_start': value}, 'Settings saved'))
