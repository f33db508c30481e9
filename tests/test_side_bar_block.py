import pytest

from sidebar_app import db
from sidebar_app.core.signals import block_deleted
from sidebar_app.models import Activity, BlockInstance, CourseSection, User
from sidebar_app.modules.side_bar.schemas import AllocatorConfig, BlockContext, Clipboard
from sidebar_app.modules.side_bar.services.block_service import SideBarBlock
from sidebar_app.services import activity_service


@pytest.fixture
def request_ctx(app):
    with app.test_request_context():
        yield


@pytest.fixture
def course(dg):
    course = dg.create_course(num_sections=2)
    dg.create_sections(course, [1, 2])
    return course


def sections_of(course):
    return CourseSection.query.filter_by(course_id=course.course_id).order_by(CourseSection.section).all()


def render(block, ctx):
    return SideBarBlock(block, config=AllocatorConfig()).get_content(ctx)


class TestSectionBinding:

    def test_no_instance_gives_empty_content(self, course, request_ctx):
        content = SideBarBlock(None).get_content(BlockContext(course=course))
        assert content.items == []
        assert content.icons == []
        assert content.footer == ''

    def test_first_render_allocates_and_stores_section(self, dg, course, request_ctx):
        block = dg.create_block(course)

        render(block, BlockContext(course=course))

        stored = db.session.get(BlockInstance, block.block_id)
        section = db.session.get(CourseSection, stored.get_config('section_id'))
        assert stored.get_config('section') == 1000
        assert section.section == 1000
        assert 'title' not in stored.config

    def test_render_of_bound_block_leaves_session_clean(self, dg, course, request_ctx):
        section = dg.create_course_section(course, 1000)
        block = dg.create_block(course, section=1000, section_id=section.section_id)

        content = render(block, BlockContext(course=course))

        assert content.items == []
        assert not db.session.dirty
        assert not db.session.new

    def test_later_renders_reuse_section(self, dg, course, request_ctx):
        block = dg.create_block(course)
        render(block, BlockContext(course=course))
        render(block, BlockContext(course=course))

        assert [s.section for s in sections_of(course)] == [1, 2, 1000]

    def test_section_number_without_id_is_bound(self, dg, course, request_ctx):
        section = dg.create_course_section(course, 1000)
        block = dg.create_block(course, section=1000)

        render(block, BlockContext(course=course))

        assert block.get_config('section_id') == section.section_id
        assert len(sections_of(course)) == 3

    def test_deleted_section_is_reallocated(self, dg, course, request_ctx):
        block = dg.create_block(course, section=1005, section_id=9999)

        render(block, BlockContext(course=course))

        assert block.get_config('section') == 1000
        assert db.session.get(CourseSection, block.get_config('section_id')).section == 1000

    def test_drifted_section_number_is_restored(self, dg, course, request_ctx):
        section = dg.create_course_section(course, 3)
        block = dg.create_block(course, section=1000, section_id=section.section_id)

        render(block, BlockContext(course=course))

        assert db.session.get(CourseSection, section.section_id).section == 1000

    def test_drift_into_taken_number_keeps_section(self, dg, course, request_ctx):
        section = dg.create_course_section(course, 3)
        block = dg.create_block(course, section=2, section_id=section.section_id)

        render(block, BlockContext(course=course))

        assert db.session.get(CourseSection, section.section_id).section == 3
        assert db.session.get(BlockInstance, block.block_id).get_config('section') == 3

    def test_allocation_failure_renders_nothing(self, dg, course, request_ctx, monkeypatch):
        block = dg.create_block(course)
        side_bar = SideBarBlock(block, config=AllocatorConfig())
        monkeypatch.setattr(side_bar.allocator, 'allocate', lambda course, config=None: None)

        content = side_bar.get_content(BlockContext(course=course))

        assert content.items == []
        assert block.get_config('section') is None


class TestViewMode:

    @pytest.fixture
    def populated(self, dg, course):
        section = dg.create_course_section(course, 1000)
        block = dg.create_block(course, section=1000, section_id=section.section_id)
        page = dg.create_module('page', section, name='Welcome', url='http://example.com/welcome')
        label = dg.create_module('label', section, name='Note', content='<p>Read <b>this</b><script>x()</script></p>')
        hidden = dg.create_module('url', section, name='Secret', url='http://example.com/secret', visible=False)
        return block, page, label, hidden

    def test_student_sees_visible_activities(self, dg, course, populated, request_ctx):
        block, page, label, hidden = populated
        student = dg.create_user(User.ROLE_STUDENT)

        content = render(block, BlockContext(course=course, user=student))

        assert len(content.items) == 2
        assert 'href="http://example.com/welcome"' in content.items[0]
        assert 'title="Pages"' in content.items[0]
        assert content.icons[0] == page.icon_url
        assert content.items[1] == '<div class="contentwithoutlink"><p>Read <b>this</b></p></div>'
        assert content.icons[1] == ''
        assert content.footer == ''

    def test_anonymous_sees_visible_activities(self, course, populated, request_ctx):
        block = populated[0]
        assert len(render(block, BlockContext(course=course)).items) == 2

    def test_teacher_sees_hidden_activity_dimmed(self, dg, course, populated, request_ctx):
        block = populated[0]
        teacher = dg.create_user(User.ROLE_TEACHER)

        content = render(block, BlockContext(course=course, user=teacher))

        assert len(content.items) == 3
        assert 'class="dimmed"' in content.items[2]
        assert 'class="buttons"' not in content.items[0]

    def test_extra_link_attributes_are_escaped(self, course, populated, request_ctx):
        block, page = populated[0], populated[1]
        page.extra = {'onclick': 'window.open("x"); return false;', 'bad name"': 'x', 'data-id': 7}
        db.session.commit()

        item = render(block, BlockContext(course=course)).items[0]

        assert ' onclick="window.open(&#34;x&#34;); return false;"' in item
        assert ' data-id="7"' in item
        assert 'bad name' not in item

    def test_student_editing_flag_is_ignored(self, dg, course, populated, request_ctx):
        block = populated[0]
        student = dg.create_user(User.ROLE_STUDENT)

        content = render(block, BlockContext(course=course, user=student, is_editing=True))

        assert all('class="buttons"' not in item for item in content.items)

    def test_content_is_cached(self, course, populated, request_ctx):
        side_bar = SideBarBlock(populated[0], config=AllocatorConfig())
        ctx = BlockContext(course=course)
        assert side_bar.get_content(ctx) is side_bar.get_content(ctx)

    def test_sequence_controls_order(self, course, populated, request_ctx):
        block, page, label, hidden = populated
        section = db.session.get(CourseSection, block.get_config('section_id'))
        section.sequence = [label.cm_id, page.cm_id, hidden.cm_id]
        db.session.commit()

        content = render(block, BlockContext(course=course))

        assert 'contentwithoutlink' in content.items[0]
        assert 'Welcome' in content.items[1]


class TestEditingMode:

    @pytest.fixture
    def setup(self, dg, course):
        section = dg.create_course_section(course, 1000)
        block = dg.create_block(course, section=1000, section_id=section.section_id)
        first = dg.create_module('page', section, name='First', url='http://example.com/1')
        second = dg.create_module('page', section, name='Second', url='http://example.com/2')
        teacher = dg.create_user(User.ROLE_TEACHER)
        return block, section, first, second, teacher

    def test_edit_buttons_and_add_menus(self, course, setup, request_ctx):
        block, section, first, second, teacher = setup

        content = render(block, BlockContext(course=course, user=teacher, is_editing=True))

        assert len(content.items) == 2
        assert f'/side-bar/activities/{first.cm_id}/copy' in content.items[0]
        assert f'/side-bar/activities/{first.cm_id}/delete' in content.items[0]
        assert 'groupmode' not in content.items[0]
        assert 'addresourcedropdown' in content.footer
        assert 'addactivitydropdown' in content.footer
        assert f'/side-bar/sections/{section.section_id}/activities' in content.footer

    def test_group_mode_buttons_follow_course(self, course, setup, request_ctx):
        block, section, first, second, teacher = setup
        course.group_mode = 1
        db.session.commit()

        content = render(block, BlockContext(course=course, user=teacher, is_editing=True))
        assert f'/side-bar/activities/{first.cm_id}/groupmode' in content.items[0]

        course.group_mode_force = True
        db.session.commit()

        content = render(block, BlockContext(course=course, user=teacher, is_editing=True))
        assert f'/side-bar/activities/{first.cm_id}/groupmode' not in content.items[0]
        assert 'groupmode1.svg' in content.items[0]

    def test_moving_shows_targets_and_skips_moved_activity(self, course, setup, request_ctx):
        block, section, first, second, teacher = setup
        clipboard = Clipboard(activity_id=second.cm_id, name='Second')

        content = render(block, BlockContext(course=course, user=teacher, is_editing=True, clipboard=clipboard))

        assert len(content.items) == 4
        assert content.items[0].startswith('Second&nbsp;(')
        assert '/side-bar/activities/cancel-copy' in content.items[0]
        assert f'moveto={first.cm_id}' in content.items[1]
        assert 'First' in content.items[2]
        assert 'class="buttons"' not in content.items[2]
        assert f'movetosection={section.section_id}' in content.items[3]
        assert len(content.icons) == len(content.items)


class TestLifecycle:

    def test_title_defaults_and_follows_config(self, dg, course):
        assert SideBarBlock(dg.create_block(course)).title == 'Side Bar'
        assert SideBarBlock(dg.create_block(course, title='Resources')).title == 'Resources'

    def test_block_capabilities(self):
        assert SideBarBlock.has_config() is True
        assert SideBarBlock.instance_allow_multiple() is True
        assert SideBarBlock.applicable_formats() == {'site-index': True, 'course-view': True}

    def test_instance_delete_removes_section_and_activities(self, dg, course, monkeypatch):
        section = dg.create_course_section(course, 1000)
        block = dg.create_block(course, section=1000, section_id=section.section_id)
        page = dg.create_module('page', section, url='http://example.com/p', instance=42)
        dg.create_module('label', section, content='Hello')
        other = dg.create_module('page', sections_of(course)[0], url='http://example.com/other')
        section_id, page_id, other_id = section.section_id, page.cm_id, other.cm_id

        deleted_instances = []
        monkeypatch.setattr(activity_service, 'DELETE_HANDLERS', {})
        activity_service.register_delete_handler('page', deleted_instances.append)
        received = []

        def receiver(sender, **kwargs):
            received.append(kwargs)

        with block_deleted.connected_to(receiver):
            assert SideBarBlock(block).instance_delete() is True

        assert deleted_instances == [42]
        assert db.session.get(CourseSection, section_id) is None
        assert db.session.get(Activity, page_id) is None
        assert db.session.get(Activity, other_id) is not None
        assert received[0]['deleted_activities'] == 2

    def test_instance_delete_without_section(self, dg, course):
        block = dg.create_block(course)
        assert SideBarBlock(block).instance_delete() is True
        assert len(sections_of(course)) == 2

    def test_after_restore_rebinds_section_id(self, dg, course):
        section = dg.create_course_section(course, 1000)
        block = dg.create_block(course, section=1000, section_id=12345)

        assert SideBarBlock(block).after_restore() is True
        assert db.session.get(BlockInstance, block.block_id).get_config('section_id') == section.section_id
