"""
Tests for the side bar section allocator.

Covers:
- Argument validation for allocate and migrate
- Allocation above the configured start number
- Migration of the legacy section, with and without orphaned filler sections
"""

import pytest

from sidebar_app import db
from sidebar_app.core.defaults import get_string
from sidebar_app.core.error_handlers import InvalidArgumentError
from sidebar_app.core.signals import section_created, section_migrated
from sidebar_app.models import Activity, Course, CourseSection
from sidebar_app.modules.side_bar.interface import create_section, migrate_old_section
from sidebar_app.modules.side_bar.logics.section_allocator import SectionAllocator
from sidebar_app.modules.side_bar.schemas import AllocatorConfig


def count_sections(course):
    return CourseSection.query.filter_by(course_id=course.course_id).count()


def validate_sidebar_section(section, number):
    stored = db.session.get(CourseSection, section.section_id)
    assert stored.name == get_string('sidebar')
    assert stored.summary == get_string('sectionsummary')
    assert stored.section == number
    assert stored.visible is True


def create_legacy_section(dg, course, number=1000):
    return dg.create_course_section(
        course,
        number,
        name=get_string('sidebar'),
        summary=get_string('sectionsummary'),
        visible=True,
    )


class TestArgumentValidation:

    @pytest.mark.parametrize('course', [None, 1, 'string', [1, 2, 3]])
    def test_allocate_rejects_non_course(self, app, course):
        with pytest.raises(InvalidArgumentError) as excinfo:
            create_section(course)
        assert excinfo.value.code == 'INVALID_ARGUMENT'
        assert 'course' in excinfo.value.message

    @pytest.mark.parametrize('course', [None, 1, 'string', [1, 2, 3]])
    def test_migrate_rejects_non_course(self, app, course):
        with pytest.raises(InvalidArgumentError):
            migrate_old_section(course, 1)

    @pytest.mark.parametrize('number', [None, 0, -1, 'string', [1, 2, 3], True, 1.5])
    def test_migrate_rejects_bad_section_number(self, app, number):
        with pytest.raises(InvalidArgumentError) as excinfo:
            migrate_old_section(Course(shortname='x', fullname='x'), number)
        assert 'positive integer' in excinfo.value.message


class TestAllocate:

    def test_single_section_course_gets_section_start(self, dg):
        course = dg.create_course(num_sections=1)
        dg.create_course_section(course, 1)

        section = create_section(course)

        assert section is not None
        assert section.section_id is not None
        assert section.section == 1000
        assert count_sections(course) == 2
        validate_sidebar_section(section, 1000)

    def test_existing_section_at_start_moves_allocation_up(self, dg):
        course = dg.create_course(num_sections=1)
        dg.create_course_section(course, 1)
        create_legacy_section(dg, course, 1000)

        section = create_section(course)

        assert section.section == 1001
        assert count_sections(course) == 3

    def test_orphaned_sections_below_start_are_ignored(self, dg):
        course = dg.create_course(num_sections=1)
        sections = dg.create_sections(course, [1, 2, 3, 4])
        dg.create_module('page', sections[3], url='http://example.com/page')

        section = create_section(course)

        assert section.section == 1000
        assert count_sections(course) == 5

    def test_sparse_high_sections_use_highest_plus_one(self, dg):
        course = dg.create_course(num_sections=2)
        dg.create_sections(course, [1, 2, 1000, 1007])

        assert create_section(course).section == 1008

    def test_explicit_config_overrides_setting(self, dg):
        course = dg.create_course(num_sections=1)
        dg.create_course_section(course, 1)

        section = create_section(course, AllocatorConfig(section_start=500))

        assert section.section == 500

    def test_allocation_stays_per_course(self, dg):
        first = dg.create_course(num_sections=1, shortname='A')
        second = dg.create_course(num_sections=1, shortname='B')
        dg.create_course_section(first, 1000)

        assert create_section(second).section == 1000

    def test_collision_returns_none_and_rolls_back(self, dg, monkeypatch):
        course = dg.create_course(num_sections=1)
        dg.create_course_section(course, 1)
        create_legacy_section(dg, course, 1000)

        allocator = SectionAllocator()
        # Simulate a concurrent request that computed the same number
        monkeypatch.setattr(allocator, 'next_number', lambda course, config: 1000)

        assert allocator.allocate(course, AllocatorConfig()) is None
        assert count_sections(course) == 2

    def test_section_created_signal(self, dg):
        course = dg.create_course(num_sections=1)
        received = []

        def receiver(sender, **kwargs):
            received.append(kwargs)

        with section_created.connected_to(receiver):
            section = create_section(course)

        assert received == [{
            'course_id': course.course_id,
            'section_id': section.section_id,
            'section_number': 1000,
        }]


class TestMigrate:

    def test_missing_legacy_section_returns_none(self, dg):
        course = dg.create_course(num_sections=1)
        dg.create_course_section(course, 1)

        assert migrate_old_section(course, 1000) is None
        assert count_sections(course) == 1

    def test_no_filler(self, dg):
        course = dg.create_course(num_sections=10)
        dg.create_sections(course, range(1, 11))
        create_legacy_section(dg, course, 1000)

        section = migrate_old_section(course, 1000)

        assert section is not None
        assert section.section == 11
        assert count_sections(course) == 11
        validate_sidebar_section(section, 11)

    def test_empty_filler_is_removed(self, dg):
        course = dg.create_course(num_sections=10)
        dg.create_sections(course, range(1, 1000))
        create_legacy_section(dg, course, 1000)

        section = migrate_old_section(course, 1000)

        assert section.section == 11
        assert count_sections(course) == 11
        validate_sidebar_section(section, 11)

    def test_nonempty_filler_is_packed_after_course_content(self, dg):
        course = dg.create_course(num_sections=10)
        sections = dg.create_sections(course, range(1, 1000))
        filler_pages = [
            dg.create_module('page', section, url=f'http://example.com/{section.section}')
            for section in sections
            if section.section % 100 == 0
        ]
        legacy = create_legacy_section(dg, course, 1000)
        legacy_page = dg.create_module('page', legacy, url='http://example.com/sidebar')

        section = migrate_old_section(course, 1000)

        assert section.section == 20
        assert count_sections(course) == 20
        validate_sidebar_section(section, 20)

        assert db.session.get(Activity, legacy_page.cm_id).section.section == 20
        moved_numbers = sorted(db.session.get(Activity, page.cm_id).section.section for page in filler_pages)
        assert moved_numbers == list(range(11, 20))

    def test_single_nonempty_orphan(self, dg):
        course = dg.create_course(num_sections=1)
        sections = dg.create_sections(course, [1, 2, 3, 4])
        dg.create_module('page', sections[1], url='http://example.com/2')
        create_legacy_section(dg, course, 1000)

        section = migrate_old_section(course, 1000)

        assert section.section == 3
        numbers = [s.section for s in CourseSection.query.filter_by(course_id=course.course_id)
                   .order_by(CourseSection.section)]
        assert numbers == [1, 2, 3]

    def test_second_migration_returns_none(self, dg):
        course = dg.create_course(num_sections=10)
        dg.create_sections(course, range(1, 11))
        create_legacy_section(dg, course, 1000)

        assert migrate_old_section(course, 1000).section == 11
        assert migrate_old_section(course, 1000) is None
        assert count_sections(course) == 11

    def test_other_side_bar_sections_are_preserved(self, dg):
        course = dg.create_course(num_sections=3)
        dg.create_sections(course, [1, 2, 3, 10, 1000])
        create_legacy_section(dg, course, 1500)

        section = migrate_old_section(course, 1500, AllocatorConfig(section_start=1000))

        numbers = [s.section for s in CourseSection.query.filter_by(course_id=course.course_id)
                   .order_by(CourseSection.section)]
        assert section.section == 1001
        assert numbers == [1, 2, 3, 1000, 1001]

    def test_section_migrated_signal(self, dg):
        course = dg.create_course(num_sections=2)
        dg.create_sections(course, [1, 2, 5])
        create_legacy_section(dg, course, 1000)
        received = []

        def receiver(sender, **kwargs):
            received.append(kwargs)

        with section_migrated.connected_to(receiver):
            migrate_old_section(course, 1000)

        assert received[0]['old_number'] == 1000
        assert received[0]['new_number'] == 3
        assert received[0]['removed_orphans'] == 1
        assert received[0]['renumbered_orphans'] == 0
