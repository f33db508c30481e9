import pytest

from sidebar_app.core.error_handlers import InvalidArgumentError, StorageError
from sidebar_app.models import AppSettings, db
from sidebar_app.services.config_service import (
    SECTION_START_KEY,
    get_section_start,
    init_config_service,
    set_section_start,
)


def test_section_start_is_seeded_at_startup(app):
    setting = db.session.get(AppSettings, SECTION_START_KEY)

    assert setting is not None
    assert setting.value == 1000
    assert setting.category == 'side_bar'
    assert app.config[SECTION_START_KEY] == 1000
    assert get_section_start() == 1000


def test_seeding_does_not_overwrite_existing_value(app):
    set_section_start(5000)
    app.config[SECTION_START_KEY] = 1000

    init_config_service(app)

    assert db.session.get(AppSettings, SECTION_START_KEY).value == 5000
    assert app.config[SECTION_START_KEY] == 5000


def test_set_section_start_updates_runtime_config(app, dg):
    admin = dg.create_user('admin')

    assert set_section_start('2500', user_id=admin.user_id) == 2500
    assert get_section_start() == 2500
    assert app.config[SECTION_START_KEY] == 2500
    assert db.session.get(AppSettings, SECTION_START_KEY).updated_by == admin.user_id


@pytest.mark.parametrize('value', [0, -3, 'abc', None, True])
def test_set_section_start_rejects_invalid_values(app, value):
    with pytest.raises(InvalidArgumentError):
        set_section_start(value)
    assert get_section_start() == 1000


def test_invalid_stored_value_falls_back(app):
    AppSettings.set(SECTION_START_KEY, 'not-a-number')
    db.session.commit()

    assert get_section_start() == 1000


def test_storage_failure_keeps_previous_value(app):
    # updated_by must reference an existing user
    with pytest.raises(StorageError):
        set_section_start(3000, user_id=999)

    assert get_section_start() == 1000
    assert app.config[SECTION_START_KEY] == 1000
