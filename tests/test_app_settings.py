import pytest

from house_notes.schema import CURRENT_SCHEMA_VERSION, initialize_schema


@pytest.fixture
def settings(services):
    return services["app_settings_service"]


def test_generic_get_and_set(settings):
    assert settings.get("theme") is None
    assert settings.set("theme", "dark")
    assert settings.set("theme", "light")
    assert settings.get("theme") == "light"


def test_delete_confirmation_flag_lifecycle(settings):
    assert settings.should_show_delete_confirmation()

    settings.suppress_delete_confirmation()
    assert not settings.should_show_delete_confirmation()
    assert settings.get("hideDeleteConfirmation") == "true"

    settings.reset_delete_confirmation()
    assert settings.should_show_delete_confirmation()


def test_schema_initialisation_is_idempotent(db, logger):
    initialize_schema(db.sqlite, logger)

    version = db.sqlite.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
    assert version == CURRENT_SCHEMA_VERSION
    tables = {
        row[0]
        for row in db.sqlite.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    }
    assert {"app_settings", "audit_log", "schema_version"} <= tables


def test_fresh_schema_indexes_audit_log(db):
    indexes = {
        row[0]
        for row in db.sqlite.execute("SELECT name FROM sqlite_master WHERE type = 'index'")
    }
    assert "idx_audit_log_entity" in indexes


def test_database_from_newer_release_is_refused(db, logger):
    db.sqlite.execute("UPDATE schema_version SET version = ? WHERE id = 1", (CURRENT_SCHEMA_VERSION + 1,))
    db.sqlite.commit()

    with pytest.raises(RuntimeError, match="schema version"):
        initialize_schema(db.sqlite, logger)
