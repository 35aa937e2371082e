from __future__ import annotations

from app.domain.entities import UserPreferences
from app.domain.enums import SortOrder
from app.infra.preferences_repository import PreferenceRepository
from app.infra.repository import StorageError
from app.services.preferences import PREFERENCES_KEY, PreferenceAdapter


class BrokenPreferenceRepo(PreferenceRepository):
    def put(self, key: str, value: dict) -> None:
        raise StorageError("put_preference", RuntimeError("read-only file system"))


def test_first_load_persists_defaults(session_factory) -> None:
    repo = PreferenceRepository(session_factory)
    adapter = PreferenceAdapter(repo)

    preferences = adapter.load()

    assert preferences == UserPreferences(is_dark_mode=False, sort_order=SortOrder.DATE)
    assert repo.get(PREFERENCES_KEY) == {"isDarkMode": False, "sortOrder": "date"}


def test_set_replaces_whole_record_and_survives_reload(session_factory) -> None:
    adapter = PreferenceAdapter(PreferenceRepository(session_factory))
    adapter.load()

    result = adapter.set(UserPreferences(is_dark_mode=True, sort_order=SortOrder.PRIORITY))

    assert result.ok
    reloaded = PreferenceAdapter(PreferenceRepository(session_factory)).load()
    assert reloaded == UserPreferences(is_dark_mode=True, sort_order=SortOrder.PRIORITY)


def test_toggle_dark_mode_keeps_sort_order(session_factory) -> None:
    adapter = PreferenceAdapter(PreferenceRepository(session_factory))
    adapter.load()
    adapter.set_sort_order("priority")
    seen = []
    adapter.subscribe(seen.append)

    adapter.toggle_dark_mode()

    assert adapter.preferences == UserPreferences(is_dark_mode=True, sort_order=SortOrder.PRIORITY)
    assert seen == [adapter.preferences]


def test_failed_save_restores_previous_record(session_factory) -> None:
    adapter = PreferenceAdapter(BrokenPreferenceRepo(session_factory))
    before = adapter.preferences

    result = adapter.set(before.with_dark_mode(True))

    assert not result.ok
    assert adapter.preferences == before


def test_unknown_stored_sort_order_falls_back_to_date(session_factory) -> None:
    repo = PreferenceRepository(session_factory)
    repo.put(PREFERENCES_KEY, {"isDarkMode": True, "sortOrder": "alphabetical"})

    preferences = PreferenceAdapter(repo).load()

    assert preferences == UserPreferences(is_dark_mode=True, sort_order=SortOrder.DATE)


class FlakyReadPreferenceRepo(PreferenceRepository):
    def __init__(self, session_factory) -> None:
        super().__init__(session_factory)
        self.failures_left = 1
        self.writes: list[dict] = []

    def get(self, key: str):
        if self.failures_left:
            self.failures_left -= 1
            raise StorageError("get_preference", RuntimeError("database is locked"))
        return super().get(key)

    def put(self, key: str, value: dict) -> None:
        self.writes.append(value)
        super().put(key, value)


def test_failed_read_uses_defaults_and_retries(session_factory) -> None:
    PreferenceRepository(session_factory).put(PREFERENCES_KEY, {"isDarkMode": True, "sortOrder": "priority"})
    repo = FlakyReadPreferenceRepo(session_factory)
    adapter = PreferenceAdapter(repo)

    assert adapter.load() == UserPreferences()
    assert repo.writes == []

    assert adapter.load() == UserPreferences(is_dark_mode=True, sort_order=SortOrder.PRIORITY)
