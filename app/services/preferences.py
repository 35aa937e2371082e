from __future__ import annotations

import logging
from typing import Optional

from app.domain.entities import UserPreferences
from app.domain.enums import SortOrder
from app.domain.results import OperationResult
from app.infra.preferences_repository import PreferenceRepository
from app.infra.repository import StorageError

from .observable import Observable

logger = logging.getLogger(__name__)

PREFERENCES_KEY = "userPrefs"


class PreferenceAdapter(Observable[UserPreferences]):
    """In-memory copy of the single preferences record."""

    def __init__(self, repo: PreferenceRepository) -> None:
        super().__init__(UserPreferences())
        self._repo = repo
        self._loaded = False

    @property
    def preferences(self) -> UserPreferences:
        return self.state

    def load(self) -> UserPreferences:
        if self._loaded:
            return self.state

        try:
            stored: Optional[dict] = self._repo.get(PREFERENCES_KEY)
        except StorageError:
            # Not marked loaded, so the next call retries the read.
            logger.exception("Error reading preferences; using defaults")
            return self.state

        if stored is None:
            preferences = UserPreferences()
            try:
                self._repo.put(PREFERENCES_KEY, preferences.to_dict())
            except StorageError:
                logger.exception("Error persisting default preferences")
        else:
            preferences = UserPreferences.from_dict(stored)

        self._loaded = True
        self._set_state(preferences)
        return preferences

    def set(self, preferences: UserPreferences) -> OperationResult:
        previous = self.state
        self._set_state(preferences)
        try:
            self._repo.put(PREFERENCES_KEY, preferences.to_dict())
        except StorageError as exc:
            logger.exception("Error saving preferences")
            self._set_state(previous)
            return OperationResult.failure("set_preferences", exc)
        self._loaded = True
        return OperationResult.success("set_preferences")

    def toggle_dark_mode(self) -> OperationResult:
        return self.set(self.state.with_dark_mode(not self.state.is_dark_mode))

    def set_sort_order(self, sort_order: SortOrder | str) -> OperationResult:
        return self.set(self.state.with_sort_order(sort_order))
