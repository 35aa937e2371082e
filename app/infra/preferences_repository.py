from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .models import PreferenceModel
from .repository import StorageError


class PreferenceRepository:
    """Key-value access to the preferences table."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[dict[str, Any]]:
        try:
            with self._session_factory() as session:
                record = session.get(PreferenceModel, key)
                return dict(record.value) if record else None
        except SQLAlchemyError as exc:
            raise StorageError("get_preference", exc) from exc

    def put(self, key: str, value: dict[str, Any]) -> None:
        try:
            with self._session_factory() as session:
                session.merge(PreferenceModel(key=key, value=value))
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("put_preference", exc) from exc
