"""SQLite-backed key-value store."""

import json
import logging
from pathlib import Path
from typing import Any

from sqlalchemy.orm import sessionmaker

from domainsweep.db.init import init_db
from domainsweep.db.models import StoreEntry

from .base import KeyValueStore

logger = logging.getLogger(__name__)


class SQLiteStore(KeyValueStore):
    """Persist JSON values in one SQLite table.

    Storage failures are logged and degrade to "absent" on read and to a
    dropped write, so a broken database never stops a scan.
    """

    def __init__(self, db_path: Path):
        super().__init__()
        self.db_path = db_path
        self._session = None

    def _get_session(self):
        if self._session is None:
            try:
                engine = init_db(self.db_path)
                self._session = sessionmaker(bind=engine)()
            except Exception:
                logger.warning("Failed to open store at %s", self.db_path, exc_info=True)
        return self._session

    def get(self, key: str, default: Any = None) -> Any:
        session = self._get_session()
        if session is None:
            return default
        try:
            # Another handle may have written since our last read
            session.expire_all()
            row = session.get(StoreEntry, key)
            if row is None:
                return default
            return json.loads(row.value)
        except Exception:
            logger.warning("Store get failed for %r", key, exc_info=True)
            return default

    def _write(self, key: str, value: Any) -> bool:
        session = self._get_session()
        if session is None:
            return False
        try:
            encoded = json.dumps(value)
            row = session.get(StoreEntry, key)
            if row is None:
                session.add(StoreEntry(key=key, value=encoded))
            else:
                row.value = encoded
            session.commit()
            return True
        except Exception:
            logger.warning("Store set failed for %r", key, exc_info=True)
            session.rollback()
            return False

    def _delete(self, key: str) -> bool:
        session = self._get_session()
        if session is None:
            return False
        try:
            session.query(StoreEntry).filter_by(key=key).delete()
            session.commit()
            return True
        except Exception:
            logger.warning("Store remove failed for %r", key, exc_info=True)
            session.rollback()
            return False

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
