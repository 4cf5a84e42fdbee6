"""Record stores keyed by content hash.

Two interchangeable backends share one interface: a SQLAlchemy-backed
store for persistence and a lock-guarded dict for transient use. The
active store is built once at startup and injected into request handlers.
"""
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from string_analyzer import crud
from string_analyzer.config import Settings
from string_analyzer.database import init_db, make_engine, make_session_factory
from string_analyzer.exceptions import DuplicateKeyError
from string_analyzer.schemas import StringRecord

Predicate = Callable[[StringRecord], bool]


class StringStore(ABC):
    @abstractmethod
    def add(self, record: StringRecord) -> StringRecord:
        """Insert ``record``; raise DuplicateKeyError if its id is taken."""

    @abstractmethod
    def get(self, record_id: str) -> Optional[StringRecord]:
        ...

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        """Remove a record, returning False when nothing was stored under the id."""

    @abstractmethod
    def filter(self, predicate: Optional[Predicate] = None) -> List[StringRecord]:
        """Records accepted by ``predicate``, oldest first."""

    @abstractmethod
    def count(self) -> int:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def close(self) -> None:
        pass


class InMemoryStringStore(StringStore):
    def __init__(self) -> None:
        self._records: Dict[str, StringRecord] = {}
        self._lock = threading.Lock()

    def add(self, record: StringRecord) -> StringRecord:
        with self._lock:
            if record.id in self._records:
                raise DuplicateKeyError(f"String with id '{record.id}' already exists")
            self._records[record.id] = record
        return record

    def get(self, record_id: str) -> Optional[StringRecord]:
        with self._lock:
            return self._records.get(record_id)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def filter(self, predicate: Optional[Predicate] = None) -> List[StringRecord]:
        with self._lock:
            records = list(self._records.values())
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class SqlStringStore(StringStore):
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = make_session_factory(engine)
        init_db(engine)

    @classmethod
    def from_url(cls, url: str) -> "SqlStringStore":
        return cls(make_engine(url))

    def add(self, record: StringRecord) -> StringRecord:
        with self._session_factory() as db:
            try:
                crud.add_string(db, record)
            except IntegrityError as e:
                db.rollback()
                raise DuplicateKeyError(f"String with id '{record.id}' already exists") from e
        return record

    def get(self, record_id: str) -> Optional[StringRecord]:
        with self._session_factory() as db:
            row = crud.get_string(db, record_id)
            return crud.to_record(row) if row is not None else None

    def delete(self, record_id: str) -> bool:
        with self._session_factory() as db:
            return crud.delete_string(db, record_id)

    def filter(self, predicate: Optional[Predicate] = None) -> List[StringRecord]:
        with self._session_factory() as db:
            records = [crud.to_record(row) for row in crud.get_strings(db)]
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]

    def count(self) -> int:
        with self._session_factory() as db:
            return crud.count_strings(db)

    def clear(self) -> None:
        with self._session_factory() as db:
            crud.delete_all(db)

    def close(self) -> None:
        self.engine.dispose()


def build_store(settings: Settings) -> StringStore:
    if settings.STORAGE_BACKEND == "memory":
        return InMemoryStringStore()
    return SqlStringStore.from_url(settings.DATABASE_URL)
