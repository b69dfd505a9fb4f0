"""
Base Repository - Company Scoring Platform
app/repositories/base.py

Thread-safe keyed store for pydantic records with optional JSON-file
persistence. Every read returns a deep copy, so callers work on a snapshot
and never see a half-applied write.
"""

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Generator, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.exceptions import DuplicateEntityException, EntityNotFoundException, RepositoryException

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """Base repository with lock management and snapshot reads."""

    ENTITY_TYPE = "Entity"
    STATE_FILE_NAME = "state.json"

    def __init__(self, model: Type[T], state_dir: Optional[Path] = None):
        self._model = model
        self._lock = threading.RLock()
        self._records: Dict[str, T] = {}
        self._state_file = state_dir / self.STATE_FILE_NAME if state_dir else None
        if self._state_file:
            self._load_state()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load_state(self) -> None:
        """Load records from the JSON state file, if present."""
        if not self._state_file or not self._state_file.exists():
            return
        try:
            data = json.loads(self._state_file.read_text(encoding="utf-8"))
            for item in data:
                record = self._model.model_validate(item)
                self._records[record.id] = record
        except (json.JSONDecodeError, ValidationError) as e:
            raise RepositoryException(f"Corrupt state file {self._state_file}: {e}")
        logger.info("Loaded %d %s record(s) from %s", len(self._records), self.ENTITY_TYPE, self._state_file)

    def _save_state(self) -> None:
        """Persist all records to the JSON state file."""
        if not self._state_file:
            return
        self._state_file.parent.mkdir(parents=True, exist_ok=True)
        payload = [r.model_dump(mode="json") for r in self._records.values()]
        tmp = self._state_file.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp.replace(self._state_file)

    @contextmanager
    def transaction(self) -> Generator[Dict[str, T], None, None]:
        """Hold the lock for a read-modify-write and persist afterwards."""
        with self._lock:
            yield self._records
            self._save_state()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def add(self, record: T) -> T:
        with self.transaction() as records:
            if record.id in records:
                raise DuplicateEntityException(f"{self.ENTITY_TYPE} {record.id} already exists")
            records[record.id] = record.model_copy(deep=True)
        return record.model_copy(deep=True)

    def get_by_id(self, entity_id: str) -> Optional[T]:
        with self._lock:
            record = self._records.get(entity_id)
            return record.model_copy(deep=True) if record else None

    def get_or_raise(self, entity_id: str) -> T:
        record = self.get_by_id(entity_id)
        if record is None:
            raise EntityNotFoundException(self.ENTITY_TYPE, entity_id)
        return record

    def get_all(self) -> List[T]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._records.values()]

    def mutate(self, entity_id: str, fn: Callable[[T], None]) -> T:
        """
        Apply `fn` to a working copy and commit it atomically.

        If `fn` raises, the stored record is left untouched.
        """
        with self.transaction() as records:
            current = records.get(entity_id)
            if current is None:
                raise EntityNotFoundException(self.ENTITY_TYPE, entity_id)
            working = current.model_copy(deep=True)
            fn(working)
            records[entity_id] = working
            return working.model_copy(deep=True)

    def delete(self, entity_id: str) -> None:
        with self.transaction() as records:
            if records.pop(entity_id, None) is None:
                raise EntityNotFoundException(self.ENTITY_TYPE, entity_id)

    def count(self) -> int:
        with self._lock:
            return len(self._records)
