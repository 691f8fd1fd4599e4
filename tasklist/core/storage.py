"""Single-file JSON persistence for a collection of pydantic entities."""

import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from tasklist.core.errors import PersistenceError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonFileStore(Generic[ModelT]):
    """
    A list of entities kept in memory and mirrored to one JSON file.

    The file is read on first use; a missing file is an empty collection. Every change is
    written back in full. Callers wrap each read-modify-write cycle in ``transaction()``,
    which holds a re-entrant lock so concurrent requests cannot interleave a cycle.
    """

    def __init__(self, path: str | os.PathLike[str], model: type[ModelT]) -> None:
        self.path = Path(path)
        self._adapter = TypeAdapter(list[model])
        self._items: list[ModelT] | None = None
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[list[ModelT]]:
        """Hold the store lock and yield the live list (loaded if needed)."""
        with self._lock:
            if self._items is None:
                self._items = self._load()
            yield self._items

    def _load(self) -> list[ModelT]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_bytes()
            if not raw.strip():
                return []
            return self._adapter.validate_json(raw)
        except (OSError, ValidationError) as e:
            logger.error("Could not read %s; starting with an empty collection: %s", self.path, e)
            return []

    def save(self) -> None:
        """Serialize the whole collection and replace the file. Must be called inside transaction()."""
        with self._lock:
            payload = self._adapter.dump_json(self._items or [], indent=2, by_alias=True)
            directory = self.path.parent
            try:
                directory.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix=".tmp")
                try:
                    with os.fdopen(fd, "wb") as fh:
                        fh.write(payload)
                    os.replace(tmp_name, self.path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            except OSError as e:
                logger.exception("Failed to write %s", self.path)
                raise PersistenceError("Failed to save data.") from e

    def is_writable(self) -> bool:
        """True when the file (or its directory, if the file does not exist yet) is writable."""
        target = self.path if self.path.exists() else self.path.parent
        return os.access(target, os.W_OK)
