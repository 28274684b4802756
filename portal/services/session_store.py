"""Local persistence for the single active session.

The store is a small JSON document of key -> serialized record. The
session lives under one well-known key; a missing file or key means
nobody is logged in.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from portal.schemas.session import Session

logger = logging.getLogger(__name__)

SESSION_KEY = "user"


class SessionStore(ABC):
    """init -> read / write / clear. Reads never touch the network."""

    def init(self) -> None:
        pass

    @abstractmethod
    def read(self) -> Session | None:
        ...

    @abstractmethod
    def write(self, session: Session) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemorySessionStore(SessionStore):
    def __init__(self, session: Session | None = None):
        self._session = session

    def read(self) -> Session | None:
        return self._session

    def write(self, session: Session) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileSessionStore(SessionStore):
    def __init__(self, path: str | Path, key: str = SESSION_KEY):
        self.path = Path(path)
        self.key = key

    def init(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except ValueError:
            logger.warning("Session file %s is not valid JSON; ignoring it", self.path)
            return {}
        return doc if isinstance(doc, dict) else {}

    def _save(self, doc: dict) -> None:
        self.init()
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".session-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def read(self) -> Session | None:
        raw = self._load().get(self.key)
        if raw is None:
            return None
        try:
            return Session.model_validate(raw)
        except ValidationError:
            logger.warning("Stored session under %r is corrupt; clearing it", self.key)
            self.clear()
            return None

    def write(self, session: Session) -> None:
        doc = self._load()
        doc[self.key] = session.model_dump(mode="json")
        self._save(doc)

    def clear(self) -> None:
        doc = self._load()
        if self.key not in doc:
            return
        del doc[self.key]
        self._save(doc)
