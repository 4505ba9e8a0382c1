from __future__ import annotations

import json
import logging
import threading
from typing import FrozenSet, Optional

from domain.repositories import PremiumLookup

logger = logging.getLogger(__name__)


class JsonPremiumLookup(PremiumLookup):
    """
    Premium usernames read from a JSON file of the form
    `{"usernames": ["alice", "bob"]}`.

    The file is loaded on first use and cached for the lifetime of the
    process.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._usernames: Optional[FrozenSet[str]] = None
        self._lock = threading.Lock()

    def _load(self) -> FrozenSet[str]:
        with self._lock:
            if self._usernames is None:
                with open(self._path, encoding="utf-8") as fh:
                    data = json.load(fh)
                usernames = data.get("usernames") or []
                self._usernames = frozenset(str(u).lstrip("@") for u in usernames)
                logger.info(
                    "Loaded %d premium usernames from %s",
                    len(self._usernames),
                    self._path,
                )
            return self._usernames

    def is_premium(self, username: Optional[str]) -> bool:
        if not username:
            return False
        return username in self._load()


class NoPremiumLookup(PremiumLookup):
    """Used when no premium list is configured: nobody is premium."""

    def is_premium(self, username: Optional[str]) -> bool:
        return False
