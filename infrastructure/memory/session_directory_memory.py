from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from domain.models import GameSession, new_session
from domain.repositories import SessionDirectory


@dataclass
class _Entry:
    chat_id: int
    state: GameSession = field(default_factory=new_session)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class InMemorySessionDirectory(SessionDirectory):
    """
    Memory-resident implementation of `SessionDirectory`.

    Every chat gets its own lock. The directory-wide lock is only taken to
    look up or insert an entry, never while a game action runs, so traffic
    in one chat doesn't queue behind another. Entries live for the lifetime
    of the process; a reset replaces `state`, it doesn't drop the entry.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, _Entry] = {}
        self._guard = threading.Lock()

    def _get_or_create(self, chat_id: int) -> _Entry:
        with self._guard:
            entry = self._entries.get(chat_id)
            if entry is None:
                entry = _Entry(chat_id=chat_id)
                self._entries[chat_id] = entry
            return entry

    def _get(self, chat_id: int) -> Optional[_Entry]:
        with self._guard:
            return self._entries.get(chat_id)

    @contextmanager
    def session(self, chat_id: int) -> Iterator[_Entry]:
        entry = self._get_or_create(chat_id)
        with entry.lock:
            yield entry

    @contextmanager
    def existing(self, chat_id: int) -> Iterator[Optional[_Entry]]:
        entry = self._get(chat_id)
        if entry is None:
            yield None
            return
        with entry.lock:
            yield entry

    def peek(self, chat_id: int) -> Optional[GameSession]:
        entry = self._get(chat_id)
        if entry is None:
            return None
        with entry.lock:
            return entry.state

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
