from __future__ import annotations

from typing import ContextManager, Optional, Protocol

from .models import GameSession


class SessionHandle(Protocol):
    """
    Exclusive access to one chat's session.

    A handle is only valid inside the `with` block that produced it; reading
    or assigning `state` there is atomic with respect to every other caller
    for the same chat.
    """

    chat_id: int
    state: GameSession


class SessionDirectory(Protocol):
    """
    Process-wide mapping from chat identity to game session.

    Implementations are responsible for:
    - Creating an empty lobby the first time a chat is referenced.
    - Serialising access to a single chat's session.
    - Never making one chat wait on another chat's mutations.
    """

    def session(self, chat_id: int) -> ContextManager[SessionHandle]:
        """Get-or-create the chat's session and hold it exclusively."""

        ...

    def existing(self, chat_id: int) -> ContextManager[Optional[SessionHandle]]:
        """
        Like `session`, but yields None instead of creating an entry for a
        chat that has never been seen.
        """

        ...

    def peek(self, chat_id: int) -> Optional[GameSession]:
        """Return the chat's current session without holding it, if any."""

        ...


class PremiumLookup(Protocol):
    """Decides whether a chat user gets the premium treatment."""

    def is_premium(self, username: Optional[str]) -> bool:
        ...
