"""
Per-player cooldown between link requests.

Entries live in memory only and are keyed by player and action, so a player
may hold links for different actions at the same time.
"""

import logging
import math
import threading
import time
from typing import Callable, Dict

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 120


def _now_millis() -> int:
    return int(time.time() * 1000)


class CooldownActiveError(Exception):
    """A link was requested while the player is still in cooldown."""

    def __init__(self, player_uuid: str, action: str, remaining_seconds: int):
        self.player_uuid = player_uuid
        self.action = action
        self.remaining_seconds = remaining_seconds
        super().__init__(
            f"Player {player_uuid} must wait {remaining_seconds}s before "
            f"requesting another {action} link"
        )


class CooldownTracker:
    """
    Track when each player last requested a link for an action.

    Thread-safe; expired entries are dropped lazily on lookup or in bulk by
    cleanup_expired().
    """

    def __init__(
        self,
        cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], int] = _now_millis
    ):
        """
        Initialize tracker.

        Args:
            cooldown_seconds: Minimum time between two requests (0 disables)
            clock: Returns the current time in milliseconds
        """
        self.cooldown_millis = cooldown_seconds * 1000
        self.clock = clock
        self._last_request: Dict[str, int] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(player_uuid: str, action: str) -> str:
        return f"{player_uuid}:{action}"

    def _remaining_millis(self, key: str, now: int) -> int:
        last = self._last_request.get(key)
        if last is None:
            return 0

        remaining = last + self.cooldown_millis - now
        if remaining <= 0:
            del self._last_request[key]
            return 0
        return remaining

    def is_in_cooldown(self, player_uuid: str, action: str) -> bool:
        """Check whether the player must still wait before another request."""
        with self._lock:
            return self._remaining_millis(self._key(player_uuid, action), self.clock()) > 0

    def remaining_seconds(self, player_uuid: str, action: str) -> int:
        """Seconds left in the cooldown, rounded up; 0 when not in cooldown."""
        with self._lock:
            remaining = self._remaining_millis(self._key(player_uuid, action), self.clock())
        return math.ceil(remaining / 1000)

    def record_request(self, player_uuid: str, action: str) -> None:
        """Start the cooldown for a player and action at the current time."""
        with self._lock:
            self._last_request[self._key(player_uuid, action)] = self.clock()

    def check_and_record(self, player_uuid: str, action: str) -> None:
        """
        Record a request, refusing it while the player is in cooldown.

        Raises:
            CooldownActiveError: If the previous request is too recent
        """
        key = self._key(player_uuid, action)
        with self._lock:
            now = self.clock()
            remaining = self._remaining_millis(key, now)
            if remaining > 0:
                raise CooldownActiveError(player_uuid, action, math.ceil(remaining / 1000))
            self._last_request[key] = now

    def cleanup_expired(self) -> int:
        """
        Remove entries whose cooldown has passed.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self.clock()
            expired = [
                key for key, last in self._last_request.items()
                if now - last >= self.cooldown_millis
            ]
            for key in expired:
                del self._last_request[key]

        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired cooldowns")
        return len(expired)

    def clear_player(self, player_uuid: str) -> None:
        """Drop every cooldown held by a player."""
        prefix = f"{player_uuid}:"
        with self._lock:
            for key in [k for k in self._last_request if k.startswith(prefix)]:
                del self._last_request[key]

    def clear(self) -> None:
        with self._lock:
            self._last_request.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_request)
