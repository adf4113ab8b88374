"""
Tournament admin checks with a per-user status cache.

The cache is an ordinary object owned by whoever needs it (a request
middleware, a management command, a test), so its lifetime and clock are
explicit.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from django.conf import settings

DEFAULT_TTL = 300


class AdminStatusCache:
    """Remembers whether a user is a tournament admin for `ttl` seconds."""

    def __init__(self, ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        if ttl is None:
            ttl = getattr(settings, "DEBATETAB_ADMIN_CACHE_TTL", DEFAULT_TTL)
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[object, Tuple[bool, float]] = {}

    def get(self, user_id) -> Optional[bool]:
        """The cached status, or None if missing or expired."""
        entry = self._entries.get(user_id)
        if entry is None:
            return None
        is_admin, stored_at = entry
        if self.clock() - stored_at >= self.ttl:
            del self._entries[user_id]
            return None
        return is_admin

    def set(self, user_id, is_admin: bool):
        self._entries[user_id] = (is_admin, self.clock())

    def invalidate(self, user_id=None):
        """Forget one user, or everyone when no user is given."""
        if user_id is None:
            self._entries.clear()
        else:
            self._entries.pop(user_id, None)


def is_tournament_admin(user, cache: Optional[AdminStatusCache] = None) -> bool:
    """Staff and superusers administer tournaments; anonymous users never do."""
    if user is None or not user.is_authenticated:
        return False
    if cache is not None:
        cached = cache.get(user.pk)
        if cached is not None:
            return cached
    is_admin = bool(user.is_active and (user.is_staff or user.is_superuser))
    if cache is not None:
        cache.set(user.pk, is_admin)
    return is_admin
