"""
Role resolver adapters.

StaticRoleResolver serves a fixed user -> roles mapping (dev/tests).
RequestScopedRoleResolver memoizes another resolver for one request.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from content_gate.components.access import RoleResolverPort

logger = logging.getLogger(__name__)


@dataclass
class StaticRoleResolver:
    """
    In-memory role resolver.

    Unknown users resolve to the default roles (free_user).
    """

    roles_by_user: dict[str, list[str]] = field(default_factory=dict)
    default_roles: tuple[str, ...] = ("free_user",)

    def get_roles(self, user_id: str) -> Sequence[str]:
        roles = self.roles_by_user.get(user_id)
        if roles is None:
            logger.debug("No roles on record for %s, using defaults", user_id)
            return list(self.default_roles)
        return list(roles)

    def set_roles(self, user_id: str, roles: Sequence[str]) -> None:
        """Assign roles to a user (testing/seed helper)."""
        self.roles_by_user[user_id] = list(roles)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Sequence[str]]) -> StaticRoleResolver:
        return cls(roles_by_user={k: list(v) for k, v in mapping.items()})


class RequestScopedRoleResolver:
    """
    Memoizes role lookups for the lifetime of one request.

    Failures are not cached, so the next request retries the lookup.
    """

    def __init__(self, inner: RoleResolverPort) -> None:
        self._inner = inner
        self._cache: dict[str, tuple[str, ...]] = {}

    def get_roles(self, user_id: str) -> Sequence[str]:
        if user_id not in self._cache:
            self._cache[user_id] = tuple(self._inner.get_roles(user_id))
        return self._cache[user_id]
