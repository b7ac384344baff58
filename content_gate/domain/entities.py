"""
Core value types shared by every gating component.

Roles, resource kinds, actions and access levels are closed enumerations;
unknown strings never become grants.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from content_gate.domain.errors import DecisionInvariantError

logger = logging.getLogger(__name__)

# --- Enums ---


class RoleName(str, Enum):
    """Roles a principal may hold."""

    FREE_USER = "free_user"
    PREMIUM_USER = "premium_user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ADMIN_ROLES: frozenset[RoleName] = frozenset({RoleName.ADMIN, RoleName.SUPER_ADMIN})


class ResourceKind(str, Enum):
    """Kinds of resource the engine can gate."""

    ARTICLE = "article"
    VIDEO = "video"
    FORUM = "forum"
    USER_PROFILE = "user_profile"
    ADMIN_PANEL = "admin_panel"


class Action(str, Enum):
    """Actions a principal may request on a resource."""

    READ = "read"
    READ_PARTIAL = "read_partial"
    WRITE = "write"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
    ACCESS = "access"
    MODERATE = "moderate"


class AccessLevel(str, Enum):
    """Content tier, ordered free < partial < premium."""

    FREE = "free"
    PARTIAL = "partial"
    PREMIUM = "premium"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AccessLevel):
            return NotImplemented
        return self.rank < other.rank


_LEVEL_ORDER: list[AccessLevel] = [AccessLevel.FREE, AccessLevel.PARTIAL, AccessLevel.PREMIUM]


class RequiredAction(str, Enum):
    """Remediation the caller should offer after a denial."""

    LOGIN = "login"
    UPGRADE = "upgrade"


# --- Principal ---


def parse_roles(raw_roles: Iterable[str | RoleName]) -> frozenset[RoleName]:
    """
    Convert raw role names into the closed RoleName set.

    Unknown names are dropped (and logged) rather than trusted.
    """
    roles: set[RoleName] = set()
    for raw in raw_roles:
        try:
            roles.add(RoleName(raw))
        except ValueError:
            logger.warning("Ignoring unknown role name: %r", raw)
    return frozenset(roles)


@dataclass(frozen=True)
class Principal:
    """
    An authenticated actor and its role snapshot.

    The role set is frozen for the lifetime of a decision.
    """

    user_id: str
    roles: frozenset[RoleName] = field(default_factory=frozenset)

    @classmethod
    def from_raw(cls, user_id: str, raw_roles: Iterable[str | RoleName]) -> Principal:
        return cls(user_id=user_id, roles=parse_roles(raw_roles))

    def has_role(self, role: RoleName) -> bool:
        return role in self.roles

    def has_any_role(self, roles: Iterable[RoleName]) -> bool:
        return any(role in self.roles for role in roles)

    def has_all_roles(self, roles: Iterable[RoleName]) -> bool:
        return all(role in self.roles for role in roles)

    @property
    def is_admin(self) -> bool:
        return self.has_any_role(ADMIN_ROLES)

    @property
    def is_premium(self) -> bool:
        return self.has_role(RoleName.PREMIUM_USER)


# --- Decision ---


@dataclass(frozen=True)
class AccessDecision:
    """
    Verdict for one (principal, resource, action) check.

    Invariants:
    - allowed=True never carries a required_action
    - preview_allowed=True only with level=partial
    """

    allowed: bool
    reason: str
    level: AccessLevel | None = None
    required_action: RequiredAction | None = None
    required_roles: tuple[RoleName, ...] = ()
    preview_allowed: bool | None = None

    def __post_init__(self) -> None:
        if self.allowed and self.required_action is not None:
            raise DecisionInvariantError(
                f"Allowed decision cannot require {self.required_action.value}"
            )
        if self.preview_allowed and self.level is not AccessLevel.PARTIAL:
            raise DecisionInvariantError("Preview is only legal for partial content")

    def to_dict(self) -> dict[str, Any]:
        """Wire shape used by the HTTP layer."""
        data: dict[str, Any] = {"allowed": self.allowed, "reason": self.reason}
        if self.level is not None:
            data["level"] = self.level.value
        if self.required_action is not None:
            data["requiredAction"] = self.required_action.value
        if self.required_roles:
            data["requiredRoles"] = [role.value for role in self.required_roles]
        if self.preview_allowed is not None:
            data["previewAllowed"] = self.preview_allowed
        return data
