"""
Access component - classify content tiers and decide access.

Pure decision core plus the AccessService shell that resolves roles and
writes the audit trail.

Invariants:
- Same resource id always classifies to the same level
- Admin override wins over any level-based denial
- Preview access is never reported as allowed for the full read action
- Role lookup failure denies (fail-closed), never allows
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable

from content_gate.components.audit import AccessAuditor, RequestContext
from content_gate.domain.entities import (
    AccessDecision,
    AccessLevel,
    Action,
    Principal,
    RequiredAction,
    ResourceKind,
    RoleName,
)
from content_gate.domain.errors import InvalidResourceId, RoleResolutionFailure

from .models import AccessRequest, ArticleExcerpt, ResourceId
from .ports import RoleResolverPort

logger = logging.getLogger(__name__)

# --- Constants ---

CATALOG_CYCLE = 20
FREE_SLOTS = 5
PARTIAL_SLOTS_END = 15

REASON_FREE = "Free content"
REASON_ADMIN = "Admin access"
REASON_PREMIUM = "Premium access"
REASON_PREVIEW = "Preview access"
REASON_PREVIEW_ONLY = "Preview access only"
REASON_PREMIUM_REQUIRED = "Premium subscription required"
REASON_AUTH_REQUIRED = "Authentication required"
REASON_INVALID_ARTICLE = "Invalid article ID"
REASON_ROLE_FAILURE = "Failed to verify user permissions"
REASON_ADMIN_REQUIRED = "Admin privileges required"
REASON_PUBLIC_FORUM = "Public forum"
REASON_AUTHENTICATED = "Authenticated user"
REASON_DENIED = "Access denied"

# A sign directly before the digits is kept so negative ids are rejected
_DIGITS = re.compile(r"(-?\d+)")


# --- Classifier ---


def parse_article_number(raw: ResourceId) -> int:
    """
    Extract the catalog number from an article identifier.

    Accepts positive ints and strings such as "article_12" or "article_12.json".

    Raises:
        InvalidResourceId: if no positive integer can be extracted
    """
    if isinstance(raw, bool):
        raise InvalidResourceId(raw)
    if isinstance(raw, int):
        if raw <= 0:
            raise InvalidResourceId(raw)
        return raw
    if isinstance(raw, str):
        match = _DIGITS.search(raw)
        if match is None:
            raise InvalidResourceId(raw)
        number = int(match.group(1))
        if number <= 0:
            raise InvalidResourceId(raw)
        return number
    raise InvalidResourceId(raw)


def classify_access_level(resource_id: ResourceId) -> AccessLevel:
    """
    Map a content id onto the repeating 20-item catalog cycle.

    Slots 1-5 are free, 6-15 partial, 16-20 premium.
    This is a catalog convention, not a security boundary.

    Raises:
        InvalidResourceId: for non-positive or non-integer ids
    """
    number = parse_article_number(resource_id)
    index = (number - 1) % CATALOG_CYCLE
    if index < FREE_SLOTS:
        return AccessLevel.FREE
    if index < PARTIAL_SLOTS_END:
        return AccessLevel.PARTIAL
    return AccessLevel.PREMIUM


# --- Decision helpers ---


def _login_required(level: AccessLevel | None = None) -> AccessDecision:
    return AccessDecision(
        allowed=False,
        reason=REASON_AUTH_REQUIRED,
        level=level,
        required_action=RequiredAction.LOGIN,
        preview_allowed=False,
    )


def _premium_required(level: AccessLevel | None = None) -> AccessDecision:
    return AccessDecision(
        allowed=False,
        reason=REASON_PREMIUM_REQUIRED,
        level=level,
        required_action=RequiredAction.UPGRADE,
        required_roles=(RoleName.PREMIUM_USER,),
        preview_allowed=False,
    )


def _admin_required() -> AccessDecision:
    return AccessDecision(
        allowed=False,
        reason=REASON_ADMIN_REQUIRED,
        required_roles=(RoleName.ADMIN,),
    )


def role_failure_decision(level: AccessLevel | None = None) -> AccessDecision:
    """Fail-closed denial used when roles cannot be resolved."""
    return AccessDecision(allowed=False, reason=REASON_ROLE_FAILURE, level=level)


# --- Per-kind rules ---


def _decide_article(
    principal: Principal | None, resource_id: ResourceId | None, action: Action
) -> AccessDecision:
    try:
        level = classify_access_level(resource_id)  # type: ignore[arg-type]
    except InvalidResourceId:
        return AccessDecision(allowed=False, reason=REASON_INVALID_ARTICLE)

    if level is AccessLevel.FREE:
        return AccessDecision(allowed=True, reason=REASON_FREE, level=level)

    if principal is None:
        return _login_required(level)

    if principal.is_admin:
        return AccessDecision(allowed=True, reason=REASON_ADMIN, level=level)

    if level is AccessLevel.PARTIAL:
        if action is Action.READ_PARTIAL:
            return AccessDecision(
                allowed=True, reason=REASON_PREVIEW, level=level, preview_allowed=True
            )
        if action is Action.READ:
            if principal.is_premium:
                return AccessDecision(
                    allowed=True, reason=REASON_PREMIUM, level=level, preview_allowed=True
                )
            return AccessDecision(
                allowed=False,
                reason=REASON_PREVIEW_ONLY,
                level=level,
                required_action=RequiredAction.UPGRADE,
                preview_allowed=True,
            )
        return AccessDecision(allowed=False, reason=REASON_DENIED, level=level)

    # Premium: every action is gated on premium_user
    if principal.is_premium:
        return AccessDecision(allowed=True, reason=REASON_PREMIUM, level=level)
    return _premium_required(level)


def _decide_video(principal: Principal | None, is_premium_video: bool) -> AccessDecision:
    if not is_premium_video:
        return AccessDecision(allowed=True, reason=REASON_FREE)
    if principal is None:
        return _login_required()
    if principal.is_admin:
        return AccessDecision(allowed=True, reason=REASON_ADMIN)
    if principal.is_premium:
        return AccessDecision(allowed=True, reason=REASON_PREMIUM)
    return _premium_required()


def _decide_forum(principal: Principal | None, action: Action) -> AccessDecision:
    if action is Action.READ:
        return AccessDecision(allowed=True, reason=REASON_PUBLIC_FORUM)
    if principal is None:
        return _login_required()
    if principal.is_admin:
        return AccessDecision(allowed=True, reason=REASON_ADMIN)
    if action is Action.WRITE:
        return AccessDecision(allowed=True, reason=REASON_AUTHENTICATED)
    if action is Action.MODERATE:
        return _admin_required()
    return AccessDecision(allowed=False, reason=REASON_DENIED)


def _decide_user_profile(principal: Principal | None, action: Action) -> AccessDecision:
    if principal is None:
        return _login_required()
    if principal.is_admin:
        return AccessDecision(allowed=True, reason=REASON_ADMIN)
    if action in (Action.READ, Action.UPDATE):
        return AccessDecision(allowed=True, reason=REASON_AUTHENTICATED)
    return _admin_required()


def _decide_admin_panel(principal: Principal | None) -> AccessDecision:
    if principal is None:
        return _login_required()
    if principal.is_admin:
        return AccessDecision(allowed=True, reason=REASON_ADMIN)
    return _admin_required()


# --- Decision Engine ---


def decide(
    principal: Principal | None,
    kind: ResourceKind | str,
    resource_id: ResourceId | None,
    action: Action | str,
    *,
    is_premium_video: bool = False,
) -> AccessDecision:
    """
    Decide whether a principal may perform an action on a resource.

    Pure function: no I/O, no shared state. Articles are classified from
    their id; videos take the premium flag from the caller; forum, profile
    and admin panel follow fixed capability tables.

    Args:
        principal: Authenticated principal, or None for anonymous visitors
        kind: Resource kind
        resource_id: Opaque id (classified for articles only)
        action: Requested action
        is_premium_video: Premium flag supplied by the caller for videos

    Returns:
        AccessDecision
    """
    kind = ResourceKind(kind)
    action = Action(action)

    if kind is ResourceKind.ARTICLE:
        return _decide_article(principal, resource_id, action)
    if kind is ResourceKind.VIDEO:
        return _decide_video(principal, is_premium_video)
    if kind is ResourceKind.FORUM:
        return _decide_forum(principal, action)
    if kind is ResourceKind.USER_PROFILE:
        return _decide_user_profile(principal, action)
    return _decide_admin_panel(principal)


def decide_many(
    principal: Principal | None,
    items: Iterable[AccessRequest | tuple],
) -> dict[ResourceId | None, AccessDecision]:
    """
    Apply decide() to every item against one principal snapshot.

    Items do not interact; the result for each id equals a single decide()
    call, whatever the input order.
    """
    results: dict[ResourceId | None, AccessDecision] = {}
    for item in items:
        request = AccessRequest.coerce(item)
        results[request.resource_id] = decide(
            principal,
            request.kind,
            request.resource_id,
            request.action,
            is_premium_video=request.is_premium_video,
        )
    return results


# --- Article excerpt ---


def build_article_excerpt(content: str, ratio: float = 0.3, min_lines: int = 30) -> ArticleExcerpt:
    """
    Cut an article down to its preview portion.

    Partial articles are length-boxed: the first max(min_lines, lines * ratio)
    lines are shown.
    """
    lines = content.split("\n")
    visible = min(len(lines), max(min_lines, math.floor(len(lines) * ratio)))
    return ArticleExcerpt(
        text="\n".join(lines[:visible]),
        visible_lines=visible,
        total_lines=len(lines),
    )


# --- Service (imperative shell) ---


class AccessService:
    """
    Resolves roles, decides, and audits one request's access checks.

    Construct one instance per incoming request: resolved roles are memoized
    on the instance, so repeated or batched checks cost one lookup.
    """

    def __init__(self, resolver: RoleResolverPort, auditor: AccessAuditor) -> None:
        self._resolver = resolver
        self._auditor = auditor
        self._principals: dict[str, Principal] = {}
        self._failed: set[str] = set()

    def resolve_principal(self, user_id: str) -> Principal:
        """
        Resolve and memoize the principal for a user.

        Raises:
            RoleResolutionFailure: if the resolver errors
        """
        cached = self._principals.get(user_id)
        if cached is not None:
            return cached
        if user_id in self._failed:
            raise RoleResolutionFailure(user_id)

        try:
            raw_roles = self._resolver.get_roles(user_id)
        except Exception as e:
            logger.exception("Error fetching user roles for %s", user_id)
            self._failed.add(user_id)
            raise RoleResolutionFailure(user_id, cause=e) from e

        principal = Principal.from_raw(user_id, raw_roles)
        self._principals[user_id] = principal
        return principal

    def _evaluate(self, user_id: str | None, request: AccessRequest) -> AccessDecision:
        if user_id is None:
            return decide(
                None,
                request.kind,
                request.resource_id,
                request.action,
                is_premium_video=request.is_premium_video,
            )

        try:
            principal = self.resolve_principal(user_id)
        except RoleResolutionFailure:
            # Public resources need no roles; everything else fails closed
            public = decide(
                None,
                request.kind,
                request.resource_id,
                request.action,
                is_premium_video=request.is_premium_video,
            )
            if public.allowed:
                return public
            return role_failure_decision(public.level)

        return decide(
            principal,
            request.kind,
            request.resource_id,
            request.action,
            is_premium_video=request.is_premium_video,
        )

    def _audit(
        self,
        user_id: str | None,
        request: AccessRequest,
        decision: AccessDecision,
        context: RequestContext | None,
        informational: bool,
    ) -> None:
        if not self._auditor.should_record(informational):
            return
        self._auditor.record_decision(
            decision,
            user_id=user_id,
            resource=request.kind.value,
            action=request.action.value,
            resource_id=None if request.resource_id is None else str(request.resource_id),
            context=context,
        )

    def check(
        self,
        user_id: str | None,
        kind: ResourceKind | str,
        resource_id: ResourceId | None,
        action: Action | str,
        *,
        is_premium_video: bool = False,
        context: RequestContext | None = None,
        informational: bool = False,
    ) -> AccessDecision:
        """
        Decide one access check and record it in the audit trail.

        Args:
            user_id: Authenticated user id, or None for anonymous
            kind: Resource kind
            resource_id: Resource id
            action: Requested action
            is_premium_video: Premium flag for videos
            context: Request metadata for the audit record
            informational: True for display-only checks (not audited by default)

        Returns:
            AccessDecision (never raises for lookup or audit failures)
        """
        request = AccessRequest(
            kind=ResourceKind(kind),
            resource_id=resource_id,
            action=Action(action),
            is_premium_video=is_premium_video,
        )
        decision = self._evaluate(user_id, request)
        if not decision.allowed:
            logger.debug(
                "Access denied: user=%s kind=%s id=%s reason=%s",
                user_id,
                request.kind.value,
                resource_id,
                decision.reason,
            )
        self._audit(user_id, request, decision, context, informational)
        return decision

    def check_many(
        self,
        user_id: str | None,
        items: Iterable[AccessRequest | tuple],
        *,
        context: RequestContext | None = None,
        informational: bool = False,
    ) -> dict[ResourceId | None, AccessDecision]:
        """Batch variant of check(); roles are resolved at most once."""
        requests = [AccessRequest.coerce(item) for item in items]
        results: dict[ResourceId | None, AccessDecision] = {}

        for request in requests:
            decision = self._evaluate(user_id, request)
            self._audit(user_id, request, decision, context, informational)
            results[request.resource_id] = decision
        return results

    def preview_status(
        self,
        user_id: str | None,
        kind: ResourceKind | str,
        resource_id: ResourceId | None,
        action: Action | str = Action.READ,
        *,
        is_premium_video: bool = False,
    ) -> AccessDecision:
        """Informational check for rendering badges and locked cards."""
        return self.check(
            user_id,
            kind,
            resource_id,
            action,
            is_premium_video=is_premium_video,
            informational=True,
        )
