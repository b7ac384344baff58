"""
Access component models.

Inputs for single and batch access checks.
"""

from __future__ import annotations

from dataclasses import dataclass

from content_gate.domain.entities import Action, ResourceKind

ResourceId = int | str


@dataclass(frozen=True)
class AccessRequest:
    """One (resource kind, resource id, action) item to evaluate."""

    kind: ResourceKind
    resource_id: ResourceId | None
    action: Action
    is_premium_video: bool = False

    @classmethod
    def coerce(cls, item: AccessRequest | tuple) -> AccessRequest:
        """Accept an AccessRequest or a plain (kind, id, action[, premium]) tuple."""
        if isinstance(item, AccessRequest):
            return item
        kind, resource_id, action, *rest = item
        return cls(
            kind=ResourceKind(kind),
            resource_id=resource_id,
            action=Action(action),
            is_premium_video=bool(rest[0]) if rest else False,
        )


@dataclass(frozen=True)
class ArticleExcerpt:
    """Length-boxed preview of an article body."""

    text: str
    visible_lines: int
    total_lines: int

    @property
    def is_truncated(self) -> bool:
        return self.visible_lines < self.total_lines
