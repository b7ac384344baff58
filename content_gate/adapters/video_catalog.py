"""
Video catalog adapter.

StaticVideoCatalog serves the premium flag for each video from a fixed set
of ids, so HTTP callers never declare a video's tier themselves.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from content_gate.rules.models import VideoRules


@dataclass(frozen=True)
class StaticVideoCatalog:
    """In-memory catalog. Ids not listed fall back to premium_by_default."""

    premium_ids: frozenset[str] = field(default_factory=frozenset)
    premium_by_default: bool = False

    def is_premium(self, video_id: str) -> bool:
        if video_id in self.premium_ids:
            return True
        return self.premium_by_default

    @classmethod
    def from_ids(
        cls, premium_ids: Iterable[str], premium_by_default: bool = False
    ) -> StaticVideoCatalog:
        return cls(premium_ids=frozenset(premium_ids), premium_by_default=premium_by_default)

    @classmethod
    def from_rules(cls, rules: VideoRules) -> StaticVideoCatalog:
        return cls.from_ids(rules.premium_ids, premium_by_default=rules.premium_by_default)
