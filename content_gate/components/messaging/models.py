"""
Messaging component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AccessMessage:
    """User-facing remediation copy for a decision."""

    title: str
    message: str
    cta_text: str | None = None
    cta_link: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title, "message": self.message}
        if self.cta_text is not None:
            data["ctaText"] = self.cta_text
        if self.cta_link is not None:
            data["ctaLink"] = self.cta_link
        return data


@dataclass(frozen=True)
class MessageConfig:
    """Links used by call-to-action buttons."""

    login_link: str = "/login"
    upgrade_link: str = "/membership/upgrade"
