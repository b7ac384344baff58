"""
Access component ports.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class RoleResolverPort(Protocol):
    """
    Port for looking up a user's current roles.

    Implementations:
    - StaticRoleResolver: fixed mapping (dev/tests)
    - RequestScopedRoleResolver: memoizes another resolver for one request
    """

    def get_roles(self, user_id: str) -> Sequence[str]:
        """
        Return the role names held by the user.

        Raises:
            Any exception on lookup failure; callers fail closed.
        """
        ...


class VideoCatalogPort(Protocol):
    """
    Port for the catalog tier of a video.

    Implementations:
    - StaticVideoCatalog: premium ids listed in rules.yaml
    """

    def is_premium(self, video_id: str) -> bool:
        """Whether the video is premium content."""
        ...
