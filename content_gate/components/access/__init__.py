"""
Access component.

Public API for content tier classification and access decisions.
"""

from .component import (
    REASON_INVALID_ARTICLE,
    REASON_ROLE_FAILURE,
    AccessService,
    build_article_excerpt,
    classify_access_level,
    decide,
    decide_many,
    parse_article_number,
    role_failure_decision,
)
from .models import AccessRequest, ArticleExcerpt, ResourceId
from .ports import RoleResolverPort, VideoCatalogPort

__all__ = [
    # Functions
    "build_article_excerpt",
    "classify_access_level",
    "decide",
    "decide_many",
    "parse_article_number",
    "role_failure_decision",
    "REASON_INVALID_ARTICLE",
    "REASON_ROLE_FAILURE",
    # Service
    "AccessService",
    # Models
    "AccessRequest",
    "ArticleExcerpt",
    "ResourceId",
    # Ports
    "RoleResolverPort",
    "VideoCatalogPort",
]
