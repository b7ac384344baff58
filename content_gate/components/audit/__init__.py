"""
Audit component - best-effort access audit trail.
"""

from .component import AccessAuditor
from .models import AuditConfig, AuditRecord, RequestContext
from .ports import AuditSinkPort, TimePort

__all__ = [
    "AccessAuditor",
    "AuditConfig",
    "AuditRecord",
    "RequestContext",
    # Ports
    "AuditSinkPort",
    "TimePort",
]
