"""Audit logging package."""

from flowtrack.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
