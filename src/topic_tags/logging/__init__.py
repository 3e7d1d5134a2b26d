"""Command audit logging."""

from .audit import (
    AuditEvent,
    CommandAuditLog,
    build_audit_event,
    filter_kind,
    summarize_arguments,
    utc_timestamp,
)

__all__ = [
    "AuditEvent",
    "CommandAuditLog",
    "build_audit_event",
    "filter_kind",
    "summarize_arguments",
    "utc_timestamp",
]
