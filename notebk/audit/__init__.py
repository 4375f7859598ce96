"""Audit logging package."""

from notebk.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
