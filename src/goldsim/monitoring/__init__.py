"""Run auditing and logging."""

from goldsim.monitoring.audit import AuditLog
from goldsim.monitoring.logging_config import setup_logging

__all__ = ["AuditLog", "setup_logging"]
