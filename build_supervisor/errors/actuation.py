"""
Actuation failure classifications.

Raised when a start or stop request against the compute control plane fails.
The action scheduler catches these and retries with backoff.
"""

from typing import Any, Optional


class ActuationError(Exception):
    """A start/stop call against the compute control plane failed."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 instance_id: Optional[str] = None,
                 context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.operation = operation
        self.instance_id = instance_id
        self.context = context or {}
        self.recoverable = True
