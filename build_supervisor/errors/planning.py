"""
Planning failure classifications.

These exceptions are raised while a check cycle fetches and classifies the
remote state. They are never recovered locally: they escape the cycle and are
handed to the planning error policy.
"""

from typing import Any, Optional


class PlanningError(Exception):
    """Base class for failures raised while planning the next action."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ClassificationError(PlanningError):
    """A remote value falls outside the closed set of known states."""

    def __init__(self, message: str, value: Optional[str] = None,
                 allowed: Optional[list[str]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.value = value
        self.allowed = allowed or []


class MissingStateError(PlanningError):
    """Instance descriptor does not carry a lifecycle state."""

    def __init__(self, message: str = "Unable to determine EC2 Instance State",
                 missing_field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing_field = missing_field


class TerminatedInstanceError(PlanningError):
    """The supervised instance has been terminated and can never be started again."""

    def __init__(self, instance_id: str, **kwargs):
        super().__init__(
            f"The EC2 Instance '{instance_id}' has been terminated. "
            f"Please specify the ID of an Instance that is not in the 'terminated' state.",
            **kwargs
        )
        self.instance_id = instance_id


class QueueFetchError(PlanningError):
    """The build queue could not be read as a list of queue items."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 url: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.url = url
