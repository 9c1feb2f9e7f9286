"""Simulation errors with tracking IDs."""

from utils.ids import format_timestamp, generate_ksuid


class BaseSimError(Exception):
    """Base error with unique ID and timestamp for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        self.error_id = generate_ksuid()
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    def __str__(self):
        return f"[{self.error_id}] {super().__str__()}"


class InvalidMotionError(BaseSimError):
    """Motion vector moves along both axes under axis-constrained movement.

    Raised when the motion generator and the person disagree on the
    movement policy. Never recovered from.
    """

    def __init__(self, motion_x, motion_y, person_id=None, **kwargs):
        context = kwargs.pop("context", {})
        context["motion"] = (motion_x, motion_y)
        if person_id:
            context["person_id"] = person_id
        super().__init__(f"motion ({motion_x}, {motion_y}) uses both axes", context=context, **kwargs)


class GridError(BaseSimError):
    """Bad grid dimensions or a placement outside the grid."""

    def __init__(self, message, width=None, height=None, **kwargs):
        context = kwargs.pop("context", {})
        if width is not None:
            context["width"] = width
        if height is not None:
            context["height"] = height
        super().__init__(message, context=context, **kwargs)


class SimulationStateError(BaseSimError):
    """Illegal lifecycle transition (e.g. starting a stopped simulation)."""

    def __init__(self, message, state=None, **kwargs):
        context = kwargs.pop("context", {})
        if state:
            context["state"] = state
        super().__init__(message, context=context, **kwargs)


class ConfigError(BaseSimError):
    """Invalid configuration value."""

    def __init__(self, message, field=None, value=None, **kwargs):
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
            context["value"] = value
        super().__init__(message, context=context, **kwargs)
