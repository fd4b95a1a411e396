"""
Error taxonomy for entitystate.

Only two things are ever raised by the framework itself:
- InvalidArgumentError: a required input was missing (rule parts, property names)
- DisposedStateError: an operation was attempted on a disposed object

Validation failures are NOT exceptions. They are data held in the error map
and surfaced through has_errors / get_errors().
"""


class EntityStateError(Exception):
    """Base class for all errors raised by entitystate."""


class InvalidArgumentError(EntityStateError, ValueError):
    """A required argument was None or otherwise missing."""

    def __init__(self, argument: str, message: str = ""):
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' is required")


class DisposedStateError(EntityStateError, RuntimeError):
    """Operation attempted after dispose() was called."""

    def __init__(self, object_name: str):
        self.object_name = object_name
        super().__init__(f"Cannot access a disposed object: {object_name}")
