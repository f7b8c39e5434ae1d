"""
Exceptions raised while cloning entity graphs.

Nothing here is recovered from inside the cloner: every error aborts the
whole clone and propagates to the caller.
"""

from typing import Optional


class KopyException(Exception):
    """
    Base exception for the kopy package.

    Args:
        msg: Optional message for the exception.
    """

    def __init__(self, msg: str = ""):
        super().__init__(msg)
        self._msg = msg

    @property
    def msg(self) -> str:
        return self._msg


class ResolutionError(KopyException):
    """A relationship name does not resolve on the entity's type."""

    def __init__(self, type_name: str, relationship: str):
        self.type_name = type_name
        self.relationship = relationship
        super().__init__(
            f"{type_name} has no relationship named '{relationship}'"
        )


class ConfigurationError(KopyException):
    """A type, its always-included policy, or a clone spec is misconfigured."""

    def __init__(self, type_name: Optional[str], reason: str):
        self.type_name = type_name
        self.reason = reason
        if type_name:
            super().__init__(f"cloneable type {type_name} is misconfigured: {reason}")
        else:
            super().__init__(f"invalid clone configuration: {reason}")


class UnknownFieldError(KopyException):
    """An exception entry names a field the type does not declare."""

    def __init__(self, type_name: str, field: str):
        self.type_name = type_name
        self.field = field
        super().__init__(f"{type_name} has no field named '{field}'")
