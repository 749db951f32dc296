# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

__all__ = (
    "CyclicComputationError",
    "DuplicateDeclarationError",
    "LazyConfigurationError",
    "LazySlotError",
    "RedeclarationAfterInstantiationError",
    "UndeclaredPropertyError",
    "UsageError",
    "type_name",
)


def type_name(cls: type) -> str:
    """Return a user-friendly name for ``cls``, local classes included."""
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", None) or getattr(
        cls, "__name__", "anonymous class"
    )
    if module in (None, "builtins", "__main__"):
        return qualname
    return f"{module}.{qualname}"


class LazySlotError(Exception):
    default_message: ClassVar[str] = "lazyslot error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause  # preserves traceback
        self.message = message or self.default_message
        self.details = details or {}

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }
        if include_cause and (cause := self.get_cause()):
            data["cause"] = repr(cause)
        return data

    def get_cause(self) -> Exception | None:
        """Get the cause of this error, if any."""
        return self.__cause__ if hasattr(self, "__cause__") else None


class UsageError(LazySlotError):
    """A lazy property was declared or read in a way the API forbids."""

    default_message = "Invalid use of a lazy property"

    @classmethod
    def for_property(
        cls,
        owner: type,
        name: str,
        *,
        message: str | None = None,
        cause: Exception | None = None,
        **extra: Any,
    ):
        """Create an error about property ``name`` of type ``owner``."""
        details = {"type": type_name(owner), "property": name, **extra}
        return cls(message=message, details=details, cause=cause)


class LazyConfigurationError(UsageError, TypeError):
    """The type, name or compute callable given to a declaration is invalid."""

    default_message = "Invalid lazy property declaration"


class RedeclarationAfterInstantiationError(UsageError):
    """A lazy property was declared on a type that already has instances."""

    default_message = (
        "Lazy properties cannot be declared after the type was instantiated"
    )


class DuplicateDeclarationError(UsageError):
    """The same property name was declared twice on the same type."""

    default_message = "Lazy property already declared"


class UndeclaredPropertyError(UsageError, AttributeError):
    """A read named a lazy property that the type does not declare."""

    default_message = "Lazy property not declared"


class CyclicComputationError(UsageError):
    """A compute function read the property it is computing."""

    default_message = "Lazy property depends on itself"
