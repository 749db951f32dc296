from ._sentinel import (
    SingletonType,
    Undefined,
    UndefinedType,
    is_undefined,
)

__all__ = (
    "Undefined",
    "SingletonType",
    "UndefinedType",
    "is_undefined",
)
