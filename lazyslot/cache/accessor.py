# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Lazy accessors.

A lazy property is a per-instance value computed on first read and cached
for every later read, ``None`` included. Computation is thread-safe: when
several threads read an empty property at once, exactly one runs the
compute function and all of them receive the same value.

Types opt in by deriving from :class:`LazyAccessor`, then declare
properties with the :class:`lazy` decorator or with :func:`declare`::

    class User(LazyAccessor):
        def __init__(self, first_name, last_name):
            self.first_name = first_name
            self.last_name = last_name

        @lazy
        def full_name(self):
            return f"{self.first_name} {self.last_name}"

    User("Ada", "Lovelace").full_name  # 'Ada Lovelace', computed once

Declarations are closed once a type, or any of its subtypes, has been
instantiated; declaring afterwards raises
:class:`~lazyslot._errors.RedeclarationAfterInstantiationError`.

If the compute function raises, the exception reaches the reader, nothing
is cached, and the next read computes again.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar, overload

from .._errors import (
    CyclicComputationError,
    LazyConfigurationError,
    UsageError,
    type_name,
)
from ..types import Undefined
from ._guard import OnceGuard
from .registry import LazyDeclaration, registry

__all__ = (
    "LazyAccessor",
    "declare",
    "get",
    "is_computed",
    "lazy",
    "lazy_properties",
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_STATE_ATTR = "_lazy_state"


class LazyAccessor:
    """Mixin for types carrying lazy properties.

    Materialises one guarded slot per lazy property, inherited ones
    included, in ``__new__`` so the slots exist before any ``__init__``
    runs. Constructing an instance seals the type and its ancestors.
    """

    __slots__ = (_STATE_ATTR,)

    def __new__(cls, *args: Any, **kwargs: Any):
        registry.seal(cls)
        base_new = super().__new__
        if base_new is object.__new__:
            instance = base_new(cls)
        else:
            instance = base_new(cls, *args, **kwargs)
        object.__setattr__(
            instance,
            _STATE_ATTR,
            {name: OnceGuard() for name in registry.resolve(cls)},
        )
        return instance

    def __reduce_ex__(self, protocol):
        # protocols 0 and 1 rebuild through object.__new__, skipping ours
        return super().__reduce_ex__(max(protocol, 2))

    def __getstate__(self):
        # slots hold locks; copies and unpickled instances start empty
        state = super().__getstate__()
        if isinstance(state, tuple):
            dict_state, slot_state = state
            # the unpickler only accepts a dict here, never None
            slot_state = {
                k: v for k, v in (slot_state or {}).items() if k != _STATE_ATTR
            }
            return dict_state, slot_state
        return state


class lazy(Generic[T]):
    """Declare a lazy property in a class body.

    Usable as a decorator or called with any one-argument callable::

        class Report(LazyAccessor):
            @lazy
            def rows(self):
                return load_rows()

            total = lazy(lambda self: sum(self.rows))
    """

    def __init__(self, compute: Callable[[Any], T]) -> None:
        if not callable(compute):
            raise LazyConfigurationError(
                f"lazy() expects a callable, got {type(compute).__name__}",
                details={"value": repr(compute)},
            )
        self.compute = compute
        self.name: str | None = None
        self.owner: type | None = None
        self.__doc__ = getattr(compute, "__doc__", None)
        self.__wrapped__ = compute

    def __set_name__(self, owner: type, name: str) -> None:
        if self.owner is not None:
            raise LazyConfigurationError.for_property(
                owner,
                name,
                message=(
                    f"lazy property '{self.name}' of {type_name(self.owner)} "
                    f"cannot also be bound as '{name}'"
                ),
            )
        _check_owner(owner, name)
        registry.register(LazyDeclaration(name, self.compute, owner))
        self._bind(owner, name)

    def _bind(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type) -> lazy[T]: ...

    @overload
    def __get__(self, instance: object, owner: type) -> T: ...

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return get(instance, self.name)

    def __set__(self, instance, value) -> None:
        raise AttributeError(
            f"lazy property '{self.name}' of {type_name(type(instance))} "
            "cannot be assigned"
        )

    def __delete__(self, instance) -> None:
        raise AttributeError(
            f"lazy property '{self.name}' of {type_name(type(instance))} "
            "cannot be deleted"
        )

    def __repr__(self) -> str:
        if self.owner is None:
            return f"<lazy {self.compute!r} (unbound)>"
        return f"<lazy {type_name(self.owner)}.{self.name}>"


def _check_owner(owner: Any, name: Any) -> None:
    if not (isinstance(owner, type) and issubclass(owner, LazyAccessor)):
        raise LazyConfigurationError(
            f"Cannot declare lazy property '{name}' on {owner!r}: "
            "the type must derive from LazyAccessor",
            details={"type": repr(owner), "property": name},
        )
    if not (isinstance(name, str) and name.isidentifier()):
        raise LazyConfigurationError.for_property(
            owner,
            repr(name),
            message=f"Lazy property name must be an identifier, got {name!r}",
        )
    if name == _STATE_ATTR:
        raise LazyConfigurationError.for_property(
            owner,
            name,
            message=f"'{name}' is reserved for the lazy property slots",
        )


def declare(cls: type, name: str, compute: Callable[[Any], Any]) -> str:
    """Declare lazy property ``name`` on ``cls`` outside its class body.

    ``compute`` receives the instance and returns the value. The property is
    readable as ``instance.<name>`` and through :func:`get`.

    Returns:
        The declared property's name.

    Raises:
        LazyConfigurationError: ``cls`` does not derive from
            :class:`LazyAccessor`, ``name`` is not an identifier, ``compute``
            is not callable, or ``cls`` already defines a non-lazy attribute
            named ``name``.
        RedeclarationAfterInstantiationError: ``cls`` or a subtype has
            already been instantiated.
        DuplicateDeclarationError: ``cls`` already declares ``name``.
    """
    _check_owner(cls, name)
    existing = cls.__dict__.get(name)
    if existing is not None and not isinstance(existing, lazy):
        raise LazyConfigurationError.for_property(
            cls,
            name,
            message=(
                f"{type_name(cls)} already defines a non-lazy attribute "
                f"named '{name}'"
            ),
        )
    descriptor = lazy(compute)
    registry.register(LazyDeclaration(name, compute, cls))
    descriptor._bind(cls, name)
    setattr(cls, name, descriptor)
    return name


def get(instance: Any, name: str) -> Any:
    """Return lazy property ``name`` of ``instance``, computing it once.

    Raises:
        UndeclaredPropertyError: No type in the instance's MRO declares
            ``name``.
        CyclicComputationError: The compute function read this same
            property while computing it.
    """
    state = getattr(instance, _STATE_ATTR, None)
    guard = state.get(name) if state is not None else None
    if guard is not None:
        value = guard.value
        if value is not Undefined:
            return value

    cls = type(instance)
    declaration = registry.lookup(cls, name)
    if guard is None:
        raise UsageError.for_property(
            cls,
            name,
            message=(
                f"{type_name(cls)} instance has no slot for lazy property "
                f"'{name}'; it was not constructed through LazyAccessor"
            ),
        )
    return guard.ensure(
        functools.partial(_compute, declaration, instance),
        on_reentry=lambda: CyclicComputationError.for_property(
            cls,
            name,
            message=(
                f"Lazy property '{name}' of {type_name(cls)} was read "
                "while it was being computed"
            ),
        ),
    )


def _compute(declaration: LazyDeclaration, instance: Any) -> Any:
    logger.debug(
        "Computing lazy property %s for %s",
        declaration.name,
        type_name(type(instance)),
    )
    return declaration.compute(instance)


def is_computed(instance: Any, name: str) -> bool:
    """Check whether lazy property ``name`` of ``instance`` holds a value."""
    registry.lookup(type(instance), name)
    state = getattr(instance, _STATE_ATTR, None) or {}
    guard = state.get(name)
    return guard is not None and guard.filled


def lazy_properties(cls: type) -> tuple[str, ...]:
    """Names of the lazy properties readable on ``cls``, ancestors first."""
    return tuple(registry.resolve(cls))
