# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Process-wide record of which lazy properties each type declares.

A type is *sealed* the first time it, or any of its subtypes, is
instantiated. Sealed types are closed to new declarations, which keeps the
set of slots materialised for an instance fixed for the instance's lifetime.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable
from typing import Any

from .._errors import (
    DuplicateDeclarationError,
    RedeclarationAfterInstantiationError,
    UndeclaredPropertyError,
    type_name,
)

__all__ = ("LazyDeclaration", "TypeRegistry", "registry")

logger = logging.getLogger(__name__)


class LazyDeclaration:
    """A lazy property declared directly on ``owner``.

    The owner is referenced weakly; the registry keys on it and a strong
    reference from the value would keep the type alive forever.
    """

    __slots__ = ("name", "compute", "_owner_ref")

    def __init__(
        self, name: str, compute: Callable[[Any], Any], owner: type
    ) -> None:
        self.name = name
        self.compute = compute
        self._owner_ref = weakref.ref(owner)

    @property
    def owner(self) -> type | None:
        return self._owner_ref()

    def __repr__(self) -> str:
        owner = self.owner
        where = type_name(owner) if owner is not None else "<collected>"
        return f"LazyDeclaration({where}.{self.name})"


class TypeRegistry:
    """Declarations per type plus the set of instantiated (sealed) types.

    Types are held weakly so that classes created at runtime, e.g. in tests,
    can still be garbage collected.
    """

    def __init__(self, *, allow_redeclare: bool | None = None) -> None:
        self._declarations: weakref.WeakKeyDictionary[
            type, dict[str, LazyDeclaration]
        ] = weakref.WeakKeyDictionary()
        self._sealed: weakref.WeakSet[type] = weakref.WeakSet()
        self._resolved: weakref.WeakKeyDictionary[
            type, dict[str, LazyDeclaration]
        ] = weakref.WeakKeyDictionary()
        self._allow_redeclare = allow_redeclare
        self._lock = threading.RLock()

    @property
    def allow_redeclare(self) -> bool:
        if self._allow_redeclare is not None:
            return self._allow_redeclare
        from ..config import settings

        return settings.ALLOW_REDECLARE

    def register(self, declaration: LazyDeclaration) -> None:
        """Add ``declaration`` to its owner's declarations.

        Raises:
            RedeclarationAfterInstantiationError: The owner is sealed.
            DuplicateDeclarationError: The owner already declares the name
                and redeclaration is not allowed.
        """
        owner, name = declaration.owner, declaration.name
        with self._lock:
            if owner in self._sealed:
                raise RedeclarationAfterInstantiationError.for_property(
                    owner,
                    name,
                    message=(
                        f"Cannot declare lazy property '{name}' on "
                        f"{type_name(owner)}: the type or one of its "
                        "subtypes has already been instantiated"
                    ),
                )
            own = self._declarations.setdefault(owner, {})
            if name in own and not self.allow_redeclare:
                raise DuplicateDeclarationError.for_property(
                    owner,
                    name,
                    message=(
                        f"Lazy property '{name}' is already declared on "
                        f"{type_name(owner)}"
                    ),
                )
            own[name] = declaration
            logger.debug(
                "Declared lazy property %s on %s", name, type_name(owner)
            )

    def declared_on(self, cls: type) -> tuple[LazyDeclaration, ...]:
        """Declarations made directly on ``cls``, in declaration order."""
        with self._lock:
            return tuple(self._declarations.get(cls, {}).values())

    def resolve(self, cls: type) -> dict[str, LazyDeclaration]:
        """All declarations visible on ``cls``, walking its MRO.

        Ancestors come first; a subtype declaration shadows an ancestor's
        declaration of the same name. The result is cached once ``cls`` is
        sealed, since it can no longer change.
        """
        cached = self._resolved.get(cls)
        if cached is not None:
            return cached
        with self._lock:
            resolved: dict[str, LazyDeclaration] = {}
            for base in reversed(cls.__mro__):
                for name, declaration in self._declarations.get(
                    base, {}
                ).items():
                    resolved.pop(name, None)
                    resolved[name] = declaration
            if cls in self._sealed:
                self._resolved[cls] = resolved
            return resolved

    def lookup(self, cls: type, name: str) -> LazyDeclaration:
        """Return the declaration of ``name`` visible on ``cls``.

        Raises:
            UndeclaredPropertyError: No type in the MRO declares ``name``.
        """
        try:
            return self.resolve(cls)[name]
        except KeyError:
            raise UndeclaredPropertyError.for_property(
                cls,
                name,
                message=(
                    f"{type_name(cls)} has no lazy property named '{name}'"
                ),
            ) from None

    def seal(self, cls: type) -> None:
        """Close ``cls`` and all of its ancestors to new declarations."""
        if cls in self._sealed:
            return
        with self._lock:
            for base in cls.__mro__:
                if base is object or base in self._sealed:
                    continue
                self._sealed.add(base)
                logger.debug("Sealed %s", type_name(base))

    def is_sealed(self, cls: type) -> bool:
        return cls in self._sealed


registry = TypeRegistry()
