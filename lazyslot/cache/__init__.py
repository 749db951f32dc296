# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from ._guard import OnceGuard
from .accessor import (
    LazyAccessor,
    declare,
    get,
    is_computed,
    lazy,
    lazy_properties,
)
from .registry import LazyDeclaration, TypeRegistry, registry

__all__ = (
    "LazyAccessor",
    "LazyDeclaration",
    "OnceGuard",
    "TypeRegistry",
    "declare",
    "get",
    "is_computed",
    "lazy",
    "lazy_properties",
    "registry",
)
