# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import logging

from ._errors import (
    CyclicComputationError,
    DuplicateDeclarationError,
    LazyConfigurationError,
    LazySlotError,
    RedeclarationAfterInstantiationError,
    UndeclaredPropertyError,
    UsageError,
)
from .config import settings
from .cache import (
    LazyAccessor,
    declare,
    get,
    is_computed,
    lazy,
    lazy_properties,
)
from .types import Undefined
from .version import __version__

logger = logging.getLogger(__name__)
logger.setLevel(settings.LOG_LEVEL)

__all__ = (
    "__version__",
    "CyclicComputationError",
    "DuplicateDeclarationError",
    "LazyAccessor",
    "LazyConfigurationError",
    "LazySlotError",
    "RedeclarationAfterInstantiationError",
    "UndeclaredPropertyError",
    "Undefined",
    "UsageError",
    "declare",
    "get",
    "is_computed",
    "lazy",
    "lazy_properties",
    "logger",
    "settings",
)
