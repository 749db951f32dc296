# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for TypeRegistry bookkeeping, independent of the accessor API."""

import gc

import pytest

from lazyslot._errors import (
    DuplicateDeclarationError,
    RedeclarationAfterInstantiationError,
    UndeclaredPropertyError,
)
from lazyslot.cache import LazyDeclaration, TypeRegistry


def _decl(owner, name, value=None):
    return LazyDeclaration(name, lambda self: value, owner)


class TestRegister:
    def test_declared_on_keeps_order(self):
        reg = TypeRegistry()

        class Base:
            pass

        reg.register(_decl(Base, "b"))
        reg.register(_decl(Base, "a"))
        assert [d.name for d in reg.declared_on(Base)] == ["b", "a"]

    def test_duplicate_rejected_by_default(self):
        reg = TypeRegistry(allow_redeclare=False)

        class Base:
            pass

        first = _decl(Base, "x", 1)
        reg.register(first)
        with pytest.raises(DuplicateDeclarationError) as exc_info:
            reg.register(_decl(Base, "x", 2))
        assert exc_info.value.details["property"] == "x"
        assert reg.declared_on(Base) == (first,)

    def test_duplicate_replaces_when_allowed(self):
        reg = TypeRegistry(allow_redeclare=True)

        class Base:
            pass

        reg.register(_decl(Base, "x", 1))
        second = _decl(Base, "x", 2)
        reg.register(second)
        assert reg.declared_on(Base) == (second,)

    def test_policy_defaults_to_settings(self, allow_redeclare):
        assert TypeRegistry().allow_redeclare is True

    def test_sealed_type_rejects_declaration(self):
        reg = TypeRegistry()

        class Base:
            pass

        reg.seal(Base)
        with pytest.raises(RedeclarationAfterInstantiationError):
            reg.register(_decl(Base, "late"))
        assert reg.declared_on(Base) == ()


class TestSeal:
    def test_seal_covers_ancestors_only(self):
        reg = TypeRegistry()

        class Base:
            pass

        class Child(Base):
            pass

        class Sibling(Base):
            pass

        reg.seal(Child)
        assert reg.is_sealed(Child)
        assert reg.is_sealed(Base)
        assert not reg.is_sealed(Sibling)
        assert not reg.is_sealed(object)

    def test_new_subtype_of_sealed_type_accepts_declarations(self):
        reg = TypeRegistry()

        class Base:
            pass

        reg.seal(Base)

        class Child(Base):
            pass

        reg.register(_decl(Child, "fresh"))
        assert [d.name for d in reg.declared_on(Child)] == ["fresh"]


class TestResolve:
    def test_walks_mro_ancestors_first(self):
        reg = TypeRegistry()

        class Trait:
            pass

        class Base:
            pass

        class Child(Base, Trait):
            pass

        reg.register(_decl(Trait, "trait"))
        reg.register(_decl(Base, "base"))
        reg.register(_decl(Child, "child"))
        assert list(reg.resolve(Child)) == ["trait", "base", "child"]

    def test_subtype_shadows_ancestor(self):
        reg = TypeRegistry()

        class Base:
            pass

        class Child(Base):
            pass

        reg.register(_decl(Base, "x", "base"))
        override = _decl(Child, "x", "child")
        reg.register(override)
        assert reg.resolve(Child)["x"] is override
        assert reg.resolve(Base)["x"].owner is Base

    def test_lookup_missing_name(self):
        reg = TypeRegistry()

        class Base:
            pass

        with pytest.raises(UndeclaredPropertyError) as exc_info:
            reg.lookup(Base, "nope")
        assert isinstance(exc_info.value, AttributeError)
        assert "nope" in str(exc_info.value)

    def test_types_are_held_weakly(self):
        reg = TypeRegistry()

        def make():
            class Temporary:
                pass

            reg.register(_decl(Temporary, "x"))
            reg.seal(Temporary)
            reg.resolve(Temporary)

        make()
        gc.collect()
        assert len(reg._declarations) == 0
        assert len(reg._sealed) == 0
