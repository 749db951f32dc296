# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Undefined sentinel."""

import copy
import pickle

from lazyslot.types import Undefined, UndefinedType, is_undefined


class TestUndefined:
    def test_singleton(self):
        assert UndefinedType() is Undefined

    def test_falsy_and_repr(self):
        assert not Undefined
        assert repr(Undefined) == "Undefined"
        assert str(Undefined) == "Undefined"

    def test_identity_survives_copy_and_pickle(self):
        assert copy.copy(Undefined) is Undefined
        assert copy.deepcopy(Undefined) is Undefined
        assert pickle.loads(pickle.dumps(Undefined)) is Undefined

    def test_distinct_from_falsy_values(self):
        for value in (None, False, 0, "", [], {}):
            assert not is_undefined(value)
        assert is_undefined(Undefined)
