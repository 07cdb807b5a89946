"""
Test suite for GLOX environments
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from glox_runtime.environment import Environment
from glox_runtime.errors import E_UNDEFINED_VARIABLE, GloxRuntimeError
from glox_runtime.tokens import Token, TokenType


def name(lexeme, line=1):
    return Token(TokenType.IDENTIFIER, lexeme, None, line)


class TestEnvironment:
    """Test define / get / assign along the chain"""

    def test_define_and_get(self):
        env = Environment()
        env.define('a', 1.0)
        assert env.get(name('a')) == 1.0

    def test_redefine_overwrites(self):
        env = Environment()
        env.define('a', 1.0)
        env.define('a', 2.0)
        assert env.get(name('a')) == 2.0

    def test_get_walks_enclosing(self):
        outer = Environment()
        outer.define('a', 'aussen')
        inner = Environment(Environment(outer))
        assert inner.get(name('a')) == 'aussen'

    def test_inner_shadows_outer(self):
        outer = Environment()
        outer.define('a', 1.0)
        inner = Environment(outer)
        inner.define('a', 2.0)
        assert inner.get(name('a')) == 2.0
        assert outer.get(name('a')) == 1.0

    def test_assign_mutates_nearest_binding(self):
        outer = Environment()
        outer.define('a', 1.0)
        inner = Environment(outer)
        inner.assign(name('a'), 5.0)
        assert outer.values['a'] == 5.0
        assert 'a' not in inner.values

    def test_get_undefined_raises(self):
        with pytest.raises(GloxRuntimeError) as exc_info:
            Environment(Environment()).get(name('fehlt', line=7))
        assert exc_info.value.code == E_UNDEFINED_VARIABLE
        assert exc_info.value.token.line == 7
        assert exc_info.value.message == "Undefinierte Variable 'fehlt'."

    def test_assign_never_declares(self):
        env = Environment()
        with pytest.raises(GloxRuntimeError) as exc_info:
            env.assign(name('neu'), 1.0)
        assert exc_info.value.code == E_UNDEFINED_VARIABLE
        assert 'neu' not in env.values


class TestResolvedAccess:
    """Test distance-based access"""

    def test_ancestor(self):
        root = Environment()
        child = Environment(root)
        grandchild = Environment(child)
        assert grandchild.ancestor(0) is grandchild
        assert grandchild.ancestor(2) is root

    def test_get_at_does_not_search(self):
        root = Environment()
        root.define('a', 'root')
        child = Environment(root)
        child.define('a', 'child')
        assert child.get_at(1, 'a') == 'root'
        assert child.get_at(0, 'a') == 'child'

    def test_assign_at(self):
        root = Environment()
        root.define('a', 1.0)
        child = Environment(root)
        child.define('a', 2.0)
        child.assign_at(1, name('a'), 9.0)
        assert root.values['a'] == 9.0
        assert child.values['a'] == 2.0
