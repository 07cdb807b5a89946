"""
Test suite for the GLOX resolver
Verifies scope distances and every static scope rule
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from glox_runtime import ast
from glox_runtime.errors import GloxResolveError
from glox_runtime.resolver import ClassType, FunctionType, Resolver, resolve


def diagnostics(statements):
    resolver = Resolver()
    resolver.resolve(statements)
    return [d.message for d in resolver.diagnostics]


class TestDistances:
    """Test the resolution table"""

    def test_globals_are_left_unresolved(self, parse):
        statements = parse('var a = 1; drucke a;')
        assert resolve(statements) == {}

    def test_local_in_same_scope(self, parse):
        [block] = parse('{ var a = 1; drucke a; }')
        ref = block.statements[1].expression
        assert resolve([block])[ref.id] == 0

    def test_local_in_enclosing_scope(self, parse):
        [block] = parse('{ var a = 1; { { drucke a; } } }')
        ref = block.statements[1].statements[0].statements[0].expression
        assert resolve([block])[ref.id] == 2

    def test_assignment_is_resolved(self, parse):
        [block] = parse('{ var a; { a = 2; } }')
        assign = block.statements[1].statements[0].expression
        assert resolve([block])[assign.id] == 1

    def test_parameter_distance(self, parse):
        [fn] = parse('funktion f(x) { zurückgeben x; }')
        ref = fn.body[0].value
        assert resolve([fn])[ref.id] == 0

    def test_this_and_super_distances(self, parse):
        statements = parse(
            'klasse A { m() {} }'
            'klasse B < A { m() { super.m(); drucke dies; } }'
        )
        table = resolve(statements)
        method = statements[1].methods[0]
        super_expr = method.body[0].expression.callee
        this_expr = method.body[1].expression
        # method scope -> 'dies' scope -> 'super' scope
        assert table[this_expr.id] == 1
        assert table[super_expr.id] == 2

    def test_identical_references_resolve_independently(self, parse):
        [block] = parse('{ var a = 1; drucke a; { var a = 2; drucke a; } }')
        outer_ref = block.statements[1].expression
        inner_ref = block.statements[2].statements[1].expression
        table = resolve([block])
        assert table[outer_ref.id] == 0
        assert table[inner_ref.id] == 0
        assert outer_ref.id != inner_ref.id

    def test_closure_sees_declaration_site(self, parse):
        [block] = parse('{ var a = 1; funktion f() { drucke a; } }')
        ref = block.statements[1].body[0].expression
        assert resolve([block])[ref.id] == 1

    def test_resolving_twice_is_deterministic(self, parse):
        statements = parse(
            'funktion zähler() { var n = 0; funktion inc() { n = n + 1; zurückgeben n; } zurückgeben inc; }'
            'klasse A { init(x) { dies.x = x; } }'
            'klasse B < A { init(x) { super.init(x); } }'
            '{ var i = 0; während (i < 3) { var j = i; i = i + 1; } }'
        )
        assert Resolver().resolve(statements) == Resolver().resolve(statements)


class TestScopeErrors:
    """Test diagnostics for local variable rules"""

    def test_read_in_own_initializer(self, parse):
        assert diagnostics(parse('{ var a = a; }')) == [
            "Kann lokale Variable in ihrer eigenen Initialisierung nicht lesen."
        ]

    def test_read_in_own_initializer_shadowing_outer(self, parse):
        assert diagnostics(parse('{ var a = 1; { var a = a; } }')) == [
            "Kann lokale Variable in ihrer eigenen Initialisierung nicht lesen."
        ]

    def test_global_self_reference_is_not_a_resolution_error(self, parse):
        assert diagnostics(parse('var a = a;')) == []

    def test_duplicate_in_same_scope(self, parse):
        assert diagnostics(parse('{ var x = 1; var x = 2; }')) == [
            "Bereits eine Variable mit diesem Namen in diesem Gültigkeitsbereich."
        ]

    def test_redeclare_in_nested_scope_is_allowed(self, parse):
        assert diagnostics(parse('{ var x = 1; { var x = 2; } }')) == []

    def test_duplicate_global_is_allowed(self, parse):
        assert diagnostics(parse('var x = 1; var x = 2;')) == []

    def test_duplicate_parameter(self, parse):
        assert diagnostics(parse('funktion f(a, a) {}')) == [
            "Bereits eine Variable mit diesem Namen in diesem Gültigkeitsbereich."
        ]

    def test_diagnostic_carries_token(self, parse):
        resolver = Resolver()
        resolver.resolve(parse('{\nvar x;\nvar x; }'))
        assert resolver.diagnostics[0].line == 3
        assert resolver.diagnostics[0].format().startswith("[Zeile 3] Fehler bei 'x':")

    def test_walk_continues_after_error(self, parse):
        assert len(diagnostics(parse('{ var a = a; var b = b; }'))) == 2


class TestReturnRules:
    """Test 'zurückgeben' placement"""

    def test_top_level_return(self, parse):
        assert diagnostics(parse('zurückgeben 1;')) == [
            "Kann nicht von Code auf oberster Ebene zurückgeben."
        ]

    def test_return_in_function(self, parse):
        assert diagnostics(parse('funktion f() { { zurückgeben 1; } }')) == []

    def test_value_return_in_initializer(self, parse):
        assert diagnostics(parse('klasse A { init() { zurückgeben 1; } }')) == [
            "Kann keinen Wert von einem Initialisierer zurückgeben."
        ]

    def test_bare_return_in_initializer(self, parse):
        assert diagnostics(parse('klasse A { init() { zurückgeben; } }')) == []

    def test_value_return_in_function_nested_in_initializer(self, parse):
        source = 'klasse A { init() { funktion f() { zurückgeben 1; } } }'
        assert diagnostics(parse(source)) == []


class TestClassRules:
    """Test 'dies', 'super' and inheritance rules"""

    def test_this_outside_class(self, parse):
        assert diagnostics(parse('drucke dies;')) == [
            "Kann 'dies' nicht außerhalb einer Klasse verwenden."
        ]

    def test_this_in_function_outside_class(self, parse):
        assert diagnostics(parse('funktion f() { drucke dies; }')) == [
            "Kann 'dies' nicht außerhalb einer Klasse verwenden."
        ]

    def test_super_outside_class(self, parse):
        assert diagnostics(parse('super.m();')) == [
            "Kann 'super' nicht außerhalb einer Klasse verwenden."
        ]

    def test_super_without_superclass(self, parse):
        assert diagnostics(parse('klasse A { m() { super.m(); } }')) == [
            "Kann 'super' nicht in einer Klasse ohne Oberklasse verwenden."
        ]

    def test_self_inheritance(self, parse):
        assert diagnostics(parse('klasse A < A {}')) == [
            "Eine Klasse kann nicht von sich selbst erben."
        ]

    def test_context_restored_after_class(self, parse):
        source = 'klasse A { m() {} } drucke dies;'
        assert diagnostics(parse(source)) == [
            "Kann 'dies' nicht außerhalb einer Klasse verwenden."
        ]

    def test_context_flags_reset_after_walk(self, parse):
        resolver = Resolver()
        resolver.resolve(parse('klasse A { init() { funktion f() {} } }'))
        assert resolver.current_function == FunctionType.NONE
        assert resolver.current_class == ClassType.NONE
        assert resolver.scopes == []

    def test_class_scopes_closed_when_method_fails(self, parse, monkeypatch):
        def fail(self, function, type):
            raise RuntimeError("abbruch")

        monkeypatch.setattr(Resolver, '_resolve_function', fail)
        resolver = Resolver()
        with pytest.raises(RuntimeError):
            resolver.resolve(parse('klasse A {} klasse B < A { m() {} }'))
        assert resolver.scopes == []
        assert resolver.current_class == ClassType.NONE


class TestResolveFunction:
    """Test the module-level resolve() entry point"""

    def test_raises_with_all_diagnostics(self, parse):
        with pytest.raises(GloxResolveError) as exc_info:
            resolve(parse('zurückgeben; drucke dies;'))
        assert len(exc_info.value.diagnostics) == 2

    def test_returns_table(self, parse):
        statements = parse('{ var a; a; }')
        table = resolve(statements)
        ref = statements[0].statements[1].expression
        assert isinstance(statements[0], ast.Block)
        assert table == {ref.id: 0}
