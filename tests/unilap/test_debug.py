r"""
Tests for ``unilap.debug``.
"""

from __future__ import annotations

import pytest

import unilap
from unilap import debug


@pytest.mark.parametrize(
    ["value", "enabled"],
    [(None, False), ("1", True), ("true", True), ("On", True), ("0", False), ("", False)],
)
def test_check_debug_enabled(debug_env, value, enabled):
    debug_env(value)

    assert debug.check_debug_enabled() is enabled


def test_resolve_tracer(debug_env):
    def tracer(event, **fields):
        pass

    assert debug.resolve_tracer(None) is None
    assert debug.resolve_tracer(tracer) is tracer

    debug_env("1")
    assert debug.resolve_tracer(None) is debug.print_trace
    assert debug.resolve_tracer(tracer) is tracer


def test_debug_output(debug_env, capsys):
    unilap.solve_rectangular_assignment([[1.0, 2.0], [2.0, 1.0]])
    assert capsys.readouterr().out == ""

    debug_env("1")
    unilap.solve_rectangular_assignment([[1.0, 2.0], [2.0, 1.0]])
    unilap.solve_assignment([[1.0, 2.0], [2.0, 1.0]])

    lines = capsys.readouterr().out.splitlines()
    assert all(line.startswith("unilap: ") for line in lines)
    assert "unilap: done solver=crouse matched=2" in lines
    assert any(line.startswith("unilap: row_reduction solver=jv") for line in lines)
