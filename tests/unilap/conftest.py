r"""
Common set-up for all tests.

Defines fixtures that run either solver through a common interface.
"""

from __future__ import annotations

import typing as T

import pytest
from matrices import Solved, solve_crouse, solve_jonker

from unilap.debug import check_debug_enabled


@pytest.fixture(
    params=[solve_jonker, solve_crouse],
    ids=("alg:jonker", "alg:crouse"),
    scope="module",
)
def solve(request) -> T.Callable[..., Solved]:
    return request.param


@pytest.fixture()
def debug_env(monkeypatch):
    """
    Yields a function that sets ``UNILAP_DEBUG`` and resets the cached switch.
    """

    def set_debug(value: T.Optional[str]) -> None:
        if value is None:
            monkeypatch.delenv("UNILAP_DEBUG", raising=False)
        else:
            monkeypatch.setenv("UNILAP_DEBUG", value)
        check_debug_enabled.cache_clear()

    set_debug(None)
    yield set_debug
    check_debug_enabled.cache_clear()
