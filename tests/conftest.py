"""Shared fixtures for the skip-list tests."""
import itertools

import pytest


@pytest.fixture
def scripted():
    """Factory for level generators replaying a fixed sequence of heights."""
    def make(*levels, repeat=True):
        it = itertools.cycle(levels) if repeat else iter(levels)
        return lambda: next(it)
    return make
