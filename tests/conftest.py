"""
Test configuration and fixtures for level generation tests.
"""

import os
import random
import sys

import pytest

# Ensure repo root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from levelgen import LevelContext, LevelGenerator, LevelGeneratorParams


@pytest.fixture
def rng():
    """Seeded random source"""
    return random.Random(1234)


@pytest.fixture
def params():
    """Default 800x650 configuration"""
    return LevelGeneratorParams(seed=1234)


@pytest.fixture
def generator(params):
    """Seeded generator on the default canvas"""
    return LevelGenerator(params)


@pytest.fixture
def compact_generator():
    """Seeded generator on a 600x650 canvas"""
    return LevelGenerator.from_canvas(10, 600, 650, seed=99)


@pytest.fixture
def make_context(params):
    """Build the difficulty context for a level on the default canvas"""
    def _make(level_number):
        return LevelContext.for_level(level_number, params)
    return _make
