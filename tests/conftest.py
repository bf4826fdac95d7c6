"""Pytest configuration and fixtures."""

import pytest

from eclp.context import BlockContext
from eclp.pool import ECLPPool, PoolControls
from tests.helpers import ALICE, ScriptedMathEngine, make_block, make_init_request, make_pool


@pytest.fixture
def engine() -> ScriptedMathEngine:
    """Scripted engine reporting an invariant of 500."""
    return ScriptedMathEngine(invariant=500)


@pytest.fixture
def controls() -> PoolControls:
    return PoolControls()


@pytest.fixture
def block() -> BlockContext:
    return make_block()


@pytest.fixture
def scripted_pool(engine: ScriptedMathEngine, controls: PoolControls) -> ECLPPool:
    """Uninitialized pool backed by the scripted engine."""
    return make_pool(engine=engine, controls=controls)


@pytest.fixture
def initialized_pool(scripted_pool: ECLPPool, block: BlockContext) -> ECLPPool:
    """Scripted pool initialized with (1000, 1000): 1000 shares, invariant 500."""
    scripted_pool.on_initialize_pool(make_init_request([1000, 1000], recipient=ALICE), block)
    return scripted_pool
