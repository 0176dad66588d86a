from datetime import datetime, timezone

import pytest

from health_intake.engine import IntakeEngine
from health_intake.extraction import FactExtractionMapper
from health_intake.registry import QuestionRegistry

# Every timestamp stamped by the engine under test.
FIXED_NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def registry():
    """Load the packaged QuestionRegistry once for the entire test session."""
    r = QuestionRegistry()
    r.load()
    return r


@pytest.fixture(scope="session")
def mapper(registry):
    return FactExtractionMapper.from_registry(registry)


@pytest.fixture
def engine(registry):
    """IntakeEngine with a frozen clock so transitions are deterministic."""
    return IntakeEngine(registry, clock=lambda: FIXED_NOW)


@pytest.fixture
def drive(engine):
    """Apply a sequence of answers, returning the final state."""

    def _drive(state, answers):
        for answer in answers:
            state = engine.apply_answer(state, answer)
        return state

    return _drive
