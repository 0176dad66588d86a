#!/usr/bin/env python3
"""Simulate a full intake interview with mock answers.

Drives the IntakeEngine from the first screening question to completion,
printing every question asked, the mock answer chosen and the resulting
dossier (cases, facts and summaries).

By default answers are **randomised** (``--random``, on by default) so each
run explores a different path through the flows.  Use ``--no-random`` for
a deterministic run that answers "no" to every screening question except
osteo and lifestyle.

Usage::

    # Default run (random answers, unknown sex)
    python scripts/simulate_interview.py

    # Female respondent, reproducible random run
    python scripts/simulate_interview.py --sex 1 --seed 42

    # Deterministic run
    python scripts/simulate_interview.py --no-random

    # Only the exit code
    python scripts/simulate_interview.py -q
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Any

# ---------------------------------------------------------------------------
# Ensure src/ is on sys.path so the script runs from a plain checkout.
# ---------------------------------------------------------------------------
_SCRIPT_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _SCRIPT_DIR.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from health_intake.config import load_settings  # noqa: E402
from health_intake.engine import IntakeEngine  # noqa: E402
from health_intake.models.enums import QuestionType  # noqa: E402
from health_intake.models.question import Question  # noqa: E402
from health_intake.registry import QuestionRegistry  # noqa: E402
from health_intake.summary import DossierSummarizer  # noqa: E402

logger = logging.getLogger("simulate_interview")

RESPONDENT_ID = "sim_respondent"

# Safety net against routing loops.
MAX_STEPS = 1000

# Probability of answering "yes" to a screening / another-case question.
_SCREENING_YES_RATE = 0.3
_ANOTHER_CASE_YES_RATE = 0.15

# Screening gates answered "yes" in --no-random mode.
_DETERMINISTIC_YES = {"screen_osteo", "screen_lifestyle"}

_RANDOM_TEXT_POOL = [
    "Fracture poignet droit 2019",
    "Hernie discale L5-S1",
    "Burn-out en 2021",
    "Hypertension depuis 2018",
    "",
]

_SINGLE_LINE = "-" * 60
_DOUBLE_LINE = "=" * 60

_quiet = False


def _print(*args, **kwargs) -> None:
    """Print unless --quiet is active."""
    if not _quiet:
        print(*args, **kwargs)


# ---------------------------------------------------------------------------
# Mock answers
# ---------------------------------------------------------------------------

def generate_mock_answer(question: Question, rng: random.Random | None) -> Any:
    """Pick an answer for ``question``; ``rng`` None means deterministic."""
    qtype = question.question_type
    if rng is None:
        if qtype == QuestionType.BOOLEAN:
            return question.qid in _DETERMINISTIC_YES
        if qtype == QuestionType.CHOICE:
            return question.options[0]
        if qtype == QuestionType.YEAR:
            return 2019
        if qtype == QuestionType.NUMBER:
            return 10
        return "Fracture poignet droit 2019"

    if qtype == QuestionType.BOOLEAN:
        rate = _SCREENING_YES_RATE if question.is_screening else _ANOTHER_CASE_YES_RATE
        if not question.is_screening and not question.qid.endswith("_another_case"):
            rate = 0.5
        return rng.random() < rate
    if qtype == QuestionType.CHOICE:
        return rng.choice(question.options)
    if qtype == QuestionType.YEAR:
        # Occasionally out of range to exercise the year window
        return rng.choice([rng.randint(1950, 2025), 1850, "vers 2015"])
    if qtype == QuestionType.NUMBER:
        return rng.choice([0, 5, 10, 20, 7.5])
    return rng.choice(_RANDOM_TEXT_POOL)


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

def run_simulation(sex: int | str | None, seed: int | None, use_random: bool) -> int:
    settings = load_settings()
    registry = QuestionRegistry(settings.ruleset_dir)
    registry.load()
    engine = IntakeEngine(registry)
    summarizer = DossierSummarizer(settings.template_dir)
    rng = random.Random(seed) if use_random else None

    state = engine.create_state(RESPONDENT_ID, respondent_sex=sex)
    _print(_DOUBLE_LINE)
    _print(f" INTERVIEW {state.questionnaire.id} (sex={sex!r}, random={use_random}, seed={seed})")
    _print(_DOUBLE_LINE)

    steps = 0
    while not state.finished:
        if steps >= MAX_STEPS:
            logger.error("Exceeded %d steps without finishing", MAX_STEPS)
            return 1
        question = engine.current_question(state)
        if question is None:
            logger.error("Current question %s is unknown", state.current_question_id)
            return 1
        answer = generate_mock_answer(question, rng)
        prefix = "S" if question.is_screening else "Q"
        _print(f"\n [{prefix}] {question.label} ({question.qid}) -- type: {question.question_type.value}")
        if question.options:
            _print(f"     Options: {', '.join(question.options)}")
        _print(f" [A] {answer!r}")
        state = engine.apply_answer(state, answer)
        steps += 1

    state = summarizer.summarize(state)
    qn = state.questionnaire

    _print(f"\n{_DOUBLE_LINE}")
    _print(f" COMPLETED in {steps} steps: {len(qn.cases)} cases, {len(qn.answers)} answers")
    _print(_DOUBLE_LINE)
    for case in qn.cases:
        _print(f"\n{_SINGLE_LINE}")
        _print(f" {case.id} ({case.category.value})")
        _print(_SINGLE_LINE)
        _print(case.summaries.get("generic", ""))
    _print(f"\n{_SINGLE_LINE}")
    _print(qn.summaries.get("generic", ""))
    return 0


def _parse_sex(value: str) -> int | str:
    return int(value) if value.lstrip("-").isdigit() else value


def main() -> None:
    global _quiet

    parser = argparse.ArgumentParser(
        description="Simulate a full intake interview with mock answers.",
    )
    parser.add_argument(
        "--sex",
        type=_parse_sex,
        default=None,
        help="Respondent sex: integer profile code (1 = female) or a label such as 'female'",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random answer generator",
    )
    parser.add_argument(
        "--random",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Randomise mock answers (default: on). Use --no-random for deterministic mode.",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all print output (exit code still reflects success/failure)",
    )
    args = parser.parse_args()
    _quiet = args.quiet

    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    sys.exit(run_simulation(args.sex, args.seed, args.random))


if __name__ == "__main__":
    main()
