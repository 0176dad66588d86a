"""QuestionRegistry — loads the intake catalogue from ``v1/`` into typed models.

This is the single source of truth for question data at runtime.  The
registry is loaded once at startup and provides fast lookup by domain and
qid.  It is read-only after :meth:`load`.

Usage::

    registry = QuestionRegistry()   # defaults to the packaged v1/ directory
    registry.load()                 # parse screening.yaml and flows.yaml

    q = registry.screening_question_for(Domain.OSTEO)
    first = registry.first_question_of(Domain.OSTEO)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from health_intake.constants import SCREENING_DOMAIN
from health_intake.models.enums import Domain, QuestionType
from health_intake.models.extraction import ExtractRule
from health_intake.models.question import Question

logger = logging.getLogger(__name__)

_QUESTION_TYPES = {t.value for t in QuestionType}


def default_ruleset_dir() -> Path:
    """The catalogue shipped inside the package."""
    return Path(__file__).resolve().parent / "v1"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class QuestionRegistry:
    """Loads ``screening.yaml`` and ``flows.yaml`` and provides typed lookup.

    Attributes populated after :meth:`load`:

        screening  — dict[Domain, Question], one gate question per domain
        flows      — dict[Domain, list[Question]] in YAML order
    """

    def __init__(self, ruleset_dir: str | Path | None = None) -> None:
        if ruleset_dir is None:
            ruleset_dir = default_ruleset_dir()
        self._base = Path(ruleset_dir)

        # Populated by load()
        self.screening: dict[Domain, Question] = {}
        self.flows: dict[Domain, list[Question]] = {}

        # qid → Question over every loaded question
        self._by_qid: dict[str, Question] = {}
        # screening qid → the domain it gates
        self._screening_domain: dict[str, Domain] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse both catalogue files into typed models.

        Raises ``FileNotFoundError`` if a file is missing and ``ValueError``
        for an unknown question type, a duplicated qid, or a choice
        question without options.
        """
        self._load_screening()
        self._load_flows()
        logger.info(
            "QuestionRegistry loaded: %d screening questions, %d flows, %d questions",
            len(self.screening),
            len(self.flows),
            len(self._by_qid),
        )

    def _load_screening(self) -> None:
        """Load v1/screening.yaml, keyed by domain."""
        for raw in load_yaml(self._base / "screening.yaml"):
            domain = Domain(raw.pop("domain"))
            q = self._parse(raw, SCREENING_DOMAIN, where=f"screening/{domain.value}")
            self.screening[domain] = q
            self._screening_domain[q.qid] = domain

    def _load_flows(self) -> None:
        """Load v1/flows.yaml, one ordered question list per domain."""
        flows_raw = load_yaml(self._base / "flows.yaml")
        for domain_name, questions in flows_raw.items():
            domain = Domain(domain_name)
            self.flows[domain] = [
                self._parse(q_dict, domain, where=f"flows/{domain.value}")
                for q_dict in questions
            ]

    def _parse(self, q_dict: dict, domain: Domain | str, *, where: str) -> Question:
        qtype = q_dict.get("question_type")
        if qtype not in _QUESTION_TYPES:
            raise ValueError(f"Unknown question_type '{qtype}' in {where}")
        q = Question(domain=domain, **q_dict)
        if q.qid in self._by_qid:
            raise ValueError(f"Duplicate qid '{q.qid}' in {where}")
        self._by_qid[q.qid] = q
        return q

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def screening_question_for(self, domain: Domain) -> Question:
        """Return the gate question of ``domain``.

        Raises:
            KeyError: if the domain has no screening question.
        """
        return self.screening[domain]

    def flow_for(self, domain: Domain) -> list[Question]:
        """Ordered flow of ``domain``; empty for an unmodeled domain."""
        return self.flows.get(domain, [])

    def first_question_of(self, domain: Domain) -> Optional[Question]:
        flow = self.flow_for(domain)
        return flow[0] if flow else None

    def get_question(self, qid: str) -> Question:
        """Look up any screening or flow question by qid.

        Raises:
            KeyError: if the qid is unknown.
        """
        return self._by_qid[qid]

    def find_question(self, qid: str) -> Optional[Question]:
        """Like :meth:`get_question` but returns None for an unknown qid."""
        return self._by_qid.get(qid)

    def domain_for_screening(self, qid: str) -> Optional[Domain]:
        """Domain gated by the screening question ``qid``, or None."""
        return self._screening_domain.get(qid)

    def extraction_rules(self) -> dict[tuple[Domain, str], ExtractRule]:
        """All declared extraction rules keyed by (domain, qid)."""
        rules: dict[tuple[Domain, str], ExtractRule] = {}
        for domain, flow in self.flows.items():
            for q in flow:
                if q.extract is not None:
                    rules[(domain, q.qid)] = q.extract
        return rules
