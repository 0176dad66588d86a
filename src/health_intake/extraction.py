"""FactExtractionMapper — folds flow answers into the active case's facts.

The mapper holds a ``(domain, qid) → rule`` table built from the ``extract``
entries of the flow catalogue and dispatches on the rule kind:

  - **description**: diagnosis + truncated title
  - **append_diagnosis**: enriches the diagnosis, never replaces it
  - **year**: start/end date or a dated audit-trail fragment
  - **text**: raw answer into a text fact
  - **status**: ongoing from a resolved/chronic phrase match
  - **labelled** / **boolean** / **quantity**: audit-trail fragments
  - **work_stop**: duration option → approximate months

Every non-empty answer is also appended verbatim to ``raw_notes``, whether
or not a rule exists for the question.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Optional, Union

from health_intake.constants import (
    DIAGNOSIS_SEPARATOR,
    FRAGMENT_SEPARATOR,
    NO_LABEL,
    TITLE_ELLIPSIS,
    TITLE_MAX_LENGTH,
    YEAR_MAX,
    YEAR_MIN,
    YES_LABEL,
    YES_SENTINELS,
)
from health_intake.models.dossier import AnswerValue, Case
from health_intake.models.enums import Domain
from health_intake.models.extraction import (
    AppendDiagnosisRule,
    BooleanRule,
    DescriptionRule,
    ExtractRule,
    LabelledRule,
    QuantityRule,
    StatusRule,
    TextRule,
    WorkStopRule,
    YearRule,
)
from health_intake.models.question import Question

logger = logging.getLogger(__name__)

# Leading integer of a string, as typed in a year/number input.
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ---------------------------------------------------------------------------
# Answer helpers
# ---------------------------------------------------------------------------

def _format_number(n: Union[int, float]) -> str:
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return str(n)


def to_raw_string(value: AnswerValue) -> str:
    """Journal rendering of an answer value.

    Booleans become "Oui"/"Non", lists are joined with ", " and None is
    the empty string.  Any other value is rendered with ``str()``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return YES_LABEL if value else NO_LABEL
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def is_yes(value: AnswerValue, sentinels: set[str] = YES_SENTINELS) -> bool:
    """True for ``True`` or one of the affirmative string sentinels."""
    if value is True:
        return True
    return isinstance(value, str) and value in sentinels


def _parse_int(value: AnswerValue) -> Optional[int]:
    """Integer reading of a numeric answer; None when there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        return int(m.group(1)) if m else None
    return None


def parse_year(value: AnswerValue) -> Optional[int]:
    """Year in ``[YEAR_MIN, YEAR_MAX)`` read from the answer, else None."""
    year = _parse_int(value)
    if year is None or not (YEAR_MIN <= year < YEAR_MAX):
        return None
    return year


def parse_quantity(value: AnswerValue) -> Optional[Union[int, float]]:
    """Numeric reading of a quantity answer; floats are kept as given."""
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    return _parse_int(value)


def truncate_title(text: str) -> str:
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS
    return text


def append_fragment(existing: str, fragment: str) -> str:
    """Join ``fragment`` onto an audit trail with the fragment separator."""
    return f"{existing}{FRAGMENT_SEPARATOR}{fragment}" if existing else fragment


def _with_facts(case: Case, **changes) -> Case:
    return case.model_copy(update={"facts": case.facts.model_copy(update=changes)})


def _append_to(case: Case, target: str, fragment: str) -> dict:
    return {target: append_fragment(getattr(case.facts, target), fragment)}


# ---------------------------------------------------------------------------
# Mapper
# ---------------------------------------------------------------------------

class FactExtractionMapper:
    """Applies per-question extraction rules to the active case.

    Args:
        rules: ``(domain, qid) → rule`` table, usually
            :meth:`QuestionRegistry.extraction_rules`
    """

    def __init__(self, rules: dict[tuple[Domain, str], ExtractRule]) -> None:
        self._rules = dict(rules)
        self._handlers: dict[str, Callable[[Case, ExtractRule, AnswerValue, str], Case]] = {
            "description": self._apply_description,
            "append_diagnosis": self._apply_append_diagnosis,
            "year": self._apply_year,
            "text": self._apply_text,
            "status": self._apply_status,
            "labelled": self._apply_labelled,
            "boolean": self._apply_boolean,
            "work_stop": self._apply_work_stop,
            "quantity": self._apply_quantity,
        }

    @classmethod
    def from_registry(cls, registry) -> "FactExtractionMapper":
        return cls(registry.extraction_rules())

    def rule_for(self, domain: Domain, qid: str) -> Optional[ExtractRule]:
        return self._rules.get((domain, qid))

    def apply_to_active_case(
        self, case: Case, question: Question, answer: AnswerValue
    ) -> Case:
        """Return ``case`` updated with ``answer`` to ``question``.

        The verbatim rendering goes to ``raw_notes`` when non-empty; the
        question's rule, if any, then updates the facts.
        """
        raw = to_raw_string(answer)
        if raw:
            case = case.model_copy(update={"raw_notes": case.raw_notes + (raw,)})

        rule = self._rules.get((case.domain, question.qid))
        if rule is None:
            return case
        handler = self._handlers.get(rule.rule)
        if handler is None:
            logger.warning("No handler for extraction rule %r (%s)", rule.rule, question.qid)
            return case
        return handler(case, rule, answer, raw)

    # ------------------------------------------------------------------
    # Rule handlers
    # ------------------------------------------------------------------

    def _apply_description(
        self, case: Case, rule: DescriptionRule, answer: AnswerValue, raw: str
    ) -> Case:
        if raw:
            diagnosis, title = raw, truncate_title(raw)
        else:
            diagnosis = rule.fallback_diagnosis or ""
            title = rule.fallback_title or ""
        case = case.model_copy(update={"title": title})
        return _with_facts(case, diagnosis=diagnosis)

    def _apply_append_diagnosis(
        self, case: Case, rule: AppendDiagnosisRule, answer: AnswerValue, raw: str
    ) -> Case:
        if not raw:
            return case
        prev = case.facts.diagnosis
        return _with_facts(
            case, diagnosis=f"{prev}{DIAGNOSIS_SEPARATOR}{raw}" if prev else raw
        )

    def _apply_year(
        self, case: Case, rule: YearRule, answer: AnswerValue, raw: str
    ) -> Case:
        year = parse_year(answer)
        if year is None:
            logger.debug("Ignoring year answer %r for case %s", answer, case.id)
            return case
        changes: dict = {}
        if rule.field is not None:
            changes[rule.field] = str(year)
        if rule.label is not None:
            changes.update(_append_to(case, rule.target, f"{rule.label}: {year}"))
        if rule.clears_ongoing:
            changes["ongoing"] = False
        return _with_facts(case, **changes)

    def _apply_text(
        self, case: Case, rule: TextRule, answer: AnswerValue, raw: str
    ) -> Case:
        return _with_facts(case, **{rule.field: raw})

    def _apply_status(
        self, case: Case, rule: StatusRule, answer: AnswerValue, raw: str
    ) -> Case:
        changes = _append_to(case, "sequelae", raw) if raw else {}
        if rule.resolved is not None:
            changes["ongoing"] = not rule.resolved.matches(raw)
        else:
            changes["ongoing"] = case.facts.ongoing or rule.chronic.matches(raw)
        return _with_facts(case, **changes)

    def _apply_labelled(
        self, case: Case, rule: LabelledRule, answer: AnswerValue, raw: str
    ) -> Case:
        text = raw.strip() if rule.skip_blank else raw
        if rule.skip_blank and not text:
            return case
        changes = _append_to(case, rule.target, f"{rule.label}: {text}")
        if rule.ongoing_when is not None:
            matched = rule.ongoing_when.matches(text)
            if rule.ongoing_mode == "set":
                changes["ongoing"] = matched
            else:
                changes["ongoing"] = case.facts.ongoing or matched
        return _with_facts(case, **changes)

    def _apply_boolean(
        self, case: Case, rule: BooleanRule, answer: AnswerValue, raw: str
    ) -> Case:
        yes = is_yes(answer)
        changes = _append_to(
            case, rule.target, f"{rule.label}: {YES_LABEL if yes else NO_LABEL}"
        )
        if rule.ongoing_if_yes and yes:
            changes["ongoing"] = True
        return _with_facts(case, **changes)

    def _apply_work_stop(
        self, case: Case, rule: WorkStopRule, answer: AnswerValue, raw: str
    ) -> Case:
        return _with_facts(case, work_stop_months=rule.months.get(raw))

    def _apply_quantity(
        self, case: Case, rule: QuantityRule, answer: AnswerValue, raw: str
    ) -> Case:
        n = parse_quantity(answer)
        if n is None or n <= 0:
            return case
        fragment = f"{rule.label}: ~{_format_number(n)} {rule.unit}".rstrip()
        return _with_facts(case, **_append_to(case, rule.target, fragment))
