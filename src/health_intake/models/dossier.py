"""Dossier models — the underwriting record built by the interview.

  - CaseFacts: structured extraction target of one case
  - Case: one reported medical episode within a domain
  - Answer: immutable journal entry (question, label shown, raw answer)
  - RiskSport: data-only risk sport record (filled by other tooling)
  - GlobalFlags: quick filters derived from the cases
  - Questionnaire: aggregate root owning cases, journal and consent

Every model is frozen, uses tuples for sequences and read-only mappings
(see :func:`read_only`), so a dossier value is never mutated once built.
The engine derives new values with ``model_copy(update=...)``, which skips
validation: mappings passed in an update must already be wrapped.
"""

from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer

from .enums import AnswerCategory, CaseCategory, Domain

# Raw answer as handed over by the presentation layer.  Any value is
# journaled; only the sentinels recognised by extraction carry meaning.
AnswerValue = Any


def read_only(mapping: Mapping) -> Mapping:
    """Read-only snapshot of ``mapping`` for storage on a frozen model."""
    return MappingProxyType(dict(mapping))


def thaw(mapping: Mapping) -> dict:
    """Plain dict copy of a read-only mapping, for serialisation."""
    return dict(mapping)


# Variant name ("generic", insurer key) → formatted summary
SummaryMap = Annotated[
    Dict[str, str],
    AfterValidator(read_only),
    PlainSerializer(thaw, return_type=Dict[str, str]),
]


class CaseFacts(BaseModel):
    """Structured facts of a case, exploitable by underwriters.

    ``sequelae`` and ``hospitalizations`` are " | "-joined audit trails
    rather than parsed structures.
    """

    model_config = ConfigDict(frozen=True)

    diagnosis: str = ""
    # Years as strings ("2019"); end_date None while unknown / ongoing
    start_date: str = ""
    end_date: Optional[str] = None
    ongoing: bool = True
    treatments: str = ""
    hospitalizations: str = ""
    work_stop_months: Optional[int] = None
    sequelae: str = ""
    doctor_or_clinic: str = ""


class Case(BaseModel):
    """One reported episode (e.g. "burn-out 2021", "hernie discale")."""

    model_config = ConfigDict(frozen=True)

    id: str
    domain: Domain
    category: CaseCategory
    title: str = ""
    facts: CaseFacts = CaseFacts()
    # Every answer given while this case was active, verbatim
    raw_notes: Tuple[str, ...] = ()
    summaries: SummaryMap = Field(default_factory=dict, validate_default=True)


class Answer(BaseModel):
    """Journal entry: exactly what the respondent answered, and to what."""

    model_config = ConfigDict(frozen=True)

    id: str
    question_id: str
    # Label as displayed at answer time, not re-derived from the catalogue later
    question_label: str
    category: AnswerCategory
    raw_answer: str
    normalized: AnswerValue = None
    linked_case_id: Optional[str] = None
    linked_risk_sport_id: Optional[str] = None
    created_at: datetime


class RiskSportFacts(BaseModel):
    model_config = ConfigDict(frozen=True)

    since_year: Optional[int] = None
    frequency_per_year: Optional[int] = None
    level: Literal["leisure", "advanced", "competition", "pro"] = "leisure"
    main_locations: Optional[str] = None
    has_accident_history: bool = False
    last_accident_date: Optional[str] = None
    accident_details: Optional[str] = None
    safety_equipments: Optional[str] = None
    club_or_license: Optional[str] = None


class RiskSport(BaseModel):
    """Risk sport practised by the respondent.  Carried, never produced here."""

    model_config = ConfigDict(frozen=True)

    id: str
    category: str
    label: str
    facts: RiskSportFacts = RiskSportFacts()
    raw_notes: Tuple[str, ...] = ()
    summaries: SummaryMap = Field(default_factory=dict, validate_default=True)


class GlobalFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_chronic_disease: bool = False
    has_psych_history: bool = False
    has_serious_accident: bool = False
    has_risk_sports: bool = False


class Questionnaire(BaseModel):
    """Aggregate root of one interview session."""

    model_config = ConfigDict(frozen=True)

    id: str
    respondent_id: str
    cases: Tuple[Case, ...] = ()
    answers: Tuple[Answer, ...] = ()
    risk_sports: Tuple[RiskSport, ...] = ()
    global_flags: GlobalFlags = GlobalFlags()
    summaries: SummaryMap = Field(default_factory=dict, validate_default=True)
    consent_text: str = ""
    consent_accepted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    def get_case(self, case_id: str) -> Case | None:
        """Return the case with ``case_id``, or None."""
        for case in self.cases:
            if case.id == case_id:
                return case
        return None

    def cases_for(self, domain: Domain) -> list[Case]:
        """All cases opened in ``domain``, in creation order."""
        return [c for c in self.cases if c.domain == domain]

    def last_answer_for(self, question_id: str) -> Answer | None:
        """Most recent journal entry for ``question_id``, or None."""
        for answer in reversed(self.answers):
            if answer.question_id == question_id:
                return answer
        return None
