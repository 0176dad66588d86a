"""Extraction rule models for domain flow questions.

A rule describes how the answer to one flow question is folded into the
active case's facts:
  - DescriptionRule: free text seeds the diagnosis and the case title
  - AppendDiagnosisRule: a type/category choice is appended to the diagnosis
  - YearRule: a year answer sets start/end date or adds a dated fragment
  - TextRule: the raw answer replaces a text fact (e.g. treatments)
  - StatusRule: a status/control choice decides ``ongoing``
  - LabelledRule: appends "<label>: <answer>" to an audit-trail fact
  - BooleanRule: appends "<label>: Oui/Non" to an audit-trail fact
  - WorkStopRule: maps a duration option to ``work_stop_months``
  - QuantityRule: appends "<label>: ~<n> <unit>" for positive numbers

The discriminated ``ExtractRule`` union uses the ``rule`` field as its
discriminator so Pydantic can deserialise YAML dicts directly into the
correct type.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Facts that accumulate " | "-joined fragments.
TrailField = Literal["sequelae", "hospitalizations"]


class PhraseMatcher(BaseModel):
    """Matches an answer against domain-specific phrases.

    A text matches when it starts with any ``prefix``, contains any
    ``contains`` entry, or equals any ``equals`` entry.
    """

    model_config = ConfigDict(frozen=True)

    prefix: List[str] = []
    contains: List[str] = []
    equals: List[str] = []

    def matches(self, text: str) -> bool:
        return (
            any(text.startswith(p) for p in self.prefix)
            or any(c in text for c in self.contains)
            or text in self.equals
        )


class DescriptionRule(BaseModel):
    """Free-text description → diagnosis + truncated title."""

    model_config = ConfigDict(frozen=True)

    rule: Literal["description"] = "description"
    # Used when the respondent leaves the description blank
    fallback_diagnosis: Optional[str] = None
    fallback_title: Optional[str] = None


class AppendDiagnosisRule(BaseModel):
    """Type/category choice appended to the diagnosis, never replacing it."""

    model_config = ConfigDict(frozen=True)

    rule: Literal["append_diagnosis"] = "append_diagnosis"


class YearRule(BaseModel):
    """Year answer within the accepted window.

    With ``field`` set, the year is written to that date fact.  With
    ``label`` set instead, "<label>: <year>" is appended to ``target``.
    """

    model_config = ConfigDict(frozen=True)

    rule: Literal["year"] = "year"
    field: Optional[Literal["start_date", "end_date"]] = None
    label: Optional[str] = None
    target: TrailField = "sequelae"
    clears_ongoing: bool = False


class TextRule(BaseModel):
    """Raw answer replaces a text fact."""

    model_config = ConfigDict(frozen=True)

    rule: Literal["text"] = "text"
    field: Literal["treatments", "doctor_or_clinic"] = "treatments"


class StatusRule(BaseModel):
    """Status/control choice, appended verbatim to sequelae.

    Exactly one matcher is declared:
      - ``resolved``: ongoing becomes false when the answer matches
      - ``chronic``: ongoing becomes true on match, unchanged otherwise
    """

    model_config = ConfigDict(frozen=True)

    rule: Literal["status"] = "status"
    resolved: Optional[PhraseMatcher] = None
    chronic: Optional[PhraseMatcher] = None

    @model_validator(mode="after")
    def _one_matcher(self):
        if (self.resolved is None) == (self.chronic is None):
            raise ValueError("status rule needs exactly one of 'resolved' or 'chronic'")
        return self


class LabelledRule(BaseModel):
    """Appends "<label>: <answer>" to an audit-trail fact.

    ``ongoing_when`` optionally drives the ``ongoing`` fact:
      - mode "set": ongoing becomes the match result
      - mode "escalate": ongoing becomes true on match, unchanged otherwise
    """

    model_config = ConfigDict(frozen=True)

    rule: Literal["labelled"] = "labelled"
    label: str
    target: TrailField = "sequelae"
    ongoing_when: Optional[PhraseMatcher] = None
    ongoing_mode: Literal["set", "escalate"] = "escalate"
    # Strip the answer and skip it entirely when blank (detail questions)
    skip_blank: bool = False


class BooleanRule(BaseModel):
    """Appends "<label>: Oui/Non" to an audit-trail fact."""

    model_config = ConfigDict(frozen=True)

    rule: Literal["boolean"] = "boolean"
    label: str
    target: TrailField = "sequelae"
    ongoing_if_yes: bool = False


class WorkStopRule(BaseModel):
    """Maps a work-stop duration option to approximate months."""

    model_config = ConfigDict(frozen=True)

    rule: Literal["work_stop"] = "work_stop"
    months: Dict[str, int]


class QuantityRule(BaseModel):
    """Appends "<label>: ~<n> <unit>" when the numeric answer is positive."""

    model_config = ConfigDict(frozen=True)

    rule: Literal["quantity"] = "quantity"
    label: str
    unit: str = ""
    target: TrailField = "sequelae"


# Discriminated union: pydantic picks the rule type from the "rule" field.
ExtractRule = Annotated[
    Union[
        DescriptionRule,
        AppendDiagnosisRule,
        YearRule,
        TextRule,
        StatusRule,
        LabelledRule,
        BooleanRule,
        WorkStopRule,
        QuantityRule,
    ],
    Field(discriminator="rule"),
]
