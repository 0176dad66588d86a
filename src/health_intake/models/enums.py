"""Enumerations for the intake interview."""

import enum


class Domain(str, enum.Enum):
    """Medical / lifestyle topic screened by the interview.

    ``SPORTS_RISK`` has a screening question but no modelled flow and is
    not part of the traversal order; risk sports are captured elsewhere.
    """

    OSTEO = "osteo"
    CARDIO = "cardio"
    PSY = "psy"
    ONCO = "onco"
    ENDOCRINE = "endocrine"
    RESPIRATORY = "respiratory"
    NEURO = "neuro"
    DIGESTIVE = "digestive"
    RENAL = "renal"
    DERM = "derm"
    GYNECO = "gyneco"
    INFECTIOUS = "infectious"
    ORL_OPH = "orl_oph"
    LIFESTYLE = "lifestyle"
    SPORTS_RISK = "sports_risk"


class CaseCategory(str, enum.Enum):
    """Coarse grouping of cases used by underwriters to sort dossiers."""

    GENERAL = "general"
    PSY = "psy"
    CARDIO = "cardio"
    BACK = "back"
    METABOLIC = "metabolic"
    RESPIRATORY = "respiratory"
    CANCER = "cancer"
    NEURO = "neuro"
    OTHER = "other"


class AnswerCategory(str, enum.Enum):
    """Tag of a journal entry.

    general  — screening gate questions
    module   — questions of a domain flow (linked to a case)
    sport    — sports_risk questions
    summary  — summary review entries
    consent  — consent acceptance
    """

    GENERAL = "general"
    MODULE = "module"
    SPORT = "sport"
    SUMMARY = "summary"
    CONSENT = "consent"


class QuestionType(str, enum.Enum):
    """UI component a question maps to."""

    BOOLEAN = "boolean"
    CHOICE = "choice"
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    YEAR = "year"
