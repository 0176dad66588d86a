"""Public model re-exports for health_intake.

Consumers should import from ``health_intake.models`` rather than
reaching into sub-modules directly.
"""

# --- Enumerations ---
from health_intake.models.enums import (
    AnswerCategory,
    CaseCategory,
    Domain,
    QuestionType,
)

# --- Extraction rules ---
from health_intake.models.extraction import (
    AppendDiagnosisRule,
    BooleanRule,
    DescriptionRule,
    ExtractRule,
    LabelledRule,
    PhraseMatcher,
    QuantityRule,
    StatusRule,
    TextRule,
    WorkStopRule,
    YearRule,
)

# --- Questions ---
from health_intake.models.question import Question

# --- Dossier ---
from health_intake.models.dossier import (
    Answer,
    AnswerValue,
    Case,
    CaseFacts,
    GlobalFlags,
    Questionnaire,
    RiskSport,
    RiskSportFacts,
    read_only,
)

# --- Engine state ---
from health_intake.models.state import EngineState

__all__ = [
    # Enumerations
    "AnswerCategory",
    "CaseCategory",
    "Domain",
    "QuestionType",
    # Extraction rules
    "AppendDiagnosisRule",
    "BooleanRule",
    "DescriptionRule",
    "ExtractRule",
    "LabelledRule",
    "PhraseMatcher",
    "QuantityRule",
    "StatusRule",
    "TextRule",
    "WorkStopRule",
    "YearRule",
    # Questions
    "Question",
    # Dossier
    "Answer",
    "AnswerValue",
    "Case",
    "CaseFacts",
    "GlobalFlags",
    "Questionnaire",
    "RiskSport",
    "RiskSportFacts",
    "read_only",
    # State
    "EngineState",
]
