"""health_intake — adaptive health intake interview engine.

Public API:
    IntakeEngine         — transition function: state + answer → next state
    QuestionRegistry     — loads the YAML question catalogue with lookup helpers
    FactExtractionMapper — folds flow answers into the active case's facts
    DossierSummarizer    — Jinja2 rendering of case / questionnaire summaries
    EngineState          — serialisable working memory of one interview
    Questionnaire        — aggregate root of the underwriting dossier

Traversal / routing:
    ordered_domains      — domains to screen for a respondent, in order
    next_domain_after    — successor domain, or None when the interview ends
    router_for           — in-flow question router for a domain
"""

from health_intake.config import EngineSettings, load_settings
from health_intake.engine import IntakeEngine
from health_intake.extraction import FactExtractionMapper
from health_intake.models import (
    Answer,
    AnswerCategory,
    Case,
    CaseCategory,
    CaseFacts,
    Domain,
    EngineState,
    GlobalFlags,
    Question,
    QuestionType,
    Questionnaire,
)
from health_intake.registry import QuestionRegistry
from health_intake.routing import LifestyleRouter, LinearRouter, QuestionRouter, router_for
from health_intake.summary import DossierSummarizer
from health_intake.traversal import next_domain_after, ordered_domains

__all__ = [
    # Engine & registry
    "IntakeEngine",
    "QuestionRegistry",
    "FactExtractionMapper",
    "DossierSummarizer",
    # Configuration
    "EngineSettings",
    "load_settings",
    # Models
    "Answer",
    "AnswerCategory",
    "Case",
    "CaseCategory",
    "CaseFacts",
    "Domain",
    "EngineState",
    "GlobalFlags",
    "Question",
    "QuestionType",
    "Questionnaire",
    # Traversal / routing
    "ordered_domains",
    "next_domain_after",
    "QuestionRouter",
    "LinearRouter",
    "LifestyleRouter",
    "router_for",
]
