"""Case lifecycle — opening cases and folding them back into the questionnaire.

A case is opened on an affirmative screening answer or on a domain's
"another case?" answer.  Cases are never deleted; the engine swaps in an
updated value while the case is active.
"""

from __future__ import annotations

import logging
from typing import Iterable

from health_intake.models.dossier import Case, CaseFacts, Questionnaire
from health_intake.models.enums import CaseCategory, Domain

logger = logging.getLogger(__name__)

# Domains without an entry fall back to CaseCategory.OTHER.
CATEGORY_BY_DOMAIN: dict[Domain, CaseCategory] = {
    Domain.OSTEO: CaseCategory.BACK,
    Domain.CARDIO: CaseCategory.CARDIO,
    Domain.PSY: CaseCategory.PSY,
    Domain.RESPIRATORY: CaseCategory.RESPIRATORY,
    Domain.ONCO: CaseCategory.CANCER,
    Domain.NEURO: CaseCategory.NEURO,
    Domain.ENDOCRINE: CaseCategory.METABOLIC,
}


def category_for(domain: Domain) -> CaseCategory:
    return CATEGORY_BY_DOMAIN.get(domain, CaseCategory.OTHER)


def open_new_case(domain: Domain, existing_cases: Iterable[Case] = ()) -> Case:
    """Create an empty case for ``domain``.

    The id is ``<domain>_<n>`` where n is one more than the number of
    cases already opened in that domain, so ids are stable for a given
    interview history.
    """
    n = sum(1 for c in existing_cases if c.domain == domain) + 1
    case = Case(
        id=f"{domain.value}_{n}",
        domain=domain,
        category=category_for(domain),
        facts=CaseFacts(),
    )
    logger.info("Opened case %s (category=%s)", case.id, case.category.value)
    return case


def attach_case(questionnaire: Questionnaire, case: Case) -> Questionnaire:
    """Return ``questionnaire`` with ``case`` appended."""
    return questionnaire.model_copy(update={"cases": questionnaire.cases + (case,)})


def replace_case(questionnaire: Questionnaire, case: Case) -> Questionnaire:
    """Return ``questionnaire`` with the case sharing ``case.id`` swapped out.

    Raises:
        KeyError: if no case with that id exists.
    """
    if questionnaire.get_case(case.id) is None:
        raise KeyError(case.id)
    cases = tuple(case if c.id == case.id else c for c in questionnaire.cases)
    return questionnaire.model_copy(update={"cases": cases})
