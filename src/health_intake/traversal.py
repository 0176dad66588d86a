"""Domain traversal policy — which domains are screened, and in what order.

The order is fixed; only ``gyneco`` is conditional and is included iff the
respondent is female.  ``sports_risk`` is never traversed here.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional, Union

from health_intake.constants import FEMALE_SEX_CODE, FEMALE_SEX_LABELS
from health_intake.models.enums import Domain
from health_intake.models.state import EngineState

# Order before / after the conditional gyneco slot.
_HEAD = (
    Domain.OSTEO,
    Domain.CARDIO,
    Domain.PSY,
    Domain.ONCO,
    Domain.ENDOCRINE,
    Domain.RESPIRATORY,
    Domain.NEURO,
    Domain.DIGESTIVE,
    Domain.RENAL,
    Domain.DERM,
)
_TAIL = (
    Domain.INFECTIOUS,
    Domain.ORL_OPH,
    Domain.LIFESTYLE,
)


def is_female(sex: Union[int, str, None]) -> bool:
    """True when the profile sex designates a woman.

    Integers compare against ``FEMALE_SEX_CODE``; strings are matched
    case-insensitively against the accepted labels.  Booleans and None are
    never female.
    """
    if sex is None or isinstance(sex, bool):
        return False
    if isinstance(sex, int):
        return sex == FEMALE_SEX_CODE
    return sex.strip().lower() in FEMALE_SEX_LABELS


@lru_cache(maxsize=2)
def _order(female: bool) -> tuple[Domain, ...]:
    if female:
        return _HEAD + (Domain.GYNECO,) + _TAIL
    return _HEAD + _TAIL


def ordered_domains(state: EngineState) -> tuple[Domain, ...]:
    """Domains to screen for this respondent, in interview order."""
    return _order(is_female(state.respondent_sex))


def next_domain_after(domain: Domain, state: EngineState) -> Optional[Domain]:
    """Domain following ``domain``; None when it is last or not in the order."""
    order = ordered_domains(state)
    try:
        idx = order.index(domain)
    except ValueError:
        return None
    if idx + 1 >= len(order):
        return None
    return order[idx + 1]
