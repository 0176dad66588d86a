"""Question routers — pick the next question inside a domain flow.

Routers decide within a flow only.  The terminal "another case?" question
and domain hand-offs are handled by the engine.

  - :class:`LinearRouter` advances by position in the flow
  - :class:`LifestyleRouter` skips the smoking, substances and weight
    detail questions that do not apply to the answers given
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from health_intake.constants import LIFESTYLE_YES_SENTINELS
from health_intake.extraction import is_yes
from health_intake.models.dossier import AnswerValue
from health_intake.models.enums import Domain
from health_intake.models.question import Question
from health_intake.models.state import EngineState

logger = logging.getLogger(__name__)

NEVER_SMOKED = "Jamais fumé régulièrement"
FORMER_SMOKER = "Ancien fumeur"


class QuestionRouter(ABC):
    """Chooses the question following ``question`` in its flow."""

    @abstractmethod
    def next_question_id(
        self,
        question: Question,
        answer: AnswerValue,
        state: EngineState,
        flow: list[Question],
    ) -> Optional[str]:
        """Return the next qid in the flow, or None when the flow is exhausted."""
        ...


class LinearRouter(QuestionRouter):
    """Next question by array position."""

    def next_question_id(self, question, answer, state, flow):
        ids = [q.qid for q in flow]
        try:
            idx = ids.index(question.qid)
        except ValueError:
            logger.warning("Question %s not found in its flow", question.qid)
            return None
        if idx + 1 >= len(ids):
            return None
        return ids[idx + 1]


class LifestyleRouter(LinearRouter):
    """Conditional skips inside the lifestyle flow.

    Any question not listed below falls back to linear order.
    """

    def next_question_id(self, question, answer, state, flow):
        qid = question.qid
        yes = is_yes(answer, LIFESTYLE_YES_SENTINELS)

        if qid == "life_description":
            return "life_smoking_status"
        if qid == "life_smoking_status":
            if answer == NEVER_SMOKED:
                return "life_other_substances"
            return "life_smoking_cigs_per_day"
        if qid == "life_smoking_cigs_per_day":
            return "life_smoking_sinceYear"
        if qid == "life_smoking_sinceYear":
            status = state.questionnaire.last_answer_for("life_smoking_status")
            if status is not None and status.normalized == FORMER_SMOKER:
                return "life_smoking_quitYear"
            return "life_other_substances"
        if qid == "life_smoking_quitYear":
            return "life_other_substances"
        if qid == "life_other_substances":
            return "life_other_substances_details" if yes else "life_activity_level"
        if qid == "life_other_substances_details":
            return "life_activity_level"
        if qid == "life_activity_level":
            return "life_night_work"
        if qid == "life_night_work":
            return "life_weight_change"
        if qid == "life_weight_change":
            return "life_weight_change_details" if yes else "life_another_case"
        if qid == "life_weight_change_details":
            return "life_another_case"
        return super().next_question_id(question, answer, state, flow)


_LINEAR = LinearRouter()
_ROUTERS: dict[Domain, QuestionRouter] = {
    Domain.LIFESTYLE: LifestyleRouter(),
}


def router_for(domain: Domain) -> QuestionRouter:
    """Router used inside ``domain``'s flow."""
    return _ROUTERS.get(domain, _LINEAR)
