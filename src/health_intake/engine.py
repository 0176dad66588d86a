"""IntakeEngine — the transition function of the adaptive intake interview.

Stateless engine pattern: the host passes the current :class:`EngineState`
and an answer, the engine computes and returns the next state.  Nothing is
kept in memory between calls and no I/O happens during a transition, so
hosts are free to persist the state however they like.  The only outside
input is the clock stamping the journal; see :class:`IntakeEngine`.

Regions of the interview:
    Screening      — current question is a domain's yes/no gate
    In-flow        — current question is mid-flow for the active case
    Flow-terminal  — current question is the flow's "another case?" boolean

Every transition appends exactly one Answer to the journal before
branching.  Completion is ``current_question_id is None``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from health_intake.cases import attach_case, open_new_case, replace_case
from health_intake.constants import ANOTHER_CASE_SUFFIX
from health_intake.extraction import FactExtractionMapper, is_yes, to_raw_string
from health_intake.models.dossier import (
    Answer,
    AnswerValue,
    GlobalFlags,
    Questionnaire,
    read_only,
)
from health_intake.models.enums import AnswerCategory, CaseCategory, Domain
from health_intake.models.question import Question
from health_intake.models.state import EngineState
from health_intake.registry import QuestionRegistry
from health_intake.routing import router_for
from health_intake.traversal import next_domain_after, ordered_domains

logger = logging.getLogger(__name__)

# Journal question id / label of the consent entry.
CONSENT_QUESTION_ID = "consent"
CONSENT_QUESTION_LABEL = "Consentement"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def answer_category(question: Question) -> AnswerCategory:
    """Journal tag of an answer to ``question``."""
    if question.is_screening:
        return AnswerCategory.GENERAL
    if question.domain == Domain.SPORTS_RISK:
        return AnswerCategory.SPORT
    return AnswerCategory.MODULE


def derive_global_flags(questionnaire: Questionnaire) -> GlobalFlags:
    """Quick underwriting filters computed from the finished dossier.

    ``has_serious_accident`` is owned by other tooling and kept as is.
    """
    return GlobalFlags(
        has_chronic_disease=any(
            c.facts.ongoing and c.domain != Domain.LIFESTYLE for c in questionnaire.cases
        ),
        has_psych_history=any(c.category == CaseCategory.PSY for c in questionnaire.cases),
        has_serious_accident=questionnaire.global_flags.has_serious_accident,
        has_risk_sports=bool(questionnaire.risk_sports),
    )


class IntakeEngine:
    """Drives the interview one answer at a time.

    Args:
        registry: a loaded :class:`QuestionRegistry`
        mapper: extraction mapper; built from the registry when omitted
        clock: returns the timestamp stamped on answers and on
            ``updated_at``.  Defaults to the UTC wall clock, in which case
            two calls with the same (state, answer) differ in those
            timestamps only.  Hosts that replay or compare transitions
            must inject a fixed clock, which makes :meth:`apply_answer` a
            pure function of its arguments.
    """

    def __init__(
        self,
        registry: QuestionRegistry,
        *,
        mapper: FactExtractionMapper | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._registry = registry
        self._mapper = mapper or FactExtractionMapper.from_registry(registry)
        self._clock = clock or _utcnow

    @property
    def registry(self) -> QuestionRegistry:
        return self._registry

    # ==================================================================
    # State lifecycle
    # ==================================================================

    def create_state(
        self,
        respondent_id: str,
        respondent_sex: Union[int, str, None] = None,
        questionnaire_id: str | None = None,
    ) -> EngineState:
        """Blank state positioned on the first domain's screening question."""
        now = self._clock()
        questionnaire = Questionnaire(
            id=questionnaire_id or f"hq_{uuid.uuid4().hex[:12]}",
            respondent_id=respondent_id,
            created_at=now,
            updated_at=now,
        )
        state = EngineState(questionnaire=questionnaire, respondent_sex=respondent_sex)
        first = ordered_domains(state)[0]
        return state.model_copy(
            update={"current_question_id": self._registry.screening_question_for(first).qid}
        )

    def current_question(self, state: EngineState) -> Optional[Question]:
        """The question to ask next, or None once the interview is finished."""
        if state.current_question_id is None:
            return None
        q = self._registry.find_question(state.current_question_id)
        if q is None:
            logger.warning("Unknown current question id: %s", state.current_question_id)
        return q

    # ==================================================================
    # Transition
    # ==================================================================

    def apply_answer(self, state: EngineState, answer: AnswerValue) -> EngineState:
        """Record ``answer`` to the current question and compute the next state.

        A finished state (or one pointing at an unknown question) is
        returned unchanged.
        """
        question = self.current_question(state)
        if question is None:
            logger.debug("apply_answer() on a finished state; ignoring")
            return state

        state = self._journal(state, question, answer)

        if question.is_screening:
            next_state = self._after_screening(state, question, answer)
        else:
            next_state = self._after_flow_question(state, question, answer)

        logger.debug(
            "%s → %s (domain=%s, case=%s)",
            question.qid,
            next_state.current_question_id,
            next_state.current_domain.value if next_state.current_domain else None,
            next_state.current_case_id,
        )

        if next_state.finished:
            next_state = self._complete(next_state)
        return next_state

    def record_consent(self, state: EngineState, text: str) -> EngineState:
        """Store the accepted consent text on a finished interview.

        Raises:
            ValueError: if the interview is not finished yet.
        """
        if not state.finished:
            raise ValueError("Consent can only be recorded once the interview is finished")
        now = self._clock()
        qn = state.questionnaire
        entry = Answer(
            id=f"ans_{len(qn.answers) + 1}",
            question_id=CONSENT_QUESTION_ID,
            question_label=CONSENT_QUESTION_LABEL,
            category=AnswerCategory.CONSENT,
            raw_answer=text,
            normalized=text,
            created_at=now,
        )
        qn = qn.model_copy(
            update={
                "answers": qn.answers + (entry,),
                "consent_text": text,
                "consent_accepted_at": now,
                "updated_at": now,
            }
        )
        return state.model_copy(update={"questionnaire": qn})

    # ------------------------------------------------------------------
    # Transition steps
    # ------------------------------------------------------------------

    def _journal(
        self, state: EngineState, question: Question, answer: AnswerValue
    ) -> EngineState:
        """Append one Answer record, linked to the active case if any."""
        now = self._clock()
        qn = state.questionnaire
        entry = Answer(
            id=f"ans_{len(qn.answers) + 1}",
            question_id=question.qid,
            question_label=question.label,
            category=answer_category(question),
            raw_answer=to_raw_string(answer),
            normalized=answer,
            linked_case_id=state.current_case_id,
            created_at=now,
        )
        qn = qn.model_copy(update={"answers": qn.answers + (entry,), "updated_at": now})
        return state.model_copy(update={"questionnaire": qn})

    def _after_screening(
        self, state: EngineState, question: Question, answer: AnswerValue
    ) -> EngineState:
        domain = self._registry.domain_for_screening(question.qid)
        if domain is None:
            logger.warning("Screening question %s gates no domain", question.qid)
            return state.model_copy(update={"current_question_id": None})

        yes = is_yes(answer)
        screening = {**state.screening, domain: "yes" if yes else "no"}
        state = state.model_copy(update={"screening": read_only(screening)})
        if yes:
            return self._open_case(state, domain)
        return self._leave_domain(state, domain)

    def _after_flow_question(
        self, state: EngineState, question: Question, answer: AnswerValue
    ) -> EngineState:
        domain = state.current_domain
        if domain is None:
            logger.warning("Flow question %s answered with no open domain", question.qid)
            return state.model_copy(update={"current_question_id": None})

        state = self._extract(state, question, answer)

        flow = self._registry.flow_for(domain)
        if flow and flow[-1].qid == question.qid:
            # Flow-terminal: loop on another case or hand off to the next domain
            if question.qid.endswith(ANOTHER_CASE_SUFFIX) and is_yes(answer):
                return self._open_case(state, domain)
            return self._leave_domain(state, domain)

        next_qid = router_for(domain).next_question_id(question, answer, state, flow)
        if next_qid is None:
            return self._leave_domain(state, domain)
        return state.model_copy(update={"current_question_id": next_qid})

    def _extract(
        self, state: EngineState, question: Question, answer: AnswerValue
    ) -> EngineState:
        """Fold the answer into the active case's facts and notes."""
        qn = state.questionnaire
        case = qn.get_case(state.current_case_id) if state.current_case_id else None
        if case is None:
            logger.warning("No active case for %s; answer journaled only", question.qid)
            return state
        updated = self._mapper.apply_to_active_case(case, question, answer)
        return state.model_copy(update={"questionnaire": replace_case(qn, updated)})

    def _open_case(self, state: EngineState, domain: Domain) -> EngineState:
        """Open a case in ``domain`` and point at its first flow question."""
        qn = state.questionnaire
        case = open_new_case(domain, qn.cases)
        state = state.model_copy(update={"questionnaire": attach_case(qn, case)})

        first = self._registry.first_question_of(domain)
        if first is None:
            logger.warning("Domain %s has no flow; case %s left empty", domain.value, case.id)
            return self._leave_domain(state, domain)
        return state.model_copy(
            update={
                "current_domain": domain,
                "current_case_id": case.id,
                "current_question_id": first.qid,
            }
        )

    def _leave_domain(self, state: EngineState, domain: Domain) -> EngineState:
        """Move to the next domain's screening question, or finish."""
        nxt = next_domain_after(domain, state)
        next_qid = (
            self._registry.screening_question_for(nxt).qid if nxt is not None else None
        )
        return state.model_copy(
            update={
                "current_domain": None,
                "current_case_id": None,
                "current_question_id": next_qid,
            }
        )

    def _complete(self, state: EngineState) -> EngineState:
        qn = state.questionnaire
        qn = qn.model_copy(update={"global_flags": derive_global_flags(qn)})
        logger.info(
            "Interview %s completed: %d cases, %d answers",
            qn.id,
            len(qn.cases),
            len(qn.answers),
        )
        return state.model_copy(update={"questionnaire": qn})
