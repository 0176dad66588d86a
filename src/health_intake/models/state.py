"""Engine state — the working memory handed back and forth with the host.

The state is a frozen value: the engine never mutates it and returns a new
``EngineState`` on every transition.  It serialises with pydantic
(``model_dump_json`` / ``model_validate_json``) so hosts can persist it
between calls keyed by session.
"""

from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer

from .dossier import Questionnaire, read_only, thaw
from .enums import Domain

Verdict = Literal["yes", "no"]

ScreeningMap = Annotated[
    Dict[Domain, Verdict],
    AfterValidator(read_only),
    PlainSerializer(thaw, return_type=Dict[Domain, Verdict]),
]


class EngineState(BaseModel):
    """Working memory of one interview.

    ``current_question_id`` None means the interview is finished.
    ``respondent_sex`` feeds the traversal policy (integer profile code or
    a text label); None means unknown.
    """

    model_config = ConfigDict(frozen=True)

    questionnaire: Questionnaire
    current_domain: Optional[Domain] = None
    current_case_id: Optional[str] = None
    current_question_id: Optional[str] = None
    screening: ScreeningMap = Field(default_factory=dict, validate_default=True)
    respondent_sex: Optional[Union[int, str]] = None

    @property
    def finished(self) -> bool:
        return self.current_question_id is None
