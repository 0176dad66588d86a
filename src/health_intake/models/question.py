"""Question model for the intake catalogue.

Each question type maps to a specific UI component:
    - boolean: yes/no toggle (screening gates, "another case?")
    - choice: pick one of ``options``
    - text / textarea: free text, stored verbatim
    - number: numeric input
    - year: four-digit year input

Screening questions belong to the ``"screening"`` pseudo-domain; flow
questions belong to a real ``Domain`` and may carry an ``extract`` rule
that folds the answer into the active case.
"""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from .enums import Domain, QuestionType
from .extraction import ExtractRule


class Question(BaseModel):
    """Immutable catalogue entry."""

    model_config = ConfigDict(frozen=True)

    qid: str
    domain: Union[Domain, Literal["screening"]]
    label: str
    question_type: QuestionType
    help_text: Optional[str] = None
    # Option labels for choice questions; the label itself is the answer value
    options: Optional[List[str]] = None
    extract: Optional[ExtractRule] = None

    @model_validator(mode="after")
    def _chk(self):
        if self.question_type == QuestionType.CHOICE and not self.options:
            raise ValueError(f"choice question {self.qid} must declare options")
        return self

    @property
    def is_screening(self) -> bool:
        """True for the per-domain gate questions."""
        return self.domain == "screening"
