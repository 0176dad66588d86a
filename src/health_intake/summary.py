"""DossierSummarizer — Jinja2 rendering of case and questionnaire summaries.

Loads templates from the ``template/`` directory and stores the rendered
text under a variant key (``"generic"`` by default, or an insurer key) in
the ``summaries`` mapping of each case and of the questionnaire.
"""

from __future__ import annotations

import logging
from pathlib import Path

import jinja2

from health_intake.models.dossier import Case, Questionnaire, read_only
from health_intake.models.state import EngineState

logger = logging.getLogger(__name__)

GENERIC_VARIANT = "generic"

_CASE_TEMPLATE = "case_summary.jinja2"
_QUESTIONNAIRE_TEMPLATE = "questionnaire_summary.jinja2"


class DossierSummarizer:
    """Renders underwriting summaries for a finished interview.

    Args:
        template_dir: optional override for the template directory.
            Defaults to ``template/`` sibling of this module.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "template"
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def render(self, template_name: str, **context) -> str:
        """Render a named template with arbitrary context."""
        template = self._env.get_template(template_name)
        return template.render(**context)

    def render_case(self, case: Case) -> str:
        return self.render(_CASE_TEMPLATE, case=case).strip()

    def render_questionnaire(self, state: EngineState) -> str:
        qn = state.questionnaire
        screened_no = [d.value for d, v in state.screening.items() if v == "no"]
        return self.render(
            _QUESTIONNAIRE_TEMPLATE,
            questionnaire=qn,
            flags=qn.global_flags,
            screened_no=screened_no,
        ).strip()

    def summarize(self, state: EngineState, variant: str = GENERIC_VARIANT) -> EngineState:
        """Return ``state`` with every case and the questionnaire summarised.

        Existing summaries under other variant keys are preserved.
        """
        qn = state.questionnaire
        cases = tuple(
            c.model_copy(
                update={"summaries": read_only({**c.summaries, variant: self.render_case(c)})}
            )
            for c in qn.cases
        )
        state = state.model_copy(
            update={"questionnaire": qn.model_copy(update={"cases": cases})}
        )
        overall = self.render_questionnaire(state)
        qn = state.questionnaire
        qn = qn.model_copy(update={"summaries": read_only({**qn.summaries, variant: overall})})
        logger.info("Rendered %r summaries for %d cases", variant, len(cases))
        return state.model_copy(update={"questionnaire": qn})
