"""DossierSummarizer tests: Jinja2 rendering of case and questionnaire summaries."""

import pytest

from health_intake.cases import open_new_case
from health_intake.models.dossier import CaseFacts
from health_intake.models.enums import Domain
from health_intake.models.state import EngineState
from health_intake.summary import GENERIC_VARIANT, DossierSummarizer

OSTEO_ANSWERS = [
    True,
    "Fracture poignet droit 2019",
    "Main / poignet / doigts",
    "Côté droit",
    2019,
    "Guéri, aucune gêne",
    "Non, pas du tout",
    False,
]


@pytest.fixture(scope="module")
def summarizer():
    return DossierSummarizer()


@pytest.fixture
def finished(engine, drive):
    """Osteo case reported, every other domain answered no."""
    state = engine.create_state("resp-1", respondent_sex=2, questionnaire_id="hq_sum")
    state = drive(state, OSTEO_ANSWERS)
    while not state.finished:
        state = engine.apply_answer(state, False)
    return state


class TestRenderCase:
    def test_resolved_case(self, summarizer, finished):
        text = summarizer.render_case(finished.questionnaire.cases[0])
        assert text == (
            "Fracture poignet droit 2019 [osteo / back]\n"
            "Diagnostic : Fracture poignet droit 2019\n"
            "Début : 2019\n"
            "Statut : résolu / stabilisé\n"
            "Détails : Guéri, aucune gêne | Impact travail: Non, pas du tout"
        )

    def test_all_facts(self, summarizer):
        case = open_new_case(Domain.PSY).model_copy(
            update={
                "title": "Burn-out",
                "facts": CaseFacts(
                    diagnosis="Burn-out — Burn-out / épuisement",
                    start_date="2021",
                    end_date="2022",
                    treatments="Antidépresseurs",
                    hospitalizations="Hospitalisation: Oui",
                    work_stop_months=3,
                    sequelae="Impact travail: Oui, légèrement",
                    doctor_or_clinic="Dr Martin",
                ),
            }
        )
        lines = summarizer.render_case(case).splitlines()
        assert lines == [
            "Burn-out [psy / psy]",
            "Diagnostic : Burn-out — Burn-out / épuisement",
            "Début : 2021, dernier épisode : 2022",
            "Statut : en cours",
            "Traitement : Antidépresseurs",
            "Hospitalisations : Hospitalisation: Oui",
            "Arrêt de travail max. : ~3 mois",
            "Détails : Impact travail: Oui, légèrement",
            "Médecin / clinique : Dr Martin",
        ]

    def test_empty_case(self, summarizer):
        lines = summarizer.render_case(open_new_case(Domain.DERM)).splitlines()
        assert lines == [
            "Cas sans description [derm / other]",
            "Diagnostic : non précisé",
            "Statut : en cours",
        ]

    def test_zero_month_work_stop_is_shown(self, summarizer):
        case = open_new_case(Domain.PSY)
        case = case.model_copy(update={"facts": case.facts.model_copy(update={"work_stop_months": 0})})
        assert "Arrêt de travail max. : ~0 mois" in summarizer.render_case(case)


class TestRenderQuestionnaire:
    def test_with_cases(self, summarizer, finished):
        lines = summarizer.render_questionnaire(finished).splitlines()
        assert lines[0] == "Questionnaire santé hq_sum"
        assert lines[1] == "1 cas déclaré(s) :"
        assert lines[2] == "- Fracture poignet droit 2019 (osteo, résolu)"
        assert lines[3].startswith("Sans antécédent : cardio, psy, onco")
        assert "gyneco" not in lines[3]
        assert lines[-3:] == [
            "Maladie chronique : Non",
            "Antécédents psychiques : Non",
            "Sports à risques : Non",
        ]

    def test_without_cases(self, engine, summarizer):
        state = engine.create_state("resp-1", questionnaire_id="hq_empty")
        while not state.finished:
            state = engine.apply_answer(state, False)
        text = summarizer.render_questionnaire(state)
        assert "Aucun antécédent déclaré." in text
        assert "cas déclaré(s)" not in text


class TestSummarize:
    def test_generic_variant(self, summarizer, finished):
        state = summarizer.summarize(finished)
        qn = state.questionnaire
        assert set(qn.summaries) == {GENERIC_VARIANT}
        assert qn.summaries[GENERIC_VARIANT].startswith("Questionnaire santé hq_sum")
        assert qn.cases[0].summaries[GENERIC_VARIANT].startswith("Fracture poignet droit 2019")
        assert finished.questionnaire.summaries == {}, "input state must not change"

    def test_variants_preserved(self, summarizer, finished):
        state = summarizer.summarize(finished)
        state = summarizer.summarize(state, variant="assureur_a")
        qn = state.questionnaire
        assert set(qn.summaries) == {GENERIC_VARIANT, "assureur_a"}
        assert set(qn.cases[0].summaries) == {GENERIC_VARIANT, "assureur_a"}

    def test_template_dir_override(self, tmp_path, finished):
        (tmp_path / "case_summary.jinja2").write_text("{{ case.id }}", encoding="utf-8")
        (tmp_path / "questionnaire_summary.jinja2").write_text(
            "{{ questionnaire.cases | length }} cas", encoding="utf-8"
        )
        state = DossierSummarizer(tmp_path).summarize(finished, variant="court")
        assert state.questionnaire.summaries["court"] == "1 cas"
        assert state.questionnaire.cases[0].summaries["court"] == "osteo_1"

    def test_summaries_are_read_only(self, summarizer, finished):
        state = summarizer.summarize(finished)
        qn = state.questionnaire
        with pytest.raises(TypeError):
            qn.summaries["assureur_a"] = "forged"
        with pytest.raises(TypeError):
            qn.cases[0].summaries[GENERIC_VARIANT] = "forged"
        assert set(qn.summaries) == {GENERIC_VARIANT}

    def test_summaries_survive_json_round_trip(self, summarizer, finished):
        state = summarizer.summarize(finished, variant="assureur_a")
        restored = EngineState.model_validate_json(state.model_dump_json())
        assert restored == state
        assert restored.questionnaire.summaries == state.questionnaire.summaries
        with pytest.raises(TypeError):
            restored.questionnaire.summaries["assureur_a"] = "forged"
