import io
import logging
import os
from datetime import date

import pytest

from moyennes.calculator import Calculator
from moyennes.data_manager import DataManager
from moyennes.models import InvalidDatasetError, InvalidTermError

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@pytest.fixture
def raw():
    return {
        "annee_scolaire_id": 3,
        "trimestres": [
            {"id": 10, "nom": "Trimestre 1", "date_debut": "2024-09-16", "date_fin": "2024-12-20"},
            {"id": 11, "nom": "Trimestre 2", "date_debut": "2025-01-06T00:00:00", "date_fin": "2025-03-28"},
        ],
        "evaluations": [
            {"id": 1, "matiere_id": 5, "classe_id": 2, "trimestre": 10, "type": "Devoir 1"},
            {"id": 2, "matiere_id": 5, "classe_id": 2, "trimestre": 10, "libelle": "Devoir 2", "type": "Devoir"},
            {"id": 3, "matiere_id": 5, "classe_id": 2, "trimestre": 10, "type": "Composition 1"},
        ],
        "notes": [
            (7, 1, 12),
            {"id": 50, "etudiant_id": 7, "evaluation_id": 2, "note": "16"},
            {"id": 51, "etudiant_id": 7, "evaluation_id": 3, "note": "10,0"},
            {"id": 52, "etudiant_id": 8, "evaluation_id": 3, "note": ""},
        ],
        "coefficients": [{"classe_id": 2, "matiere_id": 5, "coefficient": 4}],
        "inscriptions": [{"etudiant_id": 7, "classe_id": 2}, {"etudiant_id": 8, "classe_id": 2, "actif": False}],
        "absences": [{"etudiant_id": 7, "date": "2024-10-07", "justification": "Maladie"}],
        "matieres": {"5": "Physique"},
        "eleves": [{"id": 7, "prenom": "Awa", "nom": "Diallo"}],
    }


def test_legacy_records_are_normalised(raw):
    data = DataManager.normaliser_donnees(raw)

    assert [t.ordinal for t in data.terms] == [1, 2]
    assert data.terms[1].start_date == date(2025, 1, 6)
    assert data.terms[0].academic_year_id == 3
    assert data.evaluations[1].category == "Devoir 2"
    assert [s.value for s in data.scores] == [12.0, 16.0, 10.0, None]
    assert data.scores[0].id == 1
    assert data.students_of_class(2) == [7]
    assert data.absences[0].justified
    assert data.subject_name(5) == "Physique"
    assert data.student_name(7) == "Awa Diallo"


def test_normalised_records_feed_the_engine(raw):
    data = DataManager.normaliser_donnees(raw)

    assert Calculator.compute_overall_average(7, 2, data.terms[0], data) == 13.0


def test_term_without_ordinal_is_rejected(raw):
    raw["trimestres"].append({"id": 12, "nom": "Dernier trimestre"})

    with pytest.raises(InvalidDatasetError):
        DataManager.normaliser_donnees(raw)


def test_term_ordinal_out_of_range_is_rejected(raw):
    raw["trimestres"].append({"id": 12, "ordinal": 4})

    with pytest.raises(InvalidTermError):
        DataManager.normaliser_donnees(raw)


def test_term_ordinal_is_not_truncated(raw):
    raw["trimestres"].append({"id": 12, "ordinal": 2.7})

    with pytest.raises(InvalidTermError):
        DataManager.normaliser_donnees(raw)


def test_integral_term_ordinals_are_accepted(raw):
    raw["trimestres"].append({"id": 12, "ordinal": "3"})
    raw["trimestres"].append({"id": 13, "ordinal": 3.0})

    data = DataManager.normaliser_donnees(raw)

    assert [t.ordinal for t in data.terms] == [1, 2, 3, 3]


def test_negative_values_are_kept_and_diagnosed(raw):
    raw["notes"].append((7, 1, "-4"))
    raw["coefficients"].append({"classe_id": 2, "matiere_id": 6, "coefficient": "-2"})

    data = DataManager.normaliser_donnees(raw)
    messages = DataManager.diagnose(data, on_warning=lambda message: None)

    assert data.scores[-1].value == -4.0
    assert data.coefficients[-1].coefficient == -2.0
    assert any("-4.0" in m for m in messages)
    assert any("Coefficient -2.0" in m for m in messages)


def test_unreadable_notes_are_missing(raw):
    raw["notes"].extend([(7, 1, "abc"), (7, 1, "nan"), (7, 1, " "), (7, 1, "1e1")])

    data = DataManager.normaliser_donnees(raw)

    assert [s.value for s in data.scores[-4:]] == [None, None, None, 10.0]


def test_diagnose_reports_anomalies(raw):
    raw["evaluations"].append({"id": 4, "matiere_id": 5, "classe_id": 2, "trimestre": 99, "type": "Devoir 1"})
    raw["evaluations"].append({"id": 5, "matiere_id": 5, "classe_id": 2, "trimestre": 10, "type": "Oral"})
    raw["notes"].append({"id": 60, "etudiant_id": 7, "evaluation_id": 404, "note": 12})
    raw["notes"].append({"id": 61, "etudiant_id": 7, "evaluation_id": 1, "note": 25})
    raw["coefficients"].append({"classe_id": 2, "matiere_id": 6, "coefficient": 0})
    data = DataManager.normaliser_donnees(raw)
    recus = []

    messages = DataManager.diagnose(data, on_warning=recus.append)

    assert messages == recus
    assert len(messages) == 5


def test_diagnose_logs_by_default(raw, caplog):
    raw["notes"].append({"id": 60, "etudiant_id": 7, "evaluation_id": 404, "note": 12})
    data = DataManager.normaliser_donnees(raw)

    with caplog.at_level(logging.WARNING, logger="moyennes.data_manager"):
        DataManager.diagnose(data)

    assert "évaluation 404 inconnue" in caplog.text


def test_json_export_can_be_loaded_back(raw):
    data = DataManager.normaliser_donnees(raw)

    recharge = DataManager.charger_json(io.StringIO(DataManager.exporter_json(data)))

    assert recharge == data
    assert recharge.subject_name(5) == "Physique"


def test_scanner_finds_dataset_variables(tmp_path, caplog):
    (tmp_path / "ecole_data_test.py").write_text(
        'ecole_data_a = {"trimestres": []}\nautre = 1\n', encoding="utf-8"
    )
    (tmp_path / "ecole_data_casse.py").write_text("ecole_data_b = (\n", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="moyennes.data_manager"):
        datasets = DataManager.scanner_fichiers_locaux(str(tmp_path))

    assert datasets == {"ecole_data_test.py": {"ecole_data_a": {"trimestres": []}}}
    assert "ecole_data_casse.py" in caplog.text


def test_demo_dataset():
    datasets = DataManager.scanner_fichiers_locaux(ROOT)
    data = DataManager.normaliser_donnees(datasets["ecole_data_demo.py"]["ecole_data_college"])

    assert DataManager.diagnose(data, on_warning=lambda m: None) == []
    assert data.students_of_class(2) == [5, 6, 7]
    assert Calculator.compute_subject_term_average(
        1, 1, data.terms[0], data.terms, data.evaluations, data.scores
    ) == 13.0
    # Anglais du T2 non composé pour l'élève 4
    assert Calculator.compute_subject_term_average(
        4, 3, data.terms[1], data.terms, data.evaluations, data.scores
    ) is None
