from datetime import date

import pytest

from moyennes.models import (
    CATEGORIES, TERM_EVALUATION_MAP, Dataset, Enrollment, Evaluation, Score,
    SubjectCoefficient, Term,
)

YEAR = 2024


class Carnet:
    """Construit évaluations et notes d'un jeu de test, trimestre par trimestre."""

    def __init__(self, terms):
        self.terms = terms
        self.evaluations = []
        self.scores = []
        self._ids = {}

    def evaluation_id(self, subject_id, term, category, class_id=1):
        key = (class_id, subject_id, term.id, category)
        if key not in self._ids:
            eid = len(self.evaluations) + 1
            self.evaluations.append(Evaluation(
                eid, subject_id, class_id, term.id, YEAR, TERM_EVALUATION_MAP[term.ordinal][category]
            ))
            self._ids[key] = eid
        return self._ids[key]

    def noter(self, student_id, subject_id, ordinal, d1=None, d2=None, compo=None, class_id=1):
        term = self.terms[ordinal - 1]
        for category, value in zip(CATEGORIES, (d1, d2, compo)):
            eid = self.evaluation_id(subject_id, term, category, class_id)
            if value is not None:
                self.scores.append(Score(len(self.scores) + 1, student_id, eid, value))
        return self

    def dataset(self, coefficients=(), enrollments=(), absences=()):
        return Dataset(
            terms=tuple(self.terms),
            evaluations=tuple(self.evaluations),
            scores=tuple(self.scores),
            coefficients=tuple(coefficients),
            enrollments=tuple(enrollments),
            absences=tuple(absences),
            academic_year_id=YEAR,
        )


@pytest.fixture
def terms():
    return (
        Term(1, 1, date(2024, 9, 16), date(2024, 12, 20), YEAR, "Trimestre 1"),
        Term(2, 2, date(2025, 1, 6), date(2025, 3, 28), YEAR, "Trimestre 2"),
        Term(3, 3, date(2025, 4, 14), date(2025, 6, 27), YEAR, "Trimestre 3"),
    )


@pytest.fixture
def carnet(terms):
    return Carnet(terms)


def coefs(class_id, **par_matiere):
    """coefs(1, s1=4, s2=2) -> coefficients des matières 1 et 2 de la classe 1."""
    return [
        SubjectCoefficient(class_id, int(nom[1:]), YEAR, valeur)
        for nom, valeur in par_matiere.items()
    ]


def inscrits(class_id, *student_ids):
    return [Enrollment(sid, class_id, YEAR) for sid in student_ids]
