"""Enregistrements immuables consommés par le moteur de calcul."""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple


FIRST_ASSIGNMENT = "first_assignment"
SECOND_ASSIGNMENT = "second_assignment"
COMPOSITION = "composition"

CATEGORIES = (FIRST_ASSIGNMENT, SECOND_ASSIGNMENT, COMPOSITION)

# Libellés d'évaluation reconnus pour chaque trimestre
TERM_EVALUATION_MAP = {
    1: {FIRST_ASSIGNMENT: "Devoir 1", SECOND_ASSIGNMENT: "Devoir 2", COMPOSITION: "Composition 1"},
    2: {FIRST_ASSIGNMENT: "Devoir 3", SECOND_ASSIGNMENT: "Devoir 4", COMPOSITION: "Composition 2"},
    3: {FIRST_ASSIGNMENT: "Devoir 5", SECOND_ASSIGNMENT: "Devoir 6", COMPOSITION: "Composition 3"},
}


class MoyenneError(ValueError):
    """Erreur de base du moteur de moyennes."""


class InvalidTermError(MoyenneError):
    pass


class InvalidDatasetError(MoyenneError):
    pass


def normaliser_libelle(libelle):
    """'Devoir 3', 'devoir3' et ' DEVOIR  3 ' désignent la même évaluation."""
    if libelle is None:
        return ""
    return "".join(str(libelle).split()).lower()


def category_for(ordinal, libelle):
    """Retourne la catégorie (first_assignment, ...) d'un libellé, ou None."""
    cible = normaliser_libelle(libelle)
    for category, label in TERM_EVALUATION_MAP[ordinal].items():
        if normaliser_libelle(label) == cible:
            return category
    return None


def is_known_label(libelle):
    return any(category_for(ordinal, libelle) for ordinal in TERM_EVALUATION_MAP)


@dataclass(frozen=True)
class Term:
    id: int
    ordinal: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    academic_year_id: Optional[int] = None
    name: str = ""

    def __post_init__(self):
        ordinal_entier = isinstance(self.ordinal, int) and not isinstance(self.ordinal, bool)
        if not ordinal_entier or self.ordinal not in TERM_EVALUATION_MAP:
            raise InvalidTermError(f"Trimestre {self.id}: ordinal {self.ordinal!r} hors de 1, 2, 3")

    @property
    def label(self):
        return self.name or f"Trimestre {self.ordinal}"


@dataclass(frozen=True)
class Evaluation:
    id: int
    subject_id: int
    class_id: Optional[int]
    term_id: int
    academic_year_id: Optional[int]
    category: str


@dataclass(frozen=True)
class Score:
    id: int
    student_id: int
    evaluation_id: int
    value: Optional[float]
    recorded_at: Optional[datetime] = None


@dataclass(frozen=True)
class SubjectCoefficient:
    class_id: int
    subject_id: int
    academic_year_id: Optional[int]
    coefficient: Optional[float] = None


@dataclass(frozen=True)
class Enrollment:
    student_id: int
    class_id: int
    academic_year_id: Optional[int]
    active: bool = True


@dataclass(frozen=True)
class Absence:
    student_id: int
    date: date
    justification: str = ""

    @property
    def justified(self):
        return bool(self.justification and self.justification.strip())


@dataclass(frozen=True)
class Dataset:
    """
    Instantané complet des enregistrements d'une année scolaire.

    L'année scolaire est portée explicitement par l'instantané : aucun
    calcul ne dépend d'une « année active » globale.
    """
    terms: Tuple[Term, ...] = ()
    evaluations: Tuple[Evaluation, ...] = ()
    scores: Tuple[Score, ...] = ()
    coefficients: Tuple[SubjectCoefficient, ...] = ()
    enrollments: Tuple[Enrollment, ...] = ()
    absences: Tuple[Absence, ...] = ()
    academic_year_id: Optional[int] = None
    subject_names: dict = field(default_factory=dict, compare=False, hash=False)
    student_names: dict = field(default_factory=dict, compare=False, hash=False)
    class_names: dict = field(default_factory=dict, compare=False, hash=False)

    def terms_of_year(self):
        """Trimestres de l'année de l'instantané, triés par ordinal."""
        terms = [
            t for t in self.terms
            if self.academic_year_id is None or t.academic_year_id in (None, self.academic_year_id)
        ]
        return sorted(terms, key=lambda t: (t.ordinal, t.id))

    def term(self, term_id):
        return next((t for t in self.terms if t.id == term_id), None)

    def students_of_class(self, class_id):
        """Élèves inscrits (inscription active) dans la classe, sans doublon."""
        vus = []
        for e in self.enrollments:
            if not e.active or e.class_id != class_id:
                continue
            if self.academic_year_id is not None and e.academic_year_id not in (None, self.academic_year_id):
                continue
            if e.student_id not in vus:
                vus.append(e.student_id)
        return vus

    def class_ids(self):
        ids = []
        for e in self.enrollments:
            if e.active and e.class_id not in ids:
                ids.append(e.class_id)
        for c in self.coefficients:
            if c.class_id not in ids:
                ids.append(c.class_id)
        return ids

    def class_coefficients(self, class_id):
        return [
            c for c in self.coefficients
            if c.class_id == class_id
            and (self.academic_year_id is None or c.academic_year_id in (None, self.academic_year_id))
        ]

    def subject_name(self, subject_id):
        return self.subject_names.get(subject_id, f"Matière {subject_id}")

    def student_name(self, student_id):
        return self.student_names.get(student_id, f"Élève {student_id}")

    def class_name(self, class_id):
        return self.class_names.get(class_id, f"Classe {class_id}")
