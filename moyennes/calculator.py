import logging
from datetime import datetime

from moyennes import config
from moyennes.models import (
    CATEGORIES, COMPOSITION, FIRST_ASSIGNMENT, SECOND_ASSIGNMENT, category_for,
)

logger = logging.getLogger(__name__)


def arrondir(valeur, digits=None):
    """Arrondi d'affichage. Les calculs internes gardent la pleine précision."""
    if valeur is None:
        return None
    return round(valeur, config.ROUND_DIGITS if digits is None else digits)


def _signaler(on_warning, message):
    (on_warning or logger.warning)(message)


def _ordre_saisie(score):
    # La note saisie en dernier arrive en fin de tri
    return (score.recorded_at is not None, score.recorded_at or datetime.min, score.id)


class Calculator:
    @staticmethod
    def extract_category_scores(student_id, subject_id, term, evaluations, scores,
                                class_id=None, on_warning=None):
        """
        Notes d'un élève pour une matière et un trimestre, par catégorie.

        Retourne {"first_assignment", "second_assignment", "composition"},
        chaque valeur étant un float ou None si la note n'existe pas encore.
        Les évaluations dont le libellé n'appartient pas au trimestre sont
        ignorées. Si plusieurs notes concurrentes existent pour une même
        catégorie, la plus récente est retenue et un avertissement est émis.
        """
        evaluations_par_categorie = {}
        for ev in evaluations:
            if ev.subject_id != subject_id or ev.term_id != term.id:
                continue
            if class_id is not None and ev.class_id not in (None, class_id):
                continue
            category = category_for(term.ordinal, ev.category)
            if category is None:
                logger.debug(f"Évaluation {ev.id} ignorée : libellé {ev.category!r} inconnu pour {term.label}")
                continue
            evaluations_par_categorie.setdefault(category, []).append(ev.id)

        resultat = dict.fromkeys(CATEGORIES)
        if not evaluations_par_categorie:
            return resultat

        notes_par_evaluation = {}
        for s in scores:
            if s.student_id == student_id and s.value is not None:
                notes_par_evaluation.setdefault(s.evaluation_id, []).append(s)

        for category, evaluation_ids in evaluations_par_categorie.items():
            candidats = [s for eid in evaluation_ids for s in notes_par_evaluation.get(eid, [])]
            if not candidats:
                continue
            retenue = max(candidats, key=_ordre_saisie)
            if len(candidats) > 1:
                _signaler(
                    on_warning,
                    f"{len(candidats)} notes pour l'élève {student_id}, matière {subject_id}, "
                    f"{term.label} ({category}) : note {retenue.id} retenue",
                )
            resultat[category] = float(retenue.value)
        return resultat

    @staticmethod
    def _prior_term(term, all_terms, ordinal):
        """Trimestre d'ordinal donné dans la même année scolaire que `term`."""
        for t in all_terms:
            if t.ordinal != ordinal:
                continue
            if term.academic_year_id is None or t.academic_year_id in (None, term.academic_year_id):
                return t
        return None

    @staticmethod
    def _composantes(student_id, subject_id, term, all_terms, evaluations, scores, class_id, on_warning):
        notes = Calculator.extract_category_scores(
            student_id, subject_id, term, evaluations, scores, class_id, on_warning
        )
        anterieures = {}
        for ordinal in range(1, term.ordinal):
            precedent = Calculator._prior_term(term, all_terms, ordinal)
            if precedent is None:
                logger.debug(f"Trimestre {ordinal} introuvable pour l'année de {term.label}")
                anterieures[ordinal] = None
                continue
            anterieures[ordinal] = Calculator.extract_category_scores(
                student_id, subject_id, precedent, evaluations, scores, class_id, on_warning
            )[COMPOSITION]
        return notes, anterieures

    @staticmethod
    def _ponderer(moyenne_devoirs, compositions):
        poids_devoirs = config.DEVOIR_WEIGHT
        poids_compo = config.COMPOSITION_WEIGHT
        points = moyenne_devoirs * poids_devoirs + sum(c * poids_compo for c in compositions)
        return points / (poids_devoirs + poids_compo * len(compositions))

    @staticmethod
    def compute_subject_term_average(student_id, subject_id, term, all_terms, evaluations, scores,
                                     class_id=None, on_warning=None):
        """
        Moyenne d'une matière pour un trimestre, ou None si une note manque.

        T1 : (devoirs*3 + compo1) / 4
        T2 : (devoirs*3 + compo2 + compo1) / 5
        T3 : (devoirs*3 + compo3 + compo1 + compo2) / 6
        """
        notes, anterieures = Calculator._composantes(
            student_id, subject_id, term, all_terms, evaluations, scores, class_id, on_warning
        )
        d1, d2, compo = notes[FIRST_ASSIGNMENT], notes[SECOND_ASSIGNMENT], notes[COMPOSITION]
        if d1 is None or d2 is None or compo is None:
            return None
        if any(c is None for c in anterieures.values()):
            return None
        return Calculator._ponderer((d1 + d2) / 2, [compo] + list(anterieures.values()))

    @staticmethod
    def subject_term_detail(student_id, subject_id, term, all_terms, evaluations, scores,
                            class_id=None, on_warning=None):
        """Détail d'une matière pour le bulletin (notes, moyenne des devoirs, moyenne)."""
        notes, anterieures = Calculator._composantes(
            student_id, subject_id, term, all_terms, evaluations, scores, class_id, on_warning
        )
        presents = [n for n in (notes[FIRST_ASSIGNMENT], notes[SECOND_ASSIGNMENT]) if n is not None]
        moyenne = None
        if len(presents) == 2 and notes[COMPOSITION] is not None and None not in anterieures.values():
            moyenne = Calculator._ponderer(
                sum(presents) / 2, [notes[COMPOSITION]] + list(anterieures.values())
            )
        return {
            "devoir1": notes[FIRST_ASSIGNMENT],
            "devoir2": notes[SECOND_ASSIGNMENT],
            "composition": notes[COMPOSITION],
            "compositions_anterieures": anterieures,
            # Affichage seulement : calculée avec les devoirs disponibles
            "moyenne_devoirs": sum(presents) / len(presents) if presents else None,
            "moyenne": moyenne,
        }

    @staticmethod
    def class_subjects(class_coefficients):
        """Matières d'une classe, dans l'ordre des coefficients."""
        subjects = []
        for c in class_coefficients:
            if c.subject_id is not None and c.subject_id not in subjects:
                subjects.append(c.subject_id)
        return subjects

    @staticmethod
    def coefficient_for(class_coefficients, subject_id, on_warning=None):
        record = next((c for c in class_coefficients if c.subject_id == subject_id), None)
        coef = record.coefficient if record is not None else None
        if coef is None:
            return config.DEFAULT_COEFFICIENT
        if coef <= 0:
            _signaler(
                on_warning,
                f"Coefficient {coef} invalide pour la matière {subject_id} "
                f"(classe {record.class_id}) : {config.DEFAULT_COEFFICIENT} retenu",
            )
            return config.DEFAULT_COEFFICIENT
        return float(coef)

    @staticmethod
    def compute_overall_average(student_id, class_id, term, data, subjects=None, on_warning=None):
        """Moyenne générale d'un trimestre, pondérée par les coefficients des matières."""
        class_coefficients = data.class_coefficients(class_id)
        if subjects is None:
            subjects = Calculator.class_subjects(class_coefficients)

        total_points = 0.0
        total_coefs = 0.0
        for subject_id in subjects:
            moyenne = Calculator.compute_subject_term_average(
                student_id, subject_id, term, data.terms, data.evaluations, data.scores,
                class_id=class_id, on_warning=on_warning,
            )
            if moyenne is None:
                continue
            coef = Calculator.coefficient_for(class_coefficients, subject_id, on_warning)
            total_points += moyenne * coef
            total_coefs += coef

        return total_points / total_coefs if total_coefs > 0 else None

    @staticmethod
    def compute_annual_average(student_id, class_id, data, terms=None, subjects=None, on_warning=None):
        """Moyenne simple des moyennes générales trimestrielles disponibles."""
        if terms is None:
            terms = data.terms_of_year()
        moyennes = [
            Calculator.compute_overall_average(student_id, class_id, t, data, subjects, on_warning)
            for t in terms
        ]
        definies = [m for m in moyennes if m is not None]
        if not definies:
            return None
        return sum(definies) / len(definies)
