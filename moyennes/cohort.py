"""
Statistiques de cohorte : moyennes de classe, taux de réussite,
assiduité, classement et mentions des bulletins.
"""
import logging
from collections import namedtuple
from datetime import timedelta

from moyennes import config
from moyennes.calculator import Calculator, arrondir

logger = logging.getLogger(__name__)


CohortAverage = namedtuple("CohortAverage", ["average", "count"])


def cohort_average(valeurs):
    """Moyenne des valeurs définies ; les None ne comptent ni au numérateur ni au dénominateur."""
    definies = [v for v in valeurs if v is not None]
    if not definies:
        return CohortAverage(None, 0)
    return CohortAverage(sum(definies) / len(definies), len(definies))


def success_rate(annual_averages):
    """
    Part des élèves ayant une moyenne annuelle >= PASS_MARK, parmi ceux qui en ont une.

    Retourne 0.0 s'il n'y a aucune moyenne définie.
    """
    if isinstance(annual_averages, dict):
        annual_averages = annual_averages.values()
    definies = [m for m in annual_averages if m is not None]
    if not definies:
        return 0.0
    admis = sum(1 for m in definies if m >= config.PASS_MARK)
    return admis / len(definies)


def mention(moyenne):
    if moyenne is None:
        return None
    if moyenne >= config.MENTION_FELICITATIONS:
        return "Félicitations"
    if moyenne >= config.MENTION_TRES_BIEN:
        return "Très Bien"
    if moyenne >= config.MENTION_BIEN:
        return "Bien"
    if moyenne >= config.MENTION_ASSEZ_BIEN:
        return "Assez Bien"
    if moyenne >= config.MENTION_ENCOURAGEMENTS:
        return "Encouragements"
    return "Avertissement"


def student_averages(data, class_id, term=None, on_warning=None):
    """{student_id: moyenne} pour les élèves actifs de la classe (annuelle si term est None)."""
    resultats = {}
    for student_id in data.students_of_class(class_id):
        if term is None:
            resultats[student_id] = Calculator.compute_annual_average(
                student_id, class_id, data, on_warning=on_warning
            )
        else:
            resultats[student_id] = Calculator.compute_overall_average(
                student_id, class_id, term, data, on_warning=on_warning
            )
    return resultats


def subject_cohort_averages(data, class_id, term, on_warning=None):
    """{subject_id: CohortAverage} des moyennes de matière d'une classe pour un trimestre."""
    students = data.students_of_class(class_id)
    resultats = {}
    for subject_id in Calculator.class_subjects(data.class_coefficients(class_id)):
        resultats[subject_id] = cohort_average(
            Calculator.compute_subject_term_average(
                student_id, subject_id, term, data.terms, data.evaluations, data.scores,
                class_id=class_id, on_warning=on_warning,
            )
            for student_id in students
        )
    return resultats


def class_averages(data, term=None, on_warning=None):
    """{class_id: CohortAverage} des moyennes générales (ou annuelles) des élèves."""
    return {
        class_id: cohort_average(student_averages(data, class_id, term, on_warning).values())
        for class_id in data.class_ids()
    }


def term_evolution(data, class_id=None, on_warning=None):
    """Évolution de la moyenne des élèves d'un trimestre à l'autre."""
    class_ids = [class_id] if class_id is not None else data.class_ids()
    evolution = []
    for term in data.terms_of_year():
        valeurs = []
        for cid in class_ids:
            valeurs.extend(student_averages(data, cid, term, on_warning).values())
        resultat = cohort_average(valeurs)
        evolution.append({"term_id": term.id, "Trimestre": term.label,
                          "Moyenne": resultat.average, "Effectif": resultat.count})
    return evolution


def bulletins(data, class_id, term=None, on_warning=None):
    """
    Lignes de bulletin d'une classe, triées par moyenne décroissante.

    Le rang est calculé parmi les élèves ayant une moyenne ; les ex aequo
    partagent le même rang. Les élèves sans moyenne sont placés à la fin.
    """
    moyennes = student_averages(data, class_id, term, on_warning)
    classes = sorted((sid for sid, m in moyennes.items() if m is not None),
                     key=lambda sid: moyennes[sid], reverse=True)
    effectif = len(classes)

    lignes = []
    rang = 0
    precedente = None
    for position, student_id in enumerate(classes, start=1):
        moyenne = moyennes[student_id]
        # Ex aequo sur la moyenne affichée
        if arrondir(moyenne) != precedente:
            rang = position
            precedente = arrondir(moyenne)
        lignes.append({
            "student_id": student_id,
            "Élève": data.student_name(student_id),
            "Moyenne": arrondir(moyenne),
            "Rang": f"{rang}/{effectif}",
            "Mention": mention(moyenne),
            "Admis": moyenne >= config.PASS_MARK,
        })

    for student_id, moyenne in moyennes.items():
        if moyenne is None:
            lignes.append({
                "student_id": student_id,
                "Élève": data.student_name(student_id),
                "Moyenne": None,
                "Rang": None,
                "Mention": None,
                "Admis": None,
            })
    return lignes


def school_day_count(start, end):
    """Jours ouvrés (lundi à vendredi) entre deux dates incluses, sans jours fériés."""
    if start is None or end is None or start > end:
        logger.warning(f"Période invalide pour le calcul des jours de classe : {start} -> {end}")
        return 0
    total = 0
    jour = start
    while jour <= end:
        if jour.weekday() < 5:
            total += 1
        jour += timedelta(days=1)
    return total


def attendance_rate(enrolled_count, absence_count, start, end):
    """Taux d'assiduité en pourcentage ; 0.0 si aucune journée-élève n'est possible."""
    possibles = enrolled_count * school_day_count(start, end)
    if possibles <= 0:
        return 0.0
    return (possibles - absence_count) / possibles * 100


def class_attendance(data, class_id, start=None, end=None):
    """
    Assiduité d'une classe sur une période (l'année entière par défaut).

    Retourne le nombre de journées possibles, d'absences, et les taux
    d'assiduité et d'absences non justifiées en pourcentage.
    """
    if start is None or end is None:
        terms = data.terms_of_year()
        start = start or min((t.start_date for t in terms if t.start_date), default=None)
        end = end or max((t.end_date for t in terms if t.end_date), default=None)

    students = set(data.students_of_class(class_id))
    absences = [
        a for a in data.absences
        if a.student_id in students and start is not None and end is not None and start <= a.date <= end
    ]
    non_justifiees = sum(1 for a in absences if not a.justified)
    possibles = len(students) * school_day_count(start, end) if start and end else 0

    return {
        "class_id": class_id,
        "Classe": data.class_name(class_id),
        "journees_possibles": possibles,
        "absences": len(absences),
        "taux_assiduite": attendance_rate(len(students), len(absences), start, end) if possibles else 0.0,
        "taux_absence_non_justifiee": non_justifiees / possibles * 100 if possibles else 0.0,
    }
