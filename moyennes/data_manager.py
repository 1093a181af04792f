import dataclasses
import glob
import importlib.util
import json
import logging
import math
import os
import re
from datetime import date, datetime

import streamlit as st

from moyennes import config
from moyennes.models import (
    Absence, Dataset, Enrollment, Evaluation, InvalidDatasetError, Score,
    SubjectCoefficient, Term, is_known_label,
)

logger = logging.getLogger(__name__)


def _pick(record, *keys, default=None):
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _parse_date(valeur):
    if valeur is None or valeur == '':
        return None
    if isinstance(valeur, datetime):
        return valeur.date()
    if isinstance(valeur, date):
        return valeur
    return date.fromisoformat(str(valeur)[:10])


def _parse_datetime(valeur):
    if valeur is None or valeur == '':
        return None
    if isinstance(valeur, datetime):
        return valeur
    return datetime.fromisoformat(str(valeur))


def _parse_note(note):
    """Une note vide ou non numérique vaut None (pas encore saisie)."""
    if isinstance(note, bool) or note is None:
        return None
    if isinstance(note, str):
        note = note.strip().replace(',', '.')
        if not note:
            return None
    try:
        valeur = float(note)
    except (TypeError, ValueError):
        return None
    return valeur if math.isfinite(valeur) else None


def _parse_ordinal(ordinal):
    """Ordinal entier (2, "2" ou 2.0) ; une autre valeur est transmise telle quelle à Term qui la rejette."""
    if isinstance(ordinal, str) and ordinal.strip().isdigit():
        return int(ordinal)
    if isinstance(ordinal, float) and ordinal.is_integer():
        return int(ordinal)
    return ordinal


def _parse_names(raw):
    """Accepte {id: nom} ou [{"id": .., "nom": .., "prenom": ..}]."""
    if not raw:
        return {}
    if isinstance(raw, dict):
        return {int(k) if str(k).isdigit() else k: v for k, v in raw.items()}
    noms = {}
    for item in raw:
        nom = " ".join(p for p in (item.get("prenom"), item.get("nom", item.get("name"))) if p)
        noms[item["id"]] = nom
    return noms


class DataManager:
    @staticmethod
    def init_state():
        """Initialise la session si elle n'existe pas."""
        if "dataset" not in st.session_state:
            st.session_state.dataset = None
        if "nom_dataset" not in st.session_state:
            st.session_state.nom_dataset = None

    @staticmethod
    def _term(t, annee_defaut):
        ordinal = _pick(t, "ordinal", "numero")
        nom = _pick(t, "name", "nom", default="")
        if ordinal is None:
            # Ancien format : l'ordinal n'existe que dans le nom ("Trimestre 2")
            chiffres = re.findall(r"\d+", str(nom))
            if not chiffres:
                raise InvalidDatasetError(f"Trimestre {t.get('id')!r} sans ordinal ni nom exploitable")
            ordinal = chiffres[0]
        return Term(
            id=t["id"],
            ordinal=_parse_ordinal(ordinal),
            start_date=_parse_date(_pick(t, "start_date", "date_debut")),
            end_date=_parse_date(_pick(t, "end_date", "date_fin")),
            academic_year_id=_pick(t, "academic_year_id", "annee_scolaire_id", default=annee_defaut),
            name=nom,
        )

    @staticmethod
    def _score(s, index):
        # Format court : (etudiant_id, evaluation_id, note)
        if isinstance(s, (list, tuple)):
            if len(s) < 3:
                raise InvalidDatasetError(f"Note {s!r} incomplète")
            return Score(id=index, student_id=s[0], evaluation_id=s[1], value=_parse_note(s[2]))
        return Score(
            id=_pick(s, "id", default=index),
            student_id=_pick(s, "student_id", "etudiant_id"),
            evaluation_id=_pick(s, "evaluation_id"),
            value=_parse_note(_pick(s, "value", "note")),
            recorded_at=_parse_datetime(_pick(s, "recorded_at", "date_saisie")),
        )

    @staticmethod
    def normaliser_donnees(data_raw):
        """Convertit un instantané brut (listes de dicts, JSON) en Dataset immuable."""
        annee = _pick(data_raw, "academic_year_id", "annee_scolaire_id")

        terms = tuple(
            DataManager._term(t, annee) for t in _pick(data_raw, "terms", "trimestres", default=[])
        )
        evaluations = tuple(
            Evaluation(
                id=e["id"],
                subject_id=_pick(e, "subject_id", "matiere_id"),
                class_id=_pick(e, "class_id", "classe_id"),
                term_id=_pick(e, "term_id", "trimestre"),
                academic_year_id=_pick(e, "academic_year_id", "annee_scolaire_id", default=annee),
                category=_pick(e, "category", "libelle", "type", default=""),
            )
            for e in _pick(data_raw, "evaluations", default=[])
        )
        scores = tuple(
            DataManager._score(s, i)
            for i, s in enumerate(_pick(data_raw, "scores", "notes", default=[]), start=1)
        )
        coefficients = tuple(
            SubjectCoefficient(
                class_id=_pick(c, "class_id", "classe_id"),
                subject_id=_pick(c, "subject_id", "matiere_id"),
                academic_year_id=_pick(c, "academic_year_id", "annee_scolaire_id", default=annee),
                coefficient=_parse_note(_pick(c, "coefficient", "coef")),
            )
            for c in _pick(data_raw, "coefficients", default=[])
        )
        enrollments = tuple(
            Enrollment(
                student_id=_pick(i, "student_id", "etudiant_id"),
                class_id=_pick(i, "class_id", "classe_id"),
                academic_year_id=_pick(i, "academic_year_id", "annee_scolaire_id", default=annee),
                active=bool(_pick(i, "active", "actif", default=True)),
            )
            for i in _pick(data_raw, "enrollments", "inscriptions", default=[])
        )
        absences = tuple(
            Absence(
                student_id=_pick(a, "student_id", "etudiant_id"),
                date=_parse_date(a["date"]),
                justification=_pick(a, "justification", default=""),
            )
            for a in _pick(data_raw, "absences", default=[])
        )

        logger.info(
            f"Instantané chargé : {len(terms)} trimestres, {len(evaluations)} évaluations, "
            f"{len(scores)} notes, {len(enrollments)} inscriptions"
        )
        return Dataset(
            terms=terms,
            evaluations=evaluations,
            scores=scores,
            coefficients=coefficients,
            enrollments=enrollments,
            absences=absences,
            academic_year_id=annee,
            subject_names=_parse_names(_pick(data_raw, "subjects", "matieres")),
            student_names=_parse_names(_pick(data_raw, "students", "eleves")),
            class_names=_parse_names(_pick(data_raw, "classes")),
        )

    @staticmethod
    def diagnose(data, on_warning=None):
        """
        Signale les enregistrements que le calcul ignorera silencieusement.

        Chaque anomalie est transmise à on_warning (par défaut le logger)
        et la liste des messages est retournée.
        """
        signaler = on_warning or logger.warning
        messages = []

        def _ajouter(message):
            messages.append(message)
            signaler(message)

        term_ids = {t.id for t in data.terms}
        evaluation_ids = {e.id for e in data.evaluations}

        for ev in data.evaluations:
            if ev.term_id not in term_ids:
                _ajouter(f"Évaluation {ev.id} : trimestre {ev.term_id} inconnu")
            if not is_known_label(ev.category):
                _ajouter(f"Évaluation {ev.id} : libellé {ev.category!r} non reconnu")

        for s in data.scores:
            if s.evaluation_id not in evaluation_ids:
                _ajouter(f"Note {s.id} : évaluation {s.evaluation_id} inconnue")
            if s.value is not None and not 0 <= s.value <= config.MAX_SCORE:
                _ajouter(f"Note {s.id} : valeur {s.value} hors de [0, {config.MAX_SCORE:g}]")

        for c in data.coefficients:
            if c.coefficient is not None and c.coefficient <= 0:
                _ajouter(f"Coefficient {c.coefficient} invalide (classe {c.class_id}, matière {c.subject_id})")

        return messages

    @staticmethod
    def scanner_fichiers_locaux(dossier="."):
        """Trouve les fichiers ecole_data_*.py locaux."""
        datasets = {}
        prefix = config.DATASET_PREFIX
        for filepath in sorted(glob.glob(os.path.join(dossier, config.DATASET_GLOB))):
            try:
                spec = importlib.util.spec_from_file_location("module", filepath)
                module = importlib.util.module_from_spec(spec)
                spec.loader.exec_module(module)
            except Exception:
                logger.exception(f"Erreur chargement {filepath}")
                continue
            vars_module = {k: v for k, v in vars(module).items() if k.startswith(prefix)}
            if vars_module:
                datasets[os.path.basename(filepath)] = vars_module
        return datasets

    @staticmethod
    def charger_json(fp):
        return DataManager.normaliser_donnees(json.load(fp))

    @staticmethod
    def exporter_json(data):
        """Sérialise un Dataset dans le format accepté par normaliser_donnees."""
        contenu = {
            "academic_year_id": data.academic_year_id,
            "terms": [dataclasses.asdict(t) for t in data.terms],
            "evaluations": [dataclasses.asdict(e) for e in data.evaluations],
            "scores": [dataclasses.asdict(s) for s in data.scores],
            "coefficients": [dataclasses.asdict(c) for c in data.coefficients],
            "enrollments": [dataclasses.asdict(e) for e in data.enrollments],
            "absences": [dataclasses.asdict(a) for a in data.absences],
            "subjects": data.subject_names,
            "students": data.student_names,
            "classes": data.class_names,
        }
        return json.dumps(contenu, indent=4, default=str, ensure_ascii=False)
