# ecole_data_demo.py

ecole_data_college = {
    "annee_scolaire_id": 1,
    "classes": {1: "6e A", 2: "5e B"},
    "matieres": {1: "Mathématiques", 2: "Français", 3: "Anglais"},
    "eleves": [
        {"id": 1, "prenom": "Awa", "nom": "Diallo"},
        {"id": 2, "prenom": "Moussa", "nom": "Traoré"},
        {"id": 3, "prenom": "Fatou", "nom": "Ndiaye"},
        {"id": 4, "prenom": "Ibrahima", "nom": "Sow"},
        {"id": 5, "prenom": "Aminata", "nom": "Ba"},
        {"id": 6, "prenom": "Ousmane", "nom": "Kane"},
        {"id": 7, "prenom": "Mariama", "nom": "Fall"},
    ],
    "trimestres": [
        {"id": 1, "nom": "Trimestre 1", "date_debut": "2024-09-16", "date_fin": "2024-12-20"},
        {"id": 2, "nom": "Trimestre 2", "date_debut": "2025-01-06", "date_fin": "2025-03-28"},
        {"id": 3, "nom": "Trimestre 3", "date_debut": "2025-04-14", "date_fin": "2025-06-27"},
    ],
    "coefficients": [
        {"classe_id": 1, "matiere_id": 1, "coefficient": 4},
        {"classe_id": 1, "matiere_id": 2, "coefficient": 3},
        {"classe_id": 1, "matiere_id": 3, "coefficient": 2},
        {"classe_id": 2, "matiere_id": 1, "coefficient": 4},
        {"classe_id": 2, "matiere_id": 2},  # coefficient non saisi -> 1
    ],
    "inscriptions": [
        {"etudiant_id": 1, "classe_id": 1},
        {"etudiant_id": 2, "classe_id": 1},
        {"etudiant_id": 3, "classe_id": 1},
        {"etudiant_id": 4, "classe_id": 1},
        {"etudiant_id": 5, "classe_id": 2},
        {"etudiant_id": 6, "classe_id": 2},
        {"etudiant_id": 7, "classe_id": 2},
        {"etudiant_id": 8, "classe_id": 2, "actif": False},
    ],
    "evaluations": [
        # 6e A - Trimestre 1
        {"id": 1, "matiere_id": 1, "classe_id": 1, "trimestre": 1, "type": "Devoir 1"},
        {"id": 2, "matiere_id": 1, "classe_id": 1, "trimestre": 1, "type": "Devoir 2"},
        {"id": 3, "matiere_id": 1, "classe_id": 1, "trimestre": 1, "type": "Composition 1"},
        {"id": 4, "matiere_id": 2, "classe_id": 1, "trimestre": 1, "type": "Devoir 1"},
        {"id": 5, "matiere_id": 2, "classe_id": 1, "trimestre": 1, "type": "Devoir 2"},
        {"id": 6, "matiere_id": 2, "classe_id": 1, "trimestre": 1, "type": "Composition 1"},
        {"id": 7, "matiere_id": 3, "classe_id": 1, "trimestre": 1, "type": "Devoir 1"},
        {"id": 8, "matiere_id": 3, "classe_id": 1, "trimestre": 1, "type": "Devoir 2"},
        {"id": 9, "matiere_id": 3, "classe_id": 1, "trimestre": 1, "type": "Composition 1"},
        # 6e A - Trimestre 2
        {"id": 10, "matiere_id": 1, "classe_id": 1, "trimestre": 2, "type": "Devoir 3"},
        {"id": 11, "matiere_id": 1, "classe_id": 1, "trimestre": 2, "type": "Devoir 4"},
        {"id": 12, "matiere_id": 1, "classe_id": 1, "trimestre": 2, "type": "Composition 2"},
        {"id": 13, "matiere_id": 2, "classe_id": 1, "trimestre": 2, "type": "Devoir 3"},
        {"id": 14, "matiere_id": 2, "classe_id": 1, "trimestre": 2, "type": "Devoir 4"},
        {"id": 15, "matiere_id": 2, "classe_id": 1, "trimestre": 2, "type": "Composition 2"},
        {"id": 16, "matiere_id": 3, "classe_id": 1, "trimestre": 2, "type": "Devoir 3"},
        {"id": 17, "matiere_id": 3, "classe_id": 1, "trimestre": 2, "type": "Devoir 4"},
        {"id": 18, "matiere_id": 3, "classe_id": 1, "trimestre": 2, "type": "Composition 2"},
        # 5e B - Trimestre 1
        {"id": 19, "matiere_id": 1, "classe_id": 2, "trimestre": 1, "type": "Devoir 1"},
        {"id": 20, "matiere_id": 1, "classe_id": 2, "trimestre": 1, "type": "Devoir 2"},
        {"id": 21, "matiere_id": 1, "classe_id": 2, "trimestre": 1, "type": "Composition 1"},
        {"id": 22, "matiere_id": 2, "classe_id": 2, "trimestre": 1, "type": "Devoir 1"},
        {"id": 23, "matiere_id": 2, "classe_id": 2, "trimestre": 1, "type": "Devoir 2"},
        {"id": 24, "matiere_id": 2, "classe_id": 2, "trimestre": 1, "type": "Composition 1"},
    ],
    # (etudiant_id, evaluation_id, note)
    "notes": [
        (1, 1, 12), (1, 2, 16), (1, 3, 10), (1, 4, 14), (1, 5, 13), (1, 6, 15), (1, 7, 11), (1, 8, 9), (1, 9, 12),
        (2, 1, 8), (2, 2, 9.5), (2, 3, 7), (2, 4, 10), (2, 5, 11), (2, 6, 9), (2, 7, 13), (2, 8, 12), (2, 9, 10),
        (3, 1, 17), (3, 2, 18), (3, 3, 16.5), (3, 4, 15), (3, 5, 14), (3, 6, 16), (3, 7, 18), (3, 8, 17), (3, 9, 19),
        (4, 1, 6), (4, 2, 7), (4, 3, 5), (4, 4, 9), (4, 5, 8.5), (4, 6, 7), (4, 7, 10), (4, 8, 11), (4, 9, 9),
        (1, 10, 13), (1, 11, 15), (1, 12, 12), (1, 13, 14), (1, 14, 12), (1, 15, 13), (1, 16, 10), (1, 17, 12), (1, 18, 11),
        (2, 10, 9), (2, 11, 10), (2, 12, 8), (2, 13, 11), (2, 14, 10.5), (2, 15, 10), (2, 16, 12), (2, 17, 14), (2, 18, 11),
        (3, 10, 18), (3, 11, 17), (3, 12, 18), (3, 13, 16), (3, 14, 15), (3, 15, 17), (3, 16, 19), (3, 17, 18), (3, 18, 18),
        (4, 10, 7), (4, 11, 8), (4, 12, 6), (4, 13, 10), (4, 14, 9), (4, 15, 8), (4, 16, 11), (4, 17, 10), (4, 18, ""),
        (5, 19, 14), (5, 20, 12), (5, 21, 13), (5, 22, 11), (5, 23, 12), (5, 24, 10),
        (6, 19, 9), (6, 20, 10), (6, 21, 8), (6, 22, 12), (6, 23, 13), (6, 24, 11),
        (7, 19, 15), (7, 20, 16), (7, 21, 14), (7, 22, 13), (7, 23, 12),
    ],
    "absences": [
        {"etudiant_id": 2, "date": "2024-10-07", "justification": "Certificat médical"},
        {"etudiant_id": 2, "date": "2024-10-08"},
        {"etudiant_id": 4, "date": "2024-11-12"},
        {"etudiant_id": 4, "date": "2025-02-03"},
        {"etudiant_id": 6, "date": "2024-12-02", "justification": "Convocation familiale"},
    ],
}
