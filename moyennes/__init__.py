"""Calcul des moyennes de matière, trimestrielles et annuelles d'un établissement."""
