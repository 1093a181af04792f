"""
Réglages du calcul des moyennes.

Chaque valeur peut être surchargée par une variable d'environnement
préfixée par MOYENNES_. Par exemple, pour changer la note de passage :
    MOYENNES_PASS_MARK=12

Les valeurs sont lues à chaque accès, ce qui permet de les modifier
pendant les tests sans recharger le module.
"""
import os


_DEFAULTS = {
    # Barème
    'PASS_MARK': 10.0,
    'MAX_SCORE': 20.0,
    'ROUND_DIGITS': 2,

    # Pondération d'une moyenne de matière
    'DEVOIR_WEIGHT': 3.0,
    'COMPOSITION_WEIGHT': 1.0,
    'DEFAULT_COEFFICIENT': 1.0,

    # Seuils des mentions (bulletins)
    'MENTION_FELICITATIONS': 16.0,
    'MENTION_TRES_BIEN': 14.0,
    'MENTION_BIEN': 12.0,
    'MENTION_ASSEZ_BIEN': 10.0,
    'MENTION_ENCOURAGEMENTS': 8.0,

    # Jeux de données locaux
    'DATASET_GLOB': 'ecole_data_*.py',
    'DATASET_PREFIX': 'ecole_data_',

    'LOG_LEVEL': 'INFO',
}


def _coerce(raw, default):
    if isinstance(default, bool):
        return raw.strip().lower() in ('1', 'true', 'yes', 'on')
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def _get_setting(name, default):
    """Lit MOYENNES_<name> dans l'environnement, sinon la valeur par défaut."""
    raw = os.environ.get(f'MOYENNES_{name}')
    if raw is None or raw == '':
        return default
    return _coerce(raw, default)


class _ConfigProxy:
    """Proxy paresseux : les réglages sont résolus au moment de l'accès."""

    def __getattr__(self, name):
        if name in _DEFAULTS:
            return _get_setting(name, _DEFAULTS[name])
        raise AttributeError(f"Unknown config setting: {name}")


_config = _ConfigProxy()


def __getattr__(name):
    return getattr(_config, name)
