import logging.config

import streamlit as st

from moyennes import config


def configure_logging():
    """Journalisation console, niveau réglé par MOYENNES_LOG_LEVEL."""
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'verbose': {
                'format': '{levelname} {asctime} {module} {message}',
                'style': '{',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'verbose',
            },
        },
        'loggers': {
            'moyennes': {
                'handlers': ['console'],
                'level': config.LOG_LEVEL,
                'propagate': False,
            },
        },
    })


def inject_css():
    """Injecte le CSS personnalisé."""
    st.markdown("""
        <style>
        .metric-card { background-color: #f0f2f6; border-radius: 10px; padding: 15px; box-shadow: 2px 2px 5px rgba(0,0,0,0.1); }
        .success-box { padding: 10px; border-radius: 5px; background-color: #d4edda; color: #155724; border: 1px solid #c3e6cb; }
        .warning-box { padding: 10px; border-radius: 5px; background-color: #fff3cd; color: #856404; border: 1px solid #ffeeba; }
        </style>
    """, unsafe_allow_html=True)
