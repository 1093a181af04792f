import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from moyennes import config
from moyennes.calculator import Calculator, arrondir
from moyennes import cohort
from moyennes.data_manager import DataManager
from moyennes.models import InvalidDatasetError


def _dataset():
    return st.session_state.dataset


def _charger(nom, raw):
    try:
        data = DataManager.normaliser_donnees(raw)
    except (InvalidDatasetError, KeyError, ValueError) as e:
        st.error(f"Jeu de données invalide : {e}")
        return
    st.session_state.dataset = data
    st.session_state.nom_dataset = nom
    st.rerun()


def ui_sidebar():
    DataManager.init_state()
    with st.sidebar:
        st.header("⚙️ Configuration")

        # Gestion Fichiers Locaux
        datasets = DataManager.scanner_fichiers_locaux()
        if datasets:
            f_choisi = st.selectbox("Fichier", list(datasets.keys()))
            if f_choisi:
                d_choisi = st.selectbox("Dataset", list(datasets[f_choisi].keys()))
                if st.button("Charger"):
                    _charger(d_choisi, datasets[f_choisi][d_choisi])
        else:
            st.caption(f"Aucun fichier '{config.DATASET_GLOB}' trouvé dans le dossier.")

        st.divider()
        uploaded = st.file_uploader("📂 Import JSON", type="json")
        if uploaded and st.button("Importer"):
            try:
                data = DataManager.charger_json(uploaded)
            except (InvalidDatasetError, KeyError, ValueError) as e:
                st.error(f"Import impossible : {e}")
            else:
                st.session_state.dataset = data
                st.session_state.nom_dataset = uploaded.name
                st.rerun()

        data = _dataset()
        if data is not None:
            st.download_button("💾 Export JSON", DataManager.exporter_json(data), "moyennes.json")
            anomalies = DataManager.diagnose(data, on_warning=lambda message: None)
            if anomalies:
                with st.expander(f"⚠️ {len(anomalies)} anomalie(s)"):
                    for message in anomalies:
                        st.caption(message)

        if st.button("🗑️ Reset", type="primary"):
            st.session_state.dataset = None
            st.session_state.nom_dataset = None
            st.rerun()


def _choix_periode(data, key):
    terms = data.terms_of_year()
    options = [None] + terms
    return st.selectbox(
        "Période", options, key=key,
        format_func=lambda t: "Année" if t is None else t.label,
    )


def _choix_classe(data, key):
    return st.selectbox("Classe", data.class_ids(), key=key, format_func=data.class_name)


def ui_dashboard():
    st.header("📊 Tableau de Bord")
    data = _dataset()
    if data is None:
        st.info("Chargez un jeu de données depuis le menu à gauche.")
        return

    # Un élève inscrit dans deux classes compte une fois par classe
    annuelles = {}
    for class_id in data.class_ids():
        for student_id, moyenne in cohort.student_averages(data, class_id).items():
            annuelles[(class_id, student_id)] = moyenne
    taux = cohort.success_rate(annuelles)
    moyenne_ecole = cohort.cohort_average(annuelles.values())

    c1, c2, c3 = st.columns(3)
    c1.metric("Élèves inscrits", len(annuelles))
    c2.metric("Taux de réussite", f"{taux * 100:.2f} %")
    if moyenne_ecole.average is not None:
        c3.metric("Moyenne annuelle", f"{moyenne_ecole.average:.2f}/20",
                  delta=f"{moyenne_ecole.average - config.PASS_MARK:.2f}")

    fig = go.Figure(go.Indicator(
        mode="gauge+number", value=taux * 100, title={'text': "Réussite (%)"},
        gauge={'axis': {'range': [0, 100]}, 'bar': {'color': "#2b86d9"}}
    ))
    fig.update_layout(height=220, margin=dict(l=20, r=20, t=30, b=20))
    st.plotly_chart(fig, use_container_width=True)

    lignes = [
        {"Classe": data.class_name(class_id), "Moyenne": arrondir(res.average), "Effectif": res.count}
        for class_id, res in cohort.class_averages(data).items()
        if res.average is not None
    ]
    if lignes:
        df = pd.DataFrame(lignes)
        fig = px.bar(df, x="Classe", y="Moyenne", text="Moyenne", range_y=[0, config.MAX_SCORE],
                     title="Moyenne annuelle par classe")
        fig.add_hline(y=config.PASS_MARK, line_dash="dash")
        st.plotly_chart(fig, use_container_width=True)

    st.subheader("🗓️ Assiduité")
    assiduite = [cohort.class_attendance(data, class_id) for class_id in data.class_ids()]
    df = pd.DataFrame(assiduite)
    if not df.empty:
        st.dataframe(
            df[["Classe", "journees_possibles", "absences", "taux_assiduite", "taux_absence_non_justifiee"]],
            use_container_width=True,
            column_config={
                "taux_assiduite": st.column_config.ProgressColumn(
                    "Assiduité (%)", format="%.2f", min_value=0, max_value=100
                ),
                "taux_absence_non_justifiee": st.column_config.NumberColumn(
                    "Absences non justifiées (%)", format="%.2f"
                ),
            }
        )


def ui_bulletins():
    st.header("🏆 Bulletins & Classement")
    data = _dataset()
    if data is None or not data.class_ids():
        st.info("Aucune classe disponible.")
        return

    c1, c2 = st.columns(2)
    with c1:
        class_id = _choix_classe(data, "bul_classe")
    with c2:
        term = _choix_periode(data, "bul_periode")

    lignes = cohort.bulletins(data, class_id, term)
    if not lignes:
        st.warning("Aucun élève inscrit dans cette classe.")
        return

    df = pd.DataFrame(lignes).drop(columns=["student_id"])
    st.dataframe(
        df,
        use_container_width=True,
        column_config={
            "Moyenne": st.column_config.ProgressColumn(
                "Moyenne", format="%.2f", min_value=0, max_value=config.MAX_SCORE
            ),
        }
    )

    if term is not None:
        student_id = st.selectbox("Détail de l'élève", [l["student_id"] for l in lignes],
                                  format_func=data.student_name)
        details = []
        class_coefficients = data.class_coefficients(class_id)
        for subject_id in Calculator.class_subjects(class_coefficients):
            detail = Calculator.subject_term_detail(
                student_id, subject_id, term, data.terms, data.evaluations, data.scores, class_id=class_id
            )
            details.append({
                "Matière": data.subject_name(subject_id),
                "Coef": Calculator.coefficient_for(class_coefficients, subject_id),
                "Devoir 1": detail["devoir1"],
                "Devoir 2": detail["devoir2"],
                "Moy. devoirs": arrondir(detail["moyenne_devoirs"]),
                "Composition": detail["composition"],
                "Moyenne": arrondir(detail["moyenne"]),
                "Mention": cohort.mention(detail["moyenne"]),
            })
        st.dataframe(pd.DataFrame(details), use_container_width=True)


def ui_matieres():
    st.header("📚 Moyennes par matière")
    data = _dataset()
    terms = data.terms_of_year() if data is not None else []
    if not terms or not data.class_ids():
        st.info("Aucun trimestre ou aucune classe disponible.")
        return

    c1, c2 = st.columns(2)
    with c1:
        class_id = _choix_classe(data, "mat_classe")
    with c2:
        term = st.selectbox("Trimestre", terms, format_func=lambda t: t.label, key="mat_trimestre")

    lignes = [
        {"Matière": data.subject_name(subject_id), "Moyenne": arrondir(res.average), "Effectif": res.count}
        for subject_id, res in cohort.subject_cohort_averages(data, class_id, term).items()
    ]
    df = pd.DataFrame(lignes)
    if df.empty or df["Moyenne"].isna().all():
        st.info("Pas encore de moyenne complète pour ce trimestre.")
        return
    df['Color'] = df['Moyenne'].apply(lambda x: '#2ecc71' if x is not None and x >= config.PASS_MARK else '#e74c3c')
    fig = px.bar(df.dropna(subset=["Moyenne"]), x="Matière", y="Moyenne", text="Moyenne",
                 range_y=[0, config.MAX_SCORE])
    fig.update_traces(marker_color=df.dropna(subset=["Moyenne"])['Color'], textposition='outside')
    fig.add_hline(y=config.PASS_MARK, line_dash="dash", line_color="black")
    st.plotly_chart(fig, use_container_width=True)


def ui_evolution():
    st.header("📈 Évolution des moyennes")
    data = _dataset()
    if data is None:
        st.info("Chargez un jeu de données depuis le menu à gauche.")
        return

    options = [None] + data.class_ids()
    class_id = st.selectbox("Classe", options, key="evo_classe",
                            format_func=lambda c: "Toutes" if c is None else data.class_name(c))
    df = pd.DataFrame(cohort.term_evolution(data, class_id)).dropna(subset=["Moyenne"])
    if df.empty:
        st.info("Aucune moyenne trimestrielle disponible.")
        return
    df["Moyenne"] = df["Moyenne"].round(config.ROUND_DIGITS)
    fig = px.line(df, x="Trimestre", y="Moyenne", markers=True, range_y=[0, config.MAX_SCORE])
    fig.add_hline(y=config.PASS_MARK, line_dash="dash")
    st.plotly_chart(fig, use_container_width=True)
