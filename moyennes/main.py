import streamlit as st

from moyennes.utils import configure_logging, inject_css
from moyennes.ui import ui_sidebar, ui_dashboard, ui_bulletins, ui_matieres, ui_evolution

# 1. Config & Utils
st.set_page_config(page_title="Moyennes Scolaires", layout="wide", page_icon="🎓")
configure_logging()
inject_css()


# 2. Interface
def main():
    ui_sidebar()

    titre = "🎓 Moyennes trimestrielles & annuelles"
    if st.session_state.nom_dataset:
        titre += f" · {st.session_state.nom_dataset}"
    st.title(titre)

    tab1, tab2, tab3, tab4 = st.tabs(["📊 Dashboard", "🏆 Bulletins", "📚 Matières", "📈 Évolution"])

    with tab1:
        ui_dashboard()
    with tab2:
        ui_bulletins()
    with tab3:
        ui_matieres()
    with tab4:
        ui_evolution()


if __name__ == "__main__":
    main()
