"""
CAPS Dashboard
Patient indicators per hospital, gated by user role (coordenador / gestor_caps)
"""
import streamlit as st
import pandas as pd
import plotly.express as px
from caps_dashboard.core.config import DASHBOARD_USER_EMAIL
from caps_dashboard.core.db import get_engine
from caps_dashboard.core.logging_setup import setup_logging
from caps_dashboard.core.preferences import PreferenceStore
from caps_dashboard.extract.extract_users import find_user_by_email, read_caps, read_user_profiles
from caps_dashboard.services.hospital import HOSPITALS, HospitalSelector, get_hospital_display_name
from caps_dashboard.services.patients import load_indicators, load_patient_view
from caps_dashboard.services.permissions import (
    can_access_page, can_access_settings, get_accessible_pages, get_caps_type, get_role_display_name,
)
from caps_dashboard.services.roster import group_active_users_by_caps
from caps_dashboard.transforms.filter_patients import AGE_BANDS, apply_filters, assign_age_bands, unique_values
from caps_dashboard.transforms.indicators import format_decimal_br

setup_logging()
st.set_page_config(page_title="CAPS Dashboard", layout="wide")

# Database connection
@st.cache_resource
def get_connection():
    try:
        return get_engine()
    except Exception as e:
        st.error(f"Cannot connect to database: {e}")
        return None

@st.cache_data(ttl=60)
def patient_view(_engine, _selector, hospital, role, caps_ref, term=""):
    return load_patient_view(_engine, _selector, role, caps_ref, term=term)

@st.cache_data(ttl=60)
def indicators(_engine, _selector, hospital, role, caps_ref):
    return load_indicators(_engine, _selector, role, caps_ref)

def bar(series: pd.Series, x_label: str, y_label: str, horizontal: bool = False):
    if horizontal:
        fig = px.bar(x=series.values, y=series.index.astype(str), orientation="h",
                     labels={"x": y_label, "y": x_label}, text=series.values,
                     color_discrete_sequence=["#636EFA"])
    else:
        fig = px.bar(x=series.index.astype(str), y=series.values,
                     labels={"x": x_label, "y": y_label}, text=series.values,
                     color_discrete_sequence=["#636EFA"])
    fig.update_traces(textposition="outside")
    fig.update_layout(showlegend=False, height=320)
    st.plotly_chart(fig, use_container_width=True)

# Main app
engine = get_connection()
if not engine:
    st.stop()

if not DASHBOARD_USER_EMAIL:
    st.error("DASHBOARD_USER_EMAIL is not set")
    st.stop()

user = find_user_by_email(engine, DASHBOARD_USER_EMAIL)
if not user or not user.get("ativo"):
    st.error(f"No active profile for {DASHBOARD_USER_EMAIL}")
    st.stop()

role = user["role"]
caps_ref = user.get("caps_nome")

if "selector" not in st.session_state:
    st.session_state.selector = HospitalSelector(PreferenceStore())
selector = st.session_state.selector

# Sidebar
st.sidebar.title("CAPS Dashboard")
st.sidebar.markdown(f"**{user['nome']}**  \n{get_role_display_name(role)}")
if caps_ref:
    st.sidebar.caption(f"{caps_ref} ({get_caps_type(caps_ref)})")

hospital = st.sidebar.selectbox(
    "Hospital",
    HOSPITALS,
    index=HOSPITALS.index(selector.selected),
    format_func=get_hospital_display_name,
)
if hospital != selector.selected:
    selector.set_selected(hospital)

pages = get_accessible_pages(role)
if not pages:
    st.warning("Your role has no accessible pages")
    st.stop()
page = st.sidebar.radio("Pages", pages, format_func=lambda p: p.name)

if not can_access_page(role, page.path):
    st.error("Access denied")
    st.stop()

st.title(page.name)
st.caption(f"{selector.display_name()} - {page.description}")
st.markdown("---")

if page.path == "/dashboard":
    stats = indicators(engine, selector, selector.selected, role, caps_ref)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Patients", stats["total_pacientes"])
    col1.caption(f"Capacity: {selector.capacity()} beds")
    col2.metric("Average stay", f"{format_decimal_br(stats['media_permanencia'])} days")
    col2.caption("Discharges up to the end of last month")
    col3.metric("Readmissions ≤ 7 days", f"{format_decimal_br(stats['reinternacao_7d'], 2)}%")
    col4.metric("Readmissions ≤ 30 days", f"{format_decimal_br(stats['reinternacao_30d'], 2)}%")

    st.markdown("---")
    view = patient_view(engine, selector, selector.selected, role, caps_ref)

    st.markdown("**Filters**")
    cols = st.columns(6)
    filters = {
        "caps_referencia": cols[0].selectbox("CAPS", [""] + unique_values(view, "caps_referencia")),
        "genero": cols[1].selectbox("Gender", [""] + unique_values(view, "genero")),
        "procedencia": cols[2].selectbox("Origin", [""] + unique_values(view, "procedencia")),
        "cid_grupo": cols[3].selectbox("Diagnosis group", [""] + unique_values(view, "cid_grupo")),
        "raca_cor": cols[4].selectbox("Race/colour", [""] + unique_values(view, "raca_cor")),
        "faixa_etaria": cols[5].selectbox("Age band", [""] + AGE_BANDS),
    }
    filtered = apply_filters(view, filters)
    st.caption(f"Showing {len(filtered)} of {len(view)} admissions")

    if filtered.empty:
        st.info("No patient data available")
    else:
        col1, col2 = st.columns(2)
        with col1:
            st.markdown("**Gender**")
            counts = filtered["genero"].fillna("Not informed").value_counts()
            fig = px.pie(values=counts.values, names=counts.index, hole=0.4)
            fig.update_traces(textposition="inside", textinfo="percent+label")
            fig.update_layout(height=320)
            st.plotly_chart(fig, use_container_width=True)
        with col2:
            st.markdown("**Age bands**")
            bands = assign_age_bands(filtered["idade"][filtered["data_nascimento"].notna()])
            bar(bands.value_counts().reindex(AGE_BANDS, fill_value=0), "Age band", "Patients")

        col1, col2 = st.columns(2)
        with col1:
            st.markdown("**Admissions by CAPS**")
            bar(filtered["caps_referencia"].value_counts().head(10), "CAPS", "Admissions", horizontal=True)
        with col2:
            st.markdown("**Diagnosis groups**")
            bar(filtered["cid_grupo"].value_counts().head(10), "Group", "Admissions", horizontal=True)

elif page.path == "/pacientes":
    term = st.text_input("Search by name, initials or CNS")
    view = patient_view(engine, selector, selector.selected, role, caps_ref, term)
    st.markdown(f"**{len(view)} patients**")
    if view.empty:
        st.info("No patients found")
    else:
        st.dataframe(
            view[["iniciais", "nome", "cns", "idade", "numero_internacoes", "cid", "cid_grupo",
                  "caps_referencia", "data_admissao", "data_alta"]],
            use_container_width=True,
            height=500,
        )

elif page.path == "/indicadores-assistenciais":
    stats = indicators(engine, selector, selector.selected, role, caps_ref)
    cols = st.columns(3)
    for col, days in zip(cols, (7, 15, 30)):
        col.metric(f"Readmissions ≤ {days} days", f"{format_decimal_br(stats[f'reinternacao_{days}d'], 2)}%")
    st.caption("Share of discharges followed by a new admission of the same CNS within the window")

elif page.path == "/perfil-epidemiologico":
    view = patient_view(engine, selector, selector.selected, role, caps_ref)
    if view.empty:
        st.info("No patient data available")
    else:
        col1, col2 = st.columns(2)
        with col1:
            st.markdown("**Race/colour**")
            bar(view["raca_cor"].fillna("Not informed").value_counts(), "Race/colour", "Admissions")
        with col2:
            st.markdown("**Diagnosis (CID)**")
            bar(view["cid"].value_counts().head(15), "CID", "Admissions", horizontal=True)

elif page.path == "/procedencia":
    view = patient_view(engine, selector, selector.selected, role, caps_ref)
    if view.empty:
        st.info("No patient data available")
    else:
        bar(view["procedencia"].fillna("Not informed").value_counts(), "Origin", "Admissions", horizontal=True)

elif page.path == "/configuracoes" and can_access_settings(role):
    st.subheader("CAPS ↔ Users")
    groups = group_active_users_by_caps(read_user_profiles(engine), read_caps(engine))
    if not groups:
        st.info("No user is associated with a CAPS at the moment.")
    for group in groups:
        caps = group["caps"]
        st.markdown(f"**{caps['nome']}** - {caps.get('tipo') or '-'} / {caps.get('municipio') or '-'}")
        st.dataframe(
            pd.DataFrame(group["users"])[["nome", "email", "role"]]
            .assign(role=lambda d: d["role"].map(get_role_display_name)),
            use_container_width=True,
        )
        n = len(group["users"])
        st.caption(f"{n} user{'s' if n != 1 else ''} associated")

else:
    st.info(page.description)

st.markdown("---")
st.caption("CAPS Dashboard - data refreshed every 60 seconds")
