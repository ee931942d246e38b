"""
Tests for the patient view service against a seeded database
"""
from datetime import date
import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from caps_dashboard.core.db import create_tables, get_engine
from caps_dashboard.extract.extract_patients import read_patient_names, read_patients
from caps_dashboard.services.hospital import HospitalSelector
from caps_dashboard.services.patients import load_indicators, load_patient_view
from caps_dashboard.transforms.enrich_patients import DERIVED_COLUMNS

TODAY = date(2024, 6, 15)

@pytest.fixture
def selector(store):
    return HospitalSelector(store)

def test_create_tables_is_idempotent(engine):
    create_tables(engine)
    tables = set(inspect(engine).get_table_names())
    assert {"caps", "hospitais", "user_profiles", "pacientes_planalto", "pacientes_tiradentes"} <= tables

def test_get_engine_requires_url(monkeypatch):
    monkeypatch.setattr("caps_dashboard.core.db.DATABASE_URL", None)
    with pytest.raises(ValueError):
        get_engine()

def test_read_patients_ordered_by_name(engine):
    df = read_patients(engine, "pacientes_tiradentes")
    assert df["nome"].tolist() == ["Ana Costa", "João Pereira", "Maria Da Silva", "Maria Da Silva"]
    assert len(read_patient_names(engine, "pacientes_tiradentes")) == 4

def test_read_unknown_table(engine):
    with pytest.raises(ValueError):
        read_patients(engine, "pacientes; drop table caps")

def test_coordinator_sees_all_rows(engine, selector):
    view = load_patient_view(engine, selector, "coordenador", None, today=TODAY)
    assert len(view) == 4
    maria = view[view["nome"] == "Maria Da Silva"]
    assert maria["numero_internacoes"].tolist() == [2, 2]
    assert maria["iniciais"].tolist() == ["MDS", "MDS"]
    assert maria["idade"].tolist() == [33, 33]

def test_manager_sees_only_own_caps(engine, selector):
    view = load_patient_view(engine, selector, "gestor_caps", "CAPS II Centro", today=TODAY)
    assert set(view["caps_referencia"]) == {"CAPS II Centro"}
    assert view["nome"].tolist() == ["Ana Costa", "Maria Da Silva"]

def test_visit_counts_use_whole_table(engine, selector):
    """Maria's second admission belongs to another CAPS but still counts"""
    view = load_patient_view(engine, selector, "gestor_caps", "CAPS II Centro", term="maria", today=TODAY)
    assert view["nome"].tolist() == ["Maria Da Silva"]
    assert view["numero_internacoes"].tolist() == [2]

def test_search_by_cns(engine, selector):
    view = load_patient_view(engine, selector, "coordenador", None, term="7000000", today=TODAY)
    assert view["nome"].tolist() == ["João Pereira"]

@pytest.mark.parametrize("role, caps_ref", [(None, None), ("gestor_caps", None), ("gestor_caps", "CAPS Infantil")])
def test_no_access_gives_empty_view(engine, selector, role, caps_ref):
    view = load_patient_view(engine, selector, role, caps_ref, today=TODAY)
    assert view.empty
    for col in DERIVED_COLUMNS:
        assert col in view.columns

def test_switching_hospital_changes_table(engine, selector):
    selector.set_selected("planalto")
    view = load_patient_view(engine, selector, "coordenador", None, today=TODAY)
    assert view["nome"].tolist() == ["Pedro Alves"]
    assert view["idade"].tolist() == [14]

def test_indicators_follow_access(engine, selector):
    stats = load_indicators(engine, selector, "coordenador", None, today=TODAY)
    assert stats["total_pacientes"] == 4
    assert stats["media_permanencia"] == pytest.approx((10 + 14 + 8) / 3)
    assert stats["reinternacao_7d"] == pytest.approx(50.0)

    stats = load_indicators(engine, selector, "gestor_caps", "CAPS II Centro", today=TODAY)
    assert stats["total_pacientes"] == 2
    assert stats["media_permanencia"] == pytest.approx(9.0)
    assert stats["reinternacao_7d"] == 0.0

    stats = load_indicators(engine, selector, None, None, today=TODAY)
    assert stats == {
        "total_pacientes": 0,
        "media_permanencia": 0.0,
        "reinternacao_7d": 0.0,
        "reinternacao_15d": 0.0,
        "reinternacao_30d": 0.0,
    }

def test_visit_counts_default_to_one_when_names_query_fails(engine, selector, monkeypatch):
    """A failing name listing must not take the patient view down"""
    def failing_names(*args, **kwargs):
        raise OperationalError("SELECT nome", {}, Exception("names query failed"))

    monkeypatch.setattr("caps_dashboard.services.patients.read_patient_names", failing_names)
    view = load_patient_view(engine, selector, "coordenador", None, today=TODAY)
    assert view["numero_internacoes"].tolist() == [1, 1, 1, 1]
    assert view["iniciais"].tolist() == ["AC", "JP", "MDS", "MDS"]

def test_row_query_errors_still_propagate(engine, selector, monkeypatch):
    def failing_rows(*args, **kwargs):
        raise OperationalError("SELECT *", {}, Exception("rows query failed"))

    monkeypatch.setattr("caps_dashboard.services.patients.read_patients", failing_rows)
    with pytest.raises(OperationalError):
        load_patient_view(engine, selector, "coordenador", None, today=TODAY)
