"""
Shared fixtures: in-memory SQLite database seeded through the ORM, preference store on tmp_path.
"""
from datetime import date
import pytest
from sqlalchemy.orm import Session
from caps_dashboard.core.db import create_tables, get_engine
from caps_dashboard.core.preferences import PreferenceStore
from caps_dashboard.models.tables import Caps, Hospital, PatientPlanalto, PatientTiradentes, UserProfile


TIRADENTES_ROWS = [
    dict(nome="Maria Da Silva", cns="898001160660007", data_nascimento=date(1990, 6, 16),
         cid="F20", cid_grupo="Esquizofrenia", caps_referencia="CAPS II Centro", genero="Feminino",
         raca_cor="Parda", procedencia="UPA", data_admissao=date(2024, 1, 2), data_alta=date(2024, 1, 12),
         dias_internacao=10),
    dict(nome="Maria Da Silva", cns="898001160660007", data_nascimento=date(1990, 6, 16),
         cid="F20", cid_grupo="Esquizofrenia", caps_referencia="CAPS AD Norte", genero="Feminino",
         raca_cor="Parda", procedencia="UPA", data_admissao=date(2024, 1, 16), data_alta=date(2024, 1, 30),
         dias_internacao=14),
    dict(nome="João Pereira", cns="700000000000001", data_nascimento=date(1970, 1, 1),
         cid="F10", cid_grupo="Uso de álcool", caps_referencia="CAPS AD Norte", genero="Masculino",
         raca_cor="Branca", procedencia="Demanda espontânea", data_admissao=date(2024, 3, 1),
         data_alta=None, dias_internacao=None),
    dict(nome="Ana Costa", cns=None, data_nascimento=None,
         cid="F32", cid_grupo="Depressão", caps_referencia="CAPS II Centro", genero="Feminino",
         raca_cor=None, procedencia="UPA", data_admissao=date(2024, 4, 1), data_alta=date(2024, 4, 9),
         dias_internacao=8),
]

PLANALTO_ROWS = [
    dict(nome="Pedro Alves", cns="123456789012345", data_nascimento=date(2010, 2, 1),
         cid="F90", cid_grupo="Transtornos da infância", caps_referencia="CAPS Infantil", genero="Masculino",
         raca_cor="Preta", procedencia="Escola", data_admissao=date(2024, 2, 1), data_alta=date(2024, 2, 6),
         dias_internacao=5),
]

@pytest.fixture
def engine():
    engine = get_engine("sqlite://")
    create_tables(engine)
    with Session(engine) as session:
        session.add_all([
            Caps(id="c1", nome="CAPS II Centro", tipo="CAPS II", municipio="Belo Horizonte"),
            Caps(id="c2", nome="CAPS AD Norte", tipo="CAPS AD", municipio="Belo Horizonte"),
            Caps(id="c3", nome="CAPS Infantil", tipo="CAPSi", municipio="Contagem"),
            Hospital(id="h1", nome="Hospital Tiradentes", cnes="0001", municipio="Belo Horizonte"),
            UserProfile(id="u1", user_id="a1", email="coord@example.org", nome="Carla Coord",
                        role="coordenador", caps_id=None, hospital_id="h1", ativo=True),
            UserProfile(id="u2", user_id="a2", email="gestor@example.org", nome="Gustavo Gestor",
                        role="gestor_caps", caps_id="c1", hospital_id="h1", ativo=True),
            UserProfile(id="u3", user_id="a3", email="antigo@example.org", nome="Antonio Antigo",
                        role="gestor_caps", caps_id="c1", hospital_id="h1", ativo=False),
            UserProfile(id="u4", user_id="a4", email="inativo@example.org", nome="Ines Inativa",
                        role="gestor_caps", caps_id="c3", hospital_id=None, ativo=False),
        ])
        session.add_all([PatientTiradentes(**row) for row in TIRADENTES_ROWS])
        session.add_all([PatientPlanalto(**row) for row in PLANALTO_ROWS])
        session.commit()
    yield engine
    engine.dispose()

@pytest.fixture
def store(tmp_path):
    return PreferenceStore(tmp_path / "preferences.json")
