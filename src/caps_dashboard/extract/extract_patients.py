"""
Extract patient admissions for one hospital table, raw DataFrame.
"""

from __future__ import annotations
import logging
import pandas as pd
from sqlalchemy import select
from caps_dashboard.models.tables import PATIENT_TABLES

log = logging.getLogger(__name__)

PATIENT_COLUMNS = [
    "id", "nome", "cns", "data_nascimento", "cid", "cid_grupo",
    "caps_referencia", "genero", "raca_cor", "data_admissao", "data_alta",
    "procedencia", "dias_internacao",
]

def _patient_model(table_name: str):
    try:
        return PATIENT_TABLES[table_name]
    except KeyError:
        raise ValueError(f"Unknown patient table: {table_name!r}") from None

def read_patients(engine, table_name: str) -> pd.DataFrame:
    """Read every admission row of `table_name`, ordered by name."""
    model = _patient_model(table_name)
    stmt = select(*[getattr(model, c) for c in PATIENT_COLUMNS]).order_by(model.nome)
    df = pd.read_sql(stmt, engine)
    log.info("Extracted patients: %s (%d rows)", table_name, len(df))
    return df

def read_patient_names(engine, table_name: str) -> pd.DataFrame:
    """Non-null names of `table_name`, one row per admission (used for visit counts)."""
    model = _patient_model(table_name)
    stmt = select(model.nome).where(model.nome.is_not(None))
    df = pd.read_sql(stmt, engine)
    log.debug("Extracted %d patient names from %s", len(df), table_name)
    return df
