"""
Extract user profiles and CAPS reference data, raw DataFrames.
"""
import logging
import pandas as pd
from sqlalchemy import select
from caps_dashboard.models.tables import Caps, UserProfile

log = logging.getLogger(__name__)

USER_COLUMNS = ["id", "nome", "email", "role", "caps_id", "hospital_id", "ativo"]
CAPS_COLUMNS = ["id", "nome", "tipo", "municipio"]

def read_user_profiles(engine) -> pd.DataFrame:
    stmt = select(*[getattr(UserProfile, c) for c in USER_COLUMNS]).order_by(UserProfile.nome)
    df = pd.read_sql(stmt, engine)
    log.info("Extracted user profiles (%d rows)", len(df))
    return df

def read_caps(engine) -> pd.DataFrame:
    stmt = select(*[getattr(Caps, c) for c in CAPS_COLUMNS]).order_by(Caps.nome)
    df = pd.read_sql(stmt, engine)
    log.info("Extracted CAPS (%d rows)", len(df))
    return df

def find_user_by_email(engine, email: str) -> dict | None:
    """Profile of `email` joined with its CAPS name (`caps_nome`), or None."""
    stmt = (
        select(*[getattr(UserProfile, c) for c in USER_COLUMNS], Caps.nome.label("caps_nome"))
        .outerjoin(Caps, UserProfile.caps_id == Caps.id)
        .where(UserProfile.email == email)
    )
    df = pd.read_sql(stmt, engine)
    if df.empty:
        log.warning("No user profile for %s", email)
        return None
    rec = df.iloc[0].to_dict()
    return {k: (None if pd.isna(v) else v) for k, v in rec.items()}
