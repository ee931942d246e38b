"""
Enrich patients: derive age, initials and visit count, and search the enriched view.
"""

from __future__ import annotations
import logging
from datetime import date
import pandas as pd

log = logging.getLogger(__name__)

# columns the enrichment reads
SOURCE_COLUMNS = ["nome", "cns", "data_nascimento"]
DERIVED_COLUMNS = ["idade", "iniciais", "numero_internacoes"]

# helpers
def compute_age(birth_date, today: date) -> int:
    """Whole years between `birth_date` and `today`; 0 when missing or unparseable."""
    if birth_date is None or pd.isna(birth_date):
        return 0
    born = pd.to_datetime(birth_date, errors="coerce")
    if pd.isna(born):
        return 0
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age

def compute_initials(name) -> str:
    if name is None or pd.isna(name):
        return ""
    return "".join(part[0].upper() for part in str(name).split())

def _visit_count(name, visit_counts: dict) -> int:
    if name is None or pd.isna(name):
        return 1
    return int(visit_counts.get(name) or 1)

def count_visits_by_name(df: pd.DataFrame) -> dict[str, int]:
    """
    Admissions per patient name, over the complete table.
    Same name is taken to mean same patient.
    """
    if df.empty or "nome" not in df.columns:
        return {}
    counts = df["nome"].dropna().value_counts()
    return {name: int(n) for name, n in counts.items()}

# main transform
def enrich(df: pd.DataFrame, visit_counts: dict, today: date | None = None) -> pd.DataFrame:
    today = today or date.today()
    out = df.copy()

    missing = [c for c in SOURCE_COLUMNS if c not in out.columns]
    if missing and not out.empty:
        log.warning("Missing expected columns: %s", missing)
    for col in missing:
        out[col] = None

    out["idade"] = out["data_nascimento"].map(lambda v: compute_age(v, today)).astype(int)
    out["iniciais"] = out["nome"].map(compute_initials).astype(object)
    out["numero_internacoes"] = out["nome"].map(lambda n: _visit_count(n, visit_counts)).astype(int)

    log.debug("Enriched %d patient rows", len(out))
    return out

def search(df: pd.DataFrame, term: str | None) -> pd.DataFrame:
    """Rows whose name, initials or health card number contain `term`."""
    if not term or not term.strip():
        return df
    if df.empty:
        return df

    needle = term.lower().strip()
    by_name = df["nome"].astype("string").str.lower().str.contains(needle, regex=False, na=False)
    by_initials = df["iniciais"].astype("string").str.lower().str.contains(needle, regex=False, na=False)
    by_cns = df["cns"].astype("string").str.contains(needle, regex=False, na=False)

    mask = (by_name | by_initials | by_cns).astype(bool)
    return df[mask]
