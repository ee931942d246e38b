"""
Dashboard filter bar: narrow enriched admissions by CAPS, gender, origin, diagnosis group, race/colour and age band.
"""

from __future__ import annotations
import logging
import numpy as np
import pandas as pd

log = logging.getLogger(__name__)

AGE_BANDS = ["<18", "18–25", "26–44", "45–64", "65+"]

# filter key -> column
FILTER_COLUMNS = {
    "caps_referencia": "caps_referencia",
    "genero": "genero",
    "procedencia": "procedencia",
    "cid_grupo": "cid_grupo",
    "raca_cor": "raca_cor",
}

def assign_age_bands(ages: pd.Series) -> pd.Series:
    """Map ages to AGE_BANDS labels."""
    a = pd.to_numeric(ages, errors="coerce").to_numpy(dtype=float)
    bands = np.select(
        [a < 18, a <= 25, a <= 44, a <= 64, a >= 65],
        AGE_BANDS,
        default="",
    )
    return pd.Series(bands, index=ages.index, dtype=object)

def age_band(age: int) -> str:
    return assign_age_bands(pd.Series([age])).iloc[0]

def unique_values(df: pd.DataFrame, column: str) -> list[str]:
    """Sorted non-empty values of `column` (filter options)."""
    if column not in df.columns:
        return []
    values = df[column].dropna().astype(str).str.strip()
    return sorted(v for v in values.unique() if v)

def apply_filters(df: pd.DataFrame, filters: dict) -> pd.DataFrame:
    """
    Keep rows matching every non-empty filter. `faixa_etaria` needs the
    `idade` column added by enrich_patients.enrich.
    """
    out = df
    for key, col in FILTER_COLUMNS.items():
        value = filters.get(key)
        if value and col in out.columns:
            out = out[out[col] == value]

    band = filters.get("faixa_etaria")
    if band:
        if band not in AGE_BANDS:
            raise ValueError(f"Unknown age band: {band!r}")
        if "idade" not in out.columns:
            raise ValueError("Age band filter requires enriched rows (missing 'idade')")
        # admissions without birth date carry age 0 and never match a band
        has_dob = out["data_nascimento"].notna() if "data_nascimento" in out.columns else True
        out = out[(assign_age_bands(out["idade"]) == band) & has_dob]

    log.debug("Filters %s kept %d of %d rows", filters, len(out), len(df))
    return out
