"""
Care indicators over admission rows: average length of stay and readmission rate.
"""

from __future__ import annotations
import logging
from datetime import date, timedelta
import pandas as pd

log = logging.getLogger(__name__)

READMISSION_WINDOWS = (7, 15, 30)

def last_day_of_previous_month(today: date) -> date:
    return today.replace(day=1) - timedelta(days=1)

def format_decimal_br(num: float, decimals: int = 1) -> str:
    """12.0 -> "12,0" (comma as decimal separator)."""
    return f"{num:.{decimals}f}".replace(".", ",")

def _dates(df: pd.DataFrame, col: str) -> pd.Series:
    if col not in df.columns:
        return pd.Series(pd.NaT, index=df.index, dtype="datetime64[ns]")
    return pd.to_datetime(df[col], errors="coerce")

def average_stay(
    df: pd.DataFrame,
    start: date | None = None,
    end: date | None = None,
    today: date | None = None,
) -> float:
    """
    Mean length of stay in days.

    Only discharged admissions with a positive stay count. Discharges after
    `end` (default: last day of the previous month) or before `start` are
    ignored. The stay is recomputed from admission/discharge dates and falls
    back to `dias_internacao` when the admission date is missing.
    """
    if df.empty:
        return 0.0
    today = today or date.today()
    period_end = pd.Timestamp(end or last_day_of_previous_month(today))

    alta = _dates(df, "data_alta")
    adm = _dates(df, "data_admissao")

    mask = alta.notna() & (alta <= period_end)
    if start is not None:
        mask &= alta >= pd.Timestamp(start)

    if "dias_internacao" in df.columns:
        fallback = pd.to_numeric(df["dias_internacao"], errors="coerce").fillna(0)
    else:
        fallback = pd.Series(0, index=df.index)
    stay = (alta - adm).dt.days.where(adm.notna(), fallback)

    stay = stay[mask & (stay > 0)]
    if stay.empty:
        return 0.0
    return float(stay.mean())

def readmission_rate(df: pd.DataFrame, days: int) -> float:
    """
    Percentage of discharges followed by a new admission within `days` days.

    Admissions are grouped by health card number (`cns`); rows without one
    are ignored.
    """
    if df.empty or "cns" not in df.columns:
        return 0.0

    data = df[df["cns"].notna()].copy()
    data["cns"] = data["cns"].astype(str).str.strip()
    data = data[data["cns"] != ""]
    data["_adm"] = _dates(data, "data_admissao")
    data["_alta"] = _dates(data, "data_alta")

    readmissions = 0
    discharges = 0
    for _, group in data.groupby("cns", sort=False):
        group = group.sort_values("_adm", kind="stable")
        altas = group["_alta"].dropna().tolist()
        admissions = group["_adm"].tolist()

        for i in range(len(altas) - 1):
            discharges += 1
            next_admission = admissions[i + 1]
            if pd.isna(next_admission):
                continue
            gap = (next_admission - altas[i]).days
            if 0 < gap <= days:
                readmissions += 1

        # the last discharge has no follow-up admission
        if altas:
            discharges += 1

    log.debug("Readmissions within %dd: %d of %d discharges", days, readmissions, discharges)
    return readmissions / discharges * 100 if discharges else 0.0
