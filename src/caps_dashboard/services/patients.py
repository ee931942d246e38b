"""
Patient view service - orchestrates extract, access filter, enrichment and search
"""

from __future__ import annotations
import logging
from datetime import date
import pandas as pd
from sqlalchemy.exc import SQLAlchemyError
from caps_dashboard.extract.extract_patients import read_patients, read_patient_names
from caps_dashboard.services.permissions import filter_data_by_user_access
from caps_dashboard.transforms.enrich_patients import count_visits_by_name, enrich, search
from caps_dashboard.transforms.indicators import READMISSION_WINDOWS, average_stay, readmission_rate

log = logging.getLogger(__name__)

def load_accessible_patients(engine, selector, role, user_caps_reference) -> pd.DataFrame:
    """Raw admission rows of the selected hospital that `role` may see."""
    table_name = selector.table_name()
    try:
        rows = read_patients(engine, table_name)
    except Exception as e:
        log.error("Failed to read %s: %s", table_name, e, exc_info=True)
        raise
    return filter_data_by_user_access(rows, role, user_caps_reference)

def load_patient_view(
    engine,
    selector,
    role: str | None,
    user_caps_reference: str | None,
    term: str = "",
    today: date | None = None,
) -> pd.DataFrame:
    """Enriched, access-filtered and searched patients of the selected hospital."""
    rows = load_accessible_patients(engine, selector, role, user_caps_reference)
    if rows.empty:
        return enrich(rows, {}, today=today)

    # visit counts come from the whole table, not from the filtered/searched subset
    try:
        names = read_patient_names(engine, selector.table_name())
        visit_counts = count_visits_by_name(names)
    except SQLAlchemyError as e:
        log.warning("Visit counts unavailable for %s, defaulting to 1: %s", selector.table_name(), e)
        visit_counts = {}

    view = enrich(rows, visit_counts, today=today)
    result = search(view, term)
    log.info("Patient view %s: %d rows (%d before search)", selector.selected, len(result), len(view))
    return result

def load_indicators(
    engine,
    selector,
    role: str | None,
    user_caps_reference: str | None,
    today: date | None = None,
) -> dict:
    rows = load_accessible_patients(engine, selector, role, user_caps_reference)
    stats = {
        "total_pacientes": len(rows),
        "media_permanencia": average_stay(rows, today=today),
    }
    for days in READMISSION_WINDOWS:
        stats[f"reinternacao_{days}d"] = readmission_rate(rows, days)
    return stats
