"""
Hospital selection: which hospital's admissions table the dashboard reads.
"""

from __future__ import annotations
import logging

log = logging.getLogger(__name__)

HOSPITALS = ("planalto", "tiradentes")
DEFAULT_HOSPITAL = "tiradentes"
HOSPITAL_STORAGE_KEY = "psi-selected-hospital"

TABLE_NAMES = {
    "planalto": "pacientes_planalto",
    "tiradentes": "pacientes_tiradentes",
}
DISPLAY_NAMES = {
    "planalto": "Hospital Planalto",
    "tiradentes": "Hospital Tiradentes",
}
BED_CAPACITY = {
    "planalto": 16,
    "tiradentes": 10,
}

def _check(hospital: str) -> str:
    if hospital not in HOSPITALS:
        raise ValueError(f"Unknown hospital: {hospital!r} (expected one of {', '.join(HOSPITALS)})")
    return hospital

def get_table_name(hospital: str) -> str:
    return TABLE_NAMES[_check(hospital)]

def get_hospital_display_name(hospital: str) -> str:
    return DISPLAY_NAMES.get(hospital, "Hospital")

def get_hospital_capacity(hospital: str) -> int:
    return BED_CAPACITY[_check(hospital)]

class HospitalSelector:
    """
    Current hospital, loaded once from `store` and written back on every change.

    `store` needs `get(key, default)` and `set(key, value)`,
    see caps_dashboard.core.preferences.PreferenceStore.
    """

    def __init__(self, store):
        self.store = store
        saved = store.get(HOSPITAL_STORAGE_KEY)
        if saved in HOSPITALS:
            self._selected = saved
        else:
            if saved is not None:
                log.debug("Ignoring stored hospital %r, using %s", saved, DEFAULT_HOSPITAL)
            self._selected = DEFAULT_HOSPITAL

    @property
    def selected(self) -> str:
        return self._selected

    def set_selected(self, hospital: str) -> None:
        _check(hospital)
        self.store.set(HOSPITAL_STORAGE_KEY, hospital)
        self._selected = hospital
        log.info("Selected hospital: %s", hospital)

    def table_name(self) -> str:
        return get_table_name(self._selected)

    def display_name(self) -> str:
        return get_hospital_display_name(self._selected)

    def capacity(self) -> int:
        return get_hospital_capacity(self._selected)
