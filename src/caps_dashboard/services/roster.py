"""
CAPS rosters: active users grouped by the CAPS they are associated with.
"""
import logging
import pandas as pd

log = logging.getLogger(__name__)

def _records(df: pd.DataFrame) -> list[dict]:
    return [{k: (None if pd.isna(v) else v) for k, v in rec.items()} for rec in df.to_dict("records")]

def _active(users: pd.DataFrame) -> pd.DataFrame:
    if users.empty:
        return users
    return users[users["ativo"].fillna(False).astype(bool)]

def get_users_by_caps(users: pd.DataFrame, caps_id: str) -> pd.DataFrame:
    active = _active(users)
    if active.empty:
        return active
    return active[active["caps_id"] == caps_id]

def get_users_by_hospital(users: pd.DataFrame, hospital_id: str) -> pd.DataFrame:
    active = _active(users)
    if active.empty:
        return active
    return active[active["hospital_id"] == hospital_id]

def group_active_users_by_caps(users: pd.DataFrame, caps: pd.DataFrame) -> list[dict]:
    """
    One entry per CAPS, in `caps` order: {"caps": {...}, "users": [{...}, ...]}.
    CAPS without active users are left out.
    """
    groups = []
    for cap in _records(caps):
        members = get_users_by_caps(users, cap["id"])
        if members.empty:
            continue
        groups.append({"caps": cap, "users": _records(members)})
    log.debug("Grouped users into %d CAPS rosters", len(groups))
    return groups
