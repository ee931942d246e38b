"""
Role based access rules: which pages a role may open and which patient rows it may see.

- coordenador: every page, every row
- gestor_caps: every page except settings, only rows of their own CAPS
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
import pandas as pd

log = logging.getLogger(__name__)

COORDINATOR = "coordenador"
CAPS_MANAGER = "gestor_caps"
ROLES = (COORDINATOR, CAPS_MANAGER)

ROLE_DISPLAY_NAMES = {
    COORDINATOR: "Coordenador",
    CAPS_MANAGER: "Gestor CAPS",
}

@dataclass(frozen=True)
class PagePermission:
    path: str
    name: str
    roles: tuple[str, ...]
    description: str = ""

PAGE_PERMISSIONS = (
    PagePermission("/dashboard", "Visão Geral", ROLES, "Dashboard principal com métricas gerais"),
    PagePermission("/pacientes", "Pacientes", ROLES, "Busca e histórico de pacientes"),
    PagePermission("/indicadores-assistenciais", "Indicadores Assistenciais", ROLES,
                   "Métricas de qualidade e desempenho"),
    PagePermission("/perfil-epidemiologico", "Perfil Epidemiológico", ROLES,
                   "Características demográficas dos pacientes"),
    PagePermission("/procedencia", "Procedência", ROLES, "Origem e encaminhamentos dos pacientes"),
    PagePermission("/interconsultas", "Interconsultas", ROLES, "Volume e análise de interconsultas"),
    PagePermission("/qualidade-satisfacao", "Qualidade e Satisfação", ROLES,
                   "Avaliação da experiência dos pacientes"),
    PagePermission("/sobre-servico", "Institucional", ROLES, "Informações sobre o serviço"),
    PagePermission("/configuracoes", "Configurações", (COORDINATOR,),
                   "Configurações do sistema (apenas coordenador)"),
)

# CAPS type keywords, checked in order: AD before Infantil
CAPS_TYPE_KEYWORDS = (
    ("AD", ("ad", "álcool", "alcool", "drogas")),
    ("Infantil", ("infantil", "infanto", "criança", "crianca", "adolescente")),
)
DEFAULT_CAPS_TYPE = "Adulto"

def is_coordinator(role: str | None) -> bool:
    return role == COORDINATOR

def is_caps_manager(role: str | None) -> bool:
    return role == CAPS_MANAGER

def can_access_settings(role: str | None) -> bool:
    return is_coordinator(role)

def get_role_display_name(role: str | None) -> str:
    return ROLE_DISPLAY_NAMES.get(role, "Usuário")

def can_access_page(role: str | None, path: str) -> bool:
    """
    Pages missing from PAGE_PERMISSIONS are open to every authenticated role.
    """
    if not role:
        return False
    for permission in PAGE_PERMISSIONS:
        if permission.path == path:
            return role in permission.roles
    return True

def get_accessible_pages(role: str | None) -> list[PagePermission]:
    if not role:
        return []
    return [p for p in PAGE_PERMISSIONS if role in p.roles]

def filter_data_by_user_access(
    df: pd.DataFrame,
    role: str | None,
    user_caps_reference: str | None = None,
    column: str = "caps_referencia",
) -> pd.DataFrame:
    """
    Row level access filter. Must run before any aggregate is computed.

    Coordinators get `df` back untouched. CAPS managers get the rows of their
    own CAPS. Anything else (no role, manager without a CAPS) gets an empty frame.
    """
    if is_coordinator(role):
        return df

    if is_caps_manager(role) and user_caps_reference:
        if column not in df.columns:
            log.warning("Access filter column %r missing; returning no rows", column)
            return df.iloc[0:0]
        return df[df[column] == user_caps_reference]

    log.info("No data access for role=%r caps=%r", role, user_caps_reference)
    return df.iloc[0:0]

def get_caps_type(caps_reference: str | None) -> str | None:
    """Classify a CAPS by its name: "AD", "Infantil" or "Adulto"."""
    if caps_reference is None or pd.isna(caps_reference) or not str(caps_reference):
        return None
    ref = str(caps_reference).lower()
    for caps_type, keywords in CAPS_TYPE_KEYWORDS:
        if any(k in ref for k in keywords):
            return caps_type
    return DEFAULT_CAPS_TYPE

def get_comparable_caps_references(all_references, user_reference: str) -> list[str]:
    """CAPS of the same type as `user_reference`, for benchmarking."""
    user_type = get_caps_type(user_reference)
    if not user_type:
        return [user_reference]
    return [ref for ref in all_references if get_caps_type(ref) == user_type]
