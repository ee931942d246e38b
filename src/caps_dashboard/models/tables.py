"""
ORM models for the CAPS dashboard database.
"""

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import (
    Column, String, Boolean, DateTime, Date, Integer, ForeignKey
)

class Base(DeclarativeBase):
    pass

class Caps(Base):
    __tablename__ = "caps"

    id        = Column(String(36), primary_key=True)
    nome      = Column(String(255), nullable=False)
    tipo      = Column(String(50))
    municipio = Column(String(100))

class Hospital(Base):
    __tablename__ = "hospitais"

    id        = Column(String(36), primary_key=True)
    nome      = Column(String(255), nullable=False)
    cnes      = Column(String(20))
    municipio = Column(String(100))
    tipo      = Column(String(50))

class UserProfile(Base):
    __tablename__ = "user_profiles"

    id          = Column(String(36), primary_key=True)
    user_id     = Column(String(36), nullable=False)
    email       = Column(String(255), nullable=False)
    nome        = Column(String(255), nullable=False)
    role        = Column(String(20), nullable=False, default="gestor_caps")
    caps_id     = Column(String(36), ForeignKey("caps.id"))
    hospital_id = Column(String(36), ForeignKey("hospitais.id"))
    ativo       = Column(Boolean, nullable=False, default=True)
    created_at  = Column(DateTime(timezone=True))
    updated_at  = Column(DateTime(timezone=True))

class PatientColumns:
    """Columns shared by every per-hospital admissions table."""

    id              = Column(Integer, primary_key=True, autoincrement=True)
    nome            = Column(String(255))
    cns             = Column(String(20))     # national health card
    data_nascimento = Column(Date)
    cid             = Column(String(10))
    cid_grupo       = Column(String(100))
    caps_referencia = Column(String(255))
    genero          = Column(String(20))
    raca_cor        = Column(String(30))
    procedencia     = Column(String(255))
    data_admissao   = Column(Date)
    data_alta       = Column(Date)
    dias_internacao = Column(Integer)

class PatientPlanalto(PatientColumns, Base):
    __tablename__ = "pacientes_planalto"

class PatientTiradentes(PatientColumns, Base):
    __tablename__ = "pacientes_tiradentes"

PATIENT_TABLES = {
    PatientPlanalto.__tablename__: PatientPlanalto,
    PatientTiradentes.__tablename__: PatientTiradentes,
}
