"""Institution, Campus and Hub ORM models.

A hub is a pickup/drop-off point on a campus. Rides reference hubs by name,
and older rides may carry only the hub's center label (e.g. ``CT`` instead of
``CT: Bloco A``), which is why filters match both.
"""
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from caronae.database import Base


class Institution(Base):
    __tablename__ = "institutions"

    institution_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)

    campi = relationship("Campus", back_populates="institution", cascade="all, delete-orphan")


class Campus(Base):
    __tablename__ = "campi"

    campus_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False, unique=True)
    institution_id = Column(Integer, ForeignKey("institutions.institution_id"), nullable=False)

    institution = relationship("Institution", back_populates="campi")
    hubs = relationship("Hub", back_populates="campus", cascade="all, delete-orphan")


class Hub(Base):
    __tablename__ = "hubs"

    hub_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    center = Column(String(150), nullable=False)
    campus_id = Column(Integer, ForeignKey("campi.campus_id"), nullable=False)

    campus = relationship("Campus", back_populates="hubs")
