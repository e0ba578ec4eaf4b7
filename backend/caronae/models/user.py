"""User ORM model."""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from caronae.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    profile = Column(String(50), nullable=True)  # e.g. Graduação, Servidor
    course = Column(String(100), nullable=True)
    phone_number = Column(String(20), nullable=True)
    location = Column(String(100), nullable=True)
    car_owner = Column(Boolean, nullable=False, default=False)
    car_model = Column(String(50), nullable=True)
    car_color = Column(String(30), nullable=True)
    car_plate = Column(String(10), nullable=True)
    profile_pic_url = Column(String(500), nullable=True)
    institution_id = Column(Integer, ForeignKey("institutions.institution_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    institution = relationship("Institution")
