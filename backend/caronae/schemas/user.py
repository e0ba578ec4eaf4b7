"""Pydantic schemas for Users."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserCreate(BaseModel):
    name: str
    email: Optional[str] = None
    profile: Optional[str] = None
    course: Optional[str] = None
    phone_number: Optional[str] = None
    location: Optional[str] = None
    car_owner: bool = False
    car_model: Optional[str] = None
    car_color: Optional[str] = None
    car_plate: Optional[str] = None
    profile_pic_url: Optional[str] = None
    institution_id: Optional[int] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    profile: Optional[str] = None
    course: Optional[str] = None
    phone_number: Optional[str] = None
    location: Optional[str] = None
    car_owner: Optional[bool] = None
    car_model: Optional[str] = None
    car_color: Optional[str] = None
    car_plate: Optional[str] = None
    profile_pic_url: Optional[str] = None


class UserOut(BaseModel):
    user_id: str
    name: str
    email: Optional[str] = None
    profile: Optional[str] = None
    course: Optional[str] = None
    phone_number: Optional[str] = None
    location: Optional[str] = None
    car_owner: bool
    car_model: Optional[str] = None
    car_color: Optional[str] = None
    car_plate: Optional[str] = None
    profile_pic_url: Optional[str] = None
    institution_id: Optional[int] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class HistoryCountOut(BaseModel):
    offered_count: int
    taken_count: int
