"""Pydantic schemas for campuses and hubs."""
from __future__ import annotations
from pydantic import BaseModel


class HubOut(BaseModel):
    hub_id: int
    name: str
    center: str

    model_config = {"from_attributes": True}


class CampusOut(BaseModel):
    campus_id: int
    name: str
    institution_id: int
    hubs: list[HubOut] = []

    model_config = {"from_attributes": True}
