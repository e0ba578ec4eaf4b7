"""Campus and hub lookup routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from caronae.database import get_db
from caronae.models.place import Campus
from caronae.schemas.place import CampusOut

router = APIRouter()


@router.get("/campi", response_model=list[CampusOut])
def list_campi(institution_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
    """List campuses with their hubs, used to populate ride filters."""
    query = db.query(Campus)
    if institution_id is not None:
        query = query.filter(Campus.institution_id == institution_id)
    return query.order_by(Campus.name).all()
