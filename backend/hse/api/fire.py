from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from ..core.dates import JalaliDateStr
from ..core.permissions import TAB_FIRE_DEPARTMENT
from ..core.security import require_tab
from ..models.base import get_db
from ..models.fire import EquipmentStatus, FireEquipment
from ..services import fire_equipment as fire_service

router = APIRouter(prefix="/fire", tags=["fire-department"], dependencies=[Depends(require_tab(TAB_FIRE_DEPARTMENT))])


class EquipmentTypeIn(BaseModel):
    name: str


class EquipmentTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class EquipmentIn(BaseModel):
    tag: str
    type_id: str
    location: str = ""
    install_date: Optional[JalaliDateStr] = None
    last_inspection_date: Optional[JalaliDateStr] = None
    next_inspection_date: Optional[JalaliDateStr] = None
    status: str = EquipmentStatus.OPERATIONAL


class EquipmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tag: str
    type_id: str
    type_name: str = ""
    location: str
    install_date: Optional[str]
    last_inspection_date: Optional[str]
    next_inspection_date: Optional[str]
    status: str


def _response(equipment: FireEquipment) -> EquipmentResponse:
    response = EquipmentResponse.model_validate(equipment)
    response.type_name = fire_service.type_name(equipment)
    return response


# ── Equipment types ──────────────────────────────────────────────────────────

@router.get("/equipment-types", response_model=List[EquipmentTypeResponse])
def list_equipment_types(db: Session = Depends(get_db)):
    return fire_service.list_equipment_types(db)


@router.post("/equipment-types", response_model=EquipmentTypeResponse, status_code=status.HTTP_201_CREATED)
def create_equipment_type(type_in: EquipmentTypeIn, db: Session = Depends(get_db)):
    return fire_service.add_equipment_type(db, type_in.name)


@router.put("/equipment-types/{type_id}", response_model=EquipmentTypeResponse)
def update_equipment_type(type_id: str, type_in: EquipmentTypeIn, db: Session = Depends(get_db)):
    return fire_service.edit_equipment_type(db, type_id, type_in.name)


@router.delete("/equipment-types/{type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_equipment_type(type_id: str, db: Session = Depends(get_db)):
    """Refused with 409 while any equipment still uses the type."""
    fire_service.delete_equipment_type(db, type_id)


# ── Equipment ────────────────────────────────────────────────────────────────

@router.get("/equipment", response_model=List[EquipmentResponse])
def list_equipment(
    search: Optional[str] = Query(None, description="Tag, location or type name"),
    db: Session = Depends(get_db),
):
    return [_response(eq) for eq in fire_service.list_equipment(db, search)]


@router.post("/equipment", response_model=EquipmentResponse, status_code=status.HTTP_201_CREATED)
def create_equipment(equipment_in: EquipmentIn, db: Session = Depends(get_db)):
    return _response(fire_service.add_equipment(db, equipment_in.model_dump()))


@router.get("/equipment/{equipment_id}", response_model=EquipmentResponse)
def get_equipment(equipment_id: str, db: Session = Depends(get_db)):
    return _response(fire_service.get_equipment(db, equipment_id))


@router.put("/equipment/{equipment_id}", response_model=EquipmentResponse)
def update_equipment(equipment_id: str, equipment_in: EquipmentIn, db: Session = Depends(get_db)):
    return _response(fire_service.edit_equipment(db, equipment_id, equipment_in.model_dump()))


@router.delete("/equipment/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_equipment(equipment_id: str, db: Session = Depends(get_db)):
    fire_service.delete_equipment(db, equipment_id)
