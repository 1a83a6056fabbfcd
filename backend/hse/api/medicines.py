from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from ..core.permissions import TAB_TREATMENT
from ..core.security import require_tab
from ..models.base import get_db
from ..services import pharmacy

router = APIRouter(prefix="/medicines", tags=["pharmacy"])


class MedicineIn(BaseModel):
    name: str
    type: str
    stock: int


class MedicineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    stock: int


@router.get("", response_model=List[MedicineResponse])
def list_medicines(
    search: Optional[str] = Query(None, description="Name or type"),
    db: Session = Depends(get_db),
    _user=Depends(require_tab(TAB_TREATMENT)),
):
    return pharmacy.list_medicines(db, search)


@router.post("", response_model=MedicineResponse, status_code=status.HTTP_201_CREATED)
def create_medicine(
    medicine_in: MedicineIn,
    db: Session = Depends(get_db),
    _user=Depends(require_tab(TAB_TREATMENT)),
):
    return pharmacy.add_medicine(db, medicine_in.model_dump())


@router.put("/{medicine_id}", response_model=MedicineResponse)
def update_medicine(
    medicine_id: str,
    medicine_in: MedicineIn,
    db: Session = Depends(get_db),
    _user=Depends(require_tab(TAB_TREATMENT)),
):
    """Direct stock edit. Not reconciled against visits."""
    return pharmacy.edit_medicine(db, medicine_id, medicine_in.model_dump())
