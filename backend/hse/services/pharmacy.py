import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFound, ValidationFailed
from ..models.base import generate_uuid
from ..models.treatment import Medicine
from .validators import require_text

logger = logging.getLogger(__name__)


def _clean(data: Dict) -> Dict:
    name = require_text(data.get("name"), "Please fill in all fields correctly.")
    kind = require_text(data.get("type"), "Please fill in all fields correctly.")
    stock = data.get("stock")
    if not isinstance(stock, int) or stock < 0:
        raise ValidationFailed("Please fill in all fields correctly.")
    return {"name": name, "type": kind, "stock": stock}


def add_medicine(db: Session, data: Dict) -> Medicine:
    medicine = Medicine(id=generate_uuid(), **_clean(data))
    db.add(medicine)
    db.commit()
    db.refresh(medicine)
    logger.info("Medicine %s added with stock %d", medicine.name, medicine.stock)
    return medicine


def edit_medicine(db: Session, medicine_id: str, data: Dict) -> Medicine:
    """Direct pharmacy edit; the stock given here replaces the current count."""
    medicine = db.query(Medicine).filter(Medicine.id == medicine_id).first()
    if not medicine:
        raise NotFound("Medicine not found")
    for field, value in _clean(data).items():
        setattr(medicine, field, value)
    db.commit()
    db.refresh(medicine)
    logger.info("Medicine %s edited; stock now %d", medicine.id, medicine.stock)
    return medicine


def list_medicines(db: Session, search: Optional[str] = None) -> List[Medicine]:
    medicines = db.query(Medicine).order_by(Medicine.created_at.desc()).all()
    if not search:
        return medicines
    term = search.casefold()
    return [m for m in medicines if term in m.name.casefold() or term in m.type.casefold()]
