"""
Fire-equipment inventory and its configurable equipment types.

A type cannot be deleted while equipment references it; the caller gets an
``InUse`` error instead.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import InUse, NotFound
from ..models.base import generate_uuid
from ..models.fire import EquipmentStatus, FireEquipment, FireEquipmentType
from .validators import require_choice, require_text

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "unknown"


def get_equipment_type(db: Session, type_id: str) -> FireEquipmentType:
    equipment_type = db.query(FireEquipmentType).filter(FireEquipmentType.id == type_id).first()
    if not equipment_type:
        raise NotFound("Equipment type not found")
    return equipment_type


def add_equipment_type(db: Session, name: str) -> FireEquipmentType:
    equipment_type = FireEquipmentType(
        id=generate_uuid(), name=require_text(name, "Equipment type name cannot be empty.")
    )
    db.add(equipment_type)
    db.commit()
    db.refresh(equipment_type)
    logger.info("Equipment type '%s' added", equipment_type.name)
    return equipment_type


def edit_equipment_type(db: Session, type_id: str, name: str) -> FireEquipmentType:
    equipment_type = get_equipment_type(db, type_id)
    equipment_type.name = require_text(name, "Equipment type name cannot be empty.")
    db.commit()
    db.refresh(equipment_type)
    return equipment_type


def delete_equipment_type(db: Session, type_id: str) -> None:
    equipment_type = get_equipment_type(db, type_id)
    in_use = db.query(FireEquipment).filter(FireEquipment.type_id == type_id).count()
    if in_use:
        raise InUse(f"Cannot delete '{equipment_type.name}' because it is in use.")
    db.delete(equipment_type)
    db.commit()
    logger.info("Equipment type %s deleted", type_id)


def list_equipment_types(db: Session) -> List[FireEquipmentType]:
    return db.query(FireEquipmentType).order_by(FireEquipmentType.created_at).all()


def get_equipment(db: Session, equipment_id: str) -> FireEquipment:
    equipment = db.query(FireEquipment).filter(FireEquipment.id == equipment_id).first()
    if not equipment:
        raise NotFound("Equipment not found")
    return equipment


def _clean(db: Session, data: Dict) -> Dict:
    get_equipment_type(db, data["type_id"])
    require_choice(data.get("status", EquipmentStatus.OPERATIONAL), EquipmentStatus.ALL, "status")
    return {**data, "tag": require_text(data.get("tag"), "Equipment tag is required.")}


def add_equipment(db: Session, data: Dict) -> FireEquipment:
    equipment = FireEquipment(id=generate_uuid(), **_clean(db, data))
    db.add(equipment)
    db.commit()
    db.refresh(equipment)
    logger.info("Equipment %s registered at %s", equipment.tag, equipment.location)
    return equipment


def edit_equipment(db: Session, equipment_id: str, data: Dict) -> FireEquipment:
    equipment = get_equipment(db, equipment_id)
    for field, value in _clean(db, data).items():
        setattr(equipment, field, value)
    db.commit()
    db.refresh(equipment)
    return equipment


def delete_equipment(db: Session, equipment_id: str) -> None:
    equipment = get_equipment(db, equipment_id)
    db.delete(equipment)
    db.commit()
    logger.info("Equipment %s deleted", equipment.tag)


def type_name(equipment: FireEquipment) -> str:
    return equipment.equipment_type.name if equipment.equipment_type else UNKNOWN_TYPE


def list_equipment(db: Session, search: Optional[str] = None) -> List[FireEquipment]:
    """All equipment; search matches tag, location or type name."""
    equipment = db.query(FireEquipment).order_by(FireEquipment.created_at).all()
    if not search:
        return equipment
    term = search.lower()
    return [
        eq for eq in equipment
        if term in eq.tag.lower() or term in eq.location.lower() or term in type_name(eq).lower()
    ]
