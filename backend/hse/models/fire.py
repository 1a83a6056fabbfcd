from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, generate_uuid


class EquipmentStatus:
    OPERATIONAL = "operational"
    NEEDS_SERVICE = "needs_service"
    OUT_OF_SERVICE = "out_of_service"

    ALL = [OPERATIONAL, NEEDS_SERVICE, OUT_OF_SERVICE]


class FireEquipmentType(Base, TimestampMixin):
    __tablename__ = "fire_equipment_types"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)

    # No cascade: a type in use cannot be deleted
    equipment = relationship("FireEquipment", back_populates="equipment_type")


class FireEquipment(Base, TimestampMixin):
    __tablename__ = "fire_equipment"

    id = Column(String, primary_key=True, default=generate_uuid)
    tag = Column(String(50), nullable=False, index=True)  # e.g. EXT-A1-01
    type_id = Column(String, ForeignKey("fire_equipment_types.id"), nullable=False, index=True)
    location = Column(String(200), nullable=False, default="")
    install_date = Column(String(10), nullable=True)          # Jalali YYYY/MM/DD
    last_inspection_date = Column(String(10), nullable=True)  # Jalali YYYY/MM/DD
    next_inspection_date = Column(String(10), nullable=True)  # Jalali YYYY/MM/DD
    status = Column(String(20), nullable=False, default=EquipmentStatus.OPERATIONAL)

    equipment_type = relationship("FireEquipmentType", back_populates="equipment")
