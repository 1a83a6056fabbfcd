from sqlalchemy import Column, String, JSON
from .base import Base, TimestampMixin, generate_uuid


class UserRole:
    ADMIN = "admin"
    OCCUPATIONAL_MEDICINE = "occupationalMedicine"
    TREATMENT = "treatment"
    SAFETY = "safety"
    FIRE_DEPARTMENT = "fireDepartment"
    ENVIRONMENT = "environment"

    ALL = [ADMIN, OCCUPATIONAL_MEDICINE, TREATMENT, SAFETY, FIRE_DEPARTMENT, ENVIRONMENT]


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    username = Column(String(100), unique=True, nullable=False, index=True)
    # Plaintext, compared verbatim at login
    password = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=list)
