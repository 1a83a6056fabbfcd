from sqlalchemy import Column, String, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, generate_uuid


class IncidentParty:
    COMPLEX = "complex"
    CONTRACTOR = "contractor"

    ALL = [COMPLEX, CONTRACTOR]


class IncidentSeverity:
    MINOR = "minor"
    MODERATE = "moderate"
    SERIOUS = "serious"
    FATAL = "fatal"

    ALL = [MINOR, MODERATE, SERIOUS, FATAL]


class IncidentStatus:
    OPEN = "open"
    INVESTIGATING = "investigating"
    CLOSED = "closed"

    ALL = [OPEN, INVESTIGATING, CLOSED]


class SubmissionStatus:
    PASS = "pass"
    FAIL = "fail"
    NA = "na"

    ALL = [PASS, FAIL, NA]


class Incident(Base, TimestampMixin):
    """Incident log entry. Append-only."""
    __tablename__ = "incidents"

    id = Column(String, primary_key=True, default=generate_uuid)
    date = Column(String(10), nullable=False)  # Jalali YYYY/MM/DD
    time = Column(String(5), nullable=False)   # HH:MM
    location = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    party = Column(String(20), nullable=False, default=IncidentParty.COMPLEX)
    contractor_name = Column(String(200), nullable=True)
    severity = Column(String(20), nullable=False, default=IncidentSeverity.MINOR)
    corrective_actions = Column(Text, nullable=False, default="")
    status = Column(String(20), nullable=False, default=IncidentStatus.OPEN)


class ChecklistCategory(Base, TimestampMixin):
    __tablename__ = "checklist_categories"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False)

    checklists = relationship(
        "Checklist",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="Checklist.created_at",
    )


class Checklist(Base, TimestampMixin):
    __tablename__ = "checklists"

    id = Column(String, primary_key=True, default=generate_uuid)
    category_id = Column(String, ForeignKey("checklist_categories.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    # [{"id": str, "text": str}, ...]; ids survive edits so submissions stay resolvable
    items = Column(JSON, nullable=False, default=list)

    category = relationship("ChecklistCategory", back_populates="checklists")


class ChecklistSubmission(Base, TimestampMixin):
    """A performed checklist. Append-only; outlives its checklist."""
    __tablename__ = "checklist_submissions"

    id = Column(String, primary_key=True, default=generate_uuid)
    # No foreign key: deleting a checklist leaves its submissions in place
    checklist_id = Column(String, nullable=False, index=True)
    date = Column(String(16), nullable=False)  # Jalali YYYY/MM/DD HH:MM
    location = Column(String(200), nullable=False, default="")
    performed_by = Column(String(200), nullable=False, default="")
    # [{"item_id": str, "status": "pass"|"fail"|"na", "comment": str}, ...]
    items = Column(JSON, nullable=False, default=list)
