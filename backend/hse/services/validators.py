"""
Pre-submission checks shared by the routers.

These are the form rules of the dashboard: they run before a mutation is
handed to the store, which itself accepts whatever it is given.
"""
from typing import Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ValidationFailed
from ..models.treatment import Medicine
from .stock import prescription_totals


def require_text(value: Optional[str], message: str) -> str:
    """Return ``value`` stripped, or fail with ``message`` when blank."""
    if value is None or not str(value).strip():
        raise ValidationFailed(message)
    return str(value).strip()


def merge_prescriptions(prescriptions: Optional[Iterable[Mapping]]) -> List[Dict]:
    """
    Validate prescription lines and merge repeats of the same medicine,
    keeping first-seen order.
    """
    merged: Dict[str, int] = {}
    for pm in prescriptions or ():
        medicine_id = pm.get("medicine_id")
        quantity = pm.get("quantity")
        if not medicine_id or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationFailed("Invalid medicine information.")
        merged[medicine_id] = merged.get(medicine_id, 0) + quantity
    return [{"medicine_id": mid, "quantity": qty} for mid, qty in merged.items()]


def check_stock_available(
    db: Session,
    prescriptions: Iterable[Mapping],
    held: Optional[Iterable[Mapping]] = None,
) -> None:
    """
    Every prescribed medicine must exist and have enough stock. When editing,
    ``held`` is the visit's current prescription list: those quantities come
    back to stock before the new ones are taken.
    """
    wanted = prescription_totals(prescriptions)
    if not wanted:
        return
    held_totals = prescription_totals(held)
    medicines = {
        m.id: m for m in db.query(Medicine).filter(Medicine.id.in_(list(wanted))).all()
    }
    for medicine_id, quantity in wanted.items():
        medicine = medicines.get(medicine_id)
        if medicine is None:
            raise ValidationFailed("Invalid medicine information.")
        available = medicine.stock + held_totals.get(medicine_id, 0)
        if available < quantity:
            raise ValidationFailed(f"Insufficient stock for '{medicine.name}'.")


def require_choice(value: Optional[str], choices: List[str], label: str) -> str:
    if value not in choices:
        raise ValidationFailed(f"Invalid {label}. Choose from: {choices}")
    return value
