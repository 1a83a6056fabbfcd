"""
Medicine stock reconciliation.

Visit records carry prescribed medications; creating, editing or deleting a
visit moves the prescribed quantities out of or back into pharmacy stock.
Each operation is reduced to one net delta per medicine id, and the deltas
are applied in a single pass inside the caller's transaction, so no reader
ever sees a half-reversed edit.

The store trusts its caller: sufficiency of stock is checked before the
visit is submitted (see ``services.validators``), never here, and a negative
result is applied as is.
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from ..models.treatment import Medicine

logger = logging.getLogger(__name__)


def prescription_totals(prescriptions: Optional[Iterable[Mapping]]) -> Dict[str, int]:
    """Sum quantities per medicine id; repeated entries add up."""
    totals: Dict[str, int] = defaultdict(int)
    for pm in prescriptions or ():
        totals[pm["medicine_id"]] += int(pm["quantity"])
    return dict(totals)


def deltas_for_create(prescriptions) -> Dict[str, int]:
    return {mid: -qty for mid, qty in prescription_totals(prescriptions).items()}


def deltas_for_delete(prescriptions) -> Dict[str, int]:
    return prescription_totals(prescriptions)


def deltas_for_edit(original, edited) -> Dict[str, int]:
    """
    Net stock change when a visit's prescriptions go from ``original`` to
    ``edited``: give back what was held, take what is now prescribed.
    Covers the union of medicine ids; a missing entry counts as zero.
    """
    held = prescription_totals(original)
    taken = prescription_totals(edited)
    return {mid: held.get(mid, 0) - taken.get(mid, 0) for mid in set(held) | set(taken)}


def apply_stock_deltas(db: Session, deltas: Mapping[str, int]) -> Dict[str, int]:
    """
    Add each delta to its medicine's stock. Does not commit.
    Returns the resulting stock per touched medicine id.
    """
    changed = {mid: delta for mid, delta in deltas.items() if delta}
    if not changed:
        return {}

    medicines = db.query(Medicine).filter(Medicine.id.in_(list(changed))).all()
    found = {m.id: m for m in medicines}
    for missing in set(changed) - set(found):
        logger.warning("Stock adjustment skipped: medicine %s no longer exists", missing)

    result = {}
    for mid, medicine in found.items():
        medicine.stock = medicine.stock + changed[mid]
        result[mid] = medicine.stock
        logger.info("Stock of %s (%s) adjusted by %+d to %d", medicine.name, mid, changed[mid], medicine.stock)
    return result
