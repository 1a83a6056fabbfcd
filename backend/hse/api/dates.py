"""Jalali date helpers backing the dashboard's date inputs."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..core.dates import clamp_date_input, today_jalali
from ..core.security import get_current_user

router = APIRouter(prefix="/dates", tags=["dates"])


class DateText(BaseModel):
    value: str


@router.get("/today", response_model=DateText)
def today(_user=Depends(get_current_user)):
    return DateText(value=str(today_jalali()))


@router.get("/clamp", response_model=DateText)
def clamp(value: str = "", _user=Depends(get_current_user)):
    """Clamp partially typed date text, e.g. ``1402/13/45`` -> ``1402/12/31``."""
    return DateText(value=clamp_date_input(value))
