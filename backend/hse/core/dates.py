"""
Jalali (Persian solar calendar) dates.

Every domain date is kept as fixed-width ``YYYY/MM/DD`` text. ``JalaliDate``
is the structured form used for validation and ordering; its ordering agrees
with string comparison of the zero-padded text. Only segment ranges are
checked (month 1-12, day 1-31), not month lengths.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Annotated, Optional

from pydantic import AfterValidator

_DATE_RE = re.compile(r"^\s*(\d{1,4})/(\d{1,2})/(\d{1,2})\s*$")
_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")

# Days in each Jalali month of a common year
_JALALI_MONTH_DAYS = (31, 31, 31, 31, 31, 31, 30, 30, 30, 30, 30, 29)


@dataclass(frozen=True, order=True)
class JalaliDate:
    year: int
    month: int
    day: int

    def __post_init__(self):
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Year out of range: {self.year}")
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        if not 1 <= self.day <= 31:
            raise ValueError(f"Day out of range: {self.day}")

    @classmethod
    def parse(cls, text: str) -> "JalaliDate":
        match = _DATE_RE.match(text or "")
        if not match:
            raise ValueError(f"Date must be in YYYY/MM/DD format: {text!r}")
        year, month, day = (int(part) for part in match.groups())
        return cls(year, month, day)

    @classmethod
    def from_gregorian(cls, value: date) -> "JalaliDate":
        year, month, day = gregorian_to_jalali(value.year, value.month, value.day)
        return cls(year, month, day)

    def __str__(self) -> str:
        return f"{self.year:04d}/{self.month:02d}/{self.day:02d}"


def parse_or_none(text: Optional[str]) -> Optional[JalaliDate]:
    """Lenient parse for stored values that may predate validation."""
    if not text:
        return None
    try:
        return JalaliDate.parse(text)
    except ValueError:
        return None


def normalize(text: str) -> str:
    """Parse and re-format, zero-padding month and day."""
    return str(JalaliDate.parse(text))


def normalize_time(text: str) -> str:
    match = _TIME_RE.match((text or "").strip())
    if not match:
        raise ValueError(f"Time must be in HH:MM format: {text!r}")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def clamp_date_input(text: str) -> str:
    """
    Clamp partially typed date text the way the date inputs do while typing.

    Non-digit characters other than ``/`` are dropped, the year is capped at
    four digits and month/day at two. A completed ``00`` segment becomes
    ``01``, a month above 12 becomes ``12`` and a day above 31 becomes ``31``.
    """
    value = re.sub(r"[^\d/]", "", text or "")
    parts = value.split("/")
    if parts[0]:
        parts[0] = parts[0][:4]
    for index, upper in ((1, 12), (2, 31)):
        if len(parts) > index and parts[index]:
            segment = parts[index][:2]
            if len(segment) == 2 and int(segment) == 0:
                segment = "01"
            if int(segment) > upper:
                segment = str(upper)
            parts[index] = segment
    return "/".join(parts[:3])


def gregorian_to_jalali(gy: int, gm: int, gd: int):
    """Convert a Gregorian date to a Jalali ``(year, month, day)`` tuple."""
    g_days_in_month = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)
    gy2 = gy + 1 if gm > 2 else gy
    days = (
        355666
        + 365 * gy
        + (gy2 + 3) // 4
        - (gy2 + 99) // 100
        + (gy2 + 399) // 400
        + gd
        + g_days_in_month[gm - 1]
    )
    jy = -1595 + 33 * (days // 12053)
    days %= 12053
    jy += 4 * (days // 1461)
    days %= 1461
    if days > 365:
        jy += (days - 1) // 365
        days = (days - 1) % 365
    if days < 186:
        jm = 1 + days // 31
        jd = 1 + days % 31
    else:
        jm = 7 + (days - 186) // 30
        jd = 1 + (days - 186) % 30
    return jy, jm, jd


def today_jalali() -> JalaliDate:
    return JalaliDate.from_gregorian(date.today())


def add_years(value: JalaliDate, years: int) -> JalaliDate:
    """Same month and day ``years`` later; Esfand 30 falls back to 29."""
    day = value.day
    if value.month == 12 and day > _JALALI_MONTH_DAYS[11]:
        day = _JALALI_MONTH_DAYS[11]
    return JalaliDate(value.year + years, value.month, day)


# Request-schema field types: accept loose input, store the canonical form
JalaliDateStr = Annotated[str, AfterValidator(normalize)]
TimeStr = Annotated[str, AfterValidator(normalize_time)]
