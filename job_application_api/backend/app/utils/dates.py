# File: backend/app/utils/dates.py
from datetime import datetime, timedelta, timezone

THAI_MONTHS = [
    "มกราคม", "กุมภาพันธ์", "มีนาคม", "เมษายน", "พฤษภาคม", "มิถุนายน",
    "กรกฎาคม", "สิงหาคม", "กันยายน", "ตุลาคม", "พฤศจิกายน", "ธันวาคม",
]

BUDDHIST_ERA_OFFSET = 543
BANGKOK = timezone(timedelta(hours=7))


def format_thai_date(moment: datetime) -> str:
    """Long Thai date in the Buddhist era, e.g. '17 ตุลาคม 2569'."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(BANGKOK)
    return f"{moment.day} {THAI_MONTHS[moment.month - 1]} {moment.year + BUDDHIST_ERA_OFFSET}"
