"""
Form intake. Turns raw submitted form values into a validated Application.

Checks run in a fixed order (required fields, national ID, email, age, photo)
and the first failure wins. Nothing downstream ever sees a loose dict.
"""

import logging
import re
import time
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Mapping, Optional

from app.core.errors import ValidationError, ValidationErrorKind
from app.schemas.application import (
    AdditionalInfo,
    Address,
    Application,
    Education,
    EducationEntry,
    PersonalInfo,
    WorkExperience,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = [
    "position", "fullname_th", "gender", "birthdate", "nationality",
    "ethnicity", "religion", "id_card", "phone", "line_id", "email",
    "education_used",
]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NATIONAL_ID_LENGTH = 13
MAX_WORK_SLOTS = 3

# Human-facing messages (Thai, as shown to applicants)
MESSAGES = {
    ValidationErrorKind.MISSING_REQUIRED_FIELDS: "กรุณากรอกข้อมูลที่จำเป็นให้ครบถ้วน",
    ValidationErrorKind.INVALID_NATIONAL_ID: "หมายเลขบัตรประชาชนต้องเป็นตัวเลข 13 หลัก",
    ValidationErrorKind.INVALID_EMAIL: "รูปแบบอีเมลไม่ถูกต้อง",
    ValidationErrorKind.INVALID_AGE: "กรุณาระบุอายุเป็นตัวเลข",
    ValidationErrorKind.MISSING_PHOTO: "กรุณาแนบรูปถ่ายหน้าตรง",
}

# form prefix -> Education slot
EDUCATION_SLOTS = {
    "secondary": ("edu_high_school", "edu_high_major", "edu_high_year"),
    "vocational": ("edu_vocational", "edu_vocational_major", "edu_vocational_year"),
    "bachelor": ("edu_bachelor", "edu_bachelor_major", "edu_bachelor_year"),
    "other": ("edu_other", "edu_other_major", "edu_other_year"),
}


@dataclass(frozen=True)
class IntakeResult:
    """Either an accepted Application or the ValidationError that rejected it."""
    application: Optional[Application] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.application is not None

    @classmethod
    def accepted(cls, application: Application) -> "IntakeResult":
        return cls(application=application)

    @classmethod
    def rejected(cls, kind: ValidationErrorKind, fields=None) -> "IntakeResult":
        return cls(error=ValidationError(kind, MESSAGES[kind], fields))


def _clean(value) -> Optional[str]:
    """Strip form values; treat blank strings as absent."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_national_id(raw: str) -> Optional[str]:
    """Strip every non-digit; return the 13-digit ID or None if the length is wrong."""
    digits = "".join(ch for ch in raw if ch in "0123456789")
    if len(digits) != NATIONAL_ID_LENGTH:
        return None
    return digits


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def derive_age(birth_date: str, today: Optional[date] = None) -> Optional[int]:
    """Compute age in whole years from an ISO date (YYYY-MM-DD). None if unparseable."""
    try:
        born = date.fromisoformat(birth_date)
    except ValueError:
        return None
    today = today or date.today()
    # Thai forms often carry Buddhist-era years
    year = born.year - 543 if born.year > today.year + 100 else born.year
    age = today.year - year - ((today.month, today.day) < (born.month, born.day))
    return age if age >= 0 else None


def generate_application_id() -> str:
    return f"APP{int(time.time() * 1000)}"


def _resolve_age(raw_age: Optional[str], birth_date: str) -> Optional[int]:
    if raw_age is None:
        return derive_age(birth_date)
    try:
        age = int(raw_age)
    except ValueError:
        return None
    return age if age >= 0 else None


def _compact_work_experience(form: Mapping[str, str]):
    entries = []
    for slot in range(1, MAX_WORK_SLOTS + 1):
        company = _clean(form.get(f"work{slot}_company"))
        if not company:
            continue
        entries.append(WorkExperience(
            company=company,
            position=_clean(form.get(f"work{slot}_position")),
            start_date=_clean(form.get(f"work{slot}_start")),
            end_date=_clean(form.get(f"work{slot}_end")),
            reason_for_leaving=_clean(form.get(f"work{slot}_reason")),
        ))
    return entries


def parse_application(
    form: Mapping[str, str],
    has_photo: bool,
    application_id: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
) -> IntakeResult:
    """Validate raw form fields and build an Application."""
    values = {key: _clean(form.get(key)) for key in form.keys()}

    missing = [name for name in REQUIRED_FIELDS if not values.get(name)]
    if not values.get("age") and values.get("birthdate"):
        # age may be derived from the birth date instead
        if derive_age(values["birthdate"]) is None:
            missing.append("age")
    if missing:
        logger.info(f"Rejected application: missing fields {missing}")
        return IntakeResult.rejected(ValidationErrorKind.MISSING_REQUIRED_FIELDS, missing)

    national_id = normalize_national_id(values["id_card"])
    if national_id is None:
        logger.info("Rejected application: malformed national ID")
        return IntakeResult.rejected(ValidationErrorKind.INVALID_NATIONAL_ID)

    if not is_valid_email(values["email"]):
        logger.info("Rejected application: malformed email")
        return IntakeResult.rejected(ValidationErrorKind.INVALID_EMAIL)

    age = _resolve_age(values.get("age"), values["birthdate"])
    if age is None:
        logger.info(f"Rejected application: bad age {values.get('age')!r}")
        return IntakeResult.rejected(ValidationErrorKind.INVALID_AGE)

    if not has_photo:
        logger.info("Rejected application: no photo attached")
        return IntakeResult.rejected(ValidationErrorKind.MISSING_PHOTO)

    education = Education(
        education_used=values["education_used"],
        **{
            slot: EducationEntry(
                school_name=values.get(school),
                major=values.get(major),
                graduation_year=values.get(year),
            )
            for slot, (school, major, year) in EDUCATION_SLOTS.items()
        },
    )

    application = Application(
        id=application_id or generate_application_id(),
        position=values["position"],
        personal_info=PersonalInfo(
            full_name_local=values["fullname_th"],
            full_name_latin=values.get("fullname_en"),
            gender=values["gender"],
            birth_date=values["birthdate"],
            age=age,
            nationality=values["nationality"],
            ethnicity=values["ethnicity"],
            religion=values["religion"],
            national_id=national_id,
            phone=values["phone"],
            messaging_id=values["line_id"],
            email=values["email"],
            address=Address(
                full_text=values.get("address"),
                subdistrict=values.get("subdistrict"),
                district=values.get("district"),
                province=values.get("province"),
                postal_code=values.get("zipcode"),
            ),
        ),
        education=education,
        work_experience=_compact_work_experience(form),
        additional_info=AdditionalInfo(
            has_medical_condition=values.get("has_disease"),
            medical_detail=values.get("disease_detail"),
            has_criminal_record=values.get("has_criminal_record"),
            criminal_detail=values.get("criminal_detail"),
            special_skills=values.get("special_skills"),
            expected_salary=values.get("expected_salary"),
            available_start_date=values.get("start_date"),
            motivation_statement=values.get("motivation"),
        ),
        submitted_at=submitted_at or datetime.now(timezone.utc),
    )
    return IntakeResult.accepted(application)
