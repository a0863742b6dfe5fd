from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Address(_Frozen):
    full_text: Optional[str] = None
    subdistrict: Optional[str] = None
    district: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None

    @property
    def locality(self) -> str:
        """Subdistrict, district, province and postal code on one line."""
        parts = [p for p in (self.subdistrict, self.district, self.province) if p]
        line = ", ".join(parts)
        if self.postal_code:
            line = f"{line} {self.postal_code}".strip()
        return line


class PersonalInfo(_Frozen):
    full_name_local: str
    full_name_latin: Optional[str] = None
    gender: str
    birth_date: str
    age: int
    nationality: str
    ethnicity: str
    religion: str
    national_id: str = Field(pattern=r"^[0-9]{13}$")
    phone: str
    messaging_id: str
    email: str
    address: Address = Address()


class EducationEntry(_Frozen):
    school_name: Optional[str] = None
    major: Optional[str] = None
    graduation_year: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.school_name


class Education(_Frozen):
    secondary: EducationEntry = EducationEntry()
    vocational: EducationEntry = EducationEntry()
    bachelor: EducationEntry = EducationEntry()
    other: EducationEntry = EducationEntry()
    education_used: str


class WorkExperience(_Frozen):
    company: str
    position: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    reason_for_leaving: Optional[str] = None


class AdditionalInfo(_Frozen):
    has_medical_condition: Optional[str] = None
    medical_detail: Optional[str] = None
    has_criminal_record: Optional[str] = None
    criminal_detail: Optional[str] = None
    special_skills: Optional[str] = None
    expected_salary: Optional[str] = None
    available_start_date: Optional[str] = None
    motivation_statement: Optional[str] = None


class Application(_Frozen):
    id: str
    position: str = Field(min_length=1)
    personal_info: PersonalInfo
    education: Education
    work_experience: List[WorkExperience] = Field(default_factory=list, max_length=3)
    additional_info: AdditionalInfo = AdditionalInfo()
    submitted_at: datetime
    status: str = "pending"


class ApplicationAccepted(BaseModel):
    success: bool = True
    message: str
    application_id: str


class ApplicationRejected(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    fields: Optional[List[str]] = None


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
