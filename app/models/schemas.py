from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator
from typing import Annotated, Dict, List, Optional, Union

ExtractedValue = Union[float, str, List[str], None]
# optional leading +, no leading zero, up to 16 digits
PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"
SkillName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# -------- Form submission --------
class FormSubmission(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    full_name: str = Field(alias="fullName", min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    years_experience: float = Field(alias="yearsExperience", ge=0, le=30)
    skills: List[SkillName] = Field(default_factory=list)

    @field_validator("phone", mode="before")
    @classmethod
    def blank_phone_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("skills", mode="before")
    @classmethod
    def default_skills(cls, v):
        return [] if v is None else v


# -------- Service reply --------
class FieldAssessment(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_match: bool = Field(alias="isMatch")
    confidence: float = Field(ge=0.0, le=1.0)
    extracted_value: ExtractedValue = Field(default=None, alias="cvValue")
    reason: Optional[str] = None

    @field_validator("extracted_value", mode="before")
    @classmethod
    def stringify_list_items(cls, v):
        if isinstance(v, (list, tuple)):
            return [str(item) for item in v]
        return v

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float, str)):
            raise ValueError("confidence must be a number")
        return max(0.0, min(1.0, float(v)))


ASSESSED_FIELDS = ("name", "email", "phone", "experience", "skills")

class FieldAssessmentSet(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: FieldAssessment
    email: FieldAssessment
    phone: FieldAssessment
    experience: FieldAssessment
    skills: FieldAssessment
    overall_confidence: float = Field(alias="overallConfidence", ge=0.0, le=1.0)
    summary: str

    @field_validator("overall_confidence", mode="before")
    @classmethod
    def clamp_overall(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float, str)):
            raise ValueError("overallConfidence must be a number")
        return max(0.0, min(1.0, float(v)))

    def as_mapping(self) -> Dict[str, FieldAssessment]:
        return {f: getattr(self, f) for f in ASSESSED_FIELDS}


# -------- Verdict --------
class MismatchRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field_name: str = Field(alias="fieldName")
    form_value: Union[float, str] = Field(alias="formValue")
    resume_value: Union[float, str, None] = Field(default=None, alias="resumeValue")
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str


class FieldValidity(BaseModel):
    """Threshold-adjusted validity of each field"""
    model_config = ConfigDict(frozen=True)

    name: bool
    email: bool
    phone: bool
    experience: bool
    skills: bool
    overall_confidence_ok: bool
    is_valid: bool


class ValidationVerdict(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    mismatches: List[MismatchRecord] = Field(default_factory=list)
    confidence_score: float = Field(alias="confidenceScore", ge=0.0, le=1.0)
    summary: str


# -------- API payloads --------
class ValidateCVRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    form_data: FormSubmission = Field(alias="formData")
    resume_text: str = Field(alias="resumeText", min_length=1)


class LocalPrecheck(BaseModel):
    """Service-free consistency hints computed from the resume text"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email_found: bool = Field(alias="emailFound")
    phone_found: Optional[bool] = Field(default=None, alias="phoneFound")
    estimated_years: float = Field(alias="estimatedYears")
    fresher_stated: bool = Field(default=False, alias="fresherStated")
    experience_within_tolerance: bool = Field(alias="experienceWithinTolerance")
    skills_coverage: float = Field(alias="skillsCoverage", ge=0.0, le=1.0)
    skills_match: bool = Field(alias="skillsMatch")
