from typing import List

from app.models.config import ValidationMessages
from app.models.schemas import FieldAssessment, FieldAssessmentSet, FormSubmission, MismatchRecord
from app.utils.logging_config import get_logger

logger = get_logger(__name__)


def _as_text(x):
    if isinstance(x, list):
        return ", ".join(str(t) for t in x)
    return x


def _record(field_name: str, form_value, assessment: FieldAssessment, default_reason: str) -> MismatchRecord:
    return MismatchRecord(
        field_name=field_name,
        form_value=form_value,
        resume_value=_as_text(assessment.extracted_value),
        confidence=assessment.confidence,
        reason=assessment.reason or default_reason,
    )


def build_mismatch_report(
    form: FormSubmission,
    assessments: FieldAssessmentSet,
    messages: ValidationMessages = None
) -> List[MismatchRecord]:
    """
    One record per field whose raw isMatch flag is false. Phone and skills
    are only reported when the form supplied them. Confidence thresholds are
    not consulted here.
    """
    messages = messages or ValidationMessages()
    out = []

    if not assessments.name.is_match:
        out.append(_record("fullName", form.full_name, assessments.name, messages.name_mismatch))
    if not assessments.email.is_match:
        out.append(_record("email", form.email, assessments.email, messages.email_mismatch))
    if form.phone and not assessments.phone.is_match:
        out.append(_record("phone", form.phone, assessments.phone, messages.phone_mismatch))
    if not assessments.experience.is_match:
        out.append(_record("yearsExperience", form.years_experience, assessments.experience,
                           messages.experience_mismatch))
    if form.skills and not assessments.skills.is_match:
        out.append(_record("skills", ", ".join(form.skills), assessments.skills, messages.skills_mismatch))

    for r in out:
        logger.warning(f"Mismatch on {r.field_name} (confidence {r.confidence:.2f}): {r.reason}")
    return out
