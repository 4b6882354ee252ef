"""
Deterministic verdict rules applied on top of the service's field assessments.

Only name, email and experience gate the verdict. Phone and skills validity
are computed and logged, but a failing phone or skills field never makes a
submission invalid on its own.
"""
from app.models.config import ValidationConfig
from app.models.schemas import FieldAssessment, FieldAssessmentSet, FieldValidity, FormSubmission
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

NAME_SUBSET_MIN_CONFIDENCE = 0.7


class DecisionEngine:

    def __init__(self, config: ValidationConfig = None):
        self.config = config or ValidationConfig()

    @staticmethod
    def is_name_subset(submitted: str, extracted, confidence: float) -> bool:
        """
        True when every token of one name appears in the other (either
        direction) and the reported confidence is at least 0.7.
        """
        if not submitted or not extracted or not isinstance(extracted, str):
            return False
        submitted_parts = submitted.lower().split()
        extracted_parts = extracted.lower().split()
        if not submitted_parts or not extracted_parts:
            return False
        submitted_in_extracted = all(p in extracted_parts for p in submitted_parts)
        extracted_in_submitted = all(p in submitted_parts for p in extracted_parts)
        return (submitted_in_extracted or extracted_in_submitted) and confidence >= NAME_SUBSET_MIN_CONFIDENCE

    def experience_within_tolerance(self, form_years: float, resume_years: float) -> bool:
        fresher = self.config.fresher_threshold
        if form_years <= fresher and resume_years <= fresher:
            return True
        return abs(form_years - resume_years) <= self.config.experience_tolerance

    def _gated(self, assessment: FieldAssessment, threshold: float) -> bool:
        return assessment.is_match and assessment.confidence >= threshold

    def evaluate(self, form: FormSubmission, assessments: FieldAssessmentSet) -> FieldValidity:
        t = self.config.thresholds
        name = assessments.name

        name_valid = (
            name.is_match or self.is_name_subset(form.full_name, name.extracted_value, name.confidence)
        ) and name.confidence >= t.name
        email_valid = self._gated(assessments.email, t.email)
        # phone is optional, a reported non-match is tolerated
        phone_valid = (not assessments.phone.is_match) or assessments.phone.confidence >= t.phone
        experience_valid = self._gated(assessments.experience, t.experience)
        skills_valid = self._gated(assessments.skills, t.skills)
        overall_ok = assessments.overall_confidence >= t.overall

        validity = FieldValidity(
            name=name_valid,
            email=email_valid,
            phone=phone_valid,
            experience=experience_valid,
            skills=skills_valid,
            overall_confidence_ok=overall_ok,
            is_valid=name_valid and email_valid and experience_valid and overall_ok,
        )
        logger.info(
            f"Field validity - name: {name_valid}, email: {email_valid}, phone: {phone_valid}, "
            f"experience: {experience_valid}, skills: {skills_valid}, "
            f"overall {assessments.overall_confidence:.2f} >= {t.overall}: {overall_ok}"
        )
        return validity

    def is_valid(self, form: FormSubmission, assessments: FieldAssessmentSet) -> bool:
        return self.evaluate(form, assessments).is_valid
