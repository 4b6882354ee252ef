"""
CV validation pipeline: one prompt, one service round trip, deterministic verdict.
"""
from app.helpers.parsing import (
    clean_text, digits_only, estimate_experience_years, extract_emails, extract_phones, mentions_term,
    parse_validation_response,
)
from app.helpers.prompts import PromptBuilder
from app.models.config import ValidationConfig
from app.models.schemas import FormSubmission, LocalPrecheck, ValidationVerdict
from app.services.decision import DecisionEngine
from app.services.duration_parser import DurationParser, is_fresher_phrase
from app.services.llm import TextGenerator
from app.services.mismatch import build_mismatch_report
from app.services.skill_matcher import SkillMatcher
from app.utils.exceptions import CVValidatorBaseException, ServiceCallFailure, ValidationError
from app.utils.logging_config import PerformanceMonitor, get_logger

logger = get_logger(__name__)


class CVValidationService:
    """
    Validates a form submission against resume text.

    The generator is called exactly once per ``validate`` call. Errors are
    never retried here and no partial verdict is ever returned.
    """

    def __init__(
        self,
        generator: TextGenerator,
        config: ValidationConfig = None,
        prompt_builder: PromptBuilder = None,
    ):
        self.generator = generator
        self.config = config or ValidationConfig()
        self.prompt_builder = prompt_builder or PromptBuilder(self.config)
        self.engine = DecisionEngine(self.config)
        self.skill_matcher = SkillMatcher(self.config.skill_synonyms)
        self.duration_parser = DurationParser.from_date(self.config.reference_date)

    def _check_resume_text(self, resume_text: str) -> str:
        if not resume_text or not resume_text.strip():
            raise ValidationError("Resume text is required", field="resumeText")
        if len(resume_text) > self.config.max_resume_chars:
            raise ValidationError(
                f"Resume text exceeds {self.config.max_resume_chars} characters",
                field="resumeText",
                value=len(resume_text),
            )
        return resume_text

    def _call_service(self, prompt: str) -> str:
        try:
            with PerformanceMonitor("text generation", logger=logger, threshold_ms=15000):
                return self.generator.generate(prompt)
        except CVValidatorBaseException:
            raise
        except Exception as e:
            raise ServiceCallFailure(f"Text generation failed: {e}", cause=e) from e

    def validate(self, form: FormSubmission, resume_text: str) -> ValidationVerdict:
        resume_text = self._check_resume_text(resume_text)
        logger.info(f"Validating CV ({len(resume_text)} chars, {len(form.skills)} skills)")

        prompt = self.prompt_builder.build(form, resume_text)
        raw = self._call_service(prompt)
        logger.debug(f"Raw service reply: {raw[:500]}")

        assessments = parse_validation_response(raw)
        validity = self.engine.evaluate(form, assessments)
        mismatches = build_mismatch_report(form, assessments, self.config.messages)

        verdict = ValidationVerdict(
            is_valid=validity.is_valid,
            mismatches=mismatches,
            confidence_score=assessments.overall_confidence,
            summary=assessments.summary,
        )
        logger.info(
            f"Validation finished - valid: {verdict.is_valid}, confidence: {verdict.confidence_score:.2f}, "
            f"mismatches: {[m.field_name for m in mismatches]}"
        )
        return verdict

    def precheck(self, form: FormSubmission, resume_text: str) -> LocalPrecheck:
        """Cheap consistency hints from the resume text alone; never calls the service."""
        text = clean_text(self._check_resume_text(resume_text))

        email_found = form.email.lower().strip() in extract_emails(text)
        phone_found = None
        if form.phone:
            wanted = digits_only(form.phone)
            phone_found = bool(wanted) and any(p.endswith(wanted) or wanted.endswith(p)
                                               for p in extract_phones(text))

        years = estimate_experience_years(text, self.duration_parser)
        fresher_stated = is_fresher_phrase(text)
        within_tolerance = self.engine.experience_within_tolerance(form.years_experience, years)
        # internships on a self-described fresher resume do not count against a 0-year claim
        if fresher_stated and form.years_experience <= self.config.fresher_threshold:
            within_tolerance = True
        resume_skills = [s for s in form.skills if mentions_term(text, self.skill_matcher.normalize(s))]
        for canonical, aliases in self.skill_matcher.synonyms.items():
            resume_skills.extend(t for t in (canonical, *aliases) if mentions_term(text, t))

        return LocalPrecheck(
            email_found=email_found,
            phone_found=phone_found,
            estimated_years=years,
            fresher_stated=fresher_stated,
            experience_within_tolerance=within_tolerance,
            skills_coverage=self.skill_matcher.coverage(form.skills, resume_skills),
            skills_match=self.skill_matcher.skills_match(form.skills, resume_skills),
        )
