from functools import lru_cache

from fastapi import APIRouter, Depends

from app.models.config import get_validation_config, load_llm_settings
from app.models.schemas import LocalPrecheck, ValidateCVRequest, ValidationVerdict
from app.services.llm import build_generator
from app.services.validator import CVValidationService
from app.utils.logging_config import get_logger, log_api_call

router = APIRouter(prefix="/validation", tags=["validation"])
logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_validation_service() -> CVValidationService:
    """Single service instance built from the process config"""
    generator = build_generator(load_llm_settings())
    return CVValidationService(generator, get_validation_config())


@router.post("/validate-cv", response_model=ValidationVerdict, response_model_by_alias=True)
@log_api_call("validate-cv")
def validate_cv(payload: ValidateCVRequest, service: CVValidationService = Depends(get_validation_service)):
    """Check a candidate's form data against their resume text"""
    return service.validate(payload.form_data, payload.resume_text)


@router.post("/precheck", response_model=LocalPrecheck, response_model_by_alias=True)
@log_api_call("precheck")
def precheck_cv(payload: ValidateCVRequest, service: CVValidationService = Depends(get_validation_service)):
    """Local consistency hints; does not call the text-generation service"""
    return service.precheck(payload.form_data, payload.resume_text)


@router.get("/config")
def get_config(service: CVValidationService = Depends(get_validation_service)):
    config = service.config
    return {
        "thresholds": config.thresholds.model_dump(),
        "experience_tolerance": config.experience_tolerance,
        "fresher_threshold": config.fresher_threshold,
        "max_resume_chars": config.max_resume_chars,
        "reference_date": config.reference_date.isoformat(),
        "skill_families": sorted(config.skill_synonyms),
    }
