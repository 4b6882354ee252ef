"""
Validation and LLM Settings Models
"""
import os
from datetime import date
from functools import lru_cache
from typing import Dict, FrozenSet, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.utils.exceptions import ConfigurationError
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_SKILL_SYNONYMS: Dict[str, FrozenSet[str]] = {
    "react": frozenset({"reactjs", "react.js", "react js"}),
    "javascript": frozenset({"js", "ecmascript", "es6"}),
    "typescript": frozenset({"ts"}),
    "node.js": frozenset({"nodejs", "node"}),
    "python": frozenset({"py", "python3", "python 3"}),
    "java": frozenset({"java 8", "java 11", "java 17"}),
    "sql": frozenset({"mysql", "postgresql", "postgres", "database"}),
    "aws": frozenset({"amazon web services", "amazon aws"}),
    "docker": frozenset({"containerization", "containers"}),
    "kubernetes": frozenset({"k8s", "kube", "container orchestration"}),
}


class ConfidenceThresholds(BaseModel):
    """Per-field and overall confidence thresholds"""
    model_config = ConfigDict(frozen=True)

    name: float = Field(default=0.8, ge=0.0, le=1.0)
    email: float = Field(default=0.9, ge=0.0, le=1.0)
    phone: float = Field(default=0.85, ge=0.0, le=1.0)
    experience: float = Field(default=0.7, ge=0.0, le=1.0)
    skills: float = Field(default=0.6, ge=0.0, le=1.0)
    overall: float = Field(default=0.7, ge=0.0, le=1.0)


class ValidationMessages(BaseModel):
    """Fallback mismatch reasons used when the service gives none"""
    model_config = ConfigDict(frozen=True)

    name_mismatch: str = "Name in form does not match CV"
    email_mismatch: str = "Email in form does not match CV"
    phone_mismatch: str = "Phone number in form does not match CV"
    experience_mismatch: str = "Years of experience in form does not match CV"
    skills_mismatch: str = "Skills in form do not match CV"


class ValidationConfig(BaseModel):
    """Process-wide, read-only validation settings"""
    model_config = ConfigDict(frozen=True)

    thresholds: ConfidenceThresholds = Field(default_factory=ConfidenceThresholds)
    experience_tolerance: float = Field(default=0.5, ge=0.0, description="Allowed years of difference")
    fresher_threshold: float = Field(default=0.1, ge=0.0, description="At or below this many years is a fresher")
    max_resume_chars: int = Field(default=100_000, gt=0, description="Largest accepted resume text")
    skill_synonyms: Dict[str, FrozenSet[str]] = Field(default_factory=lambda: dict(DEFAULT_SKILL_SYNONYMS))
    reference_date: date = Field(default_factory=date.today, description="'Now' for open-ended date ranges")
    messages: ValidationMessages = Field(default_factory=ValidationMessages)

    @field_validator("skill_synonyms")
    @classmethod
    def normalize_synonyms(cls, v):
        normalized = {}
        for canonical, aliases in v.items():
            key = canonical.lower().strip()
            if not key:
                raise ValueError("Canonical skill names must be non-empty")
            normalized[key] = frozenset(a.lower().strip() for a in aliases if a.strip())
        return normalized


class LLMSettings(BaseModel):
    """Text-generation provider settings"""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    provider: str = Field(default="openai", description="openai or ollama")
    model_name: str = Field(default="gpt-4", description="LLM model name")
    base_url: Optional[str] = Field(default=None, description="Provider base URL")
    api_key: Optional[str] = Field(default=None, repr=False)
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Generation temperature")
    max_tokens: int = Field(default=2000, ge=1, description="Maximum tokens to generate")
    timeout: int = Field(default=120, ge=1, le=600, description="Request timeout in seconds")

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v):
        v = v.lower().strip()
        if v not in ("openai", "ollama"):
            raise ValueError("provider must be 'openai' or 'ollama'")
        return v


# env var -> (section, field)
_THRESHOLD_ENV = {
    "NAME_CONFIDENCE_THRESHOLD": "name",
    "EMAIL_CONFIDENCE_THRESHOLD": "email",
    "PHONE_CONFIDENCE_THRESHOLD": "phone",
    "EXPERIENCE_CONFIDENCE_THRESHOLD": "experience",
    "SKILLS_CONFIDENCE_THRESHOLD": "skills",
    "OVERALL_CONFIDENCE_THRESHOLD": "overall",
}


def _env_value(key: str, cast):
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return None
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {key}", config_key=key, config_value=raw, cause=e) from e


def _build(model_cls, data: dict, section: str):
    try:
        return model_cls(**data)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(p) for p in first.get("loc", ())) or section
        raise ConfigurationError(
            f"Invalid {section} configuration: {first.get('msg')}",
            config_key=key,
            config_value=first.get("input"),
            cause=e
        ) from e


def load_validation_config() -> ValidationConfig:
    """Build a ValidationConfig from the environment, rejecting bad values"""
    load_dotenv()

    thresholds = {}
    for env_key, field in _THRESHOLD_ENV.items():
        value = _env_value(env_key, float)
        if value is not None:
            thresholds[field] = value

    data = {"thresholds": _build(ConfidenceThresholds, thresholds, "thresholds")}
    for env_key, field, cast in (
        ("EXPERIENCE_TOLERANCE", "experience_tolerance", float),
        ("FRESHER_EXPERIENCE_THRESHOLD", "fresher_threshold", float),
        ("MAX_RESUME_CHARS", "max_resume_chars", int),
        ("DURATION_REFERENCE_DATE", "reference_date", date.fromisoformat),
    ):
        value = _env_value(env_key, cast)
        if value is not None:
            data[field] = value

    config = _build(ValidationConfig, data, "validation")
    logger.info(
        f"Validation config loaded - thresholds: {config.thresholds.model_dump()}, "
        f"tolerance: {config.experience_tolerance}, reference date: {config.reference_date}"
    )
    return config


def load_llm_settings() -> LLMSettings:
    """Build LLMSettings from the environment"""
    load_dotenv()

    data = {}
    for env_key, field, cast in (
        ("LLM_PROVIDER", "provider", str),
        ("LLM_MODEL", "model_name", str),
        ("LLM_BASE_URL", "base_url", str),
        ("OPENAI_API_KEY", "api_key", str),
        ("LLM_TEMPERATURE", "temperature", float),
        ("LLM_MAX_TOKENS", "max_tokens", int),
        ("LLM_TIMEOUT", "timeout", int),
    ):
        value = _env_value(env_key, cast)
        if value is not None:
            data[field] = value

    # Ollama models are not named like OpenAI ones
    if data.get("provider", "").lower() == "ollama" and "model_name" not in data:
        data["model_name"] = "llama3"

    return _build(LLMSettings, data, "llm")


@lru_cache(maxsize=1)
def get_validation_config() -> ValidationConfig:
    """Process-wide config snapshot, loaded once"""
    return load_validation_config()
