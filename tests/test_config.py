from datetime import date
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.models.config import (
    ConfidenceThresholds, LLMSettings, ValidationConfig, load_llm_settings, load_validation_config,
)
from app.utils.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for key in ("NAME_CONFIDENCE_THRESHOLD", "EMAIL_CONFIDENCE_THRESHOLD", "PHONE_CONFIDENCE_THRESHOLD",
                "EXPERIENCE_CONFIDENCE_THRESHOLD", "SKILLS_CONFIDENCE_THRESHOLD", "OVERALL_CONFIDENCE_THRESHOLD",
                "EXPERIENCE_TOLERANCE", "FRESHER_EXPERIENCE_THRESHOLD", "MAX_RESUME_CHARS",
                "DURATION_REFERENCE_DATE", "LLM_PROVIDER", "LLM_MODEL", "LLM_BASE_URL", "OPENAI_API_KEY",
                "LLM_TEMPERATURE", "LLM_MAX_TOKENS", "LLM_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    with patch("app.models.config.load_dotenv"):
        yield monkeypatch


class TestValidationConfig:

    def test_defaults(self):
        config = ValidationConfig()
        t = config.thresholds
        assert (t.name, t.email, t.phone, t.experience, t.skills, t.overall) == (0.8, 0.9, 0.85, 0.7, 0.6, 0.7)
        assert config.experience_tolerance == 0.5
        assert config.fresher_threshold == 0.1
        assert "kubernetes" in config.skill_synonyms

    @pytest.mark.parametrize("value", [-0.1, 1.01])
    def test_threshold_out_of_range_rejected(self, value):
        with pytest.raises(PydanticValidationError):
            ConfidenceThresholds(email=value)

    def test_negative_tolerance_rejected(self):
        with pytest.raises(PydanticValidationError):
            ValidationConfig(experience_tolerance=-1)

    def test_config_is_frozen(self):
        config = ValidationConfig()
        with pytest.raises(PydanticValidationError):
            config.experience_tolerance = 2.0
        with pytest.raises(PydanticValidationError):
            config.thresholds.name = 0.1

    def test_synonyms_normalized(self):
        config = ValidationConfig(skill_synonyms={" Go ": ["Golang", " GO-LANG "]})
        assert config.skill_synonyms == {"go": frozenset({"golang", "go-lang"})}


class TestLoadFromEnvironment:

    def test_overrides(self, clean_env):
        clean_env.setenv("EMAIL_CONFIDENCE_THRESHOLD", "0.95")
        clean_env.setenv("EXPERIENCE_TOLERANCE", "1")
        clean_env.setenv("DURATION_REFERENCE_DATE", "2024-03-01")
        config = load_validation_config()
        assert config.thresholds.email == 0.95
        assert config.thresholds.name == 0.8
        assert config.experience_tolerance == 1.0
        assert config.reference_date == date(2024, 3, 1)

    def test_out_of_range_threshold(self, clean_env):
        clean_env.setenv("OVERALL_CONFIDENCE_THRESHOLD", "1.5")
        with pytest.raises(ConfigurationError) as exc_info:
            load_validation_config()
        assert exc_info.value.details["config_key"] == "overall"

    def test_unparseable_value(self, clean_env):
        clean_env.setenv("MAX_RESUME_CHARS", "lots")
        with pytest.raises(ConfigurationError) as exc_info:
            load_validation_config()
        assert exc_info.value.details["config_key"] == "MAX_RESUME_CHARS"

    def test_llm_settings(self, clean_env):
        clean_env.setenv("LLM_PROVIDER", "Ollama")
        settings = load_llm_settings()
        assert settings.provider == "ollama"
        assert settings.model_name == "llama3"

    def test_unknown_provider(self, clean_env):
        clean_env.setenv("LLM_PROVIDER", "carrier-pigeon")
        with pytest.raises(ConfigurationError):
            load_llm_settings()

    def test_llm_defaults(self, clean_env):
        settings = load_llm_settings()
        assert settings == LLMSettings()
        assert settings.api_key is None
