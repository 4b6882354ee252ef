from typing import Protocol

import requests

from app.models.config import LLMSettings
from app.utils.exceptions import ConfigurationError, MissingServiceCredential, ServiceCallFailure
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"
OLLAMA_BASE_URL = "http://localhost:11434"


class TextGenerator(Protocol):
    """Anything that turns one prompt into one reply."""

    def generate(self, prompt: str) -> str:
        ...


class OllamaGenerator:
    def __init__(self, settings: LLMSettings):
        self.settings = settings
        self.base_url = (settings.base_url or OLLAMA_BASE_URL).rstrip("/")

    def generate(self, prompt: str) -> str:
        url = f"{self.base_url}/api/generate"
        try:
            resp = requests.post(
                url,
                json={
                    "model": self.settings.model_name,
                    "prompt": prompt,
                    "options": {
                        "temperature": self.settings.temperature,
                        "num_predict": self.settings.max_tokens,
                    },
                    "stream": False  # single reply only
                },
                timeout=self.settings.timeout,
            )
            resp.raise_for_status()
            return resp.json().get("response", "") or ""
        except (requests.RequestException, ValueError) as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            raise ServiceCallFailure(
                f"Ollama call failed: {e}", service_name="ollama", status_code=status, cause=e
            ) from e


class OpenAIGenerator:
    def __init__(self, settings: LLMSettings):
        if not settings.api_key:
            raise MissingServiceCredential("OPENAI_API_KEY is required", config_key="OPENAI_API_KEY")
        self.settings = settings
        self.base_url = (settings.base_url or OPENAI_BASE_URL).rstrip("/")

    def generate(self, prompt: str) -> str:
        url = f"{self.base_url}/chat/completions"
        try:
            resp = requests.post(
                url,
                headers={"Authorization": f"Bearer {self.settings.api_key}"},
                json={
                    "model": self.settings.model_name,
                    "messages": [{"role": "user", "content": prompt}],
                    "temperature": self.settings.temperature,
                    "max_tokens": self.settings.max_tokens,
                },
                timeout=self.settings.timeout,
            )
            resp.raise_for_status()
            choices = resp.json().get("choices") or []
            if not choices:
                return ""
            return (choices[0].get("message") or {}).get("content") or ""
        except (requests.RequestException, ValueError) as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            raise ServiceCallFailure(
                f"OpenAI call failed: {e}", service_name="openai", status_code=status, cause=e
            ) from e


def build_generator(settings: LLMSettings) -> TextGenerator:
    logger.info(f"Using {settings.provider} text generator with model {settings.model_name}")
    if settings.provider == "openai":
        return OpenAIGenerator(settings)
    if settings.provider == "ollama":
        return OllamaGenerator(settings)
    raise ConfigurationError(f"Unknown LLM provider: {settings.provider}", config_key="LLM_PROVIDER")
