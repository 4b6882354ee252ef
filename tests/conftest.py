import json
import os
from datetime import date

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")

from app.models.config import ValidationConfig
from app.models.schemas import FormSubmission


class StubGenerator:
    """Returns a canned reply and remembers the prompts it was given"""

    def __init__(self, reply: str = "", error: Exception = None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


def field(is_match=True, confidence=0.95, cv_value=None, reason=""):
    return {"isMatch": is_match, "confidence": confidence, "cvValue": cv_value, "reason": reason}


def make_reply(**overrides) -> dict:
    reply = {
        "name": field(cv_value="Jane Doe"),
        "email": field(cv_value="jane@example.com"),
        "phone": field(cv_value="+15551234567"),
        "experience": field(cv_value=3.0),
        "skills": field(cv_value=["Python", "React"]),
        "overallConfidence": 0.9,
        "summary": "Form data is consistent with the CV.",
    }
    reply.update(overrides)
    return reply


@pytest.fixture
def config():
    return ValidationConfig(reference_date=date(2024, 3, 15))


@pytest.fixture
def form():
    return FormSubmission(
        full_name="Jane Doe",
        email="jane@example.com",
        phone="+15551234567",
        years_experience=3,
        skills=["Python", "React"],
    )


@pytest.fixture
def resume_text():
    return """Jane Doe
    jane@example.com  |  +1 (555) 123-4567

    EXPERIENCE
    Backend Engineer, Acme      01/2021 - 03/2024
      Python, ReactJS, PostgreSQL

    SKILLS: python, react.js, docker
    """


@pytest.fixture
def stub_factory():
    def _make(reply=None, error=None):
        text = reply if isinstance(reply, str) else json.dumps(reply if reply is not None else make_reply())
        return StubGenerator(text, error)
    return _make
