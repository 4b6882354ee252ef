from app.models.config import ValidationConfig
from app.models.schemas import FormSubmission

NOT_PROVIDED = "Not provided"

VALIDATION_PROMPT = """You are an expert CV validation assistant. Compare the form data with the CV content and decide whether they match.

CV CONTENT:
{resume_text}

FORM DATA:
- Full Name: {full_name}
- Email: {email}
- Phone: {phone}
- Years of Experience: {years_experience}
- Skills: {skills}

VALIDATION RULES:
1. Name: case-insensitive match; a partial name is accepted when every part of one name appears in the other (e.g. "Manohar Sai" vs "Phani Manohar Sai").
2. Email: exact match required.
3. Phone: exact match required if provided in the form.
4. Experience: ±{tolerance:g} years tolerance; {fresher:g} years or less on both sides counts as a fresher and matches.
5. Skills: semantic matching (React.js = ReactJS = React, k8s = Kubernetes).

For each field report whether it matches (true/false), a confidence score between 0.0 and 1.0, the value found in the CV, and the reason for any mismatch.

Return ONLY strict JSON in exactly this shape:
{{
  "name": {{"isMatch": boolean, "confidence": number, "cvValue": string, "reason": string}},
  "email": {{"isMatch": boolean, "confidence": number, "cvValue": string, "reason": string}},
  "phone": {{"isMatch": boolean, "confidence": number, "cvValue": string, "reason": string}},
  "experience": {{"isMatch": boolean, "confidence": number, "cvValue": number, "reason": string}},
  "skills": {{"isMatch": boolean, "confidence": number, "cvValue": [string], "reason": string}},
  "overallConfidence": number,
  "summary": string
}}
"""


class PromptBuilder:
    """Renders a submission and resume text into one instruction string.

    Submitted values are embedded as-is, without escaping.
    """

    def __init__(self, config: ValidationConfig = None, template: str = VALIDATION_PROMPT):
        self.config = config or ValidationConfig()
        self.template = template

    def build(self, form: FormSubmission, resume_text: str) -> str:
        return self.template.format(
            resume_text=resume_text,
            full_name=form.full_name,
            email=form.email,
            phone=form.phone or NOT_PROVIDED,
            years_experience=f"{form.years_experience:g}",
            skills=", ".join(form.skills) if form.skills else NOT_PROVIDED,
            tolerance=self.config.experience_tolerance,
            fresher=self.config.fresher_threshold,
        )
