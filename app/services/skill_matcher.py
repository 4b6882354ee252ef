from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping

from app.models.config import DEFAULT_SKILL_SYNONYMS
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

SKILLS_COVERAGE_THRESHOLD = 0.7


class SkillMatcher:
    """Semantic skill equivalence over a canonical synonym table."""

    def __init__(self, synonyms: Mapping[str, Iterable[str]] = None,
                 coverage_threshold: float = SKILLS_COVERAGE_THRESHOLD):
        table: Dict[str, FrozenSet[str]] = {}
        for canonical, aliases in (synonyms if synonyms is not None else DEFAULT_SKILL_SYNONYMS).items():
            table[self.normalize(canonical)] = frozenset(self.normalize(a) for a in aliases)
        self.synonyms = MappingProxyType(table)
        self.coverage_threshold = coverage_threshold

    @staticmethod
    def normalize(skill: str) -> str:
        return (skill or "").lower().strip()

    def match(self, skill_a: str, skill_b: str) -> bool:
        a, b = self.normalize(skill_a), self.normalize(skill_b)
        if not a or not b:
            return False
        if a == b:
            return True
        aliases = self.synonyms.get(a)
        if aliases and b in aliases:
            return True
        aliases = self.synonyms.get(b)
        return bool(aliases and a in aliases)

    def matched_skills(self, form_skills: List[str], resume_skills: List[str]) -> List[str]:
        """Form skills that have at least one equivalent on the resume."""
        return [s for s in form_skills if any(self.match(s, r) for r in resume_skills)]

    def coverage(self, form_skills: List[str], resume_skills: List[str]) -> float:
        if not form_skills:
            return 1.0
        return len(self.matched_skills(form_skills, resume_skills)) / len(form_skills)

    def skills_match(self, form_skills: List[str], resume_skills: List[str]) -> bool:
        cover = self.coverage(form_skills, resume_skills)
        logger.debug(f"Skill coverage {cover:.2f} (threshold {self.coverage_threshold})")
        return cover >= self.coverage_threshold
