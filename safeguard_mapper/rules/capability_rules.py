"""
Capability Rules — decide which capability role a piece of vendor text
exhibits and grade how well the text supports that role.

Stage A scores the four keyword families (implementation, governance,
facilitates, validates) as matched/size ratios and picks a role.
Stage B grades the chosen role: full/partial against the safeguard's own
elements, the other roles against role-specific keyword groups.
"""

from __future__ import annotations

import logging
from typing import Optional

from safeguard_mapper.models.enums import CapabilityRole, QualityTier
from safeguard_mapper.models.schemas import ClassificationResult, RoleScores, SafeguardDefinition
from safeguard_mapper.rules.rules_config import KeywordGroup, RulesConfig, get_rules_config
from safeguard_mapper.utils.text import coverage_ratio

logger = logging.getLogger(__name__)


class CapabilityClassifier:
    """Keyword-family role detection plus role-specific quality grading."""

    def __init__(self, config: Optional[RulesConfig] = None):
        config = config or get_rules_config()
        self._keywords = config.capability_keywords
        self._groups = config.quality_groups
        self._t = config.thresholds

    # ── Public API ───────────────────────────────────────

    def classify(self, text: str, safeguard: SafeguardDefinition) -> ClassificationResult:
        """Pure function of (text, safeguard): same input, same result."""
        role_scores = self.score_roles(text, safeguard.id)
        capability = self.decide_role(role_scores)

        evidence: list[str] = []
        gaps: list[str] = []
        if capability in (CapabilityRole.FULL, CapabilityRole.PARTIAL):
            raw_score = self._grade_implementation(text, safeguard, evidence, gaps)
        else:
            raw_score = self._grade_groups(text, self._groups_for(capability), evidence, gaps)

        quality_score = round(min(max(raw_score, 0.0), 1.0), 4)
        quality = self.quality_tier(quality_score)
        confidence = round(quality_score * 100)

        logger.debug(
            f"[CapabilityClassifier] {safeguard.id}: {capability.value} "
            f"quality={quality.value} score={quality_score} roles={role_scores.model_dump()}"
        )

        return ClassificationResult(
            capability=capability,
            quality=quality,
            quality_score=quality_score,
            confidence=confidence,
            role_scores=role_scores,
            evidence=evidence,
            gaps=gaps,
        )

    def score_roles(self, text: str, safeguard_id: str = "") -> RoleScores:
        """Coverage ratio of each keyword family in the text."""
        implementation = self._keywords.implementation + tuple(
            self._keywords.safeguard_action_verbs.get(safeguard_id, ())
        )
        return RoleScores(
            implementation=coverage_ratio(text, implementation),
            governance=coverage_ratio(text, self._keywords.governance),
            facilitates=coverage_ratio(text, self._keywords.facilitates),
            validates=coverage_ratio(text, self._keywords.validates),
        )

    def decide_role(self, scores: RoleScores) -> CapabilityRole:
        """
        Decision order: implementation, governance, validates, facilitates.
        The >= comparisons give ties to the earlier role.
        """
        minimum = self._t.role_min_score

        if scores.implementation > minimum and scores.implementation >= max(
            scores.governance, scores.facilitates, scores.validates
        ):
            if scores.implementation > self._t.full_implementation_score:
                return CapabilityRole.FULL
            return CapabilityRole.PARTIAL

        if scores.governance > minimum and scores.governance >= max(scores.facilitates, scores.validates):
            return CapabilityRole.GOVERNANCE

        if scores.validates > minimum and scores.validates >= scores.facilitates:
            return CapabilityRole.VALIDATES

        return CapabilityRole.FACILITATES

    def quality_tier(self, score: float) -> QualityTier:
        if score >= self._t.tier_excellent:
            return QualityTier.EXCELLENT
        if score >= self._t.tier_good:
            return QualityTier.GOOD
        if score >= self._t.tier_fair:
            return QualityTier.FAIR
        return QualityTier.POOR

    # ── Stage B graders ──────────────────────────────────

    def _grade_implementation(
        self,
        text: str,
        safeguard: SafeguardDefinition,
        evidence: list[str],
        gaps: list[str],
    ) -> float:
        t = self._t
        score = 0.0

        core = coverage_ratio(text, safeguard.core_requirements)
        sub = coverage_ratio(text, safeguard.sub_taxonomical_elements)
        governance = coverage_ratio(text, safeguard.governance_elements)

        if core > t.core_strong:
            evidence.append("Strong coverage of core requirements")
            score += t.core_strong_weight
        elif core > t.core_partial:
            evidence.append("Partial coverage of core requirements")
            score += t.core_partial_weight
        else:
            gaps.append("Limited coverage of core requirements")

        if sub > t.sub_element:
            evidence.append("Good coverage of sub-taxonomical elements")
            score += t.sub_element_weight
        else:
            gaps.append("Limited sub-element coverage")

        if governance > t.governance_element:
            evidence.append("Addresses governance requirements")
            score += t.governance_element_weight
        else:
            gaps.append("Limited governance element coverage")

        return score

    def _grade_groups(
        self,
        text: str,
        groups: tuple[KeywordGroup, ...],
        evidence: list[str],
        gaps: list[str],
    ) -> float:
        score = 0.0
        for group in groups:
            if coverage_ratio(text, group.keywords) > self._t.keyword_group:
                evidence.append(group.evidence)
                score += group.weight
            else:
                gaps.append(group.gap)
        return score

    def _groups_for(self, capability: CapabilityRole) -> tuple[KeywordGroup, ...]:
        if capability == CapabilityRole.GOVERNANCE:
            return self._groups.governance
        if capability == CapabilityRole.VALIDATES:
            return self._groups.validates
        return self._groups.facilitates
