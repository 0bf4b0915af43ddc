"""
Analysis Report Builder — turns classifier and domain-validator output
into the final AnalysisResult (or CapabilityAnalysis when there is no
claim to check).
"""

from __future__ import annotations

import logging
from typing import Optional

from safeguard_mapper.models.enums import (
    IMPLEMENTATION_ROLES,
    CapabilityRole,
    QualityTier,
    ValidationStatus,
)
from safeguard_mapper.models.schemas import (
    AdjustedCapability,
    AnalysisResult,
    CapabilityAnalysis,
    CapabilityClaim,
    CapabilityFlags,
    ClassificationResult,
    DomainReconciliation,
    EvidenceAnalysis,
    RetainedCapability,
    SafeguardDefinition,
)
from safeguard_mapper.rules.rules_config import RulesConfig, get_rules_config

logger = logging.getLogger(__name__)


QUALITY_DESCRIPTIONS: dict[QualityTier, str] = {
    QualityTier.EXCELLENT: "comprehensive and well-implemented",
    QualityTier.GOOD: "solid and effective",
    QualityTier.FAIR: "basic but functional",
    QualityTier.POOR: "limited or unclear",
}

CAPABILITY_DESCRIPTIONS: dict[CapabilityRole, str] = {
    CapabilityRole.FULL: "directly implements the complete safeguard functionality",
    CapabilityRole.PARTIAL: "implements specific aspects of the safeguard with defined scope",
    CapabilityRole.FACILITATES: "enhances and enables safeguard implementation by other tools or processes",
    CapabilityRole.GOVERNANCE: "provides policy, process management, and oversight capabilities",
    CapabilityRole.VALIDATES: "provides evidence collection, audit, and compliance validation capabilities",
}


class AnalysisReportBuilder:
    """Composes the per-request analysis; holds no request state."""

    def __init__(self, config: Optional[RulesConfig] = None):
        self._t = (config or get_rules_config()).thresholds

    # ── Claim validation report ──────────────────────────

    def compose(
        self,
        claim: CapabilityClaim,
        safeguard: SafeguardDefinition,
        classification: ClassificationResult,
        detected_tool_type: str,
        reconciliation: DomainReconciliation,
    ) -> AnalysisResult:
        adjusted = reconciliation.should_adjust and reconciliation.adjusted_capability is not None
        effective = reconciliation.adjusted_capability if adjusted else claim.claimed_capability

        confidence = classification.confidence
        if adjusted:
            confidence = max(0, confidence - self._t.domain_mismatch_penalty)
        confidence = min(max(confidence, 0), 100)

        gaps = list(classification.gaps)
        strengths = list(classification.evidence)
        recommendations = self._recommendations(effective, classification, safeguard, adjusted)

        if claim.claimed_capability != classification.capability:
            gaps.append(
                f"Claimed {claim.claimed_capability.value.upper()} capability but the supporting text reads as "
                f"{classification.capability.value.upper()}"
            )

        if adjusted:
            required = ", ".join(reconciliation.required_tool_types)
            gaps.insert(0, (
                f"Domain mismatch: '{detected_tool_type}' tools cannot provide "
                f"{claim.claimed_capability.value.upper()} implementation of {reconciliation.domain}"
            ))
            recommendations.insert(0, (
                f"Reclassify this claim as {effective.value.upper()}: {reconciliation.domain} "
                f"implementation requires a {required} tool"
            ))
            domain_validation = AdjustedCapability(
                required_tool_type=list(reconciliation.required_tool_types),
                detected_tool_type=detected_tool_type,
                domain=reconciliation.domain or "",
                original_claim=claim.claimed_capability,
                adjusted_capability=effective,
                reasoning=reconciliation.reasoning,
            )
        else:
            if reconciliation.domain and claim.claimed_capability in IMPLEMENTATION_ROLES:
                strengths.append(
                    f"Tool type '{detected_tool_type}' is appropriate for {reconciliation.domain}"
                )
            domain_validation = RetainedCapability(
                required_tool_type=list(reconciliation.required_tool_types) or None,
                detected_tool_type=detected_tool_type,
                domain=reconciliation.domain,
                reasoning=reconciliation.reasoning,
            )

        status = self.validation_status(confidence, reconciliation.domain_match)

        if adjusted:
            logger.info(
                f"[AnalysisReportBuilder] {claim.vendor_name} / {safeguard.id}: "
                f"{claim.claimed_capability.value} → {effective.value} (confidence {confidence})"
            )

        return AnalysisResult(
            vendor=claim.vendor_name,
            safeguard_id=safeguard.id,
            safeguard_title=safeguard.title,
            claimed_capability=claim.claimed_capability,
            effective_capability=effective,
            validation_status=status,
            confidence_score=confidence,
            evidence_analysis=EvidenceAnalysis(
                detected_capability=classification.capability,
                quality=classification.quality,
                quality_score=classification.quality_score,
                role_scores=classification.role_scores,
                tool_capability_description=self.describe_tool_capability(
                    classification.capability, classification.quality
                ),
                recommended_use=self.recommended_use(effective, safeguard),
            ),
            domain_validation=domain_validation,
            gaps_identified=gaps,
            strengths_identified=strengths,
            recommendations=recommendations,
            detailed_feedback=self._feedback(
                claim, safeguard, classification, effective, confidence, status, reconciliation, adjusted
            ),
        )

    def validation_status(self, confidence: int, domain_match: bool) -> ValidationStatus:
        if confidence < self._t.unsupported_below:
            return ValidationStatus.UNSUPPORTED
        if confidence < self._t.supported_from or not domain_match:
            return ValidationStatus.QUESTIONABLE
        return ValidationStatus.SUPPORTED

    # ── Claim-free analysis ──────────────────────────────

    def describe(
        self,
        vendor: str,
        safeguard: SafeguardDefinition,
        classification: ClassificationResult,
        detected_tool_type: str,
    ) -> CapabilityAnalysis:
        capability = classification.capability
        return CapabilityAnalysis(
            vendor=vendor,
            safeguard_id=safeguard.id,
            safeguard_title=safeguard.title,
            capability=capability,
            capabilities=CapabilityFlags(**{role.value: role == capability for role in CapabilityRole}),
            quality=classification.quality,
            confidence=classification.confidence,
            reasoning=f"Primary capability: {capability.value.upper()} ({classification.quality.value} quality)",
            evidence=list(classification.evidence),
            gaps=list(classification.gaps),
            detected_tool_type=detected_tool_type,
            tool_capability_description=self.describe_tool_capability(capability, classification.quality),
            recommended_use=self.recommended_use(capability, safeguard),
        )

    # ── Text helpers ─────────────────────────────────────

    @staticmethod
    def describe_tool_capability(capability: CapabilityRole, quality: QualityTier) -> str:
        return (
            f"This tool {CAPABILITY_DESCRIPTIONS[capability]} with "
            f"{QUALITY_DESCRIPTIONS[quality]} capabilities."
        )

    @staticmethod
    def recommended_use(capability: CapabilityRole, safeguard: SafeguardDefinition) -> str:
        if capability == CapabilityRole.FULL:
            return (
                f"Use as the primary implementation tool for {safeguard.title}. "
                f"Ensure comprehensive deployment and configuration."
            )
        if capability == CapabilityRole.PARTIAL:
            return (
                "Use as a component within a broader safeguard implementation strategy. "
                "Supplement with additional tools or processes."
            )
        if capability == CapabilityRole.GOVERNANCE:
            return (
                f"Use for policy management, process oversight, and compliance framework "
                f"establishment for {safeguard.title}."
            )
        if capability == CapabilityRole.VALIDATES:
            return (
                f"Use for evidence collection, audit preparation, and compliance validation "
                f"of {safeguard.title} implementation."
            )
        return (
            "Use to enhance and optimize existing safeguard implementation. "
            "Integrate with primary implementation tools."
        )

    def _recommendations(
        self,
        effective: CapabilityRole,
        classification: ClassificationResult,
        safeguard: SafeguardDefinition,
        adjusted: bool = False,
    ) -> list[str]:
        recommendations: list[str] = []

        if classification.quality in (QualityTier.FAIR, QualityTier.POOR):
            recommendations.append(
                f"Provide more specific evidence of how the tool delivers "
                f"{effective.value.upper()} capability for {safeguard.title}"
            )

        # Never suggest a role the domain rules just rejected
        rejected = adjusted and classification.capability in IMPLEMENTATION_ROLES
        if effective != classification.capability and not rejected:
            recommendations.append(
                f"Consider claiming {classification.capability.value.upper()} capability, "
                f"which better matches the supporting text"
            )

        if effective in IMPLEMENTATION_ROLES and classification.gaps:
            if safeguard.core_requirements:
                recommendations.append(
                    f"Describe coverage of the core requirements: {'; '.join(safeguard.core_requirements[:3])}"
                )

        return recommendations

    def _feedback(
        self,
        claim: CapabilityClaim,
        safeguard: SafeguardDefinition,
        classification: ClassificationResult,
        effective: CapabilityRole,
        confidence: int,
        status: ValidationStatus,
        reconciliation: DomainReconciliation,
        adjusted: bool,
    ) -> str:
        parts = [
            f"{claim.vendor_name} claims {claim.claimed_capability.value.upper()} capability for "
            f"safeguard {safeguard.id} ({safeguard.title}).",
            f"Text analysis indicates {classification.capability.value.upper()} capability with "
            f"{classification.quality.value} quality.",
        ]
        if adjusted:
            parts.append(reconciliation.reasoning)
        parts.append(
            f"Effective capability: {effective.value.upper()}. "
            f"Validation status: {status.value} ({confidence}% confidence)."
        )
        return " ".join(parts)
