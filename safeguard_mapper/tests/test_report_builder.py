"""
Tests: AnalysisReportBuilder status rules, adjustment and narrative text.

Run with:
    pytest safeguard_mapper/tests/test_report_builder.py -v
"""

import pytest

from safeguard_mapper.models.enums import CapabilityRole, QualityTier, ValidationStatus
from safeguard_mapper.models.schemas import (
    AnalysisResult,
    CapabilityClaim,
    ClassificationResult,
    DomainReconciliation,
)
from safeguard_mapper.services.report_builder import AnalysisReportBuilder


def _classification(capability=CapabilityRole.FACILITATES, confidence=60) -> ClassificationResult:
    return ClassificationResult(
        capability=capability,
        quality=QualityTier.GOOD if confidence >= 60 else QualityTier.POOR,
        quality_score=confidence / 100,
        confidence=confidence,
        evidence=["Integration and data sharing capabilities"],
        gaps=["No automation or workflow capabilities described"],
    )


def _claim(capability="full") -> CapabilityClaim:
    return CapabilityClaim(
        vendor_name="Vendor",
        safeguard_id="1.1",
        claimed_capability=CapabilityRole(capability),
        supporting_text="placeholder text",
    )


def _mismatch() -> DomainReconciliation:
    return DomainReconciliation(
        domain_match=False,
        should_adjust=True,
        adjusted_capability=CapabilityRole.FACILITATES,
        reasoning="mismatch",
        domain="Asset Inventory",
        required_tool_types=["inventory"],
    )


class TestValidationStatus:
    @pytest.mark.parametrize("confidence, domain_match, expected", [
        (39, True, ValidationStatus.UNSUPPORTED),
        (40, True, ValidationStatus.QUESTIONABLE),
        (69, True, ValidationStatus.QUESTIONABLE),
        (70, True, ValidationStatus.SUPPORTED),
        (100, False, ValidationStatus.QUESTIONABLE),
        (10, False, ValidationStatus.UNSUPPORTED),
    ])
    def test_thresholds(self, rules, confidence, domain_match, expected):
        assert AnalysisReportBuilder(rules).validation_status(confidence, domain_match) == expected


class TestCompose:
    def test_adjustment_applied(self, rules, catalog):
        result = AnalysisReportBuilder(rules).compose(
            _claim("full"), catalog.get("1.1"), _classification(confidence=60), "grc", _mismatch(),
        )
        assert result.capability_adjusted
        assert result.domain_validation.kind == "adjusted"
        assert result.domain_validation.original_claim == CapabilityRole.FULL
        assert result.effective_capability == CapabilityRole.FACILITATES
        assert result.confidence_score == 40
        assert result.gaps_identified[0] == (
            "Domain mismatch: 'grc' tools cannot provide FULL implementation of Asset Inventory"
        )
        assert "mismatch" in result.detailed_feedback

    def test_penalty_floors_at_zero(self, rules, catalog):
        result = AnalysisReportBuilder(rules).compose(
            _claim("partial"), catalog.get("1.1"), _classification(confidence=10), "grc", _mismatch(),
        )
        assert result.confidence_score == 0
        assert result.validation_status == ValidationStatus.UNSUPPORTED

    def test_retained_claim(self, rules, catalog):
        result = AnalysisReportBuilder(rules).compose(
            _claim("facilitates"), catalog.get("1.1"), _classification(confidence=70), "threat_intelligence",
            DomainReconciliation(domain="Asset Inventory", required_tool_types=["inventory"]),
        )
        assert not result.capability_adjusted
        assert result.domain_validation.kind == "retained"
        assert result.confidence_score == 70
        assert result.validation_status == ValidationStatus.SUPPORTED
        assert result.strengths_identified == ["Integration and data sharing capabilities"]

    def test_claim_detection_disagreement_noted(self, rules, catalog):
        result = AnalysisReportBuilder(rules).compose(
            _claim("validates"), catalog.get("1.1"), _classification(confidence=70), "unknown",
            DomainReconciliation(),
        )
        assert result.gaps_identified[-1] == (
            "Claimed VALIDATES capability but the supporting text reads as FACILITATES"
        )
        assert any(r.startswith("Consider claiming FACILITATES") for r in result.recommendations)

    def test_domain_validation_round_trips(self, rules, catalog):
        result = AnalysisReportBuilder(rules).compose(
            _claim("full"), catalog.get("1.1"), _classification(), "grc", _mismatch(),
        )
        restored = AnalysisResult.model_validate(result.model_dump(mode="json"))
        assert restored.domain_validation == result.domain_validation


class TestNarrative:
    def test_tool_capability_description(self):
        text = AnalysisReportBuilder.describe_tool_capability(CapabilityRole.VALIDATES, QualityTier.FAIR)
        assert text == (
            "This tool provides evidence collection, audit, and compliance validation "
            "capabilities with basic but functional capabilities."
        )

    @pytest.mark.parametrize("role", list(CapabilityRole))
    def test_recommended_use_for_every_role(self, catalog, role):
        assert AnalysisReportBuilder.recommended_use(role, catalog.get("1.1")).startswith("Use ")
