"""
Tests: tool-type detection, capability classification and domain validation.

Run with:
    pytest safeguard_mapper/tests/test_rules.py -v
"""

import pytest

from safeguard_mapper.models.enums import CapabilityRole, QualityTier
from safeguard_mapper.models.schemas import RoleScores
from safeguard_mapper.rules.capability_rules import CapabilityClassifier
from safeguard_mapper.rules.domain_rules import DomainValidator
from safeguard_mapper.rules.rules_config import (
    DEFAULT_QUALITY_GROUPS,
    PROVISIONAL_AUTOMATION_TERMS,
    PROVISIONAL_INTEGRATION_TERMS,
    DomainRequirement,
    RulesConfig,
    ToolTypeProfile,
    load_rules_config,
)
from safeguard_mapper.rules.tool_type_rules import ToolTypeDetector
from safeguard_mapper.tests.sample_responses import (
    ASSET_DISCOVERY_TEXT,
    ASSET_MAX_TEXT,
    GRC_TEXT,
    IDENTITY_TEXT,
    IMPLEMENTATION_TEXT,
    SIEM_TEXT,
    THREAT_INTEL_TEXT,
    UNKNOWN_TEXT,
    VULN_SCANNER_TEXT,
)


class TestToolTypeDetector:
    @pytest.mark.parametrize("text, expected", [
        (ASSET_MAX_TEXT, "inventory"),
        (THREAT_INTEL_TEXT, "threat_intelligence"),
        (IDENTITY_TEXT, "identity_management"),
        (ASSET_DISCOVERY_TEXT, "inventory"),
        (VULN_SCANNER_TEXT, "vulnerability_management"),
        (SIEM_TEXT, "security_analytics"),
        (GRC_TEXT, "grc"),
        (UNKNOWN_TEXT, "unknown"),
    ])
    def test_detects_vendor_types(self, rules, text, expected):
        assert ToolTypeDetector(rules).detect(text) == expected

    def test_score_components(self, rules):
        scores = ToolTypeDetector(rules).score_all(ASSET_MAX_TEXT)
        # 4 keywords × 3 + 4 context terms
        assert scores["inventory"] == 16
        assert list(scores) == [p.tool_type for p in rules.tool_type_profiles]

    def test_case_insensitive(self, rules):
        assert ToolTypeDetector(rules).detect("ENTERPRISE SIEM AND LOG MANAGEMENT") == "security_analytics"

    def test_tie_goes_to_first_registered(self):
        profiles = (
            ToolTypeProfile(tool_type="alpha", keywords=("scanner",)),
            ToolTypeProfile(tool_type="beta", keywords=("scanner",)),
        )
        text = "a network scanner for the enterprise"
        assert ToolTypeDetector(RulesConfig(tool_type_profiles=profiles)).detect(text) == "alpha"
        reversed_config = RulesConfig(tool_type_profiles=tuple(reversed(profiles)))
        assert ToolTypeDetector(reversed_config).detect(text) == "beta"

    def test_duplicate_profiles_rejected(self):
        with pytest.raises(ValueError):
            RulesConfig(tool_type_profiles=(
                ToolTypeProfile(tool_type="alpha", keywords=("a",)),
                ToolTypeProfile(tool_type="alpha", keywords=("b",)),
            ))


class TestRoleDecision:
    def test_implementation_full(self, rules):
        clf = CapabilityClassifier(rules)
        assert clf.decide_role(RoleScores(implementation=0.6)) == CapabilityRole.FULL

    def test_implementation_partial(self, rules):
        clf = CapabilityClassifier(rules)
        assert clf.decide_role(RoleScores(implementation=0.3, governance=0.1)) == CapabilityRole.PARTIAL

    def test_implementation_wins_tie_with_governance(self, rules):
        clf = CapabilityClassifier(rules)
        assert clf.decide_role(RoleScores(implementation=0.3, governance=0.3)) == CapabilityRole.PARTIAL

    def test_governance_wins_tie_with_validates(self, rules):
        clf = CapabilityClassifier(rules)
        assert clf.decide_role(RoleScores(governance=0.3, validates=0.3)) == CapabilityRole.GOVERNANCE

    def test_validates_wins_tie_with_facilitates(self, rules):
        clf = CapabilityClassifier(rules)
        assert clf.decide_role(RoleScores(validates=0.3, facilitates=0.3)) == CapabilityRole.VALIDATES

    def test_below_threshold_falls_to_facilitates(self, rules):
        clf = CapabilityClassifier(rules)
        scores = RoleScores(implementation=0.2, governance=0.2, validates=0.2)
        assert clf.decide_role(scores) == CapabilityRole.FACILITATES

    def test_threshold_override(self):
        from safeguard_mapper.rules.rules_config import ScoringThresholds

        clf = CapabilityClassifier(RulesConfig(thresholds=ScoringThresholds(role_min_score=0.1)))
        assert clf.decide_role(RoleScores(validates=0.15)) == CapabilityRole.VALIDATES


class TestClassifier:
    def test_asset_max_reads_as_governance(self, rules, catalog):
        result = CapabilityClassifier(rules).classify(ASSET_MAX_TEXT, catalog.get("1.1"))
        assert result.capability == CapabilityRole.GOVERNANCE
        assert result.quality == QualityTier.GOOD
        assert result.quality_score == 0.7
        assert result.confidence == 70
        assert "Policy and procedure management" in result.evidence
        assert "No compliance or risk management features described" in result.gaps

    def test_threat_intel_reads_as_facilitates(self, rules, catalog):
        result = CapabilityClassifier(rules).classify(THREAT_INTEL_TEXT, catalog.get("1.1"))
        assert result.capability == CapabilityRole.FACILITATES
        assert result.confidence == 60
        assert result.evidence == [
            "Integration and data sharing capabilities",
            "Automation and workflow capabilities",
        ]
        assert result.gaps == ["Limited evidence of enhancement or enablement capabilities"]

    def test_threat_intel_grade_rests_on_provisional_terms(self, catalog):
        provisional = set(PROVISIONAL_INTEGRATION_TERMS + PROVISIONAL_AUTOMATION_TERMS)
        narrowed = DEFAULT_QUALITY_GROUPS.model_copy(update={"facilitates": tuple(
            g.model_copy(update={"keywords": tuple(k for k in g.keywords if k not in provisional)})
            for g in DEFAULT_QUALITY_GROUPS.facilitates
        )})
        result = CapabilityClassifier(RulesConfig(quality_groups=narrowed)).classify(
            THREAT_INTEL_TEXT, catalog.get("1.1")
        )
        assert result.capability == CapabilityRole.FACILITATES
        assert result.confidence == 0

    def test_implementation_language_reads_as_full(self, rules, catalog):
        result = CapabilityClassifier(rules).classify(IMPLEMENTATION_TEXT, catalog.get("1.1"))
        assert result.capability == CapabilityRole.FULL
        assert result.role_scores.implementation > 0.5
        assert "Limited coverage of core requirements" in result.gaps

    def test_idempotent(self, rules, catalog):
        clf = CapabilityClassifier(rules)
        safeguard = catalog.get("5.1")
        assert clf.classify(IDENTITY_TEXT, safeguard) == clf.classify(IDENTITY_TEXT, safeguard)

    @pytest.mark.parametrize("text", [
        ASSET_MAX_TEXT, THREAT_INTEL_TEXT, IDENTITY_TEXT, ASSET_DISCOVERY_TEXT,
        VULN_SCANNER_TEXT, SIEM_TEXT, GRC_TEXT, UNKNOWN_TEXT, IMPLEMENTATION_TEXT,
    ])
    def test_confidence_bounds_and_tiers(self, rules, catalog, text):
        clf = CapabilityClassifier(rules)
        result = clf.classify(text, catalog.get("1.1"))
        assert 0 <= result.confidence <= 100
        assert 0.0 <= result.quality_score <= 1.0
        assert result.quality == clf.quality_tier(result.quality_score)

    def test_tiers_monotonic(self, rules):
        clf = CapabilityClassifier(rules)
        order = [QualityTier.POOR, QualityTier.FAIR, QualityTier.GOOD, QualityTier.EXCELLENT]
        tiers = [order.index(clf.quality_tier(s / 100)) for s in range(0, 101)]
        assert tiers == sorted(tiers)
        assert clf.quality_tier(0.8) == QualityTier.EXCELLENT
        assert clf.quality_tier(0.6) == QualityTier.GOOD
        assert clf.quality_tier(0.4) == QualityTier.FAIR
        assert clf.quality_tier(0.39) == QualityTier.POOR

    def test_action_verbs_extend_implementation_family(self, catalog):
        from safeguard_mapper.rules.rules_config import DEFAULT_CAPABILITY_KEYWORDS

        keywords = DEFAULT_CAPABILITY_KEYWORDS.model_copy(
            update={"safeguard_action_verbs": {"1.1": ("inventory", "discover")}}
        )
        clf = CapabilityClassifier(RulesConfig(capability_keywords=keywords))
        plain = CapabilityClassifier(RulesConfig())
        text = "We inventory and discover every device."
        assert clf.score_roles(text, "1.1").implementation > plain.score_roles(text, "1.1").implementation
        assert clf.score_roles(text, "2.1").implementation == plain.score_roles(text, "2.1").implementation


class TestDomainValidator:
    def test_matching_tool_type(self, rules):
        rec = DomainValidator(rules).reconcile("1.1", CapabilityRole.FULL, "inventory")
        assert rec.domain_match
        assert not rec.should_adjust
        assert rec.domain == "Asset Inventory"

    def test_mismatch_downgrades(self, rules):
        rec = DomainValidator(rules).reconcile("1.1", CapabilityRole.FULL, "threat_intelligence")
        assert not rec.domain_match
        assert rec.should_adjust
        assert rec.adjusted_capability == CapabilityRole.FACILITATES
        assert "Asset Inventory" in rec.reasoning
        assert "threat_intelligence" in rec.reasoning

    def test_partial_is_gated(self, rules):
        rec = DomainValidator(rules).reconcile("5.1", CapabilityRole.PARTIAL, "inventory")
        assert rec.should_adjust

    @pytest.mark.parametrize("role", [
        CapabilityRole.FACILITATES, CapabilityRole.GOVERNANCE, CapabilityRole.VALIDATES,
    ])
    def test_non_implementation_roles_not_gated(self, rules, role):
        rec = DomainValidator(rules).reconcile("1.1", role, "grc")
        assert rec.domain_match
        assert not rec.should_adjust
        assert rec.adjusted_capability is None

    def test_unrestricted_safeguard(self, rules):
        rec = DomainValidator(rules).reconcile("2.1", CapabilityRole.FULL, "unknown")
        assert rec.domain_match
        assert rec.domain is None
        assert rec.required_tool_types == []

    def test_unknown_tool_type_is_mismatch(self, rules):
        rec = DomainValidator(rules).reconcile("7.1", CapabilityRole.FULL, "unknown")
        assert rec.should_adjust

    def test_adjustment_invariant(self, rules):
        validator = DomainValidator(rules)
        tool_types = [p.tool_type for p in rules.tool_type_profiles] + ["unknown"]
        for req in rules.domain_requirements:
            for role in CapabilityRole:
                for tool_type in tool_types:
                    rec = validator.reconcile(req.safeguard_id, role, tool_type)
                    if rec.should_adjust:
                        assert tool_type not in req.required_tool_types
                        assert rec.adjusted_capability == CapabilityRole.FACILITATES
                        assert role in (CapabilityRole.FULL, CapabilityRole.PARTIAL)


class TestRulesConfigLoading:
    def test_json_override(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(
            '{"domain_requirements": [{"safeguard_id": "2.1", "domain": "Software Inventory",'
            ' "required_tool_types": ["inventory"]}], "thresholds": {"domain_mismatch_penalty": 30}}',
            encoding="utf-8",
        )
        config = load_rules_config(path)
        assert config.requirement_for("2.1") == DomainRequirement(
            safeguard_id="2.1", domain="Software Inventory", required_tool_types=("inventory",)
        )
        assert config.requirement_for("1.1") is None
        assert config.thresholds.domain_mismatch_penalty == 30
        assert config.thresholds.supported_from == 70
        assert config.tool_type_profiles == RulesConfig().tool_type_profiles
