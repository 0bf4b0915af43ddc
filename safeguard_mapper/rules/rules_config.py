"""
Rules Config — keyword tables, tool-type profiles, domain requirements and
scoring thresholds used by the rule engines.

Everything here is an immutable pydantic model built once at startup and
passed explicitly into ToolTypeDetector / CapabilityClassifier /
DomainValidator / AnalysisReportBuilder.  Defaults can be overridden from
a JSON file (settings.rules_config_path).
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, field_validator

from safeguard_mapper.config import get_settings

logger = logging.getLogger(__name__)


# ── Config models ────────────────────────────────────────

class ToolTypeProfile(BaseModel):
    """Keyword profile for one kind of security product."""
    tool_type: str
    keywords: tuple[str, ...]
    base_weight: float = 3.0           # per keyword found
    context_bonuses: tuple[str, ...] = ()  # +1 each

    model_config = {"frozen": True}


class DomainRequirement(BaseModel):
    """Tool types allowed to claim FULL/PARTIAL for a safeguard."""
    safeguard_id: str
    domain: str
    required_tool_types: tuple[str, ...]

    model_config = {"frozen": True}


class KeywordGroup(BaseModel):
    """One quality check for the facilitates/governance/validates roles."""
    evidence: str
    gap: str
    weight: float
    keywords: tuple[str, ...]

    model_config = {"frozen": True}


class CapabilityKeywords(BaseModel):
    """The four role-detection keyword families."""
    implementation: tuple[str, ...]
    governance: tuple[str, ...]
    facilitates: tuple[str, ...]
    validates: tuple[str, ...]
    # Optional safeguard-specific action verbs added to the implementation family
    safeguard_action_verbs: dict[str, tuple[str, ...]] = {}

    model_config = {"frozen": True}


class QualityGroups(BaseModel):
    facilitates: tuple[KeywordGroup, ...]
    governance: tuple[KeywordGroup, ...]
    validates: tuple[KeywordGroup, ...]

    model_config = {"frozen": True}


class ScoringThresholds(BaseModel):
    """
    Named scoring constants.  None of the values has a documented
    derivation; see DESIGN.md before changing them.  The
    PROVISIONAL_*_TERMS keyword additions are under the same review.
    """
    # Role detection
    role_min_score: float = 0.2
    full_implementation_score: float = 0.5

    # Implementation quality (coverage of the safeguard's own elements)
    core_strong: float = 0.5
    core_strong_weight: float = 0.4
    core_partial: float = 0.2
    core_partial_weight: float = 0.2
    sub_element: float = 0.3
    sub_element_weight: float = 0.3
    governance_element: float = 0.3
    governance_element_weight: float = 0.3

    # Facilitates / governance / validates quality
    keyword_group: float = 0.1

    # Quality tiers
    tier_excellent: float = 0.8
    tier_good: float = 0.6
    tier_fair: float = 0.4

    # Report
    domain_mismatch_penalty: int = 20
    unsupported_below: int = 40
    supported_from: int = 70

    model_config = {"frozen": True}


# ── Defaults ─────────────────────────────────────────────

DEFAULT_TOOL_TYPE_PROFILES: tuple[ToolTypeProfile, ...] = (
    # Registration order is the tie-break priority
    ToolTypeProfile(
        tool_type="inventory",
        keywords=(
            "asset inventory", "asset management", "asset discovery", "inventory",
            "inventories", "cmdb", "configuration management database", "discovery",
        ),
        context_bonuses=("devices", "hardware", "software", "owner", "scans", "mdm"),
    ),
    ToolTypeProfile(
        tool_type="identity_management",
        keywords=(
            "identity management", "identity and access", "iam", "active directory",
            "single sign-on", "sso", "account lifecycle", "privileged access",
            "directory service", "user provisioning",
        ),
        context_bonuses=(
            "user account", "accounts", "username", "authentication", "mfa",
            "multi-factor", "access rights",
        ),
    ),
    ToolTypeProfile(
        tool_type="vulnerability_management",
        keywords=(
            "vulnerability management", "vulnerability scanning", "vulnerability assessment",
            "vulnerability", "patch management", "penetration test", "cve", "remediation",
        ),
        context_bonuses=("scanning", "patch", "exploit", "cvss", "security assessment"),
    ),
    ToolTypeProfile(
        tool_type="threat_intelligence",
        keywords=(
            "threat intelligence", "threat intel", "threat feed", "threat correlation",
            "indicators of compromise", "threat hunting", "threat landscape", "adversary",
        ),
        context_bonuses=("threat", "risks", "dark web", "attack"),
    ),
    ToolTypeProfile(
        tool_type="security_analytics",
        keywords=(
            "siem", "security analytics", "log management", "event correlation",
            "security information and event management", "log aggregation", "ueba",
            "security monitoring",
        ),
        context_bonuses=("logs", "events", "alerts", "correlation"),
    ),
    ToolTypeProfile(
        tool_type="endpoint_protection",
        keywords=(
            "endpoint protection", "endpoint detection", "edr", "xdr", "antivirus",
            "anti-malware", "malware protection", "application allowlisting",
        ),
        context_bonuses=("endpoint", "malware", "quarantine"),
    ),
    ToolTypeProfile(
        tool_type="network_security",
        keywords=(
            "firewall", "intrusion detection", "intrusion prevention", "network access control",
            "network segmentation", "network security", "secure web gateway", "vpn",
        ),
        context_bonuses=("network", "traffic", "packet"),
    ),
    ToolTypeProfile(
        tool_type="data_protection",
        keywords=(
            "data loss prevention", "dlp", "encryption", "data classification", "backup",
            "data recovery", "key management", "tokenization",
        ),
        context_bonuses=("sensitive data", "data at rest", "data in transit", "retention"),
    ),
    ToolTypeProfile(
        tool_type="grc",
        keywords=(
            "grc", "governance, risk", "policy management", "compliance management",
            "risk management", "audit management", "regulatory compliance", "control framework",
        ),
        base_weight=2.0,
        context_bonuses=("policy", "compliance", "audit", "regulatory", "governance"),
    ),
)


def _requirements(ids: list[str], domain: str, tool_types: tuple[str, ...]) -> list[DomainRequirement]:
    return [DomainRequirement(safeguard_id=i, domain=domain, required_tool_types=tool_types) for i in ids]


DEFAULT_DOMAIN_REQUIREMENTS: tuple[DomainRequirement, ...] = tuple(
    _requirements(["1.1", "1.2"], "Asset Inventory", ("inventory",))
    + _requirements(["5.1", "5.2", "5.3"], "Account Management", ("identity_management",))
    + _requirements(["6.1", "6.2", "6.3"], "Access Control Management", ("identity_management",))
    + _requirements(
        ["7.1", "7.2", "7.3", "7.4", "7.5", "7.6", "7.7"],
        "Vulnerability Management",
        ("vulnerability_management",),
    )
)


DEFAULT_CAPABILITY_KEYWORDS = CapabilityKeywords(
    # Direct "we do X" language
    implementation=(
        "implement", "implements", "implementation", "deploy", "execute", "perform",
        "provides", "delivers", "complete", "fully", "comprehensive", "directly",
        "natively", "built-in", "core functionality", "primary function", "main feature",
    ),
    # Policy / process language
    governance=(
        "policy", "policies", "manage", "process", "workflow", "governance", "grc",
        "compliance management", "documented", "establish", "maintain", "procedure",
        "control", "controls", "framework", "standard", "enterprise risk management",
        "centralized management", "oversight",
    ),
    # Enhancement / integration / data-feed language
    facilitates=(
        "improve", "enhance", "optimize", "faster", "better", "stronger", "automate",
        "streamline", "efficiency", "facilitate", "support", "enable", "accelerate",
        "api", "integration", "data", "export", "import", "sync", "feed",
        "provides data", "data source", "data feeds", "enrichment", "data enrichment",
        "supplemental data", "additional data", "contextual data", "threat data",
        "intelligence feeds", "data aggregation", "data collection", "data gathering",
        "feeds data", "populates", "informs", "enriches", "supplements",
        "enables compliance", "facilitates implementation", "supports compliance",
        "creates framework", "enables organizations", "infrastructure", "foundation",
        "template", "templates", "workflow automation", "orchestration",
    ),
    # Audit / report / monitor language
    validates=(
        "audit", "report", "evidence", "verify", "validate", "check", "monitor",
        "compliance", "compliance report", "assessment", "logging", "tracking", "review",
        "attest", "dashboard", "metrics", "analytics", "visibility", "alert", "attestation",
        "compliance tracking", "audit trail", "reporting capabilities", "audit capabilities",
    ),
)


# Facilitation terms beyond the base integration and automation lists.
# Provisional, pending product-owner review alongside ScoringThresholds.
PROVISIONAL_INTEGRATION_TERMS = ("database", "correlation")
PROVISIONAL_AUTOMATION_TERMS = ("scanning", "continuous")


DEFAULT_QUALITY_GROUPS = QualityGroups(
    facilitates=(
        KeywordGroup(
            evidence="Clear facilitation capabilities",
            gap="Limited evidence of enhancement or enablement capabilities",
            weight=0.4,
            keywords=("enhance", "improve", "optimize", "enable", "support", "facilitate", "streamline"),
        ),
        KeywordGroup(
            evidence="Integration and data sharing capabilities",
            gap="No integration or data sharing capabilities described",
            weight=0.3,
            keywords=("api", "integration", "data feed", "export", "import", "sync") + PROVISIONAL_INTEGRATION_TERMS,
        ),
        KeywordGroup(
            evidence="Automation and workflow capabilities",
            gap="No automation or workflow capabilities described",
            weight=0.3,
            keywords=("automate", "automated", "orchestration", "workflow") + PROVISIONAL_AUTOMATION_TERMS,
        ),
    ),
    governance=(
        KeywordGroup(
            evidence="Policy and procedure management",
            gap="No policy or procedure management described",
            weight=0.4,
            keywords=("policy", "policies", "procedure", "standard", "framework"),
        ),
        KeywordGroup(
            evidence="Process and workflow capabilities",
            gap="No process or workflow oversight described",
            weight=0.3,
            keywords=("process", "workflow", "governance", "management", "oversight"),
        ),
        KeywordGroup(
            evidence="Compliance and risk management features",
            gap="No compliance or risk management features described",
            weight=0.3,
            keywords=("compliance", "grc", "audit", "risk management"),
        ),
    ),
    validates=(
        KeywordGroup(
            evidence="Audit and evidence collection capabilities",
            gap="No audit or evidence collection capabilities described",
            weight=0.4,
            keywords=("audit", "audit trail", "evidence", "verification", "validation"),
        ),
        KeywordGroup(
            evidence="Reporting and analytics features",
            gap="No reporting or analytics features described",
            weight=0.3,
            keywords=("report", "reporting", "dashboard", "metrics", "analytics"),
        ),
        KeywordGroup(
            evidence="Monitoring and tracking capabilities",
            gap="No monitoring or tracking capabilities described",
            weight=0.3,
            keywords=("monitor", "monitoring", "tracking", "logging", "alerting"),
        ),
    ),
)


class RulesConfig(BaseModel):
    """All rule-engine configuration in one immutable bundle."""
    tool_type_profiles: tuple[ToolTypeProfile, ...] = DEFAULT_TOOL_TYPE_PROFILES
    domain_requirements: tuple[DomainRequirement, ...] = DEFAULT_DOMAIN_REQUIREMENTS
    capability_keywords: CapabilityKeywords = DEFAULT_CAPABILITY_KEYWORDS
    quality_groups: QualityGroups = DEFAULT_QUALITY_GROUPS
    thresholds: ScoringThresholds = ScoringThresholds()

    model_config = {"frozen": True}

    @field_validator("tool_type_profiles")
    @classmethod
    def _unique_tool_types(cls, profiles: tuple[ToolTypeProfile, ...]) -> tuple[ToolTypeProfile, ...]:
        seen: set[str] = set()
        for p in profiles:
            if p.tool_type in seen:
                raise ValueError(f"Duplicate tool type profile: {p.tool_type}")
            seen.add(p.tool_type)
        return profiles

    @field_validator("domain_requirements")
    @classmethod
    def _unique_requirements(cls, reqs: tuple[DomainRequirement, ...]) -> tuple[DomainRequirement, ...]:
        ids = [r.safeguard_id for r in reqs]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate domain requirement safeguard ids")
        return reqs

    def requirement_for(self, safeguard_id: str) -> Optional[DomainRequirement]:
        for req in self.domain_requirements:
            if req.safeguard_id == safeguard_id:
                return req
        return None


# ── Loading ──────────────────────────────────────────────

def load_rules_config(path: str | Path) -> RulesConfig:
    """Load a RulesConfig from JSON; omitted sections keep their defaults."""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    config = RulesConfig.model_validate(raw)
    logger.info(f"Loaded rules config overrides from {path}")
    return config


@lru_cache()
def get_rules_config() -> RulesConfig:
    """Return the process-wide rules config (defaults or settings override)."""
    path = get_settings().rules_config_path
    if path:
        return load_rules_config(path)
    return RulesConfig()
