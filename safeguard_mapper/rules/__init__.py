"""Rules — keyword-driven detectors, classifiers and validators."""

from safeguard_mapper.rules.capability_rules import CapabilityClassifier
from safeguard_mapper.rules.domain_rules import DomainValidator
from safeguard_mapper.rules.rules_config import (
    CapabilityKeywords,
    DomainRequirement,
    KeywordGroup,
    QualityGroups,
    RulesConfig,
    ScoringThresholds,
    ToolTypeProfile,
    get_rules_config,
    load_rules_config,
)
from safeguard_mapper.rules.tool_type_rules import ToolTypeDetector

__all__ = [
    "CapabilityClassifier",
    "DomainValidator",
    "ToolTypeDetector",
    "CapabilityKeywords",
    "DomainRequirement",
    "KeywordGroup",
    "QualityGroups",
    "RulesConfig",
    "ScoringThresholds",
    "ToolTypeProfile",
    "get_rules_config",
    "load_rules_config",
]
