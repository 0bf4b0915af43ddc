"""
Data schemas for catalog entries, capability claims and analysis results.
Each schema represents a clearly-bounded data object produced by one
pipeline stage.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, Field

from .enums import (
    CapabilityRole,
    ImplementationGroup,
    QualityTier,
    ValidationStatus,
)
from safeguard_mapper.exceptions import (
    InvalidCapabilityError,
    MissingFieldError,
    TextLengthError,
)


# ── Catalog ──────────────────────────────────────────────


class SafeguardDefinition(BaseModel):
    """A single safeguard as loaded from the catalog. Immutable."""
    id: str
    title: str
    description: str
    implementation_group: ImplementationGroup
    asset_type: tuple[str, ...] = ()
    security_function: tuple[str, ...] = ()
    governance_elements: tuple[str, ...] = ()       # MUST be met
    core_requirements: tuple[str, ...] = ()         # the "what" of the safeguard
    sub_taxonomical_elements: tuple[str, ...] = ()
    implementation_suggestions: tuple[str, ...] = ()
    related_safeguards: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()

    model_config = {"frozen": True}


class SafeguardSummary(BaseModel):
    """Listing view of a safeguard."""
    id: str
    title: str
    implementation_group: ImplementationGroup
    asset_type: list[str] = []
    security_function: list[str] = []


class SafeguardListing(BaseModel):
    """Sorted id listing for the whole catalog."""
    safeguards: list[str] = []
    total: int = 0
    framework: str = ""


class SummaryListing(BaseModel):
    safeguards: list[SafeguardSummary] = []
    total: int = 0
    framework: str = ""
    by_implementation_group: dict[str, int] = {}


# ── Request ──────────────────────────────────────────────


class CapabilityClaim(BaseModel):
    """A vendor's claimed capability role for one safeguard (request-scoped)."""
    vendor_name: str
    safeguard_id: str
    claimed_capability: CapabilityRole
    supporting_text: str

    @classmethod
    def from_request(
        cls,
        data: dict[str, Any],
        min_text_length: int = 10,
        max_text_length: int = 10_000,
    ) -> "CapabilityClaim":
        """
        Build a claim from raw request fields, raising the mapping error
        taxonomy instead of pydantic's ValidationError.
        Safeguard id format/existence is checked by the catalog.
        """
        for field_name in ("vendor_name", "safeguard_id", "claimed_capability", "supporting_text"):
            value = data.get(field_name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise MissingFieldError(field_name)

        raw_capability = data["claimed_capability"]
        allowed = [r.value for r in CapabilityRole]
        if not isinstance(raw_capability, str) or raw_capability.strip().lower() not in allowed:
            raise InvalidCapabilityError(raw_capability, allowed)

        text = str(data["supporting_text"])
        if len(text) < min_text_length or len(text) > max_text_length:
            raise TextLengthError(len(text), min_text_length, max_text_length)

        return cls(
            vendor_name=str(data["vendor_name"]).strip(),
            safeguard_id=str(data["safeguard_id"]).strip(),
            claimed_capability=CapabilityRole(raw_capability.strip().lower()),
            supporting_text=text,
        )


# ── Classifier output ────────────────────────────────────


class RoleScores(BaseModel):
    """Keyword-family coverage ratios from role detection (each 0-1)."""
    implementation: float = 0.0
    governance: float = 0.0
    facilitates: float = 0.0
    validates: float = 0.0


class ClassificationResult(BaseModel):
    capability: CapabilityRole
    quality: QualityTier
    quality_score: float = 0.0  # 0-1
    confidence: int = 0  # 0-100
    role_scores: RoleScores = Field(default_factory=RoleScores)
    evidence: list[str] = []
    gaps: list[str] = []


# ── Domain validation ────────────────────────────────────


class DomainReconciliation(BaseModel):
    """DomainValidator output for a single claim."""
    domain_match: bool = True
    should_adjust: bool = False
    adjusted_capability: Optional[CapabilityRole] = None
    reasoning: str = ""
    domain: Optional[str] = None
    required_tool_types: list[str] = []


class RetainedCapability(BaseModel):
    """The claimed capability stands (domain matched or not gated)."""
    kind: Literal["retained"] = "retained"
    required_tool_type: Optional[list[str]] = None  # None = unconstrained
    detected_tool_type: str
    domain: Optional[str] = None
    domain_match: bool = True
    capability_adjusted: Literal[False] = False
    reasoning: str = ""


class AdjustedCapability(BaseModel):
    """The claim was auto-downgraded because of a tool-type/domain mismatch."""
    kind: Literal["adjusted"] = "adjusted"
    required_tool_type: list[str]
    detected_tool_type: str
    domain: str
    domain_match: Literal[False] = False
    capability_adjusted: Literal[True] = True
    original_claim: CapabilityRole
    adjusted_capability: CapabilityRole = CapabilityRole.FACILITATES
    reasoning: str = ""


DomainValidation = Annotated[
    Union[RetainedCapability, AdjustedCapability],
    Field(discriminator="kind"),
]


# ── Final result ─────────────────────────────────────────


class EvidenceAnalysis(BaseModel):
    detected_capability: CapabilityRole
    quality: QualityTier
    quality_score: float = 0.0
    role_scores: RoleScores = Field(default_factory=RoleScores)
    tool_capability_description: str = ""
    recommended_use: str = ""


class AnalysisResult(BaseModel):
    """Validation of one vendor capability claim."""
    vendor: str
    safeguard_id: str
    safeguard_title: str
    claimed_capability: CapabilityRole
    effective_capability: CapabilityRole
    validation_status: ValidationStatus
    confidence_score: int = 0  # 0-100
    evidence_analysis: EvidenceAnalysis
    domain_validation: DomainValidation
    gaps_identified: list[str] = []
    strengths_identified: list[str] = []
    recommendations: list[str] = []
    detailed_feedback: str = ""

    @property
    def capability_adjusted(self) -> bool:
        return self.domain_validation.capability_adjusted


class CapabilityFlags(BaseModel):
    full: bool = False
    partial: bool = False
    facilitates: bool = False
    governance: bool = False
    validates: bool = False


class CapabilityAnalysis(BaseModel):
    """What role a vendor response exhibits, without a claim to check."""
    vendor: str
    safeguard_id: str
    safeguard_title: str
    capability: CapabilityRole
    capabilities: CapabilityFlags
    quality: QualityTier
    confidence: int = 0
    reasoning: str = ""
    evidence: list[str] = []
    gaps: list[str] = []
    detected_tool_type: str = ""
    tool_capability_description: str = ""
    recommended_use: str = ""


# ── Metrics ──────────────────────────────────────────────


class OperationStats(BaseModel):
    requests: int = 0
    average_ms: float = 0.0
    samples: int = 0


class MetricsSnapshot(BaseModel):
    uptime_seconds: float = 0.0
    total_requests: int = 0
    error_count: int = 0
    error_rate: float = 0.0  # percent
    operations: dict[str, OperationStats] = {}
    cache: dict[str, float] = {}
