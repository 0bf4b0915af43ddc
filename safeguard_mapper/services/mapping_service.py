"""
Mapping Service — single entry point for the CLI and the HTTP API.

Wires the catalog, claim validation, the rule engines, the report
builder and performance metrics together:

    catalog.get → classifier.classify → detector.detect
        → validator.reconcile → builder.compose
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Optional

from safeguard_mapper.catalog.safeguard_catalog import SafeguardCatalog
from safeguard_mapper.config import get_settings
from safeguard_mapper.exceptions import MissingFieldError, TextLengthError
from safeguard_mapper.models.schemas import (
    AnalysisResult,
    CapabilityAnalysis,
    CapabilityClaim,
    MetricsSnapshot,
    SafeguardDefinition,
    SafeguardListing,
    SummaryListing,
)
from safeguard_mapper.rules.capability_rules import CapabilityClassifier
from safeguard_mapper.rules.domain_rules import DomainValidator
from safeguard_mapper.rules.rules_config import RulesConfig, get_rules_config
from safeguard_mapper.rules.tool_type_rules import ToolTypeDetector
from safeguard_mapper.services.metrics_service import PerformanceMetrics
from safeguard_mapper.services.report_builder import AnalysisReportBuilder

logger = logging.getLogger(__name__)


class MappingService:
    """
    Facade over the safeguard catalog and the classification pipeline.

    Usage:
        service = MappingService()
        result = service.validate_mapping("AssetMax Pro", "1.1", "full", text)
        print(result.validation_status)
    """

    def __init__(
        self,
        catalog: Optional[SafeguardCatalog] = None,
        rules: Optional[RulesConfig] = None,
        metrics: Optional[PerformanceMetrics] = None,
    ):
        self.settings = get_settings()
        self.catalog = catalog if catalog is not None else SafeguardCatalog()
        rules = rules or get_rules_config()

        self.detector = ToolTypeDetector(rules)
        self.classifier = CapabilityClassifier(rules)
        self.validator = DomainValidator(rules)
        self.builder = AnalysisReportBuilder(rules)
        self.metrics = metrics or PerformanceMetrics()

    # ── Claim validation ─────────────────────────────────

    def validate_mapping(
        self,
        vendor_name: Any,
        safeguard_id: Any,
        claimed_capability: Any,
        supporting_text: Any,
    ) -> AnalysisResult:
        """Check a vendor's claimed capability role against its supporting text."""
        with self.metrics.track("validate_vendor_mapping"):
            claim = CapabilityClaim.from_request(
                {
                    "vendor_name": vendor_name,
                    "safeguard_id": safeguard_id,
                    "claimed_capability": claimed_capability,
                    "supporting_text": supporting_text,
                },
                min_text_length=self.settings.min_text_length,
                max_text_length=self.settings.max_text_length,
            )
            safeguard = self.catalog.get(claim.safeguard_id)

            classification = self.classifier.classify(claim.supporting_text, safeguard)
            tool_type = self.detector.detect(claim.supporting_text)
            reconciliation = self.validator.reconcile(safeguard.id, claim.claimed_capability, tool_type)

            result = self.builder.compose(claim, safeguard, classification, tool_type, reconciliation)

        logger.info(
            f"[MappingService] {result.vendor} / {result.safeguard_id}: "
            f"{result.claimed_capability.value} → {result.validation_status.value} "
            f"({result.confidence_score}%)"
        )
        return result

    # ── Claim-free analysis ──────────────────────────────

    def analyze_response(self, vendor_name: Any, safeguard_id: Any, response_text: Any) -> CapabilityAnalysis:
        """Detect which capability role a vendor response exhibits."""
        with self.metrics.track("analyze_vendor_response"):
            if vendor_name is None or not str(vendor_name).strip():
                raise MissingFieldError("vendor_name")
            if response_text is None or not str(response_text).strip():
                raise MissingFieldError("response_text")

            safeguard = self.catalog.get(safeguard_id)

            text = str(response_text)
            if not self.settings.min_text_length <= len(text) <= self.settings.max_text_length:
                raise TextLengthError(len(text), self.settings.min_text_length, self.settings.max_text_length)

            classification = self.classifier.classify(text, safeguard)
            tool_type = self.detector.detect(text)
            return self.builder.describe(str(vendor_name).strip(), safeguard, classification, tool_type)

    # ── Catalog ──────────────────────────────────────────

    def get_safeguard(self, safeguard_id: Any, include_examples: bool = False) -> SafeguardDefinition:
        with self.metrics.track("get_safeguard_details"):
            return self.catalog.get(safeguard_id, include_examples=include_examples)

    def list_safeguards(self) -> SafeguardListing:
        with self.metrics.track("list_available_safeguards"):
            ids = self.catalog.list_ids()
            return SafeguardListing(safeguards=ids, total=len(ids), framework=self.catalog.framework_name)

    def summarize_safeguards(
        self,
        implementation_group: Optional[str] = None,
        security_function: Optional[str] = None,
    ) -> SummaryListing:
        summaries = self.catalog.list_summaries(implementation_group, security_function)
        by_group: dict[str, int] = {}
        for s in summaries:
            by_group[s.implementation_group.value] = by_group.get(s.implementation_group.value, 0) + 1
        return SummaryListing(
            safeguards=summaries,
            total=len(summaries),
            framework=self.catalog.framework_name,
            by_implementation_group=by_group,
        )

    # ── Maintenance / diagnostics ────────────────────────

    def cleanup_cache(self) -> int:
        return self.catalog.cleanup_cache()

    def metrics_snapshot(self) -> MetricsSnapshot:
        snapshot = self.metrics.snapshot()
        cache = {key: float(value) for key, value in asdict(self.catalog.cache_stats()).items()}
        return snapshot.model_copy(update={"cache": cache})
