"""
Safeguard Catalog — holds the safeguard definitions and serves lookups.

Definitions are loaded once from the bundled JSON data file (or the path
in settings.safeguard_data_path) and never change afterwards.  Detail
lookups go through a TTLCache keyed by "{id}_{include_examples}"; the
sorted id listing is computed once at construction.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Optional

from safeguard_mapper.catalog.implementation_examples import get_implementation_examples
from safeguard_mapper.catalog.ttl_cache import CacheStats, TTLCache
from safeguard_mapper.config import get_settings
from safeguard_mapper.exceptions import (
    InvalidSafeguardFormatError,
    MissingFieldError,
    SafeguardNotFoundError,
)
from safeguard_mapper.models.schemas import SafeguardDefinition, SafeguardSummary

logger = logging.getLogger(__name__)

SAFEGUARD_ID_PATTERN = r"^[0-9]+\.[0-9]+$"
_SAFEGUARD_ID_RE = re.compile(SAFEGUARD_ID_PATTERN)

DEFAULT_DATA_PATH = Path(__file__).resolve().parent / "data" / "safeguards.json"


def safeguard_sort_key(safeguard_id: str) -> tuple[int, int]:
    """Numeric (major, minor) ordering key, so "2.1" sorts before "10.1"."""
    major, minor = safeguard_id.split(".")
    return int(major), int(minor)


def load_safeguard_definitions(path: str | Path | None = None) -> tuple[str, list[SafeguardDefinition]]:
    """
    Read the catalog JSON file.
    Returns (framework label, definitions).
    """
    data_path = Path(path) if path else DEFAULT_DATA_PATH
    with open(data_path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    framework = raw.get("framework", "")
    definitions = [SafeguardDefinition.model_validate(item) for item in raw.get("safeguards", [])]
    logger.debug(f"[SafeguardCatalog] Read {len(definitions)} definitions from {data_path}")
    return framework, definitions


class SafeguardCatalog:
    """
    Immutable safeguard definitions + cached detail lookups.

    Usage:
        catalog = SafeguardCatalog()
        catalog.validate_id("1.1")
        safeguard = catalog.get("1.1", include_examples=True)
        ids = catalog.list_ids()
    """

    def __init__(
        self,
        definitions: Optional[Iterable[SafeguardDefinition]] = None,
        cache: Optional[TTLCache[SafeguardDefinition]] = None,
        data_path: str | Path | None = None,
        framework_name: str = "",
    ):
        settings = get_settings()

        if definitions is None:
            loaded_framework, definitions = load_safeguard_definitions(
                data_path or settings.safeguard_data_path or None
            )
            framework_name = framework_name or loaded_framework
        self.framework_name = framework_name or settings.framework_name

        self._safeguards: dict[str, SafeguardDefinition] = {}
        for definition in definitions:
            if not _SAFEGUARD_ID_RE.match(definition.id):
                raise ValueError(f"Invalid safeguard id in catalog data: {definition.id!r}")
            if definition.id in self._safeguards:
                raise ValueError(f"Duplicate safeguard id in catalog data: {definition.id}")
            self._safeguards[definition.id] = definition

        self._cache: TTLCache[SafeguardDefinition] = cache if cache is not None else TTLCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_size=settings.cache_max_entries,
            cleanup_interval_seconds=settings.cache_cleanup_interval_seconds,
        )

        # Pre-computed once; list_ids() hands out copies
        self._sorted_ids: tuple[str, ...] = tuple(sorted(self._safeguards, key=safeguard_sort_key))

        for problem in self.check_references():
            logger.warning(f"[SafeguardCatalog] {problem}")

        logger.info(f"[SafeguardCatalog] Loaded {len(self._safeguards)} safeguards ({self.framework_name})")

    # ── Validation ───────────────────────────────────────

    def validate_id(self, safeguard_id: Any) -> None:
        """Raise if the id is malformed or unknown."""
        if safeguard_id is None or (isinstance(safeguard_id, str) and not safeguard_id.strip()):
            raise MissingFieldError("safeguard_id")

        if not isinstance(safeguard_id, str) or not _SAFEGUARD_ID_RE.match(safeguard_id):
            raise InvalidSafeguardFormatError(safeguard_id, SAFEGUARD_ID_PATTERN)

        if safeguard_id not in self._safeguards:
            raise SafeguardNotFoundError(safeguard_id, self.list_ids())

    # ── Lookups ──────────────────────────────────────────

    def get(self, safeguard_id: str, include_examples: bool = False) -> SafeguardDefinition:
        """Return a copy of the safeguard, optionally with curated examples appended."""
        self.validate_id(safeguard_id)

        cache_key = f"{safeguard_id}_{str(include_examples).lower()}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug(f"[SafeguardCatalog] Cache hit: {cache_key}")
            return cached.model_copy()

        result = self._build_details(safeguard_id, include_examples)
        self._cache.set(cache_key, result)
        return result.model_copy()

    def list_ids(self) -> list[str]:
        """All safeguard ids, ascending by numeric (major, minor)."""
        return list(self._sorted_ids)

    def get_all(self) -> dict[str, SafeguardDefinition]:
        return dict(self._safeguards)

    def list_summaries(
        self,
        implementation_group: Optional[str] = None,
        security_function: Optional[str] = None,
    ) -> list[SafeguardSummary]:
        """Summaries in id order, optionally filtered."""
        summaries: list[SafeguardSummary] = []
        for safeguard_id in self._sorted_ids:
            s = self._safeguards[safeguard_id]
            if implementation_group and s.implementation_group.value != implementation_group:
                continue
            if security_function and security_function not in s.security_function:
                continue
            summaries.append(SafeguardSummary(
                id=s.id,
                title=s.title,
                implementation_group=s.implementation_group,
                asset_type=list(s.asset_type),
                security_function=list(s.security_function),
            ))
        return summaries

    def __len__(self) -> int:
        return len(self._safeguards)

    def __contains__(self, safeguard_id: object) -> bool:
        return safeguard_id in self._safeguards

    # ── Integrity ────────────────────────────────────────

    def check_references(self) -> list[str]:
        """Every related_safeguards entry must resolve in the catalog."""
        errors: list[str] = []
        for safeguard_id in sorted(self._safeguards, key=safeguard_sort_key):
            for ref in self._safeguards[safeguard_id].related_safeguards:
                if ref not in self._safeguards:
                    errors.append(f"Invalid safeguard ID reference: {ref} (from {safeguard_id})")
        return errors

    # ── Cache maintenance ────────────────────────────────

    def cleanup_cache(self) -> int:
        removed = self._cache.cleanup()
        if removed:
            logger.info(f"[SafeguardCatalog] Cache cleanup removed {removed} entries")
        return removed

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    # ── Internal ─────────────────────────────────────────

    def _build_details(self, safeguard_id: str, include_examples: bool) -> SafeguardDefinition:
        safeguard = self._safeguards[safeguard_id]
        if not include_examples:
            return safeguard.model_copy()

        examples = get_implementation_examples(safeguard_id)
        return safeguard.model_copy(update={
            "implementation_suggestions": safeguard.implementation_suggestions + examples,
        })
