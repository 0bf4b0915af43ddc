"""
Tool Type Rules — guess what kind of security product wrote a piece of text.
Each profile scores base_weight per keyword found plus 1 per context term.
"""

from __future__ import annotations

import logging
from typing import Optional

from safeguard_mapper.models.enums import UNKNOWN_TOOL_TYPE
from safeguard_mapper.rules.rules_config import RulesConfig, get_rules_config
from safeguard_mapper.utils.text import matched_terms

logger = logging.getLogger(__name__)


class ToolTypeDetector:
    """Keyword-profile scoring over the configured tool types."""

    def __init__(self, config: Optional[RulesConfig] = None):
        self._profiles = (config or get_rules_config()).tool_type_profiles

    def score_all(self, text: str) -> dict[str, float]:
        """
        Per-profile scores, in profile registration order.
        Returns: {tool_type: score}
        """
        scores: dict[str, float] = {}
        for profile in self._profiles:
            keyword_hits = matched_terms(text, profile.keywords)
            context_hits = matched_terms(text, profile.context_bonuses)
            scores[profile.tool_type] = len(keyword_hits) * profile.base_weight + len(context_hits)
        return scores

    def detect(self, text: str) -> str:
        """Highest-scoring tool type, or "unknown" when nothing scores."""
        scores = self.score_all(text)

        best_type = UNKNOWN_TOOL_TYPE
        best_score = 0.0
        # Strict > keeps the earliest profile on ties
        for tool_type, score in scores.items():
            if score > best_score:
                best_type, best_score = tool_type, score

        logger.debug(f"[ToolTypeDetector] Detected {best_type} (score={best_score}) from {scores}")
        return best_type
