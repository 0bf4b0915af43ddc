from .logger import setup_logging
from .text import coverage_ratio, matched_terms

__all__ = ["setup_logging", "coverage_ratio", "matched_terms"]
