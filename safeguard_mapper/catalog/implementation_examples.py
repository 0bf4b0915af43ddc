"""
Curated illustrative implementation examples, keyed by safeguard id.
Appended to implementation_suggestions when a caller asks for examples.
"""

from __future__ import annotations

IMPLEMENTATION_EXAMPLES: dict[str, tuple[str, ...]] = {
    "1.1": (
        "Example: Use Lansweeper for automated asset discovery",
        "Example: Implement ServiceNow CMDB for centralized tracking",
        "Example: Deploy Microsoft SCCM for Windows asset management",
    ),
    "5.1": (
        "Example: Use Azure AD for centralized account management",
        "Example: Implement Okta for identity lifecycle management",
        "Example: Deploy JumpCloud for directory services",
    ),
    "6.3": (
        "Example: Enable Azure MFA for all external applications",
        "Example: Implement Duo Security for multi-factor authentication",
        "Example: Use Google Workspace SSO with MFA enforcement",
    ),
    "7.1": (
        "Example: Establish Nessus vulnerability scanning schedule",
        "Example: Implement Qualys VMDR for continuous monitoring",
        "Example: Use Rapid7 InsightVM for vulnerability management",
    ),
}


def get_implementation_examples(safeguard_id: str) -> tuple[str, ...]:
    return IMPLEMENTATION_EXAMPLES.get(safeguard_id, ())
