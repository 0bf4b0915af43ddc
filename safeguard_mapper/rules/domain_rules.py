"""
Domain Rules — restrict FULL/PARTIAL claims to domain-appropriate tool types.

A safeguard with a DomainRequirement only accepts implementation claims
from one of its required tool types; anything else is downgraded to
FACILITATES.  Safeguards without a requirement are unconstrained.
"""

from __future__ import annotations

import logging
from typing import Optional

from safeguard_mapper.models.enums import IMPLEMENTATION_ROLES, CapabilityRole
from safeguard_mapper.models.schemas import DomainReconciliation
from safeguard_mapper.rules.rules_config import RulesConfig, get_rules_config

logger = logging.getLogger(__name__)


class DomainValidator:
    """Reconciles a claimed capability with the detected tool type."""

    def __init__(self, config: Optional[RulesConfig] = None):
        self._config = config or get_rules_config()

    def reconcile(
        self,
        safeguard_id: str,
        claimed_capability: CapabilityRole,
        detected_tool_type: str,
    ) -> DomainReconciliation:
        requirement = self._config.requirement_for(safeguard_id)

        if requirement is None:
            return DomainReconciliation(
                reasoning=f"No domain restriction for safeguard {safeguard_id}",
            )

        required = list(requirement.required_tool_types)

        if claimed_capability not in IMPLEMENTATION_ROLES:
            return DomainReconciliation(
                domain=requirement.domain,
                required_tool_types=required,
                reasoning=(
                    f"{claimed_capability.value.upper()} claims are not restricted "
                    f"by the {requirement.domain} domain"
                ),
            )

        if detected_tool_type in requirement.required_tool_types:
            return DomainReconciliation(
                domain=requirement.domain,
                required_tool_types=required,
                reasoning=(
                    f"Tool type '{detected_tool_type}' is appropriate for "
                    f"{requirement.domain} ({safeguard_id})"
                ),
            )

        logger.info(
            f"[DomainValidator] {safeguard_id}: {claimed_capability.value} claim from "
            f"'{detected_tool_type}' downgraded to facilitates"
        )
        return DomainReconciliation(
            domain_match=False,
            should_adjust=True,
            adjusted_capability=CapabilityRole.FACILITATES,
            domain=requirement.domain,
            required_tool_types=required,
            reasoning=(
                f"Tool type '{detected_tool_type}' cannot provide {claimed_capability.value.upper()} "
                f"implementation of {requirement.domain} ({safeguard_id}); requires "
                f"{', '.join(required)}. Capability adjusted to FACILITATES."
            ),
        )
