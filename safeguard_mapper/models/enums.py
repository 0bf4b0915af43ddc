from enum import Enum

class CapabilityRole(str, Enum):
    FULL = "full"
    PARTIAL = "partial"
    FACILITATES = "facilitates"
    GOVERNANCE = "governance"
    VALIDATES = "validates"

class QualityTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

class ValidationStatus(str, Enum):
    SUPPORTED = "SUPPORTED"
    QUESTIONABLE = "QUESTIONABLE"
    UNSUPPORTED = "UNSUPPORTED"

class ImplementationGroup(str, Enum):
    IG1 = "IG1"
    IG2 = "IG2"
    IG3 = "IG3"

class SecurityFunction(str, Enum):
    GOVERN = "Govern"
    IDENTIFY = "Identify"
    PROTECT = "Protect"
    DETECT = "Detect"
    RESPOND = "Respond"
    RECOVER = "Recover"


# Roles whose claims are restricted to domain-appropriate tool types
IMPLEMENTATION_ROLES = frozenset({CapabilityRole.FULL, CapabilityRole.PARTIAL})

UNKNOWN_TOOL_TYPE = "unknown"
