"""Safeguard Capability Mapper — vendor capability claims vs. CIS safeguards."""

__version__ = "0.1.0"
