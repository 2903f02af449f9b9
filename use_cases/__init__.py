"""
Use Cases Package.

This package contains modular use case implementations for the clinic
portal. Each use case is a self-contained module with its own:
- API client
- Widget composers
- Controllers and action routing

Available use cases:
- clinic: Doctor directory, appointment roster and booking handoff

Architecture:
Each use case follows the layered architecture pattern defined in core/:
- domain/: Pure models, normalization and form rules
- presentation/: Widget composition
- session.py: Use-case-specific session reading
- server.py: Wiring for the host application
"""

from use_cases.clinic import ClinicApiClient, ClinicPortalServer

__all__ = [
    "ClinicApiClient",
    "ClinicPortalServer",
]
