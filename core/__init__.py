"""
Core Framework for the Clinic Portal client.

This module provides the base classes and primitives that every use case
builds on. The layered architecture ensures:

1. Domain Layer - Pure rules and parsing, no I/O
2. Data Layer - Async API clients and the error taxonomy
3. Presentation Layer - Widget composition, view regions, notices
4. Orchestration Layer - Request sequencing and action routing

Each use case follows this pattern for consistency and reusability.
"""

from .domain import Validator, ValidationError
from .data import BaseApiClient, GatewayError, NetworkFailure, HTTPError, AuthMissing
from .presentation import WidgetComposer, WidgetTheme, ViewRegion, Notifier, NoticeBuffer, RequestNotices
from .orchestration import RequestSequencer, ActionRegistry, Debouncer
from .session import KeyValueStore

__all__ = [
    # Domain
    "Validator",
    "ValidationError",
    # Data
    "BaseApiClient",
    "GatewayError",
    "NetworkFailure",
    "HTTPError",
    "AuthMissing",
    # Presentation
    "WidgetComposer",
    "WidgetTheme",
    "ViewRegion",
    "Notifier",
    "NoticeBuffer",
    "RequestNotices",
    # Orchestration
    "RequestSequencer",
    "ActionRegistry",
    "Debouncer",
    # Session
    "KeyValueStore",
]
