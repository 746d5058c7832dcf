"""Pick & Go client core: config, errors, logging, events and session."""

from pickandgo.core.config import ApiSettings, ConfigResolver
from pickandgo.core.errors import (
    AgreementNotAcceptedError,
    ApiError,
    AuthError,
    ConfigError,
    FormFieldError,
    NetworkTimeoutError,
    PickAndGoError,
    StagingError,
    WizardError,
)
from pickandgo.core.events import EventBus, get_event_bus
from pickandgo.core.logging import VerbosityLevel, get_logger, get_verbosity, set_verbosity
from pickandgo.core.session import SessionContext

__all__ = [
    # Config
    "ApiSettings",
    "ConfigResolver",
    # Errors
    "PickAndGoError",
    "ConfigError",
    "ApiError",
    "NetworkTimeoutError",
    "AuthError",
    "FormFieldError",
    "StagingError",
    "AgreementNotAcceptedError",
    "WizardError",
    # Events
    "EventBus",
    "get_event_bus",
    # Logging
    "VerbosityLevel",
    "get_logger",
    "get_verbosity",
    "set_verbosity",
    # Session
    "SessionContext",
]
