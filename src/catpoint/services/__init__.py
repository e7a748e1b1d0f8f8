"""Catpoint Services"""

from .interfaces import (
    SecurityRepository,
    SubjectDetector,
    StatusListener,
)
from .security_service import SecurityService, CAT_CONFIDENCE_THRESHOLD
from .repository import (
    InMemorySecurityRepository,
    JsonSecurityRepository,
    SensorNotFoundError,
)
from .detector import FakeCatDetector, decode_image
from .event_log import EventLogListener

__all__ = [
    # Interfaces
    'SecurityRepository',
    'SubjectDetector',
    'StatusListener',

    # Engine
    'SecurityService',
    'CAT_CONFIDENCE_THRESHOLD',

    # Collaborators
    'InMemorySecurityRepository',
    'JsonSecurityRepository',
    'SensorNotFoundError',
    'FakeCatDetector',
    'decode_image',
    'EventLogListener',
]
