"""Catpoint Domain Models"""

from .enums import (
    ArmingStatus,
    AlarmStatus,
    SensorType,
)

from .models import (
    Sensor,
    SecurityState,
)

__all__ = [
    # Enums
    'ArmingStatus',
    'AlarmStatus',
    'SensorType',

    # Models
    'Sensor',
    'SecurityState',
]
