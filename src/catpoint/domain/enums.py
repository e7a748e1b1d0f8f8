"""
Catpoint Core Enums

Arming modes, alarm states and sensor kinds shared by the engine,
the repositories and the control API.
"""

from enum import Enum


# =============================================================================
# Arming
# =============================================================================

class ArmingStatus(str, Enum):
    """Operational mode of the system."""
    DISARMED = "disarmed"
    ARMED_HOME = "armed_home"
    ARMED_AWAY = "armed_away"

    @property
    def description(self) -> str:
        return _ARMING_DESCRIPTIONS[self]


_ARMING_DESCRIPTIONS = {
    ArmingStatus.DISARMED: "Disarmed",
    ArmingStatus.ARMED_HOME: "Armed - At Home",
    ArmingStatus.ARMED_AWAY: "Armed - Away",
}


# =============================================================================
# Alarm
# =============================================================================

class AlarmStatus(str, Enum):
    """Alarm state.

    Written only by SecurityService. ALARM is not left by sensor events,
    only by arming changes or a clear camera frame.
    """
    NO_ALARM = "no_alarm"
    PENDING_ALARM = "pending_alarm"   # One trip seen, not yet confirmed
    ALARM = "alarm"                   # Sounding

    @property
    def description(self) -> str:
        return _ALARM_DESCRIPTIONS[self]


_ALARM_DESCRIPTIONS = {
    AlarmStatus.NO_ALARM: "Cool and Good",
    AlarmStatus.PENDING_ALARM: "I'm in Danger...",
    AlarmStatus.ALARM: "Awooga!",
}


# =============================================================================
# Sensors
# =============================================================================

class SensorType(str, Enum):
    """Physical sensor kind."""
    DOOR = "door"
    WINDOW = "window"
    MOTION = "motion"
