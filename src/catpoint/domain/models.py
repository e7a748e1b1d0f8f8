"""
Catpoint Core Models

Uses Pydantic for validation and serialization.
"""

from pydantic import BaseModel, Field

from .enums import ArmingStatus, AlarmStatus, SensorType


class Sensor(BaseModel):
    """A door, window or motion sensor.

    Identity is the name: two Sensor objects with the same name are the
    same sensor, whatever their other fields say. The active flag should
    only be changed through SecurityService.change_sensor_activation_status.
    """
    name: str = Field(min_length=1)
    sensor_type: SensorType
    active: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sensor):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __lt__(self, other: "Sensor") -> bool:
        return self.name < other.name


class SecurityState(BaseModel):
    """Everything a repository persists."""
    arming_status: ArmingStatus = ArmingStatus.DISARMED
    alarm_status: AlarmStatus = AlarmStatus.NO_ALARM
    sensors: list[Sensor] = Field(default_factory=list)
