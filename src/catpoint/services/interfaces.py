"""
Collaborator contracts for SecurityService.

The engine only ever talks to these three interfaces; persistence,
classification and presentation live behind them.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..domain.enums import ArmingStatus, AlarmStatus
from ..domain.models import Sensor


class SecurityRepository(ABC):
    """Storage for arming status, alarm status and sensors."""

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        pass

    @abstractmethod
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        pass

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        pass

    @abstractmethod
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        pass

    @abstractmethod
    def get_sensors(self) -> set[Sensor]:
        pass

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        """Persist the current field values of a known sensor (keyed by name)."""
        pass


class SubjectDetector(ABC):
    """Image classifier that answers "is the subject in this frame"."""

    @abstractmethod
    def detect_subject(self, image: Any, confidence_threshold: float) -> bool:
        """
        Args:
            image: Camera frame
            confidence_threshold: Minimum confidence, in percent (0-100)

        Returns:
            True if the subject was found with at least that confidence
        """
        pass


class StatusListener(ABC):
    """Observer of SecurityService notifications.

    Callbacks run synchronously inside the engine call and must not call
    back into the engine.
    """

    @abstractmethod
    def notify(self, status: AlarmStatus) -> None:
        """Alarm status was written."""
        pass

    @abstractmethod
    def cat_detected(self, cat: bool) -> None:
        """A camera frame was classified."""
        pass

    @abstractmethod
    def sensor_status_changed(self) -> None:
        """Sensors were reset in bulk."""
        pass
