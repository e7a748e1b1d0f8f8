"""
Catpoint Security Service

Receives arming changes, sensor changes and camera frames, forwards
updates to the repository and decides the alarm status.

Alarm transitions:
    NO_ALARM → PENDING_ALARM → ALARM

Key rules:
1. Disarming always forces NO_ALARM
2. Arming from DISARMED resets every sensor to inactive
3. While ALARM, sensor changes never move the alarm status
4. A cat on camera while ARMED_HOME forces ALARM
5. No cat and no active sensor forces NO_ALARM
"""

import logging
from typing import Any

from ..domain.enums import ArmingStatus, AlarmStatus
from ..domain.models import Sensor
from .interfaces import SecurityRepository, SubjectDetector, StatusListener


logger = logging.getLogger(__name__)

CAT_CONFIDENCE_THRESHOLD = 50.0


class SecurityService:
    """Alarm decision engine.

    Holds no durable state: everything but the last cat-detection result
    lives in the repository. Not thread-safe; callers serialize access.
    """

    def __init__(
        self,
        security_repository: SecurityRepository,
        detector: SubjectDetector,
    ):
        self.security_repository = security_repository
        self.detector = detector
        self._status_listeners: set[StatusListener] = set()
        self._cat_detected = False

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_status_listener(self, listener: StatusListener) -> None:
        self._status_listeners.add(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        self._status_listeners.discard(listener)

    # =========================================================================
    # Arming
    # =========================================================================

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Set the arming status. May also change the alarm status and
        reset sensors.
        """
        logger.info("Arming status -> %s", arming_status.value)

        if arming_status == ArmingStatus.DISARMED:
            self.security_repository.set_arming_status(arming_status)
            self.set_alarm_status(AlarmStatus.NO_ALARM)
            return

        if self.get_arming_status() == ArmingStatus.DISARMED:
            self.security_repository.set_arming_status(arming_status)
            # got armed, start from a clean slate
            self._deactivate_all_sensors()
        else:
            # switching between armed modes keeps sensor state
            self.security_repository.set_arming_status(arming_status)

        if arming_status == ArmingStatus.ARMED_HOME and self._cat_detected:
            self.set_alarm_status(AlarmStatus.ALARM)

    def _deactivate_all_sensors(self) -> None:
        """Deactivate every sensor, then notify listeners once."""
        for sensor in sorted(self.get_sensors()):
            self.change_sensor_activation_status(sensor, False)

        for listener in list(self._status_listeners):
            listener.sensor_status_changed()

    # =========================================================================
    # Alarm
    # =========================================================================

    def set_alarm_status(self, status: AlarmStatus) -> None:
        """Persist the alarm status and notify all listeners.

        Always writes and notifies, even if the status is unchanged.
        """
        if status == AlarmStatus.ALARM:
            logger.warning("Alarm status -> %s", status.value)
        else:
            logger.info("Alarm status -> %s", status.value)

        self.security_repository.set_alarm_status(status)
        for listener in list(self._status_listeners):
            listener.notify(status)

    def _handle_sensor_activated(self) -> None:
        alarm_status = self.security_repository.get_alarm_status()
        if alarm_status == AlarmStatus.NO_ALARM:
            self.set_alarm_status(AlarmStatus.PENDING_ALARM)
        elif alarm_status == AlarmStatus.PENDING_ALARM:
            self.set_alarm_status(AlarmStatus.ALARM)

    def _handle_sensor_deactivated(self) -> None:
        if self.security_repository.get_alarm_status() == AlarmStatus.PENDING_ALARM:
            self.set_alarm_status(AlarmStatus.NO_ALARM)

    # =========================================================================
    # Sensors
    # =========================================================================

    def change_sensor_activation_status(self, sensor: Sensor, active: bool) -> None:
        """Change a sensor's active flag and update the alarm status if needed.

        The sensor is written to the repository exactly once, whether or
        not the alarm status moved.
        """
        if self.get_alarm_status() != AlarmStatus.ALARM:
            if active and self.get_arming_status() != ArmingStatus.DISARMED:
                # inactive → active, or a repeated trip of an active sensor
                self._handle_sensor_activated()
            elif sensor.active and not active:
                self._handle_sensor_deactivated()

        logger.debug("Sensor %s: active %s -> %s", sensor.name, sensor.active, active)
        sensor.active = active
        self.security_repository.update_sensor(sensor)

    # =========================================================================
    # Camera
    # =========================================================================

    def process_image(self, image: Any) -> None:
        """Classify a camera frame and update the alarm status."""
        self._cat_detected = self.detector.detect_subject(image, CAT_CONFIDENCE_THRESHOLD)
        self._on_cat_detected(self._cat_detected)

    def _on_cat_detected(self, cat: bool) -> None:
        if cat and self.get_arming_status() == ArmingStatus.ARMED_HOME:
            self.set_alarm_status(AlarmStatus.ALARM)
        elif not cat and self._all_sensors_inactive():
            self.set_alarm_status(AlarmStatus.NO_ALARM)

        for listener in list(self._status_listeners):
            listener.cat_detected(cat)

    def _all_sensors_inactive(self) -> bool:
        return not any(sensor.active for sensor in self.get_sensors())

    def is_cat_detected(self) -> bool:
        """Result of the last processed frame (False before any frame)."""
        return self._cat_detected

    # =========================================================================
    # Pass-through
    # =========================================================================

    def get_alarm_status(self) -> AlarmStatus:
        return self.security_repository.get_alarm_status()

    def get_arming_status(self) -> ArmingStatus:
        return self.security_repository.get_arming_status()

    def get_sensors(self) -> set[Sensor]:
        return self.security_repository.get_sensors()

    def add_sensor(self, sensor: Sensor) -> None:
        self.security_repository.add_sensor(sensor)

    def remove_sensor(self, sensor: Sensor) -> None:
        self.security_repository.remove_sensor(sensor)
