"""
Security repositories.

InMemorySecurityRepository keeps everything in process memory.
JsonSecurityRepository writes the same state through to a JSON file
after each mutation so arming, alarm and sensors survive a restart.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..domain.enums import ArmingStatus, AlarmStatus
from ..domain.models import Sensor, SecurityState
from .interfaces import SecurityRepository


logger = logging.getLogger(__name__)


class SensorNotFoundError(KeyError):
    """Raised when updating a sensor the repository does not know."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Sensor {self.name!r} not found"


# =============================================================================
# In-memory
# =============================================================================

class InMemorySecurityRepository(SecurityRepository):
    """Repository backed by plain attributes and a dict of sensors by name."""

    def __init__(self, state: Optional[SecurityState] = None):
        state = state or SecurityState()
        self._arming_status = state.arming_status
        self._alarm_status = state.alarm_status
        self._sensors: dict[str, Sensor] = {s.name: s for s in state.sensors}

    def get_arming_status(self) -> ArmingStatus:
        return self._arming_status

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self._arming_status = arming_status
        self._changed()

    def get_alarm_status(self) -> AlarmStatus:
        return self._alarm_status

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self._alarm_status = alarm_status
        self._changed()

    def get_sensors(self) -> set[Sensor]:
        return set(self._sensors.values())

    def get_sensor(self, name: str) -> Optional[Sensor]:
        return self._sensors.get(name)

    def add_sensor(self, sensor: Sensor) -> None:
        self._sensors[sensor.name] = sensor
        self._changed()

    def remove_sensor(self, sensor: Sensor) -> None:
        if self._sensors.pop(sensor.name, None) is not None:
            self._changed()

    def update_sensor(self, sensor: Sensor) -> None:
        if sensor.name not in self._sensors:
            raise SensorNotFoundError(sensor.name)
        self._sensors[sensor.name] = sensor
        self._changed()

    def snapshot(self) -> SecurityState:
        """Copy of the current state."""
        return SecurityState(
            arming_status=self._arming_status,
            alarm_status=self._alarm_status,
            sensors=[s.model_copy() for s in sorted(self._sensors.values())],
        )

    def _changed(self) -> None:
        """Hook called after every mutation."""
        pass


# =============================================================================
# JSON file
# =============================================================================

class JsonSecurityRepository(InMemorySecurityRepository):
    """In-memory repository with write-through to a JSON state file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> SecurityState:
        if not self.path.exists():
            logger.info("No state file at %s, starting fresh", self.path)
            return SecurityState()

        state = SecurityState.model_validate_json(self.path.read_text(encoding="utf-8"))
        logger.info(
            "Loaded state from %s: %s/%s, %d sensors",
            self.path, state.arming_status.value, state.alarm_status.value, len(state.sensors),
        )
        return state

    def _changed(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = self.snapshot().model_dump_json(indent=2)

        # Write to a sibling temp file first so a crash never leaves half a file
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise
