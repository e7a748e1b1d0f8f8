"""
Catpoint Control API

Provides REST API for:
- Arming / disarming
- Sensor management and activation
- Camera frame submission
- Recent notification log
"""

import logging
import threading
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import SecurityConfig
from ..domain.enums import ArmingStatus, AlarmStatus, SensorType
from ..domain.models import Sensor
from ..services.detector import FakeCatDetector, decode_image
from ..services.event_log import EventLogListener
from ..services.interfaces import SecurityRepository, SubjectDetector
from ..services.repository import (
    InMemorySecurityRepository,
    JsonSecurityRepository,
    SensorNotFoundError,
)
from ..services.security_service import SecurityService


logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models
# =============================================================================

class ArmingChange(BaseModel):
    arming_status: ArmingStatus


class SensorCreate(BaseModel):
    name: str = Field(..., min_length=1)
    sensor_type: SensorType


class SensorActivation(BaseModel):
    active: bool


class StatusResponse(BaseModel):
    arming_status: ArmingStatus
    arming_description: str
    alarm_status: AlarmStatus
    alarm_description: str
    cat_detected: bool
    sensor_count: int


# =============================================================================
# Application State
# =============================================================================

class AppState:
    """Everything the endpoints share: one engine and its collaborators."""

    def __init__(
        self,
        config: SecurityConfig,
        repository: Optional[SecurityRepository] = None,
        detector: Optional[SubjectDetector] = None,
    ):
        self.config = config
        self.repository = repository or self._make_repository(config)
        self.detector = detector or FakeCatDetector(seed=config.detector_seed)
        self.service = SecurityService(self.repository, self.detector)
        self.event_log = EventLogListener(max_events=config.max_events)
        self.service.add_status_listener(self.event_log)

        # SecurityService is not thread-safe
        self.lock = threading.Lock()

    @staticmethod
    def _make_repository(config: SecurityConfig) -> SecurityRepository:
        if config.state_file:
            return JsonSecurityRepository(config.state_file)
        return InMemorySecurityRepository()

    def find_sensor(self, name: str) -> Sensor:
        for sensor in self.service.get_sensors():
            if sensor.name == name:
                return sensor
        raise SensorNotFoundError(name)

    def status(self) -> StatusResponse:
        arming = self.service.get_arming_status()
        alarm = self.service.get_alarm_status()
        return StatusResponse(
            arming_status=arming,
            arming_description=arming.description,
            alarm_status=alarm,
            alarm_description=alarm.description,
            cat_detected=self.service.is_cat_detected(),
            sensor_count=len(self.service.get_sensors()),
        )


def _sensor_dict(sensor: Sensor) -> dict:
    return {
        "name": sensor.name,
        "sensor_type": sensor.sensor_type.value,
        "active": sensor.active,
    }


# =============================================================================
# FastAPI Application
# =============================================================================

def create_app(
    config: Optional[SecurityConfig] = None,
    repository: Optional[SecurityRepository] = None,
    detector: Optional[SubjectDetector] = None,
) -> FastAPI:
    """Build the control API around a fresh AppState.

    Used as a uvicorn factory; nothing is read from the environment or
    disk until this is called.
    """
    config = config or SecurityConfig()
    state = AppState(config, repository=repository, detector=detector)

    app = FastAPI(
        title="Catpoint Control",
        description="Arming, sensor and camera control for the Catpoint alarm",
        version="1.0.0",
    )
    app.state.security = state

    @app.exception_handler(SensorNotFoundError)
    async def sensor_not_found(request: Request, exc: SensorNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    # -------------------------------------------------------------------------
    # Status & arming
    # -------------------------------------------------------------------------

    @app.get("/api/status", response_model=StatusResponse)
    async def get_status():
        """Current arming and alarm status."""
        with state.lock:
            return state.status()

    @app.post("/api/arming", response_model=StatusResponse)
    async def set_arming(change: ArmingChange):
        """Arm or disarm the system."""
        with state.lock:
            state.service.set_arming_status(change.arming_status)
            return state.status()

    # -------------------------------------------------------------------------
    # Sensors
    # -------------------------------------------------------------------------

    @app.get("/api/sensors")
    async def list_sensors():
        """List all sensors."""
        with state.lock:
            sensors = sorted(state.service.get_sensors())
            return {"sensors": [_sensor_dict(s) for s in sensors]}

    @app.post("/api/sensors", status_code=201)
    async def create_sensor(body: SensorCreate):
        """Add a new, inactive sensor."""
        with state.lock:
            if any(s.name == body.name for s in state.service.get_sensors()):
                raise HTTPException(400, f"Sensor {body.name} already exists")

            sensor = Sensor(name=body.name, sensor_type=body.sensor_type)
            state.service.add_sensor(sensor)
            logger.info("Sensor added: %s (%s)", sensor.name, sensor.sensor_type.value)
            return {"status": "created", "sensor": _sensor_dict(sensor)}

    @app.delete("/api/sensors/{name}")
    async def delete_sensor(name: str):
        """Remove a sensor."""
        with state.lock:
            sensor = state.find_sensor(name)
            state.service.remove_sensor(sensor)
            logger.info("Sensor removed: %s", name)
            return {"status": "deleted", "name": name}

    @app.post("/api/sensors/{name}/activation")
    async def change_activation(name: str, body: SensorActivation):
        """Activate or deactivate a sensor."""
        with state.lock:
            sensor = state.find_sensor(name)
            state.service.change_sensor_activation_status(sensor, body.active)
            return {
                "sensor": _sensor_dict(sensor),
                "alarm_status": state.service.get_alarm_status().value,
            }

    # -------------------------------------------------------------------------
    # Camera
    # -------------------------------------------------------------------------

    @app.post("/api/camera/image")
    async def submit_image(request: Request):
        """Classify an encoded camera frame sent as the raw request body."""
        data = await request.body()
        try:
            frame = decode_image(data)
        except ValueError as e:
            raise HTTPException(400, str(e))

        with state.lock:
            state.service.process_image(frame)
            return {
                "cat_detected": state.service.is_cat_detected(),
                "alarm_status": state.service.get_alarm_status().value,
            }

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    @app.get("/api/events")
    async def list_events():
        """Recent notifications, oldest first."""
        with state.lock:
            return {"events": state.event_log.events()}

    @app.delete("/api/events")
    async def clear_events():
        with state.lock:
            state.event_log.clear()
        return {"status": "cleared"}

    return app

