"""Shared fixtures for Catpoint tests."""

import os
from unittest.mock import Mock

import pytest

from catpoint.domain.enums import ArmingStatus, AlarmStatus, SensorType
from catpoint.domain.models import Sensor
from catpoint.services.interfaces import SecurityRepository, SubjectDetector, StatusListener
from catpoint.services.security_service import SecurityService


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Strip CATPOINT_* variables so settings only see what a test sets"""
    for name in list(os.environ):
        if name.upper().startswith("CATPOINT_"):
            monkeypatch.delenv(name)


@pytest.fixture
def repository():
    """Mock repository: disarmed, no alarm, no sensors"""
    repo = Mock(spec=SecurityRepository)
    repo.get_arming_status.return_value = ArmingStatus.DISARMED
    repo.get_alarm_status.return_value = AlarmStatus.NO_ALARM
    repo.get_sensors.return_value = set()
    return repo


@pytest.fixture
def detector():
    """Mock detector that sees no cat"""
    det = Mock(spec=SubjectDetector)
    det.detect_subject.return_value = False
    return det


@pytest.fixture
def listener():
    """Mock status listener"""
    return Mock(spec=StatusListener)


@pytest.fixture
def service(repository, detector, listener):
    """SecurityService wired to the mocks, with one listener registered"""
    svc = SecurityService(repository, detector)
    svc.add_status_listener(listener)
    return svc


@pytest.fixture
def door_sensor():
    """Inactive door sensor"""
    return Sensor(name="Door Sensor", sensor_type=SensorType.DOOR)


@pytest.fixture
def window_sensor():
    """Inactive window sensor"""
    return Sensor(name="Window Sensor", sensor_type=SensorType.WINDOW)


@pytest.fixture
def image():
    """Opaque camera frame"""
    return object()
