"""
Tests for the control API
"""

import importlib
from unittest.mock import MagicMock, Mock, patch

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from catpoint import server
from catpoint.api.manager import create_app
from catpoint.config import SecurityConfig
from catpoint.services.interfaces import SubjectDetector
from catpoint.services.repository import InMemorySecurityRepository


@pytest.fixture
def cat_detector():
    """Mock detector that sees no cat until told otherwise"""
    det = Mock(spec=SubjectDetector)
    det.detect_subject.return_value = False
    return det


@pytest.fixture
def app(cat_detector):
    """Control API over an in-memory repository"""
    return create_app(
        SecurityConfig(),
        repository=InMemorySecurityRepository(),
        detector=cat_detector,
    )


@pytest.fixture
def client(app):
    """Test client for the control API"""
    return TestClient(app)


@pytest.fixture
def png_bytes():
    """A small black PNG"""
    ok, encoded = cv2.imencode(".png", np.zeros((8, 8, 3), dtype=np.uint8))
    assert ok
    return encoded.tobytes()


@pytest.fixture
def corrupt_state_file(tmp_path, monkeypatch):
    """CATPOINT_STATE_FILE pointing at a file that does not validate"""
    path = tmp_path / "state.json"
    path.write_text('{"arming_status": "x"}')
    monkeypatch.setenv("CATPOINT_STATE_FILE", str(path))
    return path


def add_sensor(client, name="Front Door", sensor_type="door"):
    """Create a sensor through the API and return its JSON"""
    response = client.post("/api/sensors", json={"name": name, "sensor_type": sensor_type})
    assert response.status_code == 201
    return response.json()


class TestControlAPI:
    """Control API test suite"""

    def test_initial_status(self, client):
        """A fresh system is disarmed, quiet and empty"""
        data = client.get("/api/status").json()

        assert data["arming_status"] == "disarmed"
        assert data["alarm_status"] == "no_alarm"
        assert data["alarm_description"] == "Cool and Good"
        assert data["cat_detected"] is False
        assert data["sensor_count"] == 0

    def test_sensor_crud(self, client):
        """Sensors can be added, listed and deleted"""
        add_sensor(client, "Front Door")
        add_sensor(client, "Hall", "motion")

        sensors = client.get("/api/sensors").json()["sensors"]
        assert [s["name"] for s in sensors] == ["Front Door", "Hall"]
        assert sensors[1]["sensor_type"] == "motion"

        assert client.delete("/api/sensors/Hall").status_code == 200
        assert client.delete("/api/sensors/Hall").status_code == 404
        assert len(client.get("/api/sensors").json()["sensors"]) == 1

    def test_duplicate_sensor_rejected(self, client):
        """A second sensor with the same name is a 400"""
        add_sensor(client)
        response = client.post("/api/sensors", json={"name": "Front Door", "sensor_type": "window"})
        assert response.status_code == 400

    def test_invalid_sensor_type_rejected(self, client):
        """Unknown sensor types fail validation"""
        response = client.post("/api/sensors", json={"name": "Attic", "sensor_type": "laser"})
        assert response.status_code == 422

    def test_armed_trips_escalate(self, client):
        """Trips escalate to ALARM, which only disarming clears"""
        add_sensor(client)
        client.post("/api/arming", json={"arming_status": "armed_away"})

        first = client.post("/api/sensors/Front Door/activation", json={"active": True}).json()
        assert first["alarm_status"] == "pending_alarm"
        assert first["sensor"]["active"] is True

        second = client.post("/api/sensors/Front Door/activation", json={"active": True}).json()
        assert second["alarm_status"] == "alarm"

        third = client.post("/api/sensors/Front Door/activation", json={"active": False}).json()
        assert third["alarm_status"] == "alarm"
        assert third["sensor"]["active"] is False

        disarmed = client.post("/api/arming", json={"arming_status": "disarmed"}).json()
        assert disarmed["alarm_status"] == "no_alarm"

    def test_activation_of_unknown_sensor(self, client):
        """Activating an unknown sensor is a 404 naming it"""
        response = client.post("/api/sensors/Nowhere/activation", json={"active": True})
        assert response.status_code == 404
        assert "Nowhere" in response.json()["detail"]

    def test_arming_resets_sensors(self, client):
        """Arming from disarmed resets sensors and logs one batch event"""
        add_sensor(client)
        client.post("/api/sensors/Front Door/activation", json={"active": True})

        client.post("/api/arming", json={"arming_status": "armed_home"})

        sensors = client.get("/api/sensors").json()["sensors"]
        assert sensors[0]["active"] is False
        events = client.get("/api/events").json()["events"]
        assert events[-1]["type"] == "sensor_status_changed"

    def test_cat_while_armed_home(self, client, cat_detector, png_bytes):
        """A cat frame while armed home raises the alarm"""
        client.post("/api/arming", json={"arming_status": "armed_home"})
        cat_detector.detect_subject.return_value = True

        response = client.post(
            "/api/camera/image", content=png_bytes, headers={"Content-Type": "image/png"}
        )

        assert response.status_code == 200
        assert response.json() == {"cat_detected": True, "alarm_status": "alarm"}
        frame, threshold = cat_detector.detect_subject.call_args.args
        assert frame.shape == (8, 8, 3)
        assert threshold == 50.0

    def test_cat_then_arm_home(self, client, cat_detector, png_bytes):
        """A cat seen while disarmed alarms once the system is armed home"""
        cat_detector.detect_subject.return_value = True
        client.post("/api/camera/image", content=png_bytes)

        data = client.post("/api/arming", json={"arming_status": "armed_home"}).json()

        assert data["cat_detected"] is True
        assert data["alarm_status"] == "alarm"

    def test_bad_image_rejected(self, client, cat_detector):
        """Non-image bodies are a 400 and never reach the detector"""
        response = client.post("/api/camera/image", content=b"definitely not a png")

        assert response.status_code == 400
        cat_detector.detect_subject.assert_not_called()

    def test_events(self, client):
        """Notifications are listed and can be cleared"""
        client.post("/api/arming", json={"arming_status": "disarmed"})

        events = client.get("/api/events").json()["events"]
        assert [e["type"] for e in events] == ["alarm_status"]

        client.delete("/api/events")
        assert client.get("/api/events").json()["events"] == []

    def test_event_endpoints_take_the_lock(self, app, client):
        """Event listing and clearing hold the shared lock like every other endpoint"""
        lock = MagicMock()
        app.state.security.lock = lock

        client.get("/api/events")
        client.delete("/api/events")

        assert lock.__enter__.call_count == 2
        assert lock.__exit__.call_count == 2


class TestAppFactory:
    """create_app and server wiring"""

    def test_import_ignores_environment(self, corrupt_state_file):
        """Importing the API module reads neither the environment nor the state file"""
        import catpoint.api.manager as manager

        reloaded = importlib.reload(manager)

        assert not hasattr(reloaded, "app")
        app = reloaded.create_app(SecurityConfig(), repository=InMemorySecurityRepository())
        assert TestClient(app).get("/api/status").status_code == 200

    def test_factory_reads_state_file_when_called(self, corrupt_state_file):
        """The state file is only opened when an app is built from settings"""
        with pytest.raises(ValidationError):
            create_app()

    def test_factory_uses_state_file(self, tmp_path, monkeypatch):
        """Settings with a state file give a persistent app"""
        path = tmp_path / "state.json"
        monkeypatch.setenv("CATPOINT_STATE_FILE", str(path))

        client = TestClient(create_app())
        add_sensor(client)

        assert "Front Door" in path.read_text()

    def test_server_runs_factory(self, monkeypatch):
        """The launcher hands uvicorn the app factory"""
        monkeypatch.setattr("sys.argv", ["catpoint-server", "--port", "9001"])

        with patch("catpoint.server.uvicorn.run") as run:
            server.main()

        args, kwargs = run.call_args
        assert args == ("catpoint.api.manager:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 9001
