import logging

from fastapi.testclient import TestClient

from akir_backend import server
from conftest import RecordingTransport


def test_lifespan_verifies_and_closes_transport(settings, monkeypatch, caplog):
    transport = RecordingTransport()
    monkeypatch.setattr(server, "select_transport", lambda config: transport)
    app = server.build_app(settings)

    with caplog.at_level(logging.INFO):
        with TestClient(app) as client:
            assert client.get("/health").json()["transport"] == "recording"

    assert transport.closed is True
    assert "AKIR Restaurant Backend starting on port 4000" in caplog.text
    assert "Email: Configured" in caplog.text


def test_lifespan_in_simulation_mode(settings, monkeypatch, caplog):
    monkeypatch.setattr(server, "select_transport", lambda config: None)
    app = server.build_app(settings)

    with caplog.at_level(logging.INFO):
        with TestClient(app) as client:
            response = client.post("/api/contact", json={"name": "Bob", "email": "bob@x.com", "message": "Hi"})

    assert response.json()["success"] is True
    assert "Email: Simulation" in caplog.text
    assert "[SIMULATION] Would email owner@akir.test" in caplog.text


def test_module_exposes_asgi_app():
    assert server.app.title == "AKIR Restaurant Backend"
