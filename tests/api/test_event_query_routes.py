"""Integration tests for the event log query endpoints.

Tests verify listing with filters and pagination, the last-event and
count routes, and clearing the log.
"""

import pytest


@pytest.fixture
def client_with_events(client_with_simulator):
    """Provide a client whose simulator has two calls logged.

    Log order: call_start(call-a), call_start(call-b), call_end(call-a).
    """
    client, simulator = client_with_simulator
    simulator.emit_call_start(from_number="1", to="2", call_id="call-a")
    simulator.emit_call_start(from_number="3", to="4", call_id="call-b")
    simulator.emit_call_end("call-a", 12)
    return client, simulator


class TestListEvents:
    """Tests for GET /events."""

    def test_list_all(self, client_with_events):
        """Test listing every event in log order."""
        client, _ = client_with_events

        response = client.get("/events")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["returned"] == 3
        assert [e["type"] for e in data["events"]] == ["call_start", "call_start", "call_end"]

    def test_empty_log(self, client_with_simulator):
        """Test listing an empty log."""
        client, _ = client_with_simulator

        response = client.get("/events")

        assert response.json() == {"events": [], "total": 0, "returned": 0}

    def test_filter_by_type(self, client_with_events):
        """Test filtering by event type."""
        client, _ = client_with_events

        data = client.get("/events", params={"type": "call_start"}).json()

        assert data["total"] == 2
        assert {e["call_id"] for e in data["events"]} == {"call-a", "call-b"}

    def test_filter_by_call_id(self, client_with_events):
        """Test filtering by call id."""
        client, _ = client_with_events

        data = client.get("/events", params={"call_id": "call-a"}).json()

        assert [e["type"] for e in data["events"]] == ["call_start", "call_end"]

    def test_combined_filters(self, client_with_events):
        """Test filtering by type and call id together."""
        client, _ = client_with_events

        data = client.get("/events", params={"type": "call_end", "call_id": "call-b"}).json()

        assert data["total"] == 0

    def test_pagination(self, client_with_events):
        """Test limit and offset.

        Verifies:
        - total counts every match
        - returned counts the page only
        """
        client, _ = client_with_events

        data = client.get("/events", params={"limit": 1, "offset": 1}).json()

        assert data["total"] == 3
        assert data["returned"] == 1
        assert data["events"][0]["call_id"] == "call-b"

    @pytest.mark.parametrize("params", [{"limit": 0}, {"offset": -1}])
    def test_invalid_pagination(self, client_with_simulator, params):
        """Test that out-of-range pagination is rejected."""
        client, _ = client_with_simulator

        response = client.get("/events", params=params)

        assert response.status_code == 422


class TestLastEvent:
    """Tests for GET /events/last."""

    def test_last_event(self, client_with_events):
        """Test getting the most recent event."""
        client, _ = client_with_events

        response = client.get("/events/last")

        assert response.status_code == 200
        assert response.json()["type"] == "call_end"
        assert response.json()["duration"] == 12

    def test_last_event_of_type(self, client_with_events):
        """Test getting the most recent event of one type."""
        client, _ = client_with_events

        response = client.get("/events/last", params={"type": "call_start"})

        assert response.json()["call_id"] == "call-b"

    def test_empty_log_returns_404(self, client_with_simulator):
        """Test that an empty log reports not found."""
        client, _ = client_with_simulator

        response = client.get("/events/last")

        assert response.status_code == 404
        assert response.json()["detail"] == "No events in log"

    def test_missing_type_returns_404(self, client_with_events):
        """Test that a type with no events reports not found."""
        client, _ = client_with_events

        response = client.get("/events/last", params={"type": "screen_pop"})

        assert response.status_code == 404
        assert response.json()["detail"] == "No screen_pop events in log"


class TestCountEvents:
    """Tests for GET /events/count."""

    def test_count_all(self, client_with_events):
        """Test counting every event."""
        client, _ = client_with_events

        assert client.get("/events/count").json() == {"type": None, "count": 3}

    def test_count_by_type(self, client_with_events):
        """Test counting one type."""
        client, _ = client_with_events

        data = client.get("/events/count", params={"type": "call_end"}).json()

        assert data["type"] == "call_end"
        assert data["count"] == 1


class TestClearLog:
    """Tests for DELETE /events."""

    def test_clear_log(self, client_with_events):
        """Test clearing the log.

        Verifies:
        - The number of removed events is reported
        - The log is empty afterwards
        - events_processed and the connection are unchanged
        """
        client, simulator = client_with_events

        response = client.delete("/events")

        assert response.status_code == 200
        assert response.json() == {"cleared": 3}
        assert simulator.get_event_log() == []
        status = client.get("/simulator/status").json()
        assert status["events_processed"] == 3
        assert status["connected"] is True

    def test_clear_works_while_disconnected(self, client_without_connect):
        """Test that queries and clearing do not require a connection."""
        client, _ = client_without_connect

        assert client.get("/events").status_code == 200
        assert client.delete("/events").json() == {"cleared": 0}
