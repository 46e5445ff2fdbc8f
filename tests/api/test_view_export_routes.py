"""Integration tests for the /view, /export and /notifications endpoints."""

import json

from models.errors import StorageError
from tests.api.helpers import create_via_api


class TestView:
    """Tests for month navigation and filters."""

    def test_starts_on_current_month(self, client_with_engine):
        client, _ = client_with_engine
        data = client.get("/view").json()
        assert (data["year"], data["month"]) == (2025, 1)
        assert data["search_query"] == ""
        assert set(data["selected_categories"]) == {"work", "personal", "meeting", "other"}

    def test_navigation_wraps_years(self, client_with_engine):
        client, _ = client_with_engine
        data = client.post("/view/previous").json()
        assert (data["year"], data["month"]) == (2024, 12)

        data = client.post("/view/next").json()
        data = client.post("/view/next").json()
        assert (data["year"], data["month"]) == (2025, 2)

        data = client.post("/view/today").json()
        assert (data["year"], data["month"]) == (2025, 1)

    def test_filters_limit_day_listing(self, client_with_engine):
        client, _ = client_with_engine
        create_via_api(client, title="Gym", category="personal")
        create_via_api(
            client, title="Review", category="work", start_time="11:00", end_time="12:00"
        )

        assert len(client.get("/view/days/10").json()) == 2

        data = client.post("/view/filters", json={"toggle_category": "personal"}).json()
        assert "personal" not in data["selected_categories"]
        assert [e["title"] for e in client.get("/view/days/10").json()] == ["Review"]

        client.post("/view/filters", json={"search_query": "gym"})
        assert client.get("/view/days/10").json() == []

    def test_last_category_cannot_be_deselected(self, client_with_engine):
        client, _ = client_with_engine
        for category in ("work", "personal", "meeting"):
            client.post("/view/filters", json={"toggle_category": category})
        data = client.post("/view/filters", json={"toggle_category": "other"}).json()
        assert data["selected_categories"] == ["other"]

    def test_filters_do_not_affect_validation(self, client_with_engine):
        client, _ = client_with_engine
        create_via_api(client, title="Gym", category="personal")
        client.post("/view/filters", json={"toggle_category": "personal"})

        response = client.post("/events", json={"title": "Clash", "on_date": "2025-01-10"})
        assert response.status_code == 422
        assert response.json()["kind"] == "time_conflict"


class TestExport:
    def test_csv_download(self, client_with_engine):
        client, _ = client_with_engine
        create_via_api(client, title="Standup")

        response = client.get("/export", params={"format": "csv"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert (
            response.headers["content-disposition"]
            == 'attachment; filename="calendar-events-2025-01-01.csv"'
        )
        assert '"Standup"' in response.text

    def test_json_download_holds_records(self, client_with_engine):
        client, _ = client_with_engine
        created = create_via_api(client)

        response = client.get("/export")
        assert response.headers["content-disposition"].endswith('.json"')
        records = json.loads(response.content)
        assert records[0]["id"] == created["id"]
        assert records[0]["startDate"] == "2025-01-10"

    def test_unknown_format(self, client_with_engine):
        client, _ = client_with_engine
        assert client.get("/export", params={"format": "xml"}).status_code == 422


class TestNotifications:
    def test_failed_save_is_reported_once(self, client_with_engine):
        client, engine = client_with_engine

        def broken_save(collection):
            raise StorageError("disk full")

        engine.repository.save = broken_save
        response = client.post("/events", json={"title": "Kept", "on_date": "2025-01-10"})
        assert response.status_code == 201

        notes = client.get("/notifications").json()
        assert len(notes) == 1
        assert notes[0]["level"] == "error"
        assert notes[0]["kind"] == "storage_error"
        assert client.get("/notifications").json() == []


class TestRootEndpoints:
    def test_health(self, client_with_engine):
        client, _ = client_with_engine
        assert client.get("/health").json() == {"status": "healthy"}

    def test_root(self, client_with_engine):
        client, _ = client_with_engine
        assert client.get("/").json()["docs_url"] == "/docs"
