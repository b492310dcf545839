"""
tests/test_analytics_api.py
Dashboard summary and highlight view over HTTP.
"""

from datetime import date, timedelta

from sqlalchemy.exc import OperationalError

from lifelog.services.entry_repository import EntryRepository

from tests.conftest import TODAY


def test_health_check_needs_no_token(client):
    resp = client.get("/api/v1/health-check")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


class TestDashboard:
    def test_requires_authentication(self, client):
        resp = client.get("/api/v1/dashboard/stats")
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "unauthorized"

    def test_rejects_bad_token(self, client):
        resp = client.get("/api/v1/dashboard/stats", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401

    def test_empty_dashboard(self, client, auth_headers):
        resp = client.get("/api/v1/dashboard/stats", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {
            "totalEntries": 0,
            "totalExpenses": 0,
            "streak": 0,
            "topMood": None,
            "recentEntries": [],
        }

    def test_summary_with_streak_and_top_mood(self, client, auth_headers, user, make_entry):
        make_entry(user, TODAY, mood="happy", expense=10)
        make_entry(user, TODAY, mood="tired", expense=5.25)
        make_entry(user, TODAY - timedelta(days=1), mood="happy")
        make_entry(user, TODAY - timedelta(days=2), mood="happy")
        make_entry(user, TODAY - timedelta(days=4), mood="sad")

        body = client.get("/api/v1/dashboard/stats", headers=auth_headers).json()
        assert body["totalEntries"] == 5
        assert body["totalExpenses"] == 15.25
        assert body["streak"] == 3
        assert body["topMood"] == "happy"
        assert len(body["recentEntries"]) == 5
        assert body["recentEntries"][0]["entryDate"].startswith(TODAY.isoformat())

    def test_streak_survives_until_today_is_logged(self, client, auth_headers, user, make_entry):
        for offset in range(1, 4):
            make_entry(user, TODAY - timedelta(days=offset))

        body = client.get("/api/v1/dashboard/stats", headers=auth_headers).json()
        assert body["streak"] == 3

    def test_other_users_entries_are_invisible(self, client, auth_headers, other_user, make_entry):
        make_entry(other_user, TODAY)
        body = client.get("/api/v1/dashboard/stats", headers=auth_headers).json()
        assert body["totalEntries"] == 0
        assert body["streak"] == 0

    def test_repository_failure_is_internal_error(self, client, auth_headers, monkeypatch):
        def boom(self, user_id, entry_filter=None):
            raise OperationalError("SELECT 1", {}, Exception("database is gone"))

        monkeypatch.setattr(EntryRepository, "records", boom)
        resp = client.get("/api/v1/dashboard/stats", headers=auth_headers)
        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "internal_error"
        assert "recentEntries" not in resp.json()


class TestHighlight:
    URL = "/api/v1/analytics/highlight"

    def test_no_records(self, client, auth_headers):
        body = client.get(self.URL, headers=auth_headers).json()
        assert body["totalMemories"] == 0
        assert body["topMood"] == "None"
        assert body["mostActiveMonth"] == "None"
        assert body["moodSummary"] == []
        assert len(body["monthlyBreakdown"]) == 12
        assert all(m["count"] == 0 for m in body["monthlyBreakdown"])

    def test_march_is_most_active(self, client, auth_headers, user, make_entry):
        for day in range(1, 11):
            make_entry(user, date(2024, 3, day), mood="peaceful")

        body = client.get(self.URL, headers=auth_headers).json()
        assert body["totalMemories"] == 10
        assert body["mostActiveMonth"] == "March"
        assert body["monthlyBreakdown"][2] == {"month": "Mar", "count": 10}
        assert sum(m["count"] for m in body["monthlyBreakdown"]) == 10
        assert body["moodSummary"] == [{"mood": "peaceful", "emoji": "😌", "count": 10}]
        assert body["topMood"] == "peaceful"

    def test_previous_years_count_in_total_but_not_in_months(self, client, auth_headers, user, make_entry):
        make_entry(user, date(2023, 3, 1))
        make_entry(user, date(2024, 2, 1))

        body = client.get(self.URL, headers=auth_headers).json()
        assert body["totalMemories"] == 2
        assert sum(m["count"] for m in body["monthlyBreakdown"]) == 1
        assert body["mostActiveMonth"] == "February"

    def test_mood_summary_sums_to_total(self, client, auth_headers, user, make_entry):
        moods = ["happy", "happy", "sad", "anxious", "happy", "sad", "meh"]
        for i, mood in enumerate(moods):
            make_entry(user, date(2024, 5, 1 + i), mood=mood)

        body = client.get(self.URL, headers=auth_headers).json()
        counts = [m["count"] for m in body["moodSummary"]]
        assert sum(counts) == body["totalMemories"] == len(moods)
        assert counts == sorted(counts, reverse=True)
        assert body["moodSummary"][-1]["emoji"] == "🔹"

    def test_filters_apply_to_every_figure(self, client, auth_headers, user, make_entry):
        make_entry(user, date(2024, 1, 10), mood="happy", tags=["Favorite"])
        make_entry(user, date(2024, 2, 10), mood="happy")
        make_entry(user, date(2024, 2, 11), mood="sad", tags=["Favorite"])
        make_entry(user, date(2024, 4, 1), mood="happy", tags=["Favorite"])

        body = client.get(
            self.URL,
            headers=auth_headers,
            params={"favorite": "true", "startDate": "2024-01-01", "endDate": "2024-03-31"},
        ).json()
        assert body["totalMemories"] == 2
        assert sum(m["count"] for m in body["monthlyBreakdown"]) == 2
        assert {m["mood"] for m in body["moodSummary"]} == {"happy", "sad"}

        body = client.get(self.URL, headers=auth_headers, params={"mood": "happy"}).json()
        assert body["totalMemories"] == 3
        assert body["mostActiveMonth"] == "January"
        assert body["moodSummary"] == [{"mood": "happy", "emoji": "😊", "count": 3}]

    def test_top_place_has_no_data(self, client, auth_headers, user, make_entry):
        make_entry(user, TODAY)
        assert client.get(self.URL, headers=auth_headers).json()["topPlace"] == "None"

    def test_malformed_dates_are_bad_requests(self, client, auth_headers):
        resp = client.get(self.URL, headers=auth_headers, params={"startDate": "yesterday"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "validation_error"

    def test_inverted_range_is_bad_request(self, client, auth_headers):
        resp = client.get(self.URL, headers=auth_headers, params={"startDate": "2024-05-01", "endDate": "2024-04-01"})
        assert resp.status_code == 400

    def test_malformed_favorite_is_bad_request(self, client, auth_headers):
        resp = client.get(self.URL, headers=auth_headers, params={"favorite": "sometimes"})
        assert resp.status_code == 400

    def test_repeated_calls_are_identical(self, client, auth_headers, user, make_entry):
        make_entry(user, date(2024, 6, 1), mood="excited")
        make_entry(user, date(2024, 6, 14), mood="tired")

        first = client.get(self.URL, headers=auth_headers).json()
        second = client.get(self.URL, headers=auth_headers).json()
        assert first == second

    def test_offset_timestamps_bound_by_reference_day(self, client, auth_headers, user, make_entry):
        make_entry(user, TODAY, mood="calm")
        make_entry(user, TODAY - timedelta(days=2), mood="calm")

        # 22:00 at UTC-5 on the 14th is the 15th in the reference zone
        params = {"startDate": "2024-06-14T22:00:00-05:00", "endDate": "2024-06-14T22:00:00-05:00"}
        body = client.get(self.URL, headers=auth_headers, params=params).json()
        assert body["totalMemories"] == 1
