"""HTTP tests for the Flask JSON API."""

from __future__ import annotations

from datetime import date, timedelta

import pytest


@pytest.fixture
def user_id(client):
    response = client.post("/profiles/", json={"username": "ada", "display_name": "Ada"})
    assert response.status_code == 201
    return response.get_json()["id"]


def _create_habit(client, user_id, **payload):
    payload.setdefault("name", "Read")
    response = client.post(f"/users/{user_id}/habits/", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


class TestProfiles:
    def test_create_and_get(self, client, user_id):
        response = client.get(f"/profiles/{user_id}")
        assert response.status_code == 200
        assert response.get_json() == {
            "id": user_id,
            "username": "ada",
            "display_name": "Ada",
            "total_streak": 0,
        }

    def test_duplicate_username(self, client, user_id):
        response = client.post("/profiles/", json={"username": "ada"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "invalid_request"

    def test_username_validation(self, client):
        response = client.post("/profiles/", json={"username": "has space"})
        assert response.status_code == 400
        assert "username" in response.get_json()["fields"]

    def test_unknown_profile(self, client):
        response = client.get("/profiles/999")
        assert response.status_code == 404
        assert response.get_json()["error"] == "profile_not_found"

    def test_leaderboard(self, client, user_id):
        other = client.post("/profiles/", json={"username": "bob"}).get_json()["id"]
        habit = _create_habit(client, other)
        client.post(f"/users/{other}/habits/{habit['id']}/logs", json={"status": "done"})

        response = client.get(f"/profiles/leaderboard?user_id={user_id}&limit=1")
        data = response.get_json()

        assert response.status_code == 200
        assert [entry["username"] for entry in data["entries"]] == ["bob"]
        assert data["current_user"]["rank"] == 2

    def test_leaderboard_bad_limit(self, client):
        assert client.get("/profiles/leaderboard?limit=0").status_code == 400


class TestHabits:
    def test_create_returns_summary(self, client, user_id):
        body = _create_habit(client, user_id, name="Read", frequency="daily")

        assert body["current_streak"] == 0
        assert body["start_date"] == date.today().isoformat()
        assert body["today_status"] == "pending"
        assert body["overdue"] is True
        assert len(body["history"]) == 7

    def test_create_validation_error(self, client, user_id):
        response = client.post(f"/users/{user_id}/habits/", json={"frequency": "daily"})

        assert response.status_code == 400
        body = response.get_json()
        assert body["error"] == "validation_error"
        assert "name" in body["fields"]

    def test_create_invalid_weekday_set(self, client, user_id):
        response = client.post(
            f"/users/{user_id}/habits/",
            json={"name": "Gym", "frequency": "weekdays", "weekdays": [7]},
        )
        assert response.status_code == 400
        assert response.get_json()["error"] == "invalid_weekday_set"

    def test_create_for_unknown_user(self, client):
        response = client.post("/users/999/habits/", json={"name": "Read"})
        assert response.status_code == 404

    def test_list_and_sort(self, client, user_id):
        _create_habit(client, user_id, name="First")
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        _create_habit(client, user_id, name="Later", start_date=tomorrow)

        response = client.get(f"/users/{user_id}/habits/?sort=schedule")
        names = [habit["name"] for habit in response.get_json()["habits"]]
        assert names == ["First", "Later"]

        response = client.get(f"/users/{user_id}/habits/?sort=created")
        assert response.get_json()["sort"] == "created"

    def test_list_bad_sort(self, client, user_id):
        response = client.get(f"/users/{user_id}/habits/?sort=alphabetical")
        assert response.status_code == 400

    def test_list_unknown_user(self, client):
        response = client.get("/users/999/habits/")
        assert response.status_code == 404
        assert response.get_json()["error"] == "profile_not_found"

    def test_edit(self, client, user_id):
        habit = _create_habit(client, user_id)
        response = client.patch(
            f"/users/{user_id}/habits/{habit['id']}",
            json={"name": "Read more", "frequency": "weekdays", "weekdays": [0, 6]},
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["name"] == "Read more"
        assert body["frequency"] == "weekdays"
        assert body["weekdays"] == [0, 6]

    def test_edit_streak_is_rejected(self, client, user_id):
        habit = _create_habit(client, user_id)
        response = client.patch(
            f"/users/{user_id}/habits/{habit['id']}", json={"current_streak": 99}
        )
        assert response.status_code == 400

    def test_delete(self, client, user_id):
        habit = _create_habit(client, user_id)
        url = f"/users/{user_id}/habits/{habit['id']}"

        response = client.delete(url)
        assert response.status_code == 200
        assert response.get_json() == {"deleted": habit["id"], "total_streak": 0}

        response = client.delete(url)
        assert response.status_code == 404
        assert response.get_json()["error"] == "habit_not_found"

    def test_other_users_habit_is_not_found(self, client, user_id):
        habit = _create_habit(client, user_id)
        other = client.post("/profiles/", json={"username": "eve"}).get_json()["id"]

        response = client.delete(f"/users/{other}/habits/{habit['id']}")
        assert response.status_code == 404


class TestLogging:
    def test_log_done_then_duplicate(self, client, user_id):
        habit = _create_habit(client, user_id)
        url = f"/users/{user_id}/habits/{habit['id']}/logs"

        response = client.post(url, json={"status": "done"})
        assert response.status_code == 201
        body = response.get_json()
        assert body["current_streak"] == 1
        assert body["total_streak"] == 1
        assert body["log_date"] == date.today().isoformat()

        response = client.post(url, json={"status": "missed"})
        assert response.status_code == 409
        assert response.get_json()["error"] == "already_logged"

        profile = client.get(f"/profiles/{user_id}").get_json()
        assert profile["total_streak"] == 1

    def test_log_not_scheduled(self, client, user_id):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        habit = _create_habit(client, user_id, frequency="weekly", start_date=tomorrow)

        response = client.post(
            f"/users/{user_id}/habits/{habit['id']}/logs", json={"status": "done"}
        )
        assert response.status_code == 422
        assert response.get_json()["error"] == "not_scheduled"

    def test_log_bad_status(self, client, user_id):
        habit = _create_habit(client, user_id)
        response = client.post(
            f"/users/{user_id}/habits/{habit['id']}/logs", json={"status": "maybe"}
        )
        assert response.status_code == 400

    def test_stats(self, client, user_id):
        habit = _create_habit(client, user_id)
        _create_habit(client, user_id, name="Other")
        client.post(f"/users/{user_id}/habits/{habit['id']}/logs", json={"status": "done"})

        response = client.get(f"/users/{user_id}/habits/stats")
        assert response.get_json() == {
            "total_habits": 2,
            "active_habits": 2,
            "total_streak": 1,
            "today_completed": 1,
            "today_total": 2,
            "today_percentage": 50,
        }

    def test_chart(self, client, user_id):
        habit = _create_habit(client, user_id)
        client.post(f"/users/{user_id}/habits/{habit['id']}/logs", json={"status": "done"})

        response = client.get(f"/users/{user_id}/habits/chart")
        days = response.get_json()["days"]

        assert response.status_code == 200
        assert len(days) == 7
        assert days[-1]["date"] == date.today().isoformat()
        assert (days[-1]["scheduled"], days[-1]["completed"], days[-1]["percentage"]) == (1, 1, 100)
        assert days[0]["scheduled"] == 0

    def test_activity(self, client, user_id):
        habit = _create_habit(client, user_id)
        client.post(f"/users/{user_id}/habits/{habit['id']}/logs", json={"status": "done"})

        response = client.get(f"/users/{user_id}/habits/activity")
        items = response.get_json()["items"]

        assert response.status_code == 200
        assert sorted(item["type"] for item in items) == ["completion", "created", "streak"]
        completion = next(item for item in items if item["type"] == "completion")
        assert completion["description"].startswith('Completed "Read" on ')

    @pytest.mark.parametrize("view", ["chart", "activity", "stats"])
    def test_views_unknown_user(self, client, view):
        response = client.get(f"/users/999/habits/{view}")
        assert response.status_code == 404
        assert response.get_json()["error"] == "profile_not_found"


class TestCategories:
    def test_crud(self, client, user_id):
        base = f"/users/{user_id}/categories/"
        created = client.post(base, json={"name": "Mind"})
        assert created.status_code == 201
        category_id = created.get_json()["id"]

        habit = _create_habit(client, user_id, category_id=category_id)
        assert habit["category_id"] == category_id

        renamed = client.patch(f"{base}{category_id}", json={"name": "Focus"})
        assert renamed.get_json()["name"] == "Focus"
        assert client.get(base).get_json() == [{"id": category_id, "name": "Focus"}]

        assert client.delete(f"{base}{category_id}").status_code == 200
        missing = client.delete(f"{base}{category_id}")
        assert missing.status_code == 404
        assert missing.get_json()["error"] == "category_not_found"
        missing = client.patch(f"{base}{category_id}", json={"name": "X"})
        assert missing.status_code == 404
        assert missing.get_json()["error"] == "category_not_found"

    def test_missing_name(self, client, user_id):
        response = client.post(f"/users/{user_id}/categories/", json={})
        assert response.status_code == 400


def test_admin_recompute(client, user_id):
    habit = _create_habit(client, user_id)
    client.post(f"/users/{user_id}/habits/{habit['id']}/logs", json={"status": "done"})

    response = client.post("/admin/recompute-streaks")

    assert response.status_code == 200
    body = response.get_json()
    assert body["updated"] == 1
    assert body["changed"] == 0
    assert body["failed"] == 0


def test_unknown_route_is_json(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.get_json()["error"] == "not_found"
