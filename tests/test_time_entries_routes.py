"""Tests for time categories, time entries and running-timer handling."""

import os
import sys
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
TEST_DB_URL = f"sqlite:///{_test_db_file.name}"
os.environ["DATABASE_URL"] = TEST_DB_URL
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient
from sqlalchemy import select

from projecthub.api.server import create_app
from projecthub.db import get_session, reset_db
from projecthub.db.models import TimeEntry
from projecthub.db.repositories import time_repo


def _ago(**delta):
    return (datetime.now(timezone.utc) - timedelta(**delta)).isoformat()


class TestTimeTracking(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        reset_db(TEST_DB_URL)
        cls.client = TestClient(create_app())

    def setUp(self):
        project = self.client.post("/api/projects", json={"name": f"Timesheet {self._testMethodName}"}).json()
        self.project_id = project["id"]
        self.base = f"/api/projects/{self.project_id}"
        email = f"{self._testMethodName}@example.com"
        self.user_id = self.client.post("/api/users", json={"email": email}).json()["id"]

    def _entry(self, **fields):
        body = {"description": "work", "startTime": _ago(hours=1), "userId": self.user_id, **fields}
        return self.client.post(f"{self.base}/time-entries", json=body)

    def test_required_fields(self):
        for missing in ("description", "startTime", "userId"):
            body = {"description": "work", "startTime": _ago(hours=1), "userId": self.user_id}
            del body[missing]
            r = self.client.post(f"{self.base}/time-entries", json=body)
            self.assertEqual(r.status_code, 400, missing)
            self.assertEqual(r.json(), {"error": "Description, start time, and user ID are required"})

    def test_unknown_user_and_project(self):
        self.assertEqual(self._entry(userId="ghost").status_code, 404)
        r = self.client.post(
            "/api/projects/ghost/time-entries",
            json={"description": "work", "startTime": _ago(hours=1), "userId": self.user_id},
        )
        self.assertEqual(r.status_code, 404)

    def test_one_running_timer_per_user(self):
        first = self._entry(isRunning=True)
        self.assertEqual(first.status_code, 201, first.text)
        self.assertTrue(first.json()["isRunning"])
        second = self._entry(isRunning=True)
        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.json(), {"error": "User already has a running timer"})

        other_project = self.client.post("/api/projects", json={"name": "Elsewhere"}).json()
        elsewhere = self.client.post(
            f"/api/projects/{other_project['id']}/time-entries",
            json={"description": "x", "startTime": _ago(minutes=5), "userId": self.user_id, "isRunning": True},
        )
        self.assertEqual(elsewhere.status_code, 400)
        with get_session() as session:
            entries = session.scalars(select(TimeEntry).where(TimeEntry.user_id == self.user_id)).all()
            self.assertEqual([e.id for e in entries], [first.json()["id"]])
            self.assertTrue(entries[0].is_running)

        stopped = self._entry(endTime=_ago(minutes=30), duration=1800)
        self.assertEqual(stopped.status_code, 201, stopped.text)

    def test_restarting_checks_running_timer(self):
        running = self._entry(isRunning=True).json()
        idle = self._entry(endTime=_ago(minutes=10)).json()
        r = self.client.put(f"{self.base}/time-entries/{idle['id']}", json={"isRunning": True})
        self.assertEqual(r.status_code, 400)
        ok = self.client.put(f"{self.base}/time-entries/{running['id']}", json={"isRunning": True, "notes": "n"})
        self.assertEqual(ok.status_code, 200, ok.text)

    def test_stop_without_end_time_uses_now(self):
        entry = self._entry(isRunning=True).json()
        r = self.client.put(f"{self.base}/time-entries/{entry['id']}", json={"isRunning": False})
        self.assertEqual(r.status_code, 200, r.text)
        body = r.json()
        self.assertFalse(body["isRunning"])
        self.assertIsNotNone(body["endTime"])
        self.assertGreaterEqual(body["duration"], 3590)
        self.assertLess(body["duration"], 3700)

    def test_stop_with_end_time(self):
        start = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
        entry = self._entry(isRunning=True, startTime=start.isoformat()).json()
        r = self.client.put(
            f"{self.base}/time-entries/{entry['id']}",
            json={"isRunning": False, "endTime": (start + timedelta(minutes=90)).isoformat()},
        )
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["duration"], 5400)

    def test_clear_running(self):
        self._entry(isRunning=True)
        r = self.client.post(f"{self.base}/time-entries/clear-running", json={"userId": self.user_id})
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json(), {"message": "Cleared 1 running timer(s)", "count": 1})
        listed = self.client.get(f"{self.base}/time-entries", params={"isRunning": "true"}).json()
        self.assertEqual(listed["timeEntries"], [])
        again = self.client.post(f"{self.base}/time-entries/clear-running", json={"userId": self.user_id})
        self.assertEqual(again.json()["count"], 0)
        self.assertEqual(self.client.post(f"{self.base}/time-entries/clear-running", json={}).status_code, 400)

    def test_list_newest_first_and_delete(self):
        old = self._entry(startTime=_ago(days=2), endTime=_ago(days=2, hours=-1)).json()
        new = self._entry(startTime=_ago(hours=2), endTime=_ago(hours=1)).json()
        listed = self.client.get(f"{self.base}/time-entries").json()
        self.assertEqual([e["id"] for e in listed["timeEntries"]], [new["id"], old["id"]])
        self.assertEqual(listed["pagination"]["total"], 2)

        self.assertEqual(self.client.delete(f"{self.base}/time-entries/{old['id']}").status_code, 200)
        self.assertEqual(self.client.get(f"{self.base}/time-entries/{old['id']}").status_code, 404)

    def test_stop_running_for_user(self):
        self._entry(isRunning=True)
        self.assertEqual(len([t for t in time_repo.list_running_timers() if t["userId"] == self.user_id]), 1)
        self.assertEqual(time_repo.stop_running_for_user(self.user_id), 1)
        self.assertEqual(time_repo.stop_running_for_user(self.user_id), 0)


class TestTimeCategories(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        reset_db(TEST_DB_URL)
        cls.client = TestClient(create_app())
        project = cls.client.post("/api/projects", json={"name": "Categories"}).json()
        cls.url = f"/api/projects/{project['id']}/time-categories"

    def test_categories(self):
        dev = self.client.post(self.url, json={"name": "Development", "isDefault": True})
        self.assertEqual(dev.status_code, 201, dev.text)
        dup = self.client.post(self.url, json={"name": "Development"})
        self.assertEqual(dup.status_code, 400)
        self.assertEqual(dup.json(), {"error": "Category with this name already exists"})
        self.assertEqual(self.client.post(self.url, json={"name": ""}).status_code, 400)

        meetings = self.client.post(self.url, json={"name": "Meetings", "isDefault": True})
        self.assertEqual(meetings.status_code, 201, meetings.text)
        self.client.post(self.url, json={"name": "Admin"})

        listed = self.client.get(self.url).json()
        self.assertEqual([c["name"] for c in listed], ["Meetings", "Admin", "Development"])
        self.assertEqual([c["name"] for c in listed if c["isDefault"]], ["Meetings"])


if __name__ == "__main__":
    unittest.main()
