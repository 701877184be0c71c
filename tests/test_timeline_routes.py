"""Tests for the /api/timelines endpoints: views, events and reordering."""

import os
import sys
import tempfile
import unittest
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
TEST_DB_URL = f"sqlite:///{_test_db_file.name}"
os.environ["DATABASE_URL"] = TEST_DB_URL
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from projecthub.api.server import create_app
from projecthub.db import reset_db


class TestTimelineRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        reset_db(TEST_DB_URL)
        cls.client = TestClient(create_app())

    def _thread(self, subject):
        r = self.client.post("/api/email-threads", json={"subject": subject})
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()["id"]

    def _timeline(self, subject, titles=("one", "two", "three")):
        r = self.client.post(
            "/api/timelines",
            json={"threadId": self._thread(subject), "events": [{"title": t} for t in titles]},
        )
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()

    def _titles(self, timeline_id):
        events = self.client.get(f"/api/timelines/{timeline_id}/events").json()
        self.assertEqual([e["order"] for e in events], list(range(1, len(events) + 1)))
        return [e["title"] for e in events]

    def test_create_defaults(self):
        timeline = self._timeline("Defaults")
        self.assertEqual(timeline["title"], "Defaults Timeline")
        self.assertFalse(timeline["isPublic"])
        self.assertEqual([e["order"] for e in timeline["events"]], [1, 2, 3])
        self.assertTrue(all(e["eventType"] == "CUSTOM" for e in timeline["events"]))

    def test_create_requires_thread(self):
        self.assertEqual(self.client.post("/api/timelines", json={}).status_code, 400)
        self.assertEqual(self.client.post("/api/timelines", json={"threadId": "missing"}).status_code, 404)

    def test_second_timeline_for_thread_conflicts(self):
        thread_id = self._thread("Only one")
        first = self.client.post("/api/timelines", json={"threadId": thread_id})
        self.assertEqual(first.status_code, 201, first.text)
        second = self.client.post("/api/timelines", json={"threadId": thread_id})
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.json()["timelineId"], first.json()["id"])

    def test_explicit_orders_are_respected(self):
        r = self.client.post(
            "/api/timelines",
            json={
                "threadId": self._thread("Explicit"),
                "events": [{"title": "late", "order": 5}, {"title": "early", "order": 1}],
            },
        )
        self.assertEqual(r.status_code, 201, r.text)
        self.assertEqual(self._titles(r.json()["id"]), ["early", "late"])

    def test_insert_event_at_position(self):
        timeline = self._timeline("Insert")
        r = self.client.post(f"/api/timelines/{timeline['id']}/events", json={"title": "between", "order": 2})
        self.assertEqual(r.status_code, 201, r.text)
        self.assertEqual(r.json()["order"], 2)
        self.assertEqual(self._titles(timeline["id"]), ["one", "between", "two", "three"])

        appended = self.client.post(f"/api/timelines/{timeline['id']}/events", json={"title": "last"})
        self.assertEqual(appended.json()["order"], 5)

        clamped = self.client.post(f"/api/timelines/{timeline['id']}/events", json={"title": "far", "order": 99})
        self.assertEqual(clamped.json()["order"], 6)

    def test_event_requires_title(self):
        timeline = self._timeline("Untitled")
        r = self.client.post(f"/api/timelines/{timeline['id']}/events", json={"title": "  "})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {"error": "Event title is required"})

    def test_move_event(self):
        timeline = self._timeline("Move")
        third = timeline["events"][2]["id"]
        r = self.client.put(f"/api/timelines/{timeline['id']}/events/{third}", json={"order": 1, "title": "moved"})
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["order"], 1)
        self.assertEqual(self._titles(timeline["id"]), ["moved", "one", "two"])

    def test_delete_event_renumbers(self):
        timeline = self._timeline("Delete")
        first = timeline["events"][0]["id"]
        r = self.client.delete(f"/api/timelines/{timeline['id']}/events/{first}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self._titles(timeline["id"]), ["two", "three"])
        self.assertEqual(self.client.get(f"/api/timelines/{timeline['id']}/events/{first}").status_code, 404)

    def test_reorder(self):
        timeline = self._timeline("Reorder")
        ids = [e["id"] for e in timeline["events"]]
        r = self.client.post(f"/api/timelines/{timeline['id']}/events/reorder", json={"eventIds": ids[::-1]})
        self.assertEqual(r.status_code, 200, r.text)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual([e["id"] for e in body["events"]], ids[::-1])
        self.assertEqual(self._titles(timeline["id"]), ["three", "two", "one"])

    def test_reorder_rejects_partial_or_empty_lists(self):
        timeline = self._timeline("Reorder errors")
        ids = [e["id"] for e in timeline["events"]]
        url = f"/api/timelines/{timeline['id']}/events/reorder"

        empty = self.client.post(url, json={"eventIds": []})
        self.assertEqual(empty.status_code, 400)
        self.assertEqual(empty.json()["error"], "eventIds must be a non-empty array")

        partial = self.client.post(url, json={"eventIds": ids[:2]})
        self.assertEqual(partial.status_code, 400)
        self.assertEqual(partial.json()["details"], {"expected": 3, "received": 2})

        repeated = self.client.post(url, json={"eventIds": [ids[0], ids[0], ids[1]]})
        self.assertEqual(repeated.status_code, 400)
        self.assertEqual(self._titles(timeline["id"]), ["one", "two", "three"])

    def test_update_replaces_events(self):
        timeline = self._timeline("Replace")
        r = self.client.put(
            f"/api/timelines/{timeline['id']}",
            json={"title": "Renamed", "isPublic": True, "events": [{"title": "fresh"}]},
        )
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["title"], "Renamed")
        self.assertTrue(r.json()["isPublic"])
        self.assertEqual(self._titles(timeline["id"]), ["fresh"])

    def test_event_message_must_belong_to_thread(self):
        imported = self.client.post(
            "/api/email-import",
            json={
                "source": "forwarded_email",
                "data": {"subject": "Elsewhere", "from": "x@example.com", "to": ["y@example.com"], "body": "hi"},
            },
        )
        self.assertEqual(imported.status_code, 201, imported.text)
        foreign_message = imported.json()["thread"]["messages"][0]["id"]
        timeline = self._timeline("Own thread")
        r = self.client.post(
            f"/api/timelines/{timeline['id']}/events", json={"title": "foreign", "messageId": foreign_message}
        )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Message does not belong to this thread")

    def test_delete_timeline(self):
        timeline = self._timeline("Gone")
        self.assertEqual(self.client.delete(f"/api/timelines/{timeline['id']}").status_code, 200)
        self.assertEqual(self.client.get(f"/api/timelines/{timeline['id']}").status_code, 404)
        self.assertEqual(self.client.get(f"/api/email-threads/{timeline['threadId']}").status_code, 200)


if __name__ == "__main__":
    unittest.main()
