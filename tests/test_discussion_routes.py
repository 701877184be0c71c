"""Tests for project discussion threads, their messages and the project activity timeline."""

import os
import sys
import tempfile
import unittest
from datetime import timedelta
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
TEST_DB_URL = f"sqlite:///{_test_db_file.name}"
os.environ["DATABASE_URL"] = TEST_DB_URL
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from projecthub.api.server import create_app
from projecthub.db import get_session, reset_db
from projecthub.db.models import ThreadMessage
from projecthub.db.repositories.discussions_repo import TAG_PALETTE, tag_color
from projecthub.utils.dates import utcnow


class TestDiscussions(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        reset_db(TEST_DB_URL)
        cls.client = TestClient(create_app())
        cls.user_id = cls.client.post("/api/users", json={"email": "poster@example.com", "name": "Poster"}).json()["id"]

    def setUp(self):
        project = self.client.post("/api/projects", json={"name": self._testMethodName}).json()
        self.base = f"/api/projects/{project['id']}"

    def _thread(self, title="General", **fields):
        r = self.client.post(f"{self.base}/threads", json={"title": title, "userId": self.user_id, **fields})
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()

    def _post(self, thread_id, content, **fields):
        r = self.client.post(
            f"{self.base}/threads/{thread_id}/messages", json={"content": content, "userId": self.user_id, **fields}
        )
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()

    def test_tag_color_is_stable(self):
        self.assertEqual(tag_color("design"), tag_color("design"))
        self.assertIn(tag_color("anything"), TAG_PALETTE)

    def test_create_thread(self):
        thread = self._thread("Planning", description="Q4", tags=["design", "design", " ops "])
        self.assertEqual(thread["creator"]["id"], self.user_id)
        self.assertEqual([t["name"] for t in thread["tags"]], ["design", "ops"])
        self.assertEqual(thread["tags"][0]["color"], tag_color("design"))

    def test_create_thread_validation(self):
        self.assertEqual(self.client.post(f"{self.base}/threads", json={"userId": self.user_id}).status_code, 400)
        no_author = self.client.post(f"{self.base}/threads", json={"title": "Anonymous"})
        self.assertEqual(no_author.status_code, 400)
        self.assertEqual(no_author.json(), {"error": "User ID is required"})
        ghost = self.client.post(f"{self.base}/threads", json={"title": "Ghost", "userId": "ghost"})
        self.assertEqual(ghost.status_code, 404)

    def test_pinned_threads_first(self):
        older = self._thread("Older")
        self._thread("Newer")
        pinned = self.client.put(f"{self.base}/threads/{older['id']}", json={"isPinned": True})
        self.assertEqual(pinned.status_code, 200, pinned.text)
        titles = [t["title"] for t in self.client.get(f"{self.base}/threads").json()]
        self.assertEqual(titles[0], "Older")

    def test_update_and_delete_thread(self):
        thread = self._thread()
        self.assertEqual(self.client.put(f"{self.base}/threads/{thread['id']}", json={"title": ""}).status_code, 400)
        renamed = self.client.put(f"{self.base}/threads/{thread['id']}", json={"title": "Renamed"})
        self.assertEqual(renamed.json()["title"], "Renamed")
        self._post(thread["id"], "bye")
        self.assertEqual(self.client.delete(f"{self.base}/threads/{thread['id']}").status_code, 200)
        self.assertEqual(self.client.get(f"{self.base}/threads/{thread['id']}").status_code, 404)

    def test_messages_and_replies(self):
        thread = self._thread()
        root = self._post(thread["id"], "Question?", attachments=[{"filename": "brief.pdf", "size": 10}])
        self.assertEqual(root["attachments"][0]["contentType"], "application/octet-stream")
        reply = self._post(thread["id"], "Answer.", parentId=root["id"])
        self.assertEqual(reply["parentId"], root["id"])
        self._post(thread["id"], "Another topic")

        listed = self.client.get(f"{self.base}/threads/{thread['id']}/messages").json()
        self.assertEqual([m["content"] for m in listed["messages"]], ["Question?", "Another topic"])
        self.assertEqual([r["content"] for r in listed["messages"][0]["replies"]], ["Answer."])
        self.assertEqual(listed["pagination"]["total"], 2)

        detail = self.client.get(f"{self.base}/threads/{thread['id']}").json()
        self.assertEqual(detail["_count"]["messages"], 3)

    def test_message_validation(self):
        thread = self._thread()
        other = self._thread("Other")
        foreign = self._post(other["id"], "elsewhere")
        url = f"{self.base}/threads/{thread['id']}/messages"
        self.assertEqual(self.client.post(url, json={"content": " ", "userId": self.user_id}).status_code, 400)
        r = self.client.post(url, json={"content": "reply", "userId": self.user_id, "parentId": foreign["id"]})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Parent message does not belong to this thread")

    def test_posting_bumps_thread(self):
        first = self._thread("First")
        self._thread("Second")
        self._post(first["id"], "activity")
        titles = [t["title"] for t in self.client.get(f"{self.base}/threads").json()]
        self.assertEqual(titles, ["First", "Second"])

    def test_project_timeline_groups_by_day(self):
        thread = self._thread("Daily", description="standup")
        yesterday = self._post(thread["id"], "yesterday")
        first = self._post(thread["id"], "today 1")
        self._post(thread["id"], "today 2", parentId=first["id"])
        with get_session() as session:
            message = session.get(ThreadMessage, yesterday["id"])
            message.created_at = utcnow() - timedelta(days=1)

        body = self.client.get(f"{self.base}/timeline").json()
        days = body["timeline"]
        self.assertEqual(len(days), 2)
        self.assertGreater(days[0]["date"], days[1]["date"])
        self.assertEqual([m["content"] for m in days[0]["messages"]], ["today 1", "today 2"])
        self.assertEqual([m["content"] for m in days[1]["messages"]], ["yesterday"])
        reply = days[0]["messages"][1]
        self.assertEqual(reply["thread"], {"id": thread["id"], "title": "Daily", "description": "standup"})
        self.assertEqual(reply["parent"]["content"], "today 1")
        self.assertEqual(reply["parent"]["user"]["id"], self.user_id)
        self.assertIsNone(days[0]["messages"][0]["parent"])
        self.assertEqual(body["pagination"]["total"], 3)


if __name__ == "__main__":
    unittest.main()
