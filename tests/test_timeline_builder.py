"""Tests for timeline event derivation: ordering, type precedence, descriptions, metadata."""

import os
import sys
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from projecthub.db.models import EventType
from projecthub.services.duplicates import is_similar, participant_overlap
from projecthub.services.timeline import build_timeline_events

T0 = datetime(2024, 11, 15, 10, 0, tzinfo=timezone.utc)


def _msg(id_, minutes, sender="a@example.com", replied=False, forwarded=False, attachments=0, replies=0, **kw):
    return SimpleNamespace(
        id=id_,
        from_address=sender,
        to=kw.get("to", ["b@example.com"]),
        cc=kw.get("cc", []),
        timestamp=T0 + timedelta(minutes=minutes),
        is_read=kw.get("is_read", False),
        is_replied=replied,
        is_forwarded=forwarded,
        attachments=[object()] * attachments,
        replies=[object()] * replies,
    )


class TestBuildTimelineEvents(unittest.TestCase):
    def test_sorted_by_timestamp_with_dense_order(self):
        events = build_timeline_events([_msg("late", 30), _msg("early", 0), _msg("mid", 10)])
        self.assertEqual([e["message_id"] for e in events], ["early", "mid", "late"])
        self.assertEqual([e["order"] for e in events], [1, 2, 3])

    def test_type_precedence(self):
        events = build_timeline_events([
            _msg("r", 0, replied=True, forwarded=True),
            _msg("f", 1, forwarded=True),
            _msg("e", 2),
        ])
        self.assertEqual(
            [(e["event_type"], e["title"]) for e in events],
            [
                (EventType.EMAIL_REPLIED, "Email Reply"),
                (EventType.EMAIL_FORWARDED, "Email Forwarded"),
                (EventType.EMAIL_RECEIVED, "Email Received"),
            ],
        )
        self.assertEqual(events[0]["description"], "Reply from a@example.com")
        self.assertEqual(events[1]["description"], "Forwarded by a@example.com")
        self.assertEqual(events[2]["description"], "Email from a@example.com")

    def test_description_suffixes(self):
        one, many = build_timeline_events([
            _msg("1", 0, attachments=1, replies=1),
            _msg("2", 1, attachments=3, replies=2),
        ])
        self.assertEqual(one["description"], "Email from a@example.com (1 attachment) (1 reply)")
        self.assertEqual(many["description"], "Email from a@example.com (3 attachments) (2 replies)")

    def test_metadata(self):
        (event,) = build_timeline_events([
            _msg("1", 0, attachments=2, replies=1, to=["b@example.com"], cc=["c@example.com"], is_read=True)
        ])
        self.assertEqual(event["metadata"], {
            "sender": "a@example.com",
            "recipients": ["b@example.com", "c@example.com"],
            "hasAttachments": True,
            "attachmentCount": 2,
            "replyCount": 1,
            "isRead": True,
        })

    def test_empty_thread(self):
        self.assertEqual(build_timeline_events([]), [])


class TestParticipantOverlap(unittest.TestCase):
    def test_overlap_is_case_insensitive(self):
        self.assertEqual(participant_overlap(["A@x.com", "b@x.com"], ["a@x.com", "c@x.com"]), 1)

    def test_threshold_against_smaller_set(self):
        # 2 shared of min(3, 2) = 2 -> 2 >= 1.4
        self.assertTrue(is_similar(["a@x", "b@x", "c@x"], ["a@x", "b@x"]))
        # 1 shared of min(3, 3) = 3 -> 1 < 2.1
        self.assertFalse(is_similar(["a@x", "b@x", "c@x"], ["a@x", "d@x", "e@x"]))
        # 1 shared of min(4, 1) = 1 -> 1 >= 0.7
        self.assertTrue(is_similar(["a@x", "b@x", "c@x", "d@x"], ["a@x"]))

    def test_no_shared_address_never_matches(self):
        self.assertFalse(is_similar([], []))
        self.assertFalse(is_similar(["a@x"], ["b@x"]))


if __name__ == "__main__":
    unittest.main()
