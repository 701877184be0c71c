"""Tests for email import normalization (four sources) and validation messages."""

import base64
import os
import sys
import tempfile
import unittest
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from projecthub.db.models import ParticipantRole
from projecthub.errors import ValidationFailed
from projecthub.services.email_import import normalize_import, validate_import


class TestForwardedEmail(unittest.TestCase):
    def setUp(self):
        self.data = {
            "subject": "Budget",
            "from": "Alice@Example.com",
            "to": ["bob@example.com", "carol@example.com"],
            "cc": "dave@example.com",
            "body": "<p>see below</p>",
            "timestamp": "2024-11-15T10:00:00Z",
            "attachments": [{}, {"filename": "plan.pdf", "contentType": "application/pdf", "size": 10}],
        }

    def test_thread_key_is_derived_from_content(self):
        out = normalize_import("forwarded_email", self.data)
        digest = base64.b64encode(b"Budget-Alice@Example.com-bob@example.com,carol@example.com").decode()
        self.assertEqual(out.thread_key, f"forwarded_{digest[:16]}")
        again = normalize_import("forwarded_email", dict(self.data))
        self.assertEqual(again.thread_key, out.thread_key)

    def test_single_forwarded_message(self):
        out = normalize_import("forwarded_email", self.data)
        self.assertEqual(len(out.messages), 1)
        msg = out.messages[0]
        self.assertTrue(msg.is_forwarded)
        self.assertTrue(msg.message_key.startswith("forwarded_msg_"))
        self.assertEqual(msg.cc, ["dave@example.com"])
        self.assertEqual(msg.timestamp.year, 2024)

    def test_attachment_defaults(self):
        msg = normalize_import("forwarded_email", self.data).messages[0]
        first, second = msg.attachments
        self.assertEqual(first.filename, "attachment_1")
        self.assertEqual(first.content_type, "application/octet-stream")
        self.assertEqual(first.size, 0)
        self.assertEqual(second.filename, "plan.pdf")
        self.assertEqual(second.size, 10)

    def test_participants_from_headers(self):
        out = normalize_import("forwarded_email", self.data)
        roles = {p.email: p.role for p in out.participants}
        self.assertEqual(roles["alice@example.com"], ParticipantRole.FROM)
        self.assertEqual(roles["bob@example.com"], ParticipantRole.TO)
        self.assertEqual(roles["dave@example.com"], ParticipantRole.CC)

    def test_subject_default_keeps_message_subject_empty(self):
        data = dict(self.data)
        del data["subject"]
        out = normalize_import("forwarded_email", data)
        self.assertEqual(out.subject, "Forwarded Email")
        self.assertIsNone(out.messages[0].subject)
        self.assertIn("Message subject is required", validate_import(out))


class TestEmailFile(unittest.TestCase):
    def test_defaults(self):
        out = normalize_import("email_file", {"emlContent": "raw eml"})
        msg = out.messages[0]
        self.assertEqual(out.subject, "Imported Email")
        self.assertTrue(out.thread_key.startswith("file_import_"))
        self.assertTrue(msg.message_key.startswith("file_msg_"))
        self.assertEqual(msg.from_address, "unknown@example.com")
        self.assertEqual(msg.to, ["unknown@example.com"])
        self.assertEqual(msg.body, "raw eml")
        self.assertEqual([p.email for p in out.participants], ["unknown@example.com"])
        self.assertEqual(validate_import(out), [])

    def test_body_precedence(self):
        out = normalize_import("email_file", {"msgContent": "msg", "body": "plain", "to": "x@example.com"})
        self.assertEqual(out.messages[0].body, "msg")
        out = normalize_import("email_file", {"body": "plain"})
        self.assertEqual(out.messages[0].body, "plain")

    def test_empty_body_is_reported(self):
        out = normalize_import("email_file", {"subject": "s"})
        self.assertEqual(validate_import(out), ["Message body is required"])


class TestApiIntegration(unittest.TestCase):
    def test_messages_participants_and_tags(self):
        data = {
            "threadId": "gmail-1",
            "subject": "Sync",
            "participants": [
                {"email": "a@example.com", "name": "A", "role": "FROM"},
                {"email": "A@example.com", "role": "TO"},
                {"email": "b@example.com", "role": "cc"},
            ],
            "tags": [{"name": "ops", "color": "#fff"}, "infra"],
            "messages": [
                {"from": "a@example.com", "to": ["b@example.com"], "subject": "Sync", "body": "hi"},
                {"messageId": "m-2", "from": "b@example.com", "to": "a@example.com", "subject": "Re: Sync",
                 "body": "ok", "parentMessageId": "m-1", "isReplied": True},
            ],
        }
        out = normalize_import("api_integration", data)
        self.assertEqual(out.thread_key, "gmail-1")
        self.assertTrue(out.messages[0].message_key.startswith("api_msg_"))
        self.assertTrue(out.messages[0].message_key.endswith("_0"))
        self.assertEqual(out.messages[1].message_key, "m-2")
        self.assertEqual(out.messages[1].to, ["a@example.com"])
        self.assertEqual(out.messages[1].parent_message_key, "m-1")
        self.assertEqual([(p.email, p.role) for p in out.participants], [
            ("a@example.com", ParticipantRole.FROM),
            ("b@example.com", ParticipantRole.CC),
        ])
        self.assertEqual([t.name for t in out.tags], ["ops", "infra"])

    def test_defaults_and_missing_messages(self):
        out = normalize_import("api_integration", {})
        self.assertEqual(out.subject, "API Imported Email")
        self.assertTrue(out.thread_key.startswith("api_import_"))
        self.assertEqual(validate_import(out), ["At least one message is required"])


class TestManual(unittest.TestCase):
    def test_participants_scanned_from_messages(self):
        data = {
            "subject": "Kickoff",
            "projectId": "p1",
            "messages": [
                {"messageId": "1", "from": "a@example.com", "to": ["b@example.com"], "cc": ["c@example.com"],
                 "subject": "Kickoff", "body": "hello"},
                {"messageId": "2", "from": "b@example.com", "to": ["a@example.com"], "bcc": "d@example.com",
                 "subject": "Re: Kickoff", "body": "hi"},
            ],
        }
        out = normalize_import("manual", data)
        self.assertIsNone(out.thread_key)
        self.assertEqual(out.project_id, "p1")
        self.assertEqual([(p.email, p.role) for p in out.participants], [
            ("a@example.com", ParticipantRole.FROM),
            ("b@example.com", ParticipantRole.TO),
            ("c@example.com", ParticipantRole.CC),
            ("d@example.com", ParticipantRole.BCC),
        ])


class TestNormalizeErrors(unittest.TestCase):
    def test_unknown_source(self):
        with self.assertRaises(ValidationFailed) as ctx:
            normalize_import("fax", {})
        self.assertEqual(ctx.exception.message, "Unsupported import source")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_validation_collects_every_problem(self):
        out = normalize_import("manual", {"messages": [{"messageId": "x"}]})
        self.assertEqual(validate_import(out), [
            "Subject is required",
            "Message from field is required",
            "Message to field is required",
            "Message subject is required",
            "Message body is required",
        ])

    def test_timestamp_absent_blank_or_unparseable(self):
        base = {"from": "a@example.com", "to": "b@example.com", "subject": "s", "body": "b"}
        out = normalize_import("manual", {"subject": "s", "messages": [
            dict(base),
            {**base, "timestamp": "  "},
            {**base, "timestamp": "garbage"},
        ]})
        absent, blank, garbage = out.messages
        self.assertIsNotNone(absent.timestamp)
        self.assertIsNotNone(blank.timestamp)
        self.assertIsNone(garbage.timestamp)
        self.assertEqual(validate_import(out), ["Message timestamp is invalid"])

    def test_bad_attachment_size_and_tag_name(self):
        out = normalize_import("forwarded_email", {
            "subject": "s",
            "from": "a@example.com",
            "to": "b@example.com",
            "body": "b",
            "attachments": [{"size": "big"}, {"size": "12"}, {"size": -1}],
            "tags": [{"name": 5}, {"name": "  "}, 3],
        })
        self.assertEqual([a.size for a in out.messages[0].attachments], [None, 12, None])
        self.assertEqual([t.name for t in out.tags], ["5"])
        self.assertEqual(validate_import(out), ["Attachment size is invalid"])

    def test_non_list_address_and_participant_fields(self):
        out = normalize_import("api_integration", {
            "participants": "not-a-list",
            "messages": [{"from": "a@example.com", "to": 42, "subject": "s", "body": "b"}],
        })
        self.assertEqual(out.participants, [])
        self.assertEqual(out.messages[0].to, ["42"])


if __name__ == "__main__":
    unittest.main()
