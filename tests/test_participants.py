"""Tests for participant resolution against the users table."""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
TEST_DB_URL = f"sqlite:///{_test_db_file.name}"
os.environ["DATABASE_URL"] = TEST_DB_URL
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from projecthub.db import get_session, reset_db
from projecthub.db.models import ParticipantRole, User
from projecthub.models.email_import import NormalizedParticipant
from projecthub.services.participants import resolve_participants


def _p(email, role=ParticipantRole.TO, name=None):
    return NormalizedParticipant(email=email, role=role, name=name)


class TestResolveParticipants(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        reset_db(TEST_DB_URL)

    def _user_count(self, email):
        with get_session() as session:
            return session.scalar(select(func.count()).select_from(User).where(User.email == email))

    def test_creates_unknown_users(self):
        resolved = resolve_participants([_p("new.person@example.com", ParticipantRole.FROM)])
        self.assertEqual(len(resolved), 1)
        self.assertIsNotNone(resolved[0].user_id)
        self.assertEqual(resolved[0].name, "new.person")
        self.assertEqual(resolved[0].role, ParticipantRole.FROM)
        self.assertEqual(self._user_count("new.person@example.com"), 1)

    def test_reuses_existing_user(self):
        first = resolve_participants([_p("repeat@example.com")])[0]
        second = resolve_participants([_p("repeat@example.com", ParticipantRole.CC)])[0]
        self.assertEqual(first.user_id, second.user_id)
        self.assertEqual(self._user_count("repeat@example.com"), 1)

    def test_mixed_case_address_maps_to_one_user(self):
        first = resolve_participants([_p("casey@example.com")])[0]
        second = resolve_participants([_p("Casey@Example.COM")])[0]
        self.assertEqual(first.user_id, second.user_id)

    def test_provided_name_refreshes_user(self):
        resolve_participants([_p("renamed@example.com")])
        resolved = resolve_participants([_p("renamed@example.com", name="Renamed Person")])[0]
        self.assertEqual(resolved.name, "Renamed Person")
        with get_session() as session:
            user = session.scalars(select(User).where(User.email == "renamed@example.com")).one()
            self.assertEqual(user.name, "Renamed Person")

    def test_lookup_failure_keeps_participant_unlinked(self):
        with patch("projecthub.services.participants.upsert_by_email", side_effect=SQLAlchemyError("boom")):
            resolved = resolve_participants([_p("broken@example.com", name="Broken")])
        self.assertEqual(len(resolved), 1)
        self.assertIsNone(resolved[0].user_id)
        self.assertEqual(resolved[0].email, "broken@example.com")
        self.assertEqual(self._user_count("broken@example.com"), 0)


if __name__ == "__main__":
    unittest.main()
