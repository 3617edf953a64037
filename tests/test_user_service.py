"""Unit and SQLite-backed tests for the user and auth services."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError

from tests.db_utils import add_user, make_session_factory
from userhub.models import User
from userhub.schemas.users import Role
from userhub.services.auth import InvalidCredentialsError, authenticate_user, create_user
from userhub.services.users import (
    EmailAlreadyExistsError,
    UserNotFoundError,
    count_admins,
    delete_user,
    get_all_users,
    get_user_by_id,
    update_user,
)


class TestMissingUser(unittest.TestCase):
    """Operations on an absent id raise UserNotFoundError without writing."""

    def setUp(self) -> None:
        self.session = MagicMock()
        self.session.get.return_value = None

    def test_get_raises(self) -> None:
        with self.assertRaises(UserNotFoundError) as ctx:
            get_user_by_id(self.session, 99)
        self.assertEqual(ctx.exception.user_id, 99)

    def test_update_raises_and_does_not_commit(self) -> None:
        with self.assertRaises(UserNotFoundError):
            update_user(self.session, 99, {"name": "New Name"})
        self.session.commit.assert_not_called()

    def test_delete_raises_and_does_not_delete(self) -> None:
        with self.assertRaises(UserNotFoundError):
            delete_user(self.session, 99)
        self.session.delete.assert_not_called()


class TestUpdateConcurrentEmailCollision(unittest.TestCase):
    """A unique-index violation at commit is reported as EmailAlreadyExistsError and rolled back."""

    def test_integrity_error_maps_to_conflict(self) -> None:
        session = MagicMock()
        session.get.return_value = User(id=1, name="Jane", email="jane@x.com", role="user")
        # Pre-check sees the email as free; another writer wins the race before commit.
        session.query.return_value.filter.return_value.filter.return_value.first.return_value = None
        session.commit.side_effect = IntegrityError("UPDATE users", {}, Exception("unique"))

        with self.assertRaises(EmailAlreadyExistsError):
            update_user(session, 1, {"email": "taken@x.com"})
        session.rollback.assert_called_once()
        session.refresh.assert_not_called()


class TestUserServiceWithDatabase(unittest.TestCase):
    """Service behaviour against an in-memory SQLite database."""

    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.jane = add_user(self.db, name="Jane", email="jane@x.com")
        self.john = add_user(self.db, name="John", email="john@x.com")

    def tearDown(self) -> None:
        self.db.close()

    def test_get_all_excludes_password(self) -> None:
        users = get_all_users(self.db)
        self.assertEqual([u.id for u in users], [self.jane.id, self.john.id])
        dumped = users[0].model_dump(by_alias=True)
        self.assertNotIn("password", dumped)
        self.assertNotIn("password_hash", dumped)
        self.assertIn("createdAt", dumped)

    def test_update_merges_fields_and_refreshes_updated_at(self) -> None:
        before = self.jane.updated_at
        updated = update_user(self.db, self.jane.id, {"name": "Jane Doe", "email": "JANE.DOE@X.COM"})
        self.assertEqual(updated.name, "Jane Doe")
        self.assertEqual(updated.email, "jane.doe@x.com")
        self.assertEqual(updated.role, Role.USER)
        self.assertIsNotNone(updated.updated_at)
        self.assertNotEqual(updated.updated_at, before)

    def test_update_to_same_email_is_not_a_conflict(self) -> None:
        updated = update_user(self.db, self.jane.id, {"email": "jane@x.com", "name": "Janet"})
        self.assertEqual(updated.name, "Janet")

    def test_update_email_collision_leaves_row_unchanged(self) -> None:
        with self.assertRaises(EmailAlreadyExistsError):
            update_user(self.db, self.jane.id, {"email": "john@x.com", "name": "Changed"})
        self.db.expire_all()
        row = get_user_by_id(self.db, self.jane.id)
        self.assertEqual(row.email, "jane@x.com")
        self.assertEqual(row.name, "Jane")

    def test_update_role(self) -> None:
        updated = update_user(self.db, self.john.id, {"role": Role.ADMIN})
        self.assertEqual(updated.role, Role.ADMIN)
        self.assertEqual(count_admins(self.db), 1)

    def test_update_ignores_unknown_fields(self) -> None:
        updated = update_user(self.db, self.jane.id, {"password_hash": "x", "name": "Jo"})
        self.assertEqual(updated.name, "Jo")
        self.assertNotEqual(self.db.get(User, self.jane.id).password_hash, "x")

    def test_delete_then_get_is_not_found(self) -> None:
        deleted = delete_user(self.db, self.john.id)
        self.assertEqual(deleted.email, "john@x.com")
        with self.assertRaises(UserNotFoundError):
            get_user_by_id(self.db, self.john.id)


class TestAuthServiceWithDatabase(unittest.TestCase):
    """create_user/authenticate_user against SQLite."""

    def setUp(self) -> None:
        self.db = make_session_factory()()

    def tearDown(self) -> None:
        self.db.close()

    def test_create_then_authenticate(self) -> None:
        created = create_user(self.db, name="Jane", email="Jane@X.com", password="secret123")
        self.assertEqual(created.email, "jane@x.com")
        self.assertEqual(created.role, Role.USER)
        stored = self.db.get(User, created.id)
        self.assertNotEqual(stored.password_hash, "secret123")

        user = authenticate_user(self.db, email="JANE@x.com", password="secret123")
        self.assertEqual(user.id, created.id)

    def test_duplicate_email_rejected(self) -> None:
        create_user(self.db, name="Jane", email="jane@x.com", password="secret123")
        with self.assertRaises(EmailAlreadyExistsError):
            create_user(self.db, name="Other", email="JANE@x.com", password="secret456")

    def test_wrong_password_and_unknown_email_fail_the_same_way(self) -> None:
        create_user(self.db, name="Jane", email="jane@x.com", password="secret123")
        with self.assertRaises(InvalidCredentialsError) as wrong_pw:
            authenticate_user(self.db, email="jane@x.com", password="nope-nope")
        with self.assertRaises(InvalidCredentialsError) as unknown:
            authenticate_user(self.db, email="ghost@x.com", password="secret123")
        self.assertEqual(wrong_pw.exception.message, unknown.exception.message)

    def test_create_admin(self) -> None:
        admin = create_user(self.db, name="Root", email="root@x.com", password="secret123", role=Role.ADMIN)
        self.assertEqual(admin.role, Role.ADMIN)
        self.assertEqual(count_admins(self.db), 1)


if __name__ == "__main__":
    unittest.main()
