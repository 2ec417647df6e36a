import json
import unittest

from werkzeug.security import check_password_hash

from session import AuthError, SessionGate
from storage import SESSION_KEY, USERS_KEY, MemoryStore


class TestSessionGate(unittest.TestCase):
    def setUp(self) -> None:
        self.kv = MemoryStore()
        self.gate = SessionGate(self.kv)

    def test_signup_opens_session(self) -> None:
        self.assertEqual(self.gate.signup(" alice ", "secret"), "alice")
        self.assertEqual(self.gate.current_user(), "alice")
        record = json.loads(self.kv.get(USERS_KEY))[0]
        self.assertEqual(record["username"], "alice")
        self.assertNotIn("password", record)
        self.assertNotEqual(record["password_hash"], "secret")
        self.assertTrue(check_password_hash(record["password_hash"], "secret"))
        self.assertFalse(check_password_hash(record["password_hash"], "wrong"))

    def test_duplicate_signup(self) -> None:
        self.gate.signup("alice", "secret")
        with self.assertRaisesRegex(AuthError, "Username already exists"):
            self.gate.signup("alice", "other")

    def test_blank_username(self) -> None:
        with self.assertRaisesRegex(AuthError, "Username required"):
            self.gate.signup("  ", "secret")

    def test_login_and_logout(self) -> None:
        self.gate.signup("alice", "secret")
        self.assertEqual(self.gate.logout(), "alice")
        self.assertIsNone(self.gate.current_user())
        self.assertEqual(self.gate.login("alice", "secret"), "alice")
        self.assertEqual(self.gate.current_user(), "alice")

    def test_wrong_password(self) -> None:
        self.gate.signup("alice", "secret")
        self.gate.logout()
        with self.assertRaisesRegex(AuthError, "Invalid username or password"):
            self.gate.login("alice", "nope")
        with self.assertRaisesRegex(AuthError, "Invalid username or password"):
            self.gate.login("bob", "secret")
        self.assertIsNone(self.gate.current_user())

    def test_plaintext_records_still_log_in(self) -> None:
        self.kv.set(USERS_KEY, json.dumps([{"username": "old", "password": "pw"}]))
        self.assertEqual(self.gate.login("old", "pw"), "old")

    def test_corrupt_records_read_as_signed_out(self) -> None:
        self.kv.set(SESSION_KEY, "{broken")
        self.kv.set(USERS_KEY, "[[[")
        self.assertIsNone(self.gate.current_user())
        self.assertEqual(self.gate.users(), [])

    def test_open_store_is_scoped_to_user(self) -> None:
        self.gate.signup("alice", "secret")
        store = self.gate.open_store()
        self.assertEqual(store.username, "alice")
        self.assertEqual(store.key, "mini_tasks_items_alice")
        self.assertEqual(self.gate.open_store("bob").key, "mini_tasks_items_bob")


if __name__ == "__main__":
    unittest.main(verbosity=2)
