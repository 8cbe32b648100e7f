"""Tests for the AuthGate state machine and TraderSession lifecycle."""

import pytest

from trader_tracker.auth import AuthGate, GateState
from trader_tracker.errors import AuthError, UnknownUserError

from .conftest import make_profile, make_trade


@pytest.fixture
def gate(db):
    return AuthGate(db)


class TestRegisterAndLogin:
    def test_starts_prompting(self, gate):
        assert gate.state is GateState.PROMPTING
        assert gate.current is None

    def test_unknown_user_offers_signup(self, gate):
        with pytest.raises(UnknownUserError) as excinfo:
            gate.login("alice", "pw")
        assert excinfo.value.username == "alice"
        assert gate.state is GateState.PROMPTING

    def test_register_authenticates(self, gate):
        session = gate.register("alice", "pw")
        assert session.username == "alice"
        assert gate.state is GateState.AUTHENTICATED
        assert gate.current is session

    def test_password_is_not_stored_in_plain_text(self, gate, db):
        gate.register("alice", "secret")
        stored = db.get_password_hash("alice")
        assert stored != "secret"
        assert "secret" not in stored

    def test_login_with_correct_password(self, gate):
        gate.register("alice", "pw")
        gate.logout()
        assert gate.login("alice", "pw").username == "alice"

    def test_wrong_password_stays_prompting(self, gate):
        gate.register("alice", "pw")
        gate.logout()
        with pytest.raises(AuthError, match="Incorrect password"):
            gate.login("alice", "nope")
        assert gate.state is GateState.PROMPTING
        assert gate.current is None

    def test_register_existing_user_fails(self, gate):
        gate.register("alice", "pw")
        with pytest.raises(AuthError):
            gate.register("alice", "pw2")

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_rejected(self, gate, name):
        with pytest.raises(AuthError):
            gate.login(name, "pw")

    def test_name_is_stripped(self, gate):
        gate.register("  alice ", "pw")
        assert gate.has_account("alice")

    def test_login_loads_saved_profile(self, gate, db):
        gate.register("alice", "pw")
        db.save_profile("alice", make_profile())
        gate.logout()
        session = gate.login("alice", "pw")
        assert session.profile == make_profile()
        assert session.has_valid_profile


class TestLogoutAndCancel:
    def test_logout_discards_session_state(self, gate):
        session = gate.register("alice", "pw")
        session.ledger.add(make_trade())
        session.profile = make_profile()
        gate.logout()
        assert gate.state is GateState.PROMPTING
        assert gate.current is None
        assert session.closed
        assert len(session.ledger) == 0
        assert session.profile is None

    def test_new_login_starts_with_empty_ledger(self, gate):
        gate.register("alice", "pw").ledger.add(make_trade())
        gate.logout()
        assert len(gate.login("alice", "pw").ledger) == 0

    def test_cancel_terminates(self, gate):
        gate.register("alice", "pw")
        gate.cancel()
        assert gate.state is GateState.TERMINATED
        assert gate.current is None
        with pytest.raises(AuthError):
            gate.login("alice", "pw")
        with pytest.raises(AuthError):
            gate.register("bob", "pw")

    def test_logout_after_cancel_stays_terminated(self, gate):
        gate.cancel()
        gate.logout()
        assert gate.state is GateState.TERMINATED
