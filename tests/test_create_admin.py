import pytest

from learnhub import create_admin
from learnhub.models import User
from learnhub.security import verify_password
from learnhub.users import provision_admin


@pytest.fixture
def cli_db(monkeypatch, session_factory):
    monkeypatch.setattr(create_admin, "SessionLocal", session_factory)
    monkeypatch.setattr(create_admin, "init_db", lambda: None)
    return session_factory


def test_provision_creates_admin(db):
    user, created = provision_admin(db, "ops", password="s3cret-pass", email="ops@example.com")
    assert created
    assert user.is_admin is True
    assert verify_password("s3cret-pass", user.password)


def test_provision_promotes_existing_user(db, make_user):
    existing = make_user("promote-me")
    user, created = provision_admin(db, "promote-me")
    assert not created
    assert user.id == existing.id
    assert user.is_admin is True
    assert verify_password("password1", user.password)


def test_provision_needs_password_for_new_user(db):
    with pytest.raises(ValueError):
        provision_admin(db, "nobody")


def test_cli_creates_admin(cli_db):
    assert create_admin.main(["cli-admin", "--password", "from-the-cli"]) == 0

    session = cli_db()
    try:
        assert session.query(User).filter(User.username == "cli-admin").one().is_admin is True
    finally:
        session.close()


def test_cli_promote_only_refuses_unknown_user(cli_db):
    assert create_admin.main(["ghost", "--promote-only"]) == 1
