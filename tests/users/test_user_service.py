import pytest
from werkzeug.security import generate_password_hash

from src.rfid_dtr.rfid_dtr.core.exceptions import AuthenticationError, ValidationError
from src.rfid_dtr.rfid_dtr.users.service import AuthService, UserService


@pytest.fixture
def user_service(users_repo) -> UserService:
    return UserService(users_repo)


def test_register_assigns_id_and_normalizes(user_service, users_repo):
    user = user_service.register(name="  Bob ", card_uid=" CARD-002 ", department="", email="bob@example.com")

    assert user.user_id
    assert user.name == "Bob"
    assert user.card_uid == "CARD-002"
    assert user.department is None
    assert users_repo.get_by_card_uid("CARD-002") == user


def test_register_rejects_duplicate_card(user_service):
    with pytest.raises(ValidationError, match="already registered"):
        user_service.register(name="Mallory", card_uid="CARD-001")


@pytest.mark.parametrize("name, card", [("", "CARD-009"), ("Bob", "   ")])
def test_register_requires_name_and_card(user_service, name, card):
    with pytest.raises(ValidationError, match="is required"):
        user_service.register(name=name, card_uid=card)


def test_register_rejects_bad_email(user_service):
    with pytest.raises(ValidationError):
        user_service.register(name="Bob", card_uid="CARD-002", email="not-an-email")


def test_edit_changes_fields(user_service, users_repo):
    updated = user_service.edit("u_1", name="Alice Cruz", department="HR")

    assert updated.name == "Alice Cruz"
    assert updated.card_uid == "CARD-001"
    assert users_repo.get_by_id("u_1").department == "HR"


def test_edit_cannot_steal_another_card(user_service):
    bob = user_service.register(name="Bob", card_uid="CARD-002")

    with pytest.raises(ValidationError):
        user_service.edit(bob.user_id, card_uid="CARD-001")


def test_edit_and_delete_unknown_user(user_service):
    with pytest.raises(ValidationError, match="User not found"):
        user_service.edit("missing", name="X")
    with pytest.raises(ValidationError, match="User not found"):
        user_service.delete("missing")


def test_delete_and_reset(user_service, users_repo):
    user_service.register(name="Bob", card_uid="CARD-002")
    user_service.delete("u_1")

    assert users_repo.get_by_id("u_1") is None
    assert user_service.reset_directory() == 1
    assert list(user_service.list_users()) == []


@pytest.fixture
def auth_service() -> AuthService:
    return AuthService(admin_username="admin", admin_password_hash=generate_password_hash("admin123"))


def test_authenticate_success(auth_service):
    session = auth_service.authenticate("admin", "admin123")

    assert session.username == "admin"
    assert session.is_admin is True


@pytest.mark.parametrize("username, password", [("admin", "wrong"), ("root", "admin123"), ("", "")])
def test_authenticate_failure(auth_service, username, password):
    with pytest.raises(AuthenticationError, match="Invalid username or password"):
        auth_service.authenticate(username, password)


def test_placeholder_hash_never_matches():
    auth = AuthService(admin_username="admin", admin_password_hash="CHANGE_ME")

    with pytest.raises(AuthenticationError):
        auth.authenticate("admin", "CHANGE_ME")
