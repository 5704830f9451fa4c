import pytest
from unittest.mock import MagicMock

from redhead.auth import service as auth_service
from redhead.auth.model import LoginRequest, RegisterUserRequest
from redhead.exceptions import AuthenticationError, BadRequestError, ConflictError
from redhead.storage.interface import Storage
from redhead.storage.model import User


# Fixtures
@pytest.fixture
def mock_storage():
    return MagicMock(spec=Storage)


@pytest.fixture
def test_user():
    return User(
        id="user-1",
        username="testuser",
        email="testuser@mail.com",
        credits=120,
        hashed_password=auth_service.get_password_hash("password123"),
    )


# Test verify_password
def test_verify_password_correct():
    hashed_password = auth_service.get_password_hash("password123")
    assert auth_service.verify_password("password123", hashed_password) is True


def test_verify_password_incorrect():
    hashed_password = auth_service.get_password_hash("password123")
    assert auth_service.verify_password("wrongpassword", hashed_password) is False


# Test register_user
def test_register_user_hashes_password(mock_storage, test_user):
    mock_storage.get_user_by_email.return_value = None
    mock_storage.get_user_by_username.return_value = None
    mock_storage.create_user.return_value = test_user

    user = auth_service.register_user(
        mock_storage,
        RegisterUserRequest(username="testuser", email="testuser@mail.com", password="pw123456"),
    )

    assert user == test_user
    created = mock_storage.create_user.call_args.args[0]
    assert created.hashed_password != "pw123456"
    assert auth_service.verify_password("pw123456", created.hashed_password)


def test_register_user_without_password(mock_storage, test_user):
    mock_storage.get_user_by_email.return_value = None
    mock_storage.get_user_by_username.return_value = None
    mock_storage.create_user.return_value = test_user

    auth_service.register_user(
        mock_storage, RegisterUserRequest(username="testuser", email="testuser@mail.com")
    )

    assert mock_storage.create_user.call_args.args[0].hashed_password is None


def test_register_user_conflict(mock_storage, test_user):
    mock_storage.get_user_by_email.return_value = test_user

    with pytest.raises(ConflictError, match="User already exists"):
        auth_service.register_user(
            mock_storage,
            RegisterUserRequest(username="another", email="testuser@mail.com"),
        )
    mock_storage.create_user.assert_not_called()


# Test authenticate_user
def test_authenticate_user_prefers_email(mock_storage, test_user):
    mock_storage.get_user_by_email.return_value = test_user

    user = auth_service.authenticate_user(
        mock_storage, LoginRequest(email="testuser@mail.com", username="ignored")
    )

    assert user == test_user
    mock_storage.get_user_by_username.assert_not_called()


def test_authenticate_user_not_found(mock_storage):
    mock_storage.get_user_by_username.return_value = None
    with pytest.raises(AuthenticationError, match="User not found"):
        auth_service.authenticate_user(mock_storage, LoginRequest(username="nonexistent"))


def test_authenticate_user_wrong_password(mock_storage, test_user):
    mock_storage.get_user_by_username.return_value = test_user
    with pytest.raises(AuthenticationError, match="Incorrect password"):
        auth_service.authenticate_user(
            mock_storage, LoginRequest(username="testuser", password="wrongpassword")
        )


def test_authenticate_user_without_password_is_allowed(mock_storage, test_user):
    mock_storage.get_user_by_username.return_value = test_user
    assert auth_service.authenticate_user(mock_storage, LoginRequest(username="testuser")) == test_user


def test_authenticate_user_needs_identifier(mock_storage):
    with pytest.raises(BadRequestError):
        auth_service.authenticate_user(mock_storage, LoginRequest())
