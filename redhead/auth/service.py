import logging
from passlib.context import CryptContext

from . import model
from ..storage.interface import Storage
from ..storage.model import User, UserCreate
from ..exceptions import AuthenticationError, BadRequestError, ConflictError

bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return bcrypt_context.hash(password)


def register_user(
    storage: Storage, register_user_request: model.RegisterUserRequest
) -> User:
    """Creates a user, enforcing unique username and email.

    The password is optional; when given only its bcrypt hash is stored.
    """
    if storage.get_user_by_email(register_user_request.email) or storage.get_user_by_username(
        register_user_request.username
    ):
        logging.warning(
            f"Registration rejected, {register_user_request.username} or "
            f"{register_user_request.email} already exists"
        )
        raise ConflictError("User already exists")

    hashed_password = (
        get_password_hash(register_user_request.password)
        if register_user_request.password
        else None
    )
    user = storage.create_user(
        UserCreate(
            username=register_user_request.username,
            email=register_user_request.email,
            hashed_password=hashed_password,
        )
    )
    logging.info(f"Registered user {user.username} (ID: {user.id})")
    return user


def authenticate_user(storage: Storage, login_request: model.LoginRequest) -> User:
    """
    Looks a user up by email, falling back to username.

    This is a placeholder sign-in: a password is only checked when the caller
    sends one and the account has a stored hash.
    """
    if login_request.email:
        user = storage.get_user_by_email(login_request.email)
    elif login_request.username:
        user = storage.get_user_by_username(login_request.username)
    else:
        raise BadRequestError("Email or username is required")

    if not user:
        logging.warning(
            f"Login failed, no user for {login_request.email or login_request.username}"
        )
        raise AuthenticationError("User not found")

    if login_request.password and user.hashed_password:
        if not verify_password(login_request.password, user.hashed_password):
            logging.warning(f"Password verification failed for user {user.username}")
            raise AuthenticationError("Incorrect password")

    return user
