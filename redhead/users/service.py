import logging

from ..storage.interface import Storage
from ..storage.model import User, UserPreferences
from ..exceptions import NotFoundError


def get_user(storage: Storage, user_id: str) -> User:
    """Fetches a user or raises NotFoundError."""
    user = storage.get_user(user_id)
    if not user:
        logging.warning(f"User with ID {user_id} not found.")
        raise NotFoundError("User")
    return user


def set_user_credits(storage: Storage, user_id: str, credits: int) -> User:
    """Overwrites the balance. Debits for generations go through record_generation instead."""
    user = storage.update_user_credits(user_id, credits)
    if not user:
        logging.warning(f"Cannot set credits, user with ID {user_id} not found.")
        raise NotFoundError("User")
    logging.info(f"Credits for user {user_id} set to {credits}.")
    return user


def set_user_preferences(
    storage: Storage, user_id: str, preferences: UserPreferences | None
) -> User:
    user = storage.update_user_preferences(user_id, preferences)
    if not user:
        logging.warning(f"Cannot set preferences, user with ID {user_id} not found.")
        raise NotFoundError("User")
    return user
