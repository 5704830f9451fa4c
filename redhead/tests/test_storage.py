import pytest
from datetime import datetime, timedelta, timezone

from redhead.exceptions import ConflictError
from redhead.storage.interface import DEFAULT_CREDITS
from redhead.storage.model import (
    ImageHistoryCreate,
    ReferenceUploadCreate,
    SavedStyleCreate,
    UserCreate,
    UserPreferences,
)


@pytest.fixture
def user(storage):
    return storage.create_user(UserCreate(username="alice", email="a@x.com"))


def history_payload(user_id, **overrides):
    payload = {
        "user_id": user_id,
        "prompt": "a red fox",
        "style": "realism",
        "dimension": "1:1",
        "image_urls": ["https://images.example.com/fox.png"],
    }
    payload.update(overrides)
    return ImageHistoryCreate(**payload)


# Users
def test_create_user_applies_defaults(storage, user):
    assert user.credits == DEFAULT_CREDITS == 120
    assert user.preferences is None
    assert storage.get_user(user.id) == user


def test_user_ids_are_generated(storage, user):
    other = storage.create_user(UserCreate(username="bob", email="b@x.com"))
    assert user.id and other.id and user.id != other.id


def test_lookup_by_username_and_email(storage, user):
    assert storage.get_user_by_username("alice").id == user.id
    assert storage.get_user_by_email("a@x.com").id == user.id
    assert storage.get_user_by_username("nobody") is None
    assert storage.get_user_by_email("nobody@x.com") is None
    assert storage.get_user("missing") is None


@pytest.mark.parametrize(
    "username, email", [("alice", "other@x.com"), ("other", "a@x.com")]
)
def test_create_user_rejects_duplicates(storage, user, username, email):
    with pytest.raises(ConflictError):
        storage.create_user(UserCreate(username=username, email=email))


def test_update_user_credits(storage, user):
    updated = storage.update_user_credits(user.id, 42)
    assert updated.credits == 42
    assert storage.get_user(user.id).credits == 42
    assert storage.update_user_credits("missing", 10) is None


def test_update_user_preferences(storage, user):
    prefs = UserPreferences(style_description="moody film grain")
    updated = storage.update_user_preferences(user.id, prefs)
    assert updated.preferences.style_description == "moody film grain"
    assert storage.get_user(user.id).preferences.version == 1

    cleared = storage.update_user_preferences(user.id, None)
    assert cleared.preferences is None
    assert storage.update_user_preferences("missing", prefs) is None


def test_hashed_password_is_never_serialized(storage):
    user = storage.create_user(
        UserCreate(username="carol", email="c@x.com", hashed_password="$2b$hash")
    )
    assert storage.get_user(user.id).hashed_password == "$2b$hash"
    assert "hashed_password" not in user.model_dump()
    assert "hashedPassword" not in user.model_dump(by_alias=True)


# Saved styles
def test_saved_style_round_trip(storage, user):
    created = storage.create_saved_style(
        SavedStyleCreate(
            user_id=user.id,
            name="Noir",
            base_style="realism",
            refinement="high contrast black and white",
            tags=["moody", "bw"],
        )
    )
    assert created.usage_count == 0

    storage.increment_style_usage(created.id)
    storage.increment_style_usage(created.id)
    storage.increment_style_usage(created.id)

    fetched = storage.get_saved_style(created.id)
    assert fetched.model_dump(exclude={"usage_count", "created_at"}) == created.model_dump(
        exclude={"usage_count", "created_at"}
    )
    assert fetched.usage_count == 3


def test_increment_usage_of_missing_style_is_noop(storage):
    storage.increment_style_usage("missing")
    assert storage.get_saved_style("missing") is None


def test_list_saved_styles_by_owner(storage, user):
    other = storage.create_user(UserCreate(username="bob", email="b@x.com"))
    storage.create_saved_style(SavedStyleCreate(user_id=user.id, name="A", base_style="anime"))
    storage.create_saved_style(SavedStyleCreate(user_id=other.id, name="B", base_style="anime"))

    styles = storage.list_saved_styles(user.id)
    assert [style.name for style in styles] == ["A"]


def test_update_saved_style_merges_fields(storage, user):
    style = storage.create_saved_style(
        SavedStyleCreate(user_id=user.id, name="Old", base_style="anime", tags=["x"])
    )
    updated = storage.update_saved_style(style.id, {"name": "New"})
    assert updated.name == "New"
    assert updated.tags == ["x"]
    assert updated.base_style == "anime"
    assert storage.update_saved_style("missing", {"name": "x"}) is None


def test_delete_missing_style_twice_is_not_an_error(storage):
    storage.delete_saved_style("missing")
    storage.delete_saved_style("missing")


def test_deleting_style_keeps_history(storage, user):
    style = storage.create_saved_style(
        SavedStyleCreate(user_id=user.id, name="Noir", base_style="realism")
    )
    item = storage.create_image_history(history_payload(user.id, style_id=style.id))

    storage.delete_saved_style(style.id)

    assert storage.get_saved_style(style.id) is None
    assert storage.get_image_history_item(item.id).style_id == style.id


# Image history
def test_history_limit_returns_most_recent_first(storage, user):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    created = [
        storage.create_image_history(
            history_payload(user.id, prompt=f"prompt {i}", generated_at=start + timedelta(minutes=i))
        )
        for i in range(5)
    ]

    latest = storage.list_image_history(user.id, limit=2)

    assert [item.id for item in latest] == [created[4].id, created[3].id]


def test_history_default_limit_is_fifty(storage, user):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(55):
        storage.create_image_history(
            history_payload(user.id, generated_at=start + timedelta(seconds=i))
        )
    assert len(storage.list_image_history(user.id)) == 50


def test_history_is_scoped_to_owner(storage, user):
    other = storage.create_user(UserCreate(username="bob", email="b@x.com"))
    storage.create_image_history(history_payload(other.id))
    assert storage.list_image_history(user.id) == []


def test_history_records_cannot_be_mutated_through_returned_copies(storage, user):
    item = storage.create_image_history(history_payload(user.id))
    fetched = storage.get_image_history_item(item.id)
    fetched.image_urls.append("https://evil.example.com/x.png")

    assert storage.get_image_history_item(item.id).image_urls == [
        "https://images.example.com/fox.png"
    ]


def test_record_generation_debits_and_appends(storage, user):
    record = storage.record_generation(history_payload(user.id), cost=4)

    assert record.credits_remaining == 116
    assert storage.get_user(user.id).credits == 116
    assert storage.get_image_history_item(record.history.id).prompt == "a red fox"


def test_record_generation_refuses_when_balance_too_low(storage, user):
    storage.update_user_credits(user.id, 3)

    assert storage.record_generation(history_payload(user.id), cost=4) is None
    assert storage.get_user(user.id).credits == 3
    assert storage.list_image_history(user.id) == []


def test_record_generation_for_unknown_user(storage):
    assert storage.record_generation(history_payload("missing"), cost=4) is None


def test_record_generation_can_spend_exact_balance(storage, user):
    storage.update_user_credits(user.id, 4)
    record = storage.record_generation(history_payload(user.id), cost=4)
    assert record.credits_remaining == 0


# Reference uploads
def test_reference_upload_lifecycle(storage, user):
    upload = storage.create_reference_upload(
        ReferenceUploadCreate(user_id=user.id, filename="fox.png", url="https://cdn/fox.png")
    )
    assert upload.uploaded_at is not None
    assert storage.get_reference_upload(upload.id).filename == "fox.png"
    assert [u.id for u in storage.list_reference_uploads(user.id)] == [upload.id]

    storage.delete_reference_upload(upload.id)
    storage.delete_reference_upload(upload.id)

    assert storage.get_reference_upload(upload.id) is None
    assert storage.list_reference_uploads(user.id) == []
