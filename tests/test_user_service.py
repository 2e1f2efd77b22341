"""Unit tests for UserService (credential store) with a mocked Motor collection."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import ConflictException
from social.users.services.user_service import UserService, format_user_response


@pytest.fixture
def service(mock_db):
    return UserService(mock_db)


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_new_account_is_standard_and_signed_out(self, service, mock_collection):
        mock_collection.find_one.return_value = None
        mock_collection.insert_one.return_value = SimpleNamespace(inserted_id=ObjectId())

        user = await service.create_user(email=" Bob@B.com ", password_hash="$2b$hash", name="Bob")

        inserted = mock_collection.insert_one.call_args[0][0]
        assert inserted["email"] == "bob@b.com"
        assert inserted["role"] == "user"
        assert inserted["token"] is None
        assert inserted["token_expiration"] is None
        assert set(inserted) == {
            "email", "password", "name", "age", "gender", "icon", "role",
            "token", "token_expiration", "date_created", "date_updated",
        }
        assert user["_id"] == mock_collection.insert_one.return_value.inserted_id

    @pytest.mark.asyncio
    async def test_existing_email_conflicts(self, service, mock_collection):
        mock_collection.find_one.return_value = {"_id": ObjectId()}

        with pytest.raises(ConflictException) as exc_info:
            await service.create_user(email="bob@b.com", password_hash="$2b$hash", name="Bob")

        assert exc_info.value.code == "email_taken"
        mock_collection.insert_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_key_race_conflicts(self, service, mock_collection):
        mock_collection.find_one.return_value = None
        mock_collection.insert_one.side_effect = DuplicateKeyError("E11000")

        with pytest.raises(ConflictException):
            await service.create_user(email="bob@b.com", password_hash="$2b$hash", name="Bob")


class TestSessionFields:
    @pytest.mark.asyncio
    async def test_set_session_writes_both_fields_in_one_update(self, service, mock_collection, sample_user_id):
        mock_collection.update_one.return_value = SimpleNamespace(matched_count=1)
        expires_at = datetime(2026, 10, 20, tzinfo=timezone.utc)

        assert await service.set_session(sample_user_id, "hash", expires_at) is True

        mock_collection.update_one.assert_awaited_once()
        query, update = mock_collection.update_one.call_args[0]
        assert query == {"_id": ObjectId(sample_user_id)}
        assert update["$set"]["token"] == "hash"
        assert update["$set"]["token_expiration"] == expires_at

    @pytest.mark.asyncio
    async def test_clear_session_nulls_both_fields(self, service, mock_collection, sample_user_id):
        mock_collection.update_one.return_value = SimpleNamespace(matched_count=1)

        assert await service.clear_session(sample_user_id, "hash") is True

        query, update = mock_collection.update_one.call_args[0]
        assert query == {"_id": ObjectId(sample_user_id), "token": "hash"}
        assert update["$set"]["token"] is None
        assert update["$set"]["token_expiration"] is None

    @pytest.mark.asyncio
    async def test_set_session_reports_missing_account(self, service, mock_collection, sample_user_id):
        mock_collection.update_one.return_value = SimpleNamespace(matched_count=0)

        assert await service.set_session(sample_user_id, "hash", datetime.now(timezone.utc)) is False

    @pytest.mark.asyncio
    async def test_clear_session_reports_replaced_token(self, service, mock_collection, sample_user_id):
        mock_collection.update_one.return_value = SimpleNamespace(matched_count=0)

        assert await service.clear_session(sample_user_id, "stale-hash") is False


class TestLookups:
    @pytest.mark.asyncio
    async def test_malformed_id_skips_query(self, service, mock_collection):
        assert await service.get_user_by_id("nope") is None
        mock_collection.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_email_lookup_is_normalized(self, service, mock_collection):
        mock_collection.find_one.return_value = None

        await service.get_user_by_email("  A@B.COM")

        mock_collection.find_one.assert_awaited_once_with({"email": "a@b.com"})

    @pytest.mark.asyncio
    async def test_list_users_projects_out_secrets(self, service, mock_collection):
        cursor = AsyncMock()
        cursor.to_list.return_value = []
        mock_collection.find.return_value = cursor

        await service.list_users()

        projection = mock_collection.find.call_args[0][1]
        assert projection == {"password": 0, "token": 0, "token_expiration": 0}



class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_only_profile_fields_are_written(self, service, mock_collection, sample_user_id):
        mock_collection.find_one.side_effect = [None, {"_id": ObjectId(sample_user_id), "name": "Bob"}]
        mock_collection.update_one.return_value = SimpleNamespace(matched_count=1)

        await service.update_profile(sample_user_id, {
            "email": " Bob@B.com",
            "name": "Bob",
            "password": "plain",
            "token": "forged",
            "token_expiration": datetime.now(timezone.utc),
        })

        written = mock_collection.update_one.call_args[0][1]["$set"]
        assert written["email"] == "bob@b.com"
        assert written["name"] == "Bob"
        assert not {"password", "token", "token_expiration", "role"} & set(written)

    @pytest.mark.asyncio
    async def test_email_owned_by_another_account_conflicts(self, service, mock_collection, sample_user_id):
        mock_collection.find_one.return_value = {"_id": ObjectId()}

        with pytest.raises(ConflictException) as exc_info:
            await service.update_profile(sample_user_id, {"email": "taken@b.com"})

        assert exc_info.value.code == "email_taken"
        mock_collection.update_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_account_returns_none(self, service, mock_collection, sample_user_id):
        mock_collection.update_one.return_value = SimpleNamespace(matched_count=0)

        assert await service.update_profile(sample_user_id, {"name": "Bob"}) is None


class TestStats:
    @pytest.mark.asyncio
    async def test_average_age_ignores_missing_ages(self, service, mock_collection):
        cursor = AsyncMock()
        cursor.to_list.return_value = [{"age": 20}, {"age": 25}, {"age": None}, {"age": 30}]
        mock_collection.find.return_value = cursor

        assert await service.average_age() == 25

    @pytest.mark.asyncio
    async def test_average_age_without_data_is_zero(self, service, mock_collection):
        cursor = AsyncMock()
        cursor.to_list.return_value = []
        mock_collection.find.return_value = cursor

        assert await service.average_age() == 0

    @pytest.mark.asyncio
    async def test_count_by_gender_covers_every_value(self, service, mock_collection):
        mock_collection.count_documents.return_value = 2

        counts = await service.count_by_gender()

        assert counts == {"male": 2, "female": 2, "other": 2, "prefer_not_to_say": 2}

def test_format_user_response_never_includes_secrets():
    user = {
        "_id": ObjectId(),
        "email": "a@b.com",
        "name": "Alice",
        "password": "$2b$hash",
        "token": "$2b$token",
        "token_expiration": datetime.now(timezone.utc),
        "role": "user",
        "age": 30,
    }

    response = format_user_response(user)

    assert response["id"] == str(user["_id"])
    assert response["age"] == 30
    assert not {"password", "token", "token_expiration"} & set(response)
