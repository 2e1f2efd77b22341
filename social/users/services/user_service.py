"""
User service - the credential store.

Owns the ``users`` collection. Session fields (``token``,
``token_expiration``) are only ever written together, in one update.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import ConflictException
from social.users.models import Gender, Role

logger = logging.getLogger(__name__)

# Never leave the credential store
SECRET_FIELDS = ("password", "token", "token_expiration")
PUBLIC_PROJECTION = {field: 0 for field in SECRET_FIELDS}
PROFILE_FIELDS = ("email", "name", "age", "gender", "icon")


def format_user_response(user: dict) -> dict:
    """Format a user document for API responses (no secrets)."""
    response = {
        "id": str(user["_id"]),
        "email": user.get("email"),
        "name": user.get("name"),
        "role": user.get("role", Role.USER.value),
        "date_created": user.get("date_created"),
        "date_updated": user.get("date_updated"),
    }
    for optional in ("age", "gender", "icon"):
        if user.get(optional) is not None:
            response[optional] = user[optional]
    return response


def strip_secrets(user: dict) -> dict:
    """Return a copy of a user document without credential fields."""
    return {k: v for k, v in user.items() if k not in SECRET_FIELDS}


class UserService:
    """
    Manages user accounts and their session fields.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize UserService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._users_collection = db["users"]

    async def ensure_indexes(self) -> None:
        """Create the unique email index (idempotent)."""
        await self._users_collection.create_index([("email", ASCENDING)], unique=True)

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: str,
        age: Optional[int] = None,
        gender: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> dict:
        """
        Create a new account. Session fields start unset.

        Args:
            email: Email address (normalized to lowercase)
            password_hash: bcrypt hash of the password
            name: Display name
            age: Optional age
            gender: Optional gender value
            icon: Optional avatar reference

        Returns:
            Created user document

        Raises:
            ConflictException: email already registered
        """
        email = normalize_email(email)

        if await self._users_collection.find_one({"email": email}, {"_id": 1}):
            raise ConflictException(message="Email already registered", code="email_taken")

        now = datetime.now(timezone.utc)
        user_doc = {
            "email": email,
            "password": password_hash,
            "name": name,
            "age": age,
            "gender": gender,
            "icon": icon,
            "role": Role.USER.value,
            "token": None,
            "token_expiration": None,
            "date_created": now,
            "date_updated": now,
        }

        try:
            result = await self._users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent signup for the same email
            raise ConflictException(message="Email already registered", code="email_taken")

        user_doc["_id"] = result.inserted_id
        logger.info(f"User created: {result.inserted_id}")
        return user_doc

    async def get_user_by_id(self, user_id: str) -> Optional[dict]:
        """
        Load user by id. Malformed ids resolve to None.

        Args:
            user_id: MongoDB ObjectId as string
        """
        if not ObjectId.is_valid(user_id):
            return None
        return await self._users_collection.find_one({"_id": ObjectId(user_id)})

    async def get_public_user(self, user_id: str) -> Optional[dict]:
        """Load user by id with credential fields projected out."""
        if not ObjectId.is_valid(user_id):
            return None
        return await self._users_collection.find_one(
            {"_id": ObjectId(user_id)},
            PUBLIC_PROJECTION,
        )

    async def get_user_by_email(self, email: str) -> Optional[dict]:
        """Load user by email address (case-insensitive)."""
        return await self._users_collection.find_one({"email": normalize_email(email)})

    async def list_users(self) -> List[dict]:
        """List every account without credential fields."""
        cursor = self._users_collection.find({}, PUBLIC_PROJECTION)
        return await cursor.to_list(length=None)

    async def set_session(
        self,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
    ) -> bool:
        """
        Store a session, replacing any previous one.

        Returns:
            True if the account exists and was updated
        """
        result = await self._users_collection.update_one(
            {"_id": ObjectId(user_id)},
            {
                "$set": {
                    "token": token_hash,
                    "token_expiration": expires_at,
                    "date_updated": datetime.now(timezone.utc),
                }
            },
        )
        return result.matched_count > 0

    async def clear_session(self, user_id: str, token_hash: str) -> bool:
        """
        Remove the stored session, only if it is still ``token_hash``.

        Returns:
            True if the session was cleared; False if the account is gone
            or a newer sign-in replaced the token
        """
        result = await self._users_collection.update_one(
            {"_id": ObjectId(user_id), "token": token_hash},
            {
                "$set": {
                    "token": None,
                    "token_expiration": None,
                    "date_updated": datetime.now(timezone.utc),
                }
            },
        )
        return result.matched_count > 0

    async def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Optional[dict]:
        """
        Update profile fields. Credential and session fields are never written.

        Args:
            user_id: MongoDB user ID
            updates: Already validated profile fields (email, name, age, gender, icon)

        Returns:
            Updated user without credential fields, None if the account does not exist

        Raises:
            ConflictException: email already used by another account
        """
        if not ObjectId.is_valid(user_id):
            return None

        changes = {k: v for k, v in updates.items() if k in PROFILE_FIELDS}
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            taken = await self._users_collection.find_one(
                {"email": changes["email"], "_id": {"$ne": ObjectId(user_id)}},
                {"_id": 1},
            )
            if taken:
                raise ConflictException(message="Email already registered", code="email_taken")

        changes["date_updated"] = datetime.now(timezone.utc)

        try:
            result = await self._users_collection.update_one(
                {"_id": ObjectId(user_id)},
                {"$set": changes},
            )
        except DuplicateKeyError:
            raise ConflictException(message="Email already registered", code="email_taken")

        if result.matched_count == 0:
            return None

        logger.info(f"Profile updated for user {user_id}: {sorted(changes)}")
        return await self.get_public_user(user_id)

    async def count_users(self) -> int:
        return await self._users_collection.count_documents({})

    async def count_by_gender(self) -> Dict[str, int]:
        """Number of accounts per declared gender."""
        counts = {}
        for gender in Gender:
            counts[gender.value] = await self._users_collection.count_documents({"gender": gender.value})
        return counts

    async def average_age(self) -> float:
        """Mean age over accounts that declared one, rounded to 2 decimals."""
        cursor = self._users_collection.find({"age": {"$ne": None}}, {"age": 1})
        ages = [u["age"] for u in await cursor.to_list(length=None) if u.get("age") is not None]
        if not ages:
            return 0
        return round(sum(ages) / len(ages), 2)

    async def count_active_sessions(self, now: Optional[datetime] = None) -> int:
        """Count accounts holding a session that has not yet expired."""
        now = now or datetime.now(timezone.utc)
        return await self._users_collection.count_documents({
            "token": {"$ne": None},
            "token_expiration": {"$gt": now},
        })


def normalize_email(email: str) -> str:
    return email.strip().lower()
