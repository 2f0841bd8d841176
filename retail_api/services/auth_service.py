import logging
from datetime import datetime, timezone

from pymongo.errors import DuplicateKeyError

from retail_api.core.errors import ValidationError, AuthenticationError, NotFoundError
from retail_api.core.security import hash_password, verify_password, issue_token
from retail_api.db.mongo import USERS
from retail_api.utils.serializers import serialize_doc, to_object_id

logger = logging.getLogger("retail_api.auth")

NO_PASSWORD = {"password": 0}


def _public_user(user: dict) -> dict:
    user = dict(user)
    user.pop("password", None)
    return serialize_doc(user)


def register_user(db, name: str, email: str, password: str) -> dict:
    email = email.lower()
    if db[USERS].find_one({"email": email}):
        raise ValidationError("User already exists")

    now = datetime.now(timezone.utc)
    user = {
        "name": name,
        "email": email,
        "password": hash_password(password),
        "role": "customer",
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        user["_id"] = db[USERS].insert_one(user).inserted_id
    except DuplicateKeyError:
        # lost a race against a concurrent registration
        raise ValidationError("User already exists")

    logger.info("Registered user %s", user["_id"])
    return {"token": issue_token(str(user["_id"])), "user": _public_user(user)}


def authenticate(db, email: str, password: str) -> dict:
    user = db[USERS].find_one({"email": email.lower()})
    if not user or not verify_password(password, user.get("password")):
        logger.info("Failed login for %s", email)
        raise AuthenticationError("Invalid email or password")
    return {"token": issue_token(str(user["_id"])), "user": _public_user(user)}


def find_user(db, user_id):
    """Looks a user up by id without the password; None when it is gone."""
    try:
        oid = to_object_id(user_id)
    except ValidationError:
        return None
    return db[USERS].find_one({"_id": oid}, NO_PASSWORD)


def get_profile(db, user_id) -> dict:
    user = find_user(db, user_id) if user_id else None
    if not user:
        raise NotFoundError("User not found")
    return serialize_doc(user)
