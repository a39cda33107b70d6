"""
Bearer token resolution.

Tokens are issued elsewhere; this module only turns a valid HS256 token into
the caller's identity for the cart and order routes.
"""
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import settings
from database import Store, get_store, serialize, to_obj_id

security = HTTPBearer()


def create_token(user: dict) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user["_id"]),
        "email": user.get("email"),
        "exp": now + timedelta(minutes=settings.JWT_EXPIRES_MIN),
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security),
                     store: Store = Depends(get_store)) -> dict:
    payload = decode_token(credentials.credentials)
    oid = to_obj_id(payload.get("sub"))
    user = store.collection("user").find_one({"_id": oid}) if oid else None
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    user = serialize(user)
    return {"id": user["id"], "name": user.get("name"), "email": user.get("email")}
