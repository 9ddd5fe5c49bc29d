from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from sqlalchemy.orm import Session

from dailydose.core.config import Settings
from dailydose.core.database import get_db
from dailydose.core.errors import Unauthenticated, Forbidden
from dailydose.models.orm import Role, User

class TokenData(BaseModel):
    sub: str

bearer = HTTPBearer(auto_error=False)

def create_token(user_id: str, settings: Settings, ttl_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    ttl = ttl_minutes if ttl_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {"sub": user_id, "iat": int(now.timestamp()), "exp": int((now + timedelta(minutes=ttl)).timestamp())}
    return jwt.encode(payload, settings.APP_SECRET.get_secret_value(), algorithm=settings.JWT_ALGORITHM)

def decode_token(token: str, settings: Settings) -> TokenData:
    try:
        payload = jwt.decode(token, settings.APP_SECRET.get_secret_value(), algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError:
        raise Unauthenticated("Invalid or expired token")
    if not payload.get("sub"):
        raise Unauthenticated("Invalid or expired token")
    return TokenData(sub=payload["sub"])

def get_current_user(request: Request, creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer), db: Session = Depends(get_db)) -> User:
    if creds is None:
        raise Unauthenticated()
    token = decode_token(creds.credentials, request.app.state.settings)
    user = db.get(User, token.sub)
    if user is None:
        raise Unauthenticated("User not found")
    return user

def require_roles(*required: Role):
    allowed = frozenset(required)
    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise Forbidden(f"Only {', '.join(sorted(r.value for r in allowed))} may access this resource")
        return user
    return checker
