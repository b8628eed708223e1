import datetime
from functools import wraps

import bcrypt
import jwt
from flask import current_app, g, request

from sniprewards.exceptions import AuthError, NotFound
from sniprewards.services import record_store


def hash_password(password: str) -> bytes:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())


def check_password(password: str, stored_hash) -> bool:
    if isinstance(stored_hash, str):
        stored_hash = stored_hash.encode("utf-8")
    return bcrypt.checkpw(password.encode("utf-8"), stored_hash)


def issue_token(profile) -> str:
    payload = {
        "sub": profile.id,
        "email": profile.email,
        "role": profile.role,
        "exp": datetime.datetime.now(datetime.timezone.utc)
        + datetime.timedelta(hours=current_app.config.get("TOKEN_TTL_HOURS", 1)),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise AuthError("INVALID_TOKEN", "Token has expired")
    except jwt.InvalidTokenError:
        raise AuthError("INVALID_TOKEN")


def current_profile():
    """Resolve the profile behind the request's bearer token."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("UNAUTHORIZED")

    claims = decode_token(token.strip())
    try:
        return record_store.profile_by_id(claims.get("sub"))
    except NotFound:
        raise AuthError("INVALID_TOKEN", "Account no longer exists")


def require_auth(*roles):
    """
    Protect a route with a bearer token, optionally restricted to roles.

    The authenticated profile is available as ``g.current_profile``.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            profile = current_profile()
            if roles and profile.role not in roles:
                raise AuthError("FORBIDDEN", required_roles=list(roles))
            g.current_profile = profile
            return view(*args, **kwargs)

        return wrapper

    return decorator
