from datetime import datetime, timezone
from typing import Any

import jwt

from app.core.config import get_settings
from app.core.errors import InvalidCredentialFormat, Unauthorized


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def unix_now() -> int:
    return int(now_utc().timestamp())


def _public_key() -> str:
    # PEM keys usually arrive through env vars with escaped newlines.
    return get_settings().jwt_public_key.replace("\\n", "\n")


def parse_bearer_header(value: str | None) -> str:
    """Split ``"<scheme> <token>"`` and return the token."""
    if not value:
        raise InvalidCredentialFormat("Missing authorization header")

    parts = value.strip().split(" ")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidCredentialFormat()
    scheme, token = parts
    if scheme.lower() != "bearer":
        raise InvalidCredentialFormat("Unsupported authorization scheme")
    return token


def decode_access_token(token: str) -> dict[str, Any]:
    settings = get_settings()
    return jwt.decode(token, _public_key(), algorithms=settings.jwt_algorithms)


def verify_bearer_credential(value: str | None) -> str:
    """Return the caller id carried by a verified bearer token."""
    token = parse_bearer_header(value)
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as exc:
        raise Unauthorized() from exc

    claim = payload.get(get_settings().jwt_identity_claim)
    if claim is None or isinstance(claim, bool):
        raise Unauthorized("Token carries no caller identity")
    caller_id = str(claim).strip()
    if not caller_id:
        raise Unauthorized("Token carries no caller identity")
    return caller_id
