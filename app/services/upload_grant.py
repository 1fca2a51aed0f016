"""
Direct-upload grants: a caller-scoped POST policy signed with a fresh STS credential.

Flow per request: scope -> policy -> STS exchange -> signature -> grant.
Nothing here is cached between requests.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
import hashlib
import hmac
import json
import logging
from typing import Any, Protocol

from app.core.config import Settings, get_settings
from app.core.errors import Unauthorized
from app.core.security import now_utc
from app.services.oss import StsCredentialBroker, TemporaryCredential, clamp_duration, session_name_for

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


class ContentClass(Enum):
    AVATAR = ("pet-avatar", 1 * MIB)
    NOTE_IMAGE = ("pet-note", 2 * MIB)

    def __init__(self, directory: str, max_object_bytes: int) -> None:
        self.directory = directory
        self.max_object_bytes = max_object_bytes


@dataclass(frozen=True)
class UploadScope:
    directory_prefix: str
    max_object_bytes: int
    content_class: ContentClass


@dataclass(frozen=True)
class UploadPolicy:
    expires_at: datetime
    directory_prefix: str
    max_object_bytes: int
    bucket: str

    @property
    def expiration(self) -> str:
        # Same shape as JavaScript's Date.toISOString(), which OSS accepts.
        return self.expires_at.strftime("%Y-%m-%dT%H:%M:%S.") + f"{self.expires_at.microsecond // 1000:03d}Z"

    def to_document(self) -> dict[str, Any]:
        return {
            "expiration": self.expiration,
            "conditions": [
                ["content-length-range", 0, self.max_object_bytes],
                ["starts-with", "$key", self.directory_prefix],
                {"bucket": self.bucket},
            ],
        }


@dataclass(frozen=True)
class UploadGrant:
    expire: str
    policy: str
    signature: str
    accessid: str
    sts_token: str
    host: str
    dir: str


class CredentialBroker(Protocol):
    def assume_role(self, *, session_name: str, duration_seconds: int) -> TemporaryCredential: ...


def scope_for(caller_id: str, content_class: ContentClass) -> UploadScope:
    caller = str(caller_id or "").strip()
    if not caller or "/" in caller or caller in {".", ".."}:
        raise Unauthorized("Token carries no usable caller identity")
    return UploadScope(
        directory_prefix=f"{content_class.directory}/{caller}/",
        max_object_bytes=content_class.max_object_bytes,
        content_class=content_class,
    )


def build_upload_policy(scope: UploadScope, *, bucket: str, ttl_seconds: int, now: datetime) -> UploadPolicy:
    return UploadPolicy(
        expires_at=now.astimezone(timezone.utc) + timedelta(seconds=ttl_seconds),
        directory_prefix=scope.directory_prefix,
        max_object_bytes=scope.max_object_bytes,
        bucket=bucket,
    )


def encode_policy(policy: UploadPolicy) -> str:
    raw = json.dumps(policy.to_document(), separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def sign_policy(encoded_policy: str, access_key_secret: str) -> str:
    digest = hmac.new(access_key_secret.encode("utf-8"), encoded_policy.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def assemble_grant(
    policy: UploadPolicy,
    encoded_policy: str,
    signature: str,
    credential: TemporaryCredential,
    *,
    host: str,
) -> UploadGrant:
    return UploadGrant(
        expire=str(int(policy.expires_at.timestamp())),
        policy=encoded_policy,
        signature=signature,
        accessid=credential.access_key_id,
        sts_token=credential.security_token,
        host=host,
        dir=policy.directory_prefix,
    )


class UploadGrantService:
    def __init__(self, broker: CredentialBroker, settings: Settings | None = None) -> None:
        self._broker = broker
        self._settings = settings or get_settings()

    def issue(self, caller_id: str, content_class: ContentClass) -> UploadGrant:
        s = self._settings
        # Policy and credential share one lifetime, bounded by the STS range.
        ttl = clamp_duration(s.upload_policy_ttl_seconds)
        scope = scope_for(caller_id, content_class)
        policy = build_upload_policy(
            scope,
            bucket=s.oss_bucket_name,
            ttl_seconds=ttl,
            now=now_utc(),
        )
        credential = self._broker.assume_role(
            session_name=session_name_for(caller_id),
            duration_seconds=ttl,
        )
        encoded = encode_policy(policy)
        signature = sign_policy(encoded, credential.access_key_secret)
        logger.info("Upload grant issued caller=%s dir=%s", caller_id, scope.directory_prefix)
        return assemble_grant(policy, encoded, signature, credential, host=s.oss_host)


_broker: StsCredentialBroker | None = None


def get_upload_grant_service() -> UploadGrantService:
    global _broker
    if _broker is None:
        _broker = StsCredentialBroker()
    return UploadGrantService(_broker)
