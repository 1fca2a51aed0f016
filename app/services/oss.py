"""
Alibaba Cloud OSS / STS helpers for direct uploads from the mobile app.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re
from urllib.parse import urlparse

import oss2
from alibabacloud_sts20150401 import models as sts_models
from alibabacloud_sts20150401.client import Client as StsClient
from alibabacloud_tea_openapi.models import Config

from app.core.config import STS_MAX_DURATION_SECONDS, STS_MIN_DURATION_SECONDS, Settings, get_settings
from app.core.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

_SESSION_NAME_INVALID = re.compile(r"[^A-Za-z0-9.@_-]")


@dataclass(frozen=True)
class TemporaryCredential:
    """Role-scoped STS credential. Never persist or log the secret parts."""

    access_key_id: str
    access_key_secret: str = field(repr=False)
    security_token: str = field(repr=False)
    expires_at: str


def clamp_duration(seconds: int) -> int:
    return max(STS_MIN_DURATION_SECONDS, min(STS_MAX_DURATION_SECONDS, int(seconds)))


def session_name_for(caller_id: str) -> str:
    name = _SESSION_NAME_INVALID.sub("_", f"petjournal-{caller_id}")
    return name[:64]


class StsCredentialBroker:
    """Exchanges the service key pair for a short-lived role credential."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._sts_client: StsClient | None = None

    def _get_sts_client(self) -> StsClient:
        if self._sts_client is not None:
            return self._sts_client

        s = self._settings
        timeout_ms = max(1, int(s.sts_timeout_seconds)) * 1000
        config = Config(
            access_key_id=s.oss_access_key_id,
            access_key_secret=s.oss_access_key_secret,
            region_id=s.sts_region_id,
            connect_timeout=timeout_ms,
            read_timeout=timeout_ms,
        )
        if s.oss_sts_endpoint:
            config.endpoint = s.oss_sts_endpoint
        self._sts_client = StsClient(config)
        return self._sts_client

    def assume_role(self, *, session_name: str, duration_seconds: int) -> TemporaryCredential:
        s = self._settings
        request = sts_models.AssumeRoleRequest(
            role_arn=s.oss_role_arn,
            role_session_name=session_name,
            duration_seconds=clamp_duration(duration_seconds),
        )
        try:
            response = self._get_sts_client().assume_role(request)
            credentials = response.body.credentials
            credential = TemporaryCredential(
                access_key_id=credentials.access_key_id,
                access_key_secret=credentials.access_key_secret,
                security_token=credentials.security_token,
                expires_at=credentials.expiration,
            )
        except Exception as exc:  # noqa: BLE001 - SDK raises TeaException, network errors, etc.
            logger.error("STS AssumeRole failed session=%s error=%s", session_name, type(exc).__name__)
            raise UpstreamUnavailable() from exc

        if not (credential.access_key_id and credential.access_key_secret and credential.security_token):
            logger.error("STS AssumeRole returned incomplete credentials session=%s", session_name)
            raise UpstreamUnavailable()
        return credential


class OSSService:
    """Object operations performed with the service identity (cleanup only)."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._bucket: oss2.Bucket | None = None

    def _get_bucket(self) -> oss2.Bucket:
        if self._bucket is not None:
            return self._bucket
        s = self._settings
        auth = oss2.Auth(s.oss_access_key_id, s.oss_access_key_secret)
        self._bucket = oss2.Bucket(auth, f"https://{s.oss_region}.aliyuncs.com", s.oss_bucket_name)
        return self._bucket

    @staticmethod
    def object_key_from_url(file_url: str) -> str | None:
        value = str(file_url or "").strip()
        if not value:
            return None
        if value.startswith("http://") or value.startswith("https://"):
            value = urlparse(value).path
        return value.lstrip("/") or None

    def delete_object(self, file_url: str, *, allowed_prefix: str) -> bool:
        """
        Best-effort deletion. Only keys under ``allowed_prefix`` are touched.
        """
        key = self.object_key_from_url(file_url)
        if not key or not key.startswith(allowed_prefix) or ".." in key.split("/"):
            logger.warning("Skip deleting object outside caller prefix prefix=%s", allowed_prefix)
            return False

        try:
            self._get_bucket().delete_object(key)
        except oss2.exceptions.OssError as exc:
            logger.warning("OSS delete failed key=%s status=%s", key, getattr(exc, "status", None))
            return False
        logger.info("OSS object deleted key=%s", key)
        return True


oss_service = OSSService()
