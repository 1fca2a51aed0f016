from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.errors import ConfigurationError

# Provider-side bounds for an STS AssumeRole duration.
STS_MIN_DURATION_SECONDS = 900
STS_MAX_DURATION_SECONDS = 3600


class Settings(BaseSettings):
    app_name: str = "pet-journal-backend"
    app_env: str = "development"
    app_port: int = 9000
    log_level: str = "INFO"

    # Either a full SQLAlchemy URL or the individual parts below.
    database_url: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "pet_journal"

    # Bearer tokens are issued elsewhere; we only hold the verification key.
    jwt_public_key: str = ""
    jwt_algorithms: list[str] = ["RS256"]
    jwt_identity_claim: str = "userId"

    # OSS / STS (direct uploads from the mobile client)
    oss_region: str = "oss-cn-hangzhou"
    oss_bucket_name: str = ""
    oss_access_key_id: str = ""
    oss_access_key_secret: str = ""
    oss_role_arn: str = ""
    oss_sts_endpoint: str = ""
    upload_policy_ttl_seconds: int = 3000
    sts_timeout_seconds: int = 5

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def oss_host(self) -> str:
        return f"https://{self.oss_bucket_name}.{self.oss_region}.aliyuncs.com"

    @property
    def sts_region_id(self) -> str:
        region = self.oss_region
        if region.startswith("oss-"):
            region = region.replace("oss-", "", 1)
        return region


def validate_upload_settings(settings: Settings) -> None:
    """Fail fast when the upload-grant flow cannot possibly work."""
    required = {
        "OSS_ROLE_ARN": settings.oss_role_arn,
        "OSS_BUCKET_NAME": settings.oss_bucket_name,
        "OSS_REGION": settings.oss_region,
        "OSS_ACCESS_KEY_ID": settings.oss_access_key_id,
        "OSS_ACCESS_KEY_SECRET": settings.oss_access_key_secret,
        "JWT_PUBLIC_KEY": settings.jwt_public_key,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")
    ttl = settings.upload_policy_ttl_seconds
    if not STS_MIN_DURATION_SECONDS <= ttl <= STS_MAX_DURATION_SECONDS:
        raise ConfigurationError(
            f"UPLOAD_POLICY_TTL_SECONDS must be within [{STS_MIN_DURATION_SECONDS}, {STS_MAX_DURATION_SECONDS}], got {ttl}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
