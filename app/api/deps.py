from typing import Annotated

from fastapi import Depends, Header

from app.core.errors import Unauthorized
from app.core.security import verify_bearer_credential
from app.models import RELEASED_OWNER_ID
from app.services.oss import OSSService, oss_service


def get_current_caller_id(
    authorization: Annotated[str | None, Header()] = None,
    authentication: Annotated[str | None, Header()] = None,
) -> str:
    # Older app builds send the token in an "Authentication" header.
    caller_id = verify_bearer_credential(authorization or authentication)
    if caller_id == RELEASED_OWNER_ID:
        raise Unauthorized("Token carries no usable caller identity")
    return caller_id


def get_oss_service() -> OSSService:
    return oss_service


CallerId = Annotated[str, Depends(get_current_caller_id)]
