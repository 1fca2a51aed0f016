import logging

from fastapi import APIRouter, Depends

from app.api.deps import CallerId
from app.schemas.sts import UploadGrantOut, UploadGrantResponse
from app.services.upload_grant import ContentClass, UploadGrantService, get_upload_grant_service

router = APIRouter(prefix="/sts", tags=["sts"])
logger = logging.getLogger(__name__)


def _grant_response(service: UploadGrantService, caller_id: str, content_class: ContentClass) -> UploadGrantResponse:
    grant = service.issue(caller_id, content_class)
    return UploadGrantResponse(
        sts=UploadGrantOut(
            expire=grant.expire,
            policy=grant.policy,
            signature=grant.signature,
            accessid=grant.accessid,
            sts_token=grant.sts_token,
            host=grant.host,
            dir=grant.dir,
        )
    )


@router.get("/stsPetAvatar", response_model=UploadGrantResponse)
def sts_pet_avatar(
    caller_id: CallerId,
    service: UploadGrantService = Depends(get_upload_grant_service),
) -> UploadGrantResponse:
    logger.info("/sts/stsPetAvatar caller=%s", caller_id)
    return _grant_response(service, caller_id, ContentClass.AVATAR)


@router.get("/stsPetNote", response_model=UploadGrantResponse)
def sts_pet_note(
    caller_id: CallerId,
    service: UploadGrantService = Depends(get_upload_grant_service),
) -> UploadGrantResponse:
    logger.info("/sts/stsPetNote caller=%s", caller_id)
    return _grant_response(service, caller_id, ContentClass.NOTE_IMAGE)
