import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import CallerId
from app.core.error_codes import ErrorCode
from app.core.errors import ApiError
from app.core.security import unix_now
from app.db.session import get_db
from app.models import RELEASED_OWNER_ID, Pet
from app.schemas.pets import (
    AddPetRequest,
    DeletedResponse,
    DeletePetRequest,
    PetListResponse,
    PetOut,
    PetResponse,
    UpdatePetRequest,
)

router = APIRouter(prefix="/api", tags=["pets"])
logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "family", "gender", "birth_time", "avatar", "description")


def _owned_pet(db: Session, pet_id: int, caller_id: str) -> Pet:
    pet = db.execute(select(Pet).where(Pet.id == pet_id, Pet.owner_id == caller_id)).scalars().first()
    if not pet:
        raise ApiError(status_code=404, code=ErrorCode.PET_NOT_FOUND, message="Pet not found")
    return pet


@router.get("/getPetList", response_model=PetListResponse)
def get_pet_list(caller_id: CallerId, db: Session = Depends(get_db)) -> PetListResponse:
    rows = db.execute(select(Pet).where(Pet.owner_id == caller_id).order_by(Pet.id)).scalars().all()
    logger.info("/getPetList caller=%s count=%d", caller_id, len(rows))
    return PetListResponse(data=[PetOut.model_validate(row) for row in rows])


@router.post("/addPet", response_model=PetResponse)
def add_pet(payload: AddPetRequest, caller_id: CallerId, db: Session = Depends(get_db)) -> PetResponse:
    pet = Pet(
        owner_id=caller_id,
        create_time=unix_now(),
        **{name: getattr(payload.pet, name) for name in _EDITABLE_FIELDS},
    )
    db.add(pet)
    db.commit()
    db.refresh(pet)
    logger.info("/addPet caller=%s pet=%s", caller_id, pet.id)
    return PetResponse(data=PetOut.model_validate(pet))


@router.post("/updatePet", response_model=PetResponse)
def update_pet(payload: UpdatePetRequest, caller_id: CallerId, db: Session = Depends(get_db)) -> PetResponse:
    if payload.pet is None or not payload.pet.id:
        raise ApiError(status_code=400, code=ErrorCode.INVALID_PET_ID, message="Pet id is required")

    pet = _owned_pet(db, payload.pet.id, caller_id)
    for name in _EDITABLE_FIELDS:
        setattr(pet, name, getattr(payload.pet, name))
    pet.update_time = unix_now()
    db.add(pet)
    db.commit()
    db.refresh(pet)
    logger.info("/updatePet caller=%s pet=%s", caller_id, pet.id)
    return PetResponse(data=PetOut.model_validate(pet))


@router.post("/deletePet", response_model=DeletedResponse)
def delete_pet(payload: DeletePetRequest, caller_id: CallerId, db: Session = Depends(get_db)) -> DeletedResponse:
    """Release the pet rather than dropping the row; the previous owner is kept."""
    if not payload.pet_id:
        raise ApiError(status_code=400, code=ErrorCode.INVALID_PET_ID, message="Pet id is required")

    pet = _owned_pet(db, payload.pet_id, caller_id)
    pet.last_owner_id = caller_id
    pet.owner_id = RELEASED_OWNER_ID
    db.add(pet)
    db.commit()
    logger.info("/deletePet caller=%s pet=%s", caller_id, payload.pet_id)
    return DeletedResponse(data=True)
