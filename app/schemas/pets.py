from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PetIn(CamelModel):
    id: int | None = None
    name: str | None = None
    family: str | None = None
    gender: int | None = None
    birth_time: int | None = None
    avatar: str | None = None
    description: str | None = None


class PetOut(PetIn):
    owner_id: str
    create_time: int | None = None
    update_time: int | None = None


class AddPetRequest(BaseModel):
    pet: PetIn


class UpdatePetRequest(BaseModel):
    pet: PetIn | None = None


class DeletePetRequest(CamelModel):
    pet_id: int | None = None


class PetResponse(BaseModel):
    data: PetOut


class PetListResponse(BaseModel):
    data: list[PetOut]


class DeletedResponse(BaseModel):
    data: bool
