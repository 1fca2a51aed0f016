from pydantic import BaseModel, ConfigDict, Field


class UploadGrantOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    expire: str
    policy: str
    signature: str
    accessid: str
    sts_token: str = Field(alias="stsToken")
    host: str
    dir: str


class UploadGrantResponse(BaseModel):
    sts: UploadGrantOut
