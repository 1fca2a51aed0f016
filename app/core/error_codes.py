from enum import StrEnum


class ErrorCode(StrEnum):
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIAL_FORMAT = "INVALID_CREDENTIAL_FORMAT"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"

    INVALID_PET_ID = "INVALID_PET_ID"
    PET_NOT_FOUND = "PET_NOT_FOUND"
    INVALID_NOTE_ID = "INVALID_NOTE_ID"
    NOTE_NOT_FOUND = "NOTE_NOT_FOUND"
