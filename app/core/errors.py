from app.core.error_codes import ErrorCode


class ApiError(Exception):
    def __init__(self, status_code: int, code: str, message: str):
        self.status_code = status_code
        self.code = str(code)
        self.message = message
        super().__init__(message)


class InvalidCredentialFormat(ApiError):
    def __init__(self, message: str = "Malformed authorization header"):
        super().__init__(status_code=401, code=ErrorCode.INVALID_CREDENTIAL_FORMAT, message=message)


class Unauthorized(ApiError):
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(status_code=401, code=ErrorCode.UNAUTHORIZED, message=message)


class UpstreamUnavailable(ApiError):
    """Storage provider call failed; the client may retry."""

    def __init__(self, message: str = "Storage provider unavailable, please retry"):
        super().__init__(status_code=503, code=ErrorCode.UPSTREAM_UNAVAILABLE, message=message)


class ConfigurationError(RuntimeError):
    pass
