from typing import Optional


class KeydashException(Exception):
    status_code = 400
    message = "Invalid request"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class SettingsException(KeydashException):
    status_code = 500
    message = "Invalid settings"


class InvalidCredentialsException(KeydashException):
    status_code = 401
    message = "Invalid credentials"


class UnauthorizedException(KeydashException):
    status_code = 401
    message = "Unauthorized"


class ForbiddenException(KeydashException):
    status_code = 403
    message = "Forbidden"


class ValidationException(KeydashException):
    status_code = 400
    message = "Validation error"


class NotFoundException(KeydashException):
    status_code = 404
    message = "Not found"


class NotOwnerException(KeydashException):
    status_code = 403
    message = "You don't own this key"


class DuplicateKeyException(KeydashException):
    status_code = 400
    message = "Custom key already exists"


class InvalidTokenException(KeydashException):
    status_code = 400
    message = "Invalid referral token"


class InsufficientCreditsException(KeydashException):
    status_code = 400
    message = "Insufficient credits"


class InvalidKeyException(KeydashException):
    status_code = 404
    message = "Invalid key"


class KeyExpiredException(KeydashException):
    status_code = 400
    message = "Key has expired"


class DeviceLimitReachedException(KeydashException):
    status_code = 400
    message = "Device limit reached"
