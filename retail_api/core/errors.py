from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: str = None, headers: dict = None):
        super().__init__(status_code=self.status_code, detail=message or self.default_message, headers=headers)


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class AuthenticationError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"

    def __init__(self, message: str = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied, admin only"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"


class InternalError(ApiError):
    """Unhandled or database failure; the raw error is echoed back to the caller."""
    default_message = "Server Error"

    def __init__(self, error: Exception = None, message: str = None):
        super().__init__(message)
        self.error = str(error) if error is not None else None

    def to_content(self) -> dict:
        content = {"message": self.detail}
        if self.error is not None:
            content["error"] = self.error
        return content
