from fastapi import HTTPException, status

from instafeed import messages


class AuthenticationRequired(HTTPException):
    """Exception raised when a mutating action has no caller identity"""

    def __init__(self, detail: str = messages.AUTH_REQUIRED):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class UserNotFound(HTTPException):
    """Exception raised when the caller has no local user row yet"""

    def __init__(self, detail: str = messages.USER_NOT_FOUND):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )


class AlreadyLiked(HTTPException):
    """Exception raised when the (post, user) like already exists"""

    def __init__(self, detail: str = messages.ALREADY_LIKED):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail
        )


class ServiceError(HTTPException):
    """Exception raised when a downstream database call fails"""

    def __init__(self, detail: str = messages.SERVER_ERROR):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )
