from fastapi import HTTPException, status


class LeaveValidationError(Exception):
    """Base class for leave request problems the caller can correct."""


class MissingFieldError(LeaveValidationError):
    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Please fill in all required fields: {', '.join(self.fields)}")


class InvalidRangeError(LeaveValidationError):
    def __init__(self, message="End date must be after start date"):
        super().__init__(message)


class InvalidTransitionError(LeaveValidationError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change a {current} leave application to {requested}")


def get_user_exception():
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    return credentials_exception


def get_unknown_entity_exception():
    entity_exception = HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Entity not found"
    )
    return entity_exception


def get_forbidden_exception():
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You are not authorized to perform this function"
    )
