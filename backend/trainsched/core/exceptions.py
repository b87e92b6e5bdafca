class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised when input is malformed, incomplete or references an unknown group/module."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)


class InvalidSlotError(ValidationError):
    """Raised when a day/slot coordinate falls outside the weekly grid."""
    def __init__(self, day_id, slot_id):
        super().__init__(
            f"Invalid slot coordinate (day={day_id}, slot={slot_id}): day must be 1-6 and slot 1-4",
            details={"day_id": day_id, "slot_id": slot_id},
        )


class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)


class NamedResourceNotFoundError(AppError):
    """Raised when a resource looked up by name is not found."""
    def __init__(self, resource_type: str, name: str):
        super().__init__(f'{resource_type} "{name}" not found', status_code=404)


class ConflictError(AppError):
    """Raised when a slot is already occupied by the same trainer, room or group."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)


class BrokenReferenceError(AppError):
    """Raised when a stored assignment points at a trainer or track that no longer exists."""
    def __init__(self, message: str):
        super().__init__(message, status_code=404)
