from typing import Dict, Optional

from .base import AppError


class FlashcardError(AppError):
    """Base class for flashcard-related errors"""

    def __init__(self, message: str, details: Optional[Dict] = None, error_code: str = "FLASHCARD_ERROR"):
        super().__init__(message, error_code, details)


class FlashcardValidationError(FlashcardError):
    """Raised when flashcard content validation fails"""

    def __init__(self, field: str, reason: str, value: Optional[str] = None):
        details = {"field": field, "reason": reason}
        if value:
            details["value"] = value
        super().__init__(f"Invalid flashcard {field}: {reason}", details, "FLASHCARD_VALIDATION_ERROR")


class LoadError(FlashcardError):
    """Raised when a flashcard document cannot be read or parsed"""

    def __init__(self, message: str, source: str, details: Optional[Dict] = None, error_code: str = "LOAD_ERROR"):
        super().__init__(message, {"source": source, **(details or {})}, error_code)


class ResourceMissingError(LoadError):
    """Raised when the flashcard resource does not exist"""

    def __init__(self, source: str, reason: Optional[str] = None):
        details = {"reason": reason} if reason else None
        super().__init__(f"Flashcard resource not found: {source}", source, details, "RESOURCE_NOT_FOUND")


class MalformedDocumentError(LoadError):
    """Raised when the flashcard document is not well-formed"""

    def __init__(self, source: str, reason: str, position: Optional[tuple] = None):
        details = {"reason": reason}
        if position:
            details["line"], details["column"] = position
        super().__init__(f"Malformed flashcard document {source}: {reason}", source, details, "MALFORMED_DOCUMENT")


class DeckError(AppError):
    """Base class for deck state errors"""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, "DECK_ERROR", details)


class DeckStateError(DeckError):
    """Raised when a deck operation is not valid in the current deck state"""

    def __init__(self, operation: str, reason: str):
        super().__init__(f"Deck {operation} failed: {reason}", {"operation": operation, "reason": reason})


class CardNotFoundError(DeckError):
    """Raised when a card id is not part of the deck"""

    def __init__(self, card_id: int):
        super().__init__(f"Card not found in deck: {card_id}", {"card_id": card_id})


class SchedulingError(AppError):
    """Scheduled task errors"""

    def __init__(self, message: str, task_name: str, details: Optional[Dict] = None):
        super().__init__(
            message=message, error_code="SCHEDULING_ERROR", details={"task_name": task_name, **(details or {})}
        )
