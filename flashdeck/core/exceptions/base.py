from typing import Dict, Optional


class AppError(Exception):
    """Base exception class for application-specific errors"""

    def __init__(self, message: str, error_code: str, details: Optional[Dict] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)
