"""
Exceptions module
Project-wide exception classes and error codes
"""

from typing import Optional, Dict, Any


class InventoryError(Exception):
    """Base exception for the project

    All custom exceptions derive from this class, which provides a uniform
    error message format.

    Attributes:
        message: Error message
        error_code: Error code (optional)
        details: Error details (optional)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return the formatted error message"""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dict for logging"""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code,
            'details': self.details
        }


class ActiveUserError(InventoryError):
    """The interactive user or their profile could not be determined"""
    pass


class ConfigError(InventoryError):
    """Configuration errors"""
    pass


class ReportError(InventoryError):
    """Report save/upload errors"""
    pass


class ErrorCodes:
    """Predefined error codes"""

    # User errors
    ACTIVE_USER_NOT_FOUND = "USR_001"

    # Config errors
    UPLOAD_URL_MISSING = "CFG_001"

    # Report errors
    REPORT_UPLOAD_FAILED = "RPT_001"
    REPORT_SAVE_FAILED = "RPT_002"
