"""
Custom Exceptions for the Admin Panel API
=========================================

Services raise these instead of HTTPException so that:
1. Every failure carries an explicit HTTP status and a stable error code
2. The outermost exception handler renders one uniform envelope
3. Service code stays free of framework imports

Usage:
    from app.core.exceptions import UserNotFoundError

    if not user:
        raise UserNotFoundError(user_id)
"""

from typing import Optional, Any, Dict, List


class AdminPanelError(Exception):
    """Base exception for all application errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: Optional[int] = None,
        errors: Optional[Dict[str, List[str]]] = None
    ):
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return error_response(self.message, self.code, self.errors)


# ============================================
# Validation Errors (400)
# ============================================

class ValidationError(AdminPanelError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str = "Validation failed", field: Optional[str] = None):
        errors = {field: [message]} if field else None
        super().__init__(message, code="VALIDATION_ERROR", errors=errors)


class InvalidFileTypeError(ValidationError):
    """Uploaded file type not allowed"""

    def __init__(self, file_type: str, allowed_types: list, field: Optional[str] = None):
        super().__init__(
            f"Invalid file type '{file_type}'. Allowed: {', '.join(allowed_types)}",
            field=field
        )
        self.code = "INVALID_FILE_TYPE"


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds its size limit"""

    def __init__(self, max_size: int, field: Optional[str] = None):
        super().__init__(
            f"File too large. Maximum size is {max_size // 1024 // 1024}MB",
            field=field
        )
        self.code = "FILE_TOO_LARGE"


# ============================================
# Authentication Errors (401)
# ============================================

class AuthenticationError(AdminPanelError):
    """Caller identity could not be established"""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHORIZED")


class InvalidCredentialsError(AuthenticationError):
    """Email/password pair rejected; deliberately generic"""

    def __init__(self):
        super().__init__("Invalid email or password")
        self.code = "INVALID_CREDENTIALS"


class InvalidTokenError(AuthenticationError):
    """JWT token is missing, malformed or has a bad signature"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """JWT token has expired"""

    def __init__(self):
        super().__init__("Token has expired")
        self.code = "TOKEN_EXPIRED"


# ============================================
# Authorization Errors (403)
# ============================================

class AuthorizationError(AdminPanelError):
    """Caller is not allowed to perform this action"""

    status_code = 403

    def __init__(self, message: str = "You do not have permission to access this resource"):
        super().__init__(message, code="FORBIDDEN")


class AccountInactiveError(AuthorizationError):
    """Account exists but has been deactivated"""

    def __init__(self, message: str = "Your account has been deactivated"):
        super().__init__(message)
        self.code = "ACCOUNT_INACTIVE"


# ============================================
# Resource Errors (404)
# ============================================

class ResourceNotFoundError(AdminPanelError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Optional[str] = None):
        super().__init__(f"{resource_type} not found", code="NOT_FOUND")
        self.resource_type = resource_type
        self.resource_id = resource_id


class UserNotFoundError(ResourceNotFoundError):
    """User not found"""

    def __init__(self, user_id: Optional[str] = None):
        super().__init__("User", user_id)


class StudentNotFoundError(ResourceNotFoundError):
    """Student record not found"""

    def __init__(self, student_id: Optional[str] = None):
        super().__init__("Student", student_id)


# ============================================
# Conflict Errors (409)
# ============================================

class ConflictError(AdminPanelError):
    """A unique value is already taken"""

    status_code = 409

    def __init__(self, message: str = "A record with this value already exists"):
        super().__init__(message, code="DUPLICATE_ERROR")


class DuplicateEmailError(ConflictError):
    """Email already registered to another account"""

    def __init__(self):
        super().__init__("Email already in use")


# ============================================
# Helper functions for API responses
# ============================================

def error_response(
    message: str,
    error: Optional[str] = None,
    errors: Optional[Dict[str, List[str]]] = None
) -> Dict[str, Any]:
    """Build the failure envelope: {success, message, error?, errors?}"""
    body: Dict[str, Any] = {"success": False, "message": message}
    if error:
        body["error"] = error
    if errors:
        body["errors"] = errors
    return body
