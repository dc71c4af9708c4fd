"""
Standardized Exception Hierarchy for the Status Hub

Every error the hub raises derives from StatusHubError so that both protocol
surfaces (REST and MCP) can map failures to responses in one place.

Exception Categories:
- Configuration Errors: invalid settings at startup or on live update
- Validation Errors: malformed requests and unknown enum values
- Lookup Errors: operations that target a task that does not exist
- Protocol Errors: JSON-RPC error objects returned by the MCP surface
- Client Errors: transport failures seen by the reporter client

Usage:
    from status_hub.utils.exceptions import InvalidEnumValueError

    if value not in valid:
        raise InvalidEnumValueError("status", value, valid)
"""

from typing import Optional, Any, Dict, List


# ============================================================================
# Base Exception
# ============================================================================

class StatusHubError(Exception):
    """
    Base exception for all Status Hub errors.

    All custom exceptions inherit from this class so the request façades can
    translate them into responses without knowing every subclass.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for categorization
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }

    def __str__(self) -> str:
        """String representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(StatusHubError):
    """Raised when there's an issue with configuration or settings."""

    def __init__(
        self,
        setting_name: str,
        message: str,
        expected_value: Optional[Any] = None,
        actual_value: Optional[Any] = None
    ):
        details = {"setting_name": setting_name}
        if expected_value is not None:
            details["expected_value"] = str(expected_value)
        if actual_value is not None:
            details["actual_value"] = str(actual_value)

        super().__init__(
            message=f"Configuration error for '{setting_name}': {message}",
            error_code="CONFIG_ERROR",
            details=details
        )
        self.setting_name = setting_name


# ============================================================================
# Validation Errors
# ============================================================================

class ValidationError(StatusHubError):
    """Base class for validation errors."""
    pass


class InvalidEnumValueError(ValidationError):
    """Raised when a status/source string is outside its closed set."""

    def __init__(
        self,
        field_name: str,
        value: Any,
        valid_values: List[str]
    ):
        super().__init__(
            message=f"Invalid {field_name} '{value}'. Valid: {valid_values}",
            error_code="INVALID_ENUM",
            details={
                "field": field_name,
                "value": str(value),
                "valid_values": list(valid_values)
            }
        )
        self.field_name = field_name
        self.value = value
        self.valid_values = list(valid_values)


class InvalidRequestError(ValidationError):
    """Raised when a request body cannot be parsed or is missing fields."""

    def __init__(self, message: str, parameter_name: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="INVALID_REQUEST",
            details={"parameter_name": parameter_name} if parameter_name else None
        )
        self.parameter_name = parameter_name


# ============================================================================
# Lookup Errors
# ============================================================================

class TaskNotFoundError(StatusHubError):
    """Raised when an operation targets an unknown task id or project path."""

    def __init__(
        self,
        task_id: Optional[str] = None,
        project_path: Optional[str] = None
    ):
        if task_id is not None:
            message = f"Task not found: {task_id}"
        else:
            message = f"No task matches project path: {project_path}"

        super().__init__(
            message=message,
            error_code="TASK_NOT_FOUND",
            details={"task_id": task_id, "project_path": project_path}
        )
        self.task_id = task_id
        self.project_path = project_path


# ============================================================================
# Protocol Errors
# ============================================================================

class JsonRpcError(StatusHubError):
    """A JSON-RPC 2.0 error object, returned to the caller rather than raised out."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    def __init__(self, code: int, message: str, data: Optional[Any] = None):
        super().__init__(
            message=message,
            error_code="JSONRPC_ERROR",
            details={"code": code}
        )
        self.code = code
        self.data = data

    def to_error_object(self) -> Dict[str, Any]:
        """Render as the ``error`` member of a JSON-RPC response."""
        error = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


# ============================================================================
# Client Errors
# ============================================================================

class HubClientError(StatusHubError):
    """Raised by StatusHubClient when the hub is unreachable or answers 4xx/5xx."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        full_message = message
        if original_error:
            full_message += f"\nCaused by: {str(original_error)}"

        super().__init__(
            message=full_message,
            error_code="HUB_CLIENT_ERROR",
            details={
                "status_code": status_code,
                "original_error": str(original_error) if original_error else None
            }
        )
        self.status_code = status_code
        self.original_error = original_error
