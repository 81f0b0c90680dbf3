from typing import Any


class ListViewError(Exception):
    """base exception for list view errors"""

    def __init__(self, message: str, detail: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "detail": self.detail}


class CatalogLoadError(ListViewError):
    """raised when the schema directory cannot be reached or parsed"""

    pass


class ProvisioningError(ListViewError):
    """base exception for creation endpoint failures"""

    pass


class ListViewValidationError(ProvisioningError):
    """creation endpoint refused the request"""

    def __init__(
        self,
        top_message: str | None = None,
        operation_errors: list[str] | None = None,
        field_errors: dict[str, list[str]] | None = None,
        detail: dict[str, Any] | None = None,
    ):
        super().__init__(top_message or "validation failed", detail=detail)
        self.top_message = top_message
        self.operation_errors = operation_errors or []
        self.field_errors = field_errors or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "operation_errors": self.operation_errors,
            "field_errors": self.field_errors,
            "detail": self.detail,
        }


class ProvisioningTransportError(ProvisioningError):
    """network or timeout failure with no structured body"""

    pass
