"""Application error hierarchy mapped to HTTP status codes."""

from http import HTTPStatus


class DamageInspectorError(Exception):
    """Base class for errors rendered as JSON error responses."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self, message: str, context: dict[str, object] | None = None
    ) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)


class ValidationError(DamageInspectorError):
    """A required field is missing or has an invalid value."""

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class NotFoundError(DamageInspectorError):
    """A requested record does not exist."""

    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        super().__init__(
            f"{resource.capitalize()} not found",
            {"resource": resource, "resource_id": resource_id},
        )
        self.resource = resource
        self.resource_id = resource_id


class UpstreamError(DamageInspectorError):
    """A dependency (inference or storage) failed."""

    def __init__(
        self, dependency: str, message: str, status: int | None = None
    ) -> None:
        if status is not None:
            message = f"{message} (status {status})"
        super().__init__(message, {"dependency": dependency, "status": status})
        self.dependency = dependency
        self.status = status


class InferenceRejectedError(UpstreamError):
    """The inference service answered with a non-2xx status."""

    def __init__(self, status: int, reason: str = "") -> None:
        message = "Inference server error"
        if reason:
            message = f"{message}: {reason}"
        super().__init__("inference", message, status)


class InferenceUnreachableError(UpstreamError):
    """The inference service could not be reached."""

    def __init__(self, reason: str = "") -> None:
        message = "Inference server is not reachable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__("inference", message)


class InferenceMalformedResponseError(UpstreamError):
    """The inference service answered 2xx without the expected payload."""

    def __init__(self, reason: str = "missing image_url") -> None:
        super().__init__(
            "inference", f"Invalid response from inference server: {reason}"
        )


class StorageError(UpstreamError):
    """An object storage operation failed."""

    def __init__(self, operation: str, reason: str = "") -> None:
        message = f"Object storage {operation} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__("storage", message)
        self.operation = operation


class ConfigurationError(DamageInspectorError):
    """Required environment values are missing."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__("Server configuration error", {"missing": missing})
        self.missing = missing

    @property
    def detail(self) -> str:
        return f"Missing environment variables: {', '.join(self.missing)}"


class InternalError(DamageInspectorError):
    """Anything uncaught by the routes."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
