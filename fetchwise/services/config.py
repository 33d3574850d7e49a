"""
RequestConfig - Validated description of a single logical request.

Carries the transport-native options (method, url, params, headers, ...)
together with the orchestration flags that drive caching, duplicate
cancellation and retry. One instance is shared by every retry attempt of
the same logical request; `retry_count` advances in place.
"""

from typing import Any, Callable, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fetchwise.services.cancellation import CancellationToken
from fetchwise.services.errors import ConfigurationError
from fetchwise.settings import Settings, global_settings

# Milliseconds, either fixed or computed from the 1-indexed attempt number
RetryDelay = Union[int, Callable[[int], int]]

# Fields owned by the pipeline; never copied from a caller-supplied config
_RUNTIME_FIELDS = frozenset({"retry_count", "cancel_token"})

_TRANSPORT_FIELDS = (
    "params",
    "headers",
    "cookies",
    "content",
    "data",
    "files",
    "timeout",
    "follow_redirects",
    "extensions",
)


class RequestConfig(BaseModel):
    """Request options with orchestration flags."""

    model_config = ConfigDict(
        extra="forbid",
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    # Transport-native options
    method: str = "GET"
    url: str
    params: dict[str, Any] | None = None
    headers: dict[str, str] | None = None
    cookies: dict[str, str] | None = None
    content: bytes | str | None = None
    data: dict[str, Any] | None = None
    files: dict[str, Any] | None = None
    json_body: Any = Field(default=None, alias="json")
    timeout: float | None = None
    follow_redirects: bool | None = None
    extensions: dict[str, Any] | None = None

    # Orchestration flags
    cache: bool = False
    cancel_duplicated: bool = False
    duplicated_key: Callable[..., str] | None = None
    retry: int = Field(default=0, ge=0)
    retry_delay: RetryDelay = 200
    retry_delay_rise: bool = True
    final_retry_timeout: float | None = Field(default=None, gt=0)

    # Runtime state
    retry_count: int = Field(default=0, ge=0)
    cancel_token: CancellationToken | None = None

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, value: str) -> str:
        if not value:
            raise ValueError("method must not be empty")
        return value.upper()

    @field_validator("retry_delay")
    @classmethod
    def _check_retry_delay(cls, value: RetryDelay) -> RetryDelay:
        if not callable(value) and value < 0:
            raise ValueError("retry_delay must be >= 0 milliseconds")
        return value

    @staticmethod
    def defaults(settings: Settings | None = None) -> dict[str, Any]:
        """Default option values derived from process settings."""
        settings = settings or global_settings
        return {
            "method": "GET",
            "cache": False,
            "cancel_duplicated": settings.cancel_duplicated,
            "retry": settings.retry,
            "retry_delay": settings.retry_delay_ms,
            "retry_delay_rise": settings.retry_delay_rise,
            "final_retry_timeout": settings.final_retry_timeout,
        }

    @classmethod
    def build(
        cls,
        options: dict[str, Any],
        settings: Settings | None = None,
    ) -> "RequestConfig":
        """
        Merge options over the defaults and validate.

        Raises:
            ConfigurationError: If an option is unknown or invalid
        """
        merged = cls.defaults(settings)
        merged.update(options)
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid request options: {e}") from e

    def explicit_options(self) -> dict[str, Any]:
        """Options the caller set explicitly, excluding runtime state."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name not in _RUNTIME_FIELDS
        }

    def transport_options(self) -> dict[str, Any]:
        """Keyword arguments for the transport call, omitting unset values."""
        options = {
            name: getattr(self, name)
            for name in _TRANSPORT_FIELDS
            if getattr(self, name) is not None
        }
        if self.json_body is not None:
            options["json"] = self.json_body
        return options
