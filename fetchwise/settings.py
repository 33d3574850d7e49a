import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class Settings(BaseModel):
    # Logging
    log_level: str = Field(default="INFO", alias="FETCHWISE_LOG_LEVEL")
    debug: bool = Field(default=False, alias="FETCHWISE_DEBUG")

    # Transport
    request_timeout: float = Field(default=30.0, alias="FETCHWISE_REQUEST_TIMEOUT")

    # Request option defaults
    cancel_duplicated: bool = Field(default=False, alias="FETCHWISE_CANCEL_DUPLICATED")
    retry: int = Field(default=0, ge=0, alias="FETCHWISE_RETRY")
    retry_delay_ms: int = Field(default=200, ge=0, alias="FETCHWISE_RETRY_DELAY_MS")
    retry_delay_rise: bool = Field(default=True, alias="FETCHWISE_RETRY_DELAY_RISE")
    final_retry_timeout: float | None = Field(
        default=None, alias="FETCHWISE_FINAL_RETRY_TIMEOUT"
    )


global_settings = Settings.model_validate(dict(os.environ))
