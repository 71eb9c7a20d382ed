from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings
from typing import List
import re

APP_NAME = "linkchecker"
APP_VERSION = "0.1.0"

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/110.0.0.0 Safari/537.36"

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


class ConfigurationError(ValueError):
    """Raised when run options are invalid; nothing has been checked yet."""


class CheckOptions(BaseModel):
    """Options shared by the checker, the validation pool and the runner."""

    timeout: float = Field(default=30.0, gt=0)
    workers: int = Field(default=10, ge=1)
    max_redirects: int = Field(default=10, ge=0)
    user_agent: str = DEFAULT_USER_AGENT

    model_config = {"frozen": True}

    @classmethod
    def build(cls, **values) -> "CheckOptions":
        """Validate options, turning pydantic errors into ConfigurationError."""
        values = {key: value for key, value in values.items() if value is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"invalid options: {problems}") from e


class Settings(BaseSettings):
    REDIS_URL: str = "redis://localhost:6379/0"
    CORS_ORIGINS: List[str] = ["*"]
    USER_AGENT: str = DEFAULT_USER_AGENT
    PORT: int = 10000

    LINKCHECK_TIMEOUT: float = 30.0
    LINKCHECK_WORKERS: int = 10
    LINKCHECK_MAX_REDIRECTS: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = 'utf-8'

    def check_options(self, **overrides) -> CheckOptions:
        values = {
            "timeout": self.LINKCHECK_TIMEOUT,
            "workers": self.LINKCHECK_WORKERS,
            "max_redirects": self.LINKCHECK_MAX_REDIRECTS,
            "user_agent": self.USER_AGENT,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return CheckOptions.build(**values)


def parse_duration(value: str) -> float:
    """Parse a duration such as ``30s``, ``1m30s`` or ``500ms`` into seconds.

    A bare number is taken as seconds.
    """
    text = str(value).strip()
    if not text:
        raise ConfigurationError("invalid duration ''")
    try:
        return float(text)
    except ValueError:
        pass

    total = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()
    if position != len(text):
        raise ConfigurationError(f"invalid duration '{value}'")
    return total


# Load settings from environment
settings = Settings()
