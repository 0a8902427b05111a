import re
from functools import lru_cache

from pydantic_settings import BaseSettings

from corsware.core.errors import CorsConfigError
from corsware.cors.options import DEFAULT_METHODS, CorsOptions


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    environment: str = "development"
    log_level: str | None = None
    host: str = "0.0.0.0"
    port: int = 8000

    # --- CORS ---
    cors_origins: str = "*"  # "*", "" (disabled) or comma-separated origins
    cors_origin_regex: str | None = None
    cors_methods: str = DEFAULT_METHODS
    cors_allowed_headers: str = ""  # empty: reflect Access-Control-Request-Headers
    cors_exposed_headers: str = ""
    cors_credentials: bool = False
    cors_max_age: int | None = None
    cors_preflight_continue: bool = False
    cors_options_success_status: int = 204

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origin(self):
        """Origin option from CORS_ORIGINS and CORS_ORIGIN_REGEX."""
        origins = _split(self.cors_origins)
        pattern = None
        if self.cors_origin_regex:
            try:
                pattern = re.compile(self.cors_origin_regex)
            except re.error as e:
                raise CorsConfigError(f"Invalid CORS_ORIGIN_REGEX: {e}") from e

        if pattern is None:
            if not origins:
                return False
            if origins == ["*"]:
                return "*"
            if len(origins) == 1:
                return origins[0]
            return origins
        return [o for o in origins if o != "*"] + [pattern]

    def get_cors_options(self) -> CorsOptions:
        return CorsOptions(
            origin=self.get_cors_origin(),
            methods=self.cors_methods,
            allowed_headers=_split(self.cors_allowed_headers) or None,
            exposed_headers=_split(self.cors_exposed_headers) or None,
            credentials=self.cors_credentials,
            max_age=self.cors_max_age,
            preflight_continue=self.cors_preflight_continue,
            options_success_status=self.cors_options_success_status,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
