from pydantic import BaseModel, ConfigDict, Field, field_validator


class HeaderConfig(BaseModel):
    region: str = "CF-Region-Code"
    country: str = "CF-IPCountry"

class RedirectConfig(BaseModel):
    enabled: bool = True
    status_code: int = 302

    @field_validator("status_code")
    @classmethod
    def _must_be_redirect(cls, value: int) -> int:
        if not 300 <= value <= 399:
            raise ValueError("status_code must be a 3xx redirect status")
        return value

class GuardConfig(BaseModel):
    backend_path_prefixes: list[str] = Field(
        default_factory=lambda: ["/api/admin", "/docs", "/redoc", "/openapi.json", "/health"]
    )
    ajax_header: str = "X-Requested-With"
    ajax_header_value: str = "XMLHttpRequest"
    admin_session_cookie: str | None = "admin_session"

class UrlConfig(BaseModel):
    allowed_schemes: list[str] = Field(default_factory=lambda: ["http", "https"])

    @field_validator("allowed_schemes")
    @classmethod
    def _not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("allowed_schemes must list at least one scheme")
        return [s.lower() for s in value]

class StorageConfig(BaseModel):
    db_filename: str = "region_redirect.db"

class AppConfig(BaseModel):
    headers: HeaderConfig = Field(default_factory=HeaderConfig)
    redirect: RedirectConfig = Field(default_factory=RedirectConfig)
    guard: GuardConfig = Field(default_factory=GuardConfig)
    urls: UrlConfig = Field(default_factory=UrlConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    model_config = ConfigDict(extra="forbid")
