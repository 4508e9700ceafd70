from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from typing import Any, ClassVar
import json
from pathlib import Path
import os


class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"

    # Database URL
    # Use an absolute path so running the app from different directories
    # (e.g., repo root or backend/) always resolves the same DB file.
    BASE_DIR: ClassVar[Path] = Path(__file__).resolve().parents[2]
    SQLALCHEMY_DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'repair_quotes.db'}"

    # CORS origins
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    CORS_ALLOW_ALL: bool = False

    LOG_LEVEL: str = "INFO"

    # Default currency code used across the application
    DEFAULT_CURRENCY: str = "BRL"

    # Company details printed on client messages and warranty certificates
    COMPANY_NAME: str = "LavaProFix"
    COMPANY_WHATSAPP: str = "(31) 98762-3965"
    COMPANY_EMAIL: str = "contatolavapro@gmail.com"
    COMPANY_ADDRESS: str = "Atendimento em domicílio, BH e RMBH"
    COMPANY_INSTAGRAM: str = "@lavaprofix"
    COMPANY_SITE: str = "lavaprofix.com.br"

    # Pricing defaults in currency units. Rows in the app_config table take
    # precedence; these apply when a key is missing there.
    DEFAULT_FIXED_VISIT_COST: float = 65.30
    DEFAULT_DIAGNOSTIC_FEE_TOP_LOAD: float = 190.0
    DEFAULT_DIAGNOSTIC_FEE_FRONT_LOAD: float = 230.0
    DEFAULT_CARD_FEE_RATE: float = 0.05
    DEFAULT_PIX_DISCOUNT_RATE: float = 0.05
    DEFAULT_SUPPLIER_LOGISTICS_FEE: float = 40.0

    @field_validator("CORS_ORIGINS", mode="before")
    def split_origins(cls, v: Any) -> list[str]:
        """Parse comma-separated or JSON list of origins from environment."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator(
        "DEFAULT_CARD_FEE_RATE",
        "DEFAULT_PIX_DISCOUNT_RATE",
        mode="after",
    )
    def rate_is_fraction(cls, v: float) -> float:
        if not 0 <= v < 1:
            raise ValueError("rates are fractions between 0 and 1")
        return v

    @model_validator(mode="after")
    def allow_all_if_requested(cls, values: "Settings") -> "Settings":
        if values.CORS_ALLOW_ALL:
            values.CORS_ORIGINS = ["*"]
        return values

    def pricing_defaults(self) -> dict[str, str]:
        """Defaults keyed like the app_config table."""
        return {
            "fixed_visit_cost": str(self.DEFAULT_FIXED_VISIT_COST),
            "diagnostic_fee_top_load": str(self.DEFAULT_DIAGNOSTIC_FEE_TOP_LOAD),
            "diagnostic_fee_front_load": str(self.DEFAULT_DIAGNOSTIC_FEE_FRONT_LOAD),
            "card_fee_rate": str(self.DEFAULT_CARD_FEE_RATE),
            "pix_discount_rate": str(self.DEFAULT_PIX_DISCOUNT_RATE),
            "supplier_logistics_fee": str(self.DEFAULT_SUPPLIER_LOGISTICS_FEE),
        }

    def company(self) -> dict[str, str]:
        return {
            "name": self.COMPANY_NAME,
            "whatsapp": self.COMPANY_WHATSAPP,
            "email": self.COMPANY_EMAIL,
            "address": self.COMPANY_ADDRESS,
            "instagram": self.COMPANY_INSTAGRAM,
            "site": self.COMPANY_SITE,
        }

    model_config = SettingsConfigDict(
        extra="forbid",
        env_file=os.getenv(
            "ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env")
        ),
        case_sensitive=True,
    )


def load_settings() -> "Settings":
    return Settings(_env_file=os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env")))


settings = load_settings()
