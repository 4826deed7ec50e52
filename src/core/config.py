"""Configuration management"""
from pathlib import Path
from typing import Optional
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    # Branding (workbook metadata)
    company_name: str = "SkyWay Airlines"

    # Encryption of customer fields. A urlsafe base64 Fernet key; when unset
    # no primary encryption primitive is available.
    report_encryption_key: Optional[str] = None
    # Document reports may fall back to a reversible obfuscation when the
    # primary primitive is missing. Spreadsheet/CSV reports never do.
    allow_obfuscation_fallback: bool = True

    # Report constants
    default_ticket_price: float = 250.0

    # Paths
    project_root: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)
    output_dir: Path = Path("outputs")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode='after')
    def check_production_fallback(self):
        if self.allow_obfuscation_fallback and self.environment.lower() == "production":
            raise ValueError("ALLOW_OBFUSCATION_FALLBACK must be disabled in production")
        return self

# Instantiate settings
settings = Settings()
