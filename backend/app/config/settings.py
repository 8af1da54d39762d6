from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendSettings(BaseModel):
    name: str
    model: str


class RedactionRule(BaseModel):
    pattern: str
    replacement: str


class ProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKDESK_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    yahoo_base_url: str = "https://query1.finance.yahoo.com"
    nse_base_url: str = "https://www.nseindia.com"
    screener_base_url: str = "https://www.screener.in"
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    quote_timeout_seconds: float = 8.0
    search_timeout_seconds: float = 6.0
    default_exchange_suffix: str = ".NS"
    quote_adapters: List[str] = Field(default_factory=lambda: ["yahoo", "nse", "reference"])
    search_adapters: List[str] = Field(
        default_factory=lambda: ["yahoo", "nse", "screener", "reference"]
    )
    search_fallback_adapters: List[str] = Field(default_factory=lambda: ["reference"])


class SearchSettings(BaseModel):
    max_results: int = 15


class AnalysisSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKDESK_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "STOCKDESK_API_KEY"),
    )
    base_url: str = "https://api.openai.com/v1"
    timeout_seconds: float = 60.0
    product_name: str = "StockDesk"
    backends: List[BackendSettings] = Field(
        default_factory=lambda: [
            BackendSettings(name="primary", model="gpt-4.1"),
            BackendSettings(name="secondary", model="gpt-4.1-mini"),
            BackendSettings(name="reasoning", model="o4-mini"),
            BackendSettings(name="backup", model="gpt-4o"),
            BackendSettings(name="emergency", model="gpt-4o-mini"),
        ]
    )
    redactions: List[RedactionRule] = Field(
        default_factory=lambda: [
            RedactionRule(
                pattern=r"OpenAI|GPT-[0-9]+|Gemini|Google AI|Claude|Anthropic",
                replacement="Advanced AI",
            ),
            RedactionRule(
                pattern=r"powered by.*?AI",
                replacement="powered by StockDesk Intelligence",
            ),
        ]
    )
    buy_pe_threshold: float = 20.0
    hold_pe_threshold: float = 25.0
    buy_roe_threshold: float = 15.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKDESK_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "STOCKDESK_LOG_LEVEL"),
    )
    host: str = "0.0.0.0"
    port: int = 8000

    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)


settings = Settings()
