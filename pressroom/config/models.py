"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("pressroom", description="Database name")
    user: str = Field("pressroom_user", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")


class LLMConfig(BaseModel):
    """Generation provider configuration."""

    provider: str = Field("openai", description="LLM provider (openai, mock)")
    model: str = Field("gpt-4o-mini", description="Model name")
    api_key_env: Optional[str] = Field("OPENAI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Base URL for an OpenAI-compatible API")
    timeout_seconds: float = Field(120.0, description="Bounded wait per generation call", gt=0)
    draft_temperature: float = Field(0.7, ge=0.0, le=2.0)
    humanize_temperature: float = Field(0.8, ge=0.0, le=2.0)
    title_temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_output_tokens: int = Field(8000, ge=256, le=32000)


class SiteConfig(BaseModel):
    """The site articles are written for."""

    name: str = Field("GetEducated.com", description="Site name used in prompts")
    domain: str = Field("geteducated.com", description="Domain marker that identifies internal links")

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: str) -> str:
        """Store the bare domain in lower case."""
        v = v.strip().lower()
        for prefix in ("https://", "http://", "www."):
            if v.startswith(prefix):
                v = v[len(prefix):]
        v = v.rstrip("/")
        if not v:
            raise ValueError("Site domain must not be empty")
        return v


class WorkflowConfig(BaseModel):
    """Generation and review workflow settings."""

    sla_hours: float = Field(120.0, description="Review window before escalation", gt=0)
    link_inventory_limit: int = Field(20, description="Internal link candidates per prompt", ge=0, le=20)
    link_inventory_ttl_seconds: float = Field(300.0, description="Link inventory cache lifetime", ge=0)
    min_content_chars: int = Field(100, description="Raw character floor for draft content", ge=1)
    humanize: bool = Field(True, description="Run the humanize rewrite pass")
    cost_budget: float = Field(10.0, description="USD of provider usage per article before a warning", gt=0)


class WordPressConfig(BaseModel):
    """Publishing target configuration."""

    base_url: Optional[str] = Field(None, description="WordPress site URL")
    username: Optional[str] = Field(None, description="WordPress user")
    app_password_env: Optional[str] = Field(
        "WORDPRESS_APP_PASSWORD", description="Environment variable for the application password"
    )
    app_password: Optional[str] = Field(None, description="Application password (prefer app_password_env)")
    timeout_seconds: float = Field(30.0, gt=0)


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)
    wordpress: WordPressConfig = Field(default_factory=WordPressConfig)
