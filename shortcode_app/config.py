from pathlib import Path
from typing import Any, Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """
    
    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    
    # Application
    app_name: str = "Shortcode Redirector"
    app_version: str = "1.0.0"
    app_root: str = "shortcodes"
    app_website: str = "http://127.0.0.1:8000"
    app_vars: Dict[str, Any] = Field(default_factory=dict)
    templates_dir: Path = TEMPLATES_DIR
    
    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    
    # Storage
    database_url: str = "sqlite:///./shortcodes.db"
    collection_backend: str = "sql"  # Options: "sql", "memory"
    
    # Cache settings
    cache_backend: str = "memory"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600
    
    # Short codes
    short_code_length: int = 6
    max_retries: int = 5
    allowed_statuses: List[int] = [301, 302, 303, 307, 308]
    default_status: int = 301
    
    # GitHub OAuth
    github_client_id: str = ""
    github_client_secret: str = ""
    deployment: str = "http://127.0.0.1:8000"  # Base URL for the OAuth callback
    
    # Sessions
    session_secret: str = "change-me-in-production"
    session_https_only: bool = True
    return_to_max_age: int = 3600  # Lifetime of the returnTo cookie in seconds
    
    # Outbound notifications
    notify_hook_url: str = ""
    http_timeout: float = 10.0
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def github_callback_url(self) -> str:
        return f"{self.deployment.rstrip('/')}/auth/github/callback"

    @property
    def template_vars(self) -> Dict[str, Any]:
        """Display variables handed to every template as ``appVars``."""
        return {
            "name": self.app_name,
            "root": self.app_root,
            "website": self.app_website,
            "allowedStatuses": self.allowed_statuses,
            "defaultStatus": self.default_status,
            **self.app_vars,
        }


settings = Settings()
