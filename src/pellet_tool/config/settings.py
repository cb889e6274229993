"""
Centralized settings and path configuration for the pellet quote tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('true', '1', 'yes', 'on')


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Tier price list
    pricing_tiers: Path

    # Distance lookup
    google_maps_api_key: Optional[str] = None
    depot_location: str = "Sundre, AB, Canada"
    http_timeout: float = 10.0

    # Outbound email
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from_email: Optional[str] = None
    smtp_use_tls: bool = True
    notify_email: Optional[str] = None

    @property
    def distance_configured(self) -> bool:
        return bool(self.google_maps_api_key)

    @property
    def email_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_from_email and self.notify_email)

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and the environment."""
        root = project_root or get_project_root()
        load_dotenv(root / '.env')

        return cls(
            project_root=root,
            pricing_tiers=Path(os.getenv(
                'PRICING_TIERS_CSV',
                str(PACKAGE_DIR / 'data' / 'pricing_tiers.csv'),
            )),
            google_maps_api_key=os.getenv('GOOGLE_MAPS_API_KEY') or None,
            depot_location=os.getenv('DEPOT_LOCATION', "Sundre, AB, Canada"),
            http_timeout=float(os.getenv('HTTP_TIMEOUT', '10')),
            smtp_host=os.getenv('SMTP_HOST') or None,
            smtp_port=int(os.getenv('SMTP_PORT', '587')),
            smtp_username=os.getenv('SMTP_USERNAME') or None,
            smtp_password=os.getenv('SMTP_PASSWORD') or None,
            smtp_from_email=os.getenv('SMTP_FROM_EMAIL') or None,
            smtp_use_tls=_env_bool('SMTP_USE_TLS', True),
            notify_email=os.getenv('NOTIFY_EMAIL') or None,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
