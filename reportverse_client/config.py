"""
Client Configuration Management
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any


@dataclass
class Credentials:
    """Bearer token plus who it belongs to"""
    token: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


@dataclass
class ClientConfig:
    """Configuration for the ReportVerse client"""

    # API settings
    api_base_url: str = "http://localhost:5000/api"
    timeout: float = 30.0

    # Auth (REPORTVERSE_TOKEN wins over the credentials file)
    token: Optional[str] = None

    # Cache windows (seconds)
    default_cache_ttl: float = 300.0  # 5 minutes
    dashboard_cache_ttl: float = 30.0  # mentor dashboard

    # Pending-issue poller
    poll_interval: float = 3600.0  # hourly
    pending_days_threshold: int = 3

    # Paths
    config_dir: str = field(default_factory=lambda: str(Path.home() / ".reportverse"))
    credentials_file: str = "credentials.json"

    def __post_init__(self):
        if not os.path.isabs(self.credentials_file):
            self.credentials_file = str(Path(self.config_dir) / self.credentials_file)

    # ==================== Credentials ====================

    def load_credentials(self) -> Optional[Credentials]:
        path = Path(self.credentials_file)
        if not path.exists():
            return None
        with open(path) as f:
            data = json.load(f)
        if not data.get("token"):
            return None
        return Credentials(**{k: v for k, v in data.items() if k in Credentials.__dataclass_fields__})

    def save_credentials(self, credentials: Credentials) -> None:
        path = Path(self.credentials_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(asdict(credentials), f, indent=2)
        os.chmod(path, 0o600)

    def clear_credentials(self) -> None:
        path = Path(self.credentials_file)
        if path.exists():
            path.unlink()

    # ==================== Loading ====================

    @classmethod
    def load_default(cls) -> "ClientConfig":
        """Defaults overridden by REPORTVERSE_* environment variables"""
        config = cls()
        config._load_from_env()
        return config

    def _load_from_env(self) -> None:
        env_mappings = {
            "REPORTVERSE_API_URL": "api_base_url",
            "REPORTVERSE_TOKEN": "token",
            "REPORTVERSE_TIMEOUT": ("timeout", float),
            "REPORTVERSE_CACHE_TTL": ("default_cache_ttl", float),
            "REPORTVERSE_DASHBOARD_CACHE_TTL": ("dashboard_cache_ttl", float),
            "REPORTVERSE_POLL_INTERVAL": ("poll_interval", float),
            "REPORTVERSE_PENDING_DAYS": ("pending_days_threshold", int),
        }

        for env_var, mapping in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                if isinstance(mapping, tuple):
                    attr, converter = mapping
                    setattr(self, attr, converter(value))
                else:
                    setattr(self, mapping, value)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
