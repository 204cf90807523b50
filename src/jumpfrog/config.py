"""Configuration management for JumpFrog."""

import logging
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, asdict

from .rules import JUMP_WINDOW_MS, CONTINUATION_TICK_MS, DISCONNECT_GRACE_MS

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the configuration directory."""
    # Use XDG on Linux/WSL, or fallback
    if os.name == 'nt':
        config_base = Path(os.environ.get('APPDATA', Path.home() / 'AppData' / 'Roaming'))
    else:
        config_base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))
    return config_base / 'jumpfrog'


def get_config_file() -> Path:
    """Get the configuration file path (JUMPFROG_CONFIG overrides it)."""
    override = os.environ.get('JUMPFROG_CONFIG')
    if override:
        return Path(override)
    return get_config_dir() / 'settings.yaml'


@dataclass
class ServerSettings:
    """Network server settings."""
    host: str = "0.0.0.0"
    port: int = 4000
    # Comma-separated; the first entry is the share-link base when a client
    # sends no Origin header
    web_origin: str = "http://localhost:5173"

    @property
    def share_base(self) -> str:
        origins = [o.strip() for o in self.web_origin.split(",") if o.strip()]
        return (origins[0] if origins else "http://localhost:5173").rstrip("/")


@dataclass
class TimingSettings:
    """Turn timing, in milliseconds."""
    continuation_window_ms: int = JUMP_WINDOW_MS
    continuation_tick_ms: int = CONTINUATION_TICK_MS
    disconnect_grace_ms: int = DISCONNECT_GRACE_MS


@dataclass
class BotSettings:
    """Bot opponent settings."""
    difficulty: str = "MEDIUM"  # EASY, MEDIUM, HARD
    time_limit_ms: Dict[str, int] = field(
        default_factory=lambda: {"EASY": 150, "MEDIUM": 300, "HARD": 800}
    )
    thinking_delay_ms: Dict[str, int] = field(
        default_factory=lambda: {"EASY": 500, "MEDIUM": 400, "HARD": 300}
    )
    continuation_delay_ms: int = 300
    seed: Optional[int] = None


@dataclass
class LoggingSettings:
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Config:
    """Main configuration class."""
    server: ServerSettings = field(default_factory=ServerSettings)
    timing: TimingSettings = field(default_factory=TimingSettings)
    bot: BotSettings = field(default_factory=BotSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            'server': asdict(self.server),
            'timing': asdict(self.timing),
            'bot': asdict(self.bot),
            'logging': asdict(self.logging),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        config = cls()

        if 'server' in data:
            config.server = ServerSettings(**data['server'])
        if 'timing' in data:
            config.timing = TimingSettings(**data['timing'])
        if 'bot' in data:
            config.bot = BotSettings(**data['bot'])
        if 'logging' in data:
            config.logging = LoggingSettings(**data['logging'])

        return config

    def apply_env(self) -> "Config":
        """Apply PORT and WEB_ORIGIN environment overrides."""
        if os.environ.get('PORT'):
            self.server.port = int(os.environ['PORT'])
        if os.environ.get('WEB_ORIGIN'):
            self.server.web_origin = os.environ['WEB_ORIGIN']
        return self

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = get_config_file()

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load configuration from file, falling back to defaults."""
        if path is None:
            path = get_config_file()

        if not path.exists():
            return cls()

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
                if data is None:
                    return cls()
                return cls.from_dict(data)
        except (OSError, yaml.YAMLError, TypeError) as e:
            logger.warning("Failed to load config from %s: %s", path, e)
            return cls()


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure root logging from settings."""
    if settings is None:
        settings = get_config().logging
    logging.basicConfig(level=settings.level.upper(), format=settings.format)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.load().apply_env()
    return _config


def set_config(config: Optional[Config]) -> None:
    """Replace the global configuration (None forces a reload)."""
    global _config
    _config = config
