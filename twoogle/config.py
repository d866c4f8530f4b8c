"""
Twoogle Configuration Module

Handles loading, validation, and management of configuration settings.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        raise ImportError("Please install tomli: pip install tomli")


GUEST_USERNAME = "messageservice_guest"
MAX_MESSAGE_LENGTH = 140


@dataclass
class ServiceConfig:
    """Message service general settings."""
    name: str = "Twoogle"
    guest_username: str = GUEST_USERNAME
    max_message_length: int = MAX_MESSAGE_LENGTH
    feed_limit: int = 5
    login_attempts: int = 3


@dataclass
class DatabaseConfig:
    """Database settings."""
    path: str = "twoogle.db"
    busy_timeout_ms: int = 5000


@dataclass
class CryptoConfig:
    """Password hashing settings."""
    argon2_time_cost: int = 3
    argon2_memory_kb: int = 32768
    argon2_parallelism: int = 1


@dataclass
class FeaturesConfig:
    """Feature toggles."""
    registration_enabled: bool = True
    gui_enabled: bool = True


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    file: str = ""
    debug: bool = True


@dataclass
class Config:
    """Main configuration container."""
    service: ServiceConfig = field(default_factory=ServiceConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    crypto: CryptoConfig = field(default_factory=CryptoConfig)
    features: FeaturesConfig = field(default_factory=FeaturesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.service.name:
            errors.append("service.name cannot be empty")
        if not self.service.guest_username:
            errors.append("service.guest_username cannot be empty")
        elif self.service.guest_username != self.service.guest_username.lower():
            errors.append("service.guest_username must be lowercase")
        if self.service.max_message_length < 1:
            errors.append("service.max_message_length must be positive")
        if self.service.feed_limit < 1:
            errors.append("service.feed_limit must be positive")
        if self.service.login_attempts < 1:
            errors.append("service.login_attempts must be at least 1")

        if not self.database.path:
            errors.append("database.path cannot be empty")

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.logging.level.upper() not in valid_levels:
            errors.append(f"logging.level must be one of: {valid_levels}")

        if self.crypto.argon2_memory_kb < 8:
            errors.append("crypto.argon2_memory_kb must be at least 8")

        return errors

    def save(self, path: Path):
        """Save configuration to TOML file."""
        import toml  # For writing

        data = self._to_dict()

        with open(path, "w") as f:
            toml.dump(data, f)

    def _to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        from dataclasses import asdict
        return asdict(self)


def load_config(path: Path) -> Config:
    """Load configuration from TOML file."""
    config = Config()

    if not path.exists():
        return config

    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Map TOML sections to config dataclasses
    if "service" in data:
        config.service = ServiceConfig(**data["service"])

    if "database" in data:
        config.database = DatabaseConfig(**data["database"])

    if "crypto" in data:
        config.crypto = CryptoConfig(**data["crypto"])

    if "features" in data:
        config.features = FeaturesConfig(**data["features"])

    if "logging" in data:
        config.logging = LoggingConfig(**data["logging"])

    return config


def create_default_config(path: Path):
    """Create a default configuration file."""
    config = Config()
    config.save(path)
