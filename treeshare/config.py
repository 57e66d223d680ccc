"""
Configuration management for the file server application.
"""
import os
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Base configuration class."""

    # Shared tree
    ROOT_DIR = os.path.expanduser(os.getenv("ROOT_DIR", "."))
    URL_PREFIX = os.getenv("URL_PREFIX", "/")

    # Policy flags
    SKIP_HIDDEN = _env_flag("SKIP_HIDDEN", "true")
    FOLLOW_SYMLINKS = _env_flag("FOLLOW_SYMLINKS", "false")
    READ_ONLY = _env_flag("READ_ONLY", "false")

    # Log every successful call, not only failures
    VERBOSE = _env_flag("VERBOSE", "false")

    # Server settings
    HOST = os.getenv("HOST", "127.0.0.1")
    PORT = int(os.getenv("PORT", 8001))
    DEBUG = _env_flag("DEBUG", "false")

    # Streaming settings
    CHUNK_SIZE = 64 * 1024  #64KB chunks for uploads and archives


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True


# Configuration dictionary for easy access
config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig
}


def get_config(config_name: str = None) -> Config:
    """Get configuration by name, defaulting to environment variable or development."""
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")
    return config_by_name.get(config_name, DevelopmentConfig)


@dataclass(frozen=True)
class Settings:
    """
    Immutable runtime settings shared by every service.

    Built once by the application factory; nothing mutates it afterwards.
    """
    root: str
    prefix: str = "/"
    skip_hidden: bool = True
    follow_symlinks: bool = False
    read_only: bool = False
    verbose: bool = False
    chunk_size: int = 64 * 1024

    def __post_init__(self):
        if not self.prefix.startswith("/") or not self.prefix.endswith("/"):
            raise ValueError(f"URL prefix must start and end with '/': {self.prefix!r}")
        if not os.path.isabs(self.root):
            raise ValueError(f"Root must be an absolute path: {self.root!r}")

    @classmethod
    def from_config(cls, config: Config, **overrides: Any) -> "Settings":
        """
        Build settings from a config class, applying keyword overrides.

        Args:
            config: Configuration class (see config_by_name)
            overrides: Field values taking precedence over the config,
                None values are ignored

        Returns:
            Settings with a canonicalized root directory
        """
        values = {
            "root": config.ROOT_DIR,
            "prefix": config.URL_PREFIX,
            "skip_hidden": config.SKIP_HIDDEN,
            "follow_symlinks": config.FOLLOW_SYMLINKS,
            "read_only": config.READ_ONLY,
            "verbose": config.VERBOSE,
            "chunk_size": config.CHUNK_SIZE,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        root = canonical_root(values["root"])
        if not os.path.isdir(root):
            raise ValueError(f"Root is not a directory: {root}")
        values["root"] = root
        return cls(**values)


def canonical_root(path: Optional[str]) -> str:
    """Return the absolute, symlink-free form of a root directory."""
    return os.path.realpath(os.path.abspath(os.path.expanduser(os.fspath(path or "."))))
