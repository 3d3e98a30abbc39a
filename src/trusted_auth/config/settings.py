"""
Settings for the trusted authentication bridge.

Settings are read from the environment (``TRUSTED_AUTH_`` prefix) or a
``.env`` file. The trusted authentication properties themselves are a plain
string map, optionally loaded from a ``key = value`` properties file, and are
interpreted by :class:`~trusted_auth.features.auth.configuration.TrustedAuthConfiguration`.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

PROPERTIES_COMMENT_PREFIXES = ("#", "!")


def read_properties_file(path: Path) -> Dict[str, str]:
    """Parse a ``key = value`` properties file.
    
    Blank lines and lines starting with ``#`` or ``!`` are ignored. Lines
    without ``=`` are logged and skipped.
    """
    properties: Dict[str, str] = {}
    with open(path, encoding="utf-8") as fp:
        for number, raw_line in enumerate(fp, start=1):
            line = raw_line.strip()
            if not line or line.startswith(PROPERTIES_COMMENT_PREFIXES):
                continue
            key, sep, value = line.partition("=")
            if not sep:
                logger.warning(f"Ignoring malformed line {number} in properties file {path}")
                continue
            properties[key.strip()] = value.strip()
    return properties


class TrustedAuthSettings(BaseSettings):
    """Trusted authentication settings."""
    
    model_config = SettingsConfigDict(
        env_prefix="TRUSTED_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Where user profiles and groups live
    main_wiki: str = Field(default="xwiki")
    user_space: str = Field(default="XWiki")
    
    # String keyed trusted authentication properties
    properties: Dict[str, str] = Field(default_factory=dict)
    properties_file: Optional[Path] = Field(default=None)
    preferences: Dict[str, str] = Field(default_factory=dict)
    
    # Cookie persistence store
    cookie_prefix: str = Field(default="")
    cookie_path: str = Field(default="/")
    cookie_domains: Annotated[List[str], NoDecode] = Field(default_factory=list)
    encryption_key: Optional[SecretStr] = Field(default=None)
    
    # Logout detection, matched against the request path
    logout_page: Optional[str] = Field(default=None)
    
    # Groups split into shards
    sharded_groups: Annotated[List[str], NoDecode] = Field(default_factory=list)
    
    @field_validator("cookie_domains", "sharded_groups", mode="before")
    @classmethod
    def split_comma_separated(cls, value: Any) -> Any:
        """Accept comma separated strings for list settings."""
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value
    
    def load_properties(self) -> Dict[str, str]:
        """Merge the properties file (if any) with inline properties.
        
        Inline properties win over the file.
        """
        merged: Dict[str, str] = {}
        if self.properties_file is not None:
            merged.update(read_properties_file(self.properties_file))
        merged.update(self.properties)
        return merged
    
    @property
    def is_cookie_encryption_configured(self) -> bool:
        """Check if a cookie encryption key is available."""
        return self.encryption_key is not None and bool(self.encryption_key.get_secret_value())


@lru_cache()
def get_settings() -> TrustedAuthSettings:
    """Get cached settings instance."""
    return TrustedAuthSettings()
