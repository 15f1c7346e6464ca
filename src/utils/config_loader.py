"""
Configuration loader for the storefront service
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Mapping, Optional
from pydantic import BaseModel, Field, ValidationError
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "storefront.yml"


class CatalogConfig(BaseModel):
    """Reconciliation and rendering settings"""

    placeholder_image: str = "https://via.placeholder.com/400x250?text=Sem+Imagem"
    cache_ttl_seconds: int = Field(default=60, ge=0)
    export_indent: int = Field(default=4, ge=0, le=8)


class StaticConfig(BaseModel):
    """Static fallback catalog (bundled files or an HTTP origin)"""

    base_url: Optional[str] = None
    data_dir: Optional[str] = None
    products_file: str = "products.json"
    kits_file: str = "kits.json"
    timeout_seconds: float = Field(default=10.0, gt=0)


class BlobConfig(BaseModel):
    """Media object storage"""

    base_url: Optional[str] = None
    public_base_url: Optional[str] = None
    api_key: Optional[str] = None
    timeout_seconds: float = Field(default=30.0, gt=0)


class AuthConfig(BaseModel):
    """Admin sign-in and unlock gate"""

    credentials: str = ""
    passcode: str = ""
    session_ttl_seconds: int = Field(default=3600, ge=60)
    max_login_attempts: int = Field(default=5, ge=0)
    login_window_seconds: int = Field(default=300, ge=1)


class StorefrontConfig(BaseModel):
    """Complete storefront configuration"""

    database_url: Optional[str] = None
    redis_url: Optional[str] = None
    media_patch_attempts: int = Field(default=2, ge=1, le=10)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    static: StaticConfig = Field(default_factory=StaticConfig)
    blob: BlobConfig = Field(default_factory=BlobConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)


# environment variable -> (section, field); section None means top level
ENV_OVERRIDES = {
    "DATABASE_URL": (None, "database_url"),
    "REDIS_URL": (None, "redis_url"),
    "BLOB_STORE_URL": ("blob", "base_url"),
    "BLOB_STORE_API_KEY": ("blob", "api_key"),
    "BLOB_PUBLIC_URL": ("blob", "public_base_url"),
    "STATIC_CATALOG_URL": ("static", "base_url"),
    "ADMIN_CREDENTIALS": ("auth", "credentials"),
    "ADMIN_PASSCODE": ("auth", "passcode"),
}


def apply_env_overrides(config_data: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Overlay known environment variables on raw config data"""
    environ = os.environ if environ is None else environ
    data = dict(config_data or {})
    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if not value:
            continue
        if section is None:
            data[field] = value
        else:
            data[section] = {**(data.get(section) or {}), field: value}
    return data


def load_storefront_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> StorefrontConfig:
    """
    Load and validate storefront configuration from YAML, then apply env overrides

    Args:
        config_path: Path to config file. Defaults to config/storefront.yml
        environ: Environment mapping. Defaults to os.environ

    Returns:
        Validated StorefrontConfig object

    Raises:
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("Config file not found: %s; using defaults", config_path)

    try:
        config = StorefrontConfig(**apply_env_overrides(config_data, environ))
        logger.info("Loaded storefront config from %s", config_path)
        return config
    except ValidationError as e:
        logger.error("Config validation failed: %s", e)
        raise
