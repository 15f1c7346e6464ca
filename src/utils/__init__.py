"""
Utility modules for the storefront service
"""
from .config_loader import StorefrontConfig, load_storefront_config
from .rate_limiter import RateLimiter

__all__ = [
    'StorefrontConfig',
    'load_storefront_config',
    'RateLimiter',
]
