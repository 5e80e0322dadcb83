"""Configuration management for recordsync."""
from .schemas import SeedData
from .loader import SeedLoader, load_seed, load_seed_file, get_available_seeds
from .settings import settings, Settings, get_settings

__all__ = [
    'SeedData',
    'SeedLoader',
    'load_seed',
    'load_seed_file',
    'get_available_seeds',
    'settings',
    'Settings',
    'get_settings',
]
