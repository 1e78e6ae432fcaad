"""Domain layer - option models and settings profiles."""
from domain.models import (
    ContourOptions,
    InterpolateOptions,
    IpolateSettings,
    build_options,
)
from domain.profiles import (
    delete_profile,
    ensure_profiles_dir,
    list_profiles,
    load_profile,
    save_profile,
)

__all__ = [
    'ContourOptions',
    'InterpolateOptions',
    'IpolateSettings',
    'build_options',
    'delete_profile',
    'ensure_profiles_dir',
    'list_profiles',
    'load_profile',
    'save_profile',
]
