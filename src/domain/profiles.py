import logging
import os
from pathlib import Path

import tomlkit

from domain.models import IpolateSettings
from domain.toml_sections import flat_to_sectioned, sectioned_to_flat
from shared.constants import PROFILES_HOME_ENV

logger = logging.getLogger(__name__)


def _user_profiles_dir() -> Path:
    """
    Determine profiles directory.

    1) If <project_root>/configs/profiles exists, use it (run-from-repo setups).
    2) Otherwise $IPOLATE_HOME/profiles, falling back to ~/.ipolate/profiles.
    """
    project_root = Path(__file__).resolve().parent.parent.parent
    local_profiles = project_root / 'configs' / 'profiles'
    if local_profiles.exists():
        return local_profiles

    home = os.getenv(PROFILES_HOME_ENV)
    base = Path(home) if home else Path.home() / '.ipolate'
    return base / 'profiles'


def ensure_profiles_dir() -> Path:
    profiles_dir = _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles() -> list[str]:
    """Profile names without the .toml extension."""
    folder = ensure_profiles_dir()
    return sorted(p.stem for p in folder.glob('*.toml') if p.is_file())


def profile_path(name: str) -> Path:
    return ensure_profiles_dir() / f'{name}.toml'


def load_profile(name_or_path: str) -> IpolateSettings:
    """
    Load and validate a TOML profile.

    Accepts either a profile name (without .toml) from the profiles
    directory or a path to a TOML file.
    """
    p = Path(name_or_path)
    path = (
        p if p.suffix.lower() == '.toml' and p.exists() else profile_path(name_or_path)
    )
    if not path.exists():
        msg = f'Profile not found: {path}'
        raise FileNotFoundError(msg)
    text = path.read_text(encoding='utf-8')
    data = tomlkit.parse(text).unwrap()
    settings = IpolateSettings.model_validate(sectioned_to_flat(data))
    logger.info(
        'Profile %s loaded: grid_type=%s cell_size=%s %s weight=%s',
        path.name,
        settings.grid_type.value,
        settings.cell_size,
        settings.units.value,
        settings.weight,
    )
    return settings


def save_profile(name: str, settings: IpolateSettings) -> Path:
    """Write a profile as sectioned TOML (no atomic replace, no backups)."""
    path = profile_path(name)
    data = flat_to_sectioned(settings.model_dump(mode='json', exclude_none=True))
    text = tomlkit.dumps(data)
    path.write_text(text, encoding='utf-8')
    return path


def delete_profile(name: str) -> None:
    path = profile_path(name)
    if path.exists():
        path.unlink()
