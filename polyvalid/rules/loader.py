"""Validity profiles bundled with the package.

A profile is a YAML file in ``polyvalid/profiles`` holding the fields of
:class:`ValidityOptions`. The file stem is the profile name, so
``esri.yaml`` is always loaded as the ``esri`` profile whatever its
``name`` field says.
"""

import logging
from pathlib import Path
from typing import Any

from ..models.errors import ProfileNotFoundError
from ..models.options import ValidityOptions

logger = logging.getLogger(__name__)

# Profiles directory (inside the package for proper wheel packaging)
PROFILES_DIR = Path(__file__).parent.parent / "profiles"

DEFAULT_PROFILE = "ogc"


def _profile_files() -> dict[str, Path]:
    if not PROFILES_DIR.is_dir():
        logger.warning(f"Profiles directory not found: {PROFILES_DIR}")
        return {}
    return {path.stem: path for path in sorted(PROFILES_DIR.glob("*.yaml"))}


def _read_profile(name: str, path: Path) -> ValidityOptions:
    options = ValidityOptions.from_yaml(path.read_text())
    if options.name != name:
        logger.debug(f"Profile file {path.name} names itself '{options.name}'")
        options = options.model_copy(update={"name": name})
    return options


def list_profiles() -> list[dict[str, Any]]:
    """Summarize the bundled profiles, sorted by name.

    Returns:
        List of dicts with 'name', 'description' and
        'allow_inverted_rings_forming_holes' keys
    """
    summaries = []
    for name, path in _profile_files().items():
        options = _read_profile(name, path)
        summaries.append({
            "name": name,
            "description": options.description or f"Options from {path.name}",
            "allow_inverted_rings_forming_holes": options.allow_inverted_rings_forming_holes,
        })
    return summaries


def load_profile(
    name: str = DEFAULT_PROFILE,
    override: dict | None = None,
) -> ValidityOptions:
    """Load a bundled validity profile with optional overrides.

    Args:
        name: Profile name (file stem under ``profiles/``)
        override: Optional dict of option values to override

    Raises:
        ProfileNotFoundError: If no profile has that name
    """
    files = _profile_files()
    path = files.get(name)
    if path is None:
        raise ProfileNotFoundError(name, list(files))

    options = _read_profile(name, path)
    if override:
        options = options.merge_override(override)
        logger.debug(f"Applied overrides to profile '{name}'")
    return options
