"""Validity profile loading."""

from .loader import DEFAULT_PROFILE, list_profiles, load_profile

__all__ = ["DEFAULT_PROFILE", "list_profiles", "load_profile"]
