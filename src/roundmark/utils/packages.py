#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/utils/packages.py
"""Installed distribution lookups for the dependency guard and ``get_version``."""

from __future__ import annotations

from importlib import metadata
from typing import Optional, Tuple

from packaging import version
from packaging.specifiers import InvalidSpecifier, SpecifierSet


def get_package_version(package_name: str) -> Optional[str]:
    """Return the installed version of distribution ``package_name``, or None."""
    try:
        return metadata.version(package_name)
    except metadata.PackageNotFoundError:
        return None


def check_version_requirement(package_name: str, version_spec: str) -> Tuple[bool, Optional[str]]:
    """Compare the installed ``package_name`` against ``version_spec``.

    Returns
    -------
    tuple of (bool, str or None)
        Whether the requirement holds, and the installed version
        (``(False, None)`` when the distribution is absent)

    Raises
    ------
    ValueError
        If ``version_spec`` is not a PEP 440 specifier

    """
    installed = get_package_version(package_name)
    if installed is None:
        return False, None
    try:
        spec = SpecifierSet(version_spec)
    except InvalidSpecifier as e:
        raise ValueError(f"Invalid version specifier for {package_name}: {version_spec!r}") from e
    return version.parse(installed) in spec, installed
