#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/utils/decorators.py
"""Dependency guard for the reverse walker and a DEBUG timing helper."""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Optional, Tuple

from roundmark.exceptions import DependencyError
from roundmark.utils.packages import check_version_requirement

# (install name, import name, version specifier or "")
Requirement = Tuple[str, str, str]


def _unmet_requirements(
    packages: List[Requirement],
) -> tuple[list[tuple[str, str]], list[tuple[str, str, str]], Optional[ImportError]]:
    """Return missing packages, outdated packages and the first import failure."""
    missing: list[tuple[str, str]] = []
    outdated: list[tuple[str, str, str]] = []
    first_error: Optional[ImportError] = None

    for install_name, import_name, spec in packages:
        try:
            importlib.import_module(import_name)
        except ImportError as e:
            missing.append((install_name, spec))
            first_error = first_error or e
            continue
        if spec:
            ok, installed = check_version_requirement(install_name, spec)
            if not ok:
                outdated.append((install_name, spec, installed or "unknown"))

    return missing, outdated, first_error


def requires_dependencies(converter_name: str, packages: List[Requirement]) -> Callable:
    """Raise DependencyError before the call when ``packages`` are not usable.

    Parameters
    ----------
    converter_name : str
        Component named in the error message, e.g. ``"html"``
    packages : list of (install_name, import_name, version_spec)
        ``version_spec`` may be ``""`` to accept any installed version

    Examples
    --------
        >>> @requires_dependencies("html", [("beautifulsoup4", "bs4", ">=4.12")])
        ... def walk(html):
        ...     ...

    """

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            missing, outdated, first_error = _unmet_requirements(packages)
            if missing or outdated:
                raise DependencyError(
                    converter_name=converter_name,
                    missing_packages=missing,
                    version_mismatches=outdated,
                    original_import_error=first_error,
                ) from first_error
            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long the block took, only when ``logger`` has DEBUG enabled."""
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return
    started = time.perf_counter()
    yield
    logger.debug(f"{operation} completed in {(time.perf_counter() - started) * 1000:.2f}ms")
