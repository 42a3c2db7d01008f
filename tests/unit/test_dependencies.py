#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_dependencies.py
"""Unit tests for dependency checking utilities.

Tests cover:
- requires_dependencies with present, missing and outdated packages
- check_version_requirement and get_package_version

"""

import pytest

from roundmark.exceptions import DependencyError
from roundmark.utils.decorators import requires_dependencies
from roundmark.utils.packages import check_version_requirement, get_package_version


@pytest.mark.unit
class TestRequiresDependencies:
    """Tests for the requires_dependencies decorator."""

    def test_present_package(self):
        """Test the wrapped function runs when the import succeeds."""

        @requires_dependencies("json", [("json", "json", "")])
        def load():
            return "ok"

        assert load() == "ok"

    def test_missing_package(self):
        """Test a missing module raises DependencyError."""

        @requires_dependencies("widgets", [("roundmark-no-such-dist", "roundmark_no_such_module", ">=1.0")])
        def load():
            return "unreachable"

        with pytest.raises(DependencyError) as exc_info:
            load()
        err = exc_info.value
        assert err.converter_name == "widgets"
        assert err.missing_packages == [("roundmark-no-such-dist", ">=1.0")]
        assert isinstance(err.original_import_error, ImportError)

    def test_version_mismatch(self):
        """Test an unsatisfiable version requirement."""

        @requires_dependencies("html", [("beautifulsoup4", "bs4", ">=999")])
        def load():
            return "unreachable"

        with pytest.raises(DependencyError) as exc_info:
            load()
        assert exc_info.value.version_mismatches[0][:2] == ("beautifulsoup4", ">=999")

    def test_missing_and_outdated_reported_together(self):
        """Test every unmet requirement is listed and the first import failure kept."""

        @requires_dependencies(
            "html",
            [
                ("roundmark-gone-a", "roundmark_gone_a", ""),
                ("beautifulsoup4", "bs4", ">=999"),
                ("roundmark-gone-b", "roundmark_gone_b", ">=2"),
            ],
        )
        def load():
            return "unreachable"

        with pytest.raises(DependencyError) as exc_info:
            load()
        err = exc_info.value
        assert err.missing_packages == [("roundmark-gone-a", ""), ("roundmark-gone-b", ">=2")]
        assert [entry[0] for entry in err.version_mismatches] == ["beautifulsoup4"]
        assert "roundmark_gone_a" in str(err.original_import_error)
        assert err.__cause__ is err.original_import_error

    def test_wraps_metadata(self):
        """Test the decorator keeps the function name."""

        @requires_dependencies("json", [("json", "json", "")])
        def load_things():
            """Load things."""

        assert load_things.__name__ == "load_things"
        assert load_things.__doc__ == "Load things."


@pytest.mark.unit
class TestPackageVersions:
    """Tests for version helpers."""

    def test_installed_package(self):
        """Test a known installed distribution."""
        assert get_package_version("beautifulsoup4")

    def test_missing_package(self):
        """Test an unknown distribution."""
        assert get_package_version("roundmark-no-such-dist") is None

    def test_requirement_met(self):
        """Test a satisfiable specifier."""
        met, installed = check_version_requirement("beautifulsoup4", ">=4.0")
        assert met is True
        assert installed

    def test_requirement_for_missing_package(self):
        """Test a missing distribution never meets a requirement."""
        assert check_version_requirement("roundmark-no-such-dist", ">=1.0") == (False, None)

    def test_invalid_specifier(self):
        """Test malformed specifiers raise ValueError."""
        with pytest.raises(ValueError):
            check_version_requirement("beautifulsoup4", "about four")
