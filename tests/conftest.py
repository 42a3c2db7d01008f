#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/conftest.py
"""Pytest configuration and shared fixtures for the roundmark test suite.

This module provides shared fixtures, test configuration, and sample
documents that are used across the entire test suite.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from roundmark import FencePlugin, FenceSource

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - full round trip through both directions")
    config.addinivalue_line("markers", "security: Tests for URL sanitization, escaping and resource limits")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def sample_markdown() -> str:
    """Provide a chat-style Markdown document exercising every block type.

    Returns
    -------
    str
        Markdown source written in canonical, round-trip stable form.

    """
    return """## Release notes

This is a **sample document** with _italic text_ and some `inline code`.

> Quoted *advice*

- First item
- Second item
  - Nested item

1. Step one
2. Step two

- [x] Done
- [ ] Pending

```python
def hello_world():
    print("Hello, World!")
```

| Name | Score |
| --- | ---: |
| Ada | 10 |

---

See [the docs](https://example.com/docs) or ![logo](logo.png)"""


@pytest.fixture
def mermaid_plugin() -> FencePlugin:
    """Provide a fence plugin that renders ``mermaid`` blocks into a div.

    The reverse function reads the content back from the div text.

    Returns
    -------
    FencePlugin
        Plugin handling only the ``mermaid`` language.

    """

    def render(content: str, lang: str):
        if lang != "mermaid":
            return None
        return f'<div class="mermaid">{content}</div>'

    def reverse(element):
        if "mermaid" not in (element.get("class") or []):
            return None
        return FenceSource(content=element.get_text())

    return FencePlugin(render=render, reverse=reverse)
