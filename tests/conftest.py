"""Pytest configuration and shared fixtures for the markbridge test suite.

This module provides shared fixtures and test configuration used across
the unit and integration tests.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def bold_paragraph_editor_value() -> dict:
    """Provide an editor value holding one paragraph with a bold run.

    Returns
    -------
    dict
        Editor value ``{nodes: [paragraph[bold "hi"]]}``

    """
    return {
        "nodes": [
            {
                "type": "paragraph",
                "nodes": [{"object": "text", "text": "hi", "marks": [{"type": "bold"}]}],
            }
        ]
    }


@pytest.fixture
def sample_markdown() -> str:
    """Provide a markdown document exercising every block type the renderer emits.

    Returns
    -------
    str
        Markdown in the renderer's own output style

    """
    return """# Sample Document

Some *emphasis* and **strong** text with `inline code`.

- one
- two
  - nested

1. first
2. second

> quoted
> text

```python
print("hi")
```

***

See [the site](http://example.com "Example") for more."""
