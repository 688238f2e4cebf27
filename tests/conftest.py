"""Pytest configuration and shared fixtures for the mdxtree test suite.

This module provides shared fixtures, test configuration, and sample pages
that are used across the entire test suite.
"""

import os

import pytest

from mdxtree import MdxTranscoder

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    # Register custom Hypothesis profiles
    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def transcoder() -> MdxTranscoder:
    """Provide a transcoder with default options and node types."""
    return MdxTranscoder()


@pytest.fixture
def sample_page() -> str:
    """Provide a documentation page using every built-in component.

    Returns
    -------
    str
        Markup that parses without errors and survives a round trip.

    """
    return '''---
title: Getting started
tags:
- intro
- setup
---

# Getting started

Welcome to the **mdxtree** guide. It covers *installation* and `configuration`.

> [!TIP]
> Read the whole page first.

<Warning title="Back up first">

Migrations are not reversible.

</Warning>

## Install

<Tabs>
  <Tab title="pip">

    Run the installer.

  </Tab>

  <Tab title="source">

    Clone the repository.

  </Tab>

</Tabs>

<CodeGroup>
  <Code lang="bash" filename="install.sh">
    pip install mdxtree
  </Code>
  <Code lang="python" filename="check.py">
    import mdxtree
    print(mdxtree.__version__)
  </Code>
</CodeGroup>

## Reference

<Endpoint method="GET" path="/v1/pages" />

<Label label="Beta" color="#f59e0b" size="sm" />
Available to early adopters.

| Option | Default |
| --- | --- |
| strict | false |
| indent | 2 |

<Table
  data={[
    ["Name <sortable>", "Role <filterable>"],
    ["Ann", "Admin"],
    ["Bob", "Editor"]
  ]}
  pagination={true}
  rowsPerPage={10}
  rowsPerPageOptions={[5, 10, 25, 50]}
/>

<Accordion multiple={false}>
  <AccordionTab title="Why YAML?">

    Frontmatter is YAML.

  </AccordionTab>

</Accordion>

<Columns columns={2}>
  <Column>
    Left side
  </Column>
  <Column>
    Right side
  </Column>
</Columns>

<Card title="Next steps" icon="rocket" href="/guides/next">

Continue with the editor guide.

</Card>

<RightPanel>
  Example requests appear here.
</RightPanel>

1. First
2. Second
3. Third

- [x] Installed
- [ ] Configured

***

![Diagram](diagram.png)'''
