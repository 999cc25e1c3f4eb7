#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Pytest configuration and shared fixtures for the docalign test suite.

This module provides shared fixtures, test configuration, and sample
documents that are used across the entire test suite.
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

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "property: Property-based tests using Hypothesis")


@pytest.fixture
def invoice_old() -> list[str]:
    """Provide the original version of a short invoice.

    Returns
    -------
    list[str]
        One entry per line.

    """
    return ["INVOICE", "Item A $5", "Total $10"]


@pytest.fixture
def invoice_new() -> list[str]:
    """Provide the revised invoice with one inserted line item and a new total.

    Returns
    -------
    list[str]
        One entry per line.

    """
    return ["INVOICE", "Item A $5", "Item B $5", "Total $15"]


@pytest.fixture
def sample_xml_old() -> str:
    """Provide a small XML catalog document."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<catalog version="1">
    <book id="b1">
        <title>Dune</title>
        <price currency="USD">9.99</price>
    </book>
    <book id="b2">
        <title>Emma</title>
    </book>
</catalog>
"""


@pytest.fixture
def sample_xml_new() -> str:
    """Provide a revised version of the XML catalog document."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<catalog version="2">
    <book id="b1">
        <title>Dune</title>
        <price currency="EUR">8.99</price>
    </book>
    <book id="b2">
        <title>Emma</title>
    </book>
    <book id="b3">
        <title>Ulysses</title>
    </book>
</catalog>
"""
