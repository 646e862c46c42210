"""Shared fixtures for supervalidator tests."""

import pytest

from supervalidator.registry import reset_default_registry
from supervalidator.translator import Translator, load_template


@pytest.fixture(autouse=True)
def clean_process_state():
    """Reset the default registry, template path and template cache around each test."""
    reset_default_registry()
    Translator.reset_template_path()
    load_template.cache_clear()
    yield
    reset_default_registry()
    Translator.reset_template_path()
    load_template.cache_clear()
