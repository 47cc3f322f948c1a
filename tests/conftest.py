"""Pytest configuration and fixtures."""

import os

import pytest

from mirkit.core import create_container, get_settings
from mirkit.document import normalize
from mirkit.external import ExternalLibraryRuntime, MemoryStore, ProfileRegistry
from mirkit.registry import ComponentRegistry

from fakes import BrokenProfile, DemoProfile, FakeLoader, demo_namespace


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["MIR_LOG_LEVEL"] = "DEBUG"
    os.environ["MIR_ENABLE_GENERATION_CACHE"] = "false"  # Disable memo in tests
    os.environ["MIR_ENRICH_PROP_OPTIONS"] = "false"  # No background fetches


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def di_container():
    """Dependency injection container for testing."""
    return create_container()


@pytest.fixture
def registry():
    """Registry seeded with built-ins only."""
    return ComponentRegistry()


@pytest.fixture
def profiles():
    """Profile registry holding the demo and broken profiles."""
    registry = ProfileRegistry()
    registry.register_profile(DemoProfile())
    registry.register_profile(BrokenProfile())
    return registry


@pytest.fixture
def fake_loader():
    """Loader serving only the demo library."""
    return FakeLoader({"fake://demo/index.js": demo_namespace()})


@pytest.fixture
def runtime(registry, profiles, fake_loader):
    """Runtime without enrichment."""
    return ExternalLibraryRuntime(
        registry=registry,
        profiles=profiles,
        loaders={"esm.sh": fake_loader},
        enrich=False,
    )


@pytest.fixture
def memory_store():
    return MemoryStore()


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_source():
    """Document in interchange form."""
    return {
        "version": "0.9",
        "metadata": {"name": "Greeting Card", "tags": ["demo"]},
        "ui": {
            "root": {
                "id": "root",
                "type": "container",
                "style": {"padding": 16},
                "children": [
                    {"id": "title", "type": "MdrHeading", "text": "Hello"},
                    {"id": "count", "type": "MdrText", "text": {"$state": "count"}},
                    {
                        "id": "save",
                        "type": "MdrButton",
                        "text": {"$param": "label"},
                        "events": {"click": {"target": "onSave"}},
                    },
                ],
            }
        },
        "logic": {
            "state": {"count": {"type": "local", "initial": 0}},
            "props": {
                "label": {"type": "string", "default": "Save"},
                "onSave": {"type": "() => void"},
            },
        },
    }


@pytest.fixture
def sample_document(sample_source):
    """Normalized sample document."""
    return normalize(sample_source)
