"""Test that all modules can be imported without circular import errors."""

import importlib

import pytest


@pytest.mark.parametrize(
    "module",
    [
        "eventprojector",
        "eventprojector.cancellation",
        "eventprojector.exceptions",
        "eventprojector.protocols",
        "eventprojector.handlers",
        "eventprojector.handlers.adapter",
        "eventprojector.handlers.decorators",
        "eventprojector.handlers.record",
        "eventprojector.projections",
        "eventprojector.projections.base",
        "eventprojector.projections.builder",
        "eventprojector.projections.config",
        "eventprojector.projections.projector",
        "eventprojector.projections.resolve",
        "eventprojector.observability",
        "eventprojector.sql",
    ],
)
def test_module_imports(module):
    """Verify every public module imports cleanly."""
    assert importlib.import_module(module) is not None


def test_top_level_import_matches_handlers_import():
    """Verify top-level and handlers imports resolve to same objects."""
    from eventprojector import handles
    from eventprojector.handlers import handles as h2

    assert handles is h2


def test_top_level_exports_resolve():
    """Every name in __all__ is importable from the package."""
    import eventprojector

    missing = [name for name in eventprojector.__all__ if not hasattr(eventprojector, name)]

    assert missing == []


def test_version_is_a_string():
    from eventprojector import __version__

    assert isinstance(__version__, str)
