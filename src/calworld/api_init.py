"""Registers the built-in calendars (simple, gregorian, harptos) on import."""
from .api import set_registry
from .bootstrap import build_registry

set_registry(build_registry())
