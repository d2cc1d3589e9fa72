"""skillpm: Dependency resolution and lock files for registry-published agent skills."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
