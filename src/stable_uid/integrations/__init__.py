"""Integrations subpackage for stable-uid.

Contains integration adapters for external frameworks:
- pytest plugin (auto-discovered via pytest11 entry point), exposing the
  ``assert_identity_stable`` fixture
"""

from __future__ import annotations

__all__: list[str] = []
