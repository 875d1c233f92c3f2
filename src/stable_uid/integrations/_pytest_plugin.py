"""pytest plugin for stable-uid.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from stable_uid import ParsedFile, ReconcilerConfig, reconcile, uid_tree


@pytest.fixture(scope="session")
def assert_identity_stable() -> Any:
    """Fixture that returns a callable identifier-continuity asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to reconcile() with a throwaway namespace per call).

    Usage in tests::

        def test_value_edit(assert_identity_stable):
            assert_identity_stable(labeled_before, parsed_after)

        def test_insertion(assert_identity_stable):
            with pytest.raises(AssertionError, match=r"minted="):
                assert_identity_stable(labeled_before, parsed_with_new_child)

    Returns:
        A callable ``_assert(old_file, new_file, allow_minted=0,
        allow_dropped=0, config=None) -> ParsedFile`` that reconciles
        ``new_file`` against ``old_file`` and raises ``AssertionError`` when
        more identifiers than allowed were minted or dropped.  On success it
        returns the labeled file.
    """

    def _assert(
        old_file: ParsedFile,
        new_file: ParsedFile,
        allow_minted: int = 0,
        allow_dropped: int = 0,
        config: ReconcilerConfig | None = None,
    ) -> ParsedFile:
        """Assert that reconciling ``new_file`` keeps ``old_file``'s identifiers.

        Raises:
            AssertionError: When the number of minted or dropped identifiers
                exceeds the allowance, with both identifier outlines in the
                message.
        """
        result = reconcile(new_file, old_file, config=config)
        if len(result.minted) > allow_minted or len(result.dropped) > allow_dropped:
            raise AssertionError(
                f"identifiers not stable: "
                f"minted={result.minted} (allowed {allow_minted}), "
                f"dropped={result.dropped} (allowed {allow_dropped})\n"
                f"  before:\n{uid_tree(old_file)}\n"
                f"  after:\n{uid_tree(result.parsed_file)}"
            )
        return result.parsed_file

    return _assert
