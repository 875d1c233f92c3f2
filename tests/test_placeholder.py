"""Placeholder test verifying package import."""


def test_import() -> None:
    """Verify top-level package is importable."""
    import stable_uid

    assert stable_uid.__version__ is not None
    assert stable_uid.__version__ == "0.1.0"
