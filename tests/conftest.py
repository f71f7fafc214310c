import pytest


@pytest.fixture()
def vips():  # type: ignore[no-untyped-def]
    """Return the pyvips module, skipping when libvips cannot be loaded."""

    try:
        import pyvips
    except (ImportError, OSError) as exc:  # pragma: no cover - depends on system libvips
        pytest.skip(f"libvips unavailable: {exc}")
    return pyvips
