import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo structlog configuration leaked by CLI tests (bound to a since-closed stderr)."""
    yield
    structlog.reset_defaults()
