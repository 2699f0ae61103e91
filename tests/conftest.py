import os

# Keep loguru quiet unless a test asks otherwise
os.environ.setdefault("KONTEMPLATE_LOG_LEVEL", "ERROR")

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

from tests.helpers import FakeProcessRunner  # noqa: E402


@pytest.fixture
def mock_console() -> MagicMock:
    """Console double recording info/warn/error calls."""
    return MagicMock()


@pytest.fixture
def fake_runner() -> FakeProcessRunner:
    """Process runner that records commands and always succeeds."""
    return FakeProcessRunner()
