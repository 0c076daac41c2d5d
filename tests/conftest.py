#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from graphrepr.stringify import configure


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def default_options():
    """Restore the process-wide stringify options around each test."""
    configure(preset="default")
    yield
    configure(preset="default")


@pytest.fixture
def nested_list():
    """Factory for a list nested depth levels deep, with an empty list innermost."""

    def _create(depth: int) -> list:
        value = []
        for _ in range(depth):
            value = [value]
        return value

    return _create
