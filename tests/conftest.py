"""
Shared test configuration for CatalogMiner.
"""

import pytest

from catalogminer.config import ExtractionConfig
from tests.helpers.responses import make_response, make_volume


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Core Test Fixtures
# ============================================================================


@pytest.fixture
def default_config() -> ExtractionConfig:
    return ExtractionConfig()


@pytest.fixture
def single_record_response() -> str:
    return make_response([make_volume()])


@pytest.fixture
def realistic_response() -> str:
    """Three volumes with escapes, a second author, an http thumbnail and one non-Latin record."""
    return make_response(
        [
            make_volume(
                volume_id="zyTCAlFPjgYC",
                title="The Google Story",
                authors=["David A. Vise", "Mark Malseed"],
                publisher="Random House Digital, Inc.",
                description='"Here is the story behind one of the most remarkable Internet successes"\nof our time.',
                categories=["Browsers (Computer programs)", "Business & Economics"],
                rating=3.5,
                thumbnail="http://books.google.com/books/content?id=zyTCAlFPjgYC&printsec=frontcover&img=1",
            ),
            make_volume(volume_id="cafe-1", title="Café Society", authors=["Renée Dupont"], rating=4),
            make_volume(volume_id="jp-1", title="ノルウェイの森", authors=["村上春樹"], rating=None),
        ]
    )
