"""Fixtures: patched fetch seam."""

from unittest.mock import AsyncMock, patch

import pytest

from src.diagnostics.models import FetchResult
from tests.helpers import missing


@pytest.fixture
def mock_fetch():
    """Patch the scanners' fetch seam. Map URLs to FetchResults via ``routes``."""
    routes: dict[str, FetchResult] = {}

    async def _fetch(url, *args, **kwargs):
        return routes.get(url, missing())

    with patch("src.diagnostics.scanners.base.fetch_url", new=AsyncMock(side_effect=_fetch)) as mock:
        mock.routes = routes
        yield mock
