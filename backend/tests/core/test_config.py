"""Config — database URL normalization for asyncpg."""

import pytest

from tradedesk.config import Settings


@pytest.mark.parametrize("url", [
    "postgres://trader:pw@db:5432/tradedesk",
    "postgresql://trader:pw@db:5432/tradedesk",
])
def test_plain_postgres_urls_use_asyncpg(url):
    settings = Settings(database_url=url)
    assert settings.database_url == "postgresql+asyncpg://trader:pw@db:5432/tradedesk"


def test_async_urls_untouched():
    url = "sqlite+aiosqlite:///./tradedesk.db"
    assert Settings(database_url=url).database_url == url
