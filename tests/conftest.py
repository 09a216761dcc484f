"""
Shared test configuration and fixtures.

Provides sample documents, temporary document files and Redis clients for
cache store tests.
"""

import os

import fakeredis.aioredis
import pytest
import pytest_asyncio

from tests.test_helpers import JRD_PROFILE, XRD_PROFILE


@pytest.fixture
def jrd_profile() -> str:
    return JRD_PROFILE


@pytest.fixture
def xrd_profile() -> str:
    return XRD_PROFILE


@pytest.fixture
def jrd_file(tmp_path) -> str:
    """Write the sample JRD to a temporary file and return its path."""
    path = tmp_path / "xrd.json"
    path.write_text(JRD_PROFILE, encoding="utf-8")
    return str(path)


@pytest.fixture
def xrd_file(tmp_path) -> str:
    """Write the sample XRD to a temporary file and return its path."""
    path = tmp_path / "xrd.xml"
    path.write_text(XRD_PROFILE, encoding="utf-8")
    return str(path)


@pytest.fixture
def text_file(tmp_path) -> str:
    """A file that is neither JSON nor XML."""
    path = tmp_path / "index.php"
    path.write_text("<?php echo 'hello';\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def missing_file(tmp_path) -> str:
    return os.path.join(str(tmp_path), "does-not-exist.json")


@pytest_asyncio.fixture
async def fake_redis_client():
    """Provide fake Redis client for unit tests."""
    client = fakeredis.aioredis.FakeRedis(decode_responses=False)
    yield client
    await client.flushall()
    await client.aclose()
