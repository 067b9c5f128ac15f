import os

# Settings and the engine are built at import time; point them at sqlite before anything imports wipshare.
os.environ["ENV"] = "test"
os.environ["DATABASE_DSN"] = "sqlite+aiosqlite:///:memory:"
os.environ["OBJECT_STORAGE_PROVIDER"] = "local"
os.environ["JWT_SECRET"] = "test-secret"

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine, AsyncSession

from wipshare.core.base import Base
from wipshare.core.db import get_session
from wipshare.core.errors import NotFound, StorageError
from wipshare.core.security import Principal, get_principal
from wipshare.platform.ports.object_storage import ObjectStoragePort, PresignedGrant

# register every table on Base.metadata
from wipshare.modules.tiers import models as _tiers  # noqa: F401
from wipshare.modules.users import models as _users  # noqa: F401
from wipshare.modules.usage import models as _usage  # noqa: F401
from wipshare.modules.tracks import models as _tracks  # noqa: F401


class FakeStorage(ObjectStoragePort):
    """Records calls instead of talking to a bucket.

    Issuing an upload grant stands in for the client's PUT: the object appears
    with exactly the signed content length.
    """

    def __init__(self):
        self.objects: dict[str, int] = {}
        self.deleted: list[str] = []
        self.fail_deletes = False

    def _grant(self, key: str, method) -> PresignedGrant:
        return PresignedGrant(
            url=f"https://bucket.test/{key}?X-Amz-Expires=3600&method={method}",
            key=key,
            method=method,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=3600),
        )

    def presign_upload(self, key: str, content_length: int, expires_seconds: int | None = None) -> PresignedGrant:
        self.objects[key] = content_length
        return self._grant(key, "PUT")

    def presign_download(self, key: str, expires_seconds: int | None = None) -> PresignedGrant:
        return self._grant(key, "GET")

    def object_size(self, key: str) -> int:
        if key not in self.objects:
            raise NotFound("Object not found")
        return self.objects[key]

    def delete(self, key: str) -> None:
        if self.fail_deletes:
            raise StorageError("delete failed")
        if key not in self.objects:
            raise NotFound("Object not found")
        del self.objects[key]
        self.deleted.append(key)

    def close(self) -> None:
        pass


@pytest_asyncio.fixture
async def session_maker():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.connect() as conn, conn.begin():
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def principal() -> Principal:
    return Principal(user_id="user_alice", email="alice@example.com")


@pytest_asyncio.fixture
async def client(session_maker, storage, principal):
    from wipshare.main import app
    from wipshare.platform.provider_registry import get_object_storage

    async def _override_get_session():
        async with session_maker() as session:
            yield session

    async def _override_get_principal() -> Principal:
        return principal

    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_principal] = _override_get_principal
    app.dependency_overrides[get_object_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()
