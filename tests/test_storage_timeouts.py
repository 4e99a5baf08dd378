import time
import uuid
from contextlib import asynccontextmanager

import pytest

from docvault.core.db import get_engine, get_sessionmaker
from docvault.domains.documents.services import DocumentService, DocumentVersionService
from docvault.domains.exceptions import StorageUnavailableError
from docvault.domains.identity.schemas import UserCreate
from docvault.domains.identity.services import IdentityService

OPERATION_TIMEOUT = 0.3


@asynccontextmanager
async def held_write_lock():
    """Отдельное соединение держит блокировку записи SQLite (BEGIN IMMEDIATE)"""
    async with get_engine().connect() as conn:
        transaction = await conn.begin()
        try:
            yield
        finally:
            await transaction.rollback()


async def test_allocation_behind_write_lock_fails_within_operation_timeout(session_factory, reconfigure):
    async with session_factory() as session:
        owner = await IdentityService(session).register_user(
            UserCreate(email=f"{uuid.uuid4().hex[:8]}@example.com", display_name="Owner")
        )
    async with session_factory() as session:
        document, _ = await DocumentService(session).create_document(owner.uuid, "Doc", "v1")

    await reconfigure(OPERATION_TIMEOUT_SECONDS=OPERATION_TIMEOUT)
    factory = get_sessionmaker()

    async with held_write_lock():
        started = time.monotonic()
        with pytest.raises(StorageUnavailableError):
            async with factory() as session:
                await DocumentVersionService(session).allocate_next_version(document.uuid, owner.uuid, "v2")
        elapsed = time.monotonic() - started

    assert elapsed < OPERATION_TIMEOUT + 1.0

    async with factory() as session:
        versions = await DocumentVersionService(session).list_versions(document.uuid, owner.uuid)
    assert [v.version_number for v in versions] == [1]


async def test_locked_storage_returns_service_unavailable(
    client, create_user, create_document, headers_for, reconfigure
):
    user = await create_user()
    headers = headers_for(user["id"])
    document_id = (await create_document(user["id"], content="v1"))["document"]["id"]

    await reconfigure(OPERATION_TIMEOUT_SECONDS=OPERATION_TIMEOUT)

    async with held_write_lock():
        started = time.monotonic()
        response = await client.post(f"/documents/{document_id}/versions", json={"content": "v2"}, headers=headers)
        elapsed = time.monotonic() - started

    assert response.status_code == 503
    assert response.json()["error"] == "SERVICE_UNAVAILABLE"
    assert response.headers["Retry-After"] == "1"
    assert elapsed < OPERATION_TIMEOUT + 1.0

    versions = await client.get(f"/documents/{document_id}/versions", headers=headers)
    assert [v["version_number"] for v in versions.json()["versions"]] == [1]
