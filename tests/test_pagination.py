import uuid

import pytest

from docvault.domains.documents.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    build_page,
    clamp_limit,
    decode_cursor,
)
from docvault.domains.exceptions import InvalidCursorError


async def collect_pages(client, headers, limit, **params):
    seen, cursor, pages = [], None, 0
    while True:
        query = {"limit": limit, **params}
        if cursor:
            query["cursor"] = cursor
        response = await client.get("/documents", params=query, headers=headers)
        assert response.status_code == 200, response.text
        body = response.json()
        seen.extend(item["document"]["id"] for item in body["items"])
        pages += 1
        cursor = body["nextCursor"]
        if cursor is None:
            return seen, pages


async def test_pages_cover_every_document_once(client, create_user, create_document, headers_for):
    user = await create_user()
    created = [(await create_document(user["id"], title=f"Doc {i}"))["document"]["id"] for i in range(5)]

    seen, pages = await collect_pages(client, headers_for(user["id"]), limit=2)

    assert seen == sorted(created, key=uuid.UUID)
    assert pages == 3


async def test_limit_one_walks_every_document(client, create_user, create_document, headers_for):
    user = await create_user()
    created = [(await create_document(user["id"]))["document"]["id"] for _ in range(3)]

    seen, pages = await collect_pages(client, headers_for(user["id"]), limit=1)

    assert sorted(seen) == sorted(created)
    assert pages == 3


async def test_limit_one_with_single_document_has_no_cursor(client, create_user, create_document, headers_for):
    user = await create_user()
    document_id = (await create_document(user["id"]))["document"]["id"]

    response = await client.get("/documents", params={"limit": 1}, headers=headers_for(user["id"]))

    body = response.json()
    assert [item["document"]["id"] for item in body["items"]] == [document_id]
    assert body["nextCursor"] is None


async def test_archived_documents_never_fill_page_slots(client, create_user, create_document, headers_for):
    user = await create_user()
    headers = headers_for(user["id"])
    created = sorted(
        [(await create_document(user["id"], title=f"Doc {i}"))["document"]["id"] for i in range(5)],
        key=uuid.UUID,
    )
    # архивные документы лежат между страницами по одному элементу
    archived = [created[1], created[3]]
    for document_id in archived:
        await client.patch(f"/documents/{document_id}/archive", headers=headers)

    seen, pages = await collect_pages(client, headers, limit=1)

    assert seen == [created[0], created[2], created[4]]
    assert pages == 3


async def test_items_carry_latest_version(client, create_user, create_document, headers_for):
    user = await create_user()
    headers = headers_for(user["id"])
    document_id = (await create_document(user["id"], content="v1"))["document"]["id"]
    await client.post(f"/documents/{document_id}/versions", json={"content": "v2"}, headers=headers)

    body = (await client.get("/documents", headers=headers)).json()

    assert len(body["items"]) == 1
    assert body["items"][0]["latestVersion"]["version_number"] == 2
    assert body["nextCursor"] is None


async def test_archived_documents_hidden_by_default(client, create_user, create_document, headers_for):
    user = await create_user()
    headers = headers_for(user["id"])
    kept = (await create_document(user["id"]))["document"]["id"]
    archived = (await create_document(user["id"]))["document"]["id"]
    await client.patch(f"/documents/{archived}/archive", headers=headers)

    default, _ = await collect_pages(client, headers, limit=10)
    everything, _ = await collect_pages(client, headers, limit=10, includeArchived="true")

    assert default == [kept]
    assert sorted(everything) == sorted([kept, archived])


async def test_owners_never_see_each_others_documents(client, create_user, create_document, headers_for):
    alice = await create_user()
    bob = await create_user()
    alice_docs = [(await create_document(alice["id"]))["document"]["id"] for _ in range(2)]
    bob_docs = [(await create_document(bob["id"]))["document"]["id"] for _ in range(2)]

    alice_seen, _ = await collect_pages(client, headers_for(alice["id"]), limit=1)
    bob_seen, _ = await collect_pages(client, headers_for(bob["id"]), limit=1)

    assert sorted(alice_seen) == sorted(alice_docs)
    assert sorted(bob_seen) == sorted(bob_docs)


async def test_invalid_cursor_is_bad_request(client, create_user, headers_for):
    user = await create_user()

    response = await client.get("/documents", params={"cursor": "zzz"}, headers=headers_for(user["id"]))

    assert response.status_code == 400
    assert response.json() == {"error": "validation_error", "message": "Invalid cursor", "field": "cursor"}


@pytest.mark.parametrize("limit", [0, MAX_LIMIT + 1])
async def test_out_of_range_limit_is_bad_request(client, create_user, headers_for, limit):
    user = await create_user()

    response = await client.get("/documents", params={"limit": limit}, headers=headers_for(user["id"]))

    assert response.status_code == 400


async def test_user_documents_route_is_owner_only(client, create_user, create_document, headers_for):
    alice = await create_user()
    bob = await create_user()
    document_id = (await create_document(alice["id"]))["document"]["id"]

    own = await client.get(f"/users/{alice['id']}/documents", headers=headers_for(alice["id"]))
    foreign = await client.get(f"/users/{alice['id']}/documents", headers=headers_for(bob["id"]))

    assert [item["document"]["id"] for item in own.json()["items"]] == [document_id]
    assert foreign.status_code == 404
    assert foreign.json()["error"] == "USER_NOT_FOUND"


def test_clamp_limit():
    assert clamp_limit(None) == DEFAULT_LIMIT
    assert clamp_limit(0) == 1
    assert clamp_limit(-5) == 1
    assert clamp_limit(1000) == MAX_LIMIT
    assert clamp_limit(7) == 7


def test_decode_cursor():
    document_id = uuid.uuid4()

    assert decode_cursor(None) is None
    assert decode_cursor("") is None
    assert decode_cursor(str(document_id)) == document_id
    with pytest.raises(InvalidCursorError):
        decode_cursor("not-a-cursor")


def test_build_page_uses_last_kept_item_as_cursor():
    keys = sorted(uuid.uuid4() for _ in range(3))
    rows = [(f"item-{i}", key) for i, key in enumerate(keys)]

    full = build_page(rows, limit=2)
    last = build_page(rows[2:], limit=2)

    assert full.items == ["item-0", "item-1"]
    assert full.next_cursor == str(keys[1])
    assert last.items == ["item-2"]
    assert last.next_cursor is None
