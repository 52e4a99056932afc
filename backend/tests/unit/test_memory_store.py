"""Unit tests for InMemoryEntityStore: paging, sorting, CRUD semantics."""

import itertools

import pytest

from resource_api.application.interfaces import Persistence, SortOption
from resource_api.domain.entities import BlogPost, FileDetails, Note, ViceBankUser
from resource_api.domain.exceptions import InvalidInputError, NotFoundError
from resource_api.infrastructure.storage import InMemoryEntityStore


def note_payload(day: int, **overrides) -> dict:
    return {
        "title": f"Note {day:02d}",
        "content": "c",
        "authorId": "a1",
        "dateAdded": f"2024-01-{day:02d}T00:00:00Z",
        **overrides,
    }


def sequential_ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter):03d}"


class RecordingPersistence(Persistence):
    """Fake persistence that records every callback."""

    def __init__(self):
        self.calls: list[tuple] = []

    async def load(self):
        return []

    async def saved(self, entity, snapshot, previous_key=None):
        self.calls.append(("saved", entity.key, len(snapshot), previous_key))

    async def deleted(self, entity, snapshot):
        self.calls.append(("deleted", entity.key, len(snapshot)))

    async def backup(self, snapshot):
        self.calls.append(("backup", len(snapshot)))


@pytest.fixture
def store() -> InMemoryEntityStore[Note]:
    return InMemoryEntityStore(Note, id_factory=sequential_ids())


async def fill(store, count: int) -> list[Note]:
    return [await store.add(note_payload(day)) for day in range(1, count + 1)]


@pytest.mark.asyncio
async def test_add_assigns_fresh_ids(store):
    first = await store.add(note_payload(1))
    second = await store.add(note_payload(1))
    assert first.id and second.id
    assert first.id != second.id


@pytest.mark.asyncio
async def test_add_with_default_factory_issues_uuid():
    store = InMemoryEntityStore(Note)
    note = await store.add(note_payload(1, id="caller-id"))
    assert note.id != "caller-id"
    assert len(note.id) == 36


@pytest.mark.asyncio
async def test_add_invalid_payload_does_not_mutate(store):
    with pytest.raises(InvalidInputError):
        await store.add({"title": "missing the rest"})
    assert await store.count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "total, page, page_size, expected_len, more",
    [
        (25, 1, 10, 10, True),
        (25, 3, 10, 5, False),
        (25, 4, 10, 0, False),
        (20, 2, 10, 10, False),
        (0, 1, 10, 0, False),
    ],
)
async def test_pagination_math(store, total, page, page_size, expected_len, more):
    await fill(store, total)
    result = await store.get_list(page=page, page_size=page_size)
    assert len(result.items) == expected_len
    assert result.more_pages is more


@pytest.mark.asyncio
@pytest.mark.parametrize("page, page_size", [(0, 10), (-3, 10), (1, 0), (1, -1), ("2", None)])
async def test_invalid_paging_falls_back_to_defaults(store, page, page_size):
    await fill(store, 12)
    result = await store.get_list(page=page, page_size=page_size)
    assert len(result.items) == 10
    assert result.more_pages is True


@pytest.mark.asyncio
async def test_default_sort_is_newest_first(store):
    await fill(store, 5)
    result = await store.get_list()
    assert [n.title for n in result.items] == [f"Note {d:02d}" for d in (5, 4, 3, 2, 1)]


@pytest.mark.asyncio
async def test_chrono_and_name_sorts(store):
    await store.add(note_payload(2, title="banana"))
    await store.add(note_payload(1, title="cherry"))
    await store.add(note_payload(3, title="apple"))

    chrono = await store.get_list(sort=SortOption.CHRONO)
    by_name = await store.get_list(sort=SortOption.NAME)
    reverse_name = await store.get_list(sort=SortOption.REVERSE_NAME)

    assert [n.title for n in chrono.items] == ["cherry", "banana", "apple"]
    assert [n.title for n in by_name.items] == ["apple", "banana", "cherry"]
    assert [n.title for n in reverse_name.items] == ["cherry", "banana", "apple"]


@pytest.mark.asyncio
async def test_name_sort_tolerates_nul_characters():
    store = InMemoryEntityStore(ViceBankUser, default_sort=SortOption.NAME)
    await store.add({"userId": "u", "name": "bad\u0000name"})
    await store.add({"userId": "u", "name": "alpha"})

    result = await store.get_list()
    reverse = await store.get_list(sort=SortOption.REVERSE_NAME)

    assert [u.name for u in result.items] == ["alpha", "bad\x00name"]
    assert [u.name for u in reverse.items] == ["bad\x00name", "alpha"]


@pytest.mark.asyncio
async def test_listing_is_stable_for_equal_sort_keys(store):
    for _ in range(6):
        await store.add(note_payload(1))
    first = await store.get_list(page_size=6)
    second = await store.get_list(page_size=6)
    assert [n.id for n in first.items] == [n.id for n in second.items]


@pytest.mark.asyncio
async def test_where_filter_applies_before_paging(store):
    for day in range(1, 8):
        await store.add(note_payload(day, authorId="a1" if day % 2 else "a2"))
    result = await store.get_list(page_size=2, where=lambda n: n.author_id == "a1")
    assert len(result.items) == 2
    assert result.more_pages is True
    assert await store.count(where=lambda n: n.author_id == "a1") == 4


@pytest.mark.asyncio
async def test_get_by_key_missing_raises(store):
    with pytest.raises(NotFoundError) as exc_info:
        await store.get_by_key("nope")
    assert "Note 'nope' does not exist" in str(exc_info.value)


@pytest.mark.asyncio
async def test_update_missing_raises_without_mutation(store):
    existing = await store.add(note_payload(1))
    ghost = Note.from_json({**existing.to_json(), "id": "ghost"})
    with pytest.raises(NotFoundError):
        await store.update(ghost)
    assert await store.count() == 1
    assert await store.get_by_key(existing.id) == existing


@pytest.mark.asyncio
async def test_delete_missing_raises_without_mutation(store):
    await fill(store, 3)
    with pytest.raises(NotFoundError):
        await store.delete("ghost")
    assert await store.count() == 3


@pytest.mark.asyncio
async def test_update_rejects_wrong_entity_type(store):
    post = BlogPost.from_json(
        {
            "id": "b1",
            "title": "t",
            "slug": "s",
            "body": "b",
            "tags": [],
            "authorId": "a1",
            "dateAdded": "2024-01-01T00:00:00Z",
        }
    )
    with pytest.raises(TypeError):
        await store.update(post)


@pytest.mark.asyncio
async def test_delete_returns_last_value(store):
    note = await store.add(note_payload(1))
    assert await store.delete(note.id) == note
    assert await store.count() == 0


@pytest.mark.asyncio
async def test_natural_key_collision_is_invalid_input():
    store = InMemoryEntityStore(FileDetails, id_factory=sequential_ids())
    payload = {
        "originalFilename": "a.txt",
        "filename": "a.txt",
        "authorId": "a1",
        "mimetype": "text/plain",
        "size": 1,
        "isPrivate": False,
    }
    await store.add(payload)
    with pytest.raises(InvalidInputError) as exc_info:
        await store.add(payload)
    assert exc_info.value.fields == ["filename"]
    assert await store.count() == 1


@pytest.mark.asyncio
async def test_persistence_is_told_about_every_change():
    persistence = RecordingPersistence()
    store = InMemoryEntityStore(Note, persistence=persistence, id_factory=sequential_ids())

    note = await store.add(note_payload(1))
    await store.update(note.with_json({"content": "changed"}))
    await store.delete(note.id)
    await store.backup()

    assert persistence.calls == [
        ("saved", "id-001", 1, None),
        ("saved", "id-001", 1, None),
        ("deleted", "id-001", 0),
        ("backup", 0),
    ]


@pytest.mark.asyncio
async def test_rename_passes_previous_key():
    persistence = RecordingPersistence()
    store = InMemoryEntityStore(BlogPost, persistence=persistence, id_factory=sequential_ids())
    post = await store.add(
        {"title": "t", "slug": "old", "body": "b", "tags": [], "authorId": "a1"}
    )

    renamed = await store.update(post.with_json({"slug": "new"}), previous_key="old")

    assert renamed.id == post.id
    assert persistence.calls[-1] == ("saved", "new", 1, "old")
    with pytest.raises(NotFoundError):
        await store.get_by_key("old")
