"""Tests for ConversationRepository."""

import asyncio

import pytest

from maestro.conversation import ConversationRepository, most_recent
from maestro.conversation.models import Sender
from maestro.exceptions import ConversationNotFoundError
from maestro.storage import CONVERSATIONS_KEY, InMemoryBlobStore
from tests.factories import ConversationFactory, YieldingBlobStore


class TestCreateAndList:
    """Tests for create and list_by_subject."""

    @pytest.mark.asyncio
    async def test_list_empty_subject(self, repository):
        assert await repository.list_by_subject("bach") == []

    @pytest.mark.asyncio
    async def test_create_persists_empty_conversation(self, repository, store):
        conversation = await repository.create("bach")

        assert conversation.subject_id == "bach"
        assert conversation.messages == []
        stored = await store.get(CONVERSATIONS_KEY)
        assert [c["id"] for c in stored] == [conversation.id]

    @pytest.mark.asyncio
    async def test_list_filters_by_subject(self, repository):
        await repository.create("bach")
        await repository.create("vivaldi")

        listed = await repository.list_by_subject("bach")
        assert [c.subject_id for c in listed] == ["bach"]

    @pytest.mark.asyncio
    async def test_list_orders_by_last_updated_descending(self, store):
        older = ConversationFactory.create(subject_id="bach", offset_minutes=0)
        newer = ConversationFactory.create(subject_id="bach", offset_minutes=10)
        await store.set(CONVERSATIONS_KEY, [older.to_blob(), newer.to_blob()])

        listed = await ConversationRepository(store).list_by_subject("bach")
        assert [c.id for c in listed] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_ties_go_to_most_recently_created(self, store):
        early = ConversationFactory.create(
            subject_id="bach", offset_minutes=5, created_offset_minutes=0
        )
        late = ConversationFactory.create(
            subject_id="bach", offset_minutes=5, created_offset_minutes=3
        )
        await store.set(CONVERSATIONS_KEY, [late.to_blob(), early.to_blob()])

        listed = await ConversationRepository(store).list_by_subject("bach")
        assert listed[0].id == late.id
        assert most_recent(listed).id == late.id

    @pytest.mark.asyncio
    async def test_full_ties_go_to_later_stored(self, store):
        first = ConversationFactory.create(subject_id="bach")
        second = ConversationFactory.create(subject_id="bach")
        await store.set(CONVERSATIONS_KEY, [first.to_blob(), second.to_blob()])

        listed = await ConversationRepository(store).list_by_subject("bach")
        assert listed[0].id == second.id

    @pytest.mark.asyncio
    async def test_invalid_records_are_skipped(self, store):
        good = ConversationFactory.create(subject_id="bach")
        await store.set(CONVERSATIONS_KEY, [{"id": "broken"}, good.to_blob()])

        listed = await ConversationRepository(store).list_by_subject("bach")
        assert [c.id for c in listed] == [good.id]

    @pytest.mark.asyncio
    async def test_malformed_collection_reads_as_empty(self, store):
        await store.set(CONVERSATIONS_KEY, {"not": "a list"})
        assert await ConversationRepository(store).list_all() == []


class TestAppendMessage:
    """Tests for append_message."""

    @pytest.mark.asyncio
    async def test_append_in_call_order(self, repository):
        conversation = await repository.create("bach")
        for i in range(5):
            await repository.append_message(conversation.id, f"message {i}", Sender.USER)

        [stored] = await repository.list_by_subject("bach")
        assert [m.text for m in stored.messages] == [f"message {i}" for i in range(5)]
        timestamps = [m.timestamp for m in stored.messages]
        assert timestamps == sorted(timestamps)
        assert stored.last_updated == timestamps[-1]

    @pytest.mark.asyncio
    async def test_append_returns_persisted_message(self, repository):
        conversation = await repository.create("bach")
        message = await repository.append_message(conversation.id, "Hello", Sender.USER)

        stored = await repository.get(conversation.id)
        assert stored.messages == [message]

    @pytest.mark.asyncio
    async def test_append_unknown_conversation_raises(self, repository):
        with pytest.raises(ConversationNotFoundError) as exc_info:
            await repository.append_message("missing", "Hello", Sender.USER)
        assert exc_info.value.conversation_id == "missing"

    @pytest.mark.asyncio
    async def test_append_blank_text_raises(self, repository):
        conversation = await repository.create("bach")
        with pytest.raises(ValueError):
            await repository.append_message(conversation.id, "  ", Sender.USER)

    @pytest.mark.asyncio
    async def test_timestamps_never_go_backwards(self, store):
        future = ConversationFactory.create(
            subject_id="bach", texts=["from the future"], offset_minutes=10_000_000
        )
        await store.set(CONVERSATIONS_KEY, [future.to_blob()])
        repository = ConversationRepository(store)

        message = await repository.append_message(future.id, "now", Sender.USER)
        assert message.timestamp == future.messages[-1].timestamp

    @pytest.mark.asyncio
    async def test_concurrent_appends_are_not_lost(self):
        """Two appends issued before either completes both survive."""
        repository = ConversationRepository(YieldingBlobStore())
        conversation = await repository.create("bach")
        await repository.append_message(conversation.id, "initial", Sender.USER)

        await asyncio.gather(
            repository.append_message(conversation.id, "first", Sender.USER),
            repository.append_message(conversation.id, "second", Sender.ASSISTANT),
        )

        stored = await repository.get(conversation.id)
        assert len(stored.messages) == 3
        assert {m.text for m in stored.messages} == {"initial", "first", "second"}

    @pytest.mark.asyncio
    async def test_append_sees_writes_from_another_writer(self, store):
        """The persisted collection, not a cached copy, is the base of every append."""
        mine = ConversationRepository(store)
        other = ConversationRepository(store)
        conversation = await mine.create("bach")

        await other.append_message(conversation.id, "from another tab", Sender.USER)
        await mine.append_message(conversation.id, "from this tab", Sender.USER)

        stored = await mine.get(conversation.id)
        assert [m.text for m in stored.messages] == ["from another tab", "from this tab"]


class TestDelete:
    """Tests for delete operations."""

    @pytest.mark.asyncio
    async def test_delete_by_id(self, repository):
        keep = await repository.create("bach")
        drop = await repository.create("bach")

        assert await repository.delete_by_id(drop.id) is True
        assert [c.id for c in await repository.list_by_subject("bach")] == [keep.id]

    @pytest.mark.asyncio
    async def test_delete_by_id_is_idempotent(self, repository):
        assert await repository.delete_by_id("missing") is False

    @pytest.mark.asyncio
    async def test_delete_all_for_subject(self, repository):
        await repository.create("bach")
        await repository.create("bach")
        other = await repository.create("vivaldi")

        assert await repository.delete_all_for_subject("bach") == 2
        assert await repository.list_by_subject("bach") == []
        assert [c.id for c in await repository.list_all()] == [other.id]

    @pytest.mark.asyncio
    async def test_delete_all(self, repository):
        await repository.create("bach")
        await repository.create("vivaldi")

        await repository.delete_all()
        assert await repository.list_all() == []


class TestRoundTrip:
    """Tests for durable persistence of the whole collection."""

    @pytest.mark.asyncio
    async def test_collection_survives_new_repository(self, store):
        repository = ConversationRepository(store)
        first = await repository.create("bach")
        await repository.append_message(first.id, "Hello", Sender.USER)
        await repository.append_message(first.id, "Guten Tag", Sender.ASSISTANT)
        await repository.create("vivaldi")
        before = await repository.list_all()

        after = await ConversationRepository(InMemoryBlobStore(store.snapshot())).list_all()

        assert after == before
