"""Conversation repository over the durable blob store.

All conversations live in one JSON array under the `conversations` key.
Every mutation reads the persisted array, applies its change and writes
the whole array back while holding the repository lock, so two appends
issued back-to-back always see each other's writes. Another process
(a second tab, a second worker) may write the same key at any time, which
is why nothing here trusts a cached copy.

Under true parallel access the lock would have to become a store-level
compare-and-swap or distributed lock.
"""

import asyncio
from typing import Any

from pydantic import ValidationError

from maestro.conversation.models import Conversation, Message, Sender, utc_now
from maestro.exceptions import ConversationNotFoundError
from maestro.observability.logging import get_logger
from maestro.storage.store import CONVERSATIONS_KEY, BlobStore

logger = get_logger(__name__)


def _recency_key(indexed: tuple[int, Conversation]) -> tuple[Any, ...]:
    index, conversation = indexed
    return (conversation.last_updated, conversation.created_at, index)


def most_recent(conversations: list[Conversation]) -> Conversation | None:
    """Pick the canonical conversation among several for one subject.

    Greatest last_updated wins; ties go to the most recently created,
    then to the one stored later.
    """
    if not conversations:
        return None
    return max(enumerate(conversations), key=_recency_key)[1]


class ConversationRepository:
    """CRUD over the collection of Conversation records.

    Share a single instance per store within a process; the lock that
    serializes read-modify-write cycles belongs to the instance.
    """

    def __init__(self, store: BlobStore, key: str = CONVERSATIONS_KEY) -> None:
        """Initialize the repository.

        Args:
            store: Durable blob store holding the collection
            key: Store key of the conversations array
        """
        self._store = store
        self._key = key
        self._lock = asyncio.Lock()

    @property
    def store(self) -> BlobStore:
        return self._store

    async def list_by_subject(self, subject_id: str) -> list[Conversation]:
        """Return all conversations for a subject, most recent first."""
        conversations = await self._load()
        matching = [(i, c) for i, c in enumerate(conversations) if c.subject_id == subject_id]
        matching.sort(key=_recency_key, reverse=True)
        return [c for _, c in matching]

    async def list_all(self) -> list[Conversation]:
        """Return every stored conversation in storage order."""
        return await self._load()

    async def get(self, conversation_id: str) -> Conversation | None:
        """Read one conversation directly from the store."""
        for conversation in await self._load():
            if conversation.id == conversation_id:
                return conversation
        return None

    async def create(self, subject_id: str) -> Conversation:
        """Allocate, persist and return a new empty conversation."""
        now = utc_now()
        conversation = Conversation(subject_id=subject_id, last_updated=now, created_at=now)
        async with self._lock:
            conversations = await self._load()
            conversations.append(conversation)
            await self._save(conversations)

        logger.info(
            "conversation_created",
            conversation_id=conversation.id,
            subject_id=subject_id,
        )
        return conversation

    async def append_message(
        self,
        conversation_id: str,
        text: str,
        sender: Sender,
    ) -> Message:
        """Append a message to a stored conversation.

        Raises:
            ConversationNotFoundError: If conversation_id is not stored
            ValueError: If text is blank
        """
        if not text.strip():
            raise ValueError("message text must not be empty")

        async with self._lock:
            conversations = await self._load()
            index = self._index_of(conversations, conversation_id)
            if index is None:
                logger.warning("append_conversation_not_found", conversation_id=conversation_id)
                raise ConversationNotFoundError(conversation_id)

            conversation = conversations[index]
            timestamp = utc_now()
            if conversation.messages and conversation.messages[-1].timestamp > timestamp:
                timestamp = conversation.messages[-1].timestamp

            message = Message(text=text, sender=sender, timestamp=timestamp)
            conversations[index] = conversation.model_copy(
                update={
                    "messages": [*conversation.messages, message],
                    "last_updated": timestamp,
                }
            )
            await self._save(conversations)

        logger.debug(
            "message_appended",
            conversation_id=conversation_id,
            message_id=message.id,
            sender=message.sender.value,
            length=len(text),
        )
        return message

    async def delete_by_id(self, conversation_id: str) -> bool:
        """Remove one conversation. Returns False if it did not exist."""
        async with self._lock:
            conversations = await self._load()
            remaining = [c for c in conversations if c.id != conversation_id]
            if len(remaining) == len(conversations):
                return False
            await self._save(remaining)

        logger.info("conversation_deleted", conversation_id=conversation_id)
        return True

    async def delete_all_for_subject(self, subject_id: str) -> int:
        """Remove every conversation belonging to a subject.

        Returns:
            Number of removed conversations
        """
        async with self._lock:
            conversations = await self._load()
            remaining = [c for c in conversations if c.subject_id != subject_id]
            removed = len(conversations) - len(remaining)
            if removed:
                await self._save(remaining)

        logger.info("subject_conversations_deleted", subject_id=subject_id, count=removed)
        return removed

    async def delete_all(self) -> None:
        """Wipe the entire collection."""
        async with self._lock:
            await self._store.set(self._key, [])
        logger.info("all_conversations_deleted")

    @staticmethod
    def _index_of(conversations: list[Conversation], conversation_id: str) -> int | None:
        for i, conversation in enumerate(conversations):
            if conversation.id == conversation_id:
                return i
        return None

    async def _load(self) -> list[Conversation]:
        data = await self._store.get(self._key)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("conversations_blob_malformed", key=self._key, type=type(data).__name__)
            return []

        conversations: list[Conversation] = []
        for raw in data:
            try:
                conversations.append(Conversation.from_blob(raw))
            except ValidationError as e:
                logger.warning(
                    "conversation_record_skipped",
                    key=self._key,
                    error_count=e.error_count(),
                )
        return conversations

    async def _save(self, conversations: list[Conversation]) -> None:
        await self._store.set(self._key, [c.to_blob() for c in conversations])
