"""Session reconciler: one source of truth for the displayed transcript.

On activation the reconciler resolves which conversation is current for
the composer with a two-phase read:

1. list the subject's conversations and pick the most recent one;
2. re-read that conversation by id straight from the store, falling back
   to the phase-1 copy only if the direct read comes back without the
   messages phase 1 saw.

Sends publish an optimistic message first, then persist, touch the
active set (cascading any eviction) and generate the reply in a
background task. Every published state carries a generation token; a
reply that completes after the displayed subject or conversation changed
is still persisted but never shown.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING

from maestro.composers import ComposerProfile, introduction_for, placeholder_reply
from maestro.conversation.active_sessions import ActiveSessionSet
from maestro.conversation.models import (
    Conversation,
    DisplayMessage,
    DisplayState,
    Message,
    MessageStatus,
    Notification,
    NotificationKind,
    Sender,
    SessionPhase,
)
from maestro.conversation.repository import ConversationRepository
from maestro.exceptions import ConversationNotFoundError, GeneratorFailureError, MessageNotSentError
from maestro.observability.logging import get_logger

if TYPE_CHECKING:
    from maestro.generation.base import ResponseGenerator

logger = get_logger(__name__)

Listener = Callable[[DisplayState], None]

DEFAULT_REPLY_TIMEOUT = 30.0


class SessionReconciler:
    """Controller mediating every read and write around the current chat.

    Example:
        reconciler = SessionReconciler(repository, active_sessions, generator)
        await reconciler.activate(bach)
        await reconciler.send("Tell me about your fugues")
        await reconciler.drain()
        print(reconciler.state.texts)
    """

    def __init__(
        self,
        repository: ConversationRepository,
        active_sessions: ActiveSessionSet,
        generator: ResponseGenerator,
        reply_timeout: float = DEFAULT_REPLY_TIMEOUT,
    ) -> None:
        """Initialize the reconciler.

        Args:
            repository: Conversation persistence
            active_sessions: Bounded recency set driving eviction
            generator: Produces the composer's replies
            reply_timeout: Seconds before a reply counts as failed
        """
        self._repository = repository
        self._active_sessions = active_sessions
        self._generator = generator
        self._reply_timeout = reply_timeout

        self._profile: ComposerProfile | None = None
        self._generation = 0
        self._state = DisplayState()
        self._listeners: list[Listener] = []
        self._notifications: list[Notification] = []
        self._pending: dict[asyncio.Task[None], int] = {}
        self._activation: asyncio.Future[None] | None = None
        self._target_lock = asyncio.Lock()
        self._degraded_notified = False

    # ------------------------------------------------------------------
    # Published state
    # ------------------------------------------------------------------

    @property
    def state(self) -> DisplayState:
        """Latest published display state."""
        return self._state

    @property
    def profile(self) -> ComposerProfile | None:
        return self._profile

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with every published state. Returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def pop_notifications(self) -> list[Notification]:
        """Return and forget the pending one-shot notifications."""
        notifications, self._notifications = self._notifications, []
        return notifications

    def _publish(self, state: DisplayState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _notify(self, kind: NotificationKind, text: str, subject_id: str | None) -> None:
        self._notifications.append(Notification(kind=kind, subject_id=subject_id, text=text))

    def _check_storage(self) -> None:
        if self._degraded_notified or not self._repository.store.degraded:
            return
        self._degraded_notified = True
        self._notify(
            NotificationKind.STORAGE_DEGRADED,
            "Chat history can't be saved right now and will not survive a restart.",
            self._profile.id if self._profile else None,
        )

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    async def activate(self, profile: ComposerProfile) -> DisplayState:
        """Make profile the displayed subject and resolve its conversation.

        Viewing a subject never touches the active session set. Sends and
        resets issued while this runs wait for it to finish.
        """
        activation: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._activation = activation
        try:
            self._profile = profile
            generation = self._next_generation()
            self._publish(
                DisplayState(
                    subject_id=profile.id,
                    phase=SessionPhase.RESOLVING,
                    generation=generation,
                    introduction=introduction_for(profile),
                )
            )

            async with self._target_lock:
                conversation = await self._resolve(profile.id)
            if not self._is_current(generation):
                logger.debug("activation_superseded", subject_id=profile.id)
                return self._state

            await self._initialize_generator(profile, conversation.messages)
            self._publish(
                self._state.model_copy(
                    update={
                        "conversation_id": conversation.id,
                        "phase": SessionPhase.READY,
                        "messages": tuple(
                            DisplayMessage(message=m) for m in conversation.messages
                        ),
                    }
                )
            )
            self._check_storage()
            logger.info(
                "subject_activated",
                subject_id=profile.id,
                conversation_id=conversation.id,
                message_count=len(conversation.messages),
            )
            return self._state
        finally:
            if not activation.done():
                activation.set_result(None)

    async def _wait_for_activation(self) -> None:
        # A newer activation may start while we wait on an older one
        while self._activation is not None and not self._activation.done():
            await self._activation

    async def deactivate(self) -> None:
        """Stop displaying any subject. Pending replies are still persisted."""
        self._profile = None
        self._publish(DisplayState(generation=self._next_generation()))

    async def _resolve(self, subject_id: str) -> Conversation:
        candidates = await self._repository.list_by_subject(subject_id)
        if not candidates:
            return await self._repository.create(subject_id)

        # list_by_subject orders by recency with the creation tie-break
        listed = candidates[0]
        direct = await self._repository.get(listed.id)
        if direct is None or (not direct.messages and listed.messages):
            logger.warning(
                "direct_read_missing_messages",
                subject_id=subject_id,
                conversation_id=listed.id,
            )
            return listed
        return direct

    async def _initialize_generator(
        self, profile: ComposerProfile, transcript: list[Message]
    ) -> None:
        try:
            await self._generator.initialize(profile, list(transcript))
        except Exception as e:
            # Initialization failures surface later as placeholder replies
            logger.warning(
                "generator_initialize_failed",
                subject_id=profile.id,
                error=str(e),
                error_type=type(e).__name__,
            )

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def send(self, text: str) -> DisplayMessage:
        """Send a user message to the displayed composer.

        Returns once the message is persisted and the active set updated;
        the reply arrives later through a published state.

        Raises:
            ValueError: If text is blank
            RuntimeError: If no subject is active
            MessageNotSentError: If the message could not be persisted
        """
        if not text.strip():
            raise ValueError("message text must not be empty")
        if self._profile is None:
            raise RuntimeError("No composer is active")

        await self._wait_for_activation()
        profile = self._profile
        if profile is None:
            raise RuntimeError("No composer is active")

        generation = self._generation
        optimistic = Message(text=text, sender=Sender.USER)
        self._publish(
            self._state.model_copy(
                update={
                    "messages": (
                        *self._state.messages,
                        DisplayMessage(message=optimistic, status=MessageStatus.PENDING),
                    )
                }
            )
        )

        conversation_id = self._state.conversation_id
        if conversation_id is None:
            conversation_id = await self._target_conversation(profile.id, generation)

        try:
            conversation_id, persisted = await self._append_user_message(
                profile.id, generation, conversation_id, text
            )
        except ConversationNotFoundError:
            self._replace_message(optimistic.id, optimistic, MessageStatus.FAILED)
            self._notify(
                NotificationKind.MESSAGE_NOT_SENT,
                f"Your message to {profile.name} was not sent.",
                profile.id,
            )
            logger.error("message_not_sent", subject_id=profile.id, message_id=optimistic.id)
            raise MessageNotSentError(profile.id, optimistic.id) from None

        self._replace_message(optimistic.id, persisted, MessageStatus.CONFIRMED)

        touch = await self._active_sessions.touch(profile.id)
        for evicted in [touch.evicted, *touch.overflow]:
            if evicted is None or evicted == profile.id:
                continue
            await self._repository.delete_all_for_subject(evicted)
            self._notify(
                NotificationKind.EVICTED,
                f"Closed the conversation with {evicted} to make room.",
                evicted,
            )

        if self._is_current(generation):
            self._publish(self._state.model_copy(update={"phase": SessionPhase.AWAITING_REPLY}))

        task = asyncio.create_task(self._reply(profile, generation, conversation_id, text))
        self._pending[task] = generation
        task.add_done_callback(self._reply_done)

        self._check_storage()
        return DisplayMessage(message=persisted, status=MessageStatus.CONFIRMED)

    async def _append_user_message(
        self,
        subject_id: str,
        generation: int,
        conversation_id: str,
        text: str,
    ) -> tuple[str, Message]:
        try:
            message = await self._repository.append_message(conversation_id, text, Sender.USER)
            return conversation_id, message
        except ConversationNotFoundError:
            logger.warning(
                "append_retry_after_not_found",
                subject_id=subject_id,
                conversation_id=conversation_id,
            )

        target_id = await self._target_conversation(
            subject_id, generation, stale_id=conversation_id
        )
        message = await self._repository.append_message(target_id, text, Sender.USER)
        return target_id, message

    async def _target_conversation(
        self,
        subject_id: str,
        generation: int,
        stale_id: str | None = None,
    ) -> str:
        """Pick the conversation a send should land in, creating it at most once.

        Concurrent sends for a subject with no conversation queue on the lock;
        the first one resolves (and creates if needed), the rest reuse its id.
        """
        async with self._target_lock:
            if self._is_current(generation):
                current = self._state.conversation_id
                if current is not None and current != stale_id:
                    return current
            conversation = await self._resolve(subject_id)
            self._set_conversation(generation, conversation.id)
            return conversation.id

    def _set_conversation(self, generation: int, conversation_id: str) -> None:
        if self._is_current(generation):
            self._publish(self._state.model_copy(update={"conversation_id": conversation_id}))

    def _replace_message(self, message_id: str, message: Message, status: MessageStatus) -> None:
        if not any(dm.message.id == message_id for dm in self._state.messages):
            return
        messages = tuple(
            DisplayMessage(message=message, status=status) if dm.message.id == message_id else dm
            for dm in self._state.messages
        )
        self._publish(self._state.model_copy(update={"messages": messages}))

    # ------------------------------------------------------------------
    # Replies
    # ------------------------------------------------------------------

    async def _reply(
        self,
        profile: ComposerProfile,
        generation: int,
        conversation_id: str,
        user_text: str,
    ) -> None:
        reply_text = await self._generate(profile, user_text)

        try:
            reply = await self._repository.append_message(
                conversation_id, reply_text, Sender.ASSISTANT
            )
        except ConversationNotFoundError:
            logger.info(
                "reply_dropped_conversation_gone",
                subject_id=profile.id,
                conversation_id=conversation_id,
            )
            self._settle_phase(generation)
            return

        # Match on what is displayed, so remounting the same chat still shows it
        displayed = (
            self._state.subject_id == profile.id
            and self._state.conversation_id == conversation_id
        )
        already_shown = any(dm.message.id == reply.id for dm in self._state.messages)
        if displayed and not already_shown:
            self._publish(
                self._state.model_copy(
                    update={"messages": (*self._state.messages, DisplayMessage(message=reply))}
                )
            )
        else:
            logger.debug(
                "reply_not_displayed",
                subject_id=profile.id,
                conversation_id=conversation_id,
            )
        self._settle_phase(generation)
        self._check_storage()

    async def _generate(self, profile: ComposerProfile, user_text: str) -> str:
        try:
            try:
                text = await asyncio.wait_for(
                    self._generator.generate_reply(user_text), timeout=self._reply_timeout
                )
            except TimeoutError as e:
                raise GeneratorFailureError(
                    f"No reply within {self._reply_timeout}s", cause=e
                ) from e
            if not text or not text.strip():
                raise GeneratorFailureError("Generator returned empty text")
            return text
        except Exception as e:
            # Any generator failure becomes the composer's placeholder
            logger.warning(
                "reply_generation_failed",
                subject_id=profile.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return placeholder_reply(profile)

    def _settle_phase(self, generation: int) -> None:
        if not self._is_current(generation):
            return
        current = asyncio.current_task()
        still_waiting = any(
            g == generation and task is not current and not task.done()
            for task, g in self._pending.items()
        )
        if not still_waiting and self._state.phase == SessionPhase.AWAITING_REPLY:
            self._publish(self._state.model_copy(update={"phase": SessionPhase.READY}))

    def _reply_done(self, task: asyncio.Task[None]) -> None:
        self._pending.pop(task, None)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "reply_task_failed",
                error=str(error),
                error_type=type(error).__name__,
            )

    async def drain(self) -> None:
        """Wait for every in-flight reply to be persisted."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ------------------------------------------------------------------
    # Reset and removal
    # ------------------------------------------------------------------

    async def reset(self) -> DisplayState:
        """Start a fresh, empty conversation with the displayed composer.

        Earlier conversations stay stored; they are simply no longer current.
        """
        await self._wait_for_activation()
        profile = self._profile
        if profile is None:
            raise RuntimeError("No composer is active")

        generation = self._next_generation()
        conversation = await self._repository.create(profile.id)
        await self._initialize_generator(profile, [])
        if self._is_current(generation):
            self._publish(
                DisplayState(
                    subject_id=profile.id,
                    conversation_id=conversation.id,
                    phase=SessionPhase.READY,
                    generation=generation,
                    introduction=introduction_for(profile),
                )
            )
        logger.info("conversation_reset", subject_id=profile.id, conversation_id=conversation.id)
        self._check_storage()
        return self._state

    async def remove_subject(self, subject_id: str) -> None:
        """Close a composer's chat: drop it from the active set and delete its history."""
        await self._active_sessions.remove(subject_id)
        await self._repository.delete_all_for_subject(subject_id)
        if self._profile is not None and self._profile.id == subject_id:
            self._publish_empty(self._profile)
        self._check_storage()

    async def clear_all(self) -> None:
        """Delete every conversation and empty the active set."""
        await self._repository.delete_all()
        await self._active_sessions.clear()
        if self._profile is not None:
            self._publish_empty(self._profile)
        else:
            self._publish(DisplayState(generation=self._next_generation()))
        self._check_storage()

    def _publish_empty(self, profile: ComposerProfile) -> None:
        # No conversation id: the next send creates one
        self._publish(
            DisplayState(
                subject_id=profile.id,
                phase=SessionPhase.READY,
                generation=self._next_generation(),
                introduction=introduction_for(profile),
            )
        )
