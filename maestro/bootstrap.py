"""Bootstrap module for wiring the conversation core from configuration.

Handles:
- Configuring structured logging
- Creating the durable store (file, redis or in-memory) behind the
  degrade-to-memory wrapper
- Creating the repository, active session set and response generator
- Creating the SessionReconciler with all dependencies

Example usage:

    from maestro.bootstrap import bootstrap

    reconciler, ctx = bootstrap()

    await reconciler.activate(profile)
    await reconciler.send("What inspired your symphonies?")
"""

from dataclasses import dataclass

from maestro.config import get_settings
from maestro.config.settings import Settings
from maestro.conversation import ActiveSessionSet, ConversationRepository, SessionReconciler
from maestro.generation import LLMResponseGenerator, ResponseGenerator, ScriptedResponseGenerator
from maestro.observability.logging import get_logger, setup_logging
from maestro.providers.llm import LLMExecutor
from maestro.storage import (
    BlobStore,
    FileBlobStore,
    InMemoryBlobStore,
    RedisBlobStore,
    ResilientBlobStore,
)

logger = get_logger(__name__)


@dataclass
class BootstrapContext:
    """Everything bootstrap built, for tests and notebooks."""

    settings: Settings
    store: ResilientBlobStore
    repository: ConversationRepository
    active_sessions: ActiveSessionSet
    generator: ResponseGenerator


def create_store(settings: Settings) -> BlobStore:
    """Create the primary durable store for the configured backend."""
    storage = settings.storage
    if storage.backend == "redis":
        return RedisBlobStore.from_url(storage.redis_url, key_prefix=storage.key_prefix)
    if storage.backend == "inmemory":
        return InMemoryBlobStore()
    return FileBlobStore(storage.path)


def create_generator(settings: Settings) -> ResponseGenerator:
    """Create the configured response generator."""
    generation = settings.generation
    if generation.provider == "llm":
        executor = LLMExecutor(
            model=generation.model,
            fallback_models=generation.fallback_models,
        )
        return LLMResponseGenerator(
            executor,
            temperature=generation.temperature,
            max_tokens=generation.max_tokens,
        )
    return ScriptedResponseGenerator()


def bootstrap(
    settings: Settings | None = None,
    generator: ResponseGenerator | None = None,
) -> tuple[SessionReconciler, BootstrapContext]:
    """Build a fully-wired SessionReconciler.

    Args:
        settings: Configuration (default: loaded via get_settings())
        generator: Override the configured response generator

    Returns:
        Tuple of (reconciler, context)
    """
    settings = settings or get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )

    store = ResilientBlobStore(create_store(settings))
    repository = ConversationRepository(store)
    active_sessions = ActiveSessionSet(store, capacity=settings.sessions.capacity)
    generator = generator or create_generator(settings)

    reconciler = SessionReconciler(
        repository,
        active_sessions,
        generator,
        reply_timeout=settings.generation.reply_timeout_seconds,
    )

    logger.info(
        "bootstrap_complete",
        store_backend=settings.storage.backend,
        generator=type(generator).__name__,
        capacity=settings.sessions.capacity,
    )

    return reconciler, BootstrapContext(
        settings=settings,
        store=store,
        repository=repository,
        active_sessions=active_sessions,
        generator=generator,
    )
