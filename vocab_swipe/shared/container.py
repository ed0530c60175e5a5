# vocab_swipe/shared/container.py
import random

from dependency_injector import containers, providers

from vocab_swipe.shared.config import settings
from vocab_swipe.adapters.messaging.local_bus import LocalEventBus
from vocab_swipe.adapters.persistence.filesystem_repo import FileSystemSourceRepository
from vocab_swipe.adapters.persistence.http_repo import HttpSourceRepository
from vocab_swipe.adapters.persistence.state_store import JsonFileStateStore

from vocab_swipe.core.use_cases.source_store import WordSourceStore
from vocab_swipe.core.use_cases.progress_tracker import ProgressTracker
from vocab_swipe.core.use_cases.word_selector import WordSelector
from vocab_swipe.core.use_cases.study_session import StudySession


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    Assembly instructions for one Vocab Swipe process: a single study
    session shared by every request (single-learner model).
    """

    # 1. Configuration
    config = providers.Configuration(pydantic_settings=[settings])

    # 2. Gateways (Infrastructure Adapters)

    # Source backing, chosen by STORAGE_BACKEND
    source_repository = providers.Selector(
        config.STORAGE_BACKEND,
        filesystem=providers.Singleton(
            FileSystemSourceRepository,
            sources_dir=settings.SOURCES_DIR,
        ),
        remote=providers.Singleton(
            HttpSourceRepository,
            base_url=config.REMOTE_API_URL,
            timeout=config.REMOTE_TIMEOUT_SEC,
        ),
    )

    # Durable progress (Singleton: one writer for the state file)
    state_store = providers.Singleton(
        JsonFileStateStore,
        path=settings.STATE_FILE,
    )

    event_bus = providers.Singleton(LocalEventBus)

    rng = providers.Singleton(random.Random, settings.RANDOM_SEED)

    # 3. Use Cases (Engine)

    source_store = providers.Singleton(
        WordSourceStore,
        repo=source_repository,
    )

    progress_tracker = providers.Singleton(
        ProgressTracker,
        state_store=state_store,
        source_store=source_store,
        storage_key=config.PROGRESS_STORAGE_KEY,
    )

    word_selector = providers.Singleton(
        WordSelector,
        policy=config.SELECTION_POLICY,
        rng=rng,
    )

    study_session = providers.Singleton(
        StudySession,
        source_store=source_store,
        tracker=progress_tracker,
        selector=word_selector,
        event_bus=event_bus,
    )


# Instantiate the container for global access (e.g. by FastAPI)
container = Container()
