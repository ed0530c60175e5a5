# tests/conftest.py
import random
from pathlib import Path

import pytest
from dependency_injector import providers

from vocab_swipe.adapters.messaging.local_bus import LocalEventBus
from vocab_swipe.adapters.persistence import data_file
from vocab_swipe.adapters.persistence.filesystem_repo import FileSystemSourceRepository
from vocab_swipe.adapters.persistence.state_store import InMemoryStateStore
from vocab_swipe.core.domain.models import SelectionPolicy
from vocab_swipe.core.use_cases import (
    ProgressTracker,
    StudySession,
    WordSelector,
    WordSourceStore,
)
from vocab_swipe.shared.container import container as app_container


def write_source(folder: Path, name: str, words, link=None, suffix=".data") -> Path:
    """Drops a vocabulary file into the sources folder, bypassing the engine."""
    path = folder / f"{name}{suffix}"
    if suffix == ".data":
        path.write_text(data_file.dumps(words, link), encoding="utf-8")
    else:
        path.write_text(data_file.dumps(words), encoding="utf-8")
    return path


COLORS = [{"term": "red"}, {"term": "blue"}]

ANIMALS = [
    {"word": "Cat", "wordType": "noun", "pronounce": "/kæt/", "translateVN": "con mèo",
     "synonyms": ["kitty"], "forms": ["cats"]},
    {"word": "Dog", "wordType": "noun", "translateVN": "con chó"},
    {"word": "Bird", "wordType": "noun", "translateVN": "con chim"},
]


@pytest.fixture
def sources_dir(tmp_path) -> Path:
    folder = tmp_path / "sources"
    folder.mkdir()
    return folder


@pytest.fixture
def seeded_dir(sources_dir) -> Path:
    """A sources folder holding 'Colors' and 'Animals'."""
    write_source(sources_dir, "Colors", COLORS)
    write_source(sources_dir, "Animals", ANIMALS, link="https://example.org/animals")
    return sources_dir


@pytest.fixture
def add_source_file(seeded_dir):
    """Writes another vocabulary file next to the seeded ones."""
    def _add(name, words, link=None, suffix=".data"):
        return write_source(seeded_dir, name, words, link, suffix)
    return _add


@pytest.fixture
def repo(seeded_dir) -> FileSystemSourceRepository:
    return FileSystemSourceRepository(str(seeded_dir))


@pytest.fixture
def store(repo) -> WordSourceStore:
    return WordSourceStore(repo)


@pytest.fixture
def state_store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def tracker(state_store, store) -> ProgressTracker:
    return ProgressTracker(state_store, store)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def event_bus() -> LocalEventBus:
    return LocalEventBus()


@pytest.fixture
def events(event_bus):
    """Every event published on the bus, in order."""
    received = []
    event_bus.subscribe("*", received.append)
    return received


@pytest.fixture
def session(store, tracker, rng, event_bus) -> StudySession:
    return StudySession(store, tracker, WordSelector(SelectionPolicy.RANDOM, rng), event_bus)


@pytest.fixture
def sequential_session(store, tracker, event_bus) -> StudySession:
    return StudySession(store, tracker, WordSelector(SelectionPolicy.SEQUENTIAL), event_bus)


@pytest.fixture(scope="function")
def container(repo, state_store):
    """
    The application container with infrastructure swapped for the
    temp-folder repository and an in-memory state store.
    """
    app_container.reset_singletons()
    app_container.source_repository.override(providers.Object(repo))
    app_container.state_store.override(providers.Object(state_store))
    app_container.rng.override(providers.Object(random.Random(99)))

    yield app_container

    # Undo only this fixture's overrides: the container-wide reset_override()
    # would also drop the Configuration provider's loaded settings.
    app_container.source_repository.reset_override()
    app_container.state_store.reset_override()
    app_container.rng.reset_override()
    app_container.reset_singletons()
