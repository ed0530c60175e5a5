# vocab_swipe/adapters/api/routers/sources.py
from fastapi import APIRouter, Depends, Query
import structlog

from vocab_swipe.adapters.api.dependencies import get_source_store, get_study_session, raise_http
from vocab_swipe.adapters.api.schemas import (
    SourceCreateRequest,
    SourceUpdateRequest,
    WordsAddRequest,
    source_body,
)
from vocab_swipe.core.domain.exceptions import DomainError
from vocab_swipe.core.use_cases.source_store import WordSourceStore
from vocab_swipe.core.use_cases.study_session import StudySession

logger = structlog.get_logger()

router = APIRouter(prefix="/api/sources", tags=["Sources"])


@router.get("", summary="List Sources")
async def list_sources(
    summary: bool = Query(False, description="Omit word payloads"),
    store: WordSourceStore = Depends(get_source_store),
):
    """
    Returns every loadable source. Sources whose file or payload is broken
    are skipped and reported under `warnings`.
    """
    try:
        sources, warnings = await store.list_sources_with_warnings()
    except DomainError as e:
        raise_http(e)

    return {
        "success": True,
        "sources": [source_body(s, include_words=not summary) for s in sources],
        "count": len(sources),
        "warnings": warnings,
    }


@router.get("/{name}", summary="Get Source")
async def get_source(name: str, store: WordSourceStore = Depends(get_source_store)):
    try:
        source = await store.get_source(name)
    except DomainError as e:
        raise_http(e)
    return {"success": True, **source_body(source)}


@router.post("", summary="Create Source")
async def create_source(
    request: SourceCreateRequest,
    store: WordSourceStore = Depends(get_source_store),
):
    """Creates a source, or overwrites the one with the same name."""
    try:
        source = await store.save_source(request.name, request.words, request.origin_link)
    except DomainError as e:
        raise_http(e)
    return {
        "success": True,
        "message": "Source saved successfully",
        "name": source.name,
        "totalWords": source.total_words,
    }


@router.put("/{name}", summary="Replace Source Words")
async def update_source(
    name: str,
    request: SourceUpdateRequest,
    store: WordSourceStore = Depends(get_source_store),
):
    try:
        source = await store.save_source(name, request.words, request.origin_link)
    except DomainError as e:
        raise_http(e)
    return {
        "success": True,
        "message": "Source updated successfully",
        "name": source.name,
        "totalWords": source.total_words,
    }


@router.delete("/{name}", summary="Delete Source")
async def delete_source(name: str, session: StudySession = Depends(get_study_session)):
    """Deletes the source and the learner's progress on it."""
    try:
        await session.delete_source(name)
    except DomainError as e:
        raise_http(e)
    return {"success": True, "message": "Source deleted successfully"}


@router.post("/{name}/words", summary="Add Words")
async def add_words(
    name: str,
    request: WordsAddRequest,
    store: WordSourceStore = Depends(get_source_store),
):
    """Appends words; terms already in the source are reported as `ignored`."""
    try:
        source, ignored = await store.add_words(name, request.words)
    except DomainError as e:
        raise_http(e)
    return {
        "success": True,
        "name": source.name,
        "totalWords": source.total_words,
        "ignored": ignored,
    }


@router.delete("/{name}/words/{term}", summary="Remove Word")
async def remove_word(
    name: str,
    term: str,
    store: WordSourceStore = Depends(get_source_store),
):
    try:
        source = await store.remove_word(name, term)
    except DomainError as e:
        raise_http(e)
    return {"success": True, "name": source.name, "totalWords": source.total_words}
