# vocab_swipe/adapters/persistence/filesystem_repo.py
import os
from pathlib import Path
from typing import Dict, List, Optional

import aiofiles
import structlog

from vocab_swipe.adapters.persistence import data_file
from vocab_swipe.core.domain.exceptions import SourceLoadError, SourceNotFoundError
from vocab_swipe.core.ports.source_repository import ISourceRepository, RawSource

logger = structlog.get_logger()

DATA_SUFFIX = ".data"
LEGACY_SUFFIX = ".json"


class FileSystemSourceRepository(ISourceRepository):
    """
    Source backing made of one file per source in a single folder.

    The source name is the file stem. `.data` files are the native format;
    bare `.json` arrays from older exports are read as well and replaced by
    a `.data` file on the next write.
    """

    def __init__(self, sources_dir: str):
        self.base_path = Path(sources_dir)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path_for(self, name: str, suffix: str = DATA_SUFFIX) -> Path:
        return self.base_path / f"{name}{suffix}"

    def _existing_path(self, name: str) -> Optional[Path]:
        for suffix in (DATA_SUFFIX, LEGACY_SUFFIX):
            path = self._path_for(name, suffix)
            if path.is_file():
                return path
        return None

    def _scan(self) -> Dict[str, Path]:
        """Stem -> file, `.data` winning over a `.json` twin."""
        found: Dict[str, Path] = {}
        for path in sorted(self.base_path.iterdir()):
            if not path.is_file() or path.name.startswith("."):
                continue
            if path.suffix == DATA_SUFFIX:
                found[path.stem] = path
            elif path.suffix == LEGACY_SUFFIX and path.stem not in found:
                found[path.stem] = path
        return found

    async def _read(self, name: str, path: Path) -> RawSource:
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                content = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("repo_read_failed", source=name, path=str(path), error=str(e))
            return RawSource(name=name, error=f"unreadable file: {e}")

        try:
            parsed = data_file.loads(content)
        except data_file.DataFileError as e:
            return RawSource(name=name, error=str(e))
        return RawSource(name=name, words=parsed.words, origin_link=parsed.origin_link)

    # --- Interface Implementation ---

    async def list_raw(self) -> List[RawSource]:
        try:
            files = self._scan()
        except OSError as e:
            raise SourceLoadError(f"sources folder unavailable: {e}")
        return [await self._read(name, path) for name, path in files.items()]

    async def get(self, name: str) -> RawSource:
        path = self._existing_path(name)
        if path is None:
            raise SourceNotFoundError(name)
        return await self._read(name, path)

    async def put(self, name: str, words: List[dict], origin_link: Optional[str] = None) -> None:
        path = self._path_for(name)
        tmp_path = path.with_name(path.name + ".tmp")

        try:
            async with aiofiles.open(tmp_path, mode="w", encoding="utf-8") as f:
                await f.write(data_file.dumps(words, origin_link))
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error("repo_write_failed", source=name, error=str(e))
            if tmp_path.exists():
                tmp_path.unlink()
            raise SourceLoadError(f"could not write file: {e}", name=name)

        legacy = self._path_for(name, LEGACY_SUFFIX)
        if legacy.is_file():
            legacy.unlink()
            logger.info("legacy_source_file_replaced", source=name)

        logger.info("source_file_written", source=name, path=str(path), words=len(words))

    async def delete(self, name: str) -> None:
        removed = False
        for suffix in (DATA_SUFFIX, LEGACY_SUFFIX):
            path = self._path_for(name, suffix)
            if path.is_file():
                path.unlink()
                removed = True
        if not removed:
            raise SourceNotFoundError(name)

    async def health_check(self) -> bool:
        """Checks that the sources folder is readable and writable."""
        return self.base_path.is_dir() and os.access(self.base_path, os.R_OK | os.W_OK)
