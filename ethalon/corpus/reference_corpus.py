"""Sample and ethalon corpus access."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from ethalon.errors import ReferenceNotFound, SampleNotFound

logger = logging.getLogger(__name__)


class ReferenceCorpus:
    """Read-only access to ethalon blobs stored as ``<scenario_id><suffix>``."""

    def __init__(self, root: Path, suffix: str = ".bin"):
        self.root = Path(root)
        self.suffix = suffix

    def path_for(self, scenario_id: str) -> Path:
        return self.root / f"{scenario_id}{self.suffix}"

    def exists(self, scenario_id: str) -> bool:
        return self.path_for(scenario_id).is_file()

    def load(self, scenario_id: str) -> bytes:
        """Read the whole ethalon blob for a scenario identifier."""
        path = self.path_for(scenario_id)
        if not path.is_file():
            raise ReferenceNotFound(scenario_id, path)
        data = path.read_bytes()
        logger.debug("Loaded ethalon %s (%d bytes)", path, len(data))
        return data

    @contextmanager
    def open(self, scenario_id: str) -> Iterator[tuple[BinaryIO, int]]:
        """Yield an open handle on the ethalon blob and its length."""
        path = self.path_for(scenario_id)
        if not path.is_file():
            raise ReferenceNotFound(scenario_id, path)
        with open(path, "rb") as f:
            yield f, path.stat().st_size


class SampleCorpus:
    """Read access to encoded sample inputs."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        return self.root / name

    def read(self, name: str) -> bytes:
        path = self.path_for(name)
        if not path.is_file():
            raise SampleNotFound(name, path)
        with open(path, "rb") as f:
            return f.read()
