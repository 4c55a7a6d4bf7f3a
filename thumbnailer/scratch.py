"""
Local files a single job owns while it runs.

A ScratchSpace hands out ScratchFiles and guarantees, through close(), that
every file it handed out is gone before the job reports its outcome.
Deletion is best effort: failures are logged, never raised.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScratchFile:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def exists(self) -> bool:
        return self.path.is_file()


class ScratchSpace:
    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._files: list[ScratchFile] = []

    def __enter__(self) -> ScratchSpace:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def file(self, name: str) -> ScratchFile:
        """Reserve *name* in the scratch directory for this job."""
        scratch = ScratchFile(self.directory / name)
        if scratch not in self._files:
            self._files.append(scratch)
        return scratch

    @property
    def files(self) -> list[ScratchFile]:
        return list(self._files)

    def release(self, scratch: ScratchFile) -> bool:
        """Delete one file. Returns False only when deletion failed."""
        if scratch in self._files:
            self._files.remove(scratch)
        try:
            scratch.path.unlink()
        except FileNotFoundError:
            # The stage that would have written it never ran
            return True
        except OSError as exc:
            logger.error("Could not delete scratch file %s: %s", scratch.path, exc)
            return False
        logger.info("Deleted scratch file %s", scratch.name)
        return True

    def close(self) -> bool:
        """Release every outstanding file. Returns True if all are gone."""
        ok = True
        for scratch in list(self._files):
            ok = self.release(scratch) and ok
        return ok
