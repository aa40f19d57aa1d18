"""Output file handling for tangled blocks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from .exceptions import SinkError

logger = logging.getLogger(__name__)

_CLOSED = object()


class FileSink:
    """Own the output file handles of one tangle session.

    A handle is opened on the first write of a block, truncating the file
    unless the block is a ``continued`` one, and is released when the block's
    closing fence is reached. Reopening a name without ``continued`` discards
    everything written to it earlier in the session.

    Args:
        base_dir: Directory against which relative file names resolve.
            Defaults to the current working directory.
        dry_run: Record the lines that would be written instead of touching
            the filesystem.

    Examples:
        sink = FileSink(Path("build"))
        sink.write("hello.sh", "echo hello", append=False)
        sink.close("hello.sh")
    """

    def __init__(self, base_dir: Path | None = None, dry_run: bool = False):
        self.base_dir = base_dir if base_dir is not None else Path.cwd()
        self.dry_run = dry_run
        self.written: list[str] = []
        self.previewed: dict[str, list[str]] = {}
        self._handles: dict[str, TextIO | None] = {}

    def resolve(self, name: str) -> Path:
        """Resolve an output file name against the base directory."""
        return self.base_dir / Path(name).expanduser()

    def is_open(self, name: str) -> bool:
        return name in self._handles

    def open_or_truncate(self, name: str) -> None:
        """Create or truncate `name` and keep its handle open."""
        self._open(name, append=False)

    def open_for_append(self, name: str) -> None:
        """Open `name` for appending, creating it when absent."""
        self._open(name, append=True)

    def write(self, name: str, text: str, append: bool = False) -> None:
        """Write one line (`text` plus a newline) to `name`.

        Opens the handle first when the current block has not written to
        `name` yet.

        Raises:
            SinkError: If the file cannot be opened or written.
        """
        if not self.is_open(name):
            self._open(name, append=append)

        if self.dry_run:
            self.previewed[name].append(text)
            return

        handle = self._handles[name]
        try:
            handle.write(f"{text}\n")
        except OSError as error:
            raise SinkError(f"Error writing {self.resolve(name)}: {error}") from error

    def close(self, name: str) -> None:
        """Flush and release the handle for `name`; unknown names are ignored.

        Raises:
            SinkError: If flushing the buffered content fails.
        """
        handle = self._handles.pop(name, _CLOSED)
        if handle is _CLOSED or handle is None:
            return

        try:
            handle.close()
        except OSError as error:
            raise SinkError(f"Error closing {self.resolve(name)}: {error}") from error
        logger.debug("Closed %s", name)

    def close_all(self) -> None:
        """Release every open handle."""
        for name in list(self._handles):
            self.close(name)

    def _open(self, name: str, append: bool) -> None:
        if name not in self.written:
            self.written.append(name)

        if self.dry_run:
            if not append or name not in self.previewed:
                self.previewed[name] = []
            self._handles[name] = None
            logger.info("Would %s %s", "append to" if append else "write", name)
            return

        path = self.resolve(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handles[name] = open(path, "a" if append else "w", encoding="UTF-8")
        except OSError as error:
            raise SinkError(f"Error opening {path}: {error}") from error
        logger.info("%s %s", "Appending to" if append else "Writing", path)

