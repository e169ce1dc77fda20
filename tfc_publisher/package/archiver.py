"""Module archiver: tars the package root into `{name}-{version}.tgz`.

The archive holds the directory's contents (not the directory itself) so
the registry sees the module files at the archive root.

tar runs as an async subprocess. Its stdout and stderr are drained by two
concurrent loops that forward each line to the caller's streams as it
arrives; both loops finish before the exit code is checked, so a full pipe
buffer can never stall the child.
"""

import asyncio
import logging
import os
from collections import deque
from pathlib import Path
from typing import Mapping, Optional, TextIO

from tfc_publisher.core.errors import PackagingError

logger = logging.getLogger(__name__)

TAR_EXECUTABLE = "tar"

# Lines of stderr kept for PackagingError diagnostics
STDERR_TAIL_LINES = 20


def build_tar_command(source_dir: Path, archive_path: Path) -> list[str]:
    """Return the tar invocation for archiving `source_dir` into `archive_path`."""
    command = [TAR_EXECUTABLE, "zcvf", str(archive_path)]
    try:
        relative = archive_path.resolve().relative_to(source_dir.resolve())
    except ValueError:
        relative = None
    if relative is not None:
        # Archive lives inside the tree being archived
        command.append(f"--exclude=./{relative.as_posix()}")
    command.extend(["-C", str(source_dir), "."])
    return command


async def _drain(
    reader: Optional[asyncio.StreamReader],
    sink: Optional[TextIO],
    tail: Optional[deque] = None,
) -> None:
    if reader is None:
        return
    while True:
        line = await reader.readline()
        if not line:
            break
        text = line.decode("utf-8", errors="replace")
        if tail is not None:
            tail.append(text.rstrip("\n"))
        if sink is not None:
            sink.write(text)
            flush = getattr(sink, "flush", None)
            if callable(flush):
                flush()


async def compress_module(
    source_dir: Path,
    archive_path: Path,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Path:
    """Create a gzipped tarball of `source_dir`'s contents at `archive_path`.

    `env` is layered over the process environment for the tar child.

    Returns:
        The archive path.

    Raises:
        PackagingError: the output directory could not be created, or tar
            failed to start, to stream its output or to exit cleanly. For a
            non-zero exit the code and the tail of tar's stderr are preserved.
    """
    source_dir = Path(source_dir)
    archive_path = Path(archive_path)
    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PackagingError(f"Unable to create {archive_path.parent}: {exc}") from exc

    command = build_tar_command(source_dir, archive_path)
    logger.info("Compressing %s into %s", source_dir, archive_path)

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd) if cwd else None,
            env={**os.environ, **env} if env is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise PackagingError(f"Unable to run {TAR_EXECUTABLE}: {exc}") from exc

    tail: deque = deque(maxlen=STDERR_TAIL_LINES)
    try:
        await asyncio.gather(
            _drain(process.stdout, stdout),
            _drain(process.stderr, stderr, tail),
        )
    except BaseException as exc:
        # The child must not outlive a failed drain
        if process.returncode is None:
            process.kill()
        await process.wait()
        if isinstance(exc, OSError):
            raise PackagingError(f"Unable to forward {TAR_EXECUTABLE} output: {exc}") from exc
        raise
    returncode = await process.wait()

    if returncode != 0:
        logger.error("tar exited with code %d for %s", returncode, archive_path)
        raise PackagingError(
            f"Failed to compress module into {archive_path.name}",
            returncode=returncode,
            stderr="\n".join(tail),
        )

    logger.debug("Archive written: %s", archive_path)
    return archive_path
