from __future__ import annotations

import logging
import os
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, MutableMapping

import pyarrow as pa
import pyarrow.fs as fs

from .config import LoadConfig
from .files import FileUnreadable, read_buffer
from .parser import parse_buffer, parse_string
from .sources import is_ascii_compatible
from .types import Line

logger = logging.getLogger(__name__)


def apply_lines(
    lines: Iterable[Line],
    *,
    overwrite: bool = False,
    environ: MutableMapping[str, str] | None = None,
) -> int:
    """Apply lines to an environment in file order.

    Mirrors `setenv(key, value, overwrite)`: without `overwrite`, a key that is
    already present (including one set by an earlier line) is left alone.
    `environ` defaults to `os.environ`.

    Returns the number of assignments performed.
    """

    env = os.environ if environ is None else environ
    applied = 0
    for line in lines:
        if overwrite or line.key not in env:
            env[line.key] = line.value
            applied += 1
    return applied


@dataclass(frozen=True, slots=True)
class DotEnv:
    """All `KEY=VALUE` pairs of one dotenv file, in file order."""

    lines: tuple[Line, ...]
    path: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    def load(self, *, overwrite: bool = False, environ: MutableMapping[str, str] | None = None) -> int:
        return apply_lines(self.lines, overwrite=overwrite, environ=environ)

    def to_dict(self) -> dict[str, str]:
        """Effective values under the non-overwriting policy (first occurrence wins)."""

        out: dict[str, str] = {}
        for line in self.lines:
            out.setdefault(line.key, line.value)
        return out

    def to_table(self) -> pa.Table:
        return pa.table(
            {
                "key": pa.array([line.key for line in self.lines], type=pa.string()),
                "value": pa.array([line.value for line in self.lines], type=pa.string()),
            }
        )


def read(path: str | Path, *, encoding: str = "utf-8", filesystem: fs.FileSystem | None = None) -> DotEnv:
    """Read and parse a dotenv file without touching the environment.

    The whole file is decoded with `encoding` first, so a file that isn't valid
    text raises `FileUnreadable` instead of being silently truncated.
    """

    buffer = read_buffer(path, filesystem=filesystem, encoding=encoding)
    try:
        text = buffer.to_pybytes().decode(encoding)
    except UnicodeDecodeError as e:
        raise FileUnreadable(path, encoding, reason=str(e)) from e

    lines = parse_string(text)
    logger.debug("read %d lines from %s", len(lines), path)
    return DotEnv(lines=lines, path=str(path))


def read_async(
    path: str | Path,
    *,
    encoding: str = "utf-8",
    executor: Executor | None = None,
    filesystem: fs.FileSystem | None = None,
) -> Future[DotEnv]:
    """Read and parse a dotenv file on a worker pool.

    For ASCII-compatible encodings the raw bytes are parsed straight from the
    Arrow buffer, decoding entry by entry; undecodable content truncates the
    result like any malformed line. Other encodings (UTF-16, UTF-32) are
    decoded as a whole first, as `read` does, and raise `FileUnreadable` when
    that fails.

    Without `executor` a one-off single-worker pool is used and shut down once
    the job finishes. A caller-provided executor is left running.
    """

    def _job() -> DotEnv:
        buffer = read_buffer(path, filesystem=filesystem, encoding=encoding)
        parse_encoding = encoding
        if not is_ascii_compatible(encoding):
            try:
                text = buffer.to_pybytes().decode(encoding)
            except UnicodeDecodeError as e:
                raise FileUnreadable(path, encoding, reason=str(e)) from e
            buffer = pa.py_buffer(text.encode("utf-8"))
            parse_encoding = "utf-8"

        lines = parse_buffer(buffer, encoding=parse_encoding)
        logger.debug("read %d lines from %s (%d bytes)", len(lines), path, buffer.size)
        return DotEnv(lines=lines, path=str(path))

    if executor is not None:
        return executor.submit(_job)

    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="envline")
    try:
        return pool.submit(_job)
    finally:
        pool.shutdown(wait=False)


def load(
    path: str | Path = ".env",
    *,
    encoding: str = "utf-8",
    overwrite: bool = False,
    environ: MutableMapping[str, str] | None = None,
    filesystem: fs.FileSystem | None = None,
) -> DotEnv:
    """Read a dotenv file and apply it to the environment."""

    dotenv = read(path, encoding=encoding, filesystem=filesystem)
    applied = dotenv.load(overwrite=overwrite, environ=environ)
    logger.debug("applied %d/%d lines from %s (overwrite=%s)", applied, len(dotenv), path, overwrite)
    return dotenv


def load_with_suffix(
    path: str | Path = ".env",
    *,
    suffix: str,
    encoding: str = "utf-8",
    overwrite: bool = False,
    environ: MutableMapping[str, str] | None = None,
    filesystem: fs.FileSystem | None = None,
) -> int:
    """Load `<path>.<suffix>` and `<path>`, the suffixed file taking precedence.

    Without `overwrite`, the suffixed file is applied first and neither file
    replaces existing variables. With `overwrite`, the base file is applied
    first and the suffixed file then overwrites it.

    Unreadable files are skipped. Returns the total number of assignments.
    """

    candidates = [f"{path}.{suffix}", str(path)]
    if overwrite:
        candidates.reverse()

    applied = 0
    for candidate in candidates:
        try:
            dotenv = read(candidate, encoding=encoding, filesystem=filesystem)
        except FileUnreadable as e:
            logger.info("skipping dotenv file: %s", e)
            continue
        applied += dotenv.load(overwrite=overwrite, environ=environ)
    return applied


def load_from_config(
    config: LoadConfig,
    *,
    environ: MutableMapping[str, str] | None = None,
    filesystem: fs.FileSystem | None = None,
) -> int:
    if config.suffix:
        return load_with_suffix(
            config.path,
            suffix=config.suffix,
            encoding=config.encoding,
            overwrite=config.overwrite,
            environ=environ,
            filesystem=filesystem,
        )

    dotenv = read(config.path, encoding=config.encoding, filesystem=filesystem)
    return dotenv.load(overwrite=config.overwrite, environ=environ)
