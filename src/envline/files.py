from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.fs as fs


class FileUnreadable(OSError):
    """A dotenv file could not be read, or could not be decoded as a whole.

    This is a file-level failure. The parser itself never raises it: malformed
    content inside a readable file is truncated, not reported.
    """

    def __init__(self, path: str | Path, encoding: str | None = None, reason: str | None = None) -> None:
        self.path = str(path)
        self.encoding = encoding
        self.reason = reason

        msg = f"unable to read dotenv file {self.path!r}"
        if encoding:
            msg += f" as {encoding}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


def resolve_filesystem_and_path(
    path_or_uri: str | Path,
    filesystem: fs.FileSystem | None = None,
) -> tuple[fs.FileSystem, str]:
    """Resolve a local path or URI into (filesystem, path).

    - Local paths map to an Arrow `LocalFileSystem` and an absolute path.
    - URIs like s3://bucket/.env go through `FileSystem.from_uri`, which picks
      up credentials from the usual AWS chain (env vars, profiles, roles).
    - With an explicit `filesystem`, only the path is resolved and the caller's
      filesystem is returned as-is.
    """

    s = str(path_or_uri)
    if filesystem is not None:
        if s.startswith("s3://"):
            # Strip the scheme without building an S3 filesystem just for the path.
            return filesystem, s[len("s3://") :]
        if "://" in s:
            return filesystem, fs.FileSystem.from_uri(s)[1]
        return filesystem, s

    if "://" not in s:
        return fs.LocalFileSystem(), Path(s).absolute().as_posix()
    return fs.FileSystem.from_uri(s)


def read_buffer(
    path_or_uri: str | Path,
    *,
    filesystem: fs.FileSystem | None = None,
    encoding: str | None = None,
) -> pa.Buffer:
    """Read a whole file into an Arrow buffer.

    `encoding` is only carried into the error for context; no decoding happens here.
    """

    try:
        filesystem, resolved_path = resolve_filesystem_and_path(path_or_uri, filesystem)
        with filesystem.open_input_stream(resolved_path, compression=None) as f:
            return f.read_buffer()
    except (OSError, pa.ArrowException) as e:
        raise FileUnreadable(path_or_uri, encoding, reason=str(e)) from e
