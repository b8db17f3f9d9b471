from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from typing import Mapping

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True, slots=True)
class LoadConfig:
    """Knobs for loading dotenv files into an environment.

    With `suffix` set, `<path>.<suffix>` takes precedence over `<path>`.
    Without `overwrite` the suffixed file is applied first and neither file
    replaces existing variables. With `overwrite` the base file is applied
    first and the suffixed file then overwrites it.
    """

    path: str = ".env"
    suffix: str | None = None
    encoding: str = "utf-8"
    overwrite: bool = False

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("path must not be empty")
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {self.encoding!r}") from e

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "LoadConfig":
        """Build a config from `ENVLINE_*` variables, falling back to defaults."""

        env = os.environ if environ is None else environ

        overwrite_raw = env.get("ENVLINE_OVERWRITE", "").strip().lower()
        if overwrite_raw in _TRUTHY:
            overwrite = True
        elif overwrite_raw in _FALSY:
            overwrite = False
        else:
            raise ValueError(f"invalid ENVLINE_OVERWRITE: {overwrite_raw!r}")

        return cls(
            path=env.get("ENVLINE_PATH") or ".env",
            suffix=env.get("ENVLINE_SUFFIX") or None,
            encoding=env.get("ENVLINE_ENCODING") or "utf-8",
            overwrite=overwrite,
        )
