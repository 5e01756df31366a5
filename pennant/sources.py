"""
Pennant sources: providers of fallback values for flags.

Lifecycle
- open()   acquire whatever the source needs; called once per parse, before any
           lookup.
- get(key) return the raw value stored under `key`, or Unset when the source
           does not know it. Raw values are the decoder's own types: str, int,
           float, bool, None, list, dict (plus dates/times from YAML and TOML).
- close()  release resources; idempotent and safe even if open() was never
           called or failed.

Sources are context managers too (`with JSONSource(path) as source: ...`).

Provided sources
- EnvPrefix(prefix): environment variables named prefix + key.
- JSONSource(path) / YAMLSource(path) / TOMLSource(path): a structured file read
  fully at open() and decoded into a top-level mapping. Lookups are flat: only
  top-level keys are visible, nested tables are returned whole.
"""
import json
import logging
import os
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

import yaml

from .faults import SourceError, FaultCode
from .utils import Unset

logger = logging.getLogger(__name__)


class Source(ABC):
    def open(self):
        pass

    @abstractmethod
    def get(self, key, /):
        ...

    def close(self):
        pass

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc_info):
        self.close()


class EnvPrefix(Source):
    """
    environment variables as a source; `get("PORT")` on EnvPrefix("APP_") reads
    APP_PORT. Values are always strings.
    """

    def __init__(self, prefix="", /):
        if not isinstance(prefix, str):
            raise TypeError("EnvPrefix() argument must be a string")
        self.prefix = prefix

    def get(self, key, /):
        return os.environ.get(self.prefix + key, Unset)

    def __repr__(self):
        return "EnvPrefix(%r)" % self.prefix


class FileSource(Source):
    """
    base for sources backed by a structured file.

    subclasses implement decode(content) turning the raw bytes into a mapping.
    read and decode failures surface as SourceError chained to the original
    exception, so a broken configuration file aborts the parse.
    """
    format = "file"

    def __init__(self, path, /):
        self.path = Path(path)
        self._values = {}

    @abstractmethod
    def decode(self, content, /):
        ...

    def open(self):
        try:
            content = self.path.read_bytes()
        except OSError as error:
            raise SourceError(
                "cannot read %s source %s: %s" % (self.format, self.path, error.strerror or error),
                title="unreadable source",
                code=FaultCode.SOURCE_FAILURE,
                hint="check that %s exists and is readable" % self.path,
                source=self
            ) from error

        try:
            values = self.decode(content)
        except (ValueError, yaml.YAMLError) as error:
            raise SourceError(
                "cannot decode %s source %s: %s" % (self.format, self.path, error),
                title="undecodable source",
                code=FaultCode.SOURCE_FAILURE,
                hint="fix the %s syntax of %s" % (self.format, self.path),
                source=self
            ) from error

        if values is None:
            values = {}
        if not isinstance(values, Mapping):
            raise SourceError(
                "%s source %s must hold a mapping at top level, not %s" % (
                    self.format, self.path, type(values).__name__
                ),
                title="undecodable source",
                code=FaultCode.SOURCE_FAILURE,
                hint="wrap the values of %s in a top-level object" % self.path,
                source=self
            )

        self._values = dict(values)
        logger.debug("opened %s source %s (%d keys)", self.format, self.path, len(self._values))

    def get(self, key, /):
        return self._values.get(key, Unset)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, str(self.path))


class JSONSource(FileSource):
    format = "json"

    def decode(self, content, /):
        return json.loads(content)


class YAMLSource(FileSource):
    format = "yaml"

    def decode(self, content, /):
        return yaml.safe_load(content)


class TOMLSource(FileSource):
    format = "toml"

    def decode(self, content, /):
        return tomllib.loads(content.decode("utf-8"))


__all__ = (
    "Source",
    "EnvPrefix",
    "FileSource",
    "JSONSource",
    "YAMLSource",
    "TOMLSource",
)
