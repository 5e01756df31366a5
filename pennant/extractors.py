"""
Pennant extractors: per-flag strategies that pick a value out of the sources.

An extractor knows one key and one kind of source. extract(sources, value)
walks the active sources in the order they were handed to FlagSet.parse(),
skips the ones it cannot read, and assigns the first value found through the
flag's Value. It returns True when it assigned something.

    port = flags.int("port", 8080, "listen port", Env("PORT"), JSON("port"))
    flags.parse(sys.argv[1:], EnvPrefix("APP_"), JSONSource("app.json"))

Here APP_PORT wins over the "port" key of app.json because Env is declared
first; both lose to --port on the command line.
"""
from .sources import EnvPrefix, FileSource, JSONSource, YAMLSource, TOMLSource
from .utils import Unset


class Extractor:
    """
    base extractor: a key plus the source type(s) it reads from.

    subclasses narrow __sources__, or override accepts()/extract() to read
    from custom sources.
    """
    __sources__ = ()

    def __init__(self, key, /):
        if not isinstance(key, str):
            raise TypeError("%s() argument must be a string" % type(self).__name__)
        if not key:
            raise ValueError("%s() argument must be a non-empty string" % type(self).__name__)
        self.key = key

    def accepts(self, source, /):
        return isinstance(source, self.__sources__)

    def extract(self, sources, value, /):
        for source in sources:
            if not self.accepts(source):
                continue
            if (raw := source.get(self.key)) is Unset:
                continue
            value.set(raw)
            return True
        return False

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.key)


class Env(Extractor):
    """environment variable `key` (after the EnvPrefix prefix)."""
    __sources__ = (EnvPrefix,)


class File(Extractor):
    """top-level `key` of any file source (JSON, YAML or TOML)."""
    __sources__ = (FileSource,)


class JSON(Extractor):
    """top-level `key` of a JSON source."""
    __sources__ = (JSONSource,)


class YAML(Extractor):
    """top-level `key` of a YAML source."""
    __sources__ = (YAMLSource,)


class TOML(Extractor):
    """top-level `key` of a TOML source."""
    __sources__ = (TOMLSource,)


__all__ = (
    "Extractor",
    "Env",
    "File",
    "JSON",
    "YAML",
    "TOML",
)
