import sys
from pathlib import Path

from rich.pretty import pprint

from pennant import *

flags = FlagSet("server", "serve files over http", ExitOnError(), colorful=True)

host = flags.string("host", "localhost", "interface to bind", Env("HOST"), File("host"))
port = flags.int("port", 8080, "port to listen on", Env("PORT"), File("port"))
debug = flags.bool("debug", "enable verbose logging", Env("DEBUG"))
timeout = flags.duration("timeout", Duration.parse("30s"), "idle connection timeout", File("timeout"))
origins = flags.string_list("origin", (), "allowed CORS origin (repeatable)", File("origins"))


if __name__ == '__main__':
    sources = [EnvPrefix("SERVER_")]
    if Path("server.json").exists():
        sources.append(JSONSource("server.json"))
    flags.parse(sys.argv[1:], *sources)
    pprint({
        "host": host.value,
        "port": port.value,
        "debug": debug.value,
        "timeout": str(timeout.value),
        "origins": origins.value,
        "args": flags.args,
    })
