"""Runtime configuration, built from command-line arguments."""

import os
from dataclasses import dataclass
from typing import Optional

from lcserver.pure.reducer import HeadReducer

DEFAULT_SOCKET = "/var/run/dev-test/sock"
SOCKET_ENV = "LCSERVER_SOCKET"


@dataclass
class ServerConfig:
    socket_path: str = DEFAULT_SOCKET
    max_steps: Optional[int] = HeadReducer.MAX_STEPS
    reduce_spine: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_args(cls, args, environ=None):
        """Builds a ServerConfig from an argparse namespace. Attributes missing from args keep their defaults, and
        the socket path falls back to $LCSERVER_SOCKET before the built-in default.
        """
        if environ is None:
            environ = os.environ

        socket_path = getattr(args, "socket", None) or environ.get(SOCKET_ENV) or DEFAULT_SOCKET

        max_steps = getattr(args, "max_steps", cls.max_steps)
        if max_steps is not None and max_steps <= 0:
            max_steps = None  # a non-positive budget means unbounded

        return cls(
            socket_path=socket_path,
            max_steps=max_steps,
            reduce_spine=getattr(args, "reduce_spine", False),
            log_level=getattr(args, "log_level", "INFO").upper(),
            log_file=getattr(args, "log_file", None),
        )

    def reducer(self):
        return HeadReducer(max_steps=self.max_steps, reduce_spine=self.reduce_spine)
