"""
PassPersist: generic pass / pass_persist extension engine for Net-SNMP.

Typical pass_persist program::

    def update_tree():
        agent.add_oid_entry(".1.3.6.1.4.1.8072.9999.1", "integer", 42)

    agent = PassPersist(backend_collect=update_tree)
    agent.run()

``snmpd`` runs the same program once per query for ``pass`` and hands it the
request as a directive (``run({"get": ".1.3.6..."})``).
"""
from __future__ import annotations

import logging
import math
import numbers
import sys
import time
from typing import IO, Any, Callable, List, Mapping, Optional

from passpersist.dispatcher import Command, CommandDispatcher, Handler
from passpersist.line_channel import LineChannel, write_response
from passpersist.oid_store import OidEntry, OidStore
from passpersist.scheduler import CollectionScheduler
from passpersist.snmp_types import SNMP_GET, SNMP_GETNEXT, SNMP_NONE, SNMP_SET

logger = logging.getLogger(__name__)

ONE_SHOT_ORDER = (SNMP_GET, SNMP_GETNEXT, SNMP_SET)

DEFAULT_REFRESH = 10
DEFAULT_IDLE_COUNT = 5


class ConfigurationError(Exception):
    """Raised when the agent is built with unusable settings or hooks."""


def _noop() -> None:
    pass


class PassPersist:

    def __init__(
        self,
        backend_init: Optional[Callable[[], Any]] = None,
        backend_collect: Optional[Callable[[], Any]] = None,
        set_handler: Optional[Handler] = None,
        commands: Optional[Mapping[str, Command]] = None,
        input: Optional[IO[Any]] = None,
        output: Optional[IO[str]] = None,
        oid_tree: Optional[Mapping[str, Any]] = None,
        refresh: float = DEFAULT_REFRESH,
        idle_count: int = DEFAULT_IDLE_COUNT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        for name, hook in (
            ('backend_init', backend_init),
            ('backend_collect', backend_collect),
            ('set_handler', set_handler),
            ('clock', clock),
        ):
            if hook is not None and not callable(hook):
                raise ConfigurationError(f"{name} must be callable, got {type(hook).__name__}")
        if isinstance(refresh, bool) or not isinstance(refresh, numbers.Real) \
                or not math.isfinite(refresh) or refresh <= 0:
            raise ConfigurationError(f"refresh must be a positive number of seconds, got {refresh!r}")
        if isinstance(idle_count, bool) or not isinstance(idle_count, int) or idle_count <= 0:
            raise ConfigurationError(f"idle_count must be a positive integer, got {idle_count!r}")
        if oid_tree is not None and not isinstance(oid_tree, Mapping):
            raise ConfigurationError(f"oid_tree must be a mapping, got {type(oid_tree).__name__}")
        if commands is not None and not isinstance(commands, Mapping):
            raise ConfigurationError(f"commands must be a mapping, got {type(commands).__name__}")
        for verb, command in (commands or {}).items():
            if not isinstance(command, (tuple, list)) or len(command) != 2 or not callable(command[1]):
                raise ConfigurationError(f"Command {verb!r} must be a (nargs, handler) pair")

        self.backend_init = backend_init or _noop
        self.backend_collect = backend_collect or _noop
        self.input = input if input is not None else sys.stdin
        self.output = output if output is not None else sys.stdout
        self.refresh = refresh
        self.idle_count = idle_count
        self.clock = clock
        try:
            self.store = OidStore(oid_tree)
        except ValueError as e:
            raise ConfigurationError(f"Invalid initial OID tree: {e}") from e
        self.dispatcher = CommandDispatcher(self.store, set_handler, commands)
        self.running = False

    # ------------------------------------------------------------------
    # Tree population, for the backend hooks
    # ------------------------------------------------------------------

    def add_oid_entry(self, oid: str, type: Any, value: Any) -> OidEntry:
        return self.store.insert(oid, type, value)

    def add_oid_tree(self, oid_tree: Mapping[str, Any]) -> None:
        self.store.merge(oid_tree)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def run(self, directives: Optional[Mapping[str, Optional[str]]] = None) -> None:
        """Collect once, then answer the one-shot directives or enter the persistent loop."""
        directives = directives or {}
        self.backend_init()
        self.backend_collect()
        logger.debug(f"Initial collection done, {len(self.store)} entries")

        if any(directives.get(op) is not None for op in ONE_SHOT_ORDER):
            self.run_once(directives)
        else:
            self.run_persistent()

    def run_once(self, directives: Mapping[str, Optional[str]]) -> None:
        """Net-SNMP "pass" mode: answer each directive in get, getnext, set order."""
        for op in ONE_SHOT_ORDER:
            packed = directives.get(op)
            if not packed:
                continue
            nargs = self.dispatcher.nargs(op) or 1
            args = packed.split(',', nargs - 1)
            logger.debug(f"pass {op} {args}")
            write_response(self.output, self.dispatcher.execute(op, args))

    def run_persistent(self) -> None:
        """Net-SNMP "pass_persist" mode: serve line commands until EOF or the cycle budget runs out."""
        channel = self.input if isinstance(self.input, LineChannel) else LineChannel(self.input)
        scheduler = CollectionScheduler(self.backend_collect, self.refresh, self.idle_count)
        self.running = True
        logger.info(f"pass_persist session started (refresh={self.refresh}s, idle_count={self.idle_count})")
        try:
            while self.running and not scheduler.exhausted:
                start_time = self.clock()
                line = channel.readline(scheduler.timeout)
                if line == "":
                    logger.info("Input closed, ending session")
                    self.running = False
                elif line is not None:
                    self.process_cmd(line, channel)

                scheduler.tick(self.clock() - start_time)
        finally:
            self.running = False
            channel.close()
        if scheduler.exhausted:
            logger.info(f"Cycle budget used up after {scheduler.cycles} collections, ending session")

    def process_cmd(self, line: str, channel: LineChannel) -> List[str]:
        """Read the arguments of one command from ``channel``, dispatch it and write the answer."""
        verb = line.rstrip("\r\n").lower()
        nargs = self.dispatcher.nargs(verb)
        if nargs is None:
            result = [SNMP_NONE]
        else:
            args: List[str] = []
            while len(args) < nargs:
                arg = channel.readline()
                if not arg:
                    logger.warning(f"Input closed while reading arguments of {verb!r}")
                    self.running = False
                    break
                args.append(arg.rstrip("\r\n"))
            result = self.dispatcher.execute(verb, args)
        logger.debug(f"{verb} -> {result}")
        write_response(self.output, result)
        return result
