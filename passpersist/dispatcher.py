"""
CommandDispatcher: maps protocol verbs to handlers with a fixed argument count.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Union

from passpersist.oid_store import OidStore
from passpersist.snmp_types import (
    SNMP_DONE,
    SNMP_GET,
    SNMP_GETNEXT,
    SNMP_NONE,
    SNMP_PING,
    SNMP_PONG,
    SNMP_SET,
    SetError,
    ValueType,
)

logger = logging.getLogger(__name__)

HandlerResult = Union[str, Sequence[str]]
Handler = Callable[..., HandlerResult]


class Command(NamedTuple):
    nargs: int
    handler: Handler


def ping(store: OidStore) -> HandlerResult:
    return SNMP_PONG


def get_oid(store: OidStore, req_oid: str) -> HandlerResult:
    entry = store.lookup_exact(req_oid)
    if entry is None:
        return SNMP_NONE
    return entry.lines()


def getnext_oid(store: OidStore, req_oid: str) -> HandlerResult:
    entry = store.lookup_successor(req_oid) or store.lookup_first()
    if entry is None:
        return SNMP_NONE
    return get_oid(store, entry.oid)


def set_oid(store: OidStore, req_oid: str, value: str) -> HandlerResult:
    return SetError.NOT_WRITABLE.value


def writable_set_handler(store: OidStore, req_oid: str, value: str) -> HandlerResult:
    """SET handler that updates existing entries in memory.

    snmpd sends the value line as ``<type> <value>``, with string values in
    double quotes. The type must match the stored entry and the value must fit it.
    """
    entry = store.lookup_exact(req_oid)
    if entry is None:
        return SetError.NOT_WRITABLE.value
    type_tag, _, raw_value = value.partition(' ')
    if ValueType.from_tag(type_tag) is not entry.type:
        logger.info(f"SET {req_oid}: type {type_tag!r} does not match {entry.type.value}")
        return SetError.WRONG_TYPE.value
    if entry.type is ValueType.OCTETSTRING and len(raw_value) >= 2 \
            and raw_value.startswith('"') and raw_value.endswith('"'):
        raw_value = raw_value[1:-1]
    try:
        entry.type.coerce(raw_value)
    except ValueError as e:
        logger.info(f"SET {req_oid}: {e}")
        return SetError.WRONG_VALUE.value
    store.insert(entry.oid, entry.type, raw_value)
    logger.debug(f"SET {entry.oid} = {raw_value!r}")
    return SNMP_DONE


def default_commands() -> Dict[str, Command]:
    return {
        SNMP_PING.lower(): Command(0, ping),
        SNMP_GET.lower(): Command(1, get_oid),
        SNMP_GETNEXT.lower(): Command(1, getnext_oid),
        SNMP_SET.lower(): Command(2, set_oid),
    }


class CommandDispatcher:
    """Resolve a verb, run its handler against the store and return the response lines.

    The dispatcher does no I/O: callers hand it already tokenised arguments.
    """

    def __init__(
        self,
        store: OidStore,
        set_handler: Optional[Handler] = None,
        extra_commands: Optional[Mapping[str, Command]] = None,
    ) -> None:
        self.store = store
        self.commands = default_commands()
        if set_handler is not None:
            self.commands[SNMP_SET] = Command(2, set_handler)
        for verb, command in (extra_commands or {}).items():
            self.commands[verb.lower()] = Command(*command)

    def nargs(self, verb: str) -> Optional[int]:
        command = self.commands.get(verb)
        return None if command is None else command.nargs

    def execute(self, verb: str, args: Sequence[str]) -> List[str]:
        command = self.commands.get(verb)
        if command is None:
            logger.debug(f"Unknown command {verb!r}")
            return [SNMP_NONE]
        if len(args) != command.nargs:
            logger.debug(f"Command {verb!r} expects {command.nargs} argument(s), got {len(args)}")
            return [SNMP_NONE]
        try:
            result = command.handler(self.store, *args)
        except Exception:
            logger.exception(f"Handler for {verb!r} failed")
            return [SNMP_NONE]
        if isinstance(result, str):
            return [result]
        return [str(line) for line in result]
