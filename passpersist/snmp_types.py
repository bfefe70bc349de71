"""
SNMP value types and protocol tokens used by the pass/pass_persist line protocol.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from pyasn1.error import PyAsn1Error
from pysnmp.error import PySnmpError
from pysnmp.proto import rfc1902

# Protocol sentinels
SNMP_NONE = "NONE"
SNMP_PING = "PING"
SNMP_PONG = "PONG"
SNMP_DONE = "DONE"
SNMP_GET = "get"
SNMP_GETNEXT = "getnext"
SNMP_SET = "set"


class SetError(str, Enum):
    """Result tokens a SET handler may answer with."""
    NOT_WRITABLE = "not-writable"
    WRONG_TYPE = "wrong-type"
    WRONG_LENGTH = "wrong-length"
    WRONG_VALUE = "wrong-value"
    INCONSISTENT_VALUE = "inconsistent-value"

    def __str__(self) -> str:
        return self.value


class ValueType(Enum):
    """Value types understood by snmpd, rendered as their wire token."""
    COUNTER = "counter"
    GAUGE = "gauge"
    INTEGER = "integer"
    IPADDRESS = "ipaddress"
    OBJECTID = "objectid"
    OCTETSTRING = "string"
    TIMETICKS = "timeticks"

    @classmethod
    def from_tag(cls, tag: Any) -> 'ValueType':
        """Resolve a type tag, falling back to OCTETSTRING for anything unknown."""
        if isinstance(tag, ValueType):
            return tag
        if not isinstance(tag, str):
            return cls.OCTETSTRING
        return _TAGS.get(tag.strip().lower(), cls.OCTETSTRING)

    def coerce(self, value: str) -> Any:
        """Convert a display string into the matching pysnmp value.

        Raises:
            ValueError: the string does not fit the type (range, format).
        """
        syntax = _PYSNMP_TYPES[self]
        try:
            if self in _NUMERIC:
                return syntax(int(value.strip()))
            return syntax(value)
        except (PyAsn1Error, PySnmpError, TypeError, ValueError) as e:
            raise ValueError(f"{value!r} is not a valid {self.value}: {e}") from e

    def __str__(self) -> str:
        return self.value


_TAGS = {
    'counter': ValueType.COUNTER,
    'gauge': ValueType.GAUGE,
    'integer': ValueType.INTEGER,
    'ipaddress': ValueType.IPADDRESS,
    'objectid': ValueType.OBJECTID,
    'octetstr': ValueType.OCTETSTRING,
    'string': ValueType.OCTETSTRING,
    'timeticks': ValueType.TIMETICKS,
}

_PYSNMP_TYPES = {
    ValueType.COUNTER: rfc1902.Counter32,
    ValueType.GAUGE: rfc1902.Gauge32,
    ValueType.INTEGER: rfc1902.Integer32,
    ValueType.IPADDRESS: rfc1902.IpAddress,
    ValueType.OBJECTID: rfc1902.ObjectName,
    ValueType.OCTETSTRING: rfc1902.OctetString,
    ValueType.TIMETICKS: rfc1902.TimeTicks,
}

_NUMERIC = frozenset({ValueType.COUNTER, ValueType.GAUGE, ValueType.INTEGER, ValueType.TIMETICKS})
