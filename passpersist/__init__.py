"""Net-SNMP pass / pass_persist extension framework."""

from passpersist.dispatcher import Command, CommandDispatcher, writable_set_handler
from passpersist.oid import OidKey
from passpersist.oid_store import OidEntry, OidStore
from passpersist.pass_persist import ConfigurationError, PassPersist
from passpersist.snmp_types import SetError, ValueType

__all__ = [
    'Command', 'CommandDispatcher', 'ConfigurationError', 'OidEntry', 'OidKey',
    'OidStore', 'PassPersist', 'SetError', 'ValueType', 'writable_set_handler',
]
