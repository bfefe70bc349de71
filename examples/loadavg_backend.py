#!/usr/bin/env python3
"""
Example backend: serves the system load averages under the Net-SNMP
experimental subtree.

As a hook for the passpersist command::

    passpersist -b examples/loadavg_backend.py:collect -i examples/loadavg_backend.py:init

or run directly as a pass_persist program::

    pass_persist .1.3.6.1.4.1.8072.9999.2 /usr/bin/python3 /path/to/loadavg_backend.py
"""
import os
import socket
import sys

from passpersist import OidStore, PassPersist

BASE_OID = ".1.3.6.1.4.1.8072.9999.2"


def init(store: OidStore) -> None:
    store.insert(f"{BASE_OID}.1.0", "string", socket.gethostname())


def collect(store: OidStore) -> None:
    # Load averages as hundredths, the way UCD-SNMP-MIB laLoadInt does
    for index, load in enumerate(os.getloadavg(), start=1):
        store.insert(f"{BASE_OID}.2.{index}", "integer", int(load * 100))


if __name__ == "__main__":
    agent = PassPersist()
    agent.backend_init = lambda: init(agent.store)
    agent.backend_collect = lambda: collect(agent.store)
    try:
        agent.run()
    except KeyboardInterrupt:
        sys.exit(0)
