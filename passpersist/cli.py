"""Command-line entry point: run a pass / pass_persist extension for snmpd.

snmpd.conf examples::

    pass_persist .1.3.6.1.4.1.8072.9999 /usr/local/bin/passpersist -b mybackend:collect
    pass         .1.3.6.1.4.1.8072.9999 /usr/local/bin/passpersist -t /etc/snmp/tree.yaml
"""

from __future__ import annotations

import argparse
import functools
import sys
from typing import Any, Dict, Mapping, Optional

import yaml

from passpersist.app_config import AppConfig
from passpersist.app_logger import AppLogger
from passpersist.backend_loader import BackendLoadError, load_callable
from passpersist.dispatcher import writable_set_handler
from passpersist.pass_persist import (
    DEFAULT_IDLE_COUNT,
    DEFAULT_REFRESH,
    ConfigurationError,
    PassPersist,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="passpersist",
        description="Answer Net-SNMP pass (one-shot) or pass_persist (stdin/stdout) requests "
        "from an in-memory OID tree refreshed by a backend.",
    )
    parser.add_argument("-c", "--config", help="YAML/TOML settings file")
    parser.add_argument("-b", "--backend", help="collect hook as module:attribute, called with the OID store")
    parser.add_argument("-i", "--init", help="init hook as module:attribute, called once with the OID store")
    parser.add_argument("-t", "--tree", help="YAML file with the initial OID tree")
    parser.add_argument("-r", "--refresh", type=float, help=f"seconds between collections (default: {DEFAULT_REFRESH})")
    parser.add_argument("-l", "--idle-count", type=int, help=f"collection cycles before exiting (default: {DEFAULT_IDLE_COUNT})")
    parser.add_argument("-w", "--writable", action="store_true", default=None,
                        help="accept SET for existing entries (in memory only)")
    parser.add_argument("-g", "--get", metavar="OID", help="pass mode: answer one get")
    parser.add_argument("-n", "--getnext", metavar="OID", help="pass mode: answer one getnext")
    parser.add_argument("-s", "--set", metavar="OID,VALUE", help="pass mode: answer one set")
    return parser


def load_oid_tree_file(path: str) -> Dict[str, Any]:
    """Read an OID tree from YAML: ``{oid: {type: ..., value: ...}}`` or ``{oid: [type, value]}``."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read OID tree file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in OID tree file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"OID tree file {path} must contain a mapping of OIDs")
    return {str(oid): entry for oid, entry in data.items()}


def _setting(cli_value: Any, config: AppConfig, key: str, default: Any = None) -> Any:
    if cli_value is not None:
        return cli_value
    return config.get(key, default)


def build_agent(args: argparse.Namespace, config: AppConfig) -> PassPersist:
    oid_tree: Dict[str, Any] = {}
    inline_tree = config.get("oid_tree")
    if inline_tree:
        if not isinstance(inline_tree, Mapping):
            raise ConfigurationError("oid_tree setting must be a mapping of OIDs")
        oid_tree.update({str(k): v for k, v in inline_tree.items()})
    tree_file = _setting(args.tree, config, "oid_tree_file")
    if tree_file:
        oid_tree.update(load_oid_tree_file(str(tree_file)))

    set_handler = None
    set_reference = config.get("set_handler")
    if _setting(args.writable, config, "writable", False):
        set_handler = writable_set_handler
    elif set_reference:
        set_handler = _load(str(set_reference))

    agent = PassPersist(
        set_handler=set_handler,
        oid_tree=oid_tree,
        refresh=_setting(args.refresh, config, "refresh", DEFAULT_REFRESH),
        idle_count=_setting(args.idle_count, config, "idle_count", DEFAULT_IDLE_COUNT),
    )

    init_reference = _setting(args.init, config, "backend_init")
    if init_reference:
        agent.backend_init = functools.partial(_load(str(init_reference)), agent.store)
    collect_reference = _setting(args.backend, config, "backend_collect")
    if collect_reference:
        agent.backend_collect = functools.partial(_load(str(collect_reference)), agent.store)
    return agent


def _load(reference: str) -> Any:
    try:
        return load_callable(reference)
    except BackendLoadError as e:
        raise ConfigurationError(str(e)) from e


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = AppConfig(args.config)
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {args.config}", file=sys.stderr)
        return 1

    AppLogger.configure(config)
    logger = AppLogger.get(__name__)

    directives: Dict[str, Optional[str]] = {
        "get": args.get,
        "getnext": args.getnext,
        "set": args.set,
    }
    try:
        agent = build_agent(args, config)
        agent.run(directives)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
