"""Configuration of debinstall.

Every component ("installer", "logging") reads one INI file. The first of
/etc/debinstall/<component>.conf and /usr/etc/debinstall/<component>.conf
that exists is the base file; files in the <component>.conf.d directories are
applied over it in lexical order. A file named by DEBINSTALL_<COMPONENT>_CONFIG
replaces all of them, and DEBINSTALL_<COMPONENT>_<OPTION> overrides a single
option.
"""

import configparser
import logging
import os
from configparser import RawConfigParser
from typing import Dict, List

base_logger = logging.getLogger("debinstall.config")

COMPONENTS = ("installer", "logging")

CONFIG_FILES = {c: [f"/etc/debinstall/{c}.conf", f"/usr/etc/debinstall/{c}.conf"] for c in COMPONENTS}

CONFIG_SNIPPETS_DIRS = {c: [f"/usr/etc/debinstall/{c}.conf.d", f"/etc/debinstall/{c}.conf.d"] for c in COMPONENTS}

CONFIG_ENV = {c: os.environ.get(f"DEBINSTALL_{c.upper()}_CONFIG", "") for c in COMPONENTS}

# Parsed configuration per component
_config: Dict[str, RawConfigParser] = {}


def _config_files(component: str) -> List[str]:
    env_file = CONFIG_ENV.get(component, "")
    if env_file:
        if os.path.isfile(env_file):
            return [env_file]
        base_logger.warning(
            "Configuration file %s for %s set through environment variable not found, using installed configuration",
            env_file,
            component,
        )

    base = next((f for f in CONFIG_FILES[component] if os.path.exists(f)), None)
    if base is None:
        return []

    files = [base]
    for d in CONFIG_SNIPPETS_DIRS.get(component, []):
        if os.path.isdir(d):
            files.extend(sorted(os.path.join(d, f) for f in os.listdir(d) if os.path.isfile(os.path.join(d, f))))
    return files


def get_config(component: str) -> RawConfigParser:
    """Return the parsed configuration of ``component``, reading it on first use.

    A file that cannot be read or parsed is logged and skipped, the others are
    still applied.
    """
    if component not in CONFIG_FILES:
        raise ValueError(f"Invalid component '{component}'")

    if component not in _config:
        # RawConfigParser, so the logging configuration keeps its %(...)s formats
        parser = RawConfigParser()
        for f in _config_files(component):
            try:
                if parser.read(f):
                    base_logger.info("Reading configuration from %s", f)
                else:
                    base_logger.error("Config file %s for %s is not readable", f, component)
            except configparser.Error as e:
                base_logger.error("Config file %s for %s failed to parse: %s", f, component, e)
        _config[component] = parser

    return _config[component]


def getboolean(component: str, option: str, fallback: bool = False) -> bool:
    env_name = f"DEBINSTALL_{component.upper()}_{option.upper()}"
    env_value = os.environ.get(env_name)
    if env_value is not None:
        base_logger.info('Option "%s" of %s.conf was overriden by environment variable %s', option, component, env_name)
        return RawConfigParser.BOOLEAN_STATES.get(env_value.strip('" ').lower(), fallback)

    return get_config(component).getboolean(component, option, fallback=fallback)
