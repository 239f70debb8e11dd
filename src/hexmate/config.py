"""
Settings loading and saving.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Final, List, Optional, Union

import yaml

from .core.guard import DEFAULT_SKIP_CONTEXTS
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR: Final[str] = 'HEXMATE_CONFIG'
DEFAULT_CONFIG_PATH: Final[Path] = Path('~/.config/hexmate/settings.yaml')


@dataclass(frozen=True)
class BitLabel:
    """Name and optional documentation of one bit in a register."""
    label: str
    doc: Optional[str] = None


@dataclass
class Settings:
    """User settings read by the editor and the command line tool."""
    skip_contexts: List[str] = field(default_factory=lambda: list(DEFAULT_SKIP_CONTEXTS))
    dual_display: bool = True
    decorations_enabled: bool = True
    bitfields: Dict[str, Dict[int, BitLabel]] = field(default_factory=dict)


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Pick the settings file: explicit path, then $HEXMATE_CONFIG, then the user default."""

    if path is not None:
        return Path(path).expanduser()

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    return DEFAULT_CONFIG_PATH.expanduser()


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from a YAML file.

    A missing file gives the defaults.

    Raises:
        ConfigError: If the file is not valid YAML or holds wrong types
    """

    config_path = resolve_config_path(path)
    if not config_path.exists():
        logger.debug("No settings file at %s, using defaults", config_path)
        return Settings()

    try:
        raw = yaml.safe_load(config_path.read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML settings file at {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read settings file at {config_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file at {config_path} must be a YAML mapping")

    logger.debug("Loaded settings from %s", config_path)

    skip_contexts = raw.get('skipContexts', list(DEFAULT_SKIP_CONTEXTS))
    if skip_contexts is None:
        skip_contexts = []
    if not isinstance(skip_contexts, list) or not all(isinstance(k, str) for k in skip_contexts):
        raise ConfigError("skipContexts must be a list of strings")

    return Settings(
        skip_contexts=skip_contexts,
        dual_display=_ensure_bool(raw.get('dualDisplay', True), 'dualDisplay'),
        decorations_enabled=_ensure_bool(raw.get('decorationsEnabled', True), 'decorationsEnabled'),
        bitfields=_parse_bitfields(raw.get('bitfields', {})),
    )


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> Path:
    """Write settings to a YAML file, creating its directory if needed."""

    config_path = resolve_config_path(path)

    data: Dict[str, Any] = {
        'skipContexts': list(settings.skip_contexts),
        'dualDisplay': settings.dual_display,
        'decorationsEnabled': settings.decorations_enabled,
    }

    if settings.bitfields:
        data['bitfields'] = {
            register: {
                str(bit): (
                    {'label': info.label, 'doc': info.doc} if info.doc else info.label
                )
                for bit, info in sorted(bits.items())
            }
            for register, bits in settings.bitfields.items()
        }

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(yaml.safe_dump(data, sort_keys=False), encoding='utf-8')
    except OSError as e:
        raise ConfigError(f"Cannot write settings file at {config_path}: {e}") from e

    logger.debug("Saved settings to %s", config_path)
    return config_path


def _ensure_bool(value: Any, key_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key_name} must be a boolean")

    return value


def _parse_bitfields(raw: Any) -> Dict[str, Dict[int, BitLabel]]:
    """
    Parse register bit definitions.

    Each register maps bit numbers to either a label string or a mapping
    with 'label' and 'doc'. Keys that are not bit numbers are ignored.
    """

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("bitfields must be a mapping")

    registers: Dict[str, Dict[int, BitLabel]] = {}

    for register, defs in raw.items():
        bits: Dict[int, BitLabel] = {}

        if defs is None:
            defs = {}
        if not isinstance(defs, dict):
            raise ConfigError(f"bitfields.{register} must be a mapping")

        for key, info in defs.items():
            try:
                bit = int(key)
            except (TypeError, ValueError):
                logger.debug("Ignoring bit key %r in register %s", key, register)
                continue

            if isinstance(info, str):
                bits[bit] = BitLabel(info)
                continue

            if isinstance(info, dict):
                label = info.get('label') or f"bit{bit}"
                doc = info.get('doc')
                bits[bit] = BitLabel(str(label), str(doc) if doc else None)
                continue

            bits[bit] = BitLabel(f"bit{bit}")

        registers[str(register)] = bits

    return registers
