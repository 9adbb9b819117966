"""Radio configuration handling for rfplane.

This module loads radio configurations from INI files. Each section describes
one radio: where its remote hardware service listens, and which daughterboard
slots it carries.

[mock]
# Remote hardware service
host = 127.0.0.1
port = 49601
token = mock

# Slot configurations
slot.A.db_idx = 0
slot.A.rpc_prefix = db_0_
slot.A.rx_ports = 2
slot.A.tx_ports = 2
slot.A.lo_groups = 0,1

LO groups are comma-separated channel lists, several groups are separated by
semicolons (``0;1`` gives each channel its own LO).

See Also
--------
rfplane.system.base_config : Configuration dataclasses
rfplane.system.system : RadioSystem
"""

from __future__ import annotations

from configparser import ConfigParser, SectionProxy
from pathlib import Path

from loguru import logger

from rfplane.system.base_config import RadioConfig, SlotConfig

SLOT_KEYS = {"db_idx", "rpc_prefix", "rx_ports", "tx_ports", "lo_groups"}
RADIO_KEYS = {"host", "port", "token", "timeout", "retries"}
INT_SLOT_KEYS = {"db_idx", "rx_ports", "tx_ports"}


def user_radios_file() -> Path:
    return Path.home() / ".rfplane" / "radios.ini"


def package_radios_dir() -> Path:
    import rfplane

    return Path(rfplane.__file__).parent / "sysconfig" / "radios"


def parse_lo_groups(value: str) -> tuple[tuple[int, ...], ...]:
    """Parse ``"0,1"`` or ``"0;1"`` into a tuple of channel groups."""
    groups = []
    for group in value.split(";"):
        group = group.strip()
        if not group:
            continue
        groups.append(tuple(int(chan) for chan in group.split(",")))
    return tuple(groups)


def _group_slot_keys(section: SectionProxy) -> dict[str, dict[str, str]]:
    slots: dict[str, dict[str, str]] = {}
    for key in section:
        if key.startswith("slot."):
            parts = key.split(".", 2)
            if len(parts) != 3:
                continue
            _, slot, param = parts
            slots.setdefault(slot.upper(), {})[param] = section[key]
    return slots


def validate_radio_config(config: ConfigParser, section: str) -> tuple[bool, str]:
    """Validate a radio configuration section.

    Parameters
    ----------
    config : ConfigParser
        ConfigParser instance containing the configuration
    section : str
        Name of the section to validate

    Returns
    -------
    tuple[bool, str]
        (is_valid, error_message)
    """
    sect = config[section]
    for key in sect:
        if key.startswith("slot."):
            if len(key.split(".", 2)) != 3:
                return False, f"Malformed slot key: {key}"
            param = key.split(".", 2)[2]
            if param not in SLOT_KEYS:
                return False, f"Unknown slot parameter: {key}"
        elif key not in RADIO_KEYS:
            return False, f"Unknown parameter: {key}"

    if "port" in sect:
        try:
            sect.getint("port")
        except ValueError:
            return False, f"Invalid port: {sect['port']}"

    slots = _group_slot_keys(sect)
    if not slots:
        return False, "No slots configured"

    for slot, params in slots.items():
        for key in INT_SLOT_KEYS & params.keys():
            try:
                int(params[key])
            except ValueError:
                return False, f"Slot {slot}: {key} must be an integer"
        if "lo_groups" in params:
            try:
                parse_lo_groups(params["lo_groups"])
            except ValueError:
                return False, f"Slot {slot}: invalid lo_groups {params['lo_groups']}"

    return True, ""


def parse_radio_config(config: ConfigParser, radio_name: str) -> RadioConfig:
    """Create a RadioConfig instance from a ConfigParser section.

    Parameters
    ----------
    config : ConfigParser
        Configuration parser containing the radio section
    radio_name : str
        Name of the radio section to load

    Returns
    -------
    RadioConfig
        Initialized radio configuration

    Raises
    ------
    ValueError
        If configuration is invalid
    """
    is_valid, error_msg = validate_radio_config(config, radio_name)
    if not is_valid:
        raise ValueError(f"Radio '{radio_name}': {error_msg}")

    section = config[radio_name]
    radio_config = RadioConfig(radio_name=radio_name)
    radio_config.host = section.get("host", radio_config.host)
    radio_config.port = section.getint("port", radio_config.port)
    radio_config.token = section.get("token") or None
    radio_config.timeout = section.getfloat("timeout", radio_config.timeout)
    radio_config.retries = section.getint("retries", radio_config.retries)

    for slot, params in sorted(_group_slot_keys(section).items()):
        kwargs = {key: int(params[key]) for key in INT_SLOT_KEYS & params.keys()}
        if params.get("rpc_prefix"):
            kwargs["rpc_prefix"] = params["rpc_prefix"]
        if "lo_groups" in params:
            kwargs["lo_groups"] = parse_lo_groups(params["lo_groups"])
        radio_config.slots[slot] = SlotConfig(slot=slot, **kwargs)
        logger.debug("Radio {}: {}", radio_name, radio_config.slots[slot])

    return radio_config


def load_radio_config(radio_name: str) -> RadioConfig:
    """Load radio configuration from INI file.

    User configurations take precedence over package defaults.

    Parameters
    ----------
    radio_name : str
        Name of the radio configuration to load

    Returns
    -------
    RadioConfig
        Loaded and validated radio configuration object

    Notes
    -----
    Search order:
    1. ~/.rfplane/radios.ini
    2. package/sysconfig/radios/<radio_name>.ini
    """
    user_file = user_radios_file()
    package_file = package_radios_dir() / f"{radio_name.lower()}.ini"

    for path in (user_file, package_file):
        if not path.exists():
            continue
        config = ConfigParser()
        config.read(path)
        # Case-insensitive section lookup
        for section in config.sections():
            if section.lower() == radio_name.lower():
                logger.info("Loading radio '{}' from {}", section, path)
                return parse_radio_config(config, section)

    raise ValueError(
        f"Radio '{radio_name}' not found in:\n"
        f"- User config: {user_file}\n"
        f"- Package config: {package_file}"
    )


def list_available_radios() -> dict[str, str]:
    """List all available radio configurations.

    Returns
    -------
    dict[str, str]
        Dictionary mapping radio names to their source ('user' or 'package')
    """
    radios = {}

    package_dir = package_radios_dir()
    if package_dir.exists():
        for file in sorted(package_dir.glob("*.ini")):
            config = ConfigParser()
            config.read(file)
            for section in config.sections():
                radios[section] = "package"

    # user config overrides package defaults
    user_file = user_radios_file()
    if user_file.exists():
        config = ConfigParser()
        config.read(user_file)
        for section in config.sections():
            radios[section] = "user"

    return radios
