"""
Twoogle Configuration Commands

Non-interactive helpers behind `twoogle config`.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def run_config(args) -> int:
    """
    Run a configuration command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    from ..config import load_config, create_default_config

    config_path = getattr(args, 'config', Path('config.toml'))

    if getattr(args, 'init', False):
        if config_path.exists():
            print(f"Config file already exists: {config_path}")
            return 1
        create_default_config(config_path)
        print(f"Created default config: {config_path}")
        return 0

    if getattr(args, 'validate', False):
        config = load_config(config_path)
        errors = config.validate()
        if errors:
            print("Configuration errors:")
            for err in errors:
                print(f"  - {err}")
            return 1
        print("Configuration is valid.")
        return 0

    if getattr(args, 'set', None):
        key, value = args.set
        return set_config_value(config_path, key, value)

    # Default: show
    config = load_config(config_path)
    print(config_to_toml(config))
    return 0


def config_to_toml(config) -> str:
    """Convert config to TOML string for display."""
    lines = []

    lines.append("[service]")
    lines.append(f'name = "{config.service.name}"')
    lines.append(f'guest_username = "{config.service.guest_username}"')
    lines.append(f"max_message_length = {config.service.max_message_length}")
    lines.append(f"feed_limit = {config.service.feed_limit}")
    lines.append(f"login_attempts = {config.service.login_attempts}")
    lines.append("")

    lines.append("[database]")
    lines.append(f'path = "{config.database.path}"')
    lines.append(f"busy_timeout_ms = {config.database.busy_timeout_ms}")
    lines.append("")

    lines.append("[crypto]")
    lines.append(f"argon2_time_cost = {config.crypto.argon2_time_cost}")
    lines.append(f"argon2_memory_kb = {config.crypto.argon2_memory_kb}")
    lines.append(f"argon2_parallelism = {config.crypto.argon2_parallelism}")
    lines.append("")

    lines.append("[features]")
    lines.append(f"registration_enabled = {str(config.features.registration_enabled).lower()}")
    lines.append(f"gui_enabled = {str(config.features.gui_enabled).lower()}")
    lines.append("")

    lines.append("[logging]")
    lines.append(f'level = "{config.logging.level}"')
    lines.append(f'file = "{config.logging.file}"')
    lines.append(f"debug = {str(config.logging.debug).lower()}")

    return "\n".join(lines)


def set_config_value(config_path: Path, key: str, value: str) -> int:
    """Set a specific configuration value."""
    from ..config import load_config

    config = load_config(config_path)

    # Parse dotted key (e.g., "service.name")
    parts = key.split(".")
    obj = config

    for part in parts[:-1]:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            print(f"Invalid config key: {key}")
            return 1

    final_key = parts[-1]
    if len(parts) < 2 or not hasattr(obj, final_key):
        print(f"Invalid config key: {key}")
        return 1

    # Convert value to appropriate type
    current = getattr(obj, final_key)
    if isinstance(current, bool):
        value = value.lower() in ('true', '1', 'yes')
    elif isinstance(current, int):
        try:
            value = int(value)
        except ValueError:
            print(f"{key} must be an integer")
            return 1

    setattr(obj, final_key, value)
    config.save(config_path)

    print(f"Set {key} = {value}")
    return 0
