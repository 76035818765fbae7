"""
Configuration validation utilities.

This module turns raw TOML data into validated UdevConfig and NamingRule
instances.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

from ..models.config import NamingRule, UdevConfig
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_file_mode,
    validate_non_empty_string,
    validate_positive_integer,
    validate_regex_pattern,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
MATCH_FIELDS = ["kernel", "devpath", "subsystem"]
MATCH_TYPES = ["exact", "contains", "regex", "in_list"]


def _resolve_path(value: Any, config_dir: Path, field_name: str) -> Path:
    path = Path(validate_non_empty_string(str(value), field_name=field_name))
    if not path.is_absolute():
        path = config_dir / path
    return path


def validate_udev_config(
    udev_data: Dict[str, Any],
    bus_data: Dict[str, Any],
    config_dir: Path,
) -> UdevConfig:
    """
    Validate and create a UdevConfig from raw configuration data.

    Args:
        udev_data: The [udev] section, environment overrides already applied
        bus_data: The [bus] section
        config_dir: Directory of the main config file, for relative paths

    Returns:
        Validated UdevConfig instance

    Raises:
        ValidationError: If validation fails
    """
    defaults = UdevConfig()

    root = validate_non_empty_string(
        udev_data.get("root", defaults.root), field_name="udev.root"
    )
    if not root.endswith("/"):
        root += "/"

    db_path = _resolve_path(
        udev_data.get("db_path", defaults.db_path), config_dir, "udev.db_path"
    )
    rules_file = _resolve_path(
        udev_data.get("rules_file", defaults.rules_file), config_dir, "udev.rules_file"
    )
    sysfs_root = Path(
        validate_non_empty_string(
            str(udev_data.get("sysfs_root", defaults.sysfs_root)),
            field_name="udev.sysfs_root",
        )
    )

    default_mode = validate_file_mode(
        udev_data.get("default_mode", defaults.default_mode),
        field_name="udev.default_mode",
    )
    default_owner = validate_non_empty_string(
        udev_data.get("default_owner", defaults.default_owner),
        field_name="udev.default_owner",
    )
    default_group = validate_non_empty_string(
        udev_data.get("default_group", defaults.default_group),
        field_name="udev.default_group",
    )
    log_level = validate_enum_choice(
        udev_data.get("log_level", defaults.log_level),
        choices=LOG_LEVELS,
        field_name="udev.log_level",
        case_sensitive=False,
    )

    bus_enabled = bus_data.get("enabled", defaults.bus_enabled)
    if not isinstance(bus_enabled, bool):
        raise ValidationError(
            f"bus.enabled must be a boolean, got {bus_enabled}",
            field_name="bus.enabled",
            value=bus_enabled,
        )

    return UdevConfig(
        root=root,
        db_path=db_path,
        rules_file=rules_file,
        sysfs_root=sysfs_root,
        default_mode=default_mode,
        default_owner=default_owner,
        default_group=default_group,
        log_level=log_level,
        bus_enabled=bus_enabled,
    )


def validate_rules_config(rules_data: List[Dict[str, Any]]) -> List[NamingRule]:
    """
    Validate and create NamingRule instances from raw configuration data.

    Args:
        rules_data: List of raw rule tables from the rules file

    Returns:
        List of validated NamingRule instances, sorted by priority

    Raises:
        ValidationError: If validation fails
    """
    rules = []

    for i, rule_data in enumerate(rules_data):
        try:
            priority = validate_positive_integer(
                rule_data.get("priority", 0),
                min_value=1,
                max_value=10000,
                field_name=f"rules[{i}].priority",
            )
            match_field = validate_enum_choice(
                rule_data.get("match_field", ""),
                choices=MATCH_FIELDS,
                field_name=f"rules[{i}].match_field",
            )
            match_type = validate_enum_choice(
                rule_data.get("match_type", ""),
                choices=MATCH_TYPES,
                field_name=f"rules[{i}].match_type",
            )
            name = validate_non_empty_string(
                rule_data.get("name"), field_name=f"rules[{i}].name"
            )

            patterns = rule_data.get("patterns", rule_data.get("pattern"))
            if patterns is None:
                raise ValidationError(
                    f"rules[{i}]: must have either 'pattern' or 'patterns' field"
                )

            if match_type == "in_list":
                if isinstance(patterns, str):
                    patterns = [patterns]
                if not isinstance(patterns, list) or not patterns:
                    raise ValidationError(
                        f"rules[{i}]: match_type 'in_list' requires a non-empty patterns list"
                    )
                patterns = [
                    validate_non_empty_string(p, field_name=f"rules[{i}].patterns[{j}]")
                    for j, p in enumerate(patterns)
                ]
            else:
                if isinstance(patterns, list):
                    if len(patterns) != 1:
                        raise ValidationError(
                            f"rules[{i}]: match_type '{match_type}' requires a single pattern, not a list"
                        )
                    patterns = patterns[0]
                patterns = validate_non_empty_string(
                    patterns, field_name=f"rules[{i}].pattern"
                )
                if match_type == "regex":
                    validate_regex_pattern(patterns, field_name=f"rules[{i}].pattern")

            mode = rule_data.get("mode")
            if mode is not None:
                mode = validate_file_mode(mode, field_name=f"rules[{i}].mode")

            rules.append(
                NamingRule(
                    priority=priority,
                    match_field=match_field,
                    match_type=match_type,
                    patterns=patterns,
                    name=name,
                    symlink=rule_data.get("symlink", "").strip(),
                    owner=rule_data.get("owner"),
                    group=rule_data.get("group"),
                    mode=mode,
                    comment=rule_data.get("comment", ""),
                )
            )

        except ValidationError as e:
            logger.error(f"Naming rule validation failed: {e}")
            raise

    # Highest priority first; the first matching rule wins.
    rules.sort(key=lambda r: r.priority, reverse=True)
    logger.debug(f"Loaded and validated {len(rules)} naming rules.")

    return rules
