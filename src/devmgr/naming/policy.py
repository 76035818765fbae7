"""
Device naming policy.

This module maps a sysfs device path to a device node name, its symlinks,
owner, group and mode by applying prioritized rules loaded from the naming
rules file. Devices no rule matches are named after their kernel name with
the configured default ownership and mode.
"""

import logging
import re
import tomllib
from typing import List, Optional, Tuple

from ..config import load_rules_config, validate_rules_config
from ..models.config import NamingRule, UdevConfig
from ..models.records import DeviceRecord
from ..validation import ValidationError

logger = logging.getLogger(__name__)


def kernel_name(devpath: str) -> str:
    """Return the last component of a sysfs path (``/class/tty/ttyS0`` -> ``ttyS0``)."""
    return devpath.rstrip("/").rsplit("/", 1)[-1]


def kernel_number(name: str) -> str:
    """Return the trailing digits of a kernel name, or an empty string."""
    match = re.search(r"(\d+)$", name)
    return match.group(1) if match else ""


def expand_template(template: str, devpath: str) -> str:
    """
    Substitute ``%k`` (kernel name) and ``%n`` (kernel number) in a template.

    ``%%`` produces a literal percent sign.
    """
    kname = kernel_name(devpath)
    substitutions = {"k": kname, "n": kernel_number(kname), "%": "%"}
    return re.sub(r"%([kn%])", lambda m: substitutions[m.group(1)], template)


def rule_matches(rule: NamingRule, devpath: str, subsystem: str) -> bool:
    """Return True if the rule applies to the device."""
    if rule.match_field == "kernel":
        value = kernel_name(devpath)
    elif rule.match_field == "devpath":
        value = devpath
    else:
        value = subsystem

    if rule.match_type == "exact":
        return value == rule.patterns
    if rule.match_type == "contains":
        return rule.patterns in value
    if rule.match_type == "regex":
        return bool(re.search(rule.patterns, value))
    if rule.match_type == "in_list":
        return value in rule.patterns
    return False


class NamingPolicy:
    """Rule-driven naming policy engine."""

    def __init__(self, config: UdevConfig):
        self.config = config
        self.rules: List[NamingRule] = []
        self.initialized = False

    def init(self) -> None:
        """
        Load and validate the naming rules.

        Raises:
            ValidationError: If the rules file is unreadable or malformed, or a rule is invalid
        """
        try:
            rules_data = load_rules_config(self.config.rules_file)
        except tomllib.TOMLDecodeError as e:
            raise ValidationError(f"malformed rules file {self.config.rules_file}: {e}") from e
        except OSError as e:
            raise ValidationError(f"unable to read rules file {self.config.rules_file}: {e}") from e
        self.rules = validate_rules_config(rules_data)
        self.initialized = True
        logger.debug(f"Naming policy initialized with {len(self.rules)} rules")

    def find_rule(self, devpath: str, subsystem: str) -> Optional[NamingRule]:
        for rule in self.rules:
            if rule_matches(rule, devpath, subsystem):
                return rule
        return None

    def name_device(
        self,
        devpath: str,
        subsystem: str,
        dev_numbers: Optional[Tuple[int, int]] = None,
    ) -> DeviceRecord:
        """
        Compute the device record for a device.

        Args:
            devpath: sysfs device path
            subsystem: subsystem the device belongs to
            dev_numbers: (major, minor) read from sysfs, if any

        Returns:
            A DeviceRecord that has not yet been stored
        """
        major, minor = dev_numbers if dev_numbers else (None, None)
        rule = self.find_rule(devpath, subsystem)

        if rule is None:
            logger.debug(f"No naming rule for '{devpath}', using kernel name")
            return DeviceRecord(
                path=devpath,
                name=kernel_name(devpath),
                owner=self.config.default_owner,
                group=self.config.default_group,
                mode=self.config.default_mode,
                major=major,
                minor=minor,
            )

        record = DeviceRecord(
            path=devpath,
            name=expand_template(rule.name, devpath),
            symlink=" ".join(
                expand_template(link, devpath) for link in rule.symlink.split()
            ),
            owner=rule.owner or self.config.default_owner,
            group=rule.group or self.config.default_group,
            mode=rule.mode if rule.mode is not None else self.config.default_mode,
            major=major,
            minor=minor,
        )
        logger.debug(
            f"Rule priority {rule.priority} names '{devpath}' as '{record.name}'"
        )
        return record
