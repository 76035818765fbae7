"""
Naming policy engine: computes device node names and permissions.
"""

from .policy import NamingPolicy, expand_template, kernel_name, kernel_number, rule_matches

__all__ = [
    "NamingPolicy",
    "expand_template",
    "kernel_name",
    "kernel_number",
    "rule_matches",
]
