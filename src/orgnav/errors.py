"""
orgnav.errors - Exception types

The tree engine itself never raises on malformed hierarchy data. These
exceptions belong to the collaborators around it: snapshot sources and
configuration loading.
"""


class OrgnavError(Exception):
    """Base class for orgnav errors."""


class SnapshotError(OrgnavError):
    """A node snapshot could not be fetched or parsed."""


class ConfigError(OrgnavError):
    """Configuration could not be read or holds an invalid value."""
