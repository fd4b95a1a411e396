"""
Framework configuration.

Process-wide switches read by the notifier and channels at dispatch time.
Tests and applications change them through configure() / set_config().
"""

import dataclasses
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FrameworkConfig:
    """Framework switches.

    Attributes:
        check_property_names: Log a warning when a raised property name is not
            an attribute of the owner's type.
        propagate_subscriber_errors: Re-raise exceptions thrown by subscriber
            callbacks instead of logging them and continuing delivery.
    """
    check_property_names: bool = True
    propagate_subscriber_errors: bool = False


_config: FrameworkConfig = FrameworkConfig()


def get_config() -> FrameworkConfig:
    """Get the active framework configuration."""
    return _config


def set_config(config: FrameworkConfig) -> None:
    """Replace the active framework configuration."""
    global _config
    _config = config


def configure(**overrides: Any) -> FrameworkConfig:
    """Override individual switches, keeping the rest.

    Returns:
        The new active configuration.
    """
    set_config(dataclasses.replace(_config, **overrides))
    return _config


def reset_config() -> None:
    """Restore default configuration."""
    set_config(FrameworkConfig())
