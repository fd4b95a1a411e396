"""
Base classes for data-bound entities.

Gives entities three composed capabilities:
- Change notification (property changing / changed streams)
- Rule-based validation with per-property error aggregation
- Transactional editing with dirty-state tracking

Quick Start:
    >>> from entitystate import Entity, ObservableField, default_registry
    >>>
    >>> class Person(Entity):
    ...     name = ObservableField(default="")
    >>>
    >>> default_registry.for_type(Person).add('name', 'Required', lambda p: bool(p.name))
    >>>
    >>> person = Person()
    >>> person.has_errors
    True
    >>> person.name = "Ada"
    >>> person.has_errors
    False

Architecture:
    Each capability is an independent component composed by Entity:

    PropertyNotifier  raises changing/changed, runs ordered hooks
    ErrorAggregator   re-validates on "changed", keeps the error map
    EditSession       begin/cancel/end edit via snapshots
    ChangeTracker     implicit begin_edit on "changing", dirty flag on "changed"

    Entity registers the hooks in the order every property write follows:
    begin_edit -> changing -> assignment -> changed -> validation -> dirty flag.

Modules:
    - channel: Hot multicast channels, lazy restartable streams
    - notifier: Property change notification
    - rules: Rules, rule collections, per-type registry
    - validation: Error aggregation
    - editing: Snapshot-based edit sessions
    - tracking: Change tracking flags
    - entity: ObservableField, ObservableObject, Entity
    - disposable: Exactly-once disposal guard
    - config: Framework switches
"""

# Errors
from entitystate.exceptions import (
    EntityStateError,
    InvalidArgumentError,
    DisposedStateError,
)

# Configuration
from entitystate.config import (
    FrameworkConfig,
    get_config,
    set_config,
    configure,
    reset_config,
)

# Lifecycle and channels
from entitystate.disposable import Disposable
from entitystate.channel import Channel, Stream, Subscription

# Components
from entitystate.notifier import PropertyNotifier
from entitystate.rules import Rule, RuleCollection, RuleRegistry, default_registry
from entitystate.validation import ErrorAggregator, HAS_ERRORS_PROPERTY
from entitystate.editing import EditSession
from entitystate.tracking import ChangeTracker

# Entities
from entitystate.entity import Entity, ObservableField, ObservableObject, observable_fields

__all__ = [
    # Errors
    'EntityStateError',
    'InvalidArgumentError',
    'DisposedStateError',
    # Configuration
    'FrameworkConfig',
    'get_config',
    'set_config',
    'configure',
    'reset_config',
    # Lifecycle and channels
    'Disposable',
    'Channel',
    'Stream',
    'Subscription',
    # Components
    'PropertyNotifier',
    'Rule',
    'RuleCollection',
    'RuleRegistry',
    'default_registry',
    'ErrorAggregator',
    'HAS_ERRORS_PROPERTY',
    'EditSession',
    'ChangeTracker',
    # Entities
    'Entity',
    'ObservableField',
    'ObservableObject',
    'observable_fields',
]

__version__ = '1.0.0'
__description__ = 'Change notification, validation and change tracking for data-bound entities'
