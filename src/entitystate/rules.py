"""
Validation rules.

A Rule is an immutable (property_name, error, predicate) triple. Rules for one
entity type live in a RuleCollection, shared by every instance of that type.
RuleRegistry maps entity types to their collections so the association is an
explicit object rather than hidden class state.

    registry = RuleRegistry()
    person_rules = registry.for_type(Person)
    person_rules.add('name', 'Required', lambda p: bool(p.name))
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Type, TypeVar

from entitystate.exceptions import InvalidArgumentError

T = TypeVar('T')


@dataclass(frozen=True)
class Rule(Generic[T]):
    """Named predicate over an entity, carrying the error to report when it fails."""
    property_name: str
    error: Any
    predicate: Callable[[T], bool]

    def __post_init__(self):
        if not self.property_name:
            # "" is reserved for "the whole object" when validating
            raise InvalidArgumentError('property_name')
        if self.error is None:
            raise InvalidArgumentError('error')
        if self.predicate is None:
            raise InvalidArgumentError('predicate')

    def apply(self, entity: T) -> bool:
        """Return True if entity satisfies the rule."""
        return bool(self.predicate(entity))


class RuleCollection(Generic[T]):
    """Insertion-ordered rules for one entity type.

    A collection may inherit the collections of base types: their rules come
    first, base-most first, followed by its own. Inherited collections are read
    live, so rules added to a base later still apply to subclasses.
    """

    def __init__(
        self,
        rules: Optional[List[Rule[T]]] = None,
        inherited: Optional[List['RuleCollection']] = None,
    ):
        self._rules: List[Rule[T]] = list(rules or [])
        self._inherited: List[RuleCollection] = list(inherited or [])

    def append(self, rule: Rule[T]) -> None:
        self._rules.append(rule)

    def add(self, property_name: str, error: Any, predicate: Callable[[T], bool]) -> Rule[T]:
        """Build a Rule and append it."""
        rule = Rule(property_name, error, predicate)
        self._rules.append(rule)
        return rule

    def property_names(self) -> List[str]:
        """Distinct property names, in registration order."""
        return list(dict.fromkeys(rule.property_name for rule in self._all_rules()))

    def apply(self, entity: T, property_name: Optional[str] = None) -> List[Any]:
        """Evaluate rules against entity and collect errors of the failing ones.

        Args:
            entity: Candidate entity.
            property_name: Only evaluate rules for this property. None (or "")
                evaluates every rule.

        Returns:
            Error payloads of failing rules, in registration order.
        """
        return [
            rule.error for rule in self._all_rules()
            if (not property_name or rule.property_name == property_name)
            and not rule.apply(entity)
        ]

    def __iter__(self) -> Iterator[Rule[T]]:
        return iter(self._all_rules())

    def __len__(self) -> int:
        return len(self._all_rules())

    def _all_rules(self) -> List[Rule[T]]:
        # Ancestors contribute their own rules only; self._inherited is already the flattened MRO
        return [rule for collection in self._inherited for rule in collection._rules] + self._rules


class RuleRegistry:
    """Per-type rule collections."""

    def __init__(self):
        self._collections: Dict[type, RuleCollection] = {}

    def for_type(self, entity_type: Type[T]) -> RuleCollection[T]:
        """Get the collection for entity_type, creating an empty one on first use.

        The collection inherits the collections of every base class in the MRO,
        so a subclass is validated against its bases' rules as well as its own.
        """
        if entity_type not in self._collections:
            inherited = [
                self.for_type(base) for base in reversed(entity_type.__mro__[1:])
                if base is not object
            ]
            self._collections[entity_type] = RuleCollection(inherited=inherited)
        return self._collections[entity_type]

    def clear(self) -> None:
        """Forget every collection. For testing only."""
        self._collections.clear()


default_registry = RuleRegistry()
