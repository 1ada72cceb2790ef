"""
Typed annotation facts.

Each fact class mirrors one annotation name and converts between the raw
string details of an annotation and typed Python fields. The set of facts
is closed: these are the annotation names the enrichment layer reads and
writes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Type


def parse_bool(value: Optional[str]) -> bool:
    """Interpret an annotation literal as a boolean ("true", any case, is True)."""
    return value is not None and value.lower() == "true"


def format_bool(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class Fact(ABC):
    """Base class of typed annotation facts."""

    NAME: ClassVar[str] = ""

    @abstractmethod
    def to_details(self) -> Dict[str, str]:
        """Convert the fact to annotation details."""

    @classmethod
    @abstractmethod
    def from_details(cls, details: Dict[str, str]) -> "Fact":
        """Build the fact from annotation details."""


@dataclass
class FlagFact(Fact):
    """A fact holding a single boolean value."""

    value: bool = True

    def to_details(self) -> Dict[str, str]:
        return {"value": format_bool(self.value)}

    @classmethod
    def from_details(cls, details: Dict[str, str]) -> "FlagFact":
        return cls(parse_bool(details.get("value")))


@dataclass
class TextFact(Fact):
    """A fact holding a single string value."""

    value: str = ""

    def to_details(self) -> Dict[str, str]:
        return {"value": self.value}

    @classmethod
    def from_details(cls, details: Dict[str, str]) -> "TextFact":
        return cls(details.get("value", ""))


@dataclass
class EntityFact(FlagFact):
    """Class is a persistent domain entity."""
    NAME: ClassVar[str] = "entity"


@dataclass
class MappedEntityTypeFact(TextFact):
    """Class is a transfer object mapped onto the named entity type."""
    NAME: ClassVar[str] = "mappedEntityType"


@dataclass
class BindingFact(TextFact):
    """Feature of a mapped type is bound to the named feature of the entity."""
    NAME: ClassVar[str] = "binding"


@dataclass
class AccessPointFact(FlagFact):
    """Class is an access point exposing parts of the model."""
    NAME: ClassVar[str] = "accessPoint"


@dataclass
class ExposedByFact(TextFact):
    """Element is exposed by the access point with the given FQName."""
    NAME: ClassVar[str] = "exposedBy"


@dataclass
class ExposedGraphFact(TextFact):
    """Element is reachable through the graph reference with the given FQName."""
    NAME: ClassVar[str] = "exposedGraph"


@dataclass
class ExposedServiceFact(FlagFact):
    """Reference of an access point exposes a service rather than a graph."""
    NAME: ClassVar[str] = "exposedService"


@dataclass
class StatefulFact(FlagFact):
    NAME: ClassVar[str] = "stateful"


@dataclass
class BoundFact(FlagFact):
    NAME: ClassVar[str] = "bound"


@dataclass
class AbstractFact(FlagFact):
    NAME: ClassVar[str] = "abstract"


@dataclass
class IdentifierFact(FlagFact):
    NAME: ClassVar[str] = "identifier"


@dataclass
class ConstraintsFact(Fact):
    """Free-form value constraints of a feature (precision, scale, maxLength, ...)."""

    NAME: ClassVar[str] = "constraints"

    values: Dict[str, str] = field(default_factory=dict)

    def to_details(self) -> Dict[str, str]:
        return dict(self.values)

    @classmethod
    def from_details(cls, details: Dict[str, str]) -> "ConstraintsFact":
        return cls(dict(details))


@dataclass
class EmbeddedFact(Fact):
    """
    Reference is embedded into its owner.

    The optional flags tell whether embedded instances may be created,
    updated or deleted through the owner.
    """

    NAME: ClassVar[str] = "embedded"

    value: bool = True
    create: Optional[bool] = None
    update: Optional[bool] = None
    delete: Optional[bool] = None

    def to_details(self) -> Dict[str, str]:
        details = {"value": format_bool(self.value)}
        for key in ("create", "update", "delete"):
            flag = getattr(self, key)
            if flag is not None:
                details[key] = format_bool(flag)
        return details

    @classmethod
    def from_details(cls, details: Dict[str, str]) -> "EmbeddedFact":
        def flag(key: str) -> Optional[bool]:
            return parse_bool(details[key]) if key in details else None

        return cls(
            value=parse_bool(details.get("value", "true")),
            create=flag("create"),
            update=flag("update"),
            delete=flag("delete"),
        )


@dataclass
class BehaviourFact(Fact):
    """
    Operation has a built-in behaviour.

    The owner is either a classifier FQName or a "<classifier>#<reference>"
    path depending on the behaviour type.
    """

    NAME: ClassVar[str] = "behaviour"

    type: Optional[str] = None
    owner: Optional[str] = None
    relation: Optional[str] = None
    parameter_name: Optional[str] = None
    output_parameter_name: Optional[str] = None

    _KEYS: ClassVar[Dict[str, str]] = {
        "type": "type",
        "owner": "owner",
        "relation": "relation",
        "parameter_name": "parameterName",
        "output_parameter_name": "outputParameterName",
    }

    def to_details(self) -> Dict[str, str]:
        details = {}
        for attribute, key in self._KEYS.items():
            value = getattr(self, attribute)
            if value is not None:
                details[key] = value
        return details

    @classmethod
    def from_details(cls, details: Dict[str, str]) -> "BehaviourFact":
        return cls(**{attribute: details.get(key) for attribute, key in cls._KEYS.items()})


FACT_TYPES: Dict[str, Type[Fact]] = {
    fact.NAME: fact
    for fact in (
        EntityFact,
        MappedEntityTypeFact,
        BindingFact,
        ConstraintsFact,
        AccessPointFact,
        ExposedByFact,
        ExposedGraphFact,
        ExposedServiceFact,
        StatefulFact,
        BoundFact,
        AbstractFact,
        IdentifierFact,
        BehaviourFact,
        EmbeddedFact,
    )
}
