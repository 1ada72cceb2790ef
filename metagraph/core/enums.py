"""
Enumeration types used by the metamodel.

This module defines enumerations for data type kinds and the default
behaviours an operation can declare instead of a hand-written body.
"""

from enum import Enum
from typing import Optional


class InstanceKind(Enum):
    """
    Enumeration of value kinds a data type can represent.

    The kind is derived from the instance type tag of a data type
    (see metagraph.utils.type_classification).
    """
    INTEGER = "integer"
    DECIMAL = "decimal"
    STRING = "string"
    TEXT = "text"
    DATE = "date"
    TIMESTAMP = "timestamp"
    TIME = "time"
    BOOLEAN = "boolean"
    BINARY = "binary"
    ENUMERATION = "enumeration"


class BehaviourType(Enum):
    """
    Enumeration of built-in operation behaviours.

    An operation annotated with a behaviour has a default, CRUD-style
    implementation and references its owner (a classifier or a reference)
    through the behaviour annotation details.
    """
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SET = "set"
    UNSET = "unset"
    ADD_ALL = "addAll"
    REMOVE_ALL = "removeAll"
    GET_RANGE = "getRange"
    GET_TEMPLATE = "getTemplate"

    @classmethod
    def resolve(cls, value: Optional[str]) -> Optional["BehaviourType"]:
        """
        Get the behaviour type for an annotation value.

        Args:
            value: Value of the behaviour "type" detail

        Returns:
            Matching behaviour type or None if the value is unknown
        """
        for behaviour in cls:
            if behaviour.value == value:
                return behaviour
        return None

    def is_owned_by_classifier(self) -> bool:
        """Check if the owner of this behaviour is a classifier (not a reference)."""
        return self in (BehaviourType.UPDATE, BehaviourType.DELETE, BehaviourType.GET_TEMPLATE)
