"""
Model element representation module.

This module defines the node types of the metamodel graph: packages,
classifiers (data types, enumerations and classes), features (attributes
and references), operations with their parameters, and the annotations
that can be attached to any of them.
"""

from typing import Dict, Iterator, List, Optional


class Annotation:
    """
    A named bag of string details attached to a single model element.

    The source identifies the annotation (see AnnotationStore for the naming
    scheme) and the details hold an ordered string to string mapping, with
    "value" used as the conventional primary key.
    """

    def __init__(self, source: str, details: Optional[Dict[str, str]] = None):
        """
        Initialize a new annotation.

        Args:
            source: Source URI of the annotation
            details: Initial details of the annotation
        """
        self.source = source
        self.details: Dict[str, str] = dict(details) if details else {}
        self.owner: Optional["ModelElement"] = None
        self.element_id: Optional[str] = None

    def __repr__(self) -> str:
        return f"Annotation(source={self.source!r}, details={self.details!r})"


class ModelElement:
    """
    Base class of every node in the model graph.

    Each element has a name, an optional identifier (assigned by the model
    producer) and a list of annotations. Several annotations with the same
    source may be attached to one element.
    """

    def __init__(self, name: str, element_id: Optional[str] = None):
        self.name = name
        self.element_id = element_id
        self.annotations: List[Annotation] = []

    def add_annotation(self, annotation: Annotation) -> Annotation:
        """
        Attach an annotation to this element.

        Args:
            annotation: Annotation to attach

        Returns:
            The attached annotation
        """
        annotation.owner = self
        self.annotations.append(annotation)
        return annotation

    def children(self) -> Iterator["ModelElement"]:
        """Iterate over the elements owned by this element (annotations excluded)."""
        return iter(())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


class Package(ModelElement):
    """
    A namespace owning classifiers and nested packages.

    Packages form a tree; the root package of a graph is the model itself.
    """

    def __init__(self, name: str, element_id: Optional[str] = None):
        super().__init__(name, element_id)
        self.parent: Optional["Package"] = None
        self.packages: List["Package"] = []
        self.classifiers: List["Classifier"] = []

    def add_package(self, package: "Package") -> "Package":
        """
        Add a nested package.

        Args:
            package: Package to nest into this one

        Returns:
            The nested package
        """
        package.parent = self
        self.packages.append(package)
        return package

    def add_classifier(self, classifier: "Classifier") -> "Classifier":
        """
        Add a classifier owned by this package.

        Args:
            classifier: Classifier to add

        Returns:
            The added classifier
        """
        classifier.package = self
        self.classifiers.append(classifier)
        return classifier

    def classifier(self, name: str) -> Optional["Classifier"]:
        """Get an owned classifier by its local name."""
        for classifier in self.classifiers:
            if classifier.name == name:
                return classifier
        return None

    def children(self) -> Iterator[ModelElement]:
        yield from self.classifiers
        yield from self.packages


class Classifier(ModelElement):
    """Abstract base of data types and classes, owned by exactly one package."""

    def __init__(self, name: str, element_id: Optional[str] = None):
        super().__init__(name, element_id)
        self.package: Optional[Package] = None


class DataType(Classifier):
    """
    A primitive value type.

    The instance type is a qualified Python type name (for example "int",
    "decimal.Decimal" or "datetime.date") used to classify the kind of value
    the data type represents.
    """

    def __init__(self, name: str, instance_type: Optional[str] = None, element_id: Optional[str] = None):
        super().__init__(name, element_id)
        self.instance_type = instance_type


class EnumType(DataType):
    """An enumeration data type with ordered literals."""

    def __init__(self, name: str, literals: Optional[List[str]] = None, element_id: Optional[str] = None):
        super().__init__(name, None, element_id)
        self.literals: List[str] = list(literals) if literals else []

    def add_literal(self, literal: str) -> None:
        """Add an enumeration literal (duplicates are ignored)."""
        if literal not in self.literals:
            self.literals.append(literal)


class Feature(ModelElement):
    """A structural feature (attribute or reference) owned by a class."""

    def __init__(self, name: str, feature_type: Optional[Classifier] = None, element_id: Optional[str] = None):
        super().__init__(name, element_id)
        self.type = feature_type
        self.owner: Optional["ClassType"] = None


class Attribute(Feature):
    """A feature typed by a data type."""


class Reference(Feature):
    """
    A feature typed by a class.

    References may be containments (the target is owned by the referencing
    object), may have an opposite reference and carry cardinality bounds
    where an upper bound of -1 means unbounded.
    """

    def __init__(
        self,
        name: str,
        feature_type: Optional["ClassType"] = None,
        containment: bool = False,
        lower: int = 0,
        upper: int = 1,
        element_id: Optional[str] = None,
    ):
        super().__init__(name, feature_type, element_id)
        self.containment = containment
        self.lower = lower
        self.upper = upper
        self.opposite: Optional["Reference"] = None

    @property
    def reference_type(self) -> Optional["ClassType"]:
        """Target class of the reference."""
        return self.type

    def is_many(self) -> bool:
        """Check if the reference can hold more than one target."""
        return self.upper == -1 or self.upper > 1

    def set_opposite(self, opposite: "Reference") -> None:
        """
        Pair this reference with its opposite (both ends are updated).

        Args:
            opposite: The reference on the target class pointing back
        """
        self.opposite = opposite
        opposite.opposite = self


class Parameter(ModelElement):
    """An input parameter of an operation."""

    def __init__(self, name: str, parameter_type: Optional[Classifier] = None, element_id: Optional[str] = None):
        super().__init__(name, element_id)
        self.type = parameter_type
        self.operation: Optional["Operation"] = None


class Operation(ModelElement):
    """
    An operation declared by a class.

    Overloading is not supported: a class declares at most one operation
    with a given name.
    """

    def __init__(
        self,
        name: str,
        return_type: Optional[Classifier] = None,
        exceptions: Optional[List["ClassType"]] = None,
        element_id: Optional[str] = None,
    ):
        super().__init__(name, element_id)
        self.owner: Optional["ClassType"] = None
        self.parameters: List[Parameter] = []
        self.return_type = return_type
        self.exceptions: List[Classifier] = list(exceptions) if exceptions else []

    def add_parameter(self, name: str, parameter_type: Optional[Classifier] = None) -> Parameter:
        """
        Add an input parameter.

        Args:
            name: Parameter name
            parameter_type: Type of the parameter

        Returns:
            The new parameter
        """
        parameter = Parameter(name, parameter_type)
        parameter.operation = self
        self.parameters.append(parameter)
        return parameter

    def is_override_of(self, other: "Operation") -> bool:
        """
        Check if this operation overrides another one.

        An operation overrides another, distinct operation with the same name
        and the same parameter types that is declared in the same class or in
        one of its supertypes.

        Args:
            other: Operation that may be overridden

        Returns:
            True if this operation overrides the other one, False otherwise
        """
        if other is self or self.owner is None or other.owner is None:
            return False
        if other.name != self.name or not other.owner.is_supertype_of(self.owner):
            return False
        if len(other.parameters) != len(self.parameters):
            return False
        return all(p.type is q.type for p, q in zip(self.parameters, other.parameters))

    def children(self) -> Iterator[ModelElement]:
        yield from self.parameters


class ClassType(Classifier):
    """
    A class with features, operations and (multiple) supertypes.

    Inheritance must be acyclic; diamonds are allowed. The "all_" methods
    compute closures over the inheritance graph with inherited elements
    listed before the class's own.
    """

    def __init__(
        self,
        name: str,
        abstract: bool = False,
        interface: bool = False,
        supertypes: Optional[List["ClassType"]] = None,
        element_id: Optional[str] = None,
    ):
        super().__init__(name, element_id)
        self.abstract = abstract
        self.interface = interface
        self.supertypes: List["ClassType"] = list(supertypes) if supertypes else []
        self.features: List[Feature] = []
        self.operations: List[Operation] = []

    def add_supertype(self, supertype: "ClassType") -> None:
        """Add a direct supertype (duplicates are ignored)."""
        if supertype not in self.supertypes:
            self.supertypes.append(supertype)

    def add_feature(self, feature: Feature) -> Feature:
        """Add an owned attribute or reference."""
        feature.owner = self
        self.features.append(feature)
        return feature

    def add_attribute(self, name: str, data_type: Optional[DataType] = None) -> Attribute:
        """
        Add an owned attribute.

        Args:
            name: Attribute name
            data_type: Type of the attribute

        Returns:
            The new attribute
        """
        return self.add_feature(Attribute(name, data_type))

    def add_reference(
        self,
        name: str,
        target: Optional["ClassType"] = None,
        containment: bool = False,
        lower: int = 0,
        upper: int = 1,
    ) -> Reference:
        """
        Add an owned reference.

        Args:
            name: Reference name
            target: Target class
            containment: Whether the target is contained
            lower: Lower bound of the cardinality
            upper: Upper bound of the cardinality (-1 for unbounded)

        Returns:
            The new reference
        """
        return self.add_feature(Reference(name, target, containment, lower, upper))

    def add_operation(self, operation: Operation) -> Operation:
        """Add an owned operation."""
        operation.owner = self
        self.operations.append(operation)
        return operation

    @property
    def attributes(self) -> List[Attribute]:
        """Attributes declared by this class."""
        return [f for f in self.features if isinstance(f, Attribute)]

    @property
    def references(self) -> List[Reference]:
        """References declared by this class."""
        return [f for f in self.features if isinstance(f, Reference)]

    def all_supertypes(self) -> List["ClassType"]:
        """
        Get every supertype reachable through inheritance.

        Returns:
            Supertypes ordered with the ancestors of each direct supertype
            before the supertype itself, each listed once
        """
        result: List["ClassType"] = []
        for supertype in self.supertypes:
            for ancestor in supertype.all_supertypes():
                if ancestor not in result:
                    result.append(ancestor)
            if supertype not in result:
                result.append(supertype)
        return result

    def is_supertype_of(self, other: "ClassType") -> bool:
        """Check if this class is the given class or one of its supertypes."""
        return other is self or self in other.all_supertypes()

    def all_features(self) -> List[Feature]:
        features = []
        for supertype in self.all_supertypes():
            features.extend(supertype.features)
        features.extend(self.features)
        return features

    def all_attributes(self) -> List[Attribute]:
        return [f for f in self.all_features() if isinstance(f, Attribute)]

    def all_references(self) -> List[Reference]:
        return [f for f in self.all_features() if isinstance(f, Reference)]

    def all_operations(self) -> List[Operation]:
        operations = []
        for supertype in self.all_supertypes():
            operations.extend(supertype.operations)
        operations.extend(self.operations)
        return operations

    def feature(self, name: str) -> Optional[Feature]:
        """Get a feature of the closure by name."""
        for feature in self.all_features():
            if feature.name == name:
                return feature
        return None

    def operation(self, name: str) -> Optional[Operation]:
        """Get a directly declared operation by name."""
        for operation in self.operations:
            if operation.name == name:
                return operation
        return None

    def children(self) -> Iterator[ModelElement]:
        yield from self.operations
        yield from self.features
