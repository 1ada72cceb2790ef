"""
Fully qualified naming and name resolution.

Classifiers are named by the dot-joined chain of their packages followed by
their own name; features and operations append "#<name>" to the FQName of
the owning class. The NameResolver maps such names back to elements,
memoizing lookups in a ResolverCache that must be invalidated whenever the
graph changes.
"""

import keyword
import logging
from typing import Dict, Optional, Union

from metagraph.config.settings import Settings
from metagraph.core.element import (
    Attribute,
    ClassType,
    Classifier,
    Feature,
    Operation,
    Package,
    Reference,
)
from metagraph.core.model_graph import ModelGraph

logger = logging.getLogger(__name__)

NAMESPACE_SEPARATOR = "."
FEATURE_SEPARATOR = "#"


def safe_name(name: str) -> str:
    """
    Make a name usable as a Python identifier.

    Args:
        name: Element name

    Returns:
        The name suffixed with "_" when it is a reserved keyword
    """
    return name + "_" if keyword.iskeyword(name) else name


def package_fq_name(package: Package, safe: bool = False) -> str:
    """
    Get the fully qualified name of a package.

    Args:
        package: Package to name
        safe: Apply safe_name to every segment

    Returns:
        Dot-joined names from the root package down to the package
    """
    names = []
    current: Optional[Package] = package
    while current is not None:
        names.append(safe_name(current.name) if safe else current.name)
        current = current.parent
    return NAMESPACE_SEPARATOR.join(reversed(names))


def classifier_fq_name(classifier: Classifier) -> str:
    if classifier.package is None:
        return classifier.name
    return package_fq_name(classifier.package) + NAMESPACE_SEPARATOR + classifier.name


def feature_fq_name(feature: Union[Feature, Operation]) -> str:
    """Get "<owner FQName>#<name>" for a feature or operation."""
    return classifier_fq_name(feature.owner) + FEATURE_SEPARATOR + feature.name


def attribute_fq_name(attribute: Attribute) -> str:
    return feature_fq_name(attribute)


def reference_fq_name(reference: Reference) -> str:
    return feature_fq_name(reference)


def operation_fq_name(operation: Operation) -> str:
    return feature_fq_name(operation)


class ResolverCache:
    """
    Memoized name lookups.

    Each kind of element has its own map from looked-up name to result.
    Misses are stored as None so that repeated failed lookups stay cheap.
    """

    def __init__(self):
        self.classifiers: Dict[str, Optional[Classifier]] = {}
        self.references: Dict[str, Optional[Reference]] = {}
        self.attributes: Dict[str, Optional[Attribute]] = {}
        self.operations: Dict[str, Optional[Operation]] = {}
        self.mapped_entities: Dict[int, Optional[ClassType]] = {}

    def invalidate(self) -> None:
        """Forget every memoized lookup."""
        self.classifiers.clear()
        self.references.clear()
        self.attributes.clear()
        self.operations.clear()
        self.mapped_entities.clear()
        logger.debug("Resolver cache invalidated")


class NameResolver:
    """
    Resolves fully qualified names against a model graph.

    Classifier resolution falls back to a bare-name match when no classifier
    has the requested FQName. The fallback is a degraded mode and is logged
    as a warning; it can be switched off with resolution.name_fallback.
    """

    def __init__(
        self,
        graph: ModelGraph,
        cache: Optional[ResolverCache] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the resolver.

        Args:
            graph: Graph to resolve names in
            cache: Cache to share (a private one is created when omitted)
            settings: Settings providing the resolution section
        """
        self.graph = graph
        self.settings = settings or Settings()
        self.cache_enabled = bool(self.settings.get("resolution", "cache_enabled", default=True))
        self.name_fallback = bool(self.settings.get("resolution", "name_fallback", default=True))
        self.cache = cache if cache is not None else ResolverCache()

    def invalidate(self) -> None:
        """Invalidate cached lookups after the graph was modified."""
        self.cache.invalidate()

    def _lookup(self, table: Dict, name: str, compute):
        if not self.cache_enabled:
            return compute(name)
        if name not in table:
            table[name] = compute(name)
        return table[name]

    def _resolve_classifier(self, name: str) -> Optional[Classifier]:
        classifiers = self.graph.all(Classifier)
        for classifier in classifiers:
            if classifier_fq_name(classifier) == name:
                return classifier

        if not self.name_fallback:
            return None

        logger.warning("Classifier '%s' not found by fully qualified name, trying to resolve by name only", name)
        for classifier in classifiers:
            if classifier.name == name:
                return classifier
        return None

    def resolve(self, name: str) -> Optional[Classifier]:
        """
        Resolve a classifier by FQName (falling back to its bare name).

        Args:
            name: Fully qualified or bare classifier name

        Returns:
            The first matching classifier in graph order or None
        """
        return self._lookup(self.cache.classifiers, name, self._resolve_classifier)

    def resolve_reference(self, fq_name: str) -> Optional[Reference]:
        return self._lookup(
            self.cache.references,
            fq_name,
            lambda n: next((r for r in self.graph.all(Reference) if reference_fq_name(r) == n), None),
        )

    def resolve_attribute(self, fq_name: str) -> Optional[Attribute]:
        return self._lookup(
            self.cache.attributes,
            fq_name,
            lambda n: next((a for a in self.graph.all(Attribute) if attribute_fq_name(a) == n), None),
        )

    def resolve_operation(self, fq_name: str) -> Optional[Operation]:
        return self._lookup(
            self.cache.operations,
            fq_name,
            lambda n: next((o for o in self.graph.all(Operation) if operation_fq_name(o) == n), None),
        )

    def get_class_by_fq_name(self, name: str) -> Optional[ClassType]:
        """
        Resolve a name that must denote a class.

        Args:
            name: Fully qualified or bare class name

        Returns:
            The class, or None when unresolved or not a class (logged as an error)
        """
        classifier = self.resolve(name)
        if classifier is None:
            return None
        if not isinstance(classifier, ClassType):
            logger.error("Fully qualified name represents no class: %s", name)
            return None
        return classifier

    def relative_fq_name(self, classifier: Classifier) -> str:
        """
        Get the FQName of a classifier relative to the model package.

        Args:
            classifier: Classifier inside the model

        Returns:
            FQName without the leading model name

        Raises:
            ValueError: If the classifier is not inside the model package
        """
        fq_name = classifier_fq_name(classifier)
        model = self.graph.root_package()
        prefix = (model.name + NAMESPACE_SEPARATOR) if model is not None else None
        if prefix is None or not fq_name.startswith(prefix):
            raise ValueError(f"The classifier name does not start with model name - {fq_name}")
        return fq_name[len(prefix):]
