"""
PlantUML diagram generation module.

This module provides the PlantUMLGenerator class for converting
a model graph into PlantUML class diagram code, showing the
annotations derived by enrichment as stereotypes.
"""

import os
import re
from typing import List, Optional

from metagraph.annotations.store import AnnotationStore
from metagraph.core.element import ClassType, Classifier, EnumType, Package
from metagraph.core.model_graph import ModelGraph
from metagraph.resolution.names import classifier_fq_name, package_fq_name


class PlantUMLGenerator:
    """
    Generator for PlantUML diagrams from model graphs.

    This class converts a ModelGraph into PlantUML code that
    can be rendered into a UML class diagram.
    """

    def __init__(self, graph: ModelGraph, store: AnnotationStore, model_name: str):
        """
        Initialize the PlantUML generator.

        Args:
            graph: The model graph
            store: Annotation store used to read stereotypes
            model_name: Name of the model
        """
        self.graph = graph
        self.store = store
        self.model_name = model_name

    def generate(self, style: Optional[str] = None) -> str:
        """
        Generate PlantUML code for the model.

        Args:
            style: Optional styling preset ('default', 'monochrome', 'vibrant')

        Returns:
            PlantUML code as string
        """
        lines = ["@startuml", f"' {self.model_name} Model"]
        lines.extend(self._get_style_directives(style or 'default'))
        lines.append("")

        for package in self.graph.all(Package):
            self._add_package(lines, package)

        lines.append("")
        self._add_relationships(lines)

        lines.append("")
        lines.append("note as ModelSource")
        lines.append(f"  Model {self.model_name}")
        version = self.graph.version()
        if version:
            lines.append(f"  Version {version}")
        lines.append("end note")

        lines.append("@enduml")

        return "\n".join(lines)

    def save(self, path: str, style: Optional[str] = None) -> str:
        """
        Generate the diagram and write it to a file.

        Args:
            path: Target file path (parent directories are created)
            style: Optional styling preset

        Returns:
            The path written
        """
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.generate(style))
        return path

    def _get_style_directives(self, style: str) -> List[str]:
        """
        Get PlantUML style directives for the diagram.

        Args:
            style: Style name ('default', 'monochrome', 'vibrant')

        Returns:
            List of style directive lines
        """
        common = [
            "skinparam classAttributeIconSize 0",
            "skinparam packageStyle rectangle",
        ]
        styles = {
            'default': [
                "skinparam monochrome false",
                *common,
                "skinparam shadowing false",
            ],
            'monochrome': [
                "skinparam monochrome true",
                *common,
                "skinparam shadowing false",
            ],
            'vibrant': [
                "skinparam monochrome false",
                *common,
                "skinparam shadowing true",
                "skinparam class {",
                "  BackgroundColor<<entity>> lightyellow",
                "  BackgroundColor<<mapped>> lightblue",
                "  BackgroundColor<<accessPoint>> #f8d6d6",
                "}",
            ],
        }

        return styles.get(style, styles['default'])

    def _stereotypes(self, cls: ClassType) -> str:
        stereotypes = []
        if self.store.is_entity_type(cls):
            stereotypes.append("<<entity>>")
        if self.store.is_access_point(cls):
            stereotypes.append("<<accessPoint>>")
        if self.store.is_mapped_type(cls):
            stereotypes.append("<<mapped>>")
        return " ".join(stereotypes)

    def _add_package(self, lines: List[str], package: Package) -> None:
        """
        Add a package with its classes and enumerations to the diagram.

        Args:
            lines: List of diagram lines (modified in place)
            package: Package to add
        """
        classifiers = [c for c in package.classifiers if isinstance(c, (ClassType, EnumType))]
        if not classifiers:
            return

        lines.append(f"package {package_fq_name(package)} {{")
        for classifier in classifiers:
            alias = self._alias(classifier)
            if isinstance(classifier, EnumType):
                lines.append(f'  enum "{classifier.name}" as {alias} {{')
                for literal in classifier.literals:
                    lines.append(f"    {literal}")
                lines.append("  }")
                continue

            if classifier.interface:
                kind = "interface"
            elif classifier.abstract:
                kind = "abstract class"
            else:
                kind = "class"
            stereotypes = self._stereotypes(classifier)
            header = f'  {kind} "{classifier.name}" as {alias}'
            lines.append(f"{header} {stereotypes} {{" if stereotypes else f"{header} {{")

            for attribute in classifier.attributes:
                type_name = attribute.type.name if attribute.type is not None else "?"
                lines.append(f"    {attribute.name} : {type_name}")

            for operation in classifier.operations:
                params = ", ".join(
                    f"{p.name}: {p.type.name if p.type is not None else '?'}" for p in operation.parameters
                )
                signature = f"{operation.name}({params})"
                if operation.return_type is not None:
                    signature += f" : {operation.return_type.name}"
                prefix = "{abstract} " if self.store.is_abstract(operation) else ""
                lines.append(f"    {prefix}{signature}")

            lines.append("  }")
        lines.append("}")

    def _add_relationships(self, lines: List[str]) -> None:
        """
        Add inheritance, containment and reference edges to the diagram.

        Args:
            lines: List of diagram lines (modified in place)
        """
        for cls in self.graph.all(ClassType):
            source = self._alias(cls)
            for supertype in cls.supertypes:
                lines.append(f"{source} --|> {self._alias(supertype)}")

            for reference in cls.references:
                if reference.reference_type is None:
                    continue
                target = self._alias(reference.reference_type)
                upper = "*" if reference.upper == -1 else str(reference.upper)
                multiplicity = f"{reference.lower}..{upper}"
                arrow = "*--" if reference.containment else "-->"
                lines.append(f'{source} {arrow} "{multiplicity}" {target} : {reference.name}')

    def _alias(self, classifier: Classifier) -> str:
        """
        Get a PlantUML-safe alias for a classifier.

        Args:
            classifier: Classifier to name

        Returns:
            Alias derived from the FQName
        """
        result = re.sub(r"[^a-zA-Z0-9_]", "_", classifier_fq_name(classifier))
        if result and result[0].isdigit():
            result = "_" + result
        return result if result else "Item"
