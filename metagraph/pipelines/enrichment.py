"""
Model enrichment pipeline implementation.

This module implements the pipeline that takes a loaded model graph,
validates it and enriches it with derived annotations:
1. Validating the model structure
2. Deriving mapped transfer object types from entity types
3. Propagating exposure from access points
4. Optionally checking, saving, registering and rendering the result
"""

import logging
from typing import Any, Iterable, Optional

from metagraph.config.settings import Settings
from metagraph.core.collaborators import ModelLoader, ModelRegistrar, ModelSaver, RuleValidator
from metagraph.core.model_graph import ModelGraph
from metagraph.generators.plantuml import PlantUMLGenerator
from metagraph.phases.exposure import ExposureAnnotator
from metagraph.phases.mapped_types import MappedTypeDeriver
from metagraph.phases.phase_utils import PhaseContext
from metagraph.pipelines.base_pipeline import Pipeline, PipelineResult
from metagraph.resolution.behaviour import MalformedModelError
from metagraph.utils.validation import ModelValidator

logger = logging.getLogger(__name__)


class EnrichmentPipeline(Pipeline):
    """
    Pipeline enriching a model graph with mapping and exposure annotations.

    The graph is either handed over directly or obtained from a ModelLoader.
    A malformed behaviour annotation aborts the run with a failed result;
    every other problem is reported as a message.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the enrichment pipeline.

        Args:
            settings: Settings to use (defaults when omitted)
        """
        super().__init__("Model Enrichment")
        self.settings = settings or Settings()
        self.graph: Optional[ModelGraph] = None
        self.context: Optional[PhaseContext] = None

    def setup(
        self,
        graph: Optional[ModelGraph] = None,
        loader: Optional[ModelLoader] = None,
        source: Any = None,
    ) -> bool:
        """
        Set up the pipeline with a model graph.

        Args:
            graph: Ready model graph
            loader: Loader used when no graph is given
            source: Source passed to the loader

        Returns:
            True if setup successful, False otherwise
        """
        if graph is None:
            if loader is None:
                self.add_error("Setup failed: neither a graph nor a loader was given")
                return False

            result = loader.load(source)
            for diagnostic in result.diagnostics:
                self.add_message(f"Loader: {diagnostic}")
            if not result.valid or result.graph is None:
                self.add_error(f"Setup failed: model loaded from {source} is invalid")
                return False
            graph = result.graph

        self.graph = graph
        self.context = PhaseContext.create(graph, self.settings)
        root = graph.root_package()
        self.add_message(f"Setting up pipeline for model: {root.name if root else '<empty>'}")
        return True

    def execute(
        self,
        entity_types: Optional[Iterable[str]] = None,
        rule_validator: Optional[RuleValidator] = None,
        script: Any = None,
        saver: Optional[ModelSaver] = None,
        target: Any = None,
        registrar: Optional[ModelRegistrar] = None,
        generate_diagram: bool = False,
    ) -> PipelineResult:
        """
        Execute the enrichment pipeline.

        Args:
            entity_types: FQNames of the entity types to derive mapped types
                from (every entity type when omitted)
            rule_validator: Optional acceptance check run on the enriched model
            script: Rule script passed to the rule validator
            saver: Optional saver for the enriched model
            target: Target passed to the saver
            registrar: Optional registrar publishing the enriched model
            generate_diagram: Render the enriched model as PlantUML

        Returns:
            Pipeline execution result
        """
        self._start_execution()

        if self.context is None:
            self.add_error("Pipeline is not set up")
            return self.create_result(False)

        context = self.context
        context.metadata["entity_types"] = list(entity_types) if entity_types is not None else None

        self.add_message("1. Validating model...")
        validator = ModelValidator(self.graph)
        if not validator.validate():
            for issue in validator.issues:
                self.add_error(issue)
            return self.create_result(False)
        for warning in validator.warnings:
            self.add_warning(warning)

        try:
            self.add_message("2. Deriving mapped transfer object types...")
            deriver = MappedTypeDeriver(context.store, context.resolver)
            mapped_result = self.run_phase("mapped_types", deriver, context)
            self.add_metric("derived_types", mapped_result.metrics.get("derived_types", 0))

            self.add_message("3. Propagating exposure from access points...")
            annotator = ExposureAnnotator(
                context.store, context.resolver, context.engine, context.behaviours, self.settings
            )
            exposure_result = self.run_phase("exposure", annotator, context)
            self.add_metric("access_points", exposure_result.metrics.get("access_points", 0))
            self.add_metric("exposed_elements", exposure_result.metrics.get("exposure_facts_added", 0))

        except MalformedModelError as e:
            self.add_error(f"Malformed model: {str(e)}")
            return self.create_result(False)

        finally:
            context.resolver.invalidate()

        success = True

        if rule_validator is not None:
            self.add_message("4. Running rule validation...")
            check = rule_validator.validate(self.graph, script)
            for message in check.messages:
                self.add_message(f"Rule validation: {message}")
            self.add_metric("rule_validation_passed", check.passed)
            if not check.passed:
                self.add_error("Rule validation failed")
                success = False

        if saver is not None and success:
            saver.save(self.graph, target)
            self.add_message(f"Model saved to {target}")

        if registrar is not None and success:
            root = self.graph.root_package()
            registrar.register(self.graph, root.name if root else "", self.graph.version())
            self.add_message("Model registered")

        plantuml_code = None
        if generate_diagram:
            root = self.graph.root_package()
            generator = PlantUMLGenerator(self.graph, context.store, root.name if root else "Model")
            plantuml_code = generator.generate(style=self.settings.get("output", "diagram_style"))

        self.add_message(
            f"Pipeline completed. Derived {self.metrics.get('derived_types', 0)} mapped types, "
            f"processed {self.metrics.get('access_points', 0)} access points"
        )
        self._end_execution()
        result = self.create_result(success)
        if plantuml_code is not None:
            result.add_output("plantuml_code", plantuml_code)
        return result
