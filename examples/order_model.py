"""
Order management enrichment example.

This example demonstrates how to build a small model with the metagraph
package, enrich it with mapped transfer object types and exposure
annotations, and render the result as a PlantUML diagram.
"""

import os
import argparse
import logging

from metagraph.annotations.store import AnnotationStore
from metagraph.config.settings import Settings
from metagraph.core.element import ClassType, DataType, Operation, Package
from metagraph.core.model_graph import ModelGraph
from metagraph.pipelines.enrichment import EnrichmentPipeline


def build_model(store: AnnotationStore) -> ModelGraph:
    """Build the order management model."""
    model = Package("demo")
    types = model.add_package(Package("types"))
    entities = model.add_package(Package("entities"))
    services = model.add_package(Package("services"))

    string = types.add_classifier(DataType("String", "str"))
    decimal = types.add_classifier(DataType("Decimal", "decimal.Decimal"))

    order = entities.add_classifier(ClassType("Order"))
    item = entities.add_classifier(ClassType("OrderItem"))
    customer = entities.add_classifier(ClassType("Customer"))
    order.add_attribute("orderNumber", string)
    order.add_reference("items", item, containment=True, upper=-1)
    order.add_reference("customer", customer, lower=1)
    item.add_attribute("price", decimal)
    customer.add_attribute("name", string)
    for cls in (order, item, customer):
        store.add_fact(cls, "entity", "true")

    shop = services.add_classifier(ClassType("Shop"))
    store.add_fact(shop, "accessPoint", "true")
    shop.add_reference("orders", order, upper=-1)
    place = shop.add_operation(Operation("placeOrder", return_type=order))
    place.add_parameter("customer", customer)

    return ModelGraph([model])


def main():
    """Run the example."""
    parser = argparse.ArgumentParser(description="Model Enrichment Example")

    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Directory to save output files"
    )

    parser.add_argument(
        "--style",
        type=str,
        default="vibrant",
        help="Diagram style (default, monochrome, vibrant)"
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    os.makedirs(args.output_dir, exist_ok=True)

    settings = Settings()
    settings.set("output", "diagram_style", args.style)

    graph = build_model(AnnotationStore(settings=settings))
    pipeline = EnrichmentPipeline(settings)
    if not pipeline.setup(graph=graph):
        print("Setup failed.")
        return

    result = pipeline.execute(entity_types=["demo.entities.Order"], generate_diagram=True)

    if result.success:
        diagram_file = os.path.join(args.output_dir, "demo_model.puml")
        with open(diagram_file, "w", encoding="utf-8") as f:
            f.write(result.outputs["plantuml_code"])

        print("\nEnrichment completed successfully!")
        print(f"Mapped types derived: {result.metrics.get('derived_types', 0)}")
        print(f"Access points processed: {result.metrics.get('access_points', 0)}")
        print(f"Exposure facts added: {result.metrics.get('exposed_elements', 0)}")
        print(f"Execution time: {result.execution_time:.2f} seconds")
        print(f"PlantUML diagram: {diagram_file}")
    else:
        print("\nEnrichment failed.")
        for message in result.messages:
            if message.startswith("ERROR"):
                print(f"  {message}")


if __name__ == "__main__":
    main()
