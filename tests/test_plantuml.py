"""
Tests for PlantUML diagram generation.
"""

import os
import tempfile
import unittest
from metagraph.annotations.store import AnnotationStore
from metagraph.core.element import ClassType, EnumType, Operation
from metagraph.generators.plantuml import PlantUMLGenerator
from model_fixtures import OrderModel


class TestPlantUMLGenerator(unittest.TestCase):
    """Tests for the PlantUMLGenerator class."""

    def setUp(self):
        """Set up the order model and a generator."""
        self.store = AnnotationStore()
        self.model = OrderModel(self.store)
        self.generator = PlantUMLGenerator(self.model.graph, self.store, "Shop")

    def test_frame(self):
        """Test the diagram start, end and note."""
        code = self.generator.generate()
        self.assertTrue(code.startswith("@startuml\n' Shop Model"))
        self.assertTrue(code.endswith("@enduml"))
        self.assertIn("  Model Shop", code)
        self.assertNotIn("Version", code)

    def test_packages_and_classes(self):
        """Test classes are grouped by package with stereotypes."""
        code = self.generator.generate()
        self.assertIn("package shop.entities {", code)
        self.assertIn('  class "Product" as shop_entities_Product <<entity>> {', code)
        self.assertIn('  class "Shop" as shop_api_Shop <<accessPoint>> {', code)
        self.assertIn('  class "OrderInfo" as shop_api_OrderInfo <<mapped>> {', code)
        self.assertIn("    price : Decimal", code)
        self.assertIn("    placeOrder(product: Product) : OrderInfo", code)
        self.assertNotIn("package shop.types {", code)

    def test_class_kinds(self):
        """Test abstract classes, interfaces, enumerations and abstract operations."""
        base = self.model.api.add_classifier(ClassType("Base", abstract=True))
        self.model.api.add_classifier(ClassType("Named", interface=True))
        self.model.types.add_classifier(EnumType("Status", ["NEW", "DONE"]))
        run = base.add_operation(Operation("run"))
        self.store.add_fact(run, "abstract", "true")

        code = self.generator.generate()
        self.assertIn('  abstract class "Base" as shop_api_Base {', code)
        self.assertIn('  interface "Named" as shop_api_Named {', code)
        self.assertIn('  enum "Status" as shop_types_Status {', code)
        self.assertIn("    DONE", code)
        self.assertIn("    {abstract} run()", code)

    def test_stereotypes(self):
        """Test stereotypes follow the class facts."""
        self.store.add_fact(self.model.order_line, "mappedEntityType", "")
        self.store.add_fact(self.model.order_line, "accessPoint", "false")
        code = self.generator.generate()
        self.assertIn('  class "OrderLine" as shop_api_OrderLine <<mapped>> {', code)
        self.assertIn('  class "Category" as shop_entities_Category <<entity>> {', code)

    def test_relationships(self):
        """Test inheritance, containment and reference edges."""
        self.model.order_line.add_supertype(self.model.order_info)
        code = self.generator.generate()
        self.assertIn("shop_api_OrderLine --|> shop_api_OrderInfo", code)
        self.assertIn('shop_entities_Order *-- "0..*" shop_entities_OrderItem : items', code)
        self.assertIn('shop_entities_OrderItem --> "1..1" shop_entities_Product : product', code)

    def test_styles(self):
        """Test style presets."""
        self.assertIn("skinparam monochrome true", self.generator.generate("monochrome"))
        self.assertIn("BackgroundColor<<entity>> lightyellow", self.generator.generate("vibrant"))
        self.assertIn("skinparam monochrome false", self.generator.generate("unknown"))

    def test_save(self):
        """Test writing the diagram to a file."""
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "out", "shop.puml")
            self.assertEqual(self.generator.save(path), path)
            with open(path, encoding="utf-8") as f:
                self.assertEqual(f.read(), self.generator.generate())


if __name__ == '__main__':
    unittest.main()
