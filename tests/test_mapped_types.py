"""
Tests for mapped transfer object type derivation.
"""

import unittest
from metagraph.annotations.store import AnnotationStore
from metagraph.core.element import ClassType
from metagraph.phases.mapped_types import MappedTypeDeriver
from metagraph.phases.phase_utils import PhaseContext
from metagraph.resolution.names import NameResolver
from model_fixtures import OrderModel


class TestMappedTypeDeriver(unittest.TestCase):
    """Tests for the MappedTypeDeriver class."""

    def setUp(self):
        """Set up the order model and a deriver."""
        self.store = AnnotationStore()
        self.model = OrderModel(self.store)
        self.resolver = NameResolver(self.model.graph)
        self.deriver = MappedTypeDeriver(self.store, self.resolver)

    def test_reference_cycle_terminates(self):
        """Test entities referencing each other are both derived."""
        marked = self.deriver.derive_from(self.model.product)

        self.assertEqual(marked, [self.model.product, self.model.category])
        for cls in (self.model.product, self.model.category):
            self.assertTrue(self.deriver.is_mapped_transfer_object_type(cls))
            for feature in cls.all_features():
                self.assertEqual(self.store.get_value(feature, "binding"), feature.name)

    def test_records_package_name(self):
        """Test the mapped entity type value is the owning package name."""
        self.deriver.derive_from(self.model.product)
        self.assertEqual(self.store.get_value(self.model.product, "mappedEntityType"), "shop.entities")

    def test_non_entity_is_ignored(self):
        """Test classes not annotated as entity are not derived."""
        self.assertEqual(self.deriver.derive_from(self.model.shop), [])
        self.assertFalse(self.deriver.is_mapped_transfer_object_type(self.model.shop))

    def test_non_entity_targets_are_not_derived(self):
        """Test references to non-entity classes stop the walk."""
        self.model.product.add_reference("shop", self.model.shop)
        marked = self.deriver.derive_from(self.model.product)
        self.assertNotIn(self.model.shop, marked)
        self.assertEqual(self.store.get_value(self.model.product.feature("shop"), "binding"), "shop")

    def test_idempotent(self):
        """Test a second derivation adds nothing."""
        self.deriver.derive_from(self.model.order)
        count = len(self.model.order.annotations)

        self.assertEqual(self.deriver.derive_from(self.model.order), [])
        self.assertEqual(len(self.model.order.annotations), count)

    def test_existing_binding_is_kept(self):
        """Test features already bound keep their binding."""
        self.store.add_fact(self.model.product.feature("name"), "binding", "title")
        self.deriver.derive_from(self.model.product)
        self.assertEqual(self.store.get_annotations(self.model.product.feature("name"), "binding")[0].details,
                         {"value": "title"})
        self.assertEqual(len(self.store.get_annotations(self.model.product.feature("name"), "binding")), 1)

    def test_shared_visited_set(self):
        """Test classes visited in an earlier call are skipped."""
        visited = set()
        first = self.deriver.derive_from(self.model.product, visited)
        second = self.deriver.derive_from(self.model.order, visited)

        self.assertEqual(first, [self.model.product, self.model.category])
        self.assertEqual(second, [self.model.order, self.model.order_item])
        self.assertIn(id(self.model.order_item), visited)

    def test_supertypes_are_derived(self):
        """Test entity supertypes are derived with their features."""
        base = self.model.entities.add_classifier(ClassType("Base"))
        base.add_attribute("id", self.model.string)
        self.store.add_fact(base, "entity", "true")
        self.model.category.add_supertype(base)

        marked = self.deriver.derive_from(self.model.category)

        self.assertIn(base, marked)
        self.assertEqual(self.store.get_value(base.feature("id"), "binding"), "id")

    def test_get_mapped_entity_type(self):
        """Test resolving the mapped entity type."""
        self.assertIs(self.deriver.get_mapped_entity_type(self.model.order_info), self.model.order)
        self.assertIsNone(self.deriver.get_mapped_entity_type(self.model.shop))

        self.deriver.derive_from(self.model.category)
        self.assertIsNone(self.deriver.get_mapped_entity_type(self.model.category))

    def test_invalid_mapped_entity_type(self):
        """Test mappings onto non-entity classes are logged as errors."""
        self.store.add_fact(self.model.order_line, "mappedEntityType", "shop.api.Shop")
        with self.assertLogs("metagraph.phases.mapped_types", level="ERROR"):
            self.assertIsNone(self.deriver.get_mapped_entity_type(self.model.order_line))

    def test_mapped_entity_type_is_cached(self):
        """Test mapped entity lookups are memoized until invalidated."""
        self.assertIs(self.deriver.get_mapped_entity_type(self.model.order_info), self.model.order)
        self.store.get_annotation(self.model.order_info, "mappedEntityType").details["value"] = "shop.api.Shop"
        self.assertIs(self.deriver.get_mapped_entity_type(self.model.order_info), self.model.order)

        self.resolver.invalidate()
        with self.assertLogs("metagraph.phases.mapped_types", level="ERROR"):
            self.assertIsNone(self.deriver.get_mapped_entity_type(self.model.order_info))

    def test_get_mapped_features(self):
        """Test resolving bound features on the mapped entity type."""
        number = self.model.order_info.feature("number")
        self.store.add_fact(number, "binding", "number")
        self.store.add_fact(self.model.order_info_lines, "binding", "items")
        self.store.add_fact(self.model.order_info_product, "binding", "number")

        self.assertIs(self.deriver.get_mapped_attribute(number), self.model.order.feature("number"))
        self.assertIs(self.deriver.get_mapped_reference(self.model.order_info_lines), self.model.order_items)
        with self.assertLogs("metagraph.phases.mapped_types", level="WARNING"):
            self.assertIsNone(self.deriver.get_mapped_reference(self.model.order_info_product))

    def test_get_mapped_feature_without_mapping(self):
        """Test unbound features and unmapped owners."""
        self.assertIsNone(self.deriver.get_mapped_attribute(self.model.order_info.feature("number")))

        quantity = self.model.order_line.feature("quantity")
        self.store.add_fact(quantity, "binding", "quantity")
        with self.assertLogs("metagraph.phases.mapped_types", level="WARNING"):
            self.assertIsNone(self.deriver.get_mapped_attribute(quantity))

    def test_all_mapped_transfer_object_types(self):
        """Test listing mapped transfer object types in graph order."""
        self.assertEqual(self.deriver.all_mapped_transfer_object_types(), [self.model.order_info])
        self.deriver.derive_from(self.model.product)
        self.assertEqual(
            self.deriver.all_mapped_transfer_object_types(),
            [self.model.product, self.model.category, self.model.order_info],
        )

    def test_execute_with_entity_types(self):
        """Test executing the phase from named entity types."""
        context = PhaseContext.create(
            self.model.graph, entity_types=["shop.entities.Order", "shop.entities.Missing"]
        )
        deriver = MappedTypeDeriver(context.store, context.resolver)
        result = deriver.execute(context)

        self.assertTrue(result.success)
        self.assertEqual(result.metrics["requested_entity_types"], 1)
        self.assertEqual(result.metrics["derived_types"], 4)
        self.assertEqual(
            result.artifacts["derived_types"],
            ["shop.entities.Order", "shop.entities.OrderItem", "shop.entities.Product", "shop.entities.Category"],
        )
        self.assertIn("Entity type not found: shop.entities.Missing", result.messages)

    def test_execute_with_all_entity_types(self):
        """Test executing the phase without named entity types."""
        context = PhaseContext.create(self.model.graph)
        result = MappedTypeDeriver(context.store, context.resolver).execute(context)

        self.assertEqual(result.metrics["requested_entity_types"], 4)
        self.assertEqual(result.metrics["derived_types"], 4)


if __name__ == '__main__':
    unittest.main()
