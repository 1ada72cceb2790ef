"""
Tests for exposure propagation.
"""

import unittest
from metagraph.annotations.facts import BehaviourFact
from metagraph.annotations.store import AnnotationStore
from metagraph.config.settings import Settings
from metagraph.core.element import Annotation, ClassType, Operation, Package
from metagraph.phases.exposure import ExposureAnnotator, same_element
from metagraph.phases.phase_utils import PhaseContext
from metagraph.resolution.behaviour import BehaviourResolver, MalformedModelError
from metagraph.resolution.names import NameResolver
from metagraph.resolution.operations import OperationResolutionEngine
from model_fixtures import OrderModel

ACCESS_POINT = "shop.api.Shop"
GRAPH = "shop.api.Shop#orders"


class TestSameElement(unittest.TestCase):
    """Tests for element identity by name."""

    def test_same_element(self):
        """Test elements are compared by identity or FQName."""
        first = Package("m").add_classifier(ClassType("A"))
        second = Package("m").add_classifier(ClassType("A"))
        target = ClassType("T")

        self.assertTrue(same_element(first, first))
        self.assertTrue(same_element(first, second))
        self.assertTrue(same_element(first.add_reference("r", target), second.add_reference("r", target)))
        self.assertFalse(same_element(first, first.add_reference("A", target)))
        self.assertFalse(same_element(first, None))
        self.assertTrue(same_element(None, None))


class TestExposureAnnotator(unittest.TestCase):
    """Tests for the ExposureAnnotator class."""

    def setUp(self):
        """Set up the order model and an annotator."""
        self.store = AnnotationStore()
        self.model = OrderModel(self.store)
        self.annotator = self.create_annotator()

    def create_annotator(self, settings=None) -> ExposureAnnotator:
        resolver = NameResolver(self.model.graph)
        return ExposureAnnotator(
            self.store,
            resolver,
            OperationResolutionEngine(self.store),
            BehaviourResolver(self.store, resolver),
            settings,
        )

    def exposed_by(self, element):
        return [a.details["value"] for a in self.store.get_annotations(element, "exposedBy")]

    def exposed_graphs(self, element):
        return [a.details["value"] for a in self.store.get_annotations(element, "exposedGraph")]

    def add_graph_operation(self, name, **behaviour) -> Operation:
        operation = self.model.order_info.add_operation(Operation(name))
        if behaviour:
            self.store.add_typed_fact(operation, BehaviourFact(**behaviour))
        return operation

    def test_graph_references(self):
        """Test exposed services are not graph references."""
        self.assertEqual(self.annotator.graph_references(self.model.shop), [self.model.shop_orders])

    def test_access_point_is_exposed(self):
        """Test the access point, its references and its operations are exposed."""
        self.annotator.annotate(self.model.shop)

        self.assertEqual(self.exposed_by(self.model.shop), [ACCESS_POINT])
        self.assertEqual(self.exposed_by(self.model.shop_orders), [ACCESS_POINT])
        self.assertEqual(self.exposed_by(self.model.place_order), [ACCESS_POINT])
        self.assertEqual(self.exposed_by(self.model.place_order.parameters[0]), [ACCESS_POINT])
        self.assertEqual(self.exposed_graphs(self.model.place_order), [])

    def test_operation_types_are_exposed(self):
        """Test parameter, return and exception types are exposed."""
        self.annotator.annotate(self.model.shop)

        self.assertEqual(self.exposed_by(self.model.product), [ACCESS_POINT])
        self.assertEqual(self.exposed_by(self.model.product.feature("name")), [ACCESS_POINT])
        self.assertEqual(self.exposed_by(self.model.fault), [ACCESS_POINT])
        self.assertEqual(self.exposed_by(self.model.order_info), [ACCESS_POINT])

    def test_data_type_operation_types(self):
        """Test data types in an operation signature are reported and not exposed."""
        count = self.model.shop.add_operation(
            Operation("count", return_type=self.model.decimal, exceptions=[self.model.string])
        )
        name = count.add_parameter("name", self.model.string)

        with self.assertLogs("metagraph.phases.exposure", level="ERROR") as logs:
            self.annotator.annotate(self.model.shop)

        self.assertEqual(len(logs.output), 3)
        self.assertIn("Input parameters must be transfer object types: name (shop.api.Shop#count)", logs.output[0])
        self.assertIn("Output parameter must be transfer object type: shop.api.Shop#count", logs.output[1])
        self.assertIn("Fault parameters must be transfer object types: shop.api.Shop#count", logs.output[2])
        self.assertEqual(self.exposed_by(count), [ACCESS_POINT])
        self.assertEqual(self.exposed_by(name), [])
        self.assertEqual(self.exposed_by(self.model.decimal), [])
        self.assertEqual(self.exposed_by(self.model.string), [])

    def test_graph_exposure(self):
        """Test the graph root gets exposedGraph while contained children do not."""
        self.annotator.annotate(self.model.shop)

        self.assertEqual(self.exposed_graphs(self.model.order_info), [GRAPH])
        self.assertEqual(self.exposed_by(self.model.order_info.feature("number")), [ACCESS_POINT])
        self.assertEqual(self.exposed_graphs(self.model.order_info.feature("number")), [])
        self.assertEqual(self.exposed_by(self.model.order_info_product), [ACCESS_POINT])
        self.assertEqual(self.exposed_by(self.model.order_line), [ACCESS_POINT])
        self.assertEqual(self.exposed_graphs(self.model.order_line), [])
        self.assertEqual(self.exposed_by(self.model.order_line.feature("quantity")), [ACCESS_POINT])

    def test_mapped_entity_is_exposed(self):
        """Test the entity type behind a mapped type is exposed."""
        self.annotator.annotate(self.model.shop)
        self.assertEqual(self.exposed_by(self.model.order), [ACCESS_POINT])
        self.assertEqual(self.exposed_by(self.model.category), [])

    def test_supertypes_receive_graph(self):
        """Test supertypes of a graph root are exposed through the graph."""
        info = self.model.api.add_classifier(ClassType("Info"))
        info.add_attribute("created", self.model.string)
        self.model.order_info.add_supertype(info)

        self.annotator.annotate(self.model.shop)

        self.assertEqual(self.exposed_by(info), [ACCESS_POINT])
        self.assertEqual(self.exposed_graphs(info), [GRAPH])
        self.assertEqual(self.exposed_by(info.feature("created")), [ACCESS_POINT])

    def test_unbound_operations_of_reached_types(self):
        """Test operations of types reached through operations are not exposed."""
        recalculate = self.model.product.add_operation(Operation("recalculate"))
        self.annotator.annotate(self.model.shop)
        self.assertEqual(self.exposed_by(recalculate), [])

    def test_graph_operations(self):
        """Test operations of the graph root depending on their behaviour."""
        plain = self.add_graph_operation("refresh")
        own = self.add_graph_operation("getOrders", type="get", owner=GRAPH)
        other = self.add_graph_operation("getService", type="get", owner="shop.api.Shop#service")
        bound = self.add_graph_operation("touch", type="get", owner="shop.api.Shop#service")
        self.store.add_fact(bound, "bound", "true")
        classifier_owned = self.add_graph_operation("update", type="update", owner="shop.api.OrderInfo")

        self.annotator.annotate(self.model.shop)

        for operation in (plain, own, bound):
            with self.subTest(operation=operation.name):
                self.assertEqual(self.exposed_by(operation), [ACCESS_POINT])
                self.assertEqual(self.exposed_graphs(operation), [GRAPH])
        for operation in (other, classifier_owned):
            with self.subTest(operation=operation.name):
                self.assertEqual(self.exposed_by(operation), [])

    def test_malformed_behaviour_raises(self):
        """Test malformed behaviour owners abort propagation."""
        self.add_graph_operation("broken", type="set", owner="shop.api.Shop")
        with self.assertRaises(MalformedModelError):
            self.annotator.annotate(self.model.shop)

    def test_include_unbound_disabled(self):
        """Test access point operations are not exposed when unbound operations are excluded."""
        settings = Settings()
        settings.set("exposure", "include_unbound", False)
        annotator = self.create_annotator(settings)

        annotator.annotate(self.model.shop)

        self.assertEqual(self.exposed_by(self.model.place_order), [])
        self.assertEqual(self.exposed_by(self.model.fault), [])
        self.assertEqual(self.exposed_graphs(self.model.order_info), [GRAPH])

    def test_reference_cycles_terminate(self):
        """Test containment cycles do not loop forever."""
        self.model.order_line.add_reference("parent", self.model.order_info, containment=True)
        self.annotator.annotate(self.model.shop)
        self.assertEqual(self.exposed_by(self.model.order_line.feature("parent")), [ACCESS_POINT])

    def test_several_access_points(self):
        """Test elements record every access point exposing them."""
        backoffice = self.model.api.add_classifier(ClassType("Backoffice"))
        self.store.add_fact(backoffice, "accessPoint", "true")
        backoffice.add_reference("orders", self.model.order_info, upper=-1)

        access_points = self.annotator.annotate_all()

        self.assertEqual(access_points, [self.model.shop, backoffice])
        self.assertEqual(self.exposed_by(self.model.order_info), [ACCESS_POINT, "shop.api.Backoffice"])
        self.assertEqual(self.exposed_graphs(self.model.order_info), [GRAPH, "shop.api.Backoffice#orders"])
        self.assertEqual(self.annotator.get_access_points_of(self.model.order_info), [self.model.shop, backoffice])

    def test_queries(self):
        """Test reading exposure back."""
        self.annotator.annotate_all()

        self.assertEqual(self.annotator.get_access_points(), [self.model.shop])
        self.assertEqual(self.annotator.get_exposed_graphs_of(self.model.order_info), [self.model.shop_orders])
        self.assertEqual(self.annotator.get_exposed_graphs_of(self.model.order_line), [])
        self.assertEqual(self.annotator.get_exposed_operations(self.model.shop), [self.model.place_order])

    def test_get_resolved_exposed_by(self):
        """Test resolving exposedBy annotations."""
        self.annotator.annotate(self.model.shop)
        annotation = self.store.get_annotation(self.model.order_info, "exposedBy")
        self.assertIs(self.annotator.get_resolved_exposed_by(annotation), self.model.shop)

        other = Annotation(self.store.annotation_uri("entity"), {"value": "true"})
        self.assertIsNone(self.annotator.get_resolved_exposed_by(other))

        invalid = Annotation(self.store.annotation_uri("exposedBy"), {"value": "shop.api.OrderInfo"})
        with self.assertLogs("metagraph.phases.exposure", level="ERROR"):
            self.assertIsNone(self.annotator.get_resolved_exposed_by(invalid))

    def test_execute_is_idempotent(self):
        """Test a second run adds no facts."""
        context = PhaseContext.create(self.model.graph)
        annotator = ExposureAnnotator(context.store, context.resolver, context.engine, context.behaviours)

        first = annotator.execute(context)
        second = annotator.execute(context)

        self.assertTrue(first.success)
        self.assertEqual(first.metrics["access_points"], 1)
        self.assertGreater(first.metrics["exposure_facts_added"], 0)
        self.assertEqual(second.metrics["exposure_facts_added"], 0)
        self.assertEqual(first.artifacts["access_points"], [ACCESS_POINT])


if __name__ == '__main__':
    unittest.main()
