"""
Tests for model validation.
"""

import unittest
from metagraph.annotations.store import AnnotationStore
from metagraph.core.element import ClassType, Operation
from metagraph.utils.validation import ModelValidator
from model_fixtures import OrderModel


class TestModelValidator(unittest.TestCase):
    """Tests for the ModelValidator class."""

    def setUp(self):
        """Set up the order model."""
        self.model = OrderModel(AnnotationStore())
        self.validator = ModelValidator(self.model.graph)

    def test_valid_model(self):
        """Test the order model is valid."""
        self.assertTrue(self.validator.validate())
        self.assertEqual(self.validator.issues, [])
        self.assertEqual(self.validator.warnings, [])

    def test_duplicate_classifier_names(self):
        """Test duplicate FQNames are issues."""
        self.model.entities.add_classifier(ClassType("Product"))
        self.assertFalse(self.validator.validate())
        self.assertIn("Duplicate classifier name: 'shop.entities.Product'", self.validator.issues)

    def test_duplicate_ids(self):
        """Test duplicate element ids are issues."""
        self.model.product.element_id = "_same"
        self.model.category.element_id = "_same"
        self.assertFalse(self.validator.validate())
        self.assertEqual(len(self.validator.issues), 1)
        self.assertIn("_same", self.validator.issues[0])

    def test_inheritance_cycle(self):
        """Test inheritance cycles are issues."""
        self.model.product.add_supertype(self.model.category)
        self.model.category.add_supertype(self.model.product)
        self.assertFalse(self.validator.validate())
        self.assertEqual(len(self.validator.issues), 2)

    def test_operation_overloading(self):
        """Test a class may declare an operation name once."""
        self.model.shop.add_operation(Operation("placeOrder"))
        self.assertFalse(self.validator.validate())
        self.assertIn("Operation overloading is not allowed: shop.api.Shop#placeOrder", self.validator.issues)

    def test_reference_targets(self):
        """Test references without class targets are warnings."""
        self.model.product.add_reference("nothing")
        self.model.product.add_reference("text", self.model.string)
        self.assertTrue(self.validator.validate())
        self.assertIn("Reference without target: shop.entities.Product#nothing", self.validator.warnings)
        self.assertIn("Reference target is not a class: shop.entities.Product#text", self.validator.warnings)

    def test_exception_types(self):
        """Test exceptions that are not classes are warnings."""
        self.model.place_order.exceptions.append(self.model.string)
        self.assertTrue(self.validator.validate())
        self.assertEqual(len(self.validator.warnings), 1)

    def test_containment_cycle(self):
        """Test containment cycles are warnings."""
        self.model.order_item.add_reference("order", self.model.order, containment=True)
        self.assertTrue(self.validator.validate())
        self.assertIn("Containment cycle detected involving class: shop.entities.Order", self.validator.warnings)
        self.assertIn("Containment cycle detected involving class: shop.entities.OrderItem", self.validator.warnings)

    def test_revalidation_resets_results(self):
        """Test validate() starts from a clean state."""
        duplicate = self.model.entities.add_classifier(ClassType("Product"))
        self.assertFalse(self.validator.validate())
        self.model.entities.classifiers.remove(duplicate)
        self.assertTrue(self.validator.validate())
        self.assertEqual(self.validator.issues, [])


if __name__ == '__main__':
    unittest.main()
