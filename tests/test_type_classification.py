"""
Tests for data type classification.
"""

import unittest
from metagraph.core.element import DataType, EnumType
from metagraph.core.enums import InstanceKind
from metagraph.utils import type_classification as types


class TestTypeClassification(unittest.TestCase):
    """Tests for the type classification functions."""

    def test_classify(self):
        """Test classifying instance type names."""
        expected = {
            "int": InstanceKind.INTEGER,
            "decimal.Decimal": InstanceKind.DECIMAL,
            "float": InstanceKind.DECIMAL,
            "bool": InstanceKind.BOOLEAN,
            "str": InstanceKind.STRING,
            "typing.TextIO": InstanceKind.TEXT,
            "bytes": InstanceKind.BINARY,
            "datetime.date": InstanceKind.DATE,
            "datetime.datetime": InstanceKind.TIMESTAMP,
            "datetime.time": InstanceKind.TIME,
        }
        for instance_type, kind in expected.items():
            with self.subTest(instance_type=instance_type):
                self.assertEqual(types.classify(DataType("T", instance_type)), kind)

    def test_unknown_types(self):
        """Test unknown or missing instance types are not classified."""
        self.assertIsNone(types.classify(DataType("T", "uuid.UUID")))
        self.assertIsNone(types.classify(DataType("T")))
        self.assertFalse(types.is_string(DataType("T")))

    def test_enumeration(self):
        """Test enumerations are classified by their kind of data type."""
        self.assertTrue(types.is_enumeration(EnumType("Status", ["NEW"])))
        self.assertEqual(types.classify(EnumType("Status")), InstanceKind.ENUMERATION)
        self.assertFalse(types.is_enumeration(DataType("T", "str")))

    def test_numeric(self):
        """Test integers and decimals are numeric."""
        self.assertTrue(types.is_numeric(DataType("T", "numpy.int64")))
        self.assertTrue(types.is_numeric(DataType("T", "fractions.Fraction")))
        self.assertFalse(types.is_numeric(DataType("T", "str")))


if __name__ == '__main__':
    unittest.main()
