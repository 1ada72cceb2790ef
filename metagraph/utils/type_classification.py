"""
Data type classification.

Data types carry the qualified name of the Python type representing their
values. This module maps those names onto value kinds.
"""

from typing import Optional

from metagraph.core.element import DataType, EnumType
from metagraph.core.enums import InstanceKind

INTEGER_TYPES = frozenset({"int", "builtins.int", "numpy.int32", "numpy.int64"})
DECIMAL_TYPES = frozenset({"float", "builtins.float", "decimal.Decimal", "fractions.Fraction", "numpy.float64"})
BOOLEAN_TYPES = frozenset({"bool", "builtins.bool"})
STRING_TYPES = frozenset({"str", "builtins.str"})
TEXT_TYPES = frozenset({"typing.TextIO", "io.StringIO", "io.TextIOBase"})
BYTE_ARRAY_TYPES = frozenset({"bytes", "builtins.bytes", "bytearray", "memoryview"})
DATE_TYPES = frozenset({"datetime.date"})
TIMESTAMP_TYPES = frozenset({"datetime.datetime"})
TIME_TYPES = frozenset({"datetime.time"})


def _is_one_of(data_type: DataType, names: frozenset) -> bool:
    return data_type.instance_type is not None and data_type.instance_type in names


def is_integer(data_type: DataType) -> bool:
    return _is_one_of(data_type, INTEGER_TYPES)


def is_decimal(data_type: DataType) -> bool:
    return _is_one_of(data_type, DECIMAL_TYPES)


def is_numeric(data_type: DataType) -> bool:
    return is_integer(data_type) or is_decimal(data_type)


def is_boolean(data_type: DataType) -> bool:
    return _is_one_of(data_type, BOOLEAN_TYPES)


def is_string(data_type: DataType) -> bool:
    return _is_one_of(data_type, STRING_TYPES)


def is_text(data_type: DataType) -> bool:
    return _is_one_of(data_type, TEXT_TYPES)


def is_byte_array(data_type: DataType) -> bool:
    return _is_one_of(data_type, BYTE_ARRAY_TYPES)


def is_date(data_type: DataType) -> bool:
    return _is_one_of(data_type, DATE_TYPES)


def is_timestamp(data_type: DataType) -> bool:
    return _is_one_of(data_type, TIMESTAMP_TYPES)


def is_time(data_type: DataType) -> bool:
    return _is_one_of(data_type, TIME_TYPES)


def is_enumeration(data_type: DataType) -> bool:
    return isinstance(data_type, EnumType)


def classify(data_type: DataType) -> Optional[InstanceKind]:
    """
    Get the value kind of a data type.

    Args:
        data_type: Data type to classify

    Returns:
        The matching kind, or None for unknown instance types
    """
    if is_enumeration(data_type):
        return InstanceKind.ENUMERATION
    checks = (
        (is_integer, InstanceKind.INTEGER),
        (is_decimal, InstanceKind.DECIMAL),
        (is_boolean, InstanceKind.BOOLEAN),
        (is_string, InstanceKind.STRING),
        (is_text, InstanceKind.TEXT),
        (is_byte_array, InstanceKind.BINARY),
        (is_date, InstanceKind.DATE),
        (is_timestamp, InstanceKind.TIMESTAMP),
        (is_time, InstanceKind.TIME),
    )
    for check, kind in checks:
        if check(data_type):
            return kind
    return None
