"""核心模块导出."""

from elasticquery.core.conditions import (
    ConditionNode,
    HashCondition,
    OperatorCondition,
    filter_condition,
    is_empty_value,
    parse_condition,
)
from elasticquery.core.constants import Endpoints, MetaFields, SortDirection
from elasticquery.core.dialect import DslDialect
from elasticquery.core.operators import Operator

__all__ = [
    "MetaFields",
    "Endpoints",
    "SortDirection",
    "Operator",
    "DslDialect",
    "ConditionNode",
    "HashCondition",
    "OperatorCondition",
    "parse_condition",
    "filter_condition",
    "is_empty_value",
]
