"""条件操作符定义模块."""

from __future__ import annotations

from enum import Enum

from elasticquery.exceptions import UnsupportedOperatorError


class Operator(str, Enum):
    """条件树支持的操作符."""

    NOT = "not"
    AND = "and"
    OR = "or"
    BETWEEN = "between"
    NOT_BETWEEN = "not between"
    IN = "in"
    NOT_IN = "not in"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    MATCH = "match"
    MATCH_PHRASE = "match_phrase"

    @classmethod
    def from_tag(cls, tag: str) -> Operator:
        """将操作符标签解析为 Operator.

        大小写不敏感，支持符号别名（<, <=, >, >=）和下划线写法（not_in）。

        Raises:
            UnsupportedOperatorError: 未知或不支持的操作符
        """
        if isinstance(tag, Operator):
            return tag
        normalized = " ".join(str(tag).strip().lower().split())
        if normalized in OPERATOR_LOOKUP:
            return OPERATOR_LOOKUP[normalized]
        if normalized in UNSUPPORTED_OPERATORS:
            raise UnsupportedOperatorError(
                f"Operator '{normalized}' is not supported by Elasticsearch, "
                f"use 'match' or 'match_phrase' instead."
            )
        raise UnsupportedOperatorError(f"Found unknown operator in query: {tag}")


# 标签 -> 操作符，包含别名
OPERATOR_LOOKUP: dict[str, Operator] = {
    **{op.value: op for op in Operator},
    "not_between": Operator.NOT_BETWEEN,
    "not_in": Operator.NOT_IN,
    "<": Operator.LT,
    "<=": Operator.LTE,
    ">": Operator.GT,
    ">=": Operator.GTE,
}

# 范围操作符 -> range 子句的边界键
RANGE_OPERATORS: dict[Operator, str] = {
    Operator.LT: "lt",
    Operator.LTE: "lte",
    Operator.GT: "gt",
    Operator.GTE: "gte",
}

# 仅 bool 组合类操作符允许任意数量的操作数
OPERATOR_ARITY: dict[Operator, int] = {
    Operator.NOT: 1,
    Operator.BETWEEN: 3,
    Operator.NOT_BETWEEN: 3,
    Operator.IN: 2,
    Operator.NOT_IN: 2,
    Operator.LT: 2,
    Operator.LTE: 2,
    Operator.GT: 2,
    Operator.GTE: 2,
    Operator.MATCH: 2,
    Operator.MATCH_PHRASE: 2,
}

# like 系列在 ES 中没有对应语义
UNSUPPORTED_OPERATORS = frozenset({"like", "not like", "or like", "or not like"})
