"""条件编译器模块.

把条件树递归编译为 Elasticsearch Query DSL 片段。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from elasticsearch.dsl import Q
from elasticsearch.dsl.query import Query

from elasticquery.core.conditions import (
    HashCondition,
    OperatorCondition,
    parse_condition,
)
from elasticquery.core.constants import MetaFields
from elasticquery.core.dialect import DslDialect
from elasticquery.core.operators import RANGE_OPERATORS, Operator
from elasticquery.exceptions import (
    CompositeKeyUnsupportedError,
    MalformedConditionError,
    UnsupportedOperatorError,
)
from elasticquery.typing import DslFragment

logger = logging.getLogger(__name__)


def match_none() -> Query:
    """恒假条件，保证匹配 0 条文档（等价于 WHERE false）."""
    return Q("bool", must_not=[Q("match_all")])


def _is_multi_value(value: Any) -> bool:
    """列表、元组、集合、生成器等多值容器，字符串与 mapping 视为单值."""
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


def _as_list(value: Any) -> list:
    if _is_multi_value(value):
        return list(value)
    return [value]


def _leaf(clause: str, column: str, value: Any) -> Query:
    # 字典形式不会把字段名中的 __ 展开为 .
    return Q({clause: {column: value}})


def _require_field(operator: Operator, column: Any) -> str:
    if not isinstance(column, str) or not column:
        raise MalformedConditionError(
            f"Operator '{operator.value}' requires a field name as first operand, "
            f"got {column!r}."
        )
    return column


def _absent(column: str) -> Query:
    return Q("bool", must_not=[Q("exists", field=column)])


class ConditionCompiler:
    """条件编译器.

    纯函数式组件：不修改输入节点，不持有可变状态，可在多线程中共享。

    使用示例:
        compiler = ConditionCompiler(dialect=7)

        compiler.compile(["gte", "age", 18])
        # {"range": {"age": {"gte": 18}}}

        compiler.compile({"status": [1, 2], "deleted": None})
        # {"bool": {"must": [{"terms": {"status": [1, 2]}}],
        #           "must_not": [{"exists": {"field": "deleted"}}]}}
    """

    def __init__(self, dialect: DslDialect | int | None = None) -> None:
        """
        初始化编译器.

        Args:
            dialect: DSL 方言或 ES 大版本号，默认 7
        """
        self._dialect = DslDialect.of(dialect)

    @property
    def dialect(self) -> DslDialect:
        return self._dialect

    def compile(self, condition: Any) -> DslFragment:
        """
        编译条件为 DSL 字典.

        Args:
            condition: 条件树（dict、list/tuple 或条件节点）

        Returns:
            DSL 字典，空条件返回 {}

        Raises:
            MalformedConditionError: 操作数数量或形态错误
            UnsupportedOperatorError: 未知或不支持的操作符
            CompositeKeyUnsupportedError: 多列 in / not in
        """
        query = self.build(condition)
        if query is None:
            return {}
        return query.to_dict()

    def compile_filter(self, condition: Any) -> DslFragment:
        """编译条件并包装为 constant_score 过滤，空条件返回 {}."""
        query = self.build_filter(condition)
        if query is None:
            return {}
        return query.to_dict()

    def build(self, condition: Any) -> Query | None:
        """
        编译条件为 Query 对象.

        Args:
            condition: 条件树

        Returns:
            Query 对象，空条件返回 None
        """
        node = parse_condition(condition)
        if node is None:
            return None

        if isinstance(node, Query):
            # 预先构建好的查询原样透传
            return node

        if isinstance(node, HashCondition):
            return self._build_hash(node)

        return self._build_operator(node)

    def build_filter(self, condition: Any) -> Query | None:
        """
        编译条件并包装为 constant_score.filter.

        过滤条件不参与相关性评分。

        Args:
            condition: 条件树

        Returns:
            constant_score 查询，空条件返回 None
        """
        query = self.build(condition)
        if query is None:
            return None
        return Q("constant_score", filter=query)

    def _build_operator(self, node: OperatorCondition) -> Query | None:
        handler = getattr(self, _HANDLERS[node.operator])
        query = handler(node.operator, node.operands)
        logger.debug(
            "Compiled '%s' condition: %s",
            node.operator.value,
            query.to_dict() if query is not None else None,
        )
        return query

    def _build_hash(self, node: HashCondition) -> Query | None:
        must: list[Query] = []
        must_not: list[Query] = []

        for column, value in node.items:
            if column == MetaFields.ID:
                if value is None:
                    # 不存在 _id 为空的文档
                    must.append(match_none())
                else:
                    must.append(Q({"ids": {"values": _as_list(value)}}))
            elif _is_multi_value(value):
                must.append(_leaf("terms", column, list(value)))
            elif value is None:
                must_not.append(Q("exists", field=column))
            else:
                must.append(_leaf("term", column, value))

        params: dict[str, list[Query]] = {}
        if must:
            params["must"] = must
        if must_not:
            params["must_not"] = must_not
        if not params:
            return None
        return Q("bool", **params)

    def _build_not(self, operator: Operator, operands: tuple) -> Query | None:
        inner = self.build(operands[0])
        if inner is None:
            logger.debug("Operand of '%s' is empty, condition dropped", operator.value)
            return None
        return Q("bool", must_not=[inner])

    def _build_bool(self, operator: Operator, operands: tuple) -> Query | None:
        clause = "must" if operator == Operator.AND else "should"

        parts = []
        for operand in operands:
            query = self.build(operand)
            if query is not None:
                parts.append(query)

        if not parts:
            return None
        return Q("bool", **{clause: parts})

    def _build_between(self, operator: Operator, operands: tuple) -> Query:
        column, low, high = operands
        if column is None or low is None or high is None:
            raise MalformedConditionError(
                f"Operator '{operator.value}' requires three operands."
            )
        column = _require_field(operator, column)
        if column == MetaFields.ID:
            raise UnsupportedOperatorError(
                "Between condition is not supported for the _id field."
            )

        query = _leaf("range", column, {"gte": low, "lte": high})
        if operator == Operator.NOT_BETWEEN:
            query = Q("bool", must_not=[query])
        return query

    def _build_in(self, operator: Operator, operands: tuple) -> Query | None:
        column, values = operands
        if column is None or values is None:
            raise MalformedConditionError(
                f"Operator '{operator.value}' requires two operands: column and values."
            )

        if isinstance(column, (list, tuple)):
            if len(column) > 1:
                raise CompositeKeyUnsupportedError(
                    "Composite in is not supported by Elasticsearch."
                )
            column = column[0] if column else None

        values = _as_list(values)
        if not values or column is None:
            # in 空集合恒假；not in 空集合恒真，即不加过滤
            return match_none() if operator == Operator.IN else None

        column = _require_field(operator, column)

        present = []
        can_be_null = False
        for value in values:
            if isinstance(value, Mapping):
                # 行数据，按字段取值
                value = value.get(column)
            if value is None:
                can_be_null = True
            else:
                present.append(value)

        if column == MetaFields.ID:
            # _id 不可能为空，忽略 None
            query = Q({"ids": {"values": present}}) if present else match_none()
        elif not present:
            query = _absent(column)
        else:
            query = _leaf("terms", column, present)
            if can_be_null:
                query = Q("bool", should=[query, _absent(column)])

        if operator == Operator.NOT_IN:
            query = Q("bool", must_not=[query])
        return query

    def _build_range(self, operator: Operator, operands: tuple) -> Query:
        column, value = operands
        if column is None or value is None:
            raise MalformedConditionError(
                f"Operator '{operator.value}' requires two operands."
            )
        column = self._dialect.resolve_id_field(_require_field(operator, column))
        return _leaf("range", column, {RANGE_OPERATORS[operator]: value})

    def _build_match(self, operator: Operator, operands: tuple) -> Query:
        column, text = operands
        column = _require_field(operator, column)
        return _leaf(operator.value, column, text)


# 操作符 -> 编译方法
_HANDLERS: dict[Operator, str] = {
    Operator.NOT: "_build_not",
    Operator.AND: "_build_bool",
    Operator.OR: "_build_bool",
    Operator.BETWEEN: "_build_between",
    Operator.NOT_BETWEEN: "_build_between",
    Operator.IN: "_build_in",
    Operator.NOT_IN: "_build_in",
    Operator.LT: "_build_range",
    Operator.LTE: "_build_range",
    Operator.GT: "_build_range",
    Operator.GTE: "_build_range",
    Operator.MATCH: "_build_match",
    Operator.MATCH_PHRASE: "_build_match",
}

_unhandled = set(Operator) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f"Operators without a compiler handler: {sorted(_unhandled)}")
