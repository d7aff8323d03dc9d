"""SearchQuery 链式构建器模块."""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from elasticsearch.dsl.query import Query

from elasticquery.builders.spec import QuerySpec
from elasticquery.compilers.sort import normalize_order
from elasticquery.core.conditions import (
    HashCondition,
    OperatorCondition,
    filter_condition,
)
from elasticquery.core.operators import Operator
from elasticquery.typing import ConditionLike, RawFragment


def _raw_fragment(fragment: RawFragment | Query | None) -> dict | None:
    """原始 DSL 片段统一为 dict 副本，Query 对象先序列化."""
    if fragment is None:
        return None
    if isinstance(fragment, Query):
        return fragment.to_dict()
    if isinstance(fragment, Mapping):
        return copy.deepcopy(dict(fragment))
    raise TypeError(
        f"DSL fragment must be a mapping or Query object, got {type(fragment).__name__}"
    )


def _field_list(fields: tuple) -> list | None:
    """兼容 stored_fields("a", "b") 与 stored_fields(["a", "b"]) 两种写法."""
    if len(fields) == 1 and (fields[0] is None or isinstance(fields[0], list)):
        return list(fields[0]) if fields[0] is not None else None
    return list(fields)


def _copy_condition(condition: Any) -> Any:
    """
    复制条件树，快照不与调用方的字典、列表共享.

    Query 对象原样保留；生成器等一次性可迭代对象展开为列表。
    """
    if condition is None or isinstance(condition, (str, bytes, Query)):
        return condition
    if isinstance(condition, HashCondition):
        return HashCondition(
            tuple((column, _copy_condition(value)) for column, value in condition.items)
        )
    if isinstance(condition, OperatorCondition):
        return OperatorCondition(
            condition.operator,
            tuple(_copy_condition(operand) for operand in condition.operands),
        )
    if isinstance(condition, Mapping):
        return {key: _copy_condition(value) for key, value in condition.items()}
    if isinstance(condition, (list, tuple, set, frozenset)):
        return type(condition)(_copy_condition(item) for item in condition)
    if isinstance(condition, Iterable):
        return [_copy_condition(item) for item in condition]
    return condition


def _combine(current: Any, condition: Any, operator: Operator) -> Any:
    """把新条件以 AND/OR 追加到已有条件上，已是同类组合时直接扩展."""
    if current is None:
        return condition
    if isinstance(current, OperatorCondition) and current.operator == operator:
        return OperatorCondition(operator, (*current.operands, condition))
    if (
        isinstance(current, (list, tuple))
        and current
        and isinstance(current[0], str)
        and current[0].strip().lower() == operator.value
    ):
        return [*current, condition]
    return [operator.value, current, condition]


class SearchQuery:
    """
    搜索查询构建器.

    每次链式调用都返回新的 SearchQuery，原对象不变，
    因此同一个基础查询可以安全地派生出多个查询。

    使用示例:
        base = SearchQuery().from_("users").where({"status": 1})

        adults = base.and_where(["gte", "age", 18]).order_by("-create_time")
        page_2 = adults.offset(20).limit(20)

        request = RequestAssembler(dialect=7).build(page_2)
    """

    def __init__(self, spec: QuerySpec | None = None) -> None:
        self._spec = spec or QuerySpec()

    @property
    def spec(self) -> QuerySpec:
        """当前查询的不可变快照."""
        return self._spec

    def _replace(self, **changes: Any) -> SearchQuery:
        return SearchQuery(dataclasses.replace(self._spec, **changes))

    # ========== 目标 ==========

    def from_(
        self,
        index: str | list[str] | None,
        type: str | list[str] | None = None,  # noqa: A002
    ) -> SearchQuery:
        """
        设置查询的索引和 type.

        Args:
            index: 索引名或索引列表，None 表示全部索引
            type: type 名或列表，仅 7.x 之前的方言生效
        """
        return self._replace(index=index, type=type)

    # ========== 条件 ==========

    def where(self, condition: ConditionLike) -> SearchQuery:
        """设置条件树（覆盖已有条件）."""
        return self._replace(where=_copy_condition(condition))

    def and_where(self, condition: ConditionLike) -> SearchQuery:
        """以 AND 追加条件."""
        where = _combine(self._spec.where, _copy_condition(condition), Operator.AND)
        return self._replace(where=where)

    def or_where(self, condition: ConditionLike) -> SearchQuery:
        """以 OR 追加条件."""
        where = _combine(self._spec.where, _copy_condition(condition), Operator.OR)
        return self._replace(where=where)

    def filter_where(self, condition: ConditionLike) -> SearchQuery:
        """
        设置条件树，忽略空值操作数.

        示例:
            # name 为空时只按 status 过滤
            query.filter_where({"name": form.get("name"), "status": 1})
        """
        return self._replace(where=filter_condition(_copy_condition(condition)))

    def query(self, query: RawFragment | Query | None) -> SearchQuery:
        """设置原始 query 片段，与条件树以 AND 合并."""
        return self._replace(query=_raw_fragment(query))

    def post_filter(self, post_filter: RawFragment | Query | None) -> SearchQuery:
        """设置 post_filter 片段."""
        return self._replace(post_filter=_raw_fragment(post_filter))

    # ========== 排序与分页 ==========

    def order_by(self, order: Any) -> SearchQuery:
        """
        设置排序（覆盖已有排序）.

        示例:
            query.order_by(["-create_time", ("name", "asc")])
            query.order_by({"_score": {"order": "desc"}})
        """
        return self._replace(order_by=normalize_order(order))

    def add_order_by(self, order: Any) -> SearchQuery:
        """追加排序."""
        return self._replace(order_by=(*self._spec.order_by, *normalize_order(order)))

    def offset(self, offset: int | None) -> SearchQuery:
        """设置起始偏移，None 或负数视为 0."""
        return self._replace(offset=max(0, offset or 0))

    def limit(self, limit: int | None) -> SearchQuery:
        """设置返回条数，None 表示由 ES 决定."""
        return self._replace(limit=limit)

    def index_by(self, key: str | Callable[[dict], Any] | None) -> SearchQuery:
        """设置结果行的索引键."""
        return self._replace(index_by=key)

    # ========== 返回字段 ==========

    def stored_fields(self, *fields: Any) -> SearchQuery:
        return self._replace(stored_fields=_field_list(fields))

    def script_fields(self, fields: Mapping[str, Any] | None) -> SearchQuery:
        return self._replace(
            script_fields=copy.deepcopy(dict(fields)) if fields is not None else None
        )

    def runtime_mappings(self, mappings: Mapping[str, Any] | None) -> SearchQuery:
        return self._replace(
            runtime_mappings=(
                copy.deepcopy(dict(mappings)) if mappings is not None else None
            )
        )

    def fields(self, *fields: Any) -> SearchQuery:
        return self._replace(fields=_field_list(fields))

    def source(self, *source: Any) -> SearchQuery:
        """
        设置 _source 过滤.

        示例:
            query.source(False)
            query.source("id", "name")
            query.source({"includes": ["id"], "excludes": ["secret"]})
        """
        if len(source) == 1 and (
            source[0] is None or isinstance(source[0], (bool, list, Mapping))
        ):
            value = source[0]
            if isinstance(value, list):
                value = list(value)
            elif isinstance(value, Mapping):
                value = copy.deepcopy(dict(value))
            return self._replace(source=value)
        return self._replace(source=list(source))

    # ========== 其他请求片段 ==========

    def highlight(self, highlight: Mapping[str, Any] | None) -> SearchQuery:
        return self._replace(
            highlight=copy.deepcopy(dict(highlight)) if highlight else None
        )

    def add_aggregate(self, name: str, options: Mapping[str, Any]) -> SearchQuery:
        """添加聚合，同名聚合会被覆盖."""
        return self._replace(
            aggregations={**self._spec.aggregations, name: copy.deepcopy(dict(options))}
        )

    def add_suggester(self, name: str, definition: Mapping[str, Any]) -> SearchQuery:
        """添加建议器，同名建议器会被覆盖."""
        return self._replace(
            suggest={**self._spec.suggest, name: copy.deepcopy(dict(definition))}
        )

    def add_collapse(self, collapse: Mapping[str, Any]) -> SearchQuery:
        return self._replace(collapse=copy.deepcopy(dict(collapse)))

    def stats(self, groups: list[str]) -> SearchQuery:
        return self._replace(stats=list(groups))

    def min_score(self, min_score: float | None) -> SearchQuery:
        return self._replace(min_score=min_score)

    def explain(self, explain: bool | None) -> SearchQuery:
        return self._replace(explain=explain)

    def timeout(self, timeout: int | str | None) -> SearchQuery:
        """设置搜索超时，如 5（秒）或 "500ms"."""
        return self._replace(timeout=timeout)

    def options(self, options: Mapping[str, Any]) -> SearchQuery:
        """设置 URL 参数（覆盖已有参数）."""
        return self._replace(options=dict(options))

    def add_options(self, options: Mapping[str, Any]) -> SearchQuery:
        """追加 URL 参数，同名参数会被覆盖."""
        return self._replace(options={**self._spec.options, **options})

    def __repr__(self) -> str:
        return f"<SearchQuery: {self._spec!r}>"
