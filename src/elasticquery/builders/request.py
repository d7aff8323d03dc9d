"""请求组装模块.

把 QuerySpec 编译为完整的搜索请求：DSL 请求体 + 路由信息（索引、type、URL 参数）。
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

from elasticsearch.dsl import Q, Search
from elasticsearch.dsl.query import Query

from elasticquery.builders.query import SearchQuery
from elasticquery.builders.spec import QuerySpec
from elasticquery.compilers.condition import ConditionCompiler
from elasticquery.compilers.sort import SortCompiler
from elasticquery.core.constants import Endpoints
from elasticquery.core.dialect import DslDialect
from elasticquery.exceptions import MalformedConditionError
from elasticquery.typing import DslFragment, PathSegments

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SearchRequest:
    """
    组装完成的搜索请求.

    Attributes:
        body: DSL 请求体
        path: 接口路径片段，如 ["users", "_search"]
        index: 目标索引（已展开为逗号分隔字符串）
        type: 目标 type，7.x 及以上方言始终为 None
        options: URL 参数
    """

    body: DslFragment
    path: tuple[str, ...]
    index: str
    type: str | None = None  # noqa: A003
    options: dict[str, Any] = dataclasses.field(default_factory=dict)

    @property
    def endpoint(self) -> str:
        """接口路径，如 "users/_search"."""
        return "/".join(self.path)

    def path_segments(self) -> PathSegments:
        return list(self.path)


def _join(value: str | list[str] | tuple[str, ...] | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return ",".join(value) if value else None
    return value


def as_spec(query: QuerySpec | SearchQuery) -> QuerySpec:
    """取出 SearchQuery 的快照，QuerySpec 原样返回."""
    if isinstance(query, SearchQuery):
        return query.spec
    if isinstance(query, QuerySpec):
        return query
    raise TypeError(f"Expected QuerySpec or SearchQuery, got {type(query).__name__}")


def _timeout_option(timeout: int | str) -> str:
    # ES 的时间参数必须带单位，整数按秒处理
    if isinstance(timeout, int) and not isinstance(timeout, bool):
        return f"{timeout}s"
    return str(timeout)


class RequestAssembler:
    """
    请求组装器.

    纯函数式组件，每次调用都根据传入的 QuerySpec 重新编译。

    使用示例:
        assembler = RequestAssembler(dialect=7)

        query = (
            SearchQuery()
            .from_("users")
            .where({"status": 1})
            .order_by("-create_time")
            .limit(20)
        )
        request = assembler.build(query)

        request.endpoint  # "users/_search"
        request.body
        # {
        #     "query": {"constant_score": {"filter": {"bool": {"must": [...]}}}},
        #     "sort": [{"create_time": "desc"}],
        #     "size": 20,
        # }
    """

    def __init__(
        self,
        dialect: DslDialect | int | None = None,
        condition_compiler: ConditionCompiler | None = None,
        sort_compiler: SortCompiler | None = None,
    ) -> None:
        """
        初始化组装器.

        Args:
            dialect: DSL 方言或 ES 大版本号
            condition_compiler: 条件编译器，默认按 dialect 创建
            sort_compiler: 排序编译器，默认按 dialect 创建
        """
        self._dialect = DslDialect.of(dialect)
        self._condition_compiler = condition_compiler or ConditionCompiler(
            self._dialect
        )
        self._sort_compiler = sort_compiler or SortCompiler(self._dialect)

    @property
    def dialect(self) -> DslDialect:
        return self._dialect

    def build(self, query: QuerySpec | SearchQuery) -> SearchRequest:
        """
        组装搜索请求.

        Args:
            query: QuerySpec 或 SearchQuery

        Returns:
            SearchRequest

        Raises:
            MalformedConditionError: 条件结构错误
            UnsupportedOperatorError: 不支持的操作符
        """
        spec = self._spec(query)
        return self._request(spec, self.build_body(spec), Endpoints.SEARCH)

    def build_body(self, query: QuerySpec | SearchQuery) -> DslFragment:
        """
        只组装 DSL 请求体.

        未设置的字段不会出现在请求体中（不使用 null 占位）。
        """
        return self._search(self._spec(query)).to_dict()

    def build_query(self, query: QuerySpec | SearchQuery) -> DslFragment:
        """
        组装 query 部分.

        条件树编译后包装为 constant_score 过滤，与原始 query 片段以 bool.must 合并；
        只有其一时直接使用。

        Returns:
            query 字典，两者均为空时返回 {}
        """
        query_object = self._query_object(self._spec(query))
        return query_object.to_dict() if query_object is not None else {}

    def build_options(self, query: QuerySpec | SearchQuery) -> dict[str, Any]:
        """合并 URL 参数，timeout 设置时一并加入."""
        spec = self._spec(query)
        options = dict(spec.options)
        if spec.timeout is not None:
            options["timeout"] = _timeout_option(spec.timeout)
        return options

    # ========== 派生请求 ==========

    def build_count(self, query: QuerySpec | SearchQuery) -> SearchRequest:
        """
        组装计数请求.

        size=0 时 ES 只返回统计信息；6.x 起需要 track_total_hits 才能得到精确总数。
        """
        spec = self._spec(query)
        body = self.build_body(spec)
        body["size"] = 0
        body.pop("from", None)
        body.pop("sort", None)

        extra_options = {}
        if self._dialect.requires_track_total_hits:
            extra_options["track_total_hits"] = "true"
        return self._request(spec, body, Endpoints.SEARCH, extra_options)

    def build_one(self, query: QuerySpec | SearchQuery) -> SearchRequest:
        """组装只取第一条文档的请求."""
        spec = self._spec(query)
        body = self.build_body(spec)
        body["size"] = 1
        return self._request(spec, body, Endpoints.SEARCH)

    def build_column(self, query: QuerySpec | SearchQuery, field: str) -> SearchRequest:
        """组装只返回单个字段的请求."""
        spec = self._spec(query)
        body = self.build_body(spec)
        body["_source"] = [field]
        return self._request(spec, body, Endpoints.SEARCH)

    def build_delete_by_query(self, query: QuerySpec | SearchQuery) -> SearchRequest:
        """
        组装 delete_by_query 请求，只保留 query 部分.

        Raises:
            MalformedConditionError: 没有任何查询条件时抛出，避免误删全部文档
        """
        spec = self._spec(query)
        query_part = self.build_query(spec)
        if not query_part:
            raise MalformedConditionError(
                "Can not call delete_by_query when no query is given."
            )
        return self._request(spec, {"query": query_part}, Endpoints.DELETE_BY_QUERY)

    # ========== 内部辅助方法 ==========

    def _spec(self, query: QuerySpec | SearchQuery) -> QuerySpec:
        return as_spec(query)

    def _query_object(self, spec: QuerySpec) -> Query | None:
        conditionals: list[Query] = []

        where = self._condition_compiler.build_filter(spec.where)
        if where is not None:
            conditionals.append(where)
        if spec.query:
            conditionals.append(Q(dict(spec.query)))

        if len(conditionals) == 2:
            return Q("bool", must=conditionals)
        return conditionals[0] if conditionals else None

    def _search(self, spec: QuerySpec) -> Search:
        """
        把快照逐项应用到 Search 对象.

        Search 的链式方法每次返回新对象；suggest、collapse、script_fields
        通过 update_from_dict 原样写入（该方法会就地修改传入的字典，因此传副本）。
        """
        search = Search()

        query_object = self._query_object(spec)
        if query_object is not None:
            search = search.query(query_object)
        if spec.post_filter:
            search = search.post_filter(Q(dict(spec.post_filter)))

        extra: dict[str, Any] = {}
        if spec.stored_fields is not None:
            extra["stored_fields"] = list(spec.stored_fields)
        if spec.runtime_mappings is not None:
            extra["runtime_mappings"] = copy.deepcopy(dict(spec.runtime_mappings))
        if spec.fields is not None:
            extra["fields"] = copy.deepcopy(list(spec.fields))
        if spec.limit is not None and spec.limit >= 0:
            extra["size"] = spec.limit
        if spec.offset > 0:
            extra["from_"] = int(spec.offset)
        if spec.min_score is not None:
            extra["min_score"] = float(spec.min_score)
        if spec.explain is not None:
            extra["explain"] = spec.explain
        if spec.stats:
            extra["stats"] = list(spec.stats)
        # 聚合定义原样透传，不经过 A() 解析
        if spec.aggregations:
            extra["aggregations"] = copy.deepcopy(dict(spec.aggregations))
        if extra:
            search = search.extra(**extra)

        if spec.source is not None:
            search = search.source(copy.deepcopy(spec.source))

        if spec.highlight:
            search = self._apply_highlight(search, spec.highlight)

        fragments: dict[str, Any] = {}
        if spec.script_fields is not None:
            fragments["script_fields"] = dict(spec.script_fields)
        if spec.suggest:
            fragments["suggest"] = dict(spec.suggest)
        if spec.collapse:
            fragments["collapse"] = dict(spec.collapse)
        if fragments:
            search.update_from_dict(copy.deepcopy(fragments))

        sort = self._sort_compiler.compile(spec.order_by)
        if sort:
            search = search.sort(*sort)

        return search

    @staticmethod
    def _apply_highlight(search: Search, highlight: Mapping[str, Any]) -> Search:
        options = copy.deepcopy(dict(highlight))
        fields = options.pop("fields", None)
        if not isinstance(fields, Mapping) or not fields:
            # 数组形式的 fields 保留顺序，整体透传
            return search.extra(highlight=copy.deepcopy(dict(highlight)))

        for name, field_options in fields.items():
            search = search.highlight(name, **(field_options or {}))
        if options:
            search = search.highlight_options(**options)
        return search

    def _request(
        self,
        spec: QuerySpec,
        body: DslFragment,
        action: str,
        extra_options: dict[str, Any] | None = None,
    ) -> SearchRequest:
        index = _join(spec.index) or Endpoints.ALL_INDICES
        doc_type = _join(spec.type) if self._dialect.supports_types else None

        path = [index]
        if doc_type is not None:
            path.append(doc_type)
        path.append(action)

        request = SearchRequest(
            body=body,
            path=tuple(path),
            index=index,
            type=doc_type,
            options={**self.build_options(spec), **(extra_options or {})},
        )
        logger.debug("Assembled request %s: %s", request.endpoint, body)
        return request
