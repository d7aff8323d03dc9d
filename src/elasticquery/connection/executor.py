"""搜索执行器模块.

把 SearchQuery 组装为请求、经传输层执行、再规整结果。
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from elasticquery.builders.query import SearchQuery
from elasticquery.builders.request import RequestAssembler, SearchRequest, as_spec
from elasticquery.builders.spec import QuerySpec
from elasticquery.core.dialect import DslDialect
from elasticquery.parsers.response import ResultNormalizer
from elasticquery.typing import DslFragment, PathSegments

from .exceptions import SearchExecutionError
from .models import ConnectionConfig
from .tool import ElasticsearchTransport, create_client

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """传输协议：执行一次 HTTP 请求并返回解码后的响应，404 返回 False."""

    def execute(
        self,
        method: str,
        path_segments: PathSegments,
        options: dict[str, Any] | None = None,
        body: DslFragment | None = None,
    ) -> Any: ...


class SearchExecutor:
    """
    搜索执行器.

    Attributes:
        transport: 传输层
        assembler: 请求组装器
        normalizer: 结果规整器

    使用示例:
        executor = SearchExecutor.from_config(
            ConnectionConfig(hosts=["http://localhost:9200"], dsl_version=7)
        )

        query = SearchQuery().from_("users").where({"status": 1}).index_by("user_id")

        executor.count(query)          # 42
        executor.all(query)            # {"u1": {...}, "u2": {...}}
        executor.scalar(query, "name") # "alice"
    """

    def __init__(
        self,
        transport: Transport,
        dialect: DslDialect | int | None = None,
        normalizer: ResultNormalizer | None = None,
    ) -> None:
        self.transport = transport
        self.assembler = RequestAssembler(dialect)
        self.normalizer = normalizer or ResultNormalizer()

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> SearchExecutor:
        """按连接配置创建客户端与执行器."""
        transport = ElasticsearchTransport(create_client(config))
        return cls(transport, config.dialect)

    @property
    def dialect(self) -> DslDialect:
        return self.assembler.dialect

    # ========== 查询方法 ==========

    def search(self, query: QuerySpec | SearchQuery) -> dict[str, Any]:
        """
        执行搜索并返回完整响应.

        设置了 index_by 时，hits.hits 会按键索引为字典。

        Raises:
            SearchExecutionError: 搜索失败（传输层返回 False）
        """
        spec = as_spec(query)
        response = self._search(self.assembler.build(spec))
        return self.normalizer.apply_index_by(response, spec.index_by)

    def all(self, query: QuerySpec | SearchQuery) -> list[dict[str, Any]] | dict[Any, dict[str, Any]]:
        """
        执行搜索并返回全部命中行.

        Returns:
            命中行列表；设置了 index_by 时返回键到行的字典
        """
        spec = as_spec(query)
        response = self._search(self.assembler.build(spec))
        return self.normalizer.index_rows(self.normalizer.get_hits(response), spec.index_by)

    def one(self, query: QuerySpec | SearchQuery) -> dict[str, Any] | None:
        """返回第一条命中行，没有命中时返回 None."""
        response = self._execute(self.assembler.build_one(query))
        return self.normalizer.first(response)

    def count(self, query: QuerySpec | SearchQuery) -> int:
        """返回命中总数，未找到索引时返回 0."""
        response = self._execute(self.assembler.build_count(query))
        return self.normalizer.get_total(response)

    def exists(self, query: QuerySpec | SearchQuery) -> bool:
        """是否存在至少一条命中."""
        return self.one(query) is not None

    def scalar(self, query: QuerySpec | SearchQuery, field: str) -> Any:
        """返回第一条命中的字段值，没有命中时返回 None."""
        response = self._execute(self.assembler.build_one(query))
        return self.normalizer.scalar(response, field)

    def column(self, query: QuerySpec | SearchQuery, field: str) -> list[Any]:
        """
        返回所有命中的单个字段值.

        Raises:
            SearchExecutionError: 搜索失败（传输层返回 False）
        """
        response = self._search(self.assembler.build_column(query, field))
        return self.normalizer.column(response, field)

    def delete(self, query: QuerySpec | SearchQuery) -> Any:
        """
        按条件删除文档（delete_by_query）.

        Returns:
            ES 响应，目标索引不存在时返回 False

        Raises:
            MalformedConditionError: 没有任何查询条件
        """
        return self._execute(self.assembler.build_delete_by_query(query))

    # ========== 内部辅助方法 ==========

    def _execute(self, request: SearchRequest) -> Any:
        logger.debug("Executing %s", request.endpoint)
        return self.transport.execute(
            "POST", request.path_segments(), request.options, request.body
        )

    def _search(self, request: SearchRequest) -> Any:
        response = self._execute(request)
        if response is False:
            raise SearchExecutionError("Elasticsearch search query failed.")
        return response
