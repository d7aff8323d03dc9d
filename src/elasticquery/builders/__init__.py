"""构建器模块导出."""

from elasticquery.builders.query import SearchQuery
from elasticquery.builders.request import RequestAssembler, SearchRequest
from elasticquery.builders.spec import QuerySpec

__all__ = [
    "QuerySpec",
    "SearchQuery",
    "RequestAssembler",
    "SearchRequest",
]
