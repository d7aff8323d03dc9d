"""elasticquery - Elasticsearch Query DSL Compiler.

把通用的条件树与链式查询描述编译为 Elasticsearch 查询 DSL，
经传输层执行后规整结果。

主要功能:
    - SearchQuery: 不可变的链式查询构建器
    - ConditionCompiler: 条件树 -> Query DSL
    - RequestAssembler: 组装完整的搜索请求
    - ResultNormalizer: 规整命中行、总数、单值和列
    - SearchExecutor: 组装、执行并规整

使用示例:
    from elasticquery import RequestAssembler, SearchQuery

    query = (
        SearchQuery()
        .from_("users")
        .where(["and", {"status": 1}, ["between", "age", 18, 30]])
        .order_by("-create_time")
    )
    request = RequestAssembler(dialect=7).build(query)
"""

__version__ = "0.1.0"

# 导出构建器
from elasticquery.builders import QuerySpec, RequestAssembler, SearchQuery, SearchRequest

# 导出编译器
from elasticquery.compilers import ConditionCompiler, SortCompiler

# 导出连接与执行
from elasticquery.connection import (
    ConnectionConfig,
    ElasticsearchTransport,
    SearchExecutor,
    create_client,
)

# 导出核心组件
from elasticquery.core import (
    DslDialect,
    HashCondition,
    Operator,
    OperatorCondition,
    SortDirection,
    parse_condition,
)

# 导出异常
from elasticquery.exceptions import (
    CompositeKeyUnsupportedError,
    ConditionError,
    ElasticQueryError,
    MalformedConditionError,
    UnsupportedOperatorError,
)

# 导出解析器
from elasticquery.parsers import ResultNormalizer

__all__ = [
    # 版本
    "__version__",
    # 构建器
    "SearchQuery",
    "QuerySpec",
    "RequestAssembler",
    "SearchRequest",
    # 编译器
    "ConditionCompiler",
    "SortCompiler",
    # 核心组件
    "Operator",
    "DslDialect",
    "SortDirection",
    "HashCondition",
    "OperatorCondition",
    "parse_condition",
    # 解析器
    "ResultNormalizer",
    # 连接与执行
    "ConnectionConfig",
    "ElasticsearchTransport",
    "SearchExecutor",
    "create_client",
    # 异常
    "ElasticQueryError",
    "ConditionError",
    "MalformedConditionError",
    "UnsupportedOperatorError",
    "CompositeKeyUnsupportedError",
]
