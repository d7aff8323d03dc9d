"""ES 连接与执行模块.

主要组件:
    - ConnectionConfig: 连接配置模型
    - create_client: 按配置创建 Elasticsearch 客户端
    - ElasticsearchTransport: 基于客户端的传输层
    - SearchExecutor: 组装、执行并规整搜索

使用示例:
    from elasticquery.connection import ConnectionConfig, SearchExecutor

    executor = SearchExecutor.from_config(ConnectionConfig(hosts=["http://localhost:9200"]))
    rows = executor.all(query)
"""

from .exceptions import ConnectionConfigError, ESConnectionError, SearchExecutionError
from .executor import SearchExecutor, Transport
from .models import ConnectionConfig
from .tool import ElasticsearchTransport, build_path, create_client

__all__ = [
    # 执行
    "SearchExecutor",
    "Transport",
    "ElasticsearchTransport",
    "create_client",
    "build_path",
    # 模型
    "ConnectionConfig",
    # 异常
    "ESConnectionError",
    "ConnectionConfigError",
    "SearchExecutionError",
]
