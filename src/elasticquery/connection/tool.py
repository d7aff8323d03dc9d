"""ES 传输层工具模块.

提供 create_client 按连接配置创建 Elasticsearch 客户端，
以及 ElasticsearchTransport 把客户端适配为执行器使用的传输协议。

使用示例:
    from elasticquery.connection import ConnectionConfig, ElasticsearchTransport, create_client

    client = create_client(ConnectionConfig(hosts=["http://localhost:9200"]))
    transport = ElasticsearchTransport(client)

    response = transport.execute("POST", ["users", "_search"], {}, {"query": {"match_all": {}}})
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from elasticsearch import ApiError, Elasticsearch, NotFoundError, TransportError

from elasticquery.typing import DslFragment, PathSegments

from .exceptions import SearchExecutionError
from .models import ConnectionConfig

logger = logging.getLogger(__name__)

# 路径片段中保留的字符：多索引逗号与通配符
_PATH_SAFE_CHARS = ",*"


def create_client(config: ConnectionConfig) -> Elasticsearch:
    """根据连接配置创建 Elasticsearch 客户端实例.

    根据认证方式（Basic Auth / API Key / Bearer Token / 无认证）
    和 SSL 配置构建客户端。

    Args:
        config: 连接配置

    Returns:
        Elasticsearch 客户端实例
    """
    kwargs: dict = {
        "hosts": config.hosts,
        "max_retries": config.max_retries,
        "retry_on_timeout": config.retry_on_timeout,
        "request_timeout": config.request_timeout,
        "http_compress": config.http_compress,
    }

    # Basic Auth 认证
    if config.username and config.password:
        kwargs["basic_auth"] = (config.username, config.password)

    # API Key 认证
    if config.api_key:
        kwargs["api_key"] = config.api_key

    # Bearer Token 认证
    if config.bearer_token:
        kwargs["bearer_auth"] = config.bearer_token

    # SSL/TLS 配置
    if config.ca_certs:
        kwargs["ca_certs"] = config.ca_certs
    kwargs["verify_certs"] = config.verify_certs

    return Elasticsearch(**kwargs)


def build_path(path_segments: PathSegments) -> str:
    """把路径片段拼接为 URL 路径，逐段转义.

    Examples:
        >>> build_path(["logs-*,users", "_search"])
        '/logs-*,users/_search'
    """
    return "/" + "/".join(quote(str(segment), safe=_PATH_SAFE_CHARS) for segment in path_segments)


class ElasticsearchTransport:
    """基于 elasticsearch 客户端的传输层.

    execute 的返回值约定:
        - 解码后的 JSON（dict）
        - 非 JSON 响应的原始内容（str / bytes）
        - HEAD 请求返回 True / False
        - 404 返回 False

    其他 API 错误与网络错误统一转换为 SearchExecutionError。

    Attributes:
        client: Elasticsearch 客户端实例
    """

    def __init__(self, client: Elasticsearch) -> None:
        self.client = client

    def execute(
        self,
        method: str,
        path_segments: PathSegments,
        options: dict[str, Any] | None = None,
        body: DslFragment | None = None,
    ) -> Any:
        """执行一次 HTTP 请求.

        Args:
            method: HTTP 方法，如 "GET"、"POST"、"HEAD"
            path_segments: 路径片段，如 ["users", "_search"]
            options: URL 参数
            body: 请求体

        Returns:
            解码后的响应，见类说明

        Raises:
            SearchExecutionError: 请求失败（404 除外）
        """
        path = build_path(path_segments)
        headers = {"accept": "application/json"}
        if body is not None:
            headers["content-type"] = "application/json"

        logger.debug("%s %s params=%s", method, path, options)
        try:
            response = self.client.perform_request(
                method,
                path,
                params=options or None,
                headers=headers,
                body=body,
            )
        except NotFoundError:
            logger.debug("%s %s returned 404", method, path)
            return False
        except ApiError as e:
            raise SearchExecutionError(
                f"Elasticsearch request {method} {path} failed with status {e.status_code}: {e.message}"
            ) from e
        except TransportError as e:
            raise SearchExecutionError(
                f"Elasticsearch request {method} {path} failed: {e.message}"
            ) from e

        if method.upper() == "HEAD":
            return bool(response)
        return response.body
