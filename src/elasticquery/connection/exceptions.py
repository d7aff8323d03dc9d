"""连接与执行层异常定义模块."""

from ..exceptions import ElasticQueryError


class ESConnectionError(ElasticQueryError):
    """连接层基础异常类.

    所有连接、传输与执行相关异常的基类，继承自 ElasticQueryError。
    """

    pass


class ConnectionConfigError(ESConnectionError):
    """连接配置校验异常.

    当连接配置参数不合法时抛出，例如 hosts 为空、dsl_version 小于 5 等。
    """

    pass


class SearchExecutionError(ESConnectionError):
    """搜索执行异常.

    传输层请求失败（非 404 的 API 错误、网络错误）或搜索返回失败结果时抛出，
    原始异常通过 __cause__ 保留。
    """

    pass
