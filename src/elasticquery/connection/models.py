"""连接配置数据模型定义模块."""

from dataclasses import dataclass, field

from ..core.constants import DEFAULT_DSL_VERSION, MIN_DSL_VERSION
from ..core.dialect import DslDialect
from .exceptions import ConnectionConfigError


@dataclass
class ConnectionConfig:
    """连接配置模型.

    定义 ES 集群地址、认证方式、重试策略以及服务端 DSL 版本。

    Attributes:
        hosts: ES 节点地址列表（必需，不可为空）
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或元组）
        bearer_token: Bearer Token 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True
        max_retries: 最大重试次数，默认 3，必须 >= 0
        retry_on_timeout: 超时是否重试，默认 True
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        http_compress: 是否启用 HTTP 压缩，默认 True
        dsl_version: 服务端大版本号，决定 DSL 方言，默认 7，必须 >= 5

    Raises:
        ConnectionConfigError: 当参数不合法时抛出

    Examples:
        >>> config = ConnectionConfig(
        ...     hosts=["http://localhost:9200"],
        ...     username="elastic",
        ...     password="changeme",
        ...     dsl_version=6,
        ... )
    """

    hosts: list[str] = field(default_factory=list)
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    bearer_token: str | None = None
    ca_certs: str | None = None
    verify_certs: bool = True
    max_retries: int = 3
    retry_on_timeout: bool = True
    request_timeout: int = 30
    http_compress: bool = True
    dsl_version: int = DEFAULT_DSL_VERSION

    def __post_init__(self) -> None:
        """校验连接配置参数合法性."""
        if not self.hosts:
            raise ConnectionConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")
        if self.max_retries < 0:
            raise ConnectionConfigError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )
        if self.request_timeout < 0:
            raise ConnectionConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
        if (
            not isinstance(self.dsl_version, int)
            or isinstance(self.dsl_version, bool)
            or self.dsl_version < MIN_DSL_VERSION
        ):
            raise ConnectionConfigError(
                f"dsl_version 必须是 >= {MIN_DSL_VERSION} 的整数，当前值: {self.dsl_version!r}"
            )

    @property
    def dialect(self) -> DslDialect:
        """按 dsl_version 创建的 DSL 方言."""
        return DslDialect(self.dsl_version)
