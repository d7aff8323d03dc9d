"""elasticquery 常量定义模块."""


class MetaFields:
    """ES 文档元字段."""

    ID = "_id"
    # 7.x 之前排序、范围查询使用的内部标识字段
    UID = "_uid"
    SOURCE = "_source"
    FIELDS = "fields"


class Endpoints:
    """ES REST 接口路径片段."""

    # 未指定索引时查询全部索引
    ALL_INDICES = "_all"
    SEARCH = "_search"
    DELETE_BY_QUERY = "_delete_by_query"


class SortDirection:
    """排序方向."""

    ASC = "asc"
    DESC = "desc"


# ES 默认返回 10 条文档
DEFAULT_LIMIT = 10

# 未配置时使用的 DSL 版本
DEFAULT_DSL_VERSION = 7

# 支持的最低 DSL 版本
MIN_DSL_VERSION = 5
