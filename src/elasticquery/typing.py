"""elasticquery 类型定义模块."""

from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

# DSL 片段类型（JSON 结构）
DslFragment = Dict[str, Any]

# 原始 DSL 片段（调用方直接提供，原样透传）
RawFragment = Mapping[str, Any]

# 条件树节点的原始形态
# hash 形式: {"status": 1}
# 操作符形式: ["and", {...}, ["in", "id", [1, 2]]]
ConditionLike = Union[Mapping[str, Any], Sequence[Any], None]

# 排序方向：asc / desc 或扩展排序定义
SortSpec = Union[str, Mapping[str, Any]]

# 排序项: (字段名, 方向)
OrderItem = Tuple[str, SortSpec]

# 路由路径片段
PathSegments = List[str]
