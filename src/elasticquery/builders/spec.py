"""查询描述模块.

QuerySpec 是一次搜索请求的不可变快照，由 SearchQuery 的链式调用逐步生成，
RequestAssembler 每次执行时都从当前快照重新编译。
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from elasticquery.core.constants import DEFAULT_LIMIT
from elasticquery.typing import OrderItem


@dataclass(frozen=True)
class QuerySpec:
    """
    搜索请求描述.

    未设置（None 或空）的字段不会出现在生成的 DSL 中。

    Attributes:
        index: 目标索引，None 表示全部索引
        type: 目标 type，仅 7.x 之前的方言使用
        where: 条件树
        query: 原始 query 片段，与 where 编译结果以 AND 合并
        post_filter: 原始 post_filter 片段
        order_by: 有序的 (字段, 方向) 元组
        offset: 起始偏移
        limit: 返回条数，默认 10（与 ES 默认值一致），None 表示不指定
        index_by: 结果行的索引键（字段名或函数）
        stored_fields: stored_fields 列表
        script_fields: script_fields 定义
        runtime_mappings: runtime_mappings 定义
        fields: fields 列表
        source: _source 过滤规则
        highlight: 高亮定义
        aggregations: 聚合定义，按名称索引
        stats: stats 分组
        suggest: 建议器定义，按名称索引
        collapse: 折叠定义
        min_score: 最低得分
        explain: 是否返回评分解释
        timeout: 搜索超时，合并到 URL 参数
        options: 透传给传输层的 URL 参数
    """

    index: str | list[str] | None = None
    type: str | list[str] | None = None  # noqa: A003
    where: Any = None
    query: Mapping[str, Any] | None = None
    post_filter: Mapping[str, Any] | None = None
    order_by: tuple[OrderItem, ...] = ()
    offset: int = 0
    limit: int | None = DEFAULT_LIMIT
    index_by: str | Callable[[dict], Any] | None = None
    stored_fields: list[str] | None = None
    script_fields: Mapping[str, Any] | None = None
    runtime_mappings: Mapping[str, Any] | None = None
    fields: list[Any] | None = None
    source: list[str] | Mapping[str, Any] | bool | None = None
    highlight: Mapping[str, Any] | None = None
    aggregations: Mapping[str, Any] = field(default_factory=dict)
    stats: list[str] | None = None
    suggest: Mapping[str, Any] = field(default_factory=dict)
    collapse: Mapping[str, Any] | None = None
    min_score: float | None = None
    explain: bool | None = None
    timeout: int | str | None = None
    options: Mapping[str, Any] = field(default_factory=dict)
