"""排序编译器模块."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from elasticquery.core.constants import SortDirection
from elasticquery.core.dialect import DslDialect
from elasticquery.typing import DslFragment, OrderItem

logger = logging.getLogger(__name__)


def normalize_direction(direction: Any) -> str | Mapping[str, Any]:
    """
    规整排序方向.

    Args:
        direction: "asc"/"desc"（大小写不敏感），或扩展排序定义（dict）

    Returns:
        "asc"、"desc" 或原样返回的扩展定义

    Raises:
        ValueError: 无法识别的排序方向
    """
    if isinstance(direction, Mapping):
        return direction
    if isinstance(direction, str):
        lowered = direction.strip().lower()
        if lowered in (SortDirection.ASC, SortDirection.DESC):
            return lowered
    raise ValueError(f"Invalid sort direction: {direction!r}, must be 'asc' or 'desc'")


def normalize_order(order: Any) -> tuple[OrderItem, ...]:
    """
    把多种排序写法规整为 (字段, 方向) 元组.

    支持:
        - "name" / "-create_time"（前缀 - 表示降序）
        - ("name", "desc")
        - {"name": "desc", "_score": {"order": "asc"}}
        - 以上写法组成的列表

    Examples:
        >>> normalize_order(["-create_time", ("name", "asc")])
        (('create_time', 'desc'), ('name', 'asc'))
    """
    if not order:
        return ()

    if isinstance(order, (str, Mapping)) or _looks_like_pair(order):
        order = [order]

    items: list[OrderItem] = []
    for entry in order:
        if isinstance(entry, str):
            if not entry.lstrip("-"):
                raise ValueError(f"Invalid sort field: {entry!r}")
            if entry.startswith("-"):
                items.append((entry[1:], SortDirection.DESC))
            else:
                items.append((entry, SortDirection.ASC))
        elif isinstance(entry, Mapping):
            for field, direction in entry.items():
                items.append((field, normalize_direction(direction)))
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            field, direction = entry
            if not isinstance(field, str) or not field:
                raise ValueError(f"Invalid sort field: {field!r}")
            items.append((field, normalize_direction(direction)))
        else:
            raise ValueError(f"Invalid sort entry: {entry!r}")
    return tuple(items)


def _looks_like_pair(value: Any) -> bool:
    """判断是否为单个 (字段, 方向) 元组."""
    if not isinstance(value, tuple) or len(value) != 2:
        return False
    if not isinstance(value[0], str):
        return False
    direction = value[1]
    if isinstance(direction, Mapping):
        return True
    return isinstance(direction, str) and direction.strip().lower() in (
        SortDirection.ASC,
        SortDirection.DESC,
    )


class SortCompiler:
    """
    排序编译器.

    把有序的 (字段, 方向) 列表编译为 DSL sort 数组，输出顺序与输入严格一致。

    使用示例:
        SortCompiler(dialect=6).compile([("_id", "desc"), ("name", "asc")])
        # [{"_uid": "desc"}, {"name": "asc"}]
    """

    def __init__(self, dialect: DslDialect | int | None = None) -> None:
        self._dialect = DslDialect.of(dialect)

    def compile(self, order: Any) -> list[DslFragment]:
        """
        编译排序.

        Args:
            order: 排序定义，写法见 normalize_order

        Returns:
            sort 数组，空排序返回 []（使用 ES 默认的相关性得分排序）
        """
        sort: list[DslFragment] = []
        for field, direction in normalize_order(order):
            column = self._dialect.resolve_id_field(field)
            if isinstance(direction, Mapping):
                # 扩展排序语法（脚本排序等）原样透传
                sort.append({column: dict(direction)})
            else:
                sort.append({column: direction})

        if sort:
            logger.debug("Compiled sort: %s", sort)
        return sort
