"""
ES 查询结果规整器.

把传输层返回的原始响应规整为命中行、总数、单值和列。
传输层以 False 表示未找到，这里按 0 条命中处理。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from elasticquery.core.constants import MetaFields

# 模块级别日志记录器
logger = logging.getLogger(__name__)

# 行索引键：字段名或函数
IndexBy = str | Callable[[dict[str, Any]], Any]


class ResultNormalizer:
    """
    ES 查询结果规整器.

    返回的行保持 ES 原生命中格式（_id、_source、fields、_score 等），
    由调用方自行转换为业务对象。

    使用示例:
        normalizer = ResultNormalizer()

        response = transport.execute("POST", request.path_segments(), request.options, request.body)

        total = normalizer.get_total(response)
        rows = normalizer.index_rows(normalizer.get_hits(response), "user_id")
        name = normalizer.scalar(response, "name")
    """

    # ========== 命中解析方法 ==========

    def get_hits(self, response: Any) -> list[dict[str, Any]]:
        """
        获取命中文档列表.

        Args:
            response: ES 原始响应，False 表示未找到

        Returns:
            命中行列表，无命中时返回 []
        """
        response_dict = self._ensure_dict(response)
        return list((response_dict.get("hits") or {}).get("hits") or [])

    def first(self, response: Any) -> dict[str, Any] | None:
        """获取第一条命中，无命中返回 None."""
        hits = self.get_hits(response)
        return hits[0] if hits else None

    def is_empty(self, response: Any) -> bool:
        """是否没有任何命中."""
        return not self.get_hits(response)

    def get_total(self, response: Any) -> int:
        """
        获取命中总数.

        7.x 之前 hits.total 为整数；之后开启 track_total_hits 时为
        {"value": 5, "relation": "eq"}。缺失时返回 0。

        Args:
            response: ES 原始响应

        Returns:
            总文档数
        """
        response_dict = self._ensure_dict(response)
        total_info = (response_dict.get("hits") or {}).get("total")

        if total_info is None:
            return 0
        if isinstance(total_info, dict):
            return int(total_info.get("value", 0))
        return int(total_info)

    # ========== 行/字段提取方法 ==========

    def index_rows(
        self,
        rows: list[dict[str, Any]],
        index_by: IndexBy | None,
    ) -> dict[Any, dict[str, Any]] | list[dict[str, Any]]:
        """
        按键索引命中行.

        键相同时后出现的行覆盖先出现的行。

        Args:
            rows: 命中行列表
            index_by: 字段名或 row -> key 函数，None 时原样返回列表

        Returns:
            键到行的字典

        示例:
            normalizer.index_rows(hits, "user_id")
            normalizer.index_rows(hits, lambda row: row["_id"])
        """
        if index_by is None:
            return rows

        indexed: dict[Any, dict[str, Any]] = {}
        for row in rows:
            if callable(index_by):
                key = index_by(row)
            else:
                key = self.get_value(row, index_by)
            if key in indexed:
                logger.debug("Duplicate index key %r, keeping the later row", key)
            indexed[key] = row
        return indexed

    def apply_index_by(self, response: Any, index_by: IndexBy | None) -> dict[str, Any]:
        """
        返回 hits.hits 已按键索引的响应副本.

        Args:
            response: ES 原始响应
            index_by: 字段名或函数

        Returns:
            新的响应字典，原响应不变
        """
        response_dict = self._ensure_dict(response)
        hits = self.get_hits(response_dict)
        if index_by is None or not hits:
            return response_dict

        return {
            **response_dict,
            "hits": {
                **(response_dict.get("hits") or {}),
                "hits": self.index_rows(hits, index_by),
            },
        }

    def get_value(self, row: dict[str, Any] | None, field: str) -> Any:
        """
        从命中行中取字段值.

        查找顺序: _id -> fields（ES 总是以数组返回，取第一个元素）-> _source -> None

        Args:
            row: 命中行
            field: 字段名

        Returns:
            字段值，都不存在时返回 None
        """
        if not row:
            return None

        if field == MetaFields.ID:
            return row.get(MetaFields.ID)

        fields = row.get(MetaFields.FIELDS) or {}
        if field in fields:
            values = fields[field]
            if isinstance(values, list):
                return values[0] if values else None
            return values

        source = row.get(MetaFields.SOURCE) or {}
        return source.get(field)

    def scalar(self, response: Any, field: str) -> Any:
        """获取第一条命中的字段值，无命中时返回 None."""
        return self.get_value(self.first(response), field)

    def column(self, response: Any, field: str) -> list[Any]:
        """获取所有命中的字段值，缺失的字段以 None 占位."""
        return [self.get_value(row, field) for row in self.get_hits(response)]

    # ========== 其他响应信息 ==========

    def get_aggregations(self, response: Any) -> dict[str, Any]:
        """获取聚合结果，原样返回."""
        response_dict = self._ensure_dict(response)
        return response_dict.get("aggregations") or {}

    def get_suggestions(self, response: Any, suggest_name: str) -> list[dict[str, Any]]:
        """获取指定建议器的结果条目."""
        response_dict = self._ensure_dict(response)
        return list((response_dict.get("suggest") or {}).get(suggest_name) or [])

    def is_timed_out(self, response: Any) -> bool:
        """检查查询是否超时."""
        response_dict = self._ensure_dict(response)
        return bool(response_dict.get("timed_out", False))

    # ========== 内部辅助方法 ==========

    def _ensure_dict(self, response: Any) -> dict[str, Any]:
        """
        确保响应为字典格式.

        支持 ObjectApiResponse（带 body 属性）、带 to_dict 的对象和原始字典，
        False/None 视为空响应。
        """
        if response is False or response is None:
            return {}
        if isinstance(response, dict):
            return response
        if hasattr(response, "body") and isinstance(response.body, dict):
            return response.body
        if hasattr(response, "to_dict"):
            return response.to_dict()
        raise TypeError(f"不支持的响应类型: {type(response)}")
