"""DSL 方言模块.

不同 ES 大版本之间的查询语法差异：
    - 7.x 之前排序和范围查询需要使用 _uid 代替 _id
    - 7.x 之前的接口路径带 type: {index}/{type}/_search
    - 6.x 起统计总数需要显式开启 track_total_hits
"""

from __future__ import annotations

from dataclasses import dataclass

from elasticquery.core.constants import DEFAULT_DSL_VERSION, MetaFields, MIN_DSL_VERSION


@dataclass(frozen=True)
class DslDialect:
    """DSL 方言（ES 服务端大版本号）.

    Attributes:
        version: ES 大版本号，如 5、6、7、8

    Examples:
        >>> DslDialect(6).resolve_id_field("_id")
        '_uid'
        >>> DslDialect(7).resolve_id_field("_id")
        '_id'
    """

    version: int = DEFAULT_DSL_VERSION

    def __post_init__(self) -> None:
        if not isinstance(self.version, int) or isinstance(self.version, bool):
            raise TypeError(f"dsl version must be an int, got {self.version!r}")
        if self.version < MIN_DSL_VERSION:
            raise ValueError(
                f"dsl version must be >= {MIN_DSL_VERSION}, got {self.version}"
            )

    @classmethod
    def of(cls, dialect: DslDialect | int | None) -> DslDialect:
        """将整数版本号或 None 统一转换为 DslDialect."""
        if dialect is None:
            return cls()
        if isinstance(dialect, DslDialect):
            return dialect
        return cls(dialect)

    @property
    def uses_legacy_id(self) -> bool:
        """是否需要把 _id 改写为 _uid."""
        return self.version < 7

    @property
    def supports_types(self) -> bool:
        """接口路径是否包含 type."""
        return self.version < 7

    @property
    def requires_track_total_hits(self) -> bool:
        """统计总数时是否需要 track_total_hits."""
        return self.version >= 6

    def resolve_id_field(self, field: str) -> str:
        """按方言改写排序/范围查询中的 _id 字段."""
        if self.uses_legacy_id and field == MetaFields.ID:
            return MetaFields.UID
        return field
