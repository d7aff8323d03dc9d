"""编译器模块导出."""

from elasticquery.compilers.condition import ConditionCompiler, match_none
from elasticquery.compilers.sort import SortCompiler, normalize_direction, normalize_order

__all__ = [
    "ConditionCompiler",
    "SortCompiler",
    "match_none",
    "normalize_order",
    "normalize_direction",
]
