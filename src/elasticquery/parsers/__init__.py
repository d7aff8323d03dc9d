"""结果解析器模块.

提供 ES 查询结果的规整功能.
"""

from elasticquery.parsers.response import ResultNormalizer

__all__ = [
    "ResultNormalizer",
]
