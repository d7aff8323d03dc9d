"""条件树模型模块.

条件树有两种节点形态:

    hash 形式（字段 -> 值）:
        {"status": [1, 2], "deleted": None}

    操作符形式（操作符, 操作数...）:
        ["and", {"status": 1}, ["gte", "age", 18]]

调用方既可以直接传入 dict/list，也可以使用 HashCondition / OperatorCondition，
parse_condition 负责把前者规整为后者。
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from elasticsearch.dsl.query import Query

from elasticquery.core.operators import OPERATOR_ARITY, Operator
from elasticquery.exceptions import MalformedConditionError


@dataclass(frozen=True)
class HashCondition:
    """hash 形式条件.

    每个字段生成一个子句，所有子句之间为 AND 关系。

    Attributes:
        items: (字段名, 值) 元组，保持插入顺序。值为列表时表示 IN，为 None 时表示字段不存在
    """

    items: tuple[tuple[str, Any], ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for key, _ in self.items:
            if not isinstance(key, str):
                raise MalformedConditionError(
                    f"Field name must be a string, got {key!r}"
                )
            if key in seen:
                raise MalformedConditionError(f"Duplicate field in condition: {key}")
            seen.add(key)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> HashCondition:
        return cls(items=tuple(mapping.items()))

    def __bool__(self) -> bool:
        return bool(self.items)


@dataclass(frozen=True)
class OperatorCondition:
    """操作符形式条件.

    Attributes:
        operator: 操作符
        operands: 操作数（子条件、字段名或值），保持原始顺序
    """

    operator: Operator
    operands: tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        expected = OPERATOR_ARITY.get(self.operator)
        if expected is not None and len(self.operands) != expected:
            raise MalformedConditionError(
                f"Operator '{self.operator.value}' requires exactly {expected} "
                f"operand(s), got {len(self.operands)}."
            )

    @classmethod
    def of(cls, tag: str | Operator, *operands: Any) -> OperatorCondition:
        """使用操作符标签创建条件.

        Examples:
            >>> OperatorCondition.of(">=", "age", 18).operator
            <Operator.GTE: 'gte'>
        """
        operator = tag if isinstance(tag, Operator) else Operator.from_tag(tag)
        return cls(operator=operator, operands=tuple(operands))


# 条件树节点: hash 形式、操作符形式或预先构建好的 Query 对象（原样透传）
ConditionNode = Union[HashCondition, OperatorCondition, Query]


def parse_condition(condition: Any) -> ConditionNode | None:
    """将原始条件规整为条件树节点.

    Args:
        condition: dict、list/tuple、条件节点或 None

    Returns:
        条件节点，空条件返回 None

    Raises:
        MalformedConditionError: 条件结构不合法
        UnsupportedOperatorError: 未知操作符
    """
    if condition is None:
        return None

    if isinstance(condition, (HashCondition, OperatorCondition, Query)):
        return condition if _is_present(condition) else None

    if isinstance(condition, Mapping):
        if not condition:
            return None
        return HashCondition.from_mapping(condition)

    if isinstance(condition, str):
        raise MalformedConditionError(
            "String conditions are not supported by Elasticsearch."
        )

    if isinstance(condition, (list, tuple)):
        if not condition:
            return None
        tag, *operands = condition
        if not isinstance(tag, (str, Operator)):
            raise MalformedConditionError(
                f"Operator condition must start with an operator tag, got {tag!r}"
            )
        return OperatorCondition.of(tag, *operands)

    raise MalformedConditionError(
        f"Unsupported condition type: {type(condition).__name__}"
    )


def _is_present(node: ConditionNode) -> bool:
    if isinstance(node, HashCondition):
        return bool(node)
    return True


def is_empty_value(value: Any) -> bool:
    """判断值是否为空：None、空字符串、纯空白字符串或空容器."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    return False


def filter_condition(condition: Any) -> Any:
    """
    移除条件中的空值操作数.

    用于根据用户输入构建条件：未填写的字段不参与过滤。
        - hash 形式：删除值为空的字段
        - not/and/or：递归过滤子条件，删除过滤后为空的子条件
        - between/not between：任一边界为空则整个条件移除
        - 其余操作符：值（第二个操作数）为空则整个条件移除

    Examples:
        >>> filter_condition({"name": "", "status": 1})
        {'status': 1}
        >>> filter_condition(["and", {"name": None}, ["gte", "age", 18]])
        ['and', ['gte', 'age', 18]]

    Returns:
        过滤后的条件，整个条件为空时返回 None
    """
    if isinstance(condition, HashCondition):
        condition = dict(condition.items)
    elif isinstance(condition, OperatorCondition):
        condition = [condition.operator.value, *condition.operands]

    if isinstance(condition, Mapping):
        filtered = {k: v for k, v in condition.items() if not is_empty_value(v)}
        return filtered or None

    if not isinstance(condition, (list, tuple)) or not condition:
        return condition

    tag, *operands = condition
    if not isinstance(tag, str):
        return condition
    operator = Operator.from_tag(tag)

    if operator in (Operator.NOT, Operator.AND, Operator.OR):
        kept = []
        for operand in operands:
            sub = filter_condition(operand)
            if not is_empty_value(sub):
                kept.append(sub)
        if not kept:
            return None
        return [tag, *kept]

    if operator in (Operator.BETWEEN, Operator.NOT_BETWEEN):
        if len(operands) == 3 and (
            is_empty_value(operands[1]) or is_empty_value(operands[2])
        ):
            return None
        return [tag, *operands]

    if len(operands) > 1 and is_empty_value(operands[1]):
        return None
    return [tag, *operands]
