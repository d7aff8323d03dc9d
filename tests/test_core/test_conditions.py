"""条件树模型单元测试."""

import pytest
from elasticsearch.dsl import Q

from elasticquery.core.conditions import (
    HashCondition,
    OperatorCondition,
    filter_condition,
    is_empty_value,
    parse_condition,
)
from elasticquery.core.operators import Operator
from elasticquery.exceptions import MalformedConditionError, UnsupportedOperatorError


# ============================================================
# 操作符解析
# ============================================================


class TestOperatorFromTag:
    """Operator.from_tag 测试."""

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("not", Operator.NOT),
            ("AND", Operator.AND),
            ("Or", Operator.OR),
            ("between", Operator.BETWEEN),
            ("not between", Operator.NOT_BETWEEN),
            ("not_between", Operator.NOT_BETWEEN),
            ("NOT  BETWEEN", Operator.NOT_BETWEEN),
            ("in", Operator.IN),
            ("not in", Operator.NOT_IN),
            ("not_in", Operator.NOT_IN),
            ("lt", Operator.LT),
            ("<", Operator.LT),
            ("lte", Operator.LTE),
            ("<=", Operator.LTE),
            ("gt", Operator.GT),
            (">", Operator.GT),
            ("gte", Operator.GTE),
            (">=", Operator.GTE),
            ("match", Operator.MATCH),
            ("match_phrase", Operator.MATCH_PHRASE),
        ],
    )
    def test_tags_and_aliases(self, tag, expected):
        """测试标签与别名解析."""
        assert Operator.from_tag(tag) is expected

    def test_operator_instance_passes_through(self):
        """测试 Operator 实例原样返回."""
        assert Operator.from_tag(Operator.GTE) is Operator.GTE

    @pytest.mark.parametrize("tag", ["like", "not like", "or like", "OR NOT LIKE"])
    def test_like_family_rejected(self, tag):
        """测试 like 系列提示改用 match."""
        with pytest.raises(UnsupportedOperatorError, match="match_phrase"):
            Operator.from_tag(tag)

    def test_unknown_tag(self):
        """测试未知操作符."""
        with pytest.raises(UnsupportedOperatorError, match="unknown operator in query: regexp"):
            Operator.from_tag("regexp")


# ============================================================
# 条件节点
# ============================================================


class TestHashCondition:
    """HashCondition 测试."""

    def test_from_mapping_keeps_order(self):
        """测试保持插入顺序."""
        node = HashCondition.from_mapping({"b": 1, "a": 2})
        assert node.items == (("b", 1), ("a", 2))

    def test_duplicate_field_rejected(self):
        """测试重复字段."""
        with pytest.raises(MalformedConditionError, match="Duplicate field"):
            HashCondition(items=(("a", 1), ("a", 2)))

    def test_non_string_field_rejected(self):
        """测试非字符串字段名."""
        with pytest.raises(MalformedConditionError):
            HashCondition(items=((1, "x"),))

    def test_empty_is_falsy(self):
        assert not HashCondition()

    def test_frozen(self):
        """测试节点不可变."""
        node = HashCondition.from_mapping({"a": 1})
        with pytest.raises(AttributeError):
            node.items = ()


class TestOperatorCondition:
    """OperatorCondition 测试."""

    def test_of_resolves_alias(self):
        node = OperatorCondition.of(">=", "age", 18)
        assert node.operator is Operator.GTE
        assert node.operands == ("age", 18)

    @pytest.mark.parametrize(
        "tag,operands",
        [
            ("not", ()),
            ("not", ({"a": 1}, {"b": 2})),
            ("between", ("age", 1)),
            ("in", ("id",)),
            ("gte", ("age", 1, 2)),
            ("match", ("title",)),
        ],
    )
    def test_arity_mismatch(self, tag, operands):
        """测试操作数数量错误."""
        with pytest.raises(MalformedConditionError, match="requires exactly"):
            OperatorCondition.of(tag, *operands)

    def test_bool_operators_accept_any_arity(self):
        """测试 and/or 不限制操作数数量."""
        assert OperatorCondition.of("and").operands == ()
        assert len(OperatorCondition.of("or", {"a": 1}, {"b": 2}, {"c": 3}).operands) == 3


# ============================================================
# parse_condition
# ============================================================


class TestParseCondition:
    """parse_condition 测试."""

    @pytest.mark.parametrize("condition", [None, {}, [], ()])
    def test_empty_conditions(self, condition):
        """测试空条件."""
        assert parse_condition(condition) is None

    def test_mapping(self):
        node = parse_condition({"status": 1})
        assert node == HashCondition(items=(("status", 1),))

    def test_operator_list(self):
        node = parse_condition(["in", "id", [1, 2]])
        assert node == OperatorCondition(Operator.IN, ("id", [1, 2]))

    def test_operator_tuple(self):
        node = parse_condition(("lt", "age", 30))
        assert node.operator is Operator.LT

    def test_nodes_pass_through(self):
        node = OperatorCondition.of("gt", "age", 1)
        assert parse_condition(node) is node

    def test_empty_hash_node(self):
        assert parse_condition(HashCondition()) is None

    def test_query_object_passes_through(self):
        query = Q("match", title="python")
        assert parse_condition(query) is query

    def test_string_condition_rejected(self):
        """测试字符串条件."""
        with pytest.raises(MalformedConditionError, match="String conditions"):
            parse_condition("status = 1")

    def test_list_without_tag_rejected(self):
        with pytest.raises(MalformedConditionError, match="operator tag"):
            parse_condition([{"a": 1}, {"b": 2}])

    def test_unsupported_type(self):
        with pytest.raises(MalformedConditionError, match="Unsupported condition type"):
            parse_condition(42)

    def test_unknown_operator(self):
        with pytest.raises(UnsupportedOperatorError):
            parse_condition(["regexp", "name", "a.*"])


# ============================================================
# filter_condition
# ============================================================


class TestIsEmptyValue:
    """is_empty_value 测试."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], (), {}, set()])
    def test_empty(self, value):
        assert is_empty_value(value) is True

    @pytest.mark.parametrize("value", [0, False, "a", [None], {"a": 1}, 0.0])
    def test_not_empty(self, value):
        assert is_empty_value(value) is False


class TestFilterCondition:
    """filter_condition 测试."""

    def test_hash_drops_empty_values(self):
        assert filter_condition({"name": "", "status": 1, "tags": []}) == {"status": 1}

    def test_hash_all_empty(self):
        assert filter_condition({"name": None}) is None

    def test_nested_bool(self):
        """测试递归过滤子条件."""
        condition = ["and", {"name": None}, ["or", ["gte", "age", ""], {"status": 1}]]
        assert filter_condition(condition) == ["and", ["or", {"status": 1}]]

    def test_bool_all_empty(self):
        assert filter_condition(["or", {"a": None}, ["in", "id", []]]) is None

    def test_between_with_empty_bound(self):
        assert filter_condition(["between", "age", 1, None]) is None
        assert filter_condition(["between", "age", 1, 10]) == ["between", "age", 1, 10]

    def test_value_operator_with_empty_value(self):
        assert filter_condition(["match", "title", "  "]) is None
        assert filter_condition(["lt", "age", 0]) == ["lt", "age", 0]

    def test_accepts_nodes(self):
        """测试条件节点先转换为原始形态."""
        assert filter_condition(HashCondition.from_mapping({"a": "", "b": 2})) == {"b": 2}
        assert filter_condition(OperatorCondition.of("in", "id", [])) is None

    def test_query_object_kept(self):
        query = Q("match_all")
        assert filter_condition(["and", query, {"a": None}]) == ["and", query]
