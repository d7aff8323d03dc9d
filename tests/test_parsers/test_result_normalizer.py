"""ResultNormalizer 单元测试."""

from unittest.mock import MagicMock

import pytest

from elasticquery.parsers import ResultNormalizer


@pytest.fixture
def normalizer() -> ResultNormalizer:
    return ResultNormalizer()


@pytest.fixture
def response() -> dict:
    """带 _source 与 fields 的搜索响应."""
    return {
        "took": 3,
        "timed_out": False,
        "hits": {
            "total": {"value": 3, "relation": "eq"},
            "hits": [
                {"_id": "1", "_source": {"name": "alice", "group": "a"}},
                {"_id": "2", "_source": {"name": "bob", "group": "b"}, "fields": {"name": ["Bob"]}},
                {"_id": "3", "_source": {"group": "a"}},
            ],
        },
        "aggregations": {"max_age": {"value": 30}},
        "suggest": {"s": [{"text": "x", "options": []}]},
    }


class TestGetTotal:
    """get_total 测试."""

    def test_object_total(self, normalizer, response):
        """测试 7.x 起的 {value, relation} 形式."""
        assert normalizer.get_total(response) == 3

    def test_integer_total(self, normalizer):
        """测试 7.x 之前的整数形式."""
        assert normalizer.get_total({"hits": {"total": 42, "hits": []}}) == 42

    @pytest.mark.parametrize("raw", [{}, {"hits": {}}, {"hits": None}, False, None])
    def test_missing_total(self, normalizer, raw):
        assert normalizer.get_total(raw) == 0


class TestHits:
    """命中解析测试."""

    def test_get_hits(self, normalizer, response):
        assert [row["_id"] for row in normalizer.get_hits(response)] == ["1", "2", "3"]

    @pytest.mark.parametrize(
        "raw", [False, {}, {"hits": None}, {"hits": {"hits": None}}, {"hits": {"hits": []}}]
    )
    def test_no_hits(self, normalizer, raw):
        """测试没有命中不是错误."""
        assert normalizer.get_hits(raw) == []
        assert normalizer.first(raw) is None
        assert normalizer.is_empty(raw) is True

    def test_first(self, normalizer, response):
        assert normalizer.first(response)["_id"] == "1"
        assert normalizer.is_empty(response) is False

    def test_api_response_body(self, normalizer, response):
        """测试带 body 属性的客户端响应对象."""
        api_response = MagicMock()
        api_response.body = response
        assert normalizer.get_total(api_response) == 3

    def test_unsupported_response(self, normalizer):
        with pytest.raises(TypeError):
            normalizer.get_hits(42)


class TestGetValue:
    """get_value 查找顺序测试."""

    def test_id(self, normalizer):
        assert normalizer.get_value({"_id": "x", "_source": {"_id": "y"}}, "_id") == "x"

    def test_fields_before_source(self, normalizer):
        """测试 fields 优先，取第一个元素."""
        row = {"_source": {"name": "bob"}, "fields": {"name": ["Bob", "Robert"]}}
        assert normalizer.get_value(row, "name") == "Bob"

    def test_source(self, normalizer):
        assert normalizer.get_value({"_source": {"name": "alice"}}, "name") == "alice"

    def test_missing(self, normalizer):
        assert normalizer.get_value({"_source": {}}, "name") is None
        assert normalizer.get_value({}, "name") is None
        assert normalizer.get_value(None, "name") is None

    def test_empty_fields_array(self, normalizer):
        assert normalizer.get_value({"fields": {"name": []}}, "name") is None


class TestIndexRows:
    """index_rows 测试."""

    def test_no_key(self, normalizer, response):
        rows = normalizer.get_hits(response)
        assert normalizer.index_rows(rows, None) is rows

    def test_field_key(self, normalizer, response):
        indexed = normalizer.index_rows(normalizer.get_hits(response), "_id")
        assert list(indexed) == ["1", "2", "3"]

    def test_last_write_wins(self, normalizer, response):
        """测试键相同时后出现的行覆盖先出现的行."""
        indexed = normalizer.index_rows(normalizer.get_hits(response), "group")
        assert list(indexed) == ["a", "b"]
        assert indexed["a"]["_id"] == "3"

    def test_fields_value_used_as_key(self, normalizer, response):
        indexed = normalizer.index_rows(normalizer.get_hits(response), "name")
        assert set(indexed) == {"alice", "Bob", None}

    def test_callable_key(self, normalizer, response):
        indexed = normalizer.index_rows(
            normalizer.get_hits(response), lambda row: int(row["_id"]) * 10
        )
        assert list(indexed) == [10, 20, 30]

    def test_apply_index_by(self, normalizer, response):
        indexed = normalizer.apply_index_by(response, "_id")
        assert list(indexed["hits"]["hits"]) == ["1", "2", "3"]
        assert indexed["hits"]["total"] == {"value": 3, "relation": "eq"}
        assert isinstance(response["hits"]["hits"], list)

    def test_apply_index_by_without_key(self, normalizer, response):
        assert normalizer.apply_index_by(response, None) is response

    def test_apply_index_by_null_hits(self, normalizer):
        raw = {"hits": None, "timed_out": False}
        assert normalizer.apply_index_by(raw, "_id") is raw


class TestProjections:
    """scalar / column 测试."""

    def test_scalar(self, normalizer, response):
        assert normalizer.scalar(response, "name") == "alice"

    def test_scalar_no_hits(self, normalizer):
        assert normalizer.scalar(False, "name") is None

    def test_column(self, normalizer, response):
        assert normalizer.column(response, "name") == ["alice", "Bob", None]

    def test_column_no_hits(self, normalizer):
        assert normalizer.column({"hits": {"hits": []}}, "name") == []


class TestOtherSections:
    """聚合、建议与超时信息测试."""

    def test_aggregations(self, normalizer, response):
        assert normalizer.get_aggregations(response) == {"max_age": {"value": 30}}
        assert normalizer.get_aggregations(False) == {}

    def test_suggestions(self, normalizer, response):
        assert normalizer.get_suggestions(response, "s") == [{"text": "x", "options": []}]
        assert normalizer.get_suggestions(response, "missing") == []

    def test_timed_out(self, normalizer, response):
        assert normalizer.is_timed_out(response) is False
        assert normalizer.is_timed_out({"timed_out": True}) is True
