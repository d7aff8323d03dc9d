"""条件树使用示例.

本示例展示如何使用 SearchQuery 与 RequestAssembler 构建查询:
1. hash 形式与操作符形式的条件
2. 按用户输入过滤空值条件
3. 旧版本 ES（6.x）的方言差异
4. 通过 SearchExecutor 执行查询
"""

from elasticsearch.dsl import Q

from elasticquery import ConnectionConfig, RequestAssembler, SearchExecutor, SearchQuery


# ==================== 示例 1: 条件组合 ====================
def example_conditions():
    """示例: 组合 hash 形式与操作符形式的条件.

    场景: 查询满足以下条件的告警:
    - status 为 error 或 critical，且未被删除（deleted_at 不存在）
    - level >= 3
    - 标题包含 "disk full"
    """
    query = (
        SearchQuery()
        .from_("alerts")
        .where({"status": ["error", "critical"], "deleted_at": None})
        .and_where([">=", "level", 3])
        .and_where(Q("match_phrase", title="disk full"))
        .order_by(["-create_time", "_id"])
        .limit(20)
    )

    request = RequestAssembler(dialect=7).build(query)
    print("条件组合示例:", request.endpoint)
    print(request.body)

    # 生成的 DSL:
    # {
    #   "query": {
    #     "constant_score": {
    #       "filter": {
    #         "bool": {
    #           "must": [
    #             {"bool": {"must": [{"terms": {"status": ["error", "critical"]}}],
    #                       "must_not": [{"exists": {"field": "deleted_at"}}]}},
    #             {"range": {"level": {"gte": 3}}},
    #             {"match_phrase": {"title": "disk full"}}
    #           ]
    #         }
    #       }
    #     }
    #   },
    #   "sort": [{"create_time": "desc"}, {"_id": "asc"}],
    #   "size": 20
    # }

    return request


# ==================== 示例 2: 过滤空值 ====================
def example_filter_where():
    """示例: 根据表单输入构建条件，未填写的字段不参与过滤."""
    form = {"name": "", "status": 1, "min_age": None, "tags": ["a", "b"]}

    query = SearchQuery().from_("users").filter_where(
        [
            "and",
            {"name": form["name"], "status": form["status"]},
            [">=", "age", form["min_age"]],
            ["in", "tags", form["tags"]],
        ]
    )

    print("\n过滤空值示例:")
    print(query.spec.where)
    # ['and', {'status': 1}, ['in', 'tags', ['a', 'b']]]

    return RequestAssembler().build(query)


# ==================== 示例 3: 6.x 方言 ====================
def example_legacy_dialect():
    """示例: 6.x 中路径带 type，_id 排序改写为 _uid，计数需要 track_total_hits."""
    assembler = RequestAssembler(dialect=6)
    query = SearchQuery().from_("users", "doc").where(["gt", "_id", "100"]).order_by("-_id")

    request = assembler.build(query)
    print("\n6.x 方言示例:", request.endpoint)
    print(request.body)
    # users/doc/_search
    # {"query": {"constant_score": {"filter": {"range": {"_uid": {"gt": "100"}}}}},
    #  "sort": [{"_uid": "desc"}],
    #  "size": 10}

    count_request = assembler.build_count(query)
    print(count_request.options)
    # {"track_total_hits": "true"}

    return request


# ==================== 示例 4: 执行查询 ====================
def example_execute():
    """示例: 连接 ES 执行查询并规整结果（需要本地运行的 ES）."""
    executor = SearchExecutor.from_config(
        ConnectionConfig(hosts=["http://localhost:9200"], dsl_version=7)
    )

    query = SearchQuery().from_("users").where({"status": 1}).index_by("user_id")

    print("\n执行示例:")
    print("总数:", executor.count(query))
    print("按 user_id 索引:", executor.all(query))
    print("第一个用户名:", executor.scalar(query, "name"))


if __name__ == "__main__":
    # 运行不需要 ES 的示例
    example_conditions()
    example_filter_where()
    example_legacy_dialect()
