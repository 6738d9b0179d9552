"""Query 单元测试."""

import pytest

from elasticlink.collection import Collection
from elasticlink.connection import Connection
from elasticlink.exceptions import IllegalStateError, InvalidArgumentError


class TestBuildBody:
    """请求体构建测试."""

    def test_empty_is_match_all(self, connection):
        """测试没有条件时为 match_all."""
        assert connection.index("foo").build_body() == {"query": {"match_all": {}}}

    def test_where(self, connection):
        """测试条件进入 bool 查询."""
        body = connection.index("foo").where("status", "active").build_body()
        assert body == {
            "query": {"bool": {"filter": [{"term": {"status": "active"}}]}}
        }

    def test_sort(self, connection):
        """测试排序."""
        body = (
            connection.index("foo")
            .order_by("created_at", "DESC")
            .sort({"_score": {"order": "desc"}})
            .build_body()
        )
        assert body["sort"] == [
            {"created_at": {"order": "desc"}},
            {"_score": {"order": "desc"}},
        ]

    def test_invalid_sort_direction(self, connection):
        """测试排序方向不合法."""
        with pytest.raises(InvalidArgumentError, match="排序方向"):
            connection.index("foo").order_by("name", "up")

    def test_pagination(self, connection):
        """测试分页."""
        body = connection.index("foo").skip(20).take(10).build_body()
        assert body["from"] == 20
        assert body["size"] == 10

    def test_zero_size(self, connection):
        """测试 size 为 0."""
        body = connection.index("foo").take(0).build_body()
        assert body["size"] == 0

    @pytest.mark.parametrize("value", [-1, 1.5, "10", True])
    def test_invalid_pagination(self, connection, value):
        """测试分页参数必须为非负整数."""
        with pytest.raises(InvalidArgumentError, match="非负整数"):
            connection.index("foo").take(value)
        with pytest.raises(InvalidArgumentError, match="非负整数"):
            connection.index("foo").skip(value)

    def test_no_upper_bound(self, connection):
        """测试分页不限制上限."""
        body = connection.index("foo").take(1_000_000).build_body()
        assert body["size"] == 1_000_000

    def test_select_and_highlight(self, connection):
        """测试字段筛选与高亮."""
        body = connection.index("foo").select("title", "body").highlight("title").build_body()
        assert body["_source"] == ["title", "body"]
        assert "title" in body["highlight"]["fields"]

    def test_aggregate(self, connection):
        """测试聚合."""
        body = (
            connection.index("foo")
            .aggregate("by_status", "terms", field="status", size=10)
            .aggregate("price_stats", "stats", field="price")
            .build_body()
        )
        assert body["aggs"] == {
            "by_status": {"terms": {"field": "status", "size": 10}},
            "price_stats": {"stats": {"field": "price"}},
        }

    def test_aggregate_empty_name(self, connection):
        """测试聚合名称为空."""
        with pytest.raises(InvalidArgumentError):
            connection.index("foo").aggregate("", "terms", field="status")

    def test_suggest(self, connection):
        """测试建议."""
        body = connection.index("foo").suggest("spell", "elastc", "title").build_body()
        assert body["suggest"] == {
            "spell": {"text": "elastc", "term": {"field": "title"}}
        }

    def test_raw_body(self, connection):
        """测试合并原始请求体."""
        body = connection.index("foo").body({"track_total_hits": True}).build_body()
        assert body["track_total_hits"] is True
        assert body["query"] == {"match_all": {}}


class TestGet:
    """get / first 测试."""

    def test_get_returns_collection(self, connection, es_client, search_response):
        """测试 get 返回 Collection."""
        hits = [{"_id": "1", "_source": {"title": "a"}}]
        es_client.search.return_value = search_response(hits, total={"value": 1})

        result = connection.index("foo").where("status", "active").get()

        assert isinstance(result, Collection)
        assert result.total == 1
        assert list(result) == hits
        es_client.search.assert_called_once_with(
            index="foo",
            body={"query": {"bool": {"filter": [{"term": {"status": "active"}}]}}},
        )

    def test_first(self, connection, es_client, search_response):
        """测试 first 只取一条."""
        hits = [{"_id": "1", "_source": {"title": "a"}}]
        es_client.search.return_value = search_response(hits, total=1)

        assert connection.index("foo").first() == hits[0]
        assert es_client.search.call_args[1]["body"]["size"] == 1

    def test_first_empty(self, connection):
        """测试没有命中时 first 返回 None."""
        assert connection.index("foo").first() is None

    def test_get_uses_connection_ignores(self, es_client, search_response):
        """测试执行时读取连接的忽略状态码."""
        es_client.scoped.search.return_value = search_response()
        connection = Connection(es_client, ignores=[404])

        connection.index("foo").get()

        es_client.options.assert_called_once_with(ignore_status=[404])
        es_client.scoped.search.assert_called_once()
        es_client.search.assert_not_called()

    def test_get_with_scroll(self, connection, es_client, search_response):
        """测试启用滚动查询."""
        es_client.search.return_value = search_response(_scroll_id="cursor-1")

        result = connection.index("foo").scroll("2m").get()

        assert es_client.search.call_args[1]["scroll"] == "2m"
        assert result.scroll_id == "cursor-1"

    def test_continue_scroll(self, connection, es_client, search_response):
        """测试继续滚动游标."""
        es_client.scroll.return_value = search_response(_scroll_id="cursor-2")

        result = connection.index("foo").scroll_id("cursor-1").get()

        es_client.scroll.assert_called_once_with(scroll_id="cursor-1", scroll="1m")
        es_client.search.assert_not_called()
        assert result.scroll_id == "cursor-2"

    def test_clear_scroll(self, connection, es_client):
        """测试清除滚动游标."""
        connection.index("foo").scroll_id("cursor-1").clear_scroll()
        es_client.clear_scroll.assert_called_once_with(scroll_id="cursor-1")

    def test_clear_scroll_without_id(self, connection):
        """测试未设置游标时清除."""
        with pytest.raises(InvalidArgumentError):
            connection.index("foo").clear_scroll()

    def test_transport_error_propagates(self, connection, es_client):
        """测试传输层异常原样向上传播."""
        es_client.search.side_effect = RuntimeError("connection refused")
        with pytest.raises(RuntimeError, match="connection refused"):
            connection.index("foo").get()


class TestOtherTerminals:
    """count / find / insert / update / delete 测试."""

    def test_count(self, connection, es_client):
        """测试计数."""
        es_client.count.return_value = {"count": 42}

        assert connection.index("foo").where("a", 1).count() == 42
        es_client.count.assert_called_once_with(
            index="foo", body={"query": {"bool": {"filter": [{"term": {"a": 1}}]}}}
        )

    def test_find(self, connection, es_client):
        """测试按 ID 获取."""
        es_client.get.return_value = {"_id": "1", "found": True, "_source": {"a": 1}}
        doc = connection.index("foo").find("1")
        assert doc["_source"] == {"a": 1}
        es_client.get.assert_called_once_with(index="foo", id="1")

    def test_find_missing(self, es_client):
        """测试忽略 404 时文档不存在返回 None."""
        es_client.scoped.get.return_value = {"_id": "1", "found": False}
        connection = Connection(es_client)
        assert connection.index("foo").ignore(404).find("1") is None

    def test_insert(self, connection, es_client):
        """测试写入文档."""
        connection.index("foo").insert({"a": 1}, doc_id="1")
        es_client.index.assert_called_once_with(index="foo", document={"a": 1}, id="1")

    def test_insert_without_id(self, connection, es_client):
        """测试写入文档不指定 ID."""
        connection.index("foo").insert({"a": 1})
        es_client.index.assert_called_once_with(index="foo", document={"a": 1})

    def test_update(self, connection, es_client):
        """测试按条件更新."""
        connection.index("foo").where("a", 1).update({"status": "archived"})

        body = es_client.update_by_query.call_args[1]["body"]
        assert body["query"] == {"bool": {"filter": [{"term": {"a": 1}}]}}
        assert body["script"] == {
            "source": "ctx._source['status'] = params['status']",
            "lang": "painless",
            "params": {"status": "archived"},
        }

    def test_update_empty_fields(self, connection):
        """测试更新字段为空."""
        with pytest.raises(InvalidArgumentError):
            connection.index("foo").update({})

    def test_delete(self, connection, es_client):
        """测试按条件删除."""
        connection.index("foo").delete()
        es_client.delete_by_query.assert_called_once_with(
            index="foo", body={"query": {"match_all": {}}}
        )

    def test_ignore_deduplicated_on_delete(self, connection, es_client):
        """测试重复的忽略状态码在删除请求前去重."""
        query = connection.index("foo").ignore(404, 404, 409)
        assert query.get_ignores() == (404, 409)

        query.delete()

        es_client.options.assert_called_once_with(ignore_status=[404, 409])
        es_client.scoped.delete_by_query.assert_called_once()


class TestStateMachine:
    """执行状态测试."""

    def test_not_executed_initially(self, connection):
        """测试初始状态."""
        assert connection.index("foo").executed is False

    def test_execute_twice_raises(self, connection):
        """测试重复执行."""
        query = connection.index("foo")
        query.get()
        assert query.executed is True
        with pytest.raises(IllegalStateError, match="重复执行"):
            query.get()
        with pytest.raises(IllegalStateError):
            query.count()

    def test_mutation_after_execute_raises(self, connection):
        """测试执行后修改."""
        query = connection.index("foo")
        query.get()
        with pytest.raises(IllegalStateError, match="不能再修改"):
            query.where("a", 1)
        with pytest.raises(IllegalStateError):
            query.take(5)
        with pytest.raises(IllegalStateError):
            query.apply_scope(lambda q, m: None)

    def test_failed_request_still_executed(self, connection, es_client):
        """测试请求失败后查询仍为已执行."""
        es_client.search.side_effect = RuntimeError("boom")
        query = connection.index("foo")
        with pytest.raises(RuntimeError):
            query.get()
        with pytest.raises(IllegalStateError):
            query.get()

    def test_build_body_does_not_execute(self, connection):
        """测试导出请求体不改变状态."""
        query = connection.index("foo")
        query.build_body()
        assert query.executed is False
