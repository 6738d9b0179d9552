"""Model 单元测试."""

import pytest

from elasticlink import Model, scope
from elasticlink.connection import Connection
from elasticlink.exceptions import InvalidArgumentError


@scope
def published(query, model):
    query.where("status", "published")


@scope
def newest_first(query, model):
    query.order_by("created_at", "desc")


class Article(Model):
    index_name = "articles"
    connection_name = "main"
    global_scopes = (published, newest_first)


class Comment(Model):
    index_name = "comments"


class TestFromHit:
    """from_hit 测试."""

    def test_from_hit(self):
        """测试从命中记录创建实例."""
        article = Article.from_hit(
            {"_id": "1", "_score": 2.5, "_index": "articles-v2", "_source": {"title": "hi"}}
        )
        assert article.id == "1"
        assert article.score == 2.5
        assert article.index == "articles-v2"
        assert article["title"] == "hi"
        assert "title" in article
        assert article.get("missing", "x") == "x"
        assert article.to_dict() == {"title": "hi"}

    def test_default_index(self):
        """测试命中记录缺少 _index 时使用模型索引."""
        assert Article.from_hit({"_id": "1"}).index == "articles"

    def test_invalid_hit(self):
        """测试非字典命中记录."""
        with pytest.raises(InvalidArgumentError):
            Article.from_hit(["not", "a", "hit"])  # type: ignore[arg-type]

    def test_equality(self):
        """测试相等性比较."""
        hit = {"_id": "1", "_source": {"a": 1}}
        assert Article.from_hit(hit) == Article.from_hit(hit)
        assert Article.from_hit(hit) != Comment.from_hit(hit)


class TestQuery:
    """Model.query 测试."""

    def test_global_scopes_applied(self, resolver, es_client):
        """测试全局作用域按顺序应用."""
        resolver.add_connection("main", Connection(es_client))

        body = Article.query(resolver).build_body()

        assert body["query"] == {
            "bool": {"filter": [{"term": {"status": "published"}}]}
        }
        assert body["sort"] == [{"created_at": {"order": "desc"}}]

    def test_results_hydrated(self, resolver, es_client, search_response):
        """测试查询结果转换为模型实例."""
        es_client.search.return_value = search_response(
            [{"_id": "1", "_score": 1.0, "_source": {"title": "hi"}}], total=1
        )
        resolver.add_connection("main", Connection(es_client))

        result = Article.query(resolver).where("author", "alice").get()

        assert result.total == 1
        article = result.first()
        assert isinstance(article, Article)
        assert article.id == "1"
        assert article["title"] == "hi"
        assert es_client.search.call_args[1]["index"] == "articles"

    def test_default_connection(self, resolver, es_client):
        """测试未指定连接名时使用默认连接."""
        resolver.add_connection("secondary", Connection(es_client))
        resolver.set_default_connection("secondary")

        query = Comment.query(resolver)

        assert query.get_index() == "comments"
        assert isinstance(query.get_model(), Comment)
        assert query.build_body() == {"query": {"match_all": {}}}
