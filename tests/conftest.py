"""测试公共 fixtures."""

from unittest.mock import MagicMock

import pytest

from elasticlink.connection import Connection, ConnectionResolver


def make_search_response(
    hits: list[dict] | None = None,
    total: int | dict = 0,
    **extra,
) -> dict:
    """构造 ES 搜索响应."""
    response = {
        "took": 5,
        "timed_out": False,
        "_shards": {"total": 1, "successful": 1, "skipped": 0, "failed": 0},
        "hits": {
            "total": total,
            "max_score": 1.0 if hits else None,
            "hits": hits or [],
        },
    }
    response.update(extra)
    return response


@pytest.fixture
def es_client() -> MagicMock:
    """模拟 Elasticsearch 客户端.

    client.options(...) 返回 client.scoped，便于区分是否携带了 ignore_status。
    """
    client = MagicMock(name="client")
    scoped = client.options.return_value
    client.scoped = scoped
    client.search.return_value = make_search_response()
    scoped.search.return_value = make_search_response()
    return client


@pytest.fixture
def connection(es_client) -> Connection:
    """未配置忽略状态码的连接."""
    return Connection(es_client)


@pytest.fixture
def resolver() -> ConnectionResolver:
    return ConnectionResolver()


@pytest.fixture
def search_response():
    """搜索响应构造函数."""
    return make_search_response
