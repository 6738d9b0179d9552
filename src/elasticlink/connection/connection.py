"""命名连接模块.

Connection 将一个 Elasticsearch 客户端与一组忽略的 HTTP 状态码绑定在一起，
并作为查询构建器与索引管理对象的入口。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from elasticsearch import Elasticsearch

from elasticlink.exceptions import InvalidArgumentError

from .models import unique_status_codes

if TYPE_CHECKING:
    from elasticlink.index_manager.tool import Index
    from elasticlink.query.query import Query

logger = logging.getLogger(__name__)


class Connection:
    """Elasticsearch 命名连接.

    持有唯一的客户端实例和忽略的状态码。由 ConnectionResolver 按名称创建
    并在进程生命周期内缓存，创建后不再修改。

    Args:
        client: Elasticsearch 客户端实例
        ignores: 请求时视为非致命的 HTTP 状态码
        logger: 可选日志记录器，通过该连接发出的请求记录到此处
        default_index: 默认索引名

    Examples:
        >>> connection = Connection(client, ignores=[404])
        >>> query = connection.index("users").where("status", "active")
        >>> result = query.get()
    """

    def __init__(
        self,
        client: Elasticsearch,
        ignores: Iterable[int] | None = None,
        logger: logging.Logger | None = None,
        default_index: str | None = None,
    ) -> None:
        if client is None:
            raise InvalidArgumentError("client 不能为 None")
        self._client = client
        self._ignores = unique_status_codes(ignores)
        self._logger = logger
        self._default_index = default_index

    @property
    def client(self) -> Elasticsearch:
        """底层 Elasticsearch 客户端."""
        return self._client

    @property
    def ignores(self) -> tuple[int, ...]:
        """连接级别忽略的状态码."""
        return self._ignores

    @property
    def logger(self) -> logging.Logger:
        """连接使用的日志记录器."""
        return self._logger or logger

    @property
    def default_index(self) -> str | None:
        return self._default_index

    def get_client(self) -> Elasticsearch:
        """获取底层客户端，用于 Query 未覆盖的操作."""
        return self._client

    def index(self, name: str | None = None) -> Query:
        """创建绑定到本连接和指定索引的查询构建器.

        索引无需已存在，本方法不会修改连接本身。

        Args:
            name: 索引名，默认使用连接配置的默认索引

        Returns:
            新的 Query 实例

        Raises:
            InvalidArgumentError: 未传入索引名且连接没有默认索引时抛出
        """
        from elasticlink.query.query import Query

        return Query(self, self._resolve_index_name(name))

    def create_index(self, name: str | None = None) -> Index:
        """创建绑定到本连接的索引管理对象.

        Args:
            name: 索引名，默认使用连接配置的默认索引

        Returns:
            Index 构建器
        """
        from elasticlink.index_manager.tool import Index

        return Index(self._resolve_index_name(name), connection=self)

    def transport(self, ignores: Iterable[int] | None = None) -> Any:
        """获取用于发出请求的客户端.

        显式传入的 ignores 覆盖连接级别配置。最终忽略列表非空时返回
        client.options(ignore_status=...)，由客户端负责比较响应状态码。

        Args:
            ignores: 单次请求覆盖的忽略状态码，None 表示使用连接配置

        Returns:
            客户端或带选项的客户端
        """
        effective = self.effective_ignores(ignores)
        if effective:
            return self._client.options(ignore_status=list(effective))
        return self._client

    def effective_ignores(self, ignores: Iterable[int] | None = None) -> tuple[int, ...]:
        """计算单次请求实际使用的忽略状态码."""
        if ignores is not None:
            override = unique_status_codes(ignores)
            if override:
                return override
        return self._ignores

    def close(self) -> None:
        """关闭底层客户端."""
        self._client.close()

    def _resolve_index_name(self, name: str | None) -> str:
        index_name = name or self._default_index
        if not index_name:
            raise InvalidArgumentError("未指定索引名，且连接没有配置默认索引")
        return index_name

    def __repr__(self) -> str:
        return f"<Connection ignores={list(self._ignores)} index={self._default_index!r}>"
