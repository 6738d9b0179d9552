"""连接解析器模块.

提供 ConnectionResolver（命名连接注册表）和 ConnectionManager
（基于配置的连接解析器），用于按名称惰性创建并缓存 Connection。

使用示例:
    from elasticlink.connection import ConnectionManager

    manager = ConnectionManager(
        {
            "default": "main",
            "connections": {
                "main": {"servers": ["http://localhost:9200"], "ignore": [404]},
            },
        }
    )

    with manager:
        result = manager.connection().index("users").where("age", ">", 18).get()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from elasticlink.typing import ConnectionBuilder

from .connection import Connection
from .exceptions import ConfigurationError, UnknownConnectionError
from .factory import ClientFactory
from .models import ElasticConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Materialized:
    """已创建的连接条目."""

    connection: Connection


@dataclass(frozen=True)
class _Deferred:
    """延迟构建的连接条目."""

    builder: ConnectionBuilder = field(repr=False)


_Entry = Union[_Materialized, _Deferred]


class ConnectionResolver:
    """命名连接注册表.

    每个连接名对应一个条目，条目要么是已创建的连接，要么是延迟构建函数。
    首次解析延迟条目时在锁内调用构建函数并替换为已创建条目，保证同一
    连接名在解析器生命周期内只构建一次，多次解析返回同一实例。

    解析器应由应用的组装入口持有并显式传递，而不是作为全局单例访问。

    Examples:
        >>> resolver = ConnectionResolver()
        >>> resolver.extend("main", lambda: Connection(client))
        >>> resolver.set_default_connection("main")
        >>> resolver.connection() is resolver.connection("main")
        True
    """

    def __init__(self, default: str | None = None) -> None:
        self._entries: dict[str, _Entry] = {}
        self._default = default
        # 可重入锁：构建函数内部可以解析其他连接
        self._lock = threading.RLock()

    def add_connection(self, name: str, connection: Connection) -> None:
        """注册已创建的连接，同名连接会被静默覆盖."""
        with self._lock:
            self._entries[name] = _Materialized(connection)

    def extend(self, name: str, builder: ConnectionBuilder) -> None:
        """注册延迟构建函数.

        不会立即构建连接。若该名称已有连接，将被替换为延迟条目，
        下次解析时重新构建。
        """
        with self._lock:
            self._entries[name] = _Deferred(builder)

    def connection(self, name: str | None = None) -> Connection:
        """按名称解析连接.

        Args:
            name: 连接名，None 表示使用默认连接名

        Returns:
            Connection 实例

        Raises:
            ConfigurationError: 未传入名称且未设置默认连接时抛出
            UnknownConnectionError: 连接名既未注册连接也未注册构建函数时抛出
        """
        if name is None:
            name = self._default
            if name is None:
                raise ConfigurationError("未设置默认连接，请先调用 set_default_connection")

        with self._lock:
            entry = self._entries.get(name)
            if entry is None:
                raise UnknownConnectionError(f"未找到名为 '{name}' 的连接")
            if isinstance(entry, _Materialized):
                return entry.connection

            connection = entry.builder()
            self._entries[name] = _Materialized(connection)
            logger.info(f"连接 '{name}' 已创建")
            return connection

    def has_connection(self, name: str) -> bool:
        """判断连接名是否已注册（不会触发构建）."""
        with self._lock:
            return name in self._entries

    def set_default_connection(self, name: str) -> None:
        """设置默认连接名，校验延迟到 connection() 调用时进行."""
        self._default = name

    def get_default_connection(self) -> str | None:
        """获取默认连接名."""
        return self._default

    def connections(self) -> dict[str, Connection]:
        """获取已创建连接的快照."""
        with self._lock:
            return {
                name: entry.connection
                for name, entry in self._entries.items()
                if isinstance(entry, _Materialized)
            }

    # ============================================================
    # 生命周期管理
    # ============================================================

    def __enter__(self) -> ConnectionResolver:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """上下文管理器退出，关闭并清空所有连接."""
        self.reset()

    def reset(self) -> None:
        """关闭所有已创建的连接，并清空注册表和默认连接名.

        单个客户端关闭失败只记录警告，不影响其他连接的关闭。
        """
        with self._lock:
            materialized = self.connections()
            self._entries.clear()
            self._default = None

        for name, connection in materialized.items():
            try:
                connection.close()
            except Exception as e:
                logger.warning(f"关闭连接 '{name}' 失败: {e}")
        logger.info(f"连接解析器已重置，共关闭 {len(materialized)} 个连接")


class ConnectionManager(ConnectionResolver):
    """基于配置的连接解析器.

    根据配置设置默认连接名，并为每个配置的连接注册延迟构建函数，
    首次解析时通过 ClientFactory 创建客户端。

    Args:
        config: ElasticConfig 或形如 {"default": ..., "connections": {...}} 的字典
        factory: 客户端工厂，默认 ClientFactory()
        logger: 可选日志记录器，传给创建的客户端和连接
        node_class: 可选自定义传输节点类
    """

    def __init__(
        self,
        config: ElasticConfig | Mapping[str, Any],
        factory: ClientFactory | None = None,
        logger: logging.Logger | None = None,
        node_class: Any = None,
    ) -> None:
        if not isinstance(config, ElasticConfig):
            config = ElasticConfig.from_dict(config)
        super().__init__(default=config.default)
        self._config = config
        self._factory = factory or ClientFactory()
        self._logger = logger
        self._node_class = node_class

        for name in config.connections:
            self.extend(name, self._deferred_builder(name))

    @property
    def config(self) -> ElasticConfig:
        return self._config

    def make_connection(self, name: str) -> Connection:
        """根据配置构建连接（每次调用都会创建新的客户端）.

        Raises:
            UnknownConnectionError: 配置中不存在该连接名时抛出
        """
        connection_config = self._config.connections.get(name)
        if connection_config is None:
            raise UnknownConnectionError(f"配置中不存在名为 '{name}' 的连接")

        client = self._factory.create_client_from_config(
            connection_config,
            logger=self._logger,
            node_class=self._node_class,
        )
        return Connection(
            client,
            ignores=connection_config.ignores,
            logger=self._logger,
            default_index=connection_config.index,
        )

    def _deferred_builder(self, name: str) -> ConnectionBuilder:
        return lambda: self.make_connection(name)
