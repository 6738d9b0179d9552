"""连接管理模块 - 统一管理命名连接的创建、缓存和默认连接选择.

主要组件:
    - ClientFactory: 客户端工厂，根据节点地址或连接配置创建客户端
    - Connection: 命名连接，绑定客户端与忽略的状态码
    - ConnectionResolver: 命名连接注册表，支持延迟构建与缓存
    - ConnectionManager: 基于配置的连接解析器
    - ConnectionConfig / ElasticConfig / TransportOptions: 配置模型

使用示例:
    from elasticlink.connection import ConnectionManager

    manager = ConnectionManager(
        {"default": "main", "connections": {"main": {"servers": ["http://localhost:9200"]}}}
    )
    connection = manager.connection()
"""

from .connection import Connection
from .exceptions import (
    ConfigurationError,
    ConnectionResolverError,
    UnknownConnectionError,
)
from .factory import ClientFactory
from .models import ConnectionConfig, ElasticConfig, TransportOptions
from .resolver import ConnectionManager, ConnectionResolver

__all__ = [
    # 连接
    "ClientFactory",
    "Connection",
    "ConnectionResolver",
    "ConnectionManager",
    # 模型
    "ConnectionConfig",
    "ElasticConfig",
    "TransportOptions",
    # 异常
    "ConnectionResolverError",
    "ConfigurationError",
    "UnknownConnectionError",
]
