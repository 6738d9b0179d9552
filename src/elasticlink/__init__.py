"""elasticlink - Elasticsearch 连接解析、查询构建与索引管理.

这是一个将命名连接、链式查询构建器和索引管理对象绑定到
elasticsearch Python 客户端的库。

主要功能:
    - ConnectionResolver / ConnectionManager: 命名连接的惰性创建与缓存
    - Connection: 绑定客户端与忽略的状态码，创建查询和索引管理对象
    - Query: 可链式调用的查询构建器，执行结果适配为 Collection
    - Scope: 可复用的具名查询片段
    - Index: 索引创建、删除与存在性检查

使用示例:
    from elasticlink import ConnectionManager

    manager = ConnectionManager(
        {
            "default": "main",
            "connections": {"main": {"servers": ["http://localhost:9200"]}},
        }
    )
    result = manager.connection().index("logs").where("level", "error").get()
    print(result.total)
"""

__version__ = "0.1.0"

# 导出结果集合
from elasticlink.collection import Collection

# 导出连接管理
from elasticlink.connection import (
    ClientFactory,
    ConfigurationError,
    Connection,
    ConnectionConfig,
    ConnectionManager,
    ConnectionResolver,
    ConnectionResolverError,
    ElasticConfig,
    TransportOptions,
    UnknownConnectionError,
)

# 导出异常
from elasticlink.exceptions import (
    ElasticLinkError,
    IllegalStateError,
    InvalidArgumentError,
)

# 导出索引管理
from elasticlink.index_manager import Index

# 导出模型
from elasticlink.model import Model

# 导出查询构建
from elasticlink.query import FunctionScope, Query, Scope, scope

__all__ = [
    # 版本
    "__version__",
    # 连接
    "ClientFactory",
    "Connection",
    "ConnectionResolver",
    "ConnectionManager",
    "ConnectionConfig",
    "ElasticConfig",
    "TransportOptions",
    # 查询
    "Query",
    "Scope",
    "FunctionScope",
    "scope",
    "Collection",
    "Model",
    # 索引管理
    "Index",
    # 异常
    "ElasticLinkError",
    "InvalidArgumentError",
    "IllegalStateError",
    "ConnectionResolverError",
    "ConfigurationError",
    "UnknownConnectionError",
]
