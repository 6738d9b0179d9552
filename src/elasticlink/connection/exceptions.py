"""连接管理异常定义模块."""

from ..exceptions import ElasticLinkError


class ConnectionResolverError(ElasticLinkError):
    """连接解析基础异常类.

    所有连接注册、解析和配置相关异常的基类，继承自 ElasticLinkError。
    """

    pass


class ConfigurationError(ConnectionResolverError):
    """连接配置异常.

    当需要默认连接却未设置默认连接名，或连接配置不合法
    （例如 servers 为空、max_connections 小于 1）时抛出。
    """

    pass


class UnknownConnectionError(ConnectionResolverError):
    """连接未找到异常.

    当请求的连接名既没有已创建的连接，也没有注册延迟构建函数时抛出。
    """

    pass
