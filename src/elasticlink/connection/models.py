"""连接配置数据模型定义模块.

提供连接相关的数据模型，包括：
- TransportOptions: 传输层（连接池、重试、嗅探）配置
- ConnectionConfig: 单个命名连接的配置
- ElasticConfig: 全部连接配置及默认连接名
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from elasticlink.typing import HostDescriptor

from .exceptions import ConfigurationError


def unique_status_codes(codes: Any) -> tuple[int, ...]:
    """去重状态码并保持原有顺序.

    Args:
        codes: 状态码序列，None 视为空

    Returns:
        去重后的状态码元组，例如 (404, 404, 409) -> (404, 409)
    """
    if not codes:
        return ()
    return tuple(dict.fromkeys(int(code) for code in codes))


@dataclass(frozen=True)
class TransportOptions:
    """传输层配置模型.

    定义 ES 客户端的连接池参数和重试策略。重试由底层客户端完成，
    本库自身不做任何重试。

    Attributes:
        max_connections: 每个节点的最大连接数，默认 10，必须 >= 1
        max_retries: 客户端最大重试次数，默认 3
        retry_on_timeout: 超时是否重试，默认 True
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        http_compress: 是否启用 HTTP 压缩，默认 True
        sniff_on_start: 启动时是否嗅探节点，默认 False
        sniff_on_connection_fail: 连接失败时是否嗅探，默认 False
        min_delay_between_sniffing: 两次嗅探的最小间隔（秒），默认 60

    Raises:
        ConfigurationError: 当参数不合法时抛出

    Examples:
        >>> options = TransportOptions(max_connections=20, request_timeout=60)
    """

    max_connections: int = 10
    max_retries: int = 3
    retry_on_timeout: bool = True
    request_timeout: float = 30
    http_compress: bool = True
    sniff_on_start: bool = False
    sniff_on_connection_fail: bool = False
    min_delay_between_sniffing: float = 60

    def __post_init__(self) -> None:
        """校验传输层配置参数合法性."""
        if self.max_connections < 1:
            raise ConfigurationError(
                f"max_connections 必须 >= 1，当前值: {self.max_connections}"
            )
        if self.request_timeout < 0:
            raise ConfigurationError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )

    def to_client_kwargs(self) -> dict[str, Any]:
        """转换为 Elasticsearch 构造函数参数."""
        return {
            "connections_per_node": self.max_connections,
            "max_retries": self.max_retries,
            "retry_on_timeout": self.retry_on_timeout,
            "request_timeout": self.request_timeout,
            "http_compress": self.http_compress,
            "sniff_on_start": self.sniff_on_start,
            "sniff_on_connection_fail": self.sniff_on_connection_fail,
            "min_delay_between_sniffing": self.min_delay_between_sniffing,
        }


@dataclass(frozen=True)
class ConnectionConfig:
    """命名连接配置模型.

    定义单个命名连接的节点地址、忽略的状态码、认证方式和传输层参数。
    创建后不可修改。

    Attributes:
        name: 连接名（在解析器内唯一）
        servers: 节点地址列表（必需，不可为空）
        ignores: 请求时视为非致命的 HTTP 状态码
        index: 默认索引名，Connection.index() 未传索引名时使用
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或元组）
        bearer_token: Bearer Token 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True
        options: 传输层配置

    Raises:
        ConfigurationError: 当 servers 为空时抛出

    Examples:
        >>> config = ConnectionConfig(
        ...     name="default",
        ...     servers=("http://localhost:9200",),
        ...     ignores=(404,),
        ... )
    """

    name: str
    servers: tuple[HostDescriptor, ...] = ()
    ignores: tuple[int, ...] = ()
    index: str | None = None
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    bearer_token: str | None = None
    ca_certs: str | None = None
    verify_certs: bool = True
    options: TransportOptions = field(default_factory=TransportOptions)

    def __post_init__(self) -> None:
        """校验连接配置并规范化序列字段."""
        if not self.servers:
            raise ConfigurationError(
                f"连接 '{self.name}' 的 servers 不能为空，请提供至少一个 ES 节点地址"
            )
        # frozen dataclass 只能通过 object.__setattr__ 规范化字段
        object.__setattr__(self, "servers", tuple(self.servers))
        object.__setattr__(self, "ignores", unique_status_codes(self.ignores))

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> ConnectionConfig:
        """从配置字典创建连接配置.

        Args:
            name: 连接名
            data: 形如 {"servers": [...], "ignore": [...], "index": "..."} 的字典，
                其余传输层参数可直接放在顶层或放在 "options" 子字典中

        Returns:
            连接配置实例

        Raises:
            ConfigurationError: 当配置不是字典或参数不合法时抛出
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"连接 '{name}' 的配置必须是字典")

        option_names = TransportOptions.__dataclass_fields__.keys()
        option_values = dict(data.get("options") or {})
        option_values.update({k: v for k, v in data.items() if k in option_names})
        unknown = set(option_values) - set(option_names)
        if unknown:
            raise ConfigurationError(
                f"连接 '{name}' 包含未知的传输层参数: {sorted(unknown)}"
            )

        servers = data.get("servers") or data.get("hosts") or ()
        if isinstance(servers, (str, Mapping)):
            servers = (servers,)

        return cls(
            name=name,
            servers=tuple(servers),
            ignores=tuple(data.get("ignore") or ()),
            index=data.get("index"),
            username=data.get("username"),
            password=data.get("password"),
            api_key=data.get("api_key"),
            bearer_token=data.get("bearer_token"),
            ca_certs=data.get("ca_certs"),
            verify_certs=data.get("verify_certs", True),
            options=TransportOptions(**option_values),
        )


@dataclass(frozen=True)
class ElasticConfig:
    """全部连接配置.

    Attributes:
        default: 默认连接名
        connections: 连接名到连接配置的映射

    Examples:
        >>> config = ElasticConfig.from_dict(
        ...     {
        ...         "default": "main",
        ...         "connections": {
        ...             "main": {"servers": ["http://localhost:9200"]},
        ...         },
        ...     }
        ... )
    """

    default: str | None = None
    connections: Mapping[str, ConnectionConfig] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ElasticConfig:
        """从配置字典创建全部连接配置.

        Raises:
            ConfigurationError: 当 connections 不是字典时抛出
        """
        connections = data.get("connections") or {}
        if not isinstance(connections, Mapping):
            raise ConfigurationError("connections 配置必须是以连接名为键的字典")

        return cls(
            default=data.get("default"),
            connections={
                name: ConnectionConfig.from_dict(name, value)
                for name, value in connections.items()
            },
        )
