"""ES 客户端工厂模块.

提供 ClientFactory 类，根据节点地址列表或命名连接配置创建
Elasticsearch 客户端实例。工厂本身不持有任何状态，客户端的缓存
由 ConnectionResolver 负责。

使用示例:
    from elasticlink.connection import ClientFactory

    factory = ClientFactory()
    client = factory.create_client(["http://localhost:9200"])
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from elasticsearch import Elasticsearch

from elasticlink.typing import HostDescriptor

from .models import ConnectionConfig


class ClientFactory:
    """Elasticsearch 客户端工厂.

    纯工厂类，每次调用都会构造新的客户端实例。若需替换客户端的构造方式，
    可继承本类并覆盖 create_client，再传给 ConnectionManager。

    Examples:
        >>> factory = ClientFactory()
        >>> client = factory.create_client(
        ...     ["http://localhost:9200"],
        ...     request_timeout=10,
        ... )
    """

    def create_client(
        self,
        hosts: Sequence[HostDescriptor],
        logger: logging.Logger | None = None,
        node_class: Any = None,
        **options: Any,
    ) -> Elasticsearch:
        """创建 Elasticsearch 客户端实例.

        Args:
            hosts: 节点地址列表
            logger: 可选日志记录器，用于记录客户端构造
            node_class: 可选自定义传输节点类（elastic_transport 节点实现）
            **options: 其他透传给 Elasticsearch 构造函数的参数

        Returns:
            Elasticsearch 客户端实例
        """
        kwargs: dict[str, Any] = {"hosts": list(hosts), **options}
        if node_class is not None:
            kwargs["node_class"] = node_class

        client = Elasticsearch(**kwargs)
        (logger or logging.getLogger(__name__)).info(
            f"创建 ES 客户端: hosts={list(hosts)}"
        )
        return client

    def create_client_from_config(
        self,
        config: ConnectionConfig,
        logger: logging.Logger | None = None,
        node_class: Any = None,
    ) -> Elasticsearch:
        """根据命名连接配置创建客户端.

        根据认证方式（Basic Auth / API Key / Bearer Token / 无认证）
        和 SSL 配置构建客户端。

        Args:
            config: 命名连接配置
            logger: 可选日志记录器
            node_class: 可选自定义传输节点类

        Returns:
            Elasticsearch 客户端实例
        """
        kwargs = config.options.to_client_kwargs()

        # Basic Auth 认证
        if config.username and config.password:
            kwargs["basic_auth"] = (config.username, config.password)

        # API Key 认证
        if config.api_key:
            kwargs["api_key"] = config.api_key

        # Bearer Token 认证
        if config.bearer_token:
            kwargs["bearer_auth"] = config.bearer_token

        # SSL/TLS 配置
        if config.ca_certs:
            kwargs["ca_certs"] = config.ca_certs
        kwargs["verify_certs"] = config.verify_certs

        return self.create_client(
            config.servers, logger=logger, node_class=node_class, **kwargs
        )
