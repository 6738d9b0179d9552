"""索引管理工具类."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from elasticlink.connection.models import unique_status_codes
from elasticlink.exceptions import IllegalStateError, InvalidArgumentError

from .models import AliasOptions, IndexMappings, IndexSettings

if TYPE_CHECKING:
    from elasticlink.connection.connection import Connection

logger = logging.getLogger(__name__)

PARAM_ALIASES = "aliases"
PARAM_BODY = "body"
PARAM_CLIENT = "client"
PARAM_CLIENT_IGNORE = "ignore"
PARAM_INDEX = "index"
PARAM_MAPPINGS = "mappings"
PARAM_SETTINGS = "settings"

DEFAULT_SHARDS = 5
DEFAULT_REPLICAS = 0


class Index:
    """索引管理对象.

    以链式调用累积分片数、副本数、映射、别名和忽略的状态码，
    create() 将其组装为单个创建请求提交。

    Args:
        name: 索引名称
        connection: 提交请求使用的连接

    Example:
        >>> index = (
        ...     connection.create_index("users")
        ...     .shards(3)
        ...     .replicas(1)
        ...     .mapping({"properties": {"name": {"type": "keyword"}}})
        ...     .alias("people")
        ...     .ignore(400)
        ... )
        >>> index.create()
    """

    def __init__(self, name: str, connection: Connection | None = None):
        if not name:
            raise InvalidArgumentError("索引名称不能为空")
        self._name = name
        self._connection = connection
        self._shards = DEFAULT_SHARDS
        self._replicas = DEFAULT_REPLICAS
        self._mappings: IndexMappings | dict[str, Any] = {}
        self._aliases: dict[str, AliasOptions | dict[str, Any] | str] = {}
        self._ignores: tuple[int, ...] = ()

    def get_name(self) -> str:
        """获取索引名称."""
        return self._name

    @property
    def connection(self) -> Connection | None:
        return self._connection

    def set_connection(self, connection: Connection) -> Index:
        """设置提交请求使用的连接."""
        self._connection = connection
        return self

    def shards(self, shards: int) -> Index:
        """设置主分片数量，只能在创建索引时设置.

        Args:
            shards: 分片数量，默认 5
        """
        self._shards = self._validate_count("shards", shards)
        return self

    def replicas(self, replicas: int) -> Index:
        """设置每个主分片的副本数量.

        Args:
            replicas: 副本数量，默认 0
        """
        self._replicas = self._validate_count("replicas", replicas)
        return self

    def mapping(self, mappings: IndexMappings | dict[str, Any] | None = None) -> Index:
        """设置字段映射，覆盖之前的设置."""
        self._mappings = dict(mappings or {})
        return self

    def alias(
        self,
        alias: str,
        options: AliasOptions | Mapping[str, Any] | str | None = None,
    ) -> Index:
        """添加索引别名.

        Args:
            alias: 别名名称
            options: 别名选项，可以是选项字典、字符串路由值或 None

        Raises:
            InvalidArgumentError: options 类型不合法时抛出

        Example:
            >>> index.alias("logs-current", {"is_write_index": True})
            >>> index.alias("logs-tenant-a", "tenant-a")
        """
        if options is not None and not isinstance(options, (str, Mapping)):
            raise InvalidArgumentError(
                "别名选项只能是字典、字符串路由值或 None，"
                f"当前类型: {type(options).__name__}"
            )
        if isinstance(options, Mapping):
            options = dict(options)
        self._aliases[alias] = {} if options is None else options
        return self

    def ignore(self, *status_codes: int) -> Index:
        """配置客户端忽略的 HTTP 状态码，重复的状态码会被去重."""
        self._ignores = unique_status_codes(status_codes)
        return self

    def get_ignores(self) -> tuple[int, ...]:
        """获取实际使用的忽略状态码，未单独设置时使用连接配置."""
        if self._ignores or self._connection is None:
            return self._ignores
        return self._connection.ignores

    def build_create_params(self) -> dict[str, Any]:
        """组装创建索引的请求参数（不发起网络请求）.

        Returns:
            形如 {"index": ..., "body": {"settings": {...}, "aliases": ...,
            "mappings": ...}, "client": {"ignore": [...]}} 的字典，
            aliases、mappings、client 仅在非空时出现
        """
        settings: IndexSettings = {
            "number_of_shards": self._shards,
            "number_of_replicas": self._replicas,
        }
        params: dict[str, Any] = {
            PARAM_INDEX: self._name,
            PARAM_BODY: {PARAM_SETTINGS: settings},
        }

        ignores = self.get_ignores()
        if ignores:
            params[PARAM_CLIENT] = {PARAM_CLIENT_IGNORE: list(ignores)}

        if self._aliases:
            params[PARAM_BODY][PARAM_ALIASES] = dict(self._aliases)

        if self._mappings:
            params[PARAM_BODY][PARAM_MAPPINGS] = dict(self._mappings)

        return params

    def build_drop_params(self) -> dict[str, Any]:
        """组装删除索引的请求参数（不发起网络请求）."""
        return {
            PARAM_INDEX: self._name,
            PARAM_CLIENT: {PARAM_CLIENT_IGNORE: list(self.get_ignores())},
        }

    def exists(self) -> bool:
        """检查索引是否存在."""
        return bool(self._require_connection().client.indices.exists(index=self._name))

    def create(self) -> Any:
        """创建索引.

        Returns:
            ES 原始响应
        """
        params = self.build_create_params()
        client = self._transport(params)
        response = client.indices.create(
            index=params[PARAM_INDEX], body=params[PARAM_BODY]
        )
        logger.info(
            f"索引 '{self._name}' 创建请求已提交 "
            f"(shards={self._shards}, replicas={self._replicas})"
        )
        return response

    def drop(self) -> Any:
        """删除索引.

        Returns:
            ES 原始响应
        """
        params = self.build_drop_params()
        client = self._transport(params)
        response = client.indices.delete(index=params[PARAM_INDEX])
        logger.info(f"索引 '{self._name}' 删除请求已提交")
        return response

    def _transport(self, params: dict[str, Any]) -> Any:
        ignores = params.get(PARAM_CLIENT, {}).get(PARAM_CLIENT_IGNORE)
        return self._require_connection().transport(ignores)

    def _require_connection(self) -> Connection:
        if self._connection is None:
            raise IllegalStateError(f"索引 '{self._name}' 未绑定连接")
        return self._connection

    @staticmethod
    def _validate_count(name: str, value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidArgumentError(f"{name} 必须是非负整数，当前值: {value!r}")
        return value

    def __repr__(self) -> str:
        return f"<Index name={self._name!r}>"
