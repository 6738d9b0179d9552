"""elasticlink 类型定义模块."""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from elasticlink.connection.connection import Connection

# 节点地址描述：URL 字符串或 {"host", "port", "scheme"} 字典
HostDescriptor = Union[str, Mapping[str, Any]]

# 延迟构建连接的工厂函数
ConnectionBuilder = Callable[[], "Connection"]
