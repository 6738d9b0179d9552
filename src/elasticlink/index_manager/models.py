"""索引管理数据模型定义模块."""

from typing import Any, TypedDict


class MappingProperty(TypedDict, total=False):
    """映射属性类型定义.

    Attributes:
        type: 字段类型（keyword, text, integer, date 等）
        fields: 多字段定义
        analyzer: 分析器
    """

    type: str
    fields: dict[str, Any]
    analyzer: str


class IndexMappings(TypedDict, total=False):
    """索引映射类型定义.

    Attributes:
        properties: 字段属性映射
        dynamic: 动态映射策略
    """

    properties: dict[str, MappingProperty]
    dynamic: str | bool


class AliasOptions(TypedDict, total=False):
    """别名选项类型定义.

    Attributes:
        filter: 通过别名搜索时自动附加的过滤条件
        routing: 索引和搜索共用的路由值
        index_routing: 索引路由值
        search_routing: 搜索路由值
        is_write_index: 是否为别名的写入索引
    """

    filter: dict[str, Any]
    routing: str
    index_routing: str
    search_routing: str
    is_write_index: bool


class IndexSettings(TypedDict):
    """创建索引时写入的设置."""

    number_of_shards: int
    number_of_replicas: int
