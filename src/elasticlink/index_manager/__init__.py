"""索引管理模块.

提供索引创建、删除和存在性检查，支持分片数、副本数、映射和别名配置。

示例用法:
    >>> from elasticlink.index_manager import Index
    >>> index = Index("users", connection=connection).shards(3).replicas(1)
    >>> index.mapping({"properties": {"name": {"type": "keyword"}}})
    >>> index.create()
"""

from .models import AliasOptions, IndexMappings, IndexSettings, MappingProperty
from .tool import DEFAULT_REPLICAS, DEFAULT_SHARDS, Index

__all__ = [
    # 核心类
    "Index",
    "DEFAULT_SHARDS",
    "DEFAULT_REPLICAS",
    # 类型定义
    "IndexSettings",
    "MappingProperty",
    "IndexMappings",
    "AliasOptions",
]
