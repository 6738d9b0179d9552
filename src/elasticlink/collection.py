"""
ES 查询结果集合.

将 Elasticsearch 原始搜索响应适配为只读的结果集合.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, overload

T = TypeVar("T")


def ensure_dict(response: Any) -> Mapping[str, Any]:
    """
    确保响应为字典格式.

    支持 ObjectApiResponse（带 body 属性）、elasticsearch-dsl Response 对象和原始字典.
    """
    if isinstance(response, Mapping):
        return response
    if hasattr(response, "body"):
        return response.body
    if hasattr(response, "to_dict"):
        return response.to_dict()
    raise TypeError(f"不支持的响应类型: {type(response)}")


def normalize_total(total: Any) -> int:
    """
    规范化命中总数.

    兼容 ES 6.x 的整数格式和 7.x 之后的 {"value": n, "relation": "eq"} 格式.
    """
    if isinstance(total, Mapping):
        return int(total.get("value", 0))
    return int(total or 0)


@dataclass(frozen=True)
class Collection(Sequence, Generic[T]):
    """
    只读结果集合.

    由一次搜索响应构造，构造后不再修改.

    Attributes:
        items: 命中记录（原始 hit 或模型实例）
        total: 命中总数
        max_score: 最高相关性得分
        duration: 查询耗时（毫秒）
        timed_out: 是否超时
        scroll_id: 滚动游标 ID
        shards: 分片执行报告
        suggestions: 按名称分组的建议结果
        aggregations: 聚合结果

    示例:
        result = Collection.from_response(response)

        print(f"共 {result.total} 条记录，耗时 {result.duration}ms")
        for hit in result:
            print(hit["_source"])
    """

    items: tuple[T, ...] = ()
    total: int | None = None
    max_score: float | None = None
    duration: float | None = None
    timed_out: bool | None = None
    scroll_id: str | None = None
    shards: Mapping[str, Any] | None = None
    suggestions: Mapping[str, list[Any]] = field(default_factory=dict)
    aggregations: Mapping[str, Any] | None = None

    @classmethod
    def from_response(
        cls,
        response: Any,
        items: Sequence[T] | None = None,
    ) -> Collection[T]:
        """
        从原始响应构造集合.

        Args:
            response: ES 原始搜索响应
            items: 已转换的命中记录，None 表示直接使用 hits.hits

        Returns:
            结果集合
        """
        response_dict = ensure_dict(response)
        hits_info = response_dict.get("hits", {})
        if items is None:
            items = hits_info.get("hits", [])

        return cls(
            items=tuple(items),
            total=normalize_total(hits_info.get("total", 0)),
            max_score=hits_info.get("max_score"),
            duration=response_dict.get("took"),
            timed_out=response_dict.get("timed_out"),
            scroll_id=response_dict.get("_scroll_id"),
            shards=response_dict.get("_shards"),
            suggestions=dict(response_dict.get("suggest") or {}),
            aggregations=response_dict.get("aggregations"),
        )

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[T, ...]: ...

    def __getitem__(self, index):
        return self.items[index]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def first(self) -> T | None:
        """获取第一条记录，集合为空时返回 None."""
        return self.items[0] if self.items else None

    def is_empty(self) -> bool:
        return not self.items

    def get_suggestions(self, name: str) -> list[Any]:
        """获取指定名称的建议结果，不存在时返回空列表."""
        return list(self.suggestions.get(name, []))

    def get_all_suggestions(self) -> dict[str, list[Any]]:
        """获取全部建议结果."""
        return {name: list(entries) for name, entries in self.suggestions.items()}

    def to_list(self) -> list[Any]:
        """
        转换为列表格式.

        具有 to_dict 方法的记录（如模型实例）会被转换为字典.
        """
        return [
            item.to_dict() if hasattr(item, "to_dict") else item for item in self.items
        ]
