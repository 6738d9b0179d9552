"""文档模型模块.

Model 描述一个索引中的文档类型：所在索引、使用的连接以及全局作用域。
只提供查询与作用域所需的最小能力，不做属性类型转换和事件派发。

使用示例:
    class Article(Model):
        index_name = "articles"
        connection_name = "main"
        global_scopes = (published,)

    result = Article.query(resolver).where("author", "alice").get()
    for article in result:
        print(article.id, article["title"])
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from elasticlink.exceptions import InvalidArgumentError
from elasticlink.query.query import Query
from elasticlink.query.scopes import Scope

if TYPE_CHECKING:
    from elasticlink.connection.resolver import ConnectionResolver


class Model:
    """
    文档模型基类.

    Attributes:
        index_name: 文档所在索引，None 时使用连接的默认索引
        connection_name: 使用的连接名，None 时使用解析器的默认连接
        global_scopes: 每次查询都会按顺序应用的作用域
    """

    index_name: ClassVar[str | None] = None
    connection_name: ClassVar[str | None] = None
    global_scopes: ClassVar[tuple[Scope | Any, ...]] = ()

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        *,
        id: str | None = None,  # noqa: A002
        score: float | None = None,
        index: str | None = None,
    ) -> None:
        self._attributes: dict[str, Any] = dict(attributes or {})
        self.id = id
        self.score = score
        self.index = index or self.index_name

    @classmethod
    def query(cls, resolver: ConnectionResolver) -> Query:
        """
        创建绑定到本模型的查询.

        通过解析器获取连接，绑定模型实例并按顺序应用全局作用域.

        Args:
            resolver: 连接解析器

        Returns:
            Query 实例
        """
        connection = resolver.connection(cls.connection_name)
        query = connection.index(cls.index_name)
        query.set_model(cls())
        return query.apply_scopes(*cls.global_scopes)

    @classmethod
    def from_hit(cls, hit: Mapping[str, Any]) -> Model:
        """
        从 ES 命中记录创建模型实例.

        Raises:
            InvalidArgumentError: hit 不是字典时抛出
        """
        if not isinstance(hit, Mapping):
            raise InvalidArgumentError(f"命中记录必须是字典，当前类型: {type(hit)}")
        return cls(
            hit.get("_source") or {},
            id=hit.get("_id"),
            score=hit.get("_score"),
            index=hit.get("_index"),
        )

    def new_from_hit(self, hit: Mapping[str, Any]) -> Model:
        """使用当前实例的模型类创建新实例."""
        return type(self).from_hit(hit)

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._attributes[key]

    def __contains__(self, key: object) -> bool:
        return key in self._attributes

    def to_dict(self) -> dict[str, Any]:
        """转换为字典（仅文档属性）."""
        return dict(self._attributes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.id == other.id
            and self.index == other.index
            and self._attributes == other._attributes
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} index={self.index!r}>"
