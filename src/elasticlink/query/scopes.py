"""查询作用域模块.

作用域是可复用的具名查询片段，在执行前作用于 Query。
多个作用域按调用方给定的顺序依次应用，不做冲突检测。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from elasticlink.model import Model
    from elasticlink.query.query import Query


class Scope(ABC):
    """
    查询作用域接口.

    使用示例:
        class ActiveScope(Scope):
            def apply(self, query, model):
                query.where("status", "active")

        query.apply_scope(ActiveScope())
    """

    @property
    def name(self) -> str:
        """作用域名称，默认使用类名."""
        return type(self).__name__

    @abstractmethod
    def apply(self, query: Query, model: Model | None) -> None:
        """
        将作用域应用到查询构建器（原地修改）.

        Args:
            query: 查询构建器
            model: 查询绑定的模型实例，未绑定时为 None
        """


class FunctionScope(Scope):
    """由普通函数包装的作用域."""

    def __init__(
        self,
        func: Callable[[Query, Model | None], Any],
        name: str | None = None,
    ) -> None:
        self._func = func
        self._name = name or getattr(func, "__name__", type(self).__name__)

    @property
    def name(self) -> str:
        return self._name

    def apply(self, query: Query, model: Model | None) -> None:
        self._func(query, model)

    def __repr__(self) -> str:
        return f"<FunctionScope {self._name}>"


def scope(
    func: Callable[[Query, Model | None], Any] | None = None,
    *,
    name: str | None = None,
) -> Any:
    """
    将函数声明为作用域的装饰器.

    使用示例:
        @scope
        def published(query, model):
            query.where("published", True)

        @scope(name="recent")
        def newest_first(query, model):
            query.order_by("created_at", "desc")
    """
    if func is None:
        return lambda f: FunctionScope(f, name=name)
    return FunctionScope(func, name=name)
