"""bool 子句构建模块.

提供 where 系列方法，将条件累积到 bool 查询的
must / should / filter / must_not 四类子句中。
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from elasticsearch.dsl import Q
from elasticsearch.dsl.query import Query as DslQuery

from elasticlink.exceptions import InvalidArgumentError

# 未传参标记，用于区分 where(field, value) 与 where(field, operator, value)
_UNSET: Any = object()

# 范围操作符到 range 查询参数的映射
RANGE_OPERATORS = {
    ">": "gt",
    ">=": "gte",
    "<": "lt",
    "<=": "lte",
}

NOT_EQUAL_OPERATORS = ("!=", "<>")

SUPPORTED_OPERATORS = ("=", *NOT_EQUAL_OPERATORS, *RANGE_OPERATORS, "like")

MUST = "must"
SHOULD = "should"
FILTER = "filter"
MUST_NOT = "must_not"


class ClauseBuilder:
    """
    bool 子句累积器.

    精确匹配、范围、terms、exists 条件进入 filter（不计分），
    like 与全文检索进入 must，否定条件进入 must_not，
    or_where 系列进入 should（存在 should 子句时至少匹配一个）。

    使用示例:
        builder.where("status", "active")
        builder.where("age", ">=", 18)
        builder.where(lambda group: group.where("a", 1).or_where("b", 2))
    """

    def __init__(self) -> None:
        self._clauses: dict[str, list[DslQuery]] = {
            MUST: [],
            SHOULD: [],
            FILTER: [],
            MUST_NOT: [],
        }

    def _before_change(self) -> None:
        """修改子句前的钩子，子类可用于状态校验."""

    def where(
        self,
        field: str | Callable[[ClauseGroup], Any],
        operator: Any = _UNSET,
        value: Any = _UNSET,
    ) -> ClauseBuilder:
        """
        添加条件.

        Args:
            field: 字段名，或接收 ClauseGroup 的函数（构建嵌套 bool 组）
            operator: 操作符（=, !=, <>, >, >=, <, <=, like）；
                只传两个参数时视为取值，操作符为 =
            value: 取值

        Returns:
            self，支持链式调用

        Raises:
            InvalidArgumentError: 操作符不支持时抛出

        示例:
            builder.where("status", "active")
            builder.where("age", ">", 18)
            builder.where("title", "like", "elastic")
        """
        self._before_change()
        context, q = self._make_clause(field, operator, value)
        self._clauses[context].append(q)
        return self

    def or_where(
        self,
        field: str | Callable[[ClauseGroup], Any],
        operator: Any = _UNSET,
        value: Any = _UNSET,
    ) -> ClauseBuilder:
        """添加 OR 条件（参数同 where）."""
        self._before_change()
        context, q = self._make_clause(field, operator, value)
        if context == MUST_NOT:
            q = Q("bool", must_not=[q])
        self._clauses[SHOULD].append(q)
        return self

    def where_not(self, field: str, value: Any) -> ClauseBuilder:
        """添加不等于条件."""
        return self.where(field, "!=", value)

    def where_in(self, field: str, values: Iterable[Any]) -> ClauseBuilder:
        """添加 terms 条件."""
        self._before_change()
        self._clauses[FILTER].append(Q("terms", **{field: list(values)}))
        return self

    def where_not_in(self, field: str, values: Iterable[Any]) -> ClauseBuilder:
        """添加 terms 否定条件."""
        self._before_change()
        self._clauses[MUST_NOT].append(Q("terms", **{field: list(values)}))
        return self

    def where_between(self, field: str, low: Any, high: Any) -> ClauseBuilder:
        """添加闭区间范围条件."""
        self._before_change()
        self._clauses[FILTER].append(Q("range", **{field: {"gte": low, "lte": high}}))
        return self

    def where_not_between(self, field: str, low: Any, high: Any) -> ClauseBuilder:
        """添加闭区间范围否定条件."""
        self._before_change()
        self._clauses[MUST_NOT].append(
            Q("range", **{field: {"gte": low, "lte": high}})
        )
        return self

    def where_exists(self, field: str) -> ClauseBuilder:
        """添加字段存在条件."""
        self._before_change()
        self._clauses[FILTER].append(Q("exists", field=field))
        return self

    def where_not_exists(self, field: str) -> ClauseBuilder:
        """添加字段不存在条件."""
        self._before_change()
        self._clauses[MUST_NOT].append(Q("exists", field=field))
        return self

    def filter(self, q: DslQuery | dict[str, Any]) -> ClauseBuilder:
        """
        添加原始过滤条件.

        Args:
            q: Q 对象或查询 DSL 字典
        """
        self._before_change()
        self._clauses[FILTER].append(q if isinstance(q, DslQuery) else Q(q))
        return self

    def search(
        self,
        text: str,
        fields: list[str] | None = None,
        boost: float | None = None,
    ) -> ClauseBuilder:
        """
        添加全文检索条件.

        Args:
            text: Query String 语法的检索文本
            fields: 检索字段，None 表示使用索引默认字段
            boost: 权重
        """
        self._before_change()
        params: dict[str, Any] = {"query": text}
        if fields:
            params["fields"] = list(fields)
        if boost is not None:
            params["boost"] = boost
        self._clauses[MUST].append(Q("query_string", **params))
        return self

    def has_clauses(self) -> bool:
        """是否已累积任何子句."""
        return any(self._clauses.values())

    def to_q(self) -> DslQuery | None:
        """
        合并为 bool 查询.

        Returns:
            bool 查询，没有任何子句时返回 None
        """
        if not self.has_clauses():
            return None

        params: dict[str, Any] = {
            context: list(clauses)
            for context, clauses in self._clauses.items()
            if clauses
        }
        if SHOULD in params:
            params["minimum_should_match"] = 1
        return Q("bool", **params)

    def _make_clause(
        self, field: Any, operator: Any, value: Any
    ) -> tuple[str, DslQuery]:
        """根据参数生成子句及其所属上下文."""
        if callable(field):
            group = ClauseGroup()
            field(group)
            q = group.to_q()
            if q is None:
                q = Q("match_all")
            return MUST, q

        if value is _UNSET:
            if operator is _UNSET:
                raise InvalidArgumentError(f"字段 '{field}' 缺少取值")
            operator, value = "=", operator

        if operator == "=":
            return FILTER, Q("term", **{field: value})
        if operator in NOT_EQUAL_OPERATORS:
            return MUST_NOT, Q("term", **{field: value})
        if operator in RANGE_OPERATORS:
            return FILTER, Q("range", **{field: {RANGE_OPERATORS[operator]: value}})
        if operator == "like":
            return MUST, Q("match", **{field: value})

        raise InvalidArgumentError(
            f"不支持的操作符: {operator!r}，可选值: {', '.join(SUPPORTED_OPERATORS)}"
        )


class ClauseGroup(ClauseBuilder):
    """嵌套 bool 组，由 where(callable) 创建."""
