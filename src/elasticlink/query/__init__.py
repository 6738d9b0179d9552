"""查询模块导出."""

from elasticlink.query.clauses import ClauseBuilder, ClauseGroup
from elasticlink.query.query import Query
from elasticlink.query.scopes import FunctionScope, Scope, scope

__all__ = [
    "Query",
    "ClauseBuilder",
    "ClauseGroup",
    "Scope",
    "FunctionScope",
    "scope",
]
