"""查询构建与执行模块."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from elasticsearch.dsl import Q, Search

from elasticlink.collection import Collection, ensure_dict
from elasticlink.connection.models import unique_status_codes
from elasticlink.exceptions import IllegalStateError, InvalidArgumentError

from .clauses import ClauseBuilder
from .scopes import FunctionScope, Scope

if TYPE_CHECKING:
    from elasticlink.connection.connection import Connection
    from elasticlink.model import Model

DEFAULT_SCROLL = "1m"

SORT_DIRECTIONS = ("asc", "desc")


class Query(ClauseBuilder):
    """
    可链式调用的查询构建器.

    绑定一个 Connection 和一个索引名，累积过滤、排序、分页、聚合等状态，
    执行时转换为客户端请求并把响应适配为 Collection.

    查询是一次性的：执行任一终结操作（get、first、count、update、delete 等）后
    进入已执行状态，再次修改或执行都会抛出 IllegalStateError，需要新建查询.

    使用示例:
        result = (
            connection.index("articles")
            .where("status", "published")
            .where("views", ">=", 100)
            .order_by("created_at", "desc")
            .skip(20)
            .take(10)
            .get()
        )

        for hit in result:
            print(hit["_source"]["title"])
    """

    def __init__(
        self,
        connection: Connection,
        index: str,
        model: Model | None = None,
    ) -> None:
        """
        初始化查询构建器.

        Args:
            connection: 执行查询的连接
            index: 索引名
            model: 绑定的模型实例，绑定后命中记录会转换为模型
        """
        super().__init__()
        self._connection = connection
        self._index = index
        self._model = model

        self._sort: list[str | dict[str, Any]] = []
        self._from: int | None = None
        self._size: int | None = None
        self._source: list[str] | None = None
        self._highlight: list[str] = []
        self._aggregations: list[dict[str, Any]] = []
        self._suggestions: dict[str, dict[str, Any]] = {}
        self._raw_body: dict[str, Any] = {}
        self._ignores: tuple[int, ...] | None = None
        self._scroll: str | None = None
        self._scroll_id: str | None = None
        self._executed = False

    # ========== 访问器 ==========

    def get_index(self) -> str:
        """获取绑定的索引名."""
        return self._index

    def get_connection(self) -> Connection:
        return self._connection

    def get_model(self) -> Model | None:
        return self._model

    def get_ignores(self) -> tuple[int, ...]:
        """获取本次请求实际使用的忽略状态码."""
        return self._connection.effective_ignores(self._ignores)

    @property
    def executed(self) -> bool:
        """查询是否已执行."""
        return self._executed

    # ========== 构建方法 ==========

    def set_model(self, model: Model | None) -> Query:
        self._before_change()
        self._model = model
        return self

    def order_by(self, field: str, direction: str = "asc") -> Query:
        """
        添加排序.

        Args:
            field: 字段名
            direction: asc 或 desc

        Raises:
            InvalidArgumentError: 排序方向不合法时抛出
        """
        self._before_change()
        direction = direction.lower()
        if direction not in SORT_DIRECTIONS:
            raise InvalidArgumentError(f"排序方向必须是 asc 或 desc，当前值: {direction}")
        self._sort.append({field: {"order": direction}})
        return self

    def sort(self, *keys: str | dict[str, Any]) -> Query:
        """
        添加排序（elasticsearch-dsl 格式）.

        示例:
            query.sort("-created_at", "name", {"_score": {"order": "desc"}})
        """
        self._before_change()
        self._sort.extend(keys)
        return self

    def skip(self, offset: int) -> Query:
        """设置起始位置（from），必须为非负整数."""
        self._before_change()
        self._from = self._validate_non_negative("from", offset)
        return self

    def take(self, size: int) -> Query:
        """
        设置返回数量（size），必须为非负整数.

        设为 0 时只返回聚合结果，不返回文档.
        """
        self._before_change()
        self._size = self._validate_non_negative("size", size)
        return self

    def select(self, *fields: str) -> Query:
        """限定返回的 _source 字段."""
        self._before_change()
        self._source = list(fields)
        return self

    def highlight(self, *fields: str) -> Query:
        """添加高亮字段."""
        self._before_change()
        self._highlight.extend(fields)
        return self

    def aggregate(
        self,
        name: str,
        agg_type: str,
        field: str | None = None,
        **kwargs: Any,
    ) -> Query:
        """
        添加聚合.

        Args:
            name: 聚合名称
            agg_type: 聚合类型（terms、avg、stats、cardinality 等）
            field: 字段名
            **kwargs: 其他聚合参数

        示例:
            query.aggregate("by_status", "terms", field="status", size=10)
        """
        self._before_change()
        if not name:
            raise InvalidArgumentError("聚合名称不能为空")
        self._aggregations.append(
            {"name": name, "type": agg_type, "field": field, "kwargs": kwargs}
        )
        return self

    def suggest(self, name: str, text: str, field: str, **options: Any) -> Query:
        """
        添加 term 建议.

        Args:
            name: 建议名称，对应 Collection.get_suggestions(name)
            text: 建议文本
            field: 建议字段
            **options: term 建议的其他参数
        """
        self._before_change()
        self._suggestions[name] = {"text": text, "term": {"field": field, **options}}
        return self

    def body(self, raw: dict[str, Any]) -> Query:
        """合并原始请求体，覆盖同名顶层键."""
        self._before_change()
        self._raw_body.update(raw)
        return self

    def ignore(self, *status_codes: int) -> Query:
        """
        设置本次请求忽略的 HTTP 状态码，覆盖连接级别配置.

        重复的状态码会被去重.
        """
        self._before_change()
        self._ignores = unique_status_codes(status_codes)
        return self

    def scroll(self, keep_alive: str = DEFAULT_SCROLL) -> Query:
        """
        启用滚动查询.

        Args:
            keep_alive: 游标保持时间，如 "1m"
        """
        self._before_change()
        self._scroll = keep_alive
        return self

    def scroll_id(self, scroll_id: str) -> Query:
        """设置滚动游标 ID，get() 将继续该游标而不是发起新搜索."""
        self._before_change()
        self._scroll_id = scroll_id
        return self

    def apply_scope(self, scope: Scope | Any, model: Model | None = None) -> Query:
        """
        应用作用域（原地修改查询）.

        Args:
            scope: Scope 实例，或签名为 (query, model) 的函数
            model: 传给作用域的模型，默认使用查询绑定的模型
        """
        self._before_change()
        if not isinstance(scope, Scope):
            scope = FunctionScope(scope)
        scope.apply(self, model if model is not None else self._model)
        return self

    def apply_scopes(self, *scopes: Scope | Any, model: Model | None = None) -> Query:
        """按给定顺序依次应用多个作用域."""
        for item in scopes:
            self.apply_scope(item, model=model)
        return self

    # ========== 请求体 ==========

    def build_search(self) -> Search:
        """
        构建 Search 对象.

        Returns:
            elasticsearch.dsl.Search 对象
        """
        q = self.to_q()
        search = Search().query(q if q is not None else Q("match_all"))

        if self._sort:
            search = search.sort(*self._sort)

        extra: dict[str, Any] = {}
        if self._from is not None:
            extra["from_"] = self._from
        if self._size is not None:
            extra["size"] = self._size
        if extra:
            search = search.extra(**extra)

        if self._source is not None:
            search = search.source(self._source)

        if self._highlight:
            search = search.highlight(*self._highlight)

        # search.aggs.bucket() 是原地修改，不需要重新赋值
        for agg in self._aggregations:
            if agg["field"]:
                search.aggs.bucket(
                    agg["name"], agg["type"], field=agg["field"], **agg["kwargs"]
                )
            else:
                search.aggs.bucket(agg["name"], agg["type"], **agg["kwargs"])

        for name, options in self._suggestions.items():
            search = search.suggest(
                name, options["text"], **{k: v for k, v in options.items() if k != "text"}
            )

        return search

    def build_body(self) -> dict[str, Any]:
        """
        导出请求体.

        没有任何条件时查询为 match_all.
        """
        body = self.build_search().to_dict()
        body.update(self._raw_body)
        return body

    def _query_body(self) -> dict[str, Any]:
        """只包含 query 部分的请求体，用于 count / update / delete."""
        return {"query": self.build_body()["query"]}

    # ========== 终结操作 ==========

    def get(self) -> Collection:
        """
        执行搜索.

        Returns:
            结果集合，绑定模型时集合元素为模型实例
        """
        self._mark_executed()
        client = self._transport()

        if self._scroll_id is not None:
            self._log(f"继续滚动查询: index={self._index}")
            response = client.scroll(
                scroll_id=self._scroll_id, scroll=self._scroll or DEFAULT_SCROLL
            )
        else:
            params: dict[str, Any] = {"index": self._index, "body": self.build_body()}
            if self._scroll is not None:
                params["scroll"] = self._scroll
            self._log(f"执行搜索: index={self._index}, body={params['body']}")
            response = client.search(**params)

        return self._to_collection(response)

    def first(self) -> Any:
        """执行搜索并返回第一条记录，没有命中时返回 None."""
        if not self._executed:
            self._size = 1
        return self.get().first()

    def count(self) -> int:
        """统计命中数量."""
        self._mark_executed()
        body = self._query_body()
        self._log(f"执行计数: index={self._index}, body={body}")
        response = self._transport().count(index=self._index, body=body)
        return int(response["count"])

    def find(self, doc_id: str) -> Any:
        """
        按文档 ID 获取单个文档.

        文档不存在（且 404 被忽略）时返回 None.
        """
        self._mark_executed()
        response = ensure_dict(self._transport().get(index=self._index, id=doc_id))
        if not response.get("found", False):
            return None
        return self._hydrate(dict(response))

    def insert(self, document: dict[str, Any], doc_id: str | None = None) -> Any:
        """
        写入单个文档.

        Args:
            document: 文档内容
            doc_id: 文档 ID，None 时由 ES 生成

        Returns:
            ES 原始响应
        """
        self._mark_executed()
        params: dict[str, Any] = {"index": self._index, "document": document}
        if doc_id is not None:
            params["id"] = doc_id
        self._log(f"写入文档: index={self._index}, id={doc_id}")
        return self._transport().index(**params)

    def update(self, fields: dict[str, Any]) -> Any:
        """
        更新所有命中文档的字段（update_by_query）.

        Args:
            fields: 字段名到新值的映射

        Returns:
            ES 原始响应

        Raises:
            InvalidArgumentError: fields 为空时抛出
        """
        if not fields:
            raise InvalidArgumentError("更新字段不能为空")
        self._mark_executed()
        source = "; ".join(
            f"ctx._source['{_escape_painless(key)}'] = params['{_escape_painless(key)}']"
            for key in fields
        )
        body = {
            **self._query_body(),
            "script": {"source": source, "lang": "painless", "params": dict(fields)},
        }
        self._log(f"按条件更新: index={self._index}, body={body}")
        return self._transport().update_by_query(index=self._index, body=body)

    def delete(self) -> Any:
        """删除所有命中文档（delete_by_query），返回 ES 原始响应."""
        self._mark_executed()
        body = self._query_body()
        self._log(f"按条件删除: index={self._index}, body={body}")
        return self._transport().delete_by_query(index=self._index, body=body)

    def clear_scroll(self) -> Any:
        """
        清除滚动游标.

        Raises:
            InvalidArgumentError: 未设置滚动游标 ID 时抛出
        """
        if self._scroll_id is None:
            raise InvalidArgumentError("未设置滚动游标 ID")
        self._mark_executed()
        return self._transport().clear_scroll(scroll_id=self._scroll_id)

    # ========== 内部方法 ==========

    def _before_change(self) -> None:
        if self._executed:
            raise IllegalStateError("查询已执行，不能再修改，请创建新的查询")

    def _mark_executed(self) -> None:
        if self._executed:
            raise IllegalStateError("查询已执行，不能重复执行，请创建新的查询")
        self._executed = True

    def _transport(self) -> Any:
        return self._connection.transport(self._ignores)

    def _log(self, message: str) -> None:
        self._connection.logger.debug(message)

    def _to_collection(self, response: Any) -> Collection:
        collection = Collection.from_response(response)
        if self._model is None:
            return collection
        return Collection.from_response(
            response, items=[self._hydrate(hit) for hit in collection.items]
        )

    def _hydrate(self, hit: dict[str, Any]) -> Any:
        if self._model is None:
            return hit
        return self._model.new_from_hit(hit)

    @staticmethod
    def _validate_non_negative(name: str, value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidArgumentError(f"{name} 必须是非负整数，当前值: {value!r}")
        return value

    def __repr__(self) -> str:
        return f"<Query index={self._index!r} executed={self._executed}>"


def _escape_painless(key: str) -> str:
    return key.replace("\\", "\\\\").replace("'", "\\'")
