"""elasticlink 异常定义模块."""


class ElasticLinkError(Exception):
    """elasticlink 基础异常类."""

    pass


class InvalidArgumentError(ElasticLinkError, ValueError):
    """参数不合法异常.

    例如别名选项类型错误、分页参数为负数、未知的条件操作符等。
    """

    pass


class IllegalStateError(ElasticLinkError):
    """状态非法异常.

    当查询已经执行后仍被修改或再次执行时抛出。
    """

    pass
