"""elasticquery 异常定义模块."""


class ElasticQueryError(Exception):
    """elasticquery 基础异常类."""

    pass


class ConditionError(ElasticQueryError):
    """条件编译异常基类.

    编译过程要么完整成功，要么抛出该类异常，不会修改任何 QuerySpec。
    """

    pass


class MalformedConditionError(ConditionError):
    """条件结构异常.

    操作数数量或形态不合法时抛出，属于调用方错误，不可重试。
    """

    pass


class UnsupportedOperatorError(ConditionError):
    """不支持的操作符异常.

    未知操作符，或 Elasticsearch 无法表达的操作符。
    """

    pass


class CompositeKeyUnsupportedError(UnsupportedOperatorError):
    """多列 in / not in 条件异常.

    Elasticsearch 没有原生的复合键成员判断，单独区分以便调用方识别。
    """

    pass
