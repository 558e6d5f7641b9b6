from byte_descent.search.line_search import (
    DEFAULT_SIGNIFICANCE_THRESHOLD,
    SearchMode,
    ascend,
    descend,
    line_search,
)

__all__ = [
    "DEFAULT_SIGNIFICANCE_THRESHOLD",
    "SearchMode",
    "ascend",
    "descend",
    "line_search",
]
