"""Query-layer exceptions."""


class SearchRecordError(Exception):
    """Base exception for query building and execution errors."""


class InvalidArgumentError(SearchRecordError, ValueError):
    """Raised when a condition or query argument is malformed."""


class InvalidOperandCountError(InvalidArgumentError):
    """Raised when an operator is given the wrong number of operands."""


class NotSupportedError(SearchRecordError, NotImplementedError):
    """Raised for query operations a search engine cannot provide (relations, exists)."""
