class EthCursorError(Exception):
    """Base class for errors raised while materializing ethereum records"""


class ShapeMismatchError(EthCursorError, TypeError):
    """Value structure does not match the declared column type"""


class UnsupportedTypeError(EthCursorError, TypeError):
    """Column kind or value type has no encoding rule"""


class ValueOutOfRangeError(EthCursorError, ValueError):
    """Integer does not fit the declared column width"""


__all__ = [
    "EthCursorError",
    "ShapeMismatchError",
    "UnsupportedTypeError",
    "ValueOutOfRangeError",
]
