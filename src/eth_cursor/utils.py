from typing import Any, Optional


def to_hex_str(value: Any) -> Optional[str]:
    """Normalize HexBytes / bytes / str into a 0x-prefixed hex string"""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "0x" + bytes(value).hex()
    raise TypeError(f"cannot convert {type(value).__name__} to hex string")


def hex_to_int(value: Any) -> Optional[int]:
    """Decode a JSON-RPC quantity, passing native ints through"""
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("boolean is not a quantity")
    if isinstance(value, int):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return int.from_bytes(bytes(value), "big")
    if isinstance(value, str):
        if value[:2].lower() == "0x":
            return int(value, 16) if len(value) > 2 else 0
        return int(value)
    raise TypeError(f"cannot convert {type(value).__name__} to int")


__all__ = ["to_hex_str", "hex_to_int"]
