"""Human-readable dumps of 8- and 32-bit values."""


def _bits(value: int, width: int, group_sep) -> str:
    parts = []
    for i in range(width - 1, -1, -1):
        parts.append(str((value >> i) & 1))
        parts.append(group_sep(i))
    return "".join(parts)


def format_binary32(value: int) -> str:
    """Describe a 32-bit value in decimal, hex and grouped binary."""
    value &= 0xFFFFFFFF

    def sep(i: int) -> str:
        if i % 8 == 0:
            return " | "
        if i % 4 == 0:
            return " "
        return ""

    return f"Dec: {value}\nHex: 0x{value:02X}\nBin: {_bits(value, 32, sep)}"


def format_binary8(value: int) -> str:
    """Describe an 8-bit value in decimal, hex and grouped binary."""
    value &= 0xFF
    return f"Dec: {value}\nHex: 0x{value:02X}\nBin: {_bits(value, 8, lambda i: ' ' if i % 4 == 0 else '')}"