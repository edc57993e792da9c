PALETTE = [
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
    "#F8B500", "#00CED1", "#FF69B4", "#32CD32", "#FF4500",
]

# Shown for a booked day when no name is available
FALLBACK_COLOR = "#EF4444"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def color_of(customer_name: str) -> str:
    """
    Calendar colour for a customer.

    Rolling hash h = unit + (h * 31) over the UTF-16 code units of the name,
    with the shift done in 32-bit arithmetic. The same name always lands on
    the same palette entry, so the colour is never stored.
    """
    if not customer_name:
        return FALLBACK_COLOR

    raw = customer_name.encode("utf-16-le")
    h = 0
    for i in range(0, len(raw), 2):
        unit = raw[i] | (raw[i + 1] << 8)
        shifted = _to_int32(_to_int32(h) << 5)
        h = unit + (shifted - h)
    return PALETTE[abs(h) % len(PALETTE)]
