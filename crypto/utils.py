from crypto.errors import InvalidParameter


# Expand bytes into bits, most significant bit first: b"\x80" -> [1,0,0,0,0,0,0,0]
def bytes_to_bits(data: bytes) -> list[int]:
    bits = [0] * (8 * len(data))
    for i, b in enumerate(data):
        for j in range(8):
            bits[i * 8 + j] = (b >> (7 - j)) & 1
    return bits


# Fold bits back into bytes, 8 at a time MSB first; a trailing partial byte is dropped
def bits_to_bytes(bits: list[int]) -> bytes:
    out = bytearray(len(bits) // 8)
    for i in range(len(out)):
        byte = 0
        for bit in bits[i * 8:(i + 1) * 8]:
            byte = (byte << 1) | (bit & 1)
        out[i] = byte
    return bytes(out)


# Minimal big-endian unsigned encoding; 0 encodes to b""
def int_to_bytes(n: int) -> bytes:
    if n < 0:
        raise InvalidParameter(f"cannot encode negative integer {n}")
    return n.to_bytes((n.bit_length() + 7) // 8, 'big')


def int_from_bytes(data: bytes) -> int:
    return int.from_bytes(data, 'big')
