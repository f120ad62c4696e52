from __future__ import annotations

import json
import os
from pathlib import Path

from core.knapsack import KeyPair
from crypto.errors import KeyFileError
from crypto.utils import int_from_bytes, int_to_bytes

PUBLIC_KEY_FILE = "knapsack_public.json"
PRIVATE_KEY_FILE = "knapsack_private.json"


def _encode(n: int) -> str:
    return int_to_bytes(n).hex()


def _decode(field: str, value) -> int:
    if not isinstance(value, str):
        raise KeyFileError(f"{field}: expected hex string, got {type(value).__name__}")
    try:
        return int_from_bytes(bytes.fromhex(value))
    except ValueError as e:
        raise KeyFileError(f"{field}: {e}") from e


def _load_doc(data: bytes | str, fields: tuple[str, ...]) -> dict:
    try:
        doc = json.loads(data)
    except ValueError as e:
        raise KeyFileError(f"not a key file: {e}") from e
    if not isinstance(doc, dict):
        raise KeyFileError("not a key file: top level must be an object")
    missing = [f for f in fields if f not in doc]
    if missing:
        raise KeyFileError(f"key file is missing {', '.join(missing)}")
    return doc


def _decode_key(field: str, value) -> tuple[int, ...]:
    if not isinstance(value, list):
        raise KeyFileError(f"{field}: expected a list")
    return tuple(_decode(f"{field}[{i}]", v) for i, v in enumerate(value))


# ——— serialize ———
# Split a key pair into (public file, private file) contents; integers as minimal big-endian hex
def pack(key_pair: KeyPair) -> tuple[bytes, bytes]:
    pub = json.dumps({"pub_key": [_encode(n) for n in key_pair.public_view()]}).encode()
    priv = json.dumps(
        {
            "priv_key": [_encode(n) for n in key_pair.private_key],
            "m": _encode(key_pair.modulus),  # modulus
            "w": _encode(key_pair.multiplier),  # blinding multiplier
            "wi": _encode(key_pair.multiplier_inverse)  # its inverse mod m
        }
    ).encode()
    return pub, priv


# ——— deserialize ———
def unpack_public(data: bytes | str) -> tuple[int, ...]:
    doc = _load_doc(data, ("pub_key",))
    return _decode_key("pub_key", doc["pub_key"])


def unpack_private(data: bytes | str) -> KeyPair:
    doc = _load_doc(data, ("priv_key", "m", "w", "wi"))
    return KeyPair(
        public_key=None,
        private_key=_decode_key("priv_key", doc["priv_key"]),
        modulus=_decode("m", doc["m"]),
        multiplier=_decode("w", doc["w"]),
        multiplier_inverse=_decode("wi", doc["wi"]),
    )


# Rejoin both halves into the full key pair
def unpack(pub: bytes | str, priv: bytes | str) -> KeyPair:
    k = unpack_private(priv)
    return KeyPair(unpack_public(pub), k.private_key, k.modulus, k.multiplier, k.multiplier_inverse)


# ——— files ———
def _write_private(path: Path, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(data)


# Write both key files into out_dir and return their paths (public, private)
def save(key_pair: KeyPair, out_dir: str | Path = ".") -> tuple[Path, Path]:
    out_dir = Path(out_dir)
    pub, priv = pack(key_pair)
    pk_path = out_dir / PUBLIC_KEY_FILE
    sk_path = out_dir / PRIVATE_KEY_FILE
    _write_private(pk_path, pub)
    _write_private(sk_path, priv)
    return pk_path, sk_path


def load_public(path: str | Path) -> tuple[int, ...]:
    return unpack_public(Path(path).read_bytes())


def load_private(path: str | Path) -> KeyPair:
    return unpack_private(Path(path).read_bytes())
