import json
import os
import random
import stat
import tempfile
import unittest
from pathlib import Path

from core import keyfile
from core.knapsack import decrypt, encrypt, generate
from crypto.errors import KeyFileError


class PackUnpackTest(unittest.TestCase):
    def setUp(self):
        self.k = generate(100, random.Random(8))

    def test_pack_unpack(self):
        pub, priv = keyfile.pack(self.k)
        self.assertEqual(keyfile.unpack(pub, priv), self.k)

    def test_private_file_alone_decrypts(self):
        pub, priv = keyfile.pack(self.k)
        pk = keyfile.unpack_public(pub)
        sk = keyfile.unpack_private(priv)
        self.assertIsNone(sk.public_key)
        self.assertEqual(decrypt(sk, encrypt(pk, b"round trip"))[:10], b"round trip")

    def test_integers_are_minimal_hex(self):
        _, priv = keyfile.pack(self.k)
        doc = json.loads(priv)
        self.assertEqual(set(doc), {"priv_key", "m", "w", "wi"})
        self.assertEqual(bytes.fromhex(doc["m"]), self.k.modulus.to_bytes((self.k.modulus.bit_length() + 7) // 8, "big"))
        for h in doc["priv_key"]:
            self.assertFalse(h.startswith("00"))

    def test_malformed(self):
        with self.assertRaises(KeyFileError):
            keyfile.unpack_public(b"not json")
        with self.assertRaises(KeyFileError):
            keyfile.unpack_public(b"[1, 2]")
        with self.assertRaises(KeyFileError):
            keyfile.unpack_public(b'{"pub_key": ["zz"]}')
        with self.assertRaises(KeyFileError):
            keyfile.unpack_private(b'{"priv_key": ["01"], "m": "0b"}')
        with self.assertRaises(KeyFileError):
            keyfile.unpack_private(b'{"priv_key": ["01"], "m": 11, "w": "02", "wi": "06"}')


class SaveLoadTest(unittest.TestCase):
    def test_save_load(self):
        k = generate(32, random.Random(3))
        with tempfile.TemporaryDirectory() as d:
            pk_path, sk_path = keyfile.save(k, d)
            self.assertEqual(pk_path, Path(d) / keyfile.PUBLIC_KEY_FILE)
            self.assertEqual(sk_path, Path(d) / keyfile.PRIVATE_KEY_FILE)
            self.assertEqual(keyfile.load_public(pk_path), k.public_key)
            self.assertEqual(keyfile.load_private(sk_path), k.private_view())
            if os.name == "posix":
                self.assertEqual(stat.S_IMODE(os.stat(sk_path).st_mode) & 0o077, 0)


if __name__ == "__main__":
    unittest.main()
