from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from core import keyfile
from core.knapsack import decrypt_bytes, encrypt_bytes, generate, key_id
from core.solver import solve_knapsack
from crypto.errors import KnapsackError

log = logging.getLogger("knapsack")

DEFAULT_KEY_LENGTH = int(os.environ.get("KNAPSACK_KEY_LENGTH", "100"))


# --text wins, then --in, then stdin
def _read_input(args) -> bytes:
    if args.text is not None:
        return args.text.encode()
    if args.infile is not None:
        return Path(args.infile).read_bytes()
    log.info("Reading input from stdin...")
    return sys.stdin.buffer.read()


def _write_output(args, data: bytes, what: str) -> None:
    if args.out:
        Path(args.out).write_bytes(data)
        log.info("Successfully %s and saved to %s", what, args.out)
    else:
        sys.stdout.buffer.write(data + b"\n")
        sys.stdout.flush()


# ——— subcommands ———
def cmd_new(args) -> int:
    log.info("Generating new Knapsack with key length %d...", args.length)
    k = generate(args.length)
    pk_path, sk_path = keyfile.save(k, args.out_dir)
    log.info("Successfully generated Knapsack public key and saved to %s", pk_path)
    log.info("Successfully generated Knapsack private key and saved to %s", sk_path)
    return 0


def cmd_encrypt(args) -> int:
    pk = keyfile.load_public(args.pubfile)
    log.info("Encrypting using public key %s...", key_id(pk).hex())
    ct = encrypt_bytes(pk, _read_input(args))
    _write_output(args, ct.hex().encode(), "encrypted")
    return 0


def cmd_decrypt(args) -> int:
    k = keyfile.load_private(args.privfile)
    log.info("Decrypting using private key %s...", key_id(k.private_key).hex())
    raw = _read_input(args).strip()
    try:
        ct = bytes.fromhex(raw.decode())  # ciphertext input is always hex
    except ValueError as e:
        raise KnapsackError(f"ciphertext is not valid hex: {e}") from e
    _write_output(args, decrypt_bytes(k, ct, args.verify), "decrypted")
    return 0


def cmd_solve(args) -> int:
    solution = solve_knapsack(args.weights, args.target)
    if solution is None:
        print(f"for weights {args.weights} and knapsack size {args.target}: no solution")
        return 1
    print(f"for weights {args.weights} and knapsack size {args.target}:\n\t{solution}")
    return 0


def _add_input_args(p: argparse.ArgumentParser, text_help: str) -> None:
    src = p.add_mutually_exclusive_group()
    src.add_argument("-t", "--text", help=text_help)
    src.add_argument("-i", "--in", dest="infile", help="Input file (default: stdin)")
    p.add_argument("-o", "--out", help="Output file (default: stdout)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="knapsack", description="Merkle–Hellman knapsack cryptosystem")
    parser.add_argument("-v", "--verbosity", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("new", help="Create a new Knapsack")
    p.add_argument("--length", type=int, default=DEFAULT_KEY_LENGTH, help="Desired public/private key length")
    p.add_argument("--out-dir", default=".", help="Output directory for public/private key files")
    p.set_defaults(fn=cmd_new)

    p = sub.add_parser("encrypt", help="Encrypt stdin (default), text, or files using a public key")
    p.add_argument("-p", "--pubfile", required=True, help="Path of public key file to use for encryption")
    _add_input_args(p, "Text to encrypt")
    p.set_defaults(fn=cmd_encrypt)

    p = sub.add_parser("decrypt", help="Decrypt stdin (default), text, or files using a private key")
    p.add_argument("-p", "--privfile", required=True, help="Path of private key file to use for decryption")
    _add_input_args(p, "Hex-encoded input to decrypt")
    p.add_argument("--verify", action="store_true", help="Fail if the ciphertext does not match the key")
    p.set_defaults(fn=cmd_decrypt)

    p = sub.add_parser("solve", help="Solve a general subset-sum instance (small inputs only)")
    p.add_argument("--target", type=int, required=True)
    p.add_argument("weights", type=int, nargs="+")
    p.set_defaults(fn=cmd_solve)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.verbosity), format="%(message)s", stream=sys.stderr)
    try:
        return args.fn(args)
    except (KnapsackError, OSError) as e:
        log.error("Error: %s", e)
        return 1
