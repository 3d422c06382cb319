"""XChaCha20-Poly1305 payload encryption with base64 framing."""

from __future__ import annotations

import base64
import hashlib
import json
from typing import Any

from Crypto.Cipher import ChaCha20_Poly1305
from Crypto.Random import get_random_bytes

KEY_SIZE = 32
NONCE_SIZE = 24
TAG_SIZE = 16


def _check_key(key: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise ValueError("chacha20poly1305: bad key length")


def encrypt(plain_text: bytes, key: bytes) -> str:
    """Seal ``plain_text`` and return base64 of nonce, ciphertext and tag."""
    _check_key(key)
    nonce = get_random_bytes(NONCE_SIZE)
    cipher = ChaCha20_Poly1305.new(key=key, nonce=nonce)
    sealed, tag = cipher.encrypt_and_digest(plain_text)
    return base64.b64encode(nonce + sealed + tag).decode("ascii")


def decrypt(cipher_text: str, key: bytes) -> bytes:
    """Open a payload made by :func:`encrypt`; raise ValueError if it is not authentic."""
    data = base64.b64decode(cipher_text, validate=True)
    _check_key(key)
    if len(data) < NONCE_SIZE + TAG_SIZE:
        raise ValueError("chacha20poly1305: ciphertext too short")
    nonce, body = data[:NONCE_SIZE], data[NONCE_SIZE:]
    cipher = ChaCha20_Poly1305.new(key=key, nonce=nonce)
    try:
        return cipher.decrypt_and_verify(body[:-TAG_SIZE], body[-TAG_SIZE:])
    except ValueError as exc:
        raise ValueError("chacha20poly1305: message authentication failed") from exc


def encrypt_json(data: Any, key: bytes) -> str:
    """Encode ``data`` as compact JSON and encrypt it."""
    plain_text = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return encrypt(plain_text.encode("utf-8"), key)


def generate_key(text: str) -> bytes:
    """Derive a 32-byte key as the SHA-256 digest of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).digest()