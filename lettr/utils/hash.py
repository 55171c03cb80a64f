"""Hashing utilities."""
import hashlib


def sha256_key(text: str) -> str:
    """Generate a SHA-256 hash for a given input string."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def hash_source_address(address: str, secret: str = "", length: int = 16) -> str:
    """One-way salted hash of a request source address."""
    return sha256_key(address + (secret or ""))[:length]
