"""ECDSA P-256 key loading and signature verification."""
