class CryptoError(Exception):
    """Malformed key or ciphertext, or a failed authentication check."""
