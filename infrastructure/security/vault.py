"""
AES-256-GCM envelope encryption for provider API keys stored at rest.

A blob is ``urlsafe_b64encode(nonce + ciphertext)`` where the nonce is a fresh
12-byte random value and the ciphertext carries the GCM authentication tag.
"""

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from domain.exceptions.security import CryptoError

KEY_SIZE = 32
NONCE_SIZE = 12


def _cipher(master_key: bytes) -> AESGCM:
	if len(master_key) != KEY_SIZE:
		raise CryptoError(f'Master key must be exactly {KEY_SIZE} bytes, got {len(master_key)}')
	return AESGCM(master_key)


def encrypt(plaintext: str, master_key: bytes) -> str:
	cipher = _cipher(master_key)
	nonce = os.urandom(NONCE_SIZE)
	sealed = cipher.encrypt(nonce, plaintext.encode('utf-8'), None)
	return base64.urlsafe_b64encode(nonce + sealed).decode('ascii')


def decrypt(blob: str, master_key: bytes) -> str:
	cipher = _cipher(master_key)

	try:
		raw = base64.urlsafe_b64decode(blob.encode('ascii'))
	except (binascii.Error, ValueError) as e:
		raise CryptoError('Ciphertext is not valid base64') from e

	if len(raw) < NONCE_SIZE:
		raise CryptoError('Ciphertext is shorter than the nonce')

	nonce, sealed = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
	try:
		plaintext = cipher.decrypt(nonce, sealed, None)
	except InvalidTag as e:
		raise CryptoError('Ciphertext failed authentication') from e

	try:
		return plaintext.decode('utf-8')
	except UnicodeDecodeError as e:
		raise CryptoError('Decrypted value is not valid UTF-8') from e


class CredentialVault:
	"""Encrypts and decrypts secrets with a single deployment-wide master key."""

	def __init__(self, master_key: bytes):
		_cipher(master_key)
		self._master_key = master_key

	@classmethod
	def from_config(cls, key: str) -> 'CredentialVault':
		return cls(key.encode('utf-8'))

	def encrypt(self, plaintext: str) -> str:
		return encrypt(plaintext, self._master_key)

	def decrypt(self, blob: str) -> str:
		return decrypt(blob, self._master_key)
