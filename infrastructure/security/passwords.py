from functools import cached_property

import bcrypt

from domain.exceptions.repository import ValidationError
from domain.exceptions.security import CryptoError

# bcrypt only considers the first 72 bytes of input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
	"""Salted bcrypt hashing with a fixed cost factor."""

	def __init__(self, rounds: int = 12):
		self.rounds = rounds

	@cached_property
	def _dummy_hash(self) -> bytes:
		return bcrypt.hashpw(b'dummy-password', bcrypt.gensalt(rounds=self.rounds))

	def hash(self, password: str) -> str:
		encoded = password.encode('utf-8')
		if len(encoded) > MAX_PASSWORD_BYTES:
			raise ValidationError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes')
		try:
			hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds))
		except ValueError as e:
			raise CryptoError(f'Password could not be hashed: {e}') from e
		return hashed.decode('utf-8')

	def verify(self, password: str, hashed_password: str) -> bool:
		encoded = password.encode('utf-8')
		if len(encoded) > MAX_PASSWORD_BYTES:
			# No stored hash can match; still pay the bcrypt cost.
			self.verify_dummy(password)
			return False
		try:
			return bcrypt.checkpw(encoded, hashed_password.encode('utf-8'))
		except ValueError as e:
			raise CryptoError('Malformed password hash') from e

	def verify_dummy(self, password: str) -> None:
		"""Run a full bcrypt check against a throwaway hash so unknown users cost the same."""
		encoded = password.encode('utf-8')[:MAX_PASSWORD_BYTES]
		bcrypt.checkpw(encoded, self._dummy_hash)
