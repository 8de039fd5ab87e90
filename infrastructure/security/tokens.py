"""
JWT access and refresh token handling.

Tokens carry the subject id, a purpose claim restricting them to a single role
(access or refresh), and ``iat``/``exp`` as integer epoch seconds. Refresh
tokens are never rotated: the refresh flow reissues access tokens only.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from domain.exceptions.auth import TokenExpired, TokenInvalid, TokenPurposeMismatch
from domain.models.user import IssuedToken, TokenClaims, TokenPurpose

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ['sub', 'purpose', 'iat', 'exp']


def _utcnow() -> datetime:
	return datetime.now(UTC)


class TokenService:
	def __init__(
		self,
		secret: str,
		access_ttl: timedelta = timedelta(minutes=15),
		refresh_ttl: timedelta = timedelta(days=7),
		algorithm: str = 'HS256',
		clock: Callable[[], datetime] = _utcnow,
	):
		if not secret:
			raise ValueError('Token signing secret must not be empty')
		if access_ttl >= refresh_ttl:
			raise ValueError('Access token lifetime must be shorter than refresh token lifetime')
		self._secret = secret
		self.access_ttl = access_ttl
		self.refresh_ttl = refresh_ttl
		self.algorithm = algorithm
		self._clock = clock

	def _ttl_for(self, purpose: TokenPurpose) -> timedelta:
		return self.refresh_ttl if purpose is TokenPurpose.REFRESH else self.access_ttl

	def issue(self, subject_id: int, purpose: TokenPurpose) -> IssuedToken:
		issued_at = int(self._clock().timestamp())
		expires_at = issued_at + int(self._ttl_for(purpose).total_seconds())

		payload = {
			'sub': str(subject_id),
			'purpose': purpose.value,
			'iat': issued_at,
			'exp': expires_at,
		}
		token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
		return IssuedToken(token=token, expires_at=datetime.fromtimestamp(expires_at, UTC))

	def verify_and_decode(self, token: str, expected_purpose: TokenPurpose) -> TokenClaims:
		# Expiry is checked against the injected clock below, not PyJWT's wall clock.
		try:
			payload = jwt.decode(
				token,
				self._secret,
				algorithms=[self.algorithm],
				options={
					'require': REQUIRED_CLAIMS,
					'verify_exp': False,
					'verify_iat': False,
					'verify_nbf': False,
				},
			)
			subject_id = int(payload['sub'])
			expires_at = int(payload['exp'])
			issued_at = int(payload['iat'])
		except jwt.InvalidTokenError as e:
			raise TokenInvalid(f'Token is invalid: {e}') from e
		except (TypeError, ValueError) as e:
			raise TokenInvalid('Token claims are malformed') from e

		if int(self._clock().timestamp()) >= expires_at:
			raise TokenExpired('Token has expired')

		if payload['purpose'] != expected_purpose.value:
			logger.warning(
				f'Token purpose mismatch: expected {expected_purpose.value}, got {payload["purpose"]}'
			)
			raise TokenPurposeMismatch(f'Token is not a {expected_purpose.value} token')

		return TokenClaims(
			subject_id=subject_id,
			purpose=expected_purpose,
			issued_at=datetime.fromtimestamp(issued_at, UTC),
			expires_at=datetime.fromtimestamp(expires_at, UTC),
		)
