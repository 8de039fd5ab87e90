"""
Turns provider-specific rate payloads into ``NormalizedRate`` records.

Supported shapes:
    {"data": {"EUR": 0.92, ...}}                 canonical
    {"data": {"EUR": {"value": 0.92}, ...}}      currencyapi.com
    {"rates": {"EUR": 0.92, ...}, "base": "USD"} fixer.io / openexchangerates
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from domain.exceptions.currency import ProviderError
from domain.models.currency import NormalizedRate


def _to_decimal(provider: str, code: str, value: Any) -> Decimal:
	if isinstance(value, dict):
		value = value.get('value')
	if isinstance(value, bool) or not isinstance(value, int | float | str):
		raise ProviderError(f'{provider} returned a non-numeric rate for {code}', provider=provider)
	try:
		rate = Decimal(str(value))
	except InvalidOperation as e:
		raise ProviderError(f'{provider} returned a non-numeric rate for {code}', provider=provider) from e
	if not rate.is_finite():
		raise ProviderError(f'{provider} returned a non-finite rate for {code}', provider=provider)
	return rate


def normalize_payload(provider: str, payload: dict[str, Any], default_base: str = 'USD') -> list[NormalizedRate]:
	rates = payload.get('data')
	if rates is None:
		rates = payload.get('rates')
	if not isinstance(rates, dict):
		raise ProviderError(f'{provider} response has no rate map', provider=provider)

	base = payload.get('base')
	if not isinstance(base, str) or not base:
		base = default_base
	base = base.upper()

	return [
		NormalizedRate(
			provider=provider,
			base_currency=base,
			quote_currency=str(code).upper(),
			rate=_to_decimal(provider, code, value),
		)
		for code, value in rates.items()
	]
