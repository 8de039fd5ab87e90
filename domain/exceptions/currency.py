class CurrencyException(Exception):
    pass


class ProviderError(CurrencyException):
    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.body = body


class CacheError(CurrencyException):
    pass
