class AuthError(Exception):
    pass


class NotAuthenticated(AuthError):
    def __init__(self, message: str = 'email or password does not match'):
        super().__init__(message)


class TokenError(AuthError):
    pass


class TokenInvalid(TokenError):
    pass


class TokenExpired(TokenError):
    pass


class TokenPurposeMismatch(TokenError):
    pass
