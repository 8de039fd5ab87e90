class RepositoryError(Exception):
    pass


class NotFoundError(RepositoryError):
    def __init__(self, entity: str, key: object):
        super().__init__(f'{entity} {key} not found')
        self.entity = entity
        self.key = key


class AlreadyExists(Exception):
    def __init__(self, field: str):
        super().__init__(f'{field} already exists')
        self.field = field


class ValidationError(Exception):
    pass
