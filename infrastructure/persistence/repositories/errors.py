import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from domain.exceptions.repository import AlreadyExists, RepositoryError

logger = logging.getLogger(__name__)


@contextmanager
def translate_errors(entity: str, unique_fields: tuple[str, ...] = ()) -> Iterator[None]:
	"""Re-raise SQLAlchemy failures as domain repository errors."""
	try:
		yield
	except IntegrityError as e:
		message = str(e.orig)
		field = next((f for f in unique_fields if f in message), entity)
		logger.warning(f'Integrity error on {entity}: {message}')
		raise AlreadyExists(field) from e
	except SQLAlchemyError as e:
		logger.error(f'Database error on {entity}: {e}')
		raise RepositoryError(f'Error in {entity} repository operation') from e
