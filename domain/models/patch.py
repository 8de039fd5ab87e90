from dataclasses import asdict, dataclass, fields
from typing import Any, Self

from domain.exceptions.repository import ValidationError


@dataclass(frozen=True)
class Patch:
    """Partial update whose field names form the allow-list of updatable columns."""

    @classmethod
    def allowed_fields(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Self:
        unknown = set(data) - cls.allowed_fields()
        if unknown:
            raise ValidationError(f'Fields not allowed in update: {", ".join(sorted(unknown))}')
        return cls(**data)

    def changes(self) -> dict[str, Any]:
        return {name: value for name, value in asdict(self).items() if value is not None}

    def is_empty(self) -> bool:
        return not self.changes()
