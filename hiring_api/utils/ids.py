# hiring_api/utils/ids.py
import secrets

from ..errors import ValidationError

ALPHABET = "1234567890abcdefghijklmnopqrstuvwxyz"
SHORT_ID_LENGTH = 5


def short_id(size: int = SHORT_ID_LENGTH) -> str:
    """Compact random id used to scope attachments to one record's folder."""
    return "".join(secrets.choice(ALPHABET) for _ in range(size))


def parse_ids(ids) -> list[int]:
    """Validate a bulk-delete payload: a non-empty list of integer ids."""
    if not isinstance(ids, list) or len(ids) == 0:
        raise ValidationError("Please provide an array of IDs to delete")
    parsed: list[int] = []
    for raw in ids:
        if isinstance(raw, bool):
            raise ValidationError("Invalid IDs provided")
        try:
            parsed.append(int(raw))
        except (TypeError, ValueError):
            raise ValidationError("Invalid IDs provided") from None
    return parsed
