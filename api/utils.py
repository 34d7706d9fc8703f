from logging import Logger
from typing import Literal

from bson import ObjectId

from errors import InvalidIdentifierError

entity_type : Literal['hotel', 'undefined_entity'] = 'undefined_entity'

def _parse_id(
        id: str,
        logger: Logger,
        entity: Literal['hotel', 'undefined_entity'] = entity_type
    ) -> ObjectId:
    """Validate and normalize a 24 hex character ObjectId for any entity among:
    - hotel
    - undefined entity.

    Raises InvalidIdentifierError before any store access for malformed input.
    """

    if not isinstance(id, str) or not ObjectId.is_valid(id):
        logger.warning(f"Invalid ObjectId supplied for {entity}_id", extra={f"{entity}_id": id})
        raise InvalidIdentifierError(context={f"{entity}_id": id})
    return ObjectId(id)
