"""
Paged Result Envelope Codec

JSON wire form of ``PagedResult[T]``:

    {"data": [...], "totalElements": 21, "page": 0, "size": 20, "totalPages": 2}

Raw bytes do not say what ``T`` is, so decoding always takes the element
type from the caller and validates the payload against ``PagedEnvelope[T]``.
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import PydanticSerializationError

from ...domain.cache.exceptions import CacheSerializationException
from ...domain.pagination.value_objects import PagedResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PagedEnvelope(BaseModel, Generic[T]):
    """Stored representation of one page."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data: List[T]
    total_elements: int = Field(..., alias="totalElements", ge=0)
    page: int = Field(..., ge=0)
    size: int = Field(..., ge=0)
    # Written for readers of the raw payload; re-derived on decode
    total_pages: Optional[int] = Field(None, alias="totalPages")


class PagedResultCodec:
    """Encode and decode paged results for the cache store."""

    def encode(self, result: PagedResult[Any]) -> bytes:
        """
        Serialize a page to UTF-8 JSON.

        Raises:
            CacheSerializationException: If an element cannot be serialized
        """
        element_type = self._element_type_name(result)
        try:
            envelope = PagedEnvelope[Any](
                data=list(result.data),
                total_elements=result.total_elements,
                page=result.page,
                size=result.size,
                total_pages=result.total_pages,
            )
            return envelope.model_dump_json(by_alias=True).encode("utf-8")
        except (PydanticSerializationError, ValueError, TypeError) as e:
            logger.exception(f"Failed to serialize PagedResult[{element_type}]")
            raise CacheSerializationException(element_type, original_error=e) from e

    def decode(
        self, payload: Optional[Union[str, bytes]], item_type: Type[T]
    ) -> Optional[PagedResult[T]]:
        """
        Deserialize a stored page.

        Returns None for an empty payload and for any payload that is not
        valid JSON or does not match ``PagedEnvelope[item_type]``; a corrupt
        entry is treated as a miss, never raised.
        """
        if not payload:
            return None

        try:
            envelope = PagedEnvelope[item_type].model_validate_json(payload)
        except ValueError as e:
            # pydantic.ValidationError is a ValueError; covers malformed JSON too
            logger.error(
                f"Corrupt cache payload for PagedResult[{getattr(item_type, '__name__', item_type)}]",
                extra={"payload_length": len(payload), "error": str(e)},
                exc_info=True,
            )
            return None

        return PagedResult(
            data=envelope.data,
            total_elements=envelope.total_elements,
            page=envelope.page,
            size=envelope.size,
        )

    @staticmethod
    def _element_type_name(result: PagedResult[Any]) -> str:
        if result.data:
            return type(result.data[0]).__name__
        return "Any"
