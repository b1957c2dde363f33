"""
External request models.

Sandi Metz Principles:
- Single Responsibility: Describe one provider request
- Immutable: Contexts are frozen once built
- Clear naming: Endpoint names match provider operations
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from staycache.exceptions import MalformedInput
from staycache.utils.hasher import build_key

ParamValue = Union[str, int, float, bool]

RESPONSE_NAMESPACE = "provider"


class Endpoint(str, Enum):
    """Search provider endpoints."""

    SIMPLE_SEARCH = "/SimpleHotelSearch/20170426"
    KEYWORD_SEARCH = "/KeywordHotelSearch/20170426"
    VACANT_SEARCH = "/VacantHotelSearch/20170426"
    HOTEL_DETAIL = "/HotelDetailSearch/20170426"

    @classmethod
    def parse(cls, value: Union["Endpoint", str]) -> "Endpoint":
        """
        Resolve an endpoint from its enum value, path, or member name.

        Raises:
            MalformedInput: If the endpoint is unknown
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value in (member.value, member.name, member.name.lower()):
                    return member
        raise MalformedInput(f"Unknown provider endpoint: {value!r}")

    @property
    def reports_availability(self) -> bool:
        """Whether records from this endpoint describe vacancies."""
        return self is Endpoint.VACANT_SEARCH


class ExternalRequestContext(BaseModel):
    """Endpoint plus the caller's parameter set."""

    model_config = ConfigDict(frozen=True)

    endpoint: Endpoint = Field(..., description="Provider endpoint")
    params: Dict[str, ParamValue] = Field(
        default_factory=dict, description="Endpoint specific query parameters"
    )

    @property
    def cache_key(self) -> str:
        """Response cache key for this request."""
        namespace = f"{RESPONSE_NAMESPACE}:{self.endpoint.name.lower()}"
        return build_key(namespace, self.params)

    def query_params(
        self, application_id: str, affiliate_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build the provider query string parameters.

        Args:
            application_id: Provider application id
            affiliate_id: Optional affiliate id

        Returns:
            Query parameters including the provider's fixed fields
        """
        query: Dict[str, Any] = {
            "applicationId": application_id,
            "format": "json",
            "formatVersion": 2,
        }
        if affiliate_id:
            query["affiliateId"] = affiliate_id
        query.update(self.params)
        return query
