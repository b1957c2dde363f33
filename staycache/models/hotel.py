"""
Normalized hotel record models.

Sandi Metz Principles:
- Small classes with clear purpose
- Every field has a default so partial provider data still validates
- Clear naming conventions
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class HotelType(str, Enum):
    """Coarse hotel category inferred from names and descriptions."""

    RESORT = "resort"
    BUSINESS = "business"
    RYOKAN = "ryokan"
    HOSTEL = "hostel"
    PENSION = "pension"
    HOTEL = "hotel"
    OTHER = "other"


class Address(BaseModel):
    """Postal address."""

    zip_code: str = Field(default="", description="Postal code")
    prefecture: str = Field(default="", description="Prefecture")
    city: str = Field(default="", description="City and street")
    full_address: str = Field(default="", description="Prefecture + city")


class GeoLocation(BaseModel):
    """Coordinates as reported by the provider."""

    latitude: float = Field(default=0.0, description="Latitude")
    longitude: float = Field(default=0.0, description="Longitude")


class HotelImages(BaseModel):
    """Image URLs."""

    main: str = Field(default="", description="Main image URL")
    thumbnail: str = Field(default="", description="Thumbnail URL")


class Pricing(BaseModel):
    """Nightly price range."""

    min_price: int = Field(default=0, ge=0, description="Lowest charge")
    max_price: int = Field(default=0, ge=0, description="Highest charge")
    currency: str = Field(default="JPY", description="Currency code")

    @property
    def price_range(self) -> str:
        """Human readable price range."""
        if self.min_price == 0 and self.max_price == 0:
            return "Price not available"
        if self.min_price == self.max_price:
            return f"¥{self.min_price:,}"
        return f"¥{self.min_price:,} - ¥{self.max_price:,}"


class RatingBreakdown(BaseModel):
    """Review averages per category."""

    overall: float = Field(default=0.0, ge=0.0, description="Overall average")
    service: float = Field(default=0.0, ge=0.0, description="Service average")
    location: float = Field(default=0.0, ge=0.0, description="Location average")
    room: float = Field(default=0.0, ge=0.0, description="Room average")
    equipment: float = Field(default=0.0, ge=0.0, description="Equipment average")
    bath: float = Field(default=0.0, ge=0.0, description="Bath average")
    meal: float = Field(default=0.0, ge=0.0, description="Meal average")


class Accessibility(BaseModel):
    """Accessibility flags inferred from the description."""

    wheelchair_accessible: bool = Field(default=False)
    elevator_available: bool = Field(default=False)
    parking_available: bool = Field(default=False)


class Availability(BaseModel):
    """Vacancy information, populated by vacancy searches."""

    is_available: bool = Field(default=False, description="Has bookable plans")
    available_plans: int = Field(default=0, ge=0, description="Room plan count")


class NormalizedHotelRecord(BaseModel):
    """Canonical hotel shape returned by the fetch client."""

    id: str = Field(default="", description="Provider hotel number")
    name: str = Field(default="", description="Hotel name")
    name_kana: str = Field(default="", description="Kana reading of the name")
    description: str = Field(default="", description="Marketing description")
    address: Address = Field(default_factory=Address)
    location: GeoLocation = Field(default_factory=GeoLocation)
    access: str = Field(default="", description="Access directions")
    nearest_station: str = Field(default="", description="Nearest station")
    nearby_stations: List[str] = Field(default_factory=list)
    images: HotelImages = Field(default_factory=HotelImages)
    pricing: Pricing = Field(default_factory=Pricing)
    rating: RatingBreakdown = Field(default_factory=RatingBreakdown)
    review_count: int = Field(default=0, ge=0)
    room_count: int = Field(default=0, ge=0)
    check_in: str = Field(default="", description="Check-in time")
    check_out: str = Field(default="", description="Check-out time")
    telephone: str = Field(default="")
    plan_list_url: str = Field(default="")
    hotel_type: HotelType = Field(default=HotelType.OTHER)
    amenities: List[str] = Field(default_factory=list)
    accessibility: Accessibility = Field(default_factory=Accessibility)
    availability: Availability = Field(default_factory=Availability)
    is_fallback: bool = Field(
        default=False, description="Record comes from the built-in mock dataset"
    )
    last_refreshed: datetime = Field(default_factory=datetime.utcnow)

    @property
    def price_range(self) -> str:
        """Human readable price range."""
        return self.pricing.price_range
