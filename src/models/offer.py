# src/models/offer.py

"""Offer data models shared by the extractor, the cache and the servers."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any


def parse_price(value: Any) -> Decimal:
    """Convert a JSON price (number or numeric string) to ``Decimal``.

    JSON is decoded with ``use_decimal=True`` so numbers arrive here as
    ``Decimal`` with their original digits. Floats are converted through
    ``str`` so that ``2.99`` stays ``Decimal("2.99")``.

    Raises:
        ValueError: If *value* is missing, boolean or not numeric.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"invalid price: {value!r}")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"invalid price: {value!r}") from exc
    if not price.is_finite():
        raise ValueError(f"invalid price: {value!r}")
    return price


@dataclass
class Offer:
    """One extracted product price entry."""

    product_name: str
    price: Decimal
    currency: str = ""
    size: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Offer":
        """Build an Offer from its camelCase JSON form.

        Raises:
            ValueError: If the price is missing or not numeric.
        """
        return cls(
            product_name=str(data.get("productName") or ""),
            price=parse_price(data.get("price")),
            currency=str(data.get("currency") or ""),
            size=str(data.get("size") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON form.

        The price stays a ``Decimal``; encode with ``simplejson`` and
        ``use_decimal=True`` to write its exact digits.
        """
        return {
            "productName": self.product_name,
            "price": self.price,
            "currency": self.currency,
            "size": self.size,
        }


@dataclass(frozen=True)
class Location:
    """Fixed retailer address."""

    latitude: float = 0.0
    longitude: float = 0.0
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Location":
        return cls(
            latitude=float(data.get("latitude", 0.0)),
            longitude=float(data.get("longitude", 0.0)),
            address=str(data.get("address", "")),
            city=str(data.get("city", "")),
            state=str(data.get("state", "")),
            zip=str(data.get("zip", "")),
            country=str(data.get("country", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip": self.zip,
            "country": self.country,
        }


@dataclass
class ResponseData:
    """The complete result of one extraction run."""

    last_updated: str
    business: str
    location: Location
    offers: list[Offer] = field(
        default_factory=lambda: list[Offer]()
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResponseData":
        """Build from the cached JSON form.

        Raises:
            ValueError: If the payload does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ValueError("response data must be a JSON object")
        offers_raw = data.get("offers") or []
        if not isinstance(offers_raw, list):
            raise ValueError("'offers' must be a list")
        return cls(
            last_updated=str(data.get("lastUpdated", "")),
            business=str(data.get("business", "")),
            location=Location.from_dict(data.get("location") or {}),
            offers=[Offer.from_dict(o) for o in offers_raw],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastUpdated": self.last_updated,
            "business": self.business,
            "location": self.location.to_dict(),
            "offers": [o.to_dict() for o in self.offers],
        }
