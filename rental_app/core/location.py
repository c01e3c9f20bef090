import asyncio
import logging

from geopy.distance import geodesic
from geopy.geocoders import Nominatim

from .breaker import geocoder_breaker
from .settings import settings

logger = logging.getLogger(__name__)


async def geocode_location(
    address: str, city: str, state: str, country: str, postal_code: str
) -> tuple[float, float] | None:
    """Returns (longitude, latitude) for a structured address, or None."""
    geolocator = Nominatim(user_agent=settings.GEOCODER_USER_AGENT, timeout=10)
    query = {
        "street": address,
        "city": city,
        "state": state,
        "country": country,
        "postalcode": postal_code,
    }

    def _geocode():
        return geolocator.geocode(query, exactly_one=True)

    async def handler():
        return await asyncio.to_thread(_geocode)

    location = await geocoder_breaker.call(handler)

    if not location:
        logger.info("No geocoding match for %s, %s, %s", address, city, country)
        return None

    return float(location.longitude), float(location.latitude)


def distance_km(
    origin_lat: float, origin_lon: float, lat: float, lon: float
) -> float:
    return geodesic((origin_lat, origin_lon), (lat, lon)).kilometers
