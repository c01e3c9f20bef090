from typing import List, Optional

from geoalchemy2 import Geography
from sqlalchemy import cast, delete, exists, func, select, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import contains_eager, selectinload
from sqlalchemy.sql import Select

from core.settings import settings
from models.models import Lease, Location, Property
from models.shape import SRID, make_point
from schemas.schema import PropertyFilters


def geography_point(longitude: float, latitude: float):
    return cast(
        func.ST_SetSRID(func.ST_MakePoint(longitude, latitude), SRID),
        Geography(geometry_type="POINT", srid=SRID),
    )


def build_search_query(filters: PropertyFilters) -> Select:
    query = (
        select(Property)
        .join(Property.location)
        .options(contains_eager(Property.location))
    )

    if filters.favorite_ids:
        query = query.where(Property.id.in_(filters.favorite_ids))
    if filters.price_min is not None:
        query = query.where(Property.price_per_month >= filters.price_min)
    if filters.price_max is not None:
        query = query.where(Property.price_per_month <= filters.price_max)
    if filters.beds is not None:
        query = query.where(Property.beds >= filters.beds)
    if filters.baths is not None:
        query = query.where(Property.baths >= filters.baths)
    if filters.property_type is not None:
        query = query.where(Property.property_type == filters.property_type)
    if filters.square_feet_min is not None:
        query = query.where(Property.square_feet >= filters.square_feet_min)
    if filters.square_feet_max is not None:
        query = query.where(Property.square_feet <= filters.square_feet_max)
    if filters.amenities:
        query = query.where(
            type_coerce(Property.amenities, JSONB).contains(filters.amenities)
        )
    if filters.available_from is not None:
        leased = exists().where(
            Lease.property_id == Property.id,
            func.date(Lease.start_date) <= filters.available_from,
            func.date(Lease.end_date) >= filters.available_from,
        )
        query = query.where(~leased)
    if filters.has_center:
        radius_km = filters.radius_km or settings.DEFAULT_RADIUS_KM
        query = query.where(
            func.ST_DWithin(
                Location.coordinates,
                geography_point(filters.longitude, filters.latitude),
                radius_km * 1000,
            )
        )

    return query.order_by(Property.posted_date.desc(), Property.id.desc()).limit(
        settings.MAX_PROPERTY_RESULTS
    )


class PropertyRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, property_id: int) -> Optional[Property]:
        result = await self.db.execute(
            select(Property).where(Property.id == property_id)
        )
        return result.scalar_one_or_none()

    async def get_with_location(self, property_id: int) -> Optional[Property]:
        result = await self.db.execute(
            select(Property)
            .options(selectinload(Property.location))
            .where(Property.id == property_id)
        )
        return result.scalars().first()

    async def get_with_tenants(self, property_id: int) -> Optional[Property]:
        result = await self.db.execute(
            select(Property)
            .options(selectinload(Property.tenants))
            .where(Property.id == property_id)
        )
        return result.scalars().first()

    async def search(self, filters: PropertyFilters) -> List[Property]:
        result = await self.db.execute(build_search_query(filters))
        return list(result.scalars().unique().all())

    async def list_by_manager(self, manager_cognito_id: str) -> List[Property]:
        result = await self.db.execute(
            select(Property)
            .options(selectinload(Property.location))
            .where(Property.manager_cognito_id == manager_cognito_id)
            .order_by(Property.posted_date.desc())
        )
        return list(result.scalars().all())

    async def create(
        self,
        *,
        manager_cognito_id: str,
        location_data: dict,
        longitude: float,
        latitude: float,
        property_data: dict,
        photo_urls: list[str],
    ) -> Property:
        try:
            location = Location(
                **location_data, coordinates=make_point(longitude, latitude)
            )
            self.db.add(location)
            await self.db.flush()

            new_property = Property(
                **property_data,
                photo_urls=photo_urls,
                location_id=location.id,
                manager_cognito_id=manager_cognito_id,
            )
            new_property.location = location
            self.db.add(new_property)
            await self.db.flush()
            await self.db.commit()
            return new_property
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def update(self, prop: Property, values: dict) -> Property:
        for key, value in values.items():
            setattr(prop, key, value)
        try:
            await self.db.commit()
            return prop
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def delete(self, prop: Property) -> None:
        location_id = prop.location_id
        try:
            await self.db.delete(prop)
            await self.db.flush()
            await self.db.execute(delete(Location).where(Location.id == location_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
