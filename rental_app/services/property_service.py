import logging

from fastapi import HTTPException, UploadFile

from core.auth import AuthContext
from core.cloudinary_setup import cloudinary_client
from core.location import distance_km, geocode_location
from models.models import Property
from models.utils import utcnow
from repos.lease_repo import LeaseRepo
from repos.manager_repo import ManagerRepo
from repos.property_repo import PropertyRepo
from schemas.schema import (
    LeaseOut,
    PropertyCreate,
    PropertyFilters,
    PropertyOut,
    PropertyUpdate,
)

logger = logging.getLogger(__name__)


class PropertyService:
    def __init__(self, db):
        self.db = db
        self.repo: PropertyRepo = PropertyRepo(db)
        self.lease_repo: LeaseRepo = LeaseRepo(db)
        self.manager_repo: ManagerRepo = ManagerRepo(db)

    async def _get_or_404(self, property_id: int) -> Property:
        prop = await self.repo.get_with_location(property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found.")
        return prop

    def _ensure_owner(self, prop: Property, auth: AuthContext):
        if prop.manager_cognito_id != auth.user_id:
            raise HTTPException(
                status_code=403,
                detail="Only the managing owner can modify this property.",
            )

    async def list_properties(self, filters: PropertyFilters) -> list[PropertyOut]:
        properties = await self.repo.search(filters)
        items = [PropertyOut.model_validate(p) for p in properties]

        if filters.has_center:
            for item in items:
                point = item.location.coordinates
                item.distance_km = round(
                    distance_km(
                        filters.latitude, filters.longitude, point.latitude, point.longitude
                    ),
                    3,
                )
        return items

    async def get_property(self, property_id: int) -> PropertyOut:
        return PropertyOut.model_validate(await self._get_or_404(property_id))

    async def create_property(
        self,
        auth: AuthContext,
        payload: PropertyCreate,
        photos: list[UploadFile] | None = None,
    ) -> PropertyOut:
        manager = await self.manager_repo.get_by_cognito_id(auth.user_id)
        if not manager:
            raise HTTPException(
                status_code=404,
                detail="Manager profile not found. Create it before listing properties.",
            )

        if payload.latitude is not None and payload.longitude is not None:
            longitude, latitude = payload.longitude, payload.latitude
        else:
            point = await geocode_location(
                payload.address,
                payload.city,
                payload.state,
                payload.country,
                payload.postal_code,
            )
            if point is None:
                raise HTTPException(
                    status_code=400,
                    detail="Could not resolve coordinates for the supplied address.",
                )
            longitude, latitude = point

        photo_urls = await cloudinary_client.upload_photos(photos)

        prop = await self.repo.create(
            manager_cognito_id=auth.user_id,
            location_data=payload.location_fields(),
            longitude=longitude,
            latitude=latitude,
            property_data={**payload.property_fields(), "posted_date": utcnow()},
            photo_urls=photo_urls,
        )
        logger.info("Property %s created by manager %s", prop.id, auth.user_id)
        return PropertyOut.model_validate(prop)

    async def update_property(
        self, auth: AuthContext, property_id: int, payload: PropertyUpdate
    ) -> PropertyOut:
        prop = await self._get_or_404(property_id)
        self._ensure_owner(prop, auth)

        values = payload.model_dump(exclude_unset=True)
        if not values:
            raise HTTPException(status_code=400, detail="No fields to update.")

        prop = await self.repo.update(prop, values)
        return PropertyOut.model_validate(prop)

    async def delete_property(self, auth: AuthContext, property_id: int) -> None:
        prop = await self._get_or_404(property_id)
        self._ensure_owner(prop, auth)
        await self.repo.delete(prop)
        logger.info("Property %s deleted by manager %s", property_id, auth.user_id)

    async def property_leases(
        self, auth: AuthContext, property_id: int
    ) -> list[LeaseOut]:
        prop = await self.repo.get_by_id(property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found.")

        if auth.is_tenant:
            leases = await self.lease_repo.search(
                property_id=property_id, tenant_cognito_id=auth.user_id
            )
        else:
            self._ensure_owner(prop, auth)
            leases = await self.lease_repo.search(property_id=property_id)
        return [LeaseOut.model_validate(lease) for lease in leases]
