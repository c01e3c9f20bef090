from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi_utils.cbv import cbv
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthContext, any_member, manager_only
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import (
    LeaseOut,
    PropertyCreate,
    PropertyFilters,
    PropertyOut,
    PropertyUpdate,
)
from services.property_service import PropertyService

router = APIRouter(tags=["Properties"])


def property_filters(
    favorite_ids: Optional[str] = Query(None, alias="favoriteIds"),
    price_min: Optional[str] = Query(None, alias="priceMin"),
    price_max: Optional[str] = Query(None, alias="priceMax"),
    beds: Optional[str] = Query(None),
    baths: Optional[str] = Query(None),
    property_type: Optional[str] = Query(None, alias="propertyType"),
    square_feet_min: Optional[str] = Query(None, alias="squareFeetMin"),
    square_feet_max: Optional[str] = Query(None, alias="squareFeetMax"),
    amenities: Optional[str] = Query(None),
    available_from: Optional[str] = Query(None, alias="availableFrom"),
    latitude: Optional[str] = Query(None),
    longitude: Optional[str] = Query(None),
    radius_km: Optional[str] = Query(None, alias="radiusKm"),
) -> PropertyFilters:
    raw = {
        "favorite_ids": favorite_ids,
        "price_min": price_min,
        "price_max": price_max,
        "beds": beds,
        "baths": baths,
        "property_type": property_type,
        "square_feet_min": square_feet_min,
        "square_feet_max": square_feet_max,
        "amenities": amenities,
        "available_from": available_from,
        "latitude": latitude,
        "longitude": longitude,
        "radius_km": radius_km,
    }
    try:
        return PropertyFilters.model_validate(
            {k: v for k, v in raw.items() if v not in (None, "")}
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False))


def property_form(
    name: str = Form(...),
    description: str = Form(""),
    price_per_month: str = Form(...),
    security_deposit: str = Form("0"),
    application_fee: str = Form("0"),
    amenities: Optional[str] = Form(None),
    highlights: Optional[str] = Form(None),
    is_pets_allowed: bool = Form(False),
    is_parking_included: bool = Form(False),
    beds: str = Form(...),
    baths: str = Form(...),
    square_feet: str = Form(...),
    property_type: str = Form(...),
    address: str = Form(...),
    city: str = Form(...),
    state: str = Form(...),
    country: str = Form(...),
    postal_code: str = Form(...),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
) -> PropertyCreate:
    data = {
        "name": name,
        "description": description,
        "price_per_month": price_per_month,
        "security_deposit": security_deposit,
        "application_fee": application_fee,
        "amenities": amenities,
        "highlights": highlights,
        "is_pets_allowed": is_pets_allowed,
        "is_parking_included": is_parking_included,
        "beds": beds,
        "baths": baths,
        "square_feet": square_feet,
        "property_type": property_type,
        "address": address,
        "city": city,
        "state": state,
        "country": country,
        "postal_code": postal_code,
        "latitude": latitude or None,
        "longitude": longitude or None,
    }
    try:
        return PropertyCreate.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False))


@cbv(router=router)
class PropertyRoutes:
    @router.get("/", response_model=List[PropertyOut])
    @safe_handler
    async def list_properties(
        self,
        filters: PropertyFilters = Depends(property_filters),
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).list_properties(filters=filters)

    @router.get("/{property_id}", response_model=PropertyOut)
    @safe_handler
    async def get_property(
        self,
        property_id: int,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).get_property(property_id=property_id)

    @router.post("/", response_model=PropertyOut, status_code=201)
    @safe_handler
    async def create(
        self,
        data: PropertyCreate = Depends(property_form),
        photos: Optional[List[UploadFile]] = File(None),
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).create_property(
            auth=auth, payload=data, photos=photos
        )

    @router.put("/{property_id}", response_model=PropertyOut)
    @safe_handler
    async def update(
        self,
        property_id: int,
        data: PropertyUpdate,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).update_property(
            auth=auth, property_id=property_id, payload=data
        )

    @router.delete("/{property_id}", status_code=204)
    @safe_handler
    async def delete_property(
        self,
        property_id: int,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        await PropertyService(db).delete_property(auth=auth, property_id=property_id)
        return Response(status_code=204)

    @router.get("/{property_id}/leases", response_model=List[LeaseOut])
    @safe_handler
    async def property_leases(
        self,
        property_id: int,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).property_leases(
            auth=auth, property_id=property_id
        )
