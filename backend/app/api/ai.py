"""AI-assisted listing copy."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.api.deps import get_services, limit_create
from app.services.description_service import build_prompt
from app.services.registry import ServiceRegistry
from app.utils.validation import sanitize

router = APIRouter()


class PropertyDraft(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str = Field(..., min_length=3, max_length=200)
    type: str = Field("Room", max_length=20)
    city: str = Field("", max_length=200)
    locality: Optional[str] = Field(None, max_length=200)
    amenities: List[str] = Field(default_factory=list, max_length=50)
    furnishing_status: Optional[str] = Field(None, max_length=50)
    price: Optional[float] = Field(None, gt=0, allow_inf_nan=False)


class DescriptionRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    property_data: PropertyDraft


class DescriptionResponse(BaseModel):
    description: str


@router.post("/generate-description", response_model=DescriptionResponse, dependencies=[Depends(limit_create)])
async def generate_description(
    request: DescriptionRequest,
    services: ServiceRegistry = Depends(get_services),
) -> DescriptionResponse:
    draft = request.property_data
    prompt = build_prompt(
        title=sanitize(draft.title),
        property_type=sanitize(draft.type),
        city=sanitize(draft.city),
        locality=sanitize(draft.locality),
        amenities=sanitize(draft.amenities),
        furnishing_status=sanitize(draft.furnishing_status),
        price=draft.price,
    )
    text = await services.descriptions.generate(prompt)
    return DescriptionResponse(description=text)
