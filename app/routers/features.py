"""Features router - catalog visible to businesses."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.models.package import Feature
from app.schemas.package import FeatureResponse
from app.services.feature import FeatureService, category_display_name

router = APIRouter(prefix="/features", tags=["features"])


def feature_response(feature: Feature) -> FeatureResponse:
    response = FeatureResponse.model_validate(feature)
    response.category_display_name = category_display_name(feature.category)
    return response


@router.get("", response_model=List[FeatureResponse])
async def list_features(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Active features in display order."""
    features = await FeatureService(db).list_features()
    return [feature_response(f) for f in features]
