"""CSV import template downloads."""

from fastapi import APIRouter, Depends, Response

from app.core.security import AuthenticatedUser, require_business_member
from app.services.csv_templates import render_template, template_filename

router = APIRouter(prefix="/templates", tags=["templates"])


def csv_response(name: str) -> Response:
    return Response(
        content=render_template(name),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{template_filename(name)}"'},
    )


@router.get("/properties.csv")
async def download_property_template(
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Property and unit import template."""
    return csv_response("properties")


@router.get("/tenants.csv")
async def download_tenant_template(
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Tenant import template."""
    return csv_response("tenants")
