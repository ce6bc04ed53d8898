"""Pydantic schemas for the Rentline API."""

from app.schemas.base import *
from app.schemas.business import *
from app.schemas.property import *
from app.schemas.tenant import *
from app.schemas.lease import *
from app.schemas.payment import *
from app.schemas.maintenance import *
from app.schemas.listing import *
from app.schemas.package import *
from app.schemas.accounting import *
from app.schemas.affiliate import *
from app.schemas.ai import *
from app.schemas.admin import *
from app.schemas.onboarding import *
from app.schemas.dashboard import *
