"""End-to-end API behaviour: auth context, tenancy scoping and admin guards."""

from app.models.user import User
from app.services.business import BusinessService
from app.services.property import PropertyService
from app.services.tenant import TenantService
from app.services.unit import UnitService


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_me_for_unregistered_account(client, auth_as):
    auth_as.update(uid="stranger-uid", email="stranger@example.com")
    response = await client.get("/v1/auth/me")
    assert response.status_code == 200
    assert response.json()["user_id"] is None
    assert response.json()["business_id"] is None


async def test_register_then_create_business(client, auth_as):
    auth_as.update(uid="fresh-uid", email="fresh@example.com")

    response = await client.post("/v1/auth/register", json={"full_name": "Fresh Landlord"})
    assert response.status_code == 201
    assert response.json()["user_id"] is not None

    response = await client.post("/v1/businesses", json={"business_name": "Fresh Homes"})
    assert response.status_code == 201
    business_id = response.json()["id"]

    response = await client.get("/v1/auth/me")
    assert response.json()["business_id"] == business_id
    assert response.json()["business_role"] == "OWNER"

    response = await client.post("/v1/businesses", json={"business_name": "Second Homes"})
    assert response.status_code == 402
    assert response.json()["resource"] == "business"


async def test_business_routes_need_membership(client, auth_as, db):
    db.add(User(firebase_uid="solo-uid", email="solo@example.com"))
    await db.commit()
    auth_as.update(uid="solo-uid", email="solo@example.com")

    response = await client.get("/v1/properties")
    assert response.status_code == 403


async def test_property_crud(client, business, property_payload):
    response = await client.post("/v1/properties", json=property_payload())
    assert response.status_code == 201
    prop = response.json()
    assert prop["business_id"] == str(business.id)
    assert prop["property_type"] == "multi_family"

    response = await client.patch(f"/v1/properties/{prop['id']}", json={"name": "Elm Street Fourplex"})
    assert response.status_code == 200
    assert response.json()["name"] == "Elm Street Fourplex"

    response = await client.get("/v1/properties/can-create")
    assert response.json()["current"] == 1
    assert response.json()["limit"] == 5

    response = await client.delete(f"/v1/properties/{prop['id']}")
    assert response.status_code == 204
    response = await client.get("/v1/properties")
    assert response.json() == []


async def test_other_business_data_is_invisible(client, db, business, property_payload):
    other_owner = User(firebase_uid="other-uid", email="other@example.com")
    db.add(other_owner)
    await db.flush()
    other = await BusinessService(db).create_business(other_owner.id, {"business_name": "Rival Co"})
    hidden = await PropertyService(db).create_property(other.id, property_payload("Rival Tower"))
    await db.commit()

    response = await client.get(f"/v1/properties/{hidden.id}")
    assert response.status_code == 404
    assert response.json() == {"detail": "Property not found"}

    response = await client.get("/v1/properties", headers={"X-Business-Id": str(other.id)})
    assert response.status_code == 403


async def test_team_member_limit(client, db, business):
    db.add(User(firebase_uid="helper-uid", email="helper@example.com"))
    await db.commit()

    response = await client.post(
        "/v1/businesses/current/members", json={"email": "helper@example.com", "role": "MEMBER"}
    )
    assert response.status_code == 402
    assert response.json()["detail"] == "LIMIT_REACHED:team_member"


async def test_super_admin_routes(client, auth_as, business, super_admin):
    response = await client.get("/v1/super-admin/stats")
    assert response.status_code == 403

    auth_as.update(uid="admin-uid", email="admin@rentline.app")
    response = await client.get("/v1/super-admin/stats")
    assert response.status_code == 200

    response = await client.put(
        "/v1/super-admin/settings/square_access_token", json={"setting_value": "EAAA-secret"}
    )
    assert response.status_code == 200
    assert response.json()["setting_value"] == "********"

    response = await client.put(
        "/v1/super-admin/settings/square_environment", json={"setting_value": "sandbox"}
    )
    assert response.json()["setting_value"] == "sandbox"


async def test_dashboard_stats(client, db, business, property_payload):
    prop = await PropertyService(db).create_property(business.id, property_payload())
    units = UnitService(db)
    occupied = await units.create_unit(business.id, prop.id, {"unit_number": "1"})
    await units.create_unit(business.id, prop.id, {"unit_number": "2"})
    await TenantService(db).create_tenant(
        business.id,
        {"unit_id": occupied.id, "first_name": "Kim", "last_name": "Ng", "email": "kim@example.com"},
    )
    await db.commit()

    response = await client.get("/v1/dashboard/stats")
    assert response.status_code == 200
    body = response.json()
    assert body["total_properties"] == 1
    assert body["total_units"] == 2
    assert body["occupied_units"] == 1
    assert body["occupancy_rate"] == 50.0
    assert body["active_tenants"] == 1
    assert body["usage"]["unit"]["current"] == 2
