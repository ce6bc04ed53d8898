"""CSV import templates."""

import csv
import io

from app.services.csv_templates import (
    PROPERTY_TEMPLATE_HEADER,
    TENANT_TEMPLATE_HEADER,
    render_template,
    template_filename,
)


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def test_property_template():
    rows = _rows(render_template("properties"))
    assert rows[0] == PROPERTY_TEMPLATE_HEADER
    assert len(rows) == 3
    assert all(len(row) == len(PROPERTY_TEMPLATE_HEADER) for row in rows)


def test_tenant_template():
    rows = _rows(render_template("tenants"))
    assert rows[0] == TENANT_TEMPLATE_HEADER
    assert rows[1][2] == "jane.doe@example.com"


def test_template_filename():
    assert template_filename("tenants") == "tenants_template.csv"


async def test_template_download(client, business):
    response = await client.get("/v1/templates/properties.csv")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="properties_template.csv"' in response.headers["content-disposition"]
    assert response.text.splitlines()[0].startswith("Name,Address,City")
