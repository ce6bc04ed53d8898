"""Downloadable CSV import templates."""

import csv
import io

PROPERTY_TEMPLATE_HEADER = [
    "Name", "Address", "City", "Province", "Postal Code", "Country",
    "Property Type", "Total Units", "Unit Number", "Bedrooms", "Bathrooms",
    "Square Feet", "Monthly Rent",
]
PROPERTY_TEMPLATE_ROWS = [
    ["Maple Apartments", "123 Maple St", "Toronto", "ON", "M5V 2T6", "Canada",
     "apartment", "2", "101", "2", "1", "850", "1850.00"],
    ["Maple Apartments", "123 Maple St", "Toronto", "ON", "M5V 2T6", "Canada",
     "apartment", "2", "102", "1", "1", "620", "1450.00"],
]

TENANT_TEMPLATE_HEADER = ["First Name", "Last Name", "Email", "Phone", "Unit ID"]
TENANT_TEMPLATE_ROWS = [
    ["Jane", "Doe", "jane.doe@example.com", "416-555-0101", "<unit-id>"],
    ["John", "Smith", "john.smith@example.com", "416-555-0102", "<unit-id>"],
]

TEMPLATES = {
    "properties": (PROPERTY_TEMPLATE_HEADER, PROPERTY_TEMPLATE_ROWS),
    "tenants": (TENANT_TEMPLATE_HEADER, TENANT_TEMPLATE_ROWS),
}


def render_csv(header: list[str], rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def template_filename(name: str) -> str:
    return f"{name}_template.csv"


def render_template(name: str) -> str:
    """CSV text for the ``properties`` or ``tenants`` template."""
    header, rows = TEMPLATES[name]
    return render_csv(header, rows)
