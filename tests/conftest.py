"""Shared fixtures: a small Twenty workspace schema."""

import copy

import httpx
import pytest
from unittest.mock import Mock

from twenty_crm.client.http_client import TwentyHttpClient
from twenty_crm.core.registry import build_entity_definition


PERSON_OBJECT = {
    "id": "obj-person",
    "nameSingular": "person",
    "namePlural": "people",
    "fields": [
        {"id": "f-1", "name": "id", "type": "UUID", "label": "Id", "isNullable": False, "isSystem": True},
        {"id": "f-2", "name": "name", "type": "FULL_NAME", "label": "Name"},
        {"id": "f-3", "name": "emails", "type": "EMAILS", "label": "Emails"},
        {"id": "f-4", "name": "phones", "type": "PHONES", "label": "Phones"},
        {"id": "f-5", "name": "jobTitle", "type": "TEXT", "label": "Job Title"},
        {"id": "f-6", "name": "city", "type": "TEXT", "label": "City"},
        {
            "id": "f-7",
            "name": "company",
            "type": "RELATION",
            "label": "Company",
            "relation": {
                "type": "MANY_TO_ONE",
                "sourceObjectMetadata": {"nameSingular": "person"},
                "targetObjectMetadata": {"nameSingular": "company"},
                "targetFieldMetadata": {"name": "people"},
            },
        },
        {"id": "f-8", "name": "createdAt", "type": "DATE_TIME", "label": "Creation date", "isNullable": False},
        {"id": "f-9", "name": "position", "type": "POSITION", "label": "Position", "isSystem": True},
        {
            "id": "f-10",
            "name": "status",
            "type": "SELECT",
            "label": "Status",
            "isCustom": True,
            "options": [
                {"value": "LEAD", "label": "Lead", "color": "blue", "position": 0},
                {"value": "CUSTOMER", "label": "Customer", "color": "green", "position": 1},
            ],
        },
        {"id": "f-11", "name": "score", "type": "NUMBER", "label": "Score", "isCustom": True},
    ],
}

COMPANY_OBJECT = {
    "id": "obj-company",
    "nameSingular": "company",
    "namePlural": "companies",
    "fields": [
        {"id": "c-1", "name": "id", "type": "UUID", "label": "Id", "isNullable": False, "isSystem": True},
        {"id": "c-2", "name": "name", "type": "TEXT", "label": "Name", "isNullable": False},
        {"id": "c-3", "name": "domainName", "type": "LINKS", "label": "Domain"},
        {"id": "c-4", "name": "address", "type": "ADDRESS", "label": "Address"},
        {"id": "c-5", "name": "annualRecurringRevenue", "type": "CURRENCY", "label": "ARR"},
        {"id": "c-6", "name": "employees", "type": "NUMBER", "label": "Employees"},
        {"id": "c-7", "name": "idealCustomerProfile", "type": "BOOLEAN", "label": "ICP"},
        {
            "id": "c-8",
            "name": "people",
            "type": "RELATION",
            "label": "People",
            "relation": {
                "type": "ONE_TO_MANY",
                "sourceObjectMetadata": {"nameSingular": "company"},
                "targetObjectMetadata": {"nameSingular": "person"},
                "targetFieldMetadata": {"name": "company"},
            },
        },
    ],
}


@pytest.fixture
def metadata_response():
    """Response body of GET metadata/objects."""
    return {
        "data": {
            "objects": [
                copy.deepcopy(PERSON_OBJECT),
                copy.deepcopy(COMPANY_OBJECT),
                {"id": "obj-broken", "nameSingular": "broken", "fields": []},
            ]
        }
    }


@pytest.fixture
def person_definition():
    """EntityDefinition for person."""
    return build_entity_definition(copy.deepcopy(PERSON_OBJECT))


@pytest.fixture
def company_definition():
    """EntityDefinition for company."""
    return build_entity_definition(copy.deepcopy(COMPANY_OBJECT))


@pytest.fixture
def mock_twenty_client():
    """Mock of the authenticated HTTP client used by services."""
    return Mock(spec=TwentyHttpClient)


@pytest.fixture
def mock_http_client():
    """Mock httpx client."""
    return Mock(spec=httpx.Client)
