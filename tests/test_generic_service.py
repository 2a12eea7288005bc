"""Tests for the generic entity service."""

import pytest
from unittest.mock import Mock

from twenty_crm.core.models import APIError
from twenty_crm.entities.collection import DynamicEntityCollection
from twenty_crm.entities.entity import DynamicEntity
from twenty_crm.query.filters import CustomFilter, FilterBuilder, SearchOptions
from twenty_crm.services.generic import GenericEntityService


@pytest.fixture
def service(mock_twenty_client, person_definition):
    """Service for person backed by a mock HTTP client."""
    return GenericEntityService(mock_twenty_client, person_definition)


# ===== Find Tests =====

def test_find_without_filter(service, mock_twenty_client):
    """Test listing with default options."""
    mock_twenty_client.request.return_value = {
        "data": {"people": [{"id": "p-1"}, {"id": "p-2"}]}
    }

    result = service.find()

    assert isinstance(result, DynamicEntityCollection)
    assert [entity.id for entity in result] == ["p-1", "p-2"]
    mock_twenty_client.request.assert_called_once_with("GET", "/people", params={"limit": 20})


def test_find_with_filter_and_options(service, mock_twenty_client):
    """Test that filter and options become query parameters."""
    mock_twenty_client.request.return_value = {"data": {"people": []}}

    service.find(
        FilterBuilder().equals("city", "Berlin"),
        SearchOptions(limit=5, order_by="createdAt"),
    )

    params = mock_twenty_client.request.call_args[1]["params"]
    assert params == {"limit": 5, "order_by": "createdAt", "filter": 'city[eq]:"Berlin"'}


def test_find_ignores_empty_filter(service, mock_twenty_client):
    """Test that an empty filter adds no parameter."""
    mock_twenty_client.request.return_value = {"data": {"people": []}}

    service.find(CustomFilter())

    assert "filter" not in mock_twenty_client.request.call_args[1]["params"]


def test_find_unexpected_response(service, mock_twenty_client):
    """Test that a response without the plural key gives an empty collection."""
    mock_twenty_client.request.return_value = {"data": {"persons": [{"id": "x"}]}}

    assert service.find().is_empty()


def test_find_eager_loads_relations(mock_twenty_client, person_definition):
    """Test that with_relations is handed to the relation loader."""
    loader = Mock()
    service = GenericEntityService(mock_twenty_client, person_definition, loader)
    mock_twenty_client.request.return_value = {"data": {"people": [{"id": "p-1"}]}}

    result = service.find(options=SearchOptions(with_relations=["company"]))

    loader.eager_load.assert_called_once_with(result.entities, ["company"], person_definition)


# ===== Get Tests =====

def test_get_by_id(service, mock_twenty_client):
    """Test fetching one record."""
    mock_twenty_client.request.return_value = {"data": {"person": {"id": "p-1", "city": "Oslo"}}}

    entity = service.get_by_id("p-1")

    assert entity.get("city") == "Oslo"
    mock_twenty_client.request.assert_called_once_with("GET", "/people/p-1")


@pytest.mark.parametrize("status", [400, 404])
def test_get_by_id_not_found(service, mock_twenty_client, status):
    """Test that missing records give None."""
    mock_twenty_client.request.side_effect = APIError("missing", status_code=status)

    assert service.get_by_id("nope") is None


def test_get_by_id_other_errors_propagate(service, mock_twenty_client):
    """Test that server errors are raised."""
    mock_twenty_client.request.side_effect = APIError("boom", status_code=500)

    with pytest.raises(APIError):
        service.get_by_id("p-1")


def test_get_by_id_unparseable_response(service, mock_twenty_client):
    """Test that a response without data raises APIError."""
    mock_twenty_client.request.return_value = {"errors": ["?"]}

    with pytest.raises(APIError, match="Unable to parse person"):
        service.get_by_id("p-1")


def test_get_by_id_data_is_record(service, mock_twenty_client):
    """Test older responses that return the record as data."""
    mock_twenty_client.request.return_value = {"data": {"id": "p-1", "city": "Rome"}}

    assert service.get_by_id("p-1").get("city") == "Rome"


# ===== Create / Update / Delete Tests =====

def test_create(service, mock_twenty_client, person_definition):
    """Test creating a record."""
    mock_twenty_client.request.return_value = {"data": {"createPerson": {"id": "p-9", "city": "Lima"}}}
    entity = DynamicEntity(person_definition, {"city": "Lima", "emails": "a@example.com"})

    created = service.create(entity)

    assert created.id == "p-9"
    mock_twenty_client.request.assert_called_once_with(
        "POST",
        "/people",
        json_body={"city": "Lima", "emails": {"primaryEmail": "a@example.com"}},
    )


def test_create_from_dict(service, mock_twenty_client):
    """Test that plain dicts are converted like entities."""
    mock_twenty_client.request.return_value = {"data": {"createPerson": {"id": "p-9"}}}

    service.create({"company": "c-1"})

    assert mock_twenty_client.request.call_args[1]["json_body"] == {"companyId": "c-1"}


def test_update_sends_only_writable_fields(service, mock_twenty_client, person_definition):
    """Test that system and auto-managed fields are left out."""
    mock_twenty_client.request.return_value = {"data": {"updatePerson": {"id": "p-1", "city": "Kyiv"}}}
    entity = DynamicEntity(person_definition, {
        "id": "p-1",
        "city": "Kyiv",
        "companyId": "c-1",
        "createdAt": "2024-01-01T00:00:00Z",
        "position": 1,
    })

    updated = service.update(entity)

    assert updated.get("city") == "Kyiv"
    mock_twenty_client.request.assert_called_once_with(
        "PATCH", "/people/p-1", json_body={"city": "Kyiv", "companyId": "c-1"}
    )


def test_update_requires_id(service, mock_twenty_client, person_definition):
    """Test that updating an unsaved entity fails before any request."""
    with pytest.raises(ValueError, match="Entity must have an ID to be updated"):
        service.update(DynamicEntity(person_definition, {"city": "Oslo"}))

    mock_twenty_client.request.assert_not_called()


def test_delete(service, mock_twenty_client):
    """Test deleting a record."""
    mock_twenty_client.request.return_value = {}

    assert service.delete("p-1") is True
    mock_twenty_client.request.assert_called_once_with("DELETE", "/people/p-1")


def test_delete_not_found(service, mock_twenty_client):
    """Test deleting a missing record."""
    mock_twenty_client.request.side_effect = APIError("missing", status_code=404)

    assert service.delete("p-1") is False


def test_delete_error_propagates(service, mock_twenty_client):
    """Test that other failures are raised."""
    mock_twenty_client.request.side_effect = APIError("denied", status_code=403)

    with pytest.raises(APIError):
        service.delete("p-1")


# ===== Batch Tests =====

def test_batch_upsert(service, mock_twenty_client, person_definition):
    """Test batch upsert payload and result."""
    mock_twenty_client.request.return_value = {
        "data": {"people": [{"id": "p-1"}, {"id": "p-2"}]}
    }

    result = service.batch_upsert([
        DynamicEntity(person_definition, {"id": "p-1", "city": "A"}),
        {"city": "B"},
    ])

    assert len(result) == 2
    mock_twenty_client.request.assert_called_once_with(
        "POST",
        "/batch/people",
        json_body={"data": [{"id": "p-1", "city": "A"}, {"city": "B"}]},
    )


def test_new_entity(service, person_definition):
    """Test creating an unsaved entity."""
    entity = service.new_entity({"city": "Oslo"})

    assert entity.definition is person_definition
    assert entity.id is None


def test_update_fetched_record_skips_embedded_to_many(mock_twenty_client, company_definition):
    """Test that people embedded in a fetched company are not sent back on update."""
    service = GenericEntityService(mock_twenty_client, company_definition)
    mock_twenty_client.request.return_value = {"data": {"company": {
        "id": "c-1",
        "name": "Acme",
        "people": [{"id": "p-1", "companyId": "c-1"}],
    }}}
    company = service.get_by_id("c-1")
    company.set("name", "Acme 2")
    mock_twenty_client.request.return_value = {"data": {"updateCompany": {"id": "c-1", "name": "Acme 2"}}}

    service.update(company)

    body = mock_twenty_client.request.call_args[1]["json_body"]
    assert body == {"name": "Acme 2"}


# ===== Response Shape Tests =====

def test_find_top_level_array_response(service, mock_twenty_client):
    """Test that a JSON array body raises APIError."""
    mock_twenty_client.request.return_value = [{"id": "p-1"}]

    with pytest.raises(APIError, match="Unable to parse people"):
        service.find()


def test_get_by_id_top_level_array_response(service, mock_twenty_client):
    """Test that a JSON array body raises APIError for single records."""
    mock_twenty_client.request.return_value = [{"id": "p-1"}]

    with pytest.raises(APIError, match="Unable to parse person"):
        service.get_by_id("p-1")


def test_find_data_not_an_object(service, mock_twenty_client):
    """Test that a non-object data value gives an empty collection."""
    mock_twenty_client.request.return_value = {"data": [{"id": "p-1"}]}

    assert service.find().is_empty()
