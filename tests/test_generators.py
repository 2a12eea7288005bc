"""Tests for code generation."""

import ast

import pytest
from unittest.mock import Mock

from twenty_crm.core.config_store import CodegenConfig
from twenty_crm.core.metadata import field_from_dict
from twenty_crm.core.models import EntityNotFoundError, GenerationError
from twenty_crm.generator import (
    CollectionGenerator,
    EntityGenerator,
    ServiceGenerator,
    generate_code,
)
from twenty_crm.generator.naming import (
    attribute_name,
    pascal_case,
    pluralize,
    python_type,
    snake_case,
)


@pytest.fixture
def config(tmp_path):
    """Generator configuration writing into a temp directory."""
    return CodegenConfig(
        namespace="myapp.crm",
        output_dir=str(tmp_path / "crm"),
        api_url="https://crm.example.com/rest/",
        api_token="token",
        entities=["person", "company"],
        options={"overwrite": False, "generate_services": True, "generate_collections": True},
    )


@pytest.fixture
def registry(person_definition, company_definition):
    """Registry stand-in holding person and company."""
    definitions = {"person": person_definition, "company": company_definition}

    def require_definition(name):
        if name not in definitions:
            raise EntityNotFoundError(f"Entity '{name}' not found")
        return definitions[name]

    registry = Mock()
    registry.require_definition.side_effect = require_definition
    return registry


# ===== Naming Tests =====

def test_pascal_case():
    """Test class name conversion."""
    assert pascal_case("person") == "Person"
    assert pascal_case("opportunityNote") == "OpportunityNote"
    assert pascal_case("lead_source") == "LeadSource"


def test_snake_case():
    """Test module and attribute name conversion."""
    assert snake_case("linkedinLink") == "linkedin_link"
    assert snake_case("annualRecurringRevenue") == "annual_recurring_revenue"
    assert snake_case("xLink") == "x_link"
    assert snake_case("person") == "person"


def test_pluralize():
    """Test naive pluralization."""
    assert pluralize("company") == "companies"
    assert pluralize("business") == "businesses"
    assert pluralize("person") == "persons"


def test_attribute_name_avoids_collisions():
    """Test keywords and base class names get a suffix."""
    assert attribute_name("jobTitle") == "job_title"
    assert attribute_name("from") == "from_field"
    assert attribute_name("raw") == "raw_field"
    assert attribute_name("definition") == "definition_field"
    assert attribute_name("name") == "name"


def test_python_type():
    """Test type hints for plain and composite fields."""
    assert python_type(field_from_dict({"name": "a", "type": "TEXT"})) == "str | None"
    assert python_type(field_from_dict({"name": "a", "type": "NUMBER", "isNullable": False})) == "float"
    assert python_type(field_from_dict({"name": "a", "type": "RATING", "isNullable": False})) == "int"
    assert python_type(field_from_dict({"name": "a", "type": "PHONES"})) == "PhoneCollection | None"
    assert python_type(field_from_dict({"name": "a", "type": "EMAILS"})) == "str | None"
    assert python_type(field_from_dict({"name": "a", "type": "MULTI_SELECT"})) == "list[str] | None"
    assert python_type(field_from_dict({"name": "a", "type": "RELATION"})) == "Any"


# ===== Entity Generator Tests =====

def test_entity_generator_names(config, person_definition):
    """Test class and module names."""
    generator = EntityGenerator(config)

    assert generator.class_name(person_definition) == "Person"
    assert generator.module_name(person_definition) == "person"
    assert generator.module_path(person_definition) == "myapp.crm.entity.person"


def test_entity_generator_source(config, person_definition):
    """Test the rendered entity module."""
    source = EntityGenerator(config).generate(person_definition)

    ast.parse(source)
    assert "class Person(DynamicEntity):" in source
    assert 'OBJECT_NAME = "person"' in source
    assert "from twenty_crm.entities.values import Name, PhoneCollection" in source
    assert "def job_title(self) -> str | None:" in source
    assert "@job_title.setter" in source
    assert "def phones(self) -> PhoneCollection | None:" in source
    assert '"""Score (custom field)"""' in source


def test_entity_generator_read_only_fields(config, person_definition):
    """Test that system and auto-managed fields have no setter."""
    source = EntityGenerator(config).generate(person_definition)

    assert "def created_at(self)" in source
    assert "@created_at.setter" not in source
    assert "@position.setter" not in source
    assert "def id(self)" not in source


def test_entity_generator_escapes_labels(config):
    """Test that quotes in labels do not break the docstring."""
    from twenty_crm.core.registry import build_entity_definition

    definition = build_entity_definition({
        "id": "obj",
        "nameSingular": "note",
        "namePlural": "notes",
        "fields": [{"name": "body", "type": "TEXT", "label": 'The """body"""\nof it'}],
    })

    ast.parse(EntityGenerator(config).generate(definition))


# ===== Collection / Service Generator Tests =====

def test_collection_generator_source(config, company_definition):
    """Test the rendered collection module."""
    generator = CollectionGenerator(config)
    source = generator.generate(company_definition)

    ast.parse(source)
    assert generator.module_path(company_definition) == "myapp.crm.collection.company_collection"
    assert "class CompanyCollection:" in source
    assert "from myapp.crm.entity.company import Company" in source
    assert "def companies(self) -> list[Company]:" in source


def test_service_generator_with_collections(config, person_definition):
    """Test that services return typed collections."""
    generator = ServiceGenerator(config)
    source = generator.generate(person_definition)

    ast.parse(source)
    assert generator.module_name(person_definition) == "person_service"
    assert "class PersonService:" in source
    assert "from myapp.crm.collection.person_collection import PersonCollection" in source
    assert ") -> PersonCollection:" in source


def test_service_generator_without_collections(config, person_definition):
    """Test that services return lists when collections are off."""
    config.options["generate_collections"] = False
    source = ServiceGenerator(config).generate(person_definition)

    ast.parse(source)
    assert "PersonCollection" not in source
    assert ") -> list[Person]:" in source


# ===== Builder Tests =====

def test_generate_code_writes_package(config, registry, tmp_path):
    """Test the full output layout."""
    written = generate_code(config, registry)

    root = tmp_path / "crm"
    assert written == [
        root / "entity" / "person.py",
        root / "service" / "person_service.py",
        root / "collection" / "person_collection.py",
        root / "entity" / "company.py",
        root / "service" / "company_service.py",
        root / "collection" / "company_collection.py",
    ]
    for subpackage in ("", "entity", "service", "collection"):
        assert (root / subpackage / "__init__.py").exists()
    for path in written:
        ast.parse(path.read_text())


def test_generate_code_without_services_and_collections(config, registry, tmp_path):
    """Test that disabled module kinds are skipped."""
    config.entities = ["person"]
    config.options["generate_services"] = False
    config.options["generate_collections"] = False

    written = generate_code(config, registry)

    assert written == [tmp_path / "crm" / "entity" / "person.py"]
    assert not (tmp_path / "crm" / "service").exists()


def test_generate_code_refuses_to_overwrite(config, registry, tmp_path):
    """Test that existing files stop the run before anything is written."""
    existing = tmp_path / "crm" / "collection" / "company_collection.py"
    existing.parent.mkdir(parents=True)
    existing.write_text("# mine\n")

    with pytest.raises(GenerationError, match="use --overwrite"):
        generate_code(config, registry)

    assert existing.read_text() == "# mine\n"
    assert not (tmp_path / "crm" / "entity" / "person.py").exists()


def test_generate_code_overwrite(config, registry, tmp_path):
    """Test that overwrite replaces existing modules but keeps package markers."""
    init_file = tmp_path / "crm" / "entity" / "__init__.py"
    init_file.parent.mkdir(parents=True)
    init_file.write_text("# custom\n")
    module = tmp_path / "crm" / "entity" / "person.py"
    module.write_text("# old\n")
    config.options["overwrite"] = True

    generate_code(config, registry)

    assert "class Person(DynamicEntity):" in module.read_text()
    assert init_file.read_text() == "# custom\n"


def test_generate_code_unknown_entity(config, registry, tmp_path):
    """Test that unknown entities fail before the output directory is created."""
    config.entities = ["unicorn"]

    with pytest.raises(EntityNotFoundError):
        generate_code(config, registry)

    assert not (tmp_path / "crm").exists()


# ===== Generated Code Tests =====

def test_generated_package_is_usable(tmp_path, monkeypatch, registry, mock_twenty_client, person_definition):
    """Test importing the generated modules and using the typed service."""
    import importlib

    from twenty_crm.services.generic import GenericEntityService

    config = CodegenConfig(
        namespace="generated_pkg.crm",
        output_dir=str(tmp_path / "generated_pkg" / "crm"),
        api_url="https://crm.example.com/rest/",
        api_token="token",
        entities=["person"],
        options={"generate_services": True, "generate_collections": True},
    )
    generate_code(config, registry)
    monkeypatch.syspath_prepend(str(tmp_path))

    service_module = importlib.import_module("generated_pkg.crm.service.person_service")
    entity_module = importlib.import_module("generated_pkg.crm.entity.person")

    mock_twenty_client.request.return_value = {
        "data": {"people": [{
            "id": "p-1",
            "jobTitle": "Engineer",
            "name": {"firstName": "Ada", "lastName": "Lovelace"},
        }]}
    }
    service = service_module.PersonService(GenericEntityService(mock_twenty_client, person_definition))

    people = service.find()

    assert len(people) == 1
    person = people.first()
    assert isinstance(person, entity_module.Person)
    assert person.job_title == "Engineer"
    assert person.name.full_name == "Ada Lovelace"
    assert [p.id for p in people.persons] == ["p-1"]

    person.job_title = "CTO"
    assert person.to_dict()["jobTitle"] == "CTO"

    new_person = service.create_instance({"city": "Oslo"})
    assert new_person.city == "Oslo"
