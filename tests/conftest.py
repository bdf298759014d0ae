from datetime import date
from decimal import Decimal

import pytest

from database import Database
from person import ArchitectRepository, ContractorRepository, CustomerRepository
from project import ProjectRepository
from project_search import ProjectSearch


JANE = {
    "first_name": "Jane",
    "last_name": "Doe",
    "phone_number": "0112223333",
    "email": "jane@x.com",
    "address": "1 Main Rd",
    "post_code": "0001",
}


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "poisepms_test.db"))
    database.create_tables()
    return database


@pytest.fixture
def architects(db):
    return ArchitectRepository(db)


@pytest.fixture
def contractors(db):
    return ContractorRepository(db)


@pytest.fixture
def customers(db):
    return CustomerRepository(db)


@pytest.fixture
def projects(db):
    return ProjectRepository(db)


@pytest.fixture
def search(db):
    return ProjectSearch(db)


@pytest.fixture
def people(architects, contractors, customers):
    """One architect, contractor and customer; returns their ids"""
    return {
        "architect_id": architects.add(JANE),
        "contractor_id": contractors.add(dict(JANE, first_name="Bob", last_name="Builder")),
        "customer_id": customers.add(dict(JANE, first_name="Carla", last_name="Client")),
    }


@pytest.fixture
def clinic_fields(people):
    fields = {
        "project_name": "Clinic",
        "building_type": "Medical",
        "project_address": "2 Elm St",
        "erf_number": "123456",
        "total_fee_gbp": "100000.00",
        "paid_to_date_gbp": "25000.00",
        "deadline_date": "2025-01-01",
        "completion_date": "",
        "finalised": "false",
    }
    fields.update({k: str(v) for k, v in people.items()})
    return fields


@pytest.fixture
def clinic(projects, clinic_fields):
    return projects.create(clinic_fields)


@pytest.fixture
def make_project(projects, people):
    """Factory inserting a project with typed values; keyword args override fields"""
    def _make(**overrides):
        fields = {
            "project_name": "House",
            "building_type": "Residential",
            "project_address": "3 Oak Ave",
            "erf_number": "42",
            "total_fee_gbp": Decimal("5000"),
            "paid_to_date_gbp": Decimal("0"),
            "deadline_date": date(2030, 6, 30),
            "completion_date": None,
            "finalised": False,
        }
        fields.update(people)
        fields.update(overrides)
        return projects.create(fields)
    return _make


@pytest.fixture
def jane():
    return dict(JANE)
