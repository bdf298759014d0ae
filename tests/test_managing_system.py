from datetime import date
from decimal import Decimal

import pytest

from database import Database
from managing_system import ManagingSystem

BLANK_PROJECT_UPDATE = [""] * 12


def scripted(lines):
    feed = iter(lines)

    def fake_input(prompt=""):
        try:
            return next(feed)
        except StopIteration:
            raise EOFError from None
    return fake_input


@pytest.fixture
def run_menu(db, capsys):
    """Run the main loop over the given input lines and return stdout"""
    def _run(*lines, database=None):
        ManagingSystem(database or db, input_func=scripted(lines)).run()
        return capsys.readouterr().out
    return _run


def test_exit(run_menu):
    out = run_menu("0")
    assert "PoisePMS Main Menu:" in out
    assert "8: Export projects to CSV" in out
    assert out.rstrip().endswith("Exiting program.")


def test_end_of_input_exits(run_menu):
    assert "Exiting program." in run_menu()


def test_invalid_choices_reprompt(run_menu):
    out = run_menu("abc", "00", "01", "9", "", "0")
    assert out.count("Invalid input. Please enter a number.") == 4
    assert out.count("Invalid choice. Please enter a number from the menu.") == 1
    assert "Exiting program." in out


def test_add_architect(run_menu, architects):
    out = run_menu("5", "1", "Jane", "Doe", "0112223333", "jane@x.com", "1 Main Rd", "0001", "0", "0")
    assert "A new architect has been added successfully. ID: 1" in out
    [jane] = architects.list_all()
    assert (jane.first_name, jane.email, jane.post_code) == ("Jane", "jane@x.com", "0001")


def test_search_and_list_customers(run_menu, customers, jane):
    customer_id = customers.add(jane)
    out = run_menu("7", "4", str(customer_id), "4", "99", "4", "abc", "5", "0", "0")
    assert out.count(f"ID: {customer_id} | First Name: Jane | Last Name: Doe") == 2
    assert "Customer ID not found." in out
    assert "Invalid entry for Customer ID. IDs are numeric values only." in out
    assert "Customers Menu:" in out


def test_list_empty_contractors(run_menu):
    assert "No contractors found." in run_menu("6", "5", "0", "0")


def test_update_contractor_retries_unknown_id(run_menu, contractors, jane):
    contractor_id = contractors.add(jane)
    out = run_menu("6", "2", "77", str(contractor_id),
                   "Bob", "Builder", "0998887777", "bob@x.com", "9 Site Rd", "0002", "0", "0")
    assert "ID not found. Try again or enter 0 to return." in out
    assert "Contractor has been updated successfully." in out
    assert contractors.find_by_id(contractor_id).last_name == "Builder"


def test_delete_customer_zero_returns(run_menu, customers, jane):
    customer_id = customers.add(jane)
    out = run_menu("7", "3", "0", "0", "0")
    assert "Returning to the previous menu." in out
    assert customers.exists(customer_id)

    out = run_menu("7", "3", str(customer_id), "0", "0")
    assert "Customer has been deleted successfully." in out
    assert not customers.exists(customer_id)


def test_add_project_reprompts_until_valid(run_menu, search, people):
    out = run_menu(
        "1",
        "Clinic",
        "", "Medical",               # building type required
        "2 Elm St",
        "123456",
        "lots", "100000",            # total fee
        "25000",
        "1 Jan", "2025-01-01",       # deadline
        "",                          # no completion date
        "maybe", "false",
        "999", str(people["architect_id"]),
        str(people["contractor_id"]),
        str(people["customer_id"]),
        "0",
    )
    assert "Building type cannot be left blank. Please enter a value." in out
    assert "Invalid entry for Total fee. Please enter a numeric value." in out
    assert "Invalid date format for Deadline date." in out
    assert "Invalid entry for Finalised. Please enter 'true' or 'false'." in out
    assert "ID does not exist in the architect table. Please enter a valid ID." in out
    assert "New project added successfully." in out

    [project] = search.list_all()
    assert project.project_name == "Clinic"
    assert project.total_fee_gbp == Decimal("100000.00")
    assert project.completion_date is None
    assert project.architect_id == people["architect_id"]


def test_update_project_without_changes(run_menu, search, clinic):
    before = search.by_number(clinic)
    out = run_menu("2", str(clinic), *BLANK_PROJECT_UPDATE, "0")
    assert "No fields were updated." in out
    assert search.by_number(clinic) == before


def test_update_project_fee_only(run_menu, search, clinic):
    answers = list(BLANK_PROJECT_UPDATE)
    answers[4] = "150000"
    out = run_menu("2", str(clinic), *answers, "0")
    assert "Project updated successfully." in out
    assert search.by_number(clinic).total_fee_gbp == Decimal("150000.00")


def test_update_project_bad_value_reprompts_that_field(run_menu, search, clinic):
    answers = list(BLANK_PROJECT_UPDATE)
    answers[4:5] = ["not-a-number", ""]
    out = run_menu("2", str(clinic), *answers, "0")
    assert "Invalid entry for Total fee. Please enter a numeric value." in out
    assert "No fields were updated." in out
    assert search.by_number(clinic).total_fee_gbp == Decimal("100000.00")


def test_update_unknown_project_then_return(run_menu, clinic):
    out = run_menu("2", "404", "0", "0")
    assert "ID not found. Try again or enter 0 to return." in out
    assert "Returning to the previous menu." in out


def test_delete_project(run_menu, search, clinic):
    out = run_menu("3", str(clinic), "0")
    assert "Project deleted successfully." in out
    assert search.by_number(clinic) is None


def test_project_search_menu(run_menu, clinic, make_project):
    make_project(project_name="Office", finalised=True, deadline_date=date(2099, 1, 1))
    out = run_menu(
        "4",
        "1", "1", "Clin", "2", str(clinic), "2", "x", "0",   # search options
        "2", "3", "4",
        "0", "0",
    )
    assert "Project Search Menu:" in out
    assert "Search Options Menu:" in out
    assert out.count(f"Project Number: {clinic} | Project Name: Clinic") == 5
    assert out.count("Project Name: Office") == 1
    assert "Invalid entry for Project number. IDs are numeric values only." in out


def test_project_search_empty_results(run_menu):
    out = run_menu("4", "1", "1", "Nothing", "2", "5", "0", "2", "3", "4", "0", "0")
    assert "No projects found with that name." in out
    assert "Project number not found." in out
    assert "No projects found." in out
    assert "No incomplete projects found." in out
    assert "No projects beyond deadline found." in out


def test_export_projects(run_menu, clinic, tmp_path):
    target = tmp_path / "projects.csv"
    out = run_menu("8", str(target), "0")
    assert f"Projects exported to {target}" in out
    assert target.read_text().startswith("project_number,project_name")


def test_export_without_projects(run_menu, tmp_path):
    out = run_menu("8", str(tmp_path / "none.csv"), "0")
    assert "No projects to export." in out


def test_database_errors_do_not_end_the_loop(run_menu, tmp_path):
    broken = Database(str(tmp_path / "missing" / "poisepms.db"))
    out = run_menu("5", "5", "4", "1", "0", "4", "2", "0", "0", database=broken)
    assert out.count("Database connection error") == 3
    assert "Exiting program." in out


def test_huge_ids_are_reported_and_the_loop_carries_on(run_menu, architects, jane):
    architect_id = architects.add(jane)
    huge = "99999999999999999999"
    out = run_menu(
        "5",
        "4", huge,                 # search
        "2", huge, "0",            # update, then give up
        "3", huge, "0",            # delete, then give up
        "0",
        "4", "1", "2", huge, "0", "0",
        "0",
    )
    assert out.count("IDs run from 1 to 9223372036854775807.") == 4
    assert "Invalid entry for Architect ID. IDs run from 1 to" in out
    assert "Invalid entry for Project number. IDs run from 1 to" in out
    assert architects.exists(architect_id)
    assert out.rstrip().endswith("Exiting program.")


def test_add_project_reprompts_for_fee_too_large(run_menu, search, people):
    out = run_menu(
        "1",
        "Clinic", "Medical", "2 Elm St", "123456",
        "1e30", "100000",            # total fee
        "12345678901234567890123456789", "25000",
        "2025-01-01", "", "false",
        "99999999999999999999", str(people["architect_id"]),
        str(people["contractor_id"]),
        str(people["customer_id"]),
        "0",
    )
    assert "Invalid entry for Total fee. The amount is too large." in out
    assert "Invalid entry for Paid to date. The amount is too large." in out
    assert "Invalid entry for Architect ID. IDs run from 1 to" in out
    assert "New project added successfully." in out
    assert out.rstrip().endswith("Exiting program.")
    [project] = search.list_all()
    assert project.paid_to_date_gbp == Decimal("25000.00")
