import logging

import display
import settings
import validation
from database import EntityTable
from errors import PoiseError, ValidationError
from person import ArchitectRepository, ContractorRepository, CustomerRepository
from project import ProjectRepository
from project_search import ProjectSearch

logger = logging.getLogger(__name__)

BORDER = "=" * 50

PERSON_PROMPTS = [
    ("first_name", "First Name"),
    ("last_name", "Last Name"),
    ("phone_number", "Telephone Number"),
    ("email", "Email Address"),
    ("address", "Home Address"),
    ("post_code", "Post Code"),
]

# (column, prompt, parser) for the typed project fields
PROJECT_VALUE_PROMPTS = [
    ("total_fee_gbp", "total fee (GBP)", lambda v: validation.parse_money(v, "Total fee")),
    ("paid_to_date_gbp", "amount paid to date (GBP)", lambda v: validation.parse_money(v, "Paid to date")),
    ("deadline_date", "deadline date (YYYY-MM-DD)", lambda v: validation.parse_date(v, "Deadline date")),
]


class ManagingSystem:
    """Text menus for projects, architects, contractors and customers"""

    def __init__(self, db, input_func=None):
        self.db = db
        self.input = input_func or input  # Swapped out in tests
        self.projects = ProjectRepository(db)
        self.search = ProjectSearch(db)
        self.architects = ArchitectRepository(db)
        self.contractors = ContractorRepository(db)
        self.customers = CustomerRepository(db)

    # ---------- Menus ----------
    def display_menu(self):
        """Display main system menu"""
        print("\n" + BORDER)
        print("PoisePMS Main Menu:")
        print("1: Add a new project")
        print("2: Update existing project")
        print("3: Delete a project")
        print("4: Projects search menu")
        print("5: Architects menu")
        print("6: Contractors menu")
        print("7: Customers menu")
        print("8: Export projects to CSV")
        print("0: Exit")
        print(BORDER)

    def run(self):
        """Main loop; returns when the operator exits or input runs out"""
        actions = {
            1: self.add_project,
            2: self.update_project,
            3: self.delete_project,
            4: self.project_search_menu,
            5: lambda: self.person_menu(self.architects),
            6: lambda: self.person_menu(self.contractors),
            7: lambda: self.person_menu(self.customers),
            8: self.export_projects,
        }
        try:
            while True:
                self.display_menu()
                choice = self.read_choice(0, 8)
                if choice == 0:
                    break
                self.perform(actions[choice])
        except EOFError:
            logger.info("Input closed, leaving menu loop")
        print("Exiting program.")

    def read_choice(self, minimum, maximum):
        """Ask until the operator types a valid menu number"""
        while True:
            text = self.input("Please select an option: ")
            try:
                return validation.parse_menu_choice(text, minimum, maximum)
            except ValidationError as e:
                print(e)

    def perform(self, action):
        # A failed action is reported and the menu carries on
        try:
            action()
        except PoiseError as e:
            logger.debug("Action %s failed: %s", getattr(action, "__name__", action), e)
            print(e)

    def project_search_menu(self):
        while True:
            print("\n" + BORDER)
            print("Project Search Menu:")
            print("1: Search for a project")
            print("2: List all projects")
            print("3: List incomplete projects")
            print("4: List projects beyond deadline")
            print("0: Back to main menu")
            print(BORDER)
            choice = self.read_choice(0, 4)
            if choice == 0:
                return
            elif choice == 1:
                self.search_options_menu()
            elif choice == 2:
                self.perform(lambda: self.show_projects(self.search.list_all(), "No projects found."))
            elif choice == 3:
                self.perform(lambda: self.show_projects(self.search.list_incomplete(),
                                                        "No incomplete projects found."))
            elif choice == 4:
                self.perform(lambda: self.show_projects(self.search.list_past_deadline(),
                                                        "No projects beyond deadline found."))

    def search_options_menu(self):
        while True:
            print("\nSearch Options Menu:")
            print("1: Search by project name")
            print("2: Search by project number")
            print("0: Back to project search menu")
            choice = self.read_choice(0, 2)
            if choice == 0:
                return
            elif choice == 1:
                self.perform(self.search_project_by_name)
            elif choice == 2:
                self.perform(self.search_project_by_number)

    def person_menu(self, repo):
        """Add/update/delete/search/list menu for one person table"""
        name = repo.table.value
        actions = {
            1: lambda: self.add_person(repo),
            2: lambda: self.update_person(repo),
            3: lambda: self.delete_person(repo),
            4: lambda: self.search_person(repo),
            5: lambda: self.list_people(repo),
        }
        while True:
            print("\n" + BORDER)
            print(f"{repo.label}s Menu:")
            print(f"1: Add a new {name}")
            print(f"2: Update an existing {name}")
            print(f"3: Delete a {name}")
            print(f"4: Search for a {name}")
            print(f"5: List all {name}s")
            print("0: Back to main menu")
            print(BORDER)
            choice = self.read_choice(0, 5)
            if choice == 0:
                return
            self.perform(actions[choice])

    # ---------- Prompt helpers ----------
    def prompt_until_valid(self, prompt, parser):
        """Re-prompt until `parser` accepts the input"""
        while True:
            text = self.input(prompt)
            try:
                return parser(text)
            except ValidationError as e:
                print(e)

    def prompt_optional(self, prompt, parser):
        """Blank input returns None (keep current value), anything else must parse"""
        while True:
            text = self.input(prompt)
            if validation.is_blank(text):
                return None
            try:
                return parser(text)
            except ValidationError as e:
                print(e)

    def prompt_foreign_key(self, table, prompt, allow_blank=False):
        while True:
            text = self.input(prompt)
            if allow_blank and validation.is_blank(text):
                return None
            try:
                record_id = validation.parse_id(text, f"{table.label} ID")
            except ValidationError as e:
                print(e)
                continue
            if self.projects.id_exists(table, record_id):
                return record_id
            print(f"ID does not exist in the {table.value} table. Please enter a valid ID.")

    def prompt_existing_id(self, prompt, exists):
        """Ask for an id until it exists; '0' returns None"""
        while True:
            text = self.input(prompt)
            if text.strip() == "0":
                print("Returning to the previous menu.")
                return None
            try:
                record_id = validation.parse_id(text)
            except ValidationError as e:
                print(e)
                continue
            if exists(record_id):
                return record_id
            print("ID not found. Try again or enter 0 to return.")

    # ---------- Projects ----------
    def add_project(self):
        print("Enter the details for the new project:")
        fields = {
            "project_name": self.input("Enter project name: ").strip(),
            "building_type": self.prompt_until_valid(
                "Enter building type: ", lambda v: validation.require_text(v, "Building type")),
            "project_address": self.prompt_until_valid(
                "Enter project address: ", lambda v: validation.require_text(v, "Project address")),
            "erf_number": self.prompt_until_valid(
                "Enter ERF number (up to 10 digits): ", lambda v: validation.require_text(v, "ERF number")),
        }
        for column, prompt, parser in PROJECT_VALUE_PROMPTS:
            fields[column] = self.prompt_until_valid(f"Enter {prompt}: ", parser)
        fields["completion_date"] = self.prompt_optional(
            "Enter completion date (YYYY-MM-DD), or leave blank: ",
            lambda v: validation.parse_date(v, "Completion date"))
        fields["finalised"] = self.prompt_until_valid(
            "Is the project finalised (true/false): ", lambda v: validation.parse_boolean(v, "Finalised"))
        for table in EntityTable:
            fields[f"{table.value}_id"] = self.prompt_foreign_key(table, f"Enter {table.value} ID: ")

        project_number = self.projects.create(fields)
        print(f"New project added successfully. Project number: {project_number}")

    def update_project(self):
        project_number = self.prompt_existing_id(
            "Enter Project Number to update (or 0 to return to the main menu): ", self.projects.exists)
        if project_number is None:
            return
        print("Enter the new details for the project or leave the input blank to keep current values:")
        fields = {
            "project_name": self.input("Enter new project name: "),
            "building_type": self.input("Enter new building type: "),
            "project_address": self.input("Enter new project address: "),
            "erf_number": self.input("Enter new ERF number (up to 10 digits): "),
        }
        for column, prompt, parser in PROJECT_VALUE_PROMPTS:
            fields[column] = self.prompt_optional(f"Enter new {prompt}: ", parser)
        fields["completion_date"] = self.prompt_optional(
            "Enter new completion date (YYYY-MM-DD), if applicable: ",
            lambda v: validation.parse_date(v, "Completion date"))
        fields["finalised"] = self.prompt_optional(
            "Is the project finalised (true/false): ", lambda v: validation.parse_boolean(v, "Finalised"))
        for table in EntityTable:
            fields[f"{table.value}_id"] = self.prompt_foreign_key(
                table, f"Enter new {table.value} ID (or leave blank to retain current): ", allow_blank=True)

        if self.projects.update(project_number, fields):
            print("Project updated successfully.")
        else:
            print("No fields were updated.")

    def delete_project(self):
        project_number = self.prompt_existing_id(
            "Enter Project Number to delete (or 0 to return to the main menu): ", self.projects.exists)
        if project_number is None:
            return
        self.projects.delete(project_number)
        print("Project deleted successfully.")

    def search_project_by_name(self):
        name = self.input("Enter project name to search: ")
        self.show_projects(self.search.by_name(name), "No projects found with that name.")

    def search_project_by_number(self):
        project_number = validation.parse_id(self.input("Enter project number to search: "), "Project number")
        project = self.search.by_number(project_number)
        self.show_projects([project] if project else [], "Project number not found.")

    def show_projects(self, projects, empty_message):
        if not projects:
            print(empty_message)
            return
        print(f"\nFound {len(projects)} project(s):")
        for project in projects:
            print(display.format_project(project))

    def export_projects(self):
        path = self.input(f"Enter CSV file path [{settings.EXPORT_FILE}]: ").strip() or settings.EXPORT_FILE
        try:
            written = display.export_projects(self.search.list_all(), path)
        except OSError as e:
            logger.error("Export to %s failed: %s", path, e)
            print(f"Export failed: {e}")
            return
        if written is None:
            print("No projects to export.")
        else:
            print(f"Projects exported to {written}")

    # ---------- Architects, contractors, customers ----------
    def gather_person_details(self, updating=False):
        prefix = "updated " if updating else ""
        return {field: self.input(f"Enter {prefix}{prompt}: ") for field, prompt in PERSON_PROMPTS}

    def add_person(self, repo):
        details = self.gather_person_details()
        new_id = repo.add(details)
        print(f"A new {repo.table.value} has been added successfully. ID: {new_id}")

    def update_person(self, repo):
        person_id = self.prompt_existing_id(
            f"Enter {repo.label} ID to update (or 0 to return to the {repo.table.value} menu): ", repo.exists)
        if person_id is None:
            return
        repo.update(person_id, self.gather_person_details(updating=True))
        print(f"{repo.label} has been updated successfully.")

    def delete_person(self, repo):
        person_id = self.prompt_existing_id(
            f"Enter {repo.label} ID to delete (or 0 to return to the {repo.table.value} menu): ", repo.exists)
        if person_id is None:
            return
        repo.delete(person_id)
        print(f"{repo.label} has been deleted successfully.")

    def search_person(self, repo):
        person_id = validation.parse_id(self.input(f"Enter {repo.label} ID: "), f"{repo.label} ID")
        person = repo.find_by_id(person_id)
        if person is None:
            print(f"{repo.label} ID not found.")
        else:
            print(display.format_person(person))

    def list_people(self, repo):
        people = repo.list_all()
        if not people:
            print(f"No {repo.table.value}s found.")
            return
        for person in people:
            print(display.format_person(person))
