import logging
import os

import pandas as pd
from babel.numbers import format_currency

import settings
from project import PROJECT_COLUMNS

logger = logging.getLogger(__name__)

EXPORT_HEADERS = ["project_number"] + PROJECT_COLUMNS


def format_gbp(value, locale=None):
    if value is None:
        return "-"
    return format_currency(value, "GBP", locale=locale or settings.LOCALE)


def format_person(person):
    return (f"ID: {person.id} | First Name: {person.first_name} | Last Name: {person.last_name} | "
            f"Phone Number: {person.phone_number} | Email: {person.email} | "
            f"Address: {person.address} | Post Code: {person.post_code}")


def format_project(project):
    completion = project.completion_date.isoformat() if project.completion_date else "Not completed"
    return (f"Project Number: {project.project_number} | Project Name: {project.project_name} | "
            f"Building Type: {project.building_type} | Address: {project.project_address} | "
            f"ERF Number: {project.erf_number} | Total Fee: {format_gbp(project.total_fee_gbp)} | "
            f"Paid To Date: {format_gbp(project.paid_to_date_gbp)} | "
            f"Deadline Date: {project.deadline_date.isoformat()} | Completion Date: {completion} | "
            f"Finalised: {'Yes' if project.finalised else 'No'} | Architect ID: {project.architect_id} | "
            f"Contractor ID: {project.contractor_id} | Customer ID: {project.customer_id}")


def export_projects(projects, file_path):
    """Write projects to a CSV file, returning the path written (None if no projects)"""
    if not projects:
        return None
    if not file_path.lower().endswith(".csv"):
        file_path += ".csv"
    rows = [[p.get_info()[c] for c in EXPORT_HEADERS] for p in projects]
    df = pd.DataFrame(rows, columns=EXPORT_HEADERS)
    # Keep money exact and dates as YYYY-MM-DD in the file
    for col in ("total_fee_gbp", "paid_to_date_gbp"):
        df[col] = df[col].map(lambda v: "" if pd.isna(v) else f"{v:.2f}")
    for col in ("deadline_date", "completion_date"):
        df[col] = df[col].map(lambda v: "" if pd.isna(v) else v.isoformat())
    df.to_csv(file_path, index=False)
    logger.info("Exported %d projects to %s", len(df), os.path.abspath(file_path))
    return file_path
