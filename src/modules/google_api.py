"""Google API utilities for the Sheets-backed leaderboard store."""

import logging
from pathlib import Path

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

# OAuth2 scopes for the Sheets API
SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class SheetsStoreError(RuntimeError):
    """A Sheets read, write or append was rejected."""

    def __init__(self, operation: str, sheet_range: str, details: str = ""):
        super().__init__(f"Sheets {operation} failed for {sheet_range}: {details}")
        self.operation = operation
        self.sheet_range = sheet_range


def authenticate_google(
    credentials_path: Path = Path("credentials.json"),
    token_path: Path = Path("token.json"),
    service_account_path: Path = Path("service-account.json"),
):
    """Authenticate with Google API.

    A service-account key file is preferred when present (unattended servers).
    Otherwise the OAuth2 installed-app flow is used with a cached token.

    Returns:
        Credentials object for Google API calls.
    """
    if service_account_path.exists():
        logger.debug(f"Using service account {service_account_path}")
        return service_account.Credentials.from_service_account_file(
            str(service_account_path), scopes=SCOPES
        )

    creds = None
    if token_path.exists():
        creds = Credentials.from_authorized_user_file(str(token_path), SCOPES)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            if not credentials_path.exists():
                raise FileNotFoundError(
                    f"{credentials_path} not found. "
                    "Please download it from Google Cloud Console "
                    f"or provide {service_account_path}."
                )
            flow = InstalledAppFlow.from_client_secrets_file(
                str(credentials_path), SCOPES
            )
            creds = flow.run_local_server(port=0)

        with open(token_path, "w") as token_file:
            token_file.write(creds.to_json())

    return creds


def connect_to_sheets(config):
    """Connect to the Google Sheets API.

    Args:
        config: AppConfig with credential file locations.

    Returns:
        Sheets service object.
    """
    creds = authenticate_google(
        config.credentials_file, config.token_file, config.service_account_file
    )
    return build("sheets", "v4", credentials=creds)


def tab_range(sheet_name: str, columns: str) -> str:
    """Build an A1 range covering whole columns of a tab.

    Args:
        sheet_name: Name of the sheet tab.
        columns: Column span like "A:F".

    Returns:
        Range string like "'Leaderboard'!A:F".
    """
    return f"'{sheet_name}'!{columns}"


def read_sheet_data(sheets_service, spreadsheet_id: str, sheet_range: str) -> list:
    """Read all rows from a range as formatted text.

    Args:
        sheets_service: Google Sheets API service object.
        spreadsheet_id: ID of the spreadsheet.
        sheet_range: A1 range to read.

    Returns:
        List of rows (lists of strings). Trailing blank cells are omitted by the API.

    Raises:
        SheetsStoreError: If the API rejects the request.
    """
    try:
        result = (
            sheets_service.spreadsheets()
            .values()
            .get(
                spreadsheetId=spreadsheet_id,
                range=sheet_range,
                valueRenderOption="FORMATTED_VALUE",
            )
            .execute()
        )
    except HttpError as e:
        logger.error(f"Failed to read {sheet_range} from {spreadsheet_id}: {e}")
        raise SheetsStoreError("read", sheet_range, str(e)) from e
    return result.get("values", [])


def write_sheet_data(
    sheets_service, spreadsheet_id: str, sheet_range: str, values: list
) -> None:
    """Overwrite a range with the given rows.

    Values are written RAW so counters stay plain text and names are not
    reinterpreted as formulas or dates.

    Raises:
        SheetsStoreError: If the API rejects the request.
    """
    try:
        (
            sheets_service.spreadsheets()
            .values()
            .update(
                spreadsheetId=spreadsheet_id,
                range=sheet_range,
                valueInputOption="RAW",
                body={"values": values},
            )
            .execute()
        )
    except HttpError as e:
        logger.error(f"Failed to write {sheet_range} in {spreadsheet_id}: {e}")
        raise SheetsStoreError("write", sheet_range, str(e)) from e


def clear_sheet_range(sheets_service, spreadsheet_id: str, sheet_range: str) -> None:
    """Clear every value in a range (formatting is kept).

    values.update only touches the cells it is given, so a shorter write
    leaves old rows below it unless the range is cleared first.

    Raises:
        SheetsStoreError: If the API rejects the request.
    """
    try:
        (
            sheets_service.spreadsheets()
            .values()
            .clear(spreadsheetId=spreadsheet_id, range=sheet_range, body={})
            .execute()
        )
    except HttpError as e:
        logger.error(f"Failed to clear {sheet_range} in {spreadsheet_id}: {e}")
        raise SheetsStoreError("clear", sheet_range, str(e)) from e


def append_sheet_row(sheets_service, spreadsheet_id: str, sheet_range: str, row: list):
    """Append one row below the last row of a range.

    Raises:
        SheetsStoreError: If the API rejects the request.
    """
    try:
        (
            sheets_service.spreadsheets()
            .values()
            .append(
                spreadsheetId=spreadsheet_id,
                range=sheet_range,
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [row]},
            )
            .execute()
        )
    except HttpError as e:
        logger.error(f"Failed to append to {sheet_range} in {spreadsheet_id}: {e}")
        raise SheetsStoreError("append", sheet_range, str(e)) from e
