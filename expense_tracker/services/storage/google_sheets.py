"""
Google Sheets Storage Implementation

Each collection is a worksheet: the first row holds the column names and
every following row holds one record. Cells are JSON-encoded (see
codec.py) so numbers, dates and datetimes survive the round trip.

TRADEOFFS:
- Not suitable for high-volume data (fine for personal expense tracking)
- No transactions: every operation is a separate API call
- Limited query capabilities (we filter in Python)

Connecting is retried; individual reads and writes are not. A failed
read or write surfaces immediately as StorageError.
"""

from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from expense_tracker.config import GoogleSheetsSettings, get_settings
from expense_tracker.services.storage.codec import decode_cell, encode_cell
from expense_tracker.services.storage.filters import matches
from expense_tracker.services.storage.interface import (
    AUDIT_COLLECTION,
    EXPENSES_COLLECTION,
    RECORD_ID_FIELD,
    USERS_COLLECTION,
    CollectionInterface,
    ConnectionError,
    DocumentStoreInterface,
    DuplicateError,
    StorageError,
)
from expense_tracker.services.storage.memory import new_record_id


# Column layout per collection
USER_COLUMNS = [
    RECORD_ID_FIELD,
    "id",
    "first_name",
    "last_name",
    "birthday",
    "marital_status",
    "created_at",
    "updated_at",
]

EXPENSE_COLUMNS = [
    RECORD_ID_FIELD,
    "description",
    "category",
    "userid",
    "user",
    "sum",
    "date",
    "created_at",
    "updated_at",
]

AUDIT_COLUMNS = [
    RECORD_ID_FIELD,
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "description",
    "details",
    "error_message",
]

COLLECTION_COLUMNS = {
    USERS_COLLECTION: USER_COLUMNS,
    EXPENSES_COLLECTION: EXPENSE_COLUMNS,
    AUDIT_COLLECTION: AUDIT_COLUMNS,
}


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and worksheet lookup.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, title: str, columns: list[str]) -> gspread.Worksheet:
        """Get or create a worksheet, writing the header row when creating."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet


class GoogleSheetsCollection(CollectionInterface):
    """
    One collection stored as one worksheet.

    Fields outside the collection's column layout are not stored.
    """

    def __init__(
        self,
        client: GoogleSheetsClient,
        name: str,
        sheet_title: str,
        columns: list[str],
    ):
        self._client = client
        self._name = name
        self._sheet_title = sheet_title
        self._columns = columns

    @property
    def name(self) -> str:
        return self._name

    def _sheet(self) -> gspread.Worksheet:
        return self._client.get_worksheet(self._sheet_title, self._columns)

    def _record_to_row(self, record: dict) -> list[str]:
        """Convert a record to a spreadsheet row."""
        return [encode_cell(record.get(column)) for column in self._columns]

    def _row_to_record(self, row: list) -> dict:
        """Convert a spreadsheet row to a record."""
        # Trailing empty cells are trimmed by the Sheets API
        def safe_get(index: int) -> str:
            try:
                return row[index]
            except IndexError:
                return ""

        record = {}
        for index, column in enumerate(self._columns):
            value = decode_cell(safe_get(index))
            if value is not None:
                record[column] = value
        return record

    def _indexed_records(self, sheet: gspread.Worksheet) -> list[tuple[int, dict]]:
        """All records with their 1-based sheet row numbers (row 1 is the header)."""
        records = []
        for row_number, row in enumerate(sheet.get_all_values()[1:], start=2):
            if not row or not row[0]:  # Skip empty rows
                continue
            records.append((row_number, self._row_to_record(row)))
        return records

    def _locate(
        self,
        sheet: gspread.Worksheet,
        record_id: str,
    ) -> tuple[Optional[int], Optional[dict]]:
        for row_number, record in self._indexed_records(sheet):
            if record.get(RECORD_ID_FIELD) == record_id:
                return row_number, record
        return None, None

    async def find_one(self, filter: dict[str, Any]) -> Optional[dict]:
        try:
            sheet = self._sheet()
            for _, record in self._indexed_records(sheet):
                if matches(record, filter):
                    return record
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {self._name}: {e}")

    async def find(self, filter: Optional[dict[str, Any]] = None) -> list[dict]:
        try:
            sheet = self._sheet()
            return [
                record
                for _, record in self._indexed_records(sheet)
                if matches(record, filter)
            ]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {self._name}: {e}")

    async def insert(self, record: dict) -> dict:
        try:
            sheet = self._sheet()
            stored = dict(record)
            record_id = stored.get(RECORD_ID_FIELD) or new_record_id()
            row_number, _ = self._locate(sheet, record_id)
            if row_number is not None:
                raise DuplicateError(
                    f"Record {record_id} already exists in {self._name}"
                )
            stored[RECORD_ID_FIELD] = record_id
            sheet.append_row(self._record_to_row(stored), value_input_option="RAW")
            return {
                column: stored[column]
                for column in self._columns
                if stored.get(column) is not None
            }
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to insert into {self._name}: {e}")

    async def update_by_id(self, record_id: str, partial: dict) -> Optional[dict]:
        try:
            sheet = self._sheet()
            row_number, record = self._locate(sheet, record_id)
            if row_number is None:
                return None

            record.update(
                {key: value for key, value in partial.items() if key != RECORD_ID_FIELD}
            )
            new_row = self._record_to_row(record)

            # Update each cell in the row
            for col_idx, value in enumerate(new_row, start=1):
                sheet.update_cell(row_number, col_idx, value)

            return self._row_to_record(new_row)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update {self._name}: {e}")

    async def delete_by_id(self, record_id: str) -> Optional[dict]:
        try:
            sheet = self._sheet()
            row_number, record = self._locate(sheet, record_id)
            if row_number is None:
                return None
            sheet.delete_rows(row_number)
            return record
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete from {self._name}: {e}")

    async def sum(self, field: str, filter: Optional[dict[str, Any]] = None) -> float:
        records = await self.find(filter)
        return sum(
            record[field]
            for record in records
            if record.get(field) is not None
        )


class GoogleSheetsDocumentStore(DocumentStoreInterface):
    """
    Google Sheets implementation of the durable store.

    Knows the column layout of the users, expenses and audit collections;
    their worksheet names come from GoogleSheetsSettings.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()
        settings = self._client.settings
        self._sheet_titles = {
            USERS_COLLECTION: settings.users_sheet_name,
            EXPENSES_COLLECTION: settings.expenses_sheet_name,
            AUDIT_COLLECTION: settings.audit_sheet_name,
        }
        self._collections: dict[str, GoogleSheetsCollection] = {}

    def collection(self, name: str) -> GoogleSheetsCollection:
        if name not in COLLECTION_COLUMNS:
            raise StorageError(f"Unknown collection: {name}")
        if name not in self._collections:
            self._collections[name] = GoogleSheetsCollection(
                client=self._client,
                name=name,
                sheet_title=self._sheet_titles[name],
                columns=COLLECTION_COLUMNS[name],
            )
        return self._collections[name]
