"""
Fetching and decoding of the tournament spreadsheet.

The spreadsheet is published as an xlsx export (Google Sheets "Publish to
web"). The last good download is cached next to the settings so the view
still works while the sheet is unreachable.
"""
import datetime
import io
import logging
import os

import openpyxl
import requests
from filelock import FileLock

from tournament.models import Workbook

logger = logging.getLogger(__name__)

CACHE_FILENAME = 'last_workbook.xlsx'
DEFAULT_TIMEOUT = 15


class WorkbookUnavailable(Exception):
    """The spreadsheet could not be fetched or decoded."""


def cell_to_text(value) -> str:
    """Render a cell value the way the spreadsheet displays it."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime.datetime):
        if value.time() == datetime.time(0, 0):
            return value.date().isoformat()
        return value.strftime('%Y-%m-%d %H:%M')
    if isinstance(value, datetime.time):
        return value.strftime('%H:%M')
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


def decode_workbook(data: bytes) -> Workbook:
    """Decode xlsx bytes into sheet grids of display strings."""
    try:
        wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except Exception as e:
        raise WorkbookUnavailable(f'Could not read spreadsheet: {e}') from e

    # read-only sheets are parsed lazily, so malformed sheet XML surfaces here
    try:
        sheets = {}
        for sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
            sheets[sheet_name] = [
                [cell_to_text(value) for value in row]
                for row in ws.iter_rows(values_only=True)
            ]
    except Exception as e:
        raise WorkbookUnavailable(f'Could not read spreadsheet: {e}') from e
    finally:
        wb.close()
    logger.debug(f'Decoded sheets: {list(sheets)}')
    return Workbook(sheets)


def fetch_workbook_bytes(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Download the xlsx export."""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise WorkbookUnavailable(f'Spreadsheet not reachable: {e}') from e
    if response.status_code != 200:
        raise WorkbookUnavailable(f'Spreadsheet not accessible: {response.status_code}')
    return response.content


def _cache_lock(cache_path: str) -> FileLock:
    return FileLock(cache_path + '.lock', timeout=10)


def save_cached_workbook(cache_path: str, data: bytes):
    os.makedirs(os.path.dirname(cache_path) or '.', exist_ok=True)
    with _cache_lock(cache_path):
        with open(cache_path, 'wb') as f:
            f.write(data)


def load_cached_workbook(cache_path: str):
    """Return the cached xlsx bytes, or None if nothing has been cached yet."""
    if not os.path.exists(cache_path):
        return None
    with _cache_lock(cache_path):
        with open(cache_path, 'rb') as f:
            return f.read()


def load_local_workbook(path: str) -> Workbook:
    """Decode an xlsx file from disk."""
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise WorkbookUnavailable(f'Could not open {path}: {e}') from e
    return decode_workbook(data)


def load_remote_workbook(url: str, cache_path: str, timeout: float = DEFAULT_TIMEOUT):
    """
    Fetch and decode the spreadsheet, falling back to the cached copy.

    Returns (workbook, source) where source describes where the data came
    from: {'name', 'source', 'modified'}. Raises WorkbookUnavailable when
    neither the download nor the cache can be used.
    """
    try:
        data = fetch_workbook_bytes(url, timeout)
        workbook = decode_workbook(data)
    except WorkbookUnavailable as e:
        cached = load_cached_workbook(cache_path)
        if cached is None:
            raise
        logger.warning(f'{e}; using cached copy {cache_path}')
        modified = datetime.datetime.fromtimestamp(os.path.getmtime(cache_path))
        return decode_workbook(cached), {
            'name': os.path.basename(cache_path),
            'source': 'cache',
            'modified': modified.strftime('%Y-%m-%d %H:%M'),
            'error': str(e),
        }

    save_cached_workbook(cache_path, data)
    return workbook, {
        'name': 'Google Sheets',
        'source': 'cloud',
        'modified': datetime.datetime.now().strftime('%Y-%m-%d %H:%M'),
    }
