# phivolcs_api/extract.py
from __future__ import annotations
import logging
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from phivolcs_api.errors import ParseError
from phivolcs_api.records import Record

logger = logging.getLogger(__name__)

TABLE_CLASS = "MsoNormalTable"
MIN_CELLS = 6
DATETIME_SEPARATOR = " - "


def parse_html(raw_html: str) -> BeautifulSoup:
    # html.parser never raises on broken markup; it just builds the best tree it can
    return BeautifulSoup(raw_html, "html.parser")


def find_table(soup: BeautifulSoup) -> Optional[Tag]:
    return soup.find("table", class_=TABLE_CLASS)


def split_datetime(cell: Tag) -> Tuple[str, str]:
    """
    The first column is a link whose text reads "<date> - <time>".
    No link means no date and no time; several links are read as one text.
    """
    links = cell.find_all("a")
    if not links:
        return "", ""
    text = "".join(link.get_text() for link in links)
    parts = text.strip().split(DATETIME_SEPARATOR)
    date = parts[0] if len(parts) > 0 else ""
    time = parts[1] if len(parts) > 1 else ""
    return date, time


def row_to_record(row: Tag) -> Optional[Record]:
    cells = row.find_all("td")
    if len(cells) < MIN_CELLS:
        return None

    date, time = split_datetime(cells[0])
    record = Record.build(
        date=date,
        time=time,
        latitude=cells[1].get_text(),
        longitude=cells[2].get_text(),
        depth=cells[3].get_text(),
        magnitude=cells[4].get_text(),
        location=cells[5].get_text(),
    )
    return record if record.is_complete() else None


def extract_from_soup(soup: BeautifulSoup) -> List[Record]:
    table = find_table(soup)
    if table is None:
        raise ParseError("table not found")

    records: List[Record] = []
    skipped = 0
    for row in table.find_all("tr"):
        record = row_to_record(row)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if not records:
        raise ParseError("no valid records")

    logger.debug("extracted %d records, skipped %d rows", len(records), skipped)
    return records


def extract_records(raw_html: str) -> List[Record]:
    """
    Parse the PHIVOLCS page and return its earthquake rows in page order.

    Raises ParseError("table not found") when the data table is missing and
    ParseError("no valid records") when the table has no usable rows.
    """
    return extract_from_soup(parse_html(raw_html))
