# =============================================================================
# seo_core/services/import_service.py
# Bulk video import from CSV or JSON
# =============================================================================

from __future__ import annotations
import io
import json
import re
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Union

import pandas as pd

from .base_service import BaseService, WRITERS
from .video_service import parse_tags
from seo_core.errors import DataValidationError, DuplicateRecordError, RecordStoreError

# Accepted spellings per target column, checked in order
FIELD_ALIASES: Dict[str, tuple] = {
    "video_id": ("video_id", "Video ID", "id"),
    "old_title": ("old_title", "Old Title", "title", "Title", "original_title"),
    "title_v1": ("title_v1", "Title Variant 1", "title_variant_1", "title 1", "title_1"),
    "title_v2": ("title_v2", "Title Variant 2", "title_variant_2", "title 2", "title_2"),
    "title_v3": ("title_v3", "Title Variant 3", "title_variant_3", "title 3", "title_3"),
    "description": ("description", "Description", "desc"),
    "tags": ("tags", "Tags", "keywords", "Keywords"),
}


def normalize_header(header: str) -> str:
    return re.sub(r"\s+", "_", header.strip().strip('"').lower()).replace("'", "")


@dataclass
class ImportRowError:
    row: int
    reason: str


@dataclass
class BulkImportResult:
    total: int = 0
    created: int = 0
    skipped: int = 0
    errors: List[ImportRowError] = field(default_factory=list)
    message: str = ""


def _pick(row: Dict[str, Any], aliases: tuple) -> Any:
    for alias in aliases:
        value = row.get(alias)
        if value not in (None, "") and not (isinstance(value, float) and pd.isna(value)):
            return value
    return None


class ImportService(BaseService):
    """
    Usage:
        result = ImportService(stores).import_videos(channel_id, text, "csv", user_id)
        st.info(result.message)
    """

    def parse(self, content: Union[str, bytes], fmt: str) -> List[Dict[str, Any]]:
        """
        Turn an upload into row dicts. Bytes are read as UTF-8 (BOM allowed).

        Raises:
            DataValidationError: For unknown formats or unparseable content
        """
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise DataValidationError("Invalid file encoding", field="content") from e

        if fmt == "json":
            try:
                parsed = json.loads(content)
            except ValueError as e:
                raise DataValidationError(f"Invalid JSON: {e}", field="content") from e
            rows = parsed if isinstance(parsed, list) else None
            if isinstance(parsed, dict):
                rows = parsed.get("results", [])
            if not isinstance(rows, list):
                raise DataValidationError("Invalid Data Format", field="content")
            return [r for r in rows if isinstance(r, dict)]

        if fmt == "csv":
            try:
                frame = pd.read_csv(io.StringIO(content), dtype=str, keep_default_na=False, skipinitialspace=True)
            except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
                raise DataValidationError(f"Invalid CSV: {e}", field="content") from e
            rows = []
            for record in frame.to_dict(orient="records"):
                row = {}
                for header, value in record.items():
                    value = value.strip() if isinstance(value, str) else value
                    row[header.strip()] = value
                    row[normalize_header(header)] = value
                rows.append(row)
            return rows

        raise DataValidationError(f"Unsupported import format: {fmt}", field="format")

    def import_videos(self, channel_id: str, content: Union[str, bytes], fmt: str, user_id: str) -> BulkImportResult:
        """
        Insert every valid row as a video of `channel_id`.

        Rows without a video id or title, and duplicates, are skipped with a reason.
        """
        self.require_role(user_id, WRITERS, "import videos", relax_in_dev=True)

        try:
            rows = self.parse(content, fmt)
        except DataValidationError as e:
            self.logger.error(f"Bulk import parse failed: {e.message}")
            return BulkImportResult(
                errors=[ImportRowError(0, e.message)],
                message=f"Import failed: {e.message}",
            )

        if not rows:
            return BulkImportResult(message="No data rows found")

        result = BulkImportResult(total=len(rows))
        with self.log_operation(f"Importing {len(rows)} videos into {channel_id}"):
            for index, row in enumerate(rows, start=1):
                video_id = _pick(row, FIELD_ALIASES["video_id"])
                old_title = _pick(row, FIELD_ALIASES["old_title"])
                if not video_id or not old_title:
                    result.skipped += 1
                    result.errors.append(ImportRowError(index, "Missing Video ID or Old Title"))
                    continue

                tags = _pick(row, FIELD_ALIASES["tags"])
                try:
                    self.stores.videos.insert({
                        "channel_id": channel_id,
                        "video_id": str(video_id).strip(),
                        "old_title": str(old_title).strip(),
                        "title_v1": _pick(row, FIELD_ALIASES["title_v1"]),
                        "title_v2": _pick(row, FIELD_ALIASES["title_v2"]),
                        "title_v3": _pick(row, FIELD_ALIASES["title_v3"]),
                        "description": _pick(row, FIELD_ALIASES["description"]),
                        "tags": parse_tags(tags) if isinstance(tags, (str, list)) else None,
                        "is_seo_done": False,
                    })
                except DuplicateRecordError:
                    result.skipped += 1
                    result.errors.append(ImportRowError(index, "Duplicate video_id"))
                    continue
                except RecordStoreError as e:
                    result.skipped += 1
                    result.errors.append(ImportRowError(index, e.message))
                    continue
                result.created += 1

        result.message = f"Successfully imported {result.created} videos. Skipped {result.skipped}."
        return result
