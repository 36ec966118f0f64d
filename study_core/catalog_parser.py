import pandas as pd
from typing import List, Dict, Any
from pathlib import Path

ID_COLUMNS = ["id", "chapter_id", "chapter"]
TITLE_COLUMNS = ["title", "chapter_title", "name"]

class ChapterCatalogParser:
    """
    Parse chapter catalog tables exported by the content subsystem.
    Expected columns: id (or chapter_id), title (or chapter_title); row order is catalog order.
    """

    @staticmethod
    def parse_csv_table(file_path: str) -> List[Dict[str, Any]]:
        """Parse CSV format chapter table"""
        df = pd.read_csv(file_path, dtype=str)
        return ChapterCatalogParser._extract_chapters(df)

    @staticmethod
    def parse_excel_table(file_path: str) -> List[Dict[str, Any]]:
        """Parse Excel format chapter table"""
        df = pd.read_excel(file_path, dtype=str)
        return ChapterCatalogParser._extract_chapters(df)

    @staticmethod
    def parse_json_table(file_path: str) -> List[Dict[str, Any]]:
        """Parse a JSON array of {id, title} records"""
        df = pd.read_json(file_path, orient="records", dtype=False)
        return ChapterCatalogParser._extract_chapters(df)

    @staticmethod
    def _extract_chapters(df: pd.DataFrame) -> List[Dict[str, Any]]:
        # Normalize column names
        df.columns = df.columns.astype(str).str.strip().str.lower()

        id_column = next((c for c in ID_COLUMNS if c in df.columns), None)
        title_column = next((c for c in TITLE_COLUMNS if c in df.columns), None)
        if id_column is None or title_column is None:
            raise ValueError(f"Chapter table needs id and title columns, got: {', '.join(df.columns)}")

        chapters = []
        for _, row in df.iterrows():
            chapter_id = ChapterCatalogParser._clean(row.get(id_column))
            title = ChapterCatalogParser._clean(row.get(title_column))

            # Skip rows with missing essential data
            if chapter_id and title:
                chapters.append({"id": chapter_id, "title": title})

        return chapters

    @staticmethod
    def _clean(value: Any) -> str:
        if value is None or pd.isna(value):
            return ""
        return str(value).strip()

    @staticmethod
    def auto_parse(file_path: str) -> List[Dict[str, Any]]:
        """
        Automatically detect file type and parse accordingly.
        Supports: CSV, Excel (xlsx, xls), JSON
        """
        file_ext = Path(file_path).suffix.lower()

        if file_ext == ".csv":
            return ChapterCatalogParser.parse_csv_table(file_path)
        elif file_ext in [".xlsx", ".xls"]:
            return ChapterCatalogParser.parse_excel_table(file_path)
        elif file_ext == ".json":
            return ChapterCatalogParser.parse_json_table(file_path)
        else:
            raise ValueError(f"Unsupported file format: {file_ext}. Use .csv, .xlsx, or .json")
