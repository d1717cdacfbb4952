"""Spreadsheet format detection for uploaded workbooks.

Detects the workbook format from magic bytes (file content signatures) and
the file extension. Only Office Open XML workbooks can be decoded.
"""

from pathlib import Path

import magic

from excel_comparer.models import FormatInfo
from excel_comparer.utils.exceptions import UnsupportedFormatError
from excel_comparer.utils.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "FormatDetector",
    "UnsupportedFormatError",
    "EXTENSION_TO_MIME",
    "SUPPORTED_MIME_TYPES",
]

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLSM_MIME = "application/vnd.ms-excel.sheet.macroEnabled.12"

EXTENSION_TO_MIME: dict[str, str] = {
    ".xlsx": XLSX_MIME,
    ".xlsm": XLSM_MIME,
}

MIME_TO_EXTENSION: dict[str, str] = {
    XLSX_MIME: ".xlsx",
    XLSM_MIME: ".xlsm",
}

SUPPORTED_MIME_TYPES: set[str] = set(MIME_TO_EXTENSION)

# Containers libmagic may report for OOXML files; the extension decides.
ZIP_CONTAINER_TYPES = {
    "application/zip",
    "application/x-zip-compressed",
    "application/octet-stream",
}


class FormatDetector:
    """Detects whether an upload is a supported workbook.

    Magic-byte detection wins when it recognizes a supported type. A generic
    ZIP container falls back to the extension, since every OOXML workbook is
    a ZIP archive.
    """

    def __init__(self) -> None:
        self._magic = magic.Magic(mime=True)

    def detect_from_path(self, file_path: str | Path) -> FormatInfo:
        """Detect format from a file path.

        Raises:
            UnsupportedFormatError: If the format is not supported.
            FileNotFoundError: If the file does not exist.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        return self.detect_from_content(path.read_bytes(), filename=path.name)

    def detect_from_content(
        self,
        content: bytes,
        filename: str | None = None,
    ) -> FormatInfo:
        """Detect format from file content bytes.

        Args:
            content: File content as bytes.
            filename: Optional filename for extension-based fallback.

        Raises:
            UnsupportedFormatError: If the format is not supported.
        """
        original_extension = None
        if filename:
            ext = Path(filename).suffix.lower()
            original_extension = ext if ext else None

        detected_mime = self._detect_mime_from_content(content)
        mime_from_extension = EXTENSION_TO_MIME.get(original_extension or "")

        if detected_mime in SUPPORTED_MIME_TYPES:
            original_ext_differs = None
            if mime_from_extension and mime_from_extension != detected_mime:
                original_ext_differs = original_extension
                logger.warning(
                    "File extension does not match detected MIME type",
                    extension=original_extension,
                    detected_mime=detected_mime,
                )
            return FormatInfo(
                mime_type=detected_mime,
                extension=MIME_TO_EXTENSION[detected_mime],
                detected_from_content=True,
                original_extension=original_ext_differs,
            )

        if mime_from_extension and (
            detected_mime is None or detected_mime in ZIP_CONTAINER_TYPES
        ):
            return FormatInfo(
                mime_type=mime_from_extension,
                extension=MIME_TO_EXTENSION[mime_from_extension],
                detected_from_content=False,
            )

        if detected_mime:
            raise UnsupportedFormatError(
                f"Unsupported workbook format: {detected_mime}",
                detected_mime=detected_mime,
                file_path=filename,
            )
        raise UnsupportedFormatError(
            "Unable to detect workbook format. "
            f"Supported extensions: {', '.join(self.get_supported_extensions())}",
            file_path=filename,
        )

    def _detect_mime_from_content(self, content: bytes) -> str | None:
        if not content:
            return None

        try:
            return str(self._magic.from_buffer(content))
        except Exception as e:
            logger.warning(
                "Magic detection failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    @staticmethod
    def get_supported_extensions() -> list[str]:
        return sorted(EXTENSION_TO_MIME)
