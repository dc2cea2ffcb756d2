"""
Options for the codec and the table export.

All of them are plain frozen dataclasses; the CLI builds them from its flags
and everything else takes them as arguments.
"""
from __future__ import annotations

from dataclasses import dataclass

HEADER_COLUMNS: tuple[str, ...] = (
    "assumptionId",
    "questionId",
    "subquestionId",
    "assumption",
    "question",
    "container",
)

DEPTH_COLUMN_PREFIX = "container_depth"


@dataclass(frozen=True, slots=True)
class CodecOptions:
    base64: bool = True
    deflate: bool = True
    url_encode: bool = True


@dataclass(frozen=True, slots=True)
class ExportConfig:
    assumption_prefix: str = "A"
    question_prefix: str = "Q"
    container_separator: str = " / "
    auto_id_prefix: str = "auto_"

    def auto_id(self, n: int) -> str:
        return f"{self.auto_id_prefix}{n}"


DEFAULT_CODEC_OPTIONS = CodecOptions()
DEFAULT_EXPORT_CONFIG = ExportConfig()
