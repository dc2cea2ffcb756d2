from __future__ import annotations


class DrawioQaError(Exception):
    """Base class for every failure the export reports."""


class CodecStageError(DrawioQaError):
    def __init__(self, stage: str, cause: BaseException | str) -> None:
        super().__init__(f"{stage} failed: {cause}")
        self.stage = stage
        self.cause = cause


class DecodeFailedError(DrawioQaError):
    pass


class DocumentParseError(DrawioQaError):
    pass


class DuplicateIdError(DrawioQaError):
    def __init__(self, prefix: str, prefix_id: str) -> None:
        super().__init__(f'Found duplicate node with prefix "{prefix}({prefix_id})"')
        self.prefix = prefix
        self.prefix_id = prefix_id


class UnknownFormatError(DrawioQaError):
    def __init__(self, fmt: str, known: list[str]) -> None:
        super().__init__(f'Unknown export type "{fmt}". Available: {" | ".join(known)}')
        self.fmt = fmt
        self.known = known
