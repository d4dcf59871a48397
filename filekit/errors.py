"""
Error taxonomy for document conversion.

Every failure a caller can see is a FileKitError subclass. Strategies wrap
collaborator exceptions once, with a stage prefix; the converter wraps a failed
strategy once more in ExtractionFailed. The archive prober is the only place
that swallows errors.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional


WORD_STAGE = "Failed to extract Word document text"
EXCEL_STAGE = "Failed to extract Excel text"
PDF_STAGE = "Failed to extract PDF text"
PPTX_STAGE = "Failed to extract PPTX text"
FETCH_STAGE = "Failed to fetch URL"


class FileKitError(Exception):
    """Base exception for filekit."""

    error_code: str = "FILEKIT_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(FileKitError):
    """Envelope is not a file-like variant, or its payload cannot be decoded."""

    error_code = "INVALID_INPUT"


class UnsupportedType(FileKitError):
    """Detected extension is outside the environment's supported set."""

    error_code = "UNSUPPORTED_TYPE"

    def __init__(self, extension: str, supported: tuple):
        self.extension = extension
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported file type: {extension}. Supported types are: {', '.join(self.supported)}"
        )


class UnsupportedFormat(FileKitError):
    """Type is recognized but there is no conversion path for it here."""

    error_code = "UNSUPPORTED_FORMAT"


class LegacyFormatUnsupported(UnsupportedFormat):
    """Legacy OLE container confirmed; not convertible."""

    error_code = "LEGACY_FORMAT_UNSUPPORTED"


class EmptyResult(FileKitError):
    """Extraction finished but produced no text."""

    error_code = "EMPTY_RESULT"


class CollaboratorFailure(FileKitError):
    """A delegated parser, archive reader or fetch raised."""

    error_code = "COLLABORATOR_FAILURE"

    def __init__(self, stage: str, cause: object):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage}: {cause}")


class FetchFailed(CollaboratorFailure):
    error_code = "FETCH_FAILED"

    def __init__(self, cause: object):
        super().__init__(FETCH_STAGE, cause)


class ExtractionFailed(FileKitError):
    """Outer wrapper for any strategy-level failure."""

    error_code = "EXTRACTION_FAILED"

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Failed to convert document: {cause}")


@contextmanager
def collaborator_stage(stage: str) -> Iterator[None]:
    """
    Re-raise anything a collaborator throws as CollaboratorFailure(stage).
    FileKitError instances pass through untouched so nothing is wrapped twice.
    """
    try:
        yield
    except FileKitError:
        raise
    except Exception as e:
        raise CollaboratorFailure(stage, e) from e


def staged(stage: str, detail: str) -> str:
    return f"{stage}: {detail}"


def root_cause(err: BaseException) -> Optional[BaseException]:
    """Follow .cause links down to the innermost filekit error."""
    cur: Optional[BaseException] = err
    while isinstance(getattr(cur, "cause", None), FileKitError):
        cur = cur.cause  # type: ignore[union-attr]
    return cur
