"""Encode an attached file as a base64 data URI for the JSON submission."""

import base64

import structlog

from straqa.models.lead_form import SelectedFile
from straqa.utils.exceptions import EncodingError

logger = structlog.get_logger()


async def encode_file(file: SelectedFile) -> str:
    """Read a file and return it as ``data:<mime>;base64,<payload>``.

    Args:
        file: The selected file.

    Returns:
        Data URI string.

    Raises:
        EncodingError: If the read fails or yields nothing.
    """
    try:
        data = await file.read()
    except OSError as e:
        logger.exception("Error converting file", filename=file.filename, error=str(e))
        raise EncodingError("File reading failed.", filename=file.filename) from e

    if not data:
        raise EncodingError("Failed to convert file to Base64.", filename=file.filename)

    content_type = file.content_type or "application/octet-stream"
    encoded = base64.b64encode(data).decode("ascii")

    logger.debug(
        "Encoded file",
        filename=file.filename,
        content_type=content_type,
        size=len(data),
    )
    return f"data:{content_type};base64,{encoded}"
