from io import BytesIO
from pathlib import PurePosixPath
from typing import Optional
import xml.etree.ElementTree as ET
from PIL import Image

from memoria.exceptions import InvalidImageException

SVG_CONTENT_TYPE = "image/svg+xml"

def validate_image_bytes(file_bytes: bytes, content_type: Optional[str]) -> str:
    """
        Validate that the uploaded file is a real image and return its MIME type.

        Raster formats are detected by Pillow from the bytes; the declared
        content type only selects the SVG path.
    """
    if content_type == SVG_CONTENT_TYPE:
        try:
            root = ET.fromstring(file_bytes.decode("utf-8"))
        except (ET.ParseError, UnicodeDecodeError):
            raise InvalidImageException("Invalid SVG file")
        # Check if root tag is svg (with or without namespace)
        tag_name = root.tag.split("}")[-1].lower()
        if tag_name != "svg":
            raise InvalidImageException("Invalid SVG root element")
        return SVG_CONTENT_TYPE

    try:
        img = Image.open(BytesIO(file_bytes))
        img.load()
    except Exception:
        raise InvalidImageException("Invalid image file")
    mime_type = Image.MIME.get(img.format or "")
    if not mime_type:
        raise InvalidImageException(f"Unsupported image type: {img.format}")
    return mime_type

def make_object_key(filename: str, millis: int) -> str:
    """Builds the `<epoch-millis>-<filename>` key; any directory part of the name is dropped."""
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    if name in ("", ".", ".."):
        raise InvalidImageException("Missing file name")
    return f"{millis}-{name}"
