import io
import base64
import logging
from dataclasses import dataclass

from PIL import Image

logger = logging.getLogger(__name__)

ACCEPTED_TYPES = ['jpg', 'jpeg', 'png', 'webp', 'bmp']


@dataclass(frozen=True)
class EncodedImage:
    """An uploaded photo kept as MIME type plus base64 text.

    The same value drives the inline preview and the request payload.
    """
    mime_type: str
    payload: str

    @property
    def data_uri(self):
        return f"data:{self.mime_type};base64,{self.payload}"

    def to_bytes(self):
        return base64.b64decode(self.payload)


def strip_mime_prefix(data_uri):
    """Keep only the base64 part of a data URI"""
    return data_uri.split(",", 1)[1]


def _sniff_mime_type(data):
    # Raises for anything Pillow cannot identify
    with Image.open(io.BytesIO(data)) as image:
        image_format = image.format
        image.verify()
    return Image.MIME.get(image_format)


def encode_image(data, declared_type=None):
    """Encode raw image bytes; returns None for empty or unreadable selections."""
    if not data:
        logger.info("Ignoring empty image selection")
        return None

    try:
        mime_type = _sniff_mime_type(data)
    except (OSError, SyntaxError, ValueError) as e:
        logger.info("Ignoring unreadable image selection: %s", e)
        return None

    mime_type = mime_type or declared_type or "image/jpeg"
    return EncodedImage(
        mime_type=mime_type,
        payload=base64.b64encode(data).decode("ascii"),
    )


def read_upload(uploaded_file):
    """Encode a Streamlit UploadedFile (or any file-like with getvalue/read)"""
    if uploaded_file is None:
        return None

    if hasattr(uploaded_file, "getvalue"):
        data = uploaded_file.getvalue()
    else:
        data = uploaded_file.read()

    return encode_image(data, getattr(uploaded_file, "type", None))
