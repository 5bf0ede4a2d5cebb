import pytest

from memoria.exceptions import InvalidImageException
from memoria.gallery.validation import make_object_key, validate_image_bytes
from png_samples import make_image_bytes, make_png_bytes


# ------------------------------
# validate_image_bytes
# ------------------------------

def test_validate_png_bytes_ok():
    assert validate_image_bytes(make_png_bytes(), "image/png") == "image/png"


def test_validate_reports_detected_type():
    # A PNG labelled as JPEG is stored with its real type
    assert validate_image_bytes(make_png_bytes(), "image/jpeg") == "image/png"


def test_validate_invalid_bytes_raises():
    with pytest.raises(InvalidImageException):
        validate_image_bytes(b"notanimage", "image/png")


def test_validate_svg_ok():
    svg_data = b'<svg xmlns="http://www.w3.org/2000/svg"></svg>'
    assert validate_image_bytes(svg_data, "image/svg+xml") == "image/svg+xml"


def test_validate_svg_invalid_root():
    with pytest.raises(InvalidImageException):
        validate_image_bytes(b'<not_svg></not_svg>', "image/svg+xml")


def test_validate_svg_malformed():
    with pytest.raises(InvalidImageException):
        validate_image_bytes(b'<svg', "image/svg+xml")


@pytest.mark.parametrize("content_type", ["application/pdf", None])
def test_validate_unsupported_type(content_type):
    with pytest.raises(InvalidImageException):
        validate_image_bytes(b"fake", content_type)


# ------------------------------
# make_object_key
# ------------------------------

def test_make_object_key():
    assert make_object_key("cat.png", 1000) == "1000-cat.png"


@pytest.mark.parametrize("filename", ["dir/cat.png", "C:\\photos\\cat.png", "../cat.png"])
def test_make_object_key_drops_directories(filename):
    assert make_object_key(filename, 1000) == "1000-cat.png"


@pytest.mark.parametrize("filename", ["", None, ".."])
def test_make_object_key_requires_name(filename):
    with pytest.raises(InvalidImageException):
        make_object_key(filename, 1000)


@pytest.mark.parametrize("fmt, mime", [("BMP", "image/bmp"), ("TIFF", "image/tiff"), ("GIF", "image/gif")])
def test_validate_any_pillow_format(fmt, mime):
    assert validate_image_bytes(make_image_bytes(fmt), mime) == mime


@pytest.mark.parametrize("content_type", ["application/octet-stream", None, ""])
def test_validate_ignores_declared_type(content_type):
    assert validate_image_bytes(make_png_bytes(), content_type) == "image/png"
