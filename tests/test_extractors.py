import pytest

from dpi_check.extractors import (
    extract_jpeg_dpi,
    extract_png_dpi,
    extractors_for,
    run_extractors,
)
from imagebytes import exif_jpeg, jpeg_bytes, png_bytes, segment, tiff_block


# ---------------- JPEG / EXIF ----------------

@pytest.mark.parametrize("little", [True, False])
def test_exif_x_resolution(little):
    data = exif_jpeg([(282, 5, (300, 1))], little=little)
    assert extract_jpeg_dpi(data) == (300.0, 300.0)


def test_exif_first_resolution_tag_wins():
    data = exif_jpeg([(271, 2, 0), (283, 5, (720, 10)), (282, 5, (300, 1))])
    assert extract_jpeg_dpi(data) == (72.0, 72.0)


def test_exif_resolution_with_wrong_type_is_skipped():
    data = exif_jpeg([(282, 3, 300), (283, 5, (150, 1))])
    assert extract_jpeg_dpi(data) == (150.0, 150.0)


def test_exif_without_resolution_tags():
    assert extract_jpeg_dpi(exif_jpeg([(274, 3, 1)])) is None


def test_exif_zero_denominator_is_not_found():
    assert extract_jpeg_dpi(exif_jpeg([(282, 5, (300, 0))])) is None


def test_exif_after_other_segments():
    app1 = b"Exif\x00\x00" + tiff_block([(282, 5, (240, 1))])
    data = jpeg_bytes(app1=app1, before=[(0xDB, b"\x00" * 65), (0xEE, b"Adobe")])
    assert extract_jpeg_dpi(data) == (240.0, 240.0)


def test_app1_without_exif_identifier():
    data = jpeg_bytes(app1=b"http://ns.adobe.com/xap/1.0/\x00<x/>")
    assert extract_jpeg_dpi(data) is None


def test_jpeg_without_app1():
    assert extract_jpeg_dpi(jpeg_bytes()) is None


def test_jpeg_bad_tiff_byte_order():
    data = jpeg_bytes(app1=b"Exif\x00\x00XX" + b"\x00" * 20)
    assert extract_jpeg_dpi(data) is None


def test_truncated_jpeg_is_not_found():
    data = exif_jpeg([(282, 5, (300, 1))])
    for cut in (1, 3, 10, 30, len(data) - 20):
        assert extract_jpeg_dpi(data[:cut]) is None


def test_jpeg_bad_marker_is_not_found():
    assert extract_jpeg_dpi(b"\xff\xd8\x00\x00\x00\x00") is None


def test_not_a_jpeg():
    assert extract_jpeg_dpi(png_bytes()) is None
    assert extract_jpeg_dpi(b"") is None


def test_huge_ifd_offset_is_not_found():
    tiff = b"II" + b"\x2a\x00" + b"\xff\xff\xff\x7f"
    data = jpeg_bytes(app1=b"Exif\x00\x00" + tiff)
    assert extract_jpeg_dpi(data) is None


def test_fill_bytes_between_markers():
    app1 = segment(0xE1, b"Exif\x00\x00" + tiff_block([(282, 5, (96, 1))]))
    data = b"\xff\xd8\xff\xff" + app1 + b"\xff\xd9"
    assert extract_jpeg_dpi(data) == (96.0, 96.0)


# ---------------- PNG pHYs ----------------

def test_png_phys_meters():
    assert extract_png_dpi(png_bytes(phys=(11811, 11811, 1))) == (300.0, 300.0)


def test_png_phys_averages_axes_half_up():
    # 2835 ppm -> 72 dpi, 2874 ppm -> 73 dpi, average 72.5 -> 73
    assert extract_png_dpi(png_bytes(phys=(2835, 2874, 1))) == (73.0, 73.0)


def test_png_phys_unit_unknown():
    assert extract_png_dpi(png_bytes(phys=(1, 1, 0))) is None


def test_png_without_phys():
    assert extract_png_dpi(png_bytes()) is None


def test_png_truncated_phys():
    data = png_bytes(phys=(11811, 11811, 1), trailer=False)
    assert extract_png_dpi(data[:-8]) is None


def test_png_missing_trailer_ends_cleanly():
    assert extract_png_dpi(png_bytes(trailer=False)) is None


def test_png_bad_signature():
    assert extract_png_dpi(b"\x89PNX\r\n\x1a\n" + png_bytes()[8:]) is None
    assert extract_png_dpi(exif_jpeg([(282, 5, (300, 1))])) is None


# ---------------- registry / driver ----------------

def test_extractors_for_declared_format():
    assert extractors_for("image/jpeg") == [extract_jpeg_dpi]
    assert extractors_for("IMAGE/JPG") == [extract_jpeg_dpi]
    assert extractors_for("image/png") == [extract_png_dpi]
    assert extractors_for("image/webp") == []
    assert extractors_for(None) == []


def test_run_extractors_survives_a_failing_extractor():
    def broken(data):
        raise RuntimeError("boom")

    found = run_extractors(png_bytes(phys=(11811, 11811, 1)), [broken, extract_png_dpi])
    assert found == (300.0, "extract_png_dpi")


def test_run_extractors_nothing_found():
    assert run_extractors(png_bytes(), [extract_jpeg_dpi, extract_png_dpi]) is None
