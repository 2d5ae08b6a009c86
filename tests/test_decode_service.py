import logging

import pytest

from pnmview.errors import DimensionMismatchError, TruncatedSampleDataError, UnreadableFileError
from pnmview.models.image_model import BLACK, WHITE, FormatVariant, Header, Sample
from pnmview.services.decode_service import (
    DecodeService,
    padded_bitmap_count,
    pixmap_samples,
    scale_to_255,
    scan_ascii_lines,
)

P3_EXAMPLE = b"P3\n3 2\n255\n255 0 0 0 255 0 0 0 255 255 255 0 0 255 255 255 255 255\n"


def load(path, strict=False):
    return DecodeService(strict=strict).load_image(path)


# ---------- ASCII ----------


def test_ascii_pixmap(pnm_file):
    image = load(pnm_file(P3_EXAMPLE))
    assert image.header == Header(FormatVariant.ASCII_PIXMAP, 3, 2, 255)
    assert image.samples == (
        Sample(255, 0, 0),
        Sample(0, 255, 0),
        Sample(0, 0, 255),
        Sample(255, 255, 0),
        Sample(0, 255, 255),
        Sample(255, 255, 255),
    )
    assert image.size_bytes == len(P3_EXAMPLE)


def test_ascii_pixmap_groups_span_lines(pnm_file):
    image = load(pnm_file(b"P3\n2 1\n255\n1 2\n3 4 5 6\n"))
    assert image.samples == (Sample(1, 2, 3), Sample(4, 5, 6))


def test_ascii_graymap_truncating_scale(pnm_file):
    image = load(pnm_file(b"P2\n3 1\n100\n50 100 0\n"))
    assert image.samples == (Sample(127, 127, 127), Sample(255, 255, 255), Sample(0, 0, 0))


def test_ascii_bitmap_zero_is_black(pnm_file):
    image = load(pnm_file(b"P1\n4 1\n0 1 5 0\n"))
    assert image.samples == (BLACK, WHITE, WHITE, BLACK)


def test_ascii_comment_line_before_max_value(pnm_file):
    image = load(pnm_file(b"P2\n2 1\n# comment\n100\n50 100\n"))
    assert image.header.max_value == 100
    assert image.samples == (Sample(127, 127, 127), Sample(255, 255, 255))


def test_ascii_trailing_comment_is_cut(pnm_file):
    image = load(pnm_file(b"P1\n# made by hand\n3 1\n1 0 # 1 1 1\n1\n"))
    assert image.samples == (WHITE, BLACK, WHITE)


def test_ascii_crlf_lines(pnm_file):
    image = load(pnm_file(b"P2\r\n2 1\r\n100\r\n50 100\r\n"))
    assert image.samples == (Sample(127, 127, 127), Sample(255, 255, 255))


def test_scan_ascii_lines_derives_header():
    header, tokens = scan_ascii_lines(["P2", "# c", "4 2", "15", "1 2 3 4", "5 6 7 8 # x"], FormatVariant.ASCII_GRAYMAP)
    assert header == Header(FormatVariant.ASCII_GRAYMAP, 4, 2, 15)
    assert tokens == [1, 2, 3, 4, 5, 6, 7, 8]


# ---------- Binary ----------


def test_binary_pixmap_bytes_are_not_scaled(pnm_file):
    image = load(pnm_file(b"P6\n2 1\n15\n" + bytes([200, 100, 50, 1, 2, 3])))
    assert image.samples == (Sample(200, 100, 50), Sample(1, 2, 3))


def test_binary_graymap(pnm_file):
    image = load(pnm_file(b"P5\n3 1\n100\n" + bytes([50, 100, 0])))
    assert image.samples == (Sample(127, 127, 127), Sample(255, 255, 255), Sample(0, 0, 0))


def test_binary_graymap_comment_before_max_value(pnm_file):
    image = load(pnm_file(b"P5\n2 1\n# comment\n100\n" + bytes([100, 50])))
    assert image.header.max_value == 100
    assert image.samples == (Sample(255, 255, 255), Sample(127, 127, 127))


def test_binary_bitmap_msb_first(pnm_file):
    image = load(pnm_file(b"P4\n8 1\n" + bytes([0b10000000])))
    assert image.samples == (BLACK,) + (WHITE,) * 7


def test_binary_bitmap_padding_is_kept(pnm_file):
    image = load(pnm_file(b"P4\n3 2\n" + bytes([0b10100000, 0b01000000])))
    assert len(image.samples) == 16
    assert image.samples[:3] == (BLACK, WHITE, BLACK)
    assert image.samples[8:11] == (WHITE, BLACK, WHITE)


def test_binary_bitmap_padding_is_fine_in_strict_mode(pnm_file):
    image = load(pnm_file(b"P4\n3 1\n" + bytes([0b11100000])), strict=True)
    assert image.samples[:3] == (BLACK, BLACK, BLACK)


# ---------- Whole file behaviour ----------


def test_decoding_is_idempotent(pnm_file):
    path = pnm_file(b"P5\n2 2\n255\n" + bytes([0, 64, 128, 255]))
    first = load(path)
    second = load(path)
    assert first.header == second.header
    assert first.samples == second.samples


def test_missing_file(tmp_path):
    with pytest.raises(UnreadableFileError):
        load(tmp_path / "nope.ppm")


def test_directory_is_not_readable(tmp_path):
    with pytest.raises(UnreadableFileError):
        load(tmp_path)


def test_invalid_tag_gives_no_samples(pnm_file):
    image = load(pnm_file(b"XY\n1 1\n1\n\x00"))
    assert image.header.variant is FormatVariant.INVALID
    assert image.samples == ()


def test_incomplete_pixmap_group_is_dropped(pnm_file, caplog):
    with caplog.at_level(logging.WARNING):
        image = load(pnm_file(b"P3\n2 1\n255\n1 2 3 4\n"))
    assert image.samples == (Sample(1, 2, 3),)
    assert "Недостаточно данных" in caplog.text


def test_incomplete_pixmap_group_in_strict_mode(pnm_file):
    with pytest.raises(TruncatedSampleDataError):
        load(pnm_file(b"P3\n2 1\n255\n1 2 3 4\n"), strict=True)


def test_short_binary_data_in_strict_mode(pnm_file):
    with pytest.raises(TruncatedSampleDataError) as info:
        load(pnm_file(b"P5\n2 2\n255\n" + bytes([1, 2, 3])), strict=True)
    assert info.value.expected == 4
    assert info.value.actual == 3


def test_extra_binary_data_in_strict_mode(pnm_file):
    with pytest.raises(DimensionMismatchError):
        load(pnm_file(b"P6\n1 1\n255\n" + bytes(6)), strict=True)


def test_extra_binary_data_is_tolerated(pnm_file):
    image = load(pnm_file(b"P6\n1 1\n255\n" + bytes(6)))
    assert len(image.samples) == 2


def test_single_line_ascii_header(pnm_file, caplog):
    # line based pass reads the data line as dimensions
    path = pnm_file(b"P2 2 1 100\n50 100\n")
    with caplog.at_level(logging.WARNING):
        image = load(path)
    assert image.header == Header(FormatVariant.ASCII_GRAYMAP, 2, 1, 100)
    assert image.samples == ()
    with pytest.raises(DimensionMismatchError):
        load(path, strict=True)


# ---------- Helpers ----------


def test_scale_to_255_with_zero_max_value():
    assert scale_to_255([5, 0], 0) == [0, 0]


def test_scale_to_255_accepts_bytes():
    assert scale_to_255(bytes([50, 100]), 100) == [127, 255]


def test_pixmap_samples_reports_leftover():
    samples, dropped = pixmap_samples([1, 2, 3, 4, 5])
    assert samples == [Sample(1, 2, 3)]
    assert dropped == 2


def test_padded_bitmap_count():
    assert padded_bitmap_count(Header(FormatVariant.BINARY_BITMAP, 3, 2)) == 16
    assert padded_bitmap_count(Header(FormatVariant.BINARY_BITMAP, 8, 2)) == 16
