import pytest

from tiledump.render.alpha import premultiply, unpremultiply


def test_half_alpha_gray_becomes_white() -> None:
    buffer = bytearray([128, 128, 128, 128])

    unpremultiply(buffer)

    assert list(buffer) == [255, 255, 255, 128]


def test_transparent_pixels_are_zeroed() -> None:
    buffer = bytearray([10, 20, 30, 0])

    unpremultiply(buffer)

    assert list(buffer) == [0, 0, 0, 0]


def test_channels_divide_by_normalized_alpha_and_truncate() -> None:
    pixels = [
        (100, 50, 25, 200),
        (1, 2, 3, 7),
        (17, 0, 255, 255),
        (90, 60, 30, 99),
    ]
    buffer = bytearray(value for pixel in pixels for value in pixel)

    unpremultiply(buffer)

    for index, (r, g, b, a) in enumerate(pixels):
        norm = a / 255
        expected = [int(r / norm), int(g / norm), int(b / norm), a]
        assert list(buffer[index * 4 : index * 4 + 4]) == expected


def test_mixed_raster_keeps_alpha_and_length() -> None:
    buffer = bytearray([10, 20, 30, 0, 64, 32, 16, 128, 200, 100, 50, 255] * 50)
    alpha_before = bytes(buffer[3::4])
    length_before = len(buffer)

    result = unpremultiply(buffer)

    assert result is buffer
    assert len(buffer) == length_before
    assert bytes(buffer[3::4]) == alpha_before
    for offset in range(0, len(buffer), 4):
        if buffer[offset + 3] == 0:
            assert buffer[offset : offset + 3] == bytearray(3)


def test_opaque_pixels_are_unchanged() -> None:
    buffer = bytearray([12, 34, 56, 255, 0, 255, 1, 255])

    unpremultiply(buffer)

    assert list(buffer) == [12, 34, 56, 255, 0, 255, 1, 255]


def test_malformed_input_saturates() -> None:
    buffer = bytearray([200, 41, 0, 100])

    unpremultiply(buffer)

    assert list(buffer) == [255, 104, 0, 100]


def test_premultiply_then_unpremultiply_round_trips() -> None:
    for alpha in range(1, 256):
        for value in range(0, 256, 15):
            buffer = bytearray([value, value // 2, 255 - value, alpha])
            original = list(buffer)

            unpremultiply(premultiply(buffer))

            tolerance = 255 / (2 * alpha) + 1
            for channel in range(3):
                assert abs(buffer[channel] - original[channel]) <= tolerance
            assert buffer[3] == alpha


def test_premultiply_scales_by_alpha() -> None:
    buffer = bytearray([255, 255, 255, 128, 200, 100, 50, 0])

    premultiply(buffer)

    assert list(buffer) == [128, 128, 128, 128, 0, 0, 0, 0]


def test_empty_buffer_is_accepted() -> None:
    buffer = bytearray()

    assert unpremultiply(buffer) == bytearray()


def test_partial_pixel_is_rejected() -> None:
    with pytest.raises(ValueError):
        unpremultiply(bytearray(6))


def test_read_only_buffer_is_rejected() -> None:
    with pytest.raises(TypeError):
        unpremultiply(bytes([128, 128, 128, 128]))  # type: ignore[arg-type]


def test_memoryview_is_corrected_in_place() -> None:
    backing = bytearray([0, 0, 0, 0, 64, 64, 64, 128])

    unpremultiply(memoryview(backing)[4:])

    assert list(backing) == [0, 0, 0, 0, 127, 127, 127, 128]
