import numpy as np
import pytest

from backend.channel_ops import (check_same_size, compose_channels, constant_fill, desaturate, extract_channel, roughness_to_smoothness)
from backend.texture_classes import Channel, DimensionMismatch, ImageBuffer

from conftest import uniform


def test_desaturate_uses_luminosity_weights_and_keeps_alpha(gradient):
    result = desaturate(gradient)

    src = gradient.pixels
    expected = 0.3 * src[..., 0] + 0.59 * src[..., 1] + 0.11 * src[..., 2]
    for index in range(3):
        np.testing.assert_allclose(result.pixels[..., index], expected, atol=1e-5)
    np.testing.assert_array_equal(result.pixels[..., 3], src[..., 3])


def test_desaturate_does_not_touch_the_source(gradient):
    before = gradient.pixels.copy()
    result = desaturate(gradient)

    assert result is not gradient
    np.testing.assert_array_equal(gradient.pixels, before)


def test_extract_green_forces_opaque_alpha():
    result = extract_channel(uniform((0.2, 0.4, 0.6, 0.8)), Channel.GREEN)

    np.testing.assert_allclose(result.pixels, np.broadcast_to([0.4, 0.4, 0.4, 1.0], (4, 4, 4)), atol=1e-6)


@pytest.mark.parametrize("name, expected", [("R", 0.2), ("blue", 0.6), ("a", 0.8)])
def test_extract_channel_accepts_names(name, expected):
    result = extract_channel(uniform((0.2, 0.4, 0.6, 0.8), 2, 2), name)

    assert result.pixel(1, 1) == pytest.approx((expected, expected, expected, 1.0))


def test_extract_channel_rejects_unknown_name():
    with pytest.raises(ValueError):
        extract_channel(uniform((0.2, 0.4, 0.6, 0.8)), "X")


def test_roughness_to_smoothness_reads_red_only():
    result = roughness_to_smoothness(uniform((0.25, 0.9, 0.9, 0.3)))

    assert result.pixel(0, 0) == pytest.approx((0.75, 0.75, 0.75, 1.0))


def test_roughness_to_smoothness_applied_twice_recovers_roughness(gradient):
    smoothness = roughness_to_smoothness(gradient)
    roughness = roughness_to_smoothness(smoothness)

    np.testing.assert_allclose(smoothness.pixels[..., 0], 1.0 - gradient.pixels[..., 0], atol=1e-6)
    np.testing.assert_allclose(roughness.pixels[..., 0], gradient.pixels[..., 0], atol=1e-6)


def test_constant_fill():
    result = constant_fill(0.3, 5, 2)

    assert result.size == (5, 2)
    np.testing.assert_allclose(result.pixels, np.broadcast_to([0.3, 0.3, 0.3, 1.0], (2, 5, 4)), atol=1e-6)


def test_constant_fill_rejects_empty_size():
    with pytest.raises(ValueError):
        constant_fill(0.5, 0, 4)


def test_compose_channels_packs_red_components():
    sources = [uniform((value, 0.9, 0.9, 0.9)) for value in (0.1, 0.2, 0.3, 0.4)]

    result = compose_channels(*sources)

    assert result.size == (4, 4)
    np.testing.assert_allclose(result.pixels, np.broadcast_to([0.1, 0.2, 0.3, 0.4], (4, 4, 4)), atol=1e-6)


def test_compose_channels_rejects_mismatched_sizes():
    sources = [uniform((0.1, 0, 0, 1)), uniform((0.2, 0, 0, 1)), uniform((0.3, 0, 0, 1), 2, 2), uniform((0.4, 0, 0, 1))]

    with pytest.raises(DimensionMismatch, match="4x4, 4x4, 2x2, 4x4"):
        compose_channels(*sources)


def test_check_same_size_accepts_matching():
    check_same_size(uniform((0, 0, 0, 1)), uniform((1, 1, 1, 1)))


def test_image_buffer_is_read_only():
    image = uniform((0.5, 0.5, 0.5, 1.0))

    with pytest.raises(ValueError):
        image.pixels[0, 0, 0] = 1.0


def test_image_buffer_from_pixels_is_row_major():
    image = ImageBuffer.from_pixels(2, 1, [(0.1, 0.2, 0.3, 0.4), (0.5, 0.6, 0.7, 0.8)])

    assert image.size == (2, 1)
    assert image.pixel(1, 0) == pytest.approx((0.5, 0.6, 0.7, 0.8))


def test_image_buffer_rejects_wrong_pixel_count():
    with pytest.raises(ValueError):
        ImageBuffer.from_pixels(2, 2, [(0, 0, 0, 1)] * 3)


def test_constant_fill_rejects_value_outside_range():
    with pytest.raises(ValueError):
        constant_fill(1.5, 2, 2)


def test_desaturate_white_stays_within_range():
    result = desaturate(uniform((1.0, 1.0, 1.0, 1.0)))

    assert float(result.pixels.max()) <= 1.0
    np.testing.assert_allclose(result.pixels, 1.0, atol=1e-6)


def test_image_buffer_rejects_integer_data():
    with pytest.raises(ValueError, match="divide 8bit data by 255"):
        ImageBuffer(np.full((2, 2, 4), 255, dtype=np.uint8))


@pytest.mark.parametrize("bad_value", [1.5, -0.5, np.nan, np.inf])
def test_image_buffer_rejects_values_outside_unit_range(bad_value):
    pixels = np.full((2, 2, 4), 0.5, dtype=np.float32)
    pixels[1, 0, 2] = bad_value

    with pytest.raises(ValueError):
        ImageBuffer(pixels)


def test_image_buffer_accepts_range_endpoints():
    image = ImageBuffer.from_pixels(2, 1, [(0.0, 0.0, 0.0, 0.0), (1.0, 1.0, 1.0, 1.0)])

    assert image.pixel(1, 0) == (1.0, 1.0, 1.0, 1.0)
