import math

import numpy as np
import pytest

from noiseloop.config import NoiseSettings, RenderConfig
from noiseloop.noise import LoopNoise
from noiseloop.sampler import (
    frame_angle,
    loop_point,
    noise_point,
    noise_to_byte,
    noise_to_bytes,
    render_noise,
)


def test_frame_count_rounds_duration_times_fps():
    assert RenderConfig(duration_seconds=5.0, fps=30.0).num_frames == 150
    assert RenderConfig(duration_seconds=1.0, fps=29.97).num_frames == 30


def test_frame_count_rounds_halves_up():
    assert RenderConfig(duration_seconds=0.5, fps=5.0).num_frames == 3
    assert RenderConfig(duration_seconds=0.5, fps=9.0).num_frames == 5


def test_loop_radius_ties_speed_to_duration():
    config = RenderConfig(duration_seconds=5.0, updates_per_second=0.6)
    assert config.loop_radius == pytest.approx(3.0 / math.tau)


def test_loop_closes_after_num_frames():
    config = RenderConfig()
    start = loop_point(config, 0)
    end = loop_point(config, config.num_frames)

    assert frame_angle(config.num_frames, config.num_frames) == pytest.approx(math.tau)
    assert start[0] == pytest.approx(end[0], abs=1e-12)
    assert start[1] == pytest.approx(end[1], abs=1e-12)


def test_loop_points_lie_on_the_circle():
    config = RenderConfig()
    for frame in (0, 17, 75, 149):
        x, y = loop_point(config, frame)
        assert math.hypot(x, y) == pytest.approx(config.loop_radius)


def test_noise_point_scales_pixel_coordinates():
    config = RenderConfig(x_scale=0.5, y_scale=0.25)
    loop_x, loop_y, x, y = noise_point(config, 0, 4, 8)

    assert (loop_x, loop_y) == pytest.approx((config.loop_radius, 0.0))
    assert (x, y) == (2.0, 2.0)


def test_rescale_maps_noise_into_upper_intensity_range():
    config = RenderConfig()
    assert noise_to_byte(config, -1.0) == 127
    assert noise_to_byte(config, 0.0) == 191
    assert noise_to_byte(config, 1.0) == 255


def test_out_of_range_rescale_saturates():
    config = RenderConfig(rescale_scale=1.0, rescale_offset=0.5)
    assert noise_to_byte(config, 5.0) == 255
    assert noise_to_byte(config, -5.0) == 0
    values = noise_to_bytes(config, np.array([-5.0, 0.0, 5.0]))
    assert values.tolist() == [0, 127, 255]


def test_noise_is_deterministic_for_a_seed():
    settings = NoiseSettings(octaves=2)
    first = LoopNoise(settings).sample(0.3, -0.2, 1.5, 0.7)
    second = LoopNoise(settings).sample(0.3, -0.2, 1.5, 0.7)
    other_seed = LoopNoise(NoiseSettings(seed=1, octaves=2)).sample(0.3, -0.2, 1.5, 0.7)

    assert first == second
    assert first != other_seed
    assert -1.0 <= first <= 1.0


def test_plane_sampling_matches_point_sampling():
    noise = LoopNoise(NoiseSettings(octaves=3))
    xs = np.array([0.0, 0.04, 0.08, 0.12])
    ys = np.array([0.0, 0.02, 0.04])

    plane = noise.sample_plane(0.2, 0.4, xs, ys)

    assert plane.shape == (3, 4)
    for row, y in enumerate(ys):
        for column, x in enumerate(xs):
            assert plane[row, column] == pytest.approx(noise.sample(0.2, 0.4, x, y))


def test_render_noise_builds_opaque_grayscale_canvas():
    config = RenderConfig(noise=NoiseSettings(octaves=1))
    noise = LoopNoise(config.noise)

    canvas = render_noise(noise, config, 3, 5, 4)

    assert canvas.shape == (4, 5, 4)
    assert canvas.dtype == np.uint8
    assert np.all(canvas[..., 3] == 255)
    assert np.array_equal(canvas[..., 0], canvas[..., 1])
    assert np.array_equal(canvas[..., 1], canvas[..., 2])
    assert canvas[..., 0].min() >= 127


def test_render_noise_changes_between_frames_but_not_between_runs():
    config = RenderConfig(noise=NoiseSettings(octaves=1))
    noise = LoopNoise(config.noise)

    first = render_noise(noise, config, 0, 6, 6)
    again = render_noise(noise, config, 0, 6, 6)
    later = render_noise(noise, config, 40, 6, 6)

    assert np.array_equal(first, again)
    assert not np.array_equal(first, later)
