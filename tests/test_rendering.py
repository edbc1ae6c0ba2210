import logging
from dataclasses import replace

import numpy as np
import pytest

from noiseloop.images import FrameWriteError, load_image, load_source_images
from noiseloop.rendering import FrameRenderer, frame_filename

LOGGER = logging.getLogger("noiseloop-tests")


def build_renderer(config) -> FrameRenderer:
    return FrameRenderer(config, load_source_images(config), logger=LOGGER)


def test_frame_filenames_are_zero_padded():
    assert frame_filename(0) == "00000.png"
    assert frame_filename(149) == "00149.png"


def test_render_all_writes_every_frame_in_order(small_config):
    renderer = build_renderer(small_config)

    summary = renderer.render_all()

    names = sorted(path.name for path in small_config.output_dir.iterdir())
    assert names == ["00000.png", "00001.png", "00002.png"]
    assert summary.frame_count == 3
    assert [frame.index for frame in summary.frames] == [0, 1, 2]


def test_resized_output_matches_border_dimensions(small_config):
    renderer = build_renderer(small_config)

    summary = renderer.render_all()

    assert (summary.width, summary.height) == (6, 4)
    for frame in summary.frames:
        assert load_image(frame.path).shape == (4, 6, 4)


def test_output_keeps_gradient_dimensions_without_resize(small_config):
    config = replace(small_config, resize_output=False, apply_border=False)
    renderer = build_renderer(config)

    canvas = renderer.render_frame(0)

    assert canvas.shape == (8, 12, 4)
    assert renderer.output_size == (12, 8)


def test_rendering_is_deterministic(small_config):
    renderer = build_renderer(small_config)

    assert np.array_equal(renderer.render_frame(1), renderer.render_frame(1))


def test_written_frame_matches_rendered_canvas(small_config):
    renderer = build_renderer(small_config)

    frame = renderer.write(2)

    assert np.array_equal(load_image(frame.path), renderer.render_frame(2))


def test_text_overlay_is_visible_in_output(small_config):
    config = replace(small_config, resize_output=False)
    canvas = build_renderer(config).render_frame(0)

    assert np.all(canvas[2:4, 2:6] == 255)


def test_border_mask_clears_margin_and_overlays_border(small_config):
    config = replace(small_config, apply_border=True)
    canvas = build_renderer(config).render_frame(0)

    assert canvas.shape == (4, 6, 4)
    assert np.all(canvas[:, 0] == 0)
    assert np.all(canvas[:, 1:5] == np.array([40, 40, 40, 255], dtype=np.uint8))
    assert np.all(np.abs(canvas[:, 5, 3].astype(int) - 128) <= 1)


def test_parallel_rendering_matches_sequential(small_config, tmp_path):
    parallel_dir = tmp_path / "parallel"
    parallel_dir.mkdir()
    sequential = build_renderer(small_config).render_all()
    parallel = build_renderer(replace(small_config, workers=3, output_dir=parallel_dir)).render_all()

    assert [frame.index for frame in parallel.frames] == [0, 1, 2]
    for left, right in zip(sequential.frames, parallel.frames):
        assert left.path.read_bytes() == right.path.read_bytes()


def test_render_subset_of_frames(small_config):
    summary = build_renderer(small_config).render_all([2, 0, 2])

    assert [frame.index for frame in summary.frames] == [0, 2]
    assert sorted(path.name for path in small_config.output_dir.iterdir()) == [
        "00000.png",
        "00002.png",
    ]


@pytest.mark.parametrize("workers", [1, 2])
def test_missing_output_directory_is_fatal(small_config, tmp_path, workers):
    config = replace(small_config, output_dir=tmp_path / "nowhere", workers=workers)

    with pytest.raises(FrameWriteError):
        build_renderer(config).render_all()
