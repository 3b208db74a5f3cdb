import numpy as np
import pytest

from particlefall.core import FrameRenderer, Quad, Sprite, generate_snowflake


def solid(color, width=4, height=4):
    return Sprite.from_array(np.full((height, width, 4), color, dtype=np.uint8))


def test_empty_frame_is_background():
    renderer = FrameRenderer(generate_snowflake(), background=(1, 2, 3, 255))
    frame = renderer.render([], (8, 5))

    assert frame.shape == (5, 8, 4)
    assert frame.dtype == np.uint8
    assert (frame == (1, 2, 3, 255)).all()


def test_unknown_blend_mode():
    with pytest.raises(ValueError, match="blend mode"):
        FrameRenderer(generate_snowflake(), blend_mode="multiply")


def test_unscaled_quad_reproduces_sprite():
    sprite = generate_snowflake()
    frame = FrameRenderer(sprite).render([(Quad(0, 0, 19, 21), 1.0)], (19, 21))
    assert np.array_equal(frame, sprite.pixels)


def test_quad_scales_sprite():
    frame = FrameRenderer(solid((255, 255, 255, 255))).render([(Quad(2, 1, 8, 4), 1.0)], (10, 6))

    painted = frame[:, :, 3] > 0
    assert painted.sum() == 6 * 3
    assert painted[1:4, 2:8].all()


def test_flip_flags_mirror_sprite():
    pixels = np.array([[[255, 0, 0], [0, 0, 255]]], dtype=np.uint8)
    renderer = FrameRenderer(Sprite.from_array(pixels))

    plain = renderer.render([(Quad(0, 0, 2, 1), 1.0)], (2, 1))
    flipped = renderer.render([(Quad(0, 0, 2, 1, flip_x=True), 1.0)], (2, 1))

    assert tuple(plain[0, 0, :3]) == (255, 0, 0)
    assert tuple(flipped[0, 0, :3]) == (0, 0, 255)
    assert tuple(flipped[0, 1, :3]) == (255, 0, 0)


def test_vertical_flip():
    pixels = np.array([[[255, 0, 0]], [[0, 255, 0]]], dtype=np.uint8)
    renderer = FrameRenderer(Sprite.from_array(pixels))

    flipped = renderer.render([(Quad(0, 0, 1, 2, flip_y=True), 1.0)], (1, 2))

    assert tuple(flipped[0, 0, :3]) == (0, 255, 0)


def test_collapsed_quads_draw_nothing():
    renderer = FrameRenderer(solid((255, 255, 255, 255)))
    quads = [(Quad(5, 5, 5, 5), 1.0), (Quad(0, 3, 6, 3.2), 1.0), (Quad(10, 10, 10, 10), 1.0)]
    frame = renderer.render(quads, (10, 10))
    assert not frame.any()


def test_partially_outside_canvas_is_clipped():
    renderer = FrameRenderer(solid((255, 255, 255, 255), 10, 10))
    frame = renderer.render([(Quad(-5, -5, 5, 5), 1.0)], (10, 10))

    assert (frame[:5, :5] == 255).all()
    assert not frame[5:].any()
    assert not frame[:, 5:].any()


def test_fully_outside_canvas():
    renderer = FrameRenderer(solid((255, 255, 255, 255)))
    frame = renderer.render([(Quad(20, 20, 30, 30), 1.0)], (10, 10))
    assert not frame.any()


def test_additive_overlap_brightens_and_saturates():
    renderer = FrameRenderer(solid((100, 100, 100, 255)))
    quad = (Quad(0, 0, 4, 4), 1.0)

    assert renderer.render([quad, quad], (4, 4))[0, 0, 0] == 200
    assert renderer.render([quad, quad, quad], (4, 4))[0, 0, 0] == 255


def test_additive_weights_by_source_alpha():
    renderer = FrameRenderer(solid((200, 200, 200, 0)))
    frame = renderer.render([(Quad(0, 0, 4, 4), 1.0)], (4, 4))
    assert not frame.any()


class TestAlphaBlend:

    def test_opaque_source_replaces(self):
        renderer = FrameRenderer(solid((10, 20, 30, 255)), blend_mode="alpha",
                                 background=(200, 200, 200, 255))
        frame = renderer.render([(Quad(0, 0, 4, 4), 1.0)], (4, 4))
        assert tuple(frame[0, 0]) == (10, 20, 30, 255)

    def test_translucent_over_opaque(self):
        renderer = FrameRenderer(solid((255, 0, 0, 128)), blend_mode="alpha",
                                 background=(0, 0, 0, 255))
        frame = renderer.render([(Quad(0, 0, 4, 4), 1.0)], (4, 4))

        assert int(frame[0, 0, 0]) == pytest.approx(128, abs=1)
        assert int(frame[0, 0, 3]) == pytest.approx(255, abs=1)

    def test_translucent_over_transparent_keeps_color(self):
        renderer = FrameRenderer(solid((255, 0, 0, 128)), blend_mode="alpha")
        frame = renderer.render([(Quad(0, 0, 4, 4), 1.0)], (4, 4))

        assert int(frame[0, 0, 0]) == pytest.approx(255, abs=1)
        assert int(frame[0, 0, 3]) == pytest.approx(128, abs=1)


def test_set_sprite_clears_scaled_cache():
    renderer = FrameRenderer(solid((255, 0, 0, 255)))
    renderer.render([(Quad(0, 0, 4, 4), 1.0)], (4, 4))

    renderer.set_sprite(solid((0, 255, 0, 255)))
    frame = renderer.render([(Quad(0, 0, 4, 4), 1.0)], (4, 4))

    assert tuple(frame[0, 0, :3]) == (0, 255, 0)
