import pytest

from pixelbatch.image import Image
from pixelbatch.texture import Texture, TextureFormat


def test_new_texture_is_zeroed():
    texture = Texture.create(2, 3)
    assert texture.get_data() == bytes(texture.width * texture.height * 4)


def test_data_round_trip():
    data = bytes(range(2 * 2 * 4))
    texture = Texture.create(2, 2)
    texture.set_data(data)
    assert texture.get_data() == data


def test_create_with_data():
    data = bytes(range(8))
    texture = Texture.create(4, 2, TextureFormat.R, data)
    assert texture.get_data() == data
    assert texture.format is TextureFormat.R


def test_rejects_wrong_data_size():
    texture = Texture.create(4, 2, TextureFormat.R)
    with pytest.raises(ValueError):
        texture.set_data(bytes(32))


@pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 2)])
def test_rejects_empty_size(width, height):
    with pytest.raises(ValueError):
        Texture.create(width, height)


def test_rejects_none_format():
    with pytest.raises(ValueError):
        Texture.create(2, 2, TextureFormat.NONE)


def test_from_image_copies_pixels():
    image = Image(2, 1, bytes([1, 2, 3, 4, 5, 6, 7, 8]))
    texture = Texture.from_image(image)
    image.pixels[0] = 99
    assert texture.get_data() == bytes([1, 2, 3, 4, 5, 6, 7, 8])
    assert (texture.width, texture.height) == (2, 1)


def test_from_empty_image_fails():
    with pytest.raises(ValueError):
        Texture.from_image(Image())


def test_not_a_framebuffer_by_default():
    assert Texture.create(1, 1).is_framebuffer is False