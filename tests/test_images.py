import pytest

from mirador.portfolio.images import (
    fallback_image_url,
    is_valid_image_url,
    optimize_image_url,
    optimized_image_url,
    picsum_image_url,
    placeholder_image_url,
    property_image_url,
    unsplash_source_url,
)


def test_property_image_url_uses_type_keyword():
    assert property_image_url("Industrial") == (
        "https://source.unsplash.com/800x600/?warehouse%20industrial"
    )
    assert property_image_url("Castle", 400, 300) == (
        "https://source.unsplash.com/400x300/?commercial%20building"
    )
    assert fallback_image_url() == property_image_url("Office")


def test_generators():
    assert unsplash_source_url() == "https://source.unsplash.com/800x600/?building"
    assert picsum_image_url(seed="prop-1") == "https://picsum.photos/seed/prop-1/800/600"
    assert picsum_image_url(200, 150) == "https://picsum.photos/200/150"
    assert placeholder_image_url(text="No image") == "https://placehold.co/800x600?text=No%20image"


def test_is_valid_image_url():
    assert is_valid_image_url("https://cdn.example.com/a.JPG")
    assert is_valid_image_url("https://picsum.photos/200/300")
    assert not is_valid_image_url("ftp://example.com/a.jpg")
    assert not is_valid_image_url("")
    assert not is_valid_image_url(None)


def test_optimize_resizes_known_services():
    assert optimize_image_url("https://source.unsplash.com/800x600/?office", 400, 300) == (
        "https://source.unsplash.com/400x300/?office"
    )
    assert optimize_image_url("https://source.unsplash.com/?office", 400, 300) == (
        "https://source.unsplash.com/400x300/?office"
    )
    assert optimize_image_url("https://picsum.photos/seed/abc/800/600", 200, 150) == (
        "https://picsum.photos/seed/abc/200/150"
    )
    assert optimize_image_url("https://picsum.photos/800/600", 200, 150) == (
        "https://picsum.photos/200/150"
    )
    resized = optimize_image_url("https://images.unsplash.com/photo-1?q=80", 1200, 675)
    assert resized == "https://images.unsplash.com/photo-1?q=80&w=1200&h=675&fit=crop"
    assert optimize_image_url("https://example.com/a.png", 10, 10) == "https://example.com/a.png"


def test_optimized_image_url_presets():
    url = "https://picsum.photos/seed/x/800/600"
    assert optimized_image_url(url, "thumbnail") == "https://picsum.photos/seed/x/200/150"
    assert optimized_image_url(url) == "https://picsum.photos/seed/x/400/300"
    with pytest.raises(KeyError):
        optimized_image_url(url, "poster")
