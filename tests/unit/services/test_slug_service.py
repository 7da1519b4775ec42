import pytest
from unittest.mock import patch

from core.exceptions import SlugCollisionError
from services.slug_service import SlugGenerator, fallback_slug, slugify


@pytest.mark.unit
class TestSlugify:

    @pytest.mark.parametrize("text, expected", [
        ("Hello World", "hello-world"),
        ("  Crème Brûlée: a recipe!  ", "creme-brulee-a-recipe"),
        ("Q&A -- 2024", "q-a-2024"),
        ("!!!", ""),
    ])
    def test_slugify(self, text, expected):
        assert slugify(text) == expected

    @patch("services.slug_service.time.time", return_value=1700000000.5)
    def test_fallback_slug_uses_timestamp(self, mock_time):
        assert fallback_slug() == "entry-1700000000"


@pytest.mark.unit
class TestSlugGenerator:

    def test_candidates_are_bounded(self):
        generator = SlugGenerator(max_attempts=3)

        assert list(generator.candidates("hello-world")) == ["hello-world", "hello-world-1", "hello-world-2"]

    def test_blank_title_gets_fallback(self):
        assert SlugGenerator().base_slug("   ").startswith("entry-")
        assert SlugGenerator().base_slug(None).startswith("entry-")

    def test_exhausted(self):
        error = SlugGenerator(max_attempts=4).exhausted("hello")

        assert isinstance(error, SlugCollisionError)
        assert error.attempts == 4
        assert error.status_code == 409

    def test_max_attempts_must_be_positive(self):
        with pytest.raises(ValueError):
            SlugGenerator(max_attempts=0)
