"""Tests for the tour page HTML rendering."""

from straqa.models.lead_form import SubmissionDraft
from straqa.services.countries import get_country_table
from straqa.services.page_templates import render_full_page
from straqa.services.validation import bind_fields


def _render(draft=None, errors=None, api_url="https://api.straqa.com"):
    return render_full_page(
        bind_fields(draft or SubmissionDraft(), errors),
        form_id="679e61e98cbf538dd1ded437",
        countries=get_country_table().options,
        api_url=api_url,
    )


class TestRenderFullPage:
    """Tests for render_full_page."""

    def test_layout_metadata(self):
        page = _render()

        assert "<title>Straqa</title>" in page
        assert 'content="Ticket experience made easy"' in page
        assert 'content="All-in Technologies"' in page
        assert 'content="@straqa"' in page
        assert "121 selah - Finding home Tour!" in page
        assert "Powered by Straqa" in page
        assert 'id="toaster"' in page

    def test_fields(self):
        page = _render()

        assert 'id="679e61e98cbf538dd1ded437"' in page
        for label in ("Full name", "Email address", "Phone", "How was your experience"):
            assert label in page
        assert 'type="file"' in page
        assert 'accept="image/*"' in page
        assert "<textarea" in page

    def test_country_selector(self):
        """Nigeria is preselected and options show dial codes."""
        page = _render()

        assert '<option value="NG" selected>' in page
        assert "Nigeria +234" in page
        assert 'name="tel_country"' in page

    def test_inline_errors(self):
        page = _render(errors={"name": "Your name is required."})

        assert "Your name is required." in page

    def test_values_are_escaped(self):
        page = _render(SubmissionDraft(name='<script>alert("x")</script>'))

        assert '<script>alert("x")</script>' not in page
        assert "&lt;script&gt;" in page

    def test_script_posts_to_api(self):
        page = _render()

        assert "const API_URL = 'https://api.straqa.com';" in page
        assert "const LOADING_DELAY = 1000;" in page

    def test_unsafe_api_url_dropped(self):
        page = _render(api_url="javascript:alert(1)")

        assert "const API_URL = '';" in page
