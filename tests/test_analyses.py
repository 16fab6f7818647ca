"""Tests for the individual page analyses."""

import pytest

from webpage_analyzer.analyses.doctype import DoctypeAnalysis, find_doctype
from webpage_analyzer.analyses.headings import (
    H1CountAnalysis,
    H2CountAnalysis,
    H3CountAnalysis,
    H6CountAnalysis,
)
from webpage_analyzer.analyses.links import LinksAnalysis
from webpage_analyzer.analyses.login_form import LoginFormAnalysis, LoginFormConfig
from webpage_analyzer.analyses.protocol import (
    AnalysisConfig,
    AnalyzeStatus,
    PageAnalysis,
    RunState,
)
from webpage_analyzer.analyses.title import TitleAnalysis
from webpage_analyzer.core.document import Document


def run_analysis(analysis, html_source: str, state: RunState | None = None):
    """Run one analysis synchronously and return (messages, state)."""
    messages = []
    state = state or RunState()
    analysis.run(Document.from_html(html_source), messages.append, state)
    return messages, state


# ============================================================================
# Protocol conformance
# ============================================================================


class TestProtocol:
    """Every analysis satisfies the PageAnalysis protocol."""

    @pytest.mark.parametrize(
        "cls",
        [TitleAnalysis, DoctypeAnalysis, H1CountAnalysis, LinksAnalysis, LoginFormAnalysis],
    )
    def test_is_page_analysis(self, cls):
        assert isinstance(cls(), PageAnalysis)

    def test_default_config_is_used(self):
        assert isinstance(TitleAnalysis().config, AnalysisConfig)
        assert LoginFormAnalysis().config.keyword == "login"


# ============================================================================
# Title
# ============================================================================


class TestTitleAnalysis:
    """Test title extraction."""

    def test_title(self):
        messages, _ = run_analysis(TitleAnalysis(), "<title>Example Domain</title>")
        assert len(messages) == 1
        assert messages[0].text == "title : Example Domain"
        assert messages[0].status == AnalyzeStatus.SUCCESS

    def test_title_is_escaped(self, sample_document):
        messages = []
        TitleAnalysis().run(sample_document, messages.append, RunState())
        assert messages[0].text == "title : Example &amp; Co"

    def test_markup_in_title_is_escaped(self):
        messages, _ = run_analysis(TitleAnalysis(), "<title>&lt;b&gt;bold&lt;/b&gt;</title>")
        assert messages[0].text == "title : &lt;b&gt;bold&lt;/b&gt;"

    def test_quotes_in_title_use_numeric_references(self):
        messages, _ = run_analysis(TitleAnalysis(), "<title>Bob's \"Shop\"</title>")
        assert messages[0].text == "title : Bob&#39;s &#34;Shop&#34;"

    def test_first_title_wins(self):
        messages, _ = run_analysis(TitleAnalysis(), "<title>One</title><title>Two</title>")
        assert messages[0].text == "title : One"

    def test_missing_title(self):
        messages, _ = run_analysis(TitleAnalysis(), "<p>no title</p>")
        assert messages[0].text == "title : "


# ============================================================================
# Doctype
# ============================================================================


class TestDoctypeAnalysis:
    """Test doctype detection on the first source line."""

    def test_html5_doctype(self):
        messages, _ = run_analysis(DoctypeAnalysis(), "<!DOCTYPE html>\n<html></html>")
        assert messages[0].text == "html version : &lt;!DOCTYPE html&gt;"

    def test_html4_doctype(self):
        source = (
            '<!DOCTYPE HTML PUBLIC "-//W3C//DTD HTML 4.01//EN" '
            '"http://www.w3.org/TR/html4/strict.dtd">\n<html></html>'
        )
        messages, _ = run_analysis(DoctypeAnalysis(), source)
        assert messages[0].text.startswith(
            "html version : &lt;!DOCTYPE HTML PUBLIC &#34;-//W3C//DTD HTML 4.01//EN&#34; "
        )

    def test_lowercase_doctype(self):
        assert find_doctype("<!doctype html>") == "<!doctype html>"

    def test_doctype_not_on_first_line(self):
        messages, _ = run_analysis(DoctypeAnalysis(), "\n<!DOCTYPE html>\n<html></html>")
        assert messages[0].text == "html version : "

    def test_no_doctype(self):
        assert find_doctype("<html><head></head>") == ""


# ============================================================================
# Headings
# ============================================================================


class TestHeadingAnalyses:
    """Test per-level heading counts."""

    SOURCE = "<h1>a</h1><h1>b</h1><h2>c</h2>"

    def test_h1_count(self):
        messages, _ = run_analysis(H1CountAnalysis(), self.SOURCE)
        assert [m.text for m in messages] == ["h1 count : 2"]

    def test_h2_count(self):
        messages, _ = run_analysis(H2CountAnalysis(), self.SOURCE)
        assert [m.text for m in messages] == ["h2 count : 1"]

    def test_absent_level_reports_zero(self):
        messages, _ = run_analysis(H3CountAnalysis(), self.SOURCE)
        assert [m.text for m in messages] == ["h3 count : 0"]

    def test_nested_headings_are_counted(self):
        source = "<div><h6>x</h6><section><h6>y</h6></section></div>"
        messages, _ = run_analysis(H6CountAnalysis(), source)
        assert messages[0].text == "h6 count : 2"


# ============================================================================
# Links
# ============================================================================


class TestLinksAnalysis:
    """Test internal/external classification."""

    def test_sample_page(self, sample_document):
        messages = []
        state = RunState()
        LinksAnalysis().run(sample_document, messages.append, state)

        assert [m.text for m in messages] == [
            "internal link count : 1",
            "external link count : 1",
        ]
        assert state.internal_link_count == 1
        assert state.external_link_count == 1

    def test_duplicates_counted_once(self):
        source = (
            '<a href="/a">1</a><a href="/a">2</a>'
            '<a href="https://x.com">3</a><a href="https://x.com">4</a>'
        )
        _, state = run_analysis(LinksAnalysis(), source)
        assert (state.internal_link_count, state.external_link_count) == (1, 1)

    def test_no_links(self):
        messages, _ = run_analysis(LinksAnalysis(), "<p>nothing here</p>")
        assert [m.text for m in messages] == [
            "internal link count : 0",
            "external link count : 0",
        ]

    def test_fragments_and_relative_paths_are_ignored(self):
        source = '<a href="#top">t</a><a href="page.html">p</a><a href="">e</a>'
        _, state = run_analysis(LinksAnalysis(), source)
        assert (state.internal_link_count, state.external_link_count) == (0, 0)

    def test_scheme_without_host_is_internal(self):
        source = '<a href="mailto:someone@example.com">m</a><a href="//cdn.example.com/x.js">c</a>'
        _, state = run_analysis(LinksAnalysis(), source)
        assert (state.internal_link_count, state.external_link_count) == (2, 0)

    def test_anchor_without_href_is_skipped(self):
        _, state = run_analysis(LinksAnalysis(), '<a name="x">x</a><a href="/y">y</a>')
        assert state.internal_link_count == 1


# ============================================================================
# Login form
# ============================================================================


class TestLoginFormAnalysis:
    """Test login form detection."""

    def test_login_form_found(self, sample_document):
        messages = []
        LoginFormAnalysis().run(sample_document, messages.append, RunState())
        assert messages[0].text == "contain login form : true"

    def test_no_login_form(self):
        messages, _ = run_analysis(
            LoginFormAnalysis(), '<form action="/search"></form><form></form>'
        )
        assert messages[0].text == "contain login form : false"

    def test_submit_login_action(self):
        source = '<form action="submitLogin"></form><form action="search"></form>'
        messages, _ = run_analysis(LoginFormAnalysis(), source)
        assert messages[0].text == "contain login form : true"

    def test_search_and_contact_forms(self):
        source = '<form action="search"></form><form action="contact"></form>'
        messages, _ = run_analysis(LoginFormAnalysis(), source)
        assert messages[0].text == "contain login form : false"

    def test_case_sensitive_match(self):
        analysis = LoginFormAnalysis(LoginFormConfig(case_sensitive=True))
        messages, _ = run_analysis(analysis, '<form action="submitLogin"></form>')
        assert messages[0].text == "contain login form : false"

        messages, _ = run_analysis(analysis, '<form action="/login"></form>')
        assert messages[0].text == "contain login form : true"

    def test_single_message_for_many_forms(self):
        source = "".join(f'<form action="/login/{i}"></form>' for i in range(5))
        messages, _ = run_analysis(LoginFormAnalysis(), source)
        assert len(messages) == 1

    def test_custom_keyword(self):
        analysis = LoginFormAnalysis(LoginFormConfig(keyword="signin"))
        messages, _ = run_analysis(analysis, '<form action="/account/signin"></form>')
        assert messages[0].text == "contain login form : true"

    def test_empty_keyword_rejected(self):
        with pytest.raises(ValueError):
            LoginFormConfig(keyword="")
