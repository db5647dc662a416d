import pytest

from tabclip.errors import FunctionalPlaceholderError, ReplacerError, TemplateSyntaxError, UnknownFunctionError
from tabclip.models import RenderContext
from tabclip.render.placeholders import fill_placeholders, wants_indent, wants_page_metadata, wants_rich_text
from tests.fakes import make_tab


def _ctx(**overrides):
    tab_fields = {
        key: overrides.pop(key)
        for key in ("title", "url", "container")
        if key in overrides
    }
    tab_fields.setdefault("title", "Example")
    tab_fields.setdefault("url", "https://example.com")
    base = {
        "tab": make_tab(1, **tab_fields),
        "line_feed": "\n",
        "time_utc": "Sat, 17 Oct 2026 12:00:00 GMT",
        "time_local": "Sat Oct 17 14:00:00 2026",
    }
    base.update(overrides)
    return RenderContext(**base)


def test_title_eol_url():
    assert fill_placeholders("%TITLE%%EOL%%URL%", _ctx()) == "Example\nhttps://example.com"


def test_eol_uses_configured_line_feed():
    assert fill_placeholders("%TITLE%%EOL%%URL%", _ctx(line_feed="\r\n")) == "Example\r\nhttps://example.com"


def test_tokens_are_case_insensitive():
    assert fill_placeholders("%title% %Url%", _ctx()) == "Example https://example.com"


def test_markdown_link_escapes_title_but_not_bare_url():
    out = fill_placeholders('[%TITLE_MD%](%URL% "%TITLE_MD_LINK_TITLE%")', _ctx(title="A (test)"))
    assert out == '[A \\(test\\)](https://example.com "A \\(test\\)")'


def test_html_renderings():
    ctx = _ctx(title='Q&A <b>"x"</b>', url="https://e.com/?a=1&b=2")
    out = fill_placeholders('<a title="%TITLE_HTML%" href="%URL_HTMLIFIED%">%TEXT_HTML%</a>', ctx)
    assert out == (
        '<a title="Q&amp;A &lt;b&gt;&quot;x&quot;&lt;/b&gt;" href="https://e.com/?a=1&amp;b=2">'
        "Q&amp;A &lt;b&gt;&quot;x&quot;&lt;/b&gt;</a>"
    )


def test_unknown_tokens_are_left_verbatim():
    assert fill_placeholders("%NOPE% %TITLE%", _ctx()) == "%NOPE% Example"


def test_tab_and_reserved_tokens():
    assert fill_placeholders("a%TAB%b%SEL%%RLINK_HTML%c", _ctx()) == "a\tbc"


def test_rich_text_marker_is_stripped():
    assert fill_placeholders("%RT%<b>%TITLE%</b>", _ctx()) == "<b>Example</b>"


def test_metadata_tokens_blank_when_absent():
    assert fill_placeholders("[%AUTHOR%|%DESC%|%KEYWORDS_HTML%]", _ctx()) == "[||]"


def test_metadata_tokens_render_all_variants():
    ctx = _ctx(author="Ann & Bob", description="a.b", keywords="x, (y)")
    out = fill_placeholders(
        "%AUTHOR_HTML%|%DESCRIPTION_MD%|%KEYWORDS_MD_LINK_TITLE%|%DESC%", ctx
    )
    assert out == "Ann &amp; Bob|a\\.b|x, \\(y\\)|a.b"


def test_time_tokens():
    ctx = _ctx()
    assert fill_placeholders("%UTC_TIME%", ctx) == "Sat, 17 Oct 2026 12:00:00 GMT"
    assert fill_placeholders("%UTC_TIME_MD%", ctx) == "Sat\\, 17 Oct 2026 12\\:00\\:00 GMT"
    assert fill_placeholders("%LOCAL_TIME%", ctx) == "Sat Oct 17 14:00:00 2026"


def test_container_fixed_tokens():
    ctx = _ctx(container="Work.Co")
    assert fill_placeholders("%CONTAINER_NAME%%TITLE%", ctx) == "Work.Co: Example"
    assert fill_placeholders("%CONTAINER_TITLE_MD%", ctx) == "Work\\.Co: "
    assert fill_placeholders("%CONTAINER_URL%", ctx) == "ext+container:name=Work.Co&url=https://example.com"
    assert fill_placeholders("%CONTAINER_NAME%%CONTAINER_URL%", _ctx()) == "https://example.com"


def test_container_functional_placeholder():
    assert fill_placeholders("%CONTAINER_NAME([)(] )%%TITLE%", _ctx(container="Work")) == "[Work] Example"
    assert fill_placeholders("%CONTAINER_NAME([)(] )%%TITLE%", _ctx()) == "Example"
    assert fill_placeholders("%container_title_html(<)(>)%", _ctx(container="A&B")) == "&lt;A&amp;B&gt;"


def test_unknown_function_raises_with_readable_message():
    with pytest.raises(UnknownFunctionError) as excinfo:
        fill_placeholders("%NOPE(a)(b)%", _ctx())
    assert "NOPE" in str(excinfo.value)
    assert FunctionalPlaceholderError is UnknownFunctionError


@pytest.mark.parametrize(
    ("fmt", "level", "expected"),
    [
        ("%TST_INDENT%*", 0, "*"),
        ("%TST_INDENT%*", 2, "    *"),
        ("%TST_INDENT(-)%*", 3, "---*"),
        ("%TST_INDENT(|   )(|---)%*", 1, "|---*"),
        ("%TST_INDENT(|   )(|---)%*", 3, "|   |   |---*"),
    ],
)
def test_tst_indent(fmt, level, expected):
    assert fill_placeholders(fmt, _ctx(indent_level=level)) == expected


def test_nested_token_arguments_are_rendered_recursively():
    ctx = _ctx(indent_level=2)
    assert fill_placeholders('%TST_INDENT(%REPLACE("ab", "b", "-")%)%x', ctx) == "a-a-x"


def test_replace_renders_sub_template_then_applies_pairs():
    ctx = _ctx(url="https://www.example.com/path")
    assert fill_placeholders("%REPLACE(%URL%)(^https?://)()%", ctx) == "www.example.com/path"
    out = fill_placeholders('%REPLACE("%URL%", "^https?://(www\\.)?", "", "/path$", "")%', ctx)
    assert out == "example.com"


def test_replace_supports_group_references():
    ctx = _ctx(title="2026-10-17 report")
    assert fill_placeholders('%REPLACE("%TITLE%", "(\\d+)-(\\d+)-(\\d+)", "\\3.\\2.\\1")%', ctx) == "17.10.2026 report"


def test_replace_with_odd_pairs_raises():
    with pytest.raises(TemplateSyntaxError):
        fill_placeholders("%REPLACE(%URL%)(x)%", _ctx())


def test_replace_with_invalid_pattern_raises():
    with pytest.raises(ReplacerError):
        fill_placeholders("%REPLACE(%URL%)([)(x)%", _ctx())


def test_token_output_is_never_rescanned():
    assert fill_placeholders("%TITLE%", _ctx(title="%URL%")) == "%URL%"


def test_format_inspection_helpers():
    assert wants_rich_text("%rt%%TITLE%")
    assert not wants_rich_text("%TITLE%")
    assert wants_indent("%TST_INDENT(  )%%TITLE%")
    assert not wants_indent("%TITLE%")
    assert wants_page_metadata("%DESC_HTML%")
    assert wants_page_metadata('%REPLACE("%AUTHOR%", "a", "b")%')
    assert not wants_page_metadata("%TITLE% %URL%")
