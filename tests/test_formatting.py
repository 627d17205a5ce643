from markupsafe import Markup

from plywood_catalog.formatting import escape_text, format_description


def test_empty_and_none():
    assert format_description("") == ""
    assert format_description(None) == ""


def test_zero_is_rendered():
    assert format_description(0) == "0"


def test_bold():
    out = format_description("**bold**")
    assert out == "<strong>bold</strong>"
    assert "*" not in out


def test_italic():
    assert format_description("*soft*") == "<em>soft</em>"


def test_bold_then_italic():
    out = format_description("**BWR** grade, *calibrated* faces")
    assert out == "<strong>BWR</strong> grade, <em>calibrated</em> faces"


def test_line_breaks():
    assert format_description("line1\nline2") == "line1<br/>line2"
    assert format_description("a\r\nb\rc") == "a<br/>b<br/>c"


def test_markup_is_escaped():
    out = format_description("<script>")
    assert out == "&lt;script&gt;"
    assert "<" not in out and ">" not in out


def test_escape_happens_before_emphasis():
    assert format_description("**<x>**") == "<strong>&lt;x&gt;</strong>"


def test_quotes_and_ampersand():
    assert escape_text("Tom's \"best\" & co") == "Tom&#39;s &quot;best&quot; &amp; co"


def test_single_asterisk_left_alone():
    assert format_description("2*4 sheets") == "2*4 sheets"


def test_result_is_markup():
    out = format_description("x")
    assert isinstance(out, Markup)
    assert Markup("{}").format(out) == "x"


def test_em_never_splits_a_strong_span():
    assert format_description("***x***") == "<strong>*x</strong>*"
    assert format_description("*a **b** c*") == "*a <strong>b</strong> c*"


def test_em_stays_on_one_line():
    assert format_description("*a\nb*") == "*a<br/>b*"
