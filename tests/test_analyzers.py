from __future__ import annotations

import logging

import pytest

from wcagscan.analyzers import default_analyzers
from wcagscan.analyzers.focus_order import check_focus_order
from wcagscan.analyzers.focus_visible import check_focus_visible
from wcagscan.analyzers.form_labels import check_form_labels
from wcagscan.analyzers.headings_labels import check_headings_labels
from wcagscan.analyzers.info_relationships import check_info_relationships
from wcagscan.analyzers.language import check_language
from wcagscan.analyzers.link_purpose import check_link_purpose
from wcagscan.analyzers.media import check_media
from wcagscan.analyzers.meaningful_sequence import check_meaningful_sequence
from wcagscan.analyzers.name_role_value import check_name_role_value
from wcagscan.analyzers.orientation import check_orientation
from wcagscan.analyzers.page_structure import check_page_structure
from wcagscan.analyzers.predictability import check_predictability
from wcagscan.analyzers.section_headings import check_section_headings
from wcagscan.analyzers.sensory_characteristics import check_sensory_characteristics
from wcagscan.analyzers.text_alternatives import check_text_alternatives
from wcagscan.analyzers.timing import check_timing
from wcagscan.config import DEFAULT_CONFIG
from wcagscan.snapshot import HtmlSnapshot, StylesheetAccess

TS = "2024-05-01T12:00:00Z"

CLEAN_PAGE = """<!DOCTYPE html>
<html lang="en">
<head><title>Pricing plans - Example Corp</title></head>
<body>
<a href="#main">Skip to main content</a>
<nav aria-label="Primary"><a href="/docs/getting-started">Getting started guide</a></nav>
<main id="main">
<h1>Pricing plans for small teams</h1>
<p>Choose the plan that fits your team.</p>
<img src="chart.png" alt="Bar chart comparing monthly prices of the three plans">
<h2>Contact our sales team</h2>
<form action="/contact">
<label for="email">Email address</label>
<input id="email" type="email" name="email">
<button type="submit">Send message</button>
</form>
</main>
</body>
</html>
"""


def page(body: str, *, head: str = "<title>Analyzer fixture page</title>", lang: str = ' lang="en"', sheets=()) -> HtmlSnapshot:
    html = f"<!DOCTYPE html><html{lang}><head>{head}</head><body>{body}</body></html>"
    return HtmlSnapshot(html, url="https://example.test/page", engine="chromium", captured_at=TS, stylesheets=sheets)


def run(fn, snap, config=DEFAULT_CONFIG):
    return {r.criterion_id: r for r in fn(snap, config)}


def checks(result) -> list[str]:
    return [i.check_id for i in result.issues]


@pytest.mark.parametrize("spec", default_analyzers(), ids=lambda s: s.name)
def test_clean_page_passes_every_analyzer(spec) -> None:
    snap = HtmlSnapshot(CLEAN_PAGE, url="https://example.test/", captured_at=TS)
    results = list(spec.run(snap, DEFAULT_CONFIG))
    assert sorted(r.criterion_id for r in results) == sorted(spec.criteria)
    for result in results:
        assert result.issues == (), [i.description for i in result.issues]
        assert result.status == "pass"
        assert result.timestamp == TS


# 1.1.1


def test_missing_alt_is_critical() -> None:
    result = run(check_text_alternatives, page('<img src="photo.png">'))["1.1.1"]
    assert checks(result) == ["missing-alt"]
    assert result.issues[0].severity == "critical"
    assert result.status == "fail"
    assert result.issues[0].target == "/html[1]/body[1]/img[1]"


@pytest.mark.parametrize(
    "img,check",
    [
        ('<img src="a.png" title="Sales chart">', "title-only-alt"),
        ('<img src="a.png" alt="IMG_1234.jpg">', "filename-alt"),
        ('<img src="a.png" alt="image">', "placeholder-alt"),
        ('<img src="a.png" alt="Image of a dog running on the beach">', "redundant-prefix"),
        ('<img src="a.png" alt="" aria-label="Company logo">', "semantic-conflict"),
    ],
)
def test_alt_text_heuristics(img: str, check: str) -> None:
    assert checks(run(check_text_alternatives, page(img))["1.1.1"]) == [check]


def test_long_alt_is_a_warning() -> None:
    alt = "A detailed description " * 8
    result = run(check_text_alternatives, page(f'<img src="a.png" alt="{alt}">'))["1.1.1"]
    assert checks(result) == ["long-alt"]
    assert result.status == "warning"


def test_decorative_images_and_tracking_pixels_pass() -> None:
    body = '<img src="rule.png" alt=""><img src="t.gif" width="1" height="1"><img src="x.png" role="presentation">'
    assert run(check_text_alternatives, page(body))["1.1.1"].status == "pass"


# 1.2.x / 1.4.2


def test_video_without_captions_or_alternative() -> None:
    result = run(check_media, page('<video src="intro.mp4" controls></video>'))
    assert checks(result["1.2.1"]) == ["missing-media-alternative"]
    assert result["1.2.1"].status == "warning"
    assert checks(result["1.2.2"]) == ["missing-captions"]
    assert result["1.2.2"].issues[0].severity == "critical"
    assert result["1.4.2"].status == "pass"


def test_captioned_video_with_transcript_link_passes() -> None:
    body = (
        '<div><video controls><source src="intro.mp4" type="video/mp4">'
        '<track kind="captions" src="intro.vtt" srclang="en"></video>'
        '<a href="/intro-transcript.html">Read the transcript</a></div>'
    )
    result = run(check_media, page(body))
    assert result["1.2.1"].status == "pass"
    assert result["1.2.2"].status == "pass"


def test_audio_transcript_next_to_player() -> None:
    bare = run(check_media, page('<audio src="podcast.mp3" controls></audio>'))["1.2.1"]
    assert checks(bare) == ["missing-transcript"]
    body = '<audio src="podcast.mp3" controls></audio><p>Transcript: welcome to episode one.</p>'
    assert run(check_media, page(body))["1.2.1"].status == "pass"


def test_media_without_source_is_ignored() -> None:
    result = run(check_media, page("<video></video><audio></audio>"))
    assert all(r.status == "pass" for r in result.values())


def test_autoplay_without_controls() -> None:
    body = (
        '<audio src="theme.mp3" autoplay></audio>'
        '<video src="loop.mp4" autoplay muted><track kind="captions" src="c.vtt"></video>'
        '<embed src="/sounds/Welcome.MP3">'
    )
    result = run(check_media, page(body))["1.4.2"]
    assert checks(result) == ["autoplay-audio", "embedded-audio"]
    assert result.status == "fail"


def test_autoplay_with_pause_button_passes() -> None:
    body = '<div><audio src="theme.mp3" autoplay></audio><button aria-label="Pause music">||</button></div>'
    assert run(check_media, page(body))["1.4.2"].status == "pass"


# 1.3.1


def test_preformatted_table_and_ascii_art() -> None:
    table = "<pre>\nName    Age    City\nAlice   30     Paris\nBob     25     Rome\nCarol   41     Oslo\n</pre>"
    art = "<pre>+--+\n|  |\n+--+</pre>"
    assert checks(run(check_info_relationships, page(table))["1.3.1"]) == ["pre-table"]
    assert checks(run(check_info_relationships, page(art))["1.3.1"]) == ["ascii-art"]


def test_nbsp_layout_reports_innermost_element_once() -> None:
    body = "<div><p>Name:&nbsp;&nbsp;&nbsp;&nbsp;&nbsp;&nbsp;Value</p></div>"
    result = run(check_info_relationships, page(body))["1.3.1"]
    assert checks(result) == ["nbsp-spacing"]
    assert result.issues[0].element.startswith("<p>")
    assert "6 non-breaking spaces" in result.issues[0].description


def test_pseudo_element_text_is_flagged() -> None:
    snap = page('<span class="req"></span>', sheets=['.req::after { content: "Required field"; }'])
    result = run(check_info_relationships, snap)["1.3.1"]
    assert checks(result) == ["pseudo-content"]
    assert "Required field" in result.issues[0].description


def test_decorative_pseudo_content_is_ignored() -> None:
    snap = page('<span class="dot"></span>', sheets=['.dot::before { content: "*"; }'])
    assert run(check_info_relationships, snap)["1.3.1"].status == "pass"


def test_heading_skip_and_headerless_table() -> None:
    body = (
        "<h1>Report</h1><h3>Details</h3>"
        "<table><tr><td>Q1</td><td>10</td></tr><tr><td>Q2</td><td>12</td></tr></table>"
    )
    result = run(check_info_relationships, page(body))["1.3.1"]
    assert checks(result) == ["heading-skip", "table-headers"]
    assert "h1 to h3" in result.issues[0].description
    assert result.status == "fail"


def test_table_with_header_cells_passes() -> None:
    body = "<table><tr><th>Quarter</th><th>Sales</th></tr><tr><td>Q1</td><td>10</td></tr></table>"
    assert run(check_info_relationships, page(body))["1.3.1"].status == "pass"


# 1.3.2


def test_css_order_reversal() -> None:
    snap = page(
        '<div class="row"><div class="a">First</div><div class="b">Second</div></div>',
        sheets=[".a { order: 2; } .b { order: 1; }"],
    )
    result = run(check_meaningful_sequence, snap)["1.3.2"]
    assert checks(result) == ["css-order"]
    assert 'class="row"' in result.issues[0].element


def test_positive_tabindex_breaks_sequence() -> None:
    result = run(check_meaningful_sequence, page('<a href="/x" tabindex="3">Account settings</a>'))["1.3.2"]
    assert checks(result) == ["positive-tabindex"]
    assert result.status == "fail"


def test_float_and_absolute_layouts() -> None:
    text = "This paragraph has more than fifty characters of running text in it."
    floats = "".join(f'<div style="float: left">{text}</div>' for _ in range(6))
    absolute = "".join(
        f'<div style="position: absolute; top: {top}px; left: 0">Positioned block number {n}</div>'
        for n, top in enumerate((300, 200, 100, 0))
    )
    result = run(check_meaningful_sequence, page(floats + absolute))["1.3.2"]
    assert checks(result) == ["float-layout", "absolute-order"]


def test_absolute_blocks_in_dom_order_pass() -> None:
    absolute = "".join(
        f'<div style="position: absolute; top: {top}px; left: 0">Positioned block number {n}</div>'
        for n, top in enumerate((0, 100, 200, 300))
    )
    assert run(check_meaningful_sequence, page(absolute))["1.3.2"].status == "pass"


def test_multi_column_with_controls_and_mixed_direction() -> None:
    body = (
        '<div style="column-count: 2"><p>Intro</p><a href="/buy">Buy the starter plan</a></div>'
        '<p dir="rtl">مرحبا</p><p dir="ltr">Hello</p>'
    )
    result = run(check_meaningful_sequence, page(body))["1.3.2"]
    assert checks(result) == ["multi-column", "mixed-direction"]


# 1.3.3


def test_sensory_instruction() -> None:
    result = run(check_sensory_characteristics, page("<p>Click the round button to continue.</p>"))["1.3.3"]
    assert set(checks(result)) == {"sensory-instruction"}
    assert len(result.issues) == 2
    assert all(i.element.startswith("<p>") for i in result.issues)
    assert result.status == "warning"


def test_sensory_instruction_reported_on_innermost_block() -> None:
    body = "<div><p>Listen for the chime before you speak.</p></div>"
    result = run(check_sensory_characteristics, page(body))["1.3.3"]
    assert len(result.issues) == 1
    assert result.issues[0].element.startswith("<p>")


def test_instructional_image_alt() -> None:
    result = run(check_sensory_characteristics, page('<img src="a.png" alt="click the arrow icon">'))["1.3.3"]
    assert checks(result) == ["instructional-image"]


# 1.3.4


def test_orientation_lock_in_media_query() -> None:
    snap = page("<p>x</p>", sheets=["@media (orientation: portrait) { body { transform: rotate(90deg); } }"])
    result = run(check_orientation, snap)["1.3.4"]
    assert checks(result) == ["orientation-lock"]
    assert result.status == "warning"


def test_viewport_orientation() -> None:
    head = '<title>x</title><meta name="viewport" content="width=device-width, orientation=portrait">'
    result = run(check_orientation, page("<p>x</p>", head=head))["1.3.4"]
    assert checks(result) == ["viewport-orientation"]
    assert result.status == "fail"


def test_cross_origin_sheet_is_a_soft_skip(caplog: pytest.LogCaptureFixture) -> None:
    snap = page("<p>x</p>", sheets=[StylesheetAccess.access_denied("https://cdn.example/site.css")])
    with caplog.at_level(logging.DEBUG, logger="wcagscan"):
        result = run(check_orientation, snap)["1.3.4"]
    assert checks(result) == ["stylesheet-inaccessible"]
    assert result.issues[0].severity == "minor"
    assert result.status == "warning"
    assert "cdn.example" in caplog.text


@pytest.mark.parametrize("fn,cid", [(check_orientation, "1.3.4"), (check_focus_visible, "2.4.7")])
def test_denied_sheets_collapse_into_one_issue(fn, cid: str) -> None:
    sheets = [
        StylesheetAccess.access_denied("https://cdn.a/x.css"),
        StylesheetAccess.access_denied("https://cdn.b/y.css"),
        "p { color: #222; }",
    ]
    result = run(fn, page("<p>x</p>", sheets=sheets))[cid]
    assert checks(result) == ["stylesheet-inaccessible"]
    description = result.issues[0].description
    assert description.startswith("2 stylesheets could not be inspected")
    assert "https://cdn.a/x.css" in description and "https://cdn.b/y.css" in description


# 2.2.1 / 2.2.2


def test_timed_refresh_and_script_timers() -> None:
    head = '<title>x</title><meta http-equiv="Refresh" content="300; url=/login">'
    body = "<script>setTimeout(function () { logout(); }, 60000);</script><script src='app.js'></script>"
    result = run(check_timing, page(body, head=head))["2.2.1"]
    assert checks(result) == ["timed-refresh", "script-timer"]
    assert "300 second" in result.issues[0].description
    assert result.status == "fail"


def test_immediate_redirect_is_not_a_time_limit() -> None:
    head = '<title>x</title><meta http-equiv="refresh" content="0; url=/new-home">'
    assert run(check_timing, page("<p>x</p>", head=head))["2.2.1"].status == "pass"


def test_session_timeout_ui_needs_review() -> None:
    body = '<div id="session-warning" hidden>Your session is about to expire.</div>'
    result = run(check_timing, page(body))["2.2.1"]
    assert checks(result) == ["session-timeout"]
    assert result.status == "warning"


def test_blinking_and_scrolling_content() -> None:
    body = (
        "<blink>Sale</blink><marquee>Breaking news</marquee>"
        '<div scrollamount="4">Ticker</div><span style="text-decoration: blink">New</span>'
    )
    result = run(check_timing, page(body))["2.2.2"]
    assert checks(result) == ["blink-element", "marquee-element", "scrolling-content", "css-blink"]
    assert result.status == "fail"


def test_endless_animation_needs_a_pause_control() -> None:
    sheet = ".spinner { animation: spin 1s linear infinite; }"
    bare = run(check_timing, page('<div class="spinner" id="spin">x</div>', sheets=[sheet]))["2.2.2"]
    assert checks(bare) == ["endless-animation"]
    body = '<div class="spinner" id="spin">x</div><button aria-controls="spin">Pause animation</button>'
    assert run(check_timing, page(body, sheets=[sheet]))["2.2.2"].status == "pass"
    paused = sheet + " .spinner { animation-play-state: paused; }"
    assert run(check_timing, page('<div class="spinner">x</div>', sheets=[paused]))["2.2.2"].status == "pass"


# 2.4.1 / 2.4.2


def test_page_without_bypass_mechanism() -> None:
    result = run(check_page_structure, page("<p>Hello</p>"))
    assert checks(result["2.4.1"]) == ["no-bypass"]
    assert result["2.4.1"].status == "fail"
    assert result["2.4.2"].status == "pass"


def test_skip_link_counts_as_bypass() -> None:
    body = '<a href="#content">Skip to content</a><div id="content"><p>Hello</p></div>'
    assert run(check_page_structure, page(body))["2.4.1"].status == "pass"


@pytest.mark.parametrize(
    "head,check",
    [("", "missing-title"), ("<title>  </title>", "missing-title"), ("<title>Untitled Document</title>", "generic-title")],
)
def test_page_title_checks(head: str, check: str) -> None:
    assert checks(run(check_page_structure, page("<main>x</main>", head=head))["2.4.2"]) == [check]


# 2.4.3


def test_positive_tabindex_scenario() -> None:
    result = run(check_focus_order, page('<button tabindex="5">Click</button>'))["2.4.3"]
    assert len(result.issues) == 1
    issue = result.issues[0]
    assert "positive tabindex" in issue.description
    assert issue.severity == "serious"
    assert result.status == "fail"


def test_non_sequential_tabindex_values() -> None:
    body = '<a href="/a" tabindex="1">Alpha page</a><a href="/b" tabindex="4">Beta page</a>'
    result = run(check_focus_order, page(body))["2.4.3"]
    assert checks(result) == ["positive-tabindex", "positive-tabindex", "non-sequential-tabindex"]
    assert "1 -> 4" in result.issues[-1].description


def test_sequential_tabindex_has_no_gap_issue() -> None:
    body = '<a href="/a" tabindex="1">Alpha page</a><a href="/b" tabindex="2">Beta page</a>'
    assert "non-sequential-tabindex" not in checks(run(check_focus_order, page(body))["2.4.3"])


def test_focusable_inside_aria_hidden() -> None:
    body = '<div aria-hidden="true"><a href="/x">Hidden link</a></div><span tabindex="-1">skip</span>'
    result = run(check_focus_order, page(body))["2.4.3"]
    assert checks(result) == ["focusable-hidden"]


# 2.4.4 / 2.4.9


def test_vague_link_text() -> None:
    result = run(check_link_purpose, page('<a href="/report">click here</a>'))
    assert checks(result["2.4.4"]) == ["vague-link"]
    assert result["2.4.4"].status == "fail"
    assert checks(result["2.4.9"]) == ["link-only-context"]
    assert result["2.4.9"].status == "warning"


def test_url_and_short_link_text() -> None:
    url = "https://example.com/a/very/long/path/that/keeps/going/on/and/on/forever"
    body = f'<a href="{url}">{url}</a><a href="/x">X</a>'
    assert checks(run(check_link_purpose, page(body))["2.4.4"]) == ["url-link-text", "short-link-text"]


def test_same_text_different_destinations() -> None:
    body = '<a href="/a">Product details</a><a href="/b">Product details</a><a href="/">Home</a><a href="/index.html">Home</a>'
    result = run(check_link_purpose, page(body))["2.4.4"]
    assert checks(result) == ["ambiguous-destination"]
    assert "2 different destinations" in result.issues[0].description


def test_labelled_and_in_page_links_pass() -> None:
    body = (
        '<a href="/r" aria-label="Download the annual report">Download</a>'
        '<a href="#top">Top</a><a href="javascript:void(0)">x</a>'
    )
    result = run(check_link_purpose, page(body))
    assert result["2.4.4"].status == "pass"
    assert result["2.4.9"].status == "pass"


# 2.4.6


def test_vague_heading_scenario() -> None:
    result = run(check_headings_labels, page("<h1>More</h1>"))["2.4.6"]
    assert len(result.issues) == 1
    assert "not descriptive" in result.issues[0].description
    assert result.issues[0].severity == "moderate"
    assert result.status == "warning"


def test_empty_and_duplicate_headings_and_labels() -> None:
    body = '<h2></h2><h2>Shipping options</h2><h2>Shipping options</h2><label for="x"></label><input id="x">'
    result = run(check_headings_labels, page(body))["2.4.6"]
    assert checks(result) == ["empty-heading", "duplicate-heading", "empty-label"]
    assert result.status == "fail"


# 2.4.7


def test_focus_outline_removed_without_alternative() -> None:
    result = run(check_focus_visible, page("<a href='/x'>x</a>", sheets=["a:focus { outline: none; }"]))["2.4.7"]
    assert checks(result) == ["outline-suppressed"]
    assert result.status == "fail"


def test_focus_outline_replaced_by_box_shadow_passes() -> None:
    sheet = "a:focus { outline: none; box-shadow: 0 0 0 3px #005fcc; }"
    assert run(check_focus_visible, page("<a href='/x'>x</a>", sheets=[sheet]))["2.4.7"].status == "pass"


def test_global_outline_reset_needs_a_focus_style() -> None:
    bare = run(check_focus_visible, page("<p>x</p>", sheets=["* { outline: 0; }"]))["2.4.7"]
    assert checks(bare) == ["outline-suppressed"]
    styled = run(
        check_focus_visible,
        page("<p>x</p>", sheets=["* { outline: 0; } :focus-visible { outline: 2px solid #005fcc; }"]),
    )["2.4.7"]
    assert styled.status == "pass"


def test_inline_outline_none_on_control() -> None:
    result = run(check_focus_visible, page('<button style="outline: none">Save</button>'))["2.4.7"]
    assert checks(result) == ["outline-suppressed"]


# 2.4.10


def test_consecutive_paragraphs_without_heading() -> None:
    body = "<h2>Story</h2>" + "<p>Paragraph text.</p>" * 6
    result = run(check_section_headings, page(body))["2.4.10"]
    assert checks(result) == ["consecutive-paragraphs"]
    assert "6 consecutive paragraphs" in result.issues[0].description


def test_heading_resets_paragraph_run() -> None:
    body = "<p>a</p>" * 3 + "<h2>Next part</h2>" + "<p>b</p>" * 3
    assert run(check_section_headings, page(body))["2.4.10"].status == "pass"


def test_long_section_uses_word_threshold() -> None:
    cfg = DEFAULT_CONFIG.with_overrides(max_words_per_heading=10)
    body = "<h2>Intro</h2><p>" + "word " * 12 + "</p>"
    result = run(check_section_headings, page(body), cfg)["2.4.10"]
    assert checks(result) == ["long-section"]
    assert "12 words" in result.issues[0].description

    headless = run(check_section_headings, page("<p>" + "word " * 12 + "</p>"), cfg)["2.4.10"]
    assert "without any heading" in headless.issues[0].description


# 3.1.1 / 3.1.2


def test_missing_and_invalid_page_language() -> None:
    assert checks(run(check_language, page("<p>x</p>", lang=""))["3.1.1"]) == ["missing-lang"]
    assert checks(run(check_language, page("<p>x</p>", lang=' lang="en_US"'))["3.1.1"]) == ["invalid-lang"]
    assert run(check_language, page("<p>x</p>", lang=' lang="fr-CA"'))["3.1.1"].status == "pass"


def test_fragment_without_html_element_has_no_language() -> None:
    snap = HtmlSnapshot("<p>Hello</p>", captured_at=TS)
    assert checks(run(check_language, snap)["3.1.1"]) == ["missing-lang"]


def test_language_of_parts() -> None:
    body = '<p lang="fr">Bonjour</p><p lang="??">Gibberish</p>'
    result = run(check_language, page(body))["3.1.2"]
    assert checks(result) == ["invalid-part-lang"]
    assert result.status == "warning"


# 3.2.x


def test_focus_and_input_context_changes() -> None:
    body = (
        "<input aria-label='Search' onfocus=\"window.location='/next'\">"
        "<form><select aria-label='Sort' onchange=\"this.form.submit()\"><option>A</option></select></form>"
    )
    result = run(check_predictability, page(body))
    assert checks(result["3.2.1"]) == ["focus-context-change"]
    assert checks(result["3.2.2"]) == ["input-context-change", "input-context-change"]
    assert result["3.2.2"].status == "fail"


def test_meta_refresh_and_onload_navigation() -> None:
    head = '<title>x</title><meta http-equiv="refresh" content="5; url=/next">'
    body = "<script>window.onload = function () { window.location = '/landing'; };</script>"
    result = run(check_predictability, page(body, head=head))["3.2.5"]
    assert checks(result) == ["onload-navigation", "meta-refresh"]


def test_form_with_submit_button_is_predictable() -> None:
    body = (
        "<form><select aria-label='Size' onchange='updateTotal()'><option>S</option></select>"
        "<button type='submit'>Order</button></form>"
    )
    result = run(check_predictability, page(body))
    assert all(r.status == "pass" for r in result.values())


# 3.3.x


def test_unlabeled_and_placeholder_only_fields() -> None:
    body = '<input type="text" name="q"><input type="email" placeholder="Email"><input type="hidden" name="t">'
    result = run(check_form_labels, page(body))["3.3.2"]
    assert checks(result) == ["unlabeled-control", "placeholder-only"]
    assert result.status == "fail"


def test_labelling_techniques_pass() -> None:
    body = (
        "<label>Name <input type='text'></label>"
        "<span id='cty'>City</span><input aria-labelledby='cty'>"
        "<input aria-label='Postcode'>"
        "<label for='n'>Notes</label><textarea id='n'></textarea>"
    )
    assert run(check_form_labels, page(body))["3.3.2"].status == "pass"


def test_invalid_field_without_error_message() -> None:
    body = (
        "<label for='a'>A</label><input id='a' aria-invalid='true'>"
        "<label for='b'>B</label><input id='b' aria-invalid='true' aria-describedby='b-err'><span id='b-err'>Required</span>"
    )
    result = run(check_form_labels, page(body))["3.3.1"]
    assert checks(result) == ["unidentified-error"]
    assert 'id="a"' in result.issues[0].element


# 4.1.x


def test_duplicate_ids() -> None:
    result = run(check_name_role_value, page('<p id="dup">a</p><p id="dup">b</p>'))["4.1.1"]
    assert checks(result) == ["duplicate-id"]
    assert result.status == "warning"


def test_unnamed_controls() -> None:
    body = '<button></button><button aria-label="Close"><svg aria-hidden="true"></svg></button><input type="button">'
    result = run(check_name_role_value, page(body))["4.1.2"]
    assert checks(result) == ["unnamed-control", "unnamed-control"]
    assert result.status == "fail"


def test_named_controls_pass() -> None:
    body = '<a href="/"><img src="logo.png" alt="Home"></a><input type="submit"><div role="button" tabindex="0">Go</div>'
    assert run(check_name_role_value, page(body))["4.1.2"].status == "pass"


def test_pointer_only_click_handler() -> None:
    body = '<div onclick="open()">Open</div><div role="button" tabindex="0" onclick="open()" onkeydown="k()">Open</div>'
    result = run(check_name_role_value, page(body))["4.1.2"]
    assert checks(result) == ["pointer-only-handler"]
