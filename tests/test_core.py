import pytest

from subvibe import SubtitleParser, build, parse, resync
from subvibe.models import Cue, ParsedDocument

SRT = (
    "1\n00:00:01,000 --> 00:00:04,000\nHello\n\n"
    "2\n00:00:05,000 --> 00:00:06,000\nWorld\n"
)
VTT = "WEBVTT\n\n00:01.000 --> 00:04.000\nHello\n\n00:05.000 --> 00:06.000\nWorld\n"


def test_parse_empty():
    doc = parse("")
    assert doc.type == "unknown"
    assert doc.cues == ()
    assert len(doc.errors) == 1
    assert doc.errors[0].message == "Empty subtitle content"
    assert doc.errors[0].severity == "error"


def test_parse_plain_text_is_unknown():
    doc = parse("This is just some plain text\nwithout any timestamps.\nNothing here.")
    assert doc.type == "unknown"
    assert doc.cues == ()
    assert doc.errors[0].message == "Content does not appear to be a subtitle file"


def test_parse_detects_format():
    assert parse(SRT).type == "srt"
    assert parse(VTT).type == "vtt"
    assert len(parse(SRT).cues) == 2
    assert parse(VTT).errors is None


def test_parse_code_fenced_content():
    doc = parse("```srt\n1\n00:00:01,000 --> 00:00:02,000\nHi\n```")
    assert doc.type == "srt"
    assert [c.text for c in doc.cues] == ["Hi"]
    assert doc.errors is None


def test_parse_never_raises():
    for content in ("-->", "1\n-->\n", "WEBVTT\n\nNOTE\n-->", "\x00\x01 --> \x02", "…… --> ……\nx"):
        assert isinstance(parse(content), ParsedDocument)


def test_build_formats():
    doc = parse(SRT)
    assert build(doc) == SRT
    assert build(doc, format="vtt").startswith("WEBVTT\n\n1\n00:01.000 --> 00:04.000\nHello\n")
    assert build(doc, "text") == "Hello\n\nWorld"
    assert build(doc, {"format": "vtt"}) == build(doc, format="vtt")


def test_build_defaults():
    cues = [Cue(1, 0, 1000, " Hi "), Cue(2, 1000, 2000, "   ")]
    # Bare cue lists default to SRT
    assert build(cues).startswith("1\n00:00:00,000 --> 00:00:01,000\n")
    assert build(cues, "text") == "Hi"
    assert build(parse(VTT)).startswith("WEBVTT")
    assert build(ParsedDocument(type="unknown")) == ""


def test_build_preserve_indexes_option():
    cues = [Cue(4, 0, 1000, "Hi")]
    assert build(cues, preserve_indexes=True).startswith("4\n")
    assert build(cues, {"format": "srt", "preserve_indexes": True}).startswith("4\n")


def test_build_rejects_unknown_format():
    with pytest.raises(ValueError):
        build([], format="ass")
    with pytest.raises(ValueError):
        build([], "xml")
    with pytest.raises(TypeError):
        build([], 42)


def test_resync():
    doc = parse(SRT)
    shifted = resync(doc.cues, 2000)
    assert [(c.start_time, c.end_time) for c in shifted] == [(3000, 6000), (7000, 8000)]
    assert shifted[0].original == (1000, 4000)
    assert doc.cues[0].original is None


def test_subtitle_parser_facade():
    parser = SubtitleParser(preserve_indexes=True)
    content = "3\n00:00:01,000 --> 00:00:02,000\nA\n\n4\n00:00:03,000 --> 00:00:04,000\nB\n"
    doc = parser.parse(content)
    assert [c.index for c in doc.cues] == [3, 4]
    assert parser.build(doc) == content
    assert parser.parse_srt(content).cues == doc.cues
    assert parser.parse_vtt(VTT).type == "vtt"


def test_subtitle_parser_convert():
    parser = SubtitleParser()
    assert parser.convert(SRT, "vtt") == (
        "WEBVTT\n\n1\n00:01.000 --> 00:04.000\nHello\n\n2\n00:05.000 --> 00:06.000\nWorld\n"
    )
    assert parser.convert(VTT, "srt") == SRT

    with pytest.raises(ValueError):
        SubtitleParser(default_format="ass")
