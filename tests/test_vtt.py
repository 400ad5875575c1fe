from subvibe.models import VTTVoice
from subvibe.vtt import parse_cue_settings, parse_region, parse_voices, parse_vtt


def _messages(doc, severity=None):
    return [e.message for e in doc.errors or () if severity is None or e.severity == severity]


def test_parse_basic_vtt():
    doc = parse_vtt(
        "WEBVTT\n\n"
        "00:01.000 --> 00:04.000\nHello\n\n"
        "00:05.000 --> 00:06.000\nWorld\n"
    )
    assert doc.type == "vtt"
    assert doc.errors is None
    assert [(c.index, c.start_time, c.end_time, c.text) for c in doc.cues] == [
        (1, 1000, 4000, "Hello"),
        (2, 5000, 6000, "World"),
    ]
    assert doc.cues[0].vtt is not None


def test_header_is_optional_and_metadata_is_skipped():
    assert len(parse_vtt("00:01.000 --> 00:02.000\nHi").cues) == 1

    doc = parse_vtt("WEBVTT - title\nKind: captions\nLanguage: en\n\n00:01.000 --> 00:02.000\nHi\n")
    assert [c.text for c in doc.cues] == ["Hi"]
    assert doc.errors is None


def test_percentage_end_timestamp():
    doc = parse_vtt("WEBVTT\n\n00:01.000 --> 50%\nHalf a day")
    assert doc.cues[0].end_time == 43200000


def test_identifier_retention():
    content = "WEBVTT\n\nintro\n00:01.000 --> 00:02.000\nHi\n\n2\n00:03.000 --> 00:04.000\nThere\n"

    preserved = parse_vtt(content, preserve_indexes=True)
    assert [c.identifier for c in preserved.cues] == ["intro", "2"]
    assert [c.index for c in preserved.cues] == [1, 2]

    plain = parse_vtt(content)
    assert [c.identifier for c in plain.cues] == [None, None]


def test_cue_settings():
    doc = parse_vtt("WEBVTT\n\n00:01.000 --> 00:02.000 align:start line:90% foo:bar vertical:xx\nHi")
    assert doc.cues[0].settings == {"align": "start", "line": "90%"}

    assert parse_cue_settings("") is None
    assert parse_cue_settings("vertical:rl size:50%") == {"vertical": "rl", "size": "50%"}


def test_voices():
    assert parse_voices("<v Roger>Hi there</v>") == ("Hi there", (VTTVoice("Roger", "Hi there"),))
    assert parse_voices("<v Anna>Hello") == ("Hello", (VTTVoice("Anna", "Hello"),))
    assert parse_voices("<v.loud Bob>Hey</v>") == ("Hey", (VTTVoice("Bob", "Hey"),))
    assert parse_voices("No voices") == ("No voices", None)

    doc = parse_vtt("WEBVTT\n\n00:01.000 --> 00:02.000\n<v A>One</v>\n<v B>Two</v>\n")
    assert doc.cues[0].text == "One\nTwo"
    assert doc.cues[0].voices == (VTTVoice("A", "One"), VTTVoice("B", "Two"))


def test_voices_with_markup_and_surrounding_text():
    assert parse_voices("<v Anna>Hi <b>there</b></v>") == (
        "Hi <b>there</b>", (VTTVoice("Anna", "Hi <b>there</b>"),)
    )
    assert parse_voices("<v Anna>Hi</v> and bye") == ("Hi and bye", (VTTVoice("Anna", "Hi"),))
    assert parse_voices("<v A>Hi</v> <v B>Yo") == ("Hi Yo", (VTTVoice("A", "Hi"), VTTVoice("B", "Yo")))
    # Unclosed span stops at the next tag
    assert parse_voices("<v Ann>Hey <i>you</i>") == ("Hey <i>you</i>", (VTTVoice("Ann", "Hey"),))


def test_note_style_and_region_blocks():
    doc = parse_vtt(
        "WEBVTT\n\n"
        "NOTE This is a comment\nspanning two lines\n\n"
        "STYLE\n::cue { color: yellow; }\n\n"
        "REGION\nid=fred\nwidth=40%\nlines=3\nregionanchor=0%,100%\nviewportanchor=10%,90%\nscroll=up\n\n"
        "00:01.000 --> 00:02.000 region:fred\nHi\n"
    )
    assert doc.errors is None
    assert doc.styles == ("::cue { color: yellow; }",)
    region = doc.regions[0]
    assert (region.id, region.width, region.lines, region.viewport_anchor, region.scroll) == (
        "fred", "40%", 3, "10%,90%", "up"
    )
    assert doc.cues[0].settings == {"region": "fred"}


def test_region_defaults():
    region = parse_region(["id=r1", "lines=many", "scroll=sideways"])
    assert region.id == "r1"
    assert region.lines == 3
    assert region.scroll == "none"
    assert region.width == "100%"


def test_ellipsis_in_end_timestamp_drops_only_that_cue():
    doc = parse_vtt(
        "WEBVTT\n\n"
        "1\n00:00:01.000 --> 00:00:02.000\nOne\n\n"
        "2\n00:00:03.000 --> 00:25:56…ble\nBroken\n\n"
        "3\n00:00:05.000 --> 00:00:06.000\nThree\n"
    )
    assert [c.text for c in doc.cues] == ["One", "Three"]
    assert len(doc.errors) == 1
    assert doc.errors[0].severity == "error"
    assert doc.errors[0].line == 8


def test_invalid_start_side_reports_per_side():
    doc = parse_vtt("WEBVTT\n\nbad --> 00:02.000\nHi\n")
    assert doc.cues == ()
    assert _messages(doc) == ["Invalid start timestamp format: 'bad'"]

    doc = parse_vtt("WEBVTT\n\nbad --> worse\nHi\n")
    assert len(doc.errors) == 2


def test_identifier_without_timing_line():
    doc = parse_vtt("WEBVTT\n\norphan line\n\n00:01.000 --> 00:02.000\nHi\n")
    assert [c.text for c in doc.cues] == ["Hi"]
    assert _messages(doc, "error") == ["Invalid subtitle format"]
    assert doc.errors[0].line == 3


def test_reversed_timing_and_empty_text():
    doc = parse_vtt("WEBVTT\n\n00:05.000 --> 00:01.000\nText\n\n00:06.000 --> 00:07.000\n")
    assert (doc.cues[0].start_time, doc.cues[0].end_time) == (1000, 5000)
    assert _messages(doc, "warning") == [
        "Invalid timing: end time before start time. Timings have been swapped."
    ]
    assert _messages(doc, "error") == ["Empty subtitle text"]


def test_overlaps_are_not_reported_for_vtt():
    doc = parse_vtt("WEBVTT\n\n00:01.000 --> 00:04.000\nA\n\n00:03.000 --> 00:05.000\nB\n")
    assert len(doc.cues) == 2
    assert doc.errors is None


def test_empty_and_header_only_input():
    doc = parse_vtt("")
    assert doc.type == "unknown"
    assert _messages(doc) == ["Empty subtitle content"]

    doc = parse_vtt("WEBVTT\n")
    assert doc.cues == ()
    assert _messages(doc) == ["No subtitle cues found"]


SCREENCAST_A = (
    "WEBVTT\n\n"
    "1\n00:00:00.493 --> 00:00:04.483\n"
    "If you just have your cursor on a line, hit Control C and Control V, it'll copy that line.\n\n"
    "2\n00:00:04.663 --> 00:00:08.443\n"
    "You can also use Control X to delete an entire line.\n\n"
    "3\n00:00:08.443 --> 00:09:00.433\n"
    "A similar way to do something like this would be the alt button plus the arrow keys, "
    "that allows you to move lines up and down, or alt plus shift and the arrow keys, "
    "and that allows you to duplicate lines up and down.\n\n"
    "4\n00:09:883 --> 00:18:703\n"
    "You can also use alt plus mouse click in order to select multiple lines "
    "and then you can make changes on all those lines at once.\n\n"
    "5\n00:25:773 --> 00:39:463\n"
    "Another of my favorite shortcuts is Control D. If you just have your cursor inside of a word, "
    "hit Control D, it's going to highlight that word, and another use for this is if you have "
    "anything highlighted, you click Control D, it's going to highlight the next thing that has "
    "that same text, and you can continue to do that over and over again,\n\n"
    "6\n00:39:463 --> 00:42:553\n"
    "which is great if you need to rename a variable in a small scope.\n\n"
    "7\n00:42:863 --> 00:47:633\n"
    "Now, the Control P command allows you to search for files and open them up, "
    "so we can switch between our files.\n\n"
    "8\n00:47:803 --> 00:52:83\n"
    "Control Shift P allows you to run different commands from VS code, "
    "so I can open up my settings, for example.\n\n"
    "9\n00:53:193 --> 00:59:903\n"
    "And finally, you can hit Control plus the forward slash key, and that allows you to comment "
    "out a line, or if you highlight a bunch of code, you can comment it all out at once."
)

SCREENCAST_B = (
    "WEBVTT\n\n"
    "1\n00:00:00.220 --> 00:00:04.490\n"
    "If you just have your cursor on a line, hit control C and control V, it'll copy that line.\n\n"
    "2\n00:00:04.490 --> 00:07:550\nYou can also use control X to delete an entire line.\n\n"
    "3\n00:07:550 --> 00:13:560\n"
    "A similar way to do something like this would be the alt button plus the arrow keys "
    "that allows you to move lines up and down.\n\n"
    "4\n00:13:560 --> 00:18:870\n"
    "Or alt plus shift and the arrow keys and that allows you to duplicate lines up and down.\n\n"
    "5\n00:18:870 --> 00:25:430\n"
    "You can also use alt plus mouse click in order to select multiple lines "
    "and then you can make changes on all those lines at once.\n\n"
    "6\n00:25:850 --> 00:27:540\nAnother of my favorite shortcuts is control D.\n\n"
    "7\n00:27:540 --> 00:32:480\n"
    "If you just have your cursor inside a word, hit control D, it's going to highlight that word.\n\n"
    "8\n00:32:480 --> 00:38:810\n"
    "And another use for this is if you have anything highlighted, you click control D, "
    "it's going to highlight the next thing that has that same text.\n\n"
    "9\n00:38:810 --> 00:42:470\n"
    "And you can continue to do that over and over again, "
    "which is great if you need to rename a variable in a small scope.\n\n"
    "10\n00:42:470 --> 00:46:120\n"
    "Now the control P command allows you to search for files and open them up.\n\n"
    "11\n00:46:120 --> 00:47:350\nSo we can switch between our files.\n\n"
    "12\n00:47:350 --> 00:52:610\n"
    "Control Shift P allows you to run different commands from VS code, "
    "so I can open up my settings, for example.\n\n"
    "13\n00:53:040 --> 00:59:830\n"
    "And finally, you can hit control plus the forward slash key and that allows you to comment "
    "out a line or if you highlight a bunch of code, you can comment it all out at once."
)


def test_screencast_transcripts_with_mixed_timestamp_shapes():
    doc = parse_vtt(SCREENCAST_A)
    assert doc.errors is None
    assert len(doc.cues) == 9
    assert (doc.cues[3].start_time, doc.cues[3].end_time) == (9883, 18703)

    doc = parse_vtt(SCREENCAST_B)
    assert doc.errors is None
    assert len(doc.cues) == 13
    assert (doc.cues[1].end_time, doc.cues[2].start_time) == (7550, 7550)


def test_colon_before_milliseconds():
    doc = parse_vtt(
        "WEBVTT\n\n1\n00:00:00.220 --> 00:00:04.490\nValid cue\n\n"
        "2\n00:00:04:550 --> 00:00:07:550\nCue with colon before ms\n\n"
        "3\n00:00:08:560 --> 00:00:13:560\nAnother cue"
    )
    assert doc.errors is None
    assert [(c.start_time, c.end_time) for c in doc.cues] == [(220, 4490), (4550, 7550), (8560, 13560)]


def test_truncated_transcript_drops_only_the_cut_cue():
    doc = parse_vtt(
        "WEBVTT\n\n1\n00:00:00.352 --> 00:00:04.372\nSo if you just have your cursor on a line.\n\n"
        "2\n00:00:04.372 --> 00:00:08.012\nYou can also use control X to delete an entire line.\n\n"
        "3\n00:00:08.012 --> 00:09:08.792\nA similar way to do something like this.\n\n"
        "4\n00:09:08.792 --> 00:25:56…ble in a small scope.\n\n"
        "7\n00:42:442 --> 00:47:782\nNow, the control P command allows you to search for files.\n\n"
        "8\n00:47:782 --> 00:52:712\nControl shift P allows you to run different commands.\n\n"
        "9\n00:52:712 --> 00:59:992\nAnd finally, you can hit control plus the forward slash key."
    )
    assert len(doc.cues) == 6
    assert _messages(doc) == ["Invalid end timestamp format: '00:25:56…'"]
    assert doc.errors[0].line == 16
    assert doc.cues[3].start_time == 42442
