# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import soupsieve

from ..config import AnalyzerConfig
from ..normalize import element_hit, result_from_hits
from ..snapshot import ElementHandle, Snapshot
from ..types import TestResult
from ._registry import analyzer

_CAPTION_KINDS = {"captions", "subtitles"}
_AUDIO_FILES = (
    "embed[src*='.mp3' i], embed[src*='.wav' i], object[data*='.mp3' i], object[data*='.wav' i]"
)
_MUTE_CONTROLS = "[aria-label*=mute i], [aria-label*=pause i], [aria-label*=stop i]"


def _has_source(el: ElementHandle) -> bool:
    return bool((el.attr("src") or "").strip()) or bool(el.query("source[src]"))


def _has_text_alternative(snapshot: Snapshot, el: ElementHandle) -> bool:
    if el.closest("[aria-describedby]") is not None:
        return True
    media_id = (el.attr("id") or "").strip()
    if media_id and snapshot.query(f"[aria-labelledby~='{soupsieve.escape(media_id)}']"):
        return True
    sibling = el.next_sibling()
    if sibling is not None and "transcript" in sibling.text().lower():
        return True
    parent = el.parent()
    return parent is not None and bool(parent.query("a[href*=transcript i]"))


def _alternatives(snapshot: Snapshot) -> list[dict]:
    hits = []
    for el in snapshot.query("audio, video"):
        if not _has_source(el) or _has_text_alternative(snapshot, el):
            continue
        if el.tag == "audio":
            hits.append(
                element_hit(
                    "missing-transcript",
                    "Audio element without a transcript or text alternative",
                    el,
                    help="Link a text transcript next to the audio player.",
                )
            )
        else:
            hits.append(
                element_hit(
                    "missing-media-alternative",
                    "Video element without a text alternative or transcript link",
                    el,
                    help="Describe video-only content in text or link a transcript.",
                )
            )
    return hits


def _captions(snapshot: Snapshot) -> list[dict]:
    hits = []
    for video in snapshot.query("video"):
        if not _has_source(video):
            continue
        kinds = {(t.attr("kind") or "").strip().lower() for t in video.query("track")}
        if kinds & _CAPTION_KINDS:
            continue
        hits.append(
            element_hit(
                "missing-captions",
                "Video element without a captions track",
                video,
                help='Add <track kind="captions"> to the video and review the caption quality manually.',
            )
        )
    return hits


def _audio_control(snapshot: Snapshot) -> list[dict]:
    hits = []
    for el in snapshot.query("audio[autoplay], video[autoplay]"):
        if el.attr("controls") is not None or el.attr("muted") is not None:
            continue
        parent = el.parent()
        if parent is not None and parent.query(_MUTE_CONTROLS):
            continue
        hits.append(
            element_hit(
                "autoplay-audio",
                f"Auto-playing <{el.tag}> without controls to pause, stop or mute it",
                el,
                help="Add the controls attribute or a separate pause button.",
            )
        )
    for el in snapshot.query(_AUDIO_FILES):
        hits.append(
            element_hit(
                "embedded-audio",
                "Embedded audio file; verify that it can be paused or stopped",
                el,
                help="Play audio through a player that exposes pause and volume controls.",
            )
        )
    return hits


@analyzer("media", criteria=("1.2.1", "1.2.2", "1.4.2"))
def check_media(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    return [
        result_from_hits(snapshot, "1.2.1", _alternatives(snapshot), config=config),
        result_from_hits(snapshot, "1.2.2", _captions(snapshot), config=config),
        result_from_hits(snapshot, "1.4.2", _audio_control(snapshot), config=config),
    ]
