"""
Read-only access to the video library.

The manifest (data/videos.json) is written by the upload service; this
module only turns its entries into VideoMeta values for the graph and
filters them for the library list.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from vigil.paths import get_manifest_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoMeta:
    id: str
    name: str
    src: str = ""
    tags: List[str] = field(default_factory=list)
    summary: str = ""
    duration_seconds: float = 0.0
    duration_formatted: Optional[str] = None
    uploaded_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["VideoMeta"]:
        """
        Build a VideoMeta from a manifest entry.
        Accepts the manifest's camelCase keys as well as snake_case ones.
        Returns None when the entry has neither an id nor a name.
        """
        if not isinstance(data, dict):
            return None
        video_id = str(data.get("id") or "").strip()
        name = str(data.get("name") or "").strip()
        if not video_id and not name:
            return None

        duration = data.get("durationSeconds", data.get("duration_seconds"))
        return cls(
            id=video_id or name,
            name=name,
            src=str(data.get("src") or ""),
            tags=parse_tags(data.get("tags")),
            summary=str(data.get("summary") or ""),
            duration_seconds=_as_seconds(duration),
            duration_formatted=data.get("durationFormatted", data.get("duration_formatted")),
            uploaded_at=data.get("uploadedAt", data.get("uploaded_at")),
        )


def parse_tags(raw: Union[str, List[Any], None]) -> List[str]:
    """Tags arrive as a list or as the upload form's comma separated string."""
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, (list, tuple)):
        return []
    return [str(t).strip() for t in raw if str(t).strip()]


def _as_seconds(value: Any) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(seconds) or seconds < 0:
        return 0.0
    return seconds


def format_duration(seconds: Optional[float]) -> str:
    """Format seconds as MM:SS; unknown or non-positive durations give '--:--'."""
    if seconds is None or not math.isfinite(seconds) or seconds <= 0:
        return "--:--"
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins:02d}:{secs:02d}"


def load_manifest(manifest_path: Optional[Path] = None) -> List[VideoMeta]:
    """
    Load all videos from the manifest.

    The manifest is either {"videos": [...]} or a bare list. A missing or
    unreadable manifest yields an empty library.
    """
    path = Path(manifest_path) if manifest_path else get_manifest_path()
    if not path.exists():
        logger.info(f"No video manifest at {path}")
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to read video manifest {path}: {e}")
        return []

    entries = payload.get("videos") if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        logger.warning(f"Video manifest {path} has no video list")
        return []

    videos = []
    for entry in entries:
        video = VideoMeta.from_dict(entry)
        if video is None:
            logger.warning(f"Skipping invalid manifest entry: {entry!r}")
            continue
        videos.append(video)
    return videos


def filter_videos(videos: List[VideoMeta], query: str = "") -> List[VideoMeta]:
    """Case-insensitive substring match on the video name (or id when unnamed)."""
    keyword = (query or "").strip().lower()
    if not keyword:
        return list(videos)
    return [v for v in videos if keyword in (v.name or v.id).lower()]


def find_video(videos: List[VideoMeta], video_id: Optional[str]) -> Optional[VideoMeta]:
    for video in videos:
        if video.id == video_id:
            return video
    return None


def initial_video_id(videos: List[VideoMeta]) -> Optional[str]:
    """The library opens on the first manifest entry."""
    return videos[0].id if videos else None
