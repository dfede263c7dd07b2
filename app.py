"""
Main NiceGUI application for Vigil.

Lists the videos from the manifest, plays the selected one and renders its
metadata graph through a GraphPanel bound to a per-client GraphSession.
"""

import logging
import sys

from dotenv import load_dotenv
from nicegui import app, ui

load_dotenv()

from vigil.config import get_edge_mode, get_graph_heuristics, get_log_level, get_port, load_config
from vigil.graph import GraphSession
from vigil.graph_panel import GraphPanel
from vigil.paths import ensure_data_dir
from vigil.video_library import (
    VideoMeta,
    filter_videos,
    find_video,
    format_duration,
    initial_video_id,
    load_manifest,
)

config = load_config()
logging.basicConfig(
    level=get_log_level(config),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger('vigil')

# Ensure required directories exist on startup
data_dir = ensure_data_dir()
app.add_media_files('/media', data_dir)


def media_url(video: VideoMeta) -> str:
    """Map a manifest src to a URL the browser can load."""
    src = (video.src or '').strip()
    if src.startswith(('http://', 'https://', '/')):
        return src
    return f"/media/{src.replace(chr(92), '/').split('/')[-1]}" if src else ''


@ui.page('/')
def index():
    ui.dark_mode(True)
    videos = load_manifest()
    logger.info(f"Loaded {len(videos)} videos from manifest")

    session = GraphSession(get_graph_heuristics(config), get_edge_mode(config))
    state = {'query': '', 'current_id': None}

    with ui.row().classes('w-full h-[calc(100vh-2rem)] no-wrap gap-4'):
        # 1. Library
        with ui.column().classes('w-80 h-full gap-2'):
            with ui.row().classes('items-center gap-2'):
                ui.icon('videocam', size='md').classes('text-primary')
                ui.label('Vigil').classes('text-lg font-bold')
            search = ui.input(placeholder='Search videos').props('dense outlined clearable').classes('w-full')
            count_label = ui.label('').classes('text-xs text-gray-400')
            library = ui.column().classes('w-full gap-1 overflow-y-auto')

        # 2. Player + graph
        with ui.column().classes('flex-1 h-full gap-2'):
            player_box = ui.column().classes('w-full')
            with ui.row().classes('w-full items-center justify-between'):
                ui.label('Metadata graph').classes('text-sm font-bold')
                with ui.row().classes('gap-1'):
                    ui.button(icon='refresh', on_click=session.rebuild_graph).props('flat dense').tooltip('Refresh graph')
                    ui.button(icon='fullscreen', on_click=lambda: fullscreen.toggle()).props('flat dense').tooltip('Fullscreen')
            with ui.card().classes('w-full flex-1 p-0 overflow-hidden'):
                panel = GraphPanel(session)
                panel.build()

    fullscreen = ui.fullscreen(on_value_change=lambda e: session.set_fullscreen(e.value))

    def render_player():
        player_box.clear()
        video = find_video(videos, state['current_id'])
        with player_box:
            if video is None:
                ui.label('Select a video from the library').classes('text-gray-400')
                return
            url = media_url(video)
            if url:
                ui.video(url).classes('w-full max-h-80')
            ui.label(video.name or video.id).classes('text-base font-bold')

    def select_video(video_id: str):
        state['current_id'] = video_id
        session.set_video(find_video(videos, video_id))
        render_player()
        render_library()

    def render_library():
        visible = filter_videos(videos, state['query'])
        count_label.text = (f"{len(visible)} of {len(videos)} videos" if state['query']
                            else f"{len(videos)} videos")
        library.clear()
        with library:
            if not visible:
                ui.label('No matching videos' if state['query'] else 'The library is empty').classes('text-gray-400')
            for video in visible:
                selected = video.id == state['current_id']
                with ui.card().classes('w-full p-2 cursor-pointer' + (' border border-primary' if selected else '')) \
                        .on('click', lambda _, vid=video.id: select_video(vid)):
                    ui.label(video.name or video.id).classes('text-sm font-bold')
                    with ui.row().classes('gap-1 items-center'):
                        ui.label(video.duration_formatted or format_duration(video.duration_seconds)) \
                            .classes('text-xs text-gray-400')
                        for tag in video.tags[:3]:
                            ui.badge(tag).props('outline')

    def on_search(e):
        state['query'] = e.value or ''
        render_library()

    search.on_value_change(on_search)

    initial_id = initial_video_id(videos)
    if initial_id:
        select_video(initial_id)
    else:
        render_library()
        render_player()


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='Vigil',
        port=get_port(config),
        reload=not getattr(sys, 'frozen', False),
    )
