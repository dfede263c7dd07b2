"""
Graph panel - NiceGUI host for a GraphSession.

Renders the session as inline SVG inside a positioned container, forwards
pointer/wheel events from the container, and bridges the two browser-only
signals the session needs:
- container size and devicePixelRatio (ResizeObserver)
- pointerdown anywhere outside the canvas (document listener)

Both bridges report back through NiceGUI's emitEvent / ui.on.
"""

import logging
from typing import Optional

from nicegui import ui

from vigil.graph import GraphSession, PointerPhase, Tooltip
from vigil.graph.interaction import pointer_event_from_payload

logger = logging.getLogger(__name__)

POINTER_KEYS = ['offsetX', 'offsetY', 'pointerId']
WHEEL_KEYS = ['offsetX', 'offsetY', 'deltaY']


class GraphPanel:
    """Binds one GraphSession to a canvas-like element on the current page."""

    def __init__(self, session: GraphSession):
        self.session = session
        self._container: Optional[ui.element] = None
        self._canvas: Optional[ui.html] = None
        self._tooltip: Optional[ui.element] = None
        self._tooltip_label: Optional[ui.label] = None
        self._tooltip_detail: Optional[ui.label] = None

    @property
    def dom_id(self) -> str:
        return f'c{self._container.id}' if self._container else ''

    def build(self) -> ui.element:
        """Create the panel elements in the current NiceGUI context."""
        with ui.element('div').classes('relative w-full h-full overflow-hidden select-none') \
                .style('touch-action: none; min-height: 240px') as container:
            self._container = container
            self._canvas = ui.html('', sanitize=False).classes('absolute inset-0')
            with ui.element('div').classes(
                'absolute z-10 max-w-64 rounded bg-slate-900/95 border border-cyan-400/40 '
                'px-3 py-2 text-xs text-slate-100 shadow-lg pointer-events-none'
            ) as tooltip:
                self._tooltip = tooltip
                self._tooltip_label = ui.label('').classes('font-bold')
                self._tooltip_detail = ui.label('').classes('text-slate-300')
            tooltip.set_visibility(False)

        container.on('pointerdown', lambda e: self._on_pointer(PointerPhase.DOWN, e), POINTER_KEYS)
        container.on('pointermove', lambda e: self._on_pointer(PointerPhase.MOVE, e), POINTER_KEYS)
        container.on('pointerup', lambda e: self._on_pointer(PointerPhase.UP, e), POINTER_KEYS)
        container.on('pointerleave', lambda e: self._on_pointer(PointerPhase.LEAVE, e), POINTER_KEYS)
        container.on('pointercancel', lambda e: self._on_pointer(PointerPhase.CANCEL, e), POINTER_KEYS)
        container.on('wheel.prevent', self._on_wheel, WHEEL_KEYS)

        ui.on('graph_resize', self._on_resize)
        ui.on('graph_outside_pointerdown', lambda e: self.session.dismiss_outside())

        self.session.add_change_listener(lambda session: self.redraw())
        self.session.add_tooltip_listener(self.show_tooltip)

        # Elements only exist in the DOM once the client is connected
        ui.timer(0.1, self._install_bridges, once=True)
        return container

    def _install_bridges(self) -> None:
        ui.run_javascript(f'''
            (function() {{
                const el = document.getElementById('{self.dom_id}');
                if (!el) return;
                const report = () => emitEvent('graph_resize', {{
                    width: el.clientWidth,
                    height: el.clientHeight,
                    dpr: window.devicePixelRatio || 1,
                }});
                new ResizeObserver(report).observe(el);
                report();
                if (!window.vigilGraphDismissHooked) {{
                    document.addEventListener('pointerdown', (event) => {{
                        const canvas = document.getElementById('{self.dom_id}');
                        if (!canvas || canvas.contains(event.target)) return;
                        emitEvent('graph_outside_pointerdown');
                    }});
                    window.vigilGraphDismissHooked = true;
                }}
            }})();
        ''')

    # --- Event handlers ---

    def _on_pointer(self, phase: PointerPhase, event) -> None:
        raw = event.args if hasattr(event, 'args') else event
        pointer_event = pointer_event_from_payload(phase, raw)
        if pointer_event is None:
            return
        self.session.handle_pointer(pointer_event)

    def _on_wheel(self, event) -> None:
        raw = event.args if hasattr(event, 'args') else event
        if not isinstance(raw, dict):
            return
        try:
            x, y, delta = float(raw['offsetX']), float(raw['offsetY']), float(raw['deltaY'])
        except (KeyError, TypeError, ValueError):
            return
        self.session.handle_wheel(x, y, delta)

    def _on_resize(self, event) -> None:
        raw = event.args if hasattr(event, 'args') else {}
        if not isinstance(raw, dict):
            return
        try:
            width, height = float(raw['width']), float(raw['height'])
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Ignoring malformed resize payload {raw!r}")
            return
        dpr = raw.get('dpr')
        self.session.resize(width, height, float(dpr) if dpr else None)

    # --- Output ---

    def redraw(self) -> None:
        if self._canvas is None:
            return
        self._canvas.content = self.session.render_svg(id_prefix=self.dom_id or 'graph')

    def show_tooltip(self, tooltip: Optional[Tooltip]) -> None:
        if self._tooltip is None:
            return
        if tooltip is None:
            self._tooltip.set_visibility(False)
            return
        self._tooltip_label.text = tooltip.label
        self._tooltip_detail.text = tooltip.detail
        self._tooltip.style(f'left: {tooltip.left:.0f}px; top: {tooltip.top:.0f}px')
        self._tooltip.set_visibility(True)
