"""
notemap — Notes Explorer

Client for the notes-analysis backend: upload notes, search indexed content,
ask for a learning path through a topic, and map topic co-occurrence as a
radial mind map.

Run:  streamlit run app.py
"""

from html import escape as esc

import streamlit as st

from notemap.api_client import ApiClient
from notemap.config import load_settings
from notemap.controllers import EmptyState, ViewController
from notemap.logger import get_logger
from notemap.models import UploadedFile
from notemap.navigation import ActiveView
from notemap.notifications import NoticeKind
from notemap.orchestrator import (
    ConfigureBackend,
    Navigate,
    Orchestrator,
    RefreshStats,
    RequestLearningPath,
    RequestMindMap,
    SelectFiles,
    SubmitSearch,
    SubmitUpload,
)
from notemap.render_surface import render_mindmap_html

log = get_logger("app")

# ── Page config ───────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="notemap — Notes Explorer",
    page_icon="🧠",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── Theme CSS ─────────────────────────────────────────────────────────────────
st.markdown("""
<style>
:root {
    --accent:   #667eea;
    --accent2:  #764ba2;
    --panel:    #ffffff;
    --muted:    #666666;
    --border:   rgba(102,126,234,0.25);
}

.nm-header { font-size: 2rem; font-weight: 800; color: var(--accent); margin-bottom: 0.2rem; }
.nm-sub    { color: var(--muted); font-size: 0.9rem; margin-bottom: 1.5rem; }

.result-card {
    background: var(--panel); border: 1px solid var(--border); border-radius: 10px;
    padding: 0.9rem 1.1rem; margin-bottom: 0.7rem;
}
.result-header { display: flex; justify-content: space-between; align-items: center; }
.result-title  { font-weight: 700; margin: 0; }
.result-badge  {
    background: rgba(102,126,234,0.12); color: var(--accent); border-radius: 12px;
    padding: 0.15rem 0.6rem; font-size: 0.8rem; font-weight: 600;
}
.result-snippet { color: #444; font-style: italic; margin-top: 0.4rem; }

.topic-tag, .connection-tag {
    display: inline-block; border-radius: 14px; padding: 0.25rem 0.8rem;
    margin: 0.2rem; font-size: 0.85rem;
}
.topic-tag { background: rgba(102,126,234,0.12); color: var(--accent); }
.connection-tag { color: #fff; }
.connection-tag.strong { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }
.connection-tag.medium { background: linear-gradient(135deg, #5d9cec 0%, #6a7be4 100%); }
.connection-tag.weak   { background: linear-gradient(135deg, #aaa 0%, #888 100%); }

.path-step { display: flex; gap: 1rem; align-items: flex-start; margin-bottom: 0.9rem; }
.step-number {
    min-width: 2.2rem; height: 2.2rem; border-radius: 50%; background: var(--accent);
    color: #fff; display: flex; align-items: center; justify-content: center; font-weight: 700;
}
.step-content h4 { margin: 0 0 0.2rem 0; }
.step-content p  { margin: 0; color: #444; }

.file-item {
    display: flex; justify-content: space-between; align-items: center;
    border: 1px solid var(--border); border-radius: 8px; padding: 0.6rem 0.9rem; margin-bottom: 0.5rem;
}
.file-item p { margin: 0; color: var(--muted); font-size: 0.8rem; }

.empty-state { text-align: center; padding: 2.5rem 1rem; color: var(--muted); }
.empty-state .icon { font-size: 2rem; }
.empty-text  { color: var(--muted); text-align: center; padding: 1.5rem; }
</style>
""", unsafe_allow_html=True)


# ── Session state ─────────────────────────────────────────────────────────────
def init():
    if "orchestrator" not in st.session_state:
        settings = load_settings()
        client = ApiClient(settings.api_base_url, timeout=settings.request_timeout)
        st.session_state.orchestrator = Orchestrator(client, settings)
        log.info("notemap session created")
    st.session_state.orchestrator.start()

init()
orch: Orchestrator = st.session_state.orchestrator


# ── Helpers ───────────────────────────────────────────────────────────────────
def empty_state(state: EmptyState):
    st.markdown(
        f'<div class="empty-state"><div class="icon">{state.icon}</div>'
        f'<h3>{esc(state.title)}</h3><p>{esc(state.message)}</p></div>',
        unsafe_allow_html=True,
    )


def run_action(controller: ViewController, command):
    with st.spinner(controller.busy_label):
        orch.dispatch(command)
    st.rerun()


def action_button(key: str, controller: ViewController, make_command):
    """Trigger button bound to a controller's ControlState; dispatches on click."""
    slot = st.empty()
    control = controller.control
    clicked = slot.button(control.label, key=key, disabled=control.disabled,
                          type="primary", width="stretch")
    if clicked:
        slot.button(controller.busy_label, key=f"{key}_busy", disabled=True, width="stretch")
        run_action(controller, make_command())


def _on_nav_change():
    orch.dispatch(Navigate(st.session_state.nav))


@st.fragment(run_every=1.0)
def notices():
    for notice in orch.notifications.active():
        col_msg, col_x = st.columns([12, 1])
        with col_msg:
            if notice.kind is NoticeKind.ERROR:
                st.error(notice.message, icon="⚠️")
            else:
                st.success(notice.message, icon="✅")
        with col_x:
            st.button("✕", key=f"dismiss_{notice.id}",
                      on_click=orch.notifications.dismiss, args=(notice.id,))


# ── Sidebar ───────────────────────────────────────────────────────────────────
with st.sidebar:
    st.markdown('<div class="nm-header">notemap</div>', unsafe_allow_html=True)
    st.markdown('<div class="nm-sub">Notes Explorer</div>', unsafe_allow_html=True)

    views = list(ActiveView)
    st.radio(
        "Navigate",
        views,
        index=views.index(orch.active_view),
        format_func=lambda v: v.label,
        key="nav",
        on_change=_on_nav_change,
        label_visibility="collapsed",
    )

    st.divider()
    stats_view = orch.stats.view
    c1, c2 = st.columns(2)
    c1.metric("Files", stats_view.total_files)
    c2.metric("Keywords", stats_view.total_keywords, help="Estimated from the file count")
    st.button("↻ Refresh stats", width="stretch",
              disabled=orch.stats.control.disabled,
              on_click=orch.dispatch, args=(RefreshStats(),))

    with st.expander("⚙ BACKEND"):
        base_url = st.text_input("API base URL", value=orch.client.base_url)
        if base_url != orch.client.base_url:
            orch.dispatch(ConfigureBackend(base_url))


# ── Main UI ───────────────────────────────────────────────────────────────────
notices()
active = orch.active_view


# ── VIEW: SEARCH ──────────────────────────────────────────────────────────────
if active is ActiveView.SEARCH:
    st.markdown('<div class="nm-header">🔍 Search Notes</div>', unsafe_allow_html=True)
    # a form so Enter in the query box submits too
    with st.form("search_form", border=False):
        col1, col2 = st.columns([4, 1])
        with col1:
            query = st.text_input("Search term", placeholder="e.g. recursion", key="search_q",
                                  label_visibility="collapsed")
        with col2:
            control = orch.search.control
            searched = st.form_submit_button(control.label, key="search_btn", disabled=control.disabled,
                                             type="primary", width="stretch")
    if searched:
        run_action(orch.search, SubmitSearch(query))

    view = orch.search.view
    results_col, related_col = st.columns([3, 1])
    with results_col:
        if view.title:
            st.subheader(view.title)
        for card in view.cards:
            st.markdown(
                f'<div class="result-card"><div class="result-header">'
                f'<h4 class="result-title">{esc(card.title)}</h4>'
                f'<span class="result-badge">{esc(card.badge)}</span></div>'
                f'<p class="result-snippet">{esc(card.snippet)}</p></div>',
                unsafe_allow_html=True,
            )
        if view.empty:
            empty_state(view.empty)
    with related_col:
        st.markdown("**Related topics**")
        if view.related:
            st.markdown("".join(f'<span class="topic-tag">{esc(t)}</span>' for t in view.related),
                        unsafe_allow_html=True)
        elif view.related_empty:
            st.markdown(f'<p class="empty-text">{esc(view.related_empty)}</p>', unsafe_allow_html=True)


# ── VIEW: UPLOAD ──────────────────────────────────────────────────────────────
elif active is ActiveView.UPLOAD:
    st.markdown('<div class="nm-header">📂 Upload Notes</div>', unsafe_allow_html=True)
    picked = st.file_uploader(
        "Drop a notes file here",
        type=["txt", "md"],
        accept_multiple_files=True,
        key=f"uploader_{orch.upload.selection_generation}",
    )
    files = [UploadedFile(f.name, f.getvalue(), f.type) for f in (picked or [])]
    orch.dispatch(SelectFiles(files))
    if len(files) > 1:
        st.caption(f"Only the first file is uploaded: {files[0].name}")

    bar_slot = st.empty()

    def _show_progress(value):
        if value is None:
            bar_slot.empty()
        else:
            bar_slot.progress(value, text=f"{value}%")

    orch.upload.progress_listener = _show_progress
    action_button("upload_btn", orch.upload, SubmitUpload)

    st.subheader("Uploaded files")
    stats_view = orch.stats.view
    for entry in stats_view.files:
        st.markdown(
            f'<div class="file-item"><div><h4>{esc(entry.filename)}</h4><p>🕒 {entry.note}</p></div>'
            f'<span class="result-badge">✓ {entry.status}</span></div>',
            unsafe_allow_html=True,
        )
    if stats_view.files_empty:
        empty_state(stats_view.files_empty)


# ── VIEW: LEARNING PATH ───────────────────────────────────────────────────────
elif active is ActiveView.LEARNING:
    st.markdown('<div class="nm-header">🧭 Learning Path</div>', unsafe_allow_html=True)
    col1, col2 = st.columns([4, 1])
    with col1:
        topic = st.text_input("Topic", placeholder="e.g. algebra", key="path_topic",
                              label_visibility="collapsed")
    with col2:
        action_button("path_btn", orch.learning, lambda: RequestLearningPath(topic))

    view = orch.learning.view
    if view.title:
        st.subheader(view.title)
    for step in view.steps:
        st.markdown(
            f'<div class="path-step"><div class="step-number">{step.order}</div>'
            f'<div class="step-content"><h4>{esc(step.topic)}</h4><p>{esc(step.guidance)}</p></div></div>',
            unsafe_allow_html=True,
        )
    if view.empty:
        empty_state(view.empty)


# ── VIEW: MIND MAP ────────────────────────────────────────────────────────────
elif active is ActiveView.MINDMAP:
    st.markdown('<div class="nm-header">🧠 Mind Map</div>', unsafe_allow_html=True)
    col1, col2, col3 = st.columns([3, 1, 1])
    with col1:
        mm_topic = st.text_input("Centre topic", placeholder="e.g. algebra", key="mm_topic",
                                 label_visibility="collapsed")
    with col2:
        depth = st.slider("Depth", 1, orch.settings.max_depth, orch.settings.default_depth, key="mm_depth")
    with col3:
        action_button("mm_btn", orch.mindmap, lambda: RequestMindMap(mm_topic, depth))

    view = orch.mindmap.view
    map_col, side_col = st.columns([3, 1])
    with map_col:
        if view.plan is not None:
            st.components.v1.html(render_mindmap_html(view.plan),
                                  height=int(view.plan.height) + 20, scrolling=False)
        elif view.empty:
            empty_state(view.empty)
    with side_col:
        if view.summary:
            st.markdown(f"**{view.summary}**")
            st.caption("Connection strength (weight) shows how often topics appear together.")
        if view.connections:
            st.markdown(
                "".join(f'<span class="connection-tag {c.tier}">{esc(c.tag)}</span>' for c in view.connections),
                unsafe_allow_html=True,
            )
        elif view.connections_empty:
            st.markdown(f'<p class="empty-text">{esc(view.connections_empty)}</p>', unsafe_allow_html=True)
