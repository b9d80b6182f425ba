"""Page-level tests: the Streamlit script driven through AppTest with a fake backend."""
import os

import pytest
from streamlit.testing.v1 import AppTest

from notemap.config import Settings
from notemap.orchestrator import Orchestrator

APP_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "app.py"))
STATS = {"totalFiles": 1, "uploadedFiles": ["graphs.md"]}
RESULTS = {
    "query": "graph", "total": 1,
    "results": [{"filename": "graphs.md", "frequency": 3, "snippet": "a graph is a set of edges"}],
    "related": [{"topic": "tree", "weight": 2}],
}


@pytest.fixture
def app(session, client):
    session.route("/stats", STATS)
    session.route("/search", RESULTS)
    orch = Orchestrator(client, Settings(upload_settle_delay=0), sleep=lambda s: None)
    at = AppTest.from_file(APP_PATH, default_timeout=10)
    at.session_state["orchestrator"] = orch
    at.run()
    return at, orch


def test_search_form_submits_query(app, session):
    at, orch = app
    assert not at.exception
    at.text_input(key="search_q").input("graph")
    at.button(key="search_btn").click()
    at.run()

    assert session.paths() == ["/api/stats", "/api/search"]
    assert session.calls[-1]["url"].endswith("/search?q=graph")
    assert orch.search.view.title == 'Search Results for "graph" (1 found)'
    assert not orch.search.busy


def test_search_form_with_blank_query_sends_nothing(app, session):
    at, orch = app
    at.text_input(key="search_q").input("   ")
    at.button(key="search_btn").click()
    at.run()

    assert session.paths() == ["/api/stats"]
    assert [n.message for n in orch.notifications.active()] == ["Please enter a search term"]
