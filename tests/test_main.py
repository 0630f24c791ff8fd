"""
Tests for the launcher helpers (no servers are started).
"""

import sys

from api.app import create_app
from config import STREAMLIT_APP
from main import _page_url, _parse_args, _streamlit_command


class TestLauncher:
    def test_page_url_points_at_streamlit_page_with_assessment_id(self):
        assert _page_url("127.0.0.1", 8501, "a-1") == "http://127.0.0.1:8501/?id=a-1"

    def test_page_url_without_assessment(self):
        assert _page_url("127.0.0.1", 8501, None) == "http://127.0.0.1:8501/"

    def test_streamlit_command_runs_the_attempt_page(self):
        command = _streamlit_command("0.0.0.0", 9000)

        assert command[:5] == [sys.executable, "-m", "streamlit", "run", STREAMLIT_APP]
        assert command[command.index("--server.port") + 1] == "9000"
        assert command[command.index("--server.address") + 1] == "0.0.0.0"

    def test_parse_args(self):
        args = _parse_args(["--port", "9100", "--ui-port", "9101", "--assessment", "a-1", "--no-browser"])

        assert (args.port, args.ui_port, args.assessment, args.no_browser) == (9100, 9101, "a-1", True)


class TestApiRoutes:
    def test_api_has_no_static_index_route(self, store_client):
        app = create_app(store_client=store_client, cleanup_sessions=False)

        assert "/" not in {route.path for route in app.routes}
