"""Tests for the request client and payload decoding."""
import pytest
import requests

from notemap.api_client import ApiClient, Endpoint, Result, build_url
from notemap.errors import DecodeError, ErrorKind, HttpError, NetworkError
from notemap.models import LearningPath, MindMapGraph, TopicConnection, UploadedFile

BASE_URL = "http://notes.test/api"


def test_build_url_percent_encodes_values():
    url = build_url(BASE_URL, Endpoint.SEARCH, {"q": "linear algebra & more/less"})
    assert url == f"{BASE_URL}/search?q=linear%20algebra%20%26%20more%2Fless"


def test_build_url_without_params():
    assert build_url(BASE_URL + "/", "/stats") == f"{BASE_URL}/stats"


def test_search_success(session, client):
    session.route("/search", {
        "query": "recursion", "total": 1,
        "results": [{"filename": "cs101.txt", "frequency": 7, "snippet": "\"base case ...\""}],
        "related": [{"topic": "stack", "weight": 3}],
    })
    result = client.search("recursion")
    assert result.ok
    assert result.value.results[0].filename == "cs101.txt"
    assert result.value.related == (TopicConnection("stack", 3),)
    assert session.calls[0]["method"] == "GET"
    assert session.calls[0]["url"].endswith("/search?q=recursion")


def test_non_2xx_is_http_error(session, client):
    session.route("/learning-path", {"error": "Topic not found"}, status=404)
    result = client.learning_path("nope")
    assert not result.ok
    assert isinstance(result.error, HttpError)
    assert result.error.kind is ErrorKind.HTTP
    assert result.error.status == 404


def test_transport_failure_is_network_error(session, client):
    session.route("/stats", error=requests.ConnectionError("refused"))
    result = client.stats()
    assert isinstance(result.error, NetworkError)
    assert result.error.kind is ErrorKind.NETWORK


def test_invalid_json_is_decode_error(session, client):
    session.route("/mindmap", text="<html>oops</html>")
    result = client.mindmap("Algebra", 2)
    assert isinstance(result.error, DecodeError)


def test_wrong_shape_is_decode_error(session, client):
    session.route("/mindmap", {"center": "Algebra", "connections": [{"topic": "Calculus", "weight": 0}]})
    result = client.mindmap("Algebra", 2)
    assert result.error.kind is ErrorKind.DECODE


def test_mindmap_sends_topic_and_depth(session, client):
    session.route("/mindmap", {"center": "Set Theory", "connections": []})
    result = client.mindmap("Set Theory", 3)
    assert result.value == MindMapGraph("Set Theory", ())
    assert session.calls[0]["url"].endswith("/mindmap?topic=Set%20Theory&depth=3")


def test_upload_posts_multipart_file(session, client):
    session.route("/upload", {"message": "File uploaded successfully"})
    result = client.upload(UploadedFile("notes.txt", b"hello", "text/plain"))
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["files"] == {"file": ("notes.txt", b"hello", "text/plain")}
    assert result.value.message == "File uploaded successfully"


def test_timeout_is_passed_through(session):
    client = ApiClient(BASE_URL, session=session, timeout=2.5)
    session.route("/stats", {"totalFiles": 0, "uploadedFiles": []})
    client.stats()
    assert session.calls[0]["timeout"] == 2.5


def test_each_call_is_a_single_attempt(session, client):
    session.route("/search", status=503)
    client.search("x")
    assert len(session.calls) == 1


def test_result_unwrap():
    assert Result.success(3).unwrap() == 3
    with pytest.raises(HttpError):
        Result.failure(HttpError(500)).unwrap()


def test_stats_tolerates_missing_fields(session, client):
    session.route("/stats", {})
    stats = client.stats().unwrap()
    assert stats.total_files == 0
    assert stats.uploaded_files == ()


def test_learning_path_order_must_be_contiguous():
    with pytest.raises(ValueError):
        LearningPath.from_payload({"topic": "Sets", "path": [
            {"topic": "Sets", "order": 1}, {"topic": "Functions", "order": 3},
        ]})


def test_search_frequency_rejects_booleans(session, client):
    session.route("/search", {"query": "q", "total": 1,
                              "results": [{"filename": "a.txt", "frequency": True}], "related": []})
    assert client.search("q").error.kind is ErrorKind.DECODE
