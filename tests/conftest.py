import json
import os
from unittest.mock import patch

import pytest
import requests

SERVER = "https://fs.example.com"

CONFIG_VARS = (
    "SERVER_ADDRESS",
    "API_TOKEN",
    "FSOPS_RETRY_COUNT",
    "FSOPS_RETRY_SLEEP_SEC",
    "FSOPS_REMOTE_PREFIX",
    "LOG_LEVEL",
)


def make_response(
    status_code=200, payload=None, reason="OK", url=f"{SERVER}/api/simplefs/ops", body=None
):
    """Build a real requests.Response carrying a JSON body, or `body` verbatim."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = url
    if body is not None:
        response._content = body
    else:
        response._content = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return response


def remote(path):
    return {"pathType": "REMOTE", "remote": path}


def local(path):
    return {"pathType": "LOCAL", "local": path}


@pytest.fixture
def list_wire():
    return {"asyncOp": "LIST", "list": {"opID": "0102", "path": remote("/team/foo")}}


@pytest.fixture
def read_wire():
    return {
        "asyncOp": "READ",
        "read": {"opID": [0xAB], "path": local("/tmp/x"), "offset": 10, "size": 20},
    }


@pytest.fixture
def copy_wire():
    return {
        "asyncOp": "COPY",
        "copy": {"opID": "ff00", "src": remote("/a"), "dest": local("/b")},
    }


@pytest.fixture
def unknown_wire():
    return {"asyncOp": "SYMLINK", "symlink": {"opID": "01"}}


@pytest.fixture
def all_kinds_wire():
    """One description of every kind, in ordinal order."""
    return [
        {"asyncOp": 0, "list": {"opID": "01", "path": remote("/l")}},
        {"asyncOp": 1, "listRecursive": {"opID": "02", "path": remote("/lr")}},
        {"asyncOp": 2, "read": {"opID": "03", "path": local("/r"), "offset": 1, "size": 2}},
        {"asyncOp": 3, "write": {"opID": "04", "path": local("/w"), "offset": 3}},
        {"asyncOp": 4, "copy": {"opID": "05", "src": remote("/c1"), "dest": local("/c2")}},
        {"asyncOp": 5, "move": {"opID": "06", "src": local("/m1"), "dest": remote("/m2")}},
        {"asyncOp": 6, "remove": {"opID": "07", "path": remote("/rm")}},
    ]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no fsops settings in the environment or working directory."""
    with patch.dict(os.environ):
        for name in CONFIG_VARS:
            os.environ.pop(name, None)
        monkeypatch.chdir(tmp_path)
        yield
