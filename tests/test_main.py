from __future__ import annotations

import pytest

import main
from tools import mcp_server


def test_main_exits_when_credentials_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("IGDB_CLIENT_ID", raising=False)
    monkeypatch.delenv("IGDB_CLIENT_SECRET", raising=False)
    ran = []
    monkeypatch.setattr(main.mcp, "run", lambda *args, **kwargs: ran.append(True))

    with pytest.raises(SystemExit) as exc_info:
        main.main()

    assert exc_info.value.code == 1
    assert ran == []


def test_main_installs_client_and_serves(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IGDB_CLIENT_ID", "abc")
    monkeypatch.setenv("IGDB_CLIENT_SECRET", "shh")
    monkeypatch.setattr(mcp_server, "_client", None)
    ran = []
    monkeypatch.setattr(main.mcp, "run", lambda *args, **kwargs: ran.append(True))

    main.main()

    assert ran == [True]
    assert mcp_server._client is not None
