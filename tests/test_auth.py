import stat

import httpx
import pytest

import auth
from auth import Credentials, load_credentials, save_credentials, verify_credentials


@pytest.fixture(autouse=True)
def isolated_credentials(tmp_path, monkeypatch):
    monkeypatch.setattr(auth, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(auth, "CREDENTIALS_FILE", tmp_path / "credentials.json")
    monkeypatch.delenv(auth.API_KEY_ENV, raising=False)
    monkeypatch.delenv(auth.SECRET_KEY_ENV, raising=False)


def test_no_credentials():
    assert load_credentials() is None


def test_environment_credentials(monkeypatch):
    monkeypatch.setenv(auth.API_KEY_ENV, "api")
    monkeypatch.setenv(auth.SECRET_KEY_ENV, "secret")

    assert load_credentials() == Credentials(api_key="api", secret_key="secret")


def test_saved_credentials_are_private_and_loadable():
    save_credentials(Credentials(api_key="api", secret_key="secret"))

    mode = stat.S_IMODE(auth.CREDENTIALS_FILE.stat().st_mode)
    assert mode == 0o600
    assert load_credentials() == Credentials(api_key="api", secret_key="secret")


def test_environment_wins_over_file(monkeypatch):
    save_credentials(Credentials(api_key="from-file"))
    monkeypatch.setenv(auth.API_KEY_ENV, "from-env")

    assert load_credentials().api_key == "from-env"


def test_broken_file_is_ignored():
    auth.CREDENTIALS_FILE.write_text("[1, 2")

    assert load_credentials() is None


def test_verify_credentials(monkeypatch):
    seen = []

    def fake_post(url, json, headers, timeout):
        seen.append((url, headers["Authorization"]))
        return httpx.Response(200, json={"suggestions": []})

    monkeypatch.setattr(auth.httpx, "post", fake_post)

    assert verify_credentials(Credentials(api_key="api"), "https://provider/rs")
    assert seen == [("https://provider/rs/suggest/address", "Token api")]


def test_verify_credentials_rejected(monkeypatch):
    monkeypatch.setattr(
        auth.httpx,
        "post",
        lambda url, json, headers, timeout: httpx.Response(403, text="forbidden"),
    )

    assert not verify_credentials(Credentials(api_key="bad"), "https://provider/rs")
