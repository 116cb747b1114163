import io

import pytest
from rich.console import Console
from typer.testing import CliRunner

import cli.main as cli_main
from conftest import FakeDiscogsApi, search_result
from core.services.cover_resolver import DISCOGS_API_URL, build_search_url

runner = CliRunner()

SEARCH = build_search_url(DISCOGS_API_URL, artist="Radiohead", title="OK Computer")


class FakeHttpClient(FakeDiscogsApi):
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


def flat(text: str) -> str:
    return " ".join(text.split())


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DISCOGS_TOKEN", "tok")
    monkeypatch.delenv("DISCOGS_COVER_DISCOGS_TOKEN", raising=False)
    monkeypatch.delenv("DISCOGS_COVER_DEFAULT_STRATEGY", raising=False)
    monkeypatch.delenv("DISCOGS_COVER_PROMPT_MAX_ATTEMPTS", raising=False)


@pytest.fixture
def install_api(monkeypatch):
    def install(responses, images=None) -> FakeHttpClient:
        api = FakeHttpClient(responses, images)
        monkeypatch.setattr(cli_main, "DiscogsHttpClient", lambda settings: api)
        return api

    return install


def test_fetch_saves_cover(install_api, tmp_path):
    api = install_api(
        {
            SEARCH: {"results": [search_result(1)]},
            search_result(1)["resource_url"]: {"images": [{"type": "primary", "uri": "http://img/ok.jpg"}]},
        },
        images={"http://img/ok.jpg": b"jpeg-bytes"},
    )
    target = tmp_path / "out"

    result = runner.invoke(
        cli_main.app,
        ["fetch", "--artist", "Radiohead", "--title", "OK Computer", "--target", str(target), "--quiet"],
    )

    assert result.exit_code == 0, result.output
    assert (target / "cover.jpg").read_bytes() == b"jpeg-bytes"
    assert "Cover art successfully saved to" in flat(result.output)
    assert api.calls[0] == (SEARCH, "tok")


def test_fetch_prompts_between_candidates(install_api, tmp_path):
    results = [search_result(i) for i in (1, 2, 3)]
    install_api(
        {
            SEARCH: {"results": results},
            results[1]["resource_url"]: {"images": [{"type": "primary", "uri": "http://img/2.jpg"}]},
        },
        images={"http://img/2.jpg": b"second"},
    )

    result = runner.invoke(
        cli_main.app,
        ["fetch", "-a", "Radiohead", "-t", "OK Computer", "-o", str(tmp_path), "-q"],
        input="2\n",
    )

    assert result.exit_code == 0, result.output
    assert "[2] Artist - Album 2 (1992)" in flat(result.output)
    assert (tmp_path / "cover.jpg").read_bytes() == b"second"


def test_fetch_invalid_choice_exits_with_error(install_api, tmp_path):
    api = install_api({SEARCH: {"results": [search_result(1), search_result(2)]}})

    result = runner.invoke(
        cli_main.app,
        ["fetch", "-a", "Radiohead", "-t", "OK Computer", "-o", str(tmp_path), "-q"],
        input="abc\n",
    )

    assert result.exit_code == 1
    assert "Invalid choice" in flat(result.output)
    assert api.urls == [SEARCH]
    assert not (tmp_path / "cover.jpg").exists()


def test_resolve_first_strategy_skips_prompt(install_api):
    results = [search_result(1, cover="http://img/thumb1.jpg"), search_result(2)]
    install_api(
        {
            SEARCH: {"results": results},
            results[0]["resource_url"]: {"images": []},
        }
    )

    result = runner.invoke(
        cli_main.app,
        ["resolve", "-a", "Radiohead", "-t", "OK Computer", "--strategy", "first"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip().splitlines()[-1] == "http://img/thumb1.jpg"
    assert "Multiple results" not in result.output


def test_resolve_by_release_id(install_api):
    install_api(
        {f"{DISCOGS_API_URL}/releases/999": {"images": [{"type": "primary", "uri": "http://img/999.jpg"}]}}
    )

    result = runner.invoke(cli_main.app, ["resolve", "--release-id", "[r999]"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "http://img/999.jpg"


def test_resolve_no_primary_image_mentions_release(install_api):
    install_api({f"{DISCOGS_API_URL}/releases/999": {"images": []}})

    result = runner.invoke(cli_main.app, ["resolve", "-r", "r999"])

    assert result.exit_code == 1
    assert "No primary image found for release 999." in flat(result.output)


def test_missing_search_terms_prints_usage(install_api):
    install_api({})

    result = runner.invoke(cli_main.app, ["fetch", "--artist", "Radiohead"])

    assert result.exit_code == 1
    assert "Usage: discogs-cover fetch" in flat(result.output)


def test_missing_token(install_api, monkeypatch):
    monkeypatch.delenv("DISCOGS_TOKEN", raising=False)
    api = install_api({})

    result = runner.invoke(cli_main.app, ["resolve", "-r", "1"])

    assert result.exit_code == 1
    assert "Discogs token is missing" in flat(result.output)
    assert api.calls == []


def test_token_option_overrides_environment(install_api):
    api = install_api(
        {f"{DISCOGS_API_URL}/releases/1": {"images": [{"type": "primary", "uri": "http://img/1.jpg"}]}}
    )

    result = runner.invoke(cli_main.app, ["resolve", "-r", "1", "--token", "cli-token"])

    assert result.exit_code == 0, result.output
    assert api.calls == [(f"{DISCOGS_API_URL}/releases/1", "cli-token")]


def test_facts_skipped_for_release_id(install_api, tmp_path):
    install_api(
        {f"{DISCOGS_API_URL}/releases/1": {"images": [{"type": "primary", "uri": "http://img/1.jpg"}]}}
    )

    result = runner.invoke(cli_main.app, ["fetch", "-r", "1", "-o", str(tmp_path), "-q", "--facts"])

    assert result.exit_code == 0, result.output
    assert "Facts need --artist and --title" in flat(result.output)


def test_fetch_reports_unwritable_target(install_api, tmp_path):
    install_api(
        {f"{DISCOGS_API_URL}/releases/1": {"images": [{"type": "primary", "uri": "http://img/1.jpg"}]}},
        images={"http://img/1.jpg": b"jpeg-bytes"},
    )
    target = tmp_path / "file.txt"
    target.write_text("x")

    result = runner.invoke(cli_main.app, ["fetch", "-r", "1", "-o", str(target), "-q"])

    assert result.exit_code == 1
    assert "Error: Could not save the cover to" in flat(result.output)
    assert target.read_text() == "x"


def test_resolve_prompt_goes_to_stderr(install_api, monkeypatch):
    out, err = io.StringIO(), io.StringIO()
    monkeypatch.setattr(cli_main, "_console", Console(file=out, width=120, color_system=None))
    monkeypatch.setattr(cli_main, "_err_console", Console(file=err, width=120, color_system=None))
    results = [search_result(i) for i in (1, 2, 3)]
    install_api(
        {
            SEARCH: {"results": results},
            results[1]["resource_url"]: {"images": [{"type": "primary", "uri": "http://img/2.jpg"}]},
        }
    )

    result = runner.invoke(
        cli_main.app,
        ["resolve", "-a", "Radiohead", "-t", "OK Computer", "--strategy", "prompt"],
        input="2\n",
    )

    assert result.exit_code == 0, result.output
    assert "Multiple results found" in err.getvalue()
    assert "[2] Artist - Album 2 (1992)" in flat(err.getvalue())
    assert "Multiple results" not in out.getvalue()
    assert result.output.strip().splitlines()[-1] == "http://img/2.jpg"
