import asyncio
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from sticker_gifs import __main__ as cli
from sticker_gifs.config import load_config


def test_parser_options():
    args = cli.build_parser().parse_args(
        [
            "--online",
            "--token", "abc",
            "--save-snapshot", "snap.json",
            "--output", "out dir",
            "--pack", "Pack 1", "Pack2",
            "--debug",
        ],
    )  # fmt: skip

    assert args.online
    assert args.token == "abc"
    assert args.save_snapshot == Path("snap.json")
    assert args.output == Path("out dir")
    assert args.packs == ["Pack 1", "Pack2"]
    assert args.debug
    assert args.snapshot is None


def test_parser_defaults():
    args = cli.build_parser().parse_args([])

    assert not args.online
    assert args.packs is None


def test_main_passes_options(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    run_mock = AsyncMock()
    monkeypatch.setattr(cli, "run", run_mock)

    code = cli.main(["--snapshot", str(tmp_path / "data.json"), "--pack", "Pack1"])

    assert code == 0
    cfg, online, save_snapshot, packs = run_mock.await_args.args
    assert cfg.snapshot_path == tmp_path / "data.json"
    assert online is False
    assert save_snapshot is None
    assert packs == ["Pack1"]


def test_main_reports_fatal_errors(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(cli, "run", AsyncMock(side_effect=FileNotFoundError("data.json")))

    assert cli.main([]) == 1


def test_online_listing_requires_token():
    cfg = load_config({})

    with pytest.raises(ValueError, match="token"):
        asyncio.run(cli.load_packs(cfg, online=True))


def test_offline_listing_reads_snapshot(tmp_path: Path):
    snapshot = tmp_path / "data.json"
    snapshot.write_text('[{"sticker_pack": {"name": "Pack1", "stickers": []}}]')
    cfg = load_config({}, snapshot_path=snapshot)

    packs = asyncio.run(cli.load_packs(cfg))

    assert [x.name for x in packs] == ["Pack1"]


def test_main_reports_invalid_configuration(monkeypatch: pytest.MonkeyPatch):
    run_mock = AsyncMock()
    monkeypatch.setattr(cli, "run", run_mock)
    monkeypatch.setenv("STICKER_GIFS_TIMEOUT", "abc")

    assert cli.main([]) == 1
    run_mock.assert_not_awaited()
