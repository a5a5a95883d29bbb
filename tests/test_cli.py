import json
from pathlib import Path

from hardstrings.cli_main import build_parser, exit_code_for, main
from hardstrings.core.models import ExtractionReport, ExtractionStatus
from hardstrings.core.progress import CancellationToken


def _report(status):
    return ExtractionReport(path=Path("x.js"), status=status)


def test_exit_codes():
    token = CancellationToken()
    assert exit_code_for([_report(ExtractionStatus.DONE), _report(ExtractionStatus.SKIPPED)], token) == 0
    assert exit_code_for([_report(ExtractionStatus.CANCELLED)], token) == 2
    assert exit_code_for([_report(ExtractionStatus.CANCELLED), _report(ExtractionStatus.FAILED)], token) == 1
    token.cancel()
    assert exit_code_for([], token) == 2


def test_parser_options():
    args = build_parser().parse_args(["src", "--framework", "vue", "--framework", "svelte", "--dry-run"])
    assert args.paths == ["src"]
    assert args.framework == ["vue", "svelte"]
    assert args.dry_run is True
    assert args.no_save is False


def test_main_extracts_project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "App.vue").write_text("<template><p>Good morning</p></template>\n", encoding="utf-8")

    assert main(["src", "--prefix", "home."]) == 0

    assert (tmp_path / "src" / "App.vue").read_text(encoding="utf-8") == \
        "<template><p>{{ $t('home.good-morning') }}</p></template>\n"
    locale = json.loads((tmp_path / "locales" / "en.json").read_text(encoding="utf-8"))
    assert locale == {"home": {"good-morning": "Good morning"}}


def test_main_reports_config_errors(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "hardstrings.json").write_text(
        json.dumps({"extraction": {"keygen_strategy": "bogus"}}), encoding="utf-8"
    )
    assert main(["src"]) == 1

    (tmp_path / "hardstrings.json").write_text("{}", encoding="utf-8")
    assert main(["src", "--framework", "angular"]) == 1
