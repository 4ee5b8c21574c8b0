import json

from schoolclosings import runner
from schoolclosings.config import Settings
from schoolclosings.errors import UpstreamFetchError
from schoolclosings.schema import StatusScheme
from schoolclosings.service import ClosuresService


def test_export_writes_all_files(tmp_path, catalogs, make_row, clock, capsys) -> None:
    rows = [
        make_row("Appoquinimink School District", "Closed today"),
        make_row("Mystery Learning Center", "Closed today"),
    ]
    service = ClosuresService(
        catalog_loader=catalogs.__getitem__,
        feed_fetcher=lambda: rows,
        clock=clock,
    )

    written = runner.export(tmp_path / "public", service)

    assert sorted(written) == sorted([
        "districts.geojson",
        "votech-districts.geojson",
        "charter-schools.geojson",
        "closings.json",
        "closingsByDistrict.json",
        "closingsByVotech.json",
        "closingsByCharter.json",
    ])
    closings = json.loads((tmp_path / "public" / "closings.json").read_text(encoding="utf-8"))
    by_district = json.loads((tmp_path / "public" / "closingsByDistrict.json").read_text(encoding="utf-8"))
    assert [c["schoolName"] for c in closings] == ["Appoquinimink School District", "Mystery Learning Center"]
    assert by_district["Appoquinimink School District"]["statusType"] == "closed"
    assert closings[0]["matchedDistrict"] == "Appoquinimink School District"
    assert closings[1]["matchedDistrict"] is None
    assert closings[1]["matchedVotech"] is None
    assert closings[1]["matchedCharter"] is None

    out = capsys.readouterr().out
    assert "Appoquinimink School District → closed" in out
    assert '"Mystery Learning Center"' in out


def test_main_passes_scheme_and_output(monkeypatch, tmp_path) -> None:
    captured = {}

    def fake_export(out_dir, service):
        captured["out"] = out_dir
        captured["scheme"] = service.settings.status_scheme

    monkeypatch.setattr(runner, "export", fake_export)

    code = runner.main(["export", "--out", str(tmp_path), "--scheme", "lenient"])

    assert code == 0
    assert captured == {"out": str(tmp_path), "scheme": StatusScheme.LENIENT}


def test_main_reports_upstream_failure(monkeypatch, capsys) -> None:
    def failing_export(out_dir, service):
        raise UpstreamFetchError("closings feed", "timed out")

    monkeypatch.setattr(runner, "export", failing_export)
    monkeypatch.setattr(runner.Settings, "from_env", classmethod(lambda cls: Settings()))

    code = runner.main(["export"])

    assert code == 1
    assert "closings feed: timed out" in capsys.readouterr().err
