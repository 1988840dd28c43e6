from __future__ import annotations

import re

from roster_import.cli import main as cli_main

SUMMARY_REGEX = re.compile(
    r"^SUMMARY files=\d+/\d+ success=\d+ failed=\d+ rows=\d+ ready=\d+ warning=\d+ "
    r"error=\d+ skipped_files=\d+ elapsed_sec=[0-9.]+$",
    re.MULTILINE,
)


def test_summary_line_emitted_once(write_config, temp_workdir, sample_roster_csv, capsys, monkeypatch):
    monkeypatch.setenv("DISABLE_API_SUBMIT", "1")
    (temp_workdir / "data" / "marathon.csv").write_text(sample_roster_csv, encoding="utf-8")
    cli_main([])
    out = capsys.readouterr().out
    assert len(SUMMARY_REGEX.findall(out)) == 1
