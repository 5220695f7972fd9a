import base64
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from forest_watch import main as cli
from forest_watch.models.schemas import AnalysisResult, SeverityLevel, VisualEvidence
from forest_watch.utils.error_handler import SchemaError
from sample_data import SAMPLE_ANALYSIS

@pytest.fixture
def fake_service():
    service = MagicMock()
    service.analyze = AsyncMock(return_value=AnalysisResult.model_validate(SAMPLE_ANALYSIS))
    service.deep_research = AsyncMock(return_value="Deeper narrative.")
    service.generate_visual = AsyncMock(return_value=VisualEvidence(
        image_url="data:image/jpeg;base64," + base64.b64encode(b"jpeg-bytes").decode("ascii"),
        image_prompt="prompt",
        loss_percentage=12.0,
        severity=SeverityLevel.SIGNIFICANT,
    ))
    with patch.object(cli, "build_service", return_value=service), \
            patch.object(cli, "setup_logging", return_value=MagicMock()):
        yield service

def test_parse_visual_arguments(tmp_path):
    args = cli.parse_arguments(["visual", "Amazon Rainforest", "--start", "2015", "--output", str(tmp_path / "x.jpg")])

    assert args.command == "visual"
    assert args.forest == "Amazon Rainforest"
    assert args.start == 2015
    assert args.end is None

def test_analyze_prints_json(fake_service, capsys):
    cli.main(["analyze", "Amazon Rainforest"])

    printed = json.loads(capsys.readouterr().out)
    assert printed["forestName"] == "Amazon Rainforest"
    fake_service.analyze.assert_awaited_once_with("Amazon Rainforest")

def test_research_from_saved_analysis(fake_service, tmp_path, capsys):
    saved = tmp_path / "analysis.json"
    saved.write_text(json.dumps(SAMPLE_ANALYSIS), encoding="utf-8")

    cli.main(["research", "--analysis", str(saved)])

    assert capsys.readouterr().out.strip() == "Deeper narrative."
    fake_service.analyze.assert_not_awaited()

def test_visual_writes_image(fake_service, tmp_path):
    output = tmp_path / "evidence.jpg"

    cli.main(["visual", "Amazon Rainforest", "--output", str(output)])

    assert output.read_bytes() == b"jpeg-bytes"

def test_app_error_exits_nonzero(fake_service, capsys):
    fake_service.analyze.side_effect = SchemaError("AI response has an invalid status: 'Probably Fine'.")

    with pytest.raises(SystemExit) as exc:
        cli.main(["analyze", "Amazon Rainforest"])

    assert exc.value.code == 1
    assert "invalid status" in capsys.readouterr().err
