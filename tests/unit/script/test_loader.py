"""End-to-end tests for CaptureScript on real YAML files."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from capture_script.camera.base import VirtualCamera
from capture_script.camera.catalog import default_controls
from capture_script.config.schema import ScriptConfig
from capture_script.models.controls import ControlType
from capture_script.script.errors import (
    InvalidFrameNumber,
    MalformedDocument,
    ScriptIOError,
    UnexpectedEvent,
    UnsupportedControl,
    UnsupportedSection,
)
from capture_script.script.loader import CaptureScript


FIXTURE_DIR = Path(__file__).resolve().parents[2] / "fixtures" / "scripts"


@pytest.fixture
def camera() -> VirtualCamera:
    return VirtualCamera(default_controls())


def write_script(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "script.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_example_fixture_loads(camera: VirtualCamera, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        script = CaptureScript(camera, FIXTURE_DIR / "example.yaml")

    assert script.valid
    assert script.error is None
    assert list(script.table) == [10, 20, 30]
    assert script.frame_controls(10).as_dict() == {'AeEnable': False, 'ExposureTime': 3000}
    assert script.frame_controls(20)['AnalogueGain'].value == pytest.approx(1.5)

    frame_30 = script.frame_controls(30)
    assert frame_30['AeEnable'].value is True
    assert frame_30['AwbEnable'].is_none
    assert frame_30['ScalerCrop'].is_none
    assert "Unsupported value 'maybe' for bool control AwbEnable" in caplog.text


def test_single_frame_scenario(tmp_path: Path, camera: VirtualCamera) -> None:
    path = write_script(tmp_path, 'frames:\n  - 5:\n      AeEnable: "true"\n')

    script = CaptureScript(camera, path)

    assert script.valid
    controls = script.frame_controls(5)
    assert len(controls) == 1
    value = controls['AeEnable']
    assert value.type == ControlType.BOOL
    assert value.value is True
    assert len(script.frame_controls(6)) == 0


def test_unknown_control_invalidates_whole_script(
    tmp_path: Path,
    camera: VirtualCamera,
    caplog: pytest.LogCaptureFixture,
) -> None:
    path = write_script(
        tmp_path,
        'frames:\n  - 0:\n      AeEnable: "true"\n  - 1:\n      Foo: "1"\n',
    )

    with caplog.at_level(logging.ERROR):
        script = CaptureScript(camera, path)

    assert not script.valid
    assert isinstance(script.error, UnsupportedControl)
    assert (script.error.line, script.error.column) == (4, 6)
    assert len(script.frame_controls(0)) == 0
    assert len(script.frame_controls(1)) == 0
    assert "Capture script error on line 4 column 6: Unsupported control 'Foo'" in caplog.text


def test_unknown_section_fails_before_frames(tmp_path: Path, camera: VirtualCamera) -> None:
    path = write_script(tmp_path, 'controls:\n  - 0:\n      AeEnable: "true"\n')

    script = CaptureScript(camera, path)

    assert not script.valid
    assert isinstance(script.error, UnsupportedSection)
    assert len(script.table) == 0


def test_missing_file_reports_io_failure(tmp_path: Path, camera: VirtualCamera) -> None:
    script = CaptureScript(camera, tmp_path / "missing.yaml")

    assert not script.valid
    assert isinstance(script.error, ScriptIOError)
    assert 'missing.yaml' in str(script.error)


def test_malformed_yaml(tmp_path: Path, camera: VirtualCamera) -> None:
    path = write_script(tmp_path, 'frames:\n  - 0: {AeEnable: "true"\n')

    script = CaptureScript(camera, path)

    assert not script.valid
    assert isinstance(script.error, MalformedDocument)


def test_empty_document_is_rejected(tmp_path: Path, camera: VirtualCamera) -> None:
    path = write_script(tmp_path, '')

    script = CaptureScript(camera, path)

    assert not script.valid
    assert isinstance(script.error, UnexpectedEvent)
    assert script.error.expected == 'document-start'
    assert script.error.actual == 'stream-end'


def test_top_level_sequence_is_rejected(tmp_path: Path, camera: VirtualCamera) -> None:
    path = write_script(tmp_path, '- frames\n')

    script = CaptureScript(camera, path)

    assert isinstance(script.error, UnexpectedEvent)
    assert script.error.expected == 'mapping-start'
    assert script.error.actual == 'sequence-start'


def test_only_first_document_is_read(tmp_path: Path, camera: VirtualCamera) -> None:
    path = write_script(tmp_path, 'frames:\n  - 1:\n      AeEnable: true\n---\nbogus: 1\n')

    script = CaptureScript(camera, path)

    assert script.valid
    assert list(script.table) == [1]


def test_strict_frame_numbers_option(tmp_path: Path, camera: VirtualCamera) -> None:
    path = write_script(tmp_path, 'frames:\n  - first:\n      AeEnable: true\n')

    permissive = CaptureScript(camera, path)
    strict = CaptureScript(camera, path, ScriptConfig(strict_frame_numbers=True))

    assert permissive.valid
    assert list(permissive.table) == [0]
    assert not strict.valid
    assert isinstance(strict.error, InvalidFrameNumber)


def test_controls_are_resolved_against_the_camera(tmp_path: Path) -> None:
    camera = VirtualCamera([c for c in default_controls() if c.name != 'ExposureTime'])
    path = write_script(tmp_path, 'frames:\n  - 1:\n      ExposureTime: "100"\n')

    script = CaptureScript(camera, path)

    assert isinstance(script.error, UnsupportedControl)


def test_frame_entries_are_read_only(tmp_path: Path, camera: VirtualCamera) -> None:
    path = write_script(tmp_path, 'frames:\n  - 1:\n      AeEnable: true\n')
    script = CaptureScript(camera, path)

    controls = script.frame_controls(1)
    with pytest.raises(RuntimeError):
        controls.set(default_controls()[0], controls['AeEnable'])


def test_undecodable_file_reports_io_failure(tmp_path: Path, camera: VirtualCamera) -> None:
    path = tmp_path / "script.yaml"
    path.write_bytes(b'frames:\n  - 1:\n      PipelineName: "\xff\xfe"\n')

    script = CaptureScript(camera, path)

    assert not script.valid
    assert isinstance(script.error, ScriptIOError)
    assert 'Failed to read capture script' in str(script.error)
    assert len(script.frame_controls(1)) == 0
