"""Tests for the photoplan command line entry point."""

import json

import yaml
from PySide6.QtCore import QCoreApplication

from photoplan.main import load_config, load_parameters, main


def write_config(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump({
        'device_options': {'log_file_path': str(tmp_path / "logs" / "photoplan_log.txt")},
        'planning': {'default_altitude_m': 100.0},
    }))
    return str(config_file)


def test_load_config_missing_or_invalid(tmp_path):
    assert load_config(str(tmp_path / "missing.yaml")) == {}
    broken = tmp_path / "broken.yaml"
    broken.write_text("planning: [1, 2\n")
    assert load_config(str(broken)) == {}


def test_default_config_ships_with_package():
    config = load_config()
    assert config['planning']['default_altitude_m'] == 120.0
    assert 'focal_length_mm' in config['camera']


def test_load_parameters_json(tmp_path):
    params_file = tmp_path / "params.json"
    params_file.write_text(json.dumps({'radius': 25}))
    assert load_parameters(str(params_file)) == {'radius': 25}


def test_cli_writes_all_outputs(tmp_path):
    params_file = tmp_path / "area.yaml"
    params_file.write_text(yaml.safe_dump({
        'polygon': [
            {'lat': 47.0, 'lon': 8.0},
            {'lat': 47.0, 'lon': 8.004},
            {'lat': 47.003, 'lon': 8.004},
            {'lat': 47.003, 'lon': 8.0},
        ],
        'heading': 15.0,
    }))
    output = tmp_path / "area.waypoints"
    mission = tmp_path / "area.json"
    plot = tmp_path / "area.png"

    code = main(["area", str(params_file), "--config", write_config(tmp_path),
                 "--output", str(output), "--json", str(mission), "--plot", str(plot)])

    assert code == 0
    assert output.read_text().startswith("QGC WPL 110")
    saved = json.loads(mission.read_text())
    assert saved['pattern'] == "area"
    assert saved['summary']['waypoints_count'] == len(saved['waypoints'])
    # config default altitude applies when the bundle has none
    assert saved['waypoints'][0]['altitude'] == 100.0
    assert plot.exists()


def test_cli_camera_option(tmp_path):
    camera_file = tmp_path / "camera.yaml"
    camera_file.write_text("focal_length_mm: 50\n")
    params_file = tmp_path / "poi.yaml"
    params_file.write_text(yaml.safe_dump({'poi': {'lat': 47.0, 'lon': 8.0}, 'radius': 40.0}))
    mission = tmp_path / "poi.json"

    code = main(["poi", str(params_file), "--config", write_config(tmp_path),
                 "--camera", str(camera_file), "--json", str(mission)])

    assert code == 0
    assert json.loads(mission.read_text())['summary']['camera']['focal_length_mm'] == 50.0


def test_cli_empty_result_exits_1(tmp_path):
    params_file = tmp_path / "strip.yaml"
    params_file.write_text(yaml.safe_dump({'polyline': [{'lat': 47.0, 'lon': 8.0}]}))
    assert main(["strip", str(params_file), "--config", write_config(tmp_path)]) == 1


def test_cli_missing_params_file_exits_1(tmp_path):
    assert main(["spiral", str(tmp_path / "missing.yaml"), "--config", write_config(tmp_path)]) == 1


def test_cli_unwritable_output_exits_1(tmp_path):
    params_file = tmp_path / "poi.yaml"
    params_file.write_text(yaml.safe_dump({'poi': {'lat': 47.0, 'lon': 8.0}, 'radius': 40.0}))
    output = tmp_path / "no_such_dir" / "poi.waypoints"
    assert main(["poi", str(params_file), "--config", write_config(tmp_path), "--output", str(output)]) == 1


def test_cli_sets_application_name(tmp_path):
    params_file = tmp_path / "poi.yaml"
    params_file.write_text(yaml.safe_dump({'poi': {'lat': 47.0, 'lon': 8.0}, 'radius': 40.0}))
    assert main(["poi", str(params_file), "--config", write_config(tmp_path)]) == 0
    assert QCoreApplication.instance().applicationName() == "photoplan"


def test_cli_empty_config_sections(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "config.yaml"
    config_file.write_text("device_options:\nplanning:\n")
    params_file = tmp_path / "strip.yaml"
    params_file.write_text(yaml.safe_dump({'polyline': [{'lat': 47.0, 'lon': 8.0}, {'lat': 47.001, 'lon': 8.0}]}))
    assert main(["strip", str(params_file), "--config", str(config_file)]) == 0
