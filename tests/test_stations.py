# -*- coding: utf-8 -*-
"""站点规范化 / 线路加载 / 站点分级测试"""
import json

import pytest

from src.data import Station, load_lines, parse_line
from src.stations import TIER_MULTIPLIERS, StationClassifier, StationTier, classify
from src.utils import normalize_station_name


def test_normalize_station_name_accepts_string_and_object():
    assert normalize_station_name("车公庙") == "车公庙"
    assert normalize_station_name({"name": " 车 公庙 "}) == "车公庙"


def test_normalize_station_name_placeholder_for_missing():
    assert normalize_station_name(None, index=2) == "站点3"
    assert normalize_station_name({"id": 9}, index=0) == "站点1"
    assert normalize_station_name(float("nan"), index=4) == "站点5"
    assert normalize_station_name(None) == ""


def test_parse_line_normalizes_station_shapes():
    line = parse_line({"id": 20, "name": "20号线", "color": "#88c6ed",
                       "stations": ["机场北", {"name": "国展"}, {}]})
    assert line.stations == (Station("机场北"), Station("国展"), Station("站点3"))


def test_load_lines_reads_shipped_directory():
    from src.config import Settings

    lines = load_lines(Settings().lines_path)
    assert len(lines) > 0
    assert all(line.stations for line in lines)


def test_load_lines_missing_file_returns_empty(tmp_path):
    assert load_lines(tmp_path / "missing.json") == []


def test_load_lines_wrong_shape_returns_empty(tmp_path):
    path = tmp_path / "lines.json"
    path.write_text(json.dumps({"lines": []}), encoding="utf-8")
    assert load_lines(path) == []


def test_classify_by_line_count(sample_lines):
    assert classify("车公庙", sample_lines) == StationTier.T1
    assert classify("福田", sample_lines) == StationTier.T2
    assert classify("罗湖", sample_lines) == StationTier.T3
    assert classify("不存在", sample_lines) == StationTier.T3


def test_classifier_multipliers(sample_lines):
    classifier = StationClassifier(sample_lines)
    assert classifier.line_count("车公庙") == 3
    assert classifier.multiplier("车公庙") == 2.5
    assert classifier.multiplier("福田") == 1.5
    assert classifier.multiplier("后海") == 1.0


def test_tier_table_values():
    assert TIER_MULTIPLIERS == {StationTier.T1: 2.5, StationTier.T2: 1.5, StationTier.T3: 1.0}


def test_duplicate_station_on_one_line_counts_once():
    line = parse_line({"id": 1, "name": "环线", "color": "#000", "stations": ["A", "B", "A"]})
    assert StationClassifier([line]).line_count("A") == 1


@pytest.mark.parametrize("name", ["", None])
def test_classify_blank_name_is_lowest_tier(sample_lines, name):
    assert StationClassifier(sample_lines).classify(name) == StationTier.T3
