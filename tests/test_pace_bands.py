import json
import math

import pytest

from pace_api.core.analytics.pace_bands import (
    DEFAULT_PACE_BANDS,
    PaceBand,
    PaceBandConfigError,
    band_from_config,
    bands_from_config,
    classify_pace,
    get_default_pace_bands,
    load_pace_bands,
)


def test_default_bands_are_ordered_and_contiguous():
    assert DEFAULT_PACE_BANDS[0].min == 0
    assert math.isinf(DEFAULT_PACE_BANDS[-1].max)
    for prev, nxt in zip(DEFAULT_PACE_BANDS, DEFAULT_PACE_BANDS[1:]):
        assert prev.max == nxt.min
        assert prev.min < nxt.min


def test_classify_half_open_ranges():
    bands = [PaceBand("Fast", 3.0, 4.0), PaceBand("Slow", 4.0, 6.0)]
    assert classify_pace(3.0, bands) == 0
    assert classify_pace(3.999, bands) == 0
    assert classify_pace(4.0, bands) == 1
    assert classify_pace(6.0, bands) is None
    assert classify_pace(2.5, bands) is None


def test_classify_first_match_wins_on_overlap():
    bands = [PaceBand("Wide", 3.0, 8.0), PaceBand("Narrow", 4.0, 5.0)]
    assert classify_pace(4.5, bands) == 0
    assert classify_pace(4.5, list(reversed(bands))) == 0
    assert list(reversed(bands))[0].label == "Narrow"


def test_unclassifiable_marker_never_matches():
    # an all-covering band still never receives unclassifiable segments
    bands = [PaceBand("Anything", 0.0, math.inf)]
    assert classify_pace(None, bands) is None
    assert not bands[0].contains(None)


def test_classify_empty_bands():
    assert classify_pace(5.0, []) is None


def test_band_from_config_parses_strings_and_open_max():
    band = band_from_config({"label": "Tempo", "min": "4:30", "max": None})
    assert band.label == "Tempo"
    assert band.min == pytest.approx(4.5)
    assert math.isinf(band.max)
    assert band.to_dict() == {"label": "Tempo", "min": pytest.approx(4.5), "max": None}


@pytest.mark.parametrize(
    "item",
    [
        {"min": 3, "max": 4},
        {"label": "x", "max": 4},
        {"label": "x", "min": "fast"},
        {"label": "x", "min": 5, "max": 4},
        {"label": "x", "min": -1},
        {"label": "x", "min": True},
        "not-a-band",
    ],
)
def test_band_from_config_rejects_invalid(item):
    with pytest.raises(PaceBandConfigError):
        band_from_config(item)


def test_bands_from_config_keeps_order_and_allows_gaps():
    bands = bands_from_config([
        {"label": "B", "min": 5, "max": 6},
        {"label": "A", "min": 3, "max": 4},
    ])
    assert [b.label for b in bands] == ["B", "A"]
    assert classify_pace(4.5, bands) is None
    assert bands_from_config(None) == []


def test_load_pace_bands_from_file(tmp_path):
    path = tmp_path / "bands.json"
    path.write_text(json.dumps({"bands": [{"label": "Only", "min": "0:00", "max": "10:00"}]}), encoding="utf-8")
    bands = load_pace_bands(path)
    assert bands == [PaceBand("Only", 0.0, 10.0)]


def test_load_pace_bands_errors(tmp_path):
    with pytest.raises(PaceBandConfigError):
        load_pace_bands(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(PaceBandConfigError):
        load_pace_bands(bad)

    wrong_shape = tmp_path / "shape.json"
    wrong_shape.write_text(json.dumps({"label": "x"}), encoding="utf-8")
    with pytest.raises(PaceBandConfigError):
        load_pace_bands(wrong_shape)


def test_default_bands_follow_env(monkeypatch, tmp_path):
    monkeypatch.delenv("PACE_BANDS_FILE", raising=False)
    assert get_default_pace_bands() == list(DEFAULT_PACE_BANDS)

    path = tmp_path / "bands.json"
    path.write_text(json.dumps([{"label": "All", "min": 0}]), encoding="utf-8")
    monkeypatch.setenv("PACE_BANDS_FILE", str(path))
    assert [b.label for b in get_default_pace_bands()] == ["All"]
