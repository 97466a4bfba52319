import json

from pathlib import Path

import pytest

from effsamples import pack_eff, RESOURCE
from efftool.efftool import main, eff_paths, json_paths

@pytest.mark.parametrize("path, output, ptcl", [
    ("ef_mario.eff", "ef_mario.eff.json", "ef_mario.ptcl"),
    ("dir/ef_mario", "dir/ef_mario.json", "dir/ef_mario.ptcl"),
])
def test_eff_paths(path, output, ptcl):
    assert eff_paths(Path(path)) == (Path(output), Path(ptcl))

@pytest.mark.parametrize("path, output, ptcl", [
    ("ef_mario.eff.json", "ef_mario.eff", "ef_mario.ptcl"),
    ("ef_mario.json", "ef_mario.eff", "ef_mario.ptcl"),
    ("ef_mario.v2.json", "ef_mario.v2.eff", "ef_mario.ptcl"),
])
def test_json_paths(path, output, ptcl):
    assert json_paths(Path(path)) == (Path(output), Path(ptcl))

def test_explicit_paths_win():
    assert eff_paths(Path("a.eff"), Path("b.json"), Path("c.ptcl")) == (Path("b.json"), Path("c.ptcl"))

def test_round_trip_with_resource(tmp_path):
    original = pack_eff(resource=RESOURCE)
    eff = tmp_path / "ef_mario.eff"
    eff.write_bytes(original)

    assert main([str(eff)]) == 0
    doc = json.loads((tmp_path / "ef_mario.eff.json").read_text(encoding="utf-8"))
    assert doc["effect_model_names"] == ["M_MarioFinalBullet", "M_MarioFireball"]
    assert (tmp_path / "ef_mario.ptcl").read_bytes() == RESOURCE

    eff.unlink()
    assert main([str(tmp_path / "ef_mario.eff.json")]) == 0
    assert eff.read_bytes() == original

def test_friendly_round_trip(tmp_path):
    original = pack_eff()
    eff = tmp_path / "ef_mario.eff"
    eff.write_bytes(original)
    out = tmp_path / "friendly.json"

    assert main([str(eff), str(out), "--friendly"]) == 0
    doc = json.loads(out.read_text(encoding="utf-8"))
    assert doc["effect_handles"][0]["flags"]["hit_effect"] is True
    assert not (tmp_path / "ef_mario.ptcl").exists()

    rebuilt = tmp_path / "rebuilt.eff"
    assert main([str(out), str(rebuilt), "--friendly"]) == 0
    assert rebuilt.read_bytes() == original

def test_bad_input_writes_nothing(tmp_path):
    eff = tmp_path / "broken.eff"
    eff.write_bytes(b"EFFX" + pack_eff()[4:])
    assert main([str(eff)]) == 1
    assert not (tmp_path / "broken.eff.json").exists()

def test_malformed_document_writes_nothing(tmp_path):
    doc = tmp_path / "broken.json"
    doc.write_text('{"effect_handles": [}', encoding="utf-8")
    assert main([str(doc)]) == 1
    assert not (tmp_path / "broken.eff").exists()

def test_missing_input(tmp_path):
    assert main([str(tmp_path / "missing.eff")]) == 1

def test_document_not_utf8_writes_nothing(tmp_path):
    doc = tmp_path / "ef_mario.eff.json"
    doc.write_bytes(b'{"effect_handles": "\xff"}')
    assert main([str(doc)]) == 1
    assert not (tmp_path / "ef_mario.eff").exists()

def test_surrogate_name_writes_nothing(tmp_path):
    doc = tmp_path / "ef_mario.eff.json"
    doc.write_text('{"effect_handles": [], "effect_group_elements": [], "effect_model_entries": [{"unk": 0}],'
                   ' "effect_handle_names": [], "effect_model_names": ["\\ud800"], "parent_joint_names": []}',
                   encoding="utf-8")
    assert main([str(doc)]) == 1
    assert not (tmp_path / "ef_mario.eff").exists()

def test_failed_resource_write_leaves_no_json(tmp_path):
    eff = tmp_path / "a.eff"
    eff.write_bytes(pack_eff(resource=RESOURCE))
    out = tmp_path / "a.json"
    assert main([str(eff), str(out), str(tmp_path / "missing" / "a.ptcl")]) == 1
    assert not out.exists()

def test_failed_json_write_removes_resource(tmp_path):
    eff = tmp_path / "a.eff"
    eff.write_bytes(pack_eff(resource=RESOURCE))
    ptcl = tmp_path / "a.ptcl"
    assert main([str(eff), str(tmp_path / "missing" / "a.json"), str(ptcl)]) == 1
    assert not ptcl.exists()
