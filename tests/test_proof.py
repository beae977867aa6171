import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from zktensor.proof import ModelInput, Proof


def test_proof_to_dict_lists_bytes():
    p = Proof(public_inputs=[[1, -2]], proof=b"\x00\xff")
    assert p.to_dict() == {"public_inputs": [[1, -2]], "proof": [0, 255]}


def test_proof_save_writes_compact_json(tmp_path):
    path = tmp_path / "p.pf"
    Proof(public_inputs=[[1, -2]], proof=b"\x00\xff").save(path)
    assert path.read_text() == '{"public_inputs":[[1,-2]],"proof":[0,255]}'


def test_proof_save_load_round_trip(tmp_path):
    path = tmp_path / "p.pf"
    original = Proof(public_inputs=[[3, 4, 5], []], proof=bytes(range(10)))
    original.save(path)
    assert Proof.load(path) == original


def test_proof_bytes_coerced():
    p = Proof(public_inputs=[], proof=bytearray(b"ab"))
    assert p.proof == b"ab"
    assert isinstance(p.proof, bytes)


@pytest.mark.parametrize(
    "data",
    [
        {"proof": []},
        {"public_inputs": []},
        {"public_inputs": [[1]], "proof": [256]},
        {"public_inputs": [[1]], "proof": [-1]},
        {"public_inputs": [[2**31]], "proof": []},
        {"public_inputs": [1], "proof": []},
        {"public_inputs": [["x"]], "proof": []},
        {"public_inputs": [[1]], "proof": "abc"},
        [],
    ],
)
def test_proof_from_dict_rejects_malformed(data):
    with pytest.raises(ValueError):
        Proof.from_dict(data)


def test_proof_from_dict_ignores_unknown_fields():
    p = Proof.from_dict({"public_inputs": [[7]], "proof": [9], "extra": 1})
    assert p == Proof(public_inputs=[[7]], proof=b"\x09")


def test_proof_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Proof.load(tmp_path / "absent.pf")


def test_proof_load_invalid_json(tmp_path):
    path = tmp_path / "bad.pf"
    path.write_text("not json")
    with pytest.raises(ValueError):
        Proof.load(path)


@settings(max_examples=50)
@given(
    st.lists(st.lists(st.integers(-(2**31), 2**31 - 1), max_size=5), max_size=4),
    st.binary(max_size=64),
)
def test_proof_dict_round_trip(public_inputs, proof):
    p = Proof(public_inputs=public_inputs, proof=proof)
    again = Proof.from_dict(json.loads(json.dumps(p.to_dict())))
    assert again == p


def test_model_input_from_dict_and_load(tmp_path):
    data = {
        "input_data": [[0.5, 1, -2.25]],
        "input_shapes": [[3]],
        "output_data": [[]],
    }
    path = tmp_path / "input.json"
    path.write_text(json.dumps(data))
    loaded = ModelInput.load(path)
    assert loaded.input_data == [[0.5, 1.0, -2.25]]
    assert loaded.input_shapes == [[3]]
    assert loaded.output_data == [[]]
    assert loaded == ModelInput.from_dict(data)


def test_model_input_int_values_become_floats():
    mi = ModelInput.from_dict(
        {"input_data": [[1, 2]], "input_shapes": [[2]], "output_data": []}
    )
    assert mi.input_data == [[1.0, 2.0]]
    assert [type(x) for x in mi.input_data[0]] == [float, float]


@pytest.mark.parametrize(
    "data",
    [
        {"input_shapes": [[1]], "output_data": []},
        {"input_data": [[1.0]], "output_data": []},
        {"input_data": [[1.0]], "input_shapes": [[1]]},
        {"input_data": [["a"]], "input_shapes": [[1]], "output_data": []},
        {"input_data": [[True]], "input_shapes": [[1]], "output_data": []},
        {"input_data": [[1.0]], "input_shapes": [[-1]], "output_data": []},
        {"input_data": [[1.0]], "input_shapes": [[1.5]], "output_data": []},
        {"input_data": [1.0], "input_shapes": [[1]], "output_data": []},
    ],
)
def test_model_input_rejects_malformed(data):
    with pytest.raises(ValueError):
        ModelInput.from_dict(data)


@settings(max_examples=50)
@given(
    st.lists(
        st.lists(st.floats(allow_nan=False, allow_infinity=False), max_size=4),
        max_size=3,
    ),
    st.lists(st.lists(st.integers(0, 100), max_size=3), max_size=3),
)
def test_model_input_json_round_trip(values, shapes):
    mi = ModelInput(input_data=values, input_shapes=shapes, output_data=values)
    again = ModelInput.from_dict(json.loads(json.dumps(mi.to_dict())))
    assert again == mi