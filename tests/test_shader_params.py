import struct

import pytest

from mcrawview.debuglog import set_log_path
from mcrawview.shader_params import (
    IDENTITY3,
    SHADER_PARAMS_SIZE,
    ShaderParams,
    build_shader_params,
    cfa_type,
)


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path):
    set_log_path(tmp_path / "log.txt")
    yield


@pytest.mark.parametrize(
    "pattern, code",
    [("BGGR", 0), ("RGGB", 1), ("GBRG", 2), ("GRBG", 3), ("rggb", 1), ("gRbG", 3)],
)
def test_cfa_type_known(pattern, code):
    assert cfa_type(pattern) == code


def test_cfa_type_unknown_defaults_to_bggr():
    assert cfa_type("XYZW") == 0
    assert cfa_type("") == 0


def test_defaults_without_metadata():
    params = build_shader_params(640, 480, {}, 64.0, 1023.0, 2)
    assert params.width == 640
    assert params.height == 480
    assert params.cfa == 2
    assert params.exposure == 1.0
    assert params.black_level == 64.0
    assert params.white_level == 1023.0
    assert params.gain_r == 1.0 and params.gain_g == 1.0 and params.gain_b == 1.0
    assert params.ccm == IDENTITY3
    assert params.saturation_adjustment == 1.50
    assert params.inv_black_white_range * (1023.0 - 64.0) == pytest.approx(1.0)


def test_invalid_dimensions_clamped_to_one():
    params = build_shader_params(0, -5, {}, 0.0, 1.0, 0)
    assert (params.width, params.height) == (1, 1)


def test_dynamic_black_level_list_average():
    meta = {"dynamicBlackLevel": [64, 64, 64, 64]}
    params = build_shader_params(4, 4, meta, 0.0, 1023.0, 0)
    assert params.black_level == pytest.approx(64.0)


def test_dynamic_black_level_ignores_non_numbers():
    meta = {"dynamicBlackLevel": ["x", 100, None]}
    params = build_shader_params(4, 4, meta, 0.0, 1023.0, 0)
    assert params.black_level == pytest.approx(100.0)


def test_dynamic_black_level_all_invalid_uses_static():
    meta = {"dynamicBlackLevel": ["x", None]}
    params = build_shader_params(4, 4, meta, 32.0, 1023.0, 0)
    assert params.black_level == 32.0


def test_dynamic_black_level_scalar():
    params = build_shader_params(4, 4, {"dynamicBlackLevel": 50}, 0.0, 1023.0, 0)
    assert params.black_level == 50.0


def test_dynamic_white_level():
    params = build_shader_params(4, 4, {"dynamicWhiteLevel": 4095}, 0.0, 1023.0, 0)
    assert params.white_level == 4095.0
    params = build_shader_params(4, 4, {"dynamicWhiteLevel": "4095"}, 0.0, 1023.0, 0)
    assert params.white_level == 1023.0


def test_degenerate_range_gives_unit_inverse():
    params = build_shader_params(4, 4, {}, 100.0, 100.0, 0)
    assert params.inv_black_white_range == 1.0


def test_neutral_as_shot_gives_unit_gains():
    params = build_shader_params(4, 4, {"asShotNeutral": [2, 2, 2]}, 0.0, 1.0, 0)
    assert params.gain_r == pytest.approx(1.0)
    assert params.gain_b == pytest.approx(1.0)
    assert params.gain_g == 1.0


def test_as_shot_neutral_gain_ratios():
    params = build_shader_params(4, 4, {"asShotNeutral": [0.5, 1.0, 0.25]}, 0.0, 1.0, 0)
    assert params.gain_r == pytest.approx(2.0)
    assert params.gain_b == pytest.approx(4.0)


def test_invalid_as_shot_neutral_falls_back():
    for value in ([0.5, "a", 0.25], [0.5, 1.0], [0.0, 1.0, 0.0]):
        params = build_shader_params(4, 4, {"asShotNeutral": value}, 0.0, 1.0, 0)
        assert params.gain_r == 1.0
        assert params.gain_b == 1.0


def test_color_matrix_row_major():
    values = [1, 2, 3, 4, 5, 6, 7, 8, 9]
    params = build_shader_params(4, 4, {"ColorMatrix": values}, 0.0, 1.0, 0)
    assert params.ccm == ((1, 2, 3), (4, 5, 6), (7, 8, 9))


def test_color_matrix2_preferred():
    meta = {"ColorMatrix": [1] * 9, "ColorMatrix2": [2] * 9}
    params = build_shader_params(4, 4, meta, 0.0, 1.0, 0)
    assert params.ccm == ((2, 2, 2),) * 3


def test_invalid_color_matrix2_gives_identity():
    meta = {"ColorMatrix": [1] * 9, "ColorMatrix2": [2] * 8 + ["x"]}
    params = build_shader_params(4, 4, meta, 0.0, 1.0, 0)
    assert params.ccm == IDENTITY3


def test_wrong_length_color_matrix_ignored():
    params = build_shader_params(4, 4, {"ColorMatrix": [1] * 8}, 0.0, 1.0, 0)
    assert params.ccm == IDENTITY3


def test_pack_size_and_header():
    params = build_shader_params(640, 480, {}, 64.0, 1023.0, 3)
    data = params.pack()
    assert len(data) == SHADER_PARAMS_SIZE
    assert struct.unpack_from("<3i", data, 0) == (640, 480, 3)
    black, white = struct.unpack_from("<2f", data, 16)
    assert (black, white) == (64.0, 1023.0)


def test_pack_matrix_column_major():
    params = ShaderParams(
        width=1,
        height=1,
        cfa=0,
        ccm=((1.0, 2.0, 3.0), (4.0, 5.0, 6.0), (7.0, 8.0, 9.0)),
    )
    data = params.pack()
    matrix = struct.unpack_from("<16f", data, 48)
    assert matrix[0:4] == (1.0, 4.0, 7.0, 0.0)
    assert matrix[4:8] == (2.0, 5.0, 8.0, 0.0)
    assert matrix[8:12] == (3.0, 6.0, 9.0, 0.0)
    assert matrix[12:16] == (0.0, 0.0, 0.0, 1.0)
    (saturation,) = struct.unpack_from("<f", data, 112)
    assert saturation == 1.5