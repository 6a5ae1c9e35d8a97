"""
End-to-end tests for parse_orca_output on a synthetic optimisation log.
"""

import json
import math

import pytest

from src.orca.parser import parse_orca_output


def coordinate_block(rows):
    lines = [
        "---------------------------------",
        "CARTESIAN COORDINATES (ANGSTROEM)",
        "---------------------------------",
    ]
    lines += [f"  {el:<2}  {x:12.6f}  {y:12.6f}  {z:12.6f}" for el, x, y, z in rows]
    lines += ["", "----------------------------", "CARTESIAN COORDINATES (A.U.)", "----------------------------", ""]
    return "\n".join(lines) + "\n"


HOST = [
    ("C", 0.0, 0.0, 5.0),
    ("C", 1.0, 0.0, 4.8),
    ("C", -0.5, 0.87, 4.8),
    ("C", -0.5, -0.87, 4.8),
    ("C", 0.0, 0.0, -5.0),
    ("C", 5.0, 0.0, 0.0),
    ("C", -5.0, 0.0, 0.0),
]
START = HOST + [("H", 0.0, 0.0, 7.0), ("H", 0.0, 0.0, 7.74)]
END = HOST + [("H", 0.0, 0.0, 6.5), ("H", 0.0, 0.0, 7.25)]


@pytest.fixture
def optimisation_log():
    parts = [
        "                                 * O   R   C   A *\n",
        "                 Program Version 5.0.4 -  RELEASE  -\n",
        "|  3> %scf EField 0.001, 0.0, -0.002 end\n",
        "                       *    GEOMETRY OPTIMIZATION CYCLE   1    *\n",
        coordinate_block(START),
        "FINAL SINGLE POINT ENERGY      -2280.111111111\n",
        "                       *    GEOMETRY OPTIMIZATION CYCLE   2    *\n",
        coordinate_block(START),
        "FINAL SINGLE POINT ENERGY      -2280.122222222\n",
        "                       *    GEOMETRY OPTIMIZATION CYCLE   3    *\n",
        coordinate_block(END),
        "                    ***        THE OPTIMIZATION HAS CONVERGED     ***\n",
        "                        *** FINAL ENERGY EVALUATION AT THE STATIONARY POINT ***\n",
        coordinate_block(END),
        "FINAL SINGLE POINT ENERGY      -2280.133333333\n",
    ]
    return "".join(parts)


class TestParseOrcaOutput:

    def test_full_record(self, optimisation_log):
        result = parse_orca_output(optimisation_log)

        assert len(result.geometries) == 2
        assert result.initial_atoms[-2].z == pytest.approx(7.0)
        assert result.initial_atoms[-1].z == pytest.approx(7.74)
        assert result.final_atoms[-1].z == pytest.approx(7.25)
        assert result.energy == pytest.approx(-2280.133333333)

        assert result.efield.ex == pytest.approx(0.001)
        assert result.efield.ez == pytest.approx(-0.002)
        assert result.efield.mag == pytest.approx(math.hypot(0.001, 0.0, -0.002))

        assert result.adsorbate.indices == (7, 8)
        assert result.adsorbate.kind == "H2"
        assert result.site_index == 0
        assert (result.normal.x, result.normal.y, result.normal.z) == pytest.approx((0.0, 0.0, 1.0))

        assert result.run.version == "5.0.4"
        assert result.run.optimization_cycles == 3
        assert result.run.converged is True
        assert result.run.stationary_point is True

    def test_to_dict_layout(self, optimisation_log):
        record = parse_orca_output(optimisation_log).to_dict()
        assert set(record) == {
            "geometries", "initialAtoms", "atoms", "energy", "efield",
            "siteIndex", "adsorbateIdx", "adsorbateKind", "normal0", "run",
        }
        assert record["atoms"][0] == {"element": "C", "x": 0.0, "y": 0.0, "z": 5.0}
        assert record["adsorbateIdx"] == [7, 8]
        assert set(record["efield"]) == {"ex", "ey", "ez", "mag"}
        assert set(record["normal0"]) == {"x", "y", "z"}
        # Must survive a JSON round trip untouched
        assert json.loads(json.dumps(record)) == record

    @pytest.mark.parametrize("text", [None, "", 42, "no markers at all\n"])
    def test_degrades_to_empty_record(self, text):
        record = parse_orca_output(text).to_dict()
        assert record["geometries"] == []
        assert record["initialAtoms"] == []
        assert record["atoms"] == []
        assert record["energy"] is None
        assert record["efield"] is None
        assert record["siteIndex"] is None
        assert record["adsorbateIdx"] == []
        assert record["normal0"] is None

    def test_partial_results_are_independent(self):
        text = "FINAL SINGLE POINT ENERGY   -1.5\n" + coordinate_block([("C", 0, 0, 0), ("O", 0, 0, 1.2)])
        result = parse_orca_output(text)
        assert result.energy == pytest.approx(-1.5)
        assert len(result.final_atoms) == 2
        assert result.site_index is None
        assert result.efield is None

    def test_site_uses_initial_geometry(self, optimisation_log):
        result = parse_orca_output(optimisation_log)
        assert result.site_index < result.adsorbate.indices[0]
        # The adsorbate moved between first and last frame; selection is taken from the first
        assert result.initial_atoms != result.final_atoms

    def test_windows_line_endings(self, optimisation_log):
        result = parse_orca_output(optimisation_log.replace("\n", "\r\n"))
        assert len(result.geometries) == 2
        assert result.energy == pytest.approx(-2280.133333333)

    def test_only_newlines_split_lines(self):
        text = (
            "CARTESIAN COORDINATES (ANGSTROEM)\n"
            "---------------------------------\n"
            "  C      0.000000    0.000000    0.000000 \n"
            "  O      0.000000    0.000000    1.200000\x0c\n"
            "  O      0.000000    0.000000   -1.200000\n"
            "\n"
        )
        result = parse_orca_output(text)
        assert [atom.element for atom in result.final_atoms] == ["C", "O", "O"]
