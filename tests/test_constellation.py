"""Tests for the constellation validator."""

from __future__ import annotations

import pytest

from mission42_server.constellation import (
    CandidateRequest,
    ConstellationRequest,
    ConstellationValidationError,
    validate_request,
)


def _candidate(satellites=20, planes=5, altitudes=500) -> CandidateRequest:
    return CandidateRequest(num_satellites=satellites, num_planes=planes, altitudes=altitudes)


class TestValidateRequestAccepts:
    """Values inside every bound are accepted."""

    @pytest.mark.parametrize(
        "satellites,planes,altitude",
        [
            (1, 1, 160),
            (60, 10, 2000),
            (20, 5, 500),
            (7, 7, 1234.5),
            (10, 1, 160.0),
        ],
    )
    def test_accepts_values_in_range(self, satellites, planes, altitude):
        """Should return a request for in-range parameters."""
        result = validate_request(_candidate(satellites, planes, altitude))

        assert isinstance(result, ConstellationRequest)
        assert result.num_satellites == satellites
        assert result.num_planes == planes
        assert result.altitudes == (float(altitude),) * planes

    def test_broadcasts_single_altitude(self):
        """A single altitude should be replicated once per plane."""
        result = validate_request(_candidate(12, 4, 550))

        assert result.altitudes == (550.0, 550.0, 550.0, 550.0)

    def test_broadcasts_single_element_list(self):
        """A one-element list behaves like a single altitude."""
        result = validate_request(_candidate(12, 3, [700]))

        assert result.altitudes == (700.0, 700.0, 700.0)

    def test_keeps_per_plane_altitudes(self):
        """One altitude per plane is kept in order."""
        result = validate_request(_candidate(9, 3, [500, 600, 700]))

        assert result.altitudes == (500.0, 600.0, 700.0)

    def test_coerces_numeric_strings(self):
        """Model arguments often arrive as strings."""
        result = validate_request(_candidate("20", "5.0", "500 km"))

        assert result.num_satellites == 20
        assert result.num_planes == 5
        assert result.altitudes[0] == 500.0


class TestValidateRequestClamps:
    """Counts below 1 are raised to 1 instead of rejected."""

    def test_zero_satellites_becomes_one(self):
        result = validate_request(_candidate(satellites=0, planes=1))

        assert result.num_satellites == 1

    def test_negative_planes_becomes_one(self):
        result = validate_request(_candidate(satellites=5, planes=-3))

        assert result.num_planes == 1


class TestValidateRequestRejects:
    """Out-of-range candidates are rejected with a reason naming the constraint."""

    def test_too_many_satellites(self):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(satellites=61, planes=5))

        assert "satellites" in exc_info.value.reason.lower()
        assert "60" in exc_info.value.reason

    def test_too_many_planes(self):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(satellites=40, planes=11))

        assert "orbital planes" in exc_info.value.reason.lower()
        assert "10" in exc_info.value.reason

    def test_more_planes_than_satellites(self):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(satellites=3, planes=4))

        assert "cannot exceed" in exc_info.value.reason

    @pytest.mark.parametrize("altitude", [159.9, 2000.1, 0, 36000])
    def test_altitude_out_of_band(self, altitude):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(altitudes=altitude))

        assert "altitude" in exc_info.value.reason.lower()
        assert "160" in exc_info.value.reason and "2000" in exc_info.value.reason

    def test_one_bad_altitude_among_many(self):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(satellites=6, planes=3, altitudes=[500, 2500, 600]))

        assert "2500" in exc_info.value.reason

    def test_satellite_bound_checked_before_planes(self):
        """The first failing check wins."""
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(satellites=100, planes=50, altitudes=5))

        assert "satellites must be between" in exc_info.value.reason

    def test_plane_bound_checked_before_altitude(self):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(satellites=30, planes=12, altitudes=5))

        assert "orbital planes" in exc_info.value.reason.lower()

    def test_altitude_count_mismatch(self):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(satellites=10, planes=3, altitudes=[500, 600]))

        assert "one per plane" in exc_info.value.reason

    @pytest.mark.parametrize("value", [None, []])
    def test_missing_altitude(self, value):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(altitudes=value))

        assert "altitude" in exc_info.value.reason.lower()

    @pytest.mark.parametrize("value", ["twenty", 2.5, True, None])
    def test_non_integer_satellites(self, value):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(satellites=value))

        assert "whole number" in exc_info.value.reason

    def test_non_numeric_altitude(self):
        with pytest.raises(ConstellationValidationError) as exc_info:
            validate_request(_candidate(altitudes="low"))

        assert "kilometers" in exc_info.value.reason


class TestDescribe:
    """Tests for the human-readable summary."""

    def test_uniform_altitude(self):
        request = ConstellationRequest(num_satellites=20, num_planes=5, altitudes=(500.0,) * 5)

        assert request.describe() == "20 satellites across 5 orbital planes at 500 km"

    def test_mixed_altitudes(self):
        request = ConstellationRequest(num_satellites=4, num_planes=2, altitudes=(500.0, 750.5))

        assert request.describe() == "4 satellites across 2 orbital planes at altitudes 500, 750.5 km"
