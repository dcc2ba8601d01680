"""
Utility Tests

Tests geometry helpers, deterministic seeding and the execution-time
logging decorator.
"""

import logging

import pytest

from transit_intel.utils import (
    haversine_miles,
    log_execution_time,
    path_length_miles,
    project_onto_path,
    seeded_rng,
    setup_logger,
    stable_seed,
)


class TestGeo:
    """Tests for GPS geometry helpers"""

    def test_haversine_zero(self):
        """Test identical points are zero apart"""
        assert haversine_miles(19.0, 73.1, 19.0, 73.1) == 0.0

    def test_haversine_one_degree_latitude(self):
        """Test one degree of latitude is about 69 miles"""
        assert haversine_miles(19.0, 73.1, 20.0, 73.1) == pytest.approx(69.09, abs=0.05)

    def test_project_onto_path(self):
        """Test along and offset distances on a straight path"""
        path = [(19.00, 73.10), (19.01, 73.10), (19.02, 73.10)]

        along, offset = project_onto_path((19.015, 73.10), path)

        assert along == pytest.approx(path_length_miles(path) * 0.75, rel=1e-3)
        assert offset == pytest.approx(0.0, abs=1e-6)

    def test_project_off_path(self):
        """Test a point beside the path has a positive offset"""
        along, offset = project_onto_path((19.005, 73.11), [(19.00, 73.10), (19.01, 73.10)])

        assert offset > 0.5
        assert 0.0 < along < path_length_miles([(19.00, 73.10), (19.01, 73.10)])

    def test_empty_path(self):
        """Test an empty path cannot be projected onto"""
        with pytest.raises(ValueError):
            project_onto_path((19.0, 73.1), [])


class TestSeeding:
    """Tests for stable seeds"""

    def test_stable_seed(self):
        """Test seeds depend only on the key parts"""
        assert stable_seed('42-vehicle-0', 7) == stable_seed('42-vehicle-0', 7)
        assert stable_seed('42-vehicle-0', 7) != stable_seed('42-vehicle-0', 8)

    def test_seeded_rng(self):
        """Test equal keys give equal streams"""
        assert seeded_rng('a', 1).integers(0, 1000) == seeded_rng('a', 1).integers(0, 1000)


class TestLogging:
    """Tests for logging helpers"""

    def test_setup_logger_idempotent(self):
        """Test handlers are not duplicated"""
        logger = setup_logger("transit_intel.test")
        setup_logger("transit_intel.test")

        assert len(logger.handlers) == 1

    def test_setup_logger_updates_level(self):
        """Test a second call changes the level without a second handler"""
        logger = setup_logger("transit_intel.test.level", level=logging.INFO)
        setup_logger("transit_intel.test.level", level=logging.DEBUG)

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_log_execution_time(self, caplog):
        """Test durations are logged at debug level"""
        logger = logging.getLogger("transit_intel.test.timing")

        @log_execution_time(logger)
        def work():
            return 42

        with caplog.at_level(logging.DEBUG, logger="transit_intel.test.timing"):
            assert work() == 42

        assert "work executed in" in caplog.text

    def test_log_execution_time_reraises(self, caplog):
        """Test failures are logged and propagated"""
        logger = logging.getLogger("transit_intel.test.failing")

        @log_execution_time(logger)
        def broken():
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="transit_intel.test.failing"):
            with pytest.raises(RuntimeError):
                broken()

        assert "broken failed: boom" in caplog.text
