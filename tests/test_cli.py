"""Tests for command line parsing and the end-to-end service."""

import os

import pandas as pd
import pytest

from dstruct.application.dstruct_service import DStructService
from dstruct.infrastructure.argument_parser import ArgumentParser
from tests.helpers import block_frame


@pytest.fixture
def data_file(tmp_path):
    frames = []
    for name, blocks in (("tx1", [(21, 40)]), ("tx2", [(5, 30)])):
        frame = block_frame(60, blocks, reps_A=3, reps_B=2)
        frame.insert(0, "transcript", name)
        frames.append(frame)
    path = tmp_path / "reactivities.csv"
    pd.concat(frames).to_csv(path, index=False)
    return str(path)


class TestArgumentParser:
    """Tests for ArgumentParser."""

    def test_defaults(self, data_file, tmp_path):
        config, options = ArgumentParser().parse_arguments(
            ["-d", data_file, "-o", str(tmp_path / "out"), "-s", "demo"]
        )
        assert (config.reps_A, config.reps_B) == (0, 0)
        assert config.min_length == 11
        assert config.quality is None
        assert config.ind_regions and config.check_quality
        assert options.mode == "denovo"
        assert options.id_column == "transcript"

    def test_options(self, data_file, tmp_path):
        config, options = ArgumentParser().parse_arguments(
            [
                "-d", data_file, "-o", str(tmp_path / "out"), "-s", "demo",
                "-a", "3", "-b", "2", "--batches", "-l", "21", "-q", "0.4",
                "--collective", "--no_quality_check", "-m", "guided", "-p", "2",
            ]
        )
        assert (config.reps_A, config.reps_B) == (3, 2)
        assert config.batches
        assert config.min_length == 21
        assert config.quality == 0.4
        assert not config.ind_regions
        assert not config.check_quality
        assert config.processes == 2
        assert options.mode == "guided"

    def test_missing_data_file(self, tmp_path):
        with pytest.raises(ValueError):
            ArgumentParser().parse_arguments(
                ["-d", str(tmp_path / "absent.csv"), "-o", str(tmp_path), "-s", "demo"]
            )

    def test_invalid_min_length(self, data_file, tmp_path):
        with pytest.raises(ValueError):
            ArgumentParser().parse_arguments(
                ["-d", data_file, "-o", str(tmp_path), "-s", "demo", "-l", "0"]
            )


class TestDStructService:
    """End-to-end tests for DStructService."""

    def test_process(self, data_file, tmp_path):
        out_dir = tmp_path / "out"
        combs = tmp_path / "between.csv"
        combs.write_text("A3\nB1\nB2\n")
        config, options = ArgumentParser().parse_arguments(
            [
                "-d", data_file, "-o", str(out_dir), "-s", "demo",
                "--batches", "--between_combs", str(combs),
            ]
        )

        results = DStructService(config, options).process()

        assert (config.reps_A, config.reps_B) == (3, 2)
        assert config.between_combs == [["A3", "B1", "B2"]]
        assert results["id"].tolist() == ["tx1", "tx2"]
        assert results["start"].tolist() == [21, 5]
        assert results["end"].tolist() == [40, 30]
        assert os.path.exists(out_dir / "demo_dstruct_results.csv")
        assert os.path.exists(out_dir / "dstruct_summary.csv")
