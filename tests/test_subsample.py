import random

import pytest

from conftest import fastq_records, read_fastq_headers, write_fastq_gz
from krakenwrap.errors import InputError, InvocationError
from krakenwrap.pipeline.subsample import (
    TMP_R1_NAME,
    TMP_R2_NAME,
    cleanup_subsample,
    parse_depth,
    sample_pairs,
    subsample_pairs,
)


@pytest.mark.parametrize("raw,expected", [("all", None), ("ALL", None), ("25", 25)])
def test_parse_depth(raw, expected):
    assert parse_depth(raw) == expected


@pytest.mark.parametrize("raw", ["0", "-4", "lots", "1.5"])
def test_parse_depth_rejects(raw):
    with pytest.raises(InvocationError):
        parse_depth(raw)


def test_subsample_keeps_exact_count_and_pairing(tmp_path, paired_reads):
    r1, r2 = paired_reads
    tmp_1, tmp_2 = subsample_pairs(r1, r2, 4, tmp_path, rng=random.Random(7))

    assert tmp_1.name == TMP_R1_NAME
    assert tmp_2.name == TMP_R2_NAME
    h1 = read_fastq_headers(tmp_1)
    h2 = read_fastq_headers(tmp_2)
    assert len(h1) == len(h2) == 4
    assert h1 == h2  # mates stay together
    assert len(set(h1)) == 4


def test_subsample_larger_than_input_keeps_everything(tmp_path, paired_reads):
    r1, r2 = paired_reads
    tmp_1, _ = subsample_pairs(r1, r2, 1000, tmp_path, rng=random.Random(1))
    assert sorted(read_fastq_headers(tmp_1)) == sorted(f"@r{i}" for i in range(10))


def test_subsample_is_reproducible_with_seed(tmp_path, paired_reads):
    r1, r2 = paired_reads
    first = read_fastq_headers(subsample_pairs(r1, r2, 3, tmp_path, rng=random.Random(42))[0])
    second = read_fastq_headers(subsample_pairs(r1, r2, 3, tmp_path, rng=random.Random(42))[0])
    assert first == second


def test_subsample_rejects_unbalanced_pairs(tmp_path, reads_dir):
    r1 = write_fastq_gz(reads_dir / "A_1.fastq.gz", fastq_records("a", 3))
    r2 = write_fastq_gz(reads_dir / "A_2.fastq.gz", fastq_records("a", 2))
    with pytest.raises(InputError, match="different numbers of reads"):
        subsample_pairs(r1, r2, 2, tmp_path)


def test_cleanup_removes_temporaries(tmp_path, paired_reads):
    tmps = subsample_pairs(*paired_reads, 2, tmp_path)
    cleanup_subsample(tmps)
    assert not any(p.exists() for p in tmps)


def test_plain_text_reads_are_input_errors(tmp_path, reads_dir):
    r1 = reads_dir / "P_1.fastq.gz"
    r1.write_text("".join(fastq_records("p", 2)))
    r2 = write_fastq_gz(reads_dir / "P_2.fastq.gz", fastq_records("p", 2))
    with pytest.raises(InputError, match="P_1.fastq.gz could not be read as gzipped FASTQ"):
        subsample_pairs(r1, r2, 1, tmp_path)


def test_missing_first_reads_are_input_errors(tmp_path, reads_dir):
    r2 = write_fastq_gz(reads_dir / "M_2.fastq.gz", fastq_records("m", 2))
    with pytest.raises(InputError, match="M_1.fastq.gz could not be read"):
        subsample_pairs(reads_dir / "M_1.fastq.gz", r2, 1, tmp_path)


def test_sample_pairs_holds_requested_count(paired_reads):
    picked = sample_pairs(*paired_reads, 3, rng=random.Random(5))
    assert len(picked) == 3
    assert all(r1[0] == r2[0] for r1, r2 in picked)
