# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Numeric TF-IDF checks on the character batch ["GACCA", "ABCABCD", "GAB"].

Dictionary: G=1, A=2, C=3, B=4, D=5. Document frequencies after the batch:
G=2, A=3, C=2, B=2, D=1, with N=3.
"""

import math

import pytest
import torch

from strenc.encoder.core import StringEncoder
from strenc.policies import TfIdfPolicy
from strenc.tokenizer.core import CharExtract

SMOOTH_G = math.log(4 / 3) + 1  # also C and B
SMOOTH_D = math.log(2) + 1
RAW_G = math.log(3 / 2) + 1
RAW_D = math.log(3) + 1

EXPECTED = {
    ("raw_count", True): [
        [1.2876820724517808, 2, 2.5753641449035616, 0, 0],
        [0, 2, 2.5753641449035616, 2.5753641449035616, 1.6931471805599454],
        [1.2876820724517808, 1, 0, 1.2876820724517808, 0],
    ],
    ("raw_count", False): [
        [1.4054651081081644, 2, 2.8109302162163288, 0, 0],
        [0, 2, 2.8109302162163288, 2.8109302162163288, 2.0986122886681100],
        [1.4054651081081644, 1, 0, 1.4054651081081644, 0],
    ],
    ("binary", True): [
        [1.2876820724517808, 1, 1.2876820724517808, 0, 0],
        [0, 1, 1.2876820724517808, 1.2876820724517808, 1.6931471805599454],
        [1.2876820724517808, 1, 0, 1.2876820724517808, 0],
    ],
    ("binary", False): [
        [1.4054651081081644, 1, 1.4054651081081644, 0, 0],
        [0, 1, 1.4054651081081644, 1.4054651081081644, 2.0986122886681100],
        [1.4054651081081644, 1, 0, 1.4054651081081644, 0],
    ],
    ("sublinear", True): [
        [1.2876820724517808, 1.6931471805599454, 2.1802352704293200, 0, 0],
        [0, 1.6931471805599454, 2.1802352704293200, 2.1802352704293200, 1.6931471805599454],
        [1.2876820724517808, 1, 0, 1.2876820724517808, 0],
    ],
    ("sublinear", False): [
        [1.4054651081081644, 1.6931471805599454, 2.3796592851687173, 0, 0],
        [0, 1.6931471805599454, 2.3796592851687173, 2.3796592851687173, 2.0986122886681100],
        [1.4054651081081644, 1, 0, 1.4054651081081644, 0],
    ],
    ("term_frequency", True): [
        [0.2575364144903562, 0.4, 0.5150728289807124, 0, 0],
        [0, 2 / 7, 2 / 7 * SMOOTH_G, 2 / 7 * SMOOTH_G, SMOOTH_D / 7],
        [0.4292273574839269, 0.3333333333333333, 0, 0.4292273574839269, 0],
    ],
    ("term_frequency", False): [
        [0.2810930216216329, 0.4, 0.5621860432432658, 0, 0],
        [0, 2 / 7, 2 / 7 * RAW_G, 2 / 7 * RAW_G, RAW_D / 7],
        [0.4684883693693881, 0.3333333333333333, 0, 0.4684883693693881, 0],
    ],
}


@pytest.mark.parametrize("tf_type, smooth_idf", sorted(EXPECTED))
def test_tfidf_matrix(char_sequences: list[str], tf_type: str, smooth_idf: bool) -> None:
    encoder = StringEncoder(TfIdfPolicy(tf_type=tf_type, smooth_idf=smooth_idf))
    output = encoder.encode(char_sequences, CharExtract())

    assert output.dtype == torch.float64
    assert output.shape == (3, 5)
    for actual, expected in zip(output.tolist(), EXPECTED[(tf_type, smooth_idf)]):
        assert actual == pytest.approx(expected, abs=1e-12)


def test_second_batch_uses_accumulated_frequencies(char_sequences: list[str]) -> None:
    encoder = StringEncoder(TfIdfPolicy())
    encoder.encode(char_sequences, CharExtract())

    # N=4 now; "A" has df=4, "E" is new with df=1.
    output = encoder.encode(["AE"], CharExtract())

    assert output.shape == (1, 6)
    row = output.tolist()[0]
    assert row[1] == pytest.approx(math.log(5 / 5) + 1)
    assert row[5] == pytest.approx(math.log(5 / 2) + 1)
    assert row[0] == 0.0


def test_empty_sequence_gives_zero_row_for_term_frequency() -> None:
    encoder = StringEncoder(TfIdfPolicy(tf_type="term_frequency"))
    output = encoder.encode(["ab", ""], CharExtract())

    assert output[1].tolist() == [0.0, 0.0]
    assert encoder.policy.total_documents == 2
