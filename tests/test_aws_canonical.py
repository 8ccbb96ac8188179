"""Tests for query parameter canonicalization."""

import pytest

from stratus.aws.canonical import canonicalize, encode, indexed_params, render


class TestEncode:
    def test_space_is_percent_20(self):
        assert encode("a b") == "a%20b"

    def test_literal_plus_is_escaped(self):
        assert encode("b+c") == "b%2Bc"

    def test_unreserved_characters_kept(self):
        assert encode("Az09-_.~") == "Az09-_.~"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("a/b", "a%2Fb"),
            ("x*y", "x%2Ay"),
            ("k=v&w", "k%3Dv%26w"),
            ("2009-04-04T11:51:50Z", "2009-04-04T11%3A51%3A50Z"),
            ("é", "%C3%A9"),
        ],
    )
    def test_reserved_characters_escaped(self, raw, expected):
        assert encode(raw) == expected


class TestRender:
    def test_booleans_lowercase(self):
        assert render(True) == "true"
        assert render(False) == "false"

    def test_integers(self):
        assert render(10) == "10"


class TestCanonicalize:
    def test_group_description_encoding(self):
        body = canonicalize({"GroupDescription": "a b+c"})
        assert body == "GroupDescription=a%20b%2Bc"
        assert "+" not in body

    def test_none_values_omitted(self):
        body = canonicalize({"Size": None, "VolumeId": "vol-1", "SnapshotId": None})
        assert body == "VolumeId=vol-1"
        assert "Size" not in body
        assert "SnapshotId" not in body

    def test_sorted_by_byte_order(self):
        body = canonicalize({"b": "3", "B": "2", "A": "1", "A.10": "x", "A.2": "y"})
        assert body == "A=1&A.10=x&A.2=y&B=2&b=3"

    def test_insertion_order_irrelevant(self):
        first = {"Action": "DescribeVolumes", "VolumeId.1": "v-1", "Version": "2009-04-04"}
        second = dict(reversed(list(first.items())))
        assert canonicalize(first) == canonicalize(second)

    def test_no_trailing_separator(self):
        assert not canonicalize({"A": "1", "B": "2"}).endswith("&")

    def test_empty(self):
        assert canonicalize({}) == ""
        assert canonicalize({"A": None}) == ""

    def test_scalar_types(self):
        assert canonicalize({"Monitoring.Enabled": True, "MinCount": 1}) == (
            "MinCount=1&Monitoring.Enabled=true"
        )


class TestIndexedParams:
    def test_sequence(self):
        assert indexed_params("PublicIp", ["1.2.3.4", "5.6.7.8"]) == {
            "PublicIp.1": "1.2.3.4",
            "PublicIp.2": "5.6.7.8",
        }

    def test_scalar_is_single_item(self):
        assert indexed_params("VolumeId", "vol-1") == {"VolumeId.1": "vol-1"}

    def test_empty_and_none(self):
        assert indexed_params("KeyName", []) == {}
        assert indexed_params("KeyName", None) == {}
