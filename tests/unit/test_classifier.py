"""Unit tests for metric tables and classification

Tests:
- Label extraction from stat names
- Microsecond to second conversion
- Map statistics
- Skipping of unknown names and non-numeric values
- Table-ordered, deterministic output
"""
import random

import pytest

from pdns_exporter.metrics import MetricKind, classify, classify_all, get_metric_table
from pdns_exporter.metrics.base import entry_name, fixed_label, microseconds_to_seconds, name_segment
from pdns_exporter.stats import MapStatEntry, StatEntry, decode_statistics


@pytest.fixture
def authoritative_table():
    return get_metric_table("authoritative")


@pytest.fixture
def recursor_table():
    return get_metric_table("recursor")


class TestMetricTables:

    def test_prefix_per_role(self, authoritative_table, recursor_table):
        assert authoritative_table.prefix == "powerdns_authoritative"
        assert recursor_table.prefix == "powerdns_recursor"

    def test_unknown_role(self):
        with pytest.raises(ValueError, match="unsupported daemon type 'dnsdist'"):
            get_metric_table("dnsdist")

    def test_same_stat_same_metric_every_time(self):
        first = get_metric_table("authoritative").stat("cpu-sys-msec")
        second = get_metric_table("authoritative").stat("cpu-sys-msec")
        assert first == second
        assert first.kind == MetricKind.COUNTER

    def test_sections_are_separate(self, recursor_table):
        assert recursor_table.stat("response-sizes") is None
        assert recursor_table.map_stat("response-sizes") is not None
        assert recursor_table.map_stat("uptime") is None

    def test_table_is_read_only(self, authoritative_table):
        with pytest.raises(TypeError):
            authoritative_table._stats["uptime"] = None

    def test_label_sets_consistent_per_metric(self, authoritative_table, recursor_table):
        for table in (authoritative_table, recursor_table):
            label_keys = {}
            for name in table.names:
                descriptor = table.stat(name) or table.map_stat(name)
                key = descriptor.label(name)[0] if descriptor.label else None
                assert label_keys.setdefault(descriptor.name, key) == key, name


class TestLabelHelpers:

    def test_name_segment(self):
        assert name_segment("type", 1)("cpu-sys-msec") == ("type", "sys")
        assert name_segment("type", 0)("user-msec") == ("type", "user")

    def test_fixed_label(self):
        assert fixed_label("net", "tcp")("tcp-questions") == ("net", "tcp")

    def test_entry_name(self):
        assert entry_name("qtype")("AAAA") == ("qtype", "AAAA")

    def test_microseconds_to_seconds(self):
        assert microseconds_to_seconds(1308) == pytest.approx(0.001308, abs=1e-9)


class TestClassify:

    def test_cpu_stats_share_one_counter(self, authoritative_table):
        sys_point, = classify(StatEntry("cpu-sys-msec", "1729"), authoritative_table)
        user_point, = classify(StatEntry("cpu-user-msec", "1877"), authoritative_table)

        assert sys_point.name == user_point.name == "powerdns_authoritative_cpu_utilisation"
        assert sys_point.kind == MetricKind.COUNTER
        assert sys_point.labels == {"type": "sys"}
        assert user_point.labels == {"type": "user"}
        assert sys_point.value == 1729
        assert user_point.value == 1877
        assert sys_point.help == "Number of CPU milliseconds spent in user, and kernel space"

    def test_latency_converted_to_seconds(self, authoritative_table):
        point, = classify(StatEntry("latency-average", "1308"), authoritative_table)

        assert point.name == "powerdns_authoritative_latency_average_seconds"
        assert point.kind == MetricKind.GAUGE
        assert point.labels == {}
        assert point.value == pytest.approx(0.001308, abs=1e-9)
        assert f"{point.value:.6f}" == "0.001308"

    @pytest.mark.parametrize("stat, metric", [
        ("packetcache-hit", "powerdns_authoritative_packet_cache_lookups_total"),
        ("query-cache-miss", "powerdns_authoritative_query_cache_lookups_total"),
    ])
    def test_cache_lookup_counters(self, authoritative_table, stat, metric):
        point, = classify(StatEntry(stat, "53"), authoritative_table)
        assert point.name == metric
        assert point.kind == MetricKind.COUNTER
        assert point.labels == {"result": stat.rsplit("-", 1)[1]}

    def test_recursor_latency(self, recursor_table):
        point, = classify(StatEntry("qa-latency", "29853"), recursor_table)
        assert point.name == "powerdns_recursor_latency_average_seconds"
        assert point.value == pytest.approx(0.029853)

    def test_unknown_stat_skipped(self, authoritative_table):
        assert classify(StatEntry("corrupt-packets", "3"), authoritative_table) == []

    def test_non_numeric_value_skipped(self, authoritative_table):
        assert classify(StatEntry("uptime", "n/a"), authoritative_table) == []

    @pytest.mark.parametrize("value", [None, True, ["1"], {"a": "1"}])
    def test_non_scalar_value_skipped(self, authoritative_table, value):
        assert classify(StatEntry("uptime", value), authoritative_table) == []

    def test_map_statistic(self, recursor_table):
        entry = MapStatEntry("response-by-qtype", (("A", "120"), ("AAAA", "8"), ("MX", "bogus")))
        points = classify(entry, recursor_table)

        assert [p.labels for p in points] == [{"qtype": "A"}, {"qtype": "AAAA"}]
        assert [p.value for p in points] == [120, 8]
        assert {p.name for p in points} == {"powerdns_recursor_response_by_qtype_total"}

    def test_variant_mismatch_skipped(self, recursor_table):
        assert classify(MapStatEntry("uptime", (("a", "1"),)), recursor_table) == []
        assert classify(StatEntry("response-sizes", "3"), recursor_table) == []


class TestClassifyAll:

    def test_fixture(self, recursor_stats, recursor_table):
        points = classify_all(decode_statistics(recursor_stats), recursor_table)
        by_key = {(p.name, tuple(sorted(p.labels.items()))): p.value for p in points}

        assert by_key[("powerdns_recursor_incoming_queries_total", (("net", "udp"),))] == 6181
        assert by_key[("powerdns_recursor_incoming_queries_total", (("net", "tcp"),))] == 8
        assert by_key[("powerdns_recursor_answers_rtime_total", (("timeslot", "over_1000ms"),))] == 23
        assert by_key[("powerdns_recursor_cpu_utilisation", (("type", "sys"),))] == 9210
        assert by_key[("powerdns_recursor_response_sizes_total", (("size", "100"),))] == 4233
        assert by_key[("powerdns_recursor_response_by_rcode_total", (("rcode", "No Error"),))] == 5731
        assert not any("x_our_latency" in p.name for p in points)

    def test_order_follows_table_not_response(self, recursor_stats, recursor_table):
        entries = decode_statistics(recursor_stats)
        expected = classify_all(entries, recursor_table)

        shuffled = list(entries)
        random.Random(7).shuffle(shuffled)

        assert classify_all(shuffled, recursor_table) == expected

    def test_empty(self, recursor_table):
        assert classify_all([], recursor_table) == []
