"""Tests for metrics derived from a server snapshot."""

import pytest

import pymysqltuner.calculations as calculations
from conftest import GIBIBYTE, MEBIBYTE, make_snapshot


class TestAnsweredQueries:
    def test_zero_questions(self):
        assert calculations.calculations(make_snapshot(status={"Questions": "0"})) is None

    def test_missing_questions(self):
        server = make_snapshot()
        del server.status["Questions"]
        assert calculations.calculations(server) is None

    def test_answered(self, healthy_server):
        assert calculations.calculations(healthy_server) is not None


class TestMemory:
    def test_buffers(self, healthy_server):
        calc = calculations.calculations(healthy_server)
        assert calc["per_thread_buffers"] == 1179648
        assert calc["total_per_thread_buffers"] == 1179648 * 151
        assert calc["max_total_per_thread_buffers"] == 1179648 * 20
        assert calc["max_tmp_table_size"] == 16 * MEBIBYTE
        assert calc["server_buffers"] == 169 * MEBIBYTE
        assert calc["total_possible_used_memory"] == 169 * MEBIBYTE + 1179648 * 151
        assert calc["pct_physical_memory"] == 4

    def test_pre_mysql_4_buffer_names(self):
        server = make_snapshot(variables={
            "version": "3.23.58",
            "record_buffer": "131072",
            "record_rnd_buffer": "262144",
            "sort_buffer": "524288",
        })
        calc = calculations.calculations(server)
        assert calc["per_thread_buffers"] == 131072 + 262144 + 524288 + 262144 + 262144

    def test_optional_buffers_skipped(self):
        server = make_snapshot()
        for name in ("innodb_buffer_pool_size", "innodb_log_buffer_size", "query_cache_size"):
            del server.variables[name]
        calc = calculations.calculations(server)
        assert calc["server_buffers"] == 24 * MEBIBYTE

    def test_unknown_physical_memory(self):
        calc = calculations.calculations(make_snapshot(physical_memory=0))
        assert "pct_physical_memory" not in calc


class TestConnections:
    @pytest.mark.parametrize("used, maximum, expected", [
        ("95", "100", 95),
        ("500", "100", 100),
        ("10", "0", 0),
        ("-5", "100", 0),
    ])
    def test_clamped(self, used, maximum, expected):
        server = make_snapshot(variables={"max_connections": maximum}, status={"Max_used_connections": used})
        pct = calculations.calculations(server)["pct_connections_used"]
        assert pct == expected
        assert 0 <= pct <= 100

    def test_slow_queries_rounded_up(self, healthy_server):
        assert calculations.calculations(healthy_server)["pct_slow_queries"] == 1


class TestKeyBuffer:
    def test_hit_rate(self, healthy_server):
        assert calculations.calculations(healthy_server)["pct_keys_from_mem"] == 99

    def test_no_requests(self):
        calc = calculations.calculations(make_snapshot(status={"Key_read_requests": "0"}))
        assert calc["pct_keys_from_mem"] == 0

    def test_index_size_needs_mysql_5(self):
        calc = calculations.calculations(make_snapshot(variables={"version": "4.1.22"}))
        assert "total_myisam_indexes" not in calc

    def test_index_size(self, healthy_server):
        assert calculations.calculations(healthy_server)["total_myisam_indexes"] == MEBIBYTE


class TestQueryCache:
    @pytest.mark.parametrize("version", ["3.23.58", "8.0.34", "10.6.12-MariaDB"])
    def test_absent_outside_4_to_8(self, version):
        calc = calculations.calculations(make_snapshot(variables={"version": version}))
        assert "query_cache_efficiency" not in calc
        assert "query_cache_prunes_per_day" not in calc

    def test_efficiency(self, healthy_server):
        calc = calculations.calculations(healthy_server)
        assert calc["query_cache_efficiency"] == 45
        assert calc["query_cache_prunes_per_day"] == 0

    def test_prunes_per_started_day(self):
        calc = calculations.calculations(make_snapshot(status={"Uptime": "90000", "Qcache_lowmem_prunes": "300"}))
        assert calc["query_cache_prunes_per_day"] == 150


class TestTables:
    def test_table_cache_without_opened_tables(self):
        calc = calculations.calculations(make_snapshot(status={"Opened_tables": "0"}))
        assert calc["table_cache_hit_rate"] == 100

    def test_table_cache_hit_rate(self, healthy_server):
        assert calculations.calculations(healthy_server)["table_cache_hit_rate"] == 83

    def test_no_sorts(self):
        calc = calculations.calculations(make_snapshot(status={"Sort_range": "0", "Sort_scan": "0"}))
        assert calc["total_sorts"] == 0
        assert "pct_temp_sort_table" not in calc

    def test_joins_per_day(self):
        calc = calculations.calculations(make_snapshot(status={"Select_full_join": "1000"}))
        assert calc["joins_without_indexes_per_day"] == 500

    def test_no_temporary_tables(self):
        calc = calculations.calculations(make_snapshot(status={"Created_tmp_tables": "0"}))
        assert "pct_temp_disk" not in calc

    def test_no_open_files_limit(self):
        calc = calculations.calculations(make_snapshot(variables={"open_files_limit": "0"}))
        assert "pct_files_open" not in calc

    def test_table_locks(self):
        calc = calculations.calculations(make_snapshot(status={"Table_locks_waited": "1000"}))
        assert calc["pct_table_locks_immediate"] == 50

    def test_no_immediate_table_locks(self):
        calc = calculations.calculations(make_snapshot(status={"Table_locks_immediate": "0"}))
        assert "pct_table_locks_immediate" not in calc


class TestThreadsAndTraffic:
    def test_thread_cache(self, healthy_server):
        calc = calculations.calculations(healthy_server)
        assert calc["thread_cache_hit_rate"] == 99
        assert calc["pct_aborted_connections"] == 1

    def test_no_connections(self):
        calc = calculations.calculations(make_snapshot(status={"Connections": "0"}))
        assert calc["thread_cache_hit_rate"] == 100
        assert "pct_aborted_connections" not in calc

    def test_no_reads(self):
        calc = calculations.calculations(make_snapshot(status={"Com_select": "0"}))
        assert calc["pct_reads"] == 0
        assert calc["pct_writes"] == 100

    def test_innodb_log_ratio(self, healthy_server):
        assert calculations.calculations(healthy_server)["innodb_log_size_pct"] == 25

    def test_innodb_disabled(self):
        calc = calculations.calculations(make_snapshot(variables={"have_innodb": "NO"}))
        assert "innodb_log_size_pct" not in calc

    def test_unparsable_values_count_as_zero(self):
        calc = calculations.calculations(make_snapshot(variables={"key_buffer_size": "lots"}))
        assert calc["server_buffers"] == 161 * MEBIBYTE

    def test_memory_fraction_of_large_machine(self):
        calc = calculations.calculations(make_snapshot(physical_memory=64 * GIBIBYTE))
        assert calc["pct_physical_memory"] == 0
