"""Shared fixtures: a healthy MySQL 5.7 server and fake collaborators."""

import datetime as dt
import typing as typ

import pytest

import pymysqltuner.errors as errors
import pymysqltuner.reporter as rp
import pymysqltuner.system as system
import pymysqltuner.tuner as tuner

MEBIBYTE = 1024 ** 2
GIBIBYTE = 1024 ** 3

# Inside the 5.7 support window of the bundled policy
SUPPORTED_DAY = dt.date(2023, 1, 1)

HEALTHY_VARIABLES = {
    "version": "5.7.42-log",
    "max_connections": "151",
    "read_buffer_size": "131072",
    "read_rnd_buffer_size": "262144",
    "sort_buffer_size": "262144",
    "thread_stack": "262144",
    "join_buffer_size": "262144",
    "key_buffer_size": "8388608",
    "key_cache_block_size": "1024",
    "tmp_table_size": "16777216",
    "max_heap_table_size": "16777216",
    "innodb_buffer_pool_size": "134217728",
    "innodb_log_buffer_size": "16777216",
    "innodb_log_file_size": "33554432",
    "query_cache_size": "1048576",
    "query_cache_limit": "1048576",
    "have_archive": "YES",
    "have_bdb": "NO",
    "have_federated_engine": "NO",
    "have_innodb": "YES",
    "have_isam": "NO",
    "have_ndbcluster": "NO",
    "wait_timeout": "28800",
    "interactive_timeout": "28800",
    "long_query_time": "10.000000",
    "slow_query_log": "ON",
    "thread_cache_size": "9",
    "table_open_cache": "2000",
    "open_files_limit": "5000",
    "concurrent_insert": "AUTO",
    "read_only": "OFF",
}

HEALTHY_STATUS = {
    "Uptime": "172800",
    "Questions": "100000",
    "Connections": "1000",
    "Max_used_connections": "20",
    "Slow_queries": "10",
    "Bytes_sent": "52428800",
    "Bytes_received": "10485760",
    "Key_read_requests": "1000",
    "Key_reads": "10",
    "Key_blocks_unused": "4000",
    "Com_select": "50000",
    "Com_insert": "20000",
    "Com_update": "5000",
    "Com_delete": "1000",
    "Com_replace": "0",
    "Qcache_hits": "40000",
    "Qcache_free_memory": "524288",
    "Qcache_lowmem_prunes": "0",
    "Sort_merge_passes": "0",
    "Sort_range": "100",
    "Sort_scan": "100",
    "Select_full_join": "0",
    "Select_range_check": "0",
    "Created_tmp_tables": "1000",
    "Created_tmp_disk_tables": "10",
    "Open_tables": "500",
    "Opened_tables": "600",
    "Open_files": "50",
    "Table_locks_immediate": "1000",
    "Table_locks_waited": "0",
    "Threads_created": "10",
    "Aborted_connects": "5",
}


class FakeDataAccess:
    """Data access collaborator serving canned server facts."""

    def __init__(
        self,
        variables: typ.Dict[str, str],
        status: typ.Dict[str, str],
        passwordless: typ.Sequence[str] = (),
        load_error: Exception = None,
        password_error: Exception = None,
    ):
        self.variables = variables
        self.status = status
        self.passwordless = list(passwordless)
        self.load_error = load_error
        self.password_error = password_error
        self.engine_data_size = {"InnoDB": 50 * MEBIBYTE, "MyISAM": MEBIBYTE}
        self.engine_table_count = {"InnoDB": 40, "MyISAM": 3}
        self.fragmented_table_count = 0
        self.total_myisam_indexes = MEBIBYTE
        self.replication_status = {}
        self.slave_count = 0

    def load_snapshot(self, server):
        if self.load_error is not None:
            raise self.load_error
        server.variables = dict(self.variables)
        server.status = dict(self.status)
        server.engine_data_size = dict(self.engine_data_size)
        server.engine_table_count = dict(self.engine_table_count)
        server.fragmented_table_count = self.fragmented_table_count
        server.total_myisam_indexes = self.total_myisam_indexes
        server.replication_status = dict(self.replication_status)
        server.slave_count = self.slave_count
        return server

    def find_passwordless_accounts(self, server):
        if self.password_error is not None:
            raise self.password_error
        return list(self.passwordless)


class FakeSystem:
    """System info collaborator with fixed memory and architecture."""

    def __init__(self, physical: int = 8 * GIBIBYTE, swap: int = 2 * GIBIBYTE, is_64bit: bool = True):
        self.physical = physical
        self.swap = swap
        self._is_64bit = is_64bit

    def physical_memory(self):
        return self.physical

    def virtual_memory(self):
        return self.physical + self.swap

    def is_64bit(self):
        return self._is_64bit


def make_snapshot(variables=None, status=None, **overrides) -> tuner.ServerSnapshot:
    """Loaded local snapshot built from the healthy server with overrides."""
    server = tuner.ServerSnapshot(password="secret")
    server.variables = dict(HEALTHY_VARIABLES, **(variables or {}))
    server.status = dict(HEALTHY_STATUS, **(status or {}))
    server.engine_data_size = {"InnoDB": 50 * MEBIBYTE, "MyISAM": MEBIBYTE}
    server.engine_table_count = {"InnoDB": 40, "MyISAM": 3}
    server.total_myisam_indexes = MEBIBYTE
    server.physical_memory = 8 * GIBIBYTE
    server.swap_memory = 2 * GIBIBYTE
    for name, value in overrides.items():
        setattr(server, name, value)
    return server


@pytest.fixture
def option():
    """Options with colours off so prefixes are plain."""
    opt = tuner.Option()
    opt.no_color = True
    return opt


@pytest.fixture
def healthy_server():
    """Loaded snapshot of the healthy 5.7 server."""
    return make_snapshot()


@pytest.fixture
def data_access():
    """Fake data access serving the healthy 5.7 server."""
    return FakeDataAccess(HEALTHY_VARIABLES, HEALTHY_STATUS)


@pytest.fixture
def system_info():
    """64-bit machine with 8GiB RAM and 2GiB swap."""
    return FakeSystem()


@pytest.fixture
def prompt(option):
    """Prompt that must not be asked."""

    def ask(question):
        raise AssertionError(f"Unexpected prompt: {question}")

    return system.OptionPrompt(option, ask=ask)


@pytest.fixture
def reporter():
    """Reporter keeping every event."""
    return rp.CollectingReporter()


@pytest.fixture
def denied():
    """Error raised when mysql.user is not readable."""
    return errors.DataAccessError("SELECT command denied to user 'tuner'@'localhost' for table 'user'")
