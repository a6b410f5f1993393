"""
Module to derive tuning metrics from a server snapshot
"""

import typing as typ
import pymysqltuner.tuner as tuner
import pymysqltuner.util as util


def has_answered_queries(server: tuner.ServerSnapshot) -> bool:
    """Checks whether server has answered any queries

    :param tuner.ServerSnapshot server:
    :return bool:
    """
    return server.int_status(u"Questions") > 0


def memory_metrics(server: tuner.ServerSnapshot, calc: tuner.MetricsSet) -> None:
    """Per-thread, server-wide and global memory

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc: metrics computed so far
    :return:
    """
    if server.version.major > 3:
        calc[u"per_thread_buffers"] = (
            server.int_variable(u"read_buffer_size") +
            server.int_variable(u"read_rnd_buffer_size") +
            server.int_variable(u"sort_buffer_size") +
            server.int_variable(u"thread_stack") +
            server.int_variable(u"join_buffer_size")
        )
    else:
        calc[u"per_thread_buffers"] = (
            server.int_variable(u"record_buffer") +
            server.int_variable(u"record_rnd_buffer") +
            server.int_variable(u"sort_buffer") +
            server.int_variable(u"thread_stack") +
            server.int_variable(u"join_buffer_size")
        )

    calc[u"total_per_thread_buffers"] = calc[u"per_thread_buffers"] * server.int_variable(u"max_connections")
    calc[u"max_total_per_thread_buffers"] = calc[u"per_thread_buffers"] * server.int_status(u"Max_used_connections")

    calc[u"max_tmp_table_size"] = min(
        server.int_variable(u"tmp_table_size"),
        server.int_variable(u"max_heap_table_size")
    )
    calc[u"server_buffers"] = server.int_variable(u"key_buffer_size") + calc[u"max_tmp_table_size"]
    for optional_buffer in (
        u"innodb_buffer_pool_size",
        u"innodb_additional_mem_pool_size",
        u"innodb_log_buffer_size",
        u"query_cache_size",
    ):
        if server.has_variable(optional_buffer):
            calc[u"server_buffers"] += server.int_variable(optional_buffer)

    calc[u"max_used_memory"] = calc[u"server_buffers"] + calc[u"max_total_per_thread_buffers"]
    calc[u"total_possible_used_memory"] = calc[u"server_buffers"] + calc[u"total_per_thread_buffers"]
    if server.physical_memory > 0:
        calc[u"pct_physical_memory"] = calc[u"total_possible_used_memory"] * 100 // server.physical_memory


def connection_metrics(server: tuner.ServerSnapshot, calc: tuner.MetricsSet) -> None:
    questions: int = server.int_status(u"Questions")
    if questions > 0:
        calc[u"pct_slow_queries"] = util.ceil_percentage(server.int_status(u"Slow_queries"), questions)
    else:
        calc[u"pct_slow_queries"] = 0

    max_connections: int = server.int_variable(u"max_connections")
    if max_connections > 0:
        pct_connections_used: int = util.ceil_percentage(server.int_status(u"Max_used_connections"), max_connections)
    else:
        pct_connections_used: int = 0
    calc[u"pct_connections_used"] = max(min(pct_connections_used, 100), 0)


def key_buffer_metrics(server: tuner.ServerSnapshot, calc: tuner.MetricsSet) -> None:
    """MyISAM key buffer usage and hit rate

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc: metrics computed so far
    :return:
    """
    version: tuner.Version = server.version
    key_buffer_size: int = server.int_variable(u"key_buffer_size")
    if (version.major, version.minor) > (4, 0) and key_buffer_size > 0:
        calc[u"pct_key_buffer_used"] = util.ceil_percentage(
            key_buffer_size - server.int_status(u"Key_blocks_unused") * server.int_variable(u"key_cache_block_size"),
            key_buffer_size
        )

    key_read_requests: int = server.int_status(u"Key_read_requests")
    if key_read_requests > 0:
        calc[u"pct_keys_from_mem"] = 100 - util.ceil_percentage(server.int_status(u"Key_reads"), key_read_requests)
    else:
        calc[u"pct_keys_from_mem"] = 0

    # Index sizes come from information_schema, which only exists from MySQL 5
    if version.major >= 5 and server.total_myisam_indexes is not None:
        calc[u"total_myisam_indexes"] = server.total_myisam_indexes


def query_cache_metrics(server: tuner.ServerSnapshot, calc: tuner.MetricsSet) -> None:
    """Query cache exists from MySQL 4 and was removed in MySQL 8

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc: metrics computed so far
    :return:
    """
    if not 4 <= server.version.major < 8:
        return

    query_cache_hits: int = server.int_status(u"Qcache_hits")
    selects: int = server.int_status(u"Com_select") + query_cache_hits
    calc[u"query_cache_efficiency"] = util.ceil_percentage(query_cache_hits, selects) if selects > 0 else 0

    query_cache_size: int = server.int_variable(u"query_cache_size")
    if query_cache_size > 0:
        calc[u"pct_query_cache_used"] = 100 - util.ceil_percentage(
            server.int_status(u"Qcache_free_memory"),
            query_cache_size
        )

    if server.status.get(u"Qcache_lowmem_prunes", u"0") == u"0":
        calc[u"query_cache_prunes_per_day"] = 0
    else:
        calc[u"query_cache_prunes_per_day"] = (
            server.int_status(u"Qcache_lowmem_prunes") // util.days_up(server.int_status(u"Uptime"))
        )


def table_metrics(server: tuner.ServerSnapshot, calc: tuner.MetricsSet) -> None:
    """Sorts, joins, temporary tables, table cache, open files and table locks

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc: metrics computed so far
    :return:
    """
    calc[u"total_sorts"] = server.int_status(u"Sort_scan") + server.int_status(u"Sort_range")
    if calc[u"total_sorts"] > 0:
        calc[u"pct_temp_sort_table"] = util.ceil_percentage(server.int_status(u"Sort_merge_passes"), calc[u"total_sorts"])

    calc[u"joins_without_indexes"] = server.int_status(u"Select_range_check") + server.int_status(u"Select_full_join")
    if calc[u"joins_without_indexes"] > 0:
        calc[u"joins_without_indexes_per_day"] = (
            calc[u"joins_without_indexes"] // util.days_up(server.int_status(u"Uptime"))
        )
    else:
        calc[u"joins_without_indexes_per_day"] = 0

    created_tmp_tables: int = server.int_status(u"Created_tmp_tables")
    created_tmp_disk_tables: int = server.int_status(u"Created_tmp_disk_tables")
    if created_tmp_tables > 0:
        if created_tmp_disk_tables > 0:
            calc[u"pct_temp_disk"] = util.ceil_percentage(
                created_tmp_disk_tables,
                created_tmp_tables + created_tmp_disk_tables
            )
        else:
            calc[u"pct_temp_disk"] = 0

    opened_tables: int = server.int_status(u"Opened_tables")
    if opened_tables > 0:
        calc[u"table_cache_hit_rate"] = server.int_status(u"Open_tables") * 100 // opened_tables
    else:
        calc[u"table_cache_hit_rate"] = 100

    open_files_limit: int = server.int_variable(u"open_files_limit")
    if open_files_limit > 0:
        calc[u"pct_files_open"] = server.int_status(u"Open_files") * 100 // open_files_limit

    table_locks_immediate: int = server.int_status(u"Table_locks_immediate")
    if table_locks_immediate > 0:
        table_locks_waited: int = server.int_status(u"Table_locks_waited")
        if table_locks_waited == 0:
            calc[u"pct_table_locks_immediate"] = 100
        else:
            calc[u"pct_table_locks_immediate"] = (
                table_locks_immediate * 100 // (table_locks_waited + table_locks_immediate)
            )


def thread_metrics(server: tuner.ServerSnapshot, calc: tuner.MetricsSet) -> None:
    connections: int = server.int_status(u"Connections")
    if connections > 0:
        calc[u"thread_cache_hit_rate"] = 100 - util.ceil_percentage(server.int_status(u"Threads_created"), connections)
        calc[u"pct_aborted_connections"] = util.ceil_percentage(server.int_status(u"Aborted_connects"), connections)
    else:
        calc[u"thread_cache_hit_rate"] = 100


def read_write_metrics(server: tuner.ServerSnapshot, calc: tuner.MetricsSet) -> None:
    calc[u"total_reads"] = server.int_status(u"Com_select")
    calc[u"total_writes"] = (
        server.int_status(u"Com_delete") +
        server.int_status(u"Com_insert") +
        server.int_status(u"Com_update") +
        server.int_status(u"Com_replace")
    )
    if calc[u"total_reads"] == 0:
        calc[u"pct_reads"] = 0
        calc[u"pct_writes"] = 100
    else:
        calc[u"pct_reads"] = util.ceil_percentage(calc[u"total_reads"], calc[u"total_reads"] + calc[u"total_writes"])
        calc[u"pct_writes"] = 100 - calc[u"pct_reads"]


def innodb_metrics(server: tuner.ServerSnapshot, calc: tuner.MetricsSet) -> None:
    innodb_buffer_pool_size: int = server.int_variable(u"innodb_buffer_pool_size")
    if server.is_enabled(u"have_innodb") and innodb_buffer_pool_size > 0:
        calc[u"innodb_log_size_pct"] = server.int_variable(u"innodb_log_file_size") * 100 // innodb_buffer_pool_size


def calculations(server: tuner.ServerSnapshot) -> typ.Optional[tuner.MetricsSet]:
    """Derives every tuning metric from server snapshot

    Metrics whose inputs are missing are left out of the result, so rules
    must check for presence before reading one.

    :param tuner.ServerSnapshot server: loaded server snapshot
    :return typ.Optional[tuner.MetricsSet]: metrics in computation order,
        None when the server has not answered any queries
    """
    if not has_answered_queries(server):
        return None

    calc: tuner.MetricsSet = {}
    memory_metrics(server, calc)
    connection_metrics(server, calc)
    key_buffer_metrics(server, calc)
    query_cache_metrics(server, calc)
    table_metrics(server, calc)
    thread_metrics(server, calc)
    read_write_metrics(server, calc)
    innodb_metrics(server, calc)

    return calc
