"""
Module to generate recommendations for change to MySQL
"""

import typing as typ
import pymysqltuner.reporter as rp
import pymysqltuner.tuner as tuner
import pymysqltuner.util as util

Advice = typ.Tuple[typ.List[str], typ.List[str]]


def overview_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Recommendations for uptime, traffic and buffer overview

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    # Show uptime, queries per second, connections, traffic stats
    uptime: int = server.int_status(u"Uptime")
    questions: int = server.int_status(u"Questions")
    qps: float = questions / uptime if uptime > 0 else 0.0

    if uptime < 86400:
        recommendations.append(u"MySQL started within last 24 hours - recommendations may be inaccurate")

    reporter.format_print(u" ".join((
        f"Up for: {util.pretty_uptime(uptime)}",
        f"({util.display_rounded(questions)} q [{util.display_rounded(qps)} qps],",
        f"{util.display_rounded(server.int_status(u'Connections'))} conn,",
        f"TX: {util.display_rounded(server.int_status(u'Bytes_sent'))},",
        f"RX: {util.display_rounded(server.int_status(u'Bytes_received'))})"
    )), style=tuner.Status.INFO)
    reporter.format_print(f"Reads / Writes: {calc[u'pct_reads']}% / {calc[u'pct_writes']}%", style=tuner.Status.INFO)
    reporter.format_print((
        f"Total buffers: {util.display_bytes(calc[u'server_buffers'])} global "
        f"+ {util.display_bytes(calc[u'per_thread_buffers'])} per thread "
        f"({server.variable(u'max_connections')} max threads)"
    ), style=tuner.Status.INFO)

    return recommendations, adjusted_vars


def memory_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Recommendations for memory ceiling against installed RAM

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    total_memory: int = calc[u"total_possible_used_memory"]
    if u"pct_physical_memory" not in calc:
        reporter.format_print((
            f"Maximum possible memory usage: {util.display_bytes(total_memory)} (installed RAM unknown)"
        ), style=tuner.Status.INFO)
        return recommendations, adjusted_vars

    usage_msg: str = (
        f"Maximum possible memory usage: {util.display_bytes(total_memory)} "
        f"({calc[u'pct_physical_memory']}% of installed RAM)"
    )
    if total_memory > 2 * util.GIBIBYTE and server.physical_memory < 2 * util.GIBIBYTE:
        reporter.format_print(u"Allocating > 2GB RAM on 32-bit systems can cause system instability", style=tuner.Status.FAIL)
        reporter.format_print(usage_msg, style=tuner.Status.FAIL)
    elif calc[u"pct_physical_memory"] > 85:
        reporter.format_print(usage_msg, style=tuner.Status.FAIL)
        recommendations.append(u"Reduce your overall MySQL memory footprint for system stability")
    else:
        reporter.format_print(usage_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def slow_query_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Recommendations for Slow Queries

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    slow_queries_msg: str = (
        f"Slow queries: {calc[u'pct_slow_queries']}% "
        f"({util.display_rounded(server.int_status(u'Slow_queries'))}/"
        f"{util.display_rounded(server.int_status(u'Questions'))})"
    )
    if calc[u"pct_slow_queries"] > 5:
        reporter.format_print(slow_queries_msg, style=tuner.Status.FAIL)
    else:
        reporter.format_print(slow_queries_msg, style=tuner.Status.PASS)

    if util.to_float(server.variable(u"long_query_time")) > 10:
        adjusted_vars.append(u"long_query_time (<= 10)")

    # log_slow_queries was renamed slow_query_log in MySQL 5.1
    if u"OFF" in (server.variable(u"log_slow_queries"), server.variable(u"slow_query_log")):
        recommendations.append(u"Enable the slow query log to troubleshoot bad queries")

    return recommendations, adjusted_vars


def connection_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    usage: str = f"({server.int_status(u'Max_used_connections')}/{server.variable(u'max_connections')})"
    if calc[u"pct_connections_used"] > 85:
        reporter.format_print(
            f"Highest connection usage: {calc[u'pct_connections_used']}%  {usage}",
            style=tuner.Status.FAIL
        )
        adjusted_vars.extend((
            f"max_connections (> {server.variable(u'max_connections')})",
            f"wait_timeout (< {server.variable(u'wait_timeout')})",
            f"interactive_timeout (< {server.variable(u'interactive_timeout')})"
        ))
        recommendations.append(u"Reduce or eliminate persistent connections to reduce connection usage")
    else:
        reporter.format_print(
            f"Highest usage of available connections: {calc[u'pct_connections_used']}% {usage}",
            style=tuner.Status.PASS
        )

    return recommendations, adjusted_vars


def key_buffer_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Recommendations for MyISAM key buffer

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    if u"total_myisam_indexes" not in calc:
        if not server.is_local and server.version.major < 5:
            recommendations.append(u"Unable to calculate MyISAM indexes on remote MySQL server < 5.0.0")
        else:
            reporter.format_print(
                u"Cannot calculate MyISAM index size - information_schema is not available",
                style=tuner.Status.FAIL
            )
        return recommendations, adjusted_vars

    if calc[u"total_myisam_indexes"] == 0:
        reporter.format_print(u"None of your MyISAM tables are indexed - add indexes immediately", style=tuner.Status.FAIL)
        return recommendations, adjusted_vars

    key_buffer_size: int = server.int_variable(u"key_buffer_size")
    key_buffer_size_msg: str = (
        f"Key buffer size / total MyISAM indexes: "
        f"{util.display_bytes(key_buffer_size)}/{util.display_bytes(calc[u'total_myisam_indexes'])}"
    )
    if key_buffer_size < calc[u"total_myisam_indexes"] and calc[u"pct_keys_from_mem"] < 95:
        reporter.format_print(key_buffer_size_msg, style=tuner.Status.FAIL)
        adjusted_vars.append(f"key_buffer_size (> {util.display_bytes(calc[u'total_myisam_indexes'])})")
    else:
        reporter.format_print(key_buffer_size_msg, style=tuner.Status.PASS)

    # No queries have run that would use keys
    if server.int_status(u"Key_read_requests") == 0:
        return recommendations, adjusted_vars

    hit_rate_msg: str = (
        f"Key buffer hit rate: {calc[u'pct_keys_from_mem']}% "
        f"({util.display_rounded(server.int_status(u'Key_read_requests'))} cached / "
        f"{util.display_rounded(server.int_status(u'Key_reads'))} reads)"
    )
    if calc[u"pct_keys_from_mem"] < 95:
        reporter.format_print(hit_rate_msg, style=tuner.Status.FAIL)
    else:
        reporter.format_print(hit_rate_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def query_cache_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Recommendations for Query Cache

    The query cache was removed in MySQL 8.0, nothing is reported from there on

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    version: tuner.Version = server.version
    if version.major >= 8:
        return recommendations, adjusted_vars

    query_cache_size: int = server.int_variable(u"query_cache_size")
    if version.major < 4:
        # MySQL versions < 4.01 don't support query caching
        recommendations.append(u"Upgrade MySQL to version 4+ to utilize query caching")
    elif query_cache_size < 1:
        reporter.format_print(u"Query cache is disabled", style=tuner.Status.FAIL)
        adjusted_vars.append(u"query_cache_size (>= 8M)")
    elif server.int_status(u"Com_select") == 0:
        reporter.format_print(u"Query cache cannot be analyzed - no SELECT statements executed", style=tuner.Status.FAIL)
    else:
        query_cache_hits: int = server.int_status(u"Qcache_hits")
        efficiency_msg: str = (
            f"Query cache efficiency: {calc[u'query_cache_efficiency']}% "
            f"({util.display_rounded(query_cache_hits)} cached / "
            f"{util.display_rounded(query_cache_hits + server.int_status(u'Com_select'))} selects)"
        )
        if calc[u"query_cache_efficiency"] < 20:
            reporter.format_print(efficiency_msg, style=tuner.Status.FAIL)
            adjusted_vars.append((
                f"query_cache_limit (> {util.display_bytes_rounded(server.int_variable(u'query_cache_limit'))}, "
                f"or use smaller result sets)"
            ))
        else:
            reporter.format_print(efficiency_msg, style=tuner.Status.PASS)

        prunes_msg: str = f"Query cache prunes per day: {calc[u'query_cache_prunes_per_day']}"
        if calc[u"query_cache_prunes_per_day"] > 98:
            reporter.format_print(prunes_msg, style=tuner.Status.FAIL)
            if query_cache_size > 128 * util.MEBIBYTE:
                recommendations.append(u"Increasing the query_cache size over 128M may reduce performance")
                adjusted_vars.append(
                    f"query_cache_size (> {util.display_bytes_rounded(query_cache_size)}) [see warning above]"
                )
            else:
                adjusted_vars.append(f"query_cache_size (> {util.display_bytes_rounded(query_cache_size)})")
        else:
            reporter.format_print(prunes_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def sort_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    # No sorts have run yet
    if u"pct_temp_sort_table" not in calc:
        return recommendations, adjusted_vars

    sorts_msg: str = (
        f"Sorts requiring temporary tables: {calc[u'pct_temp_sort_table']}% "
        f"({util.display_rounded(server.int_status(u'Sort_merge_passes'))} temp sorts / "
        f"{util.display_rounded(calc[u'total_sorts'])} sorts)"
    )
    if calc[u"pct_temp_sort_table"] > 10:
        reporter.format_print(sorts_msg, style=tuner.Status.FAIL)
        adjusted_vars.extend((
            f"sort_buffer_size (> {util.display_bytes_rounded(server.int_variable(u'sort_buffer_size'))})",
            f"read_rnd_buffer_size (> {util.display_bytes_rounded(server.int_variable(u'read_rnd_buffer_size'))})"
        ))
    else:
        reporter.format_print(sorts_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def join_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    joins_msg: str = (
        f"Joins performed without indexes: {util.display_rounded(calc[u'joins_without_indexes'])} "
        f"({calc[u'joins_without_indexes_per_day']} per day)"
    )
    if calc[u"joins_without_indexes_per_day"] > 250:
        reporter.format_print(joins_msg, style=tuner.Status.FAIL)
        adjusted_vars.append((
            f"join_buffer_size (> {util.display_bytes(server.int_variable(u'join_buffer_size'))}, "
            f"or always use indexes with joins)"
        ))
        recommendations.append(u"Adjust your join queries to always utilize indexes")
    else:
        reporter.format_print(joins_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def temp_table_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Recommendations for Temporary tables

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    # No temporary tables have been created
    if u"pct_temp_disk" not in calc:
        return recommendations, adjusted_vars

    created_tmp_disk_tables: int = server.int_status(u"Created_tmp_disk_tables")
    temp_disk_msg: str = (
        f"Temporary tables created on disk: {calc[u'pct_temp_disk']}% "
        f"({util.display_rounded(created_tmp_disk_tables)} on disk / "
        f"{util.display_rounded(created_tmp_disk_tables + server.int_status(u'Created_tmp_tables'))} total)"
    )
    if calc[u"pct_temp_disk"] > 25 and calc[u"max_tmp_table_size"] < 256 * util.MEBIBYTE:
        reporter.format_print(temp_disk_msg, style=tuner.Status.FAIL)
        adjusted_vars.extend((
            f"tmp_table_size (> {util.display_bytes_rounded(server.int_variable(u'tmp_table_size'))})",
            f"max_heap_table_size (> {util.display_bytes_rounded(server.int_variable(u'max_heap_table_size'))})"
        ))
        recommendations.extend((
            u"When making adjustments, make tmp_table_size/max_heap_table_size equal",
            u"Reduce your SELECT DISTINCT queries without LIMIT clauses"
        ))
    elif calc[u"pct_temp_disk"] > 25:
        reporter.format_print(temp_disk_msg, style=tuner.Status.FAIL)
        recommendations.extend((
            u"Temporary table size is already large - reduce result set size",
            u"Reduce your SELECT DISTINCT queries without LIMIT clauses"
        ))
    else:
        reporter.format_print(temp_disk_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def thread_cache_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    thread_cache_size: int = server.int_variable(u"thread_cache_size")
    if thread_cache_size == 0:
        reporter.format_print(u"Thread cache is disabled", style=tuner.Status.FAIL)
        recommendations.append(u"Set thread_cache_size to 4 as a starting value")
        adjusted_vars.append(u"thread_cache_size (start at 4)")
        return recommendations, adjusted_vars

    if server.variable(u"thread_handling") == u"pools-of-threads":
        reporter.format_print(u"Thread cache hit rate: not used with pools-of-threads", style=tuner.Status.INFO)
        return recommendations, adjusted_vars

    hit_rate_msg: str = (
        f"Thread cache hit rate: {calc[u'thread_cache_hit_rate']}% "
        f"({util.display_rounded(server.int_status(u'Threads_created'))} created / "
        f"{util.display_rounded(server.int_status(u'Connections'))} connections)"
    )
    if calc[u"thread_cache_hit_rate"] <= 50:
        reporter.format_print(hit_rate_msg, style=tuner.Status.FAIL)
        adjusted_vars.append(f"thread_cache_size (> {thread_cache_size})")
    else:
        reporter.format_print(hit_rate_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def table_cache_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Recommendations for Table Cache

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    open_tables: int = server.int_status(u"Open_tables")
    if open_tables == 0:
        return recommendations, adjusted_vars

    hit_rate_msg: str = (
        f"Table cache hit rate: {calc[u'table_cache_hit_rate']}% "
        f"({util.display_rounded(open_tables)} open / "
        f"{util.display_rounded(server.int_status(u'Opened_tables'))} opened)"
    )
    if calc[u"table_cache_hit_rate"] >= 20:
        reporter.format_print(hit_rate_msg, style=tuner.Status.PASS)
        return recommendations, adjusted_vars

    reporter.format_print(hit_rate_msg, style=tuner.Status.FAIL)
    # table_cache was renamed table_open_cache in MySQL 5.1
    if server.version >= (5, 1):
        table_cache: str = u"table_open_cache"
    else:
        table_cache: str = u"table_cache"

    adjusted_vars.append(f"{table_cache} (> {server.variable(table_cache)})")
    recommendations.extend((
        f"Increase {table_cache} gradually to avoid file descriptor limits",
        (
            f"Beware that open_files_limit ({server.variable(u'open_files_limit')}) variable "
            f"should be greater than {table_cache} ({server.variable(table_cache)})"
        )
    ))

    return recommendations, adjusted_vars


def open_files_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    if u"pct_files_open" not in calc:
        return recommendations, adjusted_vars

    open_files_msg: str = (
        f"Open file limit used: {calc[u'pct_files_open']}% "
        f"({util.display_rounded(server.int_status(u'Open_files'))}/"
        f"{util.display_rounded(server.int_variable(u'open_files_limit'))})"
    )
    if calc[u"pct_files_open"] > 85:
        reporter.format_print(open_files_msg, style=tuner.Status.FAIL)
        adjusted_vars.append(f"open_files_limit (> {server.variable(u'open_files_limit')})")
    else:
        reporter.format_print(open_files_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def table_lock_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    if u"pct_table_locks_immediate" not in calc:
        return recommendations, adjusted_vars

    table_locks_immediate: int = server.int_status(u"Table_locks_immediate")
    table_locks_msg: str = (
        f"Table locks acquired immediately: {calc[u'pct_table_locks_immediate']}% "
        f"({util.display_rounded(table_locks_immediate)} immediate / "
        f"{util.display_rounded(table_locks_immediate + server.int_status(u'Table_locks_waited'))} locks)"
    )
    if calc[u"pct_table_locks_immediate"] < 95:
        reporter.format_print(table_locks_msg, style=tuner.Status.FAIL)
        recommendations.append(u"Optimize queries and/or use InnoDB to reduce lock wait")
    else:
        reporter.format_print(table_locks_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def concurrent_insert_recommendations(
    server: tuner.ServerSnapshot,
    calc: tuner.MetricsSet,
    reporter: rp.Reporter
) -> Advice:
    """Recommendations for concurrent MyISAM inserts

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    concurrent_insert: str = server.variable(u"concurrent_insert")
    if server.version < (4, 1):
        recommendations.append(u"Upgrade to MySQL 4.1+ to use concurrent MyISAM inserts")
    elif concurrent_insert == u"NEVER":
        recommendations.append(u"Enable concurrent_insert by setting it to 'AUTO' OR 'ALWAYS'")
    elif concurrent_insert == u"OFF":
        recommendations.append(u"Enable concurrent_insert by setting it to 'ON'")
    elif concurrent_insert not in (u"ON", u"AUTO", u"ALWAYS") and util.to_int(concurrent_insert) == 0:
        recommendations.append(u"Enable concurrent_insert by setting it to 1")

    return recommendations, adjusted_vars


def aborted_connection_recommendations(
    server: tuner.ServerSnapshot,
    calc: tuner.MetricsSet,
    reporter: rp.Reporter
) -> Advice:
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    if u"pct_aborted_connections" not in calc:
        return recommendations, adjusted_vars

    aborted_msg: str = (
        f"Connections aborted: {calc[u'pct_aborted_connections']}% "
        f"({util.display_rounded(server.int_status(u'Aborted_connects'))}/"
        f"{util.display_rounded(server.int_status(u'Connections'))})"
    )
    if calc[u"pct_aborted_connections"] > 5:
        reporter.format_print(aborted_msg, style=tuner.Status.FAIL)
        recommendations.append(u"Your applications are not closing MySQL connections properly")
    else:
        reporter.format_print(aborted_msg, style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def innodb_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Recommendations for InnoDB buffer pool and log files

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    if not server.is_enabled(u"have_innodb") or u"InnoDB" not in server.engine_data_size:
        return recommendations, adjusted_vars

    innodb_data_size: int = server.engine_data_size[u"InnoDB"]
    innodb_buffer_pool_size: int = server.int_variable(u"innodb_buffer_pool_size")
    buffer_pool_msg: str = (
        f"InnoDB data size / buffer pool: "
        f"{util.display_bytes(innodb_data_size)}/{util.display_bytes(innodb_buffer_pool_size)}"
    )
    if innodb_buffer_pool_size > innodb_data_size:
        reporter.format_print(buffer_pool_msg, style=tuner.Status.PASS)
    else:
        reporter.format_print(buffer_pool_msg, style=tuner.Status.FAIL)
        adjusted_vars.append(f"innodb_buffer_pool_size (>= {util.display_bytes_rounded(innodb_data_size)})")

    if u"innodb_log_size_pct" not in calc:
        return recommendations, adjusted_vars

    log_size_msg: str = (
        f"InnoDB log file size / buffer pool: {calc[u'innodb_log_size_pct']}% "
        f"({util.display_bytes(server.int_variable(u'innodb_log_file_size'))}/"
        f"{util.display_bytes(innodb_buffer_pool_size)})"
    )
    if 20 <= calc[u"innodb_log_size_pct"] <= 30:
        reporter.format_print(log_size_msg, style=tuner.Status.PASS)
    else:
        reporter.format_print(log_size_msg, style=tuner.Status.FAIL)
        adjusted_vars.append(
            f"innodb_log_file_size (= {util.display_bytes_rounded(innodb_buffer_pool_size // 4)}) to reach 25% of buffer pool"
        )

    return recommendations, adjusted_vars


def replication_recommendations(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Replication status

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    if server.slave_count > 0:
        reporter.format_print(
            f"This server is acting as master for {server.slave_count} server(s)",
            style=tuner.Status.INFO
        )

    replica: typ.Dict[str, str] = server.replication_status
    if not replica:
        if server.slave_count == 0:
            reporter.format_print(u"This is a standalone server", style=tuner.Status.INFO)
        return recommendations, adjusted_vars

    # Replica_* and *_Source names replace Slave_* and *_Master from MySQL 8.0.22
    io_running: str = replica.get(u"Slave_IO_Running", replica.get(u"Replica_IO_Running", u""))
    sql_running: str = replica.get(u"Slave_SQL_Running", replica.get(u"Replica_SQL_Running", u""))
    seconds_behind: int = util.to_int(
        replica.get(u"Seconds_Behind_Master", replica.get(u"Seconds_Behind_Source"))
    )

    if io_running.lower() != u"yes" or sql_running.lower() != u"yes":
        reporter.format_print(u"This replication slave is not running but seems to be configured", style=tuner.Status.FAIL)
        return recommendations, adjusted_vars

    if server.variable(u"read_only") == u"OFF":
        reporter.format_print(u"This replication slave is running with the read_only option disabled", style=tuner.Status.FAIL)
    else:
        reporter.format_print(u"This replication slave is running with the read_only option enabled", style=tuner.Status.PASS)

    if seconds_behind > 0:
        reporter.format_print(
            f"This replication slave is lagging and slave is {seconds_behind} second(s) behind master host",
            style=tuner.Status.FAIL
        )
    else:
        reporter.format_print(u"This replication slave is up to date with master", style=tuner.Status.PASS)

    return recommendations, adjusted_vars


RULES: typ.Tuple[typ.Callable[[tuner.ServerSnapshot, tuner.MetricsSet, rp.Reporter], Advice], ...] = (
    overview_recommendations,
    memory_recommendations,
    slow_query_recommendations,
    connection_recommendations,
    key_buffer_recommendations,
    query_cache_recommendations,
    sort_recommendations,
    join_recommendations,
    temp_table_recommendations,
    thread_cache_recommendations,
    table_cache_recommendations,
    open_files_recommendations,
    table_lock_recommendations,
    concurrent_insert_recommendations,
    aborted_connection_recommendations,
    innodb_recommendations,
    replication_recommendations,
)
