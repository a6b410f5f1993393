"""
Reviews a MySQL server and derives tuning diagnostics from its variables and status counters

Inspired by Major Hayden's MySQLtuner-perl project:
https://github.com/major/MySQLtuner-perl
"""

import datetime as dt
import threading
import typing as typ
import pymysqltuner.calculations as calculations
import pymysqltuner.database as database
import pymysqltuner.errors as errors
import pymysqltuner.fancy_print as fp
import pymysqltuner.policy as policy
import pymysqltuner.recommendation as rc
import pymysqltuner.reporter as rp
import pymysqltuner.system as system
import pymysqltuner.tuner as tuner
import pymysqltuner.util as util

__version__: str = u"0.1.0"

Advice = typ.Tuple[typ.List[str], typ.List[str]]

# Engines audited before table statistics, with the have_* variable for each
STORAGE_ENGINES: typ.Tuple[typ.Tuple[str, str], ...] = (
    (u"Archive", u"have_archive"),
    (u"Berkeley DB", u"have_bdb"),
    (u"Federated", u"have_federated_engine"),
    (u"InnoDB", u"have_innodb"),
    (u"ISAM", u"have_isam"),
    (u"NDBCLUSTER", u"have_ndbcluster"),
)


def header_print(server: tuner.ServerSnapshot, reporter: rp.Reporter) -> None:
    """Prints header

    :param tuner.ServerSnapshot server: snapshot with connection identity
    :param rp.Reporter reporter: event sink
    :return:
    """
    reporter.format_print(f"PyMySQLTuner {__version__}", style=tuner.Status.INFO)
    reporter.format_print(f"Performing tests on {server.host}:{server.port}", style=tuner.Status.INFO)

    if not server.password:
        reporter.format_print(u"Successfully authenticated with no password - SECURITY RISK!", style=tuner.Status.FAIL)


def memory_setup(
    server: tuner.ServerSnapshot,
    system_info: system.SystemInfo,
    prompt: system.OptionPrompt,
    reporter: rp.Reporter
) -> None:
    """Fills in physical and swap memory of the server

    Local servers share this machine's memory, for remote servers the
    operator is asked and this machine's memory is assumed when unanswered

    :param tuner.ServerSnapshot server:
    :param system.SystemInfo system_info: facts about this machine
    :param system.OptionPrompt prompt: asks operator for memory sizes
    :param rp.Reporter reporter:
    :return:
    """
    local_physical_memory: int = system_info.physical_memory()
    local_swap_memory: int = max(system_info.virtual_memory() - local_physical_memory, 0)

    if server.is_local:
        server.physical_memory = local_physical_memory
        server.swap_memory = local_swap_memory
        return

    physical_memory: typ.Optional[int] = prompt.ask_number(system.PHYSICAL_MEMORY_PROMPT)
    if physical_memory is None:
        reporter.format_print(u"Assuming the same amount of physical memory as this computer", style=tuner.Status.INFO)
        server.physical_memory = local_physical_memory
    else:
        reporter.format_print(f"Assuming {physical_memory} MB of physical memory", style=tuner.Status.INFO)
        server.physical_memory = physical_memory * util.MEBIBYTE

    swap_memory: typ.Optional[int] = prompt.ask_number(system.SWAP_MEMORY_PROMPT)
    if swap_memory is None:
        reporter.format_print(u"Assuming the same amount of swap space as this computer", style=tuner.Status.INFO)
        server.swap_memory = local_swap_memory
    else:
        reporter.format_print(f"Assuming {swap_memory} MB of swap space", style=tuner.Status.INFO)
        server.swap_memory = swap_memory * util.MEBIBYTE


def load_server(
    server: tuner.ServerSnapshot,
    data_access: database.DataAccess,
    option: tuner.Option
) -> None:
    data_access.load_snapshot(server)
    fp.debug_print(f"MySQL version {server.version}", option)


def validate_mysql_version(
    server: tuner.ServerSnapshot,
    version_policy: policy.VersionPolicy,
    today: dt.date,
    reporter: rp.Reporter
) -> None:
    """Check MySQL Version

    :param tuner.ServerSnapshot server: loaded snapshot
    :param policy.VersionPolicy version_policy: support table
    :param dt.date today: date support is judged against
    :param rp.Reporter reporter:
    :return:
    """
    # Reported string is shown as is, e.g. 5.7.42-log
    full_version: str = server.variable(u"version")
    support: policy.Support = version_policy.classify(server.version, today)

    if support is policy.Support.EOL:
        reporter.format_print(f"Your MySQL version {full_version} is EOL software!  Upgrade soon!", style=tuner.Status.FAIL)
    elif support is policy.Support.SUPPORTED:
        reporter.format_print(f"Currently running supported MySQL version {full_version}", style=tuner.Status.PASS)
    else:
        reporter.format_print(f"Currently running unsupported MySQL version {full_version}", style=tuner.Status.FAIL)


def check_architecture(
    server: tuner.ServerSnapshot,
    system_info: system.SystemInfo,
    reporter: rp.Reporter
) -> None:
    """Checks architecture of system

    :param tuner.ServerSnapshot server: snapshot with memory filled in
    :param system.SystemInfo system_info:
    :param rp.Reporter reporter:
    :return:
    """
    # Checks for 32-bit boxes with more than 2GB of RAM
    if system_info.is_64bit():
        reporter.format_print(u"Operating on 64-bit architecture", style=tuner.Status.PASS)
    elif server.physical_memory > 2 ** 31:
        reporter.format_print(u"Switch to 64-bit OS - MySQL cannot currently use all of your RAM", style=tuner.Status.FAIL)
    else:
        reporter.format_print(u"Operating on 32-bit architecture with less than 2GB RAM", style=tuner.Status.PASS)


def check_storage_engines(
    server: tuner.ServerSnapshot,
    reporter: rp.Reporter,
    option: tuner.Option
) -> Advice:
    """Storage Engine information

    :param tuner.ServerSnapshot server:
    :param rp.Reporter reporter:
    :param tuner.Option option:

    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    for engine_name, have_engine in STORAGE_ENGINES:
        if server.is_enabled(have_engine):
            reporter.format_print(f"{engine_name} Engine Installed", style=tuner.Status.PASS)
        else:
            reporter.format_print(f"{engine_name} Engine Not Installed", style=tuner.Status.FAIL)

    if option.skip_size:
        reporter.format_print(u"Skipped due to --skip-size option", style=tuner.Status.INFO)
        return recommendations, adjusted_vars

    for engine, size in server.engine_data_size.items():
        reporter.format_print((
            f"Data in {engine} tables: {util.display_bytes_rounded(size)} "
            f"(Tables: {server.engine_table_count.get(engine, 0)})"
        ), style=tuner.Status.INFO)

    # If the storage engine isn't being used, recommend it to be disabled
    unused_engines: typ.Tuple[typ.Tuple[str, str, str, str], ...] = (
        (u"InnoDB", u"have_innodb", u"InnoDB", u"Add skip-innodb to MySQL configuration to disable InnoDB"),
        (u"BerkeleyDB", u"have_bdb", u"BDB", u"Add skip-bdb to MySQL configuration to disable BDB"),
        (u"ISAM", u"have_isam", u"ISAM", u"Add skip-isam to MySQL configuration to disable ISAM (MySQL > 4.1.0)"),
    )
    for engine, have_engine, label, recommendation in unused_engines:
        if engine not in server.engine_data_size and server.is_enabled(have_engine):
            reporter.format_print(f"{label} is enabled but isn't being used", style=tuner.Status.FAIL)
            recommendations.append(recommendation)

    # Fragmented tables
    if server.fragmented_table_count > 0:
        reporter.format_print(f"Total fragmented tables: {server.fragmented_table_count}", style=tuner.Status.FAIL)
        recommendations.append(u"Run OPTIMIZE TABLE to defragment tables for better performance")
    else:
        reporter.format_print(u"Total fragmented tables: 0", style=tuner.Status.PASS)

    return recommendations, adjusted_vars


def security_recommendations(
    server: tuner.ServerSnapshot,
    data_access: database.DataAccess,
    reporter: rp.Reporter,
    option: tuner.Option
) -> None:
    """Security Recommendations

    A failing lookup, usually missing privileges on mysql.user, is
    reported instead of aborting the scan

    :param tuner.ServerSnapshot server:
    :param database.DataAccess data_access:
    :param rp.Reporter reporter:
    :param tuner.Option option:
    :return:
    """
    if option.skip_password:
        reporter.format_print(u"Skipped due to --skip-password option", style=tuner.Status.INFO)
        return

    try:
        password_users: typ.List[str] = data_access.find_passwordless_accounts(server)
    except errors.DataAccessError as error:
        reporter.format_print(f"Unable to check for accounts without password: {error}", style=tuner.Status.FAIL)
        return

    if password_users:
        for user in password_users:
            reporter.format_print(f"User '{user}' has no password set.", style=tuner.Status.FAIL)
    else:
        reporter.format_print(u"All database users have passwords assigned", style=tuner.Status.PASS)


def perform_calculations(
    server: tuner.ServerSnapshot,
    reporter: rp.Reporter,
    option: tuner.Option
) -> typ.Optional[tuner.MetricsSet]:
    """Runs metrics calculator

    :param tuner.ServerSnapshot server:
    :param rp.Reporter reporter:
    :param tuner.Option option:
    :return typ.Optional[tuner.MetricsSet]: metrics, None when server answered no queries
    """
    calc: typ.Optional[tuner.MetricsSet] = calculations.calculations(server)
    if calc is None:
        reporter.format_print(u"Your server has not answered any queries - cannot continue...", style=tuner.Status.FAIL)
        return None

    for name, value in calc.items():
        fp.debug_print(f"{name}: {value}", option)

    return calc


def mysql_stats(server: tuner.ServerSnapshot, calc: tuner.MetricsSet, reporter: rp.Reporter) -> Advice:
    """Runs every threshold rule in order

    :param tuner.ServerSnapshot server:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return Advice: list of recommendations and list of adjusted variables
    """
    recommendations: typ.List[str] = []
    adjusted_vars: typ.List[str] = []

    for rule in rc.RULES:
        rule_recommendations, rule_adjusted_vars = rule(server, calc, reporter)
        recommendations.extend(rule_recommendations)
        adjusted_vars.extend(rule_adjusted_vars)

    return recommendations, adjusted_vars


def make_recommendations(
    recommendations: typ.Sequence[str],
    adjusted_vars: typ.Sequence[str],
    calc: tuner.MetricsSet,
    reporter: rp.Reporter
) -> None:
    """Displays all recommendations

    :param typ.Sequence[str] recommendations:
    :param typ.Sequence[str] adjusted_vars:
    :param tuner.MetricsSet calc:
    :param rp.Reporter reporter:
    :return:
    """
    for recommendation in recommendations:
        reporter.format_print(recommendation, style=tuner.Status.RECOMMENDATION)

    if adjusted_vars:
        if calc.get(u"pct_physical_memory", 0) > 90:
            reporter.format_print(u"MySQL's maximum memory usage is dangerously high", style=tuner.Status.INFO)
            reporter.format_print(u"Add RAM before increasing MySQL buffer variables", style=tuner.Status.INFO)
        for adjusted_var in adjusted_vars:
            reporter.format_print(adjusted_var, style=tuner.Status.RECOMMENDATION)

    if not recommendations and not adjusted_vars:
        reporter.format_print(u"No additional performance recommendations are available.", style=tuner.Status.INFO)

    reporter.format_print(u"Scan Complete", style=tuner.Status.INFO)


def _check_cancel(cancel: typ.Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise errors.CancelledByCaller(u"Scan cancelled")


def calculate(
    server: tuner.ServerSnapshot,
    data_access: database.DataAccess,
    system_info: system.SystemInfo,
    prompt: system.OptionPrompt,
    reporter: rp.Reporter,
    option: tuner.Option = None,
    version_policy: policy.VersionPolicy = None,
    cancel: threading.Event = None,
    today: dt.date = None
) -> bool:
    """Runs the whole scan against one server

    Unexpected errors are reported as a Fail event, progress is marked
    incomplete and the error is raised again. Cancellation, either through
    cancel or a torn down reporter, stops the scan silently.

    :param tuner.ServerSnapshot server: empty snapshot, filled while scanning
    :param database.DataAccess data_access: loads server facts
    :param system.SystemInfo system_info: facts about this machine
    :param system.OptionPrompt prompt: asks operator for remote memory sizes
    :param rp.Reporter reporter: event sink
    :param tuner.Option option: options object
    :param policy.VersionPolicy version_policy: support table, bundled table when None
    :param threading.Event cancel: checked before every stage
    :param dt.date today: date versions are judged against, today when None
    :return bool: whether the scan completed
    """
    option = option or tuner.Option()

    try:
        _check_cancel(cancel)
        header_print(server, reporter)

        _check_cancel(cancel)
        memory_setup(server, system_info, prompt, reporter)

        _check_cancel(cancel)
        load_server(server, data_access, option)

        _check_cancel(cancel)
        validate_mysql_version(server, version_policy or policy.load_policy(), today or dt.date.today(), reporter)

        _check_cancel(cancel)
        check_architecture(server, system_info, reporter)

        _check_cancel(cancel)
        recommendations, adjusted_vars = check_storage_engines(server, reporter, option)

        _check_cancel(cancel)
        security_recommendations(server, data_access, reporter, option)

        _check_cancel(cancel)
        calc: typ.Optional[tuner.MetricsSet] = perform_calculations(server, reporter, option)
        if calc is None:
            reporter.set_progress(False)
            return False

        _check_cancel(cancel)
        stats_recommendations, stats_adjusted_vars = mysql_stats(server, calc, reporter)
        recommendations.extend(stats_recommendations)
        adjusted_vars.extend(stats_adjusted_vars)

        _check_cancel(cancel)
        make_recommendations(recommendations, adjusted_vars, calc, reporter)
        reporter.set_progress(True)
    except errors.CancelledByCaller as error:
        fp.debug_print(f"{error}", option)
        return False
    except Exception as error:
        try:
            reporter.format_print(f"{type(error).__name__}: {error}", style=tuner.Status.FAIL)
            reporter.set_progress(False)
        except errors.CancelledByCaller:
            fp.debug_print(f"Reporter closed while reporting {type(error).__name__}: {error}", option)
            return False
        raise

    return True


class ScanThread(threading.Thread):
    def __init__(self, *args, **kwargs) -> None:
        """Daemon thread running calculate with given arguments

        result holds what calculate returned, error what it raised

        :param args: positional arguments of calculate
        :param kwargs: keyword arguments of calculate
        """
        super().__init__(name=u"pymysqltuner-scan", daemon=True)
        self.scan_args: typ.Tuple = args
        self.scan_kwargs: typ.Dict[str, typ.Any] = kwargs
        self.result: typ.Optional[bool] = None
        self.error: typ.Optional[Exception] = None

    def run(self) -> None:
        try:
            self.result = calculate(*self.scan_args, **self.scan_kwargs)
        except Exception as error:
            self.error = error
            raise


def calculate_in_background(*args, **kwargs) -> ScanThread:
    """Runs calculate on a daemon thread

    Pair it with a reporter.QueueReporter so events reach the owning
    thread through drain. Once joined, the thread's result tells a
    completed scan from a stopped one.

    :return ScanThread: started thread
    """
    thread: ScanThread = ScanThread(*args, **kwargs)
    thread.start()

    return thread
