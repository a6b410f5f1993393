"""
Module to load server facts from a live MySQL server
"""

import contextlib as ctxt
import os.path as osp
import sqlalchemy as sqla
import sqlalchemy.exc as sqle
import sqlalchemy.orm as orm
import typing as typ
import pymysqltuner.errors as errors
import pymysqltuner.fancy_print as fp
import pymysqltuner.tuner as tuner
import pymysqltuner.util as util

QUERY_DIR: str = osp.join(osp.dirname(__file__), u"query")
SKIPPED_DATABASES: typ.Tuple[str, ...] = (u"information_schema", u"performance_schema")


def query_from_file(query_file: str) -> sqla.TextClause:
    """Reads query from query directory

    :param str query_file: file name inside query directory
    :return sqla.TextClause: query
    """
    with open(osp.join(QUERY_DIR, query_file), mode=u"r", encoding=u"utf-8") as qf:
        return sqla.text(qf.read())


def engine_variable(engine: str) -> str:
    """Name of have_* variable for storage engine

    :param str engine: engine name as listed by SHOW ENGINES
    :return str: variable name
    """
    engine_name: str = engine.lower()
    if engine_name in (u"federated", u"blackhole"):
        engine_name = f"{engine_name}_engine"
    elif engine_name == u"berkeleydb":
        engine_name = u"bdb"

    return f"have_{engine_name}"


def apply_engine_support(
    variables: typ.Dict[str, str],
    engine_supports: typ.Iterable[typ.Tuple[str, str]]
) -> None:
    """Sets old style have_* variables from SHOW ENGINES rows

    have_* for engines is deprecated and was removed in MySQL 5.6

    :param typ.Dict[str, str] variables: server variables, updated in place
    :param typ.Iterable[typ.Tuple[str, str]] engine_supports: engine and support columns
    :return:
    """
    for engine, support in engine_supports:
        variables[engine_variable(engine)] = u"YES" if support == u"DEFAULT" else support


def normalize_variables(variables: typ.Dict[str, str]) -> None:
    """Applies version and vendor quirks to loaded variables

    :param typ.Dict[str, str] variables: server variables, updated in place
    :return:
    """
    # Workaround for MySQL bug #59393 wrt. ignore-builtin-innodb
    if variables.get(u"ignore_builtin_innodb") == u"ON":
        variables[u"have_innodb"] = u"NO"

    # Polarity kept as historically reported: an active cluster reads NO
    if variables.get(u"wsrep_provider_options") and variables.get(u"wsrep_on") != u"OFF":
        variables[u"have_galera"] = u"NO"
    else:
        variables[u"have_galera"] = u"YES"

    if u"version" in variables and u"innodb_support_xa" not in variables:
        version: tuner.Version = tuner.Version.parse(variables[u"version"])
        if version >= (5, 0, 3):
            variables[u"innodb_support_xa"] = u"ON"

    # Support GTID MODE FOR MariaDB
    if u"gtid_strict_mode" in variables:
        variables[u"gtid_mode"] = variables[u"gtid_strict_mode"]

    variables[u"have_threadpool"] = u"YES" if util.to_int(variables.get(u"thread_pool_size")) > 0 else u"NO"


def is_mariadb(server: tuner.ServerSnapshot) -> bool:
    return u"mariadb" in server.variable(u"version").lower()


def uses_replica_syntax(server: tuner.ServerSnapshot) -> bool:
    """Checks whether server understands SHOW REPLICA STATUS and SHOW REPLICAS

    MySQL dropped the SLAVE statements in 8.4, MariaDB added the REPLICA
    aliases in 10.5.1

    :param tuner.ServerSnapshot server: loaded snapshot
    :return bool:
    """
    if is_mariadb(server):
        return server.version >= (10, 5, 1)

    return server.version >= (8, 4)


def uses_authentication_string(server: tuner.ServerSnapshot) -> bool:
    """Checks whether password hashes live in mysql.user.authentication_string

    :param tuner.ServerSnapshot server: loaded snapshot
    :return bool:
    """
    if is_mariadb(server):
        return server.version >= (10, 4)

    return server.version >= (5, 7)


def _text(value: typ.Any) -> str:
    return u"" if value is None else str(value)


class DataAccess:
    def __init__(self, engine: sqla.engine.Engine, option: tuner.Option = None) -> None:
        """Initializes data access

        :param sqla.engine.Engine engine: engine connected to the server
        :param tuner.Option option: options object
        """
        self.engine: sqla.engine.Engine = engine
        self.option: tuner.Option = option or tuner.Option()

    @ctxt.contextmanager
    def session(self) -> typ.Iterator[orm.Session]:
        """Session raising DataAccessError for every database failure

        :yield: session object
        """
        try:
            with util.session_scope(self.engine) as sess:
                yield sess
        except sqle.SQLAlchemyError as error:
            raise errors.DataAccessError(f"Unable to query MySQL server: {error}") from error

    def load_snapshot(self, server: tuner.ServerSnapshot) -> tuner.ServerSnapshot:
        """Populates snapshot with variables, status, engine and replication facts

        :param tuner.ServerSnapshot server: snapshot to fill
        :return tuner.ServerSnapshot: same snapshot
        """
        with self.session() as sess:
            # We need to initiate at least one query so that our data is usable
            sess.execute(query_from_file(u"version-query.sql")).fetchall()

            variables: typ.Dict[str, str] = {
                _text(name): _text(value)
                for name, value in sess.execute(query_from_file(u"variables-query.sql")).fetchall()
            }
            status: typ.Dict[str, str] = {
                _text(name): _text(value)
                for name, value in sess.execute(query_from_file(u"statuses-query.sql")).fetchall()
            }
            fp.debug_print(f"Loaded {len(variables)} variables and {len(status)} status counters", self.option)

            engine_supports: typ.List[typ.Tuple[str, str]] = [
                (_text(row[0]), _text(row[1]))
                for row in sess.execute(query_from_file(u"engine-support-query.sql")).fetchall()
            ]
            fp.debug_print(f"{engine_supports}", self.option)
            apply_engine_support(variables, engine_supports)
            normalize_variables(variables)

            server.variables = variables
            server.status = status
            server.engine_table_count = {}
            server.engine_data_size = {}
            server.fragmented_table_count = 0
            server.total_myisam_indexes = None

            if not self.option.skip_size:
                if server.version.major >= 5:
                    self._engine_statistics(sess, server)
                else:
                    self._legacy_engine_statistics(sess, server)

            self._replication(sess, server)

        return server

    def _engine_statistics(self, sess: orm.Session, server: tuner.ServerSnapshot) -> None:
        # MySQL 5 servers can have table sizes calculated quickly from information schema
        for engine, size, count in sess.execute(query_from_file(u"engine-query.sql")).fetchall():
            size = util.to_int(size)
            if engine and size > 0:
                server.engine_data_size[engine] = size
                server.engine_table_count[engine] = util.to_int(count)

        server.fragmented_table_count = util.to_int(
            sess.execute(query_from_file(u"fragmented-tables-query.sql")).scalar()
        )
        server.total_myisam_indexes = util.to_int(
            sess.execute(query_from_file(u"myisam-index-query.sql")).scalar()
        )

    def _legacy_engine_statistics(self, sess: orm.Session, server: tuner.ServerSnapshot) -> None:
        # MySQL < 5 servers take a lot of work to get table sizes
        databases: typ.List[str] = [
            _text(row[0])
            for row in sess.execute(query_from_file(u"all-databases.sql")).fetchall()
        ]

        # MySQL 3.23/4.0 keeps Data_Length in the 6th column, 4.1 in the 7th
        version: tuner.Version = server.version
        if version.major == 3 or (version.major, version.minor) == (4, 0):
            size_index, free_index = 5, 8
        else:
            size_index, free_index = 6, 9

        for database in databases:
            if database in SKIPPED_DATABASES:
                continue

            escaped: str = database.replace(u"`", u"``")
            tables = sess.execute(sqla.text(f"SHOW TABLE STATUS FROM `{escaped}`")).fetchall()
            for table in tables:
                engine: str = _text(table[1])
                server.engine_data_size[engine] = server.engine_data_size.get(engine, 0) + util.to_int(table[size_index])
                server.engine_table_count[engine] = server.engine_table_count.get(engine, 0) + 1
                if util.to_int(table[free_index]) > 0:
                    server.fragmented_table_count += 1

    def _replication(self, sess: orm.Session, server: tuner.ServerSnapshot) -> None:
        if uses_replica_syntax(server):
            status_query, hosts_query = u"replica-status-query.sql", u"replica-hosts-query.sql"
        else:
            status_query, hosts_query = u"slave-status-query.sql", u"slave-hosts-query.sql"

        replicas = sess.execute(query_from_file(status_query)).mappings().fetchall()
        server.replication_status = {
            _text(key): _text(value)
            for key, value in replicas[0].items()
        } if replicas else {}

        server.slave_count = len(sess.execute(query_from_file(hosts_query)).fetchall())
        fp.debug_print(f"Replication fields: {len(server.replication_status)}, replicas: {server.slave_count}", self.option)

    def find_passwordless_accounts(self, server: tuner.ServerSnapshot) -> typ.List[str]:
        """Lists accounts without password

        :param tuner.ServerSnapshot server: loaded snapshot
        :return typ.List[str]: accounts as user@host
        """
        if uses_authentication_string(server):
            password_query: sqla.TextClause = query_from_file(u"password-query-5_7.sql")
        else:
            password_query: sqla.TextClause = query_from_file(u"password-query.sql")

        with self.session() as sess:
            return [
                _text(row[0])
                for row in sess.execute(password_query).fetchall()
            ]
